"""
AssignExposedKeysTransform: Computes the key every field is reachable by and builds the read and
write dispatch tables.

An explicit rename wins, then the declared field name, then the 1-based position of the field.
Arms are kept in declaration order; no deduplication happens here.
"""
from model import DispatchArm, ExposedKey, FieldDescriptor, ResolvedKeyTable, UserDataStructure


def exposed_key_for(field: FieldDescriptor) -> ExposedKey:
    if field.rename is not None:
        return ExposedKey.string(field.rename)
    if field.name is not None:
        return ExposedKey.string(field.name)
    return ExposedKey.integer(field.index + 1)


class AssignExposedKeysTransform:
    def transform(self, structure: UserDataStructure) -> UserDataStructure:
        table = ResolvedKeyTable()
        for field in structure.fields:
            field.key = exposed_key_for(field)
            if field.readable:
                table.read_arms.append(DispatchArm(field.key, field.index))
            if field.writable:
                table.write_arms.append(DispatchArm(field.key, field.index))
        structure.key_table = table
        return structure
