"""
DuplicateKeyTransform: Finds dispatch arms that can never be reached because an earlier arm in the
same direction has the same key.

By default the later arm is only marked `shadowed` and reported through `on_shadowed`; the generated
dispatch still contains it. With strict=True the first collision raises DuplicateKeyError.
"""
from typing import Callable, Optional

from errors import DuplicateKeyError
from model import Direction, DispatchArm, UserDataStructure


class DuplicateKeyTransform:
    def __init__(self, strict: bool = False, on_shadowed: Optional[Callable[[str], None]] = None):
        self.strict = strict
        self.on_shadowed = on_shadowed

    def transform(self, structure: UserDataStructure) -> UserDataStructure:
        for direction in (Direction.READ, Direction.WRITE):
            first_by_key = {}
            for arm in structure.key_table.arms(direction):
                earlier = first_by_key.get(arm.key)
                if earlier is None:
                    first_by_key[arm.key] = arm
                    continue
                self._report(structure, direction, earlier, arm)
        return structure

    def _report(self, structure: UserDataStructure, direction: Direction, earlier: DispatchArm, arm: DispatchArm):
        first = structure.field(earlier.field_index)
        second = structure.field(arm.field_index)
        if self.strict:
            raise DuplicateKeyError(arm.key, direction.value, first.display_name, second.display_name,
                                    file=second.file or structure.file,
                                    line=second.line if second.line is not None else structure.line,
                                    column=second.column)
        arm.shadowed = True
        if self.on_shadowed is not None:
            self.on_shadowed(
                f"{structure.name}: key {arm.key} of `{second.display_name}` is shadowed by "
                f"`{first.display_name}` in {direction.value}"
            )
