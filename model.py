"""
model.py
Concrete, generator-ready representation of a userdata structure. Field policies are resolved and,
after AssignExposedKeysTransform, every exposed field has its key and the dispatch tables are built.
"""
from enum import Enum
from typing import List, Optional, Union

DEFAULT_NAMESPACE_ROOT = "host_runtime"


class KeyKind(Enum):
    STRING = "string"
    INTEGER = "integer"


class Direction(Enum):
    READ = "index"
    WRITE = "new_index"


class ExposedKey:
    """The string or integer a field is reachable by from the scripting runtime."""

    def __init__(self, kind: KeyKind, value: Union[str, int]):
        self.kind = kind
        self.value = value

    @classmethod
    def string(cls, value: str) -> 'ExposedKey':
        return cls(KeyKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> 'ExposedKey':
        return cls(KeyKind.INTEGER, value)

    def __eq__(self, other):
        if not isinstance(other, ExposedKey):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self):
        return hash((self.kind, self.value))

    def __repr__(self):
        return f"ExposedKey({self.kind.value}, {self.value!r})"

    def __str__(self):
        if self.kind == KeyKind.STRING:
            return f'"{self.value}"'
        return str(self.value)


class FieldDescriptor:
    def __init__(
        self,
        index: int,
        name: Optional[str],
        type_name: str,
        readable: bool = True,
        writable: bool = True,
        rename: Optional[str] = None,
        annotated: bool = False,
        doc: str = "",
        file: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.index = index
        self.name = name
        self.type_name = type_name
        self.readable = readable
        self.writable = writable
        self.rename = rename
        self.annotated = annotated
        self.doc = doc
        self.file = file
        self.line = line
        self.column = column
        # Set by AssignExposedKeysTransform
        self.key: Optional[ExposedKey] = None

    @property
    def is_positional(self) -> bool:
        return self.name is None

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else str(self.index)

    def __repr__(self):
        return (f"FieldDescriptor(index={self.index}, name={self.name!r}, readable={self.readable}, "
                f"writable={self.writable}, rename={self.rename!r})")


class StructureOptions:
    def __init__(self, namespace_root: str = DEFAULT_NAMESPACE_ROOT):
        self.namespace_root = namespace_root

    def __repr__(self):
        return f"StructureOptions(namespace_root={self.namespace_root!r})"


class DispatchArm:
    def __init__(self, key: ExposedKey, field_index: int):
        self.key = key
        self.field_index = field_index
        # Set by DuplicateKeyTransform when an earlier arm has the same key
        self.shadowed = False

    def __repr__(self):
        return f"DispatchArm({self.key!r} -> {self.field_index})"


class ResolvedKeyTable:
    """Ordered read and write arms. The first arm whose key matches wins."""

    def __init__(self, read_arms: Optional[List[DispatchArm]] = None, write_arms: Optional[List[DispatchArm]] = None):
        self.read_arms = read_arms or []
        self.write_arms = write_arms or []

    def arms(self, direction: Direction) -> List[DispatchArm]:
        return self.read_arms if direction == Direction.READ else self.write_arms

    def resolve(self, key: ExposedKey, direction: Direction) -> Optional[int]:
        for arm in self.arms(direction):
            if arm.key == key:
                return arm.field_index
        return None


class UserDataStructure:
    def __init__(
        self,
        name: str,
        kind: str,
        fields: List[FieldDescriptor],
        options: Optional[StructureOptions] = None,
        doc: str = "",
        file: Optional[str] = None,
        line: Optional[int] = None,
    ):
        self.name = name
        self.kind = kind
        self.fields = fields
        self.options = options or StructureOptions()
        self.doc = doc
        self.file = file
        self.line = line
        self.key_table = ResolvedKeyTable()

    @property
    def namespace_root(self) -> str:
        return self.options.namespace_root

    def field(self, index: int) -> FieldDescriptor:
        return self.fields[index]
