"""
host_runtime.py
The contract generated userdata bindings are written against, and the default namespace root.

A binding only needs a handful of things from the scripting runtime that hosts it: key values that
are either strings or integers, conversions between runtime values and native field types, a way to
register index/new_index meta methods, and an error to raise for unknown keys. A real runtime can
provide the same names in its own module and be selected with `@userdata(crate = "...")`.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional


class ScriptError(Exception):
    """An error returned to the caller inside the scripting runtime."""


class UnknownKeyError(ScriptError):
    def __init__(self, key: 'Value'):
        super().__init__(f"unknown key `{key!r}`")
        self.key = key


class ConversionError(ScriptError):
    def __init__(self, value: 'Value', type_name: str):
        super().__init__(f"cannot convert {value!r} to `{type_name}`")
        self.value = value
        self.type_name = type_name


class Value:
    """Base class of all runtime values."""


@dataclass(frozen=True)
class Nil(Value):
    def __repr__(self):
        return "nil"


@dataclass(frozen=True)
class Boolean(Value):
    value: bool


@dataclass(frozen=True)
class Integer(Value):
    value: int


@dataclass(frozen=True)
class Number(Value):
    value: float


@dataclass(frozen=True)
class String(Value):
    data: bytes

    def as_bytes(self) -> bytes:
        return self.data

    def to_str(self) -> str:
        return self.data.decode('utf-8')


@dataclass(frozen=True, eq=False)
class UserDataValue(Value):
    obj: Any


INTEGER_TYPES = {"int", "integer", "i8", "i16", "i32", "i64", "i128", "isize",
                 "u8", "u16", "u32", "u64", "u128", "usize"}
FLOAT_TYPES = {"float", "double", "number", "f32", "f64"}
BOOL_TYPES = {"bool", "boolean"}
STRING_TYPES = {"string", "String", "str"}

_converters: Dict[str, Callable[[Value, Any], Any]] = {}


def register_conversion(type_name: str, converter: Callable[[Value, Any], Any]) -> None:
    """Register how a runtime value becomes the native type called `type_name`."""
    _converters[type_name] = converter


def to_value(native: Any, ctx: Any = None) -> Value:
    if isinstance(native, Value):
        return native
    if native is None:
        return Nil()
    if isinstance(native, bool):
        return Boolean(native)
    if isinstance(native, int):
        return Integer(native)
    if isinstance(native, float):
        return Number(native)
    if isinstance(native, str):
        return String(native.encode('utf-8'))
    if isinstance(native, bytes):
        return String(native)
    return UserDataValue(native)


def _optional_inner(type_name: str) -> Optional[str]:
    if type_name.startswith("Option<") and type_name.endswith(">"):
        return type_name[len("Option<"):-1].strip()
    return None


def from_value(value: Value, ctx: Any, type_name: str) -> Any:
    converter = _converters.get(type_name)
    if converter is not None:
        return converter(value, ctx)

    inner = _optional_inner(type_name)
    if inner is not None:
        if isinstance(value, Nil):
            return None
        return from_value(value, ctx, inner)

    if type_name in INTEGER_TYPES:
        if isinstance(value, Integer):
            return value.value
        if isinstance(value, Number) and float(value.value).is_integer():
            return int(value.value)
    elif type_name in FLOAT_TYPES:
        if isinstance(value, (Integer, Number)):
            return float(value.value)
    elif type_name in BOOL_TYPES:
        if isinstance(value, Boolean):
            return value.value
    elif type_name in STRING_TYPES:
        if isinstance(value, String):
            return value.to_str()
    elif isinstance(value, UserDataValue):
        return value.obj
    raise ConversionError(value, type_name)


class MetaMethod(Enum):
    INDEX = "__index"
    NEW_INDEX = "__newindex"


class UserDataMethods:
    def __init__(self):
        self.meta_methods: Dict[MetaMethod, Callable] = {}
        self.mutating = set()

    def add_meta_method(self, meta: MetaMethod, func: Callable) -> None:
        self.meta_methods[meta] = func

    def add_meta_method_mut(self, meta: MetaMethod, func: Callable) -> None:
        self.meta_methods[meta] = func
        self.mutating.add(meta)


class UserData:
    """Base class of generated bindings. Subclasses register their meta methods."""

    @classmethod
    def add_methods(cls, methods: UserDataMethods) -> None:
        pass


class BoundUserData:
    """A native object exposed through a binding, indexed the way the runtime would."""

    def __init__(self, obj: Any, userdata_cls, ctx: Any = None):
        self.obj = obj
        self.ctx = ctx
        self.methods = UserDataMethods()
        userdata_cls.add_methods(self.methods)

    def _meta(self, meta: MetaMethod) -> Callable:
        func = self.methods.meta_methods.get(meta)
        if func is None:
            raise ScriptError(f"userdata has no {meta.value} meta method")
        return func

    def index(self, key: Any) -> Value:
        return self._meta(MetaMethod.INDEX)(self.ctx, self.obj, to_value(key, self.ctx))

    def new_index(self, key: Any, value: Any) -> None:
        self._meta(MetaMethod.NEW_INDEX)(self.ctx, self.obj, to_value(key, self.ctx), to_value(value, self.ctx))
