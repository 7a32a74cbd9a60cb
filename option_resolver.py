"""
option_resolver.py
Interprets parsed `userdata` annotation entries at field scope and at structure scope.
"""
import keyword
import re
from typing import List, Optional

from attribute_parser import AttributeEntry, FlagEntry, KeyValueEntry, parse_attribute_args
from early_model import EarlyAnnotation
from errors import GrammarError, UnknownOptionError
from model import DEFAULT_NAMESPACE_ROOT, StructureOptions

ANNOTATION_NAME = "userdata"

MODULE_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class FieldOptions:
    def __init__(self, readable: bool, writable: bool, rename: Optional[str] = None):
        self.readable = readable
        self.writable = writable
        self.rename = rename

    @classmethod
    def default(cls) -> 'FieldOptions':
        return cls(readable=True, writable=True)

    def __repr__(self):
        return f"FieldOptions(readable={self.readable}, writable={self.writable}, rename={self.rename!r})"


def parse_annotation_entries(annotation: Optional[EarlyAnnotation]) -> Optional[List[AttributeEntry]]:
    """
    Parse an annotation's arguments.

    Returns None when the annotation is missing or was written without an argument list;
    both mean "use the defaults". An empty argument list `()` is a grammar error.
    """
    if annotation is None or not annotation.has_args:
        return None
    return parse_attribute_args(annotation.args_text, annotation.file, annotation.args_line, annotation.args_column)


def resolve_field_options(entries: Optional[List[AttributeEntry]]) -> FieldOptions:
    """
    Fold field annotation entries into a read/write/rename policy.

    Without entries the field is fully exposed. With entries, the policy starts with
    nothing granted and only `read` adds a capability, so an annotated field is never
    writable.
    """
    if entries is None:
        return FieldOptions.default()

    options = FieldOptions(readable=False, writable=False)
    for entry in entries:
        if isinstance(entry, FlagEntry):
            if entry.name == "read":
                options.readable = True
            else:
                raise UnknownOptionError(entry.name, entry.file, entry.line, entry.column)
        elif isinstance(entry, KeyValueEntry):
            if entry.name == "rename":
                options.rename = entry.value
            else:
                raise UnknownOptionError(entry.name, entry.file, entry.line, entry.column)
    return options


def _check_module_path(entry: KeyValueEntry) -> str:
    path = entry.value.strip()
    if not MODULE_PATH.match(path) or any(keyword.iskeyword(part) for part in path.split(".")):
        raise GrammarError(f"`{entry.value}` is not a valid module path", token=entry.value,
                           file=entry.file, line=entry.value_line, column=entry.value_column)
    return path


def resolve_structure_options(entries: Optional[List[AttributeEntry]],
                              default_namespace: str = DEFAULT_NAMESPACE_ROOT) -> StructureOptions:
    """Fold structure annotation entries. Only `crate = "<module path>"` is accepted."""
    namespace_root = None
    for entry in entries or []:
        if isinstance(entry, KeyValueEntry) and entry.name == "crate":
            namespace_root = _check_module_path(entry)
        else:
            raise UnknownOptionError(entry.name, entry.file, entry.line, entry.column)
    return StructureOptions(namespace_root or default_namespace)


def find_structure_annotation(annotations: List[EarlyAnnotation]) -> Optional[EarlyAnnotation]:
    # Only the first structure-level annotation is consulted.
    for annotation in annotations:
        if annotation.name == ANNOTATION_NAME:
            return annotation
    return None

