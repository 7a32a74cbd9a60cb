"""
Python generator for userdata bindings.
Outputs one binding class per structure with `index` / `new_index` dispatch methods and an
`add_methods` hook that registers them as the INDEX / NEW_INDEX meta methods.
"""
import os
from typing import List, Optional

from generators.generator_utils import (
    assign_namespace_aliases,
    binding_class_name,
    key_condition,
    namespace_alias,
    read_expression,
    write_statement,
)
from model import UserDataStructure

INDENT = "    "


def _emit_index(structure: UserDataStructure, alias: str, lines: List[str]):
    lines.append(f"{INDENT}@staticmethod")
    lines.append(f"{INDENT}def index(ctx, this, key):")
    for arm in structure.key_table.read_arms:
        field = structure.field(arm.field_index)
        if arm.shadowed:
            lines.append(f"{INDENT * 2}# shadowed by an earlier field with the same key")
        lines.append(f"{INDENT * 2}if {key_condition(arm.key, alias)}:")
        lines.append(f"{INDENT * 3}return {alias}.to_value({read_expression(field)}, ctx)")
    lines.append(f"{INDENT * 2}raise {alias}.UnknownKeyError(key)")


def _emit_new_index(structure: UserDataStructure, alias: str, lines: List[str]):
    lines.append(f"{INDENT}@staticmethod")
    lines.append(f"{INDENT}def new_index(ctx, this, key, val):")
    for arm in structure.key_table.write_arms:
        field = structure.field(arm.field_index)
        if arm.shadowed:
            lines.append(f"{INDENT * 2}# shadowed by an earlier field with the same key")
        lines.append(f"{INDENT * 2}if {key_condition(arm.key, alias)}:")
        converted = f"{alias}.from_value(val, ctx, {field.type_name!r})"
        lines.append(f"{INDENT * 3}{write_statement(field, converted)}")
        lines.append(f"{INDENT * 3}return None")
    lines.append(f"{INDENT * 2}raise {alias}.UnknownKeyError(key)")


def generate_binding_class(structure: UserDataStructure, alias: Optional[str] = None) -> str:
    """Generate the binding class for one structure. The namespace root must be imported as `alias`."""
    if alias is None:
        alias = namespace_alias(structure.namespace_root)
    lines = []
    for doc_line in (structure.doc or "").strip().splitlines():
        lines.append(f"# {doc_line}")
    lines.append(f"class {binding_class_name(structure)}({alias}.UserData):")
    _emit_index(structure, alias, lines)
    lines.append("")
    _emit_new_index(structure, alias, lines)
    lines.append("")
    lines.append(f"{INDENT}@classmethod")
    lines.append(f"{INDENT}def add_methods(cls, methods):")
    lines.append(f"{INDENT * 2}methods.add_meta_method({alias}.MetaMethod.INDEX, cls.index)")
    lines.append(f"{INDENT * 2}methods.add_meta_method_mut({alias}.MetaMethod.NEW_INDEX, cls.new_index)")
    return "\n".join(lines) + "\n"


def generate_python_code(structures: List[UserDataStructure], source: Optional[str] = None) -> str:
    """
    Generate a Python module holding the bindings for `structures`.
    Returns an empty string when there is nothing to bind.
    """
    if not structures:
        return ""
    header = "Userdata bindings"
    if source:
        header += f" generated from {os.path.basename(source)}"
    lines = ['"""', f"{header}.", "Do not edit by hand.", '"""']

    aliases = assign_namespace_aliases(s.namespace_root for s in structures)
    for root, alias in aliases.items():
        lines.append(f"import {root} as {alias}")
    lines.append("")
    names = ", ".join(repr(binding_class_name(s)) for s in structures)
    lines.append(f"__all__ = [{names}]")

    for structure in structures:
        lines.append("")
        lines.append("")
        lines.append(generate_binding_class(structure, aliases[structure.namespace_root]).rstrip("\n"))
    return "\n".join(lines) + "\n"


def write_python_file(structures: List[UserDataStructure], out_path: str, source: Optional[str] = None) -> bool:
    """Write the bindings module. Nothing is written when there are no bindings."""
    code = generate_python_code(structures, source)
    if not code:
        return False
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(code)
    return True
