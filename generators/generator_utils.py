"""
Shared utilities for the binding generators.
Handles namespace aliases, field access expressions and key comparisons.
"""
import keyword

from model import ExposedKey, FieldDescriptor, KeyKind, UserDataStructure


def namespace_alias(namespace_root: str) -> str:
    """Module alias used in generated code for a namespace root, e.g. `pkg.rt` -> `_pkg_rt`."""
    return "_" + namespace_root.replace(".", "_")


def assign_namespace_aliases(namespace_roots) -> dict:
    """Map each namespace root to a module alias, adding a numeric suffix where two roots would collide."""
    aliases = {}
    used = set()
    for root in namespace_roots:
        if root in aliases:
            continue
        alias = namespace_alias(root)
        suffix = 2
        while alias in used:
            alias = f"{namespace_alias(root)}_{suffix}"
            suffix += 1
        aliases[root] = alias
        used.add(alias)
    return aliases


def binding_class_name(structure: UserDataStructure) -> str:
    return f"{structure.name}UserData"


def _needs_dynamic_access(name: str) -> bool:
    # Keywords are not valid attribute names and `__x` would be name-mangled inside the class body
    return keyword.iskeyword(name) or (name.startswith("__") and not name.endswith("__"))


def read_expression(field: FieldDescriptor, target: str = "this") -> str:
    if field.is_positional:
        return f"{target}[{field.index}]"
    if _needs_dynamic_access(field.name):
        return f"getattr({target}, {field.name!r})"
    return f"{target}.{field.name}"


def write_statement(field: FieldDescriptor, value_expr: str, target: str = "this") -> str:
    if field.is_positional:
        return f"{target}[{field.index}] = {value_expr}"
    if _needs_dynamic_access(field.name):
        return f"setattr({target}, {field.name!r}, {value_expr})"
    return f"{target}.{field.name} = {value_expr}"


def key_condition(key: ExposedKey, alias: str, key_var: str = "key") -> str:
    """Condition that is true when the runtime key equals `key`."""
    if key.kind == KeyKind.STRING:
        return f"isinstance({key_var}, {alias}.String) and {key_var}.as_bytes() == {key.value.encode('utf-8')!r}"
    return f"isinstance({key_var}, {alias}.Integer) and {key_var}.value == {key.value!r}"
