"""
model_debug.py
Pretty-print and debug dump utilities for userdata structures.
"""
import json
import os
from enum import Enum

from model import Direction, UserDataStructure


def format_structure(structure: UserDataStructure) -> str:
    """Render a resolved structure and its dispatch tables as indented text."""
    lines = [f"{structure.kind} {structure.name} (namespace_root={structure.namespace_root})"]
    for field in structure.fields:
        flags = []
        if field.readable:
            flags.append("read")
        if field.writable:
            flags.append("write")
        details = [
            f"type='{field.type_name}'",
            f"key={field.key}" if field.key is not None else "key=?",
            f"access={'+'.join(flags) or 'none'}",
        ]
        if field.rename is not None:
            details.append(f"rename='{field.rename}'")
        if not field.annotated:
            details.append("unannotated")
        lines.append(f"  [{field.index}] {field.display_name}: " + ", ".join(details))
    for direction in (Direction.READ, Direction.WRITE):
        arms = structure.key_table.arms(direction)
        lines.append(f"  {direction.value}:")
        if not arms:
            lines.append("    (no arms)")
        for arm in arms:
            suffix = " (shadowed)" if arm.shadowed else ""
            lines.append(f"    {arm.key} -> {structure.field(arm.field_index).display_name}{suffix}")
    return "\n".join(lines)


def dump_structures(structures, file_path: str):
    """Write the resolved structures as JSON for inspection."""
    os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)

    def default_encoder(obj):
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, '__dict__'):
            return obj.__dict__
        return str(obj)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(structures, f, indent=2, default=default_encoder)
