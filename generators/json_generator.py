"""
JSON manifest generator for userdata bindings.
Describes, for every bound structure, which keys reach which fields in `index` and `new_index`.
"""
import json
from typing import List

from model import Direction, UserDataStructure

MANIFEST_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Userdata binding manifest",
    "type": "object",
    "required": ["structures"],
    "properties": {
        "structures": {
            "type": "array",
            "items": {"$ref": "#/definitions/structure"},
        },
    },
    "definitions": {
        "arm": {
            "type": "object",
            "required": ["key", "key_kind", "field", "field_index", "shadowed"],
            "properties": {
                "key": {"type": ["string", "integer"]},
                "key_kind": {"enum": ["string", "integer"]},
                "field": {"type": "string"},
                "field_index": {"type": "integer", "minimum": 0},
                "shadowed": {"type": "boolean"},
            },
        },
        "structure": {
            "type": "object",
            "required": ["name", "kind", "namespace_root", "index", "new_index"],
            "properties": {
                "name": {"type": "string"},
                "kind": {"enum": ["struct", "tuple"]},
                "namespace_root": {"type": "string"},
                "index": {"type": "array", "items": {"$ref": "#/definitions/arm"}},
                "new_index": {"type": "array", "items": {"$ref": "#/definitions/arm"}},
            },
        },
    },
}


def _arms_to_json(structure: UserDataStructure, direction: Direction):
    arms = []
    for arm in structure.key_table.arms(direction):
        arms.append({
            "key": arm.key.value,
            "key_kind": arm.key.kind.value,
            "field": structure.field(arm.field_index).display_name,
            "field_index": arm.field_index,
            "shadowed": arm.shadowed,
        })
    return arms


def generate_manifest(structures: List[UserDataStructure]):
    manifest = {"structures": []}
    for structure in structures:
        manifest["structures"].append({
            "name": structure.name,
            "kind": structure.kind,
            "namespace_root": structure.namespace_root,
            "index": _arms_to_json(structure, Direction.READ),
            "new_index": _arms_to_json(structure, Direction.WRITE),
        })
    return manifest


def write_manifest_file(structures: List[UserDataStructure], out_path) -> bool:
    if not structures:
        return False
    manifest = generate_manifest(structures)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)
    return True
