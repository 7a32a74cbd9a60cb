import json
import os

import pytest
from binding_expander import BindingExpander
from def_file_loader import load_def_file
from generators.json_generator import MANIFEST_SCHEMA, generate_manifest, write_manifest_file
from tests.test_utils import def_path

try:
    import jsonschema
except ImportError:
    jsonschema = None


def expand_fixture(name):
    return BindingExpander().expand_all(load_def_file(def_path(name)))


def test_manifest_for_tester():
    manifest = generate_manifest(expand_fixture("tester.def"))
    [tester] = manifest["structures"]
    assert tester["name"] == "Tester"
    assert tester["namespace_root"] == "host_runtime"
    assert [arm["key"] for arm in tester["index"]] == ["field", "read_only", "hello"]
    assert [arm["field"] for arm in tester["index"]] == ["field", "read_only", "hellont"]
    assert [arm["key"] for arm in tester["new_index"]] == ["field"]


def test_manifest_marks_shadowed_arms_and_integer_keys():
    manifest = generate_manifest(expand_fixture("mixed.def"))
    by_name = {s["name"]: s for s in manifest["structures"]}
    assert set(by_name) == {"Pair", "Config"}
    assert [(a["key"], a["key_kind"]) for a in by_name["Pair"]["index"]] == [(1, "integer"), (2, "integer")]
    assert [a["shadowed"] for a in by_name["Config"]["index"]] == [False, True, False]


@pytest.mark.skipif(jsonschema is None, reason="jsonschema package not installed")
@pytest.mark.parametrize("def_name", ["tester.def", "mixed.def"])
def test_manifest_matches_schema(def_name):
    jsonschema.Draft7Validator.check_schema(MANIFEST_SCHEMA)
    jsonschema.validate(generate_manifest(expand_fixture(def_name)), MANIFEST_SCHEMA)


def test_write_manifest_file(temp_dir):
    path = os.path.join(temp_dir, "tester_userdata.json")
    assert write_manifest_file(expand_fixture("tester.def"), path)
    with open(path, "r", encoding="utf-8") as f:
        assert json.load(f)["structures"][0]["name"] == "Tester"
    assert not write_manifest_file([], os.path.join(temp_dir, "empty.json"))
