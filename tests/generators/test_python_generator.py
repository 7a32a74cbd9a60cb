import types

import pytest
import host_runtime
from host_runtime import BoundUserData, Integer, String, UnknownKeyError
from generators.python_generator import generate_binding_class, generate_python_code, write_python_file
from model import ExposedKey, FieldDescriptor, UserDataStructure
from model_transforms.assign_exposed_keys_transform import AssignExposedKeysTransform
from tests.test_utils import build_bindings, expand_text, load_generated_module

TESTER = '''
struct Tester {
    @userdata
    field: u32;
    @userdata(read)
    read_only: String;
    @userdata(rename = "hello", read)
    hellont: isize;
}
'''


@pytest.fixture
def tester():
    module = build_bindings(TESTER)
    obj = types.SimpleNamespace(field=10, read_only="read only?!", hellont=-44)
    return obj, BoundUserData(obj, module.TesterUserData)


def test_end_to_end_read_table(tester):
    obj, bound = tester
    assert bound.index("field") == Integer(10)
    assert bound.index("read_only") == String(b"read only?!")
    assert bound.index("hello") == Integer(-44)


def test_end_to_end_write_table(tester):
    obj, bound = tester
    bound.new_index("field", 99)
    assert obj.field == 99
    assert bound.index("field") == Integer(99)
    for key in ("read_only", "hello", "hellont"):
        with pytest.raises(UnknownKeyError):
            bound.new_index(key, "x")
    assert obj.read_only == "read only?!"
    assert obj.hellont == -44


def test_rename_hides_declared_name(tester):
    obj, bound = tester
    with pytest.raises(UnknownKeyError) as excinfo:
        bound.index("hellont")
    assert excinfo.value.key == String(b"hellont")


@pytest.mark.parametrize("key", ["missing", "", 0, 1, 3, -1])
def test_unknown_keys_carry_the_presented_key(tester, key):
    obj, bound = tester
    expected = host_runtime.to_value(key)
    with pytest.raises(UnknownKeyError) as excinfo:
        bound.index(key)
    assert excinfo.value.key == expected
    with pytest.raises(UnknownKeyError) as excinfo:
        bound.new_index(key, 1)
    assert excinfo.value.key == expected


def test_write_converts_to_the_field_type(tester):
    obj, bound = tester
    bound.new_index("field", 7.0)
    assert obj.field == 7
    assert isinstance(obj.field, int)
    with pytest.raises(host_runtime.ConversionError):
        bound.new_index("field", "seven")


def test_positional_fields_use_one_based_keys():
    module = build_bindings("tuple Pair { int; @userdata(read) string; }")
    obj = [7, "seven"]
    bound = BoundUserData(obj, module.PairUserData)
    assert bound.index(1) == Integer(7)
    assert bound.index(2) == String(b"seven")
    bound.new_index(1, 8)
    assert obj == [8, "seven"]
    with pytest.raises(UnknownKeyError):
        bound.new_index(2, "eight")
    for key in (0, 3, "1"):
        with pytest.raises(UnknownKeyError):
            bound.index(key)


def test_duplicate_keys_first_declared_wins_on_both_paths():
    structure = UserDataStructure("Dup", "tuple", [
        FieldDescriptor(0, None, "int", rename="k"),
        FieldDescriptor(1, None, "int", rename="k"),
    ])
    AssignExposedKeysTransform().transform(structure)
    module = load_generated_module(generate_python_code([structure]))
    obj = [1, 2]
    bound = BoundUserData(obj, module.DupUserData)
    assert bound.index("k") == Integer(1)
    bound.new_index("k", 5)
    assert obj == [5, 2]


def test_duplicate_rename_shadows_declared_field():
    module = build_bindings('struct Config { name: string; @userdata(rename = "name", read) alias: string; }')
    obj = types.SimpleNamespace(name="real", alias="other")
    bound = BoundUserData(obj, module.ConfigUserData)
    assert bound.index("name") == String(b"real")
    bound.new_index("name", "changed")
    assert (obj.name, obj.alias) == ("changed", "other")


def test_shadowed_arm_is_still_emitted_with_a_comment():
    structures = expand_text('struct Config { name: string; @userdata(rename = "name", read) alias: string; }')
    code = generate_binding_class(structures[0])
    assert code.count("key.as_bytes() == b'name'") == 3
    assert "# shadowed by an earlier field with the same key" in code


def test_zero_field_structures_produce_no_code():
    assert expand_text("struct Empty {}") == []
    assert generate_python_code([]) == ""


def test_write_python_file_skips_empty_output(temp_dir):
    path = f"{temp_dir}/nothing_userdata.py"
    assert not write_python_file([], path)
    import os
    assert not os.path.exists(path)


def test_fields_named_after_keywords():
    module = build_bindings("struct Kw { from: int; @userdata(read) class: string }")
    obj = types.SimpleNamespace(**{"from": 1, "class": "c"})
    bound = BoundUserData(obj, module.KwUserData)
    assert bound.index("from") == Integer(1)
    assert bound.index("class") == String(b"c")
    bound.new_index("from", 2)
    assert getattr(obj, "from") == 2


def test_double_underscore_fields_are_not_name_mangled():
    module = build_bindings("struct S { __secret: int; @userdata(read) __hidden: int }")
    obj = types.SimpleNamespace(**{"__secret": 1, "__hidden": 2})
    bound = BoundUserData(obj, module.SUserData)
    assert bound.index("__secret") == Integer(1)
    assert bound.index("__hidden") == Integer(2)
    bound.new_index("__secret", 5)
    assert getattr(obj, "__secret") == 5


def test_utf8_keys_compare_by_bytes():
    module = build_bindings('struct U { @userdata(rename = "größe", read) size: int }')
    bound = BoundUserData(types.SimpleNamespace(size=3), module.UUserData)
    assert bound.index("größe") == Integer(3)
    assert bound.index(String("größe".encode("utf-8"))) == Integer(3)


def test_namespace_root_is_imported_under_an_alias():
    structures = expand_text('@userdata(crate = "host_runtime") struct A { x: int } struct B { y: int }')
    code = generate_python_code(structures, source="dir/two.def")
    assert code.count("import host_runtime as _host_runtime") == 1
    assert "generated from two.def" in code
    assert "class AUserData(_host_runtime.UserData):" in code
    assert "__all__ = ['AUserData', 'BUserData']" in code


def test_custom_namespace_root_is_threaded_into_the_code():
    structures = expand_text('@userdata(crate = "engine.lua_rt") struct A { x: int }')
    code = generate_python_code(structures)
    assert "import engine.lua_rt as _engine_lua_rt" in code
    assert "raise _engine_lua_rt.UnknownKeyError(key)" in code
    assert "_engine_lua_rt.from_value(val, ctx, 'int')" in code


def test_colliding_namespace_aliases_get_distinct_names():
    structures = expand_text('@userdata(crate = "a_b.c") struct A { x: int } @userdata(crate = "a.b_c") struct B { y: int }')
    code = generate_python_code(structures)
    assert "import a_b.c as _a_b_c\n" in code
    assert "import a.b_c as _a_b_c_2\n" in code
    assert "class AUserData(_a_b_c.UserData):" in code
    assert "class BUserData(_a_b_c_2.UserData):" in code
    assert "raise _a_b_c_2.UnknownKeyError(key)" in code


def test_add_methods_registers_both_meta_methods():
    module = build_bindings(TESTER)
    methods = host_runtime.UserDataMethods()
    module.TesterUserData.add_methods(methods)
    assert set(methods.meta_methods) == {host_runtime.MetaMethod.INDEX, host_runtime.MetaMethod.NEW_INDEX}
    assert methods.mutating == {host_runtime.MetaMethod.NEW_INDEX}


def test_structure_without_readable_fields_still_has_a_fallback():
    structure = UserDataStructure("Hidden", "struct", [
        FieldDescriptor(0, "secret", "int", readable=False, writable=False, annotated=True),
    ])
    AssignExposedKeysTransform().transform(structure)
    module = load_generated_module(generate_python_code([structure]))
    bound = BoundUserData(types.SimpleNamespace(secret=1), module.HiddenUserData)
    with pytest.raises(UnknownKeyError):
        bound.index("secret")
    with pytest.raises(UnknownKeyError):
        bound.new_index("secret", 2)


def test_exposed_key_equality_is_by_kind_and_value():
    assert ExposedKey.string("1") != ExposedKey.integer(1)
