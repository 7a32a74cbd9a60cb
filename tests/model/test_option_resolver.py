import pytest
from attribute_parser import parse_attribute_args
from early_model import EarlyAnnotation
from errors import GrammarError, UnknownOptionError
from model import DEFAULT_NAMESPACE_ROOT
from option_resolver import parse_annotation_entries, resolve_field_options, resolve_structure_options


def test_missing_annotation_exposes_field_fully():
    options = resolve_field_options(None)
    assert options.readable and options.writable
    assert options.rename is None


def test_annotation_without_argument_list_gives_defaults():
    annotation = EarlyAnnotation("userdata", None, "f.def", 1, 1)
    assert parse_annotation_entries(annotation) is None
    options = resolve_field_options(parse_annotation_entries(annotation))
    assert options.readable and options.writable


def test_empty_argument_list_is_a_grammar_error():
    annotation = EarlyAnnotation("userdata", "", "f.def", 1, 1, args_line=1, args_column=11)
    with pytest.raises(GrammarError):
        parse_annotation_entries(annotation)


def test_read_flag_grants_only_read():
    options = resolve_field_options(parse_attribute_args("read"))
    assert options.readable
    assert not options.writable
    assert options.rename is None


def test_rename_alone_grants_nothing():
    options = resolve_field_options(parse_attribute_args('rename = "x"'))
    assert not options.readable
    assert not options.writable
    assert options.rename == "x"


def test_last_rename_wins():
    options = resolve_field_options(parse_attribute_args('rename = "a", read, rename = "b"'))
    assert options.rename == "b"
    assert options.readable


def test_write_is_not_an_option():
    with pytest.raises(UnknownOptionError) as excinfo:
        resolve_field_options(parse_attribute_args("read, write", file="f.def", line=5, column=15))
    assert excinfo.value.identifier == "write"
    assert (excinfo.value.file, excinfo.value.line, excinfo.value.column) == ("f.def", 5, 21)


def test_unknown_field_key_is_rejected():
    with pytest.raises(UnknownOptionError) as excinfo:
        resolve_field_options(parse_attribute_args('alias = "x"'))
    assert excinfo.value.identifier == "alias"


def test_structure_defaults():
    assert resolve_structure_options(None).namespace_root == DEFAULT_NAMESPACE_ROOT
    assert resolve_structure_options(None, default_namespace="my.runtime").namespace_root == "my.runtime"


def test_structure_crate_option():
    options = resolve_structure_options(parse_attribute_args('crate = "engine.scripting"'))
    assert options.namespace_root == "engine.scripting"


def test_structure_rejects_flags():
    with pytest.raises(UnknownOptionError) as excinfo:
        resolve_structure_options(parse_attribute_args("read"))
    assert excinfo.value.identifier == "read"


def test_structure_rejects_other_keys():
    with pytest.raises(UnknownOptionError) as excinfo:
        resolve_structure_options(parse_attribute_args('rename = "x"'))
    assert excinfo.value.identifier == "rename"


@pytest.mark.parametrize("path", ["not a path", "pkg..mod", "pkg.class", "1abc", ""])
def test_structure_crate_must_be_a_module_path(path):
    with pytest.raises(GrammarError):
        resolve_structure_options(parse_attribute_args(f'crate = "{path}"'))
