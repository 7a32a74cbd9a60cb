# def_file_loader.py
# Reads userdata definition files and builds EarlyStructure objects from the lark parse tree.
import os
from typing import List, Optional

from lark import Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from early_model import EarlyAnnotation, EarlyField, EarlyStructure
from errors import GrammarError
from lark_parser import parse_binding_dsl


def load_def_file(def_file_path: str) -> List[EarlyStructure]:
    with open(def_file_path, 'r', encoding='utf-8') as f:
        text = f.read()
    return load_def_text(text, file=def_file_path)


def load_def_text(text: str, file: str = "<input>") -> List[EarlyStructure]:
    """
    Parse definition text and return its structures in source order.

    Raises:
        GrammarError: If the text is not a valid definition file
    """
    try:
        tree = parse_binding_dsl(text)
    except UnexpectedCharacters as e:
        raise GrammarError(f"unexpected character `{e.char}`", token=e.char, file=file,
                           line=e.line, column=e.column) from None
    except UnexpectedToken as e:
        raise GrammarError(f"unexpected token `{e.token}`", token=str(e.token), file=file,
                           line=e.line if isinstance(e.line, int) else None,
                           column=e.column if isinstance(e.column, int) else None) from None
    except UnexpectedEOF:
        raise GrammarError("unexpected end of file", file=file) from None
    except UnexpectedInput as e:
        raise GrammarError(f"syntax error: {e}", file=file) from None
    return _build_early_structures_from_lark_tree(tree, file)


def _build_early_structures_from_lark_tree(tree: Tree, file: str) -> List[EarlyStructure]:
    structures = []
    for structure_node in tree.children:
        if not isinstance(structure_node, Tree) or structure_node.data != 'structure':
            continue
        inner = structure_node.children[0]
        structures.append(_parse_structure(inner, file))
    return structures


def _collect_doc(node: Tree) -> str:
    lines = []
    for child in node.children:
        if isinstance(child, Token) and child.type == 'DOC_COMMENT':
            lines.append(str(child)[3:].strip())
    return "\n".join(lines)


def _parse_annotation(node: Tree, file: str) -> EarlyAnnotation:
    name_token = node.children[0]
    args_text = None
    args_line = args_column = None
    if len(node.children) > 1:
        args_token = node.children[1]
        # Strip the parentheses; positions point at the first character inside them
        args_text = str(args_token)[1:-1]
        args_line = args_token.line
        args_column = args_token.column + 1
    return EarlyAnnotation(str(name_token), args_text, file, node.meta.line, node.meta.column,
                           args_line=args_line, args_column=args_column)


def _type_ref_to_str(node: Tree) -> str:
    text = ""
    for child in node.children:
        if child.data == 'qualified_name':
            text += "::".join(str(t) for t in child.children)
        elif child.data == 'type_args':
            text += "<" + ", ".join(_type_ref_to_str(arg) for arg in child.children) + ">"
        elif child.data == 'array_suffix':
            text += "[]"
    return text


def _parse_field(node: Tree, index: int, file: str) -> EarlyField:
    name: Optional[str] = None
    type_name = "?"
    annotations = []
    line, column = node.meta.line, node.meta.column
    for child in node.children:
        if isinstance(child, Tree) and child.data == 'annotation':
            annotations.append(_parse_annotation(child, file))
        elif isinstance(child, Tree) and child.data == 'type_ref':
            type_name = _type_ref_to_str(child)
            if name is None:
                line, column = child.meta.line, child.meta.column
        elif isinstance(child, Token) and child.type == 'NAME':
            name = str(child)
            line, column = child.line, child.column
    return EarlyField(index, name, type_name, file, line, column,
                      annotations=annotations, doc=_collect_doc(node))


def _parse_structure(node: Tree, file: str) -> EarlyStructure:
    kind = 'struct' if node.data == 'named_struct' else 'tuple'
    name = "?"
    line = node.meta.line
    annotations = []
    fields = []
    for child in node.children:
        if isinstance(child, Token) and child.type == 'NAME':
            name = str(child)
            line = child.line
        elif isinstance(child, Tree) and child.data == 'annotation':
            annotations.append(_parse_annotation(child, file))
        elif isinstance(child, Tree) and child.data in ('named_field', 'positional_field'):
            fields.append(_parse_field(child, len(fields), file))
    return EarlyStructure(name, kind, fields, file, line,
                          annotations=annotations, doc=_collect_doc(node))


def file_level_name(def_file_path: str) -> str:
    return os.path.splitext(os.path.basename(def_file_path))[0]
