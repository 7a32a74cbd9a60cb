from lark import Lark


# Grammar for userdata definition files
grammar = r"""
    start: structure*

    structure: named_struct | tuple_struct
    named_struct: DOC_COMMENT* annotation* "struct" NAME "{" named_field* "}" _sep?
    tuple_struct: DOC_COMMENT* annotation* "tuple" NAME "{" positional_field* "}" _sep?

    named_field: DOC_COMMENT* annotation* NAME ":" type_ref _sep?
    positional_field: DOC_COMMENT* annotation* type_ref _sep?

    // Arguments are kept as raw text and handed to attribute_parser.py
    annotation: "@" NAME ANNOTATION_ARGS?
    ANNOTATION_ARGS: /\((?:"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*'|[^()"'])*\)/

    type_ref: qualified_name type_args? array_suffix?
    qualified_name: NAME ("::" NAME)*
    type_args: "<" type_ref ("," type_ref)* ">"
    array_suffix: "[" "]"

    _sep: ";" | ","

    DOC_COMMENT: /\/\/\/[^\n]*/
    LOCAL_COMMENT: /\/\/(?!\/)[^\n]*/
    C_COMMENT: /\/\*[\s\S]*?\*\//

    NAME: /[a-zA-Z_][a-zA-Z0-9_]*/
    %import common.WS
    %ignore WS
    %ignore LOCAL_COMMENT
    %ignore C_COMMENT
"""

parser = Lark(
    grammar,
    start='start',
    propagate_positions=True
)


def parse_binding_dsl(text):
    return parser.parse(text)
