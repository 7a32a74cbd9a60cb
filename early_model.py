"""
early_model.py
A raw representation of the parsed definition file, capturing information directly from the parser
(file, line, column, declared names, type names, doc comments and annotations). Annotation arguments
are kept as raw text; nothing is interpreted until option resolution.
"""
from typing import List, Optional


class EarlyAnnotation:
    def __init__(self, name: str, args_text: Optional[str], file: str, line: int, column: int,
                 args_line: Optional[int] = None, args_column: Optional[int] = None):
        self.name = name
        # None when the annotation was written without a parenthesised argument list
        self.args_text = args_text
        self.file = file
        self.line = line
        self.column = column
        self.args_line = args_line if args_line is not None else line
        self.args_column = args_column if args_column is not None else column

    @property
    def has_args(self) -> bool:
        return self.args_text is not None

    def __repr__(self):
        return f"EarlyAnnotation({self.name!r}, {self.args_text!r})"


class EarlyField:
    def __init__(self, index: int, name: Optional[str], type_name: str, file: str, line: int, column: int,
                 annotations: Optional[List[EarlyAnnotation]] = None, doc: str = ""):
        self.index = index
        self.name = name  # None for positional fields
        self.type_name = type_name
        self.file = file
        self.line = line
        self.column = column
        self.annotations = annotations or []
        self.doc = doc


class EarlyStructure:
    def __init__(self, name: str, kind: str, fields: List[EarlyField], file: str, line: int,
                 annotations: Optional[List[EarlyAnnotation]] = None, doc: str = ""):
        self.name = name
        self.kind = kind  # 'struct' or 'tuple'
        self.fields = fields
        self.file = file
        self.line = line
        self.annotations = annotations or []
        self.doc = doc
