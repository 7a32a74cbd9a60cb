"""
attribute_parser.py
Parser for the argument list of a `@userdata(...)` annotation.

The argument list is a comma separated, non-empty sequence of entries. Each entry is
either a bare flag (`read`) or a key/value pair whose value must be a string literal
(`rename = "hello"`). The parser knows nothing about which options are valid where;
that is decided by option_resolver.py for field and structure scope.
"""
import ast
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from errors import GrammarError


grammar = r"""
    start: entry ("," entry)*
    entry: NAME ("=" value)?
    value: STRING | SINGLE_QUOTED | NUMBER | NAME

    NAME: /[a-zA-Z_][a-zA-Z0-9_]*/
    NUMBER: /-?[0-9]+(\.[0-9]+)?/
    STRING: /"(\\.|[^"\\])*"/
    SINGLE_QUOTED: /'(\\.|[^'\\])*'/
    %import common.WS
    %ignore WS
"""

parser = Lark(grammar, start='start', parser='lalr')


class AttributeEntry:
    def __init__(self, name: str, file: Optional[str], line: int, column: int):
        self.name = name
        self.file = file
        self.line = line
        self.column = column


class FlagEntry(AttributeEntry):
    """A bare identifier such as `read`."""

    def __repr__(self):
        return f"FlagEntry({self.name!r})"


class KeyValueEntry(AttributeEntry):
    """An `identifier = "literal"` pair. `value` holds the decoded string."""

    def __init__(self, name: str, value: str, file: Optional[str], line: int, column: int, value_line: int, value_column: int):
        super().__init__(name, file, line, column)
        self.value = value
        self.value_line = value_line
        self.value_column = value_column

    def __repr__(self):
        return f"KeyValueEntry({self.name!r}, {self.value!r})"


def _absolute(rel_line: int, rel_column: int, line: int, column: int):
    # Positions inside the argument text are relative to its first character.
    if rel_line == 1:
        return line, column + rel_column - 1
    return line + rel_line - 1, rel_column


def _describe(token: Token) -> str:
    if token.type == '$END':
        return "end of input"
    return f"`{token}`"


def parse_attribute_args(text: str, file: Optional[str] = None, line: int = 1, column: int = 1) -> List[AttributeEntry]:
    """
    Parse the text between an annotation's parentheses.

    Args:
        text: The raw argument text, without the surrounding parentheses
        file: Source file used for diagnostics
        line: Line of the first character of `text` in the source file
        column: Column of the first character of `text` in the source file

    Returns:
        The entries in source order

    Raises:
        GrammarError: If the text does not follow the attribute grammar
    """
    try:
        tree = parser.parse(text)
    except UnexpectedToken as e:
        err_line, err_column = _absolute(e.line if isinstance(e.line, int) else 1,
                                         e.column if isinstance(e.column, int) else 1, line, column)
        if 'NAME' in e.expected:
            message = f"expected identifier, found {_describe(e.token)}"
        else:
            message = f"unexpected token {_describe(e.token)}"
        raise GrammarError(message, token=str(e.token), file=file, line=err_line, column=err_column) from None
    except UnexpectedCharacters as e:
        err_line, err_column = _absolute(e.line, e.column, line, column)
        raise GrammarError(f"unexpected character `{e.char}`", token=e.char, file=file,
                           line=err_line, column=err_column) from None
    except UnexpectedInput as e:
        raise GrammarError(f"malformed annotation arguments: {e}", file=file, line=line, column=column) from None

    entries = []
    for entry in tree.children:
        name_token = entry.children[0]
        entry_line, entry_column = _absolute(name_token.line, name_token.column, line, column)
        if len(entry.children) == 1:
            entries.append(FlagEntry(str(name_token), file, entry_line, entry_column))
            continue
        value_tree = entry.children[1]
        value_token = value_tree.children[0] if isinstance(value_tree, Tree) else value_tree
        value_line, value_column = _absolute(value_token.line, value_token.column, line, column)
        if value_token.type != 'STRING':
            raise GrammarError(f"Only str literals are allowed here, found `{value_token}`",
                               token=str(value_token), file=file, line=value_line, column=value_column)
        try:
            value = ast.literal_eval(str(value_token))
        except (SyntaxError, ValueError):
            raise GrammarError(f"invalid escape sequence in string literal `{value_token}`",
                               token=str(value_token), file=file, line=value_line, column=value_column) from None
        entries.append(KeyValueEntry(str(name_token), value, file,
                                     entry_line, entry_column, value_line, value_column))
    return entries
