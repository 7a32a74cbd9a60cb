"""
errors.py
Compile-time errors raised while expanding userdata bindings.
Each error remembers where in the definition file it happened so it can be reported
in the usual `file:line:column: error: message` form.
"""
from typing import Optional


class BindingError(Exception):
    def __init__(self, message: str, file: Optional[str] = None, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.file = file
        self.line = line
        self.column = column

    def format_diagnostic(self) -> str:
        location = self.file or "<input>"
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return f"{location}: error: {self.message}"


class GrammarError(BindingError):
    """Malformed annotation or definition syntax."""

    def __init__(self, message: str, token: Optional[str] = None, file: Optional[str] = None, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message, file, line, column)
        self.token = token


class UnknownOptionError(BindingError):
    """Well-formed annotation naming an option that is not valid at its scope."""

    def __init__(self, identifier: str, file: Optional[str] = None, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(f"This identifier is not allowed here: `{identifier}`", file, line, column)
        self.identifier = identifier


class DuplicateKeyError(BindingError):
    """Two fields resolve to the same exposed key (strict key mode only)."""

    def __init__(self, key, direction: str, first_field: str, second_field: str, file: Optional[str] = None, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(
            f"key {key} is already used by `{first_field}` in {direction}; `{second_field}` would never be reached",
            file, line, column,
        )
        self.key = key
        self.direction = direction
