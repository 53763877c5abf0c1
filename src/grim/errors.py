"""Error taxonomy for the Grim interpreter.

Every failure the core can report derives from ``GrimError``. Errors are
raised where they are detected and never caught inside the core, so the
first one encountered ends the run.
"""

from __future__ import annotations

from typing import Optional


class GrimError(Exception):
    def __init__(
        self, message: str, line: Optional[int] = None, col: Optional[int] = None
    ):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(self._with_position())

    def _with_position(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} at {self.line}:{self.col}"


class LexicalError(GrimError):
    pass


class ParseError(GrimError):
    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        col: Optional[int] = None,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(message, line, col)


class RedeclarationError(GrimError):
    pass


class UndefinedVariableError(GrimError):
    pass


class UndefinedFunctionError(GrimError):
    pass


class TypeMismatchError(GrimError):
    pass


class ArityError(TypeMismatchError):
    pass


class DivisionByZeroError(GrimError):
    pass


class IntegerOverflowError(GrimError):
    pass


class MissingReturnError(GrimError):
    pass


class InputTypeError(GrimError):
    pass


class StackOverflowError(GrimError):
    pass


def format_error(err: GrimError, source: str) -> str:
    """Render ``err`` with the offending source line and a caret under it."""
    kind = type(err).__name__
    lines = source.splitlines()
    if err.line and 1 <= err.line <= len(lines):
        src_line = lines[err.line - 1]
        caret = " " * (err.col - 1 if err.col and err.col > 0 else 0) + "^"
        return f"{kind}: {err}\n    {src_line}\n    {caret}"
    return f"{kind}: {err}"


__all__ = [
    "GrimError",
    "LexicalError",
    "ParseError",
    "RedeclarationError",
    "UndefinedVariableError",
    "UndefinedFunctionError",
    "TypeMismatchError",
    "ArityError",
    "DivisionByZeroError",
    "IntegerOverflowError",
    "MissingReturnError",
    "InputTypeError",
    "StackOverflowError",
    "format_error",
]
