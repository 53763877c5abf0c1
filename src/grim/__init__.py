from .lexer import Lexer, Token, TokenKind
from .parser import Parser, parse
from .interpreter import Interpreter, run
from .render import Renderer
from .errors import (
    GrimError,
    LexicalError,
    ParseError,
    RedeclarationError,
    UndefinedVariableError,
    UndefinedFunctionError,
    TypeMismatchError,
    ArityError,
    DivisionByZeroError,
    IntegerOverflowError,
    MissingReturnError,
    InputTypeError,
    StackOverflowError,
    format_error,
)

__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "Parser",
    "parse",
    "Interpreter",
    "run",
    "Renderer",
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
