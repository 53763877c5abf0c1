"""
Grim language lexer.

Turns source text into tokens carrying a 1-based line/column position.
``Lexer.tokens()`` yields lazily; ``Lexer.scan()`` collects everything,
ending with an EOF token.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional, Union

from .errors import LexicalError

INT64_MAX = 2**63 - 1


class TokenKind(Enum):
    # Punctuation / operators
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    EQ = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    COMMA = auto()
    SEMI = auto()
    COLON = auto()
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()
    EQEQ = auto()
    NEQ = auto()
    BANG = auto()
    AND = auto()
    OR = auto()
    ARROW = auto()

    # Literals / identifiers
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    BOOL = auto()
    IDENT = auto()

    # Keywords (lexeme tells them apart)
    KEYWORD = auto()

    EOF = auto()


KEYWORDS = {
    "let",
    "fn",
    "if",
    "else",
    "while",
    "print",
    "printl",
    "input",
    "return",
}

BOOL_WORDS = {"true": True, "false": False}

SINGLE_CHAR = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "+": TokenKind.PLUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMI,
    ":": TokenKind.COLON,
}


@dataclass
class Token:
    kind: TokenKind
    lexeme: str
    line: int
    col: int
    value: Union[int, float, bool, str, None] = None


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.line = 1
        self.col = 1
        self.start = 0
        self.start_line = 1
        self.start_col = 1

    def scan(self) -> List[Token]:
        return list(self.tokens())

    def tokens(self) -> Iterator[Token]:
        while not self._is_at_end():
            self.start = self.pos
            self.start_line = self.line
            self.start_col = self.col
            c = self._advance()

            # Whitespace / newlines
            if c in " \t\r":
                continue
            if c == "\n":
                self.line += 1
                self.col = 1
                continue

            # Comment (line, starting with #)
            if c == "#":
                self._skip_until_newline()
                continue

            if c == '"':
                yield self._string()
                continue

            if _is_digit(c):
                yield self._number()
                continue

            if _is_alpha(c) or c == "_":
                yield self._identifier()
                continue

            if c in SINGLE_CHAR:
                yield self._make(SINGLE_CHAR[c])
                continue

            # Operators that may take a second character
            if c == "=":
                yield self._make(TokenKind.EQEQ if self._match("=") else TokenKind.EQ)
                continue
            if c == "!":
                yield self._make(TokenKind.NEQ if self._match("=") else TokenKind.BANG)
                continue
            if c == "<":
                yield self._make(TokenKind.LTE if self._match("=") else TokenKind.LT)
                continue
            if c == ">":
                yield self._make(TokenKind.GTE if self._match("=") else TokenKind.GT)
                continue
            if c == "-":
                yield self._make(
                    TokenKind.ARROW if self._match(">") else TokenKind.MINUS
                )
                continue
            if c == "&":
                if not self._match("&"):
                    self._fail("Expected '&&'")
                yield self._make(TokenKind.AND)
                continue
            if c == "|":
                if not self._match("|"):
                    self._fail("Expected '||'")
                yield self._make(TokenKind.OR)
                continue

            self._fail(f"Unexpected character '{c}'")

        yield Token(TokenKind.EOF, "", self.line, self.col)

    def _make(self, kind: TokenKind, value=None, lexeme: Optional[str] = None) -> Token:
        text = lexeme if lexeme is not None else self.source[self.start : self.pos]
        return Token(kind, text, self.start_line, self.start_col, value)

    def _fail(self, msg: str):
        raise LexicalError(msg, self.start_line, self.start_col)

    def _is_at_end(self) -> bool:
        return self.pos >= self.length

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        self.col += 1
        return ch

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= self.length:
            return "\0"
        return self.source[self.pos + 1]

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        self.col += 1
        return True

    def _skip_until_newline(self) -> None:
        while not self._is_at_end() and self._peek() != "\n":
            self._advance()

    def _string(self) -> Token:
        # No escape sequences: the literal runs to the next quote.
        while not self._is_at_end():
            ch = self._advance()
            if ch == '"':
                content = self.source[self.start + 1 : self.pos - 1]
                return self._make(TokenKind.STRING, content, content)
            if ch == "\n":
                self.line += 1
                self.col = 1
        self._fail("Unterminated string")

    def _number(self) -> Token:
        while _is_digit(self._peek()):
            self._advance()
        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()  # consume '.'
            while _is_digit(self._peek()):
                self._advance()
            lexeme = self.source[self.start : self.pos]
            value = float(lexeme)
            if math.isinf(value):
                self._fail(f"Float literal {lexeme} out of range")
            return self._make(TokenKind.FLOAT, value)
        lexeme = self.source[self.start : self.pos]
        value = int(lexeme)
        if value > INT64_MAX:
            self._fail(f"Integer literal {lexeme} out of range")
        return self._make(TokenKind.INT, value)

    def _identifier(self) -> Token:
        while _is_ident_char(self._peek()):
            self._advance()
        text = self.source[self.start : self.pos]
        if text in KEYWORDS:
            return self._make(TokenKind.KEYWORD)
        if text in BOOL_WORDS:
            return self._make(TokenKind.BOOL, BOOL_WORDS[text])
        return self._make(TokenKind.IDENT, text)


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_ident_char(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch) or ch == "_"


__all__ = ["Lexer", "Token", "TokenKind", "KEYWORDS", "INT64_MAX"]
