"""Recursive-descent parser for the Grim language."""

from __future__ import annotations

import re
from typing import List, Optional

from . import lexer
from .ast import (
    Assign,
    BinaryOp,
    BinaryOperator,
    BoolLiteral,
    Call,
    CallStatement,
    Expr,
    FloatLiteral,
    FunctionDecl,
    Identifier,
    If,
    Input,
    IntLiteral,
    Let,
    Print,
    PrintLine,
    Program,
    Return,
    Stmt,
    StringLiteral,
    UnaryOp,
    UnaryOperator,
    While,
)
from .errors import ParseError

# A `let` target may start with any letter; every other name position
# must start with a lowercase letter or underscore.
LET_NAME = re.compile(r"[A-Za-z][A-Za-z0-9_]*\Z")
NAME = re.compile(r"[a-z_][A-Za-z0-9_]*\Z")

# Tightest tier first, after unary operators.
MULTIPLICATIVE = {
    lexer.TokenKind.STAR: BinaryOperator.MUL,
    lexer.TokenKind.SLASH: BinaryOperator.DIV,
    lexer.TokenKind.PERCENT: BinaryOperator.MOD,
    lexer.TokenKind.AND: BinaryOperator.AND,
}
ADDITIVE = {
    lexer.TokenKind.PLUS: BinaryOperator.ADD,
    lexer.TokenKind.MINUS: BinaryOperator.SUB,
    lexer.TokenKind.OR: BinaryOperator.OR,
}
RELATIONAL = {
    lexer.TokenKind.LT: BinaryOperator.LT,
    lexer.TokenKind.GT: BinaryOperator.GT,
    lexer.TokenKind.LTE: BinaryOperator.LE,
    lexer.TokenKind.GTE: BinaryOperator.GE,
    lexer.TokenKind.EQEQ: BinaryOperator.EQ,
    lexer.TokenKind.NEQ: BinaryOperator.NE,
}


class Parser:
    def __init__(self, tokens: List[lexer.Token]):
        self.tokens = tokens
        self.current = 0
        self.function_depth = 0

    def parse(self) -> Program:
        stmts: List[Stmt] = []
        while not self._is_at_end():
            if self._check_kw("fn"):
                stmts.append(self._function_decl())
                continue
            stmts.append(self._statement())
        first = stmts[0] if stmts else None
        return Program(
            statements=stmts,
            line=first.line if first else None,
            col=first.col if first else None,
        )

    # --- statements ---
    def _statement(self) -> Stmt:
        if self._check_kw("fn"):
            tok = self._peek()
            raise ParseError(
                "functions can only be declared at top level",
                tok.line,
                tok.col,
                expected="statement",
                found="fn",
            )
        if self._match_kw("let"):
            let_tok = self._previous()
            name_tok = self._consume_ident("variable name after 'let'", LET_NAME)
            self._consume(lexer.TokenKind.EQ, "'='")
            init = self._expression()
            self._consume(lexer.TokenKind.SEMI, "';'")
            return Let(name_tok.lexeme, init, line=let_tok.line, col=let_tok.col)
        if self._match_kw("if"):
            return self._if_statement()
        if self._match_kw("while"):
            while_tok = self._previous()
            cond = self._expression()
            body = self._block()
            return While(cond, body, line=while_tok.line, col=while_tok.col)
        if self._match_kw("print") or self._match_kw("printl"):
            kw_tok = self._previous()
            self._consume(lexer.TokenKind.LPAREN, f"'(' after '{kw_tok.lexeme}'")
            expr = self._expression()
            self._consume(lexer.TokenKind.RPAREN, "')'")
            self._consume(lexer.TokenKind.SEMI, "';'")
            node = Print if kw_tok.lexeme == "print" else PrintLine
            return node(expr, line=kw_tok.line, col=kw_tok.col)
        if self._match_kw("input"):
            kw_tok = self._previous()
            self._consume(lexer.TokenKind.LPAREN, "'(' after 'input'")
            name_tok = self._consume_ident("variable name in 'input'")
            self._consume(lexer.TokenKind.RPAREN, "')'")
            self._consume(lexer.TokenKind.SEMI, "';'")
            return Input(name_tok.lexeme, line=kw_tok.line, col=kw_tok.col)
        if self._match_kw("return"):
            ret_tok = self._previous()
            if self.function_depth == 0:
                raise ParseError(
                    "'return' outside function",
                    ret_tok.line,
                    ret_tok.col,
                    expected="statement",
                    found="return",
                )
            expr = self._expression()
            self._consume(lexer.TokenKind.SEMI, "';'")
            return Return(expr, line=ret_tok.line, col=ret_tok.col)
        if self._check_kind(lexer.TokenKind.IDENT):
            # Lookahead decides between `name = expr;` and `name(args);`
            if self._peek_next_is(lexer.TokenKind.EQ):
                name_tok = self._consume_ident("assignment target")
                self._advance()  # consume '='
                value = self._expression()
                self._consume(lexer.TokenKind.SEMI, "';'")
                return Assign(
                    name_tok.lexeme, value, line=name_tok.line, col=name_tok.col
                )
            if self._peek_next_is(lexer.TokenKind.LPAREN):
                name_tok = self._consume_ident("function name")
                args = self._arguments()
                self._consume(lexer.TokenKind.SEMI, "';'")
                return CallStatement(
                    name_tok.lexeme, args, line=name_tok.line, col=name_tok.col
                )
            self._advance()
            raise self._error("'=' or '(' after identifier")
        raise self._error("statement")

    def _function_decl(self) -> FunctionDecl:
        fn_tok = self._advance()
        name_tok = self._consume_ident("function name after 'fn'")
        self._consume(lexer.TokenKind.LPAREN, "'(' after function name")
        params: List[str] = []
        if not self._check_kind(lexer.TokenKind.RPAREN):
            while True:
                params.append(self._consume_ident("parameter name").lexeme)
                if self._match_kind(lexer.TokenKind.COMMA):
                    continue
                break
        self._consume(lexer.TokenKind.RPAREN, "')' after parameters")
        self._consume(lexer.TokenKind.ARROW, "'->' before function body")
        self.function_depth += 1
        try:
            body = self._block()
        finally:
            self.function_depth -= 1
        return FunctionDecl(
            name_tok.lexeme, params, body, line=fn_tok.line, col=fn_tok.col
        )

    def _if_statement(self) -> If:
        if_tok = self._previous()
        cond = self._expression()
        then_block = self._block()
        else_block: Optional[List[Stmt]] = None
        if self._match_kw("else"):
            else_block = self._block()
        return If(cond, then_block, else_block, line=if_tok.line, col=if_tok.col)

    def _block(self) -> List[Stmt]:
        self._consume(lexer.TokenKind.LBRACE, "'{'")
        stmts: List[Stmt] = []
        while not self._is_at_end() and not self._check_kind(lexer.TokenKind.RBRACE):
            stmts.append(self._statement())
        self._consume(lexer.TokenKind.RBRACE, "'}'")
        return stmts

    def _arguments(self) -> List[Expr]:
        self._consume(lexer.TokenKind.LPAREN, "'('")
        args: List[Expr] = []
        if not self._check_kind(lexer.TokenKind.RPAREN):
            while True:
                args.append(self._expression())
                if self._match_kind(lexer.TokenKind.COMMA):
                    continue
                break
        self._consume(lexer.TokenKind.RPAREN, "')' after arguments")
        return args

    # --- expressions ---
    def _expression(self) -> Expr:
        return self._relational()

    def _relational(self) -> Expr:
        return self._binary_tier(RELATIONAL, self._additive)

    def _additive(self) -> Expr:
        return self._binary_tier(ADDITIVE, self._multiplicative)

    def _multiplicative(self) -> Expr:
        return self._binary_tier(MULTIPLICATIVE, self._unary)

    def _binary_tier(self, ops, operand) -> Expr:
        expr = operand()
        while self._peek().kind in ops:
            op_tok = self._advance()
            right = operand()
            expr = BinaryOp(
                ops[op_tok.kind], expr, right, line=op_tok.line, col=op_tok.col
            )
        return expr

    def _unary(self) -> Expr:
        if self._match_kind(lexer.TokenKind.BANG):
            op_tok = self._previous()
            return UnaryOp(
                UnaryOperator.NOT, self._unary(), line=op_tok.line, col=op_tok.col
            )
        if self._match_kind(lexer.TokenKind.MINUS):
            op_tok = self._previous()
            return UnaryOp(
                UnaryOperator.NEG, self._unary(), line=op_tok.line, col=op_tok.col
            )
        return self._primary()

    def _primary(self) -> Expr:
        if self._match_kind(lexer.TokenKind.INT):
            tok = self._previous()
            return IntLiteral(tok.value, line=tok.line, col=tok.col)
        if self._match_kind(lexer.TokenKind.FLOAT):
            tok = self._previous()
            return FloatLiteral(tok.value, line=tok.line, col=tok.col)
        if self._match_kind(lexer.TokenKind.BOOL):
            tok = self._previous()
            return BoolLiteral(tok.value, line=tok.line, col=tok.col)
        if self._match_kind(lexer.TokenKind.STRING):
            tok = self._previous()
            return StringLiteral(tok.value, line=tok.line, col=tok.col)
        if self._check_kind(lexer.TokenKind.IDENT):
            tok = self._consume_ident("identifier")
            if self._check_kind(lexer.TokenKind.LPAREN):
                args = self._arguments()
                return Call(tok.lexeme, args, line=tok.line, col=tok.col)
            return Identifier(tok.lexeme, line=tok.line, col=tok.col)
        if self._match_kind(lexer.TokenKind.LPAREN):
            expr = self._expression()
            self._consume(lexer.TokenKind.RPAREN, "')' after expression")
            return expr
        raise self._error("expression")

    # --- helpers ---
    def _error(self, expected: str) -> ParseError:
        tok = self._peek()
        found = tok.lexeme or tok.kind.name
        return ParseError(
            f"Expected {expected}, found '{found}'",
            tok.line,
            tok.col,
            expected=expected,
            found=found,
        )

    def _match_kw(self, kw: str) -> bool:
        if self._check_kw(kw):
            self._advance()
            return True
        return False

    def _match_kind(self, kind: lexer.TokenKind) -> bool:
        if self._check_kind(kind):
            self._advance()
            return True
        return False

    def _consume(self, kind: lexer.TokenKind, expected: str) -> lexer.Token:
        if self._check_kind(kind):
            return self._advance()
        raise self._error(expected)

    def _consume_ident(self, expected: str, rule=NAME) -> lexer.Token:
        if not self._check_kind(lexer.TokenKind.IDENT):
            raise self._error(expected)
        tok = self._peek()
        if not rule.match(tok.lexeme):
            raise ParseError(
                f"Invalid name '{tok.lexeme}' for {expected}",
                tok.line,
                tok.col,
                expected=expected,
                found=tok.lexeme,
            )
        return self._advance()

    def _check_kw(self, kw: str) -> bool:
        t = self._peek()
        return t.kind == lexer.TokenKind.KEYWORD and t.lexeme == kw

    def _check_kind(self, kind: lexer.TokenKind) -> bool:
        return self._peek().kind == kind

    def _peek_next_is(self, kind: lexer.TokenKind) -> bool:
        if self.current + 1 >= len(self.tokens):
            return False
        return self.tokens[self.current + 1].kind == kind

    def _advance(self) -> lexer.Token:
        if not self._is_at_end():
            self.current += 1
        return self.tokens[self.current - 1]

    def _peek(self) -> lexer.Token:
        return self.tokens[self.current]

    def _previous(self) -> lexer.Token:
        return self.tokens[self.current - 1]

    def _is_at_end(self) -> bool:
        return self._peek().kind == lexer.TokenKind.EOF


def parse(source: str) -> Program:
    """Lex and parse ``source`` into a Program."""
    return Parser(lexer.Lexer(source).scan()).parse()


__all__ = ["Parser", "ParseError", "parse"]
