"""AST node definitions for the Grim language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class UnaryOperator(Enum):
    NOT = "!"
    NEG = "-"


class BinaryOperator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    AND = "&&"
    OR = "||"
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    EQ = "=="
    NE = "!="


ARITHMETIC_OPS = {
    BinaryOperator.ADD,
    BinaryOperator.SUB,
    BinaryOperator.MUL,
    BinaryOperator.DIV,
    BinaryOperator.MOD,
}
LOGICAL_OPS = {BinaryOperator.AND, BinaryOperator.OR}
ORDERING_OPS = {BinaryOperator.LT, BinaryOperator.GT, BinaryOperator.LE, BinaryOperator.GE}
EQUALITY_OPS = {BinaryOperator.EQ, BinaryOperator.NE}


# Base node for location info; positions never take part in equality
@dataclass(kw_only=True)
class Node:
    line: Optional[int] = field(default=None, compare=False)
    col: Optional[int] = field(default=None, compare=False)


# Expressions
@dataclass
class Expr(Node):
    pass


@dataclass
class IntLiteral(Expr):
    value: int


@dataclass
class FloatLiteral(Expr):
    value: float


@dataclass
class BoolLiteral(Expr):
    value: bool


@dataclass
class StringLiteral(Expr):
    value: str


@dataclass
class Identifier(Expr):
    name: str


@dataclass
class UnaryOp(Expr):
    op: UnaryOperator
    operand: Expr


@dataclass
class BinaryOp(Expr):
    op: BinaryOperator
    left: Expr
    right: Expr


@dataclass
class Call(Expr):
    name: str
    args: List[Expr]


# Statements
@dataclass
class Stmt(Node):
    pass


@dataclass
class Let(Stmt):
    name: str
    init: Expr


@dataclass
class Assign(Stmt):
    name: str
    value: Expr


@dataclass
class If(Stmt):
    cond: Expr
    then_block: List[Stmt]
    else_block: Optional[List[Stmt]] = None


@dataclass
class While(Stmt):
    cond: Expr
    body: List[Stmt]


@dataclass
class FunctionDecl(Stmt):
    name: str
    params: List[str]
    body: List[Stmt]


@dataclass
class CallStatement(Stmt):
    name: str
    args: List[Expr]


@dataclass
class Print(Stmt):
    expr: Expr


@dataclass
class PrintLine(Stmt):
    expr: Expr


@dataclass
class Input(Stmt):
    name: str


@dataclass
class Return(Stmt):
    expr: Expr


@dataclass
class Program(Node):
    statements: List[Stmt]


__all__ = [
    "UnaryOperator",
    "BinaryOperator",
    "ARITHMETIC_OPS",
    "LOGICAL_OPS",
    "ORDERING_OPS",
    "EQUALITY_OPS",
    "Node",
    "Expr",
    "IntLiteral",
    "FloatLiteral",
    "BoolLiteral",
    "StringLiteral",
    "Identifier",
    "UnaryOp",
    "BinaryOp",
    "Call",
    "Stmt",
    "Let",
    "Assign",
    "If",
    "While",
    "FunctionDecl",
    "CallStatement",
    "Print",
    "PrintLine",
    "Input",
    "Return",
    "Program",
]
