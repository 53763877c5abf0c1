"""Expression evaluation for Grim.

Operator rules:
- Arithmetic needs two numeric operands (Int result for two Ints, Float as
  soon as one side is Float); ``+`` also concatenates two Strs.
- Ordering comparisons need numeric operands; ``==``/``!=`` also accept two
  Bools or two Strs.
- ``&&``/``||`` need Bool operands and short-circuit: the right operand is
  evaluated only when the left one does not decide the result.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

from . import ast
from .errors import DivisionByZeroError, IntegerOverflowError, TypeMismatchError
from .values import (
    BoolValue,
    FloatValue,
    IntValue,
    StrValue,
    Value,
    in_int64_range,
    is_numeric,
)

if TYPE_CHECKING:
    from .interpreter import Interpreter


class Evaluator:
    def __init__(self, interpreter: "Interpreter"):
        self.interpreter = interpreter

    def evaluate(self, node: ast.Expr) -> Value:
        if isinstance(node, ast.IntLiteral):
            return IntValue(node.value)
        if isinstance(node, ast.FloatLiteral):
            return FloatValue(node.value)
        if isinstance(node, ast.BoolLiteral):
            return BoolValue(node.value)
        if isinstance(node, ast.StringLiteral):
            return StrValue(node.value)
        if isinstance(node, ast.Identifier):
            return self.interpreter.env.lookup(node.name, node)
        if isinstance(node, ast.UnaryOp):
            return self._unary(node)
        if isinstance(node, ast.BinaryOp):
            if node.op in ast.LOGICAL_OPS:
                return self._logical(node)
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.binary(node.op, left, right, node)
        if isinstance(node, ast.Call):
            args = self.evaluate_args(node.args)
            return self.interpreter.call(node.name, args, node)
        raise TypeError(f"Unhandled expression {node!r}")

    def evaluate_args(self, args: List[ast.Expr]) -> List[Value]:
        return [self.evaluate(a) for a in args]

    # --- unary ---
    def _unary(self, node: ast.UnaryOp) -> Value:
        operand = self.evaluate(node.operand)
        if node.op is ast.UnaryOperator.NOT:
            if not isinstance(operand, BoolValue):
                raise _operand_error("!", node, operand)
            return BoolValue(not operand.value)
        if isinstance(operand, IntValue):
            return _checked_int(-operand.value, node)
        if isinstance(operand, FloatValue):
            return FloatValue(-operand.value)
        raise _operand_error("-", node, operand)

    # --- logical ---
    def _logical(self, node: ast.BinaryOp) -> Value:
        symbol = node.op.value
        left = self.evaluate(node.left)
        if not isinstance(left, BoolValue):
            raise _operand_error(symbol, node, left)
        if node.op is ast.BinaryOperator.AND and not left.value:
            return left
        if node.op is ast.BinaryOperator.OR and left.value:
            return left
        right = self.evaluate(node.right)
        if not isinstance(right, BoolValue):
            raise _operand_error(symbol, node, left, right)
        return right

    # --- binary ---
    def binary(
        self, op: ast.BinaryOperator, left: Value, right: Value, node: ast.Node
    ) -> Value:
        if op in ast.ARITHMETIC_OPS:
            return self._arithmetic(op, left, right, node)
        if op in ast.ORDERING_OPS or op in ast.EQUALITY_OPS:
            return self._comparison(op, left, right, node)
        raise TypeError(f"unhandled binary op {op}")

    def _arithmetic(
        self, op: ast.BinaryOperator, left: Value, right: Value, node: ast.Node
    ) -> Value:
        if (
            op is ast.BinaryOperator.ADD
            and isinstance(left, StrValue)
            and isinstance(right, StrValue)
        ):
            return StrValue(left.value + right.value)
        if not is_numeric(left) or not is_numeric(right):
            raise _operand_error(op.value, node, left, right)

        if op in (ast.BinaryOperator.DIV, ast.BinaryOperator.MOD) and right.value == 0:
            raise DivisionByZeroError(
                "division by zero" if op is ast.BinaryOperator.DIV else "modulo by zero",
                node.line,
                node.col,
            )

        if isinstance(left, IntValue) and isinstance(right, IntValue):
            a, b = left.value, right.value
            if op is ast.BinaryOperator.ADD:
                return _checked_int(a + b, node)
            if op is ast.BinaryOperator.SUB:
                return _checked_int(a - b, node)
            if op is ast.BinaryOperator.MUL:
                return _checked_int(a * b, node)
            quotient = _trunc_div(a, b)
            if op is ast.BinaryOperator.DIV:
                return _checked_int(quotient, node)
            return IntValue(a - b * quotient)

        x, y = float(left.value), float(right.value)
        if op is ast.BinaryOperator.ADD:
            return FloatValue(x + y)
        if op is ast.BinaryOperator.SUB:
            return FloatValue(x - y)
        if op is ast.BinaryOperator.MUL:
            return FloatValue(x * y)
        if op is ast.BinaryOperator.DIV:
            return FloatValue(x / y)
        if math.isinf(x):
            return FloatValue(math.nan)
        return FloatValue(math.fmod(x, y))

    def _comparison(
        self, op: ast.BinaryOperator, left: Value, right: Value, node: ast.Node
    ) -> Value:
        if is_numeric(left) and is_numeric(right):
            if isinstance(left, IntValue) and isinstance(right, IntValue):
                a, b = left.value, right.value
            else:
                a, b = float(left.value), float(right.value)
        elif op in ast.EQUALITY_OPS and type(left) is type(right):
            a, b = left.value, right.value
        else:
            raise _operand_error(op.value, node, left, right)

        if op is ast.BinaryOperator.EQ:
            return BoolValue(a == b)
        if op is ast.BinaryOperator.NE:
            return BoolValue(a != b)
        if op is ast.BinaryOperator.LT:
            return BoolValue(a < b)
        if op is ast.BinaryOperator.GT:
            return BoolValue(a > b)
        if op is ast.BinaryOperator.LE:
            return BoolValue(a <= b)
        return BoolValue(a >= b)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _checked_int(n: int, node: ast.Node) -> IntValue:
    if not in_int64_range(n):
        raise IntegerOverflowError("integer overflow", node.line, node.col)
    return IntValue(n)


def _operand_error(symbol: str, node: ast.Node, *operands: Value) -> TypeMismatchError:
    kinds = ", ".join(v.type_name for v in operands)
    return TypeMismatchError(
        f"operator '{symbol}' does not support operand types ({kinds})",
        node.line,
        node.col,
    )


__all__ = ["Evaluator"]
