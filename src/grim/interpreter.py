"""Tree-walking interpreter for Grim.

Execution happens in two steps. The pre-pass registers every top-level
``fn`` in the function table and rejects bodies that can fall through
without a ``return``. The top-level statements then run in file order.

Each ``if``/``else``/``while`` body runs in a fresh frame pushed onto the
current environment. A call runs in a brand new environment holding only
the bound parameters, so a callee never sees its caller's variables.
"""

from __future__ import annotations

import re
import sys
import threading
from typing import Any, Callable, List, Optional, TextIO

from . import ast
from .environment import Environment, FunctionTable
from .errors import (
    ArityError,
    InputTypeError,
    MissingReturnError,
    StackOverflowError,
    TypeMismatchError,
)
from .evaluator import Evaluator
from .parser import parse
from .values import (
    BoolValue,
    FloatValue,
    IntValue,
    StrValue,
    Value,
    in_int64_range,
    render,
)

INT_INPUT = re.compile(r"[+-]?[0-9]+\Z")
FLOAT_INPUT = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?\Z")

# Each Grim call nests several Python frames; Interpreter.run executes on a
# worker thread sized for MAX_CALL_DEPTH nested calls.
MAX_CALL_DEPTH = 4000
RECURSION_LIMIT = 200_000
STACK_BYTES = 512 * 1024 * 1024


class Interpreter:
    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.env = Environment()
        self.functions = FunctionTable()
        self.evaluator = Evaluator(self)
        self.call_depth = 0
        self._prepared = False

    def run(self, program: ast.Program) -> None:
        _on_deep_stack(self._run, program)

    def _run(self, program: ast.Program) -> None:
        self.prepare(program)
        self._exec_block(program.statements)

    # --- pre-pass ---
    def prepare(self, program: ast.Program) -> None:
        if self._prepared:
            return
        decls = [s for s in program.statements if isinstance(s, ast.FunctionDecl)]
        for decl in decls:
            self.functions.register(decl)
        for decl in decls:
            if not always_returns(decl.body):
                raise MissingReturnError(
                    f"function '{decl.name}' can reach the end of its body without 'return'",
                    decl.line,
                    decl.col,
                )
        self.functions.seal()
        self._prepared = True

    # --- statements ---
    def _exec_block(self, body: List[ast.Stmt]) -> Optional[Value]:
        """Run statements in order; a non-None result is a pending return value."""
        for stmt in body:
            result = self._exec(stmt)
            if result is not None:
                return result
        return None

    def _scoped_block(self, body: List[ast.Stmt]) -> Optional[Value]:
        with self.env.frame():
            return self._exec_block(body)

    def _exec(self, node: ast.Stmt) -> Optional[Value]:
        if isinstance(node, ast.Let):
            value = self.evaluator.evaluate(node.init)
            self.env.declare(node.name, value, node)
            return None
        if isinstance(node, ast.Assign):
            value = self.evaluator.evaluate(node.value)
            self.env.assign(node.name, value, node)
            return None
        if isinstance(node, ast.If):
            if self._condition(node.cond, "if"):
                return self._scoped_block(node.then_block)
            if node.else_block is not None:
                return self._scoped_block(node.else_block)
            return None
        if isinstance(node, ast.While):
            while self._condition(node.cond, "while"):
                result = self._scoped_block(node.body)
                if result is not None:
                    return result
            return None
        if isinstance(node, ast.FunctionDecl):
            # Registered by the pre-pass.
            return None
        if isinstance(node, ast.CallStatement):
            args = self.evaluator.evaluate_args(node.args)
            self.call(node.name, args, node)
            return None
        if isinstance(node, ast.Print):
            self._write(render(self.evaluator.evaluate(node.expr)))
            return None
        if isinstance(node, ast.PrintLine):
            self._write(render(self.evaluator.evaluate(node.expr)) + "\n")
            return None
        if isinstance(node, ast.Input):
            current = self.env.lookup(node.name, node)
            self.env.assign(node.name, self._read_input(current, node), node)
            return None
        if isinstance(node, ast.Return):
            return self.evaluator.evaluate(node.expr)
        raise TypeError(f"Unhandled statement {node!r}")

    def _condition(self, expr: ast.Expr, keyword: str) -> bool:
        value = self.evaluator.evaluate(expr)
        if not isinstance(value, BoolValue):
            raise TypeMismatchError(
                f"{value.type_name} cannot be used as {keyword} condition",
                expr.line,
                expr.col,
            )
        return value.value

    # --- calls ---
    def call(self, name: str, args: List[Value], node: ast.Node) -> Value:
        info = self.functions.get(name, node)
        if len(args) != len(info.params):
            raise ArityError(
                f"function '{name}' expects {len(info.params)} argument(s), got {len(args)}",
                node.line,
                node.col,
            )
        if self.call_depth >= MAX_CALL_DEPTH:
            raise StackOverflowError(
                f"call depth exceeded {MAX_CALL_DEPTH} calling '{name}'",
                node.line,
                node.col,
            )
        caller_env = self.env
        self.env = Environment(dict(zip(info.params, args)))
        self.call_depth += 1
        try:
            result = self._exec_block(info.body)
        except RecursionError:
            raise StackOverflowError(
                f"recursion too deep calling '{name}'", node.line, node.col
            ) from None
        finally:
            self.env = caller_env
            self.call_depth -= 1
        if result is None:
            raise MissingReturnError(
                f"function '{name}' finished without 'return'", node.line, node.col
            )
        return result

    # --- io ---
    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def _read_input(self, current: Value, node: ast.Input) -> Value:
        line = self.stdin.readline()
        if line == "":
            raise InputTypeError(
                f"end of input while reading '{node.name}'", node.line, node.col
            )
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        if isinstance(current, StrValue):
            return StrValue(line)
        text = line.strip()
        if isinstance(current, IntValue):
            if INT_INPUT.match(text) and in_int64_range(int(text)):
                return IntValue(int(text))
        elif isinstance(current, FloatValue):
            if FLOAT_INPUT.match(text):
                return FloatValue(float(text))
        elif text in ("true", "false"):
            return BoolValue(text == "true")
        raise InputTypeError(
            f"cannot read {text!r} into {current.type_name} variable '{node.name}'",
            node.line,
            node.col,
        )


def always_returns(body: List[ast.Stmt]) -> bool:
    """True when every path through ``body`` ends in a ``return``."""
    for stmt in body:
        if isinstance(stmt, ast.Return):
            return True
        if (
            isinstance(stmt, ast.If)
            and stmt.else_block is not None
            and always_returns(stmt.then_block)
            and always_returns(stmt.else_block)
        ):
            return True
    return False


def _on_deep_stack(func: Callable[..., Any], *args: Any) -> Any:
    """Call ``func`` on a worker thread with a large stack and recursion limit."""
    outcome: dict = {}

    def target() -> None:
        try:
            outcome["value"] = func(*args)
        except BaseException as exc:
            outcome["error"] = exc

    old_limit = sys.getrecursionlimit()
    old_size = threading.stack_size(STACK_BYTES)
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
    try:
        worker = threading.Thread(target=target, name="grim-interpreter", daemon=True)
        worker.start()
        worker.join()
    finally:
        threading.stack_size(old_size)
        sys.setrecursionlimit(old_limit)
    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("value")


def run(
    source: str, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None
) -> None:
    """Lex, parse and execute a Grim program.

    Raises the first ``GrimError`` encountered; output written before the
    error stays written.
    """
    program = parse(source)
    Interpreter(stdin=stdin, stdout=stdout).run(program)


__all__ = ["Interpreter", "always_returns", "run"]
