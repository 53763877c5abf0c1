"""Grim AST back to canonical source text.

Binary expressions are always parenthesised, so re-parsing the output
yields the same tree regardless of operator tiers.
"""

from __future__ import annotations

from typing import List

from . import ast
from .values import decimal_text


class Renderer:
    def __init__(self, indent: str = "    "):
        self.unit = indent
        self.lines: List[str] = []
        self.indent = 0

    def render(self, program: ast.Program) -> str:
        self.lines = []
        self.indent = 0
        for stmt in program.statements:
            self._stmt(stmt)
        return "\n".join(self.lines) + ("\n" if self.lines else "")

    # --- statements ---
    def _stmt(self, node: ast.Stmt):
        if isinstance(node, ast.Let):
            self._emit(f"let {node.name} = {self.expr(node.init)};")
        elif isinstance(node, ast.Assign):
            self._emit(f"{node.name} = {self.expr(node.value)};")
        elif isinstance(node, ast.If):
            self._emit(f"if {self.expr(node.cond)} {{")
            self._body(node.then_block)
            if node.else_block is not None:
                self._emit("} else {")
                self._body(node.else_block)
            self._emit("}")
        elif isinstance(node, ast.While):
            self._emit(f"while {self.expr(node.cond)} {{")
            self._body(node.body)
            self._emit("}")
        elif isinstance(node, ast.FunctionDecl):
            self._emit(f"fn {node.name}({', '.join(node.params)}) -> {{")
            self._body(node.body)
            self._emit("}")
        elif isinstance(node, ast.CallStatement):
            self._emit(f"{node.name}({self._args(node.args)});")
        elif isinstance(node, ast.Print):
            self._emit(f"print({self.expr(node.expr)});")
        elif isinstance(node, ast.PrintLine):
            self._emit(f"printl({self.expr(node.expr)});")
        elif isinstance(node, ast.Input):
            self._emit(f"input({node.name});")
        elif isinstance(node, ast.Return):
            self._emit(f"return {self.expr(node.expr)};")
        else:
            raise TypeError(f"Unhandled statement {node!r}")

    def _body(self, body: List[ast.Stmt]):
        self._push()
        for stmt in body:
            self._stmt(stmt)
        self._pop()

    # --- expressions ---
    def expr(self, node: ast.Expr) -> str:
        if isinstance(node, ast.IntLiteral):
            return str(node.value)
        if isinstance(node, ast.FloatLiteral):
            text = decimal_text(node.value)
            return text if "." in text else text + ".0"
        if isinstance(node, ast.BoolLiteral):
            return "true" if node.value else "false"
        if isinstance(node, ast.StringLiteral):
            return f'"{node.value}"'
        if isinstance(node, ast.Identifier):
            return node.name
        if isinstance(node, ast.UnaryOp):
            return f"{node.op.value}{self.expr(node.operand)}"
        if isinstance(node, ast.BinaryOp):
            return f"({self.expr(node.left)} {node.op.value} {self.expr(node.right)})"
        if isinstance(node, ast.Call):
            return f"{node.name}({self._args(node.args)})"
        raise TypeError(f"Unhandled expression {node!r}")

    def _args(self, args: List[ast.Expr]) -> str:
        return ", ".join(self.expr(a) for a in args)

    # --- emit helpers ---
    def _emit(self, line: str):
        self.lines.append(self.unit * self.indent + line)

    def _push(self):
        self.indent += 1

    def _pop(self):
        self.indent = max(0, self.indent - 1)


__all__ = ["Renderer"]
