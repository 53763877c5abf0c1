"""Scope chain and function table used by the interpreter."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from . import ast
from .errors import RedeclarationError, UndefinedFunctionError, UndefinedVariableError
from .values import Value


class Environment:
    """A stack of frames mapping variable names to values.

    Names never shadow: ``declare`` rejects a name that is visible in any
    active frame, not only the innermost one.
    """

    def __init__(self, bindings: Optional[Dict[str, Value]] = None):
        self.frames: List[Dict[str, Value]] = [dict(bindings or {})]

    def declare(self, name: str, value: Value, node: Optional[ast.Node] = None):
        if self._owner(name) is not None:
            raise RedeclarationError(
                f"variable '{name}' is already declared in an enclosing scope",
                *_position(node),
            )
        self.frames[-1][name] = value

    def assign(self, name: str, value: Value, node: Optional[ast.Node] = None):
        frame = self._owner(name)
        if frame is None:
            raise UndefinedVariableError(
                f"undefined variable '{name}'", *_position(node)
            )
        frame[name] = value

    def lookup(self, name: str, node: Optional[ast.Node] = None) -> Value:
        frame = self._owner(name)
        if frame is None:
            raise UndefinedVariableError(
                f"undefined variable '{name}'", *_position(node)
            )
        return frame[name]

    def push_frame(self) -> None:
        self.frames.append({})

    def pop_frame(self) -> None:
        if len(self.frames) > 1:
            self.frames.pop()

    @contextmanager
    def frame(self) -> Iterator[None]:
        depth = len(self.frames)
        self.push_frame()
        try:
            yield
        finally:
            del self.frames[depth:]

    @property
    def depth(self) -> int:
        return len(self.frames)

    def _owner(self, name: str) -> Optional[Dict[str, Value]]:
        for frame in reversed(self.frames):
            if name in frame:
                return frame
        return None


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    params: List[str]
    body: List[ast.Stmt]


class FunctionTable:
    def __init__(self):
        self._functions: Dict[str, FunctionInfo] = {}
        self._sealed = False

    def register(self, decl: ast.FunctionDecl) -> None:
        if self._sealed:
            raise RuntimeError("function table is sealed")
        if decl.name in self._functions:
            raise RedeclarationError(
                f"function '{decl.name}' already defined", decl.line, decl.col
            )
        seen: set[str] = set()
        for p in decl.params:
            if p in seen:
                raise RedeclarationError(
                    f"duplicate parameter '{p}' in function '{decl.name}'",
                    decl.line,
                    decl.col,
                )
            seen.add(p)
        self._functions[decl.name] = FunctionInfo(
            decl.name, list(decl.params), decl.body
        )

    def seal(self) -> None:
        self._sealed = True

    def get(self, name: str, node: Optional[ast.Node] = None) -> FunctionInfo:
        info = self._functions.get(name)
        if info is None:
            known = ", ".join(sorted(self._functions)) or "none"
            raise UndefinedFunctionError(
                f"undefined function '{name}'. known: {known}", *_position(node)
            )
        return info

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)


def _position(node: Optional[ast.Node]):
    if node is None:
        return (None, None)
    return (node.line, node.col)


__all__ = ["Environment", "FunctionTable", "FunctionInfo"]
