"""grim: run a Grim source file with the tree-walking interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import GrimError, format_error
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import Parser
from .render import Renderer


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run a Grim program")
    ap.add_argument("path", type=Path, help="Input .grim file")
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument(
        "--tokens", action="store_true", help="Print the token stream and exit"
    )
    mode.add_argument(
        "--ast",
        action="store_true",
        help="Print the parsed program in canonical form and exit",
    )
    mode.add_argument(
        "--check",
        action="store_true",
        help="Lex, parse and check function bodies without running",
    )
    ap.add_argument(
        "--verbose", action="store_true", help="Report each stage on stderr"
    )
    args = ap.parse_args(argv)
    verbose = args.verbose

    try:
        src = args.path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError):
        log_error(f"file not found: {args.path}")
        return 1
    except UnicodeDecodeError:
        log_error(f"not valid UTF-8: {args.path}")
        return 1

    try:
        if verbose:
            log_step("lexing")
        tokens = Lexer(src).scan()
        if args.tokens:
            for t in tokens:
                print(f"{t.kind.name}\t{t.lexeme!r}\t({t.line}:{t.col})")
            return 0
        if verbose:
            log_step("parsing")
        program = Parser(tokens).parse()
        if args.ast:
            sys.stdout.write(Renderer().render(program))
            return 0
        interpreter = Interpreter()
        if verbose:
            log_step("registering functions")
        interpreter.prepare(program)
        if args.check:
            print(f"ok: {len(interpreter.functions)} function(s), {args.path}")
            return 0
        if verbose:
            log_step("running")
        interpreter.run(program)
    except GrimError as e:
        sys.stdout.flush()
        log_error(format_error(e, src))
        return 1
    return 0


def log_step(msg: str) -> None:
    print(f"[grim] {msg}...", file=sys.stderr)


def log_error(msg: str) -> None:
    print(f"[grim:error] {msg}", file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
