"""Dump the tokens of a Grim source file, one per line."""

import argparse
from pathlib import Path

from .errors import LexicalError
from .lexer import Lexer


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Lex a Grim source file")
    parser.add_argument("path", type=Path, help="Path to Grim source (.grim)")
    args = parser.parse_args(argv)

    try:
        text = args.path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"error: file not found: {args.path}")
        return 1

    try:
        for t in Lexer(text).tokens():
            print(f"{t.kind.name}\t{t.lexeme!r}\t(line {t.line})")
    except LexicalError as e:
        print(f"lexer error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
