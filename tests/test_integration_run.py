import os
import subprocess
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

PROGRAM = """let name = "";
print("What is your name? ");
input(name);
printl("hello " + name);
printl(3 / 2.0);
"""


def _grim(*args, input_text=""):
    env = dict(os.environ)
    env["PYTHONPATH"] = str(PROJECT_ROOT / "src") + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "grim.run", *args],
        cwd=PROJECT_ROOT,
        input=input_text,
        capture_output=True,
        text=True,
        timeout=30,
        env=env,
    )


def _write(tmpdir: Path, text: str) -> Path:
    path = tmpdir / "prog.grim"
    path.write_text(text, encoding="utf-8")
    return path


def test_run_end_to_end_with_input():
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = _write(Path(tmpdir), PROGRAM)
        result = _grim(str(src_path), input_text="Student\n")

    assert result.returncode == 0, result.stderr
    assert result.stdout == "What is your name? hello Student\n1.5\n"
    assert result.stderr == ""


def test_runtime_error_exit_code_and_excerpt():
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = _write(Path(tmpdir), "printl(1);\nprintl(1 / 0);\n")
        result = _grim(str(src_path))

    assert result.returncode == 1
    assert result.stdout == "1\n"
    assert "[grim:error] DivisionByZeroError: division by zero at 2:10" in result.stderr
    assert "printl(1 / 0);" in result.stderr


def test_missing_file():
    result = _grim("does/not/exist.grim")
    assert result.returncode == 1
    assert "file not found" in result.stderr


def test_check_mode_does_not_execute():
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = _write(Path(tmpdir), 'printl("ran");\nfn f() -> { return 1; }\n')
        result = _grim("--check", str(src_path))

    assert result.returncode == 0
    assert "ran" not in result.stdout
    assert result.stdout.startswith("ok: 1 function(s)")


def test_ast_mode_prints_canonical_source():
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = _write(Path(tmpdir), "let x=1+2*3;printl(x);")
        result = _grim("--ast", str(src_path))

    assert result.returncode == 0
    assert result.stdout == "let x = (1 + (2 * 3));\nprintl(x);\n"


def test_tokens_mode_and_verbose():
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = _write(Path(tmpdir), "let a = 1;")
        tokens = _grim("--tokens", str(src_path))
        verbose = _grim("--verbose", str(src_path))

    assert tokens.returncode == 0
    assert tokens.stdout.splitlines()[0] == "KEYWORD\t'let'\t(1:1)"
    assert tokens.stdout.splitlines()[-1].startswith("EOF")
    assert verbose.returncode == 0
    assert "[grim] lexing..." in verbose.stderr
    assert "[grim] running..." in verbose.stderr


def test_lex_cli():
    env = dict(os.environ)
    env["PYTHONPATH"] = str(PROJECT_ROOT / "src")
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = _write(Path(tmpdir), "printl(2);")
        result = subprocess.run(
            [sys.executable, "-m", "grim.lex_cli", str(src_path)],
            capture_output=True,
            text=True,
            timeout=30,
            env=env,
        )

    assert result.returncode == 0
    assert result.stdout.splitlines()[0] == "KEYWORD\t'printl'\t(line 1)"


def test_runaway_recursion_reports_grim_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = _write(
            Path(tmpdir), "fn down(n) -> {\n    return down(n - 1);\n}\nprintl(down(0));\n"
        )
        result = _grim(str(src_path))

    assert result.returncode == 1
    assert "[grim:error] StackOverflowError" in result.stderr
    assert "Traceback" not in result.stderr
