import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from grim.errors import MissingReturnError  # noqa: E402
from grim.interpreter import run  # noqa: E402

EXAMPLES = ROOT / "examples"

GOOD_SAMPLES = [
    "fizzbuzz.grim",
    "functions.grim",
    "scopes.grim",
    "numbers.grim",
    "greet.grim",
]

NEGATIVE_SAMPLES = [
    ("missing_return.grim", MissingReturnError),
]


@pytest.mark.parametrize("filename", GOOD_SAMPLES)
def test_samples_run_with_expected_output(filename: str):
    sample_path = EXAMPLES / filename
    source = sample_path.read_text(encoding="utf-8")
    stdin_path = sample_path.with_suffix(".in")
    stdin = stdin_path.read_text(encoding="utf-8") if stdin_path.exists() else ""
    expected = sample_path.with_suffix(".out").read_text(encoding="utf-8")

    out = io.StringIO()
    run(source, stdin=io.StringIO(stdin), stdout=out)
    assert out.getvalue() == expected


@pytest.mark.parametrize("filename, error", NEGATIVE_SAMPLES)
def test_negative_samples_raise(filename: str, error):
    source = (EXAMPLES / filename).read_text(encoding="utf-8")
    out = io.StringIO()
    with pytest.raises(error):
        run(source, stdout=out)
    assert out.getvalue() == ""
