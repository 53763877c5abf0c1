import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from grim.errors import (  # noqa: E402
    DivisionByZeroError,
    IntegerOverflowError,
    TypeMismatchError,
)
from grim.interpreter import Interpreter, run  # noqa: E402
from grim.parser import parse  # noqa: E402
from grim.values import BoolValue, FloatValue, IntValue, StrValue, render  # noqa: E402


def evaluate(code: str):
    """Evaluate a single expression at top level and return its Value."""
    interp = Interpreter(stdout=io.StringIO())
    program = parse(f"let result = {code};")
    interp.run(program)
    return interp.env.lookup("result")


def output(code: str) -> str:
    out = io.StringIO()
    run(code, stdout=out)
    return out.getvalue()


def test_int_arithmetic_stays_int():
    assert evaluate("2 + 3 * 4") == IntValue(14)
    assert evaluate("10 - 15") == IntValue(-5)


@pytest.mark.parametrize(
    "left, right",
    [("2", "3.5"), ("7.25", "4"), ("0", "1.5"), ("123456789", "0.25")],
)
def test_mixed_operands_coerce_to_float(left, right):
    a = float(left)
    b = float(right)
    assert evaluate(f"{left} + {right}") == FloatValue(a + b)
    assert evaluate(f"{left} - {right}") == FloatValue(a - b)
    assert evaluate(f"{left} * {right}") == FloatValue(a * b)


def test_int_division_truncates_toward_zero():
    assert evaluate("7 / 2") == IntValue(3)
    assert evaluate("-7 / 2") == IntValue(-3)
    assert evaluate("7 / -2") == IntValue(-3)


def test_int_modulo_takes_sign_of_dividend():
    assert evaluate("7 % 3") == IntValue(1)
    assert evaluate("-7 % 3") == IntValue(-1)
    assert evaluate("7 % -3") == IntValue(1)


def test_float_division_and_modulo():
    assert evaluate("7.0 / 2") == FloatValue(3.5)
    assert evaluate("7.5 % 2") == FloatValue(1.5)
    assert evaluate("-7.5 % 2") == FloatValue(-1.5)


def test_float_modulo_with_infinite_operand():
    code = """
    let x = 1.0;
    while x * 2.0 > x {
        x = x * 2.0;
    }
    printl(x);
    printl(x % 2.0);
    printl(-x % 2.0);
    printl(3.5 % x);
    """
    assert output(code) == "inf\nNaN\nNaN\n3.5\n"


@pytest.mark.parametrize("code", ["1 / 0", "1 % 0", "1.5 / 0", "2 / 0.0", "3 % 0.0"])
def test_division_by_zero(code):
    with pytest.raises(DivisionByZeroError):
        evaluate(code)


def test_integer_overflow():
    with pytest.raises(IntegerOverflowError):
        evaluate("9223372036854775807 + 1")
    with pytest.raises(IntegerOverflowError):
        evaluate("-9223372036854775807 - 2")
    assert evaluate("-9223372036854775807 - 1") == IntValue(-(2**63))


def test_string_concatenation():
    assert evaluate('"foo" + "bar"') == StrValue("foobar")


@pytest.mark.parametrize(
    "code",
    ['"a" - "b"', '"a" + 1', "1 + true", "true * false", '"x" * 3', "2.0 % true"],
)
def test_arithmetic_type_errors(code):
    with pytest.raises(TypeMismatchError):
        evaluate(code)


def test_numeric_comparisons_coerce():
    assert evaluate("1 == 1.0") == BoolValue(True)
    assert evaluate("2 < 2.5") == BoolValue(True)
    assert evaluate("3 >= 3") == BoolValue(True)
    assert evaluate("3 != 3.0") == BoolValue(False)


def test_coercion_loses_precision_like_float():
    # 2**53 + 1 is not representable as a float
    assert evaluate("9007199254740993 == 9007199254740992.0") == BoolValue(True)
    assert evaluate("9007199254740993 == 9007199254740992") == BoolValue(False)


def test_equality_on_bools_and_strings():
    assert evaluate("true == true") == BoolValue(True)
    assert evaluate('"a" != "b"') == BoolValue(True)
    assert evaluate('"same" == "same"') == BoolValue(True)


@pytest.mark.parametrize(
    "code", ['"a" < "b"', "true > false", "1 == true", '"1" == 1', 'true != "true"']
)
def test_comparison_type_errors(code):
    with pytest.raises(TypeMismatchError):
        evaluate(code)


def test_logical_operators():
    assert evaluate("true && false") == BoolValue(False)
    assert evaluate("false || true") == BoolValue(True)
    assert evaluate("!false") == BoolValue(True)


def test_logical_operands_must_be_bool():
    with pytest.raises(TypeMismatchError):
        evaluate("1 || true")
    with pytest.raises(TypeMismatchError):
        evaluate("true && 0")
    with pytest.raises(TypeMismatchError):
        evaluate("!1")


def test_and_binds_like_multiplication():
    # parses as (true && 1) + 1 == 2, so && sees an Int
    with pytest.raises(TypeMismatchError):
        evaluate("true && 1 + 1 == 2")


def test_logical_operators_short_circuit():
    code = """
    fn boom() -> { printl("boom"); return true; }
    printl(false && boom());
    printl(true || boom());
    printl(true && boom());
    """
    assert output(code) == "false\ntrue\nboom\ntrue\n"


def test_unary_minus_preserves_subtype():
    assert evaluate("-4") == IntValue(-4)
    assert evaluate("-4.5") == FloatValue(-4.5)
    assert evaluate("--4") == IntValue(4)
    with pytest.raises(TypeMismatchError):
        evaluate('-"x"')


def test_call_arguments_evaluated_left_to_right():
    code = """
    fn note(tag) -> { print(tag); return 0; }
    fn pair(a, b) -> { return a + b; }
    printl(pair(note("L"), note("R")));
    """
    assert output(code) == "LR0\n"


@pytest.mark.parametrize(
    "value, text",
    [
        (FloatValue(5.0), "5"),
        (FloatValue(0.1 + 0.2), "0.30000000000000004"),
        (FloatValue(1e20), "100000000000000000000"),
        (FloatValue(1e-7), "0.0000001"),
        (FloatValue(float("inf")), "inf"),
        (FloatValue(float("nan")), "NaN"),
        (IntValue(-12), "-12"),
        (BoolValue(False), "false"),
        (StrValue('say "hi"'), 'say "hi"'),
    ],
)
def test_render(value, text):
    assert render(value) == text
