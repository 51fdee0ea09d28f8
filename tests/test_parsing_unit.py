import pytest
from sympy import Rational, pi, sqrt, symbols

from eqreduce import parsing

x, y = symbols("x y")


def test_detect_variables_and_expand_implicit_vars() -> None:
    assert parsing._detect_variables("3x + 2 = 7") == ["x"]
    assert parsing._detect_variables("as + in = 1") == ["a", "i", "n", "s"]
    assert parsing._detect_variables("sqrt(x) + pi = y") == ["x", "y"]
    expanded = parsing._expand_implicit_vars("as + in + x", {"a", "s", "i", "n", "x"})
    assert expanded == "a*s + i*n + x"


def test_parse_system_lowers_to_lhs_minus_rhs() -> None:
    equations, var_names = parsing.parse_system("x + y = 10, x - y = 2")
    assert var_names == ["x", "y"]
    assert [eq.expression for eq in equations] == [x + y - 10, x - y - 2]
    assert all(eq.justification == frozenset() for eq in equations)


def test_parse_system_semicolons_powers_and_decimals() -> None:
    equations, _ = parsing.parse_system("x^2 = 4; 0.5y = 1")
    assert [eq.expression for eq in equations] == [x**2 - 4, y / 2 - 1]
    assert equations[1].expression.coeff(y) == Rational(1, 2)


def test_parse_unicode_symbols() -> None:
    (eq,), _ = parsing.parse_system("x = √(2) + π")
    assert eq.expression == x - sqrt(2) - pi


def test_implicit_products() -> None:
    (eq,), _ = parsing.parse_system("xy = 1")
    assert eq.expression == x * y - 1


@pytest.mark.parametrize(
    "text,match",
    [
        ("2x + 3", "must contain '='"),
        ("x = 1 = 2", "exactly one '='"),
        ("3x + 2 = 7$", "Invalid character"),
        ("= 4x", "Both sides"),
        ("2 = 3", "No variable"),
        (" , ", "cannot be empty"),
    ],
)
def test_invalid_input(text: str, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        parsing.parse_system(text)


def test_format_expr() -> None:
    assert parsing._format_expr(2 * x**2 + 3) == "2x² + 3"
    assert parsing._format_expr(sqrt(2) * x) == "√(2)x"
    assert "π" in parsing._format_expr(pi * x)
    assert parsing._to_superscript("12-3") == "¹²⁻³"
