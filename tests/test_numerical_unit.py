"""Tests for the NumPy helpers."""

from sympy import I, Rational, sqrt, symbols

from eqreduce.equations import Equation, Substitution
from eqreduce.numerical import _fmt_num, _format_numeric, check_substitutions_numeric

x, y = symbols("x y")


# ── _fmt_num helper ──────────────────────────────────────────────────────

class TestFmtNum:
    def test_integer(self):
        assert _fmt_num(7.0) == "7"

    def test_clean_decimal(self):
        assert _fmt_num(2.5) == "2.5"

    def test_trailing_zeros_stripped(self):
        assert _fmt_num(1.50000) == "1.5"

    def test_very_small_rounds_to_int(self):
        assert _fmt_num(3.0000000000001) == "3"


class TestFormatNumeric:
    def test_rational(self):
        assert _format_numeric(Rational(1, 4)) == "0.25"

    def test_radical(self):
        assert _format_numeric(sqrt(2)).startswith("1.41421356")

    def test_complex(self):
        assert _format_numeric(1 + 2 * I) == "1 + 2i"
        assert _format_numeric(-I) == "0 - 1i"

    def test_symbolic_falls_back_to_text(self):
        assert _format_numeric(x + 1) == "x + 1"


# ── Sampling verifier ────────────────────────────────────────────────────

class TestCheckSubstitutionsNumeric:
    def test_exact_solution_passes(self):
        eqs = [Equation(x + y - 10), Equation(x - y - 2)]
        substs = (Substitution(y, Rational(4)), Substitution(x, Rational(6)))
        assert check_substitutions_numeric(eqs, substs, seed=0)

    def test_wrong_solution_fails(self):
        eqs = [Equation(x**2 - 2)]
        assert not check_substitutions_numeric(eqs, (Substitution(x, Rational(7, 5)),), seed=0)

    def test_free_symbols_are_sampled(self):
        eqs = [Equation(x + y - 10)]
        assert check_substitutions_numeric(eqs, (Substitution(x, 10 - y),), seed=1)
        assert not check_substitutions_numeric(eqs, (Substitution(x, 10 + y),), seed=1)

    def test_radicals_of_free_symbols(self):
        eqs = [Equation(x**2 - y)]
        assert check_substitutions_numeric(eqs, (Substitution(x, sqrt(y)),),
                                           samples=10, seed=2)
