from dataclasses import replace

import pytest
from sympy import Rational, nan, sqrt, symbols, zoo

from eqreduce.equations import Equation, Solution, Substitution
from eqreduce.justifications import Premise
from eqreduce.reduction import (
    Contradiction,
    correct_substitutions,
    flush_tautologies,
    is_contradictory_equation,
    use_new_substitution,
)

x, y, z = symbols("x y z")
PX = Premise("x", "x**2 - 4", 2, "-2")


# ── Tautologies and contradictions ──────────────────────────────────────

def test_flush_tautologies_drops_only_literal_zero() -> None:
    keep1 = Equation(x - 1)
    keep2 = Equation(Rational(3))
    flushed = flush_tautologies([Equation(x - x), keep1, Equation(Rational(0)), keep2])
    assert flushed == (keep1, keep2)


@pytest.mark.parametrize(
    "expr,expected",
    [
        (Rational(-1), True),
        (sqrt(2), True),
        (Rational(0), False),
        (x - 1, False),
        (x * 0, False),
        (zoo, True),
        (y + zoo, True),
        (nan, True),
    ],
)
def test_contradictory_equation(expr, expected) -> None:
    assert is_contradictory_equation(Equation(expr)) is expected


# ── Reduction step ───────────────────────────────────────────────────────

def test_contradiction_is_reported_with_the_offending_equation() -> None:
    solution = Solution(residual_equations=(Equation(x - 2),),
                        residual_variables=(x,))
    outcome = use_new_substitution(Substitution(x, Rational(1)), solution)
    assert isinstance(outcome, Contradiction)
    assert not outcome.ok
    assert len(outcome.equations) == 1
    assert outcome.equations[0].expression == -1


def test_contradictions_from_tough_equations_are_collected_too() -> None:
    solution = Solution(
        residual_equations=(Equation(x - 2), Equation(y - 1)),
        residual_variables=(x, y),
        tough_equations=(Equation(x**3 - 5),),
    )
    outcome = use_new_substitution(Substitution(x, Rational(1), frozenset({PX})),
                                   solution)
    assert isinstance(outcome, Contradiction)
    assert [eq.expression for eq in outcome.equations] == [-1, -4]
    assert outcome.premises == frozenset({PX})


def test_pole_in_an_earlier_substitution_is_a_contradiction() -> None:
    solution = Solution(residual_variables=(x,),
                        substitutions=(Substitution(y, 1 / x),))
    outcome = use_new_substitution(Substitution(x, Rational(0), frozenset({PX})),
                                   solution)
    assert isinstance(outcome, Contradiction)
    assert outcome.premises == frozenset({PX})


def test_successful_reduction_back_substitutes_everywhere() -> None:
    earlier = Substitution(y, 10 - x)
    solution = Solution(
        residual_equations=(Equation(x + z - 7), Equation(x - 3)),
        residual_variables=(x, z),
        substitutions=(earlier,),
        tough_equations=(Equation(x * z - 12),),
    )
    outcome = use_new_substitution(Substitution(x, Rational(3)), solution)
    assert isinstance(outcome, Solution)
    # x - 3 became 0 = 0 and was flushed
    assert [eq.expression for eq in outcome.residual_equations] == [z - 4]
    assert [eq.expression for eq in outcome.tough_equations] == [3 * z - 12]
    assert outcome.residual_variables == (z,)
    assert [s.variable for s in outcome.substitutions] == [x, y]
    assert outcome.substitutions[1].value == 7


def test_substitutions_are_most_recent_first() -> None:
    original = (Equation(x + y - 10), Equation(x - y - 2))
    # x + y - 10 = 0 has been consumed to produce s1
    s1 = Substitution(x, 10 - y)
    step1 = use_new_substitution(
        s1, Solution(residual_equations=original[1:], residual_variables=(x, y)))
    assert [eq.expression for eq in step1.residual_equations] == [8 - 2 * y]

    s2 = Substitution(y, Rational(4))
    step2 = use_new_substitution(s2, replace(step1, residual_equations=()))
    assert [s.variable for s in step2.substitutions] == [y, x]
    assert step2.substitutions[0] is s2
    assert step2.substitutions[1].value == 6
    assert step2.residual_variables == ()
    assert correct_substitutions(original, step2.substitutions)


def test_no_op_equation_leaves_solution_untouched() -> None:
    solution = Solution(residual_equations=(Equation(x - x),),
                        residual_variables=(x, y))
    outcome = use_new_substitution(Substitution(y, Rational(2)), solution)
    assert outcome.residual_equations == ()
    assert outcome.residual_variables == (x,)


# ── Correctness check ────────────────────────────────────────────────────

def test_correct_substitutions_true_and_false() -> None:
    eqs = [Equation(x + y - 10), Equation(x - y - 2)]
    good = (Substitution(y, Rational(4)), Substitution(x, Rational(6)))
    bad = (Substitution(y, Rational(5)), Substitution(x, Rational(6)))
    assert correct_substitutions(eqs, good)
    assert not correct_substitutions(eqs, bad)


def test_unresolved_symbols_are_not_correct() -> None:
    eqs = [Equation(x + y - 10)]
    assert correct_substitutions(eqs, (Substitution(x, 10 - y),))
    assert not correct_substitutions([Equation(x + y + z)], (Substitution(x, Rational(1)),))


def test_correct_substitutions_with_radicals() -> None:
    assert correct_substitutions([Equation(x**2 - 2)], (Substitution(x, -sqrt(2)),))
