"""The reduction step: back-substitute one new substitution everywhere.

After a variable has been isolated, its substitution is pushed through
every residual equation, every tough equation and every earlier
substitution.  Equations that collapse to the literal 0 carry no more
information and are flushed; equations that collapse to any other number
are contradictions and doom the current branch.
"""

import logging
from dataclasses import dataclass, replace

from eqreduce.equations import (
    Equation,
    Solution,
    Substitution,
    apply_substitutions_to_equation,
    backsubstitute_equation,
    backsubstitute_substitution,
    equation_expression,
    is_number,
    is_undefined,
    is_zero,
)
from eqreduce.justifications import describe, just_union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Contradiction:
    """Failure of a branch: *equations* reduced to nonzero constants or ``zoo``."""

    equations: tuple

    ok = False

    @property
    def premises(self) -> frozenset:
        """Every branch premise the contradiction depends on."""
        return just_union(*(eq.justification for eq in self.equations))


def is_tautology(equation: Equation) -> bool:
    expr = equation_expression(equation)
    return is_number(expr) and is_zero(expr)


def is_contradictory_equation(equation: Equation) -> bool:
    """True iff the expression is a nonzero number or is undefined.

    An equation mentioning ``zoo`` or ``nan`` came from substituting a pole,
    so the branch that produced it is invalid.
    """
    expr = equation_expression(equation)
    if is_undefined(expr):
        return True
    return is_number(expr) and not is_zero(expr)


def flush_tautologies(equations) -> tuple:
    """Drop equations whose expression is exactly 0, keeping order."""
    return tuple(eq for eq in equations if not is_tautology(eq))


def use_new_substitution(substitution: Substitution, solution: Solution):
    """Fold *substitution* into *solution*.

    *solution* must already exclude the equation the substitution was
    isolated from.  Returns the reduced :class:`Solution`, with the new
    substitution first, or a :class:`Contradiction` naming every residual
    or tough equation that became a nonzero constant or undefined, and every
    earlier substitution whose value became undefined.
    """
    substitutions = (substitution,) + tuple(
        backsubstitute_substitution(substitution, s)
        for s in solution.substitutions
    )
    equations = flush_tautologies(
        backsubstitute_equation(substitution, eq)
        for eq in solution.residual_equations
    )
    tough = flush_tautologies(
        backsubstitute_equation(substitution, eq)
        for eq in solution.tough_equations
    )

    contradictions = tuple(eq for eq in equations + tough
                           if is_contradictory_equation(eq))
    contradictions += tuple(Equation(s.variable - s.value, s.justification)
                            for s in substitutions if is_undefined(s.value))
    if contradictions:
        logger.debug("%s contradicts %s under %s", substitution,
                     ", ".join(str(eq) for eq in contradictions),
                     describe(just_union(*(eq.justification
                                           for eq in contradictions))))
        return Contradiction(contradictions)

    reduced = replace(
        solution,
        residual_equations=equations,
        substitutions=substitutions,
        tough_equations=tough,
    )
    return reduced.without_variable(substitution.variable)


def correct_substitutions(equations, substitutions) -> bool:
    """True iff every equation reduces to exactly 0 under *substitutions*.

    An equation that still contains symbols after substitution is not
    considered correct.
    """
    for equation in equations:
        expr = equation_expression(
            apply_substitutions_to_equation(equation, substitutions))
        if not (is_number(expr) and is_zero(expr)):
            return False
    return True
