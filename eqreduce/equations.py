"""Equations, substitutions and the Solution record.

The expression algebra is SymPy.  Everything the reduction engine needs
from it is funnelled through the small set of helpers at the bottom of
this module: number / zero tests, substitution of one variable, and
applying a whole list of substitutions to an equation.
"""

from dataclasses import dataclass, field, replace

import sympy
from sympy import Symbol

from eqreduce.justifications import EMPTY, just_union


@dataclass(frozen=True)
class Equation:
    """Asserts ``expression == 0`` given the premises in *justification*."""

    expression: sympy.Expr
    justification: frozenset = field(default=EMPTY)

    @property
    def free_symbols(self) -> set:
        return self.expression.free_symbols

    def __str__(self) -> str:
        return f"{self.expression} = 0"


@dataclass(frozen=True)
class Substitution:
    """*variable* is permanently replaced by *value* under *justification*."""

    variable: Symbol
    value: sympy.Expr
    justification: frozenset = field(default=EMPTY)

    def __str__(self) -> str:
        return f"{self.variable} = {self.value}"


@dataclass(frozen=True)
class Solution:
    """State of an incremental solve.

    ``substitutions`` are kept most-recent first.  ``residual_variables``
    has set semantics but keeps the caller's order so that the search is
    deterministic.
    """

    residual_equations: tuple = ()
    residual_variables: tuple = ()
    substitutions: tuple = ()
    tough_equations: tuple = ()

    def without_variable(self, variable) -> "Solution":
        return replace(
            self,
            residual_variables=tuple(
                v for v in self.residual_variables if v != variable),
        )

    def substitution_for(self, variable):
        """Return the most recent substitution for *variable*, or None."""
        for subst in self.substitutions:
            if subst.variable == variable:
                return subst
        return None

    def as_dict(self) -> dict:
        return {s.variable: s.value for s in reversed(self.substitutions)}


def make_equation(expression, justification=EMPTY) -> Equation:
    """Lower an expression (or an ``Eq``) into an :class:`Equation`."""
    if isinstance(expression, Equation):
        return expression
    expr = sympy.sympify(expression)
    if isinstance(expr, sympy.Equality):
        expr = expr.lhs - expr.rhs
    return Equation(simplify_expression(expr), frozenset(justification))


# ── Expression subsystem ────────────────────────────────────────────────

def simplify_expression(expr) -> sympy.Expr:
    """Canonical form used after every rewrite.

    Numbers are fully simplified so that ``sqrt(2)**2 - 2`` becomes the
    literal 0; symbolic expressions are expanded, which keeps them in a
    shape ``Poly`` can digest.
    """
    expr = sympy.sympify(expr)
    if expr.is_number:
        return sympy.simplify(expr)
    return sympy.expand(sympy.simplify(expr))


def equation_expression(equation: Equation) -> sympy.Expr:
    return equation.expression


def is_number(expr) -> bool:
    return bool(getattr(sympy.sympify(expr), "is_number", False))


def is_zero(number) -> bool:
    return sympy.sympify(number).is_zero is True


def is_undefined(expr) -> bool:
    """True if *expr* contains ``zoo``, ``nan`` or an infinity.

    Substituting a pole (``1/x`` at ``x = 0``) produces these; they are not
    values any variable can take.
    """
    return sympy.sympify(expr).has(sympy.zoo, sympy.nan, sympy.oo, -sympy.oo)


def backsubstitute_equation(subst: Substitution, equation: Equation) -> Equation:
    """Rewrite *equation* with ``subst.variable`` replaced by ``subst.value``.

    Equations that do not mention the variable are returned untouched; the
    others inherit the substitution's justification.
    """
    if subst.variable not in equation.free_symbols:
        return equation
    return Equation(
        simplify_expression(equation.expression.subs(subst.variable, subst.value)),
        just_union(equation.justification, subst.justification),
    )


def backsubstitute_substitution(subst: Substitution,
                                other: Substitution) -> Substitution:
    """Rewrite the value of *other* with *subst* applied."""
    if subst.variable not in other.value.free_symbols:
        return other
    return Substitution(
        other.variable,
        simplify_expression(other.value.subs(subst.variable, subst.value)),
        just_union(other.justification, subst.justification),
    )


def apply_substitutions_to_equation(equation: Equation,
                                    substitutions) -> Equation:
    """Apply every substitution, most recent first, to *equation*."""
    expr = equation.expression
    justification = equation.justification
    for subst in substitutions:
        if subst.variable in expr.free_symbols:
            expr = expr.subs(subst.variable, subst.value)
            justification = just_union(justification, subst.justification)
    return Equation(simplify_expression(expr), justification)
