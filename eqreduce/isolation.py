"""Isolation of a single variable from an equation.

``isolatable`` is the algebra oracle: given a variable and an expression
it yields every candidate value of the variable that makes the expression
vanish, as long as it can find them with exact methods.  It yields nothing
when it cannot (that is *not* a proof that no solution exists).

``isolate_var`` wraps each candidate into a :class:`Substitution` tagged
with the premises it depends on.  When the oracle offers several roots,
every root also carries a :class:`Premise` naming the branch it opens.
"""

from collections import namedtuple

import sympy
from sympy import Poly, PolynomialError, default_sort_key, fraction, sqrt, together

from eqreduce.equations import Equation, Substitution, is_undefined, simplify_expression
from eqreduce.justifications import EMPTY, Premise, just_union

Root = namedtuple("Root", "value index count")

Candidate = namedtuple("Candidate", "substitution premise")


def _as_polynomial(numerator, var):
    """Return ``Poly(numerator, var)`` or None if it is not a polynomial in *var*."""
    try:
        poly = Poly(numerator, var)
    except PolynomialError:
        return None
    if poly.degree() < 1:
        return None
    return poly


def _quadratic_roots(poly) -> list:
    a, b, c = poly.all_coeffs()
    disc = simplify_expression(b**2 - 4 * a * c)
    if disc.is_zero:
        return [-b / (2 * a)]
    return [(-b + sqrt(disc)) / (2 * a), (-b - sqrt(disc)) / (2 * a)]


def _is_pure_power(poly) -> bool:
    """True for ``a*v**n + b`` (only the leading and constant terms)."""
    monoms = [m for m, _ in poly.terms()]
    return len(monoms) <= 2 and all(m[0] in (0, poly.degree()) for m in monoms)


def _higher_roots(poly, var, complex_roots: bool = True) -> list:
    degree = poly.degree()
    if _is_pure_power(poly):
        lead = poly.LC()
        const = poly.coeff_monomial(1)
        base = -const / lead
        if base.is_number:
            found = sympy.roots(poly, var)
            if sum(found.values()) == degree:
                return list(found)
        # symbolic base: the n-th roots of unity times one principal root
        principal = sympy.root(base, degree)
        if not complex_roots:
            # the other roots of unity are never real
            return [principal, -principal] if degree % 2 == 0 else [principal]
        return [principal * sympy.exp(2 * sympy.pi * sympy.I * k / degree)
                for k in range(degree)]
    if not all(c.is_number for c in poly.all_coeffs()):
        return []
    found = sympy.roots(poly, var)
    if sum(found.values()) != degree:
        return []
    return list(found)


def _order_roots(values) -> list:
    """Deduplicate, real roots first, then by SymPy's canonical order."""
    unique = []
    for value in values:
        value = simplify_expression(value)
        if value not in unique:
            unique.append(value)
    return sorted(unique, key=lambda v: (v.is_real is False, default_sort_key(v))) \
        if len(unique) > 2 else unique


def isolatable(var, expression, complex_roots: bool = True):
    """Yield a :class:`Root` for every value of *var* that zeroes *expression*.

    Handles linear equations, quadratics (``+`` root first), pure powers
    ``a*v**n + b`` and polynomials with numeric coefficients that SymPy can
    solve completely by radicals.  The leading coefficient must be a
    nonzero number; dividing by a symbolic quantity would silently assume
    it is nonzero.

    With *complex_roots* off, roots known to be non-real are dropped.  For
    ``a*v**n + b`` with a symbolic base only the principal root (and its
    negative when *n* is even) is kept, since the reality of the others
    cannot be decided.
    """
    numerator, denominator = fraction(together(sympy.sympify(expression)))
    if var not in numerator.free_symbols:
        return
    poly = _as_polynomial(numerator, var)
    if poly is None:
        return
    lead = poly.LC()
    if not lead.is_number or lead.is_zero:
        return

    if poly.degree() == 1:
        values = [-poly.coeff_monomial(1) / lead]
    elif poly.degree() == 2:
        values = _quadratic_roots(poly)
    else:
        values = _higher_roots(poly, var, complex_roots)

    values = [v for v in _order_roots(values) if not is_undefined(v)]
    if not complex_roots:
        values = [v for v in values if v.is_real is not False]
    if var in denominator.free_symbols:
        values = [v for v in values
                  if not simplify_expression(denominator.subs(var, v)).is_zero]

    for index, value in enumerate(values, start=1):
        yield Root(value, index, len(values))


def isolate_var(var, equation: Equation, root_premises=EMPTY,
                complex_roots: bool = True):
    """Yield a :class:`Candidate` per root of *equation* solved for *var*.

    Each substitution is justified by the ambient *root_premises* plus the
    equation's own justification.  With more than one root, each candidate
    also gets a branch premise, added to its justification and returned so
    the caller can push it onto the premises of that branch.
    """
    base = just_union(root_premises, equation.justification)
    for root in isolatable(var, equation.expression, complex_roots):
        premise = None
        justification = base
        if root.count > 1:
            premise = Premise(str(var), str(equation.expression),
                              root.index, str(root.value))
            justification = just_union(base, {premise})
        yield Candidate(Substitution(var, root.value, justification), premise)
