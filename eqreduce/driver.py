"""Incremental solving driver.

Repeatedly picks an (equation, variable) pair that can be isolated, folds
each candidate value into the system with the reduction step and recurses
on the smaller system.  Multiple roots are explored one after the other:
the generator returned by ``isolate_var`` is the list of choice points, and
moving on to its next item is the backtrack.

Selection policy (deterministic):

1. equations mentioning the fewest residual variables come first (stable
   with respect to their current order);
2. inside an equation, variables of lowest polynomial degree come first
   (``prefer_low_degree``), then the caller's declaration order;
3. pairs are tried in that order.  Equations examined before the current
   one that could not be solved for any variable join the tough set and
   are re-queued after the elimination succeeds.  When every root of a
   pair ends up stuck, the next pair is tried; when every root
   contradicts, the system has no solution and the search stops there.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

import sympy
from sympy import Poly, PolynomialError, Symbol

from eqreduce.equations import Equation, Solution, make_equation
from eqreduce.isolation import isolate_var
from eqreduce.justifications import EMPTY, describe, just_union
from eqreduce.reduction import (
    Contradiction,
    correct_substitutions,
    flush_tautologies,
    is_contradictory_equation,
    use_new_substitution,
)
from eqreduce.settings import merge_settings

logger = logging.getLogger(__name__)


class SearchLimitExceeded(RuntimeError):
    """Raised when a solve needs more reduction steps than ``max_steps``."""


@dataclass(frozen=True)
class Solved:
    solution: Solution
    premises: frozenset = field(default=EMPTY)
    verified: Optional[bool] = None

    ok = True

    @property
    def free_variables(self) -> tuple:
        return self.solution.residual_variables


@dataclass(frozen=True)
class NoIsolation:
    """No equation could be solved for any remaining variable."""

    equations: tuple
    contradictions: tuple = ()

    ok = False


@dataclass(frozen=True)
class SearchContext:
    """Branch-local state.  Immutable: a child branch gets a new context."""

    root_premises: frozenset = field(default=EMPTY)
    depth: int = 0

    def enter(self, premise) -> "SearchContext":
        premises = self.root_premises
        if premise is not None:
            premises = just_union(premises, {premise})
        return SearchContext(premises, self.depth + 1)


def _degree(expression, var) -> float:
    try:
        return Poly(expression, var).degree()
    except PolynomialError:
        return float("inf")


def _dedupe(equations) -> tuple:
    seen = []
    for eq in equations:
        if eq not in seen:
            seen.append(eq)
    return tuple(seen)


class _Search:

    def __init__(self, settings: dict):
        self.settings = settings
        self.steps = 0

    def _tick(self) -> None:
        self.steps += 1
        if self.steps > self.settings["max_steps"]:
            raise SearchLimitExceeded(
                f"Gave up after {self.settings['max_steps']} reduction steps."
            )

    def _mentioned(self, equation: Equation, variables) -> list:
        names = equation.free_symbols
        mentioned = [v for v in variables if v in names]
        if self.settings["prefer_low_degree"]:
            mentioned.sort(key=lambda v: _degree(equation.expression, v))
        return mentioned

    def run(self, solution: Solution, ctx: SearchContext):
        if not solution.residual_equations:
            if solution.tough_equations and not self.settings["partial_ok"]:
                return NoIsolation(solution.tough_equations)
            logger.debug("branch at depth %d solved", ctx.depth)
            return Solved(solution, ctx.root_premises)

        variables = solution.residual_variables
        ordered = sorted(
            solution.residual_equations,
            key=lambda eq: len(self._mentioned(eq, variables)),
        )
        unusable = []
        tried = []
        failures = []
        for index, equation in enumerate(ordered):
            isolated = False
            for var in self._mentioned(equation, variables):
                candidates = isolate_var(var, equation, ctx.root_premises,
                                         self.settings["complex_roots"])
                first = next(candidates, None)
                if first is None:
                    continue
                isolated = True
                rest = replace(
                    solution,
                    residual_equations=tuple(tried) + tuple(ordered[index + 1:]),
                    tough_equations=solution.tough_equations + tuple(unusable),
                )
                result = self._branch(rest, ctx, first, candidates)
                if not isinstance(result, NoIsolation):
                    return result
                logger.debug("stuck below %s solved for %s, trying the next pair",
                             equation, var)
                failures.append(result)
            (tried if isolated else unusable).append(equation)

        if failures:
            return _combine(failures)
        stuck = solution.tough_equations + tuple(unusable)
        logger.debug("stuck at depth %d on %s", ctx.depth,
                     ", ".join(str(eq) for eq in stuck))
        if self.settings["partial_ok"]:
            return Solved(replace(solution, residual_equations=(),
                                  tough_equations=stuck), ctx.root_premises)
        return NoIsolation(stuck)

    def _branch(self, rest: Solution, ctx: SearchContext, first, candidates):
        failures = []
        for candidate in _chain(first, candidates):
            self._tick()
            subst = candidate.substitution
            outcome = use_new_substitution(subst, rest)
            if isinstance(outcome, Contradiction):
                failures.append(outcome)
                continue
            logger.debug("eliminated %s (depth %d, %s)", subst, ctx.depth,
                         describe(subst.justification))
            # tough equations are retried once the system has shrunk
            requeued = replace(
                outcome,
                residual_equations=(outcome.residual_equations
                                    + outcome.tough_equations),
                tough_equations=(),
            )
            result = self.run(requeued, ctx.enter(candidate.premise))
            if result.ok:
                return result
            logger.debug("backtracking from %s", subst)
            failures.append(result)
        return _combine(failures)


def _chain(first, rest):
    yield first
    yield from rest


def _combine(failures):
    contradictions = []
    stuck = []
    for failure in failures:
        if isinstance(failure, Contradiction):
            contradictions.extend(failure.equations)
        else:
            stuck.extend(failure.equations)
            contradictions.extend(failure.contradictions)
    if stuck:
        return NoIsolation(_dedupe(stuck), _dedupe(contradictions))
    return Contradiction(_dedupe(contradictions))


def _as_symbol(variable) -> Symbol:
    if isinstance(variable, Symbol):
        return variable
    return sympy.Symbol(str(variable))


def solve_incremental(equations, variables, settings=None):
    """Solve *equations* for *variables* by successive elimination.

    *equations* may be :class:`Equation` objects or anything SymPy can
    turn into an expression (an ``Eq`` is read as ``lhs - rhs``).

    Returns :class:`Solved`, :class:`Contradiction` or
    :class:`NoIsolation`.  Raises :class:`SearchLimitExceeded` when the
    search needs more than ``max_steps`` reduction steps.
    """
    settings = merge_settings(settings)
    lowered = tuple(make_equation(eq) for eq in equations)
    symbols = tuple(dict.fromkeys(_as_symbol(v) for v in variables))

    initial = flush_tautologies(lowered)
    contradictions = tuple(eq for eq in initial if is_contradictory_equation(eq))
    if contradictions:
        logger.info("input is inconsistent: %s",
                    ", ".join(str(eq) for eq in contradictions))
        return Contradiction(contradictions)

    search = _Search(settings)
    result = search.run(Solution(residual_equations=initial,
                                 residual_variables=symbols),
                        SearchContext())

    if isinstance(result, Solved) and settings["verify"]:
        result = replace(result, verified=correct_substitutions(
            lowered, result.solution.substitutions))
    logger.info("solve finished after %d step(s): %s", search.steps,
                type(result).__name__)
    return result


if __name__ == "__main__":
    # Quick demo
    x, y = sympy.symbols("x y")
    demos = [
        ([x + y - 10, x - y - 2], [x, y]),
        ([x**2 - 4, y - x - 1], [x, y]),
        ([x - 1, x - 2], [x]),
        ([x * y - 1, y - 2], [x, y]),
    ]
    for eqs, vs in demos:
        print(f"\n{'='*50}")
        print("Solving:", ", ".join(f"{e} = 0" for e in eqs))
        print('='*50)
        outcome = solve_incremental(eqs, vs)
        if outcome.ok:
            for subst in reversed(outcome.solution.substitutions):
                print(f"  {subst}")
        else:
            print(f"  {type(outcome).__name__}:",
                  ", ".join(str(eq) for eq in outcome.equations))
