"""Step-by-step equation reduction using SymPy.

Parses one equation or a system (``x + y = 10, x - y = 2``), eliminates
the variables one at a time with the incremental driver and turns the
outcome into a human-readable trail:

  - given, method, steps, final_answer, verification_steps, summary
"""

import logging
import time
from datetime import datetime

import numpy as np
import sympy

from eqreduce.driver import NoIsolation, Solved, solve_incremental
from eqreduce.equations import apply_substitutions_to_equation
from eqreduce.justifications import describe
from eqreduce.numerical import _format_numeric, check_substitutions_numeric
from eqreduce.parsing import (
    _format_equation,
    _format_expr,
    _normalize_input,
    parse_system,
    split_system,
)
from eqreduce.reduction import correct_substitutions
from eqreduce.settings import get_settings, merge_settings

logger = logging.getLogger(__name__)


def _render_value(value, compute_mode: str) -> str:
    if compute_mode == "numerical" and value.is_number:
        return _format_numeric(value)
    return _format_expr(value)


def _elimination_steps(solution, compute_mode: str) -> list:
    """One step per substitution, in the order the variables were eliminated.

    Values shown are the final (fully back-substituted) ones.
    """
    steps = []
    for subst in reversed(solution.substitutions):
        value = _render_value(subst.value, compute_mode)
        explanation = (
            f"Isolate {subst.variable} and substitute {subst.variable} = {value} "
            f"into every remaining equation and every earlier result."
        )
        if subst.justification:
            explanation += f" This assumes: {describe(subst.justification)}."
        steps.append({
            "description": f"Eliminate {subst.variable}",
            "expression": f"{subst.variable} = {value}",
            "explanation": explanation,
        })
    return steps


def _final_answer(result, var_names: list, compute_mode: str) -> str:
    if isinstance(result, Solved):
        solution = result.solution
        lines = []
        for name in var_names:
            subst = solution.substitution_for(sympy.Symbol(name))
            if subst is not None:
                lines.append(f"{name} = {_render_value(subst.value, compute_mode)}")
            else:
                lines.append(f"{name} is a free variable")
        for eq in solution.tough_equations:
            lines.append(f"unsolved: {_format_equation(eq)}")
        return "\n".join(lines)
    if isinstance(result, NoIsolation):
        return (
            "Could not isolate any remaining variable in:\n"
            + "\n".join(f"  {_format_equation(eq)}" for eq in result.equations)
        )
    return (
        "No solution — the system is inconsistent.\n"
        + "\n".join(f"  {_format_equation(eq)}" for eq in result.equations)
    )


def _verification_steps(raw_equations, equations, solution) -> list:
    steps = [{
        "description": "Substitute into every equation",
        "expression": "Checking…",
        "explanation": "We plug the solution back into each original equation.",
    }]
    for i, (raw, eq) in enumerate(zip(raw_equations, equations), start=1):
        residual = apply_substitutions_to_equation(eq, solution.substitutions).expression
        ok = residual.is_number and residual.is_zero is True
        steps.append({
            "description": f"Equation ({i}): {raw}",
            "expression": (
                f"LHS − RHS = {_format_expr(residual)}"
                f"  →  {'✓' if ok else '✗'}"
            ),
            "explanation": (
                "Both sides agree." if ok else
                "The difference does not reduce to 0 symbolically."
            ),
        })
    return steps


def solve_equations(equation_str: str, mode=None, settings=None) -> dict:
    """
    Solve one equation or a system by incremental elimination.

    *mode* is ``"symbolic"`` (exact values) or ``"numerical"`` (decimal
    values and a NumPy sampling check); it defaults to the stored
    ``compute_mode`` setting.  *settings* overrides the stored settings.

    Raises ValueError for malformed input.
    """
    t_start = time.perf_counter()

    settings = merge_settings({**get_settings(), **(settings or {})})
    compute_mode = mode or settings["compute_mode"]
    if compute_mode not in ("symbolic", "numerical"):
        raise ValueError(f"Unknown mode: '{compute_mode}'.")

    equations, var_names = parse_system(equation_str)
    raw_equations = split_system(_normalize_input(equation_str))
    result = solve_incremental(equations, var_names, settings)

    steps = [{
        "description": "System of equations" if len(equations) > 1 else "Equation",
        "expression": "\n".join(
            f"  ({i})  {raw}" for i, raw in enumerate(raw_equations, start=1)),
        "explanation": (
            f"We have {len(equations)} equation{'s' if len(equations) != 1 else ''} "
            f"in {', '.join(var_names)}. Each one is rewritten as "
            f"(left side) − (right side) = 0."
        ),
    }]
    verification_steps = []

    if isinstance(result, Solved):
        solution = result.solution
        steps.extend(_elimination_steps(solution, compute_mode))
        verification_steps = _verification_steps(raw_equations, equations, solution)
        if compute_mode == "numerical":
            passed = check_substitutions_numeric(
                equations, solution.substitutions,
                samples=settings["numeric_samples"],
                tolerance=settings["numeric_tolerance"],
            )
        else:
            passed = correct_substitutions(equations, solution.substitutions)
        status = "solved" if not solution.tough_equations else "partial"
    elif isinstance(result, NoIsolation):
        passed = False
        status = "stuck"
        steps.append({
            "description": "No variable can be isolated",
            "expression": "\n".join(_format_equation(eq) for eq in result.equations),
            "explanation": (
                "None of the remaining equations can be solved exactly for "
                "one of the remaining variables. This does not mean the "
                "system has no solution."
            ),
        })
    else:
        passed = False
        status = "inconsistent"
        steps.append({
            "description": "Contradiction — No Solution",
            "expression": "\n".join(_format_equation(eq) for eq in result.equations),
            "explanation": (
                "After substitution these equations say that a nonzero "
                "number equals 0, which is never true."
                + (f" The failing branch assumed: {describe(result.premises)}."
                   if result.premises else "")
            ),
        })

    for i, s in enumerate(steps, 1):
        s["step_number"] = i
    for i, s in enumerate(verification_steps, 1):
        s["step_number"] = i

    runtime_ms = round((time.perf_counter() - t_start) * 1000, 2)
    logger.info("solved %r in %.2f ms: %s", equation_str, runtime_ms, status)

    library = (f"SymPy {sympy.__version__} + NumPy {np.__version__}"
               if compute_mode == "numerical" else f"SymPy {sympy.__version__}")

    return {
        "equation": equation_str,
        "given": {
            "problem": "Solve the system by successive elimination",
            "inputs": {
                "equations": equation_str,
                "number_of_equations": str(len(equations)),
                "variables": ", ".join(var_names),
                "number_of_variables": str(len(var_names)),
                "computation": ("Numerical (NumPy check)"
                                if compute_mode == "numerical"
                                else "Symbolic (SymPy)"),
            },
        },
        "method": {
            "name": "Incremental Elimination",
            "description": (
                "Isolate one variable at a time, substitute it everywhere, "
                "and branch on every root when there is more than one."
            ),
            "parameters": {
                "variables": ", ".join(var_names),
                "approach": "Isolate → Back-substitute → Flush → Repeat",
            },
        },
        "steps": steps,
        "final_answer": _final_answer(result, var_names, compute_mode),
        "verification_steps": verification_steps,
        "summary": {
            "status": status,
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "validation_status": "pass" if passed else "fail",
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": library,
            "python": None,
        },
    }
