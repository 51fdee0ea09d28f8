"""Numerical (approximate) helpers using NumPy.

Symbolic simplification can fail to bring a correct residual down to the
literal 0 (nested radicals, symbolic roots of unity).  The sampling check
below lambdifies the residuals with the NumPy backend and evaluates them at
random points for whatever symbols are left free.
"""

import numpy as np
from sympy import lambdify, sympify

from eqreduce.equations import apply_substitutions_to_equation

_SAMPLE_LOW, _SAMPLE_HIGH = -10.0, 10.0


# ── Numeric formatting helpers ──────────────────────────────────────────

def _fmt_num(value: float, max_decimals: int = 10) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    """
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    return f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")


def _format_numeric(value) -> str:
    """Convert a SymPy expression to its numeric (decimal) string."""
    try:
        f = complex(sympify(value))
    except (TypeError, ValueError):
        return str(value)
    if abs(f.imag) > 1e-12:
        sign = "+" if f.imag >= 0 else "-"
        return f"{_fmt_num(f.real)} {sign} {_fmt_num(abs(f.imag))}i"
    return _fmt_num(f.real)


# ── Sampling verifier ───────────────────────────────────────────────────

def check_substitutions_numeric(equations, substitutions, samples: int = 5,
                                tolerance: float = 1e-9, seed=None) -> bool:
    """True iff every equation's residual is within *tolerance* of zero.

    Free symbols left after substitution are sampled uniformly in
    [-10, 10].  Samples that evaluate to inf/nan are skipped; an equation
    with no finite sample at all fails.
    """
    rng = np.random.default_rng(seed)
    for equation in equations:
        residual = apply_substitutions_to_equation(equation, substitutions).expression
        free = sorted(residual.free_symbols, key=lambda s: s.name)
        func = lambdify(free, residual, "numpy")
        finite = 0
        for _ in range(max(1, samples)):
            # complex points keep sqrt and log of negatives finite
            point = rng.uniform(_SAMPLE_LOW, _SAMPLE_HIGH, size=len(free)).astype(complex)
            with np.errstate(all="ignore"):
                value = np.complex128(func(*point))
            if not np.isfinite(value):
                continue
            finite += 1
            if abs(value) > tolerance * max(1.0, float(np.max(np.abs(point), initial=0.0))):
                return False
        if finite == 0:
            return False
    return True
