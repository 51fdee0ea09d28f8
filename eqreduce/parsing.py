"""Lowering typed equations into the solver, and display helpers.

Accepts a single equation (``x^2 = 4``) or a system separated by commas or
semicolons (``x + y = 10, x - y = 2``).  Variables are single letters;
adjacent letters multiply (``xy`` means x·y) and decimals are read as exact
rationals so that ``0.5x = 1`` yields ``x = 2`` rather than ``2.0``.
"""

import re

from sympy import symbols
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor, rationalize,
)

from eqreduce.equations import Equation, make_equation

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    rationalize,
)

_ALLOWED_VARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")

# Function and constant names that are never split into variables.
_RESERVED = {
    'sin', 'cos', 'tan', 'log', 'ln', 'exp', 'sqrt',
    'pi', 'PI', 'Pi', 'abs', 'E', 'I',
}


def _normalize_input(text: str) -> str:
    """Map the symbols a user may paste (√, π, brackets) to parser syntax."""
    text = text.replace('√', 'sqrt')
    text = text.replace('π', '(pi)')
    text = text.replace('[', '(').replace(']', ')')
    return text.replace('{', '(').replace('}', ')')


def _validate_characters(text: str) -> None:
    """Reject input containing characters outside the allowed set."""
    allowed = set("abcdefghijklmnopqrstuvwxyz"
                  "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
                  "0123456789"
                  " \t+-*/^=().,;")
    bad = sorted({ch for ch in text if ch not in allowed})
    if bad:
        raise ValueError(
            f"Invalid character(s): {' '.join(bad)}\n"
            f"Only letters, numbers, and math symbols "
            f"(+ - * / ^ = ( ) . , ;) are allowed."
        )


def _detect_variables(text: str) -> list:
    """Return the sorted single-letter variables found in *text*.

    Raises ValueError when there are none.
    """
    candidates = set()
    for tok in re.findall(r'[A-Za-z]+', text.replace('^', '**')):
        if tok in _RESERVED:
            continue
        candidates.update(ch for ch in tok if ch in _ALLOWED_VARS)
    if not candidates:
        raise ValueError("No variable found. Include a letter like x, y, or z.")
    return sorted(candidates)


def _expand_implicit_vars(s: str, var_names: set) -> str:
    """Turn ``xy`` into ``x*y`` when every letter is a known variable, so
    Python keywords such as ``as`` or ``in`` never reach the parser."""
    def _repl(m):
        tok = m.group(0)
        if tok not in _RESERVED and all(ch in var_names for ch in tok):
            return '*'.join(tok)
        return tok
    return re.sub(r'[A-Za-z]+', _repl, s)


def _parse_side(expr_str: str, var_symbols: list):
    """Parse one side of an equation into a SymPy expression."""
    local = {sym.name: sym for sym in var_symbols}
    s = _expand_implicit_vars(expr_str.strip().replace('^', '**'), set(local))
    try:
        return parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ValueError(f"Could not parse expression: '{expr_str}'. Error: {e}")


def parse_equation(eq_str: str, var_symbols: list) -> Equation:
    """Parse ``lhs = rhs`` into the equation ``lhs - rhs = 0``."""
    if '=' not in eq_str:
        raise ValueError(f"Equation must contain '='. Problem: {eq_str}")
    parts = eq_str.split('=')
    if len(parts) != 2:
        raise ValueError(f"Equation must contain exactly one '='. Problem: {eq_str}")
    lhs_str, rhs_str = parts[0].strip(), parts[1].strip()
    if not lhs_str or not rhs_str:
        raise ValueError("Both sides of the equation must have expressions.")
    return make_equation(_parse_side(lhs_str, var_symbols)
                         - _parse_side(rhs_str, var_symbols))


def split_system(text: str) -> list:
    return [eq.strip() for eq in re.split(r'\s*[;,]\s*', text) if eq.strip()]


def parse_system(text: str):
    """Parse a system of equations.

    Returns ``(equations, var_names)`` where *equations* is a list of
    :class:`Equation` in input order and *var_names* the sorted variables.
    """
    text = _normalize_input(text)
    _validate_characters(text)
    raw_equations = split_system(text)
    if not raw_equations:
        raise ValueError("Equation cannot be empty.")
    var_names = _detect_variables(' '.join(raw_equations))
    var_symbols = [symbols(v) for v in var_names]
    return [parse_equation(eq, var_symbols) for eq in raw_equations], var_names


# ── Display helpers ─────────────────────────────────────────────────────

_SUPERSCRIPT = str.maketrans("0123456789+-/()", "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻ᐟ⁽⁾")


def _to_superscript(text: str) -> str:
    return text.translate(_SUPERSCRIPT)


def _format_expr(expr) -> str:
    """Readable rendering: superscript exponents, implicit coefficients,
    ``·`` for remaining products, ``√`` and ``π``."""
    s = str(expr)

    def _sup_repl(m):
        exp_text = m.group(1)
        if exp_text.startswith("(") and exp_text.endswith(")"):
            exp_text = exp_text[1:-1]
        return _to_superscript(exp_text)

    s = re.sub(r'\*\*\(([^)]+)\)', _sup_repl, s)
    s = re.sub(r'\*\*(-?\d+)', _sup_repl, s)
    s = re.sub(r'(\d)\*([A-Za-z])', r'\1\2', s)
    s = re.sub(r'\)\*([A-Za-z])', r')\1', s)
    s = s.replace('*', '·')
    s = re.sub(r'(?<![a-zA-Z])pi(?![a-zA-Z])', 'π', s)
    return s.replace('sqrt(', '√(')


def _format_equation(equation: Equation) -> str:
    return f"{_format_expr(equation.expression)} = 0"