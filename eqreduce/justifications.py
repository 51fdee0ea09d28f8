"""Premises and justification sets.

A *premise* records one branch choice taken during a case split, e.g.
"took root 2 of x**2 - 4 for x".  A justification set is the (unordered)
collection of premises a derived fact depends on.  When an equation
collapses to a nonzero constant, the union of the justifications of the
offending equations names the branch decisions to blame.
"""

from dataclasses import dataclass
from functools import reduce

EMPTY = frozenset()


@dataclass(frozen=True)
class Premise:
    """One branch choice: *variable* took root number *root* of *equation*."""

    variable: str
    equation: str
    root: int
    value: str

    def __str__(self) -> str:
        return (f"{self.variable} = {self.value} "
                f"(root {self.root} of {self.equation} = 0)")


def just_union(*justifications) -> frozenset:
    """Union any number of justification sets.

    Commutative and idempotent; ``None`` is treated as the empty set.
    """
    return reduce(lambda acc, j: acc | frozenset(j or ()), justifications, EMPTY)


def describe(justification) -> str:
    """Human-readable, stable rendering of a justification set."""
    if not justification:
        return "no assumptions"
    return "; ".join(sorted(str(p) for p in justification))
