# explicit_frame/kernel/compare.py
"""Relative-tolerance comparison of floating point values."""

from dataclasses import dataclass
from numbers import Integral


@dataclass(frozen=True)
class ValueCompare:
    """
    Compare two numbers with a tolerance relative to the larger magnitude.

    Two floats a and b are considered equal when

        |a - b| <= epsilon * max(|a|, |b|)

    Used to decide whether a time step has changed (LHS rebuild) and
    whether a run has reached its end time. Integral arguments are
    compared exactly.

    Args:
        epsilon: Relative tolerance (default 1e-14)
    """
    epsilon: float = 1e-14

    def _scale(self, a, b) -> float:
        return self.epsilon * max(abs(a), abs(b))

    @staticmethod
    def _exact(a, b) -> bool:
        return isinstance(a, Integral) and isinstance(b, Integral)

    def less_than(self, a, b) -> bool:
        """True if a is smaller than b by more than the tolerance."""
        if self._exact(a, b):
            return a < b
        return (b - a) > self._scale(a, b)

    def greater_than(self, a, b) -> bool:
        """True if a is larger than b by more than the tolerance."""
        if self._exact(a, b):
            return a > b
        return (a - b) > self._scale(a, b)

    def equal(self, a, b) -> bool:
        """True if a and b agree to within the tolerance."""
        if self._exact(a, b):
            return a == b
        return abs(a - b) <= self._scale(a, b)
