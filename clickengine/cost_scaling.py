from __future__ import annotations

import math
from typing import Callable


class CostScaling:
    """Determines the next price of an upgrade from the price just paid."""

    def __init__(self, fn: Callable[[float], float]) -> None:
        self._fn = fn

    def next_cost(self, current_cost: float) -> float:
        return self._fn(current_cost)

    @classmethod
    def fixed(cls) -> CostScaling:
        """Cost never changes."""
        return cls(lambda cost: cost)

    @classmethod
    def geometric(cls, factor: float, integral: bool = False) -> CostScaling:
        """Cost = cost * factor, floored to a whole number if *integral*."""
        f = factor  # capture

        def _next(cost: float) -> float:
            if integral:
                return float(math.floor(cost * f))
            return cost * f

        return cls(_next)

    @classmethod
    def custom(cls, fn: Callable[[float], float]) -> CostScaling:
        """Arbitrary cost function."""
        return cls(fn)
