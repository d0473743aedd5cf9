"""External LP solver backends."""

from .highs import solve_lp

__all__ = ["solve_lp"]
