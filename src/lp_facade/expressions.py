"""Builder-side types: variable handles, linear expressions, constraints.

Linear expressions can be written naturally with ``+ - *`` and ``/`` by a
number on variable handles::

    revenue = 10 * blue + 15 * black
    hours = blue / 40 + black / 30

They are stored as a mapping from variable name to coefficient plus a
constant offset, and are converted to :class:`~lp_facade.schemas.LinearExpr`
when handed to the solver.
"""

from __future__ import annotations

import math
import numbers
from typing import Dict, Iterator, Mapping, Tuple, Union

from pydantic import ConfigDict

from .schemas import Constraint, LinearExpr, LinearTerm, Sense, Variable

_ZERO = 1e-12


class VariableHandle(Variable):
    """A declared continuous variable. Infinite bounds are stored as ``±inf``."""

    model_config = ConfigDict(frozen=True)

    lb: float = 0.0
    ub: float = math.inf
    index: int

    def to_schema(self) -> Variable:
        lb = None if math.isinf(self.lb) else self.lb
        ub = None if math.isinf(self.ub) else self.ub
        return Variable(name=self.name, lb=lb, ub=ub)

    def __add__(self, other):
        return LinearExpression.of(self) + other

    def __radd__(self, other):
        return LinearExpression.of(self) + other

    def __sub__(self, other):
        return LinearExpression.of(self) - other

    def __rsub__(self, other):
        return other + -LinearExpression.of(self)

    def __mul__(self, coef):
        return LinearExpression.of(self) * coef

    def __rmul__(self, coef):
        return LinearExpression.of(self) * coef

    def __truediv__(self, coef):
        return LinearExpression.of(self) / coef

    def __neg__(self):
        return LinearExpression.of(self) * -1.0


class LinearExpression:
    """Weighted sum of variables plus a constant offset."""

    def __init__(self, coeffs: Mapping[str, float] | None = None, constant: float = 0.0) -> None:
        self.coeffs: Dict[str, float] = dict(coeffs or {})
        self.constant = float(constant)

    @classmethod
    def of(cls, value: "ExpressionLike") -> "LinearExpression":
        """Coerce a handle, number, mapping or expression into a LinearExpression."""
        if isinstance(value, LinearExpression):
            return value
        if isinstance(value, VariableHandle):
            return cls({value.name: 1.0})
        if isinstance(value, numbers.Number):
            return cls(constant=float(value))
        if isinstance(value, Mapping):
            expr = cls()
            for key, coef in value.items():
                name = key.name if isinstance(key, VariableHandle) else str(key)
                expr.coeffs[name] = expr.coeffs.get(name, 0.0) + float(coef)
            return expr
        raise TypeError(f"Cannot build a linear expression from {type(value).__name__}.")

    def variables(self) -> Iterator[str]:
        return iter(self.coeffs)

    def to_schema(self) -> LinearExpr:
        terms = [LinearTerm(var=name, coef=coef) for name, coef in self.coeffs.items() if abs(coef) > _ZERO]
        return LinearExpr(terms=terms, constant=self.constant)

    def __add__(self, other):
        rhs = LinearExpression.of(other)
        coeffs = dict(self.coeffs)
        for name, coef in rhs.coeffs.items():
            coeffs[name] = coeffs.get(name, 0.0) + coef
        return LinearExpression(coeffs, self.constant + rhs.constant)

    def __radd__(self, other):
        return self + other

    def __sub__(self, other):
        return self + LinearExpression.of(other) * -1.0

    def __rsub__(self, other):
        return LinearExpression.of(other) + self * -1.0

    def __mul__(self, coef):
        if not isinstance(coef, numbers.Number):
            raise TypeError("Linear expressions can only be multiplied by a number.")
        factor = float(coef)
        return LinearExpression(
            {name: value * factor for name, value in self.coeffs.items()},
            self.constant * factor,
        )

    def __rmul__(self, coef):
        return self * coef

    def __truediv__(self, coef):
        if not isinstance(coef, numbers.Number):
            raise TypeError("Linear expressions can only be divided by a number.")
        return self * (1.0 / float(coef))

    def __neg__(self):
        return self * -1.0

    def __repr__(self) -> str:
        parts = [f"{coef:g}*{name}" for name, coef in self.coeffs.items()]
        if self.constant or not parts:
            parts.append(f"{self.constant:g}")
        return " + ".join(parts)


ExpressionLike = Union[LinearExpression, VariableHandle, Mapping, numbers.Number]


class ConstraintHandle(Constraint):
    model_config = ConfigDict(frozen=True)

    index: int

    def to_schema(self) -> Constraint:
        return Constraint(name=self.name, lhs=self.lhs, cmp=self.cmp, rhs=self.rhs)


class Objective(LinearExpr):
    model_config = ConfigDict(frozen=True)

    sense: Sense


_RELATIONS: Dict[str, str] = {"<=": "<=", ">=": ">=", "==": "==", "=": "=="}
_DIRECTIONS: Dict[str, str] = {
    "max": "max",
    "maximize": "max",
    "maximise": "max",
    "min": "min",
    "minimize": "min",
    "minimise": "min",
}


def normalize_relation(relation: str) -> str:
    try:
        return _RELATIONS[relation.strip()]
    except (KeyError, AttributeError):
        raise ValueError(f"Unsupported relation {relation!r}; expected one of <=, >=, ==.") from None


def normalize_direction(direction: str) -> str:
    try:
        return _DIRECTIONS[direction.strip().lower()]
    except (KeyError, AttributeError):
        raise ValueError(f"Unsupported direction {direction!r}; expected 'max' or 'min'.") from None


def split_bounds(lb: float | None, ub: float | None) -> Tuple[float, float]:
    """Map ``None`` bounds to infinities."""
    lower = -math.inf if lb is None else float(lb)
    upper = math.inf if ub is None else float(ub)
    return lower, upper
