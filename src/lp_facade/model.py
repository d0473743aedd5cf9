"""Builder and solver facade for continuous linear programs.

A :class:`Model` is created empty, populated with variables, constraints and
one objective, and then solved once::

    model = Model("paint")
    blue = model.declare_variable("BluePaint", 0, 860)
    black = model.declare_variable("BlackPaint", 0, 1000)
    model.add_constraint(blue / 40 + black / 30, "<=", 40)
    model.set_objective(10 * blue + 15 * black, "max")
    solution = model.solve()

Solving freezes the model. Use :meth:`Model.copy` to rebuild a variant.
"""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from typing import Iterable, List, Literal, Optional, Sequence, Union

from .errors import (
    DuplicateConstraintError,
    DuplicateVariableError,
    InvalidBoundsError,
    ModelFrozenError,
    NotSolvedError,
    ObjectiveNotSetError,
    SolverError,
    UnknownVariableError,
)
from .expressions import (
    ConstraintHandle,
    ExpressionLike,
    LinearExpression,
    Objective,
    VariableHandle,
    normalize_direction,
    normalize_relation,
    split_bounds,
)
from .schemas import LinearExpr, LPModel, Solution, SolveOptions
from .solvers import solve_lp

logger = logging.getLogger(__name__)

ModelState = Literal["building", "optimal", "infeasible", "unbounded", "failed"]
Bound = Optional[float]
BoundSpec = Union[Bound, Sequence[Bound]]


class Model:
    """A linear program under construction, and its single solve."""

    def __init__(self, name: str = "problem") -> None:
        self.name = name
        self._variables: "OrderedDict[str, VariableHandle]" = OrderedDict()
        self._constraints: "OrderedDict[str, ConstraintHandle]" = OrderedDict()
        self._objective: Optional[Objective] = None
        self._state: ModelState = "building"
        self._solution: Optional[Solution] = None
        self._failure: Optional[SolverError] = None

    # -- inspection -----------------------------------------------------

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def variables(self) -> List[VariableHandle]:
        return list(self._variables.values())

    @property
    def constraints(self) -> List[ConstraintHandle]:
        return list(self._constraints.values())

    @property
    def objective(self) -> Optional[Objective]:
        return self._objective

    @property
    def solution(self) -> Optional[Solution]:
        return self._solution

    def variable(self, name: Union[str, int]) -> VariableHandle:
        key = str(name)
        if key not in self._variables:
            raise UnknownVariableError(key, where="Lookup")
        return self._variables[key]

    def __repr__(self) -> str:
        return (
            f"Model(name={self.name!r}, variables={len(self._variables)}, "
            f"constraints={len(self._constraints)}, state={self._state!r})"
        )

    # -- building -------------------------------------------------------

    def declare_variable(
        self,
        name: Union[str, int],
        lower_bound: Bound = 0.0,
        upper_bound: Bound = math.inf,
    ) -> VariableHandle:
        """Register a continuous variable with bounds ``[lower_bound, upper_bound]``.

        ``None`` means unbounded on that side. Raises
        :class:`DuplicateVariableError` or :class:`InvalidBoundsError` without
        touching the model.
        """
        self._ensure_building()
        key = str(name)
        lb, ub = self._check_declaration(key, lower_bound, upper_bound)
        handle = VariableHandle(name=key, lb=lb, ub=ub, index=len(self._variables))
        self._variables[key] = handle
        logger.debug("%s: declared %s in [%s, %s]", self.name, key, lb, ub)
        return handle

    def declare_variables(
        self,
        names: Union[int, Iterable[Union[str, int]]],
        lower_bound: BoundSpec = 0.0,
        upper_bound: BoundSpec = math.inf,
        prefix: str = "x",
    ) -> List[VariableHandle]:
        """Vector-style declaration of several variables at once.

        ``names`` is either a count, giving ``prefix[0] ... prefix[n-1]``, or
        an iterable of names. Bounds are scalars shared by all variables or
        sequences with one entry per variable. Everything is validated before
        the first variable is registered.
        """
        self._ensure_building()
        if isinstance(names, int):
            keys = [f"{prefix}[{i}]" for i in range(names)]
        else:
            keys = [str(name) for name in names]
        lowers = _broadcast(lower_bound, len(keys), "lower_bound")
        uppers = _broadcast(upper_bound, len(keys), "upper_bound")

        seen = set()
        checked = []
        for key, lo, hi in zip(keys, lowers, uppers):
            if key in seen:
                raise DuplicateVariableError(key)
            seen.add(key)
            checked.append((key, *self._check_declaration(key, lo, hi)))

        handles = []
        for key, lb, ub in checked:
            handle = VariableHandle(name=key, lb=lb, ub=ub, index=len(self._variables))
            self._variables[key] = handle
            handles.append(handle)
        logger.debug("%s: declared %d variables", self.name, len(handles))
        return handles

    def add_constraint(
        self,
        expression: ExpressionLike,
        relation: str,
        bound: float,
        name: Optional[str] = None,
    ) -> ConstraintHandle:
        """Append ``expression <relation> bound``; unnamed constraints become ``c1, c2, ...``."""
        self._ensure_building()
        cmp = normalize_relation(relation)
        expr = LinearExpression.of(expression)
        cons_name = name if name is not None else self._next_constraint_name()
        if cons_name in self._constraints:
            raise DuplicateConstraintError(cons_name)
        self._check_references(expr, where=f"Constraint '{cons_name}'")

        handle = ConstraintHandle(
            name=cons_name,
            lhs=expr.to_schema(),
            cmp=cmp,
            rhs=float(bound),
            index=len(self._constraints),
        )
        self._constraints[cons_name] = handle
        logger.debug("%s: added constraint %s: %r %s %s", self.name, cons_name, expr, cmp, bound)
        return handle

    def set_objective(self, expression: ExpressionLike, direction: str) -> Objective:
        """Set the objective, replacing any previous one."""
        self._ensure_building()
        sense = normalize_direction(direction)
        expr = LinearExpression.of(expression)
        self._check_references(expr, where="Objective")
        if self._objective is not None:
            logger.debug("%s: replacing objective", self.name)
        schema = expr.to_schema()
        self._objective = Objective(terms=schema.terms, constant=schema.constant, sense=sense)
        return self._objective

    # -- solving --------------------------------------------------------

    def solve(self, options: Optional[SolveOptions] = None) -> Solution:
        """Make one call to the external solver and freeze the model.

        Returns the Solution for ``optimal``, ``infeasible`` and ``unbounded``
        outcomes. Any other outcome moves the model to ``failed`` and raises
        :class:`SolverError`. A second call returns the first result.
        """
        if self._state == "failed":
            raise self._failure
        if self._solution is not None:
            return self._solution
        if self._objective is None:
            raise ObjectiveNotSetError()

        lp = self.to_schema()
        try:
            solution = solve_lp(lp, options)
        except Exception as exc:
            failed = Solution(status="error", objective_value=None, x=None, message=str(exc))
            self._fail(SolverError(failed))
            raise self._failure from exc

        if solution.status == "error":
            self._fail(SolverError(solution))
            raise self._failure

        self._solution = solution
        self._state = solution.status
        if solution.is_optimal:
            logger.info("%s: optimal, objective %.6g", self.name, solution.objective_value)
        else:
            logger.warning("%s: solver reported %s", self.name, solution.status)
        return solution

    def value(self, variable: Union[VariableHandle, str, int]) -> float:
        """Optimal value of ``variable``; requires an optimal solve."""
        key = variable.name if isinstance(variable, VariableHandle) else str(variable)
        solution = self._require_optimal()
        if key not in self._variables:
            raise UnknownVariableError(key, where="Lookup")
        return solution.value(key)

    def objective_value(self) -> float:
        return self._require_optimal().objective_value

    # -- conversion -----------------------------------------------------

    def to_schema(self) -> LPModel:
        """Serialise to the canonical form understood by the solver backends."""
        if self._objective is None:
            raise ObjectiveNotSetError()
        return LPModel(
            name=self.name,
            sense=self._objective.sense,
            objective=LinearExpr(terms=list(self._objective.terms), constant=self._objective.constant),
            variables=[var.to_schema() for var in self._variables.values()],
            constraints=[cons.to_schema() for cons in self._constraints.values()],
        )

    @classmethod
    def from_schema(cls, lp: LPModel) -> "Model":
        """Build a model from an :class:`LPModel`, validating it on the way."""
        model = cls(lp.name)
        for var in lp.variables:
            model.declare_variable(var.name, var.lb, var.ub)
        for cons in lp.constraints:
            model.add_constraint(_from_linear_expr(cons.lhs), cons.cmp, cons.rhs, name=cons.name)
        model.set_objective(_from_linear_expr(lp.objective), lp.sense)
        return model

    def copy(self, name: Optional[str] = None) -> "Model":
        """Return an unsolved model with the same variables, constraints and objective."""
        clone = Model(name or self.name)
        clone._variables = OrderedDict(self._variables)
        clone._constraints = OrderedDict(self._constraints)
        clone._objective = self._objective
        return clone

    # -- internals ------------------------------------------------------

    def _ensure_building(self) -> None:
        if self._state != "building":
            raise ModelFrozenError(self._state)

    def _check_declaration(self, key: str, lower_bound: Bound, upper_bound: Bound):
        if key in self._variables:
            raise DuplicateVariableError(key)
        lb, ub = split_bounds(lower_bound, upper_bound)
        if math.isnan(lb) or math.isnan(ub) or lb > ub or lb == math.inf or ub == -math.inf:
            raise InvalidBoundsError(key, lb, ub)
        return lb, ub

    def _next_constraint_name(self) -> str:
        k = len(self._constraints) + 1
        while f"c{k}" in self._constraints:
            k += 1
        return f"c{k}"

    def _check_references(self, expr: LinearExpression, where: str) -> None:
        for name in expr.variables():
            if name not in self._variables:
                raise UnknownVariableError(name, where=where)

    def _require_optimal(self) -> Solution:
        if self._state != "optimal" or self._solution is None:
            raise NotSolvedError(self._state)
        return self._solution

    def _fail(self, error: SolverError) -> None:
        self._state = "failed"
        self._failure = error
        logger.error("%s: solver failed: %s", self.name, error)


def _broadcast(bound: BoundSpec, count: int, label: str) -> List[Bound]:
    if bound is None or isinstance(bound, (int, float)):
        return [bound] * count
    values = list(bound)
    if len(values) != count:
        raise ValueError(f"{label} has {len(values)} entries for {count} variables.")
    return values


def _from_linear_expr(lhs: LinearExpr) -> LinearExpression:
    expr = LinearExpression(constant=lhs.constant)
    for term in lhs.terms:
        expr.coeffs[term.var] = expr.coeffs.get(term.var, 0.0) + term.coef
    return expr
