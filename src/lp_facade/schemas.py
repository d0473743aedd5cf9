from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import SolverError

Sense = Literal["min", "max"]
Cmp = Literal["<=", ">=", "=="]
Method = Literal["highs", "highs-ds", "highs-ipm"]
Status = Literal["optimal", "infeasible", "unbounded", "error"]


class Variable(BaseModel):
    name: str
    lb: float | None = 0.0
    ub: float | None = None


class LinearTerm(BaseModel):
    var: str
    coef: float


class LinearExpr(BaseModel):
    terms: List[LinearTerm] = Field(default_factory=list)
    constant: float = 0.0


class Constraint(BaseModel):
    name: str
    lhs: LinearExpr
    cmp: Cmp
    rhs: float


class LPModel(BaseModel):
    """Canonical form of a model as handed to the solver backend."""

    name: str = "problem"
    sense: Sense
    objective: LinearExpr
    variables: List[Variable]
    constraints: List[Constraint] = Field(default_factory=list)

    def variable_index(self) -> Dict[str, int]:
        return {var.name: idx for idx, var in enumerate(self.variables)}


class SolveOptions(BaseModel):
    method: Method = "highs"
    max_iters: int = 10_000
    tol: float = 1e-7
    presolve: bool = True
    return_duals: bool = True


class Solution(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Status
    objective_value: Optional[float]
    x: Dict[str, float] | None
    reduced_costs: Dict[str, float] | None = None
    duals: Dict[str, float] | None = None
    iterations: int = 0
    message: str = ""

    @property
    def is_optimal(self) -> bool:
        return self.status == "optimal"

    def value(self, name: str) -> float:
        if self.x is None:
            raise KeyError(f"Solution has no values (status '{self.status}').")
        return self.x[name]

    def raise_for_status(self) -> "Solution":
        """Raise :class:`SolverError` unless the solve was optimal."""
        if not self.is_optimal:
            raise SolverError(self)
        return self
