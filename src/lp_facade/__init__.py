"""LP Facade: build continuous linear programs and solve them with HiGHS."""

from .errors import (
    DuplicateConstraintError,
    DuplicateVariableError,
    InvalidBoundsError,
    LPFacadeError,
    ModelError,
    ModelFrozenError,
    ModelStateError,
    NotSolvedError,
    ObjectiveNotSetError,
    SolverError,
    UnknownVariableError,
)
from .expressions import ConstraintHandle, LinearExpression, Objective, VariableHandle
from .model import Model
from .schemas import LPModel, Solution, SolveOptions

__all__ = [
    "Model",
    "VariableHandle",
    "LinearExpression",
    "ConstraintHandle",
    "Objective",
    "LPModel",
    "Solution",
    "SolveOptions",
    "LPFacadeError",
    "ModelError",
    "ModelStateError",
    "DuplicateVariableError",
    "InvalidBoundsError",
    "UnknownVariableError",
    "DuplicateConstraintError",
    "ObjectiveNotSetError",
    "NotSolvedError",
    "ModelFrozenError",
    "SolverError",
]
