from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .schemas import Solution


class LPFacadeError(Exception):
    """Base class for every error raised by lp_facade."""


class ModelError(LPFacadeError, ValueError):
    """Invalid input while building a model."""


class DuplicateVariableError(ModelError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Variable '{name}' is already declared.")
        self.name = name


class InvalidBoundsError(ModelError):
    def __init__(self, name: str, lb: float, ub: float) -> None:
        super().__init__(f"Variable {name} has inconsistent bounds (lb {lb} > ub {ub}).")
        self.name = name
        self.lb = lb
        self.ub = ub


class UnknownVariableError(ModelError):
    def __init__(self, name: str, where: str = "Expression") -> None:
        super().__init__(f"{where} references unknown variable '{name}'.")
        self.name = name


class DuplicateConstraintError(ModelError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Constraint '{name}' is already declared.")
        self.name = name


class ObjectiveNotSetError(ModelError):
    def __init__(self) -> None:
        super().__init__("Model has no objective; call set_objective() before solve().")


class ModelStateError(LPFacadeError, RuntimeError):
    """Operation not allowed in the model's current state."""


class NotSolvedError(ModelStateError):
    def __init__(self, state: str) -> None:
        super().__init__(f"No optimal solution available (model state '{state}').")
        self.state = state


class ModelFrozenError(ModelStateError):
    def __init__(self, state: str) -> None:
        super().__init__(f"Model is frozen after solve (state '{state}'); use copy() to rebuild.")
        self.state = state


class SolverError(LPFacadeError):
    """The external solver did not return an optimal solution."""

    def __init__(self, solution: Solution, message: Optional[str] = None) -> None:
        text = message or solution.message or f"Solver finished with status '{solution.status}'."
        super().__init__(text)
        self.solution = solution
        self.status = solution.status
