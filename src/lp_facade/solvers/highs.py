from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np
from scipy.optimize import linprog

from ..schemas import LPModel, Solution, SolveOptions, Status

logger = logging.getLogger(__name__)

_STATUS_MAP: Dict[int, Status] = {
    0: "optimal",
    2: "infeasible",
    3: "unbounded",
}


def solve_lp(model: LPModel, options: Optional[SolveOptions] = None) -> Solution:
    """
    Solve ``model`` with SciPy's HiGHS-backed ``linprog``.

    Exactly one ``linprog`` call per invocation. Iteration limits and numerical
    trouble come back as ``status="error"``; unknown variable references and
    inconsistent bounds raise ``ValueError`` before the solver is reached.
    """

    opts = options or SolveOptions()
    if not model.variables:
        return _solve_constant_model(model, opts)

    c, constant = _build_objective(model)
    A_ub, b_ub, A_eq, b_eq, ub_signs = _build_constraint_matrices(model)
    bounds = _build_bounds(model)

    sense_factor = 1.0 if model.sense == "min" else -1.0
    logger.debug(
        "linprog(%s): %d variables, %d inequality rows, %d equality rows",
        opts.method,
        len(model.variables),
        len(b_ub),
        len(b_eq),
    )
    res = linprog(
        c * sense_factor,
        A_ub=A_ub if A_ub.size else None,
        b_ub=b_ub if b_ub.size else None,
        A_eq=A_eq if A_eq.size else None,
        b_eq=b_eq if b_eq.size else None,
        bounds=bounds,
        method=opts.method,
        options={
            "maxiter": opts.max_iters,
            "presolve": opts.presolve,
            "primal_feasibility_tolerance": opts.tol,
            "dual_feasibility_tolerance": opts.tol,
        },
    )
    iterations = int(getattr(res, "nit", 0) or 0)

    if res.status != 0:
        status = _map_status(res.status)
        return Solution(
            status=status,
            objective_value=None,
            x=None,
            iterations=iterations,
            message=res.message or "",
        )

    values = _map_variables(model, res.x)
    objective = float(res.fun * sense_factor + constant)
    reduced_costs = _extract_reduced_costs(model, res, sense_factor)
    duals = _extract_duals(model, res, sense_factor, ub_signs) if opts.return_duals else None

    return Solution(
        status="optimal",
        objective_value=objective,
        x=values,
        reduced_costs=reduced_costs,
        duals=duals,
        iterations=iterations,
        message=res.message or "",
    )


def _solve_constant_model(model: LPModel, opts: SolveOptions) -> Solution:
    """A model without variables: every row is a constant comparison."""
    _build_objective(model)
    for cons in model.constraints:
        if cons.lhs.terms:
            raise ValueError(f"Constraint '{cons.name}' references unknown variable '{cons.lhs.terms[0].var}'")
        slack = cons.rhs - cons.lhs.constant
        if (cons.cmp == "<=" and slack < -opts.tol) or (cons.cmp == ">=" and slack > opts.tol) or (
            cons.cmp == "==" and abs(slack) > opts.tol
        ):
            return Solution(
                status="infeasible",
                objective_value=None,
                x=None,
                message=f"Constant constraint '{cons.name}' is violated.",
            )
    return Solution(
        status="optimal",
        objective_value=float(model.objective.constant),
        x={},
        reduced_costs={},
        duals={cons.name: 0.0 for cons in model.constraints} if opts.return_duals else None,
        message="Model has no variables.",
    )


def _build_objective(model: LPModel) -> Tuple[np.ndarray, float]:
    n = len(model.variables)
    c = np.zeros(n)
    constant = model.objective.constant
    name_to_idx = model.variable_index()
    for term in model.objective.terms:
        if term.var not in name_to_idx:
            raise ValueError(f"Objective references unknown variable '{term.var}'")
        c[name_to_idx[term.var]] += term.coef
    return c, constant


def _build_constraint_matrices(
    model: LPModel,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, List[float]]:
    n = len(model.variables)
    A_ub: List[List[float]] = []
    b_ub: List[float] = []
    A_eq: List[List[float]] = []
    b_eq: List[float] = []
    # +1 for rows kept as written, -1 for ">=" rows negated into A_ub
    ub_signs: List[float] = []
    name_to_idx = model.variable_index()

    for cons in model.constraints:
        row = [0.0] * n
        shift = cons.lhs.constant
        for term in cons.lhs.terms:
            if term.var not in name_to_idx:
                raise ValueError(f"Constraint '{cons.name}' references unknown variable '{term.var}'")
            row[name_to_idx[term.var]] += term.coef
        rhs = cons.rhs - shift

        if cons.cmp == "<=":
            A_ub.append(row)
            b_ub.append(rhs)
            ub_signs.append(1.0)
        elif cons.cmp == ">=":
            A_ub.append([-value for value in row])
            b_ub.append(-rhs)
            ub_signs.append(-1.0)
        else:
            A_eq.append(row)
            b_eq.append(rhs)

    return (
        np.array(A_ub, dtype=float) if A_ub else np.empty((0, n)),
        np.array(b_ub, dtype=float) if b_ub else np.empty(0),
        np.array(A_eq, dtype=float) if A_eq else np.empty((0, n)),
        np.array(b_eq, dtype=float) if b_eq else np.empty(0),
        ub_signs,
    )


def _build_bounds(model: LPModel) -> List[Tuple[float | None, float | None]]:
    bounds: List[Tuple[float | None, float | None]] = []
    for var in model.variables:
        lb = None if var.lb is None or np.isneginf(var.lb) else var.lb
        ub = None if var.ub is None or np.isposinf(var.ub) else var.ub
        if lb is not None and ub is not None and lb > ub:
            raise ValueError(f"Variable {var.name} has inconsistent bounds {lb}>{ub}")
        bounds.append((lb, ub))
    return bounds


def _map_variables(model: LPModel, values: np.ndarray) -> Dict[str, float]:
    result: Dict[str, float] = {}
    for var, value in zip(model.variables, values):
        value = float(value)
        if abs(value) < 1e-12:
            value = 0.0
        result[var.name] = value
    return result


def _extract_reduced_costs(model: LPModel, res, sense_factor: float) -> Dict[str, float]:
    lower = getattr(res, "lower", None)
    upper = getattr(res, "upper", None)
    if lower is None or upper is None or "marginals" not in lower or "marginals" not in upper:
        return {}
    reduced: Dict[str, float] = {}
    for var, lo, hi in zip(model.variables, lower["marginals"], upper["marginals"]):
        reduced[var.name] = float((lo + hi) * sense_factor)
    return reduced


def _extract_duals(model: LPModel, res, sense_factor: float, ub_signs: List[float]) -> Dict[str, float]:
    duals: Dict[str, float] = {}
    ineqlin = getattr(res, "ineqlin", None)
    if ineqlin is not None and "marginals" in ineqlin:
        for cons, sign, value in zip(
            [c for c in model.constraints if c.cmp != "=="],
            ub_signs,
            ineqlin["marginals"],
        ):
            duals[cons.name] = float(value * sense_factor * sign)
    eqlin = getattr(res, "eqlin", None)
    if eqlin is not None and "marginals" in eqlin:
        for cons, value in zip(
            [c for c in model.constraints if c.cmp == "=="],
            eqlin["marginals"],
        ):
            duals[cons.name] = float(value * sense_factor)
    return duals


def _map_status(code: int) -> Status:
    return _STATUS_MAP.get(code, "error")
