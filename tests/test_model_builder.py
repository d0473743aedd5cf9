import math

import pytest

from lp_facade import (
    DuplicateConstraintError,
    DuplicateVariableError,
    InvalidBoundsError,
    Model,
    ModelFrozenError,
    NotSolvedError,
    ObjectiveNotSetError,
    UnknownVariableError,
)


def make_two_variable_model() -> Model:
    model = Model("builder")
    x = model.declare_variable("x", 0, 4)
    y = model.declare_variable("y", 0, 3)
    model.add_constraint(x + y, "<=", 5)
    model.set_objective(2 * x + y, "max")
    return model


def test_declare_variable_defaults():
    model = Model()
    x = model.declare_variable("x")

    assert x.lb == 0.0
    assert math.isinf(x.ub) and x.ub > 0
    assert x.index == 0
    assert model.variable("x") is x


def test_none_bounds_are_unbounded():
    model = Model()
    z = model.declare_variable("z", None, None)

    assert math.isinf(z.lb) and z.lb < 0
    assert math.isinf(z.ub) and z.ub > 0
    assert z.to_schema().lb is None
    assert z.to_schema().ub is None


def test_integer_identifiers_are_normalised():
    model = Model()
    v = model.declare_variable(3, 0, 1)

    assert v.name == "3"
    with pytest.raises(DuplicateVariableError):
        model.declare_variable("3")


def test_duplicate_variable_leaves_model_unchanged():
    model = Model()
    model.declare_variable("x", 0, 10)

    with pytest.raises(DuplicateVariableError):
        model.declare_variable("x", 1, 2)

    assert [v.name for v in model.variables] == ["x"]
    assert model.variable("x").ub == 10


@pytest.mark.parametrize(
    "lb, ub",
    [(5, 1), (0, -1e-3), (float("nan"), 1), (math.inf, math.inf), (-math.inf, -math.inf), (math.inf, None)],
)
def test_invalid_bounds_rejected_at_declaration(lb, ub):
    model = Model()

    with pytest.raises(InvalidBoundsError):
        model.declare_variable("x", lb, ub)

    assert model.variables == []


def test_unknown_variable_in_constraint_does_not_mutate():
    model = Model()
    x = model.declare_variable("x")
    other = Model().declare_variable("ghost")

    with pytest.raises(UnknownVariableError):
        model.add_constraint(x + other, "<=", 3)
    with pytest.raises(UnknownVariableError):
        model.add_constraint({"x": 1.0, "missing": 2.0}, ">=", 1)

    assert model.constraints == []
    assert model.add_constraint(x, "<=", 3).name == "c1"


def test_unknown_variable_in_objective():
    model = Model()
    model.declare_variable("x")

    with pytest.raises(UnknownVariableError):
        model.set_objective({"y": 1.0}, "min")
    assert model.objective is None


def test_duplicate_constraint_name():
    model = Model()
    x = model.declare_variable("x")
    model.add_constraint(x, "<=", 1, name="cap")

    with pytest.raises(DuplicateConstraintError):
        model.add_constraint(x, ">=", 0, name="cap")
    assert len(model.constraints) == 1


def test_generated_names_skip_explicit_ones():
    model = Model()
    x = model.declare_variable("x")
    model.add_constraint(x, "<=", 4, name="c2")

    first = model.add_constraint(x, ">=", 1)
    second = model.add_constraint(x, ">=", 0)

    assert [c.name for c in model.constraints] == ["c2", "c3", "c4"]
    assert (first.name, second.name) == ("c3", "c4")


def test_relation_and_direction_aliases():
    model = Model()
    x = model.declare_variable("x")
    cons = model.add_constraint(x, "=", 2)
    objective = model.set_objective(x, "Minimize")

    assert cons.cmp == "=="
    assert objective.sense == "min"
    with pytest.raises(ValueError):
        model.add_constraint(x, "<", 1)
    with pytest.raises(ValueError):
        model.set_objective(x, "sideways")


def test_set_objective_replaces_previous():
    model = make_two_variable_model()
    model.set_objective({"y": 1.0}, "max")
    model.solve()

    assert model.objective.sense == "max"
    assert model.value("y") == pytest.approx(3.0)
    assert model.objective_value() == pytest.approx(3.0)


def test_value_before_solve_raises():
    model = make_two_variable_model()

    with pytest.raises(NotSolvedError):
        model.value("x")
    with pytest.raises(NotSolvedError):
        model.objective_value()


def test_solve_without_objective():
    model = Model()
    model.declare_variable("x", 0, 1)

    with pytest.raises(ObjectiveNotSetError):
        model.solve()
    assert model.state == "building"


def test_model_frozen_after_solve():
    model = make_two_variable_model()
    first = model.solve()

    with pytest.raises(ModelFrozenError):
        model.declare_variable("z")
    with pytest.raises(ModelFrozenError):
        model.add_constraint({"x": 1.0}, "<=", 1)
    with pytest.raises(ModelFrozenError):
        model.set_objective({"x": 1.0}, "min")
    assert model.solve() is first


def test_copy_rebuilds_unsolved_model():
    model = make_two_variable_model()
    model.solve()

    variant = model.copy("variant")
    variant.add_constraint({"x": 1.0}, "<=", 1)
    variant.solve()

    assert variant.state == "optimal"
    assert len(model.constraints) == 1
    assert model.value("x") == pytest.approx(4.0)
    assert variant.value("x") == pytest.approx(1.0)
    assert variant.value("y") == pytest.approx(3.0)


def test_declare_variables_is_atomic():
    model = Model()
    model.declare_variable("b")

    with pytest.raises(DuplicateVariableError):
        model.declare_variables(["a", "b", "c"])
    with pytest.raises(InvalidBoundsError):
        model.declare_variables(["a", "c"], lower_bound=[0, 5], upper_bound=[1, 2])
    with pytest.raises(ValueError):
        model.declare_variables(["a", "c"], upper_bound=[1, 2, 3])

    assert [v.name for v in model.variables] == ["b"]
    handles = model.declare_variables(["a", "c"], upper_bound=[1, 2])
    assert [(v.name, v.ub, v.index) for v in handles] == [("a", 1, 1), ("c", 2, 2)]
