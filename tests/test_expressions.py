import pytest

from lp_facade import LinearExpression, Model


def make_handles():
    model = Model()
    return model.declare_variable("x"), model.declare_variable("y")


def test_arithmetic_builds_coefficients():
    x, y = make_handles()
    expr = 3 * x - y / 2 + 4 - (x + 1)

    assert expr.coeffs == {"x": pytest.approx(2.0), "y": pytest.approx(-0.5)}
    assert expr.constant == pytest.approx(3.0)


def test_negation_and_reverse_subtraction():
    x, _ = make_handles()
    expr = 10 - x

    assert expr.coeffs == {"x": -1.0}
    assert expr.constant == 10.0
    assert (-x).coeffs == {"x": -1.0}


def test_mapping_keys_accept_handles_and_names():
    x, y = make_handles()
    expr = LinearExpression.of({x: 1.0, "y": 2.0, "x": 0.5})

    assert expr.coeffs == {"x": 1.5, "y": 2.0}


def test_zero_terms_dropped_from_schema():
    x, y = make_handles()
    schema = (x + y - y).to_schema()

    assert [term.var for term in schema.terms] == ["x"]


def test_nonlinear_products_rejected():
    x, y = make_handles()

    with pytest.raises(TypeError):
        x * y
    with pytest.raises(TypeError):
        (x + 1) / y
    with pytest.raises(TypeError):
        LinearExpression.of("x + y")


def test_constraint_constant_moves_to_rhs():
    model = Model()
    x = model.declare_variable("x", 0, 10)
    model.add_constraint(x + 2, "<=", 5)
    model.set_objective(x + 1, "max")
    model.solve()

    assert model.value(x) == pytest.approx(3.0)
    assert model.objective_value() == pytest.approx(4.0)
