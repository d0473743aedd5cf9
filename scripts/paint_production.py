#!/usr/bin/env python3
"""
Paint production: how much blue and black paint to make in a 40 hour week.

Blue paint takes 1/40 hour per litre and sells for 10, black paint takes
1/30 hour per litre and sells for 15. At most 860 litres of blue and 1000
litres of black can be sold.
"""

import argparse
import logging

from lp_facade import Model, SolveOptions


def build_scalar() -> Model:
    model = Model("paint")
    blue = model.declare_variable("BluePaint", 0, 860)
    black = model.declare_variable("BlackPaint", 0, 1000)
    model.add_constraint(blue / 40 + black / 30, "<=", 40, name="hours")
    model.set_objective(10 * blue + 15 * black, "max")
    return model


def build_vector() -> Model:
    model = Model("paint-vector")
    x = model.declare_variables(2, lower_bound=0, upper_bound=[860, 1000])
    rates = [1 / 40, 1 / 30]
    prices = [10, 15]
    model.add_constraint({var: rate for var, rate in zip(x, rates)}, "<=", 40, name="hours")
    model.set_objective({var: price for var, price in zip(x, prices)}, "max")
    return model


def main() -> None:
    parser = argparse.ArgumentParser(description="Solve the paint production LP.")
    parser.add_argument("--vector", action="store_true", help="Use vector-style variable declaration")
    parser.add_argument("--method", default="highs", choices=["highs", "highs-ds", "highs-ipm"])
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    model = build_vector() if args.vector else build_scalar()
    solution = model.solve(SolveOptions(method=args.method)).raise_for_status()

    print(f"Objective value = {solution.objective_value:.3f}")
    for var in model.variables:
        print(f"{var.name} = {model.value(var):.3f}")


if __name__ == "__main__":
    main()
