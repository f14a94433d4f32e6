"""
Example: Powell's singular function in four variables.

Axes 0, 1 and 3 are bounded to [-2, 2]; axis 2 is unbounded. The start
point (3, -1, 0, 1) lies outside the box and is projected onto it first.
"""

import sys

import numpy as np

from jetopt import JetoptError, SolverConfig, solve
from jetopt.problems import powell_problem


def main() -> int:
    config = SolverConfig(epsilon=1e-8, max_iterations=500)
    try:
        res = solve(powell_problem(), config=config)
    except JetoptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    with np.printoptions(precision=6):
        print(f"{res.nit} iterations")
        print(f"x = {res.x}")
        print(f"f(x) = {res.fun}")
        print(f"grad = {res.grad}")
        print(f"projected grad norm = {res.proj_grad_norm}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
