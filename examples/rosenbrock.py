"""
Example: 25-variable chained Rosenbrock function inside the box [2, 4]^25.

Axis 2 is left unbounded. Uses the default solver configuration.
"""

import sys

import numpy as np

from jetopt import JetoptError, solve
from jetopt.problems import rosenbrock_problem


def main() -> int:
    try:
        res = solve(rosenbrock_problem(25))
    except JetoptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    with np.printoptions(precision=6, linewidth=100):
        print(f"{res.nit} iterations")
        print(f"x = {res.x}")
        print(f"f(x) = {res.fun}")
        print(f"grad = {res.grad}")
        print(f"projected grad norm = {res.proj_grad_norm}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
