"""
Example: one-variable quadratic with box bounds.

Minimizes 0.5 * (10 - x)^2 over [-5, 15] from x = 0 with gradients from
dual numbers. Prints the iteration count, the solution, the objective value,
the gradient and the projected gradient norm.
"""

import sys

from jetopt import JetoptError, SolverConfig, solve
from jetopt.problems import quadratic_problem


def main() -> int:
    config = SolverConfig(epsilon=1e-8, max_iterations=100)
    try:
        res = solve(quadratic_problem(), config=config)
    except JetoptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"{res.nit} iterations")
    print(f"x = {res.x[0]}")
    print(f"f(x) = {res.fun}")
    print(f"grad = {res.grad[0]}")
    print(f"projected grad norm = {res.proj_grad_norm}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
