"""
Example: least-squares fit of y = exp(m x + c) to 67 observations.

Both parameters are unbounded. The objective is evaluated with the
fixed-size two-variable dual type.
"""

import sys

import numpy as np

from jetopt import AutoDiffObjective, JetoptError, dual_type, minimize
from jetopt.problems import exp_fit_loss


def main() -> int:
    objective = AutoDiffObjective(exp_fit_loss, dual_cls=dual_type(2))
    try:
        res = minimize(objective, np.zeros(2))
    except JetoptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Solved in {res.nit} iterations")
    print(f"m = {res.x[0]}, c = {res.x[1]}")
    print(f"Final loss: {res.fun}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
