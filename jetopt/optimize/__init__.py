"""Bound-constrained L-BFGS minimization with automatic differentiation.

Example
-------
>>> import numpy as np
>>> from jetopt.optimize import AutoDiffObjective, Bounds, minimize
>>> objective = AutoDiffObjective(lambda x: 0.5 * (10.0 - x[0]) ** 2)
>>> res = minimize(objective, np.array([0.0]), Bounds([-5.0], [15.0]))
>>> round(float(res.x[0]), 6)
10.0
"""

from .core import (
    Bounds,
    ObjectiveResult,
    OptimizeResult,
    Problem,
    SolverConfig,
    check_convergence,
    projected_grad_norm,
)
from .driver import METHODS, minimize, solve
from .lbfgsb import lbfgsb
from .line_search import LineSearchResult, projected_backtracking
from .objective import AutoDiffObjective, value_and_grad
from .scipy_backend import scipy_lbfgsb
from .utils import approx_grad, check_gradient

__all__ = [
    "AutoDiffObjective",
    "Bounds",
    "LineSearchResult",
    "METHODS",
    "ObjectiveResult",
    "OptimizeResult",
    "Problem",
    "SolverConfig",
    "approx_grad",
    "check_convergence",
    "check_gradient",
    "lbfgsb",
    "minimize",
    "projected_backtracking",
    "projected_grad_norm",
    "scipy_lbfgsb",
    "solve",
    "value_and_grad",
]
