"""Example objective functions with their start points and bounds.

Each objective is written once and evaluates over floats, dual numbers and
torch tensors alike.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from jetopt.dual import exp
from jetopt.errors import ConfigurationError
from jetopt.optimize.core import Bounds, Problem

# (x, y) observations for the exponential fit y = exp(m x + c).
EXP_FIT_DATA = np.array(
    [
        [0.000000e00, 1.133898e00],
        [7.500000e-02, 1.334902e00],
        [1.500000e-01, 1.213546e00],
        [2.250000e-01, 1.252016e00],
        [3.000000e-01, 1.392265e00],
        [3.750000e-01, 1.314458e00],
        [4.500000e-01, 1.472541e00],
        [5.250000e-01, 1.536218e00],
        [6.000000e-01, 1.355679e00],
        [6.750000e-01, 1.463566e00],
        [7.500000e-01, 1.490201e00],
        [8.250000e-01, 1.658699e00],
        [9.000000e-01, 1.067574e00],
        [9.750000e-01, 1.464629e00],
        [1.050000e00, 1.402653e00],
        [1.125000e00, 1.713141e00],
        [1.200000e00, 1.527021e00],
        [1.275000e00, 1.702632e00],
        [1.350000e00, 1.423899e00],
        [1.425000e00, 1.543078e00],
        [1.500000e00, 1.664015e00],
        [1.575000e00, 1.732484e00],
        [1.650000e00, 1.543296e00],
        [1.725000e00, 1.959523e00],
        [1.800000e00, 1.685132e00],
        [1.875000e00, 1.951791e00],
        [1.950000e00, 2.095346e00],
        [2.025000e00, 2.361460e00],
        [2.100000e00, 2.169119e00],
        [2.175000e00, 2.061745e00],
        [2.250000e00, 2.178641e00],
        [2.325000e00, 2.104346e00],
        [2.400000e00, 2.584470e00],
        [2.475000e00, 1.914158e00],
        [2.550000e00, 2.368375e00],
        [2.625000e00, 2.686125e00],
        [2.700000e00, 2.712395e00],
        [2.775000e00, 2.499511e00],
        [2.850000e00, 2.558897e00],
        [2.925000e00, 2.309154e00],
        [3.000000e00, 2.869503e00],
        [3.075000e00, 3.116645e00],
        [3.150000e00, 3.094907e00],
        [3.225000e00, 2.471759e00],
        [3.300000e00, 3.017131e00],
        [3.375000e00, 3.232381e00],
        [3.450000e00, 2.944596e00],
        [3.525000e00, 3.385343e00],
        [3.600000e00, 3.199826e00],
        [3.675000e00, 3.423039e00],
        [3.750000e00, 3.621552e00],
        [3.825000e00, 3.559255e00],
        [3.900000e00, 3.530713e00],
        [3.975000e00, 3.561766e00],
        [4.050000e00, 3.544574e00],
        [4.125000e00, 3.867945e00],
        [4.200000e00, 4.049776e00],
        [4.275000e00, 3.885601e00],
        [4.350000e00, 4.110505e00],
        [4.425000e00, 4.345320e00],
        [4.500000e00, 4.161241e00],
        [4.575000e00, 4.363407e00],
        [4.650000e00, 4.161576e00],
        [4.725000e00, 4.619728e00],
        [4.800000e00, 4.737410e00],
        [4.875000e00, 4.727863e00],
        [4.950000e00, 4.669206e00],
    ]
)


def quadratic(x: Sequence[Any]) -> Any:
    """``0.5 * (10 - x0)^2``, minimized at ``x0 = 10``."""
    return 0.5 * (10.0 - x[0]) * (10.0 - x[0])


def powell(x: Sequence[Any]) -> Any:
    """Powell's singular function, minimized at the origin."""
    term1 = x[0] + 10.0 * x[1]
    term2 = x[2] - x[3]
    term3 = x[1] - 2.0 * x[2]
    term4 = x[0] - x[3]
    return term1 * term1 + 5.0 * term2 * term2 + term3**4 + 10.0 * term4**4


def rosenbrock(x: Sequence[Any]) -> Any:
    """Chained Rosenbrock ``(x0 - 1)^2 + sum 4 (x_i - x_{i-1}^2)^2``."""
    fx = (x[0] - 1.0) * (x[0] - 1.0)
    for i in range(1, len(x)):
        t = x[i] - x[i - 1] * x[i - 1]
        fx = fx + 4.0 * t * t
    return fx


def exp_model(x: Any, m: Any, c: Any) -> Any:
    return exp(m * x + c)


def exp_fit_loss(
    params: Sequence[Any], xs: Optional[np.ndarray] = None, ys: Optional[np.ndarray] = None
) -> Any:
    """Sum of squared residuals of ``y = exp(m x + c)`` with ``params = (m, c)``."""
    if xs is None:
        xs = EXP_FIT_DATA[:, 0]
    if ys is None:
        ys = EXP_FIT_DATA[:, 1]
    m, c = params[0], params[1]
    loss = 0.0
    for xi, yi in zip(np.asarray(xs).tolist(), np.asarray(ys).tolist()):
        residual = exp_model(xi, m, c) - yi
        loss = loss + residual * residual
    return loss


def quadratic_problem() -> Problem:
    return Problem(
        fun=quadratic,
        x0=np.array([0.0]),
        bounds=Bounds(np.array([-5.0]), np.array([15.0])),
        name="quadratic",
    )


def powell_problem() -> Problem:
    lower = np.full(4, -2.0)
    upper = np.full(4, 2.0)
    lower[2], upper[2] = -np.inf, np.inf
    return Problem(
        fun=powell,
        x0=np.array([3.0, -1.0, 0.0, 1.0]),
        bounds=Bounds(lower, upper),
        name="powell",
    )


def rosenbrock_problem(n: int = 25) -> Problem:
    """Rosenbrock in ``[2, 4]^n`` with axis 2 unbounded."""
    if n < 8:
        raise ConfigurationError("rosenbrock_problem needs at least 8 variables.")
    lower = np.full(n, 2.0)
    upper = np.full(n, 4.0)
    lower[2], upper[2] = -np.inf, np.inf
    x0 = np.full(n, 3.0)
    x0[0] = x0[1] = 2.0
    x0[5] = x0[7] = 4.0
    return Problem(fun=rosenbrock, x0=x0, bounds=Bounds(lower, upper), name="rosenbrock")


def exp_fit_problem() -> Problem:
    return Problem(
        fun=exp_fit_loss,
        x0=np.zeros(2),
        bounds=Bounds.unbounded(2),
        name="exponential",
    )


__all__ = [
    "EXP_FIT_DATA",
    "exp_fit_loss",
    "exp_fit_problem",
    "exp_model",
    "powell",
    "powell_problem",
    "quadratic",
    "quadratic_problem",
    "rosenbrock",
    "rosenbrock_problem",
]
