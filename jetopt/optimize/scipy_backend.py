"""SciPy's L-BFGS-B behind the jetopt minimizer contract."""

from __future__ import annotations

import numpy as np
from scipy import optimize as sp_optimize

from jetopt.errors import ConfigurationError
from jetopt.logging import get_logger

from .core import Array, Bounds, Evaluator, OptimizeResult, SolverConfig, projected_grad_norm

logger = get_logger(__name__)


def scipy_lbfgsb(
    objective: Evaluator,
    x0: Array,
    bounds: Bounds,
    config: SolverConfig,
    history: bool = False,
) -> OptimizeResult:
    """Minimize with ``scipy.optimize.minimize(method="L-BFGS-B")``.

    ``epsilon`` maps to SciPy's ``gtol`` (also a projected-gradient infinity
    norm), ``m`` to ``maxcor`` and ``max_linesearch`` to ``maxls``. The
    function-decrease test uses ``delta`` when ``past == 1`` and is otherwise
    reduced to machine precision. SciPy only compares consecutive iterates, so
    ``past > 1`` raises ``ConfigurationError``. SciPy requires a finite
    iteration budget; ``max_iterations == 0`` is passed as 15000, SciPy's own
    default.
    """
    if config.past > 1:
        raise ConfigurationError(
            f"The scipy method only supports past <= 1, got past={config.past}."
        )
    x_start = bounds.project(np.asarray(x0, dtype=float).reshape(-1))
    hist: list[Array] = [x_start.copy()] if history else []

    def fun_and_grad(x: Array) -> tuple[float, Array]:
        value, grad = objective(x)
        return float(value), np.asarray(grad, dtype=float)

    def record(xk: Array) -> None:
        hist.append(np.array(xk, dtype=float))

    ftol = config.delta if config.past > 0 else float(np.finfo(float).eps)
    res = sp_optimize.minimize(
        fun_and_grad,
        x_start,
        jac=True,
        method="L-BFGS-B",
        bounds=sp_optimize.Bounds(bounds.lower, bounds.upper),
        callback=record if history else None,
        options={
            "maxcor": config.m,
            "gtol": config.epsilon,
            "ftol": ftol,
            "maxiter": config.max_iterations or 15000,
            "maxls": config.max_linesearch,
        },
    )
    x = np.asarray(res.x, dtype=float)
    grad = np.asarray(res.jac, dtype=float)
    proj_norm = projected_grad_norm(x, grad, bounds)
    message = res.message if isinstance(res.message, str) else res.message.decode()
    logger.info("SciPy L-BFGS-B finished after %d iterations: %s", res.nit, message)
    return OptimizeResult(
        x=x,
        fun=float(res.fun),
        grad=grad,
        nit=int(res.nit),
        success=bool(res.success),
        message=message,
        proj_grad_norm=proj_norm,
        nfev=int(res.nfev),
        history=hist,
    )


__all__ = ["scipy_lbfgsb"]
