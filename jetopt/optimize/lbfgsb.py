"""Bound-constrained limited-memory BFGS in NumPy.

Projected L-BFGS: variables sitting on a bound with the gradient pointing
out of the box form the active set and are held fixed; the two-loop
recursion gives the step for the remaining (free) variables, and a
backtracking line search along ``P(x + a d)`` keeps every evaluated point
inside the box.
"""

from __future__ import annotations

from collections import deque
from typing import Deque

import numpy as np

from jetopt.logging import get_logger

from .core import (
    Array,
    Bounds,
    Evaluator,
    OptimizeResult,
    SolverConfig,
    check_convergence,
    projected_grad_norm,
)
from .line_search import projected_backtracking

logger = get_logger(__name__)

_CURVATURE_EPS = float(np.finfo(float).eps)


def _free_mask(x: Array, grad: Array, bounds: Bounds) -> Array:
    at_lower = (x <= bounds.lower) & (grad > 0)
    at_upper = (x >= bounds.upper) & (grad < 0)
    return ~(at_lower | at_upper)


def _two_loop(g: Array, s_history: Deque[Array], y_history: Deque[Array]) -> Array:
    q = g.copy()
    alpha_vals = []
    for s, y in reversed(list(zip(s_history, y_history))):
        rho = 1.0 / float(np.dot(y, s))
        alpha_i = rho * float(np.dot(s, q))
        q = q - alpha_i * y
        alpha_vals.append((rho, alpha_i, s, y))
    if len(s_history) > 0:
        last_s = s_history[-1]
        last_y = y_history[-1]
        gamma = float(np.dot(last_s, last_y) / np.dot(last_y, last_y))
    else:
        gamma = 1.0
    r = gamma * q
    for rho, alpha_i, s, y in reversed(alpha_vals):
        beta = rho * float(np.dot(y, r))
        r = r + s * (alpha_i - beta)
    return -r


def lbfgsb(
    objective: Evaluator,
    x0: Array,
    bounds: Bounds,
    config: SolverConfig,
    history: bool = False,
) -> OptimizeResult:
    """Minimize ``objective`` over ``bounds`` starting from ``x0``.

    ``objective`` maps a point to ``(value, gradient)``. ``x0`` is projected
    onto the box before the first evaluation. Bounds and config are assumed
    validated (see :func:`jetopt.optimize.minimize`).
    """
    x = bounds.project(np.asarray(x0, dtype=float).reshape(-1))
    fx, grad = objective(x)
    fx = float(fx)
    grad = np.asarray(grad, dtype=float)
    nfev = 1
    nit = 0
    s_history: Deque[Array] = deque(maxlen=config.m)
    y_history: Deque[Array] = deque(maxlen=config.m)
    recent_f: Deque[float] = deque(maxlen=max(config.past, 1))
    hist: list[Array] = [x.copy()] if history else []
    success = False
    message = "Maximum iterations reached."
    proj_norm = projected_grad_norm(x, grad, bounds)

    while True:
        if check_convergence(proj_norm, x, config):
            success = True
            message = "Projected gradient tolerance satisfied."
            break
        if config.max_iterations and nit >= config.max_iterations:
            break

        free = _free_mask(x, grad, bounds)
        direction = _two_loop(np.where(free, grad, 0.0), s_history, y_history)
        direction[~free] = 0.0
        if not float(np.dot(grad, direction)) < 0:
            logger.debug("Iteration %d: not a descent direction, resetting memory", nit)
            s_history.clear()
            y_history.clear()
            direction = np.where(free, -grad, 0.0)

        if s_history:
            step = 1.0
        else:
            step = min(1.0 / float(np.linalg.norm(direction)), config.max_step)
        ls = projected_backtracking(objective, x, fx, grad, direction, bounds, step, config)
        nfev += ls.nfev

        if ls.step == 0.0:
            if s_history:
                logger.debug("Iteration %d: line search failed, resetting memory", nit)
                s_history.clear()
                y_history.clear()
                continue
            message = "Line search failed to find a sufficient decrease."
            break

        s = ls.x - x
        y = ls.grad - grad
        if float(np.dot(s, y)) > _CURVATURE_EPS * float(np.dot(y, y)):
            s_history.append(s)
            y_history.append(y)

        f_prev = fx
        x, fx, grad = ls.x, ls.fun, ls.grad
        nit += 1
        if history:
            hist.append(x.copy())
        proj_norm = projected_grad_norm(x, grad, bounds)
        logger.debug(
            "Iteration %d: f=%.10e proj_grad_norm=%.3e step=%.3e", nit, fx, proj_norm, ls.step
        )

        if config.past > 0:
            recent_f.append(f_prev)
            if len(recent_f) == config.past:
                f_past = recent_f[0]
                scale = max(abs(fx), abs(f_past), 1.0)
                if abs(f_past - fx) <= config.delta * scale:
                    success = True
                    message = "Relative function decrease below delta."
                    break

    logger.info("L-BFGS-B finished after %d iterations: %s", nit, message)
    return OptimizeResult(
        x=x,
        fun=fx,
        grad=grad,
        nit=nit,
        success=success,
        message=message,
        proj_grad_norm=proj_norm,
        nfev=nfev,
        history=hist,
    )


__all__ = ["lbfgsb"]
