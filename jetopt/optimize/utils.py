"""Finite-difference helpers used to verify automatically computed gradients.

Pure NumPy, deterministic.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from .core import Array, Evaluator

Objective = Callable[[Array], float]


def approx_grad(fun: Objective, x: Array, eps: float = 1e-6) -> Array:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    eps:
        Perturbation size for finite differences.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float).copy()
    grad = np.zeros_like(x, dtype=float)
    for i in range(x.size):
        ei = np.zeros_like(x)
        ei[i] = eps
        fx_plus = fun(x + ei)
        fx_minus = fun(x - ei)
        grad[i] = (fx_plus - fx_minus) / (2.0 * eps)
    return grad


def check_gradient(
    objective: Evaluator,
    x: Array,
    eps: float = 1e-6,
    fun: Objective | None = None,
) -> float:
    """Largest relative error between ``objective``'s gradient and central differences.

    ``fun`` evaluates the plain objective value; it defaults to the ``value``
    method of ``objective`` when present and to ``objective(x).value``
    otherwise. Components are compared relative to ``max(1, |g_i|)``.
    """
    if fun is None:
        fun = getattr(objective, "value", None) or (lambda p: objective(p).value)
    x = np.asarray(x, dtype=float)
    exact = np.asarray(objective(x).gradient, dtype=float)
    approx = np.asarray(approx_grad(fun, x, eps=eps), dtype=float)
    scale = np.maximum(1.0, np.abs(exact))
    return float(np.max(np.abs(exact - approx) / scale, initial=0.0))


__all__ = ["Objective", "approx_grad", "check_gradient"]
