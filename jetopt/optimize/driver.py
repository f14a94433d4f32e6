"""Entry points that validate a run and dispatch to a minimizer strategy."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import numpy as np

from jetopt.errors import ConfigurationError
from jetopt.logging import get_logger

from .core import Array, Bounds, Evaluator, OptimizeResult, Problem, SolverConfig
from .lbfgsb import lbfgsb
from .scipy_backend import scipy_lbfgsb

logger = get_logger(__name__)

Strategy = Callable[..., OptimizeResult]

METHODS: Dict[str, Strategy] = {
    "lbfgsb": lbfgsb,
    "scipy": scipy_lbfgsb,
}


def minimize(
    objective: Evaluator,
    x0: Array,
    bounds: Optional[Bounds] = None,
    config: Optional[SolverConfig] = None,
    method: str = "lbfgsb",
    history: bool = False,
) -> OptimizeResult:
    """Minimize a ``(value, gradient)`` evaluator subject to box bounds.

    Args:
        objective: Callable mapping a point to ``(value, gradient)``, e.g. an
            :class:`~jetopt.optimize.objective.AutoDiffObjective`.
        x0: Initial guess; projected onto ``bounds`` before use.
        bounds: Box constraints. None means unbounded on every axis.
        config: Solver options. Defaults to ``SolverConfig()``.
        method: ``"lbfgsb"`` (native) or ``"scipy"``.
        history: Record the accepted iterates in ``result.history``.

    Raises:
        ConfigurationError: Invalid options, unknown method or bounds that do
            not match ``x0``. Raised before any evaluation.
        DomainError: The objective is undefined at the initial point.
    """
    config = SolverConfig() if config is None else config
    config.validate()
    strategy = METHODS.get(method.lower())
    if strategy is None:
        raise ConfigurationError(
            f"Unsupported method '{method}'. Supported methods: {sorted(METHODS)}"
        )
    x = np.asarray(x0, dtype=float).reshape(-1)
    if x.size == 0:
        raise ConfigurationError("x0 must not be empty.")
    if not np.all(np.isfinite(x)):
        raise ConfigurationError("x0 must be finite.")
    bounds = Bounds.unbounded(x.size) if bounds is None else bounds
    bounds.validate(x.size)
    logger.debug("Minimizing %d parameters with %s", x.size, method)
    return strategy(objective, x, bounds, config, history=history)


def solve(
    problem: Problem,
    x0: Optional[Array] = None,
    config: Optional[SolverConfig] = None,
    method: str = "lbfgsb",
    history: bool = False,
) -> OptimizeResult:
    """Minimize a :class:`Problem` with automatically differentiated gradients."""
    start = problem.x0 if x0 is None else x0
    return minimize(
        problem.objective(),
        start,
        bounds=problem.bounds,
        config=config,
        method=method,
        history=history,
    )


__all__ = ["METHODS", "minimize", "solve"]
