"""Backtracking line search along the projected path ``P(x + a d)``."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from jetopt.errors import DomainError
from jetopt.logging import get_logger

from .core import Array, Bounds, Evaluator, SolverConfig

logger = get_logger(__name__)


class LineSearchResult(NamedTuple):
    """Accepted point of a line search; ``step == 0`` means no acceptable step."""

    x: Array
    fun: float
    grad: Array
    step: float
    nfev: int


def projected_backtracking(
    objective: Evaluator,
    x: Array,
    fx: float,
    grad: Array,
    direction: Array,
    bounds: Bounds,
    step: float,
    config: SolverConfig,
) -> LineSearchResult:
    """Armijo backtracking on the projected path.

    A trial point ``z = P(x + step * d)`` is accepted when
    ``f(z) <= f(x) + ftol * grad . (z - x)``. Every trial point lies inside
    ``bounds``. After ``max_linesearch`` rejections, or once the step drops
    below ``min_step``, the original point is returned with ``step = 0``.
    A trial point where the objective raises ``DomainError`` counts as a
    rejection. So does a clipped trial whose displacement ``z - x`` is not a
    descent direction; that trial is not evaluated.
    """
    if float(np.dot(grad, direction)) >= 0:
        raise ValueError("Search direction must be a descent direction.")
    step = min(float(step), config.max_step)
    nfev = 0
    for _ in range(config.max_linesearch):
        if step < config.min_step:
            break
        candidate = bounds.project(x + step * direction)
        displacement = candidate - x
        if not np.any(displacement):
            break
        slope = float(np.dot(grad, displacement))
        if slope >= 0:
            step *= config.shrink
            continue
        nfev += 1
        try:
            f_new, g_new = objective(candidate)
        except DomainError as exc:
            logger.debug("Rejecting trial step %.3e: %s", step, exc)
            step *= config.shrink
            continue
        if f_new <= fx + config.ftol * slope:
            return LineSearchResult(candidate, float(f_new), np.asarray(g_new, dtype=float), step, nfev)
        step *= config.shrink
    return LineSearchResult(x, fx, grad, 0.0, nfev)


__all__ = ["LineSearchResult", "projected_backtracking"]
