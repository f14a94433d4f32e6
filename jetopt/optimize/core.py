"""Core interfaces shared by the minimizer strategies.

Bounds use ``-np.inf``/``np.inf`` for unbounded axes. Solver options follow
the usual L-BFGS-B parameter block; ``SolverConfig.validate`` is called by
:func:`jetopt.optimize.minimize` before any objective evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, NamedTuple, Optional, Sequence

import numpy as np

from jetopt.errors import ConfigurationError

if TYPE_CHECKING:
    from .objective import AutoDiffObjective

Array = np.ndarray


class ObjectiveResult(NamedTuple):
    """Value and gradient of the objective at one point."""

    value: float
    gradient: Array


Evaluator = Callable[[Array], ObjectiveResult]


@dataclass(frozen=True, eq=False)
class Bounds:
    """Box constraints ``lower <= x <= upper``."""

    lower: Array
    upper: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "lower", np.asarray(self.lower, dtype=float).reshape(-1))
        object.__setattr__(self, "upper", np.asarray(self.upper, dtype=float).reshape(-1))

    @classmethod
    def unbounded(cls, n: int) -> "Bounds":
        return cls(np.full(n, -np.inf), np.full(n, np.inf))

    @classmethod
    def from_pairs(cls, pairs: Sequence[tuple[Optional[float], Optional[float]]]) -> "Bounds":
        """Build bounds from ``(lo, hi)`` pairs; ``None`` means unbounded."""
        lower = [-np.inf if lo is None else lo for lo, _ in pairs]
        upper = [np.inf if hi is None else hi for _, hi in pairs]
        return cls(np.array(lower, dtype=float), np.array(upper, dtype=float))

    @property
    def dim(self) -> int:
        return self.lower.size

    def validate(self, n: int) -> None:
        """Raise ConfigurationError unless these bounds fit an ``n``-vector."""
        if self.lower.size != n or self.upper.size != n:
            raise ConfigurationError(
                f"Bounds have sizes {self.lower.size}/{self.upper.size}, expected {n}."
            )
        if np.isnan(self.lower).any() or np.isnan(self.upper).any():
            raise ConfigurationError("Bounds must not contain NaN.")
        bad = np.flatnonzero(self.lower > self.upper)
        if bad.size:
            raise ConfigurationError(f"lower > upper on axes {bad.tolist()}.")

    def project(self, x: Array) -> Array:
        return np.clip(x, self.lower, self.upper)

    def contains(self, x: Array) -> bool:
        x = np.asarray(x, dtype=float)
        return bool(np.all(x >= self.lower) and np.all(x <= self.upper))


@dataclass(frozen=True)
class SolverConfig:
    """
    Parameters of the bound-constrained L-BFGS minimizer.

    Attributes:
        m: Number of correction pairs kept in the limited-memory history.
        epsilon: Absolute tolerance on the projected gradient infinity norm.
        epsilon_rel: Relative tolerance, scaled by ``||x||``.
        past: Distance (in iterations) for the function-decrease test; 0
            disables it.
        delta: Relative tolerance of the function-decrease test.
        max_iterations: Iteration budget; 0 means no budget.
        max_linesearch: Maximum trials per line search.
        min_step: Smallest step accepted by the line search.
        max_step: Largest step tried by the line search.
        ftol: Sufficient-decrease (Armijo) constant.
        shrink: Backtracking factor applied after a rejected trial.
    """

    m: int = 6
    epsilon: float = 1e-8
    epsilon_rel: float = 0.0
    past: int = 0
    delta: float = 1e-10
    max_iterations: int = 500
    max_linesearch: int = 20
    min_step: float = 1e-20
    max_step: float = 1e20
    ftol: float = 1e-4
    shrink: float = 0.5

    def validate(self) -> None:
        if self.m <= 0:
            raise ConfigurationError("m must be positive.")
        if self.epsilon < 0 or self.epsilon_rel < 0:
            raise ConfigurationError("epsilon and epsilon_rel must be non-negative.")
        if self.past < 0:
            raise ConfigurationError("past must be non-negative.")
        if self.delta < 0:
            raise ConfigurationError("delta must be non-negative.")
        if self.max_iterations < 0:
            raise ConfigurationError("max_iterations must be non-negative.")
        if self.max_linesearch <= 0:
            raise ConfigurationError("max_linesearch must be positive.")
        if not (0 < self.min_step < self.max_step):
            raise ConfigurationError("Require 0 < min_step < max_step.")
        if not (0 < self.ftol < 0.5):
            raise ConfigurationError("ftol must lie in (0, 0.5).")
        if not (0 < self.shrink < 1):
            raise ConfigurationError("shrink must lie in (0, 1).")


@dataclass
class OptimizeResult:
    """Result returned by every minimizer strategy.

    ``grad`` is the full gradient at ``x``; ``proj_grad_norm`` is the
    infinity norm of the projected gradient used by the convergence test.
    """

    x: Array
    fun: float
    grad: Array
    nit: int
    success: bool
    message: str
    proj_grad_norm: float
    nfev: int
    history: List[Array] = field(default_factory=list)


@dataclass(frozen=True, eq=False)
class Problem:
    """A generic objective expression with its start point and bounds."""

    fun: Callable[[Any], Any]
    x0: Array
    bounds: Optional[Bounds] = None
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "x0", np.asarray(self.x0, dtype=float).reshape(-1))

    @property
    def dim(self) -> int:
        return self.x0.size

    def objective(self) -> "AutoDiffObjective":
        from .objective import AutoDiffObjective

        return AutoDiffObjective(self.fun, dim=self.dim)


def projected_grad_norm(x: Array, grad: Array, bounds: Bounds) -> float:
    """Infinity norm of ``P(x - grad) - x``."""
    return float(np.max(np.abs(bounds.project(x - grad) - x), initial=0.0))


def check_convergence(proj_norm: float, x: Array, config: SolverConfig) -> bool:
    """Return True if the projected gradient norm satisfies the tolerance."""
    return proj_norm <= max(config.epsilon, config.epsilon_rel * float(np.linalg.norm(x)))


__all__ = [
    "Array",
    "Bounds",
    "Evaluator",
    "ObjectiveResult",
    "OptimizeResult",
    "Problem",
    "SolverConfig",
    "check_convergence",
    "projected_grad_norm",
]
