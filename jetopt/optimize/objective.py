"""Adapter from a generic objective expression to a value-and-gradient evaluator."""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from jetopt.dual import Dual, seed
from jetopt.errors import ConfigurationError, DomainError

from .core import Array, ObjectiveResult


class AutoDiffObjective:
    """
    Evaluate ``fun`` and its exact gradient with forward-mode dual numbers.

    ``fun`` must be written generically: it receives a 1D array of scalars
    (dual numbers here, floats in :meth:`value`) and returns a scalar. Use
    :mod:`jetopt.dual` functions rather than :mod:`math` for transcendental
    functions.

    The adapter holds no mutable state, so one instance can serve several
    solver runs, including runs in different threads.

    Args:
        fun: Generic objective expression.
        dim: Expected dimensionality; checked on every call when given.
        dual_cls: Dual class used for seeding, e.g. ``dual_type(2)``.

    Example
    -------
    >>> obj = AutoDiffObjective(lambda x: 0.5 * (10.0 - x[0]) ** 2)
    >>> obj(np.array([4.0]))
    ObjectiveResult(value=18.0, gradient=array([-6.]))
    """

    def __init__(
        self,
        fun: Callable[[Any], Any],
        dim: Optional[int] = None,
        dual_cls: Optional[type[Dual]] = None,
    ) -> None:
        if dim is not None and dim < 1:
            raise ConfigurationError("dim must be positive.")
        if dual_cls is not None and dual_cls.size is not None:
            if dim is None:
                dim = dual_cls.size
            elif dim != dual_cls.size:
                raise ConfigurationError(
                    f"{dual_cls.__name__} cannot seed {dim} variables."
                )
        self.fun = fun
        self.dim = dim
        self.dual_cls = dual_cls

    def _point(self, x: Array) -> Array:
        point = np.asarray(x, dtype=float).reshape(-1)
        if self.dim is not None and point.size != self.dim:
            raise ConfigurationError(
                f"Objective expects {self.dim} parameters, got {point.size}."
            )
        return point

    def _call(self, args: Array) -> Any:
        try:
            with np.errstate(over="raise", divide="raise", invalid="raise"):
                return self.fun(args)
        except DomainError:
            raise
        except ArithmeticError as exc:
            raise DomainError(f"Objective is undefined at this point: {exc}") from exc

    def evaluate(self, x: Array) -> ObjectiveResult:
        """Return the objective value and gradient at ``x``."""
        point = self._point(x)
        out = self._call(seed(point, dual_cls=self.dual_cls))
        if isinstance(out, np.ndarray) and out.shape == ():
            out = out.item()
        if isinstance(out, Dual):
            value = out.value
            gradient = np.array(out.derivatives, dtype=float)
        else:
            value = float(out)
            gradient = np.zeros(point.size)
        if gradient.size != point.size:
            raise ConfigurationError(
                f"Gradient has {gradient.size} entries for {point.size} parameters."
            )
        if not np.isfinite(value) or not np.all(np.isfinite(gradient)):
            raise DomainError("Objective value or gradient is not finite.")
        return ObjectiveResult(value, gradient)

    __call__ = evaluate

    def value(self, x: Array) -> float:
        """Evaluate the objective over plain floats."""
        value = float(self._call(self._point(x)))
        if not np.isfinite(value):
            raise DomainError("Objective value is not finite.")
        return value


def value_and_grad(
    fun: Callable[[Any], Any], dim: Optional[int] = None
) -> AutoDiffObjective:
    """Wrap a generic expression as a ``(value, gradient)`` evaluator."""
    return AutoDiffObjective(fun, dim=dim)


__all__ = ["AutoDiffObjective", "value_and_grad"]
