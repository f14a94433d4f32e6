"""Reverse-mode reference evaluator built on ``torch.autograd``."""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np
import torch

from jetopt.errors import ConfigurationError, DomainError
from jetopt.optimize.core import Array, ObjectiveResult


class TorchObjective:
    """
    Evaluate a generic objective and its gradient with ``torch.autograd``.

    Same contract as :class:`~jetopt.optimize.objective.AutoDiffObjective`.
    The expression receives a 1D tensor with ``requires_grad=True``; the
    functions in :mod:`jetopt.dual` dispatch tensors to the matching
    ``torch`` function, so expressions written for dual numbers run
    unchanged.

    Args:
        fun: Generic objective expression.
        dim: Expected dimensionality; checked on every call when given.
        dtype: Floating dtype of the leaf tensor. Defaults to float64.
    """

    def __init__(
        self,
        fun: Callable[[Any], Any],
        dim: Optional[int] = None,
        dtype: torch.dtype = torch.float64,
    ) -> None:
        if not dtype.is_floating_point:
            raise ConfigurationError("TorchObjective requires a floating point dtype.")
        self.fun = fun
        self.dim = dim
        self.dtype = dtype

    def evaluate(self, x: Array) -> ObjectiveResult:
        point = np.asarray(x, dtype=float).reshape(-1)
        if self.dim is not None and point.size != self.dim:
            raise ConfigurationError(
                f"Objective expects {self.dim} parameters, got {point.size}."
            )
        leaf = torch.tensor(point, dtype=self.dtype, requires_grad=True)
        try:
            out = self.fun(leaf)
        except ArithmeticError as exc:
            raise DomainError(f"Objective is undefined at this point: {exc}") from exc
        if not isinstance(out, torch.Tensor) or not out.requires_grad:
            value = float(out)
            gradient = np.zeros(point.size)
        else:
            (grad,) = torch.autograd.grad(out, leaf, allow_unused=True)
            value = float(out.detach())
            gradient = (
                np.zeros(point.size)
                if grad is None
                else grad.detach().cpu().numpy().astype(float)
            )
        if not np.isfinite(value) or not np.all(np.isfinite(gradient)):
            raise DomainError("Objective value or gradient is not finite.")
        return ObjectiveResult(value, gradient)

    __call__ = evaluate


__all__ = ["TorchObjective"]
