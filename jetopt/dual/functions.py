"""Elementary functions that accept any supported scalar type.

Objective expressions call these instead of :mod:`math` so the same code runs
over plain reals, :class:`~jetopt.dual.number.Dual` values, NumPy arrays
(float or object dtype) and ``torch.Tensor`` values.
"""

from __future__ import annotations

import math
from typing import Any, Callable

import numpy as np

from jetopt.dual.number import Dual, _real_call

_TORCH_NAMES = {"arctan": "atan"}


def _is_tensor(x: Any) -> bool:
    return type(x).__module__.startswith("torch") and hasattr(x, "__torch_function__")


def _dispatch(name: str, x: Any, real_fn: Callable[[float], float]) -> Any:
    if isinstance(x, Dual):
        return getattr(x, name)()
    if isinstance(x, np.ndarray):
        return getattr(np, name)(x)
    if _is_tensor(x):
        import torch

        return getattr(torch, _TORCH_NAMES.get(name, name))(x)
    return _real_call(real_fn, float(x))


def exp(x: Any) -> Any:
    return _dispatch("exp", x, math.exp)


def log(x: Any) -> Any:
    return _dispatch("log", x, math.log)


def log10(x: Any) -> Any:
    return _dispatch("log10", x, math.log10)


def sqrt(x: Any) -> Any:
    return _dispatch("sqrt", x, math.sqrt)


def sin(x: Any) -> Any:
    return _dispatch("sin", x, math.sin)


def cos(x: Any) -> Any:
    return _dispatch("cos", x, math.cos)


def tan(x: Any) -> Any:
    return _dispatch("tan", x, math.tan)


def arctan(x: Any) -> Any:
    return _dispatch("arctan", x, math.atan)


def sinh(x: Any) -> Any:
    return _dispatch("sinh", x, math.sinh)


def cosh(x: Any) -> Any:
    return _dispatch("cosh", x, math.cosh)


def tanh(x: Any) -> Any:
    return _dispatch("tanh", x, math.tanh)


def power(x: Any, p: Any) -> Any:
    """``x ** p`` with real-scalar domain errors raised as ``DomainError``.

    Python's ``**`` returns a complex number for a negative float base and a
    fractional exponent; this raises instead.
    """
    if isinstance(x, (int, float, np.integer, np.floating)) and isinstance(
        p, (int, float, np.integer, np.floating)
    ):
        return _real_call(math.pow, float(x), float(p))
    return x**p


__all__ = [
    "arctan",
    "cos",
    "cosh",
    "exp",
    "log",
    "log10",
    "power",
    "sin",
    "sinh",
    "sqrt",
    "tan",
    "tanh",
]
