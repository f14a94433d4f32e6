"""Forward-mode automatic differentiation with dual numbers.

Example
-------
>>> from jetopt.dual import exp, seed
>>> m, c = seed([0.5, 1.0])
>>> y = exp(m * 2.0 + c)
>>> y.derivatives.tolist() == [2.0 * y.value, y.value]
True
"""

from .functions import (
    arctan,
    cos,
    cosh,
    exp,
    log,
    log10,
    power,
    sin,
    sinh,
    sqrt,
    tan,
    tanh,
)
from .number import Dual, dual_type, seed

__all__ = [
    "Dual",
    "arctan",
    "cos",
    "cosh",
    "dual_type",
    "exp",
    "log",
    "log10",
    "power",
    "seed",
    "sin",
    "sinh",
    "sqrt",
    "tan",
    "tanh",
]
