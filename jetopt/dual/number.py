"""Forward-mode dual numbers with a vector of partial derivatives.

A :class:`Dual` carries a real ``value`` together with the partial
derivatives of that value with respect to ``n`` independent variables.
Arithmetic and elementary functions propagate the derivatives with the
multivariate chain rule, so evaluating an expression over seeded duals
returns its exact gradient.

Any operation that would produce an undefined or non-finite value or
derivative raises :class:`~jetopt.errors.DomainError`. This includes ``exp``
overflow; results never saturate to ``inf``.
"""

from __future__ import annotations

import math
import operator
from functools import lru_cache
from typing import Any, Callable, Optional, Sequence

import numpy as np

from jetopt.errors import ConfigurationError, DomainError

Array = np.ndarray

_LN10 = math.log(10.0)


def _as_real(other: Any) -> Optional[float]:
    """Return ``other`` as a float if it is a real scalar, else None."""
    if isinstance(other, (int, float, np.integer, np.floating)):
        return float(other)
    return None


def _is_integral(p: float) -> bool:
    return float(p).is_integer()


def _real_call(fn: Callable[..., float], *args: float) -> float:
    try:
        return fn(*args)
    except (OverflowError, ValueError, ZeroDivisionError) as exc:
        raise DomainError(f"{getattr(fn, '__name__', fn)}{args!r} is undefined: {exc}") from exc


class Dual:
    """Real value paired with its partial derivatives.

    Instances are immutable. ``derivatives`` is a read-only float64 array whose
    length is the number of independent variables of the current evaluation.

    Example
    -------
    >>> x, y = seed([2.0, 3.0])
    >>> f = x * y + x.exp()
    >>> round(f.value, 6), f.derivatives.round(6).tolist()
    (13.389056, [10.389056, 2.0])
    """

    __slots__ = ("_value", "_derivatives")

    #: Fixed dimensionality for subclasses made by :func:`dual_type`.
    size: Optional[int] = None

    def __init__(self, value: float, derivatives: Sequence[float] | Array) -> None:
        derivs = np.array(derivatives, dtype=float)
        if derivs.ndim != 1:
            raise ConfigurationError("Dual derivatives must be a 1D sequence.")
        if self.size is not None and derivs.shape[0] != self.size:
            raise ConfigurationError(
                f"{type(self).__name__} expects {self.size} derivatives, got {derivs.shape[0]}."
            )
        derivs.flags.writeable = False
        self._value = float(value)
        self._derivatives = derivs

    @classmethod
    def _make(cls, value: float, derivatives: Array) -> "Dual":
        obj = object.__new__(cls)
        derivatives.flags.writeable = False
        obj._value = value
        obj._derivatives = derivatives
        return obj

    @classmethod
    def constant(cls, value: float, n: Optional[int] = None) -> "Dual":
        """Dual with a zero derivative vector of length ``n``."""
        if n is None:
            n = cls.size
        if n is None:
            raise ConfigurationError("Dimensionality is required for a dynamic Dual constant.")
        return cls(value, np.zeros(n))

    @property
    def value(self) -> float:
        return self._value

    @property
    def derivatives(self) -> Array:
        return self._derivatives

    @property
    def dim(self) -> int:
        return self._derivatives.shape[0]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r}, {self._derivatives.tolist()!r})"

    def _result(self, value: float, derivatives: Array, op: str) -> "Dual":
        if not math.isfinite(value) or not np.all(np.isfinite(derivatives)):
            raise DomainError(f"{op} is not finite at value {self._value!r}.")
        return self._make(value, derivatives)

    def _check_dim(self, other: "Dual") -> None:
        if other._derivatives.shape != self._derivatives.shape:
            raise ConfigurationError(
                f"Cannot combine duals with {self.dim} and {other.dim} derivatives."
            )

    # ------------------------------------------------------------------ #
    # Arithmetic
    # ------------------------------------------------------------------ #
    def __neg__(self) -> "Dual":
        return self._make(-self._value, -self._derivatives)

    def __pos__(self) -> "Dual":
        return self

    def __abs__(self) -> "Dual":
        # Derivative at zero is taken as 0.
        sign = math.copysign(1.0, self._value) if self._value != 0.0 else 0.0
        return self._make(abs(self._value), sign * self._derivatives)

    def __add__(self, other: Any) -> "Dual":
        if isinstance(other, Dual):
            self._check_dim(other)
            return self._result(
                self._value + other._value, self._derivatives + other._derivatives, "addition"
            )
        real = _as_real(other)
        if real is None:
            return NotImplemented
        return self._result(self._value + real, self._derivatives, "addition")

    def __radd__(self, other: Any) -> "Dual":
        return self.__add__(other)

    def __sub__(self, other: Any) -> "Dual":
        if isinstance(other, Dual):
            self._check_dim(other)
            return self._result(
                self._value - other._value, self._derivatives - other._derivatives, "subtraction"
            )
        real = _as_real(other)
        if real is None:
            return NotImplemented
        return self._result(self._value - real, self._derivatives, "subtraction")

    def __rsub__(self, other: Any) -> "Dual":
        real = _as_real(other)
        if real is None:
            return NotImplemented
        return self._result(real - self._value, -self._derivatives, "subtraction")

    def __mul__(self, other: Any) -> "Dual":
        if isinstance(other, Dual):
            self._check_dim(other)
            return self._result(
                self._value * other._value,
                other._value * self._derivatives + self._value * other._derivatives,
                "multiplication",
            )
        real = _as_real(other)
        if real is None:
            return NotImplemented
        return self._result(self._value * real, real * self._derivatives, "multiplication")

    def __rmul__(self, other: Any) -> "Dual":
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> "Dual":
        if isinstance(other, Dual):
            self._check_dim(other)
            if other._value == 0.0:
                raise DomainError("Division by a dual with zero value.")
            quotient = self._value / other._value
            return self._result(
                quotient,
                (self._derivatives - quotient * other._derivatives) / other._value,
                "division",
            )
        real = _as_real(other)
        if real is None:
            return NotImplemented
        if real == 0.0:
            raise DomainError("Division of a dual by zero.")
        return self._result(self._value / real, self._derivatives / real, "division")

    def __rtruediv__(self, other: Any) -> "Dual":
        real = _as_real(other)
        if real is None:
            return NotImplemented
        if self._value == 0.0:
            raise DomainError("Division by a dual with zero value.")
        quotient = real / self._value
        return self._result(
            quotient, (-quotient / self._value) * self._derivatives, "division"
        )

    def __pow__(self, other: Any, modulo: Any = None) -> "Dual":
        if modulo is not None:
            return NotImplemented
        if isinstance(other, Dual):
            return self._pow_dual(other)
        p = _as_real(other)
        if p is None:
            return NotImplemented
        a = self._value
        if p == 0.0:
            return self._make(1.0, np.zeros_like(self._derivatives))
        if a < 0.0 and not _is_integral(p):
            raise DomainError(f"Negative base {a!r} with non-integer exponent {p!r}.")
        if a == 0.0:
            if p < 1.0 and np.any(self._derivatives):
                raise DomainError(f"Derivative of x**{p!r} is undefined at x = 0.")
            if p < 0.0:
                raise DomainError(f"Zero base with negative exponent {p!r}.")
            scale = 1.0 if p == 1.0 else 0.0
            return self._make(0.0, scale * self._derivatives)
        value = _real_call(math.pow, a, p)
        slope = p * _real_call(math.pow, a, p - 1.0)
        return self._result(value, slope * self._derivatives, "power")

    def _pow_dual(self, other: "Dual") -> "Dual":
        self._check_dim(other)
        a, b = self._value, other._value
        if a <= 0.0:
            raise DomainError(f"Dual exponent requires a positive base, got {a!r}.")
        value = _real_call(math.pow, a, b)
        derivs = (b * value / a) * self._derivatives + (value * math.log(a)) * other._derivatives
        return self._result(value, derivs, "power")

    def __rpow__(self, other: Any) -> "Dual":
        base = _as_real(other)
        if base is None:
            return NotImplemented
        if base <= 0.0:
            raise DomainError(f"Dual exponent requires a positive base, got {base!r}.")
        value = _real_call(math.pow, base, self._value)
        return self._result(value, (value * math.log(base)) * self._derivatives, "power")

    # ------------------------------------------------------------------ #
    # Comparisons act on the value only
    # ------------------------------------------------------------------ #
    def _compare(self, other: Any, op: Callable[[float, float], bool]) -> Any:
        if isinstance(other, Dual):
            return op(self._value, other._value)
        real = _as_real(other)
        if real is None:
            return NotImplemented
        return op(self._value, real)

    def __lt__(self, other: Any) -> Any:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> Any:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> Any:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> Any:
        return self._compare(other, operator.ge)

    def __eq__(self, other: Any) -> Any:
        return self._compare(other, operator.eq)

    def __ne__(self, other: Any) -> Any:
        return self._compare(other, operator.ne)

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------ #
    # Elementary functions
    # ------------------------------------------------------------------ #
    def _unary(self, value: float, slope: float, op: str) -> "Dual":
        return self._result(value, slope * self._derivatives, op)

    def exp(self) -> "Dual":
        value = _real_call(math.exp, self._value)
        return self._unary(value, value, "exp")

    def log(self) -> "Dual":
        if self._value <= 0.0:
            raise DomainError(f"log is undefined at {self._value!r}.")
        return self._unary(math.log(self._value), 1.0 / self._value, "log")

    def log10(self) -> "Dual":
        if self._value <= 0.0:
            raise DomainError(f"log10 is undefined at {self._value!r}.")
        return self._unary(math.log10(self._value), 1.0 / (self._value * _LN10), "log10")

    def sqrt(self) -> "Dual":
        if self._value < 0.0:
            raise DomainError(f"sqrt is undefined at {self._value!r}.")
        if self._value == 0.0:
            if np.any(self._derivatives):
                raise DomainError("Derivative of sqrt is undefined at 0.")
            return self._make(0.0, self._derivatives.copy())
        root = math.sqrt(self._value)
        return self._unary(root, 0.5 / root, "sqrt")

    def sin(self) -> "Dual":
        return self._unary(math.sin(self._value), math.cos(self._value), "sin")

    def cos(self) -> "Dual":
        return self._unary(math.cos(self._value), -math.sin(self._value), "cos")

    def tan(self) -> "Dual":
        cos = math.cos(self._value)
        if cos == 0.0:
            raise DomainError(f"tan is undefined at {self._value!r}.")
        return self._unary(math.tan(self._value), 1.0 / (cos * cos), "tan")

    def arctan(self) -> "Dual":
        v = self._value
        if abs(v) > 1.0:
            inv = 1.0 / v
            slope = inv * inv / (1.0 + inv * inv)
        else:
            slope = 1.0 / (1.0 + v * v)
        return self._unary(math.atan(v), slope, "arctan")

    def sinh(self) -> "Dual":
        value = _real_call(math.sinh, self._value)
        return self._unary(value, _real_call(math.cosh, self._value), "sinh")

    def cosh(self) -> "Dual":
        value = _real_call(math.cosh, self._value)
        return self._unary(value, _real_call(math.sinh, self._value), "cosh")

    def tanh(self) -> "Dual":
        value = math.tanh(self._value)
        return self._unary(value, 1.0 - value * value, "tanh")

    # ------------------------------------------------------------------ #
    # NumPy interoperability
    # ------------------------------------------------------------------ #
    def __array_ufunc__(self, ufunc: np.ufunc, method: str, *inputs: Any, **kwargs: Any) -> Any:
        if method != "__call__" or kwargs:
            return NotImplemented
        if any(isinstance(item, np.ndarray) for item in inputs):
            # Elementwise over object arrays; numpy calls back into Dual operators.
            return ufunc(*(np.asarray(item, dtype=object) for item in inputs))
        handler = _UFUNC_HANDLERS.get(ufunc)
        if handler is None:
            return NotImplemented
        return handler(*(float(item) if isinstance(item, np.generic) else item for item in inputs))


_UFUNC_HANDLERS: dict[np.ufunc, Callable[..., Any]] = {
    np.add: operator.add,
    np.subtract: operator.sub,
    np.multiply: operator.mul,
    np.divide: operator.truediv,
    np.power: operator.pow,
    np.negative: operator.neg,
    np.positive: operator.pos,
    np.absolute: operator.abs,
    np.square: lambda a: a * a,
    np.less: operator.lt,
    np.less_equal: operator.le,
    np.greater: operator.gt,
    np.greater_equal: operator.ge,
    np.equal: operator.eq,
    np.not_equal: operator.ne,
}
for _name in ("exp", "log", "log10", "sqrt", "sin", "cos", "tan", "arctan", "sinh", "cosh", "tanh"):
    _UFUNC_HANDLERS[getattr(np, _name)] = operator.methodcaller(_name)


@lru_cache(maxsize=None)
def dual_type(n: int) -> type[Dual]:
    """Return the fixed-size dual class ``Dual<n>``.

    Instances of the returned class reject derivative vectors whose length is
    not ``n``. Classes are cached, so ``dual_type(2) is dual_type(2)``.
    """
    if n < 1:
        raise ConfigurationError("Fixed dual dimensionality must be at least 1.")
    return type(f"Dual{n}", (Dual,), {"__slots__": (), "size": n})


def seed(x: Sequence[float] | Array, n: Optional[int] = None, dual_cls: Optional[type[Dual]] = None) -> Array:
    """Seed independent variables for one evaluation.

    Element ``i`` of the returned object array has value ``x[i]`` and the
    ``i``-th standard basis vector as derivatives.

    Args:
        x: Point at which the expression will be evaluated.
        n: Expected dimensionality. Defaults to ``len(x)``.
        dual_cls: Dual class to instantiate (``Dual`` or a ``dual_type(n)``).

    Raises:
        ConfigurationError: If ``n`` does not match ``len(x)`` or the fixed
            size of ``dual_cls``.
    """
    values = np.asarray(x, dtype=float).reshape(-1)
    if n is None:
        n = values.size
    if n != values.size:
        raise ConfigurationError(f"Cannot seed {n} variables from a vector of length {values.size}.")
    cls = Dual if dual_cls is None else dual_cls
    basis = np.eye(n)
    seeded = np.empty(n, dtype=object)
    for i in range(n):
        seeded[i] = cls(values[i], basis[i])
    return seeded


__all__ = ["Dual", "dual_type", "seed"]
