"""Exception hierarchy for jetopt.

Non-convergence is not an exception: a run that exhausts its iteration budget
returns normally with ``success=False``.
"""

from __future__ import annotations


class JetoptError(Exception):
    """Base class for all errors raised by jetopt."""


class ConfigurationError(JetoptError, ValueError):
    """Invalid solver setup.

    Raised for dimensionality mismatches between vectors, bounds with
    ``lower[i] > upper[i]`` and out-of-range solver options. Always detected
    before the first objective evaluation.
    """


class DomainError(JetoptError, ArithmeticError):
    """The objective expression is undefined at the evaluated point."""


__all__ = ["JetoptError", "ConfigurationError", "DomainError"]
