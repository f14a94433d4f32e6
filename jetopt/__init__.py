"""jetopt - forward-mode dual numbers driving a bound-constrained L-BFGS minimizer."""

__version__ = "0.1.0"

from .dual import Dual, dual_type, seed
from .errors import ConfigurationError, DomainError, JetoptError
from .logging import configure_logging, get_logger, set_log_level
from .optimize import (
    AutoDiffObjective,
    Bounds,
    ObjectiveResult,
    OptimizeResult,
    Problem,
    SolverConfig,
    check_gradient,
    minimize,
    solve,
    value_and_grad,
)

__all__ = [
    "AutoDiffObjective",
    "Bounds",
    "ConfigurationError",
    "DomainError",
    "Dual",
    "JetoptError",
    "ObjectiveResult",
    "OptimizeResult",
    "Problem",
    "SolverConfig",
    "check_gradient",
    "configure_logging",
    "dual_type",
    "get_logger",
    "minimize",
    "seed",
    "set_log_level",
    "solve",
    "value_and_grad",
]
