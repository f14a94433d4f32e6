"""PyTorch integration for jetopt."""

from .objective import TorchObjective

__all__ = ["TorchObjective"]
