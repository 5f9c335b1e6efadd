"""External audio conversion components."""

from .conversion import ConversionOrchestrator, ConversionPreconditions, check_preconditions

__all__ = ["ConversionOrchestrator", "ConversionPreconditions", "check_preconditions"]
