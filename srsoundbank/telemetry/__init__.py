"""Run logging for soundbank extraction."""

from .logger import RunLogger

__all__ = ["RunLogger"]
