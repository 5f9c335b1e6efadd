"""Soundbank extraction pipeline package.

This package contains the stage orchestration facade, the manifest writer,
and stage telemetry helpers.
"""

from .manifesting import ManifestWriter
from .orchestrator import SoundbankExtractor

__all__ = ["ManifestWriter", "SoundbankExtractor"]
