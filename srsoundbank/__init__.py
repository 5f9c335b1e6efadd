"""Top-level package for srsoundbank.

This package unpacks Saints Row PC streaming soundbanks into `.wem` audio
artifacts plus one XML manifest, and optionally converts the audio to `.ogg`.
The main orchestration entry point is `SoundbankExtractor`.
"""

from .pipeline import SoundbankExtractor

__all__ = ["SoundbankExtractor", "__version__"]

__version__ = "0.1.0"
