"""Archive input and artifact output components."""

from .container import Soundbank, SoundbankEntry, SubStream, open_soundbank
from .metadata import decode_metadata
from .storage import ArtifactStore

__all__ = [
    "ArtifactStore",
    "Soundbank",
    "SoundbankEntry",
    "SubStream",
    "decode_metadata",
    "open_soundbank",
]
