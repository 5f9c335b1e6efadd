"""Shared typed data models for soundbank extraction.

This package contains dataclasses used across reader, decoder, writer, and
converter modules to avoid circular imports.
"""

from .datatypes import (
    AudioMetadata,
    ConversionOutcome,
    ConversionReport,
    EntryInfo,
    ExtractionResult,
    FlatSubtitles,
    GenderedSubtitles,
    MetadataHeader,
    SoundbankHeader,
    Subtitles,
)

__all__ = [
    "AudioMetadata",
    "ConversionOutcome",
    "ConversionReport",
    "EntryInfo",
    "ExtractionResult",
    "FlatSubtitles",
    "GenderedSubtitles",
    "MetadataHeader",
    "SoundbankHeader",
    "Subtitles",
]
