"""Core datatypes shared across soundbank modules.

Responsibilities:
- Represent decoded archive headers, entry descriptors, and metadata records.
- Represent the version-dependent subtitle shapes as a tagged union.
- Represent conversion outcomes and the final extraction summary.

Key types:
- `SoundbankHeader`, `EntryInfo`, `MetadataHeader`, `AudioMetadata`,
  `GenderedSubtitles`, `FlatSubtitles`, `ConversionOutcome`,
  `ConversionReport`, and `ExtractionResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Union

from ..errors import ToolExecutionError


@dataclass(frozen=True, slots=True)
class SoundbankHeader:
    """Fixed soundbank header fields.

    Attributes:
        signature: Four-byte archive signature.
        platform: Platform identifier.
        version: Container format version.
        wwise_bank_id: Wwise bank identifier written as `wwiseId`.
        entry_count: Number of entry descriptors following the header.
    """

    signature: bytes
    platform: int
    version: int
    wwise_bank_id: int
    entry_count: int


@dataclass(frozen=True, slots=True)
class EntryInfo:
    """One entry descriptor from the archive's entry table.

    Metadata (when present) starts at `offset`; audio follows it directly.
    """

    file_id: int
    offset: int
    audio_length: int
    metadata_length: int

    @property
    def metadata_offset(self) -> int:
        """Absolute offset of the metadata byte range."""

        return self.offset

    @property
    def audio_offset(self) -> int:
        """Absolute offset of the audio byte range."""

        return self.offset + self.metadata_length

    @property
    def end_offset(self) -> int:
        """Exclusive end offset of the whole entry data range."""

        return self.offset + self.metadata_length + self.audio_length


@dataclass(frozen=True, slots=True)
class MetadataHeader:
    """Fixed metadata header preceding the lip-sync blob and subtitles."""

    version: int
    persona_id: int
    voiceline_id: int
    wav_length_ms: int
    lipsync_size: int
    subtitle_size: int


@dataclass(frozen=True, slots=True)
class GenderedSubtitles:
    """Version 2 subtitle shape with separate male and female tables."""

    male: Mapping[str, str]
    female: Mapping[str, str]


@dataclass(frozen=True, slots=True)
class FlatSubtitles:
    """Version 3 subtitle shape with one pre-resolved table."""

    lines: Mapping[str, str]


Subtitles = Union[GenderedSubtitles, FlatSubtitles]


@dataclass(frozen=True, slots=True)
class AudioMetadata:
    """Decoded metadata for one soundbank entry.

    Attributes:
        header: Fixed header fields.
        lipsync: Opaque lip-sync curve bytes, empty when absent.
        subtitles: Decoded subtitle tables, `None` when the block is empty.
    """

    header: MetadataHeader
    lipsync: bytes = b""
    subtitles: Subtitles | None = None


@dataclass(frozen=True, slots=True)
class ConversionOutcome:
    """Result of converting one extracted audio artifact."""

    index: int
    audio_path: Path
    ogg_path: Path
    failure: ToolExecutionError | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether both tools completed for this artifact."""

        return self.failure is None


@dataclass(frozen=True, slots=True)
class ConversionReport:
    """Whole-stage conversion summary.

    Attributes:
        skipped: Whether the stage was skipped before touching any artifact.
        missing: Human-readable missing prerequisites when skipped.
        outcomes: One outcome per processed audio artifact.
    """

    skipped: bool
    missing: tuple[str, ...] = field(default_factory=tuple)
    outcomes: tuple[ConversionOutcome, ...] = field(default_factory=tuple)

    @property
    def converted_count(self) -> int:
        """Number of artifacts converted without tool failure."""

        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> tuple[ConversionOutcome, ...]:
        """Outcomes that recorded a tool failure."""

        return tuple(outcome for outcome in self.outcomes if not outcome.succeeded)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Summary of one extraction run."""

    soundbank_path: Path
    output_dir: Path
    manifest_path: Path
    wwise_bank_id: int
    audio_paths: tuple[Path, ...]
    conversion: ConversionReport | None = None

    @property
    def extracted_count(self) -> int:
        """Number of audio artifacts written."""

        return len(self.audio_paths)
