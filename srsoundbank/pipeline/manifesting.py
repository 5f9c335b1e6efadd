"""Manifest writer for extracted soundbanks.

Responsibilities:
- Walk soundbank entries in archive order with 1-based sequence numbers.
- Stream each entry's audio payload to its `.wem` artifact.
- Decode entry metadata and serialize one `file` record per entry into a
  single tab-indented XML manifest, written incrementally.
- Map decode failures to stage-aware errors naming the failing entry.
"""

from __future__ import annotations

import base64
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TextIO
from xml.etree import ElementTree as ET
from xml.sax.saxutils import quoteattr

from ..errors import PipelineStageError, SoundbankError
from ..io.container import Soundbank, SoundbankEntry
from ..io.metadata import decode_metadata
from ..io.storage import ArtifactStore
from ..models.datatypes import AudioMetadata, FlatSubtitles, GenderedSubtitles, Subtitles
from ..profiles import GameProfile

EntryProgressCallback = Callable[[int, int, str], None]

_INDENT = "\t"


def subtitle_groups(subtitles: Subtitles) -> list[tuple[str | None, Mapping[str, str]]]:
    """Return `(group element name, table)` pairs for one subtitle shape.

    A `None` group name means subtitles are emitted directly under
    `subtitles`. Version 2 renders both groups from the male table, matching
    manifests produced by earlier releases of the extractor.
    """

    if isinstance(subtitles, GenderedSubtitles):
        return [("male", subtitles.male), ("female", subtitles.male)]
    if isinstance(subtitles, FlatSubtitles):
        return [(None, subtitles.lines)]
    raise TypeError(f"Unsupported subtitle shape: {type(subtitles).__name__}")


def metadata_element(metadata: AudioMetadata) -> ET.Element:
    """Build the `metadata` element for one decoded entry."""

    header = metadata.header
    element = ET.Element(
        "metadata",
        {
            "version": str(header.version),
            "personaid": str(header.persona_id),
            "voicelineid": str(header.voiceline_id),
            "wavlengthms": str(header.wav_length_ms),
        },
    )
    if metadata.lipsync:
        lipsync = ET.SubElement(element, "lipsync")
        lipsync.text = base64.b64encode(metadata.lipsync).decode("ascii")

    if metadata.subtitles is not None:
        subtitles = ET.SubElement(element, "subtitles", {"version": str(header.version)})
        for group_name, table in subtitle_groups(metadata.subtitles):
            parent = subtitles if group_name is None else ET.SubElement(subtitles, group_name)
            for language, text in table.items():
                subtitle = ET.SubElement(parent, "subtitle", {"language": language})
                subtitle.text = text
    return element


class ManifestWriter:
    """Extract audio artifacts and write the XML manifest for one soundbank."""

    def __init__(self, progress_callback: EntryProgressCallback | None = None) -> None:
        """Initialize with an optional `(index, total, step)` progress callback."""

        self._progress_callback = progress_callback

    def write(
        self,
        soundbank: Soundbank,
        profile: GameProfile,
        store: ArtifactStore,
    ) -> list[Path]:
        """Write every entry and finalize the manifest.

        Returns:
            Audio artifact paths in archive order.

        Raises:
            PipelineStageError: If an entry's metadata cannot be decoded.
            OSError: If reading the archive or writing an artifact fails.
        """

        store.prepare()
        audio_paths: list[Path] = []
        with store.open_manifest() as handle:
            handle.write('<?xml version="1.0" encoding="utf-8"?>\n')
            handle.write(
                f"<soundbank game={quoteattr(profile.label)} "
                f"wwiseId={quoteattr(str(soundbank.wwise_bank_id))}>\n"
            )
            total = len(soundbank)
            for index, entry in enumerate(soundbank, start=1):
                audio_paths.append(self._write_entry(handle, entry, index, total, profile, store))
            handle.write("</soundbank>\n")
        return audio_paths

    def _write_entry(
        self,
        handle: TextIO,
        entry: SoundbankEntry,
        index: int,
        total: int,
        profile: GameProfile,
        store: ArtifactStore,
    ) -> Path:
        metadata = self._decode_entry_metadata(entry, index, profile)

        audio_name = store.audio_filename(index)
        with entry.open_audio() as audio_stream:
            audio_path = store.save_audio_stream(index, audio_stream)
        self._report(index, total, "audio")

        record = ET.Element("file", {"id": str(entry.file_id), "audio": audio_name})
        if metadata is not None:
            record.append(metadata_element(metadata))
            self._report(index, total, "metadata")

        ET.indent(record, space=_INDENT, level=1)
        handle.write(_INDENT + ET.tostring(record, encoding="unicode") + "\n")
        return audio_path

    def _decode_entry_metadata(
        self,
        entry: SoundbankEntry,
        index: int,
        profile: GameProfile,
    ) -> AudioMetadata | None:
        metadata_stream = entry.open_metadata()
        if metadata_stream is None:
            return None
        try:
            with metadata_stream:
                return decode_metadata(metadata_stream, profile)
        except SoundbankError as exc:
            raise PipelineStageError(
                stage="extract",
                detail=f"Entry {index} (file id {entry.file_id}): {exc}",
                hint="The soundbank appears corrupt or uses an unknown metadata layout.",
            ) from exc

    def _report(self, index: int, total: int, step: str) -> None:
        if self._progress_callback is not None:
            self._progress_callback(index, total, step)
