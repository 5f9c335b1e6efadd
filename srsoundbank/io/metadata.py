"""Per-entry audio metadata decoder.

Responsibilities:
- Parse the fixed metadata header (version, persona/voice-line ids, duration,
  lip-sync size, subtitle block size).
- Read the opaque lip-sync blob verbatim.
- Decode the version-dependent subtitle region through one dispatch table.

Subtitle tables are a u32 entry count followed by entries of
(u32 language id, u32 byte length, encoded text). Version 2 carries two
consecutive tables (male, female); version 3 carries one.
"""

from __future__ import annotations

from collections.abc import Callable
import os
import re
import struct
from typing import BinaryIO

from ..errors import FormatError, UnsupportedVersionError
from ..models.datatypes import (
    AudioMetadata,
    FlatSubtitles,
    GenderedSubtitles,
    MetadataHeader,
    Subtitles,
)
from ..profiles import GameProfile

METADATA_HEADER = struct.Struct("<IIIIII")

_U32 = struct.Struct("<I")
_TABLE_ENTRY = struct.Struct("<II")

# Code points XML 1.0 cannot carry, not even as character references.
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


class _SubtitleReader:
    """Bounded cursor over one subtitle region."""

    def __init__(self, data: bytes, profile: GameProfile) -> None:
        self._data = data
        self._profile = profile
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self.position

    def take(self, size: int, what: str) -> bytes:
        if size > self.remaining:
            raise FormatError(
                f"Subtitle block overrun reading {what}: need {size} bytes, "
                f"{self.remaining} left of {len(self._data)}."
            )
        chunk = self._data[self.position : self.position + size]
        self.position += size
        return chunk

    def read_table(self) -> dict[str, str]:
        """Read one language-tagged string table, preserving encoded order."""

        (count,) = _U32.unpack(self.take(_U32.size, "table entry count"))
        table: dict[str, str] = {}
        for _ in range(count):
            language_id, byte_length = _TABLE_ENTRY.unpack(
                self.take(_TABLE_ENTRY.size, "table entry header")
            )
            language = self._profile.language_code(language_id)
            if language is None:
                raise FormatError(
                    f"Unknown language id {language_id} for game `{self._profile.key}`."
                )
            if language in table:
                raise FormatError(f"Language `{language}` appears twice in one subtitle table.")
            raw_text = self.take(byte_length, f"`{language}` subtitle text")
            table[language] = self._decode_text(raw_text, language)
        return table

    def _decode_text(self, raw_text: bytes, language: str) -> str:
        try:
            text = raw_text.decode(self._profile.text_encoding)
        except UnicodeDecodeError as exc:
            raise FormatError(f"Undecodable `{language}` subtitle text: {exc}") from exc
        text = text.rstrip("\x00")
        illegal = _XML_ILLEGAL.search(text)
        if illegal is not None:
            raise FormatError(
                f"`{language}` subtitle text contains control character "
                f"U+{ord(illegal.group()):04X} at position {illegal.start()}."
            )
        return text


def _decode_gendered(reader: _SubtitleReader) -> GenderedSubtitles:
    male = reader.read_table()
    female = reader.read_table()
    return GenderedSubtitles(male=male, female=female)


def _decode_flat(reader: _SubtitleReader) -> FlatSubtitles:
    return FlatSubtitles(lines=reader.read_table())


SUBTITLE_DECODERS: dict[int, Callable[[_SubtitleReader], Subtitles]] = {
    2: _decode_gendered,
    3: _decode_flat,
}


def decode_subtitles(version: int, data: bytes, profile: GameProfile) -> Subtitles:
    """Decode one subtitle region, requiring it to be consumed exactly.

    Raises:
        UnsupportedVersionError: If no layout is known for `version`.
        FormatError: If the tables parse to fewer or more bytes than `data`.
    """

    decoder = SUBTITLE_DECODERS.get(version)
    if decoder is None:
        raise UnsupportedVersionError(version)
    reader = _SubtitleReader(data, profile)
    subtitles = decoder(reader)
    if reader.remaining:
        raise FormatError(
            f"Subtitle block declares {len(data)} bytes but tables used {reader.position}."
        )
    return subtitles


def _remaining_bytes(stream: BinaryIO) -> int:
    position = stream.tell()
    end = stream.seek(0, os.SEEK_END)
    stream.seek(position)
    return end - position


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise FormatError(f"Metadata truncated reading {what}: got {len(data)} of {size} bytes.")
    return data


def decode_metadata(stream: BinaryIO, profile: GameProfile) -> AudioMetadata:
    """Decode an entry's metadata byte range.

    Raises:
        FormatError: If the bytes violate the declared structure.
        UnsupportedVersionError: If the schema version is not 2 or 3.
    """

    header = MetadataHeader(*METADATA_HEADER.unpack(_read_exact(stream, METADATA_HEADER.size, "header")))
    if header.version not in SUBTITLE_DECODERS:
        raise UnsupportedVersionError(header.version)

    # Sizes come from untrusted bytes; check them before allocating anything.
    declared = header.lipsync_size + header.subtitle_size
    available = _remaining_bytes(stream)
    if declared > available:
        raise FormatError(
            f"Metadata truncated: lip-sync and subtitle data declare {declared} bytes, "
            f"only {available} remain."
        )

    lipsync = b""
    if header.lipsync_size > 0:
        lipsync = _read_exact(stream, header.lipsync_size, "lip-sync data")

    subtitles: Subtitles | None = None
    if header.subtitle_size > 0:
        region = _read_exact(stream, header.subtitle_size, "subtitle block")
        subtitles = decode_subtitles(header.version, region, profile)

    return AudioMetadata(header=header, lipsync=lipsync, subtitles=subtitles)
