"""Streaming soundbank container reader.

Responsibilities:
- Parse the fixed soundbank header and the contiguous entry-descriptor table.
- Validate every descriptor's byte ranges against the stream length.
- Expose per-entry audio and metadata payloads as lazily-opened bounded views.

Key types:
- `Soundbank`: decoded archive owning the shared input stream.
- `SoundbankEntry`: one entry with `open_audio()` / `open_metadata()` accessors.
- `SubStream`: read-only byte-range view over a seekable stream.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import io
import os
from pathlib import Path
import struct
from typing import BinaryIO

from ..errors import FormatError
from ..models.datatypes import EntryInfo, SoundbankHeader

SOUNDBANK_SIGNATURE = b"VWSB"

_HEADER = struct.Struct("<4sHHII")
_ENTRY = struct.Struct("<IIII")


class SubStream(io.RawIOBase):
    """Read-only view over `[start, start + length)` of a shared stream.

    The view keeps its own position and seeks the shared stream before every
    read, so several views over one stream never disturb each other.
    """

    def __init__(self, source: BinaryIO, start: int, length: int) -> None:
        super().__init__()
        self._source = source
        self._start = start
        self._length = length
        self._position = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._position

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._position + offset
        elif whence == os.SEEK_END:
            target = self._length + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}")
        if target < 0:
            raise ValueError("Negative seek position.")
        self._position = target
        return self._position

    def read(self, size: int = -1) -> bytes:
        # RawIOBase.read preallocates `size` bytes; never ask for more than the view holds.
        remaining = max(self._length - self._position, 0)
        if size is None or size < 0 or size > remaining:
            size = remaining
        return super().read(size)

    def readinto(self, buffer) -> int:
        remaining = self._length - self._position
        if remaining <= 0:
            return 0
        view = memoryview(buffer)
        size = min(len(view), remaining)
        self._source.seek(self._start + self._position)
        data = self._source.read(size)
        count = len(data)
        view[:count] = data
        self._position += count
        return count

    def __len__(self) -> int:
        return self._length


class SoundbankEntry:
    """One audio item and its optional metadata within a soundbank."""

    def __init__(self, source: BinaryIO, info: EntryInfo) -> None:
        self._source = source
        self.info = info

    @property
    def file_id(self) -> int:
        return self.info.file_id

    @property
    def has_metadata(self) -> bool:
        return self.info.metadata_length > 0

    def open_audio(self) -> SubStream:
        """Open a fresh bounded view over the audio payload."""

        return SubStream(self._source, self.info.audio_offset, self.info.audio_length)

    def open_metadata(self) -> SubStream | None:
        """Open a fresh bounded view over the metadata, or `None` when absent."""

        if not self.has_metadata:
            return None
        return SubStream(self._source, self.info.metadata_offset, self.info.metadata_length)


class Soundbank:
    """Decoded streaming soundbank.

    The soundbank does not own the stream's lifetime; callers close it (see
    `open_soundbank`). Entries hold offsets into the stream, never copies.
    """

    def __init__(self, source: BinaryIO, header: SoundbankHeader, entries: list[SoundbankEntry]) -> None:
        self._source = source
        self.header = header
        self.entries = entries

    @property
    def wwise_bank_id(self) -> int:
        return self.header.wwise_bank_id

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[SoundbankEntry]:
        return iter(self.entries)

    @classmethod
    def open(cls, stream: BinaryIO) -> "Soundbank":
        """Parse header and entry table from a seekable binary stream.

        Raises:
            FormatError: If the header, table, or any descriptor range is
                inconsistent with the stream length.
        """

        stream_length = stream.seek(0, os.SEEK_END)
        stream.seek(0)

        raw_header = stream.read(_HEADER.size)
        if len(raw_header) != _HEADER.size:
            raise FormatError(
                f"Soundbank header truncated: {len(raw_header)} of {_HEADER.size} bytes."
            )
        signature, platform, version, wwise_bank_id, entry_count = _HEADER.unpack(raw_header)
        if signature != SOUNDBANK_SIGNATURE:
            raise FormatError(f"Unexpected soundbank signature {signature!r}.")
        header = SoundbankHeader(
            signature=signature,
            platform=platform,
            version=version,
            wwise_bank_id=wwise_bank_id,
            entry_count=entry_count,
        )

        table_end = _HEADER.size + entry_count * _ENTRY.size
        if table_end > stream_length:
            raise FormatError(
                f"Entry table for {entry_count} entries ends at {table_end}, "
                f"past end of stream ({stream_length} bytes)."
            )

        raw_table = stream.read(entry_count * _ENTRY.size)
        entries: list[SoundbankEntry] = []
        for index, fields in enumerate(_ENTRY.iter_unpack(raw_table), start=1):
            info = EntryInfo(*fields)
            _validate_entry(info, index, table_end, stream_length)
            entries.append(SoundbankEntry(stream, info))
        return cls(stream, header, entries)


def _validate_entry(info: EntryInfo, index: int, table_end: int, stream_length: int) -> None:
    """Reject descriptors whose data ranges fall outside the data region."""

    if info.offset < table_end:
        raise FormatError(
            f"Entry {index} (file id {info.file_id}) starts at {info.offset}, "
            f"inside the header/entry table (ends at {table_end})."
        )
    if info.end_offset > stream_length:
        raise FormatError(
            f"Entry {index} (file id {info.file_id}) ends at {info.end_offset}, "
            f"past end of stream ({stream_length} bytes)."
        )


@contextmanager
def open_soundbank(path: Path) -> Iterator[Soundbank]:
    """Open a soundbank file and keep it open for the soundbank's lifetime."""

    with path.open("rb") as stream:
        yield Soundbank.open(stream)
