"""Unit tests for soundbank header/entry-table parsing and sub-stream views."""

from __future__ import annotations

import io
import struct

import pytest

from srsoundbank.errors import FormatError
from srsoundbank.io.container import Soundbank
from srsoundbank.io.metadata import decode_metadata
from srsoundbank.profiles import GameProfile
from tests.bank_builder import build_metadata, build_soundbank, encode_table


def test_open_parses_header_and_entries_in_archive_order() -> None:
    """Reader should expose bank id and one entry per descriptor, in order."""

    metadata = build_metadata(version=3, wav_length_ms=10)
    payload = build_soundbank(
        12345,
        [(7, b"first-audio", b""), (9, b"second", metadata)],
    )

    soundbank = Soundbank.open(io.BytesIO(payload))

    assert soundbank.wwise_bank_id == 12345
    assert soundbank.header.entry_count == 2
    assert [entry.file_id for entry in soundbank] == [7, 9]
    assert len(soundbank) == 2


def test_entry_accessors_return_fresh_bounded_views() -> None:
    """Audio/metadata views should read only their own byte ranges, each time."""

    metadata = build_metadata(version=3, persona_id=4)
    payload = build_soundbank(1, [(1, b"AAAA", b""), (2, b"BBBBBB", metadata)])
    soundbank = Soundbank.open(io.BytesIO(payload))
    first, second = soundbank.entries

    assert first.open_metadata() is None
    assert first.open_audio().read() == b"AAAA"
    with second.open_metadata() as metadata_stream:
        assert metadata_stream.read() == metadata
    assert second.open_audio().read() == b"BBBBBB"
    assert first.open_audio().read() == b"AAAA"


def test_sub_stream_views_do_not_disturb_each_other() -> None:
    """Interleaved reads on two views over one stream should stay independent."""

    payload = build_soundbank(1, [(1, b"0123456789", b""), (2, b"abcdefghij", b"")])
    soundbank = Soundbank.open(io.BytesIO(payload))
    first = soundbank.entries[0].open_audio()
    second = soundbank.entries[1].open_audio()

    assert first.read(3) == b"012"
    assert second.read(4) == b"abcd"
    assert first.read() == b"3456789"
    assert second.read() == b"efghij"
    assert first.read() == b""


def test_open_rejects_bad_signature() -> None:
    """A stream without the soundbank signature should fail with `FormatError`."""

    payload = build_soundbank(1, [], signature=b"RIFF")

    with pytest.raises(FormatError, match="signature"):
        Soundbank.open(io.BytesIO(payload))


def test_open_rejects_truncated_header() -> None:
    """A stream shorter than the fixed header should fail with `FormatError`."""

    with pytest.raises(FormatError, match="truncated"):
        Soundbank.open(io.BytesIO(b"VWSB\x00\x00"))


def test_open_rejects_entry_count_past_end_of_stream() -> None:
    """Declared entry count that overruns the stream should fail."""

    payload = build_soundbank(1, [(1, b"audio", b"")], declared_count=50)

    with pytest.raises(FormatError, match="past end of stream"):
        Soundbank.open(io.BytesIO(payload))


def test_open_rejects_entry_data_past_end_of_stream() -> None:
    """Descriptor ranges beyond the stream length should fail."""

    payload = build_soundbank(1, [(1, b"audio-bytes", b"")])
    truncated = payload[:-4]

    with pytest.raises(FormatError, match="Entry 1"):
        Soundbank.open(io.BytesIO(truncated))


def test_open_accepts_empty_soundbank() -> None:
    """A soundbank with zero entries is valid and yields no entries."""

    soundbank = Soundbank.open(io.BytesIO(build_soundbank(99, [])))

    assert soundbank.wwise_bank_id == 99
    assert list(soundbank) == []


def test_open_rejects_entry_starting_inside_entry_table() -> None:
    """A descriptor pointing back into the header/table region is corruption."""

    payload = bytearray(build_soundbank(1, [(1, b"audio", b"")]))
    # First descriptor's offset field follows the 16-byte header and the file id.
    struct.pack_into("<I", payload, 20, 8)

    with pytest.raises(FormatError, match="inside the header/entry table"):
        Soundbank.open(io.BytesIO(bytes(payload)))


def test_metadata_padding_after_subtitle_region_is_tolerated(sriv_profile: GameProfile) -> None:
    """Bytes left in the metadata range after the subtitle block are ignored."""

    block = encode_table(sriv_profile, [("en", "Hello")])
    metadata = build_metadata(version=3, lipsync=b"\x05\x06", subtitle_block=block)
    payload = build_soundbank(1, [(1, b"audio", metadata + b"\x00" * 6)])
    entry = Soundbank.open(io.BytesIO(payload)).entries[0]

    decoded = decode_metadata(entry.open_metadata(), sriv_profile)

    assert decoded.lipsync == b"\x05\x06"
    assert dict(decoded.subtitles.lines) == {"en": "Hello"}
    assert entry.open_audio().read() == b"audio"


def test_sub_stream_read_is_capped_at_view_length() -> None:
    """Oversized reads should return only the bytes inside the view."""

    payload = build_soundbank(1, [(1, b"AAAA", b""), (2, b"BBBB", b"")])
    view = Soundbank.open(io.BytesIO(payload)).entries[0].open_audio()

    assert view.read(10_000_000) == b"AAAA"
    assert view.read(10) == b""
