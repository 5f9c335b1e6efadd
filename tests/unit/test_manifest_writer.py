"""Unit tests for audio artifact extraction and XML manifest serialization."""

from __future__ import annotations

import base64
import io
from pathlib import Path
from xml.etree import ElementTree as ET

import pytest

from srsoundbank.errors import PipelineStageError, UnsupportedVersionError
from srsoundbank.io.container import Soundbank
from srsoundbank.io.storage import ArtifactStore
from srsoundbank.pipeline.manifesting import ManifestWriter
from srsoundbank.profiles import GameProfile
from tests.bank_builder import build_metadata, build_soundbank, encode_table


def _write(
    tmp_path: Path,
    profile: GameProfile,
    payload: bytes,
    writer: ManifestWriter | None = None,
) -> tuple[list[Path], ArtifactStore]:
    """Run the manifest writer over an in-memory soundbank."""

    store = ArtifactStore(tmp_path / "out", "voice_media.bnk_pc")
    soundbank = Soundbank.open(io.BytesIO(payload))
    audio_paths = (writer or ManifestWriter()).write(soundbank, profile, store)
    return audio_paths, store


def test_two_entry_scenario_manifest(tmp_path: Path, sriv_profile: GameProfile) -> None:
    """Bank 12345 with one bare and one v3 entry should produce the expected XML."""

    block = encode_table(sriv_profile, [("en", "Hello")])
    metadata = build_metadata(version=3, wav_length_ms=1500, subtitle_block=block)
    payload = build_soundbank(12345, [(100, b"audio-one", b""), (200, b"audio-two", metadata)])

    audio_paths, store = _write(tmp_path, sriv_profile, payload)

    root = ET.parse(store.manifest_path).getroot()
    assert root.tag == "soundbank"
    assert root.get("wwiseId") == "12345"
    assert root.get("game") == "SaintsRowIV"
    files = root.findall("file")
    assert len(files) == 2
    assert files[0].find("metadata") is None
    assert files[1].get("id") == "200"
    assert files[1].get("audio") == "voice_media.bnk_pc_00002.wem"
    file_metadata = files[1].find("metadata")
    assert file_metadata.get("wavlengthms") == "1500"
    subtitles = file_metadata.findall("subtitles/subtitle")
    assert [(item.get("language"), item.text) for item in subtitles] == [("en", "Hello")]
    assert [path.name for path in audio_paths] == [
        "voice_media.bnk_pc_00001.wem",
        "voice_media.bnk_pc_00002.wem",
    ]
    assert audio_paths[0].read_bytes() == b"audio-one"
    assert audio_paths[1].read_bytes() == b"audio-two"
    assert store.manifest_path.name == "voice_media.xml"


def test_header_fields_round_trip_through_manifest_attributes(
    tmp_path: Path,
    sriv_profile: GameProfile,
) -> None:
    """Re-parsed attributes should reproduce decoded header fields exactly."""

    metadata = build_metadata(
        version=3,
        persona_id=4294967295,
        voiceline_id=305419896,
        wav_length_ms=65536,
    )
    payload = build_soundbank(1, [(5, b"x", metadata)])

    _, store = _write(tmp_path, sriv_profile, payload)

    element = ET.parse(store.manifest_path).getroot().find("file/metadata")
    assert element.attrib == {
        "version": "3",
        "personaid": "4294967295",
        "voicelineid": "305419896",
        "wavlengthms": "65536",
    }
    assert list(element) == []


def test_lipsync_is_written_as_base64(tmp_path: Path, sriv_profile: GameProfile) -> None:
    """Non-empty lip-sync data should be emitted verbatim as base64 text."""

    lipsync = bytes(range(32))
    payload = build_soundbank(1, [(5, b"x", build_metadata(version=3, lipsync=lipsync))])

    _, store = _write(tmp_path, sriv_profile, payload)

    node = ET.parse(store.manifest_path).getroot().find("file/metadata/lipsync")
    assert base64.b64decode(node.text) == lipsync


def test_version2_groups_are_both_rendered_from_male_table(
    tmp_path: Path,
    sriv_profile: GameProfile,
) -> None:
    """Version 2 emits male and female groups, both filled from the male table."""

    block = encode_table(sriv_profile, [("en", "Male line"), ("fr", "Ligne")]) + encode_table(
        sriv_profile, [("en", "Female line")]
    )
    payload = build_soundbank(1, [(5, b"x", build_metadata(version=2, subtitle_block=block))])

    _, store = _write(tmp_path, sriv_profile, payload)

    subtitles = ET.parse(store.manifest_path).getroot().find("file/metadata/subtitles")
    assert subtitles.get("version") == "2"
    assert [child.tag for child in subtitles] == ["male", "female"]
    male = [(item.get("language"), item.text) for item in subtitles.find("male")]
    female = [(item.get("language"), item.text) for item in subtitles.find("female")]
    assert male == [("en", "Male line"), ("fr", "Ligne")]
    assert female == male


def test_subtitle_text_is_xml_escaped(tmp_path: Path, sriv_profile: GameProfile) -> None:
    """Markup characters in subtitles should survive a parse round trip."""

    block = encode_table(sriv_profile, [("en", 'Tom & "Jerry" <3')])
    payload = build_soundbank(1, [(5, b"x", build_metadata(version=3, subtitle_block=block))])

    _, store = _write(tmp_path, sriv_profile, payload)

    subtitle = ET.parse(store.manifest_path).getroot().find("file/metadata/subtitles/subtitle")
    assert subtitle.text == 'Tom & "Jerry" <3'


def test_extraction_is_idempotent(tmp_path: Path, sriv_profile: GameProfile) -> None:
    """Two runs into fresh directories should produce identical outputs."""

    block = encode_table(sriv_profile, [("en", "Hello")])
    payload = build_soundbank(
        7,
        [(1, b"aaa", b""), (2, b"bbb", build_metadata(version=3, subtitle_block=block))],
    )
    soundbank = Soundbank.open(io.BytesIO(payload))
    first = ArtifactStore(tmp_path / "first", "bank")
    second = ArtifactStore(tmp_path / "second", "bank")

    first_paths = ManifestWriter().write(soundbank, sriv_profile, first)
    second_paths = ManifestWriter().write(soundbank, sriv_profile, second)

    assert first.manifest_path.read_bytes() == second.manifest_path.read_bytes()
    assert [path.read_bytes() for path in first_paths] == [
        path.read_bytes() for path in second_paths
    ]


def test_unsupported_version_removes_partial_manifest(
    tmp_path: Path,
    sriv_profile: GameProfile,
) -> None:
    """A fatal decode failure should leave no manifest and no artifact for that entry."""

    payload = build_soundbank(
        1,
        [(1, b"ok", b""), (2, b"bad", build_metadata(version=7))],
    )

    with pytest.raises(PipelineStageError) as exc_info:
        _write(tmp_path, sriv_profile, payload)

    assert exc_info.value.stage == "extract"
    assert "Entry 2 (file id 2)" in exc_info.value.detail
    assert isinstance(exc_info.value.__cause__, UnsupportedVersionError)
    out_dir = tmp_path / "out"
    assert not (out_dir / "voice_media.xml").exists()
    assert not (out_dir / "voice_media.xml.partial").exists()
    assert not (out_dir / "voice_media.bnk_pc_00002.wem").exists()


def test_stale_manifest_is_removed_before_extraction(
    tmp_path: Path,
    sriv_profile: GameProfile,
) -> None:
    """A manifest from an earlier run must not survive a failed rerun."""

    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / "voice_media.xml").write_text("<soundbank/>", encoding="utf-8")
    payload = build_soundbank(1, [(1, b"bad", build_metadata(version=9))])

    with pytest.raises(PipelineStageError):
        _write(tmp_path, sriv_profile, payload)

    assert not (out_dir / "voice_media.xml").exists()


def test_progress_callback_reports_each_step(tmp_path: Path, sriv_profile: GameProfile) -> None:
    """Progress callback should receive audio and metadata steps per entry."""

    events: list[tuple[int, int, str]] = []
    payload = build_soundbank(1, [(1, b"a", b""), (2, b"b", build_metadata(version=3))])

    _write(
        tmp_path,
        sriv_profile,
        payload,
        writer=ManifestWriter(progress_callback=lambda *event: events.append(event)),
    )

    assert events == [(1, 2, "audio"), (2, 2, "audio"), (2, 2, "metadata")]
