"""Output directory layout for extracted soundbank artifacts.

Responsibilities:
- Provide deterministic artifact names derived from the archive name and the
  1-based entry sequence number.
- Stream audio payloads to disk without buffering them in memory.
- Stage the manifest in a partial file that only becomes final on success.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
import shutil
from typing import BinaryIO, TextIO

PARTIAL_SUFFIX = ".partial"


class ArtifactStore:
    """Filesystem-backed store for one extracted archive."""

    def __init__(self, root: Path, archive_name: str) -> None:
        """Initialize the store with an output directory and archive file name."""

        self.root = root
        self.archive_name = archive_name

    @property
    def manifest_path(self) -> Path:
        """Final manifest path (`<archive stem>.xml`)."""

        return self.root / Path(self.archive_name).with_suffix(".xml").name

    def audio_filename(self, index: int) -> str:
        """Return the `.wem` artifact name for a 1-based entry index."""

        return f"{self.archive_name}_{index:05d}.wem"

    def prepare(self) -> None:
        """Create the output directory and drop any manifest from earlier runs."""

        self.root.mkdir(parents=True, exist_ok=True)
        for stale in (self.manifest_path, self._partial_manifest_path()):
            if stale.exists():
                stale.unlink()

    def save_audio_stream(self, index: int, source: BinaryIO) -> Path:
        """Copy an audio payload verbatim to its artifact path and return it."""

        path = self.root / self.audio_filename(index)
        with path.open("wb") as output:
            shutil.copyfileobj(source, output)
            output.flush()
        return path

    @contextmanager
    def open_manifest(self) -> Iterator[TextIO]:
        """Open a staged manifest stream, publishing it only on clean exit.

        The document is written to `<manifest>.partial`; on success it is
        renamed over the final path, on failure the partial file is removed.
        """

        partial_path = self._partial_manifest_path()
        try:
            with partial_path.open("w", encoding="utf-8", newline="") as handle:
                yield handle
                handle.flush()
        except BaseException:
            partial_path.unlink(missing_ok=True)
            raise
        partial_path.replace(self.manifest_path)

    def _partial_manifest_path(self) -> Path:
        manifest_path = self.manifest_path
        return manifest_path.with_name(manifest_path.name + PARTIAL_SUFFIX)
