"""Pipeline orchestration for soundbank extraction.

Responsibilities:
- Define the stage order: open archive, extract entries + manifest, convert.
- Map decode and I/O failures to stage-aware errors that halt the run.
- Keep conversion failures isolated from the already completed extraction.

Key types:
- `SoundbankExtractor`: orchestration facade.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from ..audio.conversion import (
    REVORB_TOOL,
    WW2OGG_TOOL,
    ConversionOrchestrator,
    ConversionPreconditions,
    check_preconditions,
)
from ..config import ExtractConfig
from ..errors import PipelineStageError, SoundbankError
from ..io.container import Soundbank
from ..io.storage import ArtifactStore
from ..models.datatypes import ConversionReport, ExtractionResult
from ..profiles import GameProfile, resolve_profile
from ..runtime_tools import resolve_codebooks, resolve_external_tool
from ..telemetry.logger import RunLogger
from .manifesting import EntryProgressCallback, ManifestWriter
from .telemetry import PipelineTelemetryMixin


class SoundbankExtractor(PipelineTelemetryMixin):
    """Coordinate all stages for a single soundbank extraction."""

    def __init__(
        self,
        run_logger: RunLogger | None = None,
        entry_progress_callback: EntryProgressCallback | None = None,
    ) -> None:
        """Initialize optional runtime logging and per-entry progress hooks."""

        self._run_logger = run_logger
        self._entry_progress_callback = entry_progress_callback

    def run(self, config: ExtractConfig) -> ExtractionResult:
        """Extract one soundbank and optionally convert its audio."""

        profile = self._resolve_profile(config)
        preconditions = (
            self.conversion_preconditions(config, profile) if config.convert_audio else None
        )
        store = ArtifactStore(config.resolved_output_dir(), config.soundbank.name)

        try:
            stream = config.soundbank.open("rb")
        except OSError as exc:
            raise PipelineStageError(
                stage="open",
                detail=f"Cannot open soundbank `{config.soundbank}`: {exc}",
                hint="Verify the soundbank path exists and is readable.",
            ) from exc

        with stream:
            soundbank = self._run_stage("open", lambda: self._open_soundbank(stream, config))
            audio_paths = self._run_stage(
                "extract", lambda: self._extract(soundbank, profile, store)
            )

        conversion: ConversionReport | None = None
        if preconditions is not None:
            orchestrator = ConversionOrchestrator(preconditions, run_logger=self._run_logger)
            conversion = self._run_stage("convert", lambda: orchestrator.convert(audio_paths))

        return ExtractionResult(
            soundbank_path=config.soundbank,
            output_dir=store.root,
            manifest_path=store.manifest_path,
            wwise_bank_id=soundbank.wwise_bank_id,
            audio_paths=tuple(audio_paths),
            conversion=conversion,
        )

    def conversion_preconditions(
        self,
        config: ExtractConfig,
        profile: GameProfile,
        platform: str | None = None,
    ) -> ConversionPreconditions:
        """Resolve tool paths and check conversion prerequisites once."""

        return check_preconditions(
            ww2ogg=resolve_external_tool(WW2OGG_TOOL, config.tools_dir),
            revorb=resolve_external_tool(REVORB_TOOL, config.tools_dir),
            codebooks=resolve_codebooks(
                profile.default_codebooks,
                override=config.codebooks,
                tools_dir=config.tools_dir,
            ),
            platform=platform,
            supported_platforms=config.conversion_platforms,
        )

    def _resolve_profile(self, config: ExtractConfig) -> GameProfile:
        """Validate config and resolve its game profile."""

        try:
            config.validate()
            return resolve_profile(config.game)
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Run `srsoundbank profiles` to list supported games.",
            ) from exc

    def _open_soundbank(self, stream: BinaryIO, config: ExtractConfig) -> Soundbank:
        """Parse the archive header and entry table."""

        try:
            return Soundbank.open(stream)
        except SoundbankError as exc:
            raise PipelineStageError(
                stage="open",
                detail=f"Invalid soundbank `{config.soundbank}`: {exc}",
                hint="Verify the file is a PC streaming soundbank (`*_media.bnk_pc`).",
            ) from exc
        except OSError as exc:
            raise PipelineStageError(
                stage="open",
                detail=f"Failed to read soundbank `{config.soundbank}`: {exc}",
            ) from exc

    def _extract(
        self,
        soundbank: Soundbank,
        profile: GameProfile,
        store: ArtifactStore,
    ) -> list[Path]:
        """Write audio artifacts and the manifest."""

        writer = ManifestWriter(progress_callback=self._entry_progress_callback)
        try:
            audio_paths = writer.write(soundbank, profile, store)
        except OSError as exc:
            raise PipelineStageError(
                stage="extract",
                detail=f"Failed to extract soundbank entries: {exc}",
                hint="Verify the output directory is writable and the soundbank is readable.",
            ) from exc
        if self._run_logger is not None:
            self._run_logger.log_extract_summary(
                entries=len(audio_paths),
                game=profile.key,
                wwise_id=soundbank.wwise_bank_id,
            )
        return audio_paths
