"""Sequential `.wem` to `.ogg` conversion through external tools.

Responsibilities:
- Check platform and tool/codebook prerequisites once, before any file work.
- Run `ww2ogg` then `revorb` for each extracted audio artifact, blocking on
  each process, and record one outcome per artifact.
- Keep per-file tool failures isolated so the loop always continues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import subprocess
import sys

from ..errors import ToolExecutionError, ToolUnavailableError
from ..models.datatypes import ConversionOutcome, ConversionReport
from ..telemetry.logger import RunLogger

WW2OGG_TOOL = "ww2ogg"
REVORB_TOOL = "revorb"
DEFAULT_CONVERSION_PLATFORMS = ("win32",)


@dataclass(frozen=True, slots=True)
class ConversionPreconditions:
    """Immutable result of the one-time conversion prerequisite check.

    Attributes:
        ww2ogg: Resolved `ww2ogg` executable path.
        revorb: Resolved `revorb` executable path.
        codebooks: Packed codebook table passed to `ww2ogg --pcb`.
        missing: Human-readable descriptions of unmet prerequisites.
    """

    ww2ogg: Path
    revorb: Path
    codebooks: Path
    missing: tuple[str, ...] = field(default_factory=tuple)

    @property
    def satisfied(self) -> bool:
        return not self.missing

    def as_error(self) -> ToolUnavailableError | None:
        """Return a `ToolUnavailableError` describing unmet prerequisites."""

        if self.satisfied:
            return None
        return ToolUnavailableError(list(self.missing))


def check_preconditions(
    *,
    ww2ogg: Path,
    revorb: Path,
    codebooks: Path,
    platform: str | None = None,
    supported_platforms: tuple[str, ...] = DEFAULT_CONVERSION_PLATFORMS,
) -> ConversionPreconditions:
    """Check platform support and prerequisite files once."""

    current_platform = (platform if platform is not None else sys.platform).lower()
    if not any(current_platform.startswith(family) for family in supported_platforms):
        supported = ", ".join(supported_platforms) or "none"
        missing: list[str] = [
            f"Audio conversion is only available on: {supported} (current: {current_platform})."
        ]
        return ConversionPreconditions(ww2ogg, revorb, codebooks, tuple(missing))

    missing = []
    if not ww2ogg.is_file():
        missing.append(f"Could not find {WW2OGG_TOOL} at: {ww2ogg}")
    if not codebooks.is_file():
        missing.append(f"Could not find codebooks at: {codebooks}")
    if not revorb.is_file():
        missing.append(f"Could not find {REVORB_TOOL} at: {revorb}")
    return ConversionPreconditions(ww2ogg, revorb, codebooks, tuple(missing))


class ConversionOrchestrator:
    """Convert extracted audio artifacts with `ww2ogg` and `revorb`.

    A tool that cannot be started or exits with a non-zero status is a failure
    for that artifact, and `revorb` is not run on an `.ogg` that `ww2ogg` failed
    to produce. Exit statuses are kept on `ToolExecutionError.returncode` so
    each artifact's outcome says which tool failed and how.
    """

    def __init__(
        self,
        preconditions: ConversionPreconditions,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize with a precomputed prerequisite check."""

        self._preconditions = preconditions
        self._run_logger = run_logger

    @property
    def preconditions(self) -> ConversionPreconditions:
        return self._preconditions

    def convert(self, audio_paths: list[Path]) -> ConversionReport:
        """Convert artifacts in order, or skip the whole stage when unprepared."""

        unavailable = self._preconditions.as_error()
        if unavailable is not None:
            if self._run_logger is not None:
                self._run_logger.log_conversion_skipped(unavailable)
            return ConversionReport(skipped=True, missing=self._preconditions.missing)

        outcomes: list[ConversionOutcome] = []
        for index, audio_path in enumerate(audio_paths, start=1):
            outcome = self.convert_one(index, audio_path)
            if outcome.failure is not None and self._run_logger is not None:
                self._run_logger.log_conversion_failure(index, outcome.failure)
            outcomes.append(outcome)
        return ConversionReport(skipped=False, outcomes=tuple(outcomes))

    def convert_one(self, index: int, audio_path: Path) -> ConversionOutcome:
        """Run both tools for one artifact and return its outcome."""

        ogg_path = audio_path.with_suffix(".ogg")
        preconditions = self._preconditions
        ww2ogg_command = [
            str(preconditions.ww2ogg),
            "--pcb",
            str(preconditions.codebooks),
            "-o",
            str(ogg_path),
            str(audio_path),
        ]
        failure = self._run_tool(WW2OGG_TOOL, ww2ogg_command, audio_path)
        if failure is None:
            failure = self._run_tool(
                REVORB_TOOL,
                [str(preconditions.revorb), str(ogg_path)],
                audio_path,
            )
        return ConversionOutcome(
            index=index,
            audio_path=audio_path,
            ogg_path=ogg_path,
            failure=failure,
        )

    def _run_tool(
        self,
        tool: str,
        command: list[str],
        audio_path: Path,
    ) -> ToolExecutionError | None:
        """Run one tool to completion without a window or timeout."""

        try:
            completed = subprocess.run(
                command,
                check=False,
                capture_output=True,
                creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
            )
        except OSError:
            return ToolExecutionError(tool=tool, audio_path=audio_path, returncode=None)
        if completed.returncode != 0:
            return ToolExecutionError(
                tool=tool,
                audio_path=audio_path,
                returncode=completed.returncode,
            )
        return None
