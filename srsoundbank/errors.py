"""Domain exceptions for soundbank decoding, conversion, and CLI diagnostics."""

from __future__ import annotations

from pathlib import Path


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class SoundbankError(Exception):
    """Base class for archive and metadata decoding failures."""


class FormatError(SoundbankError):
    """Raised when archive or metadata bytes violate the declared structure."""


class UnsupportedVersionError(SoundbankError):
    """Raised for metadata schema versions with no known layout."""

    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported metadata schema version {version}.")
        self.version = version


class ToolUnavailableError(RuntimeError):
    """Raised when external conversion prerequisites are missing."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__("Missing conversion prerequisites: " + "; ".join(missing))
        self.missing = list(missing)


class ToolExecutionError(RuntimeError):
    """Describes one failed external tool invocation for one audio artifact."""

    def __init__(self, *, tool: str, audio_path: Path, returncode: int | None) -> None:
        if returncode is None:
            detail = f"`{tool}` could not be started for `{audio_path.name}`."
        else:
            detail = f"`{tool}` exited with status {returncode} for `{audio_path.name}`."
        super().__init__(detail)
        self.tool = tool
        self.audio_path = audio_path
        self.returncode = returncode
