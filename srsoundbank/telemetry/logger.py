"""Structured run logging for soundbank extraction.

Responsibilities:
- Emit one deterministic `[phase]` line per pipeline event through `loguru`.
- Keep context tokens shell-safe and key-ordered so log output is stable.
- Provide the extraction-specific events: stage lifecycle, the extract summary
  (entry count, game, bank id), a skipped conversion stage with its missing
  prerequisites, and per-file conversion failures.

Free-form diagnostics (error messages, paths with spaces) are carried in a
single shell-quoted `detail=` token at the end of the line.
"""

from __future__ import annotations

import shlex
import sys
from typing import TextIO

from loguru import logger as _loguru_logger

from ..errors import ToolExecutionError, ToolUnavailableError


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class RunLogger:
    """Emit deterministic phase logs for CLI-observable extraction activity.

    Lines look like
    `[phase] level=INFO stage=extract event=summary entries=3 game=sriv wwise_id=12345`.
    """

    def __init__(self, sink: TextIO | None = None) -> None:
        """Route loguru output to `sink` (stderr by default) as bare messages."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level="INFO", colorize=False)

    def log_event(
        self,
        level: str,
        event: str,
        stage: str,
        *,
        detail: str | None = None,
        **context: object,
    ) -> None:
        """Emit one structured runtime log line."""

        line = f"[phase] level={level} stage={stage} event={event}{_format_context(context)}"
        if detail is not None:
            line += f" detail={shlex.quote(detail)}"
        _loguru_logger.log(level, line)

    def log_stage_start(self, stage: str) -> None:
        self.log_event("INFO", "start", stage)

    def log_stage_complete(self, stage: str) -> None:
        self.log_event("INFO", "complete", stage)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure event naming only the exception type."""

        self.log_event("ERROR", "failure", stage, error_type=error_type)

    def log_extract_summary(self, *, entries: int, game: str, wwise_id: int) -> None:
        """Emit the entry count, game key, and bank id of a finished extraction."""

        self.log_event("INFO", "summary", "extract", entries=entries, game=game, wwise_id=wwise_id)

    def log_conversion_skipped(self, error: ToolUnavailableError) -> None:
        """Emit why the conversion stage did not touch any artifact."""

        self.log_event(
            "WARNING",
            "skipped",
            "convert",
            detail=str(error),
            missing=len(error.missing),
        )

    def log_conversion_failure(self, index: int, failure: ToolExecutionError) -> None:
        """Emit one artifact's failed tool run; the conversion loop continues."""

        self.log_event(
            "ERROR",
            "file_failure",
            "convert",
            detail=str(failure),
            index=index,
            returncode=failure.returncode,
            tool=failure.tool,
        )
