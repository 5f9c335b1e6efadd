"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
per-entry progress lines, and the final extraction/conversion summary.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import ConversionReport, ExtractionResult
from .profiles import GameProfile


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_entry_progress(index: int, total: int, step: str) -> None:
    """Print one per-entry progress line."""

    typer.echo(f"[{index}/{total}] Extracting {step}... done.")


def echo_conversion_summary(report: ConversionReport | None) -> None:
    """Print the conversion stage outcome, including skip reasons."""

    if report is None:
        typer.echo("Converted: skipped (conversion disabled)")
        return
    if report.skipped:
        for reason in report.missing:
            typer.secho(reason, fg=typer.colors.YELLOW, err=True)
        typer.echo("Converted: skipped (unable to convert extracted audio)")
        return
    typer.echo(f"Converted: {report.converted_count}/{len(report.outcomes)}")
    for outcome in report.failed:
        typer.secho(
            f"[{outcome.index}] conversion failed: {outcome.failure}",
            fg=typer.colors.RED,
            err=True,
        )


def echo_extraction_summary(result: ExtractionResult) -> None:
    """Print run-level summary distinguishing extraction and conversion."""

    typer.echo(f"Extracted: {result.extracted_count}")
    echo_conversion_summary(result.conversion)
    typer.echo(f"Manifest: {result.manifest_path}")


def echo_profile_list(profiles: list[GameProfile]) -> None:
    """Print compact deterministic game profile rows."""

    for profile in sorted(profiles, key=lambda item: item.key):
        typer.echo(f"{profile.key}: {profile.label} (codebooks: {profile.default_codebooks})")
