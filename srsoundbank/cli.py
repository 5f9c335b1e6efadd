"""Command-line interface for srsoundbank.

Responsibilities:
- Expose the `extract` and `profiles` commands.
- Convert CLI arguments (and optional YAML defaults) into `ExtractConfig`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_entry_progress,
    echo_extraction_summary,
    echo_profile_list,
    exit_with_command_error,
)
from .config import ConfigLoader, ExtractConfig
from .errors import PipelineStageError
from .pipeline import SoundbankExtractor
from .profiles import GAME_PROFILES
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="srsoundbank",
    no_args_is_help=True,
    help="Saints Row streaming soundbank extractor.",
)


def _load_yaml_config(config_path: Path | None) -> ExtractConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _resolve_extract_config(
    config_file: Path | None,
    game: str | None,
    soundbank: Path | None,
    output: Path | None,
    convert: bool | None,
    codebooks: Path | None,
    tools_dir: Path | None,
) -> ExtractConfig:
    """Resolve effective config from YAML defaults and explicit CLI overrides."""

    loaded_config = _load_yaml_config(config_file)
    if loaded_config is None:
        if game is None or soundbank is None:
            raise PipelineStageError(
                stage="config",
                detail="GAME and SOUNDBANK are required when `--config` is not provided.",
                hint="Pass `<game> <soundbank>` or use `--config <path.yaml>`.",
            )
        return ExtractConfig(
            game=game,
            soundbank=soundbank,
            output_dir=output,
            convert_audio=convert if convert is not None else True,
            codebooks=codebooks,
            tools_dir=tools_dir,
        )

    return ExtractConfig(
        game=game if game is not None else loaded_config.game,
        soundbank=soundbank if soundbank is not None else loaded_config.soundbank,
        output_dir=output if output is not None else loaded_config.output_dir,
        convert_audio=convert if convert is not None else loaded_config.convert_audio,
        codebooks=codebooks if codebooks is not None else loaded_config.codebooks,
        tools_dir=tools_dir if tools_dir is not None else loaded_config.tools_dir,
        conversion_platforms=loaded_config.conversion_platforms,
    )


@app.command("extract")
def extract_command(
    game: Annotated[
        str | None,
        typer.Argument(
            help="Game whose tables decode subtitles: `srtt`, `sriv`, or `srgooh`.",
        ),
    ] = None,
    soundbank: Annotated[
        Path | None,
        typer.Argument(help="The soundbank to unpack (`*_media.bnk_pc`)."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Argument(
            help="Output directory. Defaults to `extracted-<soundbank name>`.",
        ),
    ] = None,
    convert: Annotated[
        bool | None,
        typer.Option(
            "--convert/--no-convert",
            help="Convert extracted audio into playable OGG files (default: convert).",
        ),
    ] = None,
    codebooks: Annotated[
        Path | None,
        typer.Option("--codebooks", help="Override the packed codebooks file used by ww2ogg."),
    ] = None,
    tools_dir: Annotated[
        Path | None,
        typer.Option("--tools-dir", help="Directory holding ww2ogg, revorb, and codebooks."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
) -> None:
    """Extract a streaming soundbank into audio files and an XML manifest."""

    try:
        config = _resolve_extract_config(
            config_file=config_file,
            game=game,
            soundbank=soundbank,
            output=output,
            convert=convert,
            codebooks=codebooks,
            tools_dir=tools_dir,
        )
        typer.echo(f"Extracting {config.soundbank} to {config.resolved_output_dir()}.")
        extractor = SoundbankExtractor(
            run_logger=RunLogger(),
            entry_progress_callback=echo_entry_progress,
        )
        result = extractor.run(config)
    except Exception as exc:
        exit_with_command_error("extract", exc)

    echo_extraction_summary(result)


@app.command("profiles")
def profiles_command() -> None:
    """List supported game profiles and their default codebooks."""

    echo_profile_list(list(GAME_PROFILES.values()))


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
