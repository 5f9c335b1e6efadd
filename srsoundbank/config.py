"""Configuration model and loaders for soundbank extraction.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.
- Resolve defaults that depend on the game profile (output dir, codebooks).

Key types:
- `ExtractConfig`: normalized runtime settings for one extraction run.
- `ConfigLoader`: static construction helpers for `ExtractConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .audio.conversion import DEFAULT_CONVERSION_PLATFORMS
from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_platform_list,
)
from .profiles import GAME_PROFILES


_ENV_PREFIX = "SRSOUNDBANK_"


@dataclass(slots=True)
class ExtractConfig:
    """Runtime configuration for one extraction run.

    Attributes:
        game: Game profile selector (`srtt`, `sriv`, `srgooh`).
        soundbank: Path to the streaming soundbank to unpack.
        output_dir: Output directory, defaulting to `extracted-<soundbank name>`.
        convert_audio: Whether to convert extracted `.wem` files to `.ogg`.
        codebooks: Optional codebook table override for `ww2ogg`.
        tools_dir: Optional directory holding `ww2ogg`, `revorb`, and codebooks.
        conversion_platforms: Platform families the conversion tools run on.
    """

    game: str
    soundbank: Path
    output_dir: Path | None = None
    convert_audio: bool = True
    codebooks: Path | None = None
    tools_dir: Path | None = None
    conversion_platforms: tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_CONVERSION_PLATFORMS
    )

    def validate(self) -> None:
        """Validate runtime configuration values before extraction."""

        if (normalize_optional_string(self.game) or "").lower() not in GAME_PROFILES:
            valid = ", ".join(f"`{name}`" for name in GAME_PROFILES)
            raise ValueError(f"`game` must be one of: {valid}.")
        if normalize_optional_string(str(self.soundbank)) is None:
            raise ValueError("`soundbank` must be a non-empty path.")

    def resolved_output_dir(self) -> Path:
        """Return the configured output directory or the default per archive."""

        if self.output_dir is not None:
            return self.output_dir
        return Path(f"extracted-{self.soundbank.name}")


class ConfigLoader:
    """Factory helpers for creating `ExtractConfig` objects."""

    _REQUIRED_KEYS = ("game", "soundbank")
    _SUPPORTED_KEYS = frozenset(
        {
            "game",
            "soundbank",
            "output_dir",
            "convert_audio",
            "codebooks",
            "tools_dir",
            "conversion_platforms",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> ExtractConfig:
        """Load configuration from a YAML mapping file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the payload has missing, unknown, or invalid keys.
        """

        raw_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a mapping at the top level.")
        return ConfigLoader._build_config_from_mapping(payload, f"YAML config `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ExtractConfig:
        """Load configuration from `SRSOUNDBANK_*` environment variables."""

        source = env if env is not None else os.environ
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_KEYS:
            env_key = f"{_ENV_PREFIX}{key.upper()}"
            value = normalize_optional_string(source.get(env_key))
            if value is not None:
                payload[key] = value
        return ConfigLoader._build_config_from_mapping(payload, "Environment")

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> ExtractConfig:
        """Validate one raw mapping and build a typed config."""

        unknown = sorted(str(key) for key in payload if key not in ConfigLoader._SUPPORTED_KEYS)
        if unknown:
            raise ValueError(f"{source_label} has unsupported key(s): {', '.join(unknown)}.")
        missing = [
            key
            for key in ConfigLoader._REQUIRED_KEYS
            if normalize_optional_string(payload.get(key)) is None
        ]
        if missing:
            raise ValueError(f"{source_label} is missing required key(s): {', '.join(missing)}.")

        platforms = DEFAULT_CONVERSION_PLATFORMS
        if "conversion_platforms" in payload:
            try:
                platforms = parse_platform_list(payload["conversion_platforms"])
            except ValueError as exc:
                raise ValueError(f"{source_label} field `conversion_platforms`: {exc}") from exc

        config = ExtractConfig(
            game=str(normalize_optional_string(payload["game"])),
            soundbank=Path(str(normalize_optional_string(payload["soundbank"]))),
            output_dir=ConfigLoader._optional_path(payload, "output_dir"),
            convert_audio=ConfigLoader._optional_boolean(
                payload, "convert_audio", source_label, default=True
            ),
            codebooks=ConfigLoader._optional_path(payload, "codebooks"),
            tools_dir=ConfigLoader._optional_path(payload, "tools_dir"),
            conversion_platforms=platforms,
        )
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        return config

    @staticmethod
    def _optional_path(payload: Mapping[str, Any], key: str) -> Path | None:
        """Read an optional non-empty path field."""

        value = normalize_optional_string(payload.get(key))
        if value is None:
            return None
        return Path(value)

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
