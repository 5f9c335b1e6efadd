"""Deterministic external tool and codebook resolution helpers.

Responsibilities:
- Resolve `ww2ogg`, `revorb`, and packed codebook files from the `external`
  directory shipped next to the application.
- Support frozen app layouts (for example PyInstaller) and local development runs.
"""

from __future__ import annotations

from pathlib import Path
import sys

EXTERNAL_DIR_NAME = "external"


def external_dir(tools_dir: Path | None = None) -> Path:
    """Return the directory holding conversion tools and codebooks."""

    if tools_dir is not None:
        return tools_dir
    return _app_root() / EXTERNAL_DIR_NAME


def resolve_external_tool(command_name: str, tools_dir: Path | None = None) -> Path:
    """Resolve one external executable inside the tools directory.

    Resolution order is `<dir>/<name>` then `<dir>/<name>.exe`. When neither
    exists the first candidate is returned so callers can report it as missing.
    """

    candidates = [external_dir(tools_dir) / name for name in _candidate_names(command_name)]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return candidates[0]


def resolve_codebooks(
    default_name: str,
    override: Path | None = None,
    tools_dir: Path | None = None,
) -> Path:
    """Return the codebook table path, preferring an explicit override."""

    if override is not None:
        return override
    return external_dir(tools_dir) / default_name


def _candidate_names(command_name: str) -> tuple[str, ...]:
    """Return command name variants including Windows `.exe` fallback."""

    lowered = command_name.lower()
    if lowered.endswith(".exe"):
        return (command_name,)
    return (command_name, f"{command_name}.exe")


def _app_root() -> Path:
    """Resolve runtime application root for frozen and non-frozen execution."""

    frozen = bool(getattr(sys, "frozen", False))
    if frozen:
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]
