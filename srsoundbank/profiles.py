"""Game profile table for subtitle decoding and codebook defaults.

Responsibilities:
- Map a game selector (`srtt`, `sriv`, `srgooh`) to a typed profile.
- Supply the language-code table and text encoding used by subtitle tables.
- Supply the default packed codebook file name per title family.
"""

from __future__ import annotations

from dataclasses import dataclass

from .parsing import normalize_optional_string


THIRD_FAMILY = "third"
FOURTH_FAMILY = "fourth"

_FAMILY_CODEBOOKS = {
    THIRD_FAMILY: "packed_codebooks.bin",
    FOURTH_FAMILY: "packed_codebooks_aoTuV_603.bin",
}

_SR3_LANGUAGES = ("en", "es", "fr", "de", "it", "nl", "ru", "pl", "cs", "ja", "ko")
_SR4_LANGUAGES = ("en", "es", "fr", "de", "it", "nl", "ru", "pl", "cs", "ja", "ko", "zh")


@dataclass(frozen=True, slots=True)
class GameProfile:
    """External game profile consumed by the decoder and converter.

    Attributes:
        key: CLI selector for the profile.
        label: Label written to the manifest root `game` attribute.
        family: Title family (`third` or `fourth`) used for codebook defaults.
        languages: Language codes indexed by the archive's language ids.
        text_encoding: Codec used for subtitle text payloads.
    """

    key: str
    label: str
    family: str
    languages: tuple[str, ...]
    text_encoding: str = "utf-16-le"

    @property
    def default_codebooks(self) -> str:
        """Return the packed codebook file name used by this title family."""

        return _FAMILY_CODEBOOKS[self.family]

    def language_code(self, language_id: int) -> str | None:
        """Return the language code for an archive language id, if known."""

        if 0 <= language_id < len(self.languages):
            return self.languages[language_id]
        return None


GAME_PROFILES: dict[str, GameProfile] = {
    "srtt": GameProfile(
        key="srtt",
        label="SaintsRowTheThird",
        family=THIRD_FAMILY,
        languages=_SR3_LANGUAGES,
    ),
    "sriv": GameProfile(
        key="sriv",
        label="SaintsRowIV",
        family=FOURTH_FAMILY,
        languages=_SR4_LANGUAGES,
    ),
    "srgooh": GameProfile(
        key="srgooh",
        label="SaintsRowGatOutOfHell",
        family=FOURTH_FAMILY,
        languages=_SR4_LANGUAGES,
    ),
}


def resolve_profile(key: str) -> GameProfile:
    """Resolve a game selector to a built-in profile.

    Raises:
        ValueError: If the selector does not name a known profile.
    """

    normalized = (normalize_optional_string(key) or "").lower()
    profile = GAME_PROFILES.get(normalized)
    if profile is None:
        valid = ", ".join(f"`{name}`" for name in GAME_PROFILES)
        raise ValueError(f"Unknown game `{key}`. Valid options: {valid}.")
    return profile
