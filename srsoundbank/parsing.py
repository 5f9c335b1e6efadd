"""Shared parsing helpers for configuration value normalization."""

from __future__ import annotations


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_platform_list(value: object) -> tuple[str, ...]:
    """Parse a comma-separated or sequence platform list into lowercase tokens.

    Blank items are dropped and duplicates keep their first position.
    """

    if value is None:
        return tuple()
    if isinstance(value, str):
        raw_items: list[object] = list(value.split(","))
    elif isinstance(value, (list, tuple)):
        raw_items = list(value)
    else:
        raise ValueError("Platform list must be a string or a list of strings.")

    platforms: list[str] = []
    for item in raw_items:
        token = normalize_optional_string(item)
        if token is None:
            continue
        lowered = token.lower()
        if lowered not in platforms:
            platforms.append(lowered)
    return tuple(platforms)
