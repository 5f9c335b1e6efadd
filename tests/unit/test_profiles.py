"""Unit tests for game profile resolution."""

from __future__ import annotations

import pytest

from srsoundbank.profiles import resolve_profile


@pytest.mark.parametrize(
    ("key", "label", "codebooks"),
    [
        ("srtt", "SaintsRowTheThird", "packed_codebooks.bin"),
        ("sriv", "SaintsRowIV", "packed_codebooks_aoTuV_603.bin"),
        (" SRGOOH ", "SaintsRowGatOutOfHell", "packed_codebooks_aoTuV_603.bin"),
    ],
)
def test_resolve_profile_maps_selector_to_family_defaults(
    key: str,
    label: str,
    codebooks: str,
) -> None:
    """Profiles should carry the manifest label and family codebook default."""

    profile = resolve_profile(key)

    assert profile.label == label
    assert profile.default_codebooks == codebooks
    assert profile.language_code(0) == "en"
    assert profile.language_code(len(profile.languages)) is None


def test_resolve_profile_rejects_unknown_selector() -> None:
    """Unknown selectors should list the valid options."""

    with pytest.raises(ValueError, match="Unknown game `sr2`.*`srtt`"):
        resolve_profile("sr2")
