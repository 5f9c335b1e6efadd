"""Shared pytest fixtures for the srsoundbank test suite."""

from __future__ import annotations

import pytest

from srsoundbank.profiles import GameProfile, resolve_profile


@pytest.fixture
def sriv_profile() -> GameProfile:
    """Provide the Saints Row IV profile used by most decoding tests."""

    return resolve_profile("sriv")
