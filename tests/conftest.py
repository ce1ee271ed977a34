"""Shared test fixtures."""

from __future__ import annotations

import pytest

_NUGET_ENV_VARS = (
    "NUGET_API_KEY",
    "NUGET_SEARCH_URL",
    "NUGET_REGISTRATION_URL",
    "NUGET_PACKAGE_BASE_URL",
    "NUGET_PUBLISH_URL",
    "NUGET_SYMBOL_PUBLISH_URL",
)


@pytest.fixture(autouse=True)
def _clean_nuget_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's NuGet settings out of tests that read the environment."""
    for name in _NUGET_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
