"""Process-wide configuration, read once from the environment at startup."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_SEARCH_URL = "https://azuresearch-usnc.nuget.org/query"
DEFAULT_REGISTRATION_URL = "https://api.nuget.org/v3/registration5-gz-semver2/"
DEFAULT_PACKAGE_BASE_URL = "https://api.nuget.org/v3-flatcontainer/"
DEFAULT_PUBLISH_URL = "https://www.nuget.org/api/v2/package"
DEFAULT_SYMBOL_PUBLISH_URL = "https://www.nuget.org/api/v2/symbolpackage"

MISSING_API_KEY_MSG = "An API key is required. Pass api_key or set NUGET_API_KEY for the server."


@dataclass(frozen=True, slots=True)
class Settings:
    """Endpoints and the default API key used when a tool call omits one."""

    api_key: str = ""
    search_url: str = DEFAULT_SEARCH_URL
    registration_url: str = DEFAULT_REGISTRATION_URL
    package_base_url: str = DEFAULT_PACKAGE_BASE_URL
    publish_url: str = DEFAULT_PUBLISH_URL
    symbol_publish_url: str = DEFAULT_SYMBOL_PUBLISH_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("NUGET_API_KEY", "").strip(),
            search_url=env.get("NUGET_SEARCH_URL") or DEFAULT_SEARCH_URL,
            registration_url=_with_slash(env.get("NUGET_REGISTRATION_URL") or DEFAULT_REGISTRATION_URL),
            package_base_url=_with_slash(env.get("NUGET_PACKAGE_BASE_URL") or DEFAULT_PACKAGE_BASE_URL),
            publish_url=(env.get("NUGET_PUBLISH_URL") or DEFAULT_PUBLISH_URL).rstrip("/"),
            symbol_publish_url=(
                env.get("NUGET_SYMBOL_PUBLISH_URL") or DEFAULT_SYMBOL_PUBLISH_URL
            ).rstrip("/"),
        )


def resolve_api_key(explicit: str | None, settings: Settings) -> str:
    """Per-call key first, then the configured default. Empty means none."""
    if explicit and explicit.strip():
        return explicit.strip()
    return settings.api_key


def _with_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"
