"""HTTP client for the NuGet V3 read APIs.

Search:        https://azuresearch-usnc.nuget.org/query
Registration:  https://api.nuget.org/v3/registration5-gz-semver2/{id}/index.json
Flat container: https://api.nuget.org/v3-flatcontainer/{id}/{version}/{id}.{version}.nupkg
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote as urlquote

import httpx

from nuget_mcp.errors import InvalidVersionError, RegistryError
from nuget_mcp.models import PackageInfo, PackageVersion, SearchResult
from nuget_mcp.settings import (
    DEFAULT_PACKAGE_BASE_URL,
    DEFAULT_REGISTRATION_URL,
    DEFAULT_SEARCH_URL,
)
from nuget_mcp.versioning import NuGetVersion, parse_versions

logger = logging.getLogger(__name__)

# Newer search fields (semver2 packages) are only returned at this level.
_SEMVER_LEVEL = "2.0.0"


@dataclass
class NuGetClient:
    """Async client for NuGet search, registration and package content."""

    http: httpx.AsyncClient
    search_url: str = DEFAULT_SEARCH_URL
    registration_url: str = DEFAULT_REGISTRATION_URL
    package_base_url: str = DEFAULT_PACKAGE_BASE_URL

    async def search(
        self,
        query: str,
        *,
        skip: int = 0,
        take: int = 20,
        prerelease: bool = True,
    ) -> SearchResult:
        """Search the registry.

        Args:
            query: Search terms; supports field tokens like ``packageid:`` and ``owner:``.
            skip: Results to skip (pagination cursor).
            take: Page size.
            prerelease: Whether prerelease versions are included.

        Returns:
            SearchResult with total hit count and one PackageInfo per hit.
        """
        params = {
            "q": query,
            "skip": skip,
            "take": take,
            "prerelease": "true" if prerelease else "false",
            "semVerLevel": _SEMVER_LEVEL,
        }
        data = await self._get_json(self.search_url, params=params, what=f"search '{query}'")
        if data is None:
            return SearchResult()
        return SearchResult(
            total_hits=int(data.get("totalHits", 0) or 0),
            data=[self._parse_package(item) for item in data.get("data", [])],
        )

    async def get_package(self, package_id: str) -> PackageInfo | None:
        """Look up a package by exact id (case-insensitive), prerelease included."""
        result = await self.search(f"packageid:{package_id}", take=20)
        wanted = package_id.lower()
        for package in result.data:
            if package.id.lower() == wanted:
                return package
        return None

    async def list_versions(
        self,
        package_id: str,
        *,
        include_unlisted: bool,
    ) -> list[NuGetVersion]:
        """Read every version from the registration index.

        Prerelease versions are always included. Unknown packages give an
        empty list.
        """
        encoded = urlquote(package_id.lower(), safe="")
        index = await self._get_json(
            f"{self.registration_url}{encoded}/index.json",
            what=f"registration index for '{package_id}'",
        )
        if index is None:
            return []

        raw_versions: list[str] = []
        for page in index.get("items", []):
            leaves = page.get("items")
            if leaves is None:
                # Large packages only link their registration pages.
                page_data = await self._get_json(
                    page.get("@id", ""),
                    what=f"registration page for '{package_id}'",
                )
                leaves = page_data.get("items", []) if page_data else []
            for leaf in leaves:
                entry = leaf.get("catalogEntry", {})
                version = entry.get("version")
                if not version:
                    continue
                if not include_unlisted and entry.get("listed", True) is False:
                    continue
                raw_versions.append(version)

        try:
            return parse_versions(raw_versions, strict=True)
        except InvalidVersionError as exc:
            raise RegistryError(f"Registry listed an unusable version of '{package_id}': {exc}") from exc

    async def download_package(
        self,
        package_id: str,
        version: NuGetVersion,
        destination: Path,
    ) -> Path:
        """Stream a package archive from the flat container into ``destination``."""
        lower_id = package_id.lower()
        lower_version = version.normalized.lower()
        file_name = f"{lower_id}.{lower_version}.nupkg"
        url = (
            f"{self.package_base_url}{urlquote(lower_id, safe='')}/"
            f"{urlquote(lower_version, safe='')}/{urlquote(file_name, safe='')}"
        )
        target = destination / file_name
        logger.debug("Downloading %s %s from %s", package_id, version, url)

        try:
            async with self.http.stream("GET", url) as response:
                if response.status_code == 404:
                    raise RegistryError(
                        f"Package '{package_id}' version '{version}' is not available for download."
                    )
                response.raise_for_status()
                with target.open("wb") as fh:
                    async for chunk in response.aiter_bytes():
                        await asyncio.to_thread(fh.write, chunk)
        except httpx.HTTPStatusError as exc:
            raise RegistryError(
                f"Failed to download '{package_id}' version '{version}': "
                f"{exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RegistryError(
                f"Failed to download '{package_id}' version '{version}': {exc}"
            ) from exc

        if target.stat().st_size == 0:
            raise RegistryError(
                f"Download of '{package_id}' version '{version}' returned no content."
            )
        return target

    # ── HTTP helpers ──────────────────────────────────────────

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, object] | None = None,
        what: str,
    ) -> dict | None:
        """GET a JSON document. Returns None on 404, raises RegistryError otherwise."""
        logger.debug("GET %s", url)
        try:
            response = await self.http.get(url, params=params)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise RegistryError(
                f"NuGet API error for {what}: "
                f"{exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RegistryError(f"Failed to reach NuGet API for {what}: {exc}") from exc
        except ValueError as exc:
            raise RegistryError(f"NuGet API returned invalid JSON for {what}.") from exc

        if not isinstance(data, dict):
            raise RegistryError(f"NuGet API returned an unexpected document for {what}.")
        return data

    # ── Parsing ───────────────────────────────────────────────

    def _parse_package(self, raw: dict) -> PackageInfo:
        """Map one search hit to a PackageInfo. Tolerant of missing fields."""
        return PackageInfo(
            id=raw.get("id", ""),
            version=raw.get("version", ""),
            title=raw.get("title", "") or "",
            description=raw.get("description", "") or "",
            authors=_as_list(raw.get("authors")),
            owners=_as_list(raw.get("owners")),
            total_downloads=int(raw.get("totalDownloads", 0) or 0),
            verified=bool(raw.get("verified", False)),
            tags=_as_list(raw.get("tags")),
            project_url=raw.get("projectUrl", "") or "",
            license_url=raw.get("licenseUrl", "") or "",
            icon_url=raw.get("iconUrl", "") or "",
            versions=[
                PackageVersion(
                    version=v.get("version", ""),
                    downloads=int(v.get("downloads", 0) or 0),
                    registration_url=v.get("@id", ""),
                )
                for v in raw.get("versions", [])
            ],
        )


def _as_list(value: object) -> list[str]:
    """Search fields like ``authors`` come back as either a string or a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value if item]
