"""Ports: NuGet read-side registry and push/delete clients."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from nuget_mcp.models import PackageInfo, SearchResult
from nuget_mcp.versioning import NuGetVersion


class RegistryClientPort(Protocol):
    """Port for querying package metadata and downloading package archives."""

    async def search(
        self,
        query: str,
        *,
        skip: int = 0,
        take: int = 20,
        prerelease: bool = True,
    ) -> SearchResult:
        """Run a search query against the registry."""
        ...

    async def get_package(self, package_id: str) -> PackageInfo | None:
        """Fetch the search entry for one package id, or None if unknown."""
        ...

    async def list_versions(
        self,
        package_id: str,
        *,
        include_unlisted: bool,
    ) -> list[NuGetVersion]:
        """Every published version of a package, ascending and de-duplicated."""
        ...

    async def download_package(
        self,
        package_id: str,
        version: NuGetVersion,
        destination: Path,
    ) -> Path:
        """Download one package archive into ``destination`` and return its path."""
        ...


class PushClientPort(Protocol):
    """Port for the registry's push/delete protocol."""

    async def push(self, package_path: Path, api_key: str, *, symbols: bool = False) -> None:
        """Upload a package (or symbol package) file."""
        ...

    async def delete(self, package_id: str, version: str, api_key: str) -> None:
        """Delete one version of a package."""
        ...
