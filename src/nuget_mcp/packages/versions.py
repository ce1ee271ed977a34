"""Version enumeration shared by the bulk delete and file listing workflows."""

from __future__ import annotations

from nuget_mcp.registry.base import RegistryClientPort
from nuget_mcp.versioning import NuGetVersion


async def list_versions(
    registry: RegistryClientPort,
    package_id: str,
    *,
    include_unlisted: bool,
) -> list[NuGetVersion]:
    """All distinct versions of ``package_id`` in ascending order.

    Prerelease versions are always included; unlisted ones only when asked.

    Raises:
        RegistryError: When the registry cannot be queried.
    """
    versions = await registry.list_versions(package_id, include_unlisted=include_unlisted)
    return sorted(set(versions))
