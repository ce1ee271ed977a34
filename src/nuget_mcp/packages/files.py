"""List the files inside a package archive."""

from __future__ import annotations

import logging
import tempfile
import zipfile
from pathlib import Path

from nuget_mcp.errors import NuGetMcpError, PackageArchiveError
from nuget_mcp.models import ToolResponse
from nuget_mcp.packages.versions import list_versions
from nuget_mcp.registry.base import RegistryClientPort
from nuget_mcp.versioning import find_version, latest

logger = logging.getLogger(__name__)

_TEMP_PREFIX = "nuget-mcp-"


def read_archive_entries(archive_path: Path) -> list[str]:
    """Sorted in-archive paths of every file entry; directory markers are skipped.

    Duplicate names in a malformed archive are kept as-is.
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            names = [
                info.filename
                for info in archive.infolist()
                if not info.is_dir() and info.filename.rsplit("/", 1)[-1]
            ]
    except (zipfile.BadZipFile, OSError) as exc:
        raise PackageArchiveError(f"'{archive_path.name}' is not a valid package archive: {exc}") from exc
    return sorted(names)


async def list_package_files(
    registry: RegistryClientPort,
    package_id: str,
    version: str | None = None,
    *,
    temp_root: Path | None = None,
) -> ToolResponse[list[str]]:
    """Download a package and list the files it contains.

    Without ``version`` the highest listed version is used. The archive is
    downloaded into a temporary directory (under ``temp_root`` when given)
    that is removed however this function exits.
    """
    package_id = (package_id or "").strip()
    if not package_id:
        return ToolResponse.failure("Package id is required.")

    try:
        versions = await list_versions(registry, package_id, include_unlisted=False)
    except NuGetMcpError as exc:
        return ToolResponse.failure(f"Failed to read metadata for '{package_id}': {exc}")

    if not versions:
        return ToolResponse.failure(f"Package '{package_id}' not found.")

    if version:
        target = find_version(versions, version)
        if target is None:
            return ToolResponse.failure(
                f"Version '{version}' of package '{package_id}' not found."
            )
    else:
        target = latest(versions)

    try:
        with tempfile.TemporaryDirectory(prefix=_TEMP_PREFIX, dir=temp_root) as workdir:
            archive_path = await registry.download_package(package_id, target, Path(workdir))
            entries = read_archive_entries(archive_path)
    except (NuGetMcpError, OSError) as exc:
        logger.debug("Listing files of %s %s failed", package_id, target, exc_info=True)
        return ToolResponse.failure(
            f"Failed to list files for '{package_id}' version '{target}': {exc}"
        )
    except Exception as exc:
        logger.warning("Unexpected error listing files of %s %s", package_id, target, exc_info=True)
        return ToolResponse.failure(
            f"Failed to list files for '{package_id}' version '{target}': "
            f"{type(exc).__name__}: {exc}"
        )

    return ToolResponse.success(entries)
