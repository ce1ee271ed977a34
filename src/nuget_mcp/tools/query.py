"""query_package tool -- fetch metadata for one package."""

from __future__ import annotations

from dataclasses import replace

from mcp.server.fastmcp import Context

from nuget_mcp.errors import NuGetMcpError
from nuget_mcp.models import ToolResponse
from nuget_mcp.tools._helpers import get_context
from nuget_mcp.versioning import find_version, parse_versions


async def query_package(
    package_id: str,
    ctx: Context,
    version: str | None = None,
) -> dict[str, object]:
    """Query NuGet for a package by its exact id.

    Args:
        package_id: The package id (case-insensitive), e.g. "Newtonsoft.Json".
        version: Optional version. When given it must exist; the returned
            package reports it as its version.

    Returns:
        {"status", "payload", "message"} where payload is the package:
        id, version, title, description, authors, owners, total_downloads,
        verified, tags, urls, and every known version with download counts.
    """
    package_id = (package_id or "").strip()
    if not package_id:
        return ToolResponse.failure("Package id is required.").to_dict()

    try:
        app = get_context(ctx)
        package = await app.registry.get_package(package_id)
        if package is None:
            return ToolResponse.failure(f"Package '{package_id}' not found.").to_dict()

        if version:
            available = parse_versions(v.version for v in package.versions)
            match = find_version(available, version)
            if match is None:
                return ToolResponse.failure(
                    f"Version '{version}' of package '{package_id}' not found."
                ).to_dict()
            package = replace(package, version=str(match))

        return ToolResponse.success(package).to_dict()

    except NuGetMcpError as exc:
        return ToolResponse.failure(str(exc)).to_dict()
    except Exception as exc:
        await ctx.error(f"Unexpected error in query_package: {exc}")
        return ToolResponse.failure(f"Internal error: {type(exc).__name__}").to_dict()
