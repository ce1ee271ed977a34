"""delete_package / delete_package_version tools -- remove packages from NuGet."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from nuget_mcp.errors import NuGetMcpError
from nuget_mcp.models import ToolResponse
from nuget_mcp.packages.delete import delete_all_versions
from nuget_mcp.settings import MISSING_API_KEY_MSG, resolve_api_key
from nuget_mcp.tools._helpers import get_context
from nuget_mcp.versioning import NuGetVersion


async def delete_package(
    package_id: str,
    ctx: Context,
    api_key: str | None = None,
) -> dict[str, object]:
    """Delete every version of a package, oldest first.

    Includes prerelease and unlisted versions. Versions are deleted one at a
    time; a failure does not stop the remaining deletes and nothing is
    rolled back.

    Args:
        package_id: The package id to delete.
        api_key: NuGet API key. Defaults to the server's NUGET_API_KEY.

    Returns:
        {"status", "payload", "message"}. status is "success" when every
        version was deleted, "failure" when none were, and "partial_success"
        otherwise, with one message per failed version.
    """
    try:
        app = get_context(ctx)
        key = resolve_api_key(api_key, app.settings)
        response = await delete_all_versions(app.registry, app.publisher, package_id, key)
        return response.to_dict()

    except NuGetMcpError as exc:
        return ToolResponse.failure(str(exc)).to_dict()
    except Exception as exc:
        await ctx.error(f"Unexpected error in delete_package: {exc}")
        return ToolResponse.failure(f"Internal error: {type(exc).__name__}").to_dict()


async def delete_package_version(
    package_id: str,
    version: str,
    ctx: Context,
    api_key: str | None = None,
) -> dict[str, object]:
    """Delete one version of a package.

    Args:
        package_id: The package id.
        version: The exact version to delete, e.g. "1.2.0-beta.1".
        api_key: NuGet API key. Defaults to the server's NUGET_API_KEY.

    Returns:
        {"status", "payload", "message"}.
    """
    package_id = (package_id or "").strip()
    version = (version or "").strip()
    if not package_id:
        return ToolResponse.failure("Package id is required.").to_dict()
    if not version:
        return ToolResponse.failure("Version is required.").to_dict()

    try:
        NuGetVersion.parse(version)
        app = get_context(ctx)
        key = resolve_api_key(api_key, app.settings)
        if not key:
            return ToolResponse.failure(MISSING_API_KEY_MSG).to_dict()

        await app.publisher.delete(package_id, version, key)
        return ToolResponse.success(f"Deleted '{package_id}' version {version}.").to_dict()

    except NuGetMcpError as exc:
        return ToolResponse.failure(str(exc)).to_dict()
    except Exception as exc:
        await ctx.error(f"Unexpected error in delete_package_version: {exc}")
        return ToolResponse.failure(f"Internal error: {type(exc).__name__}").to_dict()
