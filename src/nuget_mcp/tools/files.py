"""list_package_files tool -- show what is inside a package."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from nuget_mcp.errors import NuGetMcpError
from nuget_mcp.models import ToolResponse
from nuget_mcp.packages.files import list_package_files as _list_package_files
from nuget_mcp.tools._helpers import get_context


async def list_package_files(
    package_id: str,
    ctx: Context,
    version: str | None = None,
) -> dict[str, object]:
    """List every file contained in a NuGet package.

    Downloads the package archive and returns the paths of its entries,
    sorted, without directory entries.

    Args:
        package_id: The package id.
        version: Optional version; defaults to the latest listed version.

    Returns:
        {"status", "payload", "message"} where payload is the list of paths.
    """
    try:
        app = get_context(ctx)
        response = await _list_package_files(app.registry, package_id, version)
        return response.to_dict()

    except NuGetMcpError as exc:
        return ToolResponse.failure(str(exc)).to_dict()
    except Exception as exc:
        await ctx.error(f"Unexpected error in list_package_files: {exc}")
        return ToolResponse.failure(f"Internal error: {type(exc).__name__}").to_dict()
