"""search_packages tool -- free-text search of the registry."""

from __future__ import annotations

from mcp.server.fastmcp import Context

from nuget_mcp.errors import NuGetMcpError
from nuget_mcp.models import ToolResponse
from nuget_mcp.tools._helpers import get_context

# Limits enforced by the NuGet search service.
_MAX_TAKE = 1000


async def search_packages(
    query: str,
    ctx: Context,
    skip: int = 0,
    take: int = 20,
) -> dict[str, object]:
    """Search NuGet for packages matching a query.

    Supports NuGet search syntax such as "packageid:Serilog",
    "owner:microsoft" or "tags:json". Prerelease packages are included.

    Args:
        query: Search terms. An empty query browses the most popular packages.
        skip: Number of results to skip (pagination).
        take: Number of results to return (1-1000, default 20).

    Returns:
        {"status", "payload", "message"} where payload has total_hits and
        data (list of packages).
    """
    skip = max(skip, 0)
    take = min(max(take, 1), _MAX_TAKE)

    try:
        app = get_context(ctx)
        result = await app.registry.search(query or "", skip=skip, take=take)
        return ToolResponse.success(result).to_dict()

    except NuGetMcpError as exc:
        return ToolResponse.failure(str(exc)).to_dict()
    except Exception as exc:
        await ctx.error(f"Unexpected error in search_packages: {exc}")
        return ToolResponse.failure(f"Internal error: {type(exc).__name__}").to_dict()
