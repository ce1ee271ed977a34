"""get_user_packages tool -- packages owned by a NuGet user."""

from __future__ import annotations

from dataclasses import asdict

from mcp.server.fastmcp import Context

from nuget_mcp.packages.owners import get_user_packages as _get_user_packages
from nuget_mcp.tools._helpers import get_context


async def get_user_packages(
    username: str,
    ctx: Context,
) -> list[dict[str, object]]:
    """List all packages owned or authored by a NuGet user.

    Args:
        username: The nuget.org user or organisation name.

    Returns:
        List of packages. Empty when the user has none or the registry
        could not be reached.
    """
    try:
        app = get_context(ctx)
        packages = await _get_user_packages(app.registry, username)
    except Exception as exc:
        await ctx.error(f"Unexpected error in get_user_packages: {exc}")
        return []
    return [asdict(p) for p in packages]
