"""publish_package / publish_symbol_package tools -- push archives to NuGet."""

from __future__ import annotations

from pathlib import Path

from mcp.server.fastmcp import Context

from nuget_mcp.errors import NuGetMcpError
from nuget_mcp.models import ToolResponse
from nuget_mcp.settings import MISSING_API_KEY_MSG, resolve_api_key
from nuget_mcp.tools._helpers import get_context

_PACKAGE_EXTENSIONS = (".nupkg",)
_SYMBOL_EXTENSIONS = (".snupkg", ".symbols.nupkg")


async def publish_package(
    package_file_path: str,
    ctx: Context,
    api_key: str | None = None,
) -> dict[str, object]:
    """Publish a .nupkg file to NuGet.

    Publishing is irreversible: a version id can never be reused, even after
    it is deleted.

    Args:
        package_file_path: Path to the .nupkg file on this machine.
        api_key: NuGet API key. Defaults to the server's NUGET_API_KEY.

    Returns:
        {"status", "payload", "message"}; payload confirms the pushed file.
    """
    return await _publish(package_file_path, ctx, api_key, symbols=False)


async def publish_symbol_package(
    symbol_package_path: str,
    ctx: Context,
    api_key: str | None = None,
) -> dict[str, object]:
    """Publish a symbol package (.snupkg or .symbols.nupkg) to the NuGet symbol server.

    The matching .nupkg should already be published.

    Args:
        symbol_package_path: Path to the symbol package on this machine.
        api_key: NuGet API key. Defaults to the server's NUGET_API_KEY.

    Returns:
        {"status", "payload", "message"}; payload confirms the pushed file.
    """
    return await _publish(symbol_package_path, ctx, api_key, symbols=True)


async def _publish(
    path_value: str,
    ctx: Context,
    api_key: str | None,
    *,
    symbols: bool,
) -> dict[str, object]:
    tool_name = "publish_symbol_package" if symbols else "publish_package"
    try:
        app = get_context(ctx)
        key = resolve_api_key(api_key, app.settings)
        if not key:
            return ToolResponse.failure(MISSING_API_KEY_MSG).to_dict()

        error = validate_package_path(
            path_value, _SYMBOL_EXTENSIONS if symbols else _PACKAGE_EXTENSIONS
        )
        if error:
            return ToolResponse.failure(error).to_dict()

        path = Path(path_value).expanduser()
        await app.publisher.push(path, key, symbols=symbols)
        kind = "Symbol package" if symbols else "Package"
        return ToolResponse.success(f"{kind} '{path.name}' published successfully.").to_dict()

    except NuGetMcpError as exc:
        return ToolResponse.failure(str(exc)).to_dict()
    except Exception as exc:
        await ctx.error(f"Unexpected error in {tool_name}: {exc}")
        return ToolResponse.failure(f"Internal error: {type(exc).__name__}").to_dict()


def validate_package_path(path_value: str, extensions: tuple[str, ...]) -> str | None:
    """Return an error message when the file is missing or has the wrong extension."""
    if not path_value or not path_value.strip():
        return "A package file path is required."

    path = Path(path_value.strip()).expanduser()
    if not path.is_file():
        return f"Package file does not exist: {path}"

    if not path.name.lower().endswith(extensions):
        expected = " or ".join(extensions)
        return f"Invalid package file extension for '{path.name}'; expected {expected}."
    return None
