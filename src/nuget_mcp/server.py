"""MCP server that queries, publishes and deletes NuGet packages."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from nuget_mcp.registry.base import PushClientPort, RegistryClientPort
from nuget_mcp.registry.client import NuGetClient
from nuget_mcp.registry.publish import PushClient
from nuget_mcp.settings import Settings
from nuget_mcp.tools.delete import delete_package, delete_package_version
from nuget_mcp.tools.files import list_package_files
from nuget_mcp.tools.publish import publish_package, publish_symbol_package
from nuget_mcp.tools.query import query_package
from nuget_mcp.tools.search import search_packages
from nuget_mcp.tools.users import get_user_packages

_USER_AGENT = "NuGetMCP/1.0"


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations.

    Nothing here is mutated after startup, so concurrent tool calls need no
    locking.
    """

    http_client: httpx.AsyncClient
    registry: RegistryClientPort
    publisher: PushClientPort
    settings: Settings


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage shared adapter lifecycle — the composition root."""
    settings = Settings.from_env()
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(30.0, connect=10.0),
        follow_redirects=True,
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
        headers={"User-Agent": _USER_AGENT},
    ) as http_client:
        registry = NuGetClient(
            http_client,
            search_url=settings.search_url,
            registration_url=settings.registration_url,
            package_base_url=settings.package_base_url,
        )
        publisher = PushClient(
            http_client,
            publish_url=settings.publish_url,
            symbol_publish_url=settings.symbol_publish_url,
        )

        yield AppContext(
            http_client=http_client,
            registry=registry,
            publisher=publisher,
            settings=settings,
        )


mcp = FastMCP(
    "nuget-mcp",
    instructions=(
        "nuget-mcp talks to the NuGet package registry on the user's behalf.\n\n"
        "### Tools\n"
        "- **query_package** — Metadata for one package id, optionally a specific version.\n"
        "- **search_packages** — Free-text search; supports 'packageid:', 'owner:', "
        "'tags:' tokens and skip/take pagination.\n"
        "- **get_user_packages** — Every package a user owns or authored.\n"
        "- **list_package_files** — Files inside a package (latest version by default).\n"
        "- **publish_package** / **publish_symbol_package** — Push a local .nupkg or "
        ".snupkg/.symbols.nupkg.\n"
        "- **delete_package_version** — Delete one version.\n"
        "- **delete_package** — Delete every version, oldest first.\n\n"
        "### Key principles\n"
        "- Publishing and deleting are irreversible. Confirm the package id and "
        "version with the user before calling a destructive tool.\n"
        "- Write tools use the api_key argument, else the server's NUGET_API_KEY.\n"
        "- Every tool returns status 'success', 'partial_success' or 'failure' with a "
        "message. 'partial_success' only comes from delete_package and means some "
        "versions remain; report which ones failed."
    ),
    lifespan=app_lifespan,
)

# ─── Read-only tools ──────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(query_package)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(search_packages)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(list_package_files)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(get_user_packages)

# ─── Destructive tools ────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(destructiveHint=True))(publish_package)
mcp.tool(annotations=ToolAnnotations(destructiveHint=True))(publish_symbol_package)
mcp.tool(annotations=ToolAnnotations(destructiveHint=True))(delete_package)
mcp.tool(annotations=ToolAnnotations(destructiveHint=True))(delete_package_version)
