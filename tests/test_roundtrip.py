"""Publish a package, then query it, against an in-memory registry."""

from __future__ import annotations

import re
import zipfile
from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx

from nuget_mcp.registry.client import NuGetClient
from nuget_mcp.registry.publish import PushClient
from nuget_mcp.server import AppContext
from nuget_mcp.settings import Settings
from nuget_mcp.tools.files import list_package_files
from nuget_mcp.tools.publish import publish_package
from nuget_mcp.tools.query import query_package

BASE = "https://registry.test"
SETTINGS = Settings(
    api_key="test-key",
    search_url=f"{BASE}/query",
    registration_url=f"{BASE}/registration/",
    package_base_url=f"{BASE}/flat/",
    publish_url=f"{BASE}/api/v2/package",
    symbol_publish_url=f"{BASE}/api/v2/symbolpackage",
)

_NUSPEC_ID = re.compile(r"<id>(.*?)</id>")
_NUSPEC_VERSION = re.compile(r"<version>(.*?)</version>")


class InMemoryRegistry:
    """Just enough of the NuGet protocol: push, search by id, registration, flat container."""

    def __init__(self) -> None:
        self.packages: dict[str, dict[str, bytes]] = {}
        self.display_ids: dict[str, str] = {}

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == "PUT" and path == "/api/v2/package":
            if request.headers.get("X-NuGet-ApiKey") != SETTINGS.api_key:
                return httpx.Response(403)
            self._store(_multipart_file(request))
            return httpx.Response(201)
        if request.method == "GET" and path == "/query":
            return httpx.Response(200, json=self._search(request.url.params["q"]))
        if request.method == "GET" and path.startswith("/registration/"):
            package_id = path.split("/")[2]
            if package_id not in self.packages:
                return httpx.Response(404)
            leaves = [{"catalogEntry": {"version": v}} for v in self.packages[package_id]]
            return httpx.Response(200, json={"items": [{"items": leaves}]})
        if request.method == "GET" and path.startswith("/flat/"):
            _, _, package_id, version, _ = path.split("/")
            content = self.packages.get(package_id, {}).get(version)
            return httpx.Response(200, content=content) if content else httpx.Response(404)
        return httpx.Response(404)

    def _store(self, archive: bytes) -> None:
        with zipfile.ZipFile(BytesIO(archive)) as zf:
            nuspec = next(n for n in zf.namelist() if n.endswith(".nuspec"))
            text = zf.read(nuspec).decode()
        package_id = _NUSPEC_ID.search(text).group(1)
        version = _NUSPEC_VERSION.search(text).group(1)
        self.display_ids[package_id.lower()] = package_id
        self.packages.setdefault(package_id.lower(), {})[version.lower()] = archive

    def _search(self, query: str) -> dict:
        wanted = query.removeprefix("packageid:").lower()
        if wanted not in self.packages:
            return {"totalHits": 0, "data": []}
        versions = sorted(self.packages[wanted])
        return {
            "totalHits": 1,
            "data": [
                {
                    "id": self.display_ids[wanted],
                    "version": versions[-1],
                    "authors": ["Round Trip"],
                    "versions": [{"version": v, "downloads": 0} for v in versions],
                }
            ],
        }


def _multipart_file(request: httpx.Request) -> bytes:
    boundary = request.headers["content-type"].split("boundary=")[1].encode()
    for part in request.content.split(b"--" + boundary):
        if b'name="package"' in part:
            return part.split(b"\r\n\r\n", 1)[1].removesuffix(b"\r\n")
    raise AssertionError("no package part in upload")


def _build_nupkg(tmp_path: Path, package_id: str, version: str) -> Path:
    path = tmp_path / f"{package_id}.{version}.nupkg"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(
            f"{package_id}.nuspec",
            f"<package><metadata><id>{package_id}</id><version>{version}</version></metadata></package>",
        )
        zf.writestr(f"lib/net8.0/{package_id}.dll", b"\x00")
    return path


def _make_ctx(http: httpx.AsyncClient) -> MagicMock:
    ctx = MagicMock()
    ctx.error = AsyncMock()
    ctx.request_context.lifespan_context = AppContext(
        http_client=http,
        registry=NuGetClient(
            http,
            search_url=SETTINGS.search_url,
            registration_url=SETTINGS.registration_url,
            package_base_url=SETTINGS.package_base_url,
        ),
        publisher=PushClient(
            http,
            publish_url=SETTINGS.publish_url,
            symbol_publish_url=SETTINGS.symbol_publish_url,
        ),
        settings=SETTINGS,
    )
    return ctx


class TestPublishThenQuery:
    async def test_published_package_is_queryable(self, tmp_path: Path):
        registry = InMemoryRegistry()
        package = _build_nupkg(tmp_path, "Acme.Widgets", "1.2.0")

        async with httpx.AsyncClient(transport=httpx.MockTransport(registry.handle)) as http:
            ctx = _make_ctx(http)
            published = await publish_package(str(package), ctx)
            queried = await query_package("acme.widgets", ctx)

        assert published["status"] == "success"
        assert queried["status"] == "success"
        assert queried["payload"]["id"] == "Acme.Widgets"
        assert queried["payload"]["version"] == "1.2.0"

    async def test_published_package_files_are_listed(self, tmp_path: Path):
        registry = InMemoryRegistry()
        package = _build_nupkg(tmp_path, "Acme.Widgets", "1.2.0")

        async with httpx.AsyncClient(transport=httpx.MockTransport(registry.handle)) as http:
            ctx = _make_ctx(http)
            await publish_package(str(package), ctx)
            files = await list_package_files("Acme.Widgets", ctx)

        assert files["status"] == "success"
        assert files["payload"] == ["Acme.Widgets.nuspec", "lib/net8.0/Acme.Widgets.dll"]

    async def test_wrong_key_is_rejected(self, tmp_path: Path):
        registry = InMemoryRegistry()
        package = _build_nupkg(tmp_path, "Acme.Widgets", "1.2.0")

        async with httpx.AsyncClient(transport=httpx.MockTransport(registry.handle)) as http:
            ctx = _make_ctx(http)
            published = await publish_package(str(package), ctx, api_key="wrong")
            queried = await query_package("Acme.Widgets", ctx)

        assert published["status"] == "failure"
        assert "403" in published["message"]
        assert queried["status"] == "failure"
