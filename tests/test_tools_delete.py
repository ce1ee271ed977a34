"""Tests for the delete_package / delete_package_version MCP tools (tools/delete.py)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx

from nuget_mcp.errors import PublishError
from nuget_mcp.server import AppContext
from nuget_mcp.settings import Settings
from nuget_mcp.tools.delete import delete_package, delete_package_version
from nuget_mcp.versioning import parse_versions


def _make_ctx(
    registry: AsyncMock | None = None,
    publisher: AsyncMock | None = None,
    default_key: str = "",
) -> MagicMock:
    ctx = MagicMock()
    ctx.error = AsyncMock()
    ctx.request_context.lifespan_context = AppContext(
        http_client=MagicMock(spec=httpx.AsyncClient),
        registry=registry or AsyncMock(),
        publisher=publisher or AsyncMock(),
        settings=Settings(api_key=default_key),
    )
    return ctx


class TestDeletePackage:
    async def test_deletes_every_version_with_default_key(self):
        registry = AsyncMock()
        registry.list_versions.return_value = parse_versions(["2.0.0", "1.0.0"])
        publisher = AsyncMock()

        result = await delete_package("Foo", _make_ctx(registry, publisher, "default"))

        assert result["status"] == "success"
        calls = [c.args for c in publisher.delete.await_args_list]
        assert calls == [("Foo", "1.0.0", "default"), ("Foo", "2.0.0", "default")]

    async def test_explicit_key_overrides_default(self):
        registry = AsyncMock()
        registry.list_versions.return_value = parse_versions(["1.0.0"])
        publisher = AsyncMock()

        await delete_package("Foo", _make_ctx(registry, publisher, "default"), api_key="mine")

        assert publisher.delete.await_args.args[2] == "mine"

    async def test_no_key_anywhere(self):
        registry = AsyncMock()
        publisher = AsyncMock()

        result = await delete_package("Foo", _make_ctx(registry, publisher))

        assert result["status"] == "failure"
        registry.list_versions.assert_not_awaited()
        publisher.delete.assert_not_awaited()

    async def test_partial_success_serialized(self):
        registry = AsyncMock()
        registry.list_versions.return_value = parse_versions(["1.0.0", "2.0.0"])
        publisher = AsyncMock()
        publisher.delete.side_effect = [None, PublishError("denied")]

        result = await delete_package("Foo", _make_ctx(registry, publisher, "k"))

        assert result["status"] == "partial_success"
        assert result["message"] == "2.0.0: denied"
        assert "1 of 2" in result["payload"]

    async def test_unexpected_error(self):
        registry = AsyncMock()
        registry.list_versions.side_effect = RuntimeError("bug")
        ctx = _make_ctx(registry, AsyncMock(), "k")

        result = await delete_package("Foo", ctx)

        assert result["status"] == "failure"
        assert "RuntimeError" in result["message"]
        ctx.error.assert_awaited_once()


class TestDeletePackageVersion:
    async def test_deletes_one_version(self):
        publisher = AsyncMock()

        result = await delete_package_version("Foo", "1.0.0", _make_ctx(publisher=publisher, default_key="k"))

        assert result["status"] == "success"
        publisher.delete.assert_awaited_once_with("Foo", "1.0.0", "k")

    async def test_leading_zero_prerelease_accepted(self):
        publisher = AsyncMock()

        result = await delete_package_version(
            "Foo", "1.0.0-beta.01", _make_ctx(publisher=publisher, default_key="k")
        )

        assert result["status"] == "success"
        publisher.delete.assert_awaited_once_with("Foo", "1.0.0-beta.01", "k")

    async def test_no_key(self):
        publisher = AsyncMock()

        result = await delete_package_version("Foo", "1.0.0", _make_ctx(publisher=publisher))

        assert result["status"] == "failure"
        assert "API key" in result["message"]
        publisher.delete.assert_not_awaited()

    async def test_empty_id_or_version(self):
        publisher = AsyncMock()
        ctx = _make_ctx(publisher=publisher, default_key="k")

        assert (await delete_package_version("", "1.0.0", ctx))["status"] == "failure"
        assert (await delete_package_version("Foo", " ", ctx))["status"] == "failure"
        publisher.delete.assert_not_awaited()

    async def test_invalid_version(self):
        publisher = AsyncMock()

        result = await delete_package_version("Foo", "latest", _make_ctx(publisher=publisher, default_key="k"))

        assert result["status"] == "failure"
        assert "not a valid NuGet version" in result["message"]
        publisher.delete.assert_not_awaited()

    async def test_remote_rejection(self):
        publisher = AsyncMock()
        publisher.delete.side_effect = PublishError("Package 'Foo' version '9.0.0' does not exist.")

        result = await delete_package_version("Foo", "9.0.0", _make_ctx(publisher=publisher, default_key="k"))

        assert result["status"] == "failure"
        assert "does not exist" in result["message"]
