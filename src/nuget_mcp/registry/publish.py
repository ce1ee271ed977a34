"""HTTP client for the NuGet push/delete protocol.

Push:   PUT    {publish_url}           multipart form, field ``package``
Delete: DELETE {publish_url}/{id}/{version}

Both authenticate with the ``X-NuGet-ApiKey`` header. On nuget.org a delete
unlists the version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote as urlquote

import httpx

from nuget_mcp.errors import PublishError
from nuget_mcp.settings import DEFAULT_PUBLISH_URL, DEFAULT_SYMBOL_PUBLISH_URL

logger = logging.getLogger(__name__)

_API_KEY_HEADER = "X-NuGet-ApiKey"
_PROTOCOL_HEADERS = {"X-NuGet-Protocol-Version": "4.1.0"}

# Pushes of large packages can take minutes.
_PUSH_TIMEOUT = httpx.Timeout(300.0, connect=10.0)

_PUSH_OK = frozenset({200, 201, 202})
_DELETE_OK = frozenset({200, 202, 204})


@dataclass
class PushClient:
    """Async client for pushing and deleting packages."""

    http: httpx.AsyncClient
    publish_url: str = DEFAULT_PUBLISH_URL
    symbol_publish_url: str = DEFAULT_SYMBOL_PUBLISH_URL

    async def push(self, package_path: Path, api_key: str, *, symbols: bool = False) -> None:
        """Upload ``package_path`` to the package or symbol endpoint.

        Raises:
            PublishError: When the registry rejects the upload or is unreachable.
        """
        url = self.symbol_publish_url if symbols else self.publish_url
        kind = "symbol package" if symbols else "package"
        try:
            content = package_path.read_bytes()
        except OSError as exc:
            raise PublishError(f"Cannot read {kind} '{package_path}': {exc}") from exc

        try:
            response = await self.http.put(
                url,
                files={"package": (package_path.name, content, "application/octet-stream")},
                headers=self._headers(api_key),
                timeout=_PUSH_TIMEOUT,
            )
        except httpx.HTTPError as exc:
            raise PublishError(f"Failed to push {kind} '{package_path.name}': {exc}") from exc

        if response.status_code not in _PUSH_OK:
            raise PublishError(
                f"Registry rejected {kind} '{package_path.name}': "
                f"{response.status_code} {response.reason_phrase}"
                f"{_detail(response)}"
            )
        logger.info("Pushed %s %s", kind, package_path.name)

    async def delete(self, package_id: str, version: str, api_key: str) -> None:
        """Delete (unlist) one version.

        Raises:
            PublishError: When the version does not exist, the key is refused,
                or the registry is unreachable.
        """
        url = (
            f"{self.publish_url}/{urlquote(package_id, safe='')}/{urlquote(version, safe='')}"
        )
        try:
            response = await self.http.delete(url, headers=self._headers(api_key))
        except httpx.HTTPError as exc:
            raise PublishError(f"Failed to delete '{package_id}' {version}: {exc}") from exc

        if response.status_code == 404:
            raise PublishError(f"Package '{package_id}' version '{version}' does not exist.")
        if response.status_code not in _DELETE_OK:
            raise PublishError(
                f"Registry rejected delete of '{package_id}' {version}: "
                f"{response.status_code} {response.reason_phrase}"
                f"{_detail(response)}"
            )
        logger.info("Deleted %s %s", package_id, version)

    @staticmethod
    def _headers(api_key: str) -> dict[str, str]:
        return {**_PROTOCOL_HEADERS, _API_KEY_HEADER: api_key}


def _detail(response: httpx.Response) -> str:
    text = response.text.strip() if response.text else ""
    return f" ({text[:200]})" if text else ""
