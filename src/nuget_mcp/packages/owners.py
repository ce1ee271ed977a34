"""Collect every package owned or authored by a user."""

from __future__ import annotations

import logging

from nuget_mcp.errors import NuGetMcpError
from nuget_mcp.models import PackageInfo
from nuget_mcp.registry.base import RegistryClientPort

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


async def get_user_packages(
    registry: RegistryClientPort,
    username: str,
) -> list[PackageInfo]:
    """Page through ``owner:<username>`` search results.

    Stops at the first short or empty page, or at the first failed request
    (packages collected so far are returned). A hit is kept only when
    ``username`` is one of its authors or owners, ignoring case, because the
    search token also matches unrelated text.

    There is no page cap: a registry that keeps returning full pages keeps
    this loop going.
    """
    username = (username or "").strip()
    if not username:
        return []

    wanted = username.lower()
    packages: list[PackageInfo] = []
    skip = 0
    while True:
        try:
            page = await registry.search(f"owner:{username}", skip=skip, take=PAGE_SIZE)
        except NuGetMcpError as exc:
            logger.warning(
                "Stopped listing packages for '%s' at offset %d: %s", username, skip, exc
            )
            break

        packages.extend(p for p in page.data if _belongs_to(p, wanted))
        if len(page.data) < PAGE_SIZE:
            break
        skip += PAGE_SIZE

    return packages


def _belongs_to(package: PackageInfo, username: str) -> bool:
    return any(name.lower() == username for name in (*package.authors, *package.owners))
