"""Bulk delete: remove every version of a package, oldest first."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from nuget_mcp.errors import NuGetMcpError
from nuget_mcp.models import AggregateDeleteResult, DeletionOutcome, ToolResponse
from nuget_mcp.packages.versions import list_versions
from nuget_mcp.registry.base import PushClientPort, RegistryClientPort
from nuget_mcp.settings import MISSING_API_KEY_MSG
from nuget_mcp.versioning import NuGetVersion

logger = logging.getLogger(__name__)


async def delete_versions(
    publisher: PushClientPort,
    package_id: str,
    versions: Iterable[NuGetVersion],
    api_key: str,
) -> AggregateDeleteResult:
    """Delete ``versions`` one at a time in ascending order.

    A failed delete is recorded and the loop moves on; nothing is rolled back.
    """
    outcomes: list[DeletionOutcome] = []
    for version in sorted(versions):
        try:
            await publisher.delete(package_id, str(version), api_key)
        except NuGetMcpError as exc:
            reason = str(exc)
        except Exception as exc:
            reason = f"{type(exc).__name__}: {exc}"
        else:
            outcomes.append(DeletionOutcome(version=str(version), succeeded=True))
            continue

        logger.warning("Failed to delete %s %s: %s", package_id, version, reason)
        outcomes.append(DeletionOutcome(version=str(version), succeeded=False, reason=reason))

    return AggregateDeleteResult.from_outcomes(outcomes)


async def delete_all_versions(
    registry: RegistryClientPort,
    publisher: PushClientPort,
    package_id: str,
    api_key: str,
) -> ToolResponse[str]:
    """Delete every version of ``package_id``, including prerelease and unlisted ones.

    Returns SUCCESS when every delete succeeded, FAILURE when none did (or
    when there was nothing to delete), and PARTIAL_SUCCESS for a mix, with
    one message per failed version.
    """
    package_id = (package_id or "").strip()
    if not package_id:
        return ToolResponse.failure("Package id is required.")
    if not api_key:
        return ToolResponse.failure(MISSING_API_KEY_MSG)

    try:
        versions = await list_versions(registry, package_id, include_unlisted=True)
    except NuGetMcpError as exc:
        return ToolResponse.failure(f"Could not list versions of '{package_id}': {exc}")

    if not versions:
        return ToolResponse.failure(
            f"No versions found for package '{package_id}'. Nothing was deleted."
        )

    report = await delete_versions(publisher, package_id, versions, api_key)
    details = "; ".join(report.messages)

    if report.failed == 0:
        return ToolResponse.success(
            f"Deleted all {report.succeeded} versions of '{package_id}'."
        )
    if report.succeeded == 0:
        return ToolResponse.failure(
            f"Failed to delete any of the {report.attempted} versions of "
            f"'{package_id}': {details}"
        )
    return ToolResponse.partial_success(
        details,
        payload=(
            f"Deleted {report.succeeded} of {report.attempted} versions of "
            f"'{package_id}'; {report.failed} failed."
        ),
    )
