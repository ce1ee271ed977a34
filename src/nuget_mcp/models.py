"""Domain models for nuget-mcp. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")

# ─── Enumerations ─────────────────────────────────────────────


class ResultStatus(StrEnum):
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"


# ─── Registry Models ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PackageVersion:
    """One version entry of a package as reported by the search endpoint."""

    version: str
    downloads: int = 0
    registration_url: str = ""


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """A package as returned by the NuGet search API."""

    id: str
    version: str = ""
    title: str = ""
    description: str = ""
    authors: list[str] = field(default_factory=list)
    owners: list[str] = field(default_factory=list)
    total_downloads: int = 0
    verified: bool = False
    tags: list[str] = field(default_factory=list)
    project_url: str = ""
    license_url: str = ""
    icon_url: str = ""
    versions: list[PackageVersion] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchResult:
    total_hits: int = 0
    data: list[PackageInfo] = field(default_factory=list)


# ─── Bulk Delete Models ───────────────────────────────────────


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of deleting one version during a bulk delete."""

    version: str
    succeeded: bool
    reason: str = ""


@dataclass(frozen=True, slots=True)
class AggregateDeleteResult:
    """Counts and failure messages for one bulk delete, in processing order."""

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    messages: list[str] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[DeletionOutcome]) -> AggregateDeleteResult:
        outcomes = list(outcomes)
        failures = [o for o in outcomes if not o.succeeded]
        return cls(
            attempted=len(outcomes),
            succeeded=len(outcomes) - len(failures),
            failed=len(failures),
            messages=[f"{o.version}: {o.reason}" for o in failures],
        )


# ─── Tool Return Models ───────────────────────────────────────


@dataclass(frozen=True)
class ToolResponse(Generic[T]):
    """Three-state outcome returned by every tool.

    ``FAILURE`` never carries a payload. ``PARTIAL_SUCCESS`` always carries a
    message and is only produced by the bulk delete workflow.
    """

    status: ResultStatus
    payload: T | None = None
    message: str | None = None

    @classmethod
    def success(cls, payload: T | None = None, message: str | None = None) -> ToolResponse[T]:
        return cls(ResultStatus.SUCCESS, payload, message)

    @classmethod
    def partial_success(cls, message: str, payload: T | None = None) -> ToolResponse[T]:
        return cls(ResultStatus.PARTIAL_SUCCESS, payload, message)

    @classmethod
    def failure(cls, message: str) -> ToolResponse[T]:
        return cls(ResultStatus.FAILURE, None, message)

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    def to_dict(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "payload": _serialize(self.payload),
            "message": self.message,
        }


def _serialize(value: object) -> object:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    return value
