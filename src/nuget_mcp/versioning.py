"""NuGet version parsing and ordering.

NuGet versions extend SemVer 2.0 with an optional fourth numeric component
(``1.2.3.4``) and accept short forms (``1.0``). Prerelease precedence is
delegated to ``semantic_version``; labels compare case-insensitively,
numeric identifiers compare by value (``beta.01`` == ``beta.1``) and
build metadata never affects ordering.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import total_ordering

import semantic_version

from nuget_mcp.errors import InvalidVersionError

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(
    r"^\s*v?(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+))?"
    r"(?:\.(?P<patch>\d+))?"
    r"(?:\.(?P<revision>\d+))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z.-]+))?\s*$"
)


@total_ordering
@dataclass(frozen=True, eq=False)
class NuGetVersion:
    """A parsed NuGet version. ``original`` keeps the registry's spelling."""

    original: str
    release: tuple[int, int, int, int]
    prerelease: str = ""
    _precedence: semantic_version.Version = field(repr=False, compare=False, default=None)

    @classmethod
    def parse(cls, text: str) -> NuGetVersion:
        match = _VERSION_RE.match(text or "")
        if match is None:
            raise InvalidVersionError(f"'{text}' is not a valid NuGet version.")

        release = tuple(int(match.group(part) or 0) for part in ("major", "minor", "patch", "revision"))
        prerelease = match.group("prerelease") or ""
        # Only the prerelease label matters here; numeric parts are compared via ``release``.
        try:
            precedence = semantic_version.Version(
                "0.0.0" + (f"-{_precedence_label(prerelease)}" if prerelease else "")
            )
        except ValueError as exc:
            raise InvalidVersionError(f"'{text}' has an invalid prerelease label: {exc}") from exc

        return cls(
            original=text.strip(),
            release=release,
            prerelease=prerelease,
            _precedence=precedence,
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def normalized(self) -> str:
        """Canonical form used by the flat container: no metadata, no zero revision."""
        major, minor, patch, revision = self.release
        text = f"{major}.{minor}.{patch}"
        if revision:
            text += f".{revision}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        return text

    def _key(self) -> tuple[tuple[int, int, int, int], semantic_version.Version]:
        return (self.release, self._precedence)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.original


def parse_versions(values: Iterable[str], *, strict: bool = False) -> list[NuGetVersion]:
    """Parse, de-duplicate and sort ascending.

    Unparseable strings are logged and skipped, or raise InvalidVersionError
    when ``strict`` is set.
    """
    unique: dict[NuGetVersion, NuGetVersion] = {}
    for value in values:
        try:
            version = NuGetVersion.parse(value)
        except InvalidVersionError:
            if strict:
                raise
            logger.warning("Skipping unparseable version '%s'", value)
            continue
        unique.setdefault(version, version)
    return sorted(unique.values())


def latest(versions: Iterable[NuGetVersion]) -> NuGetVersion | None:
    return max(versions, default=None)


def find_version(versions: Iterable[NuGetVersion], requested: str) -> NuGetVersion | None:
    """Find ``requested`` among ``versions`` by text (case-insensitive) or version equality."""
    versions = list(versions)
    wanted = requested.strip().lower()
    for candidate in versions:
        if candidate.original.lower() == wanted:
            return candidate
    try:
        parsed = NuGetVersion.parse(requested)
    except InvalidVersionError:
        return None
    for candidate in versions:
        if candidate == parsed:
            return candidate
    return None


def _precedence_label(prerelease: str) -> str:
    """Lower-case the label and strip leading zeros, which strict SemVer rejects."""
    return ".".join(
        str(int(part)) if part.isdigit() else part for part in prerelease.lower().split(".")
    )
