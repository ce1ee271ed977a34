"""Exception hierarchy for nuget-mcp.

All exceptions inherit from NuGetMcpError (single catch point).
Messages are written for LLM consumption -- clear, actionable, no stack traces.
"""

from __future__ import annotations


class NuGetMcpError(Exception):
    """Base exception for all nuget-mcp errors."""


class RegistryError(NuGetMcpError):
    """Error reading from the NuGet search, registration or download endpoints."""


class PublishError(NuGetMcpError):
    """The registry rejected a push or delete request."""


class InvalidVersionError(NuGetMcpError):
    """A version string could not be parsed as a NuGet version."""


class PackageArchiveError(NuGetMcpError):
    """A downloaded package is not a readable zip archive."""
