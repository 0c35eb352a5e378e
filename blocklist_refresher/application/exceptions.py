"""
Core business exceptions for the blocklist refresher.

This module defines a hierarchy of custom exceptions to allow for granular
error handling and clear separation of failure domains. Every exception
carries the process exit code the entry point terminates with.
"""


class RefresherError(Exception):
    """Base exception for all component-specific errors."""

    exit_code = 1


# --- Configuration Errors ---

class ConfigurationError(RefresherError):
    """Raised for errors related to application configuration."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(RefresherError):
    """Base class for errors related to external systems (network, disk, processes)."""
    pass


class NetworkError(InfrastructureError):
    """Raised when a blocklist cannot be fetched."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"failed to fetch {url}: {reason}")
        self.url = url


class InstallError(InfrastructureError):
    """Raised when a blocklist cannot be written or published on disk."""

    def __init__(self, path, reason: str):
        super().__init__(f"failed to install {str(path)!r}: {reason}")
        self.path = path


class SpawnError(InfrastructureError):
    """Raised when the wrapped command cannot be launched."""

    def __init__(self, invocation, reason: str):
        super().__init__(f"exec {invocation.argv!r}: {reason}")
        self.invocation = invocation


class StreamReadError(InfrastructureError):
    """Raised when a captured output stream of the child cannot be read."""

    exit_code = 100

    def __init__(self, tag, reason: str):
        super().__init__(f"failed to read {tag.value}: {reason}")
        self.tag = tag


# --- Domain/Business Logic Errors ---

class DomainError(RefresherError):
    """Base class for errors related to business logic failures."""
    pass


class ValidationError(DomainError):
    """Raised when fetched content does not match the grammar of its kind."""

    def __init__(self, kind, line: str):
        super().__init__(f"invalid {kind.grammar_name} line: `{line}`")
        self.kind = kind
        self.line = line


class ProcessExitError(DomainError):
    """Raised when the wrapped command terminates with a failure status."""

    def __init__(self, invocation, outcome):
        super().__init__(f"exec {invocation.argv!r}: failed {outcome.status}")
        self.invocation = invocation
        self.outcome = outcome

    @property
    def returncode(self) -> int:
        return self.outcome.returncode
