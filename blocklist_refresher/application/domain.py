"""
This module defines the core domain models for the application.

These classes represent the pure, technology-agnostic entities and data
structures that the application's business logic operates on.
"""

import dataclasses
import enum
from pathlib import Path

from abc import ABC, abstractmethod
from typing import List, Optional


# --- Domain Models ---

class ResourceKind(enum.Enum):
    """The blocklists kept in sync, in the order they are refreshed."""

    DOMAINS = "domains"
    HOSTNAMES = "hostnames"

    @property
    def path_segment(self) -> str:
        """The remote path segment of the list, without extension."""
        return self.value

    @property
    def file_stem(self) -> str:
        """The local file base name of the list."""
        return self.value

    @property
    def grammar_name(self) -> str:
        """The name of a single line of the list, used in error messages."""
        return _GRAMMAR_NAMES[self]


_GRAMMAR_NAMES = {
    ResourceKind.DOMAINS: "domain",
    ResourceKind.HOSTNAMES: "hostname",
}


class StreamTag(enum.Enum):
    """Labels a forwarded line with the child stream it was read from."""

    STDOUT = "O"
    STDERR = "E"


@dataclasses.dataclass(frozen=True)
class InstallTarget:
    """The published path of a blocklist and its same-directory staging path."""

    final: Path
    temporary: Path

    @classmethod
    def for_kind(cls, directory: Path, kind: ResourceKind) -> "InstallTarget":
        final = Path(directory) / f"{kind.file_stem}.txt"
        return cls(final=final, temporary=final.with_suffix(".tmp"))


@dataclasses.dataclass(frozen=True)
class ChildInvocation:
    """The command wrapped by the refresher, built from trailing arguments."""

    program: str = ""
    args: List[str] = dataclasses.field(default_factory=list)

    @classmethod
    def from_argv(cls, argv: List[str]) -> "ChildInvocation":
        if not argv:
            return cls()
        return cls(program=argv[0], args=list(argv[1:]))

    @property
    def requested(self) -> bool:
        return bool(self.program)

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]


@dataclasses.dataclass(frozen=True)
class ExitOutcome:
    """
    The termination result of a child process.

    A negative return code means the child was terminated by that signal,
    following the subprocess convention.
    """

    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def status(self) -> str:
        if self.returncode < 0:
            return f"signal: {-self.returncode}"
        return f"exit status: {self.returncode}"


# --- Ports (Interfaces) ---

class Fetcher(ABC):
    """A port for any source of blocklist content."""

    @abstractmethod
    def url_for(self, kind: ResourceKind) -> str:
        """Returns the location the content of a kind is fetched from."""
        pass

    @abstractmethod
    async def fetch(self, kind: ResourceKind) -> str:
        """
        Fetches the raw text content of a blocklist.
        Raises NetworkError on failure.
        """
        pass


class Installer(ABC):
    """A port for publishing validated content on disk."""

    @abstractmethod
    async def install(self, target: InstallTarget, content: str):
        """
        Atomically replaces the final path of the target with the content.
        Raises InstallError on failure.
        """
        pass


class Supervisor(ABC):
    """A port for running the wrapped command."""

    @abstractmethod
    async def run(self, invocation: ChildInvocation) -> Optional[ExitOutcome]:
        """
        Runs the invocation to completion, forwarding its output.
        Returns None when no command was requested.
        """
        pass
