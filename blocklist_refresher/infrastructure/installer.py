"""Filesystem implementation of the Installer port."""

import asyncio
import contextlib
import logging
import os
from pathlib import Path
from typing import Generator

from ..application.domain import InstallTarget, Installer
from ..application.exceptions import InstallError


class AtomicFileInstaller(Installer):
    """An installer that publishes files atomically through a rename."""

    def __init__(self):
        """Initializes the installer adapter."""
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextlib.contextmanager
    def _staging_file(self, target: InstallTarget) -> Generator[Path, None, None]:
        """Provides the temporary path and removes it if publishing fails."""
        try:
            yield target.temporary
        except BaseException:
            with contextlib.suppress(OSError):
                target.temporary.unlink(missing_ok=True)
            raise

    def _write_durably(self, path: Path, data: bytes):
        """Write the bytes and hand them to the filesystem before returning."""
        try:
            with open(path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise InstallError(path, f"write failed: {e}") from e

    def _blocking_install(self, target: InstallTarget, content: str):
        """Orchestrate the staging write and the publishing rename."""
        try:
            target.final.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(target.final.parent, f"mkdir failed: {e}") from e

        with self._staging_file(target) as staging_path:
            self._write_durably(staging_path, content.encode("utf-8"))
            try:
                staging_path.replace(target.final)
            except OSError as e:
                raise InstallError(
                    target.final, f"rename from {str(staging_path)!r} failed: {e}"
                ) from e

    async def install(self, target: InstallTarget, content: str):
        """
        Replace the final path of the target with already validated content.

        This public method fulfills the Installer port contract. Readers of
        the final path observe either the previous file or the new one, never
        a partially written file. The blocking disk work runs in a separate
        thread to avoid blocking the async event loop.

        Args:
            target: The final and temporary paths of the blocklist.
            content: The validated blocklist text.

        Raises:
            InstallError: If the staging file cannot be written or renamed.
        """

        await asyncio.to_thread(self._blocking_install, target, content)
        self.logger.debug(f"Published {target.final.name}")
