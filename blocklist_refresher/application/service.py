"""
The core application service and pipeline, containing pure business logic.

This module defines the main orchestrator (RefresherService) for a refresh
run and the pipeline (RefreshPipeline) that handles the refresh of a single
blocklist.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from .domain import *
from .validation import validate

logger = logging.getLogger(__name__)


class RefreshPipeline:
    """Encapsulates the fetch, validate and install steps for one blocklist."""

    def __init__(self, fetcher: Fetcher, installer: Installer):
        """Initializes the pipeline with necessary dependencies (ports)."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.fetcher = fetcher
        self.installer = installer

    async def run(self, kind: ResourceKind, directory: Path) -> InstallTarget:
        """Executes the sequential steps for refreshing one blocklist.

        Args:
            kind: The blocklist to refresh.
            directory: The directory the blocklist is published in.

        Returns:
            The target the blocklist was installed to.
        """

        target = InstallTarget.for_kind(directory, kind)

        self.logger.info(
            f"getting {kind.value} at {self.fetcher.url_for(kind)}"
        )

        # Step 1: Fetch (ResourceKind -> raw content)
        body = await self.fetcher.fetch(kind)

        # Step 2: Validate (raw content -> void)
        validate(kind, body)

        # Step 3: Install (raw content -> published file)
        await self.installer.install(target, body)

        self.logger.info(f"installed {kind.value} to {str(target.final)!r}")

        return target


class RefresherService:
    """Refreshes every blocklist, then runs the wrapped command if any."""

    def __init__(
        self,
        fetcher: Fetcher,
        installer: Installer,
        supervisor: Supervisor,
        install_dir: str,
        show_progress: bool = False,
        kinds: Iterable[ResourceKind] = tuple(ResourceKind),
    ):
        """Initializes the service and the reusable refresh pipeline."""
        self.pipeline = RefreshPipeline(fetcher, installer)
        self.supervisor = supervisor
        self.install_dir = Path(install_dir)
        self.show_progress = show_progress
        self.kinds = tuple(kinds)

    async def refresh(self):
        """Refreshes the blocklists one after another, stopping at the first failure."""

        with logging_redirect_tqdm():
            for kind in tqdm(
                self.kinds,
                desc="Blocklists",
                unit="list",
                disable=not self.show_progress,
            ):
                await self.pipeline.run(kind, self.install_dir)

    async def run(
        self, invocation: ChildInvocation
    ) -> Optional[ExitOutcome]:
        """
        Executes a full refresh run.

        The wrapped command is only started once every blocklist has been
        installed.

        Args:
            invocation: The command to run after the refresh.

        Returns:
            The exit outcome of the command, or None if none was requested.
        """

        logger.info(f"Refreshing blocklists in {str(self.install_dir)!r}")
        await self.refresh()

        if not invocation.requested:
            return None

        return await self.supervisor.run(invocation)
