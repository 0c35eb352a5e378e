"""asyncio subprocess implementation of the Supervisor port."""

import asyncio
import contextlib
import logging
from typing import Optional

from ..application.domain import (
    ChildInvocation,
    ExitOutcome,
    StreamTag,
    Supervisor,
)
from ..application.exceptions import (
    ProcessExitError,
    SpawnError,
    StreamReadError,
)

# Default asyncio.StreamReader limit is 64 KiB.
_DEFAULT_STREAM_LIMIT = 2 ** 20


class ProcessSupervisor(Supervisor):
    """
    Runs the wrapped command and forwards its output to the log.

    Standard output and standard error are drained by two concurrent tasks,
    each forwarding its lines in order. Both tasks reach end-of-input before
    the exit status of the child is evaluated.
    """

    def __init__(self, stream_limit: int = _DEFAULT_STREAM_LIMIT):
        """Initializes the supervisor."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stream_limit = stream_limit

    async def _spawn(
        self, invocation: ChildInvocation
    ) -> asyncio.subprocess.Process:
        """Start the child with no input and both output streams captured."""
        try:
            return await asyncio.create_subprocess_exec(
                invocation.program,
                *invocation.args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=self.stream_limit,
            )
        except (OSError, ValueError) as e:
            raise SpawnError(invocation, str(e)) from e

    async def _forward_stream(
        self, tag: StreamTag, stream: Optional[asyncio.StreamReader]
    ):
        """Log every non-empty line of a stream until end-of-input."""
        if stream is None:
            return

        while True:
            try:
                raw = await stream.readline()
                if not raw:
                    return
                line = raw.decode("utf-8").strip()
            except (OSError, ValueError) as e:
                # UnicodeDecodeError and over-long lines are ValueErrors.
                raise StreamReadError(tag, str(e)) from e

            if line:
                self.logger.info(f"{tag.value}| {line}")

    async def _kill(self, process: asyncio.subprocess.Process):
        """Terminate and reap a child whose output can no longer be drained."""
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()

    async def _drain(self, process: asyncio.subprocess.Process):
        """Join both stream readers, aborting the child if one fails."""
        readers = [
            asyncio.create_task(
                self._forward_stream(StreamTag.STDOUT, process.stdout)
            ),
            asyncio.create_task(
                self._forward_stream(StreamTag.STDERR, process.stderr)
            ),
        ]

        try:
            await asyncio.gather(*readers)
        except BaseException:
            for reader in readers:
                reader.cancel()
            await asyncio.gather(*readers, return_exceptions=True)
            await self._kill(process)
            raise

    async def run(
        self, invocation: ChildInvocation
    ) -> Optional[ExitOutcome]:
        """
        Run the invocation to completion.

        This public method fulfills the Supervisor port contract.

        Args:
            invocation: The program and arguments to execute.

        Returns:
            The exit outcome of a successful child, or None when the
            invocation names no program.

        Raises:
            SpawnError: If the program cannot be launched.
            StreamReadError: If an output stream of the child cannot be read.
            ProcessExitError: If the child terminates with a failure status.
        """

        if not invocation.requested:
            return None

        self.logger.info(f"exec {invocation.argv!r}")

        process = await self._spawn(invocation)
        await self._drain(process)
        outcome = ExitOutcome(returncode=await process.wait())

        if not outcome.success:
            raise ProcessExitError(invocation, outcome)

        self.logger.debug(f"exec {invocation.argv!r}: {outcome.status}")
        return outcome
