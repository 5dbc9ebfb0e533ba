"""Spawning of external test-runner processes."""

import asyncio
import codecs
import contextlib
import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, cast

from parallel_cli.models.invocation import Invocation

log = logging.getLogger(__name__)

# Output is read in fixed-size chunks so a single huge line cannot stall capture
READ_CHUNK_SIZE = 2**16


@dataclass(frozen=True, kw_only=True)
class ProcessOutcome:
    """Exit status and full output of a finished process."""

    exit_code: int
    output: str
    started_at: float
    finished_at: float

    @property
    def duration(self) -> float:
        return self.finished_at - self.started_at


class Launcher(Protocol):
    """Callable that runs one invocation to completion."""

    async def __call__(self, invocation: Invocation) -> ProcessOutcome:
        """Run the invocation and return its outcome."""


def child_environment(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Inherited environment with colored output forced on."""
    env = dict(os.environ if base is None else base)
    env["FORCE_COLOR"] = "1"
    return env


@dataclass(frozen=True, kw_only=True)
class ProcessLauncher:
    """Runs invocations as OS processes, echoing their output live.

    stderr is merged into stdout; output is written to the terminal as it
    arrives and kept for scraping once the process exits. No timeout is
    applied: the external tool owns its own timeout policy.

    The launcher never returns or raises while its child is still alive. If
    capture fails or the caller is cancelled, the child is killed and reaped
    before the error propagates.
    """

    cwd: Path | None = None
    echo: bool = True

    async def __call__(self, invocation: Invocation) -> ProcessOutcome:
        loop = asyncio.get_running_loop()
        started_at = loop.time()

        process = await asyncio.create_subprocess_exec(
            *invocation.args,
            cwd=self.cwd,
            env=child_environment(),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        log.debug("Spawned pid %s: %s", process.pid, invocation)

        try:
            output = await self._capture(cast(asyncio.StreamReader, process.stdout))
        except BaseException:
            log.warning("Killing pid %s after output capture failed", process.pid)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise

        exit_code = await process.wait()

        return ProcessOutcome(
            exit_code=exit_code,
            output=output,
            started_at=started_at,
            finished_at=loop.time(),
        )

    async def _capture(self, stream: asyncio.StreamReader) -> str:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        chunks: list[str] = []

        while data := await stream.read(READ_CHUNK_SIZE):
            self._emit(decoder.decode(data), chunks)
        self._emit(decoder.decode(b"", final=True), chunks)

        return "".join(chunks)

    def _emit(self, text: str, chunks: list[str]) -> None:
        if not text:
            return
        chunks.append(text)
        if self.echo:
            sys.stdout.write(text)
            sys.stdout.flush()
