# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launch one checker run per document and route its output to the publisher."""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import Callable

from .accumulator import DiagnosticAccumulator
from .constants import CHECKER_EXECUTABLE
from .models import ValidationRequest
from .parsers import ANSIBLE_LINT_GRAMMAR, LineGrammar
from .process import build_checker_command, iter_lines, spawn_checker
from .publisher import DiagnosticPublisher

LOGGER = logging.getLogger(__name__)

LineHandler = Callable[[str], None]


class RunCoordinator:
    """Serialise checker runs per document URI.

    A document is either idle or running. Triggers for a running document are
    dropped, not queued, so a burst of open/save events collapses onto the run
    already in progress. Runs for different documents are independent.

    There is no timeout: a checker that never exits keeps its document in the
    running state until the process is killed externally.
    """

    def __init__(
        self,
        publisher: DiagnosticPublisher,
        *,
        executable: str = CHECKER_EXECUTABLE,
        grammar: LineGrammar = ANSIBLE_LINT_GRAMMAR,
    ) -> None:
        """Initialise the coordinator.

        Args:
            publisher: Destination for every completed diagnostic batch.
            executable: Checker executable name or path.
            grammar: Grammar used to recognise diagnostic lines on stdout.
        """

        self._publisher = publisher
        self._executable = executable
        self._grammar = grammar
        self._running: set[str] = set()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def running(self) -> frozenset[str]:
        """Return the URIs that currently have a checker in flight."""

        return frozenset(self._running)

    def is_running(self, uri: str) -> bool:
        return uri in self._running

    def validate(self, request: ValidationRequest) -> asyncio.Task[None] | None:
        """Schedule a checker run for ``request`` without waiting for it.

        Must be called from within the running event loop.

        Args:
            request: Document to validate.

        Returns:
            asyncio.Task[None] | None: Task driving the new run, or ``None`` when
            a run for the same URI is already in flight.
        """

        if not self._claim(request.uri):
            return None
        try:
            task = asyncio.get_running_loop().create_task(self._run_claimed(request))
        except RuntimeError:
            self._running.discard(request.uri)
            raise
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, request: ValidationRequest) -> bool:
        """Validate ``request`` in the calling task.

        Args:
            request: Document to validate.

        Returns:
            bool: ``True`` when a run happened, ``False`` when the document was
            already being validated.
        """

        if not self._claim(request.uri):
            return False
        await self._run_claimed(request)
        return True

    async def wait_idle(self) -> None:
        """Wait until every run scheduled through :meth:`validate` has finished."""

        while self._tasks:
            await asyncio.gather(*tuple(self._tasks), return_exceptions=True)

    def _claim(self, uri: str) -> bool:
        if uri in self._running:
            LOGGER.debug("Validation already in progress for %s; ignoring trigger", uri)
            return False
        self._running.add(uri)
        return True

    async def _run_claimed(self, request: ValidationRequest) -> None:
        dropped = 0
        try:
            accumulator = DiagnosticAccumulator(request.uri, self._publisher, grammar=self._grammar)
            try:
                await self._execute(request, accumulator)
            finally:
                dropped = accumulator.dropped_lines
                accumulator.finalize()
        except Exception:
            LOGGER.exception("Validation of %s failed", request.uri)
        finally:
            # Any path that leaves the flag set starves the document for good.
            self._running.discard(request.uri)
            LOGGER.debug("Validation finished for %s (%d line(s) ignored)", request.uri, dropped)

    async def _execute(self, request: ValidationRequest, accumulator: DiagnosticAccumulator) -> None:
        command = build_checker_command(request.lint_target, executable=self._executable)
        LOGGER.info("running %s", shlex.join(command))
        try:
            process = await spawn_checker(command)
        except OSError as exc:
            LOGGER.warning("Unable to start %s: %s", command[0], exc)
            return

        try:
            async with asyncio.TaskGroup() as group:
                group.create_task(_pump(process.stdout, accumulator.on_stdout_line))
                group.create_task(_pump(process.stderr, accumulator.on_stderr_line))
            returncode = await process.wait()
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()
        LOGGER.debug("%s exited with status %s", command[0], returncode)


async def _pump(stream: asyncio.StreamReader | None, handler: LineHandler) -> None:
    if stream is None:
        return
    async for line in iter_lines(stream):
        handler(line)


__all__ = ["RunCoordinator"]
