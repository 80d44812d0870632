# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous helpers for launching the checker and reading its output."""

from __future__ import annotations

import asyncio
import shutil

# Bandit: process creation is intentional; arguments are passed as a list and
# no shell is involved.
import subprocess  # nosec B404 suppression_valid: Shell-free exec wrapper for the checker.
from collections.abc import AsyncIterator, Sequence
from os import PathLike
from pathlib import Path
from typing import Final

from .constants import CHECKER_EXECUTABLE, CHECKER_FLAGS

_STREAM_LIMIT: Final[int] = 1024 * 1024
_ENCODING: Final[str] = "utf-8"
_LINE_TERMINATORS: Final[bytes] = b"\r\n"


def find_executable(cmd: str) -> str | None:
    """Locate an executable on ``PATH`` (virtualenv aware)."""

    return shutil.which(cmd)


def build_checker_command(
    target: str | PathLike[str] | Path,
    *,
    executable: str = CHECKER_EXECUTABLE,
) -> list[str]:
    """Return the argument vector used to lint ``target``.

    Args:
        target: Lint target path; always the final argument.
        executable: Checker executable name or path.

    Returns:
        list[str]: Command suitable for :func:`spawn_checker`.
    """

    return [executable, *CHECKER_FLAGS, str(target)]


async def spawn_checker(command: Sequence[str]) -> asyncio.subprocess.Process:
    """Start ``command`` with piped stdout and stderr.

    Args:
        command: Argument vector; the first entry is the executable.

    Returns:
        asyncio.subprocess.Process: Running process handle.

    Raises:
        OSError: If the executable is missing or cannot be executed.
    """

    return await asyncio.create_subprocess_exec(
        *command,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        limit=_STREAM_LIMIT,
    )


async def iter_lines(stream: asyncio.StreamReader) -> AsyncIterator[str]:
    """Yield decoded lines from ``stream`` in arrival order.

    ``\\n`` and ``\\r\\n`` terminators are removed; a final unterminated line is
    yielded as well. Undecodable bytes are replaced rather than raised.

    Args:
        stream: Process output stream.

    Yields:
        str: One line of output without its terminator.
    """

    async for raw in stream:
        yield raw.rstrip(_LINE_TERMINATORS).decode(_ENCODING, errors="replace")


__all__ = ["build_checker_command", "find_executable", "iter_lines", "spawn_checker"]
