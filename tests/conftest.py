# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import itertools
import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

_CHECKER_SCRIPT = """#!/bin/sh
echo run >> "{runs}"
printf '%s\\n' "$@" > "{args}"
cat "{stdout}"
cat "{stderr}" >&2
sleep {delay}
exit {exit_code}
"""


@dataclass(slots=True)
class FakeChecker:
    """Executable standing in for ansible-lint with canned output."""

    executable: Path
    args_file: Path
    runs_file: Path

    def recorded_args(self) -> list[str]:
        return self.args_file.read_text(encoding="utf-8").splitlines()

    def run_count(self) -> int:
        if not self.runs_file.exists():
            return 0
        return len(self.runs_file.read_text(encoding="utf-8").splitlines())


MakeChecker = Callable[..., FakeChecker]


@pytest.fixture
def make_checker(tmp_path: Path) -> MakeChecker:
    """Return a factory writing shell scripts that mimic the checker."""

    counter = itertools.count()

    def _make(
        stdout: str = "",
        stderr: str = "",
        *,
        exit_code: int = 0,
        delay: float = 0.0,
    ) -> FakeChecker:
        root = tmp_path / f"checker-{next(counter)}"
        root.mkdir()
        (root / "stdout.txt").write_text(stdout, encoding="utf-8")
        (root / "stderr.txt").write_text(stderr, encoding="utf-8")
        executable = root / "ansible-lint"
        executable.write_text(
            _CHECKER_SCRIPT.format(
                runs=root / "runs.txt",
                args=root / "args.txt",
                stdout=root / "stdout.txt",
                stderr=root / "stderr.txt",
                delay=delay,
                exit_code=exit_code,
            ),
            encoding="utf-8",
        )
        executable.chmod(executable.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return FakeChecker(
            executable=executable,
            args_file=root / "args.txt",
            runs_file=root / "runs.txt",
        )

    return _make
