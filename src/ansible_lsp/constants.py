# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fixed values shared by the validation pipeline and the server wiring."""

from __future__ import annotations

from typing import Final

SERVER_NAME: Final[str] = "ansible-lint-lsp"
CHECKER_EXECUTABLE: Final[str] = "ansible-lint"
# Parseable output, no ANSI colour codes; the lint target is appended last.
CHECKER_FLAGS: Final[tuple[str, ...]] = ("-p", "--nocolor")
DIAGNOSTIC_SOURCE: Final[str] = "ansible-lint"

# Largest value a protocol ``uinteger`` may carry; clients clamp it to the line end.
END_OF_LINE: Final[int] = 2**31 - 1

DEFAULT_MAX_PROBLEMS: Final[int] = 100
SETTINGS_SECTION: Final[str] = "ansibleLinter"
MAX_PROBLEMS_KEY: Final[str] = "maxNumberOfProblems"

TASKS_SEGMENT: Final[str] = "tasks"
FILE_URI_PREFIX: Final[str] = "file://"

__all__ = [
    "CHECKER_EXECUTABLE",
    "CHECKER_FLAGS",
    "DEFAULT_MAX_PROBLEMS",
    "DIAGNOSTIC_SOURCE",
    "END_OF_LINE",
    "FILE_URI_PREFIX",
    "MAX_PROBLEMS_KEY",
    "SERVER_NAME",
    "SETTINGS_SECTION",
    "TASKS_SEGMENT",
]
