# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for translating between document URIs, paths and lint targets."""

from __future__ import annotations

import re
from os import PathLike
from pathlib import Path
from typing import Final
from urllib.parse import unquote, urlparse

from .constants import FILE_URI_PREFIX, TASKS_SEGMENT

_Pathish = str | PathLike[str] | Path

_FILE_SCHEME: Final[str] = "file"
_TASKS_SEGMENT_RE: Final[re.Pattern[str]] = re.compile(
    rf"[\\/]{re.escape(TASKS_SEGMENT)}[\\/]",
    re.IGNORECASE,
)


def uri_to_path(uri: str) -> Path:
    """Return the filesystem path addressed by ``uri``.

    Args:
        uri: Document URI supplied by the client.

    Returns:
        Path: Decoded path for ``file`` URIs; any other URI is returned as a
        plain path so callers still receive something to hand to the checker.
    """

    parsed = urlparse(uri)
    if parsed.scheme == _FILE_SCHEME:
        return Path(unquote(parsed.path))
    return Path(uri)


def path_to_uri(path: _Pathish) -> str:
    """Return the URI the checker's ``path`` is published under.

    The path is used verbatim, exactly as the checker printed it.
    """

    return f"{FILE_URI_PREFIX}{path}"


def lint_target(path: _Pathish) -> Path:
    """Return the path the checker should be pointed at for ``path``.

    A task fragment cannot be linted on its own, so anything below a ``tasks``
    directory is redirected to the role or playbook directory containing it.

    Args:
        path: Filesystem path of the document being validated.

    Returns:
        Path: ``path`` truncated before its first ``tasks`` directory segment
        (case-insensitive), or ``path`` unchanged when it has none.

    Examples:
        >>> lint_target("/home/u/roles/x/tasks/main.yml").as_posix()
        '/home/u/roles/x'
    """

    text = str(path)
    match = _TASKS_SEGMENT_RE.search(text)
    if match is None:
        return Path(text)
    return Path(text[: match.start()])


__all__ = ["lint_target", "path_to_uri", "uri_to_path"]
