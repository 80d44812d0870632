# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Line grammar for ansible-lint parseable output."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from .constants import END_OF_LINE
from .models import Diagnostic, LineMatch
from .paths import path_to_uri
from .severity import Severity

LOGGER = logging.getLogger(__name__)

_ANSI_EDGE_RE: Final[re.Pattern[str]] = re.compile(r"^(?:\x1b\[[0-9;]*m)+|(?:\x1b\[[0-9;]*m)+$")
_LINE_TERMINATORS: Final[str] = "\r\n"


@dataclass(frozen=True, slots=True)
class LineGrammar:
    """Named pattern describing one diagnostic line of checker output.

    The pattern must expose ``file``, ``line``, ``code`` and ``message`` groups.
    """

    name: str
    pattern: re.Pattern[str]

    def match(self, line: str) -> re.Match[str] | None:
        """Return the match for ``line`` or ``None`` when it is not a diagnostic."""

        return self.pattern.match(line)


# ``path:12: [ANSIBLE0002] message`` as well as the newer ``path:12: [E201] message``.
# The marker is any run of letters followed by ``E`` and a 3-4 digit code; the
# last marker on the line wins and the message is everything after its ``] ``.
ANSIBLE_LINT_GRAMMAR: Final[LineGrammar] = LineGrammar(
    name="ansible-lint-parseable",
    pattern=re.compile(
        r"^(?P<file>.*):(?P<line>\d+).*(?<![A-Za-z])(?P<code>[A-Za-z]*E\d{3,4})\]\s(?P<message>.*)$",
    ),
)


def _clean_line(raw: str) -> str:
    """Strip the line terminator and ANSI colour escapes wrapping ``raw``."""

    return _ANSI_EDGE_RE.sub("", raw.rstrip(_LINE_TERMINATORS))


def parse_line(raw: str, grammar: LineGrammar = ANSIBLE_LINT_GRAMMAR) -> LineMatch | None:
    """Parse one line of checker output.

    Args:
        raw: Line as read from the checker's stdout.
        grammar: Grammar used to recognise diagnostic lines.

    Returns:
        LineMatch | None: Structured match with the 1-based line number reported
        by the checker, or ``None`` when the line is banner, summary or other
        noise.

    Colour escapes are stripped only where they wrap the whole line; escapes
    inside the message are kept verbatim. Lines whose line number cannot be
    read, or would land past the last position an editor can address, are
    dropped on their own.
    """

    match = grammar.match(_clean_line(raw))
    if match is None:
        return None
    try:
        line_number = int(match.group("line"))
    except ValueError:
        LOGGER.debug("Discarding %s line with unreadable line number: %r", grammar.name, raw)
        return None
    if line_number - 1 > END_OF_LINE:
        LOGGER.debug("Discarding %s line with out-of-range line number %d", grammar.name, line_number)
        return None
    return LineMatch(
        file=match.group("file"),
        line=line_number,
        code=match.group("code"),
        message=match.group("message"),
    )


def diagnostic_from_match(match: LineMatch, *, uri: str | None = None) -> Diagnostic:
    """Convert ``match`` into a full-line warning diagnostic.

    Args:
        match: Parsed checker line.
        uri: URI to attribute the diagnostic to; defaults to the ``file://``
            URI of the reported path.

    Returns:
        Diagnostic: Diagnostic anchored at the 0-based line of ``match``.
    """

    return Diagnostic(
        uri=uri if uri is not None else path_to_uri(match.file),
        line=max(match.line - 1, 0),
        severity=Severity.WARNING,
        message=match.message,
        code=match.code,
    )


__all__ = [
    "ANSIBLE_LINT_GRAMMAR",
    "LineGrammar",
    "diagnostic_from_match",
    "parse_line",
]
