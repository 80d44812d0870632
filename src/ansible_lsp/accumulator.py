# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Group checker output into per-file diagnostic batches."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import Diagnostic
from .parsers import ANSIBLE_LINT_GRAMMAR, LineGrammar, diagnostic_from_match, parse_line
from .paths import path_to_uri, uri_to_path
from .publisher import DiagnosticPublisher
from .severity import Severity

LOGGER = logging.getLogger(__name__)


class DiagnosticAccumulator:
    """Buffer diagnostics for the active file and flush when the file changes.

    The checker prints its findings clustered by file, so a batch is published
    as soon as output moves on to another file. Whatever remains is published
    by :meth:`finalize` once the process has exited, even when the batch is
    empty; that empty publish is what clears a document the checker now
    considers clean.
    """

    def __init__(
        self,
        document_uri: str,
        publisher: DiagnosticPublisher,
        *,
        grammar: LineGrammar = ANSIBLE_LINT_GRAMMAR,
    ) -> None:
        """Initialise the accumulator for one validation run.

        Args:
            document_uri: URI of the document being validated; it is the
                initial active file and owns all stderr output.
            publisher: Destination for completed batches.
            grammar: Grammar used to recognise stdout diagnostic lines.
        """

        self._document_uri = document_uri
        self._document_path = uri_to_path(document_uri)
        self._publisher = publisher
        self._grammar = grammar
        self._active_uri = document_uri
        self._batch: list[Diagnostic] = []
        self._finalized = False
        self.dropped_lines = 0
        self.flushes = 0

    @property
    def document_uri(self) -> str:
        return self._document_uri

    @property
    def active_uri(self) -> str:
        """Return the URI the current batch will be published under."""

        return self._active_uri

    @property
    def batch(self) -> tuple[Diagnostic, ...]:
        """Return a snapshot of the diagnostics awaiting publication."""

        return tuple(self._batch)

    def on_stderr_line(self, raw: str) -> None:
        """Record a stderr line as a warning on the first line of the document.

        Args:
            raw: Text of the stderr line, without its terminator.
        """

        LOGGER.info("%s", raw)
        self._batch.append(
            Diagnostic(
                uri=self._document_uri,
                line=0,
                severity=Severity.WARNING,
                message=raw,
            ),
        )

    def on_stdout_line(self, raw: str) -> None:
        """Parse a stdout line and add its diagnostic to the active batch.

        Lines that are not diagnostics are dropped. A diagnostic for a file
        other than the active one flushes the current batch first.

        Args:
            raw: Text of the stdout line, without its terminator.
        """

        match = parse_line(raw, self._grammar)
        if match is None:
            self.dropped_lines += 1
            LOGGER.debug("Ignoring checker output: %r", raw)
            return
        matched_uri = self._uri_for(match.file)
        if matched_uri != self._active_uri:
            self._flush()
            self._active_uri = matched_uri
        self._batch.append(diagnostic_from_match(match, uri=matched_uri))

    def finalize(self) -> None:
        """Publish the remaining batch under the active file.

        Only the first call publishes; the run coordinator may reach this from
        more than one exit path.
        """

        if self._finalized:
            return
        self._finalized = True
        self._flush()

    def _uri_for(self, file: str) -> str:
        # The editor may percent-encode the document's own URI; keep it stable.
        if file and Path(file) == self._document_path:
            return self._document_uri
        return path_to_uri(file)

    def _flush(self) -> None:
        batch = self._batch
        self._batch = []
        self.flushes += 1
        LOGGER.debug("Publishing %d diagnostic(s) for %s", len(batch), self._active_uri)
        self._publisher.publish(self._active_uri, batch)


__all__ = ["DiagnosticAccumulator"]
