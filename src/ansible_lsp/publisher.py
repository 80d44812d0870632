# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Destinations for completed diagnostic batches.

Every publish is an authoritative replacement of the diagnostics shown for a
URI. When the checker reports one file in non-contiguous stretches of output,
the later batch replaces the earlier one.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from lsprotocol import types as lsp

from .models import Diagnostic

if TYPE_CHECKING:
    from pygls.lsp.server import LanguageServer


@runtime_checkable
class DiagnosticPublisher(Protocol):
    """Receive complete diagnostic batches keyed by file URI."""

    def publish(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Replace the diagnostics shown for ``uri`` with ``diagnostics``."""
        ...


class LanguageServerPublisher:
    """Send batches to the client as ``textDocument/publishDiagnostics``."""

    def __init__(self, server: LanguageServer) -> None:
        self._server = server

    def publish(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Send ``diagnostics`` for ``uri`` through the language server.

        Args:
            uri: File URI the batch belongs to.
            diagnostics: Complete replacement set for ``uri``.
        """

        self._server.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(
                uri=uri,
                diagnostics=[diagnostic.to_lsp() for diagnostic in diagnostics],
            ),
        )


@dataclass(slots=True)
class CollectingPublisher:
    """Keep published batches in memory.

    ``latest`` mirrors what an editor would display; ``history`` records every
    publish call in order.
    """

    latest: dict[str, tuple[Diagnostic, ...]] = field(default_factory=dict)
    history: list[tuple[str, tuple[Diagnostic, ...]]] = field(default_factory=list)

    def publish(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        batch = tuple(diagnostics)
        self.latest[uri] = batch
        self.history.append((uri, batch))

    def diagnostics(self) -> list[Diagnostic]:
        """Return every diagnostic currently shown, grouped by URI."""

        return [diagnostic for batch in self.latest.values() for diagnostic in batch]


__all__ = ["CollectingPublisher", "DiagnosticPublisher", "LanguageServerPublisher"]
