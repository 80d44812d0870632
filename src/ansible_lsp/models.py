# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models shared by the validation pipeline."""

from __future__ import annotations

from pathlib import Path

from lsprotocol import types as lsp
from pydantic import BaseModel, ConfigDict, Field

from .constants import DIAGNOSTIC_SOURCE, END_OF_LINE
from .paths import lint_target, uri_to_path
from .severity import Severity, severity_to_lsp


class ValidationRequest(BaseModel):
    """Identify one document that reached a state worth validating."""

    model_config = ConfigDict(frozen=True)

    uri: str
    path: Path

    @classmethod
    def from_uri(cls, uri: str) -> ValidationRequest:
        """Build a request for ``uri``, resolving its filesystem path.

        Args:
            uri: Document URI supplied by the client.

        Returns:
            ValidationRequest: Request addressing the decoded path of ``uri``.
        """

        return cls(uri=uri, path=uri_to_path(uri))

    @property
    def lint_target(self) -> Path:
        """Return the path handed to the checker for this document."""

        return lint_target(self.path)


class LineMatch(BaseModel):
    """Structured view of one recognised line of checker output."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int
    code: str
    message: str


class Diagnostic(BaseModel):
    """A finding attributed to one line of one file."""

    model_config = ConfigDict(frozen=True)

    uri: str
    line: int = Field(ge=0, le=END_OF_LINE)
    start_character: int = 0
    end_character: int = END_OF_LINE
    severity: Severity = Severity.WARNING
    message: str
    code: str | None = None
    source: str = DIAGNOSTIC_SOURCE

    def to_lsp(self) -> lsp.Diagnostic:
        """Return the protocol representation covering the whole line.

        Returns:
            lsp.Diagnostic: Diagnostic ready for ``textDocument/publishDiagnostics``.
        """

        return lsp.Diagnostic(
            range=lsp.Range(
                start=lsp.Position(line=self.line, character=self.start_character),
                end=lsp.Position(line=self.line, character=self.end_character),
            ),
            message=self.message,
            severity=severity_to_lsp(self.severity),
            code=self.code,
            source=self.source,
        )


__all__ = ["Diagnostic", "LineMatch", "ValidationRequest"]
