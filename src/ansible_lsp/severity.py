# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final

from lsprotocol.types import DiagnosticSeverity


class Severity(str, Enum):
    """Severity levels understood by editor clients."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


_SEVERITY_TO_LSP: Final[dict[Severity, DiagnosticSeverity]] = {
    Severity.ERROR: DiagnosticSeverity.Error,
    Severity.WARNING: DiagnosticSeverity.Warning,
    Severity.INFORMATION: DiagnosticSeverity.Information,
    Severity.HINT: DiagnosticSeverity.Hint,
}


def severity_to_lsp(severity: Severity) -> DiagnosticSeverity:
    """Map :class:`Severity` to the protocol's numeric severity.

    Args:
        severity: Severity attached to a pipeline diagnostic.

    Returns:
        DiagnosticSeverity: Protocol severity, defaulting to ``Warning``.
    """

    return _SEVERITY_TO_LSP.get(severity, DiagnosticSeverity.Warning)


__all__ = ["Severity", "severity_to_lsp"]
