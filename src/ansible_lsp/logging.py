# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Logging configuration for the server process.

Stdout carries the protocol stream when serving over stdio, so log records are
rendered to stderr and, once a client is connected, mirrored to it as
``window/logMessage`` notifications.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from lsprotocol import types as lsp
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pygls.lsp.server import LanguageServer

PACKAGE_LOGGER: Final[str] = "ansible_lsp"
_CLIENT_FORMAT: Final[str] = "%(message)s"


def _message_type(levelno: int) -> lsp.MessageType:
    if levelno >= logging.ERROR:
        return lsp.MessageType.Error
    if levelno >= logging.WARNING:
        return lsp.MessageType.Warning
    if levelno >= logging.INFO:
        return lsp.MessageType.Info
    return lsp.MessageType.Log


class LanguageClientLogHandler(logging.Handler):
    """Forward log records to the editor's output channel."""

    def __init__(self, server: LanguageServer, level: int | str = logging.NOTSET) -> None:
        super().__init__(level)
        self._server = server
        self.setFormatter(logging.Formatter(_CLIENT_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            self._server.window_log_message(
                lsp.LogMessageParams(type=_message_type(record.levelno), message=message),
            )
        except Exception:  # pragma: no cover - transport already gone
            self.handleError(record)


def configure_logging(level: int | str = logging.INFO, *, console: Console | None = None) -> logging.Logger:
    """Install a Rich handler on stderr and return the package logger.

    Args:
        level: Threshold applied to the package logger.
        console: Optional console override; defaults to a stderr console.

    Returns:
        logging.Logger: The ``ansible_lsp`` logger.
    """

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(_CLIENT_FORMAT))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger


def attach_client_logging(server: LanguageServer, level: int | str = logging.INFO) -> LanguageClientLogHandler:
    """Mirror package log records to ``server``'s client.

    Args:
        server: Language server connected to the client.
        level: Minimum level forwarded to the client.

    Returns:
        LanguageClientLogHandler: The installed handler.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if isinstance(existing, LanguageClientLogHandler):
            logger.removeHandler(existing)
    handler = LanguageClientLogHandler(server, level=level)
    logger.addHandler(handler)
    return handler


__all__ = [
    "LanguageClientLogHandler",
    "PACKAGE_LOGGER",
    "attach_client_logging",
    "configure_logging",
]
