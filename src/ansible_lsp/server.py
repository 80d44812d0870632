# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language server wiring document events to the validation pipeline."""

from __future__ import annotations

import logging
from typing import Any

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from . import __version__
from .config import ConfigError, LinterSettings, ServerConfig
from .constants import SERVER_NAME
from .coordinator import RunCoordinator
from .logging import attach_client_logging
from .models import ValidationRequest
from .publisher import LanguageServerPublisher

LOGGER = logging.getLogger(__name__)


class AnsibleLanguageServer(LanguageServer):
    """pygls server owning the run coordinator and the client settings."""

    def __init__(self, config: ServerConfig | None = None, **kwargs: Any) -> None:
        """Initialise the server.

        Args:
            config: Launch options; defaults to :class:`ServerConfig`.
            **kwargs: Forwarded to :class:`pygls.lsp.server.LanguageServer`.
        """

        kwargs.setdefault("text_document_sync_kind", lsp.TextDocumentSyncKind.Full)
        super().__init__(SERVER_NAME, __version__, **kwargs)
        self.server_config = config or ServerConfig()
        self.settings = LinterSettings()
        self.publisher = LanguageServerPublisher(self)
        self.coordinator = RunCoordinator(self.publisher, executable=self.server_config.executable)


def validate_document(ls: AnsibleLanguageServer, uri: str) -> None:
    """Trigger validation of ``uri``; a no-op while a run is in flight."""

    ls.coordinator.validate(ValidationRequest.from_uri(uri))


def validate_open_documents(ls: AnsibleLanguageServer) -> None:
    """Trigger validation of every document the client has open."""

    for uri in list(ls.workspace.text_documents):
        validate_document(ls, uri)


def initialized(ls: AnsibleLanguageServer, params: lsp.InitializedParams) -> None:
    del params
    attach_client_logging(ls, ls.server_config.log_level)
    LOGGER.info("%s %s ready (workspace: %s)", SERVER_NAME, __version__, ls.workspace.root_path or "-")


def did_open(ls: AnsibleLanguageServer, params: lsp.DidOpenTextDocumentParams) -> None:
    validate_document(ls, params.text_document.uri)


def did_save(ls: AnsibleLanguageServer, params: lsp.DidSaveTextDocumentParams) -> None:
    validate_document(ls, params.text_document.uri)


def did_close(ls: AnsibleLanguageServer, params: lsp.DidCloseTextDocumentParams) -> None:
    """Clear diagnostics for a closed document without running the checker."""

    ls.publisher.publish(params.text_document.uri, [])


def did_change_configuration(ls: AnsibleLanguageServer, params: lsp.DidChangeConfigurationParams) -> None:
    """Adopt new client settings and revalidate every open document.

    Malformed settings are reported and the previous settings stay active.
    """

    try:
        ls.settings = LinterSettings.from_client_settings(params.settings)
    except ConfigError as exc:
        LOGGER.warning("Ignoring configuration change: %s", exc)
    else:
        LOGGER.debug("maxNumberOfProblems set to %d", ls.settings.max_number_of_problems)
    validate_open_documents(ls)


def register_features(ls: AnsibleLanguageServer) -> AnsibleLanguageServer:
    """Register the document and workspace handlers on ``ls``."""

    ls.feature(lsp.INITIALIZED)(initialized)
    ls.feature(lsp.TEXT_DOCUMENT_DID_OPEN)(did_open)
    ls.feature(lsp.TEXT_DOCUMENT_DID_SAVE)(did_save)
    ls.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)(did_close)
    ls.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)(did_change_configuration)
    return ls


def create_server(config: ServerConfig | None = None) -> AnsibleLanguageServer:
    """Return a fully wired server ready for ``start_io`` or ``start_tcp``."""

    return register_features(AnsibleLanguageServer(config))


__all__ = [
    "AnsibleLanguageServer",
    "create_server",
    "did_change_configuration",
    "did_close",
    "did_open",
    "did_save",
    "initialized",
    "register_features",
    "validate_document",
    "validate_open_documents",
]
