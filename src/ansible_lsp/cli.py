# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entry points for serving and one-shot checks."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Final

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import LogLevel, ServerConfig
from .constants import CHECKER_EXECUTABLE, SERVER_NAME
from .coordinator import RunCoordinator
from .logging import configure_logging
from .models import Diagnostic, ValidationRequest
from .paths import path_to_uri
from .process import find_executable
from .publisher import CollectingPublisher
from .server import create_server

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 2087
EXIT_FINDINGS: Final[int] = 1
EXIT_MISSING_CHECKER: Final[int] = 2

app = typer.Typer(
    name=SERVER_NAME,
    add_completion=False,
    no_args_is_help=True,
    help="Publish ansible-lint findings as editor diagnostics.",
)

ExecutableOption = Annotated[
    str,
    typer.Option(
        "--executable",
        help="Checker executable name or path.",
        envvar="ANSIBLE_LINT_LSP_EXECUTABLE",
        show_default=True,
    ),
]
LogLevelOption = Annotated[
    LogLevel,
    typer.Option("--log-level", case_sensitive=False, help="Threshold for log output on stderr."),
]


@app.command("serve")
def serve(
    tcp: Annotated[bool, typer.Option("--tcp", help="Listen on TCP instead of stdio.")] = False,
    host: Annotated[str, typer.Option("--host", help="Interface to bind with --tcp.")] = DEFAULT_HOST,
    port: Annotated[int, typer.Option("--port", help="Port to bind with --tcp.")] = DEFAULT_PORT,
    executable: ExecutableOption = CHECKER_EXECUTABLE,
    log_level: LogLevelOption = LogLevel.INFO,
) -> None:
    """Run the language server until the client disconnects.

    Args:
        tcp: Serve over TCP rather than stdio.
        host: Interface to bind when serving over TCP.
        port: Port to bind when serving over TCP.
        executable: Checker executable name or path.
        log_level: Threshold for log output.
    """

    configure_logging(log_level)
    server = create_server(ServerConfig(executable=executable, log_level=log_level))
    if tcp:
        server.start_tcp(host, port)
    else:
        server.start_io()


@app.command("check")
def check(
    path: Annotated[
        Path,
        typer.Argument(
            help="Playbook, role or task file to lint.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    executable: ExecutableOption = CHECKER_EXECUTABLE,
    color: Annotated[bool, typer.Option("--color/--no-color", help="Colourise the report.")] = True,
    log_level: LogLevelOption = LogLevel.WARNING,
) -> None:
    """Validate one file the way the server would and print the published batches.

    Args:
        path: File handed to the pipeline as if the editor had opened it.
        executable: Checker executable name or path.
        color: Whether to colourise the report.
        log_level: Threshold for log output.

    Raises:
        typer.Exit: Exit status ``1`` when diagnostics were found, ``2`` when the
            checker cannot be located.
    """

    configure_logging(log_level)
    console = Console(no_color=not color, highlight=False, soft_wrap=True)
    if find_executable(executable) is None:
        console.print(f"{executable} not found on PATH")
        raise typer.Exit(code=EXIT_MISSING_CHECKER)

    publisher = CollectingPublisher()
    coordinator = RunCoordinator(publisher, executable=executable)
    asyncio.run(coordinator.run(ValidationRequest(uri=path_to_uri(path), path=path)))

    diagnostics = publisher.diagnostics()
    reported = {uri: batch for uri, batch in publisher.latest.items() if batch}
    for uri, batch in reported.items():
        render_batch(console, uri, batch, color=color)
    console.print(f"{len(diagnostics)} diagnostic(s) in {len(reported)} file(s)")
    raise typer.Exit(code=EXIT_FINDINGS if diagnostics else 0)


def render_batch(console: Console, uri: str, batch: Sequence[Diagnostic], *, color: bool) -> None:
    """Render the diagnostics published for ``uri`` as a table."""

    console.print(Text(uri, style="bold cyan" if color else ""))
    table = Table(box=box.SIMPLE_HEAVY if color else box.SIMPLE, show_header=True)
    table.add_column("Line", justify="right", style="green" if color else None)
    table.add_column("Code", style="magenta" if color else None, no_wrap=True)
    table.add_column("Message")
    for diagnostic in batch:
        table.add_row(str(diagnostic.line + 1), diagnostic.code or "-", diagnostic.message)
    console.print(table)


__all__ = ["app", "check", "render_batch", "serve"]
