# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for per-document checker runs."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from ansible_lsp.coordinator import RunCoordinator
from ansible_lsp.models import Diagnostic, ValidationRequest
from ansible_lsp.paths import path_to_uri
from ansible_lsp.publisher import CollectingPublisher

MakeChecker = Callable[..., Any]


class _ExplodingPublisher:
    def __init__(self) -> None:
        self.calls = 0

    def publish(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        self.calls += 1
        raise RuntimeError("client went away")


def _request(path: Path) -> ValidationRequest:
    return ValidationRequest(uri=path_to_uri(path), path=path)


def test_run_publishes_batches_per_file(make_checker: MakeChecker, tmp_path: Path) -> None:
    document = tmp_path / "site.yml"
    included = tmp_path / "roles" / "web" / "tasks" / "main.yml"
    checker = make_checker(
        stdout=(
            f"{document}:3: [ANSIBLE0002] trailing whitespace\n"
            f"{included}:12: [ANSIBLE0012] Commands should not change things\n"
            "Finished with 2 failures\n"
        ),
        exit_code=2,
    )
    publisher = CollectingPublisher()
    coordinator = RunCoordinator(publisher, executable=str(checker.executable))

    assert asyncio.run(coordinator.run(_request(document))) is True

    assert [uri for uri, _ in publisher.history] == [path_to_uri(document), path_to_uri(included)]
    (doc_diagnostic,) = publisher.latest[path_to_uri(document)]
    assert doc_diagnostic.line == 2
    assert doc_diagnostic.message == "trailing whitespace"
    (included_diagnostic,) = publisher.latest[path_to_uri(included)]
    assert included_diagnostic.line == 11
    assert not coordinator.is_running(path_to_uri(document))


def test_run_passes_fixed_flags_and_lint_target(make_checker: MakeChecker, tmp_path: Path) -> None:
    task_file = tmp_path / "roles" / "web" / "tasks" / "main.yml"
    checker = make_checker()
    coordinator = RunCoordinator(CollectingPublisher(), executable=str(checker.executable))

    asyncio.run(coordinator.run(_request(task_file)))

    assert checker.recorded_args() == ["-p", "--nocolor", str(tmp_path / "roles" / "web")]


def test_clean_run_clears_document(make_checker: MakeChecker, tmp_path: Path) -> None:
    document = tmp_path / "site.yml"
    checker = make_checker(stdout="Examining site.yml\n")
    publisher = CollectingPublisher()
    coordinator = RunCoordinator(publisher, executable=str(checker.executable))

    asyncio.run(coordinator.run(_request(document)))

    assert publisher.history == [(path_to_uri(document), ())]


def test_stderr_output_is_reported_on_first_line(make_checker: MakeChecker, tmp_path: Path) -> None:
    document = tmp_path / "site.yml"
    checker = make_checker(stderr="Syntax Error while loading YAML.\r\n", exit_code=1)
    publisher = CollectingPublisher()
    coordinator = RunCoordinator(publisher, executable=str(checker.executable))

    asyncio.run(coordinator.run(_request(document)))

    (diagnostic,) = publisher.latest[path_to_uri(document)]
    assert diagnostic.line == 0
    assert diagnostic.message == "Syntax Error while loading YAML."


def test_second_trigger_while_running_is_dropped(make_checker: MakeChecker, tmp_path: Path) -> None:
    document = tmp_path / "site.yml"
    checker = make_checker(stdout=f"{document}:1: [E201] trailing whitespace\n", delay=0.3)
    publisher = CollectingPublisher()
    coordinator = RunCoordinator(publisher, executable=str(checker.executable))
    request = _request(document)

    async def scenario() -> tuple[bool, bool]:
        first = coordinator.validate(request)
        second = coordinator.validate(request)
        running_during = coordinator.is_running(request.uri)
        assert first is not None
        await first
        return second is None, running_during

    second_dropped, running_during = asyncio.run(scenario())

    assert second_dropped
    assert running_during
    assert checker.run_count() == 1
    assert len(publisher.history) == 1
    assert not coordinator.is_running(request.uri)


def test_documents_run_independently(make_checker: MakeChecker, tmp_path: Path) -> None:
    checker = make_checker(delay=0.3)
    publisher = CollectingPublisher()
    coordinator = RunCoordinator(publisher, executable=str(checker.executable))
    first = _request(tmp_path / "one.yml")
    second = _request(tmp_path / "two.yml")

    async def scenario() -> frozenset[str]:
        assert coordinator.validate(first) is not None
        assert coordinator.validate(second) is not None
        in_flight = coordinator.running
        await coordinator.wait_idle()
        return in_flight

    in_flight = asyncio.run(scenario())

    assert in_flight == {first.uri, second.uri}
    assert checker.run_count() == 2
    assert set(publisher.latest) == {first.uri, second.uri}
    assert coordinator.running == frozenset()


def test_missing_executable_still_finishes_the_run(tmp_path: Path) -> None:
    document = tmp_path / "site.yml"
    publisher = CollectingPublisher()
    coordinator = RunCoordinator(publisher, executable=str(tmp_path / "no-such-checker"))

    asyncio.run(coordinator.run(_request(document)))

    assert publisher.history == [(path_to_uri(document), ())]
    assert not coordinator.is_running(path_to_uri(document))


def test_publisher_failures_do_not_wedge_the_document(make_checker: MakeChecker, tmp_path: Path) -> None:
    document = tmp_path / "site.yml"
    checker = make_checker(
        stdout=(
            f"{document}:1: [E201] trailing whitespace\n"
            f"{tmp_path / 'other.yml'}:1: [E201] trailing whitespace\n"
        ),
        delay=0.2,
    )
    publisher = _ExplodingPublisher()
    coordinator = RunCoordinator(publisher, executable=str(checker.executable))
    request = _request(document)

    assert asyncio.run(coordinator.run(request)) is True
    assert not coordinator.is_running(request.uri)
    assert publisher.calls >= 1

    # The document can be validated again.
    assert asyncio.run(coordinator.run(request)) is True


def test_validate_outside_event_loop_releases_claim(tmp_path: Path) -> None:
    coordinator = RunCoordinator(CollectingPublisher())
    request = _request(tmp_path / "site.yml")

    with pytest.raises(RuntimeError):
        coordinator.validate(request)

    assert not coordinator.is_running(request.uri)
