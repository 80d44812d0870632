# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for URI and lint target path helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from ansible_lsp.models import ValidationRequest
from ansible_lsp.paths import lint_target, path_to_uri, uri_to_path


def test_lint_target_truncates_before_tasks_directory() -> None:
    assert lint_target("/home/u/roles/x/tasks/main.yml") == Path("/home/u/roles/x")


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/home/u/roles/x/Tasks/main.yml", "/home/u/roles/x"),
        ("/home/u/roles/x/TASKS/sub/main.yml", "/home/u/roles/x"),
        ("/home/u/a/tasks/b/tasks/c.yml", "/home/u/a"),
    ],
)
def test_lint_target_uses_first_tasks_segment_case_insensitively(path: str, expected: str) -> None:
    assert lint_target(path) == Path(expected)


@pytest.mark.parametrize(
    "path",
    [
        "/home/u/site.yml",
        "/home/u/roles/x/handlers/main.yml",
        "/home/u/mytasks/main.yml",
        "/home/u/tasks_extra/main.yml",
        "/home/u/roles/x/tasks",
    ],
)
def test_lint_target_leaves_other_paths_unchanged(path: str) -> None:
    assert lint_target(path) == Path(path)


def test_uri_to_path_decodes_file_uris() -> None:
    assert uri_to_path("file:///home/u/my%20roles/site.yml") == Path("/home/u/my roles/site.yml")


def test_uri_to_path_passes_through_other_schemes() -> None:
    assert uri_to_path("untitled:Untitled-1") == Path("untitled:Untitled-1")


def test_path_to_uri_uses_path_verbatim() -> None:
    assert path_to_uri("/home/u/roles/x/tasks/main.yml") == "file:///home/u/roles/x/tasks/main.yml"


def test_validation_request_derives_lint_target() -> None:
    request = ValidationRequest.from_uri("file:///home/u/roles/x/tasks/main.yml")

    assert request.path == Path("/home/u/roles/x/tasks/main.yml")
    assert request.lint_target == Path("/home/u/roles/x")
