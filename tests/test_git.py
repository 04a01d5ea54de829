"""Subprocess runner and git helper tests against synthetic repositories."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from awesome_lint.git import (
    ProcessError,
    SubprocessRunner,
    get_commit_date,
    get_remote_url,
    get_root_commit,
    is_shallow_repository,
    parse_commit_date,
)
from tests.helpers_git import commit_all, git, init_repo, write_file


def test_parse_commit_date_keeps_offset() -> None:
    parsed = parse_commit_date("2016-08-01 12:55:53 +0200")
    assert parsed.utcoffset() == timedelta(hours=2)
    assert parsed == datetime(2016, 8, 1, 10, 55, 53, tzinfo=UTC)
    assert parse_commit_date("2016-08-01 12:55:53 -0530").tzinfo == timezone(
        -timedelta(hours=5, minutes=30)
    )


def test_parse_commit_date_rejects_other_formats() -> None:
    with pytest.raises(ValueError):
        parse_commit_date("2016-08-01T12:55:53Z")


def test_runner_reads_history_and_remote(tmp_path: Path) -> None:
    repo = init_repo(tmp_path)
    write_file(repo, "readme.md", "# Awesome\n")
    commit_all(repo, "first", date="2016-08-01T12:55:53+02:00")
    write_file(repo, "readme.md", "# Awesome\n\n- item\n")
    commit_all(repo, "second")
    git(repo, "remote", "add", "origin", "git@github.com:owner/repo.git")
    first = git(repo, "rev-list", "--max-parents=0", "HEAD").strip()

    runner = SubprocessRunner(cwd=repo)

    async def scenario() -> tuple[bool, str | None, str, str | None]:
        shallow = await is_shallow_repository(runner)
        root = await get_root_commit(runner)
        date = await get_commit_date(runner, root or "HEAD")
        remote = await get_remote_url(runner)
        return shallow, root, date, remote

    shallow, root, date, remote = asyncio.run(scenario())
    assert shallow is False
    assert root == first
    assert parse_commit_date(date) == datetime(2016, 8, 1, 10, 55, 53, tzinfo=UTC)
    assert remote == "git@github.com:owner/repo.git"


def test_runner_raises_process_error_outside_repository(tmp_path: Path) -> None:
    runner = SubprocessRunner(cwd=tmp_path)
    with pytest.raises(ProcessError) as excinfo:
        asyncio.run(get_root_commit(runner))
    assert excinfo.value.command == "git"
    assert excinfo.value.stderr


def test_runner_raises_process_error_for_missing_executable(tmp_path: Path) -> None:
    runner = SubprocessRunner(cwd=tmp_path)
    with pytest.raises(ProcessError, match="command not found"):
        asyncio.run(runner.run("definitely-not-a-real-binary-awesome-lint", ["--version"]))
