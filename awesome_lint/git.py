"""Git subprocess helpers."""

from __future__ import annotations

import asyncio
import os
import re
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from subprocess import CalledProcessError, run
from typing import Protocol

from awesome_lint.logging import get_logger

logger = get_logger("git")

_COMMIT_DATE_RE = re.compile(
    r"^(?P<stamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) (?P<offset>[+-]\d{4})$"
)


class ProcessError(RuntimeError):
    """Raised when an external command is missing or exits nonzero."""

    def __init__(
        self,
        message: str,
        *,
        command: str = "",
        args: Sequence[str] = (),
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.args_list = list(args)
        self.stderr = stderr


class ProcessRunner(Protocol):
    """Runs an external command and returns its stdout."""

    async def run(self, command: str, args: Sequence[str]) -> str:
        """Run ``command`` with ``args`` and return stdout, raising ProcessError on failure."""


class SubprocessRunner:
    """Process runner backed by ``subprocess.run`` in a worker thread."""

    def __init__(self, cwd: Path | None = None, env: dict[str, str] | None = None) -> None:
        self.cwd = cwd
        self.env = env

    async def run(self, command: str, args: Sequence[str]) -> str:
        return await asyncio.to_thread(self._run_sync, command, list(args))

    def _run_sync(self, command: str, args: list[str]) -> str:
        merged_env: dict[str, str] | None = None
        if self.env:
            merged_env = os.environ.copy()
            merged_env.update(self.env)

        logger.debug("running %s %s in %s", command, " ".join(args), self.cwd or ".")
        try:
            completed = run(
                [command, *args],
                cwd=self.cwd,
                check=True,
                capture_output=True,
                text=True,
                env=merged_env,
            )
        except FileNotFoundError as exc:
            raise ProcessError(
                f'"{command}" command not found', command=command, args=args
            ) from exc
        except NotADirectoryError as exc:
            raise ProcessError(
                f"working directory is not a directory: {self.cwd}", command=command, args=args
            ) from exc
        except CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise ProcessError(
                stderr or f"{command} {' '.join(args)} failed",
                command=command,
                args=args,
                stderr=stderr,
            ) from exc

        return completed.stdout


async def is_shallow_repository(runner: ProcessRunner) -> bool:
    """Return True when the repository is a shallow clone."""
    output = await runner.run("git", ["rev-parse", "--is-shallow-repository"])
    return (output or "").strip() == "true"


async def get_root_commit(runner: ProcessRunner) -> str | None:
    """Return the oldest root commit reachable from HEAD."""
    output = await runner.run("git", ["rev-list", "--max-parents=0", "HEAD"])
    lines = [line.strip() for line in (output or "").splitlines() if line.strip()]
    if not lines:
        return None
    return lines[-1]


async def get_commit_date(runner: ProcessRunner, revision: str) -> str:
    """Return the committer date of a revision in ``%ci`` format."""
    output = await runner.run("git", ["show", "-s", "--format=%ci", revision])
    return (output or "").strip()


async def get_remote_url(runner: ProcessRunner, remote: str = "origin") -> str | None:
    """Return the first URL configured for a remote."""
    output = await runner.run("git", ["remote", "get-url", "--all", remote])
    for line in (output or "").splitlines():
        if line.strip():
            return line.strip()
    return None


def parse_commit_date(value: str) -> datetime:
    """Parse a ``%ci`` date such as ``2016-08-01 12:55:53 +0200`` into an aware datetime."""
    match = _COMMIT_DATE_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Unrecognized commit date: {value!r}")
    return datetime.strptime(
        f"{match.group('stamp')} {match.group('offset')}", "%Y-%m-%d %H:%M:%S %z"
    )
