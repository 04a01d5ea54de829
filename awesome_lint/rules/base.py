"""Base rule protocol, lint context and message model."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

from awesome_lint.document import Document
from awesome_lint.git import ProcessRunner
from awesome_lint.github import DEFAULT_API_URL, HttpClient

DEFAULT_MIN_REPO_AGE_DAYS = 30


@dataclass(frozen=True, slots=True)
class Message:
    """A single diagnostic emitted by a rule.

    ``line`` is None for findings that are not tied to a source location.
    """

    line: int | None
    rule_id: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "rule_id": self.rule_id, "message": self.message}


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class LintContext:
    """Collaborators and settings shared read-only by every rule in a run."""

    runner: ProcessRunner
    http: HttpClient
    github_token: str | None = None
    clock: Callable[[], datetime] = field(default=_utc_now)
    min_repo_age_days: int = DEFAULT_MIN_REPO_AGE_DAYS
    github_api_url: str = DEFAULT_API_URL


class Rule(Protocol):
    """Protocol for repository-level lint rules."""

    rule_id: str

    async def evaluate(self, document: Document, context: LintContext) -> list[Message]:
        """Evaluate the document and return messages."""
