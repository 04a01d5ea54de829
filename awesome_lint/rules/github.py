"""GitHub repository metadata check."""

from __future__ import annotations

from typing import Any

from awesome_lint.document import Document
from awesome_lint.git import ProcessError, get_remote_url
from awesome_lint.github import (
    HttpError,
    RepositoryRef,
    build_repository_url,
    build_request_headers,
    parse_rate_limit,
    parse_remote_url,
)
from awesome_lint.logging import get_logger
from awesome_lint.rules.base import LintContext, Message

logger = get_logger("rules.github")

REQUIRED_TOPICS = ("awesome-list", "awesome")


class GithubRule:
    """Requires a GitHub-hosted repository with a description, a license and awesome topics."""

    rule_id = "awesome-github"

    async def evaluate(self, document: Document, context: LintContext) -> list[Message]:
        try:
            remote_url = await get_remote_url(context.runner)
        except ProcessError as exc:
            logger.debug("no git remote for %s: %s", document.filename, exc)
            return [self._message("Awesome list must reside in a valid git repository")]
        if remote_url is None:
            return [self._message("Awesome list must reside in a valid git repository")]

        repo = parse_remote_url(remote_url)
        if repo is None or not repo.is_github:
            return [self._message("Repository should be on GitHub")]

        try:
            body = await self._fetch_repository(repo, context)
        except HttpError as exc:
            classified = self._classify_http_error(exc)
            if classified is None:
                raise
            logger.info("GitHub request for %s failed: %s", repo.full_name, exc.message)
            return [self._message(classified)]

        return self._check_metadata(body)

    async def _fetch_repository(self, repo: RepositoryRef, context: LintContext) -> Any:
        response = await context.http.get(
            build_repository_url(context.github_api_url, repo),
            headers=build_request_headers(context.github_token),
        )
        return response.body

    def _check_metadata(self, body: Any) -> list[Message]:
        data = body if isinstance(body, dict) else {}
        messages: list[Message] = []
        if not data.get("description"):
            messages.append(self._message("The repository should have a description"))
        if not data.get("license"):
            messages.append(self._message("License was not detected by GitHub"))

        topics = data.get("topics")
        if not isinstance(topics, list):
            topics = []
        for topic in REQUIRED_TOPICS:
            if topic not in topics:
                messages.append(
                    self._message(f'The repository should have "{topic}" as a GitHub topic')
                )
        return messages

    @staticmethod
    def _classify_http_error(exc: HttpError) -> str | None:
        if exc.status_code == 401:
            return "Unauthorized access or token is invalid"

        if exc.status_code == 403:
            rate_limit = parse_rate_limit(exc.headers)
            if rate_limit is None:
                return None
            if rate_limit.is_anonymous:
                return (
                    f"API rate limit of {rate_limit.limit} requests per hour exceeded. "
                    "Use a personal token to increase the number of requests"
                )
            return f"API rate limit of {rate_limit.limit} requests per hour exceeded"

        if exc.status_code is None and exc.code:
            return f"There was a problem trying to connect to GitHub: {exc.message}"
        return None

    def _message(self, text: str) -> Message:
        return Message(line=None, rule_id=self.rule_id, message=text)
