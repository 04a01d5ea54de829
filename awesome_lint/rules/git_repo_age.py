"""Repository age check."""

from __future__ import annotations

from datetime import timedelta

from awesome_lint.document import Document
from awesome_lint.git import (
    ProcessError,
    get_commit_date,
    get_root_commit,
    is_shallow_repository,
    parse_commit_date,
)
from awesome_lint.logging import get_logger
from awesome_lint.rules.base import LintContext, Message

logger = get_logger("rules.git_repo_age")

INVALID_REPO_MESSAGE = (
    "Awesome list must reside in a valid deep-cloned Git repository "
    "(see https://github.com/sindresorhus/awesome-lint#tip for more information)"
)


class GitRepoAgeRule:
    """Requires the oldest commit of the hosting repository to be at least 30 days old."""

    rule_id = "awesome-git-repo-age"

    async def evaluate(self, document: Document, context: LintContext) -> list[Message]:
        try:
            if await is_shallow_repository(context.runner):
                logger.info("%s is inside a shallow clone", document.filename)
                return [self._message(INVALID_REPO_MESSAGE)]
            root_commit = await get_root_commit(context.runner)
            if root_commit is None:
                return [self._message(INVALID_REPO_MESSAGE)]
            commit_date = parse_commit_date(await get_commit_date(context.runner, root_commit))
        except (ProcessError, ValueError) as exc:
            logger.debug("git history unavailable for %s: %s", document.filename, exc)
            return [self._message(INVALID_REPO_MESSAGE)]

        age = context.clock() - commit_date
        minimum = timedelta(days=context.min_repo_age_days)
        logger.debug("root commit %s is %s old", root_commit, age)
        if age < minimum:
            return [
                self._message(
                    f"Git repository must be at least {context.min_repo_age_days} days old"
                )
            ]
        return []

    def _message(self, text: str) -> Message:
        return Message(line=None, rule_id=self.rule_id, message=text)
