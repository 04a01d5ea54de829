"""Tests for the GitHub metadata rule."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from awesome_lint.document import Document
from awesome_lint.github import HttpError
from awesome_lint.rules.base import Message
from awesome_lint.rules.github import GithubRule
from tests.helpers_fakes import (
    FakeHttp,
    FakeRunner,
    git_not_found,
    github_runner,
    http_error,
    make_context,
)

DOCUMENT = Document(path=Path("test/fixtures/github/0.md"))
RULE_ID = "awesome-github"
COMPLETE_BODY = {
    "description": "Awesome lint",
    "topics": ["awesome", "awesome-list"],
    "license": {"key": "mit"},
}


def _evaluate(
    runner: FakeRunner, http: FakeHttp | None = None, *, github_token: str | None = None
) -> list[Message]:
    context = make_context(runner=runner, http=http, github_token=github_token)
    return asyncio.run(GithubRule().evaluate(DOCUMENT, context))


def _texts(messages: list[Message]) -> list[str]:
    return [item.message for item in messages]


def test_missing_git_yields_invalid_repo_message() -> None:
    http = FakeHttp(body=COMPLETE_BODY)
    messages = _evaluate(FakeRunner(error=git_not_found()), http)
    assert messages == [
        Message(
            line=None,
            rule_id=RULE_ID,
            message="Awesome list must reside in a valid git repository",
        )
    ]
    assert http.calls == []


def test_complete_repository_passes() -> None:
    http = FakeHttp(body=COMPLETE_BODY)
    assert _evaluate(github_runner(), http) == []
    url, headers = http.calls[0]
    assert url == "https://api.github.com/repos/sindresorhus/awesome-lint-test"
    assert "Authorization" not in headers


def test_token_is_sent_as_bearer_auth() -> None:
    http = FakeHttp(body=COMPLETE_BODY)
    _evaluate(github_runner(), http, github_token="abcd")
    assert http.calls[0][1]["Authorization"] == "Bearer abcd"


def test_missing_description_and_license() -> None:
    http = FakeHttp(
        body={"description": None, "topics": ["awesome", "awesome-list"], "license": None}
    )
    messages = _evaluate(github_runner(), http)
    assert messages == [
        Message(line=None, rule_id=RULE_ID, message="The repository should have a description"),
        Message(line=None, rule_id=RULE_ID, message="License was not detected by GitHub"),
    ]


def test_missing_topic_awesome_list() -> None:
    http = FakeHttp(body={**COMPLETE_BODY, "topics": ["awesome"]})
    assert _texts(_evaluate(github_runner(), http)) == [
        'The repository should have "awesome-list" as a GitHub topic'
    ]


def test_missing_topic_awesome() -> None:
    http = FakeHttp(body={**COMPLETE_BODY, "topics": ["awesome-list"]})
    assert _texts(_evaluate(github_runner(), http)) == [
        'The repository should have "awesome" as a GitHub topic'
    ]


def test_all_metadata_problems_are_reported_in_order() -> None:
    http = FakeHttp(body={"description": "", "topics": [], "license": None})
    assert _texts(_evaluate(github_runner(), http)) == [
        "The repository should have a description",
        "License was not detected by GitHub",
        'The repository should have "awesome-list" as a GitHub topic',
        'The repository should have "awesome" as a GitHub topic',
    ]


@pytest.mark.parametrize(
    "remote",
    [
        "https://gitlab.com/sindresorhus/awesome-lint-test.git",
        "git@bitbucket.org:sindresorhus/awesome-lint-test.git",
        "not a url",
    ],
)
def test_non_github_remote_makes_no_api_call(remote: str) -> None:
    http = FakeHttp(body=COMPLETE_BODY)
    messages = _evaluate(github_runner(remote), http)
    assert messages == [
        Message(line=None, rule_id=RULE_ID, message="Repository should be on GitHub")
    ]
    assert http.calls == []


def test_https_github_remote_is_accepted() -> None:
    http = FakeHttp(body=COMPLETE_BODY)
    assert _evaluate(github_runner("https://github.com/owner/repo.git"), http) == []
    assert http.calls[0][0].endswith("/repos/owner/repo")


def test_invalid_token() -> None:
    http = FakeHttp(error=http_error(status_code=401))
    assert _texts(_evaluate(github_runner(), http)) == ["Unauthorized access or token is invalid"]


def test_rate_limit_exceeded_with_token() -> None:
    http = FakeHttp(error=http_error(status_code=403, headers={"x-ratelimit-limit": 5000}))
    assert _texts(_evaluate(github_runner(), http, github_token="abcd")) == [
        "API rate limit of 5000 requests per hour exceeded"
    ]


def test_rate_limit_exceeded_without_token() -> None:
    http = FakeHttp(error=http_error(status_code=403, headers={"X-RateLimit-Limit": "60"}))
    assert _texts(_evaluate(github_runner(), http)) == [
        "API rate limit of 60 requests per hour exceeded. "
        "Use a personal token to increase the number of requests"
    ]


def test_api_offline_passes_original_message_through() -> None:
    http = FakeHttp(
        error=http_error(
            code="ENOTFOUND",
            message="getaddrinfo ENOTFOUND api.github.com api.github.com:443",
        )
    )
    assert _texts(_evaluate(github_runner(), http)) == [
        "There was a problem trying to connect to GitHub: "
        "getaddrinfo ENOTFOUND api.github.com api.github.com:443"
    ]


@pytest.mark.parametrize(
    "error",
    [
        http_error(status_code=500),
        http_error(status_code=403),
        http_error(status_code=404),
        http_error(message="no status and no code"),
    ],
)
def test_unclassified_http_errors_propagate(error: HttpError) -> None:
    with pytest.raises(HttpError):
        _evaluate(github_runner(), FakeHttp(error=error))


def test_topics_must_be_a_list_to_count() -> None:
    http = FakeHttp(body={**COMPLETE_BODY, "topics": "awesome-list"})
    assert _texts(_evaluate(github_runner(), http)) == [
        'The repository should have "awesome-list" as a GitHub topic',
        'The repository should have "awesome" as a GitHub topic',
    ]
