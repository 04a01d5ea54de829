"""GitHub REST access and repository reference parsing."""

from __future__ import annotations

import asyncio
import json
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field
from http.client import HTTPException
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from awesome_lint.logging import get_logger

logger = get_logger("github")

GITHUB_HOST = "github.com"
DEFAULT_API_URL = "https://api.github.com"
ANONYMOUS_RATE_LIMIT = 60
AUTHENTICATED_RATE_LIMIT = 5000
RATE_LIMIT_HEADER = "x-ratelimit-limit"


class HttpError(RuntimeError):
    """Raised by HTTP clients for failed requests.

    ``status_code`` is set for HTTP-level failures, ``code`` for network-level
    failures (DNS, refused or dropped connection, timeout). Header names are lowercase.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        headers: Mapping[str, Any] | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.headers = {str(key).lower(): value for key, value in (headers or {}).items()}
        self.code = code


@dataclass(slots=True)
class HttpResponse:
    """Decoded JSON response."""

    body: Any
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)


class HttpClient(Protocol):
    """Performs GET requests against a JSON REST API."""

    async def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> HttpResponse:
        """Return the decoded response, raising HttpError on failure."""


class UrllibHttpClient:
    """HTTP client backed by ``urllib.request`` in a worker thread."""

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    async def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return await asyncio.to_thread(self._get_sync, url, dict(headers or {}))

    def _get_sync(self, url: str, headers: dict[str, str]) -> HttpResponse:
        request = Request(url, headers=headers, method="GET")
        logger.debug("GET %s", url)
        try:
            with urlopen(request, timeout=self.timeout) as response:
                raw = response.read().decode("utf-8")
                status = response.status
                response_headers = {key.lower(): value for key, value in response.headers.items()}
        except HTTPError as exc:
            raise HttpError(
                f"Response code {exc.code} ({exc.reason})",
                status_code=exc.code,
                headers=dict(exc.headers.items()) if exc.headers else {},
            ) from exc
        except URLError as exc:
            reason = exc.reason
            raise HttpError(str(reason), code=_network_error_code(reason)) from exc
        except (HTTPException, ConnectionError) as exc:
            raise HttpError(
                str(exc) or type(exc).__name__, code=_network_error_code(exc)
            ) from exc
        except TimeoutError as exc:
            raise HttpError(str(exc) or "request timed out", code="ETIMEDOUT") from exc

        try:
            body = json.loads(raw) if raw else None
        except json.JSONDecodeError as exc:
            raise HttpError(f"Invalid JSON from {url}: {exc}", status_code=status) from exc
        return HttpResponse(body=body, status_code=status, headers=response_headers)


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """Hosting repository resolved from a git remote URL."""

    host: str
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def is_github(self) -> bool:
        return self.host == GITHUB_HOST


@dataclass(frozen=True, slots=True)
class RateLimitInfo:
    """Rate-limit ceiling reported by a failed API response."""

    limit: int

    @property
    def is_anonymous(self) -> bool:
        return self.limit == ANONYMOUS_RATE_LIMIT


def parse_remote_url(url: str) -> RepositoryRef | None:
    """Parse SSH (``git@host:owner/name.git``) and URL-style remotes.

    Returns None when no host or ``owner/name`` path can be extracted.
    """
    value = url.strip()
    if not value:
        return None

    if "://" in value:
        parsed = urlparse(value)
        host = parsed.hostname or ""
        path = parsed.path
    else:
        # scp-like syntax: [user@]host:path
        head, sep, path = value.partition(":")
        if not sep:
            return None
        host = head.rpartition("@")[2]

    parts = [part for part in path.strip("/").split("/") if part]
    if not host or len(parts) < 2:
        return None
    owner = parts[-2]
    name = parts[-1].removesuffix(".git")
    if not owner or not name:
        return None
    return RepositoryRef(host=host.lower(), owner=owner, name=name)


def parse_rate_limit(headers: Mapping[str, Any]) -> RateLimitInfo | None:
    """Return the rate-limit ceiling from response headers, if present."""
    raw = headers.get(RATE_LIMIT_HEADER)
    if raw is None:
        return None
    try:
        return RateLimitInfo(limit=int(str(raw).strip()))
    except ValueError:
        return None


def build_repository_url(api_url: str, repo: RepositoryRef) -> str:
    """Return the REST endpoint for a repository."""
    return f"{api_url.rstrip('/')}/repos/{repo.owner}/{repo.name}"


def build_request_headers(token: str | None) -> dict[str, str]:
    """Return API request headers, with bearer auth when a token is configured."""
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "awesome-lint",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _network_error_code(reason: object) -> str:
    if isinstance(reason, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(reason, ConnectionRefusedError):
        return "ECONNREFUSED"
    if isinstance(reason, ConnectionResetError):
        return "ECONNRESET"
    if isinstance(reason, TimeoutError):
        return "ETIMEDOUT"
    return "ENETWORK"
