"""Configuration loading for awesome-lint."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from awesome_lint.github import DEFAULT_API_URL
from awesome_lint.rules.base import DEFAULT_MIN_REPO_AGE_DAYS

CONFIG_FILENAMES = (".awesome-lint.toml", "awesome-lint.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("awesome_lint", "awesome-lint")
TOKEN_ENV_KEYS = ("github_token", "GITHUB_TOKEN")


@dataclass(slots=True)
class GitRepoAgeConfig:
    """Repository age rule settings."""

    min_days: int = DEFAULT_MIN_REPO_AGE_DAYS

    def to_dict(self) -> dict[str, Any]:
        return {"min_days": self.min_days}


@dataclass(slots=True)
class GithubConfig:
    """GitHub API settings. The token is never read from config files."""

    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = 10.0

    def to_dict(self) -> dict[str, Any]:
        return {"api_url": self.api_url, "timeout_seconds": self.timeout_seconds}


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    format: str = "human"
    rule_enable: list[str] | None = None
    rule_disable: list[str] = field(default_factory=list)
    git_repo_age: GitRepoAgeConfig = field(default_factory=GitRepoAgeConfig)
    github: GithubConfig = field(default_factory=GithubConfig)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "rules": {
                "enable": list(self.rule_enable) if self.rule_enable is not None else None,
                "disable": list(self.rule_disable),
            },
            "git_repo_age": self.git_repo_age.to_dict(),
            "github": self.github.to_dict(),
            "source": self.source,
        }


def load_app_config(repo: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or repository-local files with precedence."""
    repo = repo.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (repo / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = repo / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = repo / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def resolve_github_token(
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Return the GitHub token from an explicit value or the environment."""
    if explicit:
        return explicit
    env = os.environ if environ is None else environ
    for key in TOKEN_ENV_KEYS:
        value = env.get(key, "").strip()
        if value:
            return value
    return None


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'format = "human"',
            "",
            "[rules]",
            "enable = [",
            '  "awesome-git-repo-age",',
            '  "awesome-github",',
            "]",
            "disable = []",
            "",
            "[git_repo_age]",
            f"min_days = {DEFAULT_MIN_REPO_AGE_DAYS}",
            "",
            "[github]",
            f'api_url = "{DEFAULT_API_URL}"',
            "timeout_seconds = 10",
            "# The API token is read from the github_token or GITHUB_TOKEN environment variable.",
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    tool_section = _find_pyproject_tool_section(loaded)
    if source_path.name == PYPROJECT_FILENAME:
        return tool_section if tool_section is not None else {}
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    rules_mapping = _as_table(mapping.get("rules"), "rules")
    age_mapping = _as_table(mapping.get("git_repo_age"), "git_repo_age")
    github_mapping = _as_table(mapping.get("github"), "github")

    if "token" in github_mapping:
        raise ValueError(
            "github.token is not supported; set the github_token environment variable instead"
        )

    return AppConfig(
        format=_as_choice(mapping.get("format", "human"), {"human", "json"}, "format"),
        rule_enable=_as_str_list_or_none(rules_mapping.get("enable")),
        rule_disable=_as_str_list(rules_mapping.get("disable")),
        git_repo_age=GitRepoAgeConfig(
            min_days=_as_positive_int(
                age_mapping.get("min_days", DEFAULT_MIN_REPO_AGE_DAYS),
                "git_repo_age.min_days",
            ),
        ),
        github=GithubConfig(
            api_url=_as_str(github_mapping.get("api_url", DEFAULT_API_URL), "github.api_url"),
            timeout_seconds=_as_positive_float(
                github_mapping.get("timeout_seconds", 10.0), "github.timeout_seconds"
            ),
        ),
        source=source,
    )


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("Expected a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("Expected a list of strings")
        items.append(item)
    return items


def _as_str_list_or_none(value: Any) -> list[str] | None:
    if value is None:
        return None
    return _as_str_list(value)


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


def _as_choice(raw: Any, allowed: set[str], field_name: str) -> str:
    value = str(raw).lower()
    if value not in allowed:
        choices = ", ".join(sorted(allowed))
        raise ValueError(f"{field_name} must be one of: {choices}")
    return value


def _as_positive_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    if raw <= 0:
        raise ValueError(f"{field_name} must be > 0")
    return raw


def _as_positive_float(raw: Any, field_name: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    if raw <= 0:
        raise ValueError(f"{field_name} must be > 0")
    return float(raw)
