"""Rules package."""

from collections.abc import Callable
from dataclasses import dataclass

from awesome_lint.rules.base import LintContext, Message, Rule
from awesome_lint.rules.git_repo_age import GitRepoAgeRule
from awesome_lint.rules.github import GithubRule


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing and selection."""

    rule_id: str
    name: str
    description: str


@dataclass(frozen=True, slots=True)
class _RuleSpec:
    rule_id: str
    factory: Callable[[], Rule]
    name: str
    description: str


def default_rules() -> list[Rule]:
    """Return every known rule in registration order."""
    return build_rules()


def build_rules(
    *,
    enabled_rule_ids: list[str] | None = None,
    disabled_rule_ids: list[str] | None = None,
) -> list[Rule]:
    """Build rule instances applying enable/disable filters.

    Registration order is kept when ``enabled_rule_ids`` is omitted; otherwise
    the enabled ids are built in the order given.
    """
    specs = _ordered_rule_specs()
    registry = {spec.rule_id: spec for spec in specs}
    disabled_set = set(disabled_rule_ids or [])
    requested_ids = set(enabled_rule_ids or []) | disabled_set

    unknown = [rule_id for rule_id in requested_ids if rule_id not in registry]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown rule ids: {joined}")

    if enabled_rule_ids is None:
        selected_ids = [spec.rule_id for spec in specs]
    else:
        selected_ids = _dedupe(enabled_rule_ids)

    return [registry[rule_id].factory() for rule_id in selected_ids if rule_id not in disabled_set]


def list_rule_info() -> list[RuleInfo]:
    """Return metadata for all known rules."""
    return [
        RuleInfo(rule_id=spec.rule_id, name=spec.name, description=spec.description)
        for spec in _ordered_rule_specs()
    ]


def _ordered_rule_specs() -> list[_RuleSpec]:
    return [
        _spec(GitRepoAgeRule),
        _spec(GithubRule),
    ]


def _spec(rule_cls: type[Rule]) -> _RuleSpec:
    return _RuleSpec(
        rule_id=rule_cls.rule_id,
        factory=rule_cls,
        name=rule_cls.__name__,
        description=(rule_cls.__doc__ or "").strip(),
    )


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    output: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        output.append(item)
    return output


__all__ = [
    "LintContext",
    "Message",
    "Rule",
    "RuleInfo",
    "build_rules",
    "default_rules",
    "list_rule_info",
]
