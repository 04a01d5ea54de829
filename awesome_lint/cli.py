"""CLI entrypoint for awesome-lint."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from awesome_lint import __version__
from awesome_lint.config import (
    AppConfig,
    default_config_template,
    load_app_config,
    resolve_github_token,
)
from awesome_lint.document import Document, find_readme, load_document
from awesome_lint.engine import lint
from awesome_lint.git import SubprocessRunner
from awesome_lint.github import UrllibHttpClient
from awesome_lint.logging import configure_logging, get_logger
from awesome_lint.output import render_human, render_json
from awesome_lint.rules import build_rules, list_rule_info
from awesome_lint.rules.base import LintContext, Rule

logger = get_logger("cli")

app = typer.Typer(
    name="awesome-lint",
    no_args_is_help=True,
    help="Lint awesome lists for repository and GitHub metadata conventions.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
) -> None:
    """Root command callback."""
    _ = version


@app.command("lint")
def lint_command(
    path: Annotated[
        Path | None,
        typer.Argument(help="Awesome list to lint. Defaults to ./readme.md."),
    ] = None,
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    rule: Annotated[list[str] | None, typer.Option("--rule", help="Only run this rule id.")] = None,
    disable_rule: Annotated[
        list[str] | None, typer.Option("--disable-rule", help="Skip this rule id.")
    ] = None,
    github_token: Annotated[
        str | None,
        typer.Option(
            "--github-token",
            help="GitHub API token. Defaults to the github_token/GITHUB_TOKEN env var.",
            show_default=False,
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    log_file: Annotated[Path | None, typer.Option(help="Also write logs to this file.")] = None,
) -> None:
    """Lint an awesome list and report violations."""
    configure_logging(verbose=verbose, log_file=log_file)
    document = _resolve_document_or_raise(path)
    app_config = _load_config_or_raise(document.directory, config_file)
    output_format = (format or app_config.format).lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    rules = _build_configured_rules_or_raise(
        app_config,
        enabled_rule_ids=rule or None,
        disabled_rule_ids=disable_rule or None,
    )
    context = LintContext(
        runner=SubprocessRunner(cwd=document.directory),
        http=UrllibHttpClient(timeout=app_config.github.timeout_seconds),
        github_token=resolve_github_token(github_token),
        min_repo_age_days=app_config.git_repo_age.min_days,
        github_api_url=app_config.github.api_url,
    )
    logger.debug("linting %s with rules %s", document.filename, [r.rule_id for r in rules])
    messages = lint(document, rules, context)

    if output_format == "json":
        typer.echo(render_json(messages, document, rule_ids=[item.rule_id for item in rules]))
    else:
        typer.echo(render_human(messages, document))

    if messages:
        raise typer.Exit(code=1)


@app.command("rules")
def rules_command(
    repo: Annotated[Path, typer.Option(help="Repository path.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List available rules and whether config enables them."""
    output_format = _validate_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    active_ids = {item.rule_id for item in _build_configured_rules_or_raise(app_config)}
    rule_info = list_rule_info()

    if output_format == "json":
        payload = {
            "rules": [
                {
                    "rule_id": item.rule_id,
                    "name": item.name,
                    "description": item.description,
                    "enabled": item.rule_id in active_ids,
                }
                for item in rule_info
            ],
            "meta": {"config_source": app_config.source},
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available rules:"]
    for item in rule_info:
        status = "enabled" if item.rule_id in active_ids else "disabled"
        lines.append(f"- {item.rule_id} [{status}] - {item.description}")
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    repo: Annotated[Path, typer.Option(help="Repository path.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = _validate_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    active_rules = _build_configured_rules_or_raise(app_config)
    payload = app_config.to_dict()
    payload["active_rule_ids"] = [item.rule_id for item in active_rules]
    payload["github_token_set"] = resolve_github_token() is not None

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- rules.enable: {payload['rules']['enable']}",
        f"- rules.disable: {payload['rules']['disable']}",
        f"- git_repo_age.min_days: {payload['git_repo_age']['min_days']}",
        f"- github.api_url: {payload['github']['api_url']}",
        f"- github.timeout_seconds: {payload['github']['timeout_seconds']}",
        f"- github_token_set: {payload['github_token_set']}",
        f"- active_rule_ids: {payload['active_rule_ids']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".awesome-lint.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter repository config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


@app.command("config-validate")
def config_validate_command(
    repo: Annotated[Path, typer.Option(help="Repository path.")] = Path("."),
    config_file: Annotated[
        Path,
        typer.Option("--config", help="Path to config TOML file to validate."),
    ] = Path(".awesome-lint.toml"),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """Validate a config file and report active rules."""
    output_format = _validate_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    active_rules = _build_configured_rules_or_raise(app_config)
    payload = {
        "ok": True,
        "source": app_config.source,
        "active_rule_ids": [item.rule_id for item in active_rules],
    }
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    typer.echo(
        "\n".join(
            [
                "Config is valid.",
                f"- source: {payload['source']}",
                f"- active_rule_ids: {payload['active_rule_ids']}",
            ]
        )
    )


def main() -> None:
    """Console script entrypoint."""
    app()


def _validate_format(value: str) -> str:
    output_format = value.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")
    return output_format


def _resolve_document_or_raise(path: Path | None) -> Document:
    if path is None:
        found = find_readme(Path.cwd())
        if found is None:
            raise typer.BadParameter(
                "Couldn't find a readme.md in the current directory.", param_hint="PATH"
            )
        path = found
    try:
        return load_document(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="PATH") from exc


def _load_config_or_raise(repo: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(repo, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_configured_rules_or_raise(
    app_config: AppConfig,
    *,
    enabled_rule_ids: list[str] | None = None,
    disabled_rule_ids: list[str] | None = None,
) -> list[Rule]:
    disabled = list(app_config.rule_disable) + list(disabled_rule_ids or [])
    try:
        return build_rules(
            enabled_rule_ids=enabled_rule_ids
            if enabled_rule_ids is not None
            else app_config.rule_enable,
            disabled_rule_ids=disabled,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="rules") from exc
