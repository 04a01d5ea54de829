"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from awesome_lint import __version__
from awesome_lint.document import Document
from awesome_lint.rules.base import Message


def render_human(messages: list[Message], document: Document) -> str:
    """Render messages grouped under the document path."""
    if not messages:
        return click.style(f"{document.filename}: no issues found", fg="green", bold=True)

    lines: list[str] = [click.style(document.filename, underline=True)]
    width = max(len(_format_line(item.line)) for item in messages)
    for item in messages:
        location = _format_line(item.line).rjust(width)
        lines.append(
            f"  {location}  {click.style('✖', fg='red')}  {item.message}  "
            f"{click.style(item.rule_id, dim=True)}"
        )

    count = len(messages)
    noun = "error" if count == 1 else "errors"
    lines.append("")
    lines.append(click.style(f"{count} {noun}", fg="red", bold=True))
    return "\n".join(lines)


def render_json(
    messages: list[Message],
    document: Document,
    *,
    rule_ids: list[str] | None = None,
) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_json_payload(messages, document, rule_ids=rule_ids), sort_keys=True)


def build_json_payload(
    messages: list[Message],
    document: Document,
    *,
    rule_ids: list[str] | None = None,
) -> dict[str, Any]:
    """Build stable JSON payload for CI and automation."""
    return {
        "messages": [item.to_dict() for item in messages],
        "meta": {
            "filename": document.filename,
            "generated_at": datetime.now(tz=UTC)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "rule_ids": list(rule_ids or []),
            "version": __version__,
        },
    }


def _format_line(line: int | None) -> str:
    return "-" if line is None else str(line)
