"""Rule evaluation and message aggregation."""

from __future__ import annotations

import asyncio

from awesome_lint.document import Document
from awesome_lint.logging import get_logger
from awesome_lint.rules.base import LintContext, Message, Rule

logger = get_logger("engine")


async def lint_document(
    document: Document,
    rules: list[Rule],
    context: LintContext,
) -> list[Message]:
    """Run rules concurrently and return their messages in rule order.

    Rules convert expected external failures into messages themselves; any
    other exception raised by a rule propagates and aborts the run.
    """
    results = await asyncio.gather(*(_evaluate_rule(rule, document, context) for rule in rules))

    messages: list[Message] = []
    for rule_messages in results:
        messages.extend(rule_messages)
    return messages


def lint(document: Document, rules: list[Rule], context: LintContext) -> list[Message]:
    """Synchronous entrypoint around ``lint_document``."""
    return asyncio.run(lint_document(document, rules, context))


async def _evaluate_rule(rule: Rule, document: Document, context: LintContext) -> list[Message]:
    logger.debug("evaluating %s on %s", rule.rule_id, document.filename)
    messages = list(await rule.evaluate(document, context))
    logger.debug("%s produced %d message(s)", rule.rule_id, len(messages))
    return messages
