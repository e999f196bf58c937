"""Suggest components that pair well with an installed set."""

from typing import Iterable

from .canonical import Canonicalizer
from .schema import CompatibilityRule, RuleStatus, Suggestion


def suggest(
    installed: Iterable[str],
    rules: Iterable[CompatibilityRule],
    canonicalizer: Canonicalizer,
) -> list[Suggestion]:
    """Suggestions for an installed set, in rule-list order.

    A synergy rule with exactly one side installed suggests the other side.
    Any rule touching an installed ID also suggests its ``suggest_when_missing``
    entries. Each target is suggested once (first rule wins) and installed
    IDs are never suggested.
    """
    present = set(canonicalizer.canonicalize_all(installed))
    suggestions: list[Suggestion] = []
    suggested: set[str] = set()

    def add(mcp: str, reason: str, based_on: str) -> None:
        if mcp in present or mcp in suggested:
            return
        suggestions.append(Suggestion(mcp=mcp, reason=reason, based_on=based_on))
        suggested.add(mcp)

    for rule in rules:
        has_a = rule.mcp_a in present
        has_b = rule.mcp_b in present
        if not (has_a or has_b):
            continue

        if rule.status == RuleStatus.SYNERGY:
            if has_a and not has_b:
                add(rule.mcp_b, rule.reason, rule.mcp_a)
            if has_b and not has_a:
                add(rule.mcp_a, rule.reason, rule.mcp_b)

        anchor = rule.mcp_a if has_a else rule.mcp_b
        for target in rule.suggest_when_missing:
            add(canonicalizer.canonicalize(target), f"Pairs well with {anchor}", anchor)

    return suggestions
