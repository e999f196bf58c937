"""Pairwise rule matching over a set of component identifiers."""

from typing import Sequence

from .rules import RuleIndex
from .schema import MatchedRule, PairClassification, RuleStatus


def generate_pairs(ids: Sequence[str]) -> list[tuple[str, str]]:
    """Every unordered pair (i < j) of the list as given.

    Duplicates are not removed first, so a repeated ID takes part in
    repeated pair checks.
    """
    pairs = []
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            pairs.append((ids[i], ids[j]))
    return pairs


def check_all_pairs(ids: Sequence[str], index: RuleIndex) -> PairClassification:
    """Look up every pair and bucket matched rules by status.

    Pairs without a rule are skipped. Rules with ``compatible`` status match
    but are not placed in any bucket.
    """
    result = PairClassification()
    buckets = {
        RuleStatus.CONFLICT: result.conflicts,
        RuleStatus.REDUNDANT: result.redundancies,
        RuleStatus.SYNERGY: result.synergies,
        RuleStatus.CONDITIONAL: result.conditionals,
    }

    for a, b in generate_pairs(ids):
        rule = index.find_rule(a, b)
        if rule is None:
            continue
        bucket = buckets.get(rule.status)
        if bucket is not None:
            bucket.append(MatchedRule(rule=rule, input_a=a, input_b=b))

    return result
