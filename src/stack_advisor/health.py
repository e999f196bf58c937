"""Health scoring and report generation for a set of components."""

from typing import Iterable, Optional, Sequence

from .config import AdvisorConfig, GradeThresholdsConfig, HealthScoringConfig, get_config
from .matcher import check_all_pairs
from .rules import RuleIndex
from .schema import (
    CompatibilityReport,
    CompatibilityRule,
    CompatibilitySummary,
    HealthGrade,
    MatchedRule,
)
from .suggestions import suggest


def health_score(
    conflicts: Sequence[MatchedRule],
    redundancies: Sequence[MatchedRule],
    synergies: Sequence[MatchedRule],
    config: Optional[HealthScoringConfig] = None,
) -> int:
    """Aggregate matched rules into a 0-100 score.

    Starts at 100, subtracts a severity-based penalty per conflict and
    redundancy, adds a capped synergy bonus and clamps the result.
    """
    config = config or get_config().health_scoring
    score = 100

    for matched in conflicts:
        score -= config.conflict_penalty(matched.rule.severity)

    for matched in redundancies:
        score -= config.redundancy_penalty(matched.rule.severity)

    score += min(len(synergies) * config.synergy_bonus, config.max_synergy_bonus)

    return max(0, min(100, score))


def health_grade(score: int, thresholds: Optional[GradeThresholdsConfig] = None) -> HealthGrade:
    thresholds = thresholds or get_config().grade_thresholds
    if score >= thresholds.grade_a:
        return HealthGrade.A
    if score >= thresholds.grade_b:
        return HealthGrade.B
    if score >= thresholds.grade_c:
        return HealthGrade.C
    return HealthGrade.D


def generate_report(
    ids: Sequence[str],
    index: RuleIndex,
    rules: Optional[Iterable[CompatibilityRule]] = None,
    config: Optional[AdvisorConfig] = None,
) -> CompatibilityReport:
    """Full compatibility report for a list of identifiers.

    Args:
        ids: Component identifiers as supplied by the caller.
        index: Rule index used for pair lookups.
        rules: Rules considered for suggestions. Defaults to the indexed rules.
        config: Scoring configuration. Defaults to the global config.
    """
    config = config or get_config()
    classified = check_all_pairs(ids, index)

    score = health_score(
        classified.conflicts,
        classified.redundancies,
        classified.synergies,
        config.health_scoring,
    )

    summary = CompatibilitySummary(
        total=len(ids),
        conflicts=len(classified.conflicts),
        redundancies=len(classified.redundancies),
        synergies=len(classified.synergies),
        score=score,
        grade=health_grade(score, config.grade_thresholds),
    )

    return CompatibilityReport(
        summary=summary,
        conflicts=classified.conflicts,
        redundancies=classified.redundancies,
        synergies=classified.synergies,
        conditionals=classified.conditionals,
        suggestions=suggest(ids, index.rules if rules is None else rules, index.canonicalizer),
        analyzed_mcps=index.canonicalizer.unique(ids),
    )


def summary_line(report: CompatibilityReport) -> str:
    """One-line status for a report."""
    summary = report.summary
    if summary.conflicts + summary.redundancies == 0:
        return f"✅ All {summary.total} MCPs are compatible (Score: {summary.score}/100)"

    return (
        f"⚠️ Found {summary.conflicts} conflicts, {summary.redundancies} redundancies "
        f"among {summary.total} MCPs (Score: {summary.score}/100, Grade {summary.grade.value})"
    )
