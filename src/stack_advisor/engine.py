"""Stack Advisor - composition root and caller-facing validation layer.

Loads the catalog, matrix and rule table once, builds the rule index and
hands them to the scoring and compatibility engines. Unknown IDs and bad
input sizes are rejected here, before the core algorithms run.
"""

import logging
from typing import Iterable, Mapping, Optional, Sequence, Union

from tech_catalog.catalog import TechnologyCatalog, data_version, load_catalog, load_matrix
from tech_catalog.matrix import CompatibilityMatrix, compatibility_verdict
from tech_catalog.schema import DIMENSION_LABELS, SCORE_DIMENSIONS, Context, DataVersion, Technology

from .canonical import Canonicalizer
from .config import AdvisorConfig, get_config
from .errors import InvalidInputError, TechnologyNotFoundError
from .health import generate_report
from .rules import COMPATIBILITY_RULES, RuleIndex
from .schema import (
    CompatibilityReport,
    CompatibilityRule,
    CompatibleTechnology,
    ComparisonResult,
    DimensionScore,
    DimensionWinner,
    ExcludedRecommendation,
    FilteredRecommendations,
    PairCompatibility,
    RankedTechnology,
    RecommendationConflict,
    RuleStatus,
    StackRecommendation,
    TechnologyAnalysis,
)
from .scorer import TechnologyScorer, overall_score, score_to_grade

logger = logging.getLogger(__name__)


class StackAdvisor:
    """Technology scoring and component compatibility behind one facade.

    Usage:
        advisor = StackAdvisor.from_defaults()
        report = advisor.check_compatibility(["supabase", "neon"])
        stack = advisor.recommend("saas", "startup")
    """

    def __init__(
        self,
        catalog: TechnologyCatalog,
        matrix: CompatibilityMatrix,
        index: RuleIndex,
        config: Optional[AdvisorConfig] = None,
    ):
        self.catalog = catalog
        self.matrix = matrix
        self.index = index
        self.config = config or get_config()
        self.scorer = TechnologyScorer(
            catalog, matrix, self.config.recommendation.category_weights
        )

    @classmethod
    def from_defaults(
        cls,
        config: Optional[AdvisorConfig] = None,
        aliases: Optional[Mapping[str, str]] = None,
        rules: Optional[Iterable[CompatibilityRule]] = None,
    ) -> "StackAdvisor":
        """Build an advisor over the bundled data files and rule table."""
        catalog = load_catalog()
        matrix = load_matrix()
        canonicalizer = Canonicalizer(aliases)
        index = RuleIndex(COMPATIBILITY_RULES if rules is None else rules, canonicalizer)
        return cls(catalog, matrix, index, config)

    @property
    def canonicalizer(self) -> Canonicalizer:
        return self.index.canonicalizer

    def data_version(self) -> DataVersion:
        return data_version(self.catalog, self.matrix)

    # =========================================================================
    # Compatibility
    # =========================================================================

    def check_compatibility(self, ids: Sequence[str]) -> CompatibilityReport:
        """Compatibility report for 1-20 non-blank component identifiers."""
        limits = self.config.input_limits
        self._check_count(ids, limits.min_compatibility_ids, limits.max_compatibility_ids, "components")
        self._check_not_blank(ids)
        return generate_report(ids, self.index, config=self.config)

    def filter_recommendations(
        self,
        installed: Sequence[str],
        recommended: Sequence[str],
    ) -> FilteredRecommendations:
        """Drop recommendations that conflict with an installed component.

        Each recommendation is excluded on its first conflicting installed
        component; only ``conflict`` rules exclude.
        """
        result = FilteredRecommendations()

        for rec in recommended:
            canonical_rec = self.canonicalizer.canonicalize(rec)
            conflict = None

            for installed_id in installed:
                rule = self.index.find_rule(canonical_rec, installed_id)
                if rule is not None and rule.status == RuleStatus.CONFLICT:
                    conflict = (installed_id, rule)
                    break

            if conflict is None:
                result.recommended.append(rec)
                continue

            installed_id, rule = conflict
            result.excluded.append(
                ExcludedRecommendation(mcp=rec, reason=rule.reason, conflicts_with=installed_id)
            )
            result.conflicts.append(
                RecommendationConflict(
                    recommended=rec,
                    conflicts_with=installed_id,
                    reason=rule.reason,
                    rule_id=rule.id,
                )
            )
            logger.debug("Excluded %s: conflicts with installed %s", rec, installed_id)

        logger.info(
            "Recommended %s components (%s excluded due to conflicts)",
            len(result.recommended), len(result.excluded),
        )
        return result

    # =========================================================================
    # Technology scoring
    # =========================================================================

    def analyze(
        self,
        tech_id: str,
        context: Union[Context, str] = Context.DEFAULT,
    ) -> TechnologyAnalysis:
        """Per-dimension scores, strengths, weaknesses and compatible technologies."""
        context = self._context(context)
        tech = self._require(tech_id)
        settings = self.config.comparison

        scores = tech.scores_for(context)
        overall = overall_score(scores)
        dimensions = [
            DimensionScore(
                dimension=dim,
                label=DIMENSION_LABELS[dim],
                score=getattr(scores, dim),
                grade=score_to_grade(getattr(scores, dim)),
            )
            for dim in SCORE_DIMENSIONS
        ]

        ranked = sorted(dimensions, key=lambda d: d.score, reverse=True)
        strengths = [d for d in ranked if d.score >= settings.strength_threshold]
        weaknesses = [d for d in reversed(ranked) if d.score < settings.weakness_threshold]

        compatible = [
            CompatibleTechnology(
                id=other_id,
                name=self.catalog.get(other_id).name,
                score=score,
                verdict=compatibility_verdict(score),
            )
            for other_id, score in self.matrix.find_compatible(
                tech.id, self.catalog.all_ids(), limit=settings.compatible_limit
            )
        ]

        return TechnologyAnalysis(
            id=tech.id,
            name=tech.name,
            category=tech.category,
            url=tech.url,
            context=context,
            overall_score=overall,
            grade=score_to_grade(overall),
            dimensions=dimensions,
            strengths=strengths[:settings.max_strengths],
            weaknesses=weaknesses[:settings.max_weaknesses],
            compatible=compatible,
        )

    def compare(
        self,
        tech_ids: Sequence[str],
        context: Union[Context, str] = Context.DEFAULT,
    ) -> ComparisonResult:
        """Side-by-side comparison of 2-4 distinct, non-blank technology IDs."""
        context = self._context(context)
        limits = self.config.input_limits
        settings = self.config.comparison

        self._check_count(tech_ids, limits.min_comparison_ids, limits.max_comparison_ids, "technologies")
        self._check_not_blank(tech_ids)
        techs = [self._require(tech_id) for tech_id in tech_ids]
        if len(set(tech_ids)) != len(tech_ids):
            raise InvalidInputError("Duplicate technologies in comparison list")

        scores = {tech.id: tech.scores_for(context) for tech in techs}
        ranking = sorted(
            (
                RankedTechnology(
                    id=tech.id,
                    name=tech.name,
                    category=tech.category,
                    overall_score=overall_score(scores[tech.id]),
                    grade=score_to_grade(overall_score(scores[tech.id])),
                )
                for tech in techs
            ),
            key=lambda r: r.overall_score,
            reverse=True,
        )

        winners = []
        for dim in SCORE_DIMENSIONS:
            ordered = sorted(techs, key=lambda t: getattr(scores[t.id], dim), reverse=True)
            margin = getattr(scores[ordered[0].id], dim) - getattr(scores[ordered[1].id], dim)
            if margin < settings.tie_margin:
                winner, notes = None, "Tie"
            elif margin < settings.close_margin:
                winner, notes = ordered[0].id, "Close competition"
            else:
                winner, notes = ordered[0].id, "Clear winner"
            winners.append(DimensionWinner(
                dimension=dim,
                label=DIMENSION_LABELS[dim],
                winner=winner,
                margin=margin,
                notes=notes,
            ))

        pairs = []
        for i in range(len(techs)):
            for j in range(i + 1, len(techs)):
                score = self.matrix.score(techs[i].id, techs[j].id)
                pairs.append(PairCompatibility(
                    tech_a=techs[i].id,
                    tech_b=techs[j].id,
                    score=score,
                    verdict=compatibility_verdict(score),
                ))

        leader, runner_up = ranking[0], ranking[1]
        if leader.overall_score - runner_up.overall_score < settings.tie_margin:
            return ComparisonResult(
                context=context,
                ranking=ranking,
                dimension_winners=winners,
                compatibility=pairs,
                leader=None,
                verdict=f"Close call between {leader.name} and {runner_up.name}",
                recommendation="Both are strong choices; consider your specific priorities.",
            )

        won = [w.label for w in winners if w.winner == leader.id][:2]
        if won:
            recommendation = f"Consider {leader.name} for {' and '.join(won)} priorities."
        else:
            recommendation = f"{leader.name} has the best overall balance across dimensions."

        return ComparisonResult(
            context=context,
            ranking=ranking,
            dimension_winners=winners,
            compatibility=pairs,
            leader=leader.id,
            verdict=f"{leader.name} leads with {leader.overall_score}/100",
            recommendation=recommendation,
        )

    def recommend(self, project_type: str, scale: str = "mvp") -> StackRecommendation:
        """Best compatible technology per category for a project type and scale."""
        settings = self.config.recommendation
        if project_type not in settings.project_types:
            raise InvalidInputError(
                f'Unknown project type: "{project_type}"',
                [f"Valid project types: {', '.join(settings.project_types)}"],
            )
        if scale not in settings.scale_contexts:
            raise InvalidInputError(
                f'Unknown scale: "{scale}"',
                [f"Valid scales: {', '.join(settings.scale_contexts)}"],
            )

        context = settings.context_for_scale(scale)
        selections = self.scorer.select_best_per_category(
            settings.categories_for(project_type),
            context=context,
            project_type=project_type,
            enforce_compatibility=settings.enforce_compatibility,
        )
        logger.debug("Selected %s technologies for %s/%s", len(selections), project_type, scale)

        return StackRecommendation(
            project_type=project_type,
            scale=scale,
            context=context,
            selections=selections,
        )

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def _require(self, tech_id: str) -> Technology:
        tech = self.catalog.get(tech_id)
        if tech is None:
            raise TechnologyNotFoundError(tech_id, self.catalog.all_ids())
        return tech

    @staticmethod
    def _context(context: Union[Context, str]) -> Context:
        try:
            return Context(context)
        except ValueError:
            raise InvalidInputError(
                f'Unknown context: "{context}"',
                [f"Valid contexts: {', '.join(c.value for c in Context)}"],
            ) from None

    @staticmethod
    def _check_count(ids: Sequence[str], minimum: int, maximum: int, noun: str) -> None:
        if not minimum <= len(ids) <= maximum:
            raise InvalidInputError(
                f"Expected {minimum}-{maximum} {noun}, got {len(ids)}"
            )

    @staticmethod
    def _check_not_blank(ids: Sequence[str]) -> None:
        blank = [position for position, value in enumerate(ids) if not value.strip()]
        if blank:
            raise InvalidInputError(
                f"Identifiers must be non-empty; blank at position(s) {', '.join(map(str, blank))}"
            )
