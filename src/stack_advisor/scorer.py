"""Technology scoring and per-category stack selection.

Overall scores are the rounded mean of the six dimensions and map to a
twelve-band letter grade. Selection is greedy: categories are filled in the
caller's order and each winner is committed before the next category, so an
early choice can rule out a better combination later on.
"""

import logging
import math
from typing import Mapping, Optional, Sequence, Union

from tech_catalog.catalog import TechnologyCatalog
from tech_catalog.matrix import CompatibilityMatrix
from tech_catalog.schema import Category, Context, Scores

from .config import get_config
from .schema import CategorySelection

logger = logging.getLogger(__name__)

# (minimum score, grade), highest first; anything lower is F
GRADE_BANDS = (
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (63, "D"),
    (60, "D-"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def overall_score(scores: Scores) -> int:
    """Mean of the six dimensions, rounded half up."""
    values = scores.values()
    # Integer form of floor(mean + 0.5), exact for any sum
    return (2 * sum(values) + len(values)) // (2 * len(values))


def score_to_grade(score: int) -> str:
    for minimum, grade in GRADE_BANDS:
        if score >= minimum:
            return grade
    return "F"


class TechnologyScorer:
    """Scores catalog technologies and picks the best one per category."""

    def __init__(
        self,
        catalog: TechnologyCatalog,
        matrix: CompatibilityMatrix,
        category_weights: Optional[Mapping[str, Mapping[Category, float]]] = None,
    ):
        self.catalog = catalog
        self.matrix = matrix
        if category_weights is None:
            category_weights = get_config().recommendation.category_weights
        self.category_weights = category_weights

    def weight_for(self, project_type: Optional[str], category: Category) -> float:
        if project_type is None:
            return 1.0
        return self.category_weights.get(project_type, {}).get(category, 1.0)

    def select_best_per_category(
        self,
        categories: Sequence[Union[Category, str]],
        context: Context = Context.DEFAULT,
        project_type: Optional[str] = None,
        enforce_compatibility: bool = True,
    ) -> list[CategorySelection]:
        """Pick the highest weighted technology for each category in order.

        Args:
            categories: Categories to fill, processed in this order.
            context: Score set to use.
            project_type: Key into the category weights; None means weight 1.0.
            enforce_compatibility: Skip candidates with a compatibility score
                of 0 against any technology already selected in this run.

        Returns:
            One selection per category that had an eligible candidate.
        """
        selections: list[CategorySelection] = []
        selected_ids: list[str] = []

        for category in categories:
            category = Category(category)
            weight = self.weight_for(project_type, category)
            best: Optional[CategorySelection] = None

            for tech in self.catalog.by_category(category):
                if enforce_compatibility and any(
                    self.matrix.is_incompatible(tech.id, chosen) for chosen in selected_ids
                ):
                    logger.debug("Skipping %s: incompatible with %s", tech.id, selected_ids)
                    continue

                score = overall_score(tech.scores_for(context))
                weighted = round_half_up(score * weight)

                # Strictly greater, so the first entry in catalog order wins ties
                if best is None or weighted > best.weighted_score:
                    best = CategorySelection(
                        category=category,
                        technology_id=tech.id,
                        technology=tech.name,
                        score=score,
                        weighted_score=weighted,
                        grade=score_to_grade(score),
                    )

            if best is None:
                continue

            selections.append(best)
            selected_ids.append(best.technology_id)

        return selections
