"""Directional pairwise compatibility scores between catalog technologies.

The matrix is sparse and not guaranteed to be symmetric: ``a -> b`` may be
stored with a different value than ``b -> a``. Lookups prefer the stored
``a -> b`` entry and only fall back to ``b -> a`` when it is missing. Values
are never symmetrized on load, callers may depend on the directional data.
"""

from typing import Iterable, Iterator, Mapping, Optional


SAME_TECHNOLOGY_SCORE = 100
NEUTRAL_SCORE = 50
INCOMPATIBLE_SCORE = 0

# (upper bound exclusive, verdict), checked in order after the exact-zero case
_VERDICT_BANDS = (
    (50, "Poor"),
    (80, "Acceptable"),
    (95, "Good"),
)


def compatibility_verdict(score: int) -> str:
    """Human-readable verdict for a compatibility score."""
    if score == INCOMPATIBLE_SCORE:
        return "Incompatible"
    for upper, verdict in _VERDICT_BANDS:
        if score < upper:
            return verdict
    return "Excellent"


class CompatibilityMatrix:
    """Sparse directed mapping of (source, target) to a 0-100 score."""

    def __init__(self, matrix: Mapping[str, Mapping[str, int]], version: str = ""):
        self.version = version
        self._matrix: dict[str, dict[str, int]] = {
            source: dict(row) for source, row in matrix.items()
        }

    def stored(self, source: str, target: str) -> Optional[int]:
        """The raw stored value for one direction, or None if undefined."""
        row = self._matrix.get(source)
        if row is None:
            return None
        return row.get(target)

    def score(self, tech_a: str, tech_b: str) -> int:
        """Compatibility between two technologies.

        Same ID scores 100. Otherwise ``a -> b`` is used if stored, then
        ``b -> a``, and an undefined pair resolves to a neutral 50.
        """
        if tech_a == tech_b:
            return SAME_TECHNOLOGY_SCORE

        forward = self.stored(tech_a, tech_b)
        if forward is not None:
            return forward

        reverse = self.stored(tech_b, tech_a)
        if reverse is not None:
            return reverse

        return NEUTRAL_SCORE

    def is_incompatible(self, tech_a: str, tech_b: str) -> bool:
        return self.score(tech_a, tech_b) == INCOMPATIBLE_SCORE

    def find_compatible(
        self,
        tech_id: str,
        candidate_ids: Iterable[str],
        limit: int = 8,
    ) -> list[tuple[str, int]]:
        """Candidates scoring above neutral against ``tech_id``, best first.

        Ties keep the order of ``candidate_ids``.
        """
        scored = [
            (other, self.score(tech_id, other))
            for other in candidate_ids
            if other != tech_id
        ]
        compatible = [(other, score) for other, score in scored if score > NEUTRAL_SCORE]
        compatible.sort(key=lambda item: item[1], reverse=True)
        return compatible[:limit]

    def entries(self) -> Iterator[tuple[str, str, int]]:
        """All stored (source, target, score) triples."""
        for source, row in self._matrix.items():
            for target, score in row.items():
                yield source, target, score

    def referenced_ids(self) -> set[str]:
        ids = set(self._matrix)
        for row in self._matrix.values():
            ids.update(row)
        return ids

    def __len__(self) -> int:
        return sum(len(row) for row in self._matrix.values())
