"""Edit-distance matching for "did you mean" suggestions."""

from typing import Iterable

MAX_DISTANCE = 3


def levenshtein(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            substitution = previous[j - 1] + (char_a != char_b)
            current.append(min(substitution, previous[j] + 1, current[j - 1] + 1))
        previous = current

    return previous[-1]


def find_similar(value: str, candidates: Iterable[str], limit: int = 3) -> list[str]:
    """Candidates within MAX_DISTANCE edits of ``value``, closest first.

    Comparison is case-insensitive. Equal distances keep candidate order.
    """
    lowered = value.lower()
    scored = [(candidate, levenshtein(lowered, candidate.lower())) for candidate in candidates]
    close = [item for item in scored if item[1] <= MAX_DISTANCE]
    close.sort(key=lambda item: item[1])
    return [candidate for candidate, _ in close[:limit]]
