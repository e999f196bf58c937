"""Shared fixtures for the stack advisor tests."""

import pytest

from stack_advisor.config import reset_config
from tech_catalog.catalog import TechnologyCatalog
from tech_catalog.matrix import CompatibilityMatrix
from tech_catalog.schema import Technology


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Start every test from default configuration."""
    monkeypatch.delenv("STACK_ADVISOR_CONFIG", raising=False)
    reset_config()
    yield
    reset_config()


def make_tech(tech_id: str, category: str, default, **contexts) -> Technology:
    """Build a technology; score sets are six-value lists or a single int for all six."""

    def score_set(values):
        if isinstance(values, int):
            values = [values] * 6
        keys = ("perf", "dx", "ecosystem", "maintain", "cost", "compliance")
        return dict(zip(keys, values))

    scores = {"default": score_set(default)}
    for context, values in contexts.items():
        scores[context] = score_set(values)

    return Technology(
        id=tech_id,
        name=tech_id.title(),
        category=category,
        url=f"https://{tech_id}.dev",
        scores=scores,
    )


@pytest.fixture
def small_catalog() -> TechnologyCatalog:
    return TechnologyCatalog(
        [
            make_tech("react", "frontend", 95),
            make_tech("vue", "frontend", 80),
            make_tech("next", "meta-framework", 90),
            make_tech("nuxt", "meta-framework", 92),
            make_tech("pg", "database", 90, mvp=70),
            make_tech("my", "database", 90),
            make_tech("mongo", "database", 85, mvp=99),
            make_tech("prisma", "orm", 88),
        ],
        version="test",
    )


@pytest.fixture
def small_matrix() -> CompatibilityMatrix:
    return CompatibilityMatrix(
        {
            "nuxt": {"react": 0},
            "prisma": {"pg": 95, "my": 90, "mongo": 0},
            "pg": {"prisma": 90},
            "next": {"react": 98, "pg": 85},
        },
        version="test",
    )
