"""Tests for technology scoring, stack selection and the advisor facade."""

import pytest

from stack_advisor.canonical import Canonicalizer
from stack_advisor.config import AdvisorConfig
from stack_advisor.engine import StackAdvisor
from stack_advisor.errors import ErrorCode, InvalidInputError, TechnologyNotFoundError
from stack_advisor.fuzzy import find_similar, levenshtein
from stack_advisor.rules import COMPATIBILITY_RULES, RuleIndex
from stack_advisor.scorer import (
    GRADE_BANDS,
    TechnologyScorer,
    overall_score,
    round_half_up,
    score_to_grade,
)
from tech_catalog.catalog import TechnologyCatalog, load_catalog, load_matrix
from tech_catalog.matrix import CompatibilityMatrix
from tech_catalog.schema import Category, Context, Scores

from conftest import make_tech


def _scores(*values) -> Scores:
    keys = ("perf", "dx", "ecosystem", "maintain", "cost", "compliance")
    return Scores(**dict(zip(keys, values)))


@pytest.fixture
def small_advisor(small_catalog, small_matrix) -> StackAdvisor:
    index = RuleIndex(COMPATIBILITY_RULES, Canonicalizer())
    return StackAdvisor(small_catalog, small_matrix, index, AdvisorConfig())


@pytest.fixture(scope="module")
def advisor() -> StackAdvisor:
    return StackAdvisor.from_defaults(AdvisorConfig())


class TestOverallScore:
    """Tests for the overall score."""

    def test_uniform(self):
        assert overall_score(_scores(80, 80, 80, 80, 80, 80)) == 80

    def test_bounds(self):
        assert overall_score(_scores(0, 0, 0, 0, 0, 0)) == 0
        assert overall_score(_scores(100, 100, 100, 100, 100, 100)) == 100

    def test_rounds_half_up(self):
        # 537 / 6 = 89.5
        assert overall_score(_scores(90, 90, 90, 89, 89, 89)) == 90
        # 542 / 6 = 90.33
        assert overall_score(_scores(90, 90, 90, 90, 91, 91)) == 90
        # 543 / 6 = 90.5
        assert overall_score(_scores(90, 90, 90, 91, 91, 91)) == 91

    def test_round_half_up_helper(self):
        assert round_half_up(97.5) == 98
        assert round_half_up(97.49) == 97
        assert round_half_up(0.5) == 1


class TestScoreToGrade:
    """Tests for the twelve-band grade scale."""

    def test_examples(self):
        assert score_to_grade(96) == "A"
        assert score_to_grade(97) == "A+"
        assert score_to_grade(59) == "F"

    @pytest.mark.parametrize("score,grade", [
        (100, "A+"), (93, "A"), (92, "A-"), (90, "A-"), (89, "B+"), (87, "B+"),
        (86, "B"), (83, "B"), (82, "B-"), (80, "B-"), (79, "C+"), (77, "C+"),
        (76, "C"), (73, "C"), (72, "C-"), (70, "C-"), (69, "D+"), (67, "D+"),
        (66, "D"), (63, "D"), (62, "D-"), (60, "D-"), (0, "F"),
    ])
    def test_band_edges(self, score, grade):
        assert score_to_grade(score) == grade

    def test_twelve_bands_plus_f(self):
        grades = {score_to_grade(s) for s in range(101)}
        assert len(GRADE_BANDS) == 12
        assert len(grades) == 13


class TestSelectBestPerCategory:
    """Tests for greedy per-category selection."""

    def test_tie_broken_by_catalog_order(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {})
        result = scorer.select_best_per_category([Category.DATABASE])

        assert len(result) == 1
        assert result[0].technology_id == "pg"
        assert result[0].score == 90
        assert result[0].grade == "A-"

    def test_context_changes_winner(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {})
        result = scorer.select_best_per_category(["database"], context=Context.MVP)

        assert result[0].technology_id == "mongo"
        assert result[0].score == 99

    def test_weights_apply_to_weighted_score(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {"web": {Category.DATABASE: 1.1}})
        result = scorer.select_best_per_category([Category.DATABASE], project_type="web")

        assert result[0].score == 90
        assert result[0].weighted_score == 99

    def test_incompatible_candidates_skipped(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {})
        result = scorer.select_best_per_category([Category.FRONTEND, Category.META_FRAMEWORK])

        assert [s.technology_id for s in result] == ["react", "next"]

    def test_without_compatibility_enforcement(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {})
        result = scorer.select_best_per_category(
            [Category.FRONTEND, Category.META_FRAMEWORK],
            enforce_compatibility=False,
        )

        assert [s.technology_id for s in result] == ["react", "nuxt"]

    def test_greedy_selection_depends_on_order(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {})
        result = scorer.select_best_per_category([Category.META_FRAMEWORK, Category.FRONTEND])

        # nuxt locks in first, which rules out react
        assert [s.technology_id for s in result] == ["nuxt", "vue"]

    def test_incompatibility_against_any_earlier_selection(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {})
        result = scorer.select_best_per_category([Category.ORM, Category.DATABASE], context=Context.MVP)

        # mongo scores highest in mvp but prisma -> mongo is 0
        assert [s.technology_id for s in result] == ["prisma", "my"]

    def test_empty_category_skipped(self, small_catalog, small_matrix):
        scorer = TechnologyScorer(small_catalog, small_matrix, {})
        result = scorer.select_best_per_category([Category.PAYMENTS, Category.ORM])

        assert [s.category for s in result] == [Category.ORM]

    def test_every_candidate_rejected_skips_category(self):
        catalog = TechnologyCatalog([make_tech("a", "frontend", 90), make_tech("b", "backend", 90)])
        matrix = CompatibilityMatrix({"b": {"a": 0}})
        result = TechnologyScorer(catalog, matrix, {}).select_best_per_category(["frontend", "backend"])

        assert [s.technology_id for s in result] == ["a"]

    def test_bundled_database_pick_is_highest_overall(self):
        catalog = load_catalog()
        scorer = TechnologyScorer(catalog, load_matrix(), {})

        candidates = catalog.by_category(Category.DATABASE)
        best_score = max(overall_score(t.scores_for()) for t in candidates)
        expected = next(t.id for t in candidates if overall_score(t.scores_for()) == best_score)

        for _ in range(3):
            result = scorer.select_best_per_category([Category.DATABASE])
            assert result[0].technology_id == expected


class TestFuzzy:
    """Tests for edit-distance suggestions."""

    def test_levenshtein(self):
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("", "abc") == 3
        assert levenshtein("abc", "abc") == 0

    def test_find_similar_sorted_by_distance(self):
        assert find_similar("nextj", ["remix", "nuxt", "nextjs"]) == ["nextjs", "nuxt"]

    def test_case_insensitive(self):
        assert find_similar("NEXTJS", ["nextjs"]) == ["nextjs"]

    def test_limit_and_max_distance(self):
        assert find_similar("abc", ["abd", "abe", "abf", "abg"]) == ["abd", "abe", "abf"]
        assert find_similar("abc", ["xyzxyz"]) == []


class TestAnalyze:
    """Tests for single technology analysis."""

    def test_strengths_and_weaknesses(self):
        catalog = TechnologyCatalog([
            make_tech("x", "backend", [95, 90, 70, 85, 75, 80]),
            make_tech("y", "backend", 80),
        ])
        matrix = CompatibilityMatrix({"x": {"y": 88}})
        advisor = StackAdvisor(catalog, matrix, RuleIndex([], Canonicalizer()), AdvisorConfig())

        result = advisor.analyze("x")

        assert result.overall_score == 83
        assert result.grade == "B"
        assert [d.dimension for d in result.strengths] == ["perf", "dx"]
        assert [d.dimension for d in result.weaknesses] == ["ecosystem", "cost"]
        assert [(c.id, c.score, c.verdict) for c in result.compatible] == [("y", 88, "Good")]
        assert len(result.dimensions) == 6

    def test_context_string_accepted(self, small_advisor):
        assert small_advisor.analyze("pg", "mvp").overall_score == 70

    def test_unknown_technology(self, small_advisor):
        with pytest.raises(TechnologyNotFoundError, match="Unknown technology") as exc_info:
            small_advisor.analyze("reakt")

        assert exc_info.value.code == ErrorCode.TECH_NOT_FOUND
        assert exc_info.value.similar[0] == "react"
        assert exc_info.value.suggestions[0].startswith("Did you mean: react")

    def test_unknown_context(self, small_advisor):
        with pytest.raises(InvalidInputError, match="Unknown context"):
            small_advisor.analyze("pg", "galaxy")


class TestCompare:
    """Tests for side-by-side comparison."""

    @pytest.fixture
    def compare_advisor(self) -> StackAdvisor:
        catalog = TechnologyCatalog([
            make_tech("alpha", "backend", [90, 80, 70, 80, 80, 80]),
            make_tech("beta", "backend", [80, 85, 70, 80, 80, 80]),
            make_tech("gamma", "backend", 95),
        ])
        matrix = CompatibilityMatrix({"alpha": {"beta": 0}})
        return StackAdvisor(catalog, matrix, RuleIndex([], Canonicalizer()), AdvisorConfig())

    def test_close_call(self, compare_advisor):
        result = compare_advisor.compare(["alpha", "beta"])

        assert [t.id for t in result.ranking] == ["alpha", "beta"]
        assert [t.overall_score for t in result.ranking] == [80, 79]
        assert result.leader is None
        assert result.verdict == "Close call between Alpha and Beta"

    def test_dimension_winners(self, compare_advisor):
        winners = {w.dimension: w for w in compare_advisor.compare(["alpha", "beta"]).dimension_winners}

        assert (winners["perf"].winner, winners["perf"].notes) == ("alpha", "Clear winner")
        assert (winners["dx"].winner, winners["dx"].notes) == ("beta", "Close competition")
        assert winners["dx"].margin == 5
        assert (winners["ecosystem"].winner, winners["ecosystem"].notes) == (None, "Tie")

    def test_clear_leader(self, compare_advisor):
        result = compare_advisor.compare(["alpha", "gamma"])

        assert result.leader == "gamma"
        assert result.verdict == "Gamma leads with 95/100"
        assert result.recommendation == "Consider Gamma for Performance and Developer Experience priorities."

    def test_pairwise_compatibility(self, compare_advisor):
        result = compare_advisor.compare(["alpha", "beta", "gamma"])

        pairs = [(p.tech_a, p.tech_b, p.score, p.verdict) for p in result.compatibility]
        assert pairs == [
            ("alpha", "beta", 0, "Incompatible"),
            ("alpha", "gamma", 50, "Acceptable"),
            ("beta", "gamma", 50, "Acceptable"),
        ]

    def test_input_validation(self, compare_advisor):
        with pytest.raises(InvalidInputError, match="Expected 2-4"):
            compare_advisor.compare(["alpha"])

        with pytest.raises(InvalidInputError, match="Expected 2-4"):
            compare_advisor.compare(["alpha", "beta", "gamma", "alpha", "beta"])

        with pytest.raises(InvalidInputError, match="Duplicate"):
            compare_advisor.compare(["alpha", "alpha"])

        with pytest.raises(TechnologyNotFoundError):
            compare_advisor.compare(["alpha", "omega-unknown"])

    def test_blank_ids_rejected(self, compare_advisor):
        with pytest.raises(InvalidInputError, match="non-empty"):
            compare_advisor.compare(["alpha", " "])


class TestRecommend:
    """Tests for stack recommendation over the bundled catalog."""

    def test_saas_startup(self, advisor):
        result = advisor.recommend("saas", "startup")

        assert result.context == Context.MVP
        assert [s.category for s in result.selections] == [
            Category.META_FRAMEWORK,
            Category.DATABASE,
            Category.ORM,
            Category.AUTH,
            Category.HOSTING,
            Category.PAYMENTS,
        ]

    def test_selected_stack_has_no_hard_incompatibility(self, advisor):
        for project_type in advisor.config.recommendation.project_types:
            ids = [s.technology_id for s in advisor.recommend(project_type, "growth").selections]
            for i, a in enumerate(ids):
                for b in ids[i + 1:]:
                    assert not advisor.matrix.is_incompatible(b, a), f"{project_type}: {a} vs {b}"

    def test_scale_maps_to_context(self, advisor):
        assert advisor.recommend("cli", "enterprise").context == Context.ENTERPRISE
        assert advisor.recommend("cli", "mvp").context == Context.MVP
        assert [s.category for s in advisor.recommend("cli", "growth").selections] == [Category.BACKEND]

    def test_unknown_project_type(self, advisor):
        with pytest.raises(InvalidInputError, match="Unknown project type"):
            advisor.recommend("spaceship", "startup")

    def test_default_scale_is_mvp(self, advisor):
        result = advisor.recommend("saas")

        assert result.scale == "mvp"
        assert result.context == Context.MVP

    def test_unknown_scale(self, advisor):
        with pytest.raises(InvalidInputError, match="Unknown scale"):
            advisor.recommend("api", "galactic")


class TestAdvisorCompatibility:
    """Tests for compatibility checks through the advisor."""

    def test_check_compatibility(self, advisor):
        report = advisor.check_compatibility(["supabase-mcp", "neon-mcp"])
        assert (report.summary.score, report.summary.grade.value) == (60, "C")

    def test_input_size_limits(self, advisor):
        with pytest.raises(InvalidInputError):
            advisor.check_compatibility([])

        with pytest.raises(InvalidInputError, match="got 21"):
            advisor.check_compatibility([f"mcp-{i}" for i in range(21)])

    def test_blank_ids_rejected(self, advisor):
        with pytest.raises(InvalidInputError, match=r"blank at position\(s\) 0, 1"):
            advisor.check_compatibility(["", "   "])

        with pytest.raises(InvalidInputError, match=r"blank at position\(s\) 1"):
            advisor.check_compatibility(["supabase", "\t"])

    def test_filter_recommendations(self, advisor):
        result = advisor.filter_recommendations(
            installed=["supabase", "github"],
            recommended=["neon", "drizzle", "planetscale-mcp", "vercel", "gitlab"],
        )

        assert result.recommended == ["drizzle", "vercel"]
        assert [(e.mcp, e.conflicts_with) for e in result.excluded] == [
            ("neon", "supabase"),
            ("planetscale-mcp", "supabase"),
            ("gitlab", "github"),
        ]
        assert [c.rule_id for c in result.conflicts] == ["db-001", "db-002", "vcs-001"]

    def test_redundancy_does_not_exclude(self, advisor):
        result = advisor.filter_recommendations(installed=["prisma"], recommended=["drizzle"])

        assert result.recommended == ["drizzle"]
        assert result.excluded == []

    def test_data_version(self, advisor):
        version = advisor.data_version()
        assert version.scores == "2025.12.30"
        assert version.compatibility == "2025.12.30"
