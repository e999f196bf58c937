"""Tests for the technology catalog and compatibility matrix."""

import json

import pytest
from pydantic import ValidationError

from tech_catalog.catalog import (
    DATA_VERSION,
    CatalogLoadError,
    CatalogValidator,
    TechnologyCatalog,
    load_catalog,
    load_matrix,
)
from tech_catalog.matrix import CompatibilityMatrix, compatibility_verdict
from tech_catalog.schema import Category, Context, Scores, Technology

from conftest import make_tech


def _write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestSchema:
    """Tests for catalog data models."""

    def test_scores_reject_out_of_range(self):
        with pytest.raises(ValidationError):
            Scores(perf=101, dx=90, ecosystem=90, maintain=90, cost=90, compliance=90)

        with pytest.raises(ValidationError):
            Scores(perf=-1, dx=90, ecosystem=90, maintain=90, cost=90, compliance=90)

    def test_default_scores_required(self):
        with pytest.raises(ValidationError, match="default"):
            Technology(
                id="x",
                name="X",
                category="frontend",
                url="https://x.dev",
                scores={"mvp": {"perf": 1, "dx": 1, "ecosystem": 1, "maintain": 1, "cost": 1, "compliance": 1}},
            )

    def test_missing_context_falls_back_to_default(self):
        tech = make_tech("pg", "database", 90, mvp=70)

        assert tech.scores_for(Context.MVP).perf == 70
        assert tech.scores_for(Context.ENTERPRISE).perf == 90
        assert tech.scores_for().perf == 90

    def test_scores_values_in_dimension_order(self):
        scores = Scores(perf=1, dx=2, ecosystem=3, maintain=4, cost=5, compliance=6)
        assert scores.values() == [1, 2, 3, 4, 5, 6]


class TestTechnologyCatalog:
    """Tests for catalog queries."""

    def test_get_and_exists(self, small_catalog):
        assert small_catalog.get("react").name == "React"
        assert small_catalog.get("unknown") is None
        assert small_catalog.exists("pg")
        assert not small_catalog.exists("unknown")
        assert "vue" in small_catalog

    def test_by_category_keeps_catalog_order(self, small_catalog):
        ids = [tech.id for tech in small_catalog.by_category(Category.DATABASE)]
        assert ids == ["pg", "my", "mongo"]

    def test_by_category_accepts_string(self, small_catalog):
        assert [t.id for t in small_catalog.by_category("orm")] == ["prisma"]

    def test_grouped_by_category_includes_every_category(self, small_catalog):
        grouped = small_catalog.grouped_by_category()

        assert list(grouped) == list(Category)
        assert grouped[Category.PAYMENTS] == []
        assert len(grouped[Category.FRONTEND]) == 2

    def test_scores_for_unknown_is_none(self, small_catalog):
        assert small_catalog.scores_for("unknown") is None
        assert small_catalog.scores_for("pg", Context.MVP).perf == 70

    def test_duplicate_ids_keep_first_entry(self):
        catalog = TechnologyCatalog([
            make_tech("a", "orm", 80),
            make_tech("a", "orm", 60),
        ])

        assert len(catalog) == 1
        assert catalog.get("a").scores_for().perf == 80


class TestLoading:
    """Tests for loading catalog and matrix files."""

    def test_load_bundled_catalog(self):
        catalog = load_catalog()

        assert len(catalog) >= 30
        assert catalog.version == DATA_VERSION
        for category in Category:
            assert catalog.by_category(category), f"No technologies in {category.value}"

    def test_load_bundled_matrix(self):
        matrix = load_matrix()

        assert matrix.version == DATA_VERSION
        assert len(matrix) > 0

    def test_out_of_range_score_rejected_at_load(self, tmp_path):
        path = _write_json(tmp_path / "scores.json", {
            "$version": "1",
            "technologies": {
                "bad": {
                    "id": "bad",
                    "name": "Bad",
                    "category": "database",
                    "url": "https://bad.dev",
                    "scores": {"default": {
                        "perf": 150, "dx": 90, "ecosystem": 90,
                        "maintain": 90, "cost": 90, "compliance": 90,
                    }},
                },
            },
        })

        with pytest.raises(CatalogLoadError, match="Invalid technology catalog"):
            load_catalog(path)

    def test_key_must_match_id(self, tmp_path):
        tech = make_tech("real", "orm", 80).model_dump(mode="json")
        path = _write_json(tmp_path / "scores.json", {"$version": "1", "technologies": {"other": tech}})

        with pytest.raises(CatalogLoadError):
            load_catalog(path)

    def test_matrix_out_of_range_rejected(self, tmp_path):
        path = _write_json(tmp_path / "matrix.json", {"$version": "1", "matrix": {"a": {"b": 101}}})

        with pytest.raises(CatalogLoadError, match="Invalid compatibility matrix"):
            load_matrix(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError, match="Cannot read"):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogLoadError, match="Invalid JSON"):
            load_matrix(path)


class TestCompatibilityMatrix:
    """Tests for directional compatibility lookups."""

    def test_same_id_is_100(self, small_matrix):
        assert small_matrix.score("react", "react") == 100
        assert small_matrix.score("unknown", "unknown") == 100

    def test_unknown_pair_is_neutral(self, small_matrix):
        assert small_matrix.score("vue", "mongo") == 50
        assert small_matrix.score("nope", "also-nope") == 50

    def test_reverse_lookup_when_forward_missing(self, small_matrix):
        assert small_matrix.score("react", "nuxt") == 0
        assert small_matrix.score("react", "next") == 98

    def test_forward_direction_preferred(self, small_matrix):
        # Stored asymmetrically: prisma->pg 95, pg->prisma 90
        assert small_matrix.score("prisma", "pg") == 95
        assert small_matrix.score("pg", "prisma") == 90

    def test_incompatible(self, small_matrix):
        assert small_matrix.is_incompatible("nuxt", "react")
        assert not small_matrix.is_incompatible("next", "react")

    def test_bundled_matrix_scores_in_range(self):
        matrix = load_matrix()
        ids = load_catalog().all_ids()
        for a in ids:
            for b in ids:
                assert 0 <= matrix.score(a, b) <= 100

    def test_find_compatible_sorted_and_filtered(self, small_matrix, small_catalog):
        result = small_matrix.find_compatible("prisma", small_catalog.all_ids())

        # mongo is 0, everything else undefined is neutral and excluded
        assert result == [("pg", 95), ("my", 90)]

    def test_find_compatible_excludes_self_and_limits(self):
        matrix = CompatibilityMatrix({"a": {"b": 60, "c": 70, "d": 70, "a": 10}})

        assert matrix.find_compatible("a", ["a", "b", "c", "d"]) == [("c", 70), ("d", 70), ("b", 60)]
        assert matrix.find_compatible("a", ["a", "b", "c", "d"], limit=1) == [("c", 70)]


class TestCompatibilityVerdict:
    """Tests for score verdicts."""

    def test_verdict_sequence(self):
        verdicts = [compatibility_verdict(s) for s in [0, 49, 79, 94, 95]]
        assert verdicts == ["Incompatible", "Poor", "Acceptable", "Good", "Excellent"]

    @pytest.mark.parametrize("score,expected", [
        (1, "Poor"),
        (50, "Acceptable"),
        (80, "Good"),
        (100, "Excellent"),
    ])
    def test_band_edges(self, score, expected):
        assert compatibility_verdict(score) == expected


class TestCatalogValidator:
    """Tests for catalog validation."""

    def test_bundled_data_is_valid(self):
        issues = CatalogValidator().validate(load_catalog(), load_matrix())
        assert issues == []

    def test_reports_problems(self):
        insecure = make_tech("plain", "hosting", 80).model_copy(update={"url": "http://plain.dev"})
        catalog = TechnologyCatalog([
            make_tech("dup", "orm", 80, mvp=80, enterprise=80),
            make_tech("dup", "orm", 70, mvp=70, enterprise=70),
            insecure,
        ])
        matrix = CompatibilityMatrix({"dup": {"ghost": 10}})

        issues = CatalogValidator().validate(catalog, matrix)

        assert "Duplicate technology IDs: dup" in issues
        assert any("[plain] URL is not https" in issue for issue in issues)
        assert any("[plain] No 'mvp' score set" in issue for issue in issues)
        assert any("ghost" in issue for issue in issues)

    def test_reports_stored_self_pair(self, small_catalog):
        matrix = CompatibilityMatrix({"pg": {"pg": 40, "my": 70}})

        issues = CatalogValidator().validate(small_catalog, matrix)

        self_pairs = [issue for issue in issues if "self-compatibility" in issue]
        assert self_pairs == ["[pg] Stored self-compatibility 40 is ignored"]
