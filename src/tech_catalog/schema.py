"""Pydantic models for the technology catalog and compatibility matrix."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Category(str, Enum):
    """Technology category classification."""
    FRONTEND = "frontend"
    BACKEND = "backend"
    META_FRAMEWORK = "meta-framework"
    DATABASE = "database"
    ORM = "orm"
    AUTH = "auth"
    HOSTING = "hosting"
    PAYMENTS = "payments"


class Context(str, Enum):
    """Scoring scenario selecting which score set applies."""
    DEFAULT = "default"
    MVP = "mvp"
    ENTERPRISE = "enterprise"


# Dimension keys in display order
SCORE_DIMENSIONS = ("perf", "dx", "ecosystem", "maintain", "cost", "compliance")

DIMENSION_LABELS = {
    "perf": "Performance",
    "dx": "Developer Experience",
    "ecosystem": "Ecosystem",
    "maintain": "Maintainability",
    "cost": "Cost Efficiency",
    "compliance": "Compliance",
}


class Scores(BaseModel):
    """Six quality dimensions, each 0-100."""

    model_config = {"frozen": True}

    perf: int = Field(..., ge=0, le=100, description="Performance")
    dx: int = Field(..., ge=0, le=100, description="Developer experience")
    ecosystem: int = Field(..., ge=0, le=100, description="Ecosystem maturity")
    maintain: int = Field(..., ge=0, le=100, description="Maintainability")
    cost: int = Field(..., ge=0, le=100, description="Cost efficiency")
    compliance: int = Field(..., ge=0, le=100, description="Compliance readiness")

    def values(self) -> list[int]:
        """Dimension values in SCORE_DIMENSIONS order."""
        return [getattr(self, dim) for dim in SCORE_DIMENSIONS]


class Technology(BaseModel):
    """A single catalog entry."""

    model_config = {"frozen": True}

    id: str = Field(..., min_length=1, description="Unique technology identifier")
    name: str = Field(..., description="Display name")
    category: Category = Field(..., description="Technology category")
    url: str = Field(..., description="Project homepage")
    scores: dict[Context, Scores] = Field(..., description="Score sets per context")

    @field_validator("scores")
    @classmethod
    def require_default_scores(cls, value: dict[Context, Scores]) -> dict[Context, Scores]:
        if Context.DEFAULT not in value:
            raise ValueError("technology must define a 'default' score set")
        return value

    def scores_for(self, context: Context = Context.DEFAULT) -> Scores:
        """Score set for a context, falling back to default."""
        return self.scores.get(context) or self.scores[Context.DEFAULT]


class TechnologyScoresFile(BaseModel):
    """On-disk layout of technology_scores.json."""

    model_config = {"populate_by_name": True}

    version: str = Field(..., alias="$version")
    description: str = Field("", alias="$description")
    technologies: dict[str, Technology] = Field(default_factory=dict)

    @field_validator("technologies")
    @classmethod
    def keys_match_ids(cls, value: dict[str, Technology]) -> dict[str, Technology]:
        for key, tech in value.items():
            if key != tech.id:
                raise ValueError(f"technology key '{key}' does not match id '{tech.id}'")
        return value


class CompatibilityMatrixFile(BaseModel):
    """On-disk layout of compatibility_matrix.json."""

    model_config = {"populate_by_name": True}

    version: str = Field(..., alias="$version")
    description: str = Field("", alias="$description")
    matrix: dict[str, dict[str, int]] = Field(default_factory=dict)

    @field_validator("matrix")
    @classmethod
    def scores_in_range(cls, value: dict[str, dict[str, int]]) -> dict[str, dict[str, int]]:
        for source, row in value.items():
            for target, score in row.items():
                if not 0 <= score <= 100:
                    raise ValueError(
                        f"compatibility {source}->{target} is {score}, expected 0-100"
                    )
        return value


class DataVersion(BaseModel):
    """Source data versions of the loaded files."""
    scores: str
    compatibility: str
