"""Data models for compatibility rules, reports and advisor results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from tech_catalog.schema import Category, Context


class RuleStatus(str, Enum):
    """How two components behave when installed together."""
    CONFLICT = "conflict"
    REDUNDANT = "redundant"
    SYNERGY = "synergy"
    CONDITIONAL = "conditional"
    COMPATIBLE = "compatible"


class Severity(str, Enum):
    """Severity of a conflict or redundancy."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class McpCategory(str, Enum):
    """Functional area a compatibility rule belongs to."""
    DATABASE = "database"
    ORM = "orm"
    AUTH = "auth"
    PAYMENTS = "payments"
    DEPLOYMENT = "deployment"
    MONITORING = "monitoring"
    EMAIL = "email"
    STORAGE = "storage"
    AI = "ai"
    VERSION_CONTROL = "version-control"
    COMMUNICATION = "communication"
    TESTING = "testing"
    DOCUMENTATION = "documentation"
    GENERAL = "general"


class Recommendation(str, Enum):
    """Which side of a rule is recommended."""
    A = "A"
    B = "B"
    EITHER = "either"
    BOTH = "both"


class HealthGrade(str, Enum):
    """Letter grade for a compatibility health score."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class CompatibilityRule(BaseModel):
    """A compatibility rule between two canonical component IDs."""

    model_config = {"frozen": True}

    id: str = Field(..., description="Rule identifier (e.g. 'db-001')")
    mcp_a: str = Field(..., description="First canonical ID, sorts before mcp_b")
    mcp_b: str = Field(..., description="Second canonical ID")
    status: RuleStatus
    category: McpCategory
    severity: Severity
    reason: str = Field(..., description="Human-readable explanation")
    solution: Optional[str] = Field(None, description="Suggested fix for conflicts/redundancies")
    recommendation: Optional[Recommendation] = None
    suggest_when_missing: tuple[str, ...] = Field(
        default=(),
        description="Canonical IDs to suggest when either side is installed"
    )

    @model_validator(mode="after")
    def check_pair_order(self) -> "CompatibilityRule":
        if not self.mcp_a < self.mcp_b:
            raise ValueError(
                f"rule {self.id}: mcp_a '{self.mcp_a}' must sort before mcp_b '{self.mcp_b}'"
            )
        return self


class MatchedRule(BaseModel):
    """A rule plus the original, pre-canonicalization inputs that matched it."""
    rule: CompatibilityRule
    input_a: str
    input_b: str


class Suggestion(BaseModel):
    """A component worth adding to an installed set."""
    mcp: str
    reason: str
    based_on: str


class PairClassification(BaseModel):
    """Matched rules bucketed by status."""
    conflicts: list[MatchedRule] = Field(default_factory=list)
    redundancies: list[MatchedRule] = Field(default_factory=list)
    synergies: list[MatchedRule] = Field(default_factory=list)
    conditionals: list[MatchedRule] = Field(default_factory=list)


class CompatibilitySummary(BaseModel):
    total: int = Field(..., description="Number of components supplied")
    conflicts: int
    redundancies: int
    synergies: int
    score: int = Field(..., ge=0, le=100, description="Health score 0-100")
    grade: HealthGrade


class CompatibilityReport(BaseModel):
    """Full result of a compatibility check."""
    summary: CompatibilitySummary
    conflicts: list[MatchedRule] = Field(default_factory=list)
    redundancies: list[MatchedRule] = Field(default_factory=list)
    synergies: list[MatchedRule] = Field(default_factory=list)
    conditionals: list[MatchedRule] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    analyzed_mcps: list[str] = Field(
        default_factory=list,
        description="Deduplicated canonical IDs in first-seen order"
    )


class ExcludedRecommendation(BaseModel):
    """A recommended component dropped because it conflicts with an installed one."""
    mcp: str
    reason: str
    conflicts_with: str


class RecommendationConflict(BaseModel):
    recommended: str
    conflicts_with: str
    reason: str
    rule_id: str


class FilteredRecommendations(BaseModel):
    """Recommendations split into safe and excluded sets."""
    recommended: list[str] = Field(default_factory=list)
    excluded: list[ExcludedRecommendation] = Field(default_factory=list)
    conflicts: list[RecommendationConflict] = Field(default_factory=list)


# =============================================================================
# Technology scoring results
# =============================================================================


class CategorySelection(BaseModel):
    """Best technology chosen for one category."""
    category: Category
    technology_id: str
    technology: str = Field(..., description="Display name")
    score: int = Field(..., description="Unweighted overall score")
    weighted_score: int
    grade: str


class DimensionScore(BaseModel):
    dimension: str
    label: str
    score: int
    grade: str


class CompatibleTechnology(BaseModel):
    id: str
    name: str
    score: int
    verdict: str


class TechnologyAnalysis(BaseModel):
    """Detailed view of one technology in a context."""
    id: str
    name: str
    category: Category
    url: str
    context: Context
    overall_score: int
    grade: str
    dimensions: list[DimensionScore] = Field(default_factory=list)
    strengths: list[DimensionScore] = Field(default_factory=list)
    weaknesses: list[DimensionScore] = Field(default_factory=list)
    compatible: list[CompatibleTechnology] = Field(default_factory=list)


class RankedTechnology(BaseModel):
    id: str
    name: str
    category: Category
    overall_score: int
    grade: str


class DimensionWinner(BaseModel):
    """Winner of one dimension in a comparison; winner is None on a tie."""
    dimension: str
    label: str
    winner: Optional[str] = None
    margin: int
    notes: str


class PairCompatibility(BaseModel):
    tech_a: str
    tech_b: str
    score: int
    verdict: str


class ComparisonResult(BaseModel):
    """Side-by-side comparison of 2-4 technologies."""
    context: Context
    ranking: list[RankedTechnology]
    dimension_winners: list[DimensionWinner]
    compatibility: list[PairCompatibility]
    leader: Optional[str] = Field(None, description="Leader ID, None on a close call")
    verdict: str
    recommendation: str


class StackRecommendation(BaseModel):
    """Recommended stack for a project type and scale."""
    project_type: str
    scale: str
    context: Context
    selections: list[CategorySelection] = Field(default_factory=list)
