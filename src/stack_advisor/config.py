"""Centralized configuration management for the stack advisor."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from tech_catalog.schema import Category, Context

from .errors import ConfigError
from .schema import Severity

logger = logging.getLogger(__name__)


class HealthScoringConfig(BaseModel):
    """Penalties and bonuses applied when computing the health score.

    The score starts at 100, loses points for each conflict and redundancy
    according to its severity, gains a capped bonus for synergies and is
    finally clamped to 0-100.
    """
    critical_conflict_penalty: int = Field(40, description="Points lost per critical conflict")
    warning_conflict_penalty: int = Field(20, description="Points lost per warning conflict")
    info_conflict_penalty: int = Field(0, description="Points lost per info conflict")
    critical_redundancy_penalty: int = Field(0, description="Points lost per critical redundancy")
    warning_redundancy_penalty: int = Field(10, description="Points lost per warning redundancy")
    info_redundancy_penalty: int = Field(5, description="Points lost per info redundancy")
    synergy_bonus: int = Field(5, description="Points gained per synergy")
    max_synergy_bonus: int = Field(15, description="Cap on the total synergy bonus")

    def conflict_penalty(self, severity: Severity) -> int:
        return {
            Severity.CRITICAL: self.critical_conflict_penalty,
            Severity.WARNING: self.warning_conflict_penalty,
            Severity.INFO: self.info_conflict_penalty,
        }[severity]

    def redundancy_penalty(self, severity: Severity) -> int:
        return {
            Severity.CRITICAL: self.critical_redundancy_penalty,
            Severity.WARNING: self.warning_redundancy_penalty,
            Severity.INFO: self.info_redundancy_penalty,
        }[severity]


class GradeThresholdsConfig(BaseModel):
    """Minimum health score for each letter grade; anything lower is D."""
    grade_a: int = Field(90, description="Minimum score for grade A")
    grade_b: int = Field(75, description="Minimum score for grade B")
    grade_c: int = Field(55, description="Minimum score for grade C")


def _default_scale_contexts() -> dict[str, Context]:
    return {
        "mvp": Context.MVP,
        "startup": Context.MVP,
        "growth": Context.ENTERPRISE,
        "enterprise": Context.ENTERPRISE,
    }


def _default_category_weights() -> dict[str, dict[Category, float]]:
    return {
        "web-app": {Category.META_FRAMEWORK: 1.2, Category.FRONTEND: 1.1, Category.DATABASE: 1.0},
        "saas": {Category.META_FRAMEWORK: 1.2, Category.DATABASE: 1.1, Category.AUTH: 1.2, Category.PAYMENTS: 1.3},
        "e-commerce": {Category.META_FRAMEWORK: 1.1, Category.DATABASE: 1.1, Category.PAYMENTS: 1.4},
        "api": {Category.BACKEND: 1.3, Category.DATABASE: 1.2, Category.HOSTING: 1.1},
        "mobile-app": {Category.BACKEND: 1.2, Category.DATABASE: 1.1, Category.AUTH: 1.2},
        "marketplace": {Category.META_FRAMEWORK: 1.1, Category.DATABASE: 1.2, Category.AUTH: 1.1, Category.PAYMENTS: 1.3},
        "cli": {Category.BACKEND: 1.0},
        "library": {Category.BACKEND: 1.0},
        "desktop": {Category.FRONTEND: 1.1, Category.BACKEND: 1.1, Category.DATABASE: 1.0},
    }


_WEB_CATEGORIES = [Category.META_FRAMEWORK, Category.DATABASE, Category.ORM, Category.AUTH, Category.HOSTING]
_SERVICE_CATEGORIES = [Category.BACKEND, Category.DATABASE, Category.ORM, Category.AUTH, Category.HOSTING]


def _default_project_categories() -> dict[str, list[Category]]:
    return {
        "web-app": list(_WEB_CATEGORIES),
        "saas": _WEB_CATEGORIES + [Category.PAYMENTS],
        "e-commerce": _WEB_CATEGORIES + [Category.PAYMENTS],
        "marketplace": _WEB_CATEGORIES + [Category.PAYMENTS],
        "api": list(_SERVICE_CATEGORIES),
        "mobile-app": list(_SERVICE_CATEGORIES),
        "cli": [Category.BACKEND],
        "library": [Category.BACKEND],
        "desktop": [Category.FRONTEND, Category.BACKEND, Category.DATABASE, Category.ORM],
    }


class RecommendationConfig(BaseModel):
    """Project types, scales and the category weighting used for stack selection."""
    project_types: list[str] = Field(
        default_factory=lambda: [
            "web-app", "mobile-app", "api", "desktop", "cli",
            "library", "e-commerce", "saas", "marketplace",
        ],
        description="Accepted project types"
    )
    scale_contexts: dict[str, Context] = Field(
        default_factory=_default_scale_contexts,
        description="Scoring context used for each project scale"
    )
    category_weights: dict[str, dict[Category, float]] = Field(
        default_factory=_default_category_weights,
        description="Per project type multipliers on overall scores (missing means 1.0)"
    )
    project_categories: dict[str, list[Category]] = Field(
        default_factory=_default_project_categories,
        description="Categories to fill, in selection order, per project type"
    )
    fallback_categories: list[Category] = Field(
        default_factory=lambda: [Category.META_FRAMEWORK, Category.DATABASE, Category.AUTH, Category.HOSTING],
        description="Categories used for project types without an explicit list"
    )
    enforce_compatibility: bool = Field(
        True,
        description="Reject candidates hard-incompatible with earlier selections"
    )

    def context_for_scale(self, scale: str) -> Context:
        return self.scale_contexts.get(scale, Context.DEFAULT)

    def categories_for(self, project_type: str) -> list[Category]:
        return list(self.project_categories.get(project_type, self.fallback_categories))


class ComparisonConfig(BaseModel):
    """Thresholds for technology analysis and side-by-side comparison."""
    tie_margin: int = Field(3, description="Dimension or overall margin below which it is a tie")
    close_margin: int = Field(10, description="Dimension margin below which it is a close competition")
    strength_threshold: int = Field(85, description="Minimum dimension score counted as a strength")
    weakness_threshold: int = Field(80, description="Dimension scores below this count as weaknesses")
    max_strengths: int = Field(2, description="Maximum strengths reported")
    max_weaknesses: int = Field(2, description="Maximum weaknesses reported")
    compatible_limit: int = Field(8, description="Maximum compatible technologies listed")


class InputLimitsConfig(BaseModel):
    """Accepted input sizes for the validation layer."""
    min_compatibility_ids: int = Field(1, description="Minimum components in a compatibility check")
    max_compatibility_ids: int = Field(20, description="Maximum components in a compatibility check")
    min_comparison_ids: int = Field(2, description="Minimum technologies in a comparison")
    max_comparison_ids: int = Field(4, description="Maximum technologies in a comparison")


class AdvisorConfig(BaseModel):
    """Complete configuration for the stack advisor."""
    health_scoring: HealthScoringConfig = Field(
        default_factory=HealthScoringConfig,
        description="Conflict/redundancy penalties and synergy bonus",
    )
    grade_thresholds: GradeThresholdsConfig = Field(
        default_factory=GradeThresholdsConfig,
        description="Health score needed for grades A, B and C",
    )
    recommendation: RecommendationConfig = Field(
        default_factory=RecommendationConfig,
        description="Project types, scales and category weights",
    )
    comparison: ComparisonConfig = Field(
        default_factory=ComparisonConfig,
        description="Tie margins and strength/weakness thresholds",
    )
    input_limits: InputLimitsConfig = Field(
        default_factory=InputLimitsConfig,
        description="Accepted list sizes",
    )


CONFIG_ENV_VAR = "STACK_ADVISOR_CONFIG"
LOCAL_CONFIG_NAMES = ("stack-advisor.yaml", "stack-advisor.yml")
USER_CONFIG_PATH = Path(".config") / "stack-advisor" / "config.yaml"

# Global config instance
_config: Optional[AdvisorConfig] = None


def get_config() -> AdvisorConfig:
    """Get the current configuration, defaults until one is loaded."""
    global _config
    if _config is None:
        _config = AdvisorConfig()
    return _config


def load_config(path: Path) -> AdvisorConfig:
    """Load a YAML config file and make it the current configuration.

    Sections and keys left out of the file keep their defaults. On failure
    the current configuration is left as it was.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or holds
            a value of the wrong type.
    """
    global _config

    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    try:
        config = AdvisorConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in config file {path}: {e}") from e

    logger.info("Loaded configuration from %s", path)
    _config = config
    return _config


def reset_config() -> None:
    global _config
    _config = AdvisorConfig()


def config_search_paths() -> list[Path]:
    """Candidate config locations, highest priority first."""
    paths = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path))
    paths.extend(Path(name) for name in LOCAL_CONFIG_NAMES)
    paths.append(Path.home() / USER_CONFIG_PATH)
    return paths


def find_config_file() -> Optional[Path]:
    """First existing file among ``config_search_paths()``, or None."""
    for path in config_search_paths():
        if path.is_file():
            logger.debug("Using config file %s", path)
            return path
    return None


def config_sections() -> list[tuple[str, str]]:
    """(section name, description) for each top-level config section."""
    return [(name, field.description or "") for name, field in AdvisorConfig.model_fields.items()]


def save_default_config(path: Path) -> None:
    """Write the default configuration as commented YAML, creating parent dirs."""
    lines = ["# Stack Advisor configuration", "#"]
    lines += [f"#   {name}: {description}" for name, description in config_sections()]
    lines += [
        "#",
        f"# Found via ${CONFIG_ENV_VAR}, ./{LOCAL_CONFIG_NAMES[0]} or ~/{USER_CONFIG_PATH.as_posix()}",
        "",
    ]
    body = yaml.safe_dump(
        AdvisorConfig().model_dump(mode="json"),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n" + body, encoding="utf-8")
