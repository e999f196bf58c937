"""Stack advisor: technology scoring, stack selection and component compatibility."""

from stack_advisor.canonical import DEFAULT_ALIASES, Canonicalizer, pair_key
from stack_advisor.config import AdvisorConfig, get_config, load_config, reset_config
from stack_advisor.engine import StackAdvisor
from stack_advisor.errors import (
    AdvisorError,
    ConfigError,
    ErrorCode,
    InvalidInputError,
    TechnologyNotFoundError,
)
from stack_advisor.health import generate_report, health_grade, health_score, summary_line
from stack_advisor.matcher import check_all_pairs, generate_pairs
from stack_advisor.rules import COMPATIBILITY_RULES, CURATED_MCPS, RuleIndex
from stack_advisor.scorer import TechnologyScorer, overall_score, score_to_grade
from stack_advisor.suggestions import suggest

__all__ = [
    "DEFAULT_ALIASES",
    "Canonicalizer",
    "pair_key",
    "AdvisorConfig",
    "get_config",
    "load_config",
    "reset_config",
    "StackAdvisor",
    "AdvisorError",
    "ConfigError",
    "ErrorCode",
    "InvalidInputError",
    "TechnologyNotFoundError",
    "generate_report",
    "health_grade",
    "health_score",
    "summary_line",
    "check_all_pairs",
    "generate_pairs",
    "COMPATIBILITY_RULES",
    "CURATED_MCPS",
    "RuleIndex",
    "TechnologyScorer",
    "overall_score",
    "score_to_grade",
    "suggest",
]
