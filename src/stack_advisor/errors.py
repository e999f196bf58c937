"""Errors raised by the advisor's input validation layer."""

from enum import Enum
from typing import Iterable, Optional

from .fuzzy import find_similar


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    TECH_NOT_FOUND = "TECH_NOT_FOUND"
    CONFIG_ERROR = "CONFIG_ERROR"


class AdvisorError(Exception):
    """Base error carrying a code and optional suggestions for the caller."""

    def __init__(self, code: ErrorCode, message: str, suggestions: Optional[list[str]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        text = f"{self.code.value}: {self.message}"
        if self.suggestions:
            text += " (" + " ".join(self.suggestions) + ")"
        return text


class InvalidInputError(AdvisorError):
    """Input list is the wrong size, contains duplicates or names an unknown option."""

    def __init__(self, message: str, suggestions: Optional[list[str]] = None):
        super().__init__(ErrorCode.INVALID_INPUT, message, suggestions)


class ConfigError(AdvisorError):
    """Config file is unreadable, not YAML, or holds values of the wrong type."""

    def __init__(self, message: str):
        super().__init__(
            ErrorCode.CONFIG_ERROR,
            message,
            ["Run 'stack-advisor init-config' to generate a valid file."],
        )


class TechnologyNotFoundError(AdvisorError):
    """Technology ID is not in the catalog."""

    def __init__(self, tech_id: str, available_ids: Iterable[str]):
        self.tech_id = tech_id
        self.similar = find_similar(tech_id, available_ids)
        if self.similar:
            suggestions = [
                f"Did you mean: {', '.join(self.similar)}?",
                "Use 'stack-advisor list' to see all available IDs.",
            ]
        else:
            suggestions = ["Use 'stack-advisor list' to see all available technology IDs."]
        super().__init__(ErrorCode.TECH_NOT_FOUND, f'Unknown technology: "{tech_id}"', suggestions)
