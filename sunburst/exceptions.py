"""Exception hierarchy for the sunburst engine."""

from typing import Dict, Optional


class SunburstError(Exception):
    """Base exception for all sunburst errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidNodeError(SunburstError):
    """A node was constructed with an unusable name or value."""


class TreeFormatError(SunburstError):
    """Input records, JSON or table columns do not describe a tree."""


class NavigationError(SunburstError, IndexError):
    """An event referenced a segment or breadcrumb that does not exist."""


class ConfigurationError(SunburstError):
    """Chart configuration failed validation."""


class InvalidColorError(SunburstError, ValueError):
    """A colour string is not in ``#RRGGBB`` form."""
