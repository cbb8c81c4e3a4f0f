"""
Exception hierarchy for Armor.

All Armor exceptions inherit from ArmorError, allowing callers to catch
all Armor-specific exceptions with a single except clause.

Exception Categories:
    - ConfigurationError: The policy configuration cannot be used
    - MissingDirectiveGroupError: A composite header group (hsts, expectCt) is absent
    - InvalidDirectiveError: A single configuration field failed validation
    - ConfigLoadError: A configuration file could not be read or parsed

Header derivation itself never raises. Every error in this module
surfaces at construction or load time.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Configuration errors: 1xxx
ERROR_CONFIG_INVALID = 1001
ERROR_CONFIG_MISSING_GROUP = 1002
ERROR_CONFIG_INVALID_DIRECTIVE = 1003

# Loading errors: 2xxx
ERROR_CONFIG_LOAD = 2001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class ArmorError(Exception):
    """
    Base exception for all Armor errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Configuration Errors
# =============================================================================


@dataclass
class ConfigurationError(ArmorError):
    """
    Raised when a policy configuration cannot be turned into an engine.

    Fatal to the engine instance: fix the configuration and construct again.
    """

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "Invalid policy configuration"
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID


@dataclass
class MissingDirectiveGroupError(ConfigurationError):
    """Raised when a composite header group (hsts, expectCt) is absent."""

    group: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Missing required directive group: {self.group}"
        if self.code == 0:
            self.code = ERROR_CONFIG_MISSING_GROUP
        if not self.suggestion:
            self.suggestion = f"Add a '{self.group}' section (an empty mapping uses the defaults)"
        super().__post_init__()
        self.context["group"] = self.group


@dataclass
class InvalidDirectiveError(ConfigurationError):
    """Raised when a configuration field fails validation."""

    field_name: str = ""
    validation_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid value for {self.field_name}: {self.validation_error}"
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID_DIRECTIVE
        super().__post_init__()
        self.context.update({
            "field": self.field_name,
            "validation_error": self.validation_error,
        })


# =============================================================================
# Loading Errors
# =============================================================================


@dataclass
class ConfigLoadError(ArmorError):
    """Raised when a configuration file cannot be read or parsed."""

    path: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Failed to load configuration {self.path}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_CONFIG_LOAD
        if not self.suggestion:
            self.suggestion = "Check that the file exists and contains a YAML mapping"
        self.context.update({
            "path": self.path,
            "underlying_error": self.underlying_error,
        })
