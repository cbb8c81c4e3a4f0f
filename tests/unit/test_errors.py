"""
Unit tests for error hierarchy.

Tests cover:
- Base ArmorError behavior
- Configuration errors with context
- Loading errors
- Error serialization
"""

import pytest

from armor.errors import (
    ERROR_CONFIG_INVALID,
    ERROR_CONFIG_INVALID_DIRECTIVE,
    ERROR_CONFIG_LOAD,
    ERROR_CONFIG_MISSING_GROUP,
    ArmorError,
    ConfigLoadError,
    ConfigurationError,
    InvalidDirectiveError,
    MissingDirectiveGroupError,
)


class TestArmorError:
    """Tests for base ArmorError."""

    def test_basic_error(self) -> None:
        """Create a basic error with message."""
        err = ArmorError(message="Something went wrong", code=9999)
        assert err.message == "Something went wrong"
        assert err.code == 9999
        assert err.suggestion is None
        assert err.context == {}

    def test_str_format(self) -> None:
        """String format includes code and message."""
        err = ArmorError(message="Test error", code=1234)
        assert str(err) == "[E1234] Test error"

    def test_str_with_suggestion(self) -> None:
        """Suggestion is appended on its own line."""
        err = ArmorError(message="Failed", code=1, suggestion="Try again")
        assert str(err) == "[E1] Failed\nSuggestion: Try again"

    def test_repr_format(self) -> None:
        """Repr includes class name and details."""
        err = ArmorError(message="Test", code=1)
        assert repr(err) == "ArmorError(message='Test', code=1, context={})"

    def test_can_be_raised(self) -> None:
        """Errors are real exceptions."""
        with pytest.raises(ArmorError):
            raise ArmorError(message="boom", code=1)


class TestConfigurationErrors:
    """Tests for configuration errors."""

    def test_configuration_error_defaults(self) -> None:
        """Bare ConfigurationError gets a message and code."""
        err = ConfigurationError()
        assert err.code == ERROR_CONFIG_INVALID
        assert err.message == "Invalid policy configuration"

    def test_missing_group(self) -> None:
        """MissingDirectiveGroupError names the group."""
        err = MissingDirectiveGroupError(group="hsts")
        assert isinstance(err, ConfigurationError)
        assert err.code == ERROR_CONFIG_MISSING_GROUP
        assert "hsts" in err.message
        assert "hsts" in err.suggestion
        assert err.context["group"] == "hsts"

    def test_invalid_directive(self) -> None:
        """InvalidDirectiveError carries field and validation message."""
        err = InvalidDirectiveError(field_name="hsts.maxAge", validation_error="bad value")
        assert isinstance(err, ConfigurationError)
        assert err.code == ERROR_CONFIG_INVALID_DIRECTIVE
        assert err.message == "Invalid value for hsts.maxAge: bad value"
        assert err.context == {"field": "hsts.maxAge", "validation_error": "bad value"}

    def test_custom_message_kept(self) -> None:
        """An explicit message is not overwritten."""
        err = MissingDirectiveGroupError(message="custom", group="expectCt")
        assert err.message == "custom"


class TestConfigLoadError:
    """Tests for ConfigLoadError."""

    def test_defaults(self) -> None:
        """Message, code and suggestion are filled in."""
        err = ConfigLoadError(path="armor.yaml", underlying_error="not found")
        assert err.code == ERROR_CONFIG_LOAD
        assert err.message == "Failed to load configuration armor.yaml: not found"
        assert err.suggestion is not None

    def test_not_a_configuration_error(self) -> None:
        """Load failures are a separate category."""
        assert not isinstance(ConfigLoadError(), ConfigurationError)


class TestSerialization:
    """Tests for to_dict."""

    def test_to_dict(self) -> None:
        """to_dict includes type, code and context."""
        data = MissingDirectiveGroupError(group="expectCt").to_dict()
        assert data["error_type"] == "MissingDirectiveGroupError"
        assert data["code"] == ERROR_CONFIG_MISSING_GROUP
        assert data["context"] == {"group": "expectCt"}
        assert data["suggestion"]
