"""
Schema definitions for Armor.

This module defines the Pydantic models used throughout Armor:
- PolicyConfig/HstsConfig/ExpectCtConfig: What the user asked for
- SecureDefaults: What Armor does when the user said nothing
- EffectiveConfig: The two merged, ready for header derivation
- HeaderMutation: A single set/delete instruction for a response

Design Decisions:
    - Configuration models are frozen so an engine's config cannot drift
    - Fields accept both Python names and header-style aliases
      (e.g. ``xss_protection`` or ``X-XSS-Protection``)
    - On/off switches are TriState so "explicitly off" is distinct from "unset"
    - Unknown keys are rejected (extra="forbid") to catch typos in header names
"""

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from armor.errors import ConfigLoadError, InvalidDirectiveError


# =============================================================================
# Enums
# =============================================================================


class TriState(str, Enum):
    """
    A switch with three meaningful states.

    DEFAULT defers to SecureDefaults. YAML/JSON booleans map onto
    ENABLED/DISABLED and null maps onto DEFAULT.
    """

    ENABLED = "enabled"
    DISABLED = "disabled"
    DEFAULT = "default"


class ReferrerPolicy(str, Enum):
    """Values accepted by the Referrer-Policy header."""

    NO_REFERRER = "no-referrer"
    NO_REFERRER_WHEN_DOWNGRADE = "no-referrer-when-downgrade"
    SAME_ORIGIN = "same-origin"
    ORIGIN = "origin"
    STRICT_ORIGIN = "strict-origin"
    ORIGIN_WHEN_CROSS_ORIGIN = "origin-when-cross-origin"
    STRICT_ORIGIN_WHEN_CROSS_ORIGIN = "strict-origin-when-cross-origin"
    UNSAFE_URL = "unsafe-url"


class MutationAction(str, Enum):
    """What a HeaderMutation does to the response."""

    SET = "set"
    DELETE = "delete"


def _coerce_tristate(value: Any) -> Any:
    if value is None:
        return TriState.DEFAULT
    if value is True:
        return TriState.ENABLED
    if value is False:
        return TriState.DISABLED
    return value


def _empty_to_none(value: Any) -> Any:
    if value == "":
        return None
    return value


def _seconds(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        msg = f"max_age must be a non-negative number of seconds: {value!r}"
        raise ValueError(msg)
    return value


def _header_safe(value: Any) -> Any:
    """Header values must encode as latin-1 and stay on one line."""
    if not isinstance(value, str):
        return value
    try:
        value.encode("latin-1")
    except UnicodeEncodeError as e:
        msg = f"value is not latin-1 encodable: {value!r}"
        raise ValueError(msg) from e
    if "\r" in value or "\n" in value:
        msg = f"value must not contain line breaks: {value!r}"
        raise ValueError(msg)
    return value


# =============================================================================
# Configuration Models
# =============================================================================


class HstsConfig(BaseModel):
    """
    Directives for the Strict-Transport-Security header.

    Attributes:
        max_age: Seconds as a string or int, False to disable HSTS, None for the default
        include_subdomains: includeSubDomains directive (on unless disabled)
        preload: preload directive (on unless disabled)
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    max_age: str | Literal[False] | None = Field(
        default=None,
        alias="maxAge",
        description="max-age in seconds, false to disable, unset for 60 days",
    )
    include_subdomains: TriState = Field(
        default=TriState.DEFAULT,
        alias="includeSubDomains",
        description="Whether to append includeSubDomains",
    )
    preload: TriState = Field(
        default=TriState.DEFAULT,
        description="Whether to append preload",
    )

    @field_validator("max_age", mode="before")
    @classmethod
    def validate_max_age(cls, v: Any) -> Any:
        """Accept seconds as int or digit string; only False may disable."""
        if v is None or v == "":
            return None
        if v is False:
            return v
        return _seconds(v)

    @field_validator("include_subdomains", "preload", mode="before")
    @classmethod
    def validate_switch(cls, v: Any) -> Any:
        return _coerce_tristate(v)


class ExpectCtConfig(BaseModel):
    """
    Directives for the Expect-CT header.

    Nothing is emitted unless max_age is set; enforce and report_uri
    only decorate an existing max-age directive.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    enforce: TriState = Field(
        default=TriState.DEFAULT,
        description="Whether to append enforce",
    )
    max_age: str = Field(
        default="",
        alias="maxAge",
        description="max-age in seconds (empty disables the header)",
    )
    report_uri: str = Field(
        default="",
        alias="reportUri",
        description="Report URI appended after the other directives",
    )

    @field_validator("enforce", mode="before")
    @classmethod
    def validate_enforce(cls, v: Any) -> Any:
        return _coerce_tristate(v)

    @field_validator("max_age", mode="before")
    @classmethod
    def validate_max_age(cls, v: Any) -> Any:
        """Accept seconds as int or digit string."""
        if v is None or v == "":
            return ""
        return _seconds(v)

    @field_validator("report_uri", mode="before")
    @classmethod
    def validate_report_uri(cls, v: Any) -> Any:
        return "" if v is None else _header_safe(v)


class PolicyConfig(BaseModel):
    """
    User-supplied security header configuration.

    Every field is optional. The composite groups ``hsts`` and ``expect_ct``
    are modelled as optional here but PolicyEngine refuses a config that
    lacks either; use PolicyConfig.secure() for a config with both present.

    Attributes:
        xss_protection: Emit X-XSS-Protection unless disabled
        referrer_policy: Referrer-Policy value, no header when unset
        content_type_options: Emit X-Content-Type-Options unless disabled
        hsts: Strict-Transport-Security directives
        powered_by: ENABLED keeps X-Powered-By, otherwise it is removed
        frame_options: X-Frame-Options value (DENY, SAMEORIGIN, ALLOW-FROM ...)
        expect_ct: Expect-CT directives
        dns_prefetch_control: ENABLED sends "on", anything else "off"
        content_security_policy: Raw Content-Security-Policy value
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    xss_protection: TriState = Field(default=TriState.DEFAULT, alias="X-XSS-Protection")
    referrer_policy: ReferrerPolicy | None = Field(default=None, alias="Referrer-Policy")
    content_type_options: TriState = Field(default=TriState.DEFAULT, alias="X-Content-Type-Options")
    hsts: HstsConfig | None = Field(default=None)
    powered_by: TriState = Field(default=TriState.DEFAULT, alias="X-Powered-By")
    frame_options: str | None = Field(default=None, alias="X-Frame-Options")
    expect_ct: ExpectCtConfig | None = Field(default=None, alias="expectCt")
    dns_prefetch_control: TriState = Field(default=TriState.DEFAULT, alias="X-DNS-Prefetch-Control")
    content_security_policy: str | None = Field(default=None, alias="Content-Security-Policy")

    @field_validator(
        "xss_protection",
        "content_type_options",
        "powered_by",
        "dns_prefetch_control",
        mode="before",
    )
    @classmethod
    def validate_switch(cls, v: Any) -> Any:
        return _coerce_tristate(v)

    @field_validator("referrer_policy", "content_security_policy", mode="before")
    @classmethod
    def validate_optional_string(cls, v: Any) -> Any:
        return _header_safe(_empty_to_none(v))

    @field_validator("frame_options", mode="before")
    @classmethod
    def validate_frame_options(cls, v: Any) -> Any:
        """Booleans carry no frame directive, so they fall back to the default."""
        if isinstance(v, bool):
            return None
        return _header_safe(_empty_to_none(v))

    @classmethod
    def secure(cls, **overrides: Any) -> "PolicyConfig":
        """Create a config with both directive groups present and everything else unset."""
        data: dict[str, Any] = {"hsts": HstsConfig(), "expect_ct": ExpectCtConfig()}
        data.update(overrides)
        return cls(**data)


class SecureDefaults(BaseModel):
    """
    Values used when a PolicyConfig field is unset.

    Exposed as the SECURE_DEFAULTS constant. It is never mutated; an engine
    that needs different defaults gets a new instance via model_copy().
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    xss_protection: str = "1; mode=block"
    content_type_options: str = "nosniff"
    hsts_max_age: str = "5184000"  # 60 days
    hsts_include_subdomains: bool = True
    hsts_preload: bool = True
    hide_powered_by: bool = True
    frame_options: str = "SAMEORIGIN"
    dns_prefetch_control: bool = False


SECURE_DEFAULTS = SecureDefaults()


class EffectiveConfig(BaseModel):
    """
    A PolicyConfig merged with SecureDefaults.

    Every field is already resolved: booleans say whether a header or
    directive is emitted and strings carry final values. None means the
    header or directive is absent.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    xss_protection: str | None
    referrer_policy: str | None
    content_type_options: str | None
    hsts_max_age: str | None
    hsts_include_subdomains: bool
    hsts_preload: bool
    hide_powered_by: bool
    frame_options: str
    expect_ct_max_age: str
    expect_ct_enforce: bool
    expect_ct_report_uri: str
    dns_prefetch_control: bool
    content_security_policy: str | None


# =============================================================================
# Runtime Models
# =============================================================================


class HeaderMutation(BaseModel):
    """
    One instruction for an outbound response's headers.

    Attributes:
        action: SET or DELETE
        name: Header name
        value: Header value (None for DELETE)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: MutationAction = Field(..., description="Set or delete")
    name: str = Field(..., description="Header name", min_length=1)
    value: str | None = Field(default=None, description="Header value for set")

    @classmethod
    def set(cls, name: str, value: str) -> "HeaderMutation":
        """Create a SET mutation."""
        return cls(action=MutationAction.SET, name=name, value=value)

    @classmethod
    def delete(cls, name: str) -> "HeaderMutation":
        """Create a DELETE mutation."""
        return cls(action=MutationAction.DELETE, name=name)


# =============================================================================
# Loading Helpers
# =============================================================================


def parse_config(data: Mapping[str, Any]) -> PolicyConfig:
    """
    Validate a mapping into a PolicyConfig.

    Raises:
        InvalidDirectiveError: If any field fails validation
    """
    try:
        return PolicyConfig.model_validate(dict(data))
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "config"
        raise InvalidDirectiveError(
            field_name=location,
            validation_error=first["msg"],
            context={"error_count": e.error_count()},
        ) from e


def load_config(path: Path | str) -> PolicyConfig:
    """
    Load a policy configuration from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated PolicyConfig object

    Raises:
        ConfigLoadError: If the file can't be read or isn't a YAML mapping
        InvalidDirectiveError: If the YAML doesn't match the schema
    """
    path = Path(path)
    try:
        with path.open() as f:
            content = f.read()
    except OSError as e:
        raise ConfigLoadError(path=str(path), underlying_error=str(e)) from e

    return _config_from_yaml(content, source=str(path))


def load_config_from_string(content: str) -> PolicyConfig:
    """Load a policy configuration from a YAML string."""
    return _config_from_yaml(content, source="<string>")


def _config_from_yaml(content: str, source: str) -> PolicyConfig:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(path=source, underlying_error=str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            path=source,
            underlying_error=f"expected a mapping, got {type(data).__name__}",
        )

    return parse_config(data)
