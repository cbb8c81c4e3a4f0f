"""
Policy Engine for Armor.

The Policy Engine turns a security header configuration into the list of
header mutations to apply to every outbound response.

Design Principles:
    - Secure-by-default: Unset fields fall back to SECURE_DEFAULTS
    - Fail-fast: An unusable configuration is rejected at construction
    - Predictable: derive() is pure and returns equal output on every call
    - Ordered: Mutations always come out in the same header order

How it works:
    1. Engine receives a PolicyConfig and checks its directive groups
    2. resolve() merges the config with SECURE_DEFAULTS into an EffectiveConfig
    3. derive() runs one rule per header, in a fixed order
    4. The caller applies the mutations (or calls apply())

Security Note:
    includeSubDomains and preload are ON unless explicitly disabled.
    Sites that cannot serve every subdomain over HTTPS, or that don't want
    to be submitted to browser preload lists, must set them to false.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

from armor.errors import ConfigurationError, MissingDirectiveGroupError
from armor.headers import HeaderTarget, apply_mutations
from armor.schema import (
    SECURE_DEFAULTS,
    EffectiveConfig,
    HeaderMutation,
    PolicyConfig,
    SecureDefaults,
    TriState,
    parse_config,
)

XSS_PROTECTION = "X-XSS-Protection"
REFERRER_POLICY = "Referrer-Policy"
CONTENT_TYPE_OPTIONS = "X-Content-Type-Options"
STRICT_TRANSPORT_SECURITY = "Strict-Transport-Security"
POWERED_BY = "X-Powered-By"
FRAME_OPTIONS = "X-Frame-Options"
EXPECT_CT = "Expect-CT"
DNS_PREFETCH_CONTROL = "X-DNS-Prefetch-Control"
CONTENT_SECURITY_POLICY = "Content-Security-Policy"

# Order in which derive() emits headers
HEADER_ORDER = (
    XSS_PROTECTION,
    REFERRER_POLICY,
    CONTENT_TYPE_OPTIONS,
    STRICT_TRANSPORT_SECURITY,
    POWERED_BY,
    FRAME_OPTIONS,
    EXPECT_CT,
    DNS_PREFETCH_CONTROL,
    CONTENT_SECURITY_POLICY,
)


class PolicyEngine:
    """
    Derives security header mutations from a PolicyConfig.

    Usage:
        engine = PolicyEngine(PolicyConfig.secure(frame_options="DENY"))
        for mutation in engine.derive():
            ...  # set or delete mutation.name on the response

    The engine holds no mutable state, so one instance can serve
    concurrent requests without locking.

    Attributes:
        config: The PolicyConfig being enforced (read-only)
        defaults: The SecureDefaults used for unset fields
    """

    def __init__(
        self,
        config: PolicyConfig,
        defaults: SecureDefaults = SECURE_DEFAULTS,
    ) -> None:
        """
        Initialize the policy engine.

        Args:
            config: The policy configuration to enforce
            defaults: Values used for unset fields

        Raises:
            ConfigurationError: If config is not a PolicyConfig
            MissingDirectiveGroupError: If hsts or expect_ct is missing
        """
        if not isinstance(config, PolicyConfig):
            raise ConfigurationError(
                message=f"Expected PolicyConfig, got {type(config).__name__}",
                suggestion="Build the engine with create() to validate a mapping",
            )
        if config.hsts is None:
            raise MissingDirectiveGroupError(group="hsts")
        if config.expect_ct is None:
            raise MissingDirectiveGroupError(group="expectCt")

        self._config = config
        self._defaults = defaults

    @property
    def config(self) -> PolicyConfig:
        return self._config

    @property
    def defaults(self) -> SecureDefaults:
        return self._defaults

    def resolve(self) -> EffectiveConfig:
        """
        Merge the configuration with the defaults.

        Precedence for every switch: explicit false, then explicit value,
        then default.
        """
        config = self._config
        defaults = self._defaults
        hsts = config.hsts
        expect_ct = config.expect_ct

        if hsts.max_age is False:
            hsts_max_age = None
        elif hsts.max_age:
            hsts_max_age = hsts.max_age
        else:
            hsts_max_age = defaults.hsts_max_age

        return EffectiveConfig(
            xss_protection=self._switch_value(config.xss_protection, defaults.xss_protection),
            referrer_policy=config.referrer_policy.value if config.referrer_policy else None,
            content_type_options=self._switch_value(
                config.content_type_options, defaults.content_type_options
            ),
            hsts_max_age=hsts_max_age,
            hsts_include_subdomains=self._switch(
                hsts.include_subdomains, defaults.hsts_include_subdomains
            ),
            hsts_preload=self._switch(hsts.preload, defaults.hsts_preload),
            hide_powered_by=(
                defaults.hide_powered_by and config.powered_by != TriState.ENABLED
            ),
            frame_options=config.frame_options or defaults.frame_options,
            expect_ct_max_age=expect_ct.max_age,
            expect_ct_enforce=expect_ct.enforce == TriState.ENABLED,
            expect_ct_report_uri=expect_ct.report_uri,
            dns_prefetch_control=self._switch(
                config.dns_prefetch_control, defaults.dns_prefetch_control
            ),
            content_security_policy=config.content_security_policy,
        )

    def derive(self) -> list[HeaderMutation]:
        """
        Compute the header mutations for one outbound response.

        Returns:
            A fresh list of mutations in HEADER_ORDER
        """
        effective = self.resolve()
        mutations: list[HeaderMutation] = []

        if effective.xss_protection is not None:
            mutations.append(HeaderMutation.set(XSS_PROTECTION, effective.xss_protection))

        if effective.referrer_policy:
            mutations.append(HeaderMutation.set(REFERRER_POLICY, effective.referrer_policy))

        if effective.content_type_options is not None:
            mutations.append(
                HeaderMutation.set(CONTENT_TYPE_OPTIONS, effective.content_type_options)
            )

        hsts_value = self._hsts_value(effective)
        if hsts_value:
            mutations.append(HeaderMutation.set(STRICT_TRANSPORT_SECURITY, hsts_value))

        if effective.hide_powered_by:
            mutations.append(HeaderMutation.delete(POWERED_BY))

        mutations.append(HeaderMutation.set(FRAME_OPTIONS, effective.frame_options))

        expect_ct_value = self._expect_ct_value(effective)
        if expect_ct_value:
            mutations.append(HeaderMutation.set(EXPECT_CT, expect_ct_value))

        mutations.append(
            HeaderMutation.set(
                DNS_PREFETCH_CONTROL,
                "on" if effective.dns_prefetch_control else "off",
            )
        )

        if effective.content_security_policy:
            mutations.append(
                HeaderMutation.set(CONTENT_SECURITY_POLICY, effective.content_security_policy)
            )

        return mutations

    def apply(self, target: HeaderTarget | MutableMapping[str, str] | Any) -> list[HeaderMutation]:
        """Derive mutations and apply them to a response's headers."""
        return apply_mutations(self.derive(), target)

    # =========================================================================
    # Composite Headers
    # =========================================================================

    def _hsts_value(self, effective: EffectiveConfig) -> str:
        """Assemble Strict-Transport-Security; empty when max-age is disabled."""
        if not effective.hsts_max_age:
            return ""

        directives = [f"max-age={effective.hsts_max_age}"]
        if effective.hsts_include_subdomains:
            directives.append("includeSubDomains")
        if effective.hsts_preload:
            directives.append("preload")
        return "; ".join(directives)

    def _expect_ct_value(self, effective: EffectiveConfig) -> str:
        """Assemble Expect-CT; empty when no max-age was configured."""
        if not effective.expect_ct_max_age:
            return ""

        directives = [f"max-age={effective.expect_ct_max_age}"]
        if effective.expect_ct_enforce:
            directives.append("enforce")
        if effective.expect_ct_report_uri:
            directives.append(effective.expect_ct_report_uri)
        return "; ".join(directives)

    # =========================================================================
    # Switch Resolution
    # =========================================================================

    @staticmethod
    def _switch(state: TriState, default: bool) -> bool:
        if state == TriState.DEFAULT:
            return default
        return state == TriState.ENABLED

    @staticmethod
    def _switch_value(state: TriState, value: str) -> str | None:
        """Fixed-value headers: only presence is configurable."""
        if state == TriState.DISABLED:
            return None
        return value


def create(
    config: PolicyConfig | Mapping[str, Any] | None = None,
    defaults: SecureDefaults = SECURE_DEFAULTS,
) -> PolicyEngine:
    """
    Build a PolicyEngine from a config object, a plain mapping, or nothing.

    With no config the engine uses PolicyConfig.secure(), i.e. every
    header at its secure default.

    Raises:
        ConfigurationError: If the configuration is invalid or incomplete
    """
    if config is None:
        config = PolicyConfig.secure()
    elif isinstance(config, Mapping):
        config = parse_config(config)
    return PolicyEngine(config, defaults=defaults)
