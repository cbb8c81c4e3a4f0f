"""
Policy Engine module for Armor.

This module implements the header derivation model: every outbound response
gets the same, deterministic set of hardening headers.

Key concepts:
    - Secure-by-default: Unset fields fall back to SECURE_DEFAULTS
    - HeaderMutation: One set/delete instruction for the response
    - PolicyEngine: Turns a PolicyConfig into an ordered list of mutations

The policy engine must be:
    - Fail-fast: A config missing hsts or expectCt is rejected at construction
    - Predictable: Same config always produces the same mutations
    - Pure: derive() has no side effects and never raises
"""

from armor.policy.engine import HEADER_ORDER, PolicyEngine, create

__all__ = [
    "HEADER_ORDER",
    "PolicyEngine",
    "create",
]
