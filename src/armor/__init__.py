"""
Armor - Security header policy engine for HTTP responses.

Armor derives the response headers that harden a web application against
MIME sniffing, clickjacking, reflected XSS, protocol downgrade, referrer
leakage and content injection.
It provides:
- Secure defaults merged with a partial, declarative configuration
- A pure derive() that returns ordered set/delete header mutations
- An ASGI middleware and a CLI for inspecting a configuration

Example usage:
    >>> from armor import create
    >>> engine = create({"hsts": {}, "expectCt": {}, "X-Frame-Options": "DENY"})
    >>> engine.apply(response_headers)

    $ armor headers armor.yaml
"""

from armor.errors import ArmorError, ConfigurationError
from armor.policy import PolicyEngine, create
from armor.schema import HeaderMutation, PolicyConfig

__version__ = "0.1.0"
__author__ = "Armor Contributors"

__all__ = [
    "__version__",
    "__author__",
    "ArmorError",
    "ConfigurationError",
    "HeaderMutation",
    "PolicyConfig",
    "PolicyEngine",
    "create",
]
