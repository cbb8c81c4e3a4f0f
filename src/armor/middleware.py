"""
ASGI middleware for Armor.

Applies the engine's header mutations to every HTTP response. Uses the raw
ASGI protocol (patching the ``http.response.start`` message) rather than
``BaseHTTPMiddleware``, so streaming responses are untouched.

Example:
    from starlette.applications import Starlette
    from starlette.middleware import Middleware

    from armor.middleware import ArmorMiddleware

    app = Starlette(middleware=[Middleware(ArmorMiddleware, config={"hsts": {}, "expectCt": {}})])
"""

from collections.abc import Mapping
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from armor.errors import ConfigurationError
from armor.headers import apply_mutations
from armor.policy import PolicyEngine, create
from armor.schema import PolicyConfig


class ArmorMiddleware:
    """
    Adds security headers to every HTTP response.

    The engine is built once, when the middleware is constructed, so a bad
    configuration fails at application startup rather than per request.
    Mutations are derived per response.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: PolicyConfig | Mapping[str, Any] | None = None,
        engine: PolicyEngine | None = None,
    ) -> None:
        if engine is not None and config is not None:
            raise ConfigurationError(
                message="Pass either config or engine to ArmorMiddleware, not both",
                suggestion="Build the engine from the config with create()",
            )
        self.app = app
        self.engine = engine if engine is not None else create(config)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        engine = self.engine

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                apply_mutations(engine.derive(), headers)
            await send(message)

        await self.app(scope, receive, send_with_headers)
