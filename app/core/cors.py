from __future__ import annotations

from typing import Iterable

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from app.core.config import settings

# Called cross-origin from the recruiter portal; the route sets its own wildcard headers.
PERMISSIVE_CORS_PATHS = ("/v1/match-resume",)


def cors_allowed_origins() -> list[str]:
    return list(settings.cors_allowed_origins)


def cors_allow_credentials() -> bool:
    # Browsers reject credentialed responses with a wildcard origin.
    return "*" not in settings.cors_allowed_origins


class PathExemptCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that hands the listed paths straight to the app."""

    def __init__(self, app: ASGIApp, exempt_paths: Iterable[str] = (), **kwargs):
        super().__init__(app, **kwargs)
        self.exempt_paths = frozenset(exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"] in self.exempt_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
