# src/token_kernel/web/api.py
from __future__ import annotations

import logging

from fastapi import FastAPI

from token_kernel.config.base_settings import TokenSettings, get_settings
from token_kernel.web.errors import add_error_handlers
from token_kernel.web.middleware import CustomerTokenMiddleware

"""
──────────────────────────────────────────────────────────────
token_kernel.web.api
──────────────────────────────────────────────────────────────
Purpose:
    FastAPI app factory wired for cookie-based customer auth.

Responsibilities:
    • Attach CustomerTokenMiddleware (per-request cookie jar +
      customer restore)
    • Register token error handlers
──────────────────────────────────────────────────────────────
"""

logger = logging.getLogger(__name__)


def create_app(*, title: str = "App", settings: TokenSettings | None = None) -> FastAPI:
    """
    Build a FastAPI app with customer-token auth.
    `settings` defaults to get_settings(), so TOKEN_SECRET_KEY must be set.
    """
    settings = settings or get_settings()
    app = FastAPI(title=title)
    app.state.token_settings = settings

    app.add_middleware(CustomerTokenMiddleware, settings=settings)
    add_error_handlers(app)

    logger.info("[token] app '%s' ready (algorithm=%s)", title, settings.algorithm)
    return app


def mount_routers(app: FastAPI, routers: list) -> None:
    """Mount multiple routers."""
    for r in routers:
        app.include_router(r)
