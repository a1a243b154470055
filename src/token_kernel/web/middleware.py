# token_kernel/web/middleware.py
from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from token_kernel.config.base_settings import TokenSettings, get_settings
from token_kernel.security.context import reset_cookie_jar, set_cookie_jar
from token_kernel.security.cookies import StarletteCookieJar
from token_kernel.security.customer_token import CustomerToken
from token_kernel.security.errors import TokenError

logger = logging.getLogger(__name__)


class CustomerTokenMiddleware(BaseHTTPMiddleware):
    """
    Per-request cookie jar + customer restore.

    For every request:
      • binds a StarletteCookieJar to the ContextVar (CustomerToken.issue /
        revoke inside handlers write through it)
      • restores the auth cookie into request.state.customer_token
        (None if absent or rejected; the rejection lands in
        request.state.token_error)
      • copies queued cookies onto the outgoing response
    """

    def __init__(self, app, *, settings: TokenSettings | None = None):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        settings = self.settings or get_settings()
        jar = StarletteCookieJar(
            request,
            secure=settings.cookie_secure,
            httponly=settings.cookie_httponly,
            samesite=settings.cookie_samesite,
            multi_label_suffixes=settings.cookie_multi_label_suffixes,
        )

        request.state.customer_token = None
        request.state.token_error = None
        try:
            request.state.customer_token = CustomerToken.restore_from_cookie(
                settings.secret_key, jar=jar, algorithm=settings.algorithm
            )
        except TokenError as e:
            logger.info("[token] rejected %s cookie on %s: %s", CustomerToken.COOKIE_NAME, request.url.path, e.code)
            request.state.token_error = e

        cv_token = set_cookie_jar(jar)
        try:
            response = await call_next(request)
        finally:
            reset_cookie_jar(cv_token)
        return jar.apply(response)
