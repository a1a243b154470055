# token_kernel/web/errors.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from token_kernel.security.errors import TokenConfigError, TokenError

logger = logging.getLogger(__name__)


def error_envelope(code: str, message: str, details=None):
    return {"error": {"code": code, "message": message, "details": details or {}}}


async def token_error_handler(request: Request, exc: TokenError) -> JSONResponse:
    return JSONResponse(error_envelope(exc.code, exc.message), status_code=401)


async def token_config_error_handler(request: Request, exc: TokenConfigError) -> JSONResponse:
    logger.error("[token] configuration error on %s: %s", request.url.path, exc)
    return JSONResponse(
        error_envelope("CONFIGURATION_ERROR", "Token configuration error"), status_code=500
    )


def add_error_handlers(app: FastAPI) -> None:
    """Map token failures that escape handlers onto JSON error envelopes."""
    app.add_exception_handler(TokenError, token_error_handler)
    app.add_exception_handler(TokenConfigError, token_config_error_handler)
