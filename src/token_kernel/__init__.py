# token_kernel/__init__.py
"""
token_kernel
──────────────────────────────────────────────────────────────
Stateless cookie authentication built on signed tokens.
Provides:
    - SignedToken (HMAC, canonical JSON, relative/absolute expiry)
    - CustomerToken bound to the "__alc" cookie
    - Layered TokenError taxonomy
    - Per-request cookie jar + Starlette middleware
    - FastAPI deps, error handlers and app factory
──────────────────────────────────────────────────────────────
"""

__version__ = "0.1.0"

from token_kernel.security import (
    CustomerToken,
    ExpiredToken,
    InvalidToken,
    InvalidTokenData,
    SignedToken,
    TokenConfigError,
    TokenError,
)
from token_kernel.web.api import create_app

__all__ = [
    "SignedToken",
    "CustomerToken",
    "TokenError",
    "InvalidToken",
    "InvalidTokenData",
    "ExpiredToken",
    "TokenConfigError",
    "create_app",
]
