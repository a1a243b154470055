"""
Signed tokens and the customer auth cookie.
──────────────────────────────────────────────────────────────
 - SignedToken      → HMAC-signed payload + expiration
 - CustomerToken    → SignedToken bound to the "__alc" cookie
 - errors           → TokenError taxonomy + TokenConfigError
 - cookies/context  → CookieJar capability, per-request binding
──────────────────────────────────────────────────────────────
"""
from .context import get_cookie_jar, reset_cookie_jar, set_cookie_jar
from .cookies import CookieJar, CookieRecord, InMemoryCookieJar, StarletteCookieJar, cookie_domain
from .customer_token import CustomerToken
from .errors import ExpiredToken, InvalidToken, InvalidTokenData, TokenConfigError, TokenError
from .token import SUPPORTED_ALGORITHMS, SignedToken

__all__ = [
    "SignedToken",
    "CustomerToken",
    "SUPPORTED_ALGORITHMS",
    "TokenError",
    "InvalidToken",
    "InvalidTokenData",
    "ExpiredToken",
    "TokenConfigError",
    "CookieJar",
    "CookieRecord",
    "InMemoryCookieJar",
    "StarletteCookieJar",
    "cookie_domain",
    "get_cookie_jar",
    "set_cookie_jar",
    "reset_cookie_jar",
]
