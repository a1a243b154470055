# token_kernel/security/context.py
"""
ContextVar-based cookie jar binding
──────────────────────────────────────────────
• Each request (or task) binds one CookieJar via CustomerTokenMiddleware
• get_cookie_jar() retrieves it; raises if none bound
• reset_cookie_jar() restores the previous binding after the request
• set_cookie_jar() allows manual binding for CLI/tests
"""
from contextvars import ContextVar, Token

from token_kernel.security.cookies import CookieJar

_cookie_jar_cv: ContextVar[CookieJar | None] = ContextVar("_tk_cookie_jar", default=None)


def set_cookie_jar(jar: CookieJar) -> Token:
    """Bind a CookieJar to the current context; returns the reset token."""
    return _cookie_jar_cv.set(jar)


def get_cookie_jar() -> CookieJar:
    """Return the current CookieJar or raise if none bound."""
    jar = _cookie_jar_cv.get()
    if jar is None:
        raise RuntimeError(
            "No active CookieJar found. "
            "Did you enable CustomerTokenMiddleware or call set_cookie_jar()?"
        )
    return jar


def reset_cookie_jar(token: Token) -> None:
    _cookie_jar_cv.reset(token)
