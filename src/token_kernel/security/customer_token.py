# token_kernel/security/customer_token.py
from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from token_kernel.security import clock
from token_kernel.security.context import get_cookie_jar
from token_kernel.security.cookies import CookieJar, CookieRecord
from token_kernel.security.token import DEFAULT_ALGORITHM, SignedToken

"""
──────────────────────────────────────────────────────────────────────────────
CustomerToken: SignedToken bound to the customer auth cookie
──────────────────────────────────────────────────────────────────────────────
Cookie:
    name    → CustomerToken.COOKIE_NAME ("__alc")
    value   → SignedToken wire string with {"customer": <id>, "expires_at": …}
    path    → "/"
    domain  → jar.cookie_domain (derived from the request host)
    expires → 0 (session cookie) or the resolved absolute expiration

All cookie I/O goes through a CookieJar. When `jar` is omitted the jar bound
to the current request context is used (see security.context).

Usage:
    CustomerToken.issue("cust-42", settings.secret_key, ttl=3600)

    token = CustomerToken.restore_from_cookie(settings.secret_key)
    if token is not None:
        token.get_customer()

    CustomerToken.revoke()
"""

logger = logging.getLogger(__name__)

CUSTOMER_KEY = "customer"
REVOKE_BACKDATE_SECONDS = 3600


class CustomerToken(SignedToken):
    """Authenticating token for a single customer."""

    COOKIE_NAME = "__alc"

    # ──────────────────────────────────────────────
    # Payload accessors
    # ──────────────────────────────────────────────
    def get_customer(self) -> Optional[Any]:
        return copy.deepcopy(self._payload.get(CUSTOMER_KEY))

    def set_customer(self, customer: Any) -> "CustomerToken":
        payload = self.get_payload()
        payload[CUSTOMER_KEY] = customer
        return self.set_payload(payload)

    # ──────────────────────────────────────────────
    # Cookie operations
    # ──────────────────────────────────────────────
    @classmethod
    def issue(
        cls,
        customer: Any,
        secret: str | bytes,
        ttl: int = 0,
        *,
        jar: CookieJar | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> bool:
        """
        Create a token for `customer` and write it into the auth cookie.

        `ttl` is a time-to-live (≤ 30 days in seconds) or an absolute Unix
        timestamp; 0 issues a session cookie without expiration.
        Returns True if the jar accepted the cookie.
        """
        jar = jar or get_cookie_jar()
        token = cls(secret, ttl, algorithm=algorithm).set_customer(customer)

        value = token.get_token()
        expires = token.signed_expiration_time() if ttl > 0 else 0
        ok = jar.set(
            CookieRecord(
                name=cls.COOKIE_NAME,
                value=value,
                path="/",
                domain=jar.cookie_domain,
                expires=expires,
            )
        )
        logger.debug("[token] customer cookie issued (expires=%s, accepted=%s)", expires, ok)
        return ok

    @classmethod
    def restore_from_cookie(
        cls,
        secret: str | bytes,
        *,
        jar: CookieJar | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> Optional["CustomerToken"]:
        """
        Verify the auth cookie of the current request.

        Returns None when no cookie is present; any TokenError raised by
        parse() propagates to the caller.
        """
        jar = jar or get_cookie_jar()
        value = jar.get(cls.COOKIE_NAME)
        if value is None:
            return None
        token = cls(secret, algorithm=algorithm)
        token.parse(value)
        return token

    @classmethod
    def revoke(cls, *, jar: CookieJar | None = None) -> bool:
        """Overwrite the auth cookie with an empty, already expired one."""
        jar = jar or get_cookie_jar()
        ok = jar.set(
            CookieRecord(
                name=cls.COOKIE_NAME,
                value="",
                path="/",
                domain=jar.cookie_domain,
                expires=clock.now() - REVOKE_BACKDATE_SECONDS,
            )
        )
        logger.debug("[token] customer cookie revoked (accepted=%s)", ok)
        return ok

    remove_cookie = revoke
