# token_kernel/security/errors.py
"""
Token failure taxonomy
──────────────────────────────────────────────
    TokenError                 → abstract root, "reject this credential"
      └─ InvalidToken          → bad wire format or signature mismatch
           ├─ InvalidTokenData → signature ok, payload is not an object
           └─ ExpiredToken     → signature + payload ok, expiration passed

    TokenConfigError           → bad secret / algorithm / setter input.
                                 Not a TokenError: it is a setup bug,
                                 never a client credential problem.
──────────────────────────────────────────────
"""
from __future__ import annotations


class TokenError(RuntimeError):
    """Ancestor of every verification failure raised by SignedToken.parse().
    Never raised directly; catch it to mean "treat as unauthenticated"."""

    code: str = "TOKEN_ERROR"
    default_message: str = "Token rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidToken(TokenError):
    """Malformed token string or digest mismatch."""

    code = "TOKEN_INVALID"
    default_message = "Token integrity check failed"


class InvalidTokenData(InvalidToken):
    """Digest verified, but the payload does not decode to an object."""

    code = "TOKEN_DATA_INVALID"
    default_message = "Token payload is malformed"


class ExpiredToken(InvalidToken):
    code = "TOKEN_EXPIRED"
    default_message = "Token has expired"


class TokenConfigError(ValueError):
    """Raised when a token is configured with an unusable secret, algorithm or value."""
