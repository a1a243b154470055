# token_kernel/security/token.py
from __future__ import annotations

import base64
import binascii
import copy
import hashlib
import hmac
import json
import math
from collections.abc import Mapping
from typing import Any, Dict

from token_kernel.security import clock
from token_kernel.security.errors import (
    ExpiredToken,
    InvalidToken,
    InvalidTokenData,
    TokenConfigError,
)

"""
──────────────────────────────────────────────────────────────────────────────
SignedToken: HMAC-signed payload token
──────────────────────────────────────────────────────────────────────────────
Wire format:
    b64url(hex HMAC(secret, canonical_json)) + "." + b64url(canonical_json)
    (URL-safe alphabet, no '=' padding)

Expiration (`expires_at`):
    0                      → never expires
    1 … 2_592_000          → time-to-live, offset from "now" when resolved
    > 2_592_000            → absolute Unix timestamp

Lifecycle:
    fresh → (setters) dirty → get_token() signed → (setters) dirty …
    parse() verifies → decodes → checks expiry on a draft and only then
    commits payload + expiry; a failed parse leaves the object untouched.

Usage:
    token = SignedToken(secret, expires_at=3600)
    token.set_payload({"user_id": 1})
    wire = token.get_token()

    restored = SignedToken(secret).parse(wire)
    restored.get_payload()["user_id"]
"""

DEFAULT_ALGORITHM = "sha256"
RELATIVE_EXPIRATION_LIMIT = 2_592_000  # 30 days
EXPIRES_AT_KEY = "expires_at"

# Variable-length (SHAKE) digests cannot key an HMAC.
SUPPORTED_ALGORITHMS = frozenset(
    name for name in hashlib.algorithms_guaranteed if not name.startswith("shake_")
)


# ──────────────────────────────────────────────────────────────
# Encoding helpers
# ──────────────────────────────────────────────────────────────
def b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def b64url_decode(text: str) -> bytes:
    """
    Strict inverse of b64url_encode(). Rejects padding, foreign characters and
    non-canonical trailing bits, so every byte string has exactly one spelling.
    """
    try:
        raw = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except (binascii.Error, ValueError):
        raise InvalidToken("Token segment is not valid base64url")
    if b64url_encode(raw) != text:
        raise InvalidToken("Token segment is not canonical base64url")
    return raw


def canonical_json(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
    ).encode("ascii")


def resolve_expiration(expires_at: int, now: int) -> int:
    """Apply the relative/absolute rule to an expires_at value."""
    if 0 < expires_at <= RELATIVE_EXPIRATION_LIMIT:
        return now + expires_at
    return expires_at


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ──────────────────────────────────────────────────────────────
# SignedToken
# ──────────────────────────────────────────────────────────────
class SignedToken:
    """Packs / unpacks a signed token with application payload data."""

    def __init__(
        self,
        secret: str | bytes | None = None,
        expires_at: int = 0,
        *,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        self._token: str | None = None
        self._signed_expires_at = 0
        self._payload: Dict[str, Any] = {}
        self._expires_at = 0
        self.set_secret(secret)
        self.set_algorithm(algorithm)
        self.set_expiration_time(expires_at)

    @classmethod
    def from_string(
        cls,
        secret: str | bytes,
        token: str,
        *,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        """Construct with `secret` and restore state from `token`."""
        return cls(secret, algorithm=algorithm).parse(token)

    def __str__(self) -> str:
        return self.get_token()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(algorithm={self._algorithm!r}, "
            f"expires_at={self._expires_at}, payload_keys={sorted(self._payload)})"
        )

    # ──────────────────────────────────────────────
    # Accessors
    # ──────────────────────────────────────────────
    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def secret(self) -> bytes:
        return self._secret

    @property
    def expires_at(self) -> int:
        """Expiration as configured (may still be a relative TTL)."""
        return self._expires_at

    def get_payload(self) -> Dict[str, Any]:
        """Return a copy of the payload; mutate it through set_payload()."""
        return copy.deepcopy(self._payload)

    def calculated_expiration_time(self) -> int:
        return resolve_expiration(self._expires_at, clock.now())

    def is_expired(self) -> bool:
        expires_at = self.calculated_expiration_time()
        return 0 < expires_at < clock.now()

    # ──────────────────────────────────────────────
    # Setters (each one invalidates the cached token)
    # ──────────────────────────────────────────────
    def set_algorithm(self, algorithm: str) -> "SignedToken":
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise TokenConfigError(
                f"Unsupported digest algorithm {algorithm!r}; "
                f"expected one of {sorted(SUPPORTED_ALGORITHMS)}"
            )
        self._algorithm = algorithm
        self._token = None
        return self

    def set_secret(self, secret: str | bytes) -> "SignedToken":
        if isinstance(secret, str):
            key = secret.encode("utf-8")
        elif isinstance(secret, (bytes, bytearray)):
            key = bytes(secret)
        elif secret is None:
            raise TokenConfigError("A token secret is required")
        else:
            raise TypeError(f"Token secret must be str or bytes, not {type(secret).__name__}")
        if not key:
            raise TokenConfigError("Token secret must not be empty")
        self._secret = key
        self._token = None
        return self

    def set_expiration_time(self, expires_at: int) -> "SignedToken":
        """
        `expires_at` ≤ 30 days (in seconds) is a relative time-to-live,
        anything larger an absolute Unix timestamp, 0 never expires.
        Finite floats are truncated to int.
        """
        if isinstance(expires_at, float) and math.isfinite(expires_at):
            expires_at = int(expires_at)
        if not _is_int(expires_at):
            raise TypeError(
                f"Expiration time must be an int, not {type(expires_at).__name__}"
            )
        if expires_at < 0:
            raise TokenConfigError("Expiration time must not be negative")
        self._expires_at = expires_at
        self._token = None
        return self

    def set_payload(self, payload: Mapping[str, Any]) -> "SignedToken":
        if not isinstance(payload, Mapping):
            raise TypeError(f"Payload must be a mapping, not {type(payload).__name__}")
        if not all(isinstance(key, str) for key in payload):
            raise TypeError("Payload keys must be strings")
        try:
            canonical_json(payload)
        except (TypeError, ValueError) as e:
            raise TokenConfigError(f"Payload is not JSON serializable: {e}") from e
        self._payload = copy.deepcopy(dict(payload))
        self._token = None
        return self

    # ──────────────────────────────────────────────
    # Signing
    # ──────────────────────────────────────────────
    def _digest(self, data: bytes) -> bytes:
        return hmac.new(self._secret, data, self._algorithm).hexdigest().encode("ascii")

    def _pack_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Extend payload with the resolved expiration. Override to customize."""
        if EXPIRES_AT_KEY not in payload:
            expires_at = self.calculated_expiration_time()
            if expires_at:
                payload[EXPIRES_AT_KEY] = expires_at
        return payload

    def get_token(self) -> str:
        if self._token is None:
            packed = self._pack_payload(dict(self._payload))
            data = canonical_json(packed)
            self._signed_expires_at = packed.get(EXPIRES_AT_KEY, 0)
            self._token = f"{b64url_encode(self._digest(data))}.{b64url_encode(data)}"
        return self._token

    def signed_expiration_time(self) -> int:
        """`expires_at` as embedded in get_token(), 0 if the token carries none."""
        self.get_token()
        return self._signed_expires_at

    # ──────────────────────────────────────────────
    # Verification
    # ──────────────────────────────────────────────
    def parse(self, token: str) -> "SignedToken":
        """
        Restore payload + expiry from a token string.

        Raises:
            InvalidToken      – bad separator / encoding / digest
            InvalidTokenData  – digest ok, payload not a JSON object
            ExpiredToken      – digest + payload ok, expiration passed
        """
        if not isinstance(token, str):
            raise InvalidToken("Token must be a string")

        digest_part, sep, payload_part = token.partition(".")
        if not sep:
            raise InvalidToken("Token separator missing")

        digest = b64url_decode(digest_part)
        data = b64url_decode(payload_part)

        # Integrity strictly before anything semantic
        if not hmac.compare_digest(self._digest(data), digest):
            raise InvalidToken()

        try:
            payload = json.loads(data)
        except ValueError:
            raise InvalidTokenData()
        if not isinstance(payload, dict):
            raise InvalidTokenData()

        draft_expires_at = payload.get(EXPIRES_AT_KEY, self._expires_at)
        if not _is_int(draft_expires_at) or draft_expires_at < 0:
            raise InvalidTokenData("Token expiration is not a non-negative integer")

        now = clock.now()
        resolved = resolve_expiration(draft_expires_at, now)
        if 0 < resolved < now:
            raise ExpiredToken()

        # Commit
        self._payload = payload
        self._expires_at = draft_expires_at
        self._token = None
        return self
