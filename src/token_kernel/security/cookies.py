# token_kernel/security/cookies.py
"""
Cookie capability
──────────────────────────────────────────────
Token code never touches request/response globals. It talks to a
CookieJar instead:

    jar.get(name)       → incoming cookie value or None
    jar.set(record)     → queue an outgoing cookie, True if accepted
    jar.clear(name)     → queue a deletion, True if accepted
    jar.cookie_domain   → registrable domain for the request host,
                          memoised per jar (i.e. per request)

Implementations:
    • InMemoryCookieJar   – tests, CLI, non-HTTP callers
    • StarletteCookieJar  – bound per request by CustomerTokenMiddleware
──────────────────────────────────────────────
"""
from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import cached_property
from typing import Dict, Iterable, List, Optional

from starlette.requests import Request
from starlette.responses import Response

DEFAULT_MULTI_LABEL_SUFFIXES = (".co.uk",)


@dataclass(frozen=True)
class CookieRecord:
    """One outgoing Set-Cookie. `expires == 0` means a session cookie."""

    name: str
    value: str
    path: str = "/"
    domain: Optional[str] = None
    expires: int = 0


def cookie_domain(
    host: Optional[str],
    multi_label_suffixes: Iterable[str] = DEFAULT_MULTI_LABEL_SUFFIXES,
) -> Optional[str]:
    """
    Derive the domain a cookie should be scoped to from a request host.

    Keeps the last 2 labels ("www.example.com" → "example.com"), or the last
    3 when the host ends with one of `multi_label_suffixes`
    ("foo.example.co.uk" → "example.co.uk"). This is a label-count heuristic,
    not a public-suffix-list lookup: other multi-label suffixes (".com.au",
    ".co.jp" …) are mis-scoped unless passed in explicitly.

    Returns None (host-only cookie) for empty hosts, IP literals and
    single-label hosts such as "localhost", which browsers refuse as a
    Domain attribute.
    """
    if not host:
        return None
    host = host.strip().lower()
    if host.startswith("["):
        return None
    if host.count(":") == 1:
        host = host.rsplit(":", 1)[0]
    host = host.rstrip(".")
    try:
        ipaddress.ip_address(host)
        return None
    except ValueError:
        pass

    labels = host.split(".")
    if len(labels) < 2:
        return None
    keep = 3 if any(host.endswith(s.lower()) for s in multi_label_suffixes) else 2
    return ".".join(labels[-keep:])


class CookieJar:
    """Base cookie capability. Subclasses implement get / set."""

    def __init__(
        self,
        host: Optional[str] = None,
        *,
        multi_label_suffixes: Iterable[str] = DEFAULT_MULTI_LABEL_SUFFIXES,
    ):
        self.host = host
        self.multi_label_suffixes = tuple(multi_label_suffixes)

    @cached_property
    def cookie_domain(self) -> Optional[str]:
        return cookie_domain(self.host, self.multi_label_suffixes)

    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, record: CookieRecord) -> bool:
        raise NotImplementedError

    def clear(self, name: str) -> bool:
        return self.set(CookieRecord(name=name, value="", domain=self.cookie_domain, expires=1))


class InMemoryCookieJar(CookieJar):
    """
    Dict-backed jar. `cookies` are the incoming request cookies; every write
    is appended to `records` and also reflected into `cookies`, the way a
    browser would apply it.
    """

    def __init__(
        self,
        cookies: Optional[Dict[str, str]] = None,
        host: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(host, **kwargs)
        self.cookies: Dict[str, str] = dict(cookies or {})
        self.records: List[CookieRecord] = []

    def get(self, name: str) -> Optional[str]:
        return self.cookies.get(name)

    def set(self, record: CookieRecord) -> bool:
        self.records.append(record)
        if record.value:
            self.cookies[record.name] = record.value
        else:
            self.cookies.pop(record.name, None)
        return True

    def last(self, name: str) -> Optional[CookieRecord]:
        """Most recent record written for `name`."""
        for record in reversed(self.records):
            if record.name == name:
                return record
        return None


class StarletteCookieJar(CookieJar):
    """
    Request-scoped jar over a Starlette request.

    Writes are buffered in `pending` and copied onto the outgoing response by
    apply() with the jar's `secure` / `httponly` / `samesite` flags. Once
    applied, the headers are considered sent and further writes are refused
    (set/clear return False).
    """

    def __init__(
        self,
        request: Request,
        *,
        secure: bool = False,
        httponly: bool = True,
        samesite: Optional[str] = "lax",
        **kwargs,
    ):
        super().__init__(request.url.hostname, **kwargs)
        self.request = request
        self.secure = secure
        self.httponly = httponly
        self.samesite = samesite
        self.pending: List[CookieRecord] = []
        self.applied = False

    def get(self, name: str) -> Optional[str]:
        return self.request.cookies.get(name)

    def set(self, record: CookieRecord) -> bool:
        if self.applied:
            return False
        self.pending.append(record)
        return True

    def apply(self, response: Response) -> Response:
        for record in self.pending:
            # an int `expires` would be read as seconds-from-now by http.cookies
            expires = (
                datetime.fromtimestamp(record.expires, tz=timezone.utc)
                if record.expires
                else None
            )
            response.set_cookie(
                key=record.name,
                value=record.value,
                path=record.path,
                domain=record.domain,
                expires=expires,
                secure=self.secure,
                httponly=self.httponly,
                samesite=self.samesite,
            )
        self.applied = True
        return response
