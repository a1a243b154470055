"""
──────────────────────────────────────────────────────────────────────────────
token_kernel.testing.fixtures
──────────────────────────────────────────────────────────────────────────────
Purpose:
    Provide reusable pytest fixtures for token_kernel-based applications.

Exports:
    - frozen_clock   → FrozenClock patched over security.clock.now
    - cookie_jar     → InMemoryCookieJar bound to the cookie ContextVar
    - token_settings → TokenSettings with a fixed test secret

Usage in your conftest.py:
    from token_kernel.testing.fixtures import cookie_jar, frozen_clock  # noqa: F401

    def test_logout(cookie_jar, frozen_clock):
        CustomerToken.revoke()
        assert cookie_jar.last("__alc").expires < frozen_clock.now()
──────────────────────────────────────────────────────────────────────────────
"""

import pytest

from token_kernel.config.base_settings import TokenSettings
from token_kernel.security import clock
from token_kernel.security.context import reset_cookie_jar, set_cookie_jar
from token_kernel.security.cookies import InMemoryCookieJar

TEST_SECRET = "unit-test-secret"
FROZEN_EPOCH = 1_700_000_000


class FrozenClock:
    """Stand-in for clock.now() that only moves when told to."""

    def __init__(self, start: int = FROZEN_EPOCH):
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        self.current += seconds
        return self.current


# ──────────────────────────────────────────────────────────────
# Clock Fixture (per test)
# ──────────────────────────────────────────────────────────────
@pytest.fixture()
def frozen_clock(monkeypatch):
    frozen = FrozenClock()
    monkeypatch.setattr(clock, "now", frozen.now)
    return frozen


# ──────────────────────────────────────────────────────────────
# Cookie Jar Fixture (per test)
# ──────────────────────────────────────────────────────────────
@pytest.fixture()
def cookie_jar():
    """
    Provide an InMemoryCookieJar for "www.example.com", bound to the
    ContextVar so CustomerToken operations work without an explicit jar.
    """
    jar = InMemoryCookieJar(host="www.example.com")
    cv_token = set_cookie_jar(jar)
    yield jar
    reset_cookie_jar(cv_token)


@pytest.fixture()
def token_settings():
    return TokenSettings(secret_key=TEST_SECRET, _env_file=None)
