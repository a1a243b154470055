import pytest

from token_kernel.security import clock
from token_kernel.security.context import reset_cookie_jar, set_cookie_jar
from token_kernel.security.cookies import InMemoryCookieJar
from token_kernel.security.customer_token import CustomerToken
from token_kernel.security.errors import ExpiredToken, InvalidToken
from token_kernel.security.token import SignedToken

SECRET = "api-secret"
COOKIE = CustomerToken.COOKIE_NAME


def test_cookie_name() -> None:
    assert COOKIE == "__alc"


def test_customer_accessors() -> None:
    token = CustomerToken(SECRET)
    assert token.get_customer() is None

    token.set_payload({"locale": "en"}).set_customer("c-1")
    assert token.get_customer() == "c-1"
    assert token.get_payload() == {"locale": "en", "customer": "c-1"}


def test_is_a_signed_token(frozen_clock) -> None:
    wire = CustomerToken(SECRET).set_customer("c-1").get_token()
    assert SignedToken(SECRET).parse(wire).get_payload() == {"customer": "c-1"}


def test_issue_session_cookie(cookie_jar, frozen_clock) -> None:
    assert CustomerToken.issue("c-1", SECRET) is True

    record = cookie_jar.last(COOKIE)
    assert record.path == "/"
    assert record.domain == "example.com"
    assert record.expires == 0
    restored = CustomerToken(SECRET).parse(record.value)
    assert restored.get_customer() == "c-1"
    assert "expires_at" not in restored.get_payload()


def test_issue_with_ttl(cookie_jar, frozen_clock) -> None:
    CustomerToken.issue("c-1", SECRET, ttl=3600)

    record = cookie_jar.last(COOKIE)
    assert record.expires == frozen_clock.now() + 3600
    payload = CustomerToken(SECRET).parse(record.value).get_payload()
    assert payload["expires_at"] == record.expires


def test_issue_with_absolute_expiry(cookie_jar, frozen_clock) -> None:
    absolute = frozen_clock.now() + 90 * 86400
    CustomerToken.issue("c-1", SECRET, ttl=absolute)
    assert cookie_jar.last(COOKIE).expires == absolute


def test_issue_explicit_jar(frozen_clock) -> None:
    jar = InMemoryCookieJar(host="shop.example.co.uk")
    CustomerToken.issue("c-1", SECRET, jar=jar)
    assert jar.last(COOKIE).domain == "example.co.uk"


def test_restore_absent_cookie(cookie_jar) -> None:
    assert CustomerToken.restore_from_cookie(SECRET) is None


def test_issue_then_restore(cookie_jar, frozen_clock) -> None:
    CustomerToken.issue(1234, SECRET, ttl=60)
    token = CustomerToken.restore_from_cookie(SECRET)
    assert isinstance(token, CustomerToken)
    assert token.get_customer() == 1234


def test_restore_propagates_token_errors(cookie_jar, frozen_clock) -> None:
    cookie_jar.cookies[COOKIE] = "garbage"
    with pytest.raises(InvalidToken):
        CustomerToken.restore_from_cookie(SECRET)

    CustomerToken.issue("c-1", SECRET, ttl=60)
    with pytest.raises(InvalidToken):
        CustomerToken.restore_from_cookie("wrong secret")

    frozen_clock.advance(120)
    with pytest.raises(ExpiredToken):
        CustomerToken.restore_from_cookie(SECRET)


def test_revoke(cookie_jar, frozen_clock) -> None:
    CustomerToken.issue("c-1", SECRET, ttl=30 * 86400)
    assert CustomerToken.revoke() is True

    record = cookie_jar.last(COOKIE)
    assert record.value == ""
    assert record.path == "/"
    assert record.domain == "example.com"
    assert record.expires < frozen_clock.now()
    assert CustomerToken.restore_from_cookie(SECRET) is None


def test_revoke_without_prior_cookie(cookie_jar, frozen_clock) -> None:
    assert CustomerToken.remove_cookie() is True
    assert cookie_jar.last(COOKIE).expires < frozen_clock.now()


def test_operations_need_a_jar() -> None:
    with pytest.raises(RuntimeError):
        CustomerToken.issue("c-1", SECRET)
    with pytest.raises(RuntimeError):
        CustomerToken.restore_from_cookie(SECRET)
    with pytest.raises(RuntimeError):
        CustomerToken.revoke()


def test_jar_binding_is_scoped() -> None:
    outer = InMemoryCookieJar(host="a.example.com")
    inner = InMemoryCookieJar(host="b.example.org")
    outer_token = set_cookie_jar(outer)
    try:
        inner_token = set_cookie_jar(inner)
        CustomerToken.revoke()
        reset_cookie_jar(inner_token)
        CustomerToken.revoke()
    finally:
        reset_cookie_jar(outer_token)

    assert inner.last(COOKIE).domain == "example.org"
    assert outer.last(COOKIE).domain == "example.com"


def test_cookie_expiry_matches_signed_expiry(cookie_jar, monkeypatch) -> None:
    ticks = iter(range(1_700_000_000, 1_700_000_100))
    monkeypatch.setattr(clock, "now", lambda: next(ticks))

    CustomerToken.issue("c-1", SECRET, ttl=3600)

    record = cookie_jar.last(COOKIE)
    payload = CustomerToken(SECRET).parse(record.value).get_payload()
    assert record.expires == payload["expires_at"]


def test_get_customer_returns_a_copy(frozen_clock) -> None:
    token = CustomerToken(SECRET).set_customer({"id": 1, "tags": ["vip"]})
    before = token.get_token()

    token.get_customer()["tags"].append("mutated")

    assert token.get_customer() == {"id": 1, "tags": ["vip"]}
    assert token.get_token() == before
