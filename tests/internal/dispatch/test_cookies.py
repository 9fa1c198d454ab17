"""Tests for cookie restoration."""

import json

import httpx
import pytest

from insta_sdk._internal.dispatch.cookies import (
    COOKIE_URL,
    dump_cookie,
    load_cookie,
    restore_cookies,
)
from insta_sdk.exceptions import InvalidURLError


def blob(**fields) -> bytes:
    return json.dumps(fields).encode("utf-8")


class TestLoadCookie:
    """Tests for load_cookie()."""

    def test_full_record(self):
        """Should map every record field onto the cookie."""
        cookie = load_cookie(
            blob(
                name="sessionid",
                value="abc",
                domain=".instagram.com",
                path="/",
                expires=4102444800,
                secure=True,
                http_only=True,
            ),
            default_domain="www.instagram.com",
        )
        assert cookie.name == "sessionid"
        assert cookie.value == "abc"
        assert cookie.domain == ".instagram.com"
        assert cookie.domain_initial_dot is True
        assert cookie.expires == 4102444800
        assert cookie.discard is False
        assert cookie.secure is True
        assert cookie.has_nonstandard_attr("HttpOnly")

    def test_default_domain(self):
        """Should fall back to the default domain."""
        cookie = load_cookie(blob(name="csrftoken", value="x"), default_domain="www.instagram.com")
        assert cookie.domain == "www.instagram.com"
        assert cookie.domain_specified is False
        assert cookie.discard is True

    @pytest.mark.parametrize(
        "data",
        [b"", b"not json", b"[]", blob(value="missing name"), blob(name="", value="x")],
    )
    def test_malformed(self, data):
        """Should return None for anything that is not a cookie record."""
        assert load_cookie(data, default_domain="www.instagram.com") is None


class TestDumpCookie:
    """Tests for dump_cookie()."""

    def test_restores_what_it_dumps(self):
        """Should produce blobs load_cookie accepts."""
        original = load_cookie(
            blob(name="ds_user_id", value="123", domain=".instagram.com", http_only=True),
            default_domain="www.instagram.com",
        )
        restored = load_cookie(dump_cookie(original), default_domain="other.example")
        assert restored.name == "ds_user_id"
        assert restored.value == "123"
        assert restored.domain == ".instagram.com"
        assert restored.has_nonstandard_attr("HttpOnly")

    def test_omits_empty_fields(self):
        """Should not serialize missing optional fields."""
        cookie = load_cookie(blob(name="a", value="b"), default_domain="www.instagram.com")
        assert "expires" not in json.loads(dump_cookie(cookie))


class TestRestoreCookies:
    """Tests for restore_cookies()."""

    def test_skips_malformed(self):
        """Should install the two valid cookies out of three."""
        store = httpx.Cookies()
        blobs = [
            blob(name="sessionid", value="abc", domain=".instagram.com"),
            b"{broken",
            blob(name="csrftoken", value="xyz", domain=".instagram.com"),
        ]

        installed = restore_cookies(blobs, store)

        assert installed == 2
        assert len(store.jar) == 2
        assert store.get("sessionid") == "abc"
        assert store.get("csrftoken") == "xyz"

    def test_default_url_host(self):
        """Should scope domainless cookies to the restore URL host."""
        store = httpx.Cookies()
        restore_cookies([blob(name="mid", value="m")], store)
        assert store.get("mid", domain=httpx.URL(COOKIE_URL).host) == "m"

    def test_invalid_url_installs_nothing(self):
        """Should fail before installing anything when the URL is invalid."""
        store = httpx.Cookies()
        with pytest.raises(InvalidURLError):
            restore_cookies([blob(name="a", value="b")], store, url="not a url")
        assert len(store.jar) == 0

    def test_isolated_stores(self):
        """Should only touch the store it is given."""
        first, second = httpx.Cookies(), httpx.Cookies()
        restore_cookies([blob(name="a", value="b")], first)
        assert len(second.jar) == 0

    def test_logs_skipped(self):
        """Should report skipped blobs to the logger."""
        messages = []
        restore_cookies([b"nope"], httpx.Cookies(), log=messages.append)
        assert messages == ["Skipping malformed cookie record #0"]

    def test_cookies_sent_with_requests(self):
        """Should make restored cookies visible to matching requests."""
        store = httpx.Cookies()
        restore_cookies([blob(name="sessionid", value="abc", domain=".instagram.com")], store)
        request = httpx.Request("GET", "https://i.instagram.com/api/v1/")
        store.set_cookie_header(request)
        assert request.headers["cookie"] == "sessionid=abc"
