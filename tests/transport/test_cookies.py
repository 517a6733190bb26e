"""Tests for the per-session cookie store."""

import threading

from jsonrpc_session.transport.cookies import CookieStore

URL = "http://rpc.test/api"


def _set_cookie(*values: str) -> list[str]:
    return list(values)


class TestCookieStore:
    """Tests for CookieStore put/get/header_value."""

    def test_empty_store(self) -> None:
        store = CookieStore()

        assert store.get_cookies() == []
        assert store.header_value() == ""
        assert len(store) == 0

    def test_stores_cookies(self) -> None:
        store = CookieStore()
        store.put(URL, _set_cookie("session=abc", "lang=en"))

        assert {cookie.name: cookie.value for cookie in store.get_cookies()} == {
            "session": "abc",
            "lang": "en",
        }
        assert sorted(store.header_value().split("; ")) == ["lang=en", "session=abc"]

    def test_same_cookie_replaced(self) -> None:
        """A cookie with the same name, domain and path replaces the old value."""
        store = CookieStore()
        store.put(URL, _set_cookie("session=abc"))
        store.put(URL, _set_cookie("session=def"))

        assert store.header_value() == "session=def"
        assert len(store) == 1

    def test_expired_cookies_dropped(self) -> None:
        """Expired cookies are never returned."""
        store = CookieStore()
        store.put(URL, _set_cookie("session=abc"))
        store.put(URL, _set_cookie("session=gone; Max-Age=0"))

        assert store.get_cookies() == []

    def test_no_set_cookie_is_noop(self) -> None:
        store = CookieStore()
        store.put(URL, [])

        assert len(store) == 0

    def test_concurrent_puts(self) -> None:
        """Concurrent merges from many threads lose no cookies."""
        store = CookieStore()

        def put(index: int) -> None:
            store.put(URL, _set_cookie(f"c{index}=v{index}"))

        threads = [threading.Thread(target=put, args=(i,)) for i in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 20

    def test_cookie_for_other_domain_kept(self) -> None:
        """Cookies are stored whatever Domain they name."""
        store = CookieStore()
        store.put(URL, _set_cookie("sid=abc; Domain=api.example.com", "p=1; Path=/elsewhere"))

        assert sorted(store.header_value().split("; ")) == ["p=1", "sid=abc"]
        assert len(store) == 2
