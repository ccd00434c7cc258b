"""Tests for charon.http.headers — immutable, case-insensitive Headers."""

import pytest

from charon.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "application/json"))
        assert h["content-type"] == "application/json"
        assert h["CONTENT-TYPE"] == "application/json"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "Accept" in h
        assert "x-missing" not in h
        assert 42 not in h  # type: ignore[operator]

    def test_len_deduplicates(self) -> None:
        h = _h(("X-Tag", "a"), ("X-Tag", "b"), ("Accept", "*/*"))
        assert len(h) == 2
        assert list(h) == ["x-tag", "accept"]

    def test_get_with_default(self) -> None:
        h = _h(("Accept", "*/*"))
        assert h.get("accept") == "*/*"
        assert h.get("x-missing") is None
        assert h.get("x-missing", "fallback") == "fallback"

    def test_get_list_keeps_order(self) -> None:
        h = _h(("X-Tag", "a"), ("Accept", "*/*"), ("X-Tag", "b"))
        assert h.get_list("x-tag") == ["a", "b"]
        assert h.get_list("X-Missing") == []

    def test_raw_property(self) -> None:
        raw = ((b"a", b"1"),)
        assert Headers(raw).raw is raw

    def test_repr(self) -> None:
        assert repr(_h(("Accept", "*/*"))) == "Headers({'accept': ['*/*']})"


class TestFromPairs:
    def test_lowercases_names(self) -> None:
        h = Headers.from_pairs({"Authorization": "Basic abc"})
        assert h.raw == ((b"authorization", b"Basic abc"),)
        assert h["authorization"] == "Basic abc"

    def test_empty(self) -> None:
        assert len(Headers.from_pairs()) == 0
