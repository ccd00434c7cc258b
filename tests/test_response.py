"""Tests for charon.http.response — Response chaining."""

import pytest

from charon.http.response import JSON_CONTENT_TYPE, Response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == b""
        assert r.status == 200
        assert r.content_type == JSON_CONTENT_TYPE
        assert r.headers == ()

    def test_chaining_returns_new_objects(self) -> None:
        r1 = Response(b"{}")
        r2 = r1.with_status(201)
        r3 = r2.with_header("X-Request-Id", "abc")

        assert r1.status == 200
        assert r2.status == 201
        assert r2.headers == ()
        assert r3.headers == (("X-Request-Id", "abc"),)

    def test_with_headers_dict(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"})
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/plain").content_type == "text/plain"

    def test_get_header_case_insensitive(self) -> None:
        r = Response().with_header("X-Trace", "t1")
        assert r.get_header("x-trace") == "t1"
        assert r.get_header("missing", "none") == "none"

    def test_body_conversions(self) -> None:
        assert Response("café").body_bytes == "café".encode()
        assert Response("café".encode()).text == "café"

    def test_json(self) -> None:
        assert Response(b'{"id":1}').json() == {"id": 1}

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]
