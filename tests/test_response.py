"""Tests for perch.http.response — Response chaining and Body."""

import pytest

from perch.http.response import Body, Response


class TestBody:
    def test_write_appends(self) -> None:
        body = Body("Hello")
        assert body.write(", World") == 7
        assert body.getvalue() == b"Hello, World"
        assert len(body) == 12

    def test_bytes_content(self) -> None:
        assert Body(b"\xc3\xa9").getvalue().decode("utf-8") == "é"

    def test_read_only(self) -> None:
        body = Body("fixed", writable=False)
        assert not body.writable
        with pytest.raises(OSError):
            body.write("more")
        assert body.getvalue() == b"fixed"


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.status == 200
        assert r.headers == ()
        assert r.text == ""
        assert r.content_type == "text/html; charset=utf-8"
        assert r.protocol_version == "1.1"
        assert r.body.writable

    def test_of(self) -> None:
        r = Response.of("hi", status=201)
        assert r.status == 201
        assert r.text == "hi"

    def test_with_status(self) -> None:
        assert Response().with_status(404).status == 404

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_headers({"B": "2"})
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_header_lookup(self) -> None:
        r = Response().with_header("Location", "/x")
        assert r.header("location") == "/x"
        assert r.header("x-missing") is None
        assert r.header("x-missing", "d") == "d"

    def test_with_protocol_version(self) -> None:
        assert Response().with_protocol_version("2").protocol_version == "2"

    def test_chaining_returns_new_objects(self) -> None:
        r1 = Response()
        r2 = r1.with_status(201)
        assert r1 is not r2
        assert r1.status == 200

    def test_chaining_shares_body(self) -> None:
        r1 = Response()
        r2 = r1.with_header("A", "1")
        r1.body.write("shared")
        assert r2.text == "shared"

    def test_with_body_replaces(self) -> None:
        r1 = Response.of("old")
        r2 = r1.with_body("new")
        assert r2.text == "new"
        assert r1.text == "old"
