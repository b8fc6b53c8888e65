import signal

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from opsdemo import web


def make_request(path: str, raw_path: bytes | None, query: bytes = b"") -> Request:
    scope = {"type": "http", "method": "GET", "path": path, "query_string": query, "headers": []}
    if raw_path is not None:
        scope["raw_path"] = raw_path
    return Request(scope)


def test_raw_path_keeps_encoding():
    assert web.raw_path(make_request("/foo?bar", b"/foo%3Fbar")) == "/foo%3Fbar"


def test_raw_path_falls_back_to_decoded_path():
    assert web.raw_path(make_request("/a b", None)) == "/a b"


def test_raw_target_appends_query():
    assert web.raw_target(make_request("/x", b"/x", b"a=1&b=%20")) == "/x?a=1&b=%20"
    assert web.raw_target(make_request("/x", b"/x")) == "/x"


def test_no_query_rejects_query_string():
    web.no_query(make_request("/health", b"/health"))
    with pytest.raises(HTTPException) as exc:
        web.no_query(make_request("/health", b"/health", b"x=1"))
    assert exc.value.status_code == 404


def test_termination_signal_exits_zero():
    with pytest.raises(SystemExit) as exc:
        web._exit_cleanly(signal.SIGTERM, None)
    assert exc.value.code == 0
