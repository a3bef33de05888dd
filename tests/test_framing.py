"""Tests for envelope encoding and reply decoding."""

import json

from exasol_ws_mcp.protocol.framing import Frame, build_frame, parse_frame


def test_build_frame_is_compact_json():
    """Frames are JSON objects without padding whitespace."""
    text = build_frame({"command": "execute", "sqlText": "SELECT 1"})
    assert text == '{"command":"execute","sqlText":"SELECT 1"}'


def test_build_frame_stringifies_unknown_types():
    """Values json cannot encode natively are sent as strings."""
    from decimal import Decimal

    text = build_frame({"data": [[Decimal("1.50")]]})
    assert json.loads(text) == {"data": [["1.50"]]}


def test_parse_ok_frame():
    """An ok reply exposes its responseData."""
    frame = parse_frame('{"status":"ok","responseData":{"sessionId":1}}')
    assert frame is not None
    assert frame.ok
    assert frame.response_data == {"sessionId": 1}
    assert frame.exception is None


def test_parse_error_frame():
    """An error reply exposes text and sqlCode."""
    frame = parse_frame(json.dumps({
        "status": "error",
        "exception": {"text": "syntax error", "sqlCode": "42000"},
    }))
    assert frame is not None
    assert not frame.ok
    assert frame.error_text == "syntax error"
    assert frame.sql_code == "42000"


def test_parse_error_without_exception():
    """A failing status without details still yields a message."""
    frame = parse_frame('{"status":"error"}')
    assert frame is not None
    assert "error" in frame.error_text
    assert frame.sql_code is None


def test_parse_bytes():
    """Binary frames holding UTF-8 JSON decode too."""
    frame = parse_frame(b'{"status":"ok"}')
    assert frame is not None and frame.ok


def test_parse_rejects_garbage():
    """Non-JSON, non-objects and missing status return None."""
    assert parse_frame("not json") is None
    assert parse_frame("[1, 2]") is None
    assert parse_frame('{"responseData": {}}') is None
    assert parse_frame(b"\xff\xfe") is None
    assert parse_frame('{"status":"ok","responseData":[1]}') is None


def test_frame_repr():
    """Frame repr lists the payload keys."""
    r = repr(Frame(status="ok", response_data={"b": 1, "a": 2}))
    assert "a, b" in r
