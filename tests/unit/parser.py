from __future__ import annotations

import json

import pytest

from recitation.handlers.websocket.parser import parse_client_message


def test_parse_client_message_ok() -> None:
    raw = json.dumps({
        "type": "utterance",
        "session_id": "s1",
        "request_id": "r1",
        "payload": {"transcript": "bismillah"},
    })
    msg = parse_client_message(raw)
    assert msg["type"] == "utterance"
    assert msg["session_id"] == "s1"
    assert msg["request_id"] == "r1"
    assert msg["payload"]["transcript"] == "bismillah"


def test_parse_client_message_defaults_missing_ids() -> None:
    msg = parse_client_message(json.dumps({"type": "ping"}))
    assert msg["session_id"] == "unknown"
    assert msg["request_id"] == "unknown"
    assert msg["payload"] == {}


def test_parse_client_message_null_payload_is_empty() -> None:
    msg = parse_client_message(json.dumps({"type": "end", "payload": None}))
    assert msg["payload"] == {}


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps([]),
        json.dumps({"session_id": "s", "request_id": "r", "payload": {}}),
        json.dumps({"type": "  ", "payload": {}}),
        json.dumps({"type": "ping", "session_id": "", "payload": {}}),
        json.dumps({"type": "ping", "request_id": 7, "payload": {}}),
        json.dumps({"type": "ping", "session_id": "s", "request_id": "r", "payload": []}),
    ],
)
def test_parse_client_message_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_client_message(raw)
