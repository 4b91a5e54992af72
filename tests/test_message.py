import json

import pytest

from wsecho.message import (
    REPLY_KEY,
    REPLY_VALUE,
    MessageDecodeError,
    apply_reply,
    decode_message,
    encode_message,
)


def test_decode_flat_object():
    assert decode_message('{"text": "hi", "user": "bob"}') == {"text": "hi", "user": "bob"}


def test_decode_accepts_bytes():
    assert decode_message(b'{"a": "b"}') == {"a": "b"}


def test_decode_empty_object():
    assert decode_message("{}") == {}


@pytest.mark.parametrize("frame", [
    "not json",
    "",
    "[]",
    '"text"',
    "null",
    '{"n": 1}',
    '{"flag": true}',
    '{"nested": {"a": "b"}}',
    '{"missing": null}',
    '{"text": "hi"',
])
def test_decode_rejects_non_string_maps(frame):
    with pytest.raises(MessageDecodeError):
        decode_message(frame)


def test_apply_reply_adds_field():
    msg = {"text": "hi"}
    assert apply_reply(msg) == {"text": "hi", "reply": "Message received"}


def test_apply_reply_overwrites_existing():
    msg = apply_reply({"reply": "old", "x": "y"})
    assert msg[REPLY_KEY] == REPLY_VALUE
    assert msg["x"] == "y"
    assert len(msg) == 2


def test_encode_is_json_object():
    out = encode_message(apply_reply({"text": "héllo"}))
    assert json.loads(out) == {"text": "héllo", "reply": "Message received"}
