"""
Wire codec for echo messages.

A message is a flat JSON object whose values are all strings. Anything else
(malformed JSON, arrays, null, nested objects, numbers) is a decode failure.
"""

import json
from typing import Dict, Union

from pydantic import StrictStr, TypeAdapter, ValidationError

REPLY_KEY = "reply"
REPLY_VALUE = "Message received"

Message = Dict[str, str]

_MESSAGE_ADAPTER = TypeAdapter(Dict[str, StrictStr])


class MessageDecodeError(ValueError):
    pass


def decode_message(frame: Union[str, bytes]) -> Message:
    try:
        return _MESSAGE_ADAPTER.validate_json(frame)
    except ValidationError as e:
        errs = e.errors()
        first = errs[0]["msg"] if errs else str(e)
        raise MessageDecodeError(f"invalid message ({len(errs)} error(s)): {first}") from e


def apply_reply(msg: Message) -> Message:
    # overwrite, never merge
    msg[REPLY_KEY] = REPLY_VALUE
    return msg


def encode_message(msg: Message) -> str:
    return json.dumps(msg)
