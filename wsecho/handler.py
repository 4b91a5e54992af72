"""
Per-connection echo loop.

One EchoHandler owns one accepted WebSocket. It reads a frame, decodes it as a
string-to-string mapping, sets the reply field and writes the mapping back,
until a read, decode or write failure, a peer close, or the idle timeout ends
the connection. The socket is closed on every exit path.
"""

import asyncio
import uuid
from typing import Optional, Union

from fastapi import WebSocketDisconnect

from wsecho.logger import get_connection_logger
from wsecho.message import MessageDecodeError, apply_reply, decode_message, encode_message

OPEN = "open"
CLOSED = "closed"

CLOSE_GOING_AWAY = 1001
CLOSE_INVALID_PAYLOAD = 1007
CLOSE_INTERNAL_ERROR = 1011


def peer_address(ws) -> str:
    client = getattr(ws, "client", None)
    if not client:
        return "unknown"
    return f"{client[0]}:{client[1]}"


class EchoHandler:
    def __init__(self, ws, read_timeout: Optional[float] = None, logger=None):
        self.ws = ws
        self.read_timeout = read_timeout
        self.conn_id = uuid.uuid4().hex[:8]
        self.logger = logger or get_connection_logger(self.conn_id, peer_address(ws))
        self.state = OPEN
        self.received = 0
        self.sent = 0
        self.close_reason: Optional[str] = None
        # None means the peer is already gone and there is nothing to close
        self._close_code: Optional[int] = None

    async def run(self) -> Optional[str]:
        try:
            await self._loop()
        finally:
            await self._release()
        return self.close_reason

    async def _read_frame(self) -> Union[str, bytes]:
        msg = await asyncio.wait_for(self.ws.receive(), timeout=self.read_timeout)
        if msg["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(msg.get("code", 1000))
        if msg.get("text") is not None:
            return msg["text"]
        return msg.get("bytes") or b""

    def _end(self, reason: str, code: Optional[int]):
        self.close_reason = reason
        self._close_code = code

    async def _loop(self):
        while True:
            try:
                frame = await self._read_frame()
            except asyncio.TimeoutError:
                self.logger.info(f"No frame within {self.read_timeout}s, closing idle connection")
                self._end("idle timeout", CLOSE_GOING_AWAY)
                return
            except WebSocketDisconnect as e:
                self.logger.info(f"Peer closed connection (code={e.code})")
                self._end("peer closed", None)
                return
            except Exception as e:
                self.logger.warning(f"Error reading frame: {e}")
                self._end("read error", CLOSE_INTERNAL_ERROR)
                return

            self.received += 1
            try:
                msg = decode_message(frame)
            except MessageDecodeError as e:
                self.logger.warning(f"Error reading json: {e}")
                self._end("decode error", CLOSE_INVALID_PAYLOAD)
                return

            self.logger.debug(f"Received: {msg}")
            apply_reply(msg)
            try:
                await self.ws.send_text(encode_message(msg))
            except Exception as e:
                self.logger.warning(f"Error writing json: {e}")
                self._end("write error", CLOSE_INTERNAL_ERROR)
                return
            self.sent += 1

    async def _release(self):
        self.state = CLOSED
        if self.close_reason is None:
            # cancelled from outside, e.g. server shutdown
            self._end("shutdown", CLOSE_GOING_AWAY)
        if self._close_code is not None:
            try:
                await self.ws.close(code=self._close_code)
            except Exception as e:
                self.logger.debug(f"Close failed, peer already gone: {e}")
        self.logger.info(f"Connection closed ({self.close_reason}) received={self.received} sent={self.sent}")
