#!/usr/bin/env python3
import asyncio
import json
import sys

import websockets

URI = "ws://localhost:8080/ws"


async def send_messages(uri: str, texts):
    async with websockets.connect(uri) as ws:
        print(f"[client] Connected to {uri}")
        for text in texts:
            msg = {"text": text}
            await ws.send(json.dumps(msg))
            print(f"[client] -> {msg}")
            reply = json.loads(await ws.recv())
            print(f"[client] <- {reply}")


if __name__ == "__main__":
    uri = sys.argv[1] if len(sys.argv) > 1 else URI
    texts = sys.argv[2:] or ["hello world"]
    try:
        asyncio.run(send_messages(uri, texts))
    except KeyboardInterrupt:
        print("\n[client] Exiting")
