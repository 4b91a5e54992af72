import json
import os
import subprocess
import sys
import time

import pytest
import requests
from websockets.exceptions import ConnectionClosed
from websockets.sync.client import connect

ROOT = os.path.join(os.path.dirname(__file__), "..")
PORT = 18080


@pytest.fixture(scope="module")
def live_server():
    env = dict(os.environ, WSECHO_IDLE_TIMEOUT="10")
    api = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "wsecho.asgi:app", "--port", str(PORT)],
        cwd=ROOT, env=env,
    )
    time.sleep(1.5)
    try:
        yield f"127.0.0.1:{PORT}"
    finally:
        api.terminate(); api.wait()


def test_healthz(live_server):
    r = requests.get(f"http://{live_server}/api/healthz", timeout=5)
    assert r.status_code == 200
    assert r.json()["name"] == "wsecho"


def test_echo_over_tcp(live_server):
    with connect(f"ws://{live_server}/ws", open_timeout=5) as ws:
        ws.send(json.dumps({"text": "hi"}))
        assert json.loads(ws.recv(timeout=5)) == {"text": "hi", "reply": "Message received"}


def test_malformed_frame_over_tcp(live_server):
    with connect(f"ws://{live_server}/ws", open_timeout=5) as ws:
        ws.send("{oops")
        with pytest.raises(ConnectionClosed):
            ws.recv(timeout=5)

    # server keeps serving
    with connect(f"ws://{live_server}/ws", open_timeout=5) as ws:
        ws.send("{}")
        assert json.loads(ws.recv(timeout=5)) == {"reply": "Message received"}
