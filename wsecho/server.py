# wsecho/server.py
"""
wsecho FastAPI app

- WebSocket echo at /ws (configurable): every JSON object received is sent
  back with "reply": "Message received"
- GET /            browser test page
- GET /api/healthz liveness
- GET /api/version
- Origin policy from WSECHO_ALLOWED_ORIGINS (default "*"), or injected
- Idle read timeout from WSECHO_IDLE_TIMEOUT
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from wsecho.config import Settings, VERSION
from wsecho.handler import EchoHandler, peer_address
from wsecho.logger import get_logger
from wsecho.origin import OriginCheck, OriginPolicy

CLOSE_POLICY_VIOLATION = 1008

_INDEX_PAGE = os.path.join(os.path.dirname(__file__), "static", "index.html")


def _index_html(ws_path: str) -> str:
    with open(_INDEX_PAGE, "r", encoding="utf-8") as fh:
        return fh.read().replace("{{WS_PATH}}", ws_path)


def create_app(settings: Optional[Settings] = None, origin_check: Optional[OriginCheck] = None,
               logger: Optional[logging.Logger] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    check = origin_check or OriginPolicy.from_list(settings.allowed_origins)
    logger = logger or get_logger(settings.log_level, settings.log_dir)
    index_page = _index_html(settings.ws_path)

    # --------------------------------------------------------------------------
    # App setup
    # --------------------------------------------------------------------------
    app = FastAPI(title="wsecho", version=VERSION)
    app.state.settings = settings
    app.state.origin_check = check

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------------------------
    # Test page, health, version
    # --------------------------------------------------------------------------
    @app.get("/", include_in_schema=False)
    async def index():
        return HTMLResponse(index_page)

    @app.get("/api/healthz", include_in_schema=False)
    async def healthz():
        return {"ok": True, "name": "wsecho", "version": VERSION}

    @app.get("/api/version")
    async def version():
        return {"tool": "wsecho", "version": VERSION}

    # --------------------------------------------------------------------------
    # WebSocket echo
    # --------------------------------------------------------------------------
    @app.websocket(settings.ws_path)
    async def websocket_echo(ws: WebSocket):
        origin = ws.headers.get("origin")
        if not check(origin):
            # refusing before accept answers the upgrade with 403
            logger.warning(f"Rejected upgrade from {peer_address(ws)}: origin {origin!r} not allowed")
            await ws.close(code=CLOSE_POLICY_VIOLATION)
            return

        await ws.accept()
        handler = EchoHandler(ws, read_timeout=settings.read_timeout)
        handler.logger.info("Connection opened")
        await handler.run()

    return app
