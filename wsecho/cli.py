#!/usr/bin/env python3
import argparse
import sys

import uvicorn
from pydantic import ValidationError

from wsecho.config import Settings
from wsecho.logger import get_logger
from wsecho.server import create_app


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="wsecho", description="WebSocket JSON echo server")
    p.add_argument("--host", help="bind address (default 0.0.0.0)")
    p.add_argument("--port", type=int, help="TCP port (default 8080)")
    p.add_argument("--idle-timeout", type=float, help="seconds before an idle connection is closed; 0 = never")
    p.add_argument("--allowed-origin", action="append", dest="allowed_origins",
                   help="accepted Origin header, repeatable; '*' accepts all (default)")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    p.add_argument("--log-dir", help="also write a rotating log file here")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env(
            host=args.host,
            port=args.port,
            idle_timeout=args.idle_timeout,
            allowed_origins=args.allowed_origins,
            log_level=args.log_level,
            log_dir=args.log_dir,
        )
    except ValidationError as e:
        print(f"[wsecho] invalid configuration:\n{e}", file=sys.stderr)
        return 2

    logger = get_logger(settings.log_level, settings.log_dir)
    app = create_app(settings, logger=logger)
    logger.info(f"Server started on {settings.host}:{settings.port} (ws path {settings.ws_path})")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
