import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOGGER_NAME = "wsecho"
LOG_FILE = "wsecho.log"
_FMT = "%(asctime)s %(levelname)s: %(message)s"


def get_logger(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    fmt = logging.Formatter(_FMT)
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        logger.addHandler(ch)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.abspath(os.path.join(log_dir, LOG_FILE))
        # one file handler per path, even when called again with the same dir
        if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == log_path for h in logger.handlers):
            fh = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
            fh.setFormatter(fmt)
            logger.addHandler(fh)
    return logger


class ConnectionLogger(logging.LoggerAdapter):
    """Prefixes every record with the connection id and peer address."""

    def process(self, msg, kwargs):
        return f"[{self.extra['conn_id']} {self.extra['peer']}] {msg}", kwargs


def get_connection_logger(conn_id: str, peer: str) -> ConnectionLogger:
    return ConnectionLogger(logging.getLogger(LOGGER_NAME), {"conn_id": conn_id, "peer": peer})
