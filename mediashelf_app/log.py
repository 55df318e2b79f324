import os
import sys
import json
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from flask import g, has_request_context

# Package logger: every module logger (logging.getLogger(__name__)) propagates here
logger = logging.getLogger("mediashelf_app")
logger.setLevel(logging.INFO)

debug_logger = logging.getLogger("mediashelf_app.debug")
debug_logger.setLevel(logging.INFO)
debug_logger.propagate = False
debug_logger.disabled = True

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


def configure_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> None:
    """
    Attach file and stdout handlers to the package logger.

    Safe to call more than once (handlers are only added once per file).
    The structured debug log is enabled with DEBUG_LOGGING (default: on).
    """
    log_dir = log_dir or os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'instance')
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'mediashelf.log')
    debug_file = os.path.join(log_dir, 'debug.log')

    logger.setLevel(level)

    if not any(getattr(h, "baseFilename", None) == log_file for h in logger.handlers):
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logger.addHandler(file_handler)

    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
               for h in logger.handlers):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(logging.Formatter('%(levelname)s %(message)s'))
        logger.addHandler(stream_handler)

    if not any(getattr(h, "baseFilename", None) == debug_file for h in debug_logger.handlers):
        debug_handler = RotatingFileHandler(debug_file, maxBytes=10 * 1024 * 1024, backupCount=10)
        debug_handler.setFormatter(logging.Formatter('%(message)s'))
        debug_logger.addHandler(debug_handler)
    debug_logger.disabled = not _env_flag('DEBUG_LOGGING', 'true')


def request_id() -> Optional[str]:
    """Return the current Flask request id, if any."""
    if not has_request_context():
        return None
    return getattr(g, "request_id", None)


def log(msg: str) -> None:
    """Log an info message, prefixed with the request id when available."""
    rid = request_id()
    logger.info(f"[{rid}] {msg}" if rid else msg)


def debug_log_event(event: dict) -> None:
    """Write one structured debug event as a compact JSON line."""
    if debug_logger.disabled:
        return
    payload = dict(event)
    payload.setdefault('request_id', request_id())
    try:
        debug_logger.info(json.dumps(payload, ensure_ascii=True, separators=(',', ':'), default=str))
    except (TypeError, ValueError) as exc:
        logger.warning(f"Debug log failure: {exc}")
