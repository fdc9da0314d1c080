import logging
import os
import sys
from logging.handlers import RotatingFileHandler

_configured = False

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


def setup_logging():
    """
    Configure the root logger once per process.

    Console output is on by default; the rotating log file is opt-in so a
    storefront session started from a terminal does not write under /data.
    """
    global _configured
    if _configured:
        return

    level = _level()
    log_to_stdout = os.getenv("LOG_TO_STDOUT", "true").lower() == "true"
    log_to_file = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    log_file = os.getenv("LOG_FILE", "data/storefront.log")
    log_max_bytes = int(os.getenv("LOG_MAX_BYTES", str(1024 * 1024)))
    log_backups = int(os.getenv("LOG_BACKUPS", "3"))

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # Avoid duplicate handlers
    if not root.handlers:
        if log_to_stdout:
            ch = logging.StreamHandler(sys.stdout)
            ch.setLevel(level)
            ch.setFormatter(formatter)
            root.addHandler(ch)

        if log_to_file:
            try:
                log_dir = os.path.dirname(log_file)
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
                fh = RotatingFileHandler(
                    log_file,
                    maxBytes=log_max_bytes,
                    backupCount=log_backups,
                )
                fh.setLevel(level)
                fh.setFormatter(formatter)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Failed to initialize file logging at %s: %s", log_file, e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
