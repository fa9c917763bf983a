# infra/logging_config.py
"""
Logging for the audit app: console plus a rotating file (ga4audit.log).

Browser automation and HTTP libraries are capped at WARNING so a website scan
does not flood the app log with per-request lines.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FILE = "ga4audit.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_NOISY_LOGGERS = ("playwright", "asyncio", "urllib3", "watchdog")

# marks handlers installed here so reruns can find them
_HANDLER_TAG = "_ga4audit_handler"


def configure_logging(level_name: str = "INFO", log_dir: Optional[Union[str, Path]] = None) -> Path:
    """
    Install the console + file handlers on the root logger (once per process)
    and apply `level_name`. Returns the log file path.

    Streamlit re-executes the app script on every interaction, so repeated
    calls only update levels.
    """
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    directory = Path(log_dir).expanduser() if log_dir else Path.cwd() / "logs"
    log_path = directory / LOG_FILE

    root = logging.getLogger()
    root.setLevel(level)

    ours = [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]
    if not ours:
        directory.mkdir(parents=True, exist_ok=True)
        fmt = logging.Formatter(LOG_FORMAT)

        console = logging.StreamHandler()
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        for h in (console, file_handler):
            h.setFormatter(fmt)
            setattr(h, _HANDLER_TAG, True)
            root.addHandler(h)
        ours = [console, file_handler]

    for h in ours:
        h.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return log_path
