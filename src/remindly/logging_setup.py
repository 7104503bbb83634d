# src/remindly/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console rules: remindly logs pass, the offline cache only from WARNING
    (it logs every asset). plyer passes from WARNING, e.g. "no usable
    notification backend". HTTP clients and everything else need ERROR.
    """

    _QUIET_APP = ("remindly.offline",)
    _WARN_THIRD_PARTY = ("plyer",)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "remindly" or name.startswith("remindly."):
            if name.startswith(self._QUIET_APP):
                return record.levelno >= logging.WARNING
            return True

        if name.split(".", 1)[0] in self._WARN_THIRD_PARTY:
            return record.levelno >= logging.WARNING

        return record.levelno >= logging.ERROR


LOG_FILE_NAME = "remindly.log"

_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s [%(threadName)s]: %(message)s"


def setup_logging(
    *,
    log_dir: str | Path = ".local/remindly",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Filtered short-format stderr handler plus a full DEBUG log at
    <log_dir>/remindly.log. Call once, before the first log line.
    Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    # threadName separates the console input reader from the event loop
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(file_handler)

    # warnings.warn(...) arrives as "py.warnings" and is filtered like third-party noise
    logging.captureWarnings(True)
    return log_file
