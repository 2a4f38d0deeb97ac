# sweetbloom/config/logging_config.py

"""Logging for the two ways SweetBloom runs.

Every launch writes a per-run file, ``run_YYYYmmdd_HHMMSS.log``, under
``Settings.LOGS_DIR`` (``SWEETBLOOM_LOG_DIR``).  What reaches the terminal
depends on the mode:

* TUI: nothing.  Textual owns the screen, and a stray stderr line would
  tear the layout, so records only go to the file.
* headless CLI: records at ``Settings.CONSOLE_LOG_LEVEL`` and above are
  echoed on stderr next to the command's own status lines; stdout stays
  free for JSON.

The file threshold is ``Settings.LOG_LEVEL`` (``SWEETBLOOM_LOG_LEVEL``).
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from sweetbloom.config.settings import Settings

ROOT_LOGGER = "sweetbloom"

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(name: str, default: int) -> int:
    """Map a level name such as ``"info"`` to its number.

    Unknown names give *default*.
    """
    return logging.getLevelNamesMapping().get(name.strip().upper(), default)


def _current_log_file(root_logger: logging.Logger) -> Path | None:
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(headless: bool = False) -> Path:
    """Configure the ``sweetbloom`` logger for this run.

    Args:
        headless: True for CLI commands, which echo to stderr; False for
            the TUI, which logs to the file only.

    Returns:
        The log file this run writes to.  A second call keeps the handlers
        of the first and returns its file.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    existing = _current_log_file(root_logger)
    if existing is not None:
        return existing

    file_level = resolve_level(Settings.LOG_LEVEL, logging.DEBUG)
    root_logger.setLevel(file_level)

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )
    root_logger.addHandler(file_handler)

    if headless:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(
            resolve_level(Settings.CONSOLE_LOG_LEVEL, logging.WARNING)
        )
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    root_logger.info(
        "Logging initialised (%s mode), log file: %s",
        "cli" if headless else "tui",
        log_file,
    )
    return log_file
