# src/tasktrack/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Minimum level at which a third-party logger reaches the console.
# Longest matching prefix wins; anything unlisted needs ERROR.
_CONSOLE_FLOORS: dict[str, int] = {
    "py.warnings": logging.ERROR,
    # pool warnings (invalidated or overflowing connections) are worth seeing
    "sqlalchemy.pool": logging.WARNING,
    "sqlalchemy": logging.ERROR,
    "bcrypt": logging.ERROR,
}


def _console_floor(name: str) -> int:
    best, best_len = logging.ERROR, -1
    for prefix, level in _CONSOLE_FLOORS.items():
        if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > best_len:
            best, best_len = level, len(prefix)
    return best


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive menu readable:
    - allow tasktrack logs (the handler level still applies)
    - everything else only at or above its floor in _CONSOLE_FLOORS
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "tasktrack" or name.startswith("tasktrack."):
            return True

        return record.levelno >= _console_floor(name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasktrack",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure logging with:
    - Console handler: filtered, WARNING by default so it does not interleave with menus
    - File handler: tasktrack logs at `file_level`; SQL echo stays off

    Call this ONCE, very early (before first logger.info). Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tasktrack.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # SQL statements and result rows never reach the log file.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    logging.getLogger(__name__).debug("Logging ready file=%s", log_file)
    return log_file
