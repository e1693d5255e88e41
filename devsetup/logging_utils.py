from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Optional

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
NC = "\033[0m"

_LEVEL_TAGS = {
    logging.DEBUG: ("DEBUG", ""),
    logging.INFO: ("INFO", GREEN),
    logging.WARNING: ("WARN", YELLOW),
    logging.ERROR: ("ERROR", RED),
    logging.CRITICAL: ("ERROR", RED),
}


class LevelTagFormatter(logging.Formatter):
    """`[INFO] message` console lines, colored when the stream is a terminal."""

    def __init__(self, *, color: bool) -> None:
        super().__init__(fmt="%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        tag, color = _LEVEL_TAGS.get(record.levelno, (record.levelname, ""))
        msg = super().format(record)
        if self.color and color:
            return f"{color}[{tag}]{NC} {msg}"
        return f"[{tag}] {msg}"


def _stream_is_tty(stream: IO[str]) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
    stream: Optional[IO[str]] = None,
) -> str:
    """Configure logging.

    The log file gets full timestamped records; the console gets short
    leveled, colored lines. If the requested log file cannot be opened we fall
    back to ./devsetup.log.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_devsetup_configured", False):
        return getattr(logger, "_devsetup_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        chosen_path = str(Path.cwd() / "devsetup.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        out = stream if stream is not None else sys.stderr
        console = logging.StreamHandler(out)
        console.setFormatter(LevelTagFormatter(color=_stream_is_tty(out)))
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_devsetup_configured", True)
    setattr(logger, "_devsetup_log_path", chosen_path)

    logging.getLogger(__name__).debug("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path
