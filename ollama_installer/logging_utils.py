from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

_FILE_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


class ConsoleFormatter(logging.Formatter):
    """Operator-facing output: `>>> status`, `WARNING: ...`, `ERROR ...`."""

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if record.levelno >= logging.ERROR:
            return f"ERROR {msg}"
        if record.levelno >= logging.WARNING:
            return f"WARNING: {msg}"
        if record.levelno <= logging.DEBUG:
            return f"    {msg}"
        return f">>> {msg}"


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging.

    Console output goes to stderr. When log_path is given, a file log with
    timestamps is added; if that path is not writable we fall back to a file
    in the working directory.

    Returns the actual file path being used, or None for console only.
    """

    logger = logging.getLogger()
    logger.setLevel(min(level, logging.DEBUG) if log_path else level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_ollama_installer_configured", False):
        return getattr(logger, "_ollama_installer_log_path", log_path)

    chosen_path: Optional[str] = None
    handlers: list[logging.Handler] = []

    if log_path:
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler: logging.Handler = logging.FileHandler(log_path)
            chosen_path = log_path
        except OSError:
            fallback = str(Path.cwd() / "ollama-install.log")
            file_handler = logging.FileHandler(fallback)
            chosen_path = fallback
        file_handler.setFormatter(_FILE_FORMAT)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(ConsoleFormatter())
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_ollama_installer_configured", True)
    setattr(logger, "_ollama_installer_log_path", chosen_path)

    if chosen_path:
        logging.getLogger(__name__).debug("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path
