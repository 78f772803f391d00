"""
Logging configuration for the application.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger and quiets the HTTP client libraries, which
otherwise log every Sheets and GitHub request at ``INFO``.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

# Third‑party loggers that are only interesting at WARNING and above.
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "google.auth", "gspread")


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure the root logger once per process.

    ``level`` is a logging level name (case insensitive, unknown names
    fall back to ``INFO``).  ``logfile`` is resolved relative to the
    current working directory.  Loggers listed in ``quiet`` are capped
    at ``WARNING`` unless the root level is ``DEBUG``.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured, e.g. by uvicorn or a repeated create_app().
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if numeric_level > logging.DEBUG:
        for name in quiet:
            logging.getLogger(name).setLevel(logging.WARNING)
