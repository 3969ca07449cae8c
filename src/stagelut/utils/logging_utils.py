from __future__ import annotations

import logging
from pathlib import Path
import sys


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Pillow logs every PNG chunk it parses at DEBUG.
_NOISY_LOGGERS = ("PIL",)


def resolve_level(level: str | int) -> int | None:
    """Map a level name or number to a logging level, or None if it is not one."""

    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else None


def configure_logging(level: str | int, log_file: Path | None = None) -> int:
    """Route stagelut logs to stderr (and ``log_file``) and return the level used.

    Diagnostics stay off stdout so ``build --json`` output can be piped.
    """

    resolved_level = resolve_level(level)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=resolved_level if resolved_level is not None else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    effective = logging.getLogger().level
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(effective, logging.INFO))

    if resolved_level is None:
        logging.getLogger(__name__).warning("unknown log level %r; using INFO", level)
    return effective
