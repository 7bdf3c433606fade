"""Diagnostic log sink for pipeline events.

Every module logs through ``logging.getLogger(__name__)``, so all records
flow up to the ``suggest_analyzer`` package logger.  Attaching a file
handler there gives an append-only, timestamped record of fetch results,
per-candidate volumes, retries and failures without redirecting the
process-wide console.
"""

import logging
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER_NAME = "suggest_analyzer"
DEFAULT_DIAGNOSTIC_LOG = "analyzer_debug.log"

_FORMAT = "%(asctime)s - %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

_handler: Optional[logging.FileHandler] = None


def attach_diagnostic_log(
    path: str | Path = DEFAULT_DIAGNOSTIC_LOG,
    level: int = logging.DEBUG,
) -> logging.FileHandler:
    """Append pipeline diagnostics to ``path``.

    Calling again with the same path returns the existing handler; a
    different path replaces it.
    """
    global _handler
    resolved = str(Path(path).resolve())
    if _handler is not None:
        if _handler.baseFilename == resolved:
            return _handler
        detach_diagnostic_log()

    Path(resolved).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(resolved, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))

    pkg_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    pkg_logger.addHandler(handler)
    if pkg_logger.level == logging.NOTSET or pkg_logger.level > level:
        pkg_logger.setLevel(level)
    _handler = handler
    return handler


def detach_diagnostic_log() -> None:
    """Remove and close the diagnostic file handler, if attached."""
    global _handler
    if _handler is None:
        return
    logging.getLogger(PACKAGE_LOGGER_NAME).removeHandler(_handler)
    _handler.close()
    _handler = None
