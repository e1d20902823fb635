from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

from combo_skills.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLERS: List[logging.Handler] = []
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    level: str = "WARNING",
    log_path: Optional[Path] = None,
    verbose: bool = False,
) -> None:
    """Configure the ``combo_skills`` logger for CLI use.

    Installs a stderr handler (DEBUG when ``verbose``) and, when ``log_path``
    is given, a file handler. Calling it again replaces the handlers it
    installed before. Library code never calls this.
    """
    logger = logging.getLogger("combo_skills")
    _remove_installed(logger)

    effective = logging.DEBUG if verbose else _level_from_name(level)
    logger.setLevel(effective)
    fmt = logging.Formatter(LOG_FORMAT)

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(effective)
    stream.setFormatter(fmt)
    logger.addHandler(stream)
    _INSTALLED_HANDLERS.append(stream)

    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        fh = logging.FileHandler(resolved, encoding="utf-8")
        fh.setLevel(effective)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
        _INSTALLED_HANDLERS.append(fh)


def _remove_installed(logger: logging.Logger) -> None:
    for h in list(_INSTALLED_HANDLERS):
        logger.removeHandler(h)
        h.close()
    _INSTALLED_HANDLERS.clear()


def reset_logging_for_tests() -> None:
    """Test-only: drop handlers installed by ``configure_logging``."""
    global _JSON_MODE_NULL_HANDLER_INSTALLED
    logger = logging.getLogger("combo_skills")
    _remove_installed(logger)
    logger.setLevel(logging.NOTSET)
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib's lastResort handler from writing warnings next to JSON output.

    Ensures the root logger has at least one handler (a NullHandler) when it
    otherwise has none.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


__all__ = ["LOG_FORMAT", "configure_logging", "reset_logging_for_tests", "suppress_lastresort_in_json_mode"]
