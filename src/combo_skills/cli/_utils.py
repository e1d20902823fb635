"""Shared helpers for CLI commands."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from combo_skills.core.config import get_config
from combo_skills.core.log_config import configure_logging, suppress_lastresort_in_json_mode


def get_project_root(args: argparse.Namespace) -> Path:
    raw: Optional[str] = getattr(args, "project_root", None)
    return Path(raw).expanduser().resolve() if raw else Path.cwd()


def get_cli_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load configuration for the project the command runs in.

    Raises:
        ConfigError: If the project config file is invalid.
    """
    return get_config(get_project_root(args))


def setup_cli_logging(args: argparse.Namespace, config: Dict[str, Any]) -> None:
    """Configure logging from the ``logging`` config section and CLI flags.

    JSON mode keeps stderr quiet unless ``--verbose`` asks for debug output.
    """
    json_mode = bool(getattr(args, "json", False))
    verbose = bool(getattr(args, "verbose", False))
    if json_mode:
        suppress_lastresort_in_json_mode()
        if not verbose:
            return

    section = config.get("logging") or {}
    log_file = section.get("file")
    configure_logging(
        level=str(section.get("level") or "WARNING"),
        log_path=Path(log_file) if log_file else None,
        verbose=verbose,
    )


__all__ = ["get_project_root", "get_cli_config", "setup_cli_logging"]
