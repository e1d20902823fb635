"""Common argument registration helpers for CLI commands."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose/-v flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )


def add_project_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --project-root flag used to locate combo-skills.yaml."""
    parser.add_argument(
        "--project-root",
        type=str,
        help="Directory holding combo-skills.yaml (default: current directory)",
    )


def add_definition_arg(parser: argparse.ArgumentParser) -> None:
    """Add the positional definition file argument."""
    parser.add_argument(
        "file",
        help="Combo skill definition (.combo.yaml or .combo.json)",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add --json, --verbose and --project-root."""
    add_json_flag(parser)
    add_verbose_flag(parser)
    add_project_root_flag(parser)


__all__ = [
    "add_json_flag",
    "add_verbose_flag",
    "add_project_root_flag",
    "add_definition_arg",
    "add_standard_flags",
]
