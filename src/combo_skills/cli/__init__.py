"""
combo-skills CLI package.

Commands are auto-discovered from ``cli/commands/*.py``; each module exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""
from ._output import OutputFormatter
from ._args import (
    add_definition_arg,
    add_json_flag,
    add_project_root_flag,
    add_standard_flags,
    add_verbose_flag,
)
from ._utils import get_cli_config, get_project_root, setup_cli_logging

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_verbose_flag",
    "add_project_root_flag",
    "add_definition_arg",
    "add_standard_flags",
    # Utilities
    "get_project_root",
    "get_cli_config",
    "setup_cli_logging",
]
