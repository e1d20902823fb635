"""
combo-skills modifiers command.

SUMMARY: List modifiers compatible with the given skill primitives
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from combo_skills.cli import OutputFormatter, add_json_flag, add_verbose_flag
from combo_skills.core.modifiers import (
    MODIFIER_CONFIG_FIELDS,
    MODIFIER_TYPES,
    SKILL_PRIMITIVES,
    is_modifier_compatible,
)

SUMMARY = "List modifiers compatible with the given skill primitives"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--primitive",
        "-p",
        action="append",
        choices=list(SKILL_PRIMITIVES),
        default=[],
        help="Skill primitive to check against (repeatable)",
    )
    add_json_flag(parser)
    add_verbose_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    primitives: List[str] = list(dict.fromkeys(args.primitive))

    rows: List[Dict[str, Any]] = []
    for modifier_type in MODIFIER_TYPES:
        compat = is_modifier_compatible(modifier_type, primitives)
        if not compat.compatible:
            continue
        rows.append(
            {
                "type": modifier_type,
                "fields": list(MODIFIER_CONFIG_FIELDS[modifier_type]),
                "warnings": list(compat.warnings),
            }
        )

    if formatter.json_mode:
        formatter.json_output({"primitives": primitives, "modifiers": rows})
        return 0

    scope = ", ".join(primitives) if primitives else "any primitive"
    formatter.text(f"Modifiers compatible with {scope}:")
    for row in rows:
        fields = ", ".join(row["fields"])
        formatter.text(f"  {row['type']:<11} {fields}")
        for warning in row["warnings"]:
            formatter.text(f"    ! {warning}")
    return 0
