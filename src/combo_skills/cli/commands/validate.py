"""
combo-skills validate command.

SUMMARY: Validate a combo skill definition without compiling it
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from combo_skills.cli import OutputFormatter, add_definition_arg, add_standard_flags
from combo_skills.core.compiler import load_and_check, validate_combo_skill
from combo_skills.core.modifiers import has_modifiers, validate_combo_modifiers

SUMMARY = "Validate a combo skill definition without compiling it"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_definition_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Run schema, structural and modifier validation."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    combo, errors = load_and_check(args.file)
    errors = list(errors)
    warnings: List[str] = []

    errors.extend(validate_combo_skill(combo).errors)
    if has_modifiers(combo):
        modifier_result = validate_combo_modifiers(combo)
        errors.extend(modifier_result.errors)
        warnings.extend(modifier_result.warnings)

    payload: Dict[str, Any] = {
        "file": args.file,
        "name": combo.name,
        "valid": not errors,
        "errors": errors,
        "warnings": warnings,
    }

    if formatter.json_mode:
        formatter.json_output(payload)
    else:
        if not errors:
            formatter.text(f"✓ {combo.name or args.file} is valid")
        else:
            formatter.text(f"✗ {combo.name or args.file} is invalid")
        formatter.text_list("Errors:", errors)
        formatter.text_list("Warnings:", warnings)

    return 0 if not errors else 1
