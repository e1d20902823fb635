"""
combo-skills compile command.

SUMMARY: Compile a combo skill definition into a SKILL.md artifact
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from combo_skills.cli import OutputFormatter, add_definition_arg, add_standard_flags, get_cli_config, get_project_root
from combo_skills.core.compiler import STAGE_VALIDATION, ComboCompiler, CompileOptions, load_and_check
from combo_skills.core.registry import SkillsResolver
from combo_skills.core.synthesis import PlaceholderSynthesizer
from combo_skills.core.types import CompilationResult

SUMMARY = "Compile a combo skill definition into a SKILL.md artifact"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_definition_arg(parser)
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output directory (default: <output.base_dir>/<name>)",
    )
    parser.add_argument(
        "--no-write",
        action="store_true",
        help="Compile without writing files",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Skip structural and schema validation",
    )
    add_standard_flags(parser)


def _report(formatter: OutputFormatter, result: CompilationResult) -> None:
    if formatter.json_mode:
        formatter.json_output(result.to_dict())
        return

    if result.success and result.skill is not None:
        formatter.text(f"✓ Compiled {result.skill.name} v{result.skill.version}")
        if result.execution_order:
            formatter.text_kv("Execution order", " -> ".join(result.execution_order))
        if result.output_dir:
            formatter.text_kv("Output", result.output_dir)
    else:
        formatter.text(f"✗ Compilation failed at stage: {result.stage}")
        formatter.text_list("Errors:", result.errors)
    formatter.text_list("Warnings:", result.warnings)


def main(args: argparse.Namespace) -> int:
    """Compile a definition file and optionally write the artifact."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    config = get_cli_config(args)

    combo, schema_errors = load_and_check(args.file)
    if schema_errors and not args.skip_validation:
        _report(formatter, CompilationResult(success=False, errors=schema_errors, stage=STAGE_VALIDATION))
        return 1

    output_dir = None
    if not args.no_write:
        if args.output:
            output_dir = Path(args.output)
        else:
            base_dir = Path((config.get("output") or {}).get("base_dir") or "output")
            if not base_dir.is_absolute():
                base_dir = get_project_root(args) / base_dir
            output_dir = base_dir / (combo.name or Path(args.file).stem)

    compiler = ComboCompiler(
        resolver=SkillsResolver.from_config(config.get("registry") or {}),
        synthesizer=PlaceholderSynthesizer.from_config(config.get("synthesis") or {}),
    )
    options = CompileOptions(output_dir=output_dir, skip_validation=args.skip_validation)
    result = asyncio.run(compiler.compile(combo, options))

    _report(formatter, result)
    return 0 if result.success else 1
