"""
combo-skills graph command.

SUMMARY: Show the execution order derived from ordering constraints
"""

from __future__ import annotations

import argparse

from combo_skills.cli import OutputFormatter, add_definition_arg, add_standard_flags
from combo_skills.core.graph import format_cycle, resolve_dependency_graph
from combo_skills.core.loader import load_combo_skill

SUMMARY = "Show the execution order derived from ordering constraints"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_definition_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    combo = load_combo_skill(args.file)
    graph = resolve_dependency_graph(combo)

    if formatter.json_mode:
        formatter.json_output(graph.to_dict())
        return 1 if graph.has_cycles else 0

    if graph.has_cycles:
        formatter.text("✗ Circular dependencies detected")
        formatter.text_list("Cycles:", [format_cycle(c) for c in graph.cycles])
        return 1

    formatter.text("Execution order:")
    for index, key in enumerate(graph.execution_order, start=1):
        node = graph.nodes[key]
        suffix = f" ({node.name})" if node.alias else ""
        after = f"  after: {', '.join(node.dependencies)}" if node.dependencies else ""
        formatter.text(f"  {index}. {key}{suffix}{after}")
    return 0
