"""Dependency graph resolution for combo skills.

Skills are nodes and ordering constraints ("fetch -> parse -> extract") are
edges. The graph is rebuilt from the definition on every call and is used
during compilation to produce a coherent execution order. Circular
dependencies are errors, not warnings.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from combo_skills.core.types import ComboSkillDefinition

logger = logging.getLogger(__name__)

_ARROW_RE = re.compile(r"\s*->\s*")


@dataclass
class SkillNode:
    """A node in the skill dependency graph."""

    key: str
    name: str
    alias: Optional[str] = None
    # Keys that must execute before this node.
    dependencies: List[str] = field(default_factory=list)
    # Keys that must execute after this node.
    dependents: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "alias": self.alias,
            "dependencies": list(self.dependencies),
            "dependents": list(self.dependents),
        }


@dataclass
class DependencyGraph:
    nodes: Dict[str, SkillNode]
    execution_order: List[str] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": {k: n.to_dict() for k, n in self.nodes.items()},
            "executionOrder": list(self.execution_order),
            "hasCycles": self.has_cycles,
            "cycles": [list(c) for c in self.cycles],
        }


@dataclass
class ConstraintValidationResult:
    errors: List[str] = field(default_factory=list)
    # Constraint validation never warns; kept for a uniform result shape.
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def split_ordering_constraint(constraint: str) -> List[str]:
    """Split ``"a -> b -> c"`` into ``["a", "b", "c"]``."""
    return [part.strip() for part in _ARROW_RE.split(constraint.strip())]


def format_cycle(cycle: List[str]) -> str:
    return " -> ".join(cycle)


def resolve_dependency_graph(combo: ComboSkillDefinition) -> DependencyGraph:
    """Resolve the dependency graph from a combo skill definition.

    Args:
        combo: The combo skill definition

    Returns:
        Resolved dependency graph; ``execution_order`` is empty when cyclic.
    """
    nodes: Dict[str, SkillNode] = {}

    for skill in combo.skills:
        key = skill.key
        if key in nodes:
            logger.warning("Duplicate skill key '%s'; later reference replaces the earlier one", key)
        nodes[key] = SkillNode(key=key, name=skill.name, alias=skill.alias)

    for constraint in combo.ordering:
        parse_ordering_constraint(constraint, nodes)

    cycles = detect_cycles(nodes)
    execution_order = [] if cycles else topological_sort(nodes)

    return DependencyGraph(nodes=nodes, execution_order=execution_order, cycles=cycles)


def parse_ordering_constraint(constraint: str, nodes: Dict[str, SkillNode]) -> None:
    """Parse an ordering constraint and add its edges to ``nodes``.

    Supported formats:
    - "a -> b" (a must come before b)
    - "a -> b -> c" (chained ordering)
    """
    parts = split_ordering_constraint(constraint)
    if len(parts) < 2:
        logger.warning("Invalid ordering constraint: %s", constraint)
        return

    for src, dst in zip(parts, parts[1:]):
        from_node = nodes.get(src)
        to_node = nodes.get(dst)

        if from_node is None:
            logger.warning("Unknown skill in constraint: %s", src)
            continue
        if to_node is None:
            logger.warning("Unknown skill in constraint: %s", dst)
            continue

        # src -> dst means dst depends on src
        if src not in to_node.dependencies:
            to_node.dependencies.append(src)
        if dst not in from_node.dependents:
            from_node.dependents.append(dst)


def _shortest_cycle(nodes: Dict[str, SkillNode], start: str) -> Optional[List[str]]:
    """Breadth-first search for the shortest walk from ``start`` back to itself."""
    parent: Dict[str, str] = {}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for dependent in nodes[current].dependents:
            if dependent == start:
                walk = [current]
                while walk[-1] != start:
                    walk.append(parent[walk[-1]])
                return list(reversed(walk)) + [start]
            if dependent not in parent:
                parent[dependent] = current
                queue.append(dependent)
    return None


def detect_cycles(nodes: Dict[str, SkillNode]) -> List[List[str]]:
    """Detect cycles over dependents.

    Each recorded cycle is a closed walk (``[a, b, a]``). Nodes are visited
    in declaration order; a node not yet covered by a recorded cycle gets
    the shortest cycle through it, if any. Every node that lies on a cycle
    therefore appears in at least one recorded cycle, though not every
    elementary cycle of a dense graph is listed.
    """
    covered: set[str] = set()
    cycles: List[List[str]] = []

    for key in nodes:
        if key in covered:
            continue
        cycle = _shortest_cycle(nodes, key)
        if cycle is not None:
            cycles.append(cycle)
            covered.update(cycle)

    return cycles


def topological_sort(nodes: Dict[str, SkillNode]) -> List[str]:
    """Compute a topological ordering of skill keys (Kahn's algorithm)."""
    indeg: Dict[str, int] = {key: len(node.dependencies) for key, node in nodes.items()}
    ready: List[str] = [key for key, degree in indeg.items() if degree == 0]
    order: List[str] = []

    while ready:
        current = ready.pop(0)
        order.append(current)
        for dependent in nodes[current].dependents:
            indeg[dependent] -= 1
            if indeg[dependent] == 0:
                ready.append(dependent)

    return order


def validate_constraints(combo: ComboSkillDefinition) -> ConstraintValidationResult:
    """Validate that a combo skill's ordering constraints are satisfiable.

    Reports one error per detected cycle and one per constraint part that
    is not the identity key (alias, else name) of a declared skill.
    """
    result = ConstraintValidationResult()
    graph = resolve_dependency_graph(combo)

    for cycle in graph.cycles:
        result.errors.append(f"Circular dependency detected: {format_cycle(cycle)}")

    known = set(graph.nodes)
    for constraint in combo.ordering:
        for part in split_ordering_constraint(constraint):
            if part not in known:
                result.errors.append(f"Unknown skill in ordering constraint: {part} (in '{constraint}')")

    return result


__all__ = [
    "SkillNode",
    "DependencyGraph",
    "ConstraintValidationResult",
    "split_ordering_constraint",
    "format_cycle",
    "resolve_dependency_graph",
    "parse_ordering_constraint",
    "detect_cycles",
    "topological_sort",
    "validate_constraints",
]
