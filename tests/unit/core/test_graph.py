from __future__ import annotations

import logging
import random

import pytest

from combo_skills.core.graph import (
    resolve_dependency_graph,
    split_ordering_constraint,
    validate_constraints,
)
from helpers.builders import make_combo, skill


def test_linear_chain_orders_skills():
    combo = make_combo(["fetch", "parse", "extract"], ordering=["fetch -> parse", "parse -> extract"])

    graph = resolve_dependency_graph(combo)

    assert not graph.has_cycles
    assert graph.cycles == []
    assert graph.execution_order == ["fetch", "parse", "extract"]
    assert graph.nodes["parse"].dependencies == ["fetch"]
    assert graph.nodes["parse"].dependents == ["extract"]


def test_chained_constraint_is_equivalent_to_pairs():
    combo = make_combo(["fetch", "parse", "extract"], ordering=["fetch -> parse -> extract"])

    assert resolve_dependency_graph(combo).execution_order == ["fetch", "parse", "extract"]


def test_two_node_cycle_is_reported():
    combo = make_combo(["a", "b"], ordering=["a -> b", "b -> a"])

    graph = resolve_dependency_graph(combo)

    assert graph.has_cycles
    assert graph.execution_order == []
    assert len(graph.cycles) == 1
    assert set(graph.cycles[0]) == {"a", "b"}
    assert graph.cycles[0][0] == graph.cycles[0][-1]


def _on_some_cycle(ordering, keys):
    graph = resolve_dependency_graph(make_combo(keys, ordering=ordering))
    return graph, {key for cycle in graph.cycles for key in cycle}


def test_second_cycle_through_shared_node_is_reported():
    graph, flagged = _on_some_cycle(["a -> b", "b -> a", "b -> c", "c -> b"], ["a", "b", "c"])

    assert flagged == {"a", "b", "c"}
    assert ["a", "b", "a"] in graph.cycles
    assert ["c", "b", "c"] in graph.cycles


def test_node_reaching_cycle_through_finished_branch_is_reported():
    graph, flagged = _on_some_cycle(["r -> a", "a -> r", "r -> b", "b -> a"], ["r", "a", "b"])

    assert flagged == {"r", "a", "b"}
    assert ["b", "a", "r", "b"] in graph.cycles


def test_nodes_outside_cycles_are_not_flagged():
    _, flagged = _on_some_cycle(["x -> a", "a -> b", "b -> a", "b -> y"], ["x", "a", "b", "y"])

    assert flagged == {"a", "b"}


def test_self_loop_is_a_cycle():
    graph = resolve_dependency_graph(make_combo(["a", "b"], ordering=["a -> a"]))

    assert graph.cycles == [["a", "a"]]


def test_validate_constraints_reports_each_cycle_component():
    combo = make_combo(["a", "b", "c"], ordering=["a -> b", "b -> a", "b -> c", "c -> b"])

    result = validate_constraints(combo)

    assert result.errors == [
        "Circular dependency detected: a -> b -> a",
        "Circular dependency detected: c -> b -> c",
    ]


@pytest.mark.parametrize("seed", range(20))
def test_every_node_on_a_cycle_is_flagged(seed):
    rng = random.Random(seed)
    keys = [f"s{i}" for i in range(rng.randint(2, 7))]
    edges = [(a, b) for a in keys for b in keys if a != b and rng.random() < 0.3]
    succ = {key: [b for a, b in edges if a == key] for key in keys}

    def reaches(src, dst):
        seen, stack = set(), list(succ[src])
        while stack:
            node = stack.pop()
            if node == dst:
                return True
            if node not in seen:
                seen.add(node)
                stack.extend(succ[node])
        return False

    _, flagged = _on_some_cycle([f"{a} -> {b}" for a, b in edges], keys)

    assert flagged == {key for key in keys if reaches(key, key)}


def test_no_constraints_keeps_declaration_order():
    graph = resolve_dependency_graph(make_combo(["x", "y", "z"]))

    assert graph.execution_order == ["x", "y", "z"]
    assert all(not n.dependencies and not n.dependents for n in graph.nodes.values())


def test_alias_is_the_identity_key():
    combo = make_combo(
        [skill("http-get", alias="first"), skill("http-get", alias="second")],
        ordering=["second -> first"],
    )

    graph = resolve_dependency_graph(combo)

    assert set(graph.nodes) == {"first", "second"}
    assert graph.nodes["first"].name == "http-get"
    assert graph.execution_order == ["second", "first"]


def test_duplicate_edges_are_deduplicated():
    combo = make_combo(["a", "b"], ordering=["a -> b", "a->b", "a  ->  b"])

    graph = resolve_dependency_graph(combo)

    assert graph.nodes["a"].dependents == ["b"]
    assert graph.nodes["b"].dependencies == ["a"]


def test_unknown_and_malformed_constraints_are_skipped_with_warnings(caplog):
    combo = make_combo(["a", "b"], ordering=["a -> ghost", "lonely", "a -> b"])

    with caplog.at_level(logging.WARNING, logger="combo_skills.core.graph"):
        graph = resolve_dependency_graph(combo)

    assert graph.execution_order == ["a", "b"]
    assert "Unknown skill in constraint: ghost" in caplog.text
    assert "Invalid ordering constraint: lonely" in caplog.text


def test_duplicate_key_later_reference_wins(caplog):
    combo = make_combo([skill("a", version="1"), skill("a", version="2"), "b"])

    with caplog.at_level(logging.WARNING, logger="combo_skills.core.graph"):
        graph = resolve_dependency_graph(combo)

    assert list(graph.nodes) == ["a", "b"]
    assert "Duplicate skill key 'a'" in caplog.text


def test_split_tolerates_whitespace():
    assert split_ordering_constraint("  a->b ->   c ") == ["a", "b", "c"]


def test_validate_constraints_reports_unknown_key():
    combo = make_combo(["fetch", "parse"], ordering=["fetch -> summarize"])

    result = validate_constraints(combo)

    assert not result.valid
    assert result.errors == ["Unknown skill in ordering constraint: summarize (in 'fetch -> summarize')"]
    assert result.warnings == []


def test_validate_constraints_reports_cycles():
    combo = make_combo(["a", "b", "c"], ordering=["a -> b -> c", "c -> a"])

    result = validate_constraints(combo)

    assert not result.valid
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Circular dependency detected: ")


def test_validate_constraints_ignores_names_hidden_by_alias():
    combo = make_combo([skill("http-get", alias="fetch"), "parse"], ordering=["http-get -> parse"])

    result = validate_constraints(combo)

    assert result.errors == ["Unknown skill in ordering constraint: http-get (in 'http-get -> parse')"]


def test_validate_constraints_valid_definition():
    combo = make_combo(["fetch", "parse", "extract"], ordering=["fetch -> parse -> extract"])

    assert validate_constraints(combo).valid


@pytest.mark.parametrize("seed", range(20))
def test_random_acyclic_graphs_respect_every_edge(seed):
    rng = random.Random(seed)
    keys = [f"s{i}" for i in range(rng.randint(2, 9))]
    # Edges only go forward in a hidden permutation, so the graph is acyclic.
    hidden = keys[:]
    rng.shuffle(hidden)
    edges = [
        (hidden[i], hidden[j])
        for i in range(len(hidden))
        for j in range(i + 1, len(hidden))
        if rng.random() < 0.3
    ]
    combo = make_combo(keys, ordering=[f"{a} -> {b}" for a, b in edges])

    graph = resolve_dependency_graph(combo)

    assert not graph.has_cycles
    assert sorted(graph.execution_order) == sorted(keys)
    position = {key: i for i, key in enumerate(graph.execution_order)}
    for a, b in edges:
        assert position[a] < position[b]


@pytest.mark.parametrize("size", [2, 3, 5])
def test_ring_graphs_are_cyclic(size):
    keys = [f"n{i}" for i in range(size)]
    ordering = [f"{keys[i]} -> {keys[(i + 1) % size]}" for i in range(size)]

    graph = resolve_dependency_graph(make_combo(keys, ordering=ordering))

    assert graph.has_cycles
    assert graph.cycles
    assert graph.execution_order == []
