from __future__ import annotations

import pytest

from combo_skills.core.exceptions import ModifierError
from combo_skills.core.modifiers import (
    MODIFIER_PRIMITIVE_COMPATIBILITY,
    MODIFIER_TYPES,
    SKILL_PRIMITIVES,
    Compatibility,
    compatibility,
    format_modifier,
    get_compatible_modifiers,
    has_modifiers,
    is_modifier_compatible,
    parse_modifier,
    validate_combo_modifiers,
    validate_modifiers,
)
from combo_skills.core.types import ComboSkillDefinition
from helpers.builders import combo_data, make_combo, skill


def test_matrix_covers_every_type_and_primitive():
    assert set(MODIFIER_PRIMITIVE_COMPATIBILITY) == set(MODIFIER_TYPES)
    for row in MODIFIER_PRIMITIVE_COMPATIBILITY.values():
        assert set(row) == set(SKILL_PRIMITIVES)
        assert all(isinstance(v, Compatibility) for v in row.values())


@pytest.mark.parametrize(
    "declaration, expected",
    [
        ("retry:3", {"attempts": 3}),
        ("cache:5m", {"ttl": "5m"}),
        ("timeout:30s", {"duration": "30s"}),
        ("auth:bearer", {"type": "bearer"}),
        ("rate-limit:10/m", {"requests": 10, "window": "1m"}),
        ("rate-limit:100", {"requests": 100}),
        ("log:debug", {"level": "debug"}),
        ("fallback:cached-search", {"skill": "cached-search"}),
        ("batch:50", {"size": 50}),
        ("parallel:4", {"concurrency": 4}),
        ("dry-run:true", {"log": True}),
        ("dry-run:false", {"log": False}),
        ("retry", {}),
    ],
)
def test_parse_compact_modifier(declaration, expected):
    parsed = parse_modifier(declaration)

    assert parsed.type == declaration.split(":")[0]
    assert parsed.config == expected
    assert parsed.raw == declaration


@pytest.mark.parametrize(
    "declaration",
    [
        "retry:3",
        "cache:5m",
        "timeout:30s",
        "auth:api-key",
        "rate-limit:10/s",
        "rate-limit:5/h",
        "log:warn",
        "fallback:other",
        "batch:25",
        "parallel:8",
        "dry-run:false",
    ],
)
def test_compact_form_round_trips(declaration):
    parsed = parse_modifier(declaration)

    assert format_modifier(parsed) == declaration
    assert parse_modifier(format_modifier(parsed)).config == parsed.config


def test_structured_modifier_passes_config_through():
    parsed = parse_modifier({"retry": {"attempts": 5, "backoff": "exponential"}})

    assert parsed.type == "retry"
    assert parsed.config == {"attempts": 5, "backoff": "exponential"}


def test_structured_modifier_with_null_config():
    assert parse_modifier({"log": None}).config == {}


def test_structured_config_without_compact_form_cannot_be_formatted():
    parsed = parse_modifier({"retry": {"attempts": 5, "backoff": "exponential"}})

    with pytest.raises(ModifierError):
        format_modifier(parsed)


@pytest.mark.parametrize(
    "declaration, message",
    [
        ("explode:3", "Invalid modifier format: explode:3"),
        ({}, "Structured modifier must have at least one key"),
        ({"retry": {}, "cache": {}}, "Structured modifier should have only one key, got: retry, cache"),
        ({"explode": {}}, "Unknown modifier type: explode"),
        ("retry:many", "Invalid value for modifier 'retry': expected an integer, got 'many'"),
        (42, "Invalid modifier declaration: 42"),
    ],
)
def test_parse_errors(declaration, message):
    with pytest.raises(ModifierError) as exc:
        parse_modifier(declaration)

    assert str(exc.value) == message


def test_parse_errors_are_collected_without_stopping():
    result = validate_modifiers(["bogus", "retry:3", {"nope": {}}])

    assert [p.type for p in result.parsed] == ["retry"]
    assert result.errors == ["Invalid modifier format: bogus", "Unknown modifier type: nope"]


def test_retry_is_incompatible_with_transform():
    combo = make_combo([skill("normalize", primitives=["transform"], modifiers=["retry:3"])])

    result = validate_combo_modifiers(combo)

    assert not result.valid
    assert result.errors == ["Skill 'normalize': Modifier 'retry' is incompatible with primitive 'transform'"]


def test_cache_then_retry_warns_about_stacking_order():
    result = validate_modifiers(["cache:5m", "retry:3"])

    assert result.valid
    assert result.errors == []
    assert result.warnings == [
        "Stacking order: Cache before retry may cache failures; prefer retry -> cache"
    ]


def test_retry_then_cache_is_clean():
    result = validate_modifiers(["retry:3", "cache:5m"])

    assert result.valid
    assert result.warnings == []


def test_stacking_order_only_checks_adjacent_pairs():
    result = validate_modifiers(["cache:5m", "log:info", "retry:3"])

    assert result.warnings == []


def test_incompatible_pairs():
    result = validate_modifiers(["batch:10", "parallel:2"])

    assert result.errors == [
        "Incompatible modifiers: 'batch' and 'parallel' - Use one or the other for collection processing"
    ]


def test_cache_and_dry_run_pair_also_reports_stacking():
    result = validate_modifiers(["dry-run", "cache:1m"])

    assert result.errors == [
        "Incompatible modifiers: 'cache' and 'dry-run' - Caching simulated results may cause confusion"
    ]
    assert result.warnings == ["Stacking order: Dry-run before cache may cache simulated results"]


def test_warn_cells_produce_warnings():
    result = validate_modifiers(["fallback:backup"], ["write"])

    assert result.valid
    assert result.warnings == ["Modifier 'fallback' with primitive 'write' may have unexpected behavior"]


def test_unknown_primitive_is_an_error():
    result = validate_modifiers(["log:info"], ["teleport"])

    assert result.errors == ["Unknown primitive 'teleport'"]


@pytest.mark.parametrize(
    "modifiers, primitives",
    [
        (["cache:5m", "retry:3"], []),
        (["retry:3", "dry-run", "cache:1m"], ["transform", "write"]),
        (["bogus", {"a": 1, "b": 2}, "batch:x"], ["read"]),
    ],
)
def test_validation_is_idempotent(modifiers, primitives):
    first = validate_modifiers(modifiers, primitives)
    second = validate_modifiers(modifiers, primitives)

    assert first.errors == second.errors
    assert first.warnings == second.warnings


def test_combo_wide_modifiers_use_combo_primitives():
    combo = make_combo(["a"], modifiers=["cache:5m"], primitives=["write"])

    result = validate_combo_modifiers(combo)

    assert result.errors == ["Modifier 'cache' is incompatible with primitive 'write'"]


def test_lone_declarations_are_not_split():
    data = combo_data([skill("fetch", modifiers="timeout:30s")])
    data["modifiers"] = "retry:3"
    combo = ComboSkillDefinition.from_dict(data)

    assert combo.modifiers == ["retry:3"]
    assert combo.skills[0].modifiers == ["timeout:30s"]

    result = validate_combo_modifiers(combo)

    assert result.valid
    assert [p.type for p in result.parsed] == ["retry", "timeout"]


def test_lone_structured_declaration_is_wrapped():
    data = combo_data()
    data["modifiers"] = {"cache": {"ttl": "1h"}}

    assert ComboSkillDefinition.from_dict(data).modifiers == [{"cache": {"ttl": "1h"}}]


def test_has_modifiers():
    assert not has_modifiers(make_combo(["a"]))
    assert has_modifiers(make_combo(["a"], modifiers=["log:info"]))
    assert has_modifiers(make_combo([skill("a", modifiers=["retry:2"])]))


def test_is_modifier_compatible():
    assert is_modifier_compatible("retry", ["read", "write"]) == (True, [])
    assert not is_modifier_compatible("retry", ["transform"]).compatible
    compat = is_modifier_compatible("parallel", ["execute"])
    assert compat.compatible
    assert compat.warnings == ["'parallel' with 'execute' may have unexpected behavior"]


def test_is_modifier_compatible_rejects_unknown_primitive():
    with pytest.raises(ModifierError, match="Unknown primitive 'fly'") as excinfo:
        is_modifier_compatible("retry", ["read", "fly"])

    assert excinfo.value.context == {"primitive": "fly"}


def test_compatibility_rejects_unknown_modifier_type():
    with pytest.raises(ModifierError, match="Unknown modifier type 'jitter'"):
        compatibility("jitter", "read")

    assert compatibility("cache", "write") is Compatibility.INCOMPATIBLE


def test_get_compatible_modifiers():
    assert get_compatible_modifiers([]) == list(MODIFIER_TYPES)
    assert get_compatible_modifiers(["transform"]) == [
        "cache",
        "timeout",
        "log",
        "fallback",
        "batch",
        "parallel",
    ]
    assert "dry-run" not in get_compatible_modifiers(["read", "write"])
