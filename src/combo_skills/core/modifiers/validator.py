"""Modifier parsing and validation for combo skills.

This module handles:
- Parsing compact ("retry:3") and structured ({"retry": {...}}) modifiers
- Validating modifier/primitive compatibility
- Detecting incompatible modifier combinations
- Analyzing modifier stacking order

Declarations are first turned into a tagged ``CompactModifier`` or
``StructuredModifier`` and then normalized into a ``ParsedModifier``. Nothing
downstream of ``parse_modifier`` looks at the raw declaration shape again.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Union

from combo_skills.core.exceptions import ModifierError
from combo_skills.core.types import ComboSkillDefinition, RawModifier

from .model import (
    INCOMPATIBLE_MODIFIER_PAIRS,
    MODIFIER_TYPES,
    SKILL_PRIMITIVES,
    STACKING_ORDER_WARNINGS,
    Compatibility,
    compatibility,
)

_COMPACT_MODIFIER_RE = re.compile(
    r"^(" + "|".join(re.escape(t) for t in MODIFIER_TYPES) + r")(?::(.+))?$"
)
_RATE_RE = re.compile(r"^(\d+)/([smh])$")
_INT_RE = re.compile(r"^[-+]?\d+$")

# Config field that carries the compact value, per modifier type.
_COMPACT_VALUE_FIELD: Dict[str, str] = {
    "retry": "attempts",
    "cache": "ttl",
    "timeout": "duration",
    "auth": "type",
    "log": "level",
    "fallback": "skill",
    "batch": "size",
    "parallel": "concurrency",
    "dry-run": "log",
}
_INTEGER_VALUED = frozenset({"retry", "batch", "parallel"})


@dataclass(frozen=True)
class CompactModifier:
    """A ``kind[:value]`` declaration."""

    kind: str
    raw_value: Optional[str] = None


@dataclass(frozen=True)
class StructuredModifier:
    """A single-key ``{kind: {...config}}`` declaration."""

    kind: str
    config: Dict[str, Any] = field(default_factory=dict)


ModifierDeclaration = Union[CompactModifier, StructuredModifier]


@dataclass(frozen=True)
class ParsedModifier:
    """Normalized modifier after parsing."""

    type: str
    config: Dict[str, Any]
    raw: RawModifier

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "config": dict(self.config), "raw": self.raw}


@dataclass
class ModifierValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    parsed: List[ParsedModifier] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "parsed": [p.to_dict() for p in self.parsed],
        }


class ModifierCompatibility(NamedTuple):
    compatible: bool
    warnings: List[str]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def to_declaration(modifier: Any) -> ModifierDeclaration:
    """Classify a raw declaration as compact or structured.

    Raises:
        ModifierError: If the declaration matches neither form.
    """
    if isinstance(modifier, str):
        match = _COMPACT_MODIFIER_RE.match(modifier.strip())
        if not match:
            raise ModifierError(f"Invalid modifier format: {modifier}", context={"modifier": modifier})
        return CompactModifier(kind=match.group(1), raw_value=match.group(2))

    if isinstance(modifier, Mapping):
        keys = [str(k) for k in modifier.keys()]
        if not keys:
            raise ModifierError("Structured modifier must have at least one key")
        if len(keys) > 1:
            raise ModifierError(
                f"Structured modifier should have only one key, got: {', '.join(keys)}",
                context={"keys": keys},
            )
        kind = keys[0]
        if kind not in MODIFIER_TYPES:
            raise ModifierError(f"Unknown modifier type: {kind}", context={"modifier": kind})
        config = next(iter(modifier.values()))
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            raise ModifierError(
                f"Structured modifier '{kind}' must map to a configuration object",
                context={"modifier": kind},
            )
        return StructuredModifier(kind=kind, config=dict(config))

    raise ModifierError(f"Invalid modifier declaration: {modifier!r}")


def _as_int(kind: str, value: str) -> int:
    if not _INT_RE.match(value.strip()):
        raise ModifierError(
            f"Invalid value for modifier '{kind}': expected an integer, got '{value}'",
            context={"modifier": kind, "value": value},
        )
    return int(value)


def parse_compact_value(kind: str, value: Optional[str]) -> Dict[str, Any]:
    """Interpret the value portion of a compact modifier for ``kind``."""
    if not value:
        return {}

    if kind == "rate-limit":
        # "10/m" or "100/h"; a bare number is a request count
        rate = _RATE_RE.match(value)
        if rate:
            return {"requests": int(rate.group(1)), "window": f"1{rate.group(2)}"}
        return {"requests": _as_int(kind, value)}
    if kind == "dry-run":
        return {"log": value != "false"}
    if kind in _INTEGER_VALUED:
        return {_COMPACT_VALUE_FIELD[kind]: _as_int(kind, value)}
    return {_COMPACT_VALUE_FIELD[kind]: value}


def normalize(declaration: ModifierDeclaration, raw: RawModifier) -> ParsedModifier:
    if isinstance(declaration, CompactModifier):
        config = parse_compact_value(declaration.kind, declaration.raw_value)
    else:
        # Structured configs pass through verbatim; their fields are not checked here.
        config = dict(declaration.config)
    return ParsedModifier(type=declaration.kind, config=config, raw=raw)


def parse_modifier(modifier: RawModifier) -> ParsedModifier:
    """Parse a modifier (compact or structured) into a normalized form.

    Raises:
        ModifierError: If the declaration cannot be parsed.
    """
    return normalize(to_declaration(modifier), modifier)


def format_modifier(parsed: ParsedModifier) -> str:
    """Serialize a parsed modifier back to its compact ``kind[:value]`` form.

    Raises:
        ModifierError: If the configuration has no compact representation.
    """
    kind = parsed.type
    config = dict(parsed.config)
    if not config:
        return kind

    if kind == "rate-limit":
        requests = config.pop("requests", None)
        window = config.pop("window", None)
        if requests is None or config:
            raise ModifierError(f"Modifier '{kind}' has no compact form: {parsed.config}")
        if window is None:
            return f"{kind}:{requests}"
        unit = str(window)[1:] if str(window).startswith("1") else ""
        if unit not in ("s", "m", "h"):
            raise ModifierError(f"Modifier '{kind}' window '{window}' has no compact form")
        return f"{kind}:{requests}/{unit}"

    value_field = _COMPACT_VALUE_FIELD[kind]
    if set(config) != {value_field}:
        raise ModifierError(f"Modifier '{kind}' has no compact form: {parsed.config}")
    value = config[value_field]
    if kind == "dry-run":
        return f"{kind}:{'true' if value else 'false'}"
    return f"{kind}:{value}"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_modifiers(
    modifiers: Iterable[RawModifier],
    primitives: Optional[Sequence[str]] = None,
) -> ModifierValidationResult:
    """Validate a list of modifiers against primitives and against each other.

    Parse failures are collected as errors and do not stop the remaining
    declarations from being parsed. Warnings never affect validity.
    """
    result = ModifierValidationResult()

    for modifier in modifiers:
        try:
            result.parsed.append(parse_modifier(modifier))
        except ModifierError as e:
            result.errors.append(str(e))

    for primitive in primitives or []:
        if primitive not in SKILL_PRIMITIVES:
            result.errors.append(f"Unknown primitive '{primitive}'")

    known_primitives = [p for p in (primitives or []) if p in SKILL_PRIMITIVES]
    for p in result.parsed:
        for primitive in known_primitives:
            compat = compatibility(p.type, primitive)
            if compat is Compatibility.INCOMPATIBLE:
                result.errors.append(f"Modifier '{p.type}' is incompatible with primitive '{primitive}'")
            elif compat is Compatibility.WARN:
                result.warnings.append(
                    f"Modifier '{p.type}' with primitive '{primitive}' may have unexpected behavior"
                )

    types = {p.type for p in result.parsed}
    for a, b, message in INCOMPATIBLE_MODIFIER_PAIRS:
        if a in types and b in types:
            result.errors.append(f"Incompatible modifiers: '{a}' and '{b}' - {message}")

    for current, nxt in zip(result.parsed, result.parsed[1:]):
        for first, second, message in STACKING_ORDER_WARNINGS:
            if current.type == first and nxt.type == second:
                result.warnings.append(f"Stacking order: {message}")

    return result


def validate_combo_modifiers(combo: ComboSkillDefinition) -> ModifierValidationResult:
    """Validate combo-wide and per-skill modifiers.

    Combo-wide modifiers are checked against the combo primitives; each
    skill's modifiers against that skill's primitives. Messages from a skill
    group are prefixed with the skill key.
    """
    total = ModifierValidationResult()

    if combo.modifiers:
        group = validate_modifiers(combo.modifiers, combo.primitives)
        total.errors.extend(group.errors)
        total.warnings.extend(group.warnings)
        total.parsed.extend(group.parsed)

    for skill in combo.skills:
        if not skill.modifiers:
            continue
        group = validate_modifiers(skill.modifiers, skill.primitives)
        prefix = f"Skill '{skill.key}': "
        total.errors.extend(prefix + e for e in group.errors)
        total.warnings.extend(prefix + w for w in group.warnings)
        total.parsed.extend(group.parsed)

    return total


def has_modifiers(combo: ComboSkillDefinition) -> bool:
    return bool(combo.modifiers) or any(s.modifiers for s in combo.skills)


def is_modifier_compatible(modifier_type: str, primitives: Sequence[str]) -> ModifierCompatibility:
    """Check if a single modifier type is compatible with every given primitive.

    Raises:
        ModifierError: If the modifier type or a primitive is unknown.
    """
    warnings: List[str] = []
    compatible = True

    for primitive in primitives:
        compat = compatibility(modifier_type, primitive)
        if compat is Compatibility.INCOMPATIBLE:
            compatible = False
        elif compat is Compatibility.WARN:
            warnings.append(f"'{modifier_type}' with '{primitive}' may have unexpected behavior")

    return ModifierCompatibility(compatible, warnings)


def get_compatible_modifiers(primitives: Sequence[str]) -> List[str]:
    """Get all modifier types compatible with a set of primitives."""
    return [m for m in MODIFIER_TYPES if is_modifier_compatible(m, primitives).compatible]


__all__ = [
    "CompactModifier",
    "StructuredModifier",
    "ModifierDeclaration",
    "ParsedModifier",
    "ModifierValidationResult",
    "ModifierCompatibility",
    "to_declaration",
    "parse_compact_value",
    "normalize",
    "parse_modifier",
    "format_modifier",
    "validate_modifiers",
    "validate_combo_modifiers",
    "has_modifiers",
    "is_modifier_compatible",
    "get_compatible_modifiers",
]
