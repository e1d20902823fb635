"""Cross-cutting behavior modifiers (catalog + resolver)."""
from __future__ import annotations

from .model import (
    INCOMPATIBLE_MODIFIER_PAIRS,
    MODIFIER_CONFIG_FIELDS,
    MODIFIER_PRIMITIVE_COMPATIBILITY,
    MODIFIER_TYPES,
    SKILL_PRIMITIVES,
    STACKING_ORDER_WARNINGS,
    Compatibility,
    compatibility,
)
from .validator import (
    CompactModifier,
    ModifierCompatibility,
    ModifierValidationResult,
    ParsedModifier,
    StructuredModifier,
    format_modifier,
    get_compatible_modifiers,
    has_modifiers,
    is_modifier_compatible,
    parse_modifier,
    validate_combo_modifiers,
    validate_modifiers,
)

__all__ = [
    "MODIFIER_TYPES",
    "SKILL_PRIMITIVES",
    "MODIFIER_PRIMITIVE_COMPATIBILITY",
    "MODIFIER_CONFIG_FIELDS",
    "INCOMPATIBLE_MODIFIER_PAIRS",
    "STACKING_ORDER_WARNINGS",
    "Compatibility",
    "compatibility",
    "CompactModifier",
    "StructuredModifier",
    "ParsedModifier",
    "ModifierValidationResult",
    "ModifierCompatibility",
    "parse_modifier",
    "format_modifier",
    "validate_modifiers",
    "validate_combo_modifiers",
    "has_modifiers",
    "is_modifier_compatible",
    "get_compatible_modifiers",
]
