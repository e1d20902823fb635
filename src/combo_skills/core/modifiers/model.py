"""Modifier catalog: types, configuration fields, and compatibility tables.

Everything here is data. The validator in ``validator.py`` only looks
entries up through ``compatibility``; nothing is computed from these tables.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from combo_skills.core.exceptions import ModifierError

MODIFIER_TYPES: Tuple[str, ...] = (
    "retry",
    "cache",
    "timeout",
    "auth",
    "rate-limit",
    "log",
    "fallback",
    "batch",
    "parallel",
    "dry-run",
)

SKILL_PRIMITIVES: Tuple[str, ...] = ("read", "write", "search", "execute", "transform")


class Compatibility(str, Enum):
    """Verdict for a (modifier type, primitive) pair."""

    COMPATIBLE = "compatible"
    WARN = "warn"
    INCOMPATIBLE = "incompatible"


_Y = Compatibility.COMPATIBLE
_W = Compatibility.WARN
_N = Compatibility.INCOMPATIBLE

MODIFIER_PRIMITIVE_COMPATIBILITY: Dict[str, Dict[str, Compatibility]] = {
    "retry": {"read": _Y, "write": _Y, "search": _Y, "execute": _Y, "transform": _N},
    "cache": {"read": _Y, "write": _N, "search": _Y, "execute": _N, "transform": _Y},
    "timeout": {"read": _Y, "write": _Y, "search": _Y, "execute": _Y, "transform": _Y},
    "auth": {"read": _Y, "write": _Y, "search": _Y, "execute": _Y, "transform": _N},
    "rate-limit": {"read": _Y, "write": _Y, "search": _Y, "execute": _Y, "transform": _N},
    "log": {"read": _Y, "write": _Y, "search": _Y, "execute": _Y, "transform": _Y},
    "fallback": {"read": _Y, "write": _W, "search": _Y, "execute": _W, "transform": _Y},
    "batch": {"read": _Y, "write": _Y, "search": _Y, "execute": _N, "transform": _Y},
    "parallel": {"read": _Y, "write": _W, "search": _Y, "execute": _W, "transform": _Y},
    "dry-run": {"read": _N, "write": _Y, "search": _N, "execute": _Y, "transform": _N},
}

# Pairs that must not appear together in one modifier list, in any order.
INCOMPATIBLE_MODIFIER_PAIRS: Tuple[Tuple[str, str, str], ...] = (
    ("cache", "dry-run", "Caching simulated results may cause confusion"),
    ("batch", "parallel", "Use one or the other for collection processing"),
)

# (first, second, message): only fires when `second` immediately follows `first`.
STACKING_ORDER_WARNINGS: Tuple[Tuple[str, str, str], ...] = (
    ("cache", "retry", "Cache before retry may cache failures; prefer retry -> cache"),
    ("dry-run", "cache", "Dry-run before cache may cache simulated results"),
)

# Known configuration fields per modifier type.
MODIFIER_CONFIG_FIELDS: Dict[str, Tuple[str, ...]] = {
    "retry": ("attempts", "backoff", "delay"),
    "cache": ("ttl", "key"),
    "timeout": ("duration",),
    "auth": ("type", "source"),
    "rate-limit": ("requests", "window"),
    "log": ("level", "include"),
    "fallback": ("skill", "value"),
    "batch": ("size", "delay"),
    "parallel": ("concurrency",),
    "dry-run": ("log",),
}


def compatibility(modifier_type: str, primitive: str) -> Compatibility:
    """Look up the verdict for one pair.

    Raises:
        ModifierError: If either the modifier type or the primitive is unknown.
    """
    row = MODIFIER_PRIMITIVE_COMPATIBILITY.get(modifier_type)
    if row is None:
        raise ModifierError(f"Unknown modifier type '{modifier_type}'", context={"type": modifier_type})
    if primitive not in row:
        raise ModifierError(f"Unknown primitive '{primitive}'", context={"primitive": primitive})
    return row[primitive]


__all__ = [
    "MODIFIER_TYPES",
    "SKILL_PRIMITIVES",
    "Compatibility",
    "MODIFIER_PRIMITIVE_COMPATIBILITY",
    "INCOMPATIBLE_MODIFIER_PAIRS",
    "STACKING_ORDER_WARNINGS",
    "MODIFIER_CONFIG_FIELDS",
    "compatibility",
]
