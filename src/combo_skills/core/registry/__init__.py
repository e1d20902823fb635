"""Skill registry resolution."""
from __future__ import annotations

from .cache import InMemorySkillCache, SkillCache, cache_key
from .resolver import PlaceholderSkillLookup, SkillLookup, SkillsResolver, unresolved_placeholder

__all__ = [
    "SkillCache",
    "InMemorySkillCache",
    "cache_key",
    "SkillLookup",
    "PlaceholderSkillLookup",
    "SkillsResolver",
    "unresolved_placeholder",
]
