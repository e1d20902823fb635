"""Skill metadata cache.

The cache is passed into ``SkillsResolver`` rather than living at module
level, so tests and concurrent compilations only share a cache when a caller
hands the same instance to both.
"""
from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

from combo_skills.core.types import DEFAULT_REGISTRY, DEFAULT_VERSION, ResolvedSkill, SkillReference


class SkillCache(Protocol):
    def get(self, key: str) -> Optional[ResolvedSkill]: ...

    def set(self, key: str, value: ResolvedSkill) -> None: ...

    def clear(self) -> None: ...

    def __len__(self) -> int: ...


def cache_key(ref: SkillReference, default_registry: str = DEFAULT_REGISTRY) -> str:
    """Key a reference by ``registry:name:version``."""
    return f"{ref.registry(default_registry)}:{ref.name}:{ref.version or DEFAULT_VERSION}"


class InMemorySkillCache:
    """Thread-safe in-process cache.

    Racing writers for the same key simply overwrite each other; a miss only
    costs a redundant lookup.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, ResolvedSkill] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[ResolvedSkill]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: ResolvedSkill) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["SkillCache", "InMemorySkillCache", "cache_key"]
