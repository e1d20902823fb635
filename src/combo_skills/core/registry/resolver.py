"""Skills registry resolver.

Fetches skill metadata from external registries like skills.sh. Skills are
treated as opaque units; only their metadata is needed for compilation.

- Skills are resolved by name and registry
- Resolved skills are cached in an injectable ``SkillCache``
- Resolution failures are non-fatal: a failed lookup becomes an unresolved
  placeholder so compilation can proceed with partial metadata
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Protocol, Sequence

from combo_skills.core.cancellation import check_cancelled, run_cancellable
from combo_skills.core.exceptions import CompilationCancelled
from combo_skills.core.types import DEFAULT_REGISTRY, DEFAULT_VERSION, ResolvedSkill, SkillReference

from .cache import InMemorySkillCache, SkillCache, cache_key

logger = logging.getLogger(__name__)


class SkillLookup(Protocol):
    """Registry backend: fetch metadata for one reference or raise."""

    async def lookup(self, ref: SkillReference, registry: str) -> ResolvedSkill: ...


class PlaceholderSkillLookup:
    """Offline lookup that describes every skill as an atomic skill.

    Stands in for a real registry client (``npx skills info`` or an HTTP API).
    """

    async def lookup(self, ref: SkillReference, registry: str) -> ResolvedSkill:
        return ResolvedSkill(
            name=ref.name,
            from_=registry,
            version=ref.version or DEFAULT_VERSION,
            description=f"Atomic skill: {ref.name}",
            resolved=True,
            metadata={
                "resolvedAt": datetime.now(timezone.utc).isoformat(),
                "source": "placeholder",
            },
        )


def unresolved_placeholder(ref: SkillReference, registry: str, error: BaseException) -> ResolvedSkill:
    return ResolvedSkill(
        name=ref.name,
        from_=registry,
        version=ref.version or DEFAULT_VERSION,
        description=f"[Resolution failed] {ref.name}",
        resolved=False,
        metadata={"error": str(error) or type(error).__name__},
    )


class SkillsResolver:
    """Resolve skill references through a ``SkillLookup`` with caching."""

    def __init__(
        self,
        lookup: Optional[SkillLookup] = None,
        cache: Optional[SkillCache] = None,
        *,
        default_registry: str = DEFAULT_REGISTRY,
        timeout: Optional[float] = 30.0,
        use_cache: bool = True,
    ) -> None:
        self.lookup = lookup or PlaceholderSkillLookup()
        self.cache = cache if cache is not None else InMemorySkillCache()
        self.default_registry = default_registry
        self.timeout = timeout
        self.use_cache = use_cache

    @classmethod
    def from_config(
        cls,
        registry_cfg: Mapping[str, Any],
        *,
        lookup: Optional[SkillLookup] = None,
        cache: Optional[SkillCache] = None,
    ) -> "SkillsResolver":
        timeout = registry_cfg.get("timeout_seconds")
        return cls(
            lookup=lookup,
            cache=cache,
            default_registry=str(registry_cfg.get("default") or DEFAULT_REGISTRY),
            timeout=float(timeout) if timeout else None,
            use_cache=bool(registry_cfg.get("cache", True)),
        )

    async def resolve_skill(
        self,
        ref: SkillReference,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ResolvedSkill:
        """Resolve a single skill reference.

        Raises whatever the lookup raises, plus ``TimeoutError`` and
        ``CompilationCancelled``.
        """
        registry = ref.registry(self.default_registry)
        key = cache_key(ref, self.default_registry)

        if self.use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit: %s", key)
                return cached

        logger.debug("Resolving: %s from %s", ref.name, registry)
        resolved = await run_cancellable(
            self.lookup.lookup(ref, registry),
            cancel_event,
            timeout=self.timeout,
            what=f"Resolution of {ref.name}",
        )

        if self.use_cache and resolved.resolved:
            self.cache.set(key, resolved)
        return resolved

    async def resolve_skills(
        self,
        refs: Sequence[SkillReference],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[ResolvedSkill]:
        """Resolve references concurrently; failures become placeholders.

        Results keep the order of ``refs``. One failing lookup never cancels
        its siblings.

        Raises:
            CompilationCancelled: If ``cancel_event`` fires during resolution.
        """
        logger.debug("Resolving %d skills", len(refs))
        check_cancelled(cancel_event, "Skill resolution")

        results = await asyncio.gather(
            *(self.resolve_skill(ref, cancel_event) for ref in refs),
            return_exceptions=True,
        )
        check_cancelled(cancel_event, "Skill resolution")

        resolved: List[ResolvedSkill] = []
        failed: List[str] = []
        for ref, result in zip(refs, results):
            if isinstance(result, CompilationCancelled):
                raise result
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                failed.append(ref.name)
                resolved.append(unresolved_placeholder(ref, ref.registry(self.default_registry), result))
            else:
                resolved.append(result)

        if failed:
            logger.warning("Failed to resolve: %s", ", ".join(failed))
        return resolved

    async def skill_exists(self, name: str, from_: Optional[str] = None) -> bool:
        """Check whether a registry can resolve ``name``."""
        try:
            resolved = await self.resolve_skill(SkillReference(name=name, from_=from_))
        except Exception as exc:
            logger.debug("Existence check failed for %s: %s", name, exc)
            return False
        return resolved.resolved


__all__ = [
    "SkillLookup",
    "PlaceholderSkillLookup",
    "SkillsResolver",
    "unresolved_placeholder",
]
