from __future__ import annotations

import asyncio

import pytest

from combo_skills.core.exceptions import CompilationCancelled
from combo_skills.core.registry import (
    InMemorySkillCache,
    PlaceholderSkillLookup,
    SkillsResolver,
    cache_key,
)
from combo_skills.core.types import SkillReference
from helpers.fakes import BlockingLookup, RecordingLookup


def test_cache_key_uses_registry_name_and_version():
    assert cache_key(SkillReference(name="fetch")) == "skills.sh:fetch:latest"
    assert cache_key(SkillReference(name="fetch", from_="acme", version="2.1")) == "acme:fetch:2.1"
    assert cache_key(SkillReference(name="fetch"), default_registry="local") == "local:fetch:latest"


def test_placeholder_lookup_describes_atomic_skill():
    resolver = SkillsResolver()

    resolved = asyncio.run(resolver.resolve_skill(SkillReference(name="fetch")))

    assert resolved.resolved
    assert resolved.description == "Atomic skill: fetch"
    assert resolved.from_ == "skills.sh"
    assert resolved.version == "latest"


def test_resolve_skills_keeps_order_and_marks_failures():
    lookup = RecordingLookup(failing={"parse"})
    resolver = SkillsResolver(lookup)
    refs = [SkillReference(name=n) for n in ("fetch", "parse", "extract")]

    resolved = asyncio.run(resolver.resolve_skills(refs))

    assert [s.name for s in resolved] == ["fetch", "parse", "extract"]
    assert [s.resolved for s in resolved] == [True, False, True]
    failed = resolved[1]
    assert failed.description == "[Resolution failed] parse"
    assert failed.metadata["error"] == "parse not found in skills.sh"
    assert sorted(lookup.calls) == ["skills.sh:extract", "skills.sh:fetch", "skills.sh:parse"]


def test_cache_hit_skips_lookup():
    lookup = RecordingLookup()
    cache = InMemorySkillCache()
    resolver = SkillsResolver(lookup, cache)
    ref = SkillReference(name="fetch", from_="acme")

    asyncio.run(resolver.resolve_skill(ref))
    asyncio.run(resolver.resolve_skill(ref))

    assert lookup.calls == ["acme:fetch"]
    assert len(cache) == 1


def test_failed_resolutions_are_not_cached():
    lookup = RecordingLookup(failing={"parse"})
    cache = InMemorySkillCache()
    resolver = SkillsResolver(lookup, cache)

    asyncio.run(resolver.resolve_skills([SkillReference(name="parse")]))
    asyncio.run(resolver.resolve_skills([SkillReference(name="parse")]))

    assert lookup.calls == ["skills.sh:parse", "skills.sh:parse"]
    assert len(cache) == 0


def test_separate_resolvers_do_not_share_a_cache():
    lookup = RecordingLookup()
    ref = SkillReference(name="fetch")

    asyncio.run(SkillsResolver(lookup).resolve_skill(ref))
    asyncio.run(SkillsResolver(lookup).resolve_skill(ref))

    assert lookup.calls == ["skills.sh:fetch", "skills.sh:fetch"]


def test_cache_can_be_disabled():
    lookup = RecordingLookup()
    resolver = SkillsResolver(lookup, use_cache=False)
    ref = SkillReference(name="fetch")

    asyncio.run(resolver.resolve_skill(ref))
    asyncio.run(resolver.resolve_skill(ref))

    assert len(lookup.calls) == 2
    assert len(resolver.cache) == 0


def test_timeout_becomes_placeholder():
    resolver = SkillsResolver(BlockingLookup(), timeout=0.01)

    resolved = asyncio.run(resolver.resolve_skills([SkillReference(name="slow")]))

    assert not resolved[0].resolved
    assert "timed out" in resolved[0].metadata["error"]


def test_cancel_event_stops_resolution():
    async def run():
        lookup = BlockingLookup()
        resolver = SkillsResolver(lookup, timeout=None)
        cancel = asyncio.Event()
        task = asyncio.ensure_future(resolver.resolve_skills([SkillReference(name="slow")], cancel))
        await lookup.started.wait()
        cancel.set()
        return await task

    with pytest.raises(CompilationCancelled):
        asyncio.run(run())


def test_skill_exists():
    resolver = SkillsResolver(RecordingLookup(failing={"ghost"}))

    assert asyncio.run(resolver.skill_exists("fetch"))
    assert not asyncio.run(resolver.skill_exists("ghost"))


def test_from_config():
    resolver = SkillsResolver.from_config(
        {"default": "local", "timeout_seconds": 5, "cache": False},
        lookup=PlaceholderSkillLookup(),
    )

    assert resolver.default_registry == "local"
    assert resolver.timeout == 5.0
    assert resolver.use_cache is False
