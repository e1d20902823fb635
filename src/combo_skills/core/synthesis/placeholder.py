"""Synthesizer protocol and the offline placeholder implementation.

Synthesis is non-deterministic for real providers; callers must not memoize
or compare synthesizer output. The placeholder renders a SKILL.md from the
bundled templates so the pipeline can run without an LLM.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Protocol

from combo_skills.core.cancellation import check_cancelled
from combo_skills.core.exceptions import ModifierError
from combo_skills.core.modifiers import format_modifier, parse_modifier
from combo_skills.core.types import CompiledSkill, RawModifier, ResolvedComboSkill

from .templates import PROMPT_TEMPLATE, SKILL_TEMPLATE, render_template

logger = logging.getLogger(__name__)

DEFAULT_SKILL_VERSION = "0.1.0"
COMPILATION_MODE = "llm-placeholder"


class Synthesizer(Protocol):
    async def synthesize(
        self,
        resolved: ResolvedComboSkill,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CompiledSkill: ...


def build_synthesis_prompt(resolved: ResolvedComboSkill) -> str:
    """Build the prompt a provider would receive for ``resolved``."""
    return render_template(
        PROMPT_TEMPLATE,
        combo=resolved.combo,
        resolved_skills=resolved.resolved_skills,
        constraints=resolved.combo.constraints,
        execution_order=resolved.execution_order,
    ).strip()


def usage_summary(description: str) -> str:
    return description.split(".")[0].lower()


def _describe(modifier: RawModifier) -> str:
    parsed = parse_modifier(modifier)
    try:
        return format_modifier(parsed)
    except ModifierError:
        # Structured configs without a compact form are shown by type only
        return parsed.type


def _modifier_lines(resolved: ResolvedComboSkill) -> List[str]:
    combo = resolved.combo
    lines = [f"All skills: {_describe(m)}" for m in combo.modifiers]
    for skill in combo.skills:
        lines.extend(f"{skill.key}: {_describe(m)}" for m in skill.modifiers)
    return lines


def render_skill_md(resolved: ResolvedComboSkill) -> str:
    combo = resolved.combo
    return render_template(
        SKILL_TEMPLATE,
        combo=combo,
        resolved_skills=resolved.resolved_skills,
        execution_order=resolved.execution_order if combo.ordering else [],
        modifiers=_modifier_lines(resolved),
        usage_summary=usage_summary(combo.description),
    )


class PlaceholderSynthesizer:
    """Render a SKILL.md without calling a provider."""

    def __init__(
        self,
        *,
        provider: str = "local",
        model: Optional[str] = None,
        temperature: float = 0.3,
        default_version: str = DEFAULT_SKILL_VERSION,
    ) -> None:
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.default_version = default_version

    @classmethod
    def from_config(cls, synthesis_cfg: Mapping[str, Any]) -> "PlaceholderSynthesizer":
        temperature = synthesis_cfg.get("temperature")
        return cls(
            provider=str(synthesis_cfg.get("provider") or "local"),
            model=synthesis_cfg.get("model"),
            temperature=0.3 if temperature is None else float(temperature),
            default_version=str(synthesis_cfg.get("default_version") or DEFAULT_SKILL_VERSION),
        )

    async def synthesize(
        self,
        resolved: ResolvedComboSkill,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CompiledSkill:
        check_cancelled(cancel_event, "Synthesis")
        logger.debug(
            "Starting synthesis for %s using %d skills (provider=%s)",
            resolved.name,
            len(resolved.resolved_skills),
            self.provider,
        )

        prompt = build_synthesis_prompt(resolved)
        logger.debug("Generated prompt (%d chars)", len(prompt))

        skill_md = render_skill_md(resolved)
        return CompiledSkill(
            name=resolved.name,
            version=resolved.combo.version or self.default_version,
            skill_md=skill_md,
            metadata={
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "sourceCombo": resolved.name,
                "compilationMode": COMPILATION_MODE,
                "skills": [s.name for s in resolved.resolved_skills],
            },
        )


__all__ = [
    "Synthesizer",
    "PlaceholderSynthesizer",
    "build_synthesis_prompt",
    "render_skill_md",
    "usage_summary",
    "DEFAULT_SKILL_VERSION",
    "COMPILATION_MODE",
]
