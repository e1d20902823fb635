"""Artifact synthesis."""
from __future__ import annotations

from .placeholder import (
    COMPILATION_MODE,
    DEFAULT_SKILL_VERSION,
    PlaceholderSynthesizer,
    Synthesizer,
    build_synthesis_prompt,
    render_skill_md,
    usage_summary,
)
from .templates import render_template

__all__ = [
    "Synthesizer",
    "PlaceholderSynthesizer",
    "build_synthesis_prompt",
    "render_skill_md",
    "render_template",
    "usage_summary",
    "DEFAULT_SKILL_VERSION",
    "COMPILATION_MODE",
]
