"""Jinja2 rendering for bundled synthesis templates."""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from jinja2 import Environment, StrictUndefined

from combo_skills.data import read_text

PROMPT_TEMPLATE = "prompt.md.j2"
SKILL_TEMPLATE = "SKILL.md.j2"
EXAMPLE_TEMPLATE = "basic.md.j2"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(trim_blocks=True, lstrip_blocks=True, undefined=StrictUndefined)


def render_template(name: str, **context: Any) -> str:
    """Render a template from ``combo_skills/data/templates``."""
    template = _environment().from_string(read_text("templates", name))
    return template.render(**context)


__all__ = ["PROMPT_TEMPLATE", "SKILL_TEMPLATE", "EXAMPLE_TEMPLATE", "render_template"]
