"""Write compiled skills to disk.

Layout of an emitted skill directory::

    <output_dir>/
        SKILL.md
        metadata.json
        examples/
            basic.md
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from combo_skills.core.exceptions import EmissionError
from combo_skills.core.synthesis.templates import EXAMPLE_TEMPLATE, render_template
from combo_skills.core.types import CompiledSkill
from combo_skills.core.utils.io import ensure_directory, write_json, write_text

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"
METADATA_FILE = "metadata.json"
EXAMPLES_DIR = "examples"
BASIC_EXAMPLE_FILE = "basic.md"


def write_compiled_skill(skill: CompiledSkill, output_dir: Union[str, Path]) -> Path:
    """Persist ``skill`` under ``output_dir`` and return the directory.

    Raises:
        EmissionError: If any file cannot be written.
    """
    out = Path(output_dir)
    try:
        ensure_directory(out)
        write_text(out / SKILL_FILE, skill.skill_md)
        write_json(
            out / METADATA_FILE,
            {"name": skill.name, "version": skill.version, **skill.metadata},
        )
        write_text(
            out / EXAMPLES_DIR / BASIC_EXAMPLE_FILE,
            render_template(EXAMPLE_TEMPLATE, skill=skill),
        )
    except OSError as exc:
        raise EmissionError(
            f"Failed to write compiled skill to {out}: {exc}",
            context={"output_dir": str(out)},
        ) from exc

    logger.debug("Wrote %s to %s", skill.name, out)
    return out


__all__ = ["write_compiled_skill", "SKILL_FILE", "METADATA_FILE", "EXAMPLES_DIR", "BASIC_EXAMPLE_FILE"]
