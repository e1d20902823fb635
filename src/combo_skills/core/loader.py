"""Combo skill definition loading and schema checks.

Definition files are YAML (``.yaml``/``.yml``) or JSON (``.json``). Other
extensions are tried as YAML first, then as JSON. The schema is bundled as
JSON Schema expressed in YAML (``data/schemas/combo-skill.schema.yaml``).
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from jsonschema import Draft202012Validator

from combo_skills.core.exceptions import DefinitionError
from combo_skills.core.types import ComboSkillDefinition
from combo_skills.data import read_yaml as read_data_yaml

logger = logging.getLogger(__name__)

SCHEMA_FILE = "combo-skill.schema.yaml"


def _parse(content: str, path: Path) -> Any:
    ext = path.suffix.lower()
    if ext in (".yaml", ".yml"):
        return yaml.safe_load(content)
    if ext == ".json":
        return json.loads(content)
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError:
        logger.debug("YAML parse failed for %s; trying JSON", path)
        return json.loads(content)


def load_combo_skill_data(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Read a definition file and return the raw mapping.

    Raises:
        DefinitionError: If the file is missing, unparseable, or not a mapping.
    """
    path = Path(file_path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DefinitionError(f"File not found: {path}", context={"path": str(path)}) from exc
    except OSError as exc:
        raise DefinitionError(f"Cannot read {path}: {exc}", context={"path": str(path)}) from exc

    try:
        data = _parse(content, path)
    except (yaml.YAMLError, ValueError) as exc:
        raise DefinitionError(f"Cannot parse {path}: {exc}", context={"path": str(path)}) from exc

    if not isinstance(data, dict):
        raise DefinitionError(
            f"Combo skill definition must be a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data


def load_combo_skill(file_path: Union[str, Path]) -> ComboSkillDefinition:
    """Load a combo skill definition from a ``.combo.yaml`` / ``.combo.json`` file."""
    return ComboSkillDefinition.from_dict(load_combo_skill_data(file_path))


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    schema = read_data_yaml("schemas", SCHEMA_FILE)
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_definition_schema(data: Dict[str, Any]) -> List[str]:
    """Validate raw definition data and return error messages (empty if valid)."""
    errors: List[str] = []
    for error in sorted(_validator().iter_errors(data), key=lambda e: [str(p) for p in e.path]):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


__all__ = [
    "SCHEMA_FILE",
    "load_combo_skill_data",
    "load_combo_skill",
    "validate_definition_schema",
]
