"""
combo-skills configuration management (YAML, layered, env-overridable).

Configuration sources (highest to lowest priority):
1. Environment variables: COMBO_SKILLS_<SECTION>__<KEY>
2. Project config: combo-skills.yaml or .combo-skills/config.yaml
3. Bundled defaults: combo_skills.data/config/defaults.yaml
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from combo_skills.core.exceptions import ComboSkillsError
from combo_skills.core.utils.merge import deep_merge
from combo_skills.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "COMBO_SKILLS_"
PROJECT_CONFIG_FILES = ("combo-skills.yaml", "combo-skills.yml", ".combo-skills/config.yaml")

_config_cache: Dict[str, Dict[str, Any]] = {}


class ConfigError(ComboSkillsError):
    """Raised when a configuration file cannot be loaded."""


class ComboSkillsConfig:
    """Load and merge combo-skills configuration for one project root."""

    def __init__(self, project_root: Optional[Path] = None) -> None:
        self.project_root = (project_root or Path.cwd()).expanduser().resolve()
        self.defaults_path = get_data_path("config", "defaults.yaml")

    def project_config_path(self) -> Optional[Path]:
        for rel in PROJECT_CONFIG_FILES:
            candidate = self.project_root / rel
            if candidate.exists():
                return candidate
        return None

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot load config {path}: {exc}", context={"path": str(path)}) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a YAML mapping", context={"path": str(path)})
        return data

    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if low in {"null", "none"}:
            return None
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return s
        return s

    def _env_overrides(self) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for key in sorted(os.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            segs: List[str] = [s.lower() for s in raw.split("__")]
            if not raw or any(not s for s in segs):
                logger.warning("Ignoring malformed config env var: %s", key)
                continue
            node = overrides
            for seg in segs[:-1]:
                node = node.setdefault(seg, {})
            node[segs[-1]] = self._coerce_type(os.environ[key])
        return overrides

    def load_config(self) -> Dict[str, Any]:
        """Return the merged configuration (defaults < project < env)."""
        cfg = self.load_yaml(self.defaults_path)
        project_path = self.project_config_path()
        if project_path is not None:
            logger.debug("Loading project config: %s", project_path)
            cfg = deep_merge(cfg, self.load_yaml(project_path))
        return deep_merge(cfg, self._env_overrides())


def _cache_key(project_root: Optional[Path]) -> str:
    root = str((project_root or Path.cwd()).expanduser().resolve())
    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    return f"{root}:{env_items!r}"


def get_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration for ``project_root`` (cached per root and env)."""
    key = _cache_key(project_root)
    cached = _config_cache.get(key)
    if cached is None:
        cached = ComboSkillsConfig(project_root).load_config()
        _config_cache[key] = cached
    return cached


def get_section(section: str, project_root: Optional[Path] = None) -> Dict[str, Any]:
    value = get_config(project_root).get(section) or {}
    return value if isinstance(value, dict) else {}


def clear_config_cache() -> None:
    _config_cache.clear()


__all__ = [
    "ConfigError",
    "ComboSkillsConfig",
    "get_config",
    "get_section",
    "clear_config_cache",
]
