"""Core record types for combo skills.

- Combo skill definitions (input, as authored by the user)
- Resolved skills (intermediate, from a registry)
- Compiled skills (output artifact)

Definitions are built once from loaded YAML/JSON data and never mutated
afterwards; every later stage derives new records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

SkillPrimitive = Literal["read", "write", "search", "execute", "transform"]

# A raw modifier declaration: "retry:3" or {"retry": {"attempts": 3}}
RawModifier = Union[str, Dict[str, Any]]

DEFAULT_REGISTRY = "skills.sh"
DEFAULT_VERSION = "latest"


def _str_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _modifier_list(value: Any) -> List[RawModifier]:
    if not value:
        return []
    if isinstance(value, (str, Mapping)):
        return [value if isinstance(value, str) else dict(value)]
    return list(value)


@dataclass(frozen=True)
class SkillReference:
    """Reference to a skill in a combo skill definition."""

    name: str
    from_: Optional[str] = None
    version: Optional[str] = None
    alias: Optional[str] = None
    primitives: List[str] = field(default_factory=list)
    modifiers: List[RawModifier] = field(default_factory=list)

    @property
    def key(self) -> str:
        """Identity used by ordering constraints and the dependency graph."""
        return self.alias or self.name

    def registry(self, default: str = DEFAULT_REGISTRY) -> str:
        return self.from_ or default

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SkillReference":
        return cls(
            name=str(data.get("name") or ""),
            from_=data.get("from"),
            version=None if data.get("version") is None else str(data.get("version")),
            alias=data.get("alias"),
            primitives=_str_list(data.get("primitives")),
            modifiers=_modifier_list(data.get("modifiers")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        if self.from_:
            out["from"] = self.from_
        if self.version:
            out["version"] = self.version
        if self.alias:
            out["alias"] = self.alias
        if self.primitives:
            out["primitives"] = list(self.primitives)
        if self.modifiers:
            out["modifiers"] = list(self.modifiers)
        return out


@dataclass(frozen=True)
class DataFlowMapping:
    from_: str
    to: str
    mapping: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DataFlowMapping":
        return cls(
            from_=str(data.get("from") or ""),
            to=str(data.get("to") or ""),
            mapping={str(k): str(v) for k, v in (data.get("mapping") or {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"from": self.from_, "to": self.to}
        if self.mapping:
            out["mapping"] = dict(self.mapping)
        return out


@dataclass(frozen=True)
class ComboConstraints:
    """Ordering rules, domain assumptions, and explicit data flow."""

    ordering: List[str] = field(default_factory=list)
    assumptions: List[str] = field(default_factory=list)
    data_flow: List[DataFlowMapping] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComboConstraints":
        return cls(
            ordering=_str_list(data.get("ordering")),
            assumptions=_str_list(data.get("assumptions")),
            data_flow=[
                DataFlowMapping.from_dict(item)
                for item in (data.get("data_flow") or [])
                if isinstance(item, Mapping)
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.ordering:
            out["ordering"] = list(self.ordering)
        if self.assumptions:
            out["assumptions"] = list(self.assumptions)
        if self.data_flow:
            out["data_flow"] = [d.to_dict() for d in self.data_flow]
        return out


@dataclass(frozen=True)
class ComboMetadata:
    author: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    license: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComboMetadata":
        return cls(
            author=data.get("author"),
            tags=_str_list(data.get("tags")),
            license=data.get("license"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.author:
            out["author"] = self.author
        if self.tags:
            out["tags"] = list(self.tags)
        if self.license:
            out["license"] = self.license
        return out


@dataclass(frozen=True)
class ComboSkillDefinition:
    """A combo skill definition as authored by the user."""

    name: str
    description: str
    skills: List[SkillReference]
    intent: str
    version: Optional[str] = None
    primitives: List[str] = field(default_factory=list)
    modifiers: List[RawModifier] = field(default_factory=list)
    constraints: Optional[ComboConstraints] = None
    metadata: Optional[ComboMetadata] = None

    @property
    def ordering(self) -> List[str]:
        return list(self.constraints.ordering) if self.constraints else []

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComboSkillDefinition":
        """Build a definition from loaded YAML/JSON data.

        Missing required fields become empty values so that structural
        validation can report every problem at once instead of failing on
        the first one.
        """
        constraints = data.get("constraints")
        metadata = data.get("metadata")
        return cls(
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            skills=[
                SkillReference.from_dict(s if isinstance(s, Mapping) else {"name": s})
                for s in (data.get("skills") or [])
            ],
            intent=str(data.get("intent") or ""),
            version=None if data.get("version") is None else str(data.get("version")),
            primitives=_str_list(data.get("primitives")),
            modifiers=_modifier_list(data.get("modifiers")),
            constraints=ComboConstraints.from_dict(constraints) if isinstance(constraints, Mapping) else None,
            metadata=ComboMetadata.from_dict(metadata) if isinstance(metadata, Mapping) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
        }
        if self.version:
            out["version"] = self.version
        if self.primitives:
            out["primitives"] = list(self.primitives)
        if self.modifiers:
            out["modifiers"] = list(self.modifiers)
        out["skills"] = [s.to_dict() for s in self.skills]
        out["intent"] = self.intent
        if self.constraints is not None:
            out["constraints"] = self.constraints.to_dict()
        if self.metadata is not None:
            out["metadata"] = self.metadata.to_dict()
        return out


@dataclass(frozen=True)
class ResolvedSkill:
    """A skill after resolution from a registry."""

    name: str
    from_: str
    version: str
    description: str
    resolved: bool
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "from": self.from_,
            "version": self.version,
            "description": self.description,
            "resolved": self.resolved,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class ResolvedComboSkill:
    """A combo skill with all referenced skills resolved."""

    combo: ComboSkillDefinition
    resolved_skills: List[ResolvedSkill]
    execution_order: List[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.combo.name


@dataclass(frozen=True)
class CompiledSkill:
    """The output artifact of compilation."""

    name: str
    version: str
    skill_md: str
    metadata: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "skillMd": self.skill_md,
            "metadata": dict(self.metadata),
        }


@dataclass
class CompilationResult:
    """Aggregated outcome of a compilation run."""

    success: bool
    skill: Optional[CompiledSkill] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stage: Optional[str] = None
    execution_order: List[str] = field(default_factory=list)
    output_dir: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "executionOrder": list(self.execution_order),
        }
        if self.stage:
            out["stage"] = self.stage
        if self.skill is not None:
            out["skill"] = self.skill.to_dict()
        if self.output_dir:
            out["outputDir"] = self.output_dir
        return out


__all__ = [
    "SkillPrimitive",
    "RawModifier",
    "DEFAULT_REGISTRY",
    "DEFAULT_VERSION",
    "SkillReference",
    "DataFlowMapping",
    "ComboConstraints",
    "ComboMetadata",
    "ComboSkillDefinition",
    "ResolvedSkill",
    "ResolvedComboSkill",
    "CompiledSkill",
    "CompilationResult",
]
