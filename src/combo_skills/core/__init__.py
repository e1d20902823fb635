"""combo-skills core library.

Public entry points for loading, validating and compiling combo skills.
"""

from . import exceptions  # noqa: F401
from .compiler import (
    ComboCompiler,
    CompileOptions,
    compile_combo_skill,
    compile_file,
    validate_combo_skill,
)
from .graph import DependencyGraph, SkillNode, resolve_dependency_graph, validate_constraints
from .loader import load_combo_skill, validate_definition_schema
from .modifiers import (
    MODIFIER_PRIMITIVE_COMPATIBILITY,
    MODIFIER_TYPES,
    get_compatible_modifiers,
    is_modifier_compatible,
    parse_modifier,
    validate_modifiers,
)
from .registry import InMemorySkillCache, SkillsResolver
from .synthesis import PlaceholderSynthesizer
from .types import (
    CompilationResult,
    CompiledSkill,
    ComboSkillDefinition,
    ResolvedComboSkill,
    ResolvedSkill,
    SkillReference,
)

__all__ = [
    "exceptions",
    "ComboCompiler",
    "CompileOptions",
    "compile_combo_skill",
    "compile_file",
    "validate_combo_skill",
    "DependencyGraph",
    "SkillNode",
    "resolve_dependency_graph",
    "validate_constraints",
    "load_combo_skill",
    "validate_definition_schema",
    "MODIFIER_TYPES",
    "MODIFIER_PRIMITIVE_COMPATIBILITY",
    "parse_modifier",
    "validate_modifiers",
    "is_modifier_compatible",
    "get_compatible_modifiers",
    "SkillsResolver",
    "InMemorySkillCache",
    "PlaceholderSynthesizer",
    "SkillReference",
    "ComboSkillDefinition",
    "ResolvedSkill",
    "ResolvedComboSkill",
    "CompiledSkill",
    "CompilationResult",
]
