"""Combo skill compilation pipeline.

Stages run in a fixed order and never loop back:

1. validation   required fields, duplicate keys, ordering constraints
2. graph        dependency graph; cycles are terminal
3. resolution   skill metadata lookups; failures only warn
4. modifiers    modifier parsing and compatibility; errors are terminal
5. synthesis    produce the SKILL.md artifact
6. emission     write the artifact when an output directory is requested

Every stage reports through ``CompilationResult``; collaborator exceptions
are caught here and never reach the caller.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from combo_skills.core.emitter import write_compiled_skill
from combo_skills.core.exceptions import CompilationCancelled, DefinitionError, EmissionError, SynthesisError
from combo_skills.core.graph import format_cycle, resolve_dependency_graph, validate_constraints
from combo_skills.core.loader import load_combo_skill_data, validate_definition_schema
from combo_skills.core.modifiers import has_modifiers, validate_combo_modifiers
from combo_skills.core.registry import SkillsResolver
from combo_skills.core.synthesis import PlaceholderSynthesizer, Synthesizer
from combo_skills.core.types import (
    CompilationResult,
    CompiledSkill,
    ComboSkillDefinition,
    ResolvedComboSkill,
)

logger = logging.getLogger(__name__)

STAGE_VALIDATION = "validation"
STAGE_GRAPH = "graph"
STAGE_MODIFIERS = "modifiers"
STAGE_SYNTHESIS = "synthesis"
STAGE_EMISSION = "emission"
STAGE_CANCELLED = "cancelled"

Emitter = Callable[[CompiledSkill, Union[str, Path]], Any]


@dataclass
class DefinitionValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


@dataclass
class CompileOptions:
    output_dir: Optional[Union[str, Path]] = None
    skip_validation: bool = False
    cancel_event: Optional[asyncio.Event] = None


def validate_combo_skill(combo: ComboSkillDefinition) -> DefinitionValidationResult:
    """Check required fields, skill names, duplicate keys and ordering."""
    result = DefinitionValidationResult()

    if not combo.name:
        result.errors.append("Missing required field: name")
    if not combo.description:
        result.errors.append("Missing required field: description")
    if not combo.skills:
        result.errors.append("Missing required field: skills (must have at least one)")
    if not combo.intent:
        result.errors.append("Missing required field: intent")

    seen: Dict[str, int] = {}
    for index, skill in enumerate(combo.skills):
        if not skill.name:
            result.errors.append(f"Skill at index {index} is missing required field: name")
            continue
        if skill.key in seen:
            result.errors.append(
                f"Duplicate skill key '{skill.key}' (skills {seen[skill.key]} and {index}); "
                "use 'alias' to reference the same skill twice"
            )
        else:
            seen[skill.key] = index

    if combo.ordering:
        result.errors.extend(validate_constraints(combo).errors)

    return result


class ComboCompiler:
    """Drive a definition through every compilation stage.

    Collaborators are injected; the defaults resolve and synthesize offline.
    """

    def __init__(
        self,
        resolver: Optional[SkillsResolver] = None,
        synthesizer: Optional[Synthesizer] = None,
        emitter: Optional[Emitter] = None,
    ) -> None:
        self.resolver = resolver or SkillsResolver()
        self.synthesizer: Synthesizer = synthesizer or PlaceholderSynthesizer()
        self.emitter: Emitter = emitter or write_compiled_skill

    async def compile(
        self,
        combo: ComboSkillDefinition,
        options: Optional[CompileOptions] = None,
    ) -> CompilationResult:
        opts = options or CompileOptions()
        warnings: List[str] = []

        def fail(stage: str, errors: List[str], execution_order: Optional[List[str]] = None) -> CompilationResult:
            logger.debug("Compilation of %s stopped at %s", combo.name or "<unnamed>", stage)
            return CompilationResult(
                success=False,
                errors=errors,
                warnings=warnings,
                stage=stage,
                execution_order=execution_order or [],
            )

        if not opts.skip_validation:
            validation = validate_combo_skill(combo)
            if not validation.valid:
                return fail(STAGE_VALIDATION, validation.errors)

        graph = resolve_dependency_graph(combo)
        if graph.has_cycles:
            described = "; ".join(format_cycle(c) for c in graph.cycles)
            return fail(STAGE_GRAPH, [f"Circular dependencies detected: {described}"])
        logger.debug("Execution order: %s", " -> ".join(graph.execution_order))

        try:
            resolved_skills = await self.resolver.resolve_skills(combo.skills, opts.cancel_event)
        except CompilationCancelled as exc:
            return fail(STAGE_CANCELLED, [str(exc)], graph.execution_order)

        failed = [s.name for s in resolved_skills if not s.resolved]
        if failed:
            warnings.append(f"Some skills could not be resolved: {', '.join(failed)}")

        if has_modifiers(combo):
            modifier_result = validate_combo_modifiers(combo)
            warnings.extend(modifier_result.warnings)
            if not modifier_result.valid:
                return fail(STAGE_MODIFIERS, modifier_result.errors, graph.execution_order)

        resolved = ResolvedComboSkill(
            combo=combo,
            resolved_skills=resolved_skills,
            execution_order=graph.execution_order,
        )

        try:
            compiled = await self.synthesizer.synthesize(resolved, opts.cancel_event)
        except CompilationCancelled as exc:
            return fail(STAGE_CANCELLED, [str(exc)], graph.execution_order)
        except Exception as exc:
            logger.warning("Synthesis failed for %s: %s", combo.name, exc)
            error = exc if isinstance(exc, SynthesisError) else SynthesisError(f"Synthesis failed: {exc}")
            return fail(STAGE_SYNTHESIS, [str(error)], graph.execution_order)

        output_dir: Optional[str] = None
        if opts.output_dir:
            try:
                await asyncio.to_thread(self.emitter, compiled, opts.output_dir)
            except Exception as exc:
                logger.warning("Emission failed for %s: %s", combo.name, exc)
                error = exc if isinstance(exc, EmissionError) else EmissionError(f"Emission failed: {exc}")
                return fail(STAGE_EMISSION, [str(error)], graph.execution_order)
            output_dir = str(opts.output_dir)
            logger.info("Output written to: %s", output_dir)

        return CompilationResult(
            success=True,
            skill=compiled,
            warnings=warnings,
            execution_order=graph.execution_order,
            output_dir=output_dir,
        )


async def compile_combo_skill(
    combo: ComboSkillDefinition,
    options: Optional[CompileOptions] = None,
    *,
    resolver: Optional[SkillsResolver] = None,
    synthesizer: Optional[Synthesizer] = None,
) -> CompilationResult:
    """Compile ``combo`` with the given (or default) collaborators."""
    return await ComboCompiler(resolver=resolver, synthesizer=synthesizer).compile(combo, options)


def load_and_check(file_path: Union[str, Path]) -> Tuple[ComboSkillDefinition, List[str]]:
    """Load a definition file and run the JSON-schema check.

    Returns the definition together with any schema errors.

    Raises:
        DefinitionError: If the file cannot be read or parsed.
    """
    data = load_combo_skill_data(file_path)
    schema_errors = validate_definition_schema(data)
    return ComboSkillDefinition.from_dict(data), schema_errors


async def compile_file(
    file_path: Union[str, Path],
    options: Optional[CompileOptions] = None,
    *,
    resolver: Optional[SkillsResolver] = None,
    synthesizer: Optional[Synthesizer] = None,
) -> CompilationResult:
    """Load, schema-check and compile a definition file.

    Load and schema failures are reported as a failed ``validation`` stage.
    """
    opts = options or CompileOptions()
    try:
        combo, schema_errors = load_and_check(file_path)
    except DefinitionError as exc:
        return CompilationResult(success=False, errors=[str(exc)], stage=STAGE_VALIDATION)

    if schema_errors and not opts.skip_validation:
        return CompilationResult(success=False, errors=schema_errors, stage=STAGE_VALIDATION)

    return await compile_combo_skill(combo, opts, resolver=resolver, synthesizer=synthesizer)


__all__ = [
    "STAGE_VALIDATION",
    "STAGE_GRAPH",
    "STAGE_MODIFIERS",
    "STAGE_SYNTHESIS",
    "STAGE_EMISSION",
    "STAGE_CANCELLED",
    "CompileOptions",
    "DefinitionValidationResult",
    "ComboCompiler",
    "validate_combo_skill",
    "compile_combo_skill",
    "load_and_check",
    "compile_file",
]
