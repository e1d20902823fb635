from __future__ import annotations

from typing import Any, Dict, Mapping


class ComboSkillsError(Exception):
    """Base exception for combo-skills."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class DefinitionError(ComboSkillsError, ValueError):
    """Raised when a combo skill definition is missing fields or malformed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ComboSkillsError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ModifierError(ComboSkillsError, ValueError):
    """Raised when a modifier declaration cannot be parsed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ComboSkillsError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ResolutionError(ComboSkillsError):
    """Raised by a registry lookup that cannot resolve a skill."""


class CompilationCancelled(ComboSkillsError):
    """Raised when the caller's cancellation signal fires during a collaborator call."""


class SynthesisError(ComboSkillsError):
    """Raised when artifact synthesis fails."""


class EmissionError(ComboSkillsError, OSError):
    """Raised when a compiled skill cannot be written to disk."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ComboSkillsError.__init__(self, message, context=context)
        OSError.__init__(self, message)


__all__ = [
    "ComboSkillsError",
    "DefinitionError",
    "ModifierError",
    "ResolutionError",
    "CompilationCancelled",
    "SynthesisError",
    "EmissionError",
]
