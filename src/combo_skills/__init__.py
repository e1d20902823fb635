"""
combo-skills - Compose agent skills into higher-level capabilities

combo-skills compiles a declarative combo skill definition (a bundle of
references to existing skills, ordering constraints and cross-cutting
modifiers) into a new, standalone skill artifact.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
