"""
Models package for zlang

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .source import SourceLine, sourceLines_split, sourceLines_coerce, sourceLines_join
from .directives import DirectiveSpec, DirectiveKind, DirectiveLine, UPSTREAM_KINDS
from .macros import MacroDefinition, MacroTable, ExtractedMacros, MacroCall
from .context import CompilationContext

__all__ = [
    "ProgramState",
    "pipeline",
    "SourceLine",
    "sourceLines_split",
    "sourceLines_coerce",
    "sourceLines_join",
    "DirectiveSpec",
    "DirectiveKind",
    "DirectiveLine",
    "UPSTREAM_KINDS",
    "MacroDefinition",
    "MacroTable",
    "ExtractedMacros",
    "MacroCall",
    "CompilationContext",
]
