"""
zlang - Z notation to JavaScript compiler

A line-oriented scripting notation with imports and user-defined macros,
compiled to a single JavaScript program.
"""

__version__ = "1.0.0"

from .lib import (
    compile_project,
    project_flatten,
    Bundler,
    MacroTableBuilder,
    MacroExpander,
    Compiler,
    DirectiveRegistry,
    ZLangError,
    UnitNotFound,
    ImportCycle,
    MacroExpansionOverflow,
    UnrecognizedDirective,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "compile_project",
    "project_flatten",
    "Bundler",
    "MacroTableBuilder",
    "MacroExpander",
    "Compiler",
    "DirectiveRegistry",
    "ZLangError",
    "UnitNotFound",
    "ImportCycle",
    "MacroExpansionOverflow",
    "UnrecognizedDirective",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
