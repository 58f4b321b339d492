"""
zlang - Z notation to JavaScript compiler

Bundles imported units, expands user-defined macros and transliterates the
resulting directive stream into JavaScript.
"""

__version__ = "1.0.0"

from .bundler import Bundler
from .macros import MacroTableBuilder, MacroExpander
from .compiler import Compiler
from .directives import DirectiveRegistry, PassthroughTracker
from .project import compile_project, project_flatten
from .errors import (
    ZLangError,
    UnitNotFound,
    ImportCycle,
    MacroExpansionOverflow,
    UnrecognizedDirective,
)
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "Bundler",
    "MacroTableBuilder",
    "MacroExpander",
    "Compiler",
    "DirectiveRegistry",
    "PassthroughTracker",
    "compile_project",
    "project_flatten",
    "ZLangError",
    "UnitNotFound",
    "ImportCycle",
    "MacroExpansionOverflow",
    "UnrecognizedDirective",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
