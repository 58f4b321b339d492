"""
Project-level entry points

Runs the whole pipeline over a file set:

    file set -> Bundler -> MacroTableBuilder -> MacroExpander -> Compiler

Each call builds its own CompilationContext; nothing is shared between
runs.
"""

from typing import List, Mapping, Optional

from ..config import AppSettings, appsettings
from ..models.context import CompilationContext
from ..models.source import SourceLine, sourceLines_join
from .bundler import Bundler
from .compiler import Compiler
from .log import LOG
from .macros import MacroExpander, MacroTableBuilder, comments_strip


def lines_flatten(
    context: CompilationContext, entry_unit: str, settings: AppSettings
) -> List[SourceLine]:
    """
    Bundle, extract macros and expand calls within one context

    Returns:
        The final directive stream, ready for the line compiler, with
        comments from expanded macro bodies removed
    """
    bundled = Bundler(context, settings).lines_bundle(entry_unit)
    LOG(f"Bundled {entry_unit}: {len(bundled)} lines", level=1)

    extracted = MacroTableBuilder().extract(bundled)
    context.macro_table = extracted.table

    expander = MacroExpander(
        context.macro_table,
        max_passes=settings.macro_max_passes,
        max_lines=settings.macro_max_lines,
    )
    return comments_strip(expander.expand(extracted.residual))


def project_flatten(
    entry_unit: str, file_set: Mapping[str, str], settings: Optional[AppSettings] = None
) -> str:
    """
    Produce the bundled, macro-expanded Z source of a project

    The result contains no imports, macro definitions or comments and
    compiles to the same code as the original project.
    """
    settings = settings or appsettings
    context = CompilationContext.create(file_set)
    return sourceLines_join(lines_flatten(context, entry_unit, settings))


def compile_project(
    entry_unit: str, file_set: Mapping[str, str], settings: Optional[AppSettings] = None
) -> str:
    """
    Compile a Z project to JavaScript

    Args:
        entry_unit: Name of the unit to start from (e.g. "main.z")
        file_set: Unit name -> unit text for every available unit
        settings: Compiler settings (defaults to the environment-driven
                  appsettings singleton)

    Returns:
        Generated JavaScript source

    Raises:
        UnitNotFound: An import names a unit missing from the file set
        ImportCycle: A unit imports itself directly or indirectly
        MacroExpansionOverflow: Macro expansion does not terminate
        UnrecognizedDirective: A line matches no directive (strict mode)

    Example:
        >>> print(compile_project("main.z", {"main.z": '<print^set.index="hi">'}), end="")
        (function() { // main.z
        console.log("hi");
        })(); // main.z
    """
    settings = settings or appsettings
    context = CompilationContext.create(file_set)

    lines = lines_flatten(context, entry_unit, settings)

    compiler = Compiler(
        lines,
        strict=settings.strict_mode,
        declaration_keyword=settings.declaration_keyword,
        wrap_name=entry_unit if settings.wrap_output else None,
    )
    return compiler.compile()
