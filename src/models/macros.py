"""
Macro data models

Type-safe structures for the macro table builder and expander.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .source import SourceLine


@dataclass(frozen=True)
class MacroDefinition:
    """
    A named, parameterized line template

    Created once per `<command^crt>` block and never modified afterwards.

    Attributes:
        name: Macro name, an identifier
        parameters: Placeholder tokens, in positional binding order
        body: Template lines that may contain placeholder occurrences

    Example:
        For the block
            <command^crt>
            greet(name, msg)
            <print^set.incode="name + msg">
            <cmd^add>
        MacroDefinition(
            name="greet",
            parameters=("name", "msg"),
            body=('<print^set.incode="name + msg">',)
        )
    """
    name: str
    parameters: Tuple[str, ...]
    body: Tuple[str, ...]


# Macro name -> definition; later definitions overwrite earlier ones
MacroTable = Dict[str, MacroDefinition]


@dataclass
class ExtractedMacros:
    """
    Result of scanning a source stream for macro definitions

    Returned by MacroTableBuilder.extract().

    Attributes:
        table: Macros defined in the stream (last definition wins)
        residual: Every line outside a definition block, in order,
                  with comment lines removed
    """
    table: MacroTable = field(default_factory=dict)
    residual: List[SourceLine] = field(default_factory=list)


@dataclass
class MacroCall:
    """
    A parsed call site

    Attributes:
        name: Called macro name
        arguments: Argument texts, trimmed, quotes preserved
    """
    name: str
    arguments: List[str]
