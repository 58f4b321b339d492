"""
Per-run compilation context

Everything a single compilation run mutates lives here, so two runs never
share import state, cached units or macro definitions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from .macros import MacroTable
from .source import SourceLine


@dataclass
class CompilationContext:
    """
    State bus for one compilation run

    Attributes:
        file_set: Unit name -> unit text, provided before the run
        macro_table: Macros extracted from the bundled stream
        import_path: Units on the active import-resolution path, in order
        unit_cache: Fully bundled lines per unit, reused for diamond imports
    """
    file_set: Mapping[str, str]
    macro_table: MacroTable = field(default_factory=dict)
    import_path: List[str] = field(default_factory=list)
    unit_cache: Dict[str, List[SourceLine]] = field(default_factory=dict)

    @classmethod
    def create(cls, file_set: Mapping[str, str]) -> "CompilationContext":
        """Create a fresh context over a private copy of the file set"""
        return cls(file_set=dict(file_set))
