"""
Error taxonomy for the zlang compilation pipeline

Every failure is raised synchronously and propagates to the caller of
compile_project(); a failed run produces no output.
"""

from typing import List, Optional, Sequence


class ZLangError(Exception):
    """Base class for all compilation failures"""
    pass


class UnitNotFound(ZLangError):
    """
    An import references a unit that is not in the file set

    Attributes:
        unit: Unit name as written in the import directive
        importer: Unit containing the import (None for the entry unit)
        line_number: Line of the import within the importer
    """

    def __init__(self, unit: str, importer: Optional[str] = None, line_number: int = 0) -> None:
        self.unit = unit
        self.importer = importer
        self.line_number = line_number
        if importer:
            message = f"Unit '{unit}' not found (imported from {importer}:{line_number})"
        else:
            message = f"Unit '{unit}' not found"
        super().__init__(message)


class ImportCycle(ZLangError):
    """
    A unit imports itself, directly or through other units

    Attributes:
        chain: Units on the active import path, ending with the repeated one
    """

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain: List[str] = list(chain)
        super().__init__(f"Import cycle: {' -> '.join(self.chain)}")


class MacroExpansionOverflow(ZLangError):
    """
    Macro expansion did not reach a fixpoint within its bounds

    Attributes:
        passes: Number of expansion passes performed
        line_count: Size of the line stream when expansion stopped
        pending: Macro names still being expanded in the last pass
    """

    def __init__(self, passes: int, line_count: int, pending: Sequence[str]) -> None:
        self.passes = passes
        self.line_count = line_count
        self.pending: List[str] = sorted(set(pending))
        super().__init__(
            f"Macro expansion did not terminate after {passes} passes "
            f"({line_count} lines); still expanding: {', '.join(self.pending)}"
        )


class UnrecognizedDirective(ZLangError):
    """
    A line matches no known directive after full macro expansion

    Attributes:
        text: The offending line
        position: 1-based position in the final (flattened) line stream
        unit: Unit the line originates from
        line_number: Line number within that unit
    """

    def __init__(self, text: str, position: int, unit: str = "<text>", line_number: int = 0) -> None:
        self.text = text
        self.position = position
        self.unit = unit
        self.line_number = line_number
        super().__init__(
            f"Unrecognized directive at line {position} "
            f"({unit}:{line_number}): {text}"
        )
