"""
Source line model

The pipeline carries normalized lines together with their origin so that
errors raised after bundling and macro expansion can still point back to
the unit and line an author wrote.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union


@dataclass(frozen=True)
class SourceLine:
    """
    One normalized (trimmed, non-empty) line of Z source

    Attributes:
        text: Trimmed line text
        unit: Name of the unit the line came from
        line_number: 1-based line number within that unit

    Example:
        For unit "main.z" containing "  <end^if>  " on its third line:
        SourceLine(text="<end^if>", unit="main.z", line_number=3)
    """
    text: str
    unit: str = "<text>"
    line_number: int = 0

    def derive(self, text: str) -> "SourceLine":
        """Create a line with new text but the same origin (used by macro expansion)"""
        return SourceLine(text=text, unit=self.unit, line_number=self.line_number)

    @property
    def origin(self) -> str:
        """Human-readable origin, e.g. 'main.z:3'"""
        return f"{self.unit}:{self.line_number}"


def sourceLines_split(text: str, unit: str = "<text>") -> List[SourceLine]:
    """
    Split raw unit text into normalized SourceLines

    Every line is trimmed and blank lines are dropped. Line numbers count
    the physical lines of the original text, blank ones included.
    """
    lines = []
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if stripped:
            lines.append(SourceLine(text=stripped, unit=unit, line_number=number))
    return lines


def sourceLines_coerce(
    source: Union[str, Iterable[Union[str, SourceLine]]], unit: str = "<text>"
) -> List[SourceLine]:
    """
    Accept text, plain strings or SourceLines and return SourceLines

    Plain strings are normalized like unit text; their line number is their
    index in the given sequence.
    """
    if isinstance(source, str):
        return sourceLines_split(source, unit)

    lines = []
    for number, item in enumerate(source, start=1):
        if isinstance(item, SourceLine):
            lines.append(item)
            continue
        stripped = item.strip()
        if stripped:
            lines.append(SourceLine(text=stripped, unit=unit, line_number=number))
    return lines


def sourceLines_join(lines: Sequence[SourceLine]) -> str:
    """Join SourceLines back into unit text"""
    return "\n".join(line.text for line in lines)
