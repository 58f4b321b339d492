"""
Import bundler for Z source units

Resolves <import^z="..."> directives against the run's file set and
inlines each referenced unit, depth first, into one flat line stream.

A unit already on the active import path is a cycle. A unit reached through
two independent branches (diamond import) is not: it is inlined once per
import site. Bundled units are cached for the duration of the run.

Example:
    >>> context = CompilationContext.create({
    ...     "main.z": '<import^z="lib.z">\\n<print^set.index="main">',
    ...     "lib.z": '<print^set.index="lib">',
    ... })
    >>> print(Bundler(context).bundle("main.z"))
    <print^set.index="lib">
    <print^set.index="main">
"""

import re
from typing import List, Optional

from ..config import AppSettings, appsettings
from ..models.context import CompilationContext
from ..models.source import SourceLine, sourceLines_split, sourceLines_join
from .directives import PassthroughTracker
from .errors import ImportCycle, UnitNotFound
from .log import LOG


IMPORT_PATTERN = re.compile(r'^<import\^z="(?P<unit>[^"]+)">$')


def importTarget_extract(text: str) -> Optional[str]:
    """
    Return the unit named by an import directive, or None

    Example:
        >>> importTarget_extract('<import^z="lib.z">')
        'lib.z'
        >>> importTarget_extract('<print^set.index="x">') is None
        True
    """
    match = IMPORT_PATTERN.match(text)
    return match.group('unit') if match else None


class Bundler:
    """
    Depth-first inliner of imported units

    Uses the import path and unit cache of the given CompilationContext,
    so a bundler never carries state between runs.
    """

    def __init__(self, context: CompilationContext, settings: Optional[AppSettings] = None) -> None:
        """
        Args:
            context: Per-run state (file set, import path, unit cache)
            settings: Settings used for unit name resolution
        """
        self.context = context
        self.settings = settings or appsettings

    def bundle(self, entry_unit: str) -> str:
        """
        Bundle a unit and everything it imports into one text

        Args:
            entry_unit: Name of the unit to start from

        Returns:
            Flat source text, one normalized line per line

        Raises:
            UnitNotFound: If the entry unit or an imported unit is missing
            ImportCycle: If a unit imports itself directly or indirectly
        """
        return sourceLines_join(self.lines_bundle(entry_unit))

    def lines_bundle(self, entry_unit: str) -> List[SourceLine]:
        """Bundle a unit into SourceLines that remember their origin"""
        return self.unit_bundle(entry_unit, importer=None)

    def unitName_resolve(self, name: str, importer: Optional[SourceLine]) -> str:
        """
        Find the file-set key for a unit name

        Raises:
            UnitNotFound: If no candidate key exists
        """
        for candidate in self.settings.unitName_candidates(name):
            if candidate in self.context.file_set:
                return candidate

        if importer is None:
            raise UnitNotFound(name)
        raise UnitNotFound(name, importer=importer.unit, line_number=importer.line_number)

    def unit_bundle(self, name: str, importer: Optional[SourceLine]) -> List[SourceLine]:
        """
        Recursively bundle one unit

        Args:
            name: Unit name as written in the import (or the entry name)
            importer: The import line that referenced this unit, if any

        Returns:
            The unit's lines with every import replaced by the imported
            unit's bundled lines
        """
        key = self.unitName_resolve(name, importer)
        path = self.context.import_path

        if key in path:
            raise ImportCycle(path + [key])

        cached = self.context.unit_cache.get(key)
        if cached is not None:
            LOG(f"Reusing bundled unit {key}", level=3)
            return cached

        LOG(f"Bundling {key}", level=2)
        path.append(key)
        try:
            lines: List[SourceLine] = []
            tracker = PassthroughTracker()
            for line in sourceLines_split(self.context.file_set[key], key):
                if tracker.line_classify(line.text) is not None:
                    lines.append(line)
                    continue

                target = importTarget_extract(line.text)
                if target is None:
                    lines.append(line)
                    continue

                LOG(f"{line.origin} imports {target}", level=3)
                lines.extend(self.unit_bundle(target, importer=line))
        finally:
            path.pop()

        self.context.unit_cache[key] = lines
        return lines
