"""
Directive specification and metadata models

Defines the kinds of Z directives and the table entries the directive
matcher is built from.
"""

import re
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set


class DirectiveKind(Enum):
    """
    Kinds of Z source lines

    Every normalized line is tagged with exactly one kind.
    """
    PRINT_LITERAL = "print-literal"    # <print^set.index="...">
    PRINT_EXPR = "print-expr"          # <print^set.incode="...">
    ERROR_LITERAL = "error-literal"    # <error^set.index="...">
    ERROR_EXPR = "error-expr"          # <error^set.incode="...">
    ALERT = "alert"                    # <alert^class="...">
    PROMPT = "prompt"                  # <prompt^set.index="v"&title="...">
    STYLE = "style"                    # <ui.e^selector="..."&css="prop:value">
    ASSIGN = "assign"                  # <set^v = expr>
    IF = "if"
    ELSE_IF = "else-if"
    ELSE = "else"
    END_IF = "end-if"
    FOR = "for"
    WHILE = "while"
    END_LOOP = "end-loop"
    ADDON_ENTER = "addon-enter"        # <addon^index/set^js>
    ADDON_EXIT = "addon-exit"          # <addon^js>
    ADDON_RAW = "addon-raw"            # any line inside an addon block
    IMPORT = "import"                  # <import^z="unit.z">
    MACRO_BEGIN = "macro-begin"        # <command^crt>
    MACRO_END = "macro-end"            # <cmd^add>
    MACRO_CALL = "macro-call"          # name(arg, ...)
    COMMENT = "comment"                # // ... or # ...
    UNRECOGNIZED = "unrecognized"


# Kinds that never reach the line compiler in a well-formed pipeline run
UPSTREAM_KINDS: Set[DirectiveKind] = {
    DirectiveKind.IMPORT,
    DirectiveKind.MACRO_BEGIN,
    DirectiveKind.MACRO_END,
    DirectiveKind.MACRO_CALL,
}


@dataclass
class DirectiveSpec:
    """
    One entry of the directive matcher table

    Attributes:
        kind: Directive kind produced on a match
        pattern: Compiled regex matched against the whole normalized line
        description: Human-readable description
        emitter: Translation function (fields) -> target line, or None for
                 kinds the compiler handles itself or must reject
        examples: Example source lines
    """
    kind: DirectiveKind
    pattern: "re.Pattern[str]"
    description: str
    emitter: Optional[Callable[[Dict[str, str]], str]] = None
    examples: List[str] = field(default_factory=list)

    def match(self, text: str) -> Optional[Dict[str, str]]:
        """
        Match a normalized line against this entry

        Returns:
            Captured named groups (possibly empty) or None if no match
        """
        found = self.pattern.match(text)
        if found is None:
            return None
        return {k: v for k, v in found.groupdict().items() if v is not None}


@dataclass
class DirectiveLine:
    """
    A normalized line tagged with its directive kind

    Attributes:
        kind: Recognized kind (UNRECOGNIZED if nothing matched)
        text: The normalized line text
        fields: Captured fields (e.g. {"literal": "hi"})
    """
    kind: DirectiveKind
    text: str
    fields: Dict[str, str] = field(default_factory=dict)
