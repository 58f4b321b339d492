"""
Line compiler for expanded Z source

Transliterates a flat, fully expanded directive stream into JavaScript,
one output line per directive, in source order.
"""

from typing import Iterable, List, Optional, Union

from ..models.directives import DirectiveKind, UPSTREAM_KINDS
from ..models.source import SourceLine, sourceLines_coerce
from .directives import DirectiveRegistry, PassthroughTracker
from .errors import UnrecognizedDirective
from .log import LOG, WARN


class Compiler:
    """
    Compiles a flat Z line stream to JavaScript

    Responsibilities:
    - Copy addon passthrough blocks verbatim
    - Match every other line against the directive table
    - Emit one line of target code per directive
    - Reject (strict) or comment out (lenient) unrecognized lines

    Bracket balance is not checked: an unclosed <if^...> compiles to an
    unclosed JavaScript block.
    """

    def __init__(
        self,
        lines: Union[str, Iterable[Union[str, SourceLine]]],
        strict: bool = True,
        declaration_keyword: str = "let",
        wrap_name: Optional[str] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            lines: Expanded source (text or lines); must not contain imports
                   or macro definitions
            strict: Raise UnrecognizedDirective for unknown lines instead of
                    emitting them as comments
            declaration_keyword: Keyword used for prompt and assignment bindings
            wrap_name: If set, wrap the output in an immediately-invoked
                       function labelled with this name
        """
        self.lines = sourceLines_coerce(lines)
        self.strict = strict
        self.wrap_name = wrap_name
        self.directives = DirectiveRegistry(declaration_keyword=declaration_keyword)
        self.unrecognized_count = 0

    def compile(self) -> str:
        """
        Compile the line stream

        Returns:
            JavaScript source, newline terminated

        Raises:
            UnrecognizedDirective: In strict mode, for the first line that
                                   matches no directive
        """
        LOG(f"Compiling {len(self.lines)} lines...", level=2)

        output = self.lines_compile()

        if self.wrap_name is not None:
            output = [f"(function() {{ // {self.wrap_name}", *output, f"}})(); // {self.wrap_name}"]

        LOG(f"Emitted {len(output)} lines of JavaScript", level=2)
        return "\n".join(output) + "\n"

    def lines_compile(self) -> List[str]:
        """Compile every line, returning the emitted target lines"""
        emitted: List[str] = []
        tracker = PassthroughTracker()

        for position, line in enumerate(self.lines, start=1):
            passthrough = tracker.line_classify(line.text)
            if passthrough == DirectiveKind.ADDON_RAW:
                emitted.append(line.text)
                continue
            if passthrough is not None:
                # sentinels produce no output
                continue

            emitted.append(self.line_compile(line, position))

        return emitted

    def line_compile(self, line: SourceLine, position: int) -> str:
        """
        Compile a single line outside passthrough blocks

        Args:
            line: Source line to translate
            position: 1-based position in the stream (for error reporting)

        Returns:
            The emitted JavaScript line
        """
        directive = self.directives.match(line.text)
        LOG(f"{line.origin} [{directive.kind.value}] {line.text}", level=3)

        if directive.kind not in UPSTREAM_KINDS and directive.kind != DirectiveKind.UNRECOGNIZED:
            target = self.directives.emit(directive)
            if target is not None:
                return target

        return self.unrecognized_handle(line, position)

    def unrecognized_handle(self, line: SourceLine, position: int) -> str:
        """
        Apply the unrecognized-line policy

        Raises:
            UnrecognizedDirective: In strict mode
        """
        if self.strict:
            raise UnrecognizedDirective(
                line.text, position, unit=line.unit, line_number=line.line_number
            )

        self.unrecognized_count += 1
        WARN(f"Unrecognized directive at {line.origin}: {line.text}")
        return f"// unrecognized: {line.text}"
