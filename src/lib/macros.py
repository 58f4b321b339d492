"""
Macro subsystem: definition extraction and call expansion

Definitions are blocks of the form

    <command^crt>
    name(param1, param2)
    ...template lines...
    <cmd^add>

MacroTableBuilder pulls those blocks out of a line stream into a table.
MacroExpander then rewrites call sites ``name(arg1, arg2)`` into the
instantiated template, pass after pass, until a pass changes nothing.

Substitution is purely textual: a placeholder is replaced wherever it
occurs in a template line, including inside unrelated words. Authors are
expected to pick placeholder names that do not collide with other text.
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..models.macros import ExtractedMacros, MacroCall, MacroDefinition, MacroTable
from ..models.source import SourceLine, sourceLines_coerce
from .directives import PassthroughTracker
from .errors import MacroExpansionOverflow
from .log import LOG, WARN


MACRO_BEGIN_PATTERN = re.compile(r'^<command\^crt>\s*(?P<signature>.*)$')
MACRO_END_PATTERN = re.compile(r'^<cmd\^add>$')
SIGNATURE_PATTERN = re.compile(r'^(?P<name>[A-Za-z_]\w*)\s*\((?P<parameters>[^()]*)\)\s*\{?$')
CALL_PATTERN = re.compile(r'^(?P<name>[A-Za-z_]\w*)\s*\((?P<arguments>.*)\)$')
COMMENT_PATTERN = re.compile(r'^(//|#)')

# A comma separates arguments only when an even number of double quotes
# follows it up to the end of the argument list.
ARGUMENT_SEPARATOR = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')

INERT_BRACES = {'{', '}'}


def signature_parse(text: str) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """
    Parse a macro signature line

    Args:
        text: Signature text, e.g. "greet(name, msg)"

    Returns:
        (name, parameters) or None if the signature is malformed

    Example:
        >>> signature_parse("greet(name, msg)")
        ('greet', ('name', 'msg'))
        >>> signature_parse("noargs()")
        ('noargs', ())
        >>> signature_parse("broken(a, (b))") is None
        True
    """
    match = SIGNATURE_PATTERN.match(text.strip())
    if not match:
        return None
    parameters = tuple(p.strip() for p in match.group('parameters').split(',') if p.strip())
    return match.group('name'), parameters


def arguments_split(text: str) -> List[str]:
    """
    Split a call's argument list on commas outside double quotes

    Example:
        >>> arguments_split('"a,b", c')
        ['"a,b"', 'c']
        >>> arguments_split('')
        []
    """
    if not text.strip():
        return []
    return [argument.strip() for argument in ARGUMENT_SEPARATOR.split(text)]


def comments_strip(lines: Iterable[SourceLine]) -> List[SourceLine]:
    """
    Drop comment lines outside addon blocks

    Expanded macro bodies may bring comments back into the stream; they are
    removed the same way the table builder removes top-level comments.
    """
    tracker = PassthroughTracker()
    kept = []
    for line in lines:
        if tracker.line_classify(line.text) is None and COMMENT_PATTERN.match(line.text):
            continue
        kept.append(line)
    return kept


def call_parse(text: str) -> Optional[MacroCall]:
    """Parse a line of the shape name(arg, ...) into a MacroCall"""
    match = CALL_PATTERN.match(text)
    if not match:
        return None
    return MacroCall(name=match.group('name'), arguments=arguments_split(match.group('arguments')))


def body_instantiate(definition: MacroDefinition, arguments: Sequence[str]) -> List[str]:
    """
    Substitute call arguments into a macro body

    Parameters are bound positionally. Arguments beyond the parameter count
    are ignored; parameters without an argument stay in the output as
    written. All placeholders of a line are replaced in a single scan, the
    longest placeholder first, so substituted text is never rewritten again.

    Returns:
        Instantiated body lines, trimmed, blank lines dropped
    """
    bindings = dict(zip(definition.parameters, arguments))
    if not bindings:
        return [line for line in definition.body]

    placeholders = sorted(bindings, key=len, reverse=True)
    pattern = re.compile('|'.join(re.escape(p) for p in placeholders))

    lines = []
    for template in definition.body:
        line = pattern.sub(lambda m: bindings[m.group(0)], template).strip()
        if line:
            lines.append(line)
    return lines


class MacroTableBuilder:
    """
    Extracts macro definition blocks from a line stream

    Lines outside definition blocks are returned as residual lines. Comment
    lines outside blocks are dropped. Addon passthrough blocks are copied
    through untouched.
    """

    def extract(
        self, source: Union[str, Iterable[Union[str, SourceLine]]]
    ) -> ExtractedMacros:
        """
        Split a stream into a macro table and residual lines

        Args:
            source: Unit text or a sequence of lines

        Returns:
            ExtractedMacros with the table (last definition wins) and the
            remaining lines in their original order
        """
        result = ExtractedMacros()
        tracker = PassthroughTracker()
        block: Optional[List[SourceLine]] = None

        for line in sourceLines_coerce(source):
            if block is not None:
                if MACRO_END_PATTERN.match(line.text):
                    self.definition_register(block, result)
                    block = None
                else:
                    block.append(line)
                continue

            if tracker.line_classify(line.text) is not None:
                result.residual.append(line)
                continue

            opener = MACRO_BEGIN_PATTERN.match(line.text)
            if opener:
                signature = opener.group('signature').strip()
                block = [line.derive(signature)] if signature else []
                continue

            if COMMENT_PATTERN.match(line.text):
                continue

            result.residual.append(line)

        if block is not None:
            WARN("Unterminated macro definition closed at end of input")
            self.definition_register(block, result)

        LOG(f"Extracted {len(result.table)} macros, {len(result.residual)} residual lines", level=2)
        return result

    def definition_register(self, block: List[SourceLine], result: ExtractedMacros) -> None:
        """
        Build a MacroDefinition from a block's lines and add it to the table

        Blocks with a missing or malformed signature are dropped silently.
        """
        if not block:
            LOG("Dropping macro block without a signature", level=2)
            return

        parsed = signature_parse(block[0].text)
        if parsed is None:
            LOG(f"Dropping macro block with malformed signature at {block[0].origin}: "
                f"{block[0].text}", level=2)
            return

        name, parameters = parsed
        body = [line.text for line in block[1:]]

        # a bare brace next to the signature or terminator carries no meaning
        while body and body[0] in INERT_BRACES:
            body.pop(0)
        while body and body[-1] in INERT_BRACES:
            body.pop()

        if name in result.table:
            LOG(f"Macro '{name}' redefined at {block[0].origin}", level=2)
        result.table[name] = MacroDefinition(name=name, parameters=parameters, body=tuple(body))


class MacroExpander:
    """
    Expands macro call sites to a fixpoint

    Each pass rewrites every call to a known macro once. Passes repeat until
    one performs no substitution. A bound on the number of passes and on the
    stream size turns non-terminating (self-referential) macros into a
    MacroExpansionOverflow instead of an endless loop.
    """

    def __init__(self, table: MacroTable, max_passes: int = 100, max_lines: int = 100_000) -> None:
        """
        Args:
            table: Macro name -> definition
            max_passes: Expansion passes allowed before giving up
            max_lines: Largest line stream allowed during expansion
        """
        self.table = table
        self.max_passes = max_passes
        self.max_lines = max_lines

    def expand(self, source: Union[str, Iterable[Union[str, SourceLine]]]) -> List[SourceLine]:
        """
        Expand all macro calls

        Args:
            source: Residual lines (or text) from the table builder

        Returns:
            Lines with no remaining calls to known macros

        Raises:
            MacroExpansionOverflow: If no fixpoint is reached within bounds
        """
        lines = sourceLines_coerce(source)
        if not self.table:
            return lines

        pending: List[str] = []
        for pass_number in range(1, self.max_passes + 1):
            lines, pending = self.pass_run(lines)
            LOG(f"Expansion pass {pass_number}: {len(pending)} substitutions", level=3)
            if not pending:
                LOG(f"Macro expansion reached a fixpoint after {pass_number} passes", level=2)
                return lines
            if len(lines) > self.max_lines:
                raise MacroExpansionOverflow(pass_number, len(lines), pending)

        raise MacroExpansionOverflow(self.max_passes, len(lines), pending)

    def pass_run(self, lines: List[SourceLine]) -> Tuple[List[SourceLine], List[str]]:
        """
        Run one expansion pass over the whole stream

        Returns:
            (new lines, names of the macros expanded in this pass)
        """
        output: List[SourceLine] = []
        expanded: List[str] = []
        tracker = PassthroughTracker()

        for line in lines:
            if tracker.line_classify(line.text) is not None:
                output.append(line)
                continue

            call = call_parse(line.text)
            definition = self.table.get(call.name) if call else None
            if definition is None:
                output.append(line)
                continue

            expanded.append(definition.name)
            output.extend(line.derive(text) for text in body_instantiate(definition, call.arguments))

        return output, expanded
