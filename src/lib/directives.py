"""
Directive table for Z source lines

The matcher is an ordered table of DirectiveSpec entries. A line is tried
against each entry in registration order and the first match wins, so
priority between overlapping shapes is decided here and nowhere else.

Registration order:
    1. addon sentinels (enter before exit)
    2. import and macro-definition sentinels
    3. error forms, then print forms
    4. alert, prompt, style
    5. assignment
    6. control flow (if, else-if, else, end-if, for, while, end-loop)
    7. comments
    8. macro call shape (name(...)), the most permissive pattern, last
"""

import re
from typing import Callable, Dict, List, Optional

from ..models.directives import DirectiveSpec, DirectiveKind, DirectiveLine


def literal_quote(text: str) -> str:
    """
    Render literal text as a double-quoted JavaScript string

    Unescaped double quotes inside the literal are escaped and a dangling
    trailing backslash is doubled so it cannot swallow the closing quote.
    Everything else is copied verbatim.

    Example:
        >>> literal_quote('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    escaped = re.sub(r'(?<!\\)"', r'\\"', text)
    if (len(escaped) - len(escaped.rstrip("\\"))) % 2:
        escaped += "\\"
    return '"' + escaped + '"'


def cssProperty_camelCase(prop: str) -> str:
    """Convert a kebab-case CSS property to its DOM style name (background-color -> backgroundColor)"""
    return re.sub(r'-([a-z])', lambda m: m.group(1).upper(), prop.strip())


class DirectiveRegistry:
    """
    Ordered registry of directive specifications and emitters

    Emitters translate the captured fields of one line into exactly one
    line of JavaScript.
    """

    def __init__(self, declaration_keyword: str = "let") -> None:
        """
        Initialize the registry and register all built-in directives

        Args:
            declaration_keyword: Keyword used for prompt and assignment bindings
        """
        self.declaration_keyword = declaration_keyword
        self.specs: List[DirectiveSpec] = []
        self.sentinelDirectives_register()
        self.outputDirectives_register()
        self.bindingDirectives_register()
        self.controlDirectives_register()
        self.passiveDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Append a directive specification (lower priority than all earlier ones)"""
        self.specs.append(spec)

    def match(self, text: str) -> DirectiveLine:
        """
        Classify one normalized line

        Args:
            text: Trimmed, non-empty source line

        Returns:
            DirectiveLine for the first matching entry, or one of kind
            UNRECOGNIZED if nothing matches
        """
        for spec in self.specs:
            fields = spec.match(text)
            if fields is not None:
                return DirectiveLine(kind=spec.kind, text=text, fields=fields)
        return DirectiveLine(kind=DirectiveKind.UNRECOGNIZED, text=text)

    def spec_get(self, kind: DirectiveKind) -> Optional[DirectiveSpec]:
        """Get the table entry for a directive kind"""
        for spec in self.specs:
            if spec.kind == kind:
                return spec
        return None

    def emit(self, directive: DirectiveLine) -> Optional[str]:
        """
        Translate a classified line to JavaScript

        Returns:
            The target line, or None if the kind has no emitter
        """
        spec = self.spec_get(directive.kind)
        if spec is None or spec.emitter is None:
            return None
        return spec.emitter(directive.fields)

    def kinds_list(self) -> List[DirectiveKind]:
        """Directive kinds in priority order"""
        return [spec.kind for spec in self.specs]

    def sentinelDirectives_register(self) -> None:
        """Register addon, import and macro-definition sentinels"""

        self.register(DirectiveSpec(
            kind=DirectiveKind.ADDON_ENTER,
            pattern=re.compile(r'^<addon\^index/set\^(?P<language>js|html)>'),
            description='Start a verbatim passthrough block',
            examples=['<addon^index/set^js>', '<addon^index/set^html>'],
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.ADDON_EXIT,
            pattern=re.compile(r'^<addon\^(?P<language>js|html)>'),
            description='End a verbatim passthrough block',
            examples=['<addon^js>', '<addon^html>'],
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.IMPORT,
            pattern=re.compile(r'^<import\^z="(?P<unit>[^"]+)">$'),
            description='Inline another unit',
            examples=['<import^z="lib.z">'],
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.MACRO_BEGIN,
            pattern=re.compile(r'^<command\^crt>\s*(?P<signature>.*)$'),
            description='Open a macro definition block',
            examples=['<command^crt>'],
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.MACRO_END,
            pattern=re.compile(r'^<cmd\^add>$'),
            description='Close a macro definition block',
            examples=['<cmd^add>'],
        ))

    def outputDirectives_register(self) -> None:
        """Register print, error and alert directives"""

        def make_literal_emitter(function: str) -> Callable[[Dict[str, str]], str]:
            """Factory for calls taking one quoted literal"""
            def emitter(fields: Dict[str, str]) -> str:
                return f'{function}({literal_quote(fields["literal"])});'
            return emitter

        def make_expr_emitter(function: str) -> Callable[[Dict[str, str]], str]:
            """Factory for calls taking one verbatim expression"""
            def emitter(fields: Dict[str, str]) -> str:
                return f'{function}({fields["expr"]});'
            return emitter

        # error forms first: they share the ^set shape with print
        output_specs = [
            (DirectiveKind.ERROR_LITERAL, 'error', 'index', 'console.error', 'Log a literal error message'),
            (DirectiveKind.ERROR_EXPR, 'error', 'incode', 'console.error', 'Log an expression as an error'),
            (DirectiveKind.PRINT_LITERAL, 'print', 'index', 'console.log', 'Log a literal string'),
            (DirectiveKind.PRINT_EXPR, 'print', 'incode', 'console.log', 'Log an expression'),
        ]

        for kind, keyword, attribute, function, desc in output_specs:
            if attribute == 'index':
                pattern = rf'^<{keyword}\^set\.index="(?P<literal>.*)">$'
                emitter = make_literal_emitter(function)
                example = f'<{keyword}^set.index="hello">'
            else:
                pattern = rf'^<{keyword}\^set\.incode="(?P<expr>.+)">$'
                emitter = make_expr_emitter(function)
                example = f'<{keyword}^set.incode="x + 1">'
            self.register(DirectiveSpec(
                kind=kind,
                pattern=re.compile(pattern),
                description=desc,
                emitter=emitter,
                examples=[example],
            ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.ALERT,
            pattern=re.compile(r'^<alert\^class="(?P<literal>.*)">$'),
            description='Show a browser alert',
            emitter=make_literal_emitter('alert'),
            examples=['<alert^class="Done">'],
        ))

    def bindingDirectives_register(self) -> None:
        """Register directives that bind or mutate values"""
        keyword = self.declaration_keyword

        def prompt_emitter(fields: Dict[str, str]) -> str:
            """Handle <prompt^...> - bind the user's answer"""
            return f'{keyword} {fields["name"]} = prompt({literal_quote(fields["title"])});'

        def style_emitter(fields: Dict[str, str]) -> str:
            """Handle <ui.e^...> - set one inline style property"""
            prop = cssProperty_camelCase(fields["property"])
            selector = fields["selector"].replace("'", "\\'")
            value = fields["value"].strip().replace("'", "\\'")
            return f"document.querySelector('{selector}').style.{prop} = '{value}';"

        def assign_emitter(fields: Dict[str, str]) -> str:
            """Handle <set^...> - bind an uninterpreted expression"""
            return f'{keyword} {fields["name"]} = {fields["expr"].strip()};'

        self.register(DirectiveSpec(
            kind=DirectiveKind.PROMPT,
            pattern=re.compile(
                r'^<prompt\^set\.index="(?P<name>\w+)"&(?:title|başlık)="(?P<title>.*)">$'
            ),
            description='Ask the user for a value',
            emitter=prompt_emitter,
            examples=['<prompt^set.index="name"&title="Your name?">'],
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.STYLE,
            pattern=re.compile(
                r'^<ui\.e\^selector="(?P<selector>[^"]+)"&css="(?P<property>[^":]+):(?P<value>[^"]*)">$'
            ),
            description='Set an inline style on the first matching element',
            emitter=style_emitter,
            examples=['<ui.e^selector="#title"&css="background-color:red">'],
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.ASSIGN,
            pattern=re.compile(r'^<set\^(?P<name>\w+)\s*=\s*(?P<expr>.*\S)\s*>$'),
            description='Assign an expression to a variable',
            emitter=assign_emitter,
            examples=['<set^x = 1 + 2>'],
        ))

    def controlDirectives_register(self) -> None:
        """Register conditional and loop brackets"""

        def make_opener(template: str) -> Callable[[Dict[str, str]], str]:
            """Factory for block openers wrapping a header expression"""
            def emitter(fields: Dict[str, str]) -> str:
                return template.format(expr=fields["expr"])
            return emitter

        def make_constant(text: str) -> Callable[[Dict[str, str]], str]:
            """Factory for argument-less brackets"""
            def emitter(fields: Dict[str, str]) -> str:
                return text
            return emitter

        control_specs = [
            (DirectiveKind.IF, r'^<if\^set\.incode="(?P<expr>.+)">$',
             make_opener('if ({expr}) {{'), 'Open a conditional block', '<if^set.incode="x > 1">'),
            (DirectiveKind.ELSE_IF, r'^<else\^if\^set\.incode="(?P<expr>.+)">$',
             make_opener('}} else if ({expr}) {{'), 'Alternative conditional branch', '<else^if^set.incode="x < 0">'),
            (DirectiveKind.ELSE, r'^<else\^set>$',
             make_constant('} else {'), 'Fallback branch', '<else^set>'),
            (DirectiveKind.END_IF, r'^<end\^if>$',
             make_constant('}'), 'Close a conditional block', '<end^if>'),
            (DirectiveKind.FOR, r'^<for\^set\.incode="(?P<expr>.+)">$',
             make_opener('for ({expr}) {{'), 'Open a for loop', '<for^set.incode="let i = 0; i < 3; i++">'),
            (DirectiveKind.WHILE, r'^<while\^set\.incode="(?P<expr>.+)">$',
             make_opener('while ({expr}) {{'), 'Open a while loop', '<while^set.incode="n > 0">'),
            (DirectiveKind.END_LOOP, r'^<end\^loop>$',
             make_constant('}'), 'Close a loop', '<end^loop>'),
        ]

        for kind, pattern, emitter, desc, example in control_specs:
            self.register(DirectiveSpec(
                kind=kind,
                pattern=re.compile(pattern),
                description=desc,
                emitter=emitter,
                examples=[example],
            ))

    def passiveDirectives_register(self) -> None:
        """Register comments and the macro call shape"""

        def comment_emitter(fields: Dict[str, str]) -> str:
            """Handle comments - '#' is not a JavaScript comment, so rewrite it"""
            if fields["marker"] == '#':
                return '//' + fields["rest"]
            return fields["marker"] + fields["rest"]

        self.register(DirectiveSpec(
            kind=DirectiveKind.COMMENT,
            pattern=re.compile(r'^(?P<marker>//|#)(?P<rest>.*)$'),
            description='Source comment',
            emitter=comment_emitter,
            examples=['// note', '# note'],
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.MACRO_CALL,
            pattern=re.compile(r'^(?P<name>[A-Za-z_]\w*)\s*\((?P<arguments>.*)\)$'),
            description='Call a user-defined macro',
            examples=['greet("a,b", "c")'],
        ))


class PassthroughTracker:
    """
    Tracks whether a line stream is inside an addon passthrough block

    Only the closer of the language that opened the block ends it; any
    other sentinel inside the block is ordinary passthrough text.

    Example:
        >>> tracker = PassthroughTracker()
        >>> tracker.line_classify('<addon^index/set^js>')
        <DirectiveKind.ADDON_ENTER: 'addon-enter'>
        >>> tracker.line_classify('const x = 1;')
        <DirectiveKind.ADDON_RAW: 'addon-raw'>
        >>> tracker.line_classify('<addon^js>')
        <DirectiveKind.ADDON_EXIT: 'addon-exit'>
        >>> tracker.line_classify('<end^if>') is None
        True
    """

    _enter = re.compile(r'^<addon\^index/set\^(js|html)>')
    _exit = re.compile(r'^<addon\^(js|html)>')

    def __init__(self) -> None:
        self.language: Optional[str] = None

    @property
    def active(self) -> bool:
        """True while inside a passthrough block"""
        return self.language is not None

    def line_classify(self, text: str) -> Optional[DirectiveKind]:
        """
        Feed one line and update the passthrough state

        Returns:
            ADDON_ENTER / ADDON_EXIT for sentinels that change or belong to
            the passthrough structure, ADDON_RAW for lines inside a block,
            None for ordinary lines outside any block
        """
        if self.language is not None:
            closer = self._exit.match(text)
            if closer and closer.group(1) == self.language:
                self.language = None
                return DirectiveKind.ADDON_EXIT
            return DirectiveKind.ADDON_RAW

        opener = self._enter.match(text)
        if opener:
            self.language = opener.group(1)
            return DirectiveKind.ADDON_ENTER
        if self._exit.match(text):
            return DirectiveKind.ADDON_EXIT
        return None
