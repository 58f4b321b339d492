"""
Line compiler tests

Tests translation of expanded streams, addon passthrough, the
unrecognized-line policy and output wrapping.
"""

import pytest

from zlang.lib.compiler import Compiler
from zlang.lib.errors import UnrecognizedDirective
from zlang.models.source import SourceLine


def compile_lines(source, **kwargs):
    return Compiler(source, **kwargs).compile().splitlines()


class TestTranslation:
    """Test directive translation in order"""

    def test_conditional_chain(self):
        """if / else-if / else / end-if"""
        source = """
<if^set.incode="x > 1">
<print^set.index="big">
<else^if^set.incode="x < 0">
<print^set.index="negative">
<else^set>
<print^set.index="small">
<end^if>
"""
        assert compile_lines(source) == [
            'if (x > 1) {',
            'console.log("big");',
            '} else if (x < 0) {',
            'console.log("negative");',
            '} else {',
            'console.log("small");',
            '}',
        ]

    def test_loops(self):
        """for and while loops"""
        source = """
<for^set.incode="let i = 0; i < 3; i++">
<print^set.incode="i">
<end^loop>
<while^set.incode="n > 0">
<set^n = n - 1>
<end^loop>
"""
        assert compile_lines(source) == [
            'for (let i = 0; i < 3; i++) {',
            'console.log(i);',
            '}',
            'while (n > 0) {',
            'let n = n - 1;',
            '}',
        ]

    def test_expression_not_evaluated(self):
        """Assignments copy the expression text"""
        assert compile_lines('<set^x = 1 + 2>') == ['let x = 1 + 2;']

    def test_output_is_newline_terminated(self):
        """Compiled text ends with a newline"""
        assert Compiler('<print^set.index="hi">').compile() == 'console.log("hi");\n'

    def test_empty_input(self):
        """No lines compile to an empty program"""
        assert Compiler('').compile() == '\n'

    def test_unbalanced_blocks_not_validated(self):
        """The compiler does not check bracket balance"""
        assert compile_lines('<if^set.incode="x">') == ['if (x) {']

    def test_comments(self):
        """Comments reaching the compiler are emitted as JavaScript comments"""
        assert compile_lines('// a\n# b') == ['// a', '// b']


class TestAddonPassthrough:
    """Test verbatim passthrough blocks"""

    def test_js_block_verbatim(self):
        """Lines inside the block are copied, sentinels vanish"""
        source = """
<print^set.index="before">
<addon^index/set^js>
const el = document.body;
<print^set.index="not a directive here">
<addon^js>
<print^set.index="after">
"""
        assert compile_lines(source) == [
            'console.log("before");',
            'const el = document.body;',
            '<print^set.index="not a directive here">',
            'console.log("after");',
        ]

    def test_html_block_verbatim(self):
        """The html passthrough pair behaves the same way"""
        source = '<addon^index/set^html>\n<div>hi</div>\n<addon^html>'
        assert compile_lines(source) == ['<div>hi</div>']

    def test_unknown_lines_allowed_inside_block(self):
        """Strict mode does not apply inside passthrough"""
        assert compile_lines('<addon^index/set^js>\nwhatever ;;\n<addon^js>') == ['whatever ;;']

    def test_stray_closer_emits_nothing(self):
        """A closer outside a block is ignored"""
        assert compile_lines('<addon^js>\n<end^if>') == ['}']


class TestUnrecognized:
    """Test the unrecognized-line policy"""

    def test_strict_raises_with_context(self):
        """Strict mode fails on the first unknown line"""
        lines = [
            SourceLine('<print^set.index="ok">', unit="main.z", line_number=1),
            SourceLine('<bogus>', unit="lib.z", line_number=9),
        ]
        with pytest.raises(UnrecognizedDirective) as excinfo:
            Compiler(lines).compile()
        assert excinfo.value.text == '<bogus>'
        assert excinfo.value.position == 2
        assert excinfo.value.unit == "lib.z"
        assert excinfo.value.line_number == 9

    def test_import_is_rejected(self):
        """Imports must be resolved before compilation"""
        with pytest.raises(UnrecognizedDirective):
            Compiler('<import^z="lib.z">').compile()

    def test_unexpanded_call_is_rejected(self):
        """Calls to unknown macros are unrecognized"""
        with pytest.raises(UnrecognizedDirective, match="greet"):
            Compiler('greet(1)').compile()

    def test_lenient_emits_comment(self):
        """Lenient mode keeps going"""
        compiler = Compiler('<bogus>\n<end^if>', strict=False)
        assert compiler.compile().splitlines() == ['// unrecognized: <bogus>', '}']
        assert compiler.unrecognized_count == 1


class TestOptions:
    """Test compiler options"""

    def test_wrap_name(self):
        """Output can be wrapped in an immediately-invoked function"""
        assert compile_lines('<end^if>', wrap_name="main.z") == [
            '(function() { // main.z',
            '}',
            '})(); // main.z',
        ]

    def test_declaration_keyword(self):
        """Binding keyword is passed to the directive table"""
        assert compile_lines('<set^x = 1>', declaration_keyword="var") == ['var x = 1;']
