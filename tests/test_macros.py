"""
Macro subsystem tests

Tests definition extraction, argument splitting, substitution and
fixpoint expansion.
"""

import pytest

from zlang.lib.errors import MacroExpansionOverflow
from zlang.lib.macros import (
    MacroExpander,
    MacroTableBuilder,
    arguments_split,
    body_instantiate,
    comments_strip,
    signature_parse,
)
from zlang.models.macros import MacroDefinition
from zlang.models.source import SourceLine


GREET = """
<command^crt>
greet(name, msg)
<print^set.incode="name + msg">
<cmd^add>
"""


def texts(lines):
    return [line.text for line in lines]


def expand(table, source, **kwargs):
    return texts(MacroExpander(table, **kwargs).expand(source))


class TestSignatures:
    """Test signature parsing"""

    def test_parameters_trimmed(self):
        """Parameters are split on commas and trimmed"""
        assert signature_parse("greet( name ,msg )") == ("greet", ("name", "msg"))

    def test_no_parameters(self):
        """Empty parameter list"""
        assert signature_parse("hello()") == ("hello", ())

    def test_trailing_brace_tolerated(self):
        """A brace after the signature is allowed"""
        assert signature_parse("f(a) {") == ("f", ("a",))

    @pytest.mark.parametrize("text", ["no parens", "f(a, (b))", "1f(a)", "f(a) extra", ""])
    def test_malformed(self, text):
        """Malformed signatures parse to None"""
        assert signature_parse(text) is None


class TestExtraction:
    """Test macro table building"""

    def test_definition_extracted(self):
        """A block becomes a definition and leaves the residual stream"""
        extracted = MacroTableBuilder().extract(GREET + 'greet("a", "b")')
        definition = extracted.table["greet"]
        assert definition.parameters == ("name", "msg")
        assert definition.body == ('<print^set.incode="name + msg">',)
        assert texts(extracted.residual) == ['greet("a", "b")']

    def test_comments_elided(self):
        """Comment lines outside blocks are dropped"""
        extracted = MacroTableBuilder().extract('// note\n# other\n<end^if>')
        assert texts(extracted.residual) == ['<end^if>']

    def test_comments_inside_body_kept(self):
        """Comments inside a body are part of the template"""
        extracted = MacroTableBuilder().extract('<command^crt>\nf()\n// inside\n<cmd^add>')
        assert extracted.table["f"].body == ('// inside',)

    def test_malformed_block_dropped(self):
        """A block with a bad signature contributes nothing, not even lines"""
        source = '<command^crt>\nnot a signature\n<print^set.index="x">\n<cmd^add>\n<end^if>'
        extracted = MacroTableBuilder().extract(source)
        assert extracted.table == {}
        assert texts(extracted.residual) == ['<end^if>']

    def test_empty_block_dropped(self):
        """A block without any signature is dropped"""
        extracted = MacroTableBuilder().extract('<command^crt>\n<cmd^add>')
        assert extracted.table == {}
        assert extracted.residual == []

    def test_signature_on_opening_line(self):
        """The signature may follow the opening sentinel"""
        extracted = MacroTableBuilder().extract('<command^crt> hello()\n<print^set.index="hi">\n<cmd^add>')
        assert extracted.table["hello"].body == ('<print^set.index="hi">',)

    def test_inert_braces_ignored(self):
        """Bare braces around the body are not template lines"""
        source = '<command^crt>\nf(a) {\n}\n<print^set.incode="a">\n}\n<cmd^add>'
        extracted = MacroTableBuilder().extract(source)
        assert extracted.table["f"].body == ('<print^set.incode="a">',)

    def test_last_definition_wins(self):
        """Redefinition overwrites the earlier macro"""
        source = (
            '<command^crt>\nf()\n<print^set.index="one">\n<cmd^add>\n'
            '<command^crt>\nf()\n<print^set.index="two">\n<cmd^add>'
        )
        extracted = MacroTableBuilder().extract(source)
        assert extracted.table["f"].body == ('<print^set.index="two">',)

    def test_unterminated_block_kept(self):
        """A block still open at end of input is closed implicitly"""
        extracted = MacroTableBuilder().extract('<command^crt>\nf()\n<end^if>')
        assert extracted.table["f"].body == ('<end^if>',)
        assert extracted.residual == []

    def test_addon_block_is_opaque(self):
        """Addon content is neither elided nor scanned for definitions"""
        source = '<addon^index/set^js>\n// keep me\n<command^crt>\n<addon^js>'
        extracted = MacroTableBuilder().extract(source)
        assert extracted.table == {}
        assert texts(extracted.residual) == source.splitlines()

    def test_accepts_source_lines(self):
        """SourceLines keep their origin through extraction"""
        lines = [SourceLine('<end^if>', unit="lib.z", line_number=7)]
        extracted = MacroTableBuilder().extract(lines)
        assert extracted.residual[0].origin == "lib.z:7"


class TestArguments:
    """Test call argument splitting"""

    def test_quoted_comma(self):
        """Commas inside double quotes do not split"""
        assert arguments_split('"a,b", "c"') == ['"a,b"', '"c"']

    def test_plain_arguments(self):
        """Unquoted arguments are trimmed"""
        assert arguments_split(' x , y+1 ,z') == ['x', 'y+1', 'z']

    def test_empty(self):
        """An empty argument list has no arguments"""
        assert arguments_split('  ') == []


class TestSubstitution:
    """Test template instantiation"""

    def test_positional_binding(self):
        """Arguments bind to parameters by position"""
        definition = MacroDefinition("f", ("a", "b"), ('<print^set.incode="a + b">',))
        assert body_instantiate(definition, ["1", "2"]) == ['<print^set.incode="1 + 2">']

    def test_simultaneous_substitution(self):
        """Substituted text is not rewritten by later parameters"""
        definition = MacroDefinition("f", ("a", "b"), ('<print^set.incode="a + b">',))
        assert body_instantiate(definition, ["b", "a"]) == ['<print^set.incode="b + a">']

    def test_extra_arguments_ignored(self):
        """Arguments beyond the parameter list are dropped"""
        definition = MacroDefinition("f", ("a",), ('<print^set.incode="a">',))
        assert body_instantiate(definition, ["1", "2"]) == ['<print^set.incode="1">']

    def test_missing_arguments_leave_placeholder(self):
        """A parameter without argument stays as written"""
        definition = MacroDefinition("f", ("a", "b"), ('<set^a = b>',))
        assert body_instantiate(definition, ["x"]) == ['<set^x = b>']

    def test_substitution_is_textual(self):
        """Placeholders are replaced inside unrelated words too"""
        definition = MacroDefinition("f", ("x",), ('<print^set.index="x-ray">',))
        assert body_instantiate(definition, ["1"]) == ['<print^set.inde1="1-ray">']


class TestExpansion:
    """Test fixpoint expansion"""

    def test_quoted_comma_call(self):
        """greet("a,b", "c") binds two arguments"""
        table = MacroTableBuilder().extract(GREET).table
        assert expand(table, ['greet("a,b", "c")']) == ['<print^set.incode=""a,b" + "c"">']

    def test_unknown_call_unchanged(self):
        """Calls to unknown names pass through"""
        table = MacroTableBuilder().extract(GREET).table
        assert expand(table, ['other(1)', '<end^if>']) == ['other(1)', '<end^if>']

    def test_nested_macros_reach_fixpoint(self):
        """A macro expanding into a call of another macro expands fully"""
        table = {
            "outer": MacroDefinition("outer", ("x",), ('inner(x)', '<end^if>')),
            "inner": MacroDefinition("inner", ("y",), ('<print^set.incode="y">',)),
        }
        assert expand(table, ['outer(1)']) == ['<print^set.incode="1">', '<end^if>']

    def test_expanded_lines_inherit_call_origin(self):
        """Expanded lines point at the call site"""
        table = {"f": MacroDefinition("f", (), ('<end^if>', '<end^loop>'))}
        lines = MacroExpander(table).expand([SourceLine('f()', unit="main.z", line_number=4)])
        assert [line.origin for line in lines] == ["main.z:4", "main.z:4"]

    def test_addon_content_not_expanded(self):
        """Calls inside addon blocks are left alone"""
        table = {"f": MacroDefinition("f", (), ('<end^if>',))}
        source = ['<addon^index/set^js>', 'f()', '<addon^js>', 'f()']
        assert expand(table, source) == ['<addon^index/set^js>', 'f()', '<addon^js>', '<end^if>']

    def test_empty_table(self):
        """Without macros the stream is returned as is"""
        assert expand({}, ['f()']) == ['f()']

    def test_self_reference_overflows(self):
        """A macro calling itself hits the pass limit"""
        table = {"loop": MacroDefinition("loop", ("x",), ('loop(x)',))}
        with pytest.raises(MacroExpansionOverflow) as excinfo:
            expand(table, ['loop(1)'], max_passes=10)
        assert excinfo.value.passes == 10
        assert excinfo.value.pending == ["loop"]

    def test_growth_overflows(self):
        """A macro doubling itself hits the size limit"""
        table = {"boom": MacroDefinition("boom", (), ('boom()', 'boom()'))}
        with pytest.raises(MacroExpansionOverflow) as excinfo:
            expand(table, ['boom()'], max_passes=100, max_lines=50)
        assert excinfo.value.line_count > 50
        assert excinfo.value.passes < 100


class TestCommentStripping:
    """Test comment removal from an expanded stream"""

    def test_comments_outside_addons_dropped(self):
        """Both comment styles are removed"""
        lines = [SourceLine("// a"), SourceLine("<set^x = 1>"), SourceLine("# b")]
        assert [line.text for line in comments_strip(lines)] == ["<set^x = 1>"]

    def test_addon_content_kept(self):
        """Hash lines inside an addon block are JavaScript, not comments"""
        lines = [
            SourceLine("<addon^index/set^js>"),
            SourceLine("#count = 0;"),
            SourceLine("<addon^js>"),
        ]
        assert comments_strip(lines) == lines
