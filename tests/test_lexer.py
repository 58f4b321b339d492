"""
Z lexer tests

Tests token types produced for directives, macros and comments.
"""

from pygments.token import Comment, Keyword, Name, String, Text

from zlang.lib.lexer import ZLexer, get_lexer


def tokens(source):
    return [(tokentype, value) for tokentype, value in ZLexer().get_tokens(source) if value.strip()]


class TestZLexer:
    """Test highlighting of Z source"""

    def test_print_directive(self):
        """Directive keyword and quoted value"""
        result = tokens('<print^set.index="hi">')
        assert (Name.Builtin, "print") in result
        assert (Name.Attribute, "set.index") in result
        assert (String, '"hi"') in result

    def test_control_flow_keyword(self):
        """Control-flow directives are keywords"""
        assert (Keyword, "if") in tokens('<if^set.incode="x > 1">')

    def test_comment(self):
        """Comment lines are single comments"""
        assert tokens("// note") == [(Comment.Single, "// note")]

    def test_macro_call(self):
        """Macro names are functions"""
        result = tokens('greet("a,b", c)')
        assert result[0] == (Name.Function, "greet")
        assert (String, '"a,b"') in result

    def test_addon_block(self):
        """Passthrough lines are plain text"""
        result = tokens('<addon^index/set^js>\nconst x = 1;\n<addon^js>')
        assert (Text, "const x = 1;") in result
        assert (Keyword.Namespace, "addon") in result

    def test_get_lexer(self):
        """Factory returns a Z lexer"""
        assert get_lexer().name == "Z"
