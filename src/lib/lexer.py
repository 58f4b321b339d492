"""
Custom Pygments lexer for Z source

Used by the CLI to highlight offending lines in error reports.

Token types:
- Comment.Single: // and # comment lines
- Keyword: control-flow directives (if, else, end, for, while)
- Keyword.Namespace: import and addon sentinels
- Keyword.Declaration: macro definition sentinels
- Name.Builtin: output and binding directives (print, error, set, ...)
- Name.Attribute: attribute names (set.index, set.incode, title, ...)
- String: quoted values
- Name.Function: macro names in calls and signatures
- Text: addon passthrough lines
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Whitespace,
    Punctuation,
    Operator,
    Name,
    String,
    Keyword,
    Comment,
)


class ZLexer(RegexLexer):
    """
    Lexer for the Z directive notation

    Example:
        <print^set.index="hi">

    Tokens:
        < → Punctuation
        print → Name.Builtin
        ^ → Operator
        set.index → Name.Attribute
        = → Operator
        "hi" → String
        > → Punctuation
    """

    name = 'Z'
    aliases = ['z', 'zlang']
    filenames = ['*.z']

    tokens = {
        'root': [
            (r'\s+', Whitespace),

            # Comment lines
            (r'(//|#).*?$', Comment.Single),

            # Addon passthrough blocks
            (r'(<)(addon)(\^)(index/set)(\^)(js|html)(>)',
             bygroups(Punctuation, Keyword.Namespace, Operator, Name.Attribute,
                      Operator, Name.Attribute, Punctuation), 'addon'),

            # Macro definition sentinels
            (r'(<)(command)(\^)(crt)(>)',
             bygroups(Punctuation, Keyword.Declaration, Operator, Name.Attribute, Punctuation)),
            (r'(<)(cmd)(\^)(add)(>)',
             bygroups(Punctuation, Keyword.Declaration, Operator, Name.Attribute, Punctuation)),

            # Import
            (r'(<)(import)', bygroups(Punctuation, Keyword.Namespace), 'directive'),

            # Control flow
            (r'(<)(if|else|end|for|while)\b', bygroups(Punctuation, Keyword), 'directive'),

            # Output and binding directives
            (r'(<)(print|error|alert|prompt|set|ui\.e)\b',
             bygroups(Punctuation, Name.Builtin), 'directive'),

            # Macro calls and signatures
            (r'([A-Za-z_]\w*)(\s*)(\()', bygroups(Name.Function, Whitespace, Punctuation), 'arguments'),

            (r'[^\s]+', Text),
        ],

        'directive': [
            (r'>', Punctuation, '#pop'),
            (r'"[^"]*"', String),
            (r'[\^&]', Operator),
            (r'=', Operator),
            (r'(index/set|set\.index|set\.incode|selector|css|title|class|z|if|set|loop)\b',
             Name.Attribute),
            (r'\s+', Whitespace),
            (r'[^>"\^&=\s]+', Text),
        ],

        'arguments': [
            (r'\)', Punctuation, '#pop'),
            (r'"[^"]*"', String),
            (r',', Punctuation),
            (r'\s+', Whitespace),
            (r'[^)",\s]+', Name.Variable),
        ],

        'addon': [
            (r'(<)(addon)(\^)(js|html)(>)',
             bygroups(Punctuation, Keyword.Namespace, Operator, Name.Attribute, Punctuation), '#pop'),
            (r'\n', Whitespace),
            (r'.+?(?=<addon\^(?:js|html)>|\n|$)', Text),
        ],
    }


def get_lexer() -> ZLexer:
    """
    Get the ZLexer instance

    Returns:
        ZLexer instance ready for use with Pygments
    """
    return ZLexer()
