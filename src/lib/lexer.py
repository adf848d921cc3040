"""
Custom Pygments lexer for layout directive syntax highlighting

Provides syntax highlighting for ``::name args`` / ``::end`` markup when a
document shows directive source inside a ``::code layoutsyntax`` block.

Token types:
- Keyword.Declaration: Layout directives (e.g., ::columns, ::hero)
- Keyword: Block terminator ::end and the ::if conditional
- Name.Decorator: Generated content (::ai)
- Name.Tag: Any other directive name
- Name.Attribute / Literal.String: key=value arguments
- Punctuation: The leading :: and section delimiters (---)
- Comment: %% author comments %%
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
    Number,
    Operator,
    Whitespace,
)


class LayoutSyntaxLexer(RegexLexer):
    """
    Lexer for layout directive markup embedded in Markdown

    Example:
        ::columns 2
        Left
        ---
        Right
        ::end

    Tokens:
        :: → Punctuation
        columns → Keyword.Declaration
        2 → Number
        --- → Punctuation
        ::end → Keyword
    """

    name = 'LayoutSyntax'
    aliases = ['layoutsyntax', 'directives']
    filenames = []

    tokens = {
        'root': [
            # Author comments
            (r'%%[\s\S]*?%%', Comment),

            # Block terminator
            (r'^(::)(end)[ \t]*$', bygroups(Punctuation, Keyword)),

            # Conditional - rest of line is an expression
            (r'^(::)(if)([ \t]+)', bygroups(Punctuation, Keyword, Whitespace), 'condition'),

            # Generated content
            (r'^(::)(ai)(?![\w-])', bygroups(Punctuation, Name.Decorator), 'args'),

            # Layout directives
            (r'^(::)(columns|split|grid|cards?|gallery|hero|stack-mobile|collection)(?![\w-])',
             bygroups(Punctuation, Keyword.Declaration), 'args'),

            # Any other directive
            (r'^(::)([A-Za-z_][\w-]*)', bygroups(Punctuation, Name.Tag), 'args'),

            # Section delimiter
            (r'^---[ \t]*$', Punctuation),

            (r'[^\n%]+', Text),
            (r'\n', Whitespace),
            (r'.', Text),
        ],

        'args': [
            (r'\n', Whitespace, '#pop'),
            (r'([A-Za-z_][\w-]*)(=)("[^"\n]*"|\'[^\'\n]*\'|[^\s]+)',
             bygroups(Name.Attribute, Operator, Literal.String)),
            (r'\d+(/\d+)*', Number),
            (r'[+-](?=\s*\w)', Operator),
            (r'[ \t]+', Whitespace),
            (r'[^\s]+', String),
        ],

        'condition': [
            (r'\n', Whitespace, '#pop'),
            (r'!=|==|[<>!]', Operator),
            (r'"[^"\n]*"|\'[^\'\n]*\'', String),
            (r'-?\d+(\.\d+)?', Number),
            (r'[ \t]+', Whitespace),
            (r'[^\s!=<>"\']+', Name.Variable),
        ],
    }


def get_lexer() -> LayoutSyntaxLexer:
    """
    Get the LayoutSyntaxLexer instance

    Returns:
        LayoutSyntaxLexer instance ready for use with Pygments
    """
    return LayoutSyntaxLexer()
