"""
Pygments lexer tests
"""

from pygments.token import Keyword, Name, Punctuation, Comment, Operator

from layoutsyntax.lib.lexer import LayoutSyntaxLexer, get_lexer


def tokens_of(text):
    """Non-whitespace tokens as (type, value) pairs"""
    return [(t, v) for t, v in get_lexer().get_tokens(text) if v.strip()]


class TestLexer:
    """Test token classification"""

    def test_layout_directive(self):
        """Layout names are declarations"""
        tokens = tokens_of("::columns 2\nLeft\n---\nRight\n::end\n")

        assert (Punctuation, "::") in tokens
        assert (Keyword.Declaration, "columns") in tokens
        assert (Keyword, "end") in tokens
        assert (Punctuation, "---") in tokens

    def test_other_directive(self):
        """Unknown names are tags, arguments are attributes"""
        tokens = tokens_of('::callout +tip title="Read me"\n')

        assert (Name.Tag, "callout") in tokens
        assert (Operator, "+") in tokens

    def test_key_value(self):
        """key=value pairs"""
        tokens = tokens_of("::ai model=gpt-4 hello\n")

        assert (Name.Decorator, "ai") in tokens
        assert (Name.Attribute, "model") in tokens

    def test_condition(self):
        """::if takes an expression"""
        tokens = tokens_of("::if count > 3\n")

        assert (Keyword, "if") in tokens
        assert (Operator, ">") in tokens
        assert (Name.Variable, "count") in tokens

    def test_comment(self):
        """%% comments %%"""
        tokens = tokens_of("%% note to self %%\n")

        assert tokens[0][0] is Comment

    def test_aliases(self):
        """Lexer registered under its aliases"""
        assert "layoutsyntax" in LayoutSyntaxLexer.aliases
