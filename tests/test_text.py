"""
Content splitting and argument parsing tests
"""

import pytest

from layoutsyntax.lib.text import content_split, args_parse, args_onlyKeyValues, int_parse


class TestContentSplit:
    """Test section splitting on delimiter lines"""

    def test_empty_sections_dropped(self):
        """Whitespace-only sections disappear"""
        assert content_split("a\n---\n \n---\nb") == ["a", "b"]

    def test_sections_trimmed_in_order(self):
        """Sections keep their order and lose surrounding whitespace"""
        assert content_split("  first \n---\n\n second\n\n---\nthird") == ["first", "second", "third"]

    def test_no_delimiter(self):
        """Content without delimiter is a single section"""
        assert content_split("only one") == ["only one"]

    def test_empty_content(self):
        """Empty content yields no sections"""
        assert content_split("") == []
        assert content_split("   \n  ") == []

    def test_delimiter_must_fill_line(self):
        """Dashes inside a line are not a delimiter"""
        assert content_split("a --- b\n---\nc") == ["a --- b", "c"]

    def test_custom_delimiter(self):
        """Any delimiter line can be used, regex characters included"""
        assert content_split("a\n+++\nb", delimiter="+++") == ["a", "b"]


class TestArgsParse:
    """Test key=value argument parsing"""

    def test_plain_and_quoted(self):
        """Unquoted and double-quoted values"""
        assert args_parse('model=gpt-4 foo="bar baz"') == {"model": "gpt-4", "foo": "bar baz"}

    def test_single_quotes(self):
        """Single-quoted values keep their spaces"""
        assert args_parse("title='Hello world'") == {"title": "Hello world"}

    def test_empty(self):
        """Empty tail gives empty dict"""
        assert args_parse("") == {}
        assert args_parse(None) == {}

    def test_bare_words_ignored(self):
        """Text that is not a key=value token is skipped"""
        assert args_parse("center width=3 extra") == {"width": "3"}

    def test_last_value_wins(self):
        """Repeated key keeps its last value"""
        assert args_parse("a=1 a=2") == {"a": "2"}

    def test_empty_quoted_value(self):
        """Empty quotes give an empty string"""
        assert args_parse('label=""') == {"label": ""}

    def test_only_key_values(self):
        """Tail made only of key=value tokens"""
        assert args_onlyKeyValues('model=x temp="0.2"')
        assert args_onlyKeyValues("")
        assert not args_onlyKeyValues("model=x write a poem")


class TestIntParse:
    """Test leading integer extraction"""

    @pytest.mark.parametrize("text,expected", [
        ("3", 3),
        ("4 wide", 4),
        ("", 2),
        ("wide", 2),
        ("0", 2),
        (None, 2),
    ])
    def test_values(self, text, expected):
        """Leading positive integer or the default"""
        assert int_parse(text, 2) == expected
