"""
Frontmatter split/join tests
"""

import pytest

from layoutsyntax.lib.frontmatter import frontmatter_split, frontmatter_join, FrontmatterError


class TestSplit:
    """Test header extraction"""

    def test_header(self):
        """Fields parsed, body returned"""
        fields, raw, body = frontmatter_split("---\ntitle: Home\nfeatured: true\n---\n# Hi\n")

        assert fields == {"title": "Home", "featured": True}
        assert raw == "title: Home\nfeatured: true\n"
        assert body == "# Hi\n"

    def test_no_header(self):
        """Documents without a header"""
        assert frontmatter_split("# Hi\n---\n") == ({}, "", "# Hi\n---\n")

    def test_empty_header(self):
        """Empty header gives empty fields"""
        fields, raw, body = frontmatter_split("---\n---\nbody")
        assert fields == {}
        assert body == "body"

    def test_not_a_mapping(self):
        """A YAML list is rejected"""
        with pytest.raises(FrontmatterError):
            frontmatter_split("---\n- a\n- b\n---\nbody")

    def test_invalid_yaml(self):
        """Broken YAML is rejected"""
        with pytest.raises(FrontmatterError):
            frontmatter_split("---\ntitle: [unclosed\n---\nbody")


class TestJoin:
    """Test header re-attachment"""

    def test_round_trip(self):
        """Split then join restores the document"""
        text = "---\ntitle: Home\n---\n# Hi\n"
        fields, raw, body = frontmatter_split(text)
        assert frontmatter_join(raw, body) == text

    def test_no_header(self):
        """Nothing to attach"""
        assert frontmatter_join("", "body") == "body"
