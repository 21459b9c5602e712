"""Tests for HTML documentation formatting."""

import pytest

from xsd_completion.completion import HtmlDocumentationFormatter


@pytest.fixture
def formatter():
    return HtmlDocumentationFormatter()


class TestHtmlDocumentationFormatter:
    """Tests for HtmlDocumentationFormatter."""

    @pytest.mark.parametrize("html,expected", [
        ("<b>bold</b> and <strong>strong</strong>", "**bold** and **strong**"),
        ("<i>it</i> and <em>em</em>", "*it* and *em*"),
        ("use <code>xs:ID</code>", "use `xs:ID`"),
        ("one<br>two", "one\ntwo"),
        ("<p>first</p><p>second</p>", "first\n\nsecond"),
        ("<ul><li>a</li><li>b</li></ul>", "- a\n- b"),
        ("fish &amp; chips", "fish & chips"),
    ])
    def test_conversion(self, formatter, html, expected):
        """Test supported markup."""
        assert formatter.format(html) == expected

    def test_plain_text_unchanged(self, formatter):
        """Test text without markup passes through."""
        assert formatter.format("Identifies the book.") == "Identifies the book."

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input(self, formatter, value):
        """Test missing documentation becomes an empty string."""
        assert formatter.format(value) == ""

    def test_whitespace_is_collapsed(self, formatter):
        """Test runs of spaces and indentation collapse."""
        html = "<p>\n    A   long\n    description\n</p>"

        assert formatter.format(html) == "A long\ndescription"

    def test_unknown_tags_keep_their_text(self, formatter):
        """Test unsupported elements are unwrapped."""
        assert formatter.format('<span class="x">kept</span>') == "kept"

    def test_comments_are_dropped(self, formatter):
        """Test HTML comments do not leak into documentation."""
        assert formatter.format("a<!-- hidden -->b") == "ab"

    def test_empty_emphasis_is_dropped(self, formatter):
        """Test empty emphasis produces no markers."""
        assert formatter.format("a<b> </b>b") == "ab"
