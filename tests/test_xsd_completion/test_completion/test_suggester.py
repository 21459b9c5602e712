"""Tests for completion item building."""

import pytest

from xsd_completion.completion import (
    CodeSuggester,
    CompletionItem,
    CompletionItemKind,
    qualified_name,
)
from xsd_completion.document import Range
from xsd_completion.schema import SuggestionRecord
from xsd_completion.shared.config import SuggestionConfig

ELEMENTS = [
    SuggestionRecord.element("book", documentation="A <b>book</b>."),
    SuggestionRecord.element("magazine"),
]


@pytest.fixture
def suggester():
    return CodeSuggester()


class TestElementItems:
    """Tests for element completion items."""

    def test_element_template(self, suggester):
        """Test the element template after '<'."""
        item = suggester.elements(ELEMENTS)[0]

        assert item.label == "book"
        assert item.kind == CompletionItemKind.ELEMENT
        assert item.insert_text == "book${1}></book"
        assert item.detail == ""
        assert item.insert_as_snippet is True

    def test_incomplete_template(self, suggester):
        """Test the bare name for partially typed elements."""
        items = suggester.elements(ELEMENTS, incomplete=True)

        assert [item.insert_text for item in items] == ["book", "magazine"]

    def test_snippet_template(self, suggester):
        """Test the whole-element snippet."""
        item = suggester.elements(ELEMENTS, without_tag=True)[1]

        assert item.insert_text == "<magazine${1}>\n\t${2}\n</magazine>"
        assert item.kind == CompletionItemKind.SNIPPET
        assert item.detail == "Insert as snippet"

    def test_snippet_wins_over_incomplete(self, suggester):
        """Test without_tag takes precedence."""
        item = suggester.elements(ELEMENTS, without_tag=True, incomplete=True)[0]

        assert item.insert_text.startswith("<book")

    def test_sort_text_preserves_order(self, suggester):
        """Test sort text is the schema index."""
        records = [SuggestionRecord.element(name) for name in "zyxwvutsrqp"]

        items = suggester.elements(records)

        assert [item.sort_text for item in items] == [str(i) for i in range(11)]
        assert [item.label for item in items] == list("zyxwvutsrqp")

    def test_prefix(self, suggester):
        """Test namespace prefixes qualify labels and templates."""
        item = suggester.elements(ELEMENTS, without_tag=True, prefix="b")[0]

        assert item.label == "b:book"
        assert item.insert_text == "<b:book${1}>\n\t${2}\n</b:book>"

    def test_empty_prefix_is_unqualified(self, suggester):
        """Test the default namespace inserts plain names."""
        assert suggester.elements(ELEMENTS, prefix="")[0].label == "book"
        assert qualified_name("book", None) == "book"

    def test_documentation_is_formatted(self, suggester):
        """Test element documentation is converted to markdown."""
        items = suggester.elements(ELEMENTS)

        assert items[0].documentation == "A **book**."
        assert items[1].documentation is None

    def test_custom_indent(self):
        """Test the snippet indent is configurable."""
        suggester = CodeSuggester(config=SuggestionConfig(snippet_indent="  "))

        item = suggester.elements(ELEMENTS[:1], without_tag=True)[0]

        assert item.insert_text == "<book${1}>\n  ${2}\n</book>"

    def test_no_records(self, suggester):
        """Test empty input gives no items."""
        assert suggester.elements([]) == []


class TestAttributeItems:
    """Tests for attribute completion items."""

    def test_attribute_template(self, suggester):
        """Test attribute items."""
        records = [
            SuggestionRecord.attribute("id", "xs:ID", required=True,
                                       documentation="<p>Unique <code>id</code></p>"),
            SuggestionRecord.attribute("lang"),
        ]

        first, second = suggester.attributes(records)

        assert first.label == "id"
        assert first.kind == CompletionItemKind.ATTRIBUTE
        assert first.insert_text == 'id="${1}"'
        assert first.detail == "xs:ID"
        assert first.preselect is True
        assert first.documentation == "Unique `id`"
        assert second.detail == ""
        assert second.preselect is False
        assert second.documentation == ""

    def test_raw_documentation_when_formatting_disabled(self):
        """Test documentation passes through when formatting is off."""
        suggester = CodeSuggester(config=SuggestionConfig(format_documentation=False))
        record = SuggestionRecord.attribute("id", documentation="<b>raw</b>")

        assert suggester.attributes([record])[0].documentation == "<b>raw</b>"


class TestClosingItem:
    """Tests for the close-tag item."""

    def test_closing_element(self, suggester):
        """Test the close-tag item keeps the name as written."""
        item = suggester.closing_element("b:shelf")

        assert item.label == "b:shelf"
        assert item.kind == CompletionItemKind.CLOSE_TAG
        assert item.detail == "Close tag"
        assert item.insert_text == "b:shelf"
        assert item.insert_as_snippet is False
        assert item.documentation == "Closes the unclosed b:shelf tag in this file."


class TestCompletionItem:
    """Tests for the CompletionItem record."""

    def test_with_range_copies(self):
        """Test ranges are attached to a copy."""
        item = CompletionItem("a", CompletionItemKind.ELEMENT, "a")
        text_range = Range.on_line(1, 2, 3)

        ranged = item.with_range(text_range)

        assert ranged.range == text_range
        assert item.range is None

    def test_to_dict(self):
        """Test the JSON-friendly form."""
        item = CompletionItem(
            "a", CompletionItemKind.ATTRIBUTE, 'a="${1}"', detail="xs:string",
            range=Range.on_line(2, 5, 7), documentation="doc", sort_text="0",
        )

        assert item.to_dict() == {
            "label": "a",
            "kind": "ATTRIBUTE",
            "detail": "xs:string",
            "insertText": 'a="${1}"',
            "insertAsSnippet": True,
            "preselect": False,
            "range": {"startLine": 2, "startColumn": 5, "endLine": 2, "endColumn": 7},
            "documentation": "doc",
            "sortText": "0",
        }

    def test_to_dict_omits_unset_optionals(self):
        """Test optional keys are left out when unset."""
        data = CompletionItem("a", CompletionItemKind.ELEMENT, "a").to_dict()

        assert "range" not in data
        assert "documentation" not in data
        assert "sortText" not in data
