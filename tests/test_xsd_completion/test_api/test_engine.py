"""Tests for the completion engine API."""

import json
from unittest.mock import Mock

import pytest

from xsd_completion import complete
from xsd_completion.api import CompletionResult, XsdCompletionEngine
from xsd_completion.completion import CompletionItemKind
from xsd_completion.context import CompletionKind, CompletionTrigger
from xsd_completion.document import DocumentIndex, Position, Range, TextDocument
from xsd_completion.schema import SchemaRegistry, StaticSchemaSource, SuggestionRecord
from xsd_completion.shared.config import CompletionConfig

HEADER = (
    '<library xmlns="urn:lib" xmlns:b="urn:books"\n'
    '         xsi:schemaLocation="urn:lib lib.xsd urn:books books.xsd">\n'
    "  <b:shelf>\n"
)


def document_with(line):
    """Document whose fourth line is ``line``, followed by the closing tags."""
    return HEADER + line + "\n  </b:shelf>\n</library>\n"


def lib_source():
    return StaticSchemaSource(
        "lib.xsd",
        root_elements=[SuggestionRecord.element("library")],
        sub_elements={"library": [SuggestionRecord.element("section")]},
        attributes={"library": [SuggestionRecord.attribute("version")]},
    )


def books_source():
    return StaticSchemaSource(
        "books.xsd",
        root_elements=[SuggestionRecord.element("shelf")],
        sub_elements={"shelf": [SuggestionRecord.element("book"),
                                SuggestionRecord.element("magazine")]},
        attributes={"book": [SuggestionRecord.attribute("id", "xs:ID", required=True),
                             SuggestionRecord.attribute("lang")]},
    )


@pytest.fixture
def engine():
    registry = SchemaRegistry()
    registry.set(lib_source())
    registry.set(books_source())
    return XsdCompletionEngine(registry)


class TestElementCompletion:
    """Tests for element completion."""

    def test_element_after_opener(self, engine):
        """Test '<' inside a prefixed parent merges all registered schemas."""
        result = engine.complete(document_with("    <"), 4, 6, CompletionTrigger.typed("<"))

        assert result.kind == CompletionKind.ELEMENT
        assert result.parent_tag == "b:shelf"
        assert result.namespace_prefix == ""
        assert result.schemas_consulted == ["lib.xsd", "books.xsd"]
        assert result.labels == ["b:book", "b:magazine"]
        assert result.items[0].insert_text == "b:book${1}></b:book"
        assert result.items[0].range == Range(4, 6, 4, 6)

    def test_root_element(self, engine):
        """Test completing the document element."""
        text = '<?xml version="1.0"?>\n<'
        text_with_schema = text.replace(
            "?>", '?><!-- xsi:noNamespaceSchemaLocation="lib.xsd" -->'
        )

        result = engine.complete(text_with_schema, 2, 2, CompletionTrigger.typed("<"))

        assert result.parent_tag is None
        assert result.labels == ["library"]

    def test_incomplete_prefixed_element(self, engine):
        """Test a partially typed prefixed name selects only its schema."""
        result = engine.complete(document_with("    <b:bo"), 4, 10, CompletionTrigger.invoke())

        assert result.kind == CompletionKind.INCOMPLETE_ELEMENT
        assert result.parent_tag == "b:shelf"
        assert result.namespace_prefix == "b"
        assert result.schemas_consulted == ["books.xsd"]
        assert [item.insert_text for item in result] == ["b:book", "b:magazine"]
        # The replacement covers the prefix as well.
        assert result.items[0].range == Range(4, 6, 4, 10)

    def test_snippet(self, engine):
        """Test an explicit request on an empty line offers snippets."""
        result = engine.complete(document_with("    "), 4, 5)

        assert result.kind == CompletionKind.SNIPPET
        assert result.items[0].insert_text == "<b:book${1}>\n\t${2}\n</b:book>"
        assert result.items[0].kind == CompletionItemKind.SNIPPET

    def test_unregistered_schema(self):
        """Test documents whose schemas are not registered get nothing."""
        engine = XsdCompletionEngine()

        result = engine.complete(document_with("    <"), 4, 6, CompletionTrigger.typed("<"))

        assert result.kind == CompletionKind.ELEMENT
        assert result.is_empty
        assert result.schemas_consulted == []


class TestAttributeCompletion:
    """Tests for attribute completion."""

    def test_attributes_after_space(self, engine):
        """Test ' ' inside a start tag lists its attributes."""
        result = engine.complete(document_with("    <b:book "), 4, 13,
                                 CompletionTrigger.typed(" "))

        assert result.kind == CompletionKind.ATTRIBUTE
        assert result.parent_tag == "b:book"
        assert result.labels == ["id", "lang"]
        assert result.items[0].preselect is True
        assert result.items[0].detail == "xs:ID"

    def test_incomplete_attribute(self, engine):
        """Test a partially typed attribute name."""
        result = engine.complete(document_with("    <b:book la"), 4, 15,
                                 CompletionTrigger.invoke())

        assert result.kind == CompletionKind.INCOMPLETE_ATTRIBUTE
        assert result.labels == ["id", "lang"]
        assert result.items[0].range == Range(4, 13, 4, 15)

    def test_inside_attribute_value(self, engine):
        """Test no completion is offered inside an attribute value."""
        result = engine.complete(document_with('    <b:book id="x'), 4, 18,
                                 CompletionTrigger.typed(" "))

        assert result.kind == CompletionKind.NONE
        assert result.is_empty
        assert result.parent_tag is None


class TestClosingCompletion:
    """Tests for close-tag completion."""

    def test_closing_tag(self, engine):
        """Test '/' offers the innermost open element as written."""
        result = engine.complete(document_with("    </"), 4, 7, CompletionTrigger.typed("/"))

        assert result.kind == CompletionKind.CLOSING_ELEMENT
        assert result.labels == ["b:shelf"]
        item = result.items[0]
        assert item.kind == CompletionItemKind.CLOSE_TAG
        assert item.documentation == "Closes the unclosed b:shelf tag in this file."
        assert result.schemas_consulted == []

    def test_closing_without_open_element(self, engine):
        """Test nothing is offered when no element is open."""
        result = engine.complete("</", 1, 3, CompletionTrigger.typed("/"))

        assert result.kind == CompletionKind.CLOSING_ELEMENT
        assert result.is_empty


class TestEngineBehavior:
    """Tests for engine-wide behavior."""

    def test_trigger_characters(self, engine):
        """Test the host trigger characters."""
        assert engine.trigger_characters == ["<", " ", "/"]

    def test_index_gives_same_result(self, engine):
        """Test passing an incremental index does not change results."""
        text = document_with("    <b:bo")
        document = TextDocument(text)
        position = Position(4, 10)
        index = engine.create_index(text)

        with_index = engine.provide_completion_items(
            document, position, CompletionTrigger.invoke(), index
        )
        without_index = engine.provide_completion_items(
            document, position, CompletionTrigger.invoke()
        )

        assert with_index.items == without_index.items
        assert with_index.parent_tag == without_index.parent_tag
        assert index.statistics.namespace_scans == 1

    def test_index_ignored_when_disabled(self):
        """Test enable_incremental_index=False bypasses the index."""
        config = CompletionConfig(enable_incremental_index=False)
        registry = SchemaRegistry(config)
        registry.set(books_source())
        engine = XsdCompletionEngine(registry)
        index = Mock(spec=DocumentIndex)

        result = engine.provide_completion_items(
            TextDocument(document_with("    <")), Position(4, 6),
            CompletionTrigger.typed("<"), index,
        )

        assert result.labels == ["b:book", "b:magazine"]
        index.unclosed_tags.assert_not_called()
        index.namespaces.assert_not_called()

    def test_failing_schema_does_not_fail_request(self):
        """Test a provider error yields an empty result."""
        source = Mock(spec=StaticSchemaSource)
        source.path = "books.xsd"
        source.get_sub_elements.side_effect = RuntimeError("broken schema")
        registry = SchemaRegistry()
        registry.set(source)
        engine = XsdCompletionEngine(registry)

        result = engine.complete(document_with("    <"), 4, 6, CompletionTrigger.typed("<"))

        assert result.is_empty
        assert result.schemas_consulted == ["books.xsd"]

    def test_suggestions_are_cached_across_requests(self):
        """Test repeated requests reuse cached suggestions."""
        source = Mock(wraps=books_source())
        source.path = "books.xsd"
        registry = SchemaRegistry()
        registry.set(source)
        engine = XsdCompletionEngine(registry)

        for _ in range(3):
            engine.complete(document_with("    <"), 4, 6, CompletionTrigger.typed("<"))

        source.get_sub_elements.assert_called_once_with("shelf")

    def test_result_to_dict(self, engine):
        """Test the JSON-friendly result."""
        result = engine.complete(document_with("    </"), 4, 7, CompletionTrigger.typed("/"))

        data = result.to_dict()

        assert data["kind"] == "CLOSING_ELEMENT"
        assert data["parentTag"] == "b:shelf"
        assert data["suggestions"][0]["label"] == "b:shelf"
        assert json.loads(json.dumps(data)) == data

    def test_result_container_protocol(self):
        """Test iteration and length of results."""
        result = CompletionResult(items=[], kind=CompletionKind.NONE)

        assert len(result) == 0
        assert list(result) == []


class TestCompleteFunction:
    """Tests for the module-level complete() entry point."""

    def test_complete(self):
        """Test ad hoc completion against schema sources."""
        result = complete(
            document_with("    <b:book "), 4, 13,
            schemas=[books_source()],
            trigger=CompletionTrigger.typed(" "),
        )

        assert isinstance(result, CompletionResult)
        assert result.labels == ["id", "lang"]
        assert result.processing_time_ms >= 0

    def test_complete_without_schemas(self):
        """Test completion with nothing registered."""
        assert complete("<", 1, 2, trigger=CompletionTrigger.typed("<")).is_empty
