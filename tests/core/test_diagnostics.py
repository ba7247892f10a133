"""Tests for diagnostic mapping."""

import pytest

from schemaward.core.diagnostics import (
    DOCUMENT_START,
    DiagnosticMapper,
    Position,
    Range,
    Severity,
    TextIndex,
    anchor_key,
)
from schemaward.core.validator import (
    SchemaInvalid,
    SchemaValid,
    SchemaViolation,
    SyntaxInvalid,
    SyntaxValid,
)

DOCUMENT = '[package]\nname = "test"\nversion = 1\n'


@pytest.fixture
def mapper() -> DiagnosticMapper:
    """Diagnostic mapper."""
    return DiagnosticMapper()


class TestMapSyntax:
    """Test suite for syntax outcome mapping."""

    def test_valid_gives_no_diagnostic(self, mapper):
        """Test valid syntax maps to nothing."""
        assert mapper.map_syntax(SyntaxValid()) is None

    def test_missing_end_spans_one_character(self, mapper):
        """Test a start-only error covers one character."""
        diagnostic = mapper.map_syntax(
            SyntaxInvalid(line=2, column=4, message="expected value")
        )

        assert diagnostic is not None
        assert diagnostic.range == Range.from_coords(2, 4, 2, 5)
        assert diagnostic.message == "expected value"
        assert diagnostic.severity is Severity.ERROR

    def test_explicit_end_is_used(self, mapper):
        """Test a reported end position is kept."""
        diagnostic = mapper.map_syntax(
            SyntaxInvalid(
                line=0, column=1, message="bad", end_line=1, end_column=3
            )
        )

        assert diagnostic.range == Range.from_coords(0, 1, 1, 3)

    def test_empty_message_falls_back(self, mapper):
        """Test errors without a message get a generic one."""
        diagnostic = mapper.map_syntax(SyntaxInvalid(line=0, column=0))

        assert diagnostic.message == "Syntax error"


class TestMapSchema:
    """Test suite for schema outcome mapping."""

    def test_valid_gives_no_diagnostics(self, mapper):
        """Test a satisfied schema maps to nothing."""
        assert mapper.map_schema(SchemaValid(), DOCUMENT) == []

    def test_key_is_located_in_text(self, mapper):
        """Test the last path segment is highlighted where it appears."""
        outcome = SchemaInvalid(
            errors=(SchemaViolation("/package/name", "Wrong type"),)
        )

        [diagnostic] = mapper.map_schema(outcome, DOCUMENT)

        # "name" starts at offset 10, the first character of line 1
        assert diagnostic.range == Range(Position(1, 0), Position(1, 4))
        assert diagnostic.severity is Severity.WARNING
        assert (
            diagnostic.message
            == "Schema Error: Wrong type (at /package/name)"
        )

    def test_root_path_anchors_to_document_start(self, mapper):
        """Test root-level errors land on the first character."""
        outcome = SchemaInvalid(errors=(SchemaViolation("/", "Required"),))

        [diagnostic] = mapper.map_schema(outcome, DOCUMENT)

        assert diagnostic.range == DOCUMENT_START
        assert diagnostic.range == Range.from_coords(0, 0, 0, 1)

    def test_literal_root_word_is_not_searched(self, mapper):
        """Test the "root" sentinel is never looked up in the text."""
        outcome = SchemaInvalid(errors=(SchemaViolation("", "Required"),))

        [diagnostic] = mapper.map_schema(outcome, "root = 1\n")

        assert diagnostic.range == DOCUMENT_START

    def test_missing_key_anchors_to_document_start(self, mapper):
        """Test keys absent from the text land on the first character."""
        outcome = SchemaInvalid(
            errors=(SchemaViolation("/package/edition", "Required"),)
        )

        [diagnostic] = mapper.map_schema(outcome, DOCUMENT)

        assert diagnostic.range == DOCUMENT_START

    def test_first_occurrence_wins(self, mapper):
        """Test the earliest textual occurrence of the key is used."""
        text = "[a]\nx = 1\n[b]\nx = 2\n"
        outcome = SchemaInvalid(errors=(SchemaViolation("/b/x", "Bad"),))

        [diagnostic] = mapper.map_schema(outcome, text)

        assert diagnostic.range.start == Position(1, 0)

    def test_one_diagnostic_per_error_in_order(self, mapper):
        """Test every error yields a diagnostic, in reported order."""
        outcome = SchemaInvalid(
            errors=(
                SchemaViolation("/package/version", "Wrong type"),
                SchemaViolation("/", "Missing edition"),
            )
        )

        diagnostics = mapper.map_schema(outcome, DOCUMENT)

        assert [d.range.start for d in diagnostics] == [
            Position(2, 0),
            Position(0, 0),
        ]


class TestHelpers:
    """Test suite for anchor_key and TextIndex."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/package/name", "name"),
            ("/package/", "package"),
            ("/", "root"),
            ("", "root"),
            ("/dependencies/0", "0"),
        ],
    )
    def test_anchor_key(self, path, expected):
        """Test the last non-empty segment is chosen."""
        assert anchor_key(path) == expected

    def test_position_at(self):
        """Test offsets convert to line and character."""
        index = TextIndex("ab\ncd\n")

        assert index.position_at(0) == Position(0, 0)
        assert index.position_at(3) == Position(1, 0)
        assert index.position_at(4) == Position(1, 1)
        assert index.position_at(6) == Position(2, 0)

    def test_position_at_clamps(self):
        """Test out-of-range offsets are clamped to the text."""
        index = TextIndex("ab")

        assert index.position_at(-5) == Position(0, 0)
        assert index.position_at(99) == Position(0, 2)
