"""Diagnostic model and validator-outcome mapping.

Syntax errors arrive with exact positions. Schema errors arrive as JSON
pointer paths only, so they are placed by searching the document text for
the pointer's last segment. That placement is approximate: the first
occurrence of the key wins even if it belongs to an unrelated table, and a
key that does not appear verbatim lands on the first character.
"""

from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum

from schemaward.constants import (
    DEFAULT_SYNTAX_MESSAGE,
    ROOT_ANCHOR,
    SCHEMA_MESSAGE_TEMPLATE,
)
from schemaward.core.validator import (
    SchemaInvalid,
    SchemaOutcome,
    SyntaxInvalid,
    ValidationOutcome,
)


class Severity(Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(slots=True, frozen=True, order=True)
class Position:
    """Zero-indexed line and character."""

    line: int
    character: int


@dataclass(slots=True, frozen=True)
class Range:
    """Half-open text range."""

    start: Position
    end: Position

    @classmethod
    def from_coords(
        cls, start_line: int, start_char: int, end_line: int, end_char: int
    ) -> "Range":
        """Create a Range from four coordinates."""
        return cls(
            Position(start_line, start_char), Position(end_line, end_char)
        )


@dataclass(slots=True, frozen=True)
class Diagnostic:
    """A positioned message for one document."""

    range: Range
    message: str
    severity: Severity


DOCUMENT_START = Range.from_coords(0, 0, 0, 1)


class TextIndex:
    """Convert character offsets of one text into line/character positions."""

    def __init__(self, text: str) -> None:
        """Index the line starts of text."""
        self._length = len(text)
        self._line_starts = [0]
        self._line_starts.extend(
            i + 1 for i, char in enumerate(text) if char == "\n"
        )

    def position_at(self, offset: int) -> Position:
        """Return the position of offset, clamped to the text bounds."""
        offset = max(0, min(offset, self._length))
        line = bisect_right(self._line_starts, offset) - 1
        return Position(line, offset - self._line_starts[line])


def anchor_key(path: str) -> str:
    """Return the last non-empty segment of a slash-delimited path.

    Example:
        >>> anchor_key("/package/name")
        'name'
        >>> anchor_key("/")
        'root'

    """
    segments = [segment for segment in path.split("/") if segment]
    return segments[-1] if segments else ROOT_ANCHOR


class DiagnosticMapper:
    """Turn validator outcomes into diagnostics."""

    def map_syntax(self, outcome: ValidationOutcome) -> Diagnostic | None:
        """Return an Error diagnostic for a syntax error, else None."""
        if not isinstance(outcome, SyntaxInvalid):
            return None

        end_line = outcome.end_line
        if end_line is None:
            end_line = outcome.line
        if outcome.end_column is not None:
            end_column = outcome.end_column
        else:
            end_column = outcome.column + 1

        return Diagnostic(
            range=Range.from_coords(
                outcome.line, outcome.column, end_line, end_column
            ),
            message=outcome.message or DEFAULT_SYNTAX_MESSAGE,
            severity=Severity.ERROR,
        )

    def map_schema(
        self, outcome: SchemaOutcome, document_text: str
    ) -> list[Diagnostic]:
        """Return one Warning diagnostic per schema error.

        Args:
            outcome: Schema validation outcome
            document_text: Text the outcome was computed for

        Returns:
            Diagnostics in the order the errors were reported

        """
        if not isinstance(outcome, SchemaInvalid):
            return []

        index = TextIndex(document_text)
        diagnostics = []
        for error in outcome.errors:
            key = anchor_key(error.path)
            offset = document_text.find(key) if key != ROOT_ANCHOR else -1
            if offset == -1:
                text_range = DOCUMENT_START
            else:
                text_range = Range(
                    index.position_at(offset),
                    index.position_at(offset + len(key)),
                )

            diagnostics.append(
                Diagnostic(
                    range=text_range,
                    message=SCHEMA_MESSAGE_TEMPLATE.format(
                        message=error.message, path=error.path
                    ),
                    severity=Severity.WARNING,
                )
            )
        return diagnostics
