"""Validation orchestration driven by editor document events.

Each trigger runs syntax validation, then (for syntactically valid text)
schema resolution and schema validation, and publishes the combined
diagnostics for the document, replacing whatever was published before.

Triggers for the same document may overlap because schema resolution
awaits network and disk I/O. Every trigger takes a per-URI sequence number
and only the most recently triggered task may publish, so a slow early task
can never overwrite the result of a later edit.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Protocol

from schemaward.constants import DEFAULT_EXTENSIONS, DEFAULT_LANGUAGE_IDS
from schemaward.core.diagnostics import Diagnostic, DiagnosticMapper
from schemaward.core.resolver import SchemaResolver
from schemaward.core.validator import SyntaxInvalid, ValidatorLoader
from schemaward.exceptions import ValidatorFault, ValidatorUnavailable
from schemaward.logger import get_logger

logger = get_logger(__name__)

Unsubscribe = Callable[[], None]


@dataclass(slots=True, frozen=True)
class TextDocument:
    """Snapshot of an editor document.

    Attributes:
        uri: Stable document identifier used to key diagnostics
        file_name: File system path of the document
        text: Full document text at trigger time
        language_id: Editor language id (may be empty)

    """

    uri: str
    file_name: str
    text: str
    language_id: str = ""


class DiagnosticSink(Protocol):
    """Where diagnostics are published, keyed by document URI."""

    def set(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Replace the diagnostics published for uri."""
        ...

    def clear(self) -> None:
        """Remove every published diagnostic."""
        ...


class EditorHost(Protocol):
    """Document lifecycle events offered by the editor."""

    def on_did_open(
        self, listener: Callable[[TextDocument], None]
    ) -> Unsubscribe:
        """Subscribe to documents being opened."""
        ...

    def on_did_change(
        self, listener: Callable[[TextDocument], None]
    ) -> Unsubscribe:
        """Subscribe to document text changes."""
        ...

    def on_did_change_active_editor(
        self, listener: Callable[[TextDocument | None], None]
    ) -> Unsubscribe:
        """Subscribe to the active editor switching documents."""
        ...


class DiagnosticCollection:
    """In-memory DiagnosticSink; one immutable set per URI."""

    def __init__(self) -> None:
        """Initialize an empty collection."""
        self._diagnostics: dict[str, tuple[Diagnostic, ...]] = {}

    def set(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Replace the diagnostics for uri."""
        self._diagnostics[uri] = tuple(diagnostics)

    def get(self, uri: str) -> tuple[Diagnostic, ...]:
        """Return the diagnostics for uri (empty if none published)."""
        return self._diagnostics.get(uri, ())

    def delete(self, uri: str) -> None:
        """Forget the diagnostics for uri."""
        self._diagnostics.pop(uri, None)

    def clear(self) -> None:
        """Forget all diagnostics."""
        self._diagnostics.clear()

    def __contains__(self, uri: object) -> bool:
        """Return True when diagnostics were published for uri."""
        return uri in self._diagnostics

    def __iter__(self) -> Iterator[str]:
        """Iterate over URIs with published diagnostics."""
        return iter(self._diagnostics)

    def __len__(self) -> int:
        """Return the number of URIs with published diagnostics."""
        return len(self._diagnostics)


class DocumentState(Enum):
    """Validation progress of one document."""

    IDLE = "idle"
    SYNTAX_CHECKING = "syntax_checking"
    SCHEMA_CHECKING = "schema_checking"
    DONE = "done"


@dataclass(slots=True, frozen=True)
class SchemaLookup:
    """Result of an on-demand schema lookup for one document."""

    file_name: str
    url: str | None = None
    content_length: int | None = None
    stale: bool = False

    @property
    def matched(self) -> bool:
        """Return True when a schema was found."""
        return self.url is not None


class ValidationOrchestrator:
    """Validate recognized documents and publish their diagnostics.

    Usage:
        orchestrator = ValidationOrchestrator(loader, resolver, collection)
        orchestrator.attach(host)
        ...
        await orchestrator.dispose()

    """

    def __init__(
        self,
        validator_loader: ValidatorLoader,
        resolver: SchemaResolver,
        sink: DiagnosticSink | None = None,
        mapper: DiagnosticMapper | None = None,
        language_ids: Sequence[str] = DEFAULT_LANGUAGE_IDS,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        root: str | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            validator_loader: Load-once access to the native validator
            resolver: Schema resolver
            sink: Diagnostics publisher (an in-memory collection if None)
            mapper: Outcome-to-diagnostic mapper
            language_ids: Editor language ids that are validated
            extensions: File extensions that are validated
            root: Project root for anchored catalog patterns

        """
        self.validator_loader = validator_loader
        self.resolver = resolver
        self.sink: DiagnosticSink = (
            sink if sink is not None else DiagnosticCollection()
        )
        self.mapper = mapper or DiagnosticMapper()
        self.language_ids = frozenset(language_ids)
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.root = root

        self._sequence: dict[str, int] = {}
        self._states: dict[str, DocumentState] = {}
        self._tasks: set[asyncio.Task[bool]] = set()
        self._unsubscribers: list[Unsubscribe] = []
        self._disposed = False

    def is_recognized(self, document: TextDocument) -> bool:
        """Return True when document is of a validated file type."""
        if document.language_id in self.language_ids:
            return True
        suffix = PurePosixPath(document.file_name.replace("\\", "/")).suffix
        return suffix.lower() in self.extensions

    def state_of(self, uri: str) -> DocumentState:
        """Return the validation state of uri."""
        return self._states.get(uri, DocumentState.IDLE)

    def attach(self, host: EditorHost) -> None:
        """Subscribe to the host's open, change and active-editor events."""
        self._unsubscribers.extend(
            [
                host.on_did_open(self.trigger),
                host.on_did_change(self.trigger),
                host.on_did_change_active_editor(self._on_active_editor),
            ]
        )

    def _on_active_editor(self, document: TextDocument | None) -> None:
        """Validate the newly active document, if there is one."""
        if document is not None:
            self.trigger(document)

    def trigger(self, document: TextDocument) -> asyncio.Task[bool] | None:
        """Schedule validation of document on the running event loop.

        Returns:
            The scheduled task, or None when the document is ignored

        """
        if self._disposed or not self.is_recognized(document):
            return None

        task = asyncio.create_task(self._validate_safely(document))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _validate_safely(self, document: TextDocument) -> bool:
        """Run validate() and log anything unexpected instead of raising."""
        try:
            return await self.validate(document)
        except Exception:
            logger.exception("Unexpected error validating %s", document.uri)
            return False

    def _next_sequence(self, uri: str) -> int:
        """Allocate the next trigger sequence number for uri."""
        sequence = self._sequence.get(uri, 0) + 1
        self._sequence[uri] = sequence
        return sequence

    def _is_current(self, uri: str, sequence: int) -> bool:
        """Return True when no newer trigger started for uri."""
        return not self._disposed and self._sequence.get(uri) == sequence

    def _set_state(
        self, uri: str, sequence: int, state: DocumentState
    ) -> None:
        """Record state for uri if sequence is still the latest trigger."""
        if self._is_current(uri, sequence):
            self._states[uri] = state

    async def validate(self, document: TextDocument) -> bool:
        """Validate document and publish its diagnostics.

        Unrecognized documents are left untouched. When the validator is
        unavailable or faults, nothing is published and earlier diagnostics
        stay in place.

        Args:
            document: Document snapshot to validate

        Returns:
            True when diagnostics were published

        """
        if self._disposed or not self.is_recognized(document):
            return False

        try:
            validator = self.validator_loader.load()
        except ValidatorUnavailable:
            return False

        uri = document.uri
        sequence = self._next_sequence(uri)
        self._set_state(uri, sequence, DocumentState.SYNTAX_CHECKING)

        try:
            syntax_outcome = validator.validate_syntax(document.text)
        except ValidatorFault as e:
            logger.warning("Syntax validation skipped for %s: %s", uri, e)
            self._set_state(uri, sequence, DocumentState.DONE)
            return False

        diagnostics: list[Diagnostic] = []
        syntax_diagnostic = self.mapper.map_syntax(syntax_outcome)
        if syntax_diagnostic is not None:
            diagnostics.append(syntax_diagnostic)

        if not isinstance(syntax_outcome, SyntaxInvalid):
            self._set_state(uri, sequence, DocumentState.SCHEMA_CHECKING)
            schema_text = await self.resolver.resolve(
                document.file_name, self.root
            )
            if schema_text is None:
                logger.debug("No schema for %s", document.file_name)
            else:
                try:
                    schema_outcome = validator.validate_schema(
                        document.text, schema_text
                    )
                except ValidatorFault as e:
                    logger.warning(
                        "Schema validation skipped for %s: %s", uri, e
                    )
                    self._set_state(uri, sequence, DocumentState.DONE)
                    return False
                diagnostics.extend(
                    self.mapper.map_schema(schema_outcome, document.text)
                )

        if not self._is_current(uri, sequence):
            logger.debug(
                "Discarding superseded result #%d for %s", sequence, uri
            )
            return False

        self.sink.set(uri, diagnostics)
        self._states[uri] = DocumentState.DONE
        logger.debug("Published %d diagnostics for %s", len(diagnostics), uri)
        return True

    async def lookup_schema(self, document: TextDocument) -> SchemaLookup:
        """Report which schema, if any, applies to document.

        Returns:
            SchemaLookup with the matched URL and content length

        """
        resolved = await self.resolver.resolve_schema(
            document.file_name, self.root
        )
        if resolved is None:
            return SchemaLookup(file_name=document.file_name)
        return SchemaLookup(
            file_name=document.file_name,
            url=resolved.url,
            content_length=len(resolved.content),
            stale=resolved.stale,
        )

    async def wait_idle(self) -> None:
        """Wait until every scheduled validation task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def dispose(self) -> None:
        """Unsubscribe, cancel in-flight work and clear diagnostics."""
        self._disposed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self.sink.clear()
        self._sequence.clear()
        self._states.clear()
