"""Validator collaborator: outcome types, protocol and native adapter.

Syntax and schema evaluation happen in an external compiled module. This
module only defines what the rest of schemaward expects back from it, an
adapter for the module's JSON-returning functions, and a loader that imports
the module once and remembers when it is unavailable.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Protocol

import orjson

from schemaward.constants import (
    NATIVE_SCHEMA_FUNCTION,
    NATIVE_SYNTAX_FUNCTION,
)
from schemaward.exceptions import ValidatorFault, ValidatorUnavailable
from schemaward.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class SyntaxValid:
    """The document parsed without errors."""


@dataclass(slots=True, frozen=True)
class SyntaxInvalid:
    """The document failed to parse.

    Positions are zero-indexed. A missing end position means "one column
    past the start, on the same line".
    """

    line: int
    column: int
    message: str = ""
    end_line: int | None = None
    end_column: int | None = None


ValidationOutcome = SyntaxValid | SyntaxInvalid


@dataclass(slots=True, frozen=True)
class SchemaViolation:
    """One schema error: slash-delimited JSON pointer and message."""

    path: str
    message: str


@dataclass(slots=True, frozen=True)
class SchemaValid:
    """The document satisfies its schema."""


@dataclass(slots=True, frozen=True)
class SchemaInvalid:
    """The document violates its schema."""

    errors: tuple[SchemaViolation, ...]


SchemaOutcome = SchemaValid | SchemaInvalid


class Validator(Protocol):
    """Syntax and schema evaluation, synchronous and side-effect free."""

    def validate_syntax(self, text: str) -> ValidationOutcome:
        """Parse text and report the first syntax error, if any."""
        ...

    def validate_schema(self, text: str, schema_text: str) -> SchemaOutcome:
        """Evaluate text against the JSON Schema in schema_text."""
        ...


def _decode(raw: Any) -> Mapping[str, Any]:  # noqa: ANN401
    """Decode a native result (JSON text, bytes or mapping)."""
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, str | bytes | bytearray):
        try:
            data = orjson.loads(raw)  # pylint: disable=no-member
        except orjson.JSONDecodeError as e:
            msg = f"undecodable result: {e}"
            raise ValidatorFault(msg) from e
        if isinstance(data, Mapping):
            return data
    msg = f"unexpected result type {type(raw).__name__}"
    raise ValidatorFault(msg)


def _optional_int(value: Any) -> int | None:  # noqa: ANN401
    """Return value as int, or None if it is not a non-negative integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def parse_syntax_result(raw: Any) -> ValidationOutcome:  # noqa: ANN401
    """Convert a native syntax result into a ValidationOutcome.

    The native shape is ``{"valid", "line", "column", "end_line",
    "end_column", "message"}``. An invalid result without a position is
    reported at the start of the document.

    Raises:
        ValidatorFault: If the result cannot be decoded

    """
    data = _decode(raw)
    if data.get("valid") is True:
        return SyntaxValid()

    message = data.get("message")
    return SyntaxInvalid(
        line=_optional_int(data.get("line")) or 0,
        column=_optional_int(data.get("column")) or 0,
        message=message if isinstance(message, str) else "",
        end_line=_optional_int(data.get("end_line")),
        end_column=_optional_int(data.get("end_column")),
    )


def parse_schema_result(raw: Any) -> SchemaOutcome:  # noqa: ANN401
    """Convert a native schema result into a SchemaOutcome.

    The native shape is ``{"valid", "errors": [{"path", "message"}]}``.

    Raises:
        ValidatorFault: If the result cannot be decoded

    """
    data = _decode(raw)
    if data.get("valid") is True:
        return SchemaValid()

    errors = data.get("errors")
    if not isinstance(errors, list):
        msg = "schema result has no 'errors' list"
        raise ValidatorFault(msg)

    violations = []
    for error in errors:
        if not isinstance(error, Mapping):
            continue
        violations.append(
            SchemaViolation(
                path=str(error.get("path", "")),
                message=str(error.get("message", "")),
            )
        )
    return SchemaInvalid(errors=tuple(violations))


class NativeValidator:
    """Validator backed by the compiled module's two functions."""

    def __init__(
        self,
        module: ModuleType,
        syntax_function: str = NATIVE_SYNTAX_FUNCTION,
        schema_function: str = NATIVE_SCHEMA_FUNCTION,
    ) -> None:
        """Bind the module's validation functions.

        Args:
            module: Imported native module
            syntax_function: Name of the ``text -> json`` function
            schema_function: Name of the ``(text, schema) -> json`` function

        Raises:
            ValidatorUnavailable: If either function is missing

        """
        self.module_name = module.__name__
        self._syntax = self._bind(module, syntax_function)
        self._schema = self._bind(module, schema_function)

    @staticmethod
    def _bind(module: ModuleType, name: str) -> Callable[..., Any]:
        """Return module.name if it is callable."""
        func = getattr(module, name, None)
        if not callable(func):
            msg = f"module does not export {name}()"
            raise ValidatorUnavailable(msg, target=module.__name__)
        return func

    def validate_syntax(self, text: str) -> ValidationOutcome:
        """Run the native syntax check.

        Raises:
            ValidatorFault: If the native call fails or returns garbage

        """
        try:
            raw = self._syntax(text)
        except Exception as e:
            raise ValidatorFault(str(e), target=self.module_name) from e
        return parse_syntax_result(raw)

    def validate_schema(self, text: str, schema_text: str) -> SchemaOutcome:
        """Run the native schema check.

        Raises:
            ValidatorFault: If the native call fails or returns garbage

        """
        try:
            raw = self._schema(text, schema_text)
        except Exception as e:
            raise ValidatorFault(str(e), target=self.module_name) from e
        return parse_schema_result(raw)


class LoadState(Enum):
    """Lifecycle of the validator module."""

    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    UNAVAILABLE = "unavailable"


class ValidatorLoader:
    """Import the native validator once; remember a failed import.

    Usage:
        loader = ValidatorLoader("tomlkit_core")
        validator = loader.load()  # raises ValidatorUnavailable if missing

    """

    def __init__(
        self,
        module_name: str,
        importer: Callable[[str], ModuleType] = importlib.import_module,
    ) -> None:
        """Initialize the loader without importing anything yet.

        Args:
            module_name: Import name of the native module
            importer: Module import function

        """
        self.module_name = module_name
        self._importer = importer
        self._state = LoadState.NOT_LOADED
        self._validator: Validator | None = None
        self._error: ValidatorUnavailable | None = None

    @classmethod
    def from_validator(cls, validator: Validator) -> ValidatorLoader:
        """Create a loader that is already LOADED with validator."""
        loader = cls(type(validator).__module__)
        loader._validator = validator
        loader._state = LoadState.LOADED
        return loader

    @property
    def state(self) -> LoadState:
        """Return the current load state."""
        return self._state

    @property
    def available(self) -> bool:
        """Return False once the module is known to be unavailable."""
        return self._state is not LoadState.UNAVAILABLE

    def load(self) -> Validator:
        """Return the validator, importing the module on first call.

        Raises:
            ValidatorUnavailable: If the module failed (now or before) to
                import or lacks the expected functions

        """
        if self._validator is not None:
            return self._validator
        if self._error is not None:
            raise self._error

        try:
            module = self._importer(self.module_name)
            validator = NativeValidator(module)
        except ValidatorUnavailable as e:
            self._fail(e)
            raise
        except Exception as e:
            error = ValidatorUnavailable(str(e), target=self.module_name)
            self._fail(error)
            raise error from e

        self._validator = validator
        self._state = LoadState.LOADED
        logger.info("Validator module %s loaded", self.module_name)
        return validator

    def _fail(self, error: ValidatorUnavailable) -> None:
        """Enter the permanent UNAVAILABLE state."""
        self._error = error
        self._state = LoadState.UNAVAILABLE
        logger.warning("%s", error)
