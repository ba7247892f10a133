"""Shared fixtures for core tests."""

from collections.abc import AsyncIterator

import aiohttp
import pytest
import pytest_asyncio
from aioresponses import aioresponses

from schemaward.core.validator import (
    SchemaOutcome,
    SchemaValid,
    SyntaxValid,
    ValidationOutcome,
)

CATALOG_URL = "https://catalog.test/api/json/catalog.json"
CARGO_SCHEMA_URL = "https://json.test/cargo.json"
TOML_SCHEMA_URL = "https://json.test/generic-toml.json"

SAMPLE_CATALOG = {
    "schemas": [
        {
            "name": "Cargo",
            "fileMatch": ["Cargo.toml"],
            "url": CARGO_SCHEMA_URL,
        },
        {
            "name": "Anything TOML",
            "fileMatch": ["*.toml"],
            "url": TOML_SCHEMA_URL,
        },
    ]
}


@pytest.fixture
def mock_aioresponse():
    """Intercept aiohttp requests made during the test."""
    with aioresponses() as mocked:
        yield mocked


@pytest_asyncio.fixture
async def session() -> AsyncIterator[aiohttp.ClientSession]:
    """Plain aiohttp session for fetcher tests."""
    async with aiohttp.ClientSession() as client_session:
        yield client_session


class FakeValidator:
    """Validator returning canned outcomes and recording calls."""

    def __init__(
        self,
        syntax: ValidationOutcome | None = None,
        schema: SchemaOutcome | None = None,
    ) -> None:
        self.syntax = syntax or SyntaxValid()
        self.schema = schema or SchemaValid()
        self.syntax_calls: list[str] = []
        self.schema_calls: list[tuple[str, str]] = []

    def validate_syntax(self, text: str) -> ValidationOutcome:
        self.syntax_calls.append(text)
        if isinstance(self.syntax, Exception):
            raise self.syntax
        return self.syntax

    def validate_schema(self, text: str, schema_text: str) -> SchemaOutcome:
        self.schema_calls.append((text, schema_text))
        if isinstance(self.schema, Exception):
            raise self.schema
        return self.schema


@pytest.fixture
def fake_validator() -> FakeValidator:
    """Validator reporting valid syntax and a satisfied schema."""
    return FakeValidator()
