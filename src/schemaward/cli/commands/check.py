"""Check command: validate a file and print its diagnostics."""

import sys
from argparse import Namespace

from schemaward.cli.commands.base import BaseCommandHandler
from schemaward.core.diagnostics import Diagnostic, Severity
from schemaward.core.http_session import create_http_session
from schemaward.core.orchestrator import (
    DiagnosticCollection,
    ValidationOrchestrator,
)
from schemaward.core.resolver import SchemaResolver
from schemaward.core.validator import ValidatorLoader
from schemaward.exceptions import ValidatorUnavailable
from schemaward.logger import get_logger

logger = get_logger(__name__)

EXIT_DIAGNOSTIC_ERRORS = 1
EXIT_VALIDATOR_UNAVAILABLE = 2


def format_diagnostic(file_name: str, diagnostic: Diagnostic) -> str:
    """Format a diagnostic as ``file:line:col: severity: message``.

    Lines and columns are printed 1-based.
    """
    start = diagnostic.range.start
    return (
        f"{file_name}:{start.line + 1}:{start.character + 1}: "
        f"{diagnostic.severity.value}: {diagnostic.message}"
    )


class CheckHandler(BaseCommandHandler):
    """Handler for the check command."""

    async def execute(self, args: Namespace) -> int:
        """Validate args.file once and print the published diagnostics."""
        loader = ValidatorLoader(args.validator)
        try:
            loader.load()
        except ValidatorUnavailable as e:
            print(f"❌ {e}", file=sys.stderr)
            return EXIT_VALIDATOR_UNAVAILABLE

        try:
            document = self._load_document(args.file)
        except (OSError, UnicodeDecodeError) as e:
            print(f"❌ Cannot read {args.file}: {e}", file=sys.stderr)
            return EXIT_DIAGNOSTIC_ERRORS

        documents_cfg = self.global_config["documents"]
        collection = DiagnosticCollection()

        network_cfg = self.global_config["network"]
        async with create_http_session(network_cfg) as session:
            orchestrator = ValidationOrchestrator(
                loader,
                SchemaResolver.from_config(session, self.global_config),
                collection,
                language_ids=documents_cfg["language_ids"],
                extensions=documents_cfg["extensions"],
                root=args.root,
            )
            if not orchestrator.is_recognized(document):
                print(f"⚠️  Skipping {args.file}: unrecognized file type")
                return 0
            published = await orchestrator.validate(document)

        if not published:
            print(
                f"❌ Validation of {args.file} did not complete",
                file=sys.stderr,
            )
            return EXIT_DIAGNOSTIC_ERRORS

        diagnostics = collection.get(document.uri)
        logger.debug("Checked %s: %d diagnostics", args.file, len(diagnostics))
        for diagnostic in diagnostics:
            print(format_diagnostic(args.file, diagnostic))

        if not diagnostics:
            print(f"✅ {args.file}: no problems found")
        if any(d.severity is Severity.ERROR for d in diagnostics):
            return EXIT_DIAGNOSTIC_ERRORS
        return 0
