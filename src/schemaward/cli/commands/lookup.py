"""Lookup command: report the schema matched for a file."""

from argparse import Namespace
from pathlib import Path

from schemaward.cli.commands.base import BaseCommandHandler
from schemaward.core.http_session import create_http_session
from schemaward.core.orchestrator import TextDocument, ValidationOrchestrator
from schemaward.core.resolver import SchemaResolver
from schemaward.core.validator import ValidatorLoader
from schemaward.logger import get_logger

logger = get_logger(__name__)


class LookupHandler(BaseCommandHandler):
    """Handler for the lookup command."""

    async def execute(self, args: Namespace) -> int:
        """Resolve the schema for args.file and print what was found."""
        # The file does not have to exist: only its name is matched
        path = Path(args.file).expanduser().resolve()
        document = TextDocument(
            uri=path.as_uri(), file_name=str(path), text=""
        )
        name = path.name

        print(f"🔍 Looking up schema for {name}...")
        network_cfg = self.global_config["network"]
        async with create_http_session(network_cfg) as session:
            orchestrator = ValidationOrchestrator(
                ValidatorLoader(self.global_config["validator_module"]),
                SchemaResolver.from_config(session, self.global_config),
                root=args.root,
            )
            lookup = await orchestrator.lookup_schema(document)
        logger.debug("Lookup for %s: %s", name, lookup)

        if not lookup.matched:
            print(f"⚠️  No schema found in the catalog for {name}.")
            return 1

        print(f"✅ Schema found: {lookup.url}")
        print(f"   Length: {lookup.content_length} characters")
        if lookup.stale:
            print("   (served from an expired cache entry)")
        return 0
