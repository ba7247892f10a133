"""Cache command: inspect and maintain the on-disk schema cache."""

from argparse import Namespace

from schemaward.cli.commands.base import BaseCommandHandler
from schemaward.core.cache import SchemaCache


class CacheHandler(BaseCommandHandler):
    """Handler for cache command operations."""

    async def execute(self, args: Namespace) -> int:
        """Execute the requested cache action."""
        cache = SchemaCache(self.global_config["cache"]["directory"])

        if args.action == "stats":
            await self._show_stats(cache)
        elif args.action == "list":
            await self._list_entries(cache)
        elif args.action == "clear":
            removed = await cache.clear()
            print(f"🗑️  Removed {removed} cached schemas")
        elif args.action == "prune":
            removed = await cache.prune(args.days)
            print(f"🧹 Removed {removed} entries older than {args.days}d")
        return 0

    async def _show_stats(self, cache: SchemaCache) -> None:
        """Print cache statistics."""
        stats = await cache.get_cache_stats()
        print("📊 Schema cache")
        print(f"   Directory:     {stats['cache_directory']}")
        print(f"   Entries:       {stats['total_entries']}")
        print(f"   Fresh:         {stats['fresh_entries']}")
        print(f"   Stale:         {stats['stale_entries']}")
        print(f"   Size:          {stats['total_bytes']} bytes")
        print(f"   Freshness:     {stats['ttl_hours']} hours")

    async def _list_entries(self, cache: SchemaCache) -> None:
        """Print one line per cached schema."""
        entries = await cache.entries()
        if not entries:
            print("No cached schemas")
            return

        for entry in entries:
            marker = "fresh" if entry.fresh else "stale"
            fetched = entry.fetched_at.strftime("%Y-%m-%d %H:%M")
            print(f"{marker:<6} {fetched}  {entry.size:>8}  {entry.url}")
