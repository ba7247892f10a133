"""Config command: show or initialize settings.conf."""

import sys
from argparse import Namespace

from schemaward.cli.commands.base import BaseCommandHandler
from schemaward.exceptions import ConfigurationError


class ConfigHandler(BaseCommandHandler):
    """Handler for config command operations."""

    async def execute(self, args: Namespace) -> int:
        """Show the effective config or write the default file."""
        if args.init:
            try:
                path = self.config_manager.save_default_config(
                    overwrite=args.force
                )
            except ConfigurationError as e:
                print(f"❌ {e}", file=sys.stderr)
                return 1
            print(f"✅ Wrote {path}")
            return 0

        self._show_config()
        return 0

    def _show_config(self) -> None:
        """Print the effective configuration."""
        config = self.global_config
        print(f"📁 Settings file: {self.config_manager.settings_file}")
        print(f"config_version = {config['config_version']}")
        print(f"log_level = {config['log_level']}")
        print(f"console_log_level = {config['console_log_level']}")
        print(f"validator_module = {config['validator_module']}")
        for section in ("network", "cache", "documents"):
            print(f"\n[{section}]")
            for key, value in config[section].items():
                if isinstance(value, tuple):
                    value = ",".join(value)
                print(f"{key} = {value}")
