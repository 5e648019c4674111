"""Backup and restore command implementations."""

# ============================================================
# Imports
# ============================================================

import argparse
import shutil
from pathlib import Path

from .config import Config, load_dotfiles_config
from .errors import ConfigError
from .output import print_info, print_success


# ============================================================
# Entry Points
# ============================================================

def execute_backup(config: Config, args: argparse.Namespace) -> None:
    """Copy the config file to a backup location."""
    if not config.config_path.exists():
        raise ConfigError(f"No configuration found at {config.config_path}. Run 'dotfiles init' first.")

    destination = Path(args.output).expanduser() if args.output else config.backup_path
    if not config.dryrun:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(config.config_path, destination)
    print_success(f"💾 Backed up configuration to {destination}")


def execute_restore(config: Config, args: argparse.Namespace) -> None:
    """Restore the config from a backup file, saving the current one first."""
    source = Path(args.path).expanduser() if args.path else config.backup_path
    if not source.exists():
        raise ConfigError(f"Backup not found: {source}")

    # Validate before touching the current config
    restored = load_dotfiles_config(source)

    restoring_default_backup = source.resolve() == config.backup_path.resolve()
    if not args.no_backup and config.config_path.exists() and not restoring_default_backup:
        if not config.dryrun:
            shutil.copy2(config.config_path, config.backup_path)
        print_info(f"💾 Saved current configuration to {config.backup_path}")

    if not config.dryrun:
        config.save(restored)
    print_success(f"✅ Restored configuration from {source}")
