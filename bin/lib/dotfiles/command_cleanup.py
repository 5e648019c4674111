"""Cleanup command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .output import print_header, print_info, print_success
from .pkgmanager import detect_package_manager


# ============================================================
# Entry Point
# ============================================================

def execute_cleanup(config: Config, args: argparse.Namespace) -> None:
    """Remove old package versions and cached downloads."""
    manager = detect_package_manager(config)
    print_header(f"🧹 Cleaning up {manager.name}")

    if args.cache_only:
        print_info("🗑️  Clearing download cache...")
    else:
        print_info("🗑️  Removing old versions and download cache...")

    # Homebrew can list what it would remove, so a dry run still queries it
    manager.cleanup(cache_only=args.cache_only, dryrun=config.dryrun)

    if not config.dryrun:
        print_success("✅ Cleanup complete")
