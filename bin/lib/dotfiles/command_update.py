"""Update command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
import subprocess

from .config import Config
from .output import print_header, print_info, print_success, print_warning
from .pkgmanager import PackageManager, detect_package_manager, require_homebrew
from .snapshots import create_snapshot


# ============================================================
# Entry Point
# ============================================================

def execute_update(config: Config, args: argparse.Namespace) -> None:
    """Refresh package metadata and upgrade outdated packages."""
    manager: PackageManager = require_homebrew(config) if args.brew_only else detect_package_manager(config)

    if not args.no_snapshot and not config.dryrun and config.config_path.exists():
        snapshot = create_snapshot(config, config.load(), "Auto-snapshot before update")
        print_info(f"📸 Saved config as snapshot {snapshot.id}")

    print_header(f"⬆️  Updating packages ({manager.name})")

    if not args.skip_brew_update:
        refresh_package_index(manager)

    if args.brew_only:
        print_success("🎉 Homebrew update complete!")
        return

    print_info("📋 Checking for outdated packages...")
    outdated = manager.outdated()
    if not outdated and not args.packages:
        print_success("✅ All packages are up to date!")
        return

    if outdated:
        print_info(f"Found {len(outdated)} outdated packages:")
        for package in outdated:
            print_info(f"  • {package}")

    if args.packages:
        print_info(f"\nUpgrading: {', '.join(args.packages)}")
    else:
        print_info("\nUpgrading all outdated packages...")
    manager.upgrade(args.packages or None)

    if config.dryrun:
        return
    print_success("\n🎉 Update complete!")
    print_info("💡 Next steps:")
    print_info("   • Run: dotfiles cleanup  # Remove old versions")
    print_info("   • Run: dotfiles doctor   # Verify installation")


# ============================================================
# Helpers
# ============================================================

def refresh_package_index(manager: PackageManager) -> None:
    """Update package metadata; failures only warn."""
    print_info(f"🔄 Updating {manager.name} package index...")
    try:
        manager.update()
    except subprocess.CalledProcessError as e:
        print_warning(f"⚠️  {manager.name} update failed (exit {e.returncode})")
        return
    print_success(f"✅ {manager.name} package index updated")
