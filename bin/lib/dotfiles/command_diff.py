"""Diff command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .inventory import PackageDiff, diff_packages
from .models import PackageType
from .output import print_header, print_info, print_item, print_success, print_warning
from .pkgmanager import PackageManager, detect_package_manager


# ============================================================
# Entry Point
# ============================================================

def execute_diff(config: Config, args: argparse.Namespace) -> None:
    """Compare the config with what is installed and stowed."""
    dotfiles_config = config.load()
    kinds = [PackageType.parse(args.type)] if args.type else list(PackageType)

    # Stow-only diffs do not need a package manager
    manager: PackageManager | None = None
    if any(kind != PackageType.STOW for kind in kinds):
        manager = detect_package_manager(config)

    diffs = [
        diff_packages(config, dotfiles_config, manager, kind)
        for kind in kinds
        if kind == PackageType.STOW or (manager is not None and manager.supports(kind))
    ]

    for diff in diffs:
        print_package_diff(diff, args.verbose)

    if all(diff.is_synced() for diff in diffs):
        print_success("✨ Everything is in sync")
    else:
        missing = sum(len(diff.missing) for diff in diffs)
        extra = sum(len(diff.extra) for diff in diffs)
        print_info(f"📊 {missing} missing, {extra} extra")
        if missing:
            print_info("   💡 Run 'dotfiles install' to install missing packages")
        if extra:
            print_info("   💡 Run 'dotfiles scan' to add extra packages to your config")


# ============================================================
# Output
# ============================================================

def print_package_diff(diff: PackageDiff, verbose: bool = False) -> None:
    """Print missing, extra, and synced packages for one kind."""
    print_header(f"{diff.kind.label} packages")

    if diff.missing:
        print_warning(f"❌ Missing ({len(diff.missing)}):")
        for name in diff.missing:
            print_item(name, ok=False)

    if diff.extra:
        print_info(f"➕ Extra ({len(diff.extra)}):")
        for name in diff.extra:
            print_item(name, ok=False, detail="not in config")

    print_success(f"✅ Synced: {len(diff.synced)}")
    if verbose:
        for name in diff.synced:
            print_item(name)
