"""Add and remove command implementations."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .models import DotfilesConfig, PackageType, collect_packages
from .output import print_info, print_success, print_warning
from .pkgmanager import detect_package_manager


# ============================================================
# Entry Points
# ============================================================

def execute_add(config: Config, args: argparse.Namespace) -> None:
    """Add packages to the config, skipping ones already tracked."""
    kind = PackageType.parse(args.type)
    packages = collect_packages(args.packages, args.file)
    if not packages:
        print_warning("No packages specified. Use command line arguments or --file.")
        return

    dotfiles_config = config.load()
    added = 0

    for package in packages:
        if dotfiles_config.add_package(kind, package):
            print_success(f"✓ Added {kind.value}: {package}")
            added += 1
        else:
            print_info(f"- {kind.label} {package} already exists")

    if added:
        if not config.dryrun:
            config.save(dotfiles_config)
        print_info(f"\n📊 Added {added} new packages")


def execute_remove(config: Config, args: argparse.Namespace) -> None:
    """Remove packages from the config, optionally uninstalling them."""
    dotfiles_config = config.load()
    cleared = clear_package_lists(dotfiles_config, args)

    kind = PackageType.parse(args.type)
    packages = collect_packages(args.packages, args.file)
    bulk = args.all_brews or args.all_casks or args.all_taps or args.all_stow
    if not packages and not bulk:
        print_warning("No packages specified. Use command line arguments, --file, or --all-<type>.")
        return

    # Uninstalling only applies to packages the system manager owns
    manager = None
    if args.uninstall and packages and kind != PackageType.STOW:
        manager = detect_package_manager(config)

    removed = 0
    for package in packages:
        if not dotfiles_config.remove_package(kind, package):
            print_info(f"- {kind.label} {package} not found in config")
            continue

        print_success(f"✓ Removed {kind.value}: {package}")
        removed += 1
        if manager:
            manager.uninstall(package, kind)

    if (removed or cleared) and not config.dryrun:
        config.save(dotfiles_config)
    if removed:
        print_info(f"\n📊 Removed {removed} packages")


# ============================================================
# Bulk Removal
# ============================================================

def clear_package_lists(dotfiles_config: DotfilesConfig, args: argparse.Namespace) -> int:
    """Empty every list selected by an --all-<type> flag and return the count removed."""
    flags = {
        PackageType.BREW: args.all_brews,
        PackageType.CASK: args.all_casks,
        PackageType.TAP: args.all_taps,
        PackageType.STOW: args.all_stow,
    }

    cleared = 0
    for kind, selected in flags.items():
        if not selected:
            continue
        items = dotfiles_config.packages(kind)
        count = len(items)
        items.clear()
        cleared += count
        print_success(f"🗑️  Removed all {count} {kind.key}")
    return cleared
