"""Scan command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .inventory import untracked_packages
from .models import PackageType
from .output import ask, print_header, print_info, print_item, print_success
from .pkgmanager import detect_package_manager


# ============================================================
# Entry Point
# ============================================================

def execute_scan(config: Config, args: argparse.Namespace) -> None:
    """Find installed packages missing from the config and offer to add them."""
    dotfiles_config = config.load()
    manager = detect_package_manager(config)

    if args.brews_only:
        kinds = [PackageType.BREW]
    elif args.casks_only:
        kinds = [PackageType.CASK]
    else:
        kinds = [PackageType.BREW, PackageType.CASK]

    found = {
        kind: untracked_packages(dotfiles_config, manager, kind)
        for kind in kinds
        if manager.supports(kind)
    }
    total = sum(len(packages) for packages in found.values())
    if total == 0:
        print_success("✨ All installed packages are already in your config")
        return

    print_header(f"🔍 Found {total} packages not in your config")
    for kind, packages in found.items():
        if packages:
            print_info(f"{kind.label}s ({len(packages)}):")
            for package in packages:
                print_item(package)

    if args.auto or config.assume_yes:
        selected = found
    else:
        selected = select_packages(found)

    added = 0
    for kind, packages in selected.items():
        for package in packages:
            added += dotfiles_config.add_package(kind, package)

    if not added:
        print_info("No packages added")
        return

    # Bulk additions are kept in alphabetical order
    if args.auto:
        for kind in kinds:
            dotfiles_config.packages(kind).sort()

    if not config.dryrun:
        config.save(dotfiles_config)
    print_success(f"📊 Added {added} packages to config")


# ============================================================
# Interactive Selection
# ============================================================

def select_packages(found: dict[PackageType, list[str]]) -> dict[PackageType, list[str]]:
    """
    Ask which packages to add.

    [a]ll adds everything, [n]one nothing, [s]elect asks per package
    with y/n/q.
    """
    choice = ask("\nAdd packages? [a]ll / [n]one / [s]elect: ").lower()
    if choice in ('a', 'all'):
        return found
    if choice not in ('s', 'select'):
        return {}

    selected: dict[PackageType, list[str]] = {}
    for kind, packages in found.items():
        for package in packages:
            answer = ask(f"  Add {kind.value} {package}? [y/n/q]: ").lower()
            if answer in ('q', 'quit'):
                return selected
            if answer in ('y', 'yes'):
                selected.setdefault(kind, []).append(package)
    return selected
