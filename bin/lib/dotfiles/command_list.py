"""List command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
import json

from .config import Config
from .models import PackageType
from .output import Color, paint, print_info, print_key_value


SECTION_TITLES = {
    PackageType.TAP: "📋 Taps",
    PackageType.BREW: "🍺 Brews",
    PackageType.CASK: "📦 Casks",
    PackageType.STOW: "🔗 Stow Packages",
}


# ============================================================
# Entry Point
# ============================================================

def execute_list(config: Config, args: argparse.Namespace) -> None:
    """Print configured packages as sections, counts, or JSON."""
    dotfiles_config = config.load()
    kinds = [PackageType.parse(args.type)] if args.type else list(SECTION_TITLES)

    if args.json:
        print(json.dumps({kind.key: dotfiles_config.packages(kind) for kind in kinds}, indent=2))
        return

    if args.count:
        for kind in kinds:
            print_key_value(kind.key.capitalize(), str(len(dotfiles_config.packages(kind))))
        if len(kinds) > 1:
            print_key_value("Total", str(dotfiles_config.total_packages()))
        return

    total = sum(len(dotfiles_config.packages(kind)) for kind in kinds)
    if total == 0:
        print_info("No packages configured. Add some with 'dotfiles add <package>'.")
        return

    for kind in kinds:
        items = dotfiles_config.packages(kind)
        if not items:
            continue
        print_info(paint(f"{SECTION_TITLES[kind]} ({len(items)}):", Color.BOLD))
        for item in items:
            print_info(f"  • {item}")
        print_info("")

    print_info(f"Total packages: {total}")
