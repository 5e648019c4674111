"""Interactive package browser."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .errors import ConfigError
from .models import DotfilesConfig, PackageType
from .output import ask, print_header, print_info, print_success, print_warning


HELP_TEXT = "Commands: d <n> remove, a <name> add, t <type> switch type, q quit"


# ============================================================
# Entry Point
# ============================================================

def execute_browse(config: Config, args: argparse.Namespace) -> None:
    """Browse and edit package lists line by line until the user quits."""
    dotfiles_config = config.load()
    kind = PackageType.parse(args.type) if args.type else PackageType.BREW
    changed = False

    while True:
        print_package_list(dotfiles_config, kind)
        print_info(HELP_TEXT)
        command = ask("> ", default="q")

        action, _, argument = command.partition(' ')
        argument = argument.strip()

        if action in ('q', 'quit'):
            break
        if action == 'd':
            changed |= remove_by_index(dotfiles_config, kind, argument)
        elif action == 'a':
            if dotfiles_config.add_package(kind, argument):
                print_success(f"✓ Added {kind.value}: {argument}")
                changed = True
            else:
                print_warning(f"- {kind.label} '{argument}' already exists or is empty")
        elif action == 't':
            try:
                kind = PackageType.parse(argument)
            except ConfigError as e:
                print_warning(str(e))
        else:
            print_warning(f"Unknown command: {command}")

    if changed and not config.dryrun:
        config.save(dotfiles_config)
        print_success("💾 Saved configuration")


# ============================================================
# Helpers
# ============================================================

def remove_by_index(dotfiles_config: DotfilesConfig, kind: PackageType, argument: str) -> bool:
    """Remove the package at a 1-based index. Returns True if removed."""
    packages = dotfiles_config.packages(kind)
    if not argument.isdigit() or not 1 <= int(argument) <= len(packages):
        print_warning(f"Invalid number: {argument or '(none)'}")
        return False

    name = packages[int(argument) - 1]
    dotfiles_config.remove_package(kind, name)
    print_success(f"🗑️  Removed {kind.value}: {name}")
    return True


def print_package_list(dotfiles_config: DotfilesConfig, kind: PackageType) -> None:
    packages = dotfiles_config.packages(kind)
    print_header(f"{kind.label} packages ({len(packages)})")
    if not packages:
        print_info("  (none)")
    for index, name in enumerate(packages, start=1):
        print_info(f"  {index:>3}. {name}")
