"""Groups command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .errors import ConfigError
from .models import DotfilesConfig, PackageType, merge_unique
from .output import print_header, print_info, print_item, print_success


# ============================================================
# Entry Point
# ============================================================

def execute_groups(config: Config, args: argparse.Namespace) -> None:
    """Dispatch groups subcommands."""
    actions = {
        "list": groups_list,
        "create": groups_create,
        "add": groups_add,
        "remove": groups_remove,
        "show": groups_show,
        "install": groups_install,
    }
    actions[args.action](config, args)


# ============================================================
# Actions
# ============================================================

def groups_list(config: Config, args: argparse.Namespace) -> None:
    groups = config.load().groups
    if not groups:
        print_info("No groups defined. Create one with 'dotfiles groups create <name> <pkg1,pkg2>'.")
        return

    print_header(f"📁 Groups ({len(groups)})")
    for name in sorted(groups):
        members = groups[name]
        print_info(f"  {name} ({len(members)} packages): {', '.join(members)}")


def groups_create(config: Config, args: argparse.Namespace) -> None:
    """Create a group from comma-separated package names."""
    dotfiles_config = config.load()
    if args.name in dotfiles_config.groups:
        raise ConfigError(f"Group '{args.name}' already exists")

    members = merge_unique([], split_package_list(args.packages))
    dotfiles_config.groups[args.name] = members
    save(config, dotfiles_config)
    print_success(f"✅ Created group '{args.name}' with {len(members)} packages")


def groups_add(config: Config, args: argparse.Namespace) -> None:
    dotfiles_config = config.load()
    members = require_group(dotfiles_config, args.name)

    updated = merge_unique(members, split_package_list(args.packages))
    added = len(updated) - len(members)
    dotfiles_config.groups[args.name] = updated
    if added:
        save(config, dotfiles_config)
    print_success(f"✅ Added {added} packages to group '{args.name}'")


def groups_remove(config: Config, args: argparse.Namespace) -> None:
    """Remove packages from a group, or the whole group when none are given."""
    dotfiles_config = config.load()
    members = require_group(dotfiles_config, args.name)

    packages = split_package_list(args.packages)
    if not packages:
        del dotfiles_config.groups[args.name]
        save(config, dotfiles_config)
        print_success(f"🗑️  Removed group '{args.name}'")
        return

    remaining = [member for member in members if member not in packages]
    dotfiles_config.groups[args.name] = remaining
    save(config, dotfiles_config)
    print_success(f"✅ Removed {len(members) - len(remaining)} packages from group '{args.name}'")


def groups_show(config: Config, args: argparse.Namespace) -> None:
    dotfiles_config = config.load()
    members = require_group(dotfiles_config, args.name)

    print_header(f"📁 Group '{args.name}' ({len(members)} packages)")
    tracked = set(dotfiles_config.brews) | set(dotfiles_config.casks)
    for member in members:
        print_item(member, ok=member in tracked, detail="" if member in tracked else "not in config")


def groups_install(config: Config, args: argparse.Namespace) -> None:
    """Add group members as brews unless already tracked as brews or casks."""
    dotfiles_config = config.load()
    members = require_group(dotfiles_config, args.name)

    added = 0
    for member in members:
        if member in dotfiles_config.casks:
            continue
        if dotfiles_config.add_package(PackageType.BREW, member):
            print_success(f"✓ Added brew: {member}")
            added += 1

    if added:
        save(config, dotfiles_config)
    print_info(f"\n📊 Added {added} packages from group '{args.name}'")
    if added:
        print_info("   💡 Run 'dotfiles install' to install them")


# ============================================================
# Helpers
# ============================================================

def split_package_list(values: list[str] | None) -> list[str]:
    """Split arguments like ['git,curl', 'jq'] into package names."""
    packages: list[str] = []
    for value in values or []:
        packages.extend(item.strip() for item in value.split(',') if item.strip())
    return packages


def require_group(dotfiles_config: DotfilesConfig, name: str) -> list[str]:
    if name not in dotfiles_config.groups:
        raise ConfigError(f"Group '{name}' not found")
    return dotfiles_config.groups[name]


def save(config: Config, dotfiles_config: DotfilesConfig) -> None:
    if not config.dryrun:
        config.save(dotfiles_config)
