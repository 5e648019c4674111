"""Snapshot command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
import json

from .config import Config
from .models import PackageType, Snapshot
from .output import confirm, print_header, print_info, print_key_value, print_success
from .snapshots import (
    clean_snapshots,
    create_snapshot,
    delete_snapshot,
    list_snapshots,
    load_snapshot,
)


# ============================================================
# Entry Point
# ============================================================

def execute_snapshot(config: Config, args: argparse.Namespace) -> None:
    """Dispatch snapshot subcommands."""
    actions = {
        "create": snapshot_create,
        "list": snapshot_list,
        "show": snapshot_show,
        "restore": snapshot_restore,
        "delete": snapshot_delete,
        "clean": snapshot_clean,
    }
    actions[args.action](config, args)


# ============================================================
# Actions
# ============================================================

def snapshot_create(config: Config, args: argparse.Namespace) -> None:
    snapshot = create_snapshot(config, config.load(), args.description)
    print_success(f"📸 Created snapshot {snapshot.id}")
    print_key_value("Description", snapshot.description)
    print_key_value("Packages", str(snapshot.config.total_packages()))


def snapshot_list(config: Config, args: argparse.Namespace) -> None:
    snapshots = list_snapshots(config)
    if not snapshots:
        print_info("No snapshots found. Create one with 'dotfiles snapshot create'.")
        return

    print_header(f"📸 Snapshots ({len(snapshots)})")
    for snapshot in snapshots:
        print_info(f"  {snapshot.id}  {snapshot.description}  ({snapshot.config.total_packages()} packages)")


def snapshot_show(config: Config, args: argparse.Namespace) -> None:
    snapshot = load_snapshot(config, args.id)
    if args.json:
        print(json.dumps(snapshot.to_dict(), indent=2))
        return
    print_snapshot(snapshot)


def snapshot_restore(config: Config, args: argparse.Namespace) -> None:
    """Replace the config with a snapshot, saving the current state first."""
    snapshot = load_snapshot(config, args.id)
    print_snapshot(snapshot)

    if not confirm("Restore this snapshot?", default=False, assume_yes=config.assume_yes or args.yes):
        print_info("Restore cancelled")
        return

    if not args.no_backup:
        backup = create_snapshot(config, config.load(), f"Auto-backup before restoring {snapshot.id}")
        print_info(f"📸 Saved current config as snapshot {backup.id}")

    if not config.dryrun:
        config.save(snapshot.config)
    print_success(f"✅ Restored snapshot {snapshot.id}")


def snapshot_delete(config: Config, args: argparse.Namespace) -> None:
    if not confirm(f"Delete snapshot {args.id}?", default=False, assume_yes=config.assume_yes or args.yes):
        print_info("Delete cancelled")
        return
    delete_snapshot(config, args.id)
    print_success(f"🗑️  Deleted snapshot {args.id}")


def snapshot_clean(config: Config, args: argparse.Namespace) -> None:
    removed = clean_snapshots(config, args.days)
    if not removed:
        print_info(f"No snapshots older than {args.days} days")
        return
    for snapshot in removed:
        print_info(f"  🗑️  {snapshot.id}  {snapshot.description}")
    print_success(f"✅ Removed {len(removed)} snapshots older than {args.days} days")


# ============================================================
# Output
# ============================================================

def print_snapshot(snapshot: Snapshot) -> None:
    print_header(f"📸 Snapshot {snapshot.id}")
    print_key_value("Created", snapshot.timestamp)
    print_key_value("Description", snapshot.description)
    for key in ("hostname", "platform"):
        if key in snapshot.metadata:
            print_key_value(key.capitalize(), str(snapshot.metadata[key]))
    for kind in PackageType:
        print_key_value(kind.key.capitalize(), str(len(snapshot.config.packages(kind))))
