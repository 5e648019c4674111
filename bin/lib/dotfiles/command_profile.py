"""Profile export and import command implementations."""

# ============================================================
# Imports
# ============================================================

import argparse
import json
import platform
import socket
from datetime import datetime
from pathlib import Path

from .config import Config, load_json, write_json
from .errors import ConfigError
from .models import Profile
from .output import print_header, print_info, print_key_value, print_success
from .snapshots import machine_metadata
from .templates import apply_config


# ============================================================
# Entry Points
# ============================================================

def execute_export(config: Config, args: argparse.Namespace) -> None:
    """Save the current config as a named machine profile."""
    dotfiles_config = config.load().copy()
    if args.brews_only:
        dotfiles_config.casks = []
    elif args.casks_only:
        dotfiles_config.brews = []

    profile = Profile(
        name=args.name,
        description=args.description or f"Profile exported from {socket.gethostname()}",
        machine=socket.gethostname(),
        platform=f"{platform.system().lower()}/{platform.machine()}",
        created_at=datetime.now().isoformat(timespec='seconds'),
        config=dotfiles_config,
        metadata=machine_metadata(dotfiles_config),
    )

    path = Path(args.output).expanduser() if args.output else config.profiles_dir / f"{args.name}.json"
    if not config.dryrun:
        write_json(path, profile.to_dict())

    print_success(f"📤 Exported profile '{args.name}' to {path}")
    print_key_value("Packages", str(dotfiles_config.total_packages()))


def execute_import_profile(config: Config, args: argparse.Namespace) -> None:
    """Load a profile into the config, merging by default."""
    path = find_profile(config, args.profile)
    profile = load_profile(path)

    dotfiles_config = config.load()
    updated = apply_config(dotfiles_config, profile.config, merge=not args.replace)
    if not config.dryrun:
        config.save(updated)

    verb = "Replaced config with" if args.replace else "Merged"
    print_success(f"📥 {verb} profile '{profile.name}' ({profile.machine}, {profile.created_at})")
    print_key_value("Packages", str(updated.total_packages()))


def execute_profiles(config: Config, args: argparse.Namespace) -> None:
    """List saved profiles."""
    paths = sorted(config.profiles_dir.glob("*.json")) if config.profiles_dir.is_dir() else []
    if not paths:
        print_info("No profiles found. Create one with 'dotfiles export <name>'.")
        return

    print_header(f"👤 Profiles ({len(paths)})")
    for path in paths:
        try:
            profile = load_profile(path)
        except ConfigError as e:
            print_info(f"  {path.stem}  (unreadable: {e})")
            continue
        print_info(f"  {path.stem}  {profile.description}  "
                   f"({profile.config.total_packages()} packages, {profile.created_at})")


# ============================================================
# Helpers
# ============================================================

def find_profile(config: Config, reference: str) -> Path:
    """Resolve a profile name or file path."""
    path = Path(reference).expanduser()
    if path.is_file():
        return path
    named = config.profiles_dir / f"{reference}.json"
    if named.is_file():
        return named
    raise ConfigError(f"Profile not found: {reference}")


def load_profile(path: Path) -> Profile:
    try:
        return Profile.from_dict(load_json(path))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid profile {path}: {e}") from e
