"""Brewfile import command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
from pathlib import Path

from .brewfile import parse_brewfile
from .config import Config
from .errors import ConfigError
from .models import merge_unique
from .output import print_header, print_info, print_success


# ============================================================
# Entry Point
# ============================================================

def execute_import(config: Config, args: argparse.Namespace) -> None:
    """Read taps, brews, and casks from a Brewfile into the config."""
    path = Path(args.brewfile).expanduser()
    if not path.exists():
        raise ConfigError(f"Brewfile not found: {path}")

    taps, brews, casks = parse_brewfile(path.read_text(encoding='utf-8'))
    print_header(f"📥 Importing {path}")
    print_info(f"Found {len(taps)} taps, {len(brews)} brews, {len(casks)} casks")

    dotfiles_config = config.load()
    before = dotfiles_config.total_packages()

    if args.replace:
        dotfiles_config.taps = taps
        dotfiles_config.brews = brews
        dotfiles_config.casks = casks
    else:
        dotfiles_config.taps = merge_unique(dotfiles_config.taps, taps)
        dotfiles_config.brews = merge_unique(dotfiles_config.brews, brews)
        dotfiles_config.casks = merge_unique(dotfiles_config.casks, casks)

    if not config.dryrun:
        config.save(dotfiles_config)

    if args.replace:
        print_success("✅ Replaced taps, brews, and casks from Brewfile")
    else:
        print_success(f"✅ Added {dotfiles_config.total_packages() - before} new packages from Brewfile")
