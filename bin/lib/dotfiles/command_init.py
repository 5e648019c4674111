"""Init command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .models import DotfilesConfig
from .output import print_header, print_info, print_success, print_warning


# ============================================================
# Entry Point
# ============================================================

def execute_init(config: Config, args: argparse.Namespace) -> None:
    """Create the dotfiles directory layout and a starter config."""
    if config.config_path.exists() and not args.force:
        print_warning(f"⚠️  Configuration already exists at {config.config_path}")
        print_info("   Use --force to overwrite it.")
        return

    print_header("🚀 Initializing dotfiles")

    if not config.dryrun:
        config.dotfiles_dir.mkdir(parents=True, exist_ok=True)
        config.stow_dir.mkdir(parents=True, exist_ok=True)
        config.save(DotfilesConfig(brews=["git"]))

    print_success(f"✅ Created configuration at {config.config_path}")
    print_info("")
    print_info("Next steps:")
    print_info("  dotfiles add <package>       Track a Homebrew formula")
    print_info("  dotfiles add --type cask <app>")
    print_info("  dotfiles stow <package>      Link a package from the stow directory")
    print_info("  dotfiles install             Install everything")
