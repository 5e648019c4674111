"""Onboard command implementation.

A guided first-run flow that chains the existing commands: import loose
dotfiles, create the config, set up GitHub SSH access, add and install a
starter template, and stow the imported packages.
"""

# ============================================================
# Imports
# ============================================================

import argparse
import subprocess

from .command_github import github_setup
from .command_install import install_missing_packages, write_brewfile
from .command_stow import stow_packages
from .config import Config
from .errors import DotfilesError, StowError
from .models import DotfilesConfig, PackageType, StowAction
from .output import (
    ask,
    confirm,
    print_error,
    print_header,
    print_info,
    print_item,
    print_success,
    print_warning,
)
from .pkgmanager import Homebrew, detect_package_manager
from .process import command_exists
from .stow import detect_existing_dotfiles, import_dotfile, require_stow, suggest_package_name
from .templates import apply_config, resolve_template


DEPENDENCIES = (
    ("brew", "Homebrew package manager"),
    ("git", "Git version control"),
    ("stow", "GNU Stow for dotfiles management"),
)


# ============================================================
# Entry Point
# ============================================================

def execute_onboard(config: Config, args: argparse.Namespace) -> None:
    """
    Walk a new machine through the whole setup.

    Steps:
    1. Import common dotfiles found in the home directory
    2. Report missing tools
    3. Create the config if there is none
    4. Generate a GitHub SSH key
    5. Merge the starter template into the config and install it
    6. Stow the imported packages

    Steps 4 to 6 only warn on failure so the rest of the flow still runs.
    """
    assume_yes = config.assume_yes or args.yes

    print_header("🎉 Welcome to Dotfiles Manager - Developer Onboarding!")
    print_info("This wizard will:")
    print_info("  ✅ Import your existing dotfiles")
    print_info("  🔐 Set up GitHub SSH authentication")
    print_info("  📦 Install essential development packages")
    print_info("  🔗 Link your dotfiles with Stow")
    if not confirm("\nReady to begin?", default=True, assume_yes=assume_yes):
        print_info("👋 Setup cancelled. Run 'dotfiles onboard' again when ready!")
        return

    print_header("🔍 Step 1: Scanning for existing dotfiles")
    imported = import_existing_dotfiles(config, assume_yes) if not args.skip_import else []

    print_header("🔧 Step 2: Checking dependencies")
    check_dependencies()

    print_header("📋 Step 3: Initializing configuration")
    initialize_config(config)

    if not args.skip_github:
        print_header("🔐 Step 4: Setting up GitHub SSH authentication")
        setup_github(config, args.email, assume_yes)

    if not args.skip_packages:
        print_header(f"📦 Step 5: Installing the '{args.template}' template")
        install_template(config, args.template, assume_yes)

    if imported:
        print_header("🔗 Step 6: Stowing imported dotfiles")
        stow_imported(config, imported)

    print_success("\n🎉 Onboarding complete! Your development environment is ready.")
    print_info("\n💡 Useful commands to remember:")
    print_info("   dotfiles status                 # Check installation status")
    print_info("   dotfiles add <package>          # Add packages to your config")
    print_info("   dotfiles stow <package>         # Stow dotfiles")
    print_info("   dotfiles github test            # Test GitHub connection")


# ============================================================
# Steps
# ============================================================

def import_existing_dotfiles(config: Config, assume_yes: bool) -> list[str]:
    """
    Move detected dotfiles into their suggested packages.

    Returns:
        Names of the packages that received files
    """
    dotfiles = detect_existing_dotfiles(config.home)
    if not dotfiles:
        print_info("   No existing dotfiles found")
        return []

    print_info(f"   Found {len(dotfiles)} existing dotfiles:")
    for dotfile in dotfiles:
        print_info(f"   • {dotfile} → {suggest_package_name(dotfile)}")
    if not confirm("   Import these into your dotfiles setup?", default=True, assume_yes=assume_yes):
        return []

    packages: list[str] = []
    for dotfile in dotfiles:
        package = suggest_package_name(dotfile)
        try:
            import_dotfile(config, dotfile, package)
        except (StowError, OSError) as e:
            print_error(f"Failed to import {dotfile}: {e}")
            continue
        print_success(f"   ✅ {'Would import' if config.dryrun else 'Imported'} {dotfile} into package '{package}'")
        if package not in packages:
            packages.append(package)
    return packages


def check_dependencies() -> None:
    missing = 0
    for name, description in DEPENDENCIES:
        found = command_exists(name)
        print_item(name, ok=found, detail="" if found else f"missing: {description}")
        missing += not found
    if missing:
        print_warning(f"⚠️  Missing {missing} dependencies. Install them, then run 'dotfiles doctor'.")
    else:
        print_success("   All dependencies satisfied!")


def initialize_config(config: Config) -> None:
    if config.config_path.exists():
        print_info(f"   Configuration already exists at {config.config_path}")
        return
    if not config.dryrun:
        config.stow_dir.mkdir(parents=True, exist_ok=True)
        config.save(DotfilesConfig())
    print_success(f"   ✅ Created configuration at {config.config_path}")


def setup_github(config: Config, email: str | None, assume_yes: bool) -> None:
    if not email and not assume_yes:
        email = ask("Enter your GitHub email: ")
    if not email:
        print_warning("⚠️  Skipping GitHub setup (no email provided)")
        print_info("   Run 'dotfiles github setup --email your@email.com' later")
        return

    setup_args = argparse.Namespace(email=email, type='ed25519', force=False, skip_agent=False)
    try:
        github_setup(config, setup_args)
    except (DotfilesError, subprocess.CalledProcessError, OSError) as e:
        print_warning(f"⚠️  GitHub setup had issues: {e}")
        print_info("   You can run 'dotfiles github setup' later to complete this.")


def install_template(config: Config, name: str, assume_yes: bool) -> None:
    """Merge a template's packages into the config, then install them."""
    template = resolve_template(config, name)
    for kind in (PackageType.TAP, PackageType.BREW, PackageType.CASK):
        packages = template.config.packages(kind)
        if packages:
            print_info(f"   {kind.key.capitalize()}: {', '.join(packages)}")
    if not confirm("   Continue with package installation?", default=True, assume_yes=assume_yes):
        print_info("   Skipping package installation")
        return

    # Template stow entries are not copied
    incoming = template.config.copy()
    incoming.stow = []
    dotfiles_config = apply_config(config.load(), incoming, merge=True)
    if not config.dryrun:
        config.save(dotfiles_config)
    print_success("   ✅ Packages added to configuration")

    try:
        manager = detect_package_manager(config)
        if isinstance(manager, Homebrew):
            brewfile = config.dotfiles_dir / "Brewfile"
            write_brewfile(config, dotfiles_config, brewfile)
            manager.install_bundle(brewfile)
        else:
            install_missing_packages(manager, dotfiles_config)
    except (DotfilesError, subprocess.CalledProcessError) as e:
        print_warning(f"⚠️  Package installation had issues: {e}")
        print_info("   Run 'dotfiles install' to retry.")
        return
    print_success("   ✅ Essential packages installed!")


def stow_imported(config: Config, packages: list[str]) -> None:
    # Nothing was moved in dry-run mode, so there is nothing to link yet
    if config.dryrun:
        for package in packages:
            print_success(f"   ✓ Would stow: {package}")
        return

    try:
        require_stow()
    except StowError as e:
        print_warning(f"⚠️  {e}")
        print_info(f"   Run 'dotfiles stow {' '.join(packages)}' once stow is installed.")
        return

    dotfiles_config = config.load()
    stowed = stow_packages(config, dotfiles_config, packages, config.stow_dir, config.home,
                           StowAction.STOW, None)
    added = sum(dotfiles_config.add_package(PackageType.STOW, package) for package in stowed)
    if added:
        config.save(dotfiles_config)
    for package in stowed:
        print_success(f"   ✓ Stowed: {package}")
