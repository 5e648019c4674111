"""Install and brewfile command implementations."""

# ============================================================
# Imports
# ============================================================

import argparse
import subprocess
from pathlib import Path

from .brewfile import generate_brewfile
from .command_stow import raise_on_failures, stow_packages
from .config import Config
from .hooks import run_hooks
from .models import DotfilesConfig, PackageType, StowAction
from .output import print_header, print_info, print_success, print_warning
from .pkgmanager import Homebrew, PackageManager, detect_package_manager
from .stow import require_stow


# ============================================================
# Entry Points
# ============================================================

def execute_install(config: Config, args: argparse.Namespace) -> None:
    """
    Install everything declared in the config.

    Steps:
    1. Run pre_install hooks
    2. Install packages (Brewfile + brew bundle, or the native manager)
    3. Stow configured packages
    4. Run post_install hooks, then per-package post_install hooks
    """
    dotfiles_config = config.load()
    if dotfiles_config.total_packages() == 0:
        print_warning("No packages configured. Add some with 'dotfiles add <package>'.")
        return

    print_header("📦 Installing packages")
    run_hooks(config, dotfiles_config.hooks.get("pre_install", []), "pre-install")

    manager = detect_package_manager(config)
    if isinstance(manager, Homebrew):
        brewfile = Path(args.output).expanduser()
        write_brewfile(config, dotfiles_config, brewfile)
        manager.install_bundle(brewfile)
    else:
        install_missing_packages(manager, dotfiles_config)

    if dotfiles_config.stow and not args.skip_stow:
        print_header("🔗 Stowing dotfiles")
        require_stow()
        stowed = stow_packages(config, dotfiles_config, dotfiles_config.stow, config.stow_dir,
                               config.home, StowAction.STOW, args.strategy)
        raise_on_failures(dotfiles_config.stow, stowed)

    run_hooks(config, dotfiles_config.hooks.get("post_install", []), "post-install")
    run_package_hooks(config, dotfiles_config)

    print_success("✅ Installation complete")


def execute_brewfile(config: Config, args: argparse.Namespace) -> None:
    """Generate a Brewfile from the config."""
    dotfiles_config = config.load()
    if args.stdout:
        print(generate_brewfile(dotfiles_config), end="")
        return
    write_brewfile(config, dotfiles_config, Path(args.output).expanduser())


# ============================================================
# Packages
# ============================================================

def write_brewfile(config: Config, dotfiles_config: DotfilesConfig, path: Path) -> None:
    """Write the generated Brewfile, or describe it in dry-run mode."""
    content = generate_brewfile(dotfiles_config)
    if config.dryrun:
        print_info(f"Would write {path}:")
        print_info(content)
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    print_success(f"📝 Generated {path}")


def install_missing_packages(manager: PackageManager, dotfiles_config: DotfilesConfig) -> None:
    """Install configured packages that the native manager does not report as installed."""
    for kind in (PackageType.TAP, PackageType.BREW, PackageType.CASK):
        configured = dotfiles_config.packages(kind)
        if not configured:
            continue
        installed = set(manager.list_installed(kind))
        missing = [package for package in configured if package not in installed]
        if not missing:
            print_info(f"✓ All {kind.key} already installed")
            continue
        print_info(f"Installing {len(missing)} {kind.key} with {manager.name}...")
        manager.install(missing, kind)


def run_package_hooks(config: Config, dotfiles_config: DotfilesConfig) -> None:
    """Run per-package post_install hooks; failures only warn."""
    for package in dotfiles_config.brews + dotfiles_config.casks:
        commands = dotfiles_config.post_install_hooks(package)
        if not commands:
            continue
        try:
            run_hooks(config, commands, f"{package} post-install")
        except subprocess.CalledProcessError as e:
            print_warning(f"⚠️  Post-install hook for {package} failed (exit {e.returncode})")
