"""Status command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .inventory import installed_names, short_name
from .models import PackageType
from .output import print_header, print_info, print_success, print_warning
from .pkgmanager import PackageManager, detect_package_manager
from .stow import is_package_stowed


# ============================================================
# Entry Point
# ============================================================

def execute_status(config: Config, args: argparse.Namespace) -> None:
    """Show whether each configured package is installed or stowed."""
    dotfiles_config = config.load()
    kinds = [PackageType.parse(args.type)] if args.type else list(PackageType)

    manager: PackageManager | None = None
    if any(kind != PackageType.STOW and dotfiles_config.packages(kind) for kind in kinds):
        manager = detect_package_manager(config)

    ok_count = 0
    total = 0
    for kind in kinds:
        packages = dotfiles_config.packages(kind)
        if not packages:
            continue

        print_header(f"{kind.label} packages")
        states = package_states(config, manager, kind, packages)
        for package, ok in states.items():
            if ok:
                print_info(f"  ✅ {package}")
            else:
                print_info(f"  ❌ {package} ({'not stowed' if kind == PackageType.STOW else 'not installed'})")
        ok_count += sum(states.values())
        total += len(states)

    if total == 0:
        print_info("No packages configured. Add some with 'dotfiles add <package>'.")
        return

    print_info("")
    if ok_count == total:
        print_success(f"📊 {ok_count}/{total} packages ready")
    else:
        print_warning(f"📊 {ok_count}/{total} packages ready")
        print_info("   💡 Run 'dotfiles install' to install missing packages")


def package_states(
    config: Config,
    manager: PackageManager | None,
    kind: PackageType,
    packages: list[str],
) -> dict[str, bool]:
    """Map each configured package to whether it is installed or stowed."""
    if kind == PackageType.STOW:
        return {
            package: is_package_stowed(config.stow_dir / package, config.home)
            for package in packages
        }

    installed = {short_name(name) for name in installed_names(config, manager, kind)}
    return {package: short_name(package) in installed for package in packages}
