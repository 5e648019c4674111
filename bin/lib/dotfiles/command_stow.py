"""Stow, unstow, restow, private, and adopt command implementations."""

# ============================================================
# Imports
# ============================================================

import argparse
import os
from pathlib import Path

from .config import Config
from .errors import StowError
from .hooks import run_hooks
from .models import (
    ConflictAction,
    ConflictResult,
    ConflictStrategy,
    DotfilesConfig,
    PackageType,
    StowAction,
    StowConflict,
    collect_packages,
)
from .output import (
    Color,
    ask,
    print_error,
    print_header,
    print_info,
    print_status_line,
    print_success,
    print_warning,
)
from .stow import (
    detect_existing_dotfiles,
    find_conflicts,
    import_dotfile,
    import_home_directory,
    link_private_file,
    require_stow,
    resolve_conflicts,
    run_stow,
    suggest_package_name,
)


# ============================================================
# Entry Points
# ============================================================

def execute_stow(config: Config, args: argparse.Namespace) -> None:
    """Stow packages, resolving conflicts on request, and track them in the config."""
    require_stow()
    dotfiles_config = config.load()
    stow_dir, target_dir = resolve_directories(config, args)

    packages = collect_packages(args.packages, args.file)
    if not packages:
        print_warning("No packages specified. Use command line arguments or --file.")
        return

    stowed = stow_packages(config, dotfiles_config, packages, stow_dir, target_dir,
                           StowAction.STOW, args.strategy)

    added = 0
    for package in stowed:
        if config.dryrun:
            print_success(f"✓ Would stow: {package}")
        elif dotfiles_config.add_package(PackageType.STOW, package):
            print_success(f"✓ Stowed and added to config: {package}")
            added += 1
        else:
            print_success(f"✓ Stowed: {package} (already in config)")

    if added:
        config.save(dotfiles_config)
        print_info(f"\n📊 Added {added} new stow packages to config")

    raise_on_failures(packages, stowed)


def execute_unstow(config: Config, args: argparse.Namespace) -> None:
    """Remove package symlinks and, unless kept, drop them from the config."""
    require_stow()
    dotfiles_config = config.load()
    stow_dir, target_dir = resolve_directories(config, args)

    packages = dotfiles_config.stow[:] if args.all else collect_packages(args.packages, args.file)
    if not packages:
        print_warning("No packages specified. Use command line arguments, --file, or --all.")
        return

    removed = 0
    unstowed: list[str] = []
    for package in packages:
        try:
            output = run_stow(config, package, StowAction.DELETE, stow_dir, target_dir)
        except StowError as e:
            print_error(str(e))
            continue
        print_stow_output(config, output)
        unstowed.append(package)

        if config.dryrun:
            print_success(f"✓ Would unstow: {package}")
        elif not args.keep_config and dotfiles_config.remove_package(PackageType.STOW, package):
            print_success(f"✓ Unstowed and removed from config: {package}")
            removed += 1
        else:
            print_success(f"✓ Unstowed: {package}")

    if removed:
        config.save(dotfiles_config)
        print_info(f"\n📊 Removed {removed} stow packages from config")

    raise_on_failures(packages, unstowed)


def execute_restow(config: Config, args: argparse.Namespace) -> None:
    """Re-link packages, pruning stale links and adding new ones."""
    require_stow()
    dotfiles_config = config.load()
    stow_dir, target_dir = resolve_directories(config, args)

    packages = dotfiles_config.stow[:] if args.all else collect_packages(args.packages, args.file)
    if not packages:
        print_warning("No packages specified. Use command line arguments, --file, or --all.")
        return

    restowed = stow_packages(config, dotfiles_config, packages, stow_dir, target_dir,
                             StowAction.RESTOW, args.strategy)
    for package in restowed:
        print_success(f"✓ {'Would restow' if config.dryrun else 'Restowed'}: {package}")

    raise_on_failures(packages, restowed)


def execute_private(config: Config, args: argparse.Namespace) -> None:
    """Link a file from the private directory into a stow package."""
    link_path = link_private_file(config, args.package, args.filename)

    if config.dryrun:
        print_info(f"Would create symlink: {link_path} -> {config.private_dir / args.filename}")
        return

    if link_path is None:
        print_warning(f"⚠️  Private file doesn't exist: {config.private_dir / args.filename}")
        print_info("   Create the file first, then run this command again.")
        return

    print_success(f"✅ Private file linked: {args.package}/{args.filename} -> private/{args.filename}")
    print_info(f"   💡 Now run: dotfiles stow {args.package}")


def execute_adopt(config: Config, args: argparse.Namespace) -> None:
    """Move loose home dotfiles into stow packages."""
    dotfiles = [home_relative(config, dotfile) for dotfile in args.dotfiles] \
        or detect_existing_dotfiles(config.home)
    if not dotfiles:
        print_info("No loose dotfiles found in your home directory")
        return

    print_header("📥 Importing dotfiles")
    assume_yes = config.assume_yes or args.yes
    imported: dict[str, list[str]] = {}

    for dotfile in dotfiles:
        package = args.package or suggest_package_name(dotfile)

        # Let the user confirm or rename the target package
        if not assume_yes:
            answer = ask(f"   Import {dotfile} into package '{package}'? (Y/n/s=skip): ").lower()
            if answer in ('s', 'skip'):
                continue
            if answer in ('n', 'no'):
                package = ask("   Enter custom package name (or 'skip'): ")
                if not package or package == 'skip':
                    continue

        try:
            destination = import_dotfile(config, dotfile, package)
        except StowError as e:
            print_error(f"Failed to import {dotfile}: {e}")
            continue

        verb = "Would import" if config.dryrun else "Imported"
        print_success(f"   ✅ {verb} {dotfile} into package '{package}' ({destination})")
        imported.setdefault(package, []).append(dotfile)

    if not imported:
        return

    if not args.stow:
        print_info(f"\n💡 Now run: dotfiles stow {' '.join(imported)}")
        return

    require_stow()
    dotfiles_config = config.load()
    stowed = stow_packages(config, dotfiles_config, list(imported), config.stow_dir, config.home,
                           StowAction.STOW, None)
    added = sum(dotfiles_config.add_package(PackageType.STOW, package) for package in stowed)
    if added and not config.dryrun:
        config.save(dotfiles_config)
        print_info(f"\n📊 Added {added} new stow packages to config")


# ============================================================
# Stow Operations
# ============================================================

def stow_packages(
    config: Config,
    dotfiles_config: DotfilesConfig,
    packages: list[str],
    stow_dir: Path,
    target_dir: Path,
    action: StowAction,
    strategy: ConflictStrategy | None,
) -> list[str]:
    """
    Stow or restow packages between the pre_stow and post_stow hooks.

    Failures are reported per package and do not stop the batch.

    Returns:
        Packages that were stowed successfully
    """
    run_hooks(config, dotfiles_config.hooks.get("pre_stow", []), "pre-stow")

    succeeded: list[str] = []
    try:
        for package in packages:
            try:
                if stow_package(config, package, stow_dir, target_dir, action, strategy):
                    succeeded.append(package)
            except StowError as e:
                print_error(str(e))
            except OSError as e:
                print_error(f"Failed to stow {package}: {e}")
    finally:
        run_hooks(config, dotfiles_config.hooks.get("post_stow", []), "post-stow")
    return succeeded


def stow_package(
    config: Config,
    package: str,
    stow_dir: Path,
    target_dir: Path,
    action: StowAction = StowAction.STOW,
    strategy: ConflictStrategy | None = None,
) -> bool:
    """
    Stow a single package.

    Steps:
    1. Import '<target>/.<package>' when the package directory is missing
    2. Detect conflicts in the target directory
    3. Resolve them with the given strategy, or report them and stop
    4. Run stow

    Returns:
        True if the package was stowed (or would be, in dry-run mode)
    """
    package_dir = stow_dir / package

    # Auto-import a matching dot-directory from the target
    if not package_dir.exists():
        imported = import_home_directory(config, package, stow_dir, target_dir)
        if imported is None:
            print_error(f"Package directory not found: {package_dir}")
            print_info(f"   💡 Create it manually or place files in {target_dir}/.{package} to auto-import")
            return False
        print_info(f"📥 Found {target_dir}/.{package}, importing...")
        if config.dryrun:
            print_info(f"   Would move {target_dir}/.{package} to {imported}")
            return True
        print_success(f"✅ Successfully imported {target_dir}/.{package} to stow package")

    # Detect and resolve conflicts
    conflicts = find_conflicts(package_dir, target_dir, package, stow_dir)
    if conflicts:
        if strategy is None:
            print_warning(f"⚠️  {len(conflicts)} conflict(s) for {package}:")
            for conflict in conflicts:
                print_conflict(conflict)
            print_info("   💡 Re-run with --backup, --adopt, or --auto-resolve")
            return False

        for result in resolve_conflicts(config, conflicts, strategy):
            print_conflict_result(result)

        # stow -n would still see the unresolved files
        if config.dryrun:
            return True

    output = run_stow(config, package, action, stow_dir, target_dir)
    print_stow_output(config, output)
    return True


# ============================================================
# Helpers
# ============================================================

def resolve_directories(config: Config, args: argparse.Namespace) -> tuple[Path, Path]:
    """Return the stow and target directories from flags or defaults."""
    stow_dir = Path(args.dir).expanduser() if args.dir else config.stow_dir
    target_dir = Path(args.target).expanduser() if args.target else config.home
    return stow_dir, target_dir


def home_relative(config: Config, dotfile: str) -> str:
    """Normalize '~/.zshrc' or an absolute path to a home-relative path."""
    path = Path(dotfile).expanduser()
    if not path.is_absolute():
        return os.path.normpath(dotfile)
    try:
        return str(path.relative_to(config.home))
    except ValueError as e:
        raise StowError(f"{dotfile} is not inside {config.home}") from e


def raise_on_failures(requested: list[str], succeeded: list[str]) -> None:
    failed = [package for package in requested if package not in succeeded]
    if failed:
        raise StowError(f"{len(failed)} package(s) failed: {', '.join(failed)}")


def print_stow_output(config: Config, output: str) -> None:
    if output and (config.verbose or config.dryrun):
        for line in output.splitlines():
            print_info(f"   {line}")


def print_conflict(conflict: StowConflict) -> None:
    print_status_line(conflict.package, conflict.kind.value, Color.YELLOW, str(conflict.target_path))


def print_conflict_result(result: ConflictResult) -> None:
    """Print the action taken for a conflict."""
    color = Color.BLUE if result.action in (ConflictAction.REMOVED, ConflictAction.REMOVED_DRYRUN) else Color.GREEN
    detail = str(result.target_path)
    if result.backup_path:
        detail += f" ({result.backup_path.name})"
    print_status_line(result.conflict.package, result.action.value, color, detail)
