"""GNU Stow orchestration, conflict resolution, and dotfile import."""

# ============================================================
# Imports
# ============================================================

import filecmp
import os
import re
import shutil
import subprocess
import time
from pathlib import Path

from .config import Config
from .errors import StowError
from .models import (
    ConflictAction,
    ConflictKind,
    ConflictResult,
    ConflictStrategy,
    StowAction,
    StowConflict,
)
from .output import print_command, print_debug
from .process import command_exists


# ============================================================
# Configuration
# ============================================================

# GNU Stow's built-in ignore list
IGNORE_NAMES = frozenset({
    'RCS', 'CVS', '.cvsignore', '.svn', '_darcs', '.hg', '.git', '.gitignore', '.gitmodules',
})
IGNORE_PATTERNS = (
    re.compile(r'.+,v$'),
    re.compile(r'^\.#.+'),
    re.compile(r'.+~$'),
    re.compile(r'^#.*#$'),
)
TOP_LEVEL_IGNORE_PATTERNS = (
    re.compile(r'^README.*'),
    re.compile(r'^LICENSE.*'),
    re.compile(r'^COPYING$'),
)

# Common dotfiles and the package each one belongs in
PACKAGE_NAME_MAP = {
    ".zshrc": "zsh",
    ".bashrc": "bash",
    ".bash_profile": "bash",
    ".profile": "shell",
    ".vimrc": "vim",
    ".vim": "vim",
    ".nvim": "nvim",
    ".config/nvim": "nvim",
    ".tmux.conf": "tmux",
    ".gitconfig": "git",
    ".gitignore_global": "git",
    ".aliases": "shell",
    ".functions": "shell",
    ".exports": "shell",
    ".ssh/config": "ssh",
    ".aws": "aws",
    ".docker": "docker",
}


def is_ignored(name: str, top_level: bool = False) -> bool:
    """Check a package entry name against the stow ignore list."""
    if name in IGNORE_NAMES:
        return True
    if any(pattern.match(name) for pattern in IGNORE_PATTERNS):
        return True
    return top_level and any(pattern.match(name) for pattern in TOP_LEVEL_IGNORE_PATTERNS)


def _is_within(path: Path, root: Path) -> bool:
    """Check if path, fully resolved, lies inside root."""
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False


def _points_to(link: Path, source: Path) -> bool:
    """Check if a symlink resolves to the same location as source."""
    return link.resolve() == source.resolve()


# ============================================================
# Conflict Detection
# ============================================================

def classify_target(source: Path, target: Path, stow_dir: Path | None = None) -> ConflictKind | None:
    """
    Classify what stowing source onto target would run into.

    Returns None when there is no conflict: the target is missing, already
    links to the source, or is a directory that stow can merge into.
    """
    source_is_dir = source.is_dir() and not source.is_symlink()

    if target.is_symlink():
        if _points_to(target, source):
            return None
        if not target.exists():
            return ConflictKind.BROKEN_SYMLINK
        # Stow unfolds directories linked by other packages it manages
        if source_is_dir and target.is_dir() and stow_dir is not None and _is_within(target, stow_dir):
            return None
        return ConflictKind.FOREIGN_SYMLINK

    if not target.exists():
        return None

    if source_is_dir and target.is_dir():
        return None

    if source.is_file() and target.is_file() and filecmp.cmp(source, target, shallow=False):
        return ConflictKind.IDENTICAL

    return ConflictKind.EXISTING_FILE


def find_conflicts(
    package_dir: Path,
    target_dir: Path,
    package: str | None = None,
    stow_dir: Path | None = None,
) -> list[StowConflict]:
    """
    Find target paths that would block stowing a package.

    Walks the package tree and compares each entry with the matching path
    under target_dir. Descends only into real directories present on both
    sides; symlinks are never followed out of the package.

    Args:
        package_dir: Package directory inside the stow directory
        target_dir: Directory the package is stowed into
        package: Package name recorded on each conflict
        stow_dir: Stow directory, used to recognise links owned by stow

    Returns:
        Conflicts sorted by target path
    """
    if not package_dir.is_dir():
        raise StowError(f"Package directory not found: {package_dir}")

    package = package or package_dir.name
    stow_dir = stow_dir or package_dir.parent
    conflicts: list[StowConflict] = []
    _scan_directory(package_dir, target_dir, package, stow_dir, conflicts, top_level=True)
    print_debug(f"Checked {package_dir} against {target_dir}: {len(conflicts)} conflict(s)")
    return sorted(conflicts, key=lambda conflict: str(conflict.target_path))


def _scan_directory(
    source_dir: Path,
    target_dir: Path,
    package: str,
    stow_dir: Path,
    conflicts: list[StowConflict],
    top_level: bool,
) -> None:
    """Recursively compare one package directory level with the target."""
    for source in sorted(source_dir.iterdir()):
        if is_ignored(source.name, top_level):
            continue

        target = target_dir / source.name
        kind = classify_target(source, target, stow_dir)
        if kind is not None:
            conflicts.append(StowConflict(
                package=package,
                source_path=source,
                target_path=target,
                kind=kind,
            ))
            continue

        # Merge into existing real directories
        source_is_dir = source.is_dir() and not source.is_symlink()
        if source_is_dir and target.is_dir() and not target.is_symlink():
            _scan_directory(source, target, package, stow_dir, conflicts, top_level=False)


# ============================================================
# Conflict Resolution
# ============================================================

def plan_conflict_action(conflict: StowConflict, strategy: ConflictStrategy) -> ConflictAction:
    """Decide what to do with a conflict under a strategy."""
    if strategy == ConflictStrategy.BACKUP:
        return ConflictAction.BACKED_UP

    if conflict.kind == ConflictKind.BROKEN_SYMLINK:
        return ConflictAction.REMOVED

    if strategy == ConflictStrategy.ADOPT:
        if conflict.kind == ConflictKind.FOREIGN_SYMLINK:
            return ConflictAction.BACKED_UP
        return ConflictAction.ADOPTED

    # Auto: identical copies are redundant, everything else is kept aside
    if conflict.kind == ConflictKind.IDENTICAL:
        return ConflictAction.REMOVED
    return ConflictAction.BACKED_UP


def unique_backup_path(target: Path, timestamp: int | None = None) -> Path:
    """Return '<target>.backup.<ts>', adding a numeric suffix if taken."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    candidate = target.with_name(f"{target.name}.backup.{timestamp}")
    counter = 1
    while os.path.lexists(candidate):
        candidate = target.with_name(f"{target.name}.backup.{timestamp}.{counter}")
        counter += 1
    return candidate


def _remove_path(path: Path) -> None:
    """Remove a file, symlink, or directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def apply_conflict_action(
    config: Config,
    conflict: StowConflict,
    action: ConflictAction,
    timestamp: int | None = None,
) -> ConflictResult:
    """Execute a planned action, or report it in dry-run mode."""
    target = conflict.target_path

    if action == ConflictAction.BACKED_UP:
        backup_path = unique_backup_path(target, timestamp)
        if config.dryrun:
            return ConflictResult(conflict, ConflictAction.BACKED_UP_DRYRUN, backup_path)
        target.rename(backup_path)
        return ConflictResult(conflict, action, backup_path)

    if action == ConflictAction.REMOVED:
        if config.dryrun:
            return ConflictResult(conflict, ConflictAction.REMOVED_DRYRUN)
        _remove_path(target)
        return ConflictResult(conflict, action)

    # Adopt: the machine's copy replaces the package entry
    if config.dryrun:
        return ConflictResult(conflict, ConflictAction.ADOPTED_DRYRUN)
    _remove_path(conflict.source_path)
    shutil.move(str(target), str(conflict.source_path))
    return ConflictResult(conflict, action)


def resolve_conflicts(
    config: Config,
    conflicts: list[StowConflict],
    strategy: ConflictStrategy,
    timestamp: int | None = None,
) -> list[ConflictResult]:
    """
    Resolve conflicts so that stow can link the package.

    Strategies:
    - backup: rename every colliding target to '<target>.backup.<ts>'
    - adopt: move colliding files into the package, replacing its copy
    - auto: drop identical files and broken links, back up the rest

    Returns:
        One result per conflict, in input order
    """
    timestamp = int(time.time()) if timestamp is None else timestamp
    return [
        apply_conflict_action(config, conflict, plan_conflict_action(conflict, strategy), timestamp)
        for conflict in conflicts
    ]


# ============================================================
# Stow Execution
# ============================================================

def require_stow() -> None:
    """Raise when GNU Stow is not installed."""
    if not command_exists('stow'):
        raise StowError("GNU Stow not found. Install with: brew install stow")


def build_stow_args(
    config: Config,
    package: str,
    action: StowAction,
    stow_dir: Path,
    target_dir: Path,
) -> list[str]:
    """Build the stow command line for a package."""
    args = ['stow', '-d', str(stow_dir), '-t', str(target_dir)]
    if config.verbose:
        args.append('-v')
    if config.dryrun:
        args.append('-n')
    if action.flag:
        args.append(action.flag)
    args.append(package)
    return args


def run_stow(
    config: Config,
    package: str,
    action: StowAction = StowAction.STOW,
    stow_dir: Path | None = None,
    target_dir: Path | None = None,
) -> str:
    """
    Run GNU Stow for one package.

    Dry-run mode passes -n, so stow simulates without touching the target.

    Returns:
        Combined stow output

    Raises:
        StowError: If stow exits with an error
    """
    stow_dir = stow_dir or config.stow_dir
    target_dir = target_dir or config.home
    args = build_stow_args(config, package, action, stow_dir, target_dir)

    if config.verbose or config.dryrun:
        print_command(args)

    result = subprocess.run(args, capture_output=True, text=True, check=False)
    output = (result.stdout + result.stderr).strip()
    if result.returncode != 0:
        raise StowError(f"stow failed for {package}: {output or f'exit status {result.returncode}'}")
    return output


def is_package_stowed(package_dir: Path, target_dir: Path) -> bool:
    """
    Check if every entry of a package is linked into the target.

    A directory counts as linked when the target is a symlink to it, or a
    real directory whose own entries are all linked.
    """
    if not package_dir.is_dir():
        return False
    entries = [entry for entry in package_dir.iterdir() if not is_ignored(entry.name, top_level=True)]
    if not entries:
        return False
    return all(_is_entry_linked(entry, target_dir / entry.name) for entry in entries)


def _is_entry_linked(source: Path, target: Path) -> bool:
    if target.is_symlink():
        return _points_to(target, source)
    if source.is_dir() and not source.is_symlink() and target.is_dir():
        return all(
            _is_entry_linked(child, target / child.name)
            for child in source.iterdir()
            if not is_ignored(child.name)
        )
    return False


# ============================================================
# Import
# ============================================================

def import_home_directory(
    config: Config,
    package: str,
    stow_dir: Path | None = None,
    target_dir: Path | None = None,
) -> Path | None:
    """
    Move '<target>/.<package>' into a new stow package.

    Used when a package is stowed that has no directory yet but a
    matching dot-directory exists in the target. Does nothing when the
    package exists or there is nothing to import.

    Returns:
        New location of the imported directory, or None if nothing was imported
    """
    stow_dir = stow_dir or config.stow_dir
    target_dir = target_dir or config.home
    package_dir = stow_dir / package
    source = target_dir / f".{package}"

    if package_dir.exists() or source.is_symlink() or not source.exists():
        return None

    destination = package_dir / f".{package}"
    if config.dryrun:
        return destination

    package_dir.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(destination))
    return destination


def suggest_package_name(dotfile: str) -> str:
    """Suggest a stow package name for a home-relative dotfile path."""
    if dotfile in PACKAGE_NAME_MAP:
        return PACKAGE_NAME_MAP[dotfile]
    return dotfile.lstrip('.').split('/')[0]


def detect_existing_dotfiles(home: Path) -> list[str]:
    """Return common dotfiles present in home that are not already symlinks."""
    return [
        dotfile for dotfile in PACKAGE_NAME_MAP
        if (home / dotfile).exists() and not (home / dotfile).is_symlink()
    ]


def import_dotfile(config: Config, dotfile: str, package: str) -> Path:
    """
    Move a home dotfile into a stow package, keeping its relative path.

    Raises:
        StowError: If the dotfile is missing, already a symlink, or the
            package already contains that path
    """
    source = config.home / dotfile
    destination = config.stow_dir / package / dotfile

    if source.is_symlink():
        raise StowError(f"{source} is already a symlink")
    if not source.exists():
        raise StowError(f"{source} does not exist")
    if os.path.lexists(destination):
        raise StowError(f"{destination} already exists")

    if not config.dryrun:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
    return destination


def link_private_file(config: Config, package: str, filename: str) -> Path | None:
    """
    Link a file from the private directory into a stow package.

    Creates 'stow/<package>/<filename>' pointing at '../../private/<filename>',
    replacing an existing link.

    Returns:
        The link path, or None when the private file does not exist
    """
    private_path = config.private_dir / filename
    link_path = config.stow_dir / package / filename
    relative_target = Path(os.path.relpath(private_path, link_path.parent))

    if config.dryrun:
        return link_path

    config.private_dir.mkdir(parents=True, exist_ok=True)
    link_path.parent.mkdir(parents=True, exist_ok=True)

    if not private_path.exists():
        return None

    if os.path.lexists(link_path):
        link_path.unlink()
    link_path.symlink_to(relative_target)
    return link_path
