"""Comparison of declared packages with the machine's installed state."""

# ============================================================
# Imports
# ============================================================

from dataclasses import dataclass

from .config import Config
from .models import DotfilesConfig, PackageType
from .pkgmanager import PackageManager
from .stow import is_ignored, is_package_stowed


# ============================================================
# Models
# ============================================================

@dataclass(frozen=True)
class PackageDiff:
    """
    Difference between configured and installed packages of one kind.

    Attributes:
        missing: Configured but not installed
        extra: Installed but not configured
        synced: Configured and installed
    """

    kind: PackageType
    missing: tuple[str, ...]
    extra: tuple[str, ...]
    synced: tuple[str, ...]

    def is_synced(self) -> bool:
        return not self.missing and not self.extra


# ============================================================
# Stow Packages
# ============================================================

def list_stow_packages(config: Config) -> list[str]:
    """Return package directory names in the stow directory."""
    if not config.stow_dir.is_dir():
        return []
    return sorted(
        entry.name for entry in config.stow_dir.iterdir()
        if entry.is_dir() and not is_ignored(entry.name)
    )


def stowed_packages(config: Config) -> list[str]:
    """Return stow packages whose contents are linked into the home directory."""
    return [
        package for package in list_stow_packages(config)
        if is_package_stowed(config.stow_dir / package, config.home)
    ]


# ============================================================
# Installed Packages
# ============================================================

def short_name(package: str) -> str:
    """Strip a tap prefix such as 'user/tap/' from a formula or cask name."""
    return package.rsplit('/', 1)[-1]


def installed_names(config: Config, manager: PackageManager | None, kind: PackageType) -> list[str]:
    """Return installed names for a package type, or stowed packages for stow."""
    if kind == PackageType.STOW:
        return stowed_packages(config)
    if manager is None:
        return []
    return manager.list_installed(kind)


def compute_diff(kind: PackageType, configured: list[str], installed: list[str]) -> PackageDiff:
    """
    Compare configured and installed names.

    Formulae and casks match on their short name so that tapped
    packages like 'user/tap/tool' match an installed 'tool'.
    """
    if kind in (PackageType.BREW, PackageType.CASK):
        normalize = short_name
    else:
        normalize = str

    installed_set = {normalize(name) for name in installed}
    configured_set = {normalize(name) for name in configured}

    missing = sorted({name for name in configured if normalize(name) not in installed_set})
    synced = sorted({name for name in configured if normalize(name) in installed_set})
    extra = sorted({name for name in installed if normalize(name) not in configured_set})
    return PackageDiff(kind=kind, missing=tuple(missing), extra=tuple(extra), synced=tuple(synced))


def diff_packages(
    config: Config,
    dotfiles_config: DotfilesConfig,
    manager: PackageManager | None,
    kind: PackageType,
) -> PackageDiff:
    return compute_diff(kind, dotfiles_config.packages(kind), installed_names(config, manager, kind))


def untracked_packages(
    dotfiles_config: DotfilesConfig,
    manager: PackageManager,
    kind: PackageType,
) -> list[str]:
    """Installed packages of a kind that are not in the config, sorted."""
    return list(compute_diff(kind, dotfiles_config.packages(kind), manager.list_installed(kind)).extra)
