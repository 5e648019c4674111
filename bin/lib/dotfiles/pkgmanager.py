"""System package manager abstraction."""

# ============================================================
# Imports
# ============================================================

import subprocess
import sys
from pathlib import Path

from .config import Config
from .errors import PackageManagerError
from .models import PackageType
from .output import print_debug, print_warning
from .process import command_exists, query_lines, run_command


# ============================================================
# Base Class
# ============================================================

class PackageManager:
    """
    Common interface for system package managers.

    Subclasses implement the native commands. Package kinds a manager
    does not understand (casks and taps outside Homebrew) are skipped
    with a warning on install and report nothing installed.
    """

    name = "unknown"
    binary = ""
    supported_types: tuple[PackageType, ...] = (PackageType.BREW,)

    def __init__(self, config: Config):
        self.config = config

    def is_available(self) -> bool:
        return command_exists(self.binary)

    def supports(self, kind: PackageType) -> bool:
        return kind in self.supported_types

    def list_installed(self, kind: PackageType = PackageType.BREW) -> list[str]:
        """Return installed package names of the given kind."""
        if not self.supports(kind):
            return []
        return self._list_installed(kind)

    def is_installed(self, package: str, kind: PackageType = PackageType.BREW) -> bool:
        """Check a package against the installed list, ignoring tap prefixes."""
        installed = set(self.list_installed(kind))
        return package in installed or package.rsplit('/', 1)[-1] in installed

    def install(self, packages: list[str], kind: PackageType = PackageType.BREW) -> None:
        """Install packages of the given kind."""
        if not packages:
            return
        if not self.supports(kind):
            print_warning(f"⚠️  {self.name} does not support {kind.key}, skipping: {', '.join(packages)}")
            return
        self._install(packages, kind)

    def uninstall(self, package: str, kind: PackageType = PackageType.BREW) -> None:
        if not self.supports(kind):
            print_warning(f"⚠️  {self.name} does not support {kind.key}, skipping: {package}")
            return
        self._uninstall(package, kind)

    def update(self) -> None:
        raise PackageManagerError(f"{self.name} does not support update")

    def outdated(self) -> list[str]:
        raise PackageManagerError(f"{self.name} does not support listing outdated packages")

    def upgrade(self, packages: list[str] | None = None) -> None:
        raise PackageManagerError(f"{self.name} does not support upgrade")

    def cleanup(self, cache_only: bool = False, dryrun: bool = False) -> None:
        raise PackageManagerError(f"{self.name} does not support cleanup")

    def _list_installed(self, kind: PackageType) -> list[str]:
        raise NotImplementedError

    def _install(self, packages: list[str], kind: PackageType) -> None:
        raise NotImplementedError

    def _uninstall(self, package: str, kind: PackageType) -> None:
        raise NotImplementedError


# ============================================================
# Homebrew
# ============================================================

class Homebrew(PackageManager):
    """Homebrew on macOS and Linux."""

    name = "homebrew"
    binary = "brew"
    supported_types = (PackageType.BREW, PackageType.CASK, PackageType.TAP)

    def _list_installed(self, kind: PackageType) -> list[str]:
        if kind == PackageType.TAP:
            return query_lines(['brew', 'tap'])
        flag = '--cask' if kind == PackageType.CASK else '--formula'
        return query_lines(['brew', 'list', flag, '-1'])

    def _install(self, packages: list[str], kind: PackageType) -> None:
        if kind == PackageType.TAP:
            for tap in packages:
                run_command(self.config, ['brew', 'tap', tap])
        elif kind == PackageType.CASK:
            run_command(self.config, ['brew', 'install', '--cask', *packages])
        else:
            run_command(self.config, ['brew', 'install', *packages])

    def _uninstall(self, package: str, kind: PackageType) -> None:
        if kind == PackageType.TAP:
            run_command(self.config, ['brew', 'untap', package])
        elif kind == PackageType.CASK:
            run_command(self.config, ['brew', 'uninstall', '--cask', package])
        else:
            run_command(self.config, ['brew', 'uninstall', package])

    def install_bundle(self, brewfile: Path) -> None:
        """Install everything listed in a Brewfile."""
        run_command(self.config, ['brew', 'bundle', f'--file={brewfile}'])

    def update(self) -> None:
        run_command(self.config, ['brew', 'update'])

    def outdated(self) -> list[str]:
        return query_lines(['brew', 'outdated', '--quiet'])

    def upgrade(self, packages: list[str] | None = None) -> None:
        run_command(self.config, ['brew', 'upgrade', *(packages or [])])

    def cleanup(self, cache_only: bool = False, dryrun: bool = False) -> None:
        args = ['brew', 'cleanup', '-s']
        if not cache_only:
            args.append('--prune=all')
        if dryrun:
            # brew -n only lists what it would remove
            args.append('-n')
            subprocess.run(args, check=True)
            return
        run_command(self.config, args)


# ============================================================
# Linux Package Managers
# ============================================================

class Pacman(PackageManager):
    """Arch Linux pacman, preferring the yay AUR helper when present."""

    name = "pacman"
    binary = "pacman"

    def _install_prefix(self) -> list[str]:
        if command_exists('yay'):
            return ['yay', '-S', '--noconfirm', '--needed']
        return ['sudo', 'pacman', '-S', '--noconfirm', '--needed']

    def _list_installed(self, kind: PackageType) -> list[str]:
        return query_lines(['pacman', '-Qq'])

    def _install(self, packages: list[str], kind: PackageType) -> None:
        run_command(self.config, [*self._install_prefix(), *packages])

    def _uninstall(self, package: str, kind: PackageType) -> None:
        run_command(self.config, ['sudo', 'pacman', '-R', '--noconfirm', package])

    def update(self) -> None:
        run_command(self.config, ['sudo', 'pacman', '-Sy'])

    def outdated(self) -> list[str]:
        # pacman -Qu exits 1 when nothing is outdated
        return [line.split()[0] for line in query_lines(['pacman', '-Qu'], check=False)]

    def upgrade(self, packages: list[str] | None = None) -> None:
        if packages:
            run_command(self.config, [*self._install_prefix(), *packages])
        else:
            run_command(self.config, ['sudo', 'pacman', '-Syu', '--noconfirm'])

    def cleanup(self, cache_only: bool = False, dryrun: bool = False) -> None:
        if dryrun:
            return
        run_command(self.config, ['sudo', 'pacman', '-Sc', '--noconfirm'])


class Apt(PackageManager):
    """Debian and Ubuntu apt."""

    name = "apt"
    binary = "apt-get"

    def _list_installed(self, kind: PackageType) -> list[str]:
        packages = []
        for line in query_lines(['dpkg', '--get-selections']):
            fields = line.split()
            if len(fields) >= 2 and fields[1] == 'install':
                packages.append(fields[0].split(':', 1)[0])
        return packages

    def _install(self, packages: list[str], kind: PackageType) -> None:
        run_command(self.config, ['sudo', 'apt-get', 'install', '-y', *packages])

    def _uninstall(self, package: str, kind: PackageType) -> None:
        run_command(self.config, ['sudo', 'apt-get', 'remove', '-y', package])

    def update(self) -> None:
        run_command(self.config, ['sudo', 'apt-get', 'update'])

    def outdated(self) -> list[str]:
        packages = []
        for line in query_lines(['apt', 'list', '--upgradable'], check=False):
            if '/' in line and not line.startswith('Listing'):
                packages.append(line.split('/', 1)[0])
        return packages

    def upgrade(self, packages: list[str] | None = None) -> None:
        if packages:
            run_command(self.config, ['sudo', 'apt-get', 'install', '--only-upgrade', '-y', *packages])
        else:
            run_command(self.config, ['sudo', 'apt-get', 'upgrade', '-y'])

    def cleanup(self, cache_only: bool = False, dryrun: bool = False) -> None:
        if dryrun:
            return
        if not cache_only:
            run_command(self.config, ['sudo', 'apt-get', 'autoremove', '-y'])
        run_command(self.config, ['sudo', 'apt-get', 'clean'])


class Yum(PackageManager):
    """Fedora and RHEL dnf, falling back to yum."""

    name = "yum"
    binary = "yum"

    def __init__(self, config: Config):
        super().__init__(config)
        self.binary = 'dnf' if command_exists('dnf') else 'yum'
        self.name = self.binary

    def is_available(self) -> bool:
        return command_exists('dnf') or command_exists('yum')

    def _list_installed(self, kind: PackageType) -> list[str]:
        packages = []
        for line in query_lines([self.binary, 'list', 'installed']):
            fields = line.split()
            # Skip headers such as "Installed Packages"
            if len(fields) < 3 or '.' not in fields[0]:
                continue
            packages.append(fields[0].rsplit('.', 1)[0])
        return packages

    def _install(self, packages: list[str], kind: PackageType) -> None:
        run_command(self.config, ['sudo', self.binary, 'install', '-y', *packages])

    def _uninstall(self, package: str, kind: PackageType) -> None:
        run_command(self.config, ['sudo', self.binary, 'remove', '-y', package])

    def update(self) -> None:
        run_command(self.config, ['sudo', self.binary, 'makecache'])

    def outdated(self) -> list[str]:
        # check-update exits 100 when updates are available
        packages = []
        for line in query_lines([self.binary, 'check-update', '-q'], check=False):
            fields = line.split()
            if len(fields) >= 3 and '.' in fields[0]:
                packages.append(fields[0].rsplit('.', 1)[0])
        return packages

    def upgrade(self, packages: list[str] | None = None) -> None:
        run_command(self.config, ['sudo', self.binary, 'upgrade', '-y', *(packages or [])])

    def cleanup(self, cache_only: bool = False, dryrun: bool = False) -> None:
        if dryrun:
            return
        run_command(self.config, ['sudo', self.binary, 'clean', 'all'])


# ============================================================
# Detection
# ============================================================

LINUX_MANAGERS = (Pacman, Apt, Yum)


def detect_package_manager(config: Config) -> PackageManager:
    """
    Pick the package manager for the current platform.

    macOS uses Homebrew. Linux tries pacman, apt, then dnf/yum, and finally
    Homebrew on Linux.

    Raises:
        PackageManagerError: If no supported manager is installed
    """
    if sys.platform == 'darwin':
        candidates: list[type[PackageManager]] = [Homebrew]
    elif sys.platform.startswith('linux'):
        candidates = [*LINUX_MANAGERS, Homebrew]
    else:
        candidates = [Homebrew]

    for candidate in candidates:
        manager = candidate(config)
        if manager.is_available():
            print_debug(f"Using {manager.name} package manager")
            return manager

    raise PackageManagerError("No supported package manager found (brew, pacman, apt-get, dnf, yum)")


def require_homebrew(config: Config) -> Homebrew:
    """Return a Homebrew manager or raise when brew is not installed."""
    manager = Homebrew(config)
    if not manager.is_available():
        raise PackageManagerError("Homebrew not found. Install it from https://brew.sh")
    return manager
