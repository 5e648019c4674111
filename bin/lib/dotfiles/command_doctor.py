"""Doctor command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
from pathlib import Path

from .config import Config
from .errors import DotfilesError
from .inventory import diff_packages
from .models import CheckResult, CheckStatus, DotfilesConfig, PackageType
from .output import print_header, print_info, print_success, print_warning
from .pkgmanager import PackageManager, detect_package_manager
from .process import command_exists, query_lines


# ============================================================
# Entry Point
# ============================================================

def execute_doctor(config: Config, args: argparse.Namespace) -> None:
    """Run health checks and exit 1 when any of them fails."""
    print_header("🏥 Running Dotfiles Health Check")

    results = run_checks(config)
    for result in results:
        print_check(result)

    failures = sum(1 for result in results if result.status == CheckStatus.FAIL)
    warnings = sum(1 for result in results if result.status == CheckStatus.WARN)

    print_info("=" * 36)
    if not failures and not warnings:
        print_success("🎉 All checks passed! Your dotfiles are healthy.")
        return

    if failures:
        print_warning(f"❌ Found {failures} issue(s)")
    if warnings:
        print_warning(f"⚠️  Found {warnings} warning(s)")
    print_info("\n💡 Review the suggestions above to fix issues")

    if failures:
        raise SystemExit(1)


def run_checks(config: Config) -> list[CheckResult]:
    """Run every health check in order."""
    results = [check_dotfiles_dir(config)]

    dotfiles_config: DotfilesConfig | None = None
    try:
        dotfiles_config = config.load()
    except DotfilesError as e:
        results.append(CheckResult("config", CheckStatus.FAIL, "Configuration file is invalid",
                                   details=[str(e)], hint="Run: dotfiles init --force"))
    else:
        results.append(check_config(config, dotfiles_config))

    results.append(check_git_repository(config))

    manager: PackageManager | None = None
    try:
        manager = detect_package_manager(config)
    except DotfilesError as e:
        results.append(CheckResult("package manager", CheckStatus.FAIL, str(e),
                                   hint="Install Homebrew from https://brew.sh"))
    else:
        results.append(CheckResult("package manager", CheckStatus.OK, f"{manager.name} installed"))

    for tool in ("git", "stow"):
        results.append(check_tool(tool))

    results.append(check_broken_symlinks(config))

    if dotfiles_config is not None:
        if manager is not None:
            results.append(check_drift(config, dotfiles_config, manager))
        results.append(check_stow_packages(config, dotfiles_config))

    return results


# ============================================================
# Checks
# ============================================================

def check_dotfiles_dir(config: Config) -> CheckResult:
    if config.dotfiles_dir.is_dir():
        return CheckResult("dotfiles directory", CheckStatus.OK, "Dotfiles directory exists",
                           details=[f"Location: {config.dotfiles_dir}"])
    return CheckResult("dotfiles directory", CheckStatus.FAIL, "Dotfiles directory not found",
                       details=[f"Expected: {config.dotfiles_dir}"], hint="Run: dotfiles init")


def check_config(config: Config, dotfiles_config: DotfilesConfig) -> CheckResult:
    if not config.config_path.exists():
        return CheckResult("config", CheckStatus.FAIL, "Configuration file missing",
                           details=[f"Expected: {config.config_path}"], hint="Run: dotfiles init")
    counts = ", ".join(f"{len(dotfiles_config.packages(kind))} {kind.key}" for kind in PackageType)
    return CheckResult("config", CheckStatus.OK, "Configuration file is valid",
                       details=[f"Packages: {dotfiles_config.total_packages()} total ({counts})"])


def check_git_repository(config: Config) -> CheckResult:
    """Check that the dotfiles directory is a git repository with a remote."""
    if not (config.dotfiles_dir / ".git").exists():
        return CheckResult("git repository", CheckStatus.WARN, "Not a git repository",
                           hint=f"Run: git init in {config.dotfiles_dir} to enable version control")

    remotes = query_lines(['git', '-C', str(config.dotfiles_dir), 'remote'], check=False)
    if not remotes:
        return CheckResult("git repository", CheckStatus.WARN, "Git repository has no remote",
                           hint="Add remote: git remote add origin <url>")
    return CheckResult("git repository", CheckStatus.OK, "Git repository initialized",
                       details=[f"Remotes: {', '.join(remotes)}"])


def check_tool(name: str) -> CheckResult:
    if command_exists(name):
        return CheckResult(name, CheckStatus.OK, f"{name} installed")
    return CheckResult(name, CheckStatus.FAIL, f"{name} not found",
                       hint=f"Install {name} with your package manager")


def check_broken_symlinks(config: Config) -> CheckResult:
    broken = find_broken_symlinks(config.home, depth=1) + find_broken_symlinks(config.home / ".config", depth=2)
    if not broken:
        return CheckResult("symlinks", CheckStatus.OK, "No broken symlinks found")
    return CheckResult("symlinks", CheckStatus.FAIL, f"Found {len(broken)} broken symlinks",
                       details=[f"• {path}" for path in broken],
                       hint="Run: dotfiles restow <package>")


def check_drift(config: Config, dotfiles_config: DotfilesConfig, manager: PackageManager) -> CheckResult:
    """Compare configured brews and casks with installed ones."""
    details = []
    for kind in (PackageType.BREW, PackageType.CASK):
        if not manager.supports(kind):
            continue
        diff = diff_packages(config, dotfiles_config, manager, kind)
        if diff.missing:
            details.append(f"• {len(diff.missing)} {kind.key} configured but not installed")
        if diff.extra:
            details.append(f"• {len(diff.extra)} {kind.key} installed but not in config")

    if not details:
        return CheckResult("drift", CheckStatus.OK, "Configuration in sync with installed packages")
    return CheckResult("drift", CheckStatus.WARN, "Configuration drift detected",
                       details=details, hint="Run: dotfiles diff")


def check_stow_packages(config: Config, dotfiles_config: DotfilesConfig) -> CheckResult:
    missing = [package for package in dotfiles_config.stow if not (config.stow_dir / package).is_dir()]
    if not missing:
        return CheckResult("stow packages", CheckStatus.OK, "All stow packages exist")
    return CheckResult("stow packages", CheckStatus.FAIL, f"{len(missing)} stow packages missing",
                       details=[f"• {package} (expected at: stow/{package})" for package in missing])


# ============================================================
# Helpers
# ============================================================

def find_broken_symlinks(root: Path, depth: int) -> list[Path]:
    """Find symlinks with missing destinations up to the given depth below root."""
    if depth < 1 or not root.is_dir() or root.is_symlink():
        return []

    broken: list[Path] = []
    try:
        entries = sorted(root.iterdir())
    except PermissionError:
        return []

    for entry in entries:
        if entry.is_symlink():
            if not entry.exists():
                broken.append(entry)
        elif entry.is_dir():
            broken.extend(find_broken_symlinks(entry, depth - 1))
    return broken


def print_check(result: CheckResult) -> None:
    print_info(f"{result.status.icon} {result.message}")
    for line in result.details:
        print_info(f"   {line}")
    if result.hint and result.status != CheckStatus.OK:
        print_info(f"   💡 {result.hint}")
