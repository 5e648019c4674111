"""External command execution."""

# ============================================================
# Imports
# ============================================================

import shutil
import subprocess

from .config import Config
from .output import print_command


# ============================================================
# Commands
# ============================================================

def run_command(config: Config, args: list[str], **kwargs) -> subprocess.CompletedProcess | None:
    """
    Run a command that changes system state.

    Echoes the command in verbose or dry-run mode and skips execution
    entirely in dry-run mode.

    Returns:
        The completed process, or None when not executed
    """
    if config.verbose or config.dryrun:
        print_command(args, dryrun=config.dryrun)
    if config.dryrun:
        return None
    kwargs.setdefault('check', True)
    return subprocess.run(args, **kwargs)


def query_command(args: list[str], check: bool = True) -> str:
    """Run a read-only command and return its stdout."""
    result = subprocess.run(args, capture_output=True, text=True, check=check)
    return result.stdout


def query_lines(args: list[str], check: bool = True) -> list[str]:
    """Run a read-only command and return its non-empty stdout lines."""
    return [line.strip() for line in query_command(args, check=check).splitlines() if line.strip()]


def command_exists(name: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(name) is not None
