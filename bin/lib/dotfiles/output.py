"""Formatted output utilities."""

# ============================================================
# Imports
# ============================================================

import os
import shlex
import sys


# ============================================================
# Configuration
# ============================================================

class Color:
    """ANSI color codes for terminal output."""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    GRAY = '\033[90m'


# Verbose output is switched on by the CLI
VERBOSE = False


def use_color() -> bool:
    """Return True when stdout is a terminal and NO_COLOR is unset."""
    if os.environ.get('NO_COLOR'):
        return False
    return sys.stdout.isatty()


def paint(text: str, *codes: str) -> str:
    """Wrap text in color codes when color output is enabled."""
    if not use_color():
        return text
    return f"{''.join(codes)}{text}{Color.RESET}"


# ============================================================
# Output Functions
# ============================================================

def print_header(message: str) -> None:
    """Print a section header with bold cyan formatting."""
    print()
    print(paint(message, Color.BOLD, Color.CYAN))
    print()


def print_info(message: str) -> None:
    """Print an informational message."""
    print(message)


def print_error(message: str) -> None:
    """Print an error message to stderr with 'Error:' prefix."""
    print(f"Error: {message}", file=sys.stderr)


def print_success(message: str) -> None:
    """Print a success message in green."""
    print(paint(message, Color.GREEN))


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    print(paint(message, Color.YELLOW))


def print_debug(message: str) -> None:
    """Print a gray diagnostic message when verbose output is enabled."""
    if VERBOSE:
        print(paint(message, Color.GRAY))


def print_key_value(key: str, value: str) -> None:
    """Print a key-value pair with cyan-colored key."""
    print(f"{paint(key + ':', Color.CYAN)} {value}")


def print_item(name: str, ok: bool = True, detail: str = "") -> None:
    """Print an indented list item with a check or cross marker."""
    marker = paint("✓", Color.GREEN) if ok else paint("✗", Color.RED)
    suffix = f" {paint(detail, Color.GRAY)}" if detail else ""
    print(f"  {marker} {name}{suffix}")


def print_command(args: list[str], dryrun: bool = False) -> None:
    """Echo a shell command, prefixed when it is not going to be executed."""
    prefix = "[dry-run] " if dryrun else "Running: "
    print(paint(prefix + shlex.join(args), Color.GRAY))


def print_status_line(tag: str, status: str, status_color: str, path: str) -> None:
    """
    Print a formatted per-path status line.

    Args:
        tag: Short label such as a package name
        status: Status message (e.g., "Backed up", "Removed")
        status_color: Color constant for the status (e.g., Color.BLUE, Color.GREEN)
        path: Path the status refers to
    """
    print(f"[{paint(tag, Color.CYAN)}] {paint(status, status_color)} -> {path}")


# ============================================================
# Prompts
# ============================================================

def ask(prompt: str, default: str = "") -> str:
    """Read a line from stdin, returning default on empty input or EOF."""
    try:
        answer = input(prompt)
    except EOFError:
        return default
    return answer.strip() or default


def confirm(prompt: str, default: bool = False, assume_yes: bool = False) -> bool:
    """Ask a yes/no question."""
    if assume_yes:
        return True
    hint = "[Y/n]" if default else "[y/N]"
    answer = ask(f"{prompt} {hint}: ").lower()
    if not answer:
        return default
    return answer in ('y', 'yes')
