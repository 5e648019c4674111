"""Brewfile generation and parsing."""

# ============================================================
# Imports
# ============================================================

import re

from .models import DotfilesConfig


# Matches the first quoted value on a directive line
QUOTED_VALUE = re.compile(r'''["']([^"']+)["']''')

DIRECTIVES = {"tap": "taps", "brew": "brews", "cask": "casks"}


# ============================================================
# Generation
# ============================================================

def generate_brewfile(dotfiles_config: DotfilesConfig) -> str:
    """
    Render taps, brews, and casks as Brewfile text.

    Sections are separated by a single blank line and empty sections
    are omitted.
    """
    sections = [
        [f'tap "{tap}"' for tap in dotfiles_config.taps],
        [f'brew "{brew}"' for brew in dotfiles_config.brews],
        [f'cask "{cask}"' for cask in dotfiles_config.casks],
    ]
    blocks = ["\n".join(lines) for lines in sections if lines]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


# ============================================================
# Parsing
# ============================================================

def parse_brewfile_line(line: str) -> tuple[str, str] | None:
    """
    Parse one Brewfile line into (directive, value).

    Returns None for comments, blank lines, and directives other than
    tap, brew, and cask.
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None

    directive, _, rest = line.partition(' ')
    if directive not in DIRECTIVES:
        return None

    rest = rest.strip()
    match = QUOTED_VALUE.search(rest)
    if match:
        value = match.group(1)
    else:
        # Unquoted value: first word, without trailing options
        words = rest.split(',', 1)[0].split()
        value = words[0] if words else ""

    if not value:
        return None
    return directive, value


def parse_brewfile(text: str) -> tuple[list[str], list[str], list[str]]:
    """
    Parse Brewfile text.

    Returns:
        (taps, brews, casks), each in file order without duplicates
    """
    found: dict[str, list[str]] = {"taps": [], "brews": [], "casks": []}
    for line in text.splitlines():
        parsed = parse_brewfile_line(line)
        if parsed is None:
            continue
        directive, value = parsed
        items = found[DIRECTIVES[directive]]
        if value not in items:
            items.append(value)
    return found["taps"], found["brews"], found["casks"]
