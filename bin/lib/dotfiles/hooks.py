"""Shell hook execution."""

# ============================================================
# Imports
# ============================================================

import subprocess

from .config import Config
from .output import print_info, print_success


# ============================================================
# Hook Execution
# ============================================================

def run_hooks(config: Config, commands: list[str], label: str) -> None:
    """
    Run hook commands through sh, in order.

    Raises:
        subprocess.CalledProcessError: On the first failing command
    """
    if not commands:
        return

    print_info(f"🪝 Running {label} hooks...")
    for index, command in enumerate(commands, start=1):
        print_info(f"  [{index}/{len(commands)}] {command}")
        if config.dryrun:
            continue
        subprocess.run(['sh', '-c', command], check=True)

    if not config.dryrun:
        print_success(f"✅ {label.capitalize()} hooks completed")


def label_for(hook_type: str) -> str:
    """Human label for a hook type, e.g. 'pre_install' -> 'pre-install'."""
    return hook_type.replace('_', '-')
