"""Configuration management."""

# ============================================================
# Imports
# ============================================================

import json
import os
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .models import DotfilesConfig


# ============================================================
# Configuration
# ============================================================

class Config:
    """Configuration paths and global state."""

    def __init__(self, config_path: str | Path | None = None, dotfiles_dir: str | Path | None = None):
        self.home = Path.home()

        # Resolve dotfiles directory from flag, environment, or default
        dotfiles_dir = dotfiles_dir or os.environ.get("DOTFILES_DIR")
        self.dotfiles_dir = Path(dotfiles_dir).expanduser() if dotfiles_dir else self.home / ".dotfiles"

        # Config document path
        config_path = config_path or os.environ.get("DOTFILES_CONFIG")
        self.config_path = Path(config_path).expanduser() if config_path else self.dotfiles_dir / "config.json"

        # Managed directories
        self.stow_dir = self.dotfiles_dir / "stow"
        self.private_dir = self.dotfiles_dir / "private"
        self.snapshots_dir = self.dotfiles_dir / "snapshots"
        self.profiles_dir = self.dotfiles_dir / "profiles"
        self.templates_dir = self.dotfiles_dir / "templates"

        # Runtime flags
        self.dryrun = False
        self.verbose = False
        self.assume_yes = False

    @property
    def backup_path(self) -> Path:
        """Default location of the config backup file."""
        return self.config_path.with_name(self.config_path.name + ".bak")

    def load(self) -> DotfilesConfig:
        return load_dotfiles_config(self.config_path)

    def save(self, dotfiles_config: DotfilesConfig) -> None:
        save_dotfiles_config(dotfiles_config, self.config_path)


# ============================================================
# JSON Loading
# ============================================================

def load_json(path: Path) -> Any:
    """Load and parse a JSON file."""
    with open(path, encoding='utf-8') as f:
        return json.load(f)


def write_json(path: Path, data: Any) -> None:
    """Write data as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write('\n')


def load_dotfiles_config(path: Path) -> DotfilesConfig:
    """
    Load the config document.

    A missing file yields an empty document.

    Raises:
        ConfigError: If the file is not valid JSON or has the wrong shape
    """
    if not path.exists():
        return DotfilesConfig()

    try:
        data = load_json(path)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    return DotfilesConfig.from_dict(data)


def save_dotfiles_config(dotfiles_config: DotfilesConfig, path: Path) -> None:
    """Write the config document."""
    write_json(path, dotfiles_config.to_dict())
