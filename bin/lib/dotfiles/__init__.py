"""Dotfiles and package management library."""

from .command_install import execute_install
from .command_packages import execute_add, execute_remove
from .command_stow import execute_adopt, execute_restow, execute_stow, execute_unstow
from .config import Config, load_dotfiles_config, save_dotfiles_config
from .errors import (
    ConfigError,
    DotfilesError,
    GistError,
    PackageManagerError,
    SnapshotError,
    StowError,
    TemplateError,
)
from .models import (
    ConflictAction,
    ConflictKind,
    ConflictResult,
    ConflictStrategy,
    DotfilesConfig,
    PackageType,
    StowAction,
    StowConflict,
)

__all__ = [
    # Configuration
    'Config',
    'load_dotfiles_config',
    'save_dotfiles_config',
    # Domain models
    'ConflictAction',
    'ConflictKind',
    'ConflictResult',
    'ConflictStrategy',
    'DotfilesConfig',
    'PackageType',
    'StowAction',
    'StowConflict',
    # Errors
    'ConfigError',
    'DotfilesError',
    'GistError',
    'PackageManagerError',
    'SnapshotError',
    'StowError',
    'TemplateError',
    # Commands
    'execute_add',
    'execute_remove',
    'execute_install',
    'execute_stow',
    'execute_unstow',
    'execute_restow',
    'execute_adopt',
]
