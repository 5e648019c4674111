"""Domain models for dotfiles management."""

# ============================================================
# Imports
# ============================================================

import copy
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import ConfigError


# ============================================================
# Enums
# ============================================================

class PackageType(Enum):
    """Kind of entry tracked in the config document."""

    BREW = "brew"
    CASK = "cask"
    TAP = "tap"
    STOW = "stow"

    @property
    def key(self) -> str:
        """JSON key of the list holding this kind of package."""
        return {
            PackageType.BREW: "brews",
            PackageType.CASK: "casks",
            PackageType.TAP: "taps",
            PackageType.STOW: "stow",
        }[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str) -> 'PackageType':
        """Parse a --type argument, accepting singular and plural forms."""
        normalized = value.strip().lower()
        for kind in cls:
            if normalized in (kind.value, kind.key):
                return kind
        raise ConfigError(f"Invalid package type '{value}' (use brew, cask, tap, or stow)")


HOOK_TYPES = (
    "pre_install",
    "post_install",
    "pre_sync",
    "post_sync",
    "pre_stow",
    "post_stow",
)


class StowAction(Enum):
    """GNU Stow operation mode."""

    STOW = "stow"
    DELETE = "unstow"
    RESTOW = "restow"

    @property
    def flag(self) -> str | None:
        return {StowAction.STOW: None, StowAction.DELETE: "-D", StowAction.RESTOW: "-R"}[self]


class ConflictKind(Enum):
    """Why a target path collides with a stow package entry."""

    EXISTING_FILE = "existing file"
    IDENTICAL = "identical file"
    FOREIGN_SYMLINK = "foreign symlink"
    BROKEN_SYMLINK = "broken symlink"


class ConflictStrategy(Enum):
    """How conflicts are resolved before stowing."""

    BACKUP = "backup"
    ADOPT = "adopt"
    AUTO = "auto"


class ConflictAction(Enum):
    """Action taken (or planned) for a single conflict."""

    BACKED_UP = "Backed up"
    ADOPTED = "Adopted"
    REMOVED = "Removed"
    BACKED_UP_DRYRUN = "Backed up (Not executed)"
    ADOPTED_DRYRUN = "Adopted (Not executed)"
    REMOVED_DRYRUN = "Removed (Not executed)"


class CheckStatus(Enum):
    """Outcome of a single health check."""

    OK = "ok"
    WARN = "warn"
    FAIL = "fail"

    @property
    def icon(self) -> str:
        return {CheckStatus.OK: "✅", CheckStatus.WARN: "⚠️ ", CheckStatus.FAIL: "❌"}[self]


# ============================================================
# Config Document
# ============================================================

_LIST_KEYS = ("brews", "casks", "taps", "stow")
_MAP_KEYS = ("groups", "hooks", "package_configs")


def _string_list(value: Any, key: str) -> list[str]:
    """Validate that a JSON value is a list of strings."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def _string_list_map(value: Any, key: str) -> dict[str, list[str]]:
    """Validate that a JSON value maps names to lists of strings."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be an object")
    return {name: _string_list(items, f"{key}.{name}") for name, items in value.items()}


@dataclass
class DotfilesConfig:
    """
    The user's declared machine state, stored as config.json.

    Attributes:
        brews: Homebrew formulae (or native packages on other managers)
        casks: Homebrew casks
        taps: Homebrew taps
        stow: Stow package names under the stow directory
        groups: Named package groups
        hooks: Shell commands keyed by hook type
        package_configs: Per-package settings, currently only post_install hooks
        extra: Unknown top-level keys, preserved on save
    """

    brews: list[str] = field(default_factory=list)
    casks: list[str] = field(default_factory=list)
    taps: list[str] = field(default_factory=list)
    stow: list[str] = field(default_factory=list)
    groups: dict[str, list[str]] = field(default_factory=dict)
    hooks: dict[str, list[str]] = field(default_factory=dict)
    package_configs: dict[str, dict[str, list[str]]] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> 'DotfilesConfig':
        """
        Create a DotfilesConfig from decoded JSON.

        Raises:
            ConfigError: If any known field has the wrong shape
        """
        if not isinstance(data, dict):
            raise ConfigError("Config must be a JSON object")

        package_configs: dict[str, dict[str, list[str]]] = {}
        raw_package_configs = data.get("package_configs") or {}
        if not isinstance(raw_package_configs, dict):
            raise ConfigError("'package_configs' must be an object")
        for package, settings in raw_package_configs.items():
            package_configs[package] = _string_list_map(settings, f"package_configs.{package}")

        return cls(
            brews=_string_list(data.get("brews"), "brews"),
            casks=_string_list(data.get("casks"), "casks"),
            taps=_string_list(data.get("taps"), "taps"),
            stow=_string_list(data.get("stow"), "stow"),
            groups=_string_list_map(data.get("groups"), "groups"),
            hooks=_string_list_map(data.get("hooks"), "hooks"),
            package_configs=package_configs,
            extra={k: v for k, v in data.items() if k not in _LIST_KEYS + _MAP_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict, omitting empty maps."""
        data: dict[str, Any] = {
            "brews": list(self.brews),
            "casks": list(self.casks),
            "taps": list(self.taps),
            "stow": list(self.stow),
        }
        if self.groups:
            data["groups"] = copy.deepcopy(self.groups)
        hooks = {name: list(cmds) for name, cmds in self.hooks.items() if cmds}
        if hooks:
            data["hooks"] = hooks
        if self.package_configs:
            data["package_configs"] = copy.deepcopy(self.package_configs)
        data.update(copy.deepcopy(self.extra))
        return data

    def copy(self) -> 'DotfilesConfig':
        return DotfilesConfig.from_dict(self.to_dict())

    def packages(self, kind: PackageType) -> list[str]:
        """Return the live list for a package type."""
        return getattr(self, kind.key)

    def add_package(self, kind: PackageType, name: str) -> bool:
        """Append a package unless already present. Returns True if added."""
        name = name.strip()
        items = self.packages(kind)
        if not name or name in items:
            return False
        items.append(name)
        return True

    def remove_package(self, kind: PackageType, name: str) -> bool:
        """Remove every occurrence of a package. Returns True if removed."""
        items = self.packages(kind)
        if name not in items:
            return False
        items[:] = [item for item in items if item != name]
        return True

    def total_packages(self) -> int:
        return sum(len(self.packages(kind)) for kind in PackageType)

    def hook_commands(self, hook_type: str) -> list[str]:
        """Return the live command list for a hook type."""
        if hook_type not in HOOK_TYPES:
            raise ConfigError(f"Invalid hook type '{hook_type}' (use {', '.join(HOOK_TYPES)})")
        return self.hooks.setdefault(hook_type, [])

    def post_install_hooks(self, package: str) -> list[str]:
        return self.package_configs.get(package, {}).get("post_install", [])


def merge_unique(base: list[str], extra: list[str]) -> list[str]:
    """Return base followed by items of extra not already present."""
    merged = list(base)
    for item in extra:
        if item not in merged:
            merged.append(item)
    return merged


def read_package_file(path: Path) -> list[str]:
    """
    Read package names from a file, one per line.

    Blank lines and lines starting with '#' are skipped.
    """
    packages: list[str] = []
    with open(path, encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                packages.append(line)
    return packages


def collect_packages(names: list[str] | None, file: str | None = None) -> list[str]:
    """Combine packages from an optional file with command-line names."""
    packages = read_package_file(Path(file).expanduser()) if file else []
    packages.extend(name.strip() for name in names or [])
    return [package for package in packages if package]


# ============================================================
# Stow Models
# ============================================================

@dataclass(frozen=True)
class StowConflict:
    """
    A target path that would block stowing a package entry.

    Attributes:
        package: Stow package name
        source_path: Entry inside the package directory
        target_path: Colliding path in the target directory
        kind: Classification of the collision
    """

    package: str
    source_path: Path
    target_path: Path
    kind: ConflictKind

    def __eq__(self, other: object) -> bool:
        """Conflicts are equal if they have the same target path."""
        if not isinstance(other, StowConflict):
            return NotImplemented
        return self.target_path == other.target_path

    def __hash__(self) -> int:
        return hash(self.target_path)


@dataclass(frozen=True)
class ConflictResult:
    """Result of resolving a single conflict."""

    conflict: StowConflict
    action: ConflictAction
    backup_path: Path | None = None

    @property
    def target_path(self) -> Path:
        return self.conflict.target_path


@dataclass
class CheckResult:
    """Result of a doctor health check, with optional detail lines and a hint."""

    name: str
    status: CheckStatus
    message: str
    details: list[str] = field(default_factory=list)
    hint: str = ""


# ============================================================
# Stored Documents
# ============================================================

@dataclass
class Snapshot:
    """A point-in-time copy of the config document."""

    id: str
    timestamp: str
    description: str
    config: DotfilesConfig
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, snapshot_id: str, data: dict[str, Any]) -> 'Snapshot':
        return cls(
            id=snapshot_id,
            timestamp=data.get("timestamp", ""),
            description=data.get("description", ""),
            config=DotfilesConfig.from_dict(data.get("config") or {}),
            metadata=data.get("metadata") or {},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "description": self.description,
            "config": self.config.to_dict(),
            "metadata": self.metadata,
        }


@dataclass
class Profile:
    """An exported machine profile."""

    name: str
    description: str
    machine: str
    platform: str
    created_at: str
    config: DotfilesConfig
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Profile':
        if "config" not in data:
            raise ConfigError("Profile has no 'config' section")
        return cls(
            name=data.get("name", ""),
            description=data.get("description", ""),
            machine=data.get("machine", ""),
            platform=data.get("platform", ""),
            created_at=data.get("created_at", ""),
            config=DotfilesConfig.from_dict(data["config"]),
            metadata=data.get("metadata") or {},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "machine": self.machine,
            "platform": self.platform,
            "created_at": self.created_at,
            "config": self.config.to_dict(),
            "metadata": self.metadata,
        }


@dataclass
class ShareMetadata:
    """Descriptive metadata attached to shared configs and templates."""

    name: str = ""
    description: str = ""
    author: str = ""
    category: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: str = ""
    version: str = "1.0.0"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ShareMetadata':
        return cls(
            name=data.get("name", ""),
            description=data.get("description", ""),
            author=data.get("author", ""),
            category=data.get("category", ""),
            tags=list(data.get("tags") or []),
            created_at=data.get("created_at", ""),
            version=data.get("version", "1.0.0"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "author": self.author,
            "tags": list(self.tags),
            "created_at": self.created_at,
            "version": self.version,
        }
        if self.category:
            data["category"] = self.category
        return data


_SHARED_KEYS = ("metadata", "extends", "add_only", "addOnly")


@dataclass
class SharedConfig:
    """
    A config document with metadata, as shared files, gists, and templates.

    The config fields are stored inline next to a 'metadata' object.

    Attributes:
        extends: Name of a base template whose packages are inherited
        add_only: Merge base and own lists instead of replacing non-empty ones
    """

    config: DotfilesConfig
    metadata: ShareMetadata = field(default_factory=ShareMetadata)
    extends: str = ""
    add_only: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> 'SharedConfig':
        if not isinstance(data, dict):
            raise ConfigError("Shared config must be a JSON object")
        return cls(
            config=DotfilesConfig.from_dict({k: v for k, v in data.items() if k not in _SHARED_KEYS}),
            metadata=ShareMetadata.from_dict(data.get("metadata") or {}),
            extends=data.get("extends", ""),
            add_only=bool(data.get("add_only", data.get("addOnly", False))),
        )

    def to_dict(self) -> dict[str, Any]:
        data = self.config.to_dict()
        data["metadata"] = self.metadata.to_dict()
        if self.extends:
            data["extends"] = self.extends
        if self.add_only:
            data["add_only"] = True
        return data
