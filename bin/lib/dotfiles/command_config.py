"""Config command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
import json
from typing import Any

from .config import Config, load_json
from .errors import ConfigError
from .models import HOOK_TYPES, DotfilesConfig, PackageType
from .output import print_header, print_item, print_key_value, print_success


# ============================================================
# Entry Point
# ============================================================

def execute_config(config: Config, args: argparse.Namespace) -> None:
    """Dispatch config subcommands."""
    actions = {
        "show": config_show,
        "get": config_get,
        "set": config_set,
        "validate": config_validate,
    }
    actions[args.action](config, args)


# ============================================================
# Actions
# ============================================================

def config_show(config: Config, args: argparse.Namespace) -> None:
    dotfiles_config = config.load()
    if args.json:
        print(json.dumps(dotfiles_config.to_dict(), indent=2, ensure_ascii=False))
        return

    print_header("📄 Configuration")
    print_key_value("Config file", str(config.config_path))
    print_key_value("Dotfiles dir", str(config.dotfiles_dir))
    for kind in PackageType:
        print_key_value(kind.key.capitalize(), str(len(dotfiles_config.packages(kind))))
    print_key_value("Groups", str(len(dotfiles_config.groups)))
    print_key_value("Hooks", str(sum(len(cmds) for cmds in dotfiles_config.hooks.values())))


def config_get(config: Config, args: argparse.Namespace) -> None:
    value = get_value(config.load().to_dict(), args.key)
    if isinstance(value, (dict, list)):
        print(json.dumps(value, indent=2, ensure_ascii=False))
    else:
        print(value)


def config_set(config: Config, args: argparse.Namespace) -> None:
    """Set a dotted key; list fields take comma-separated values."""
    data = config.load().to_dict()
    value = parse_value(data, args.key, args.value)
    set_value(data, args.key, value)

    # Re-validate the whole document before saving
    updated = DotfilesConfig.from_dict(data)
    if not config.dryrun:
        config.save(updated)
    print_success(f"✅ Set {args.key} = {json.dumps(value, ensure_ascii=False)}")


def config_validate(config: Config, args: argparse.Namespace) -> None:
    """Check the config file for shape errors, duplicates, and unknown hook types."""
    if not config.config_path.exists():
        raise ConfigError(f"No configuration found at {config.config_path}. Run 'dotfiles init' first.")
    try:
        data = load_json(config.config_path)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config.config_path}: {e}") from e

    dotfiles_config = DotfilesConfig.from_dict(data)
    problems = find_problems(dotfiles_config)
    if problems:
        for problem in problems:
            print_item(problem, ok=False)
        raise ConfigError(f"Configuration has {len(problems)} problems")

    print_success(f"✅ Configuration is valid ({dotfiles_config.total_packages()} packages)")


# ============================================================
# Dotted Keys
# ============================================================

def get_value(data: dict[str, Any], key: str) -> Any:
    """Look up a dotted key such as 'hooks.pre_install'."""
    current: Any = data
    for part in key.split('.'):
        if not isinstance(current, dict) or part not in current:
            raise ConfigError(f"Key not found: {key}")
        current = current[part]
    return current


def set_value(data: dict[str, Any], key: str, value: Any) -> None:
    parts = key.split('.')
    current = data
    for part in parts[:-1]:
        child = current.setdefault(part, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot set {key}: '{part}' is not an object")
        current = child
    current[parts[-1]] = value


def parse_value(data: dict[str, Any], key: str, raw: str) -> Any:
    """
    Convert a command-line value for a key.

    Package lists, hook lists, and existing list values are split on commas.
    Other values are parsed as JSON when possible and kept as strings otherwise.
    """
    try:
        existing = get_value(data, key)
    except ConfigError:
        existing = None

    parts = key.split('.')
    is_list = (
        isinstance(existing, list)
        or key in [kind.key for kind in PackageType]
        or (parts[0] in ("groups", "hooks") and len(parts) == 2)
        or (parts[0] == "package_configs" and len(parts) == 3)
    )
    if is_list:
        return [item.strip() for item in raw.split(',') if item.strip()]

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def find_problems(dotfiles_config: DotfilesConfig) -> list[str]:
    problems = []
    for kind in PackageType:
        packages = dotfiles_config.packages(kind)
        duplicates = sorted({name for name in packages if packages.count(name) > 1})
        for name in duplicates:
            problems.append(f"duplicate {kind.value}: {name}")
        for name in packages:
            if not name.strip():
                problems.append(f"empty {kind.value} package name")
    for hook_type in dotfiles_config.hooks:
        if hook_type not in HOOK_TYPES:
            problems.append(f"unknown hook type: {hook_type}")
    return problems
