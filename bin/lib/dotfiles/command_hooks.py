"""Hooks command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .errors import ConfigError
from .hooks import label_for, run_hooks
from .models import HOOK_TYPES
from .output import Color, paint, print_header, print_info, print_success


# ============================================================
# Entry Point
# ============================================================

def execute_hooks(config: Config, args: argparse.Namespace) -> None:
    """Dispatch hooks subcommands."""
    actions = {
        "list": hooks_list,
        "add": hooks_add,
        "remove": hooks_remove,
        "clear": hooks_clear,
        "run": hooks_run,
    }
    actions[args.action](config, args)


# ============================================================
# Actions
# ============================================================

def hooks_list(config: Config, args: argparse.Namespace) -> None:
    hooks = config.load().hooks
    if not any(hooks.get(hook_type) for hook_type in HOOK_TYPES):
        print_info("🪝 No hooks configured")
        print_info("")
        print_info("💡 Add a hook:")
        print_info("   dotfiles hooks add pre_install 'brew update'")
        return

    print_header("🪝 Configured Hooks")
    for hook_type in HOOK_TYPES:
        commands = hooks.get(hook_type, [])
        if not commands:
            continue
        print_info(paint(f"{label_for(hook_type).title()}:", Color.BOLD))
        for index, command in enumerate(commands):
            print_info(f"  [{index}] {command}")
        print_info("")


def hooks_add(config: Config, args: argparse.Namespace) -> None:
    dotfiles_config = config.load()
    dotfiles_config.hook_commands(args.hook_type).append(args.hook_command)
    if not config.dryrun:
        config.save(dotfiles_config)
    print_success(f"✅ Added {args.hook_type} hook: {args.hook_command}")


def hooks_remove(config: Config, args: argparse.Namespace) -> None:
    dotfiles_config = config.load()
    commands = dotfiles_config.hook_commands(args.hook_type)
    if not 0 <= args.index < len(commands):
        raise ConfigError(f"Invalid index {args.index} ({args.hook_type} has {len(commands)} hooks)")

    removed = commands.pop(args.index)
    if not config.dryrun:
        config.save(dotfiles_config)
    print_success(f"✅ Removed {args.hook_type} hook: {removed}")


def hooks_clear(config: Config, args: argparse.Namespace) -> None:
    dotfiles_config = config.load()
    commands = dotfiles_config.hook_commands(args.hook_type)
    count = len(commands)
    commands.clear()
    if count and not config.dryrun:
        config.save(dotfiles_config)
    print_success(f"✅ Cleared {count} {args.hook_type} hooks")


def hooks_run(config: Config, args: argparse.Namespace) -> None:
    """Run one hook type on demand."""
    commands = config.load().hook_commands(args.hook_type)
    if not commands:
        print_info(f"No {args.hook_type} hooks configured")
        return
    run_hooks(config, commands, label_for(args.hook_type))
