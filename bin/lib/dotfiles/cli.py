"""Command-line interface.

Parses arguments, builds the runtime Config, and dispatches to the
execute_<command> functions.
"""

# ============================================================
# Imports
# ============================================================

import argparse
import subprocess
import sys

from . import output
from .command_backup import execute_backup, execute_restore
from .command_browse import execute_browse
from .command_cleanup import execute_cleanup
from .command_config import execute_config
from .command_diff import execute_diff
from .command_discover import execute_discover
from .command_doctor import execute_doctor
from .command_github import execute_github
from .command_groups import execute_groups
from .command_hooks import execute_hooks
from .command_import import execute_import
from .command_init import execute_init
from .command_install import execute_brewfile, execute_install
from .command_list import execute_list
from .command_onboard import execute_onboard
from .command_packages import execute_add, execute_remove
from .command_profile import execute_export, execute_import_profile, execute_profiles
from .command_scan import execute_scan
from .command_share import execute_clone, execute_share
from .command_snapshot import execute_snapshot
from .command_status import execute_status
from .command_stow import execute_adopt, execute_private, execute_restow, execute_stow, execute_unstow
from .command_sync import execute_sync
from .command_templates import execute_templates
from .command_update import execute_update
from .config import Config
from .models import HOOK_TYPES, ConflictStrategy
from .output import print_error, print_info


VERSION = "1.0.0"
PACKAGE_TYPES = ("brew", "cask", "tap", "stow")
HOOK_TYPES_HELP = f"hook type ({', '.join(HOOK_TYPES)})"


# ============================================================
# Configuration
# ============================================================

COMMANDS = {
    "init":           execute_init,
    "onboard":        execute_onboard,
    "add":            execute_add,
    "remove":         execute_remove,
    "install":        execute_install,
    "brewfile":       execute_brewfile,
    "import":         execute_import,
    "list":           execute_list,
    "diff":           execute_diff,
    "scan":           execute_scan,
    "status":         execute_status,
    "stow":           execute_stow,
    "unstow":         execute_unstow,
    "restow":         execute_restow,
    "private":        execute_private,
    "adopt":          execute_adopt,
    "snapshot":       execute_snapshot,
    "export":         execute_export,
    "import-profile": execute_import_profile,
    "profiles":       execute_profiles,
    "backup":         execute_backup,
    "restore":        execute_restore,
    "groups":         execute_groups,
    "hooks":          execute_hooks,
    "sync":           execute_sync,
    "share":          execute_share,
    "clone":          execute_clone,
    "discover":       execute_discover,
    "templates":      execute_templates,
    "github":         execute_github,
    "doctor":         execute_doctor,
    "update":         execute_update,
    "upgrade":        execute_update,
    "cleanup":        execute_cleanup,
    "config":         execute_config,
    "browse":         execute_browse,
}


# ============================================================
# Shared Arguments
# ============================================================

# Subcommand copies of global flags use SUPPRESS so an omitted flag
# does not overwrite a value given before the command name.

def add_dry_run_argument(parser: argparse.ArgumentParser, short: bool = False) -> None:
    flags = ['-n', '--dry-run'] if short else ['--dry-run']
    parser.add_argument(*flags, dest='dry_run', action='store_true', default=argparse.SUPPRESS,
                        help="print actions without executing them")


def add_verbose_argument(parser: argparse.ArgumentParser, help: str = "verbose output") -> None:
    parser.add_argument('-v', '--verbose', action='store_true', default=argparse.SUPPRESS, help=help)


def add_yes_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-y', '--yes', action='store_true', help="don't ask for confirmation")


def add_type_argument(parser: argparse.ArgumentParser, default: str | None = None) -> None:
    parser.add_argument('-t', '--type', default=default,
                        help=f"package type ({', '.join(PACKAGE_TYPES)})")


def add_file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-f', '--file', help="read packages from file (one per line)")


def add_directory_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-d', '--dir', help="stow directory (default: <dotfiles>/stow)")
    parser.add_argument('-t', '--target', help="target directory (default: home)")


def add_strategy_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the mutually exclusive conflict resolution flags."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--backup', dest='strategy', action='store_const', const=ConflictStrategy.BACKUP,
                       help="back up conflicting files before stowing")
    group.add_argument('--adopt', dest='strategy', action='store_const', const=ConflictStrategy.ADOPT,
                       help="move conflicting files into the package")
    group.add_argument('--auto-resolve', dest='strategy', action='store_const', const=ConflictStrategy.AUTO,
                       help="remove identical files and broken links, back up the rest")
    parser.set_defaults(strategy=None)


# ============================================================
# Parser
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every command."""
    parser = argparse.ArgumentParser(
        prog="dotfiles",
        description="Manage packages and dotfiles declared in a JSON config",
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {VERSION}")
    parser.add_argument('--config', help="config file (default: $DOTFILES_CONFIG or ~/.dotfiles/config.json)")
    parser.add_argument('--dotfiles-dir', help="dotfiles directory (default: $DOTFILES_DIR or ~/.dotfiles)")
    parser.add_argument('--dry-run', dest='dry_run', action='store_true',
                        help="print actions without executing them")
    parser.add_argument('-v', '--verbose', action='store_true', help="verbose output")
    parser.add_argument('-y', '--yes', dest='assume_yes', action='store_true',
                        help="answer yes to all prompts")

    commands = parser.add_subparsers(dest='command', metavar='command')

    add_package_commands(commands)
    add_stow_commands(commands)
    add_state_commands(commands)
    add_sharing_commands(commands)
    add_maintenance_commands(commands)

    return parser


def add_package_commands(commands: argparse._SubParsersAction) -> None:
    p = commands.add_parser('init', help="create the dotfiles directory and config")
    p.add_argument('--force', action='store_true', help="overwrite an existing config")

    p = commands.add_parser('onboard', help="guided setup for a new machine")
    p.add_argument('-e', '--email', help="email for the GitHub SSH key")
    p.add_argument('--template', default='essential', help="template to install (default: essential)")
    p.add_argument('--skip-import', action='store_true', help="don't import existing dotfiles")
    p.add_argument('--skip-github', action='store_true', help="skip GitHub SSH setup")
    p.add_argument('--skip-packages', action='store_true', help="skip package installation")
    add_yes_argument(p)

    p = commands.add_parser('add', help="add packages to the config")
    p.add_argument('packages', nargs='*')
    add_type_argument(p, default='brew')
    add_file_argument(p)

    p = commands.add_parser('remove', help="remove packages from the config")
    p.add_argument('packages', nargs='*')
    add_type_argument(p, default='brew')
    add_file_argument(p)
    p.add_argument('--uninstall', action='store_true', help="also uninstall from the system")
    p.add_argument('--all-brews', action='store_true', help="remove all brews")
    p.add_argument('--all-casks', action='store_true', help="remove all casks")
    p.add_argument('--all-taps', action='store_true', help="remove all taps")
    p.add_argument('--all-stow', action='store_true', help="remove all stow packages")

    p = commands.add_parser('install', help="install packages and stow dotfiles")
    p.add_argument('-o', '--output', default="./Brewfile", help="Brewfile path")
    p.add_argument('--skip-stow', action='store_true', help="don't stow packages")
    add_strategy_arguments(p)
    add_dry_run_argument(p)

    p = commands.add_parser('brewfile', help="generate a Brewfile")
    p.add_argument('-o', '--output', default="./Brewfile", help="Brewfile path")
    p.add_argument('--stdout', action='store_true', help="print instead of writing")

    p = commands.add_parser('import', help="import packages from a Brewfile")
    p.add_argument('brewfile')
    p.add_argument('--replace', action='store_true', help="replace instead of merging")

    p = commands.add_parser('list', help="list configured packages")
    add_type_argument(p)
    p.add_argument('--json', action='store_true', help="output as JSON")
    p.add_argument('--count', action='store_true', help="show only counts")

    p = commands.add_parser('diff', help="compare config with installed packages")
    add_type_argument(p)
    add_verbose_argument(p, help="also list synced packages")

    p = commands.add_parser('scan', help="find installed packages missing from the config")
    p.add_argument('--auto', action='store_true', help="add everything without prompting")
    only = p.add_mutually_exclusive_group()
    only.add_argument('--brews-only', action='store_true')
    only.add_argument('--casks-only', action='store_true')

    p = commands.add_parser('status', help="show installed and stowed state")
    add_type_argument(p)

    p = commands.add_parser('browse', help="browse and edit package lists")
    add_type_argument(p)


def add_stow_commands(commands: argparse._SubParsersAction) -> None:
    p = commands.add_parser('stow', help="symlink packages into the home directory")
    p.add_argument('packages', nargs='*')
    add_directory_arguments(p)
    add_file_argument(p)
    add_dry_run_argument(p, short=True)
    add_verbose_argument(p)
    add_strategy_arguments(p)

    p = commands.add_parser('unstow', help="remove package symlinks")
    p.add_argument('packages', nargs='*')
    add_directory_arguments(p)
    add_file_argument(p)
    p.add_argument('--all', action='store_true', help="unstow every configured package")
    p.add_argument('--keep-config', action='store_true', help="keep packages in the config")
    add_dry_run_argument(p, short=True)
    add_verbose_argument(p)

    p = commands.add_parser('restow', help="re-link packages")
    p.add_argument('packages', nargs='*')
    add_directory_arguments(p)
    add_file_argument(p)
    p.add_argument('--all', action='store_true', help="restow every configured package")
    add_dry_run_argument(p, short=True)
    add_verbose_argument(p)
    add_strategy_arguments(p)

    p = commands.add_parser('private', help="link a private file into a package")
    p.add_argument('package')
    p.add_argument('filename')

    p = commands.add_parser('adopt', help="import loose home dotfiles into packages")
    p.add_argument('dotfiles', nargs='*')
    p.add_argument('-p', '--package', help="package for every dotfile")
    p.add_argument('--stow', action='store_true', help="stow the packages afterwards")
    add_yes_argument(p)


def add_state_commands(commands: argparse._SubParsersAction) -> None:
    p = commands.add_parser('snapshot', help="manage config snapshots")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    s = actions.add_parser('create', help="snapshot the current config")
    s.add_argument('-d', '--description', default="")
    actions.add_parser('list', help="list snapshots")
    s = actions.add_parser('show', help="show a snapshot")
    s.add_argument('id')
    s.add_argument('--json', action='store_true')
    s = actions.add_parser('restore', help="restore a snapshot")
    s.add_argument('id')
    s.add_argument('--no-backup', action='store_true', help="don't snapshot the current config first")
    add_yes_argument(s)
    s = actions.add_parser('delete', help="delete a snapshot")
    s.add_argument('id')
    add_yes_argument(s)
    s = actions.add_parser('clean', help="delete old snapshots")
    s.add_argument('--days', type=int, default=30)

    p = commands.add_parser('export', help="export the config as a profile")
    p.add_argument('name')
    p.add_argument('-d', '--description')
    p.add_argument('-o', '--output')
    only = p.add_mutually_exclusive_group()
    only.add_argument('--brews-only', action='store_true')
    only.add_argument('--casks-only', action='store_true')

    p = commands.add_parser('import-profile', help="import a profile")
    p.add_argument('profile')
    p.add_argument('--replace', action='store_true', help="replace instead of merging")

    commands.add_parser('profiles', help="list saved profiles")

    p = commands.add_parser('backup', help="back up the config file")
    p.add_argument('-o', '--output')

    p = commands.add_parser('restore', help="restore the config from a backup")
    p.add_argument('path', nargs='?')
    p.add_argument('--no-backup', action='store_true', help="don't back up the current config first")

    p = commands.add_parser('groups', help="manage package groups")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    actions.add_parser('list', help="list groups")
    s = actions.add_parser('create', help="create a group")
    s.add_argument('name')
    s.add_argument('packages', nargs='+', help="comma-separated package names")
    s = actions.add_parser('add', help="add packages to a group")
    s.add_argument('name')
    s.add_argument('packages', nargs='+')
    s = actions.add_parser('remove', help="remove packages or the whole group")
    s.add_argument('name')
    s.add_argument('packages', nargs='*')
    s = actions.add_parser('show', help="show group members")
    s.add_argument('name')
    s = actions.add_parser('install', help="add group members to the config")
    s.add_argument('name')

    p = commands.add_parser('hooks', help="manage hooks")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    actions.add_parser('list', help="list hooks")
    s = actions.add_parser('add', help="add a hook command")
    s.add_argument('hook_type', help=HOOK_TYPES_HELP)
    s.add_argument('hook_command', metavar='command')
    s = actions.add_parser('remove', help="remove a hook by index")
    s.add_argument('hook_type', help=HOOK_TYPES_HELP)
    s.add_argument('index', type=int)
    s = actions.add_parser('clear', help="remove all hooks of a type")
    s.add_argument('hook_type', help=HOOK_TYPES_HELP)
    s = actions.add_parser('run', help="run hooks of a type")
    s.add_argument('hook_type', help=HOOK_TYPES_HELP)

    p = commands.add_parser('config', help="inspect and edit the config")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    s = actions.add_parser('show', help="show the config")
    s.add_argument('--json', action='store_true')
    s = actions.add_parser('get', help="print a value by dotted key")
    s.add_argument('key')
    s = actions.add_parser('set', help="set a value by dotted key")
    s.add_argument('key')
    s.add_argument('value')
    actions.add_parser('validate', help="validate the config file")


def add_sharing_commands(commands: argparse._SubParsersAction) -> None:
    p = commands.add_parser('sync', help="pull and push the dotfiles repository")
    direction = p.add_mutually_exclusive_group()
    direction.add_argument('--pull', action='store_true', help="only pull")
    direction.add_argument('--push', action='store_true', help="only push")
    p.add_argument('--auto', action='store_true', help="commit without asking")
    p.add_argument('-m', '--message', help="commit message")

    p = commands.add_parser('share', help="share the config")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    s = actions.add_parser('gist', help="upload to a GitHub Gist")
    s.add_argument('-n', '--name')
    s.add_argument('-d', '--description')
    s.add_argument('--author')
    s.add_argument('--tags', help="comma-separated tags")
    s.add_argument('--private', action='store_true', help="create a secret gist")
    s = actions.add_parser('file', help="write a shareable file")
    s.add_argument('path')
    s.add_argument('-n', '--name')
    s.add_argument('-d', '--description')
    s.add_argument('--author')
    s.add_argument('--tags', help="comma-separated tags")

    p = commands.add_parser('clone', help="apply a template, gist, or shared file")
    p.add_argument('source', help="template:NAME, gist URL, or file path")
    p.add_argument('--merge', action='store_true', help="merge instead of replacing")
    p.add_argument('--preview', action='store_true', help="only show the packages")
    add_yes_argument(p)

    p = commands.add_parser('discover', help="find shared configs")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    s = actions.add_parser('search', help="search GitHub for shared configs")
    s.add_argument('query', nargs='*')
    s.add_argument('-t', '--tags', help="comma-separated tags")
    actions.add_parser('featured', help="show ready-to-clone templates")
    actions.add_parser('stats', help="count shared configs on GitHub")

    p = commands.add_parser('templates', help="manage config templates")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    actions.add_parser('list', help="list templates")
    s = actions.add_parser('show', help="show a resolved template")
    s.add_argument('name')
    s = actions.add_parser('create', help="create a custom template")
    s.add_argument('name')
    s.add_argument('--from-current', action='store_true', help="seed from the current config")
    s.add_argument('-d', '--description')
    s.add_argument('--author')
    s.add_argument('--tags', help="comma-separated tags")
    s.add_argument('--extends', help="base template")
    s.add_argument('--add-only', action='store_true', help="merge with the base instead of overriding")
    s = actions.add_parser('validate', help="validate a template file")
    s.add_argument('file')
    s = actions.add_parser('apply', help="apply a template")
    s.add_argument('name')
    s.add_argument('--merge', action='store_true', help="merge instead of replacing")
    add_yes_argument(s)

    p = commands.add_parser('github', help="set up GitHub SSH access")
    actions = p.add_subparsers(dest='action', required=True, metavar='action')
    s = actions.add_parser('setup', help="generate and register an SSH key")
    s.add_argument('-e', '--email')
    s.add_argument('--type', default='ed25519', choices=('ed25519', 'rsa', 'ecdsa'), help="key type")
    s.add_argument('--force', action='store_true', help="replace an existing key")
    s.add_argument('--skip-agent', action='store_true', help="don't add the key to ssh-agent")
    actions.add_parser('test', help="test the GitHub SSH connection")


def add_maintenance_commands(commands: argparse._SubParsersAction) -> None:
    commands.add_parser('doctor', help="check the setup for problems")

    p = commands.add_parser('update', aliases=['upgrade'], help="upgrade outdated packages")
    p.add_argument('packages', nargs='*')
    p.add_argument('--brew-only', action='store_true', help="only update Homebrew itself")
    p.add_argument('--skip-brew-update', action='store_true', help="don't refresh the package index")
    p.add_argument('--no-snapshot', action='store_true', help="don't snapshot the config first")
    add_dry_run_argument(p)

    p = commands.add_parser('cleanup', help="remove old versions and caches")
    p.add_argument('--cache-only', action='store_true', help="only clear the download cache")
    add_dry_run_argument(p)


# ============================================================
# Main
# ============================================================

def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch the requested command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # Initialize configuration
    config = Config(config_path=args.config, dotfiles_dir=args.dotfiles_dir)
    config.dryrun = args.dry_run
    config.verbose = args.verbose
    config.assume_yes = args.assume_yes
    output.VERBOSE = config.verbose

    # Dispatch command
    try:
        COMMANDS[args.command](config, args)
    except subprocess.CalledProcessError as e:
        sys.exit(e.returncode)
    except KeyboardInterrupt:
        print_info("\nInterrupted")
        sys.exit(130)
    except Exception as e:
        print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
