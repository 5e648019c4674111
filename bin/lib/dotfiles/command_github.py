"""GitHub SSH setup command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
import os
import subprocess
from pathlib import Path

from .config import Config
from .errors import ConfigError
from .models import PackageType
from .output import (
    ask,
    confirm,
    print_header,
    print_info,
    print_key_value,
    print_success,
    print_warning,
)
from .process import command_exists, run_command
from .stow import link_private_file


SSH_PACKAGE = "ssh"
GITHUB_SSH_HOST = "git@github.com"
GITHUB_KEYS_URL = "https://github.com/settings/ssh/new"
CLIPBOARD_COMMANDS = (
    ['pbcopy'],
    ['xclip', '-selection', 'clipboard'],
    ['xsel', '--clipboard', '--input'],
)


# ============================================================
# Entry Point
# ============================================================

def execute_github(config: Config, args: argparse.Namespace) -> None:
    """Dispatch github subcommands."""
    actions = {
        "setup": github_setup,
        "test": github_test,
    }
    actions[args.action](config, args)


# ============================================================
# Actions
# ============================================================

def github_setup(config: Config, args: argparse.Namespace) -> None:
    """Generate an SSH key in the private directory and link it via the ssh package."""
    email = args.email or ask("Enter your GitHub email: ")
    if not email:
        raise ConfigError("Email is required for SSH key generation")

    print_header("🔐 Setting up GitHub SSH authentication")
    print_key_value("Email", email)
    print_key_value("Key type", args.type)

    ssh_dir = config.private_dir / ".ssh"
    key_path = ssh_dir / f"id_{args.type}"
    public_key_path = key_path.with_name(key_path.name + ".pub")

    if key_path.exists() and not args.force:
        print_info(f"🔑 SSH key already exists at {key_path}")
        if not confirm("Create a new key?", default=False, assume_yes=config.assume_yes):
            print_success("✅ Using existing SSH key")
            show_public_key(public_key_path)
            return

    generate_key(config, key_path, args.type, email)
    if not args.skip_agent:
        add_to_agent(config, key_path)
    setup_ssh_package(config)

    if config.dryrun:
        return
    show_public_key(public_key_path)


def github_test(config: Config, args: argparse.Namespace) -> None:
    """Check SSH authentication against GitHub."""
    print_info("🧪 Testing GitHub SSH connection...")
    # ssh -T exits 1 even when authentication succeeds
    result = subprocess.run(['ssh', '-T', GITHUB_SSH_HOST], capture_output=True, text=True, check=False)
    output = (result.stdout + result.stderr).strip()

    if result.returncode == 0 or "successfully authenticated" in output:
        print_success("✅ GitHub SSH connection successful!")
        print_key_value("Response", output)
        return

    print_info(output)
    print_info(f"\n💡 Make sure you've added your SSH key to GitHub: {GITHUB_KEYS_URL}")
    raise ConfigError("GitHub SSH connection failed")


# ============================================================
# SSH Operations
# ============================================================

def generate_key(config: Config, key_path: Path, key_type: str, email: str) -> None:
    print_info("🔨 Generating SSH key...")
    if not config.dryrun:
        key_path.parent.mkdir(parents=True, exist_ok=True)
        key_path.parent.chmod(0o700)
        # ssh-keygen prompts before overwriting
        for path in (key_path, key_path.with_name(key_path.name + ".pub")):
            if path.exists():
                path.unlink()

    run_command(config, ['ssh-keygen', '-t', key_type, '-C', email, '-f', str(key_path), '-N', ''])
    if config.dryrun:
        return

    key_path.chmod(0o600)
    key_path.with_name(key_path.name + ".pub").chmod(0o644)
    print_success("✅ SSH key generated")
    print_key_value("Private key", str(key_path))


def add_to_agent(config: Config, key_path: Path) -> None:
    """Add the key to a running ssh-agent; failures only warn."""
    if not os.environ.get("SSH_AUTH_SOCK"):
        print_warning("⚠️  No ssh-agent running; skipping ssh-add")
        return
    try:
        run_command(config, ['ssh-add', str(key_path)])
    except subprocess.CalledProcessError as e:
        print_warning(f"⚠️  Could not add key to ssh-agent (exit {e.returncode})")
        return
    if not config.dryrun:
        print_success("✅ Key added to ssh-agent")


def setup_ssh_package(config: Config) -> None:
    """Link private/.ssh into the ssh stow package and track the package."""
    print_info("🔗 Setting up SSH stow package...")
    link = link_private_file(config, SSH_PACKAGE, ".ssh")
    if link is None:
        print_warning("⚠️  Private .ssh directory is missing; stow package not linked")
        return

    dotfiles_config = config.load()
    if dotfiles_config.add_package(PackageType.STOW, SSH_PACKAGE) and not config.dryrun:
        config.save(dotfiles_config)
    print_success(f"✅ Linked {link} -> {os.readlink(link) if link.is_symlink() else link}")
    print_info(f"   💡 Run 'dotfiles stow {SSH_PACKAGE}' to link SSH keys into your home directory")


def show_public_key(public_key_path: Path) -> None:
    if not public_key_path.exists():
        print_warning(f"⚠️  Public key not found at {public_key_path}")
        return

    public_key = public_key_path.read_text(encoding='utf-8')
    print_header("📋 Your public SSH key")
    print_info("=" * 51)
    print_info(public_key.rstrip())
    print_info("=" * 51)

    print_info("\n📌 Next steps:")
    print_info(f"1. Add the key at {GITHUB_KEYS_URL}")
    print_info(f"2. Run: dotfiles stow {SSH_PACKAGE}")
    print_info("3. Test with: dotfiles github test")

    if copy_to_clipboard(public_key):
        print_success("\n📋 Public key copied to clipboard!")


def copy_to_clipboard(text: str) -> bool:
    """Copy text with the first available clipboard utility."""
    for args in CLIPBOARD_COMMANDS:
        if not command_exists(args[0]):
            continue
        result = subprocess.run(args, input=text, text=True, check=False)
        return result.returncode == 0
    return False
