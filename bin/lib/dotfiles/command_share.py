"""Share and clone command implementations."""

# ============================================================
# Imports
# ============================================================

import argparse
import json
import socket
from datetime import datetime
from pathlib import Path

from .config import Config, load_json, write_json
from .errors import ConfigError, GistError
from .gist import GistClient, is_gist_reference
from .models import PackageType, SharedConfig, ShareMetadata
from .output import confirm, print_header, print_info, print_key_value, print_success
from .templates import apply_config, list_template_names, resolve_template


TEMPLATE_PREFIX = "template:"


# ============================================================
# Entry Points
# ============================================================

def execute_share(config: Config, args: argparse.Namespace) -> None:
    """Dispatch share subcommands."""
    actions = {
        "gist": share_gist,
        "file": share_file,
    }
    actions[args.action](config, args)


def execute_clone(config: Config, args: argparse.Namespace) -> None:
    """Load a shared config from a template, gist, or file and apply it."""
    shared = load_shared_config(config, args.source)

    if args.preview:
        print_shared_config(shared)
        return

    apply_shared_config(config, shared, merge=args.merge, assume_yes=config.assume_yes or args.yes)


# ============================================================
# Share Actions
# ============================================================

def share_gist(config: Config, args: argparse.Namespace) -> None:
    shared = build_shared_config(config, args.name, args.description, author=args.author, tags=args.tags)
    client = GistClient()
    if not client.token:
        raise GistError("GITHUB_TOKEN is required to create a gist")

    print_info(f"📤 Uploading '{shared.metadata.name}' to GitHub Gist...")
    if config.dryrun:
        print_info("[dry-run] Gist not created")
        return

    _, url = client.create(
        description=f"Dotfiles Config: {shared.metadata.name}",
        content=json.dumps(shared.to_dict(), indent=2),
        public=not args.private,
    )
    print_success("✅ Shared configuration")
    print_key_value("URL", url)
    print_info(f"\n💡 Clone it with: dotfiles clone {url}")


def share_file(config: Config, args: argparse.Namespace) -> None:
    shared = build_shared_config(config, args.name, args.description, author=args.author, tags=args.tags)
    path = Path(args.path).expanduser()
    if not config.dryrun:
        write_json(path, shared.to_dict())
    print_success(f"✅ Exported shareable config to {path}")
    print_key_value("Packages", str(shared.config.total_packages()))


def build_shared_config(
    config: Config,
    name: str | None,
    description: str | None,
    author: str | None = None,
    tags: str | None = None,
) -> SharedConfig:
    """Wrap the current config with share metadata."""
    metadata = ShareMetadata(
        name=name or f"{socket.gethostname()} dotfiles",
        description=description or "Shared dotfiles configuration",
        author=author or "",
        tags=[tag.strip() for tag in (tags or "").split(',') if tag.strip()],
        created_at=datetime.now().isoformat(timespec='seconds'),
    )
    return SharedConfig(config=config.load(), metadata=metadata)


# ============================================================
# Loading and Applying
# ============================================================

def load_shared_config(config: Config, source: str) -> SharedConfig:
    """
    Resolve a clone source.

    Accepts 'template:<name>', a gist URL, a file path, or a bare
    template name, in that order.
    """
    if source.startswith(TEMPLATE_PREFIX):
        return resolve_template(config, source[len(TEMPLATE_PREFIX):])

    if is_gist_reference(source):
        print_info("⬇️  Downloading config from GitHub Gist...")
        return SharedConfig.from_dict(GistClient().fetch_config(source))

    path = Path(source).expanduser()
    if path.is_file():
        try:
            return SharedConfig.from_dict(load_json(path))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if source in list_template_names(config):
        return resolve_template(config, source)

    raise ConfigError(f"Unknown config source: {source}")


def apply_shared_config(config: Config, shared: SharedConfig, merge: bool, assume_yes: bool = False) -> bool:
    """
    Show a shared config and, once confirmed, merge it into or replace the current one.

    Returns:
        True when the config was applied
    """
    print_shared_config(shared)

    mode = "Merge into" if merge else "Replace"
    if not confirm(f"{mode} your current configuration?", default=False, assume_yes=assume_yes):
        print_info("Cancelled")
        return False

    updated = apply_config(config.load(), shared.config, merge=merge)
    if not config.dryrun:
        config.save(updated)

    print_success(f"✅ Applied '{shared.metadata.name or 'config'}' ({'merged' if merge else 'replaced'})")
    print_key_value("Total packages", str(updated.total_packages()))
    return True


# ============================================================
# Output
# ============================================================

def print_shared_config(shared: SharedConfig) -> None:
    metadata = shared.metadata
    print_header(f"📦 {metadata.name or 'Shared config'}")
    if metadata.description:
        print_key_value("Description", metadata.description)
    if metadata.author:
        print_key_value("Author", metadata.author)
    if metadata.tags:
        print_key_value("Tags", ", ".join(metadata.tags))
    if shared.extends:
        print_key_value("Extends", shared.extends)

    for kind in PackageType:
        packages = shared.config.packages(kind)
        if packages:
            print_info(f"\n{kind.key.capitalize()} ({len(packages)}):")
            print_info("  " + ", ".join(packages))
