"""Discover command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse

from .config import Config
from .gist import GistClient
from .output import print_header, print_info, print_key_value
from .templates import list_template_names, load_template


MAX_RESULTS = 10


# ============================================================
# Entry Point
# ============================================================

def execute_discover(config: Config, args: argparse.Namespace) -> None:
    """Dispatch discover subcommands."""
    actions = {
        "search": discover_search,
        "featured": discover_featured,
        "stats": discover_stats,
    }
    actions[args.action](config, args)


# ============================================================
# Actions
# ============================================================

def discover_search(config: Config, args: argparse.Namespace) -> None:
    """Search GitHub for shared config files matching the query and tags."""
    tags = [tag.strip() for tag in (args.tags or "").split(',') if tag.strip()]
    terms = " ".join([*args.query, *tags])

    print_info(f"🔍 Searching for configurations: {terms or 'all'}")
    total, items = GistClient().search(terms)

    if not items:
        print_info("📭 No configurations found matching your criteria")
        print_info("\n💡 Try:")
        print_info("  dotfiles discover search web-dev")
        print_info("  dotfiles discover search --tags python,data")
        print_info("  dotfiles discover featured")
        return

    print_header(f"📋 Found {total} configurations")
    for number, item in enumerate(items[:MAX_RESULTS], start=1):
        repository = item.get("repository") or {}
        owner = (repository.get("owner") or {}).get("login", "")
        print_info(f"{number}. 📝 {repository.get('full_name', '')}/{item.get('path', item.get('name', ''))}")
        if repository.get("description"):
            print_info(f"   📄 {repository['description']}")
        if owner:
            print_info(f"   👤 Author: {owner}")
        print_info(f"   🔗 URL: {item.get('html_url', '')}")

    if total > MAX_RESULTS:
        print_info(f"\n... and {total - MAX_RESULTS} more results")
        print_info("🔍 Use more specific search terms to narrow results")


def discover_featured(config: Config, args: argparse.Namespace) -> None:
    """List the built-in and custom templates as ready-to-clone configs."""
    print_header("⭐ Featured Configurations")
    for number, name in enumerate(list_template_names(config), start=1):
        metadata = load_template(config, name).metadata
        print_info(f"{number}. 📝 {metadata.name or name}")
        if metadata.description:
            print_info(f"   📄 {metadata.description}")
        if metadata.author:
            print_info(f"   👤 Author: {metadata.author}")
        if metadata.tags:
            print_info(f"   🏷️  Tags: {', '.join(metadata.tags)}")
        print_info(f"   📦 Clone: dotfiles clone template:{name}")

    print_info("\n💡 Tips:")
    print_info("  • Preview before applying: dotfiles clone template:<name> --preview")
    print_info("  • Keep your packages: dotfiles clone template:<name> --merge")
    print_info("  • Share your own config: dotfiles share gist")


def discover_stats(config: Config, args: argparse.Namespace) -> None:
    total, _ = GistClient().search(per_page=1)
    print_header("📊 Community Sharing Statistics")
    print_key_value("Shared configurations", str(total))
