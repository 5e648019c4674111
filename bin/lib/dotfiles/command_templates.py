"""Templates command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
import json
from datetime import datetime
from pathlib import Path

from .command_share import apply_shared_config, print_shared_config
from .config import Config, load_json
from .errors import TemplateError
from .models import ShareMetadata
from .output import print_header, print_info, print_item, print_success
from .templates import (
    BUILTIN_TEMPLATES,
    create_template,
    list_template_names,
    load_template,
    resolve_template,
    template_path,
    validate_template,
)


# ============================================================
# Entry Point
# ============================================================

def execute_templates(config: Config, args: argparse.Namespace) -> None:
    """Dispatch templates subcommands."""
    actions = {
        "list": templates_list,
        "show": templates_show,
        "create": templates_create,
        "validate": templates_validate,
        "apply": templates_apply,
    }
    actions[args.action](config, args)


# ============================================================
# Actions
# ============================================================

def templates_list(config: Config, args: argparse.Namespace) -> None:
    names = list_template_names(config)
    print_header(f"📋 Templates ({len(names)})")
    for name in names:
        template = load_template(config, name)
        source = "custom" if template_path(config, name).exists() else "built-in"
        suffix = f", extends {template.extends}" if template.extends else ""
        print_info(f"  {name:<16} {template.metadata.description}  ({source}{suffix})")


def templates_show(config: Config, args: argparse.Namespace) -> None:
    print_shared_config(resolve_template(config, args.name))


def templates_create(config: Config, args: argparse.Namespace) -> None:
    """Create a custom template, optionally seeded from the current config."""
    metadata = ShareMetadata(
        name=args.name,
        description=args.description or f"Custom template {args.name}",
        author=args.author or "",
        tags=[tag.strip() for tag in (args.tags or "").split(',') if tag.strip()],
        created_at=datetime.now().isoformat(timespec='seconds'),
    )
    source = config.load() if args.from_current else None
    path = create_template(config, args.name, metadata, source=source,
                           extends=args.extends or "", add_only=args.add_only)
    print_success(f"✅ Created template '{args.name}' at {path}")


def templates_validate(config: Config, args: argparse.Namespace) -> None:
    """Validate a template file; raises when problems are found."""
    path = Path(args.file).expanduser()
    if not path.is_file():
        raise TemplateError(f"Template file not found: {path}")
    try:
        data = load_json(path)
    except json.JSONDecodeError as e:
        raise TemplateError(f"Invalid JSON in {path}: {e}") from e

    errors = validate_template(data, config)
    if errors:
        for error in errors:
            print_item(error, ok=False)
        raise TemplateError(f"Template {path} has {len(errors)} problems")
    print_success(f"✅ Template {path} is valid")


def templates_apply(config: Config, args: argparse.Namespace) -> None:
    if args.name not in list_template_names(config):
        available = ", ".join(sorted(BUILTIN_TEMPLATES))
        raise TemplateError(f"Template not found: {args.name} (built-in: {available})")
    apply_shared_config(config, resolve_template(config, args.name), merge=args.merge,
                        assume_yes=config.assume_yes or args.yes)
