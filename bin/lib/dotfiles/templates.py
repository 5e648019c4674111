"""Built-in and custom config templates."""

# ============================================================
# Imports
# ============================================================

import json
from pathlib import Path
from typing import Any

from .config import Config, load_json, write_json
from .errors import ConfigError, TemplateError
from .models import DotfilesConfig, PackageType, SharedConfig, ShareMetadata, merge_unique


# ============================================================
# Built-in Templates
# ============================================================

BUILTIN_TEMPLATES: dict[str, dict[str, Any]] = {
    "essential": {
        "taps": ["homebrew/cask-fonts"],
        "brews": [
            "git", "curl", "wget", "tree", "jq", "stow", "gh",
            "starship", "neovim", "tmux", "fzf", "ripgrep",
            "bat", "eza", "zoxide",
        ],
        "casks": [
            "visual-studio-code", "ghostty", "raycast",
            "rectangle", "obsidian", "1password",
            "font-jetbrains-mono-nerd-font",
        ],
        "stow": ["vim", "zsh", "tmux", "starship", "git"],
        "hooks": {
            "pre_install": ["brew update"],
            "post_install": ["echo '✅ Installation complete! Run dotfiles stow to symlink your config files.'"],
            "pre_stow": ["echo '🔗 Creating symlinks...'"],
            "post_stow": ["echo '✅ Dotfiles stowed successfully!'"],
        },
        "package_configs": {
            "starship": {"post_install": [
                "echo 'eval \"$(starship init bash)\"' >> ~/.bashrc",
                "echo 'eval \"$(starship init zsh)\"' >> ~/.zshrc",
            ]},
            "zoxide": {"post_install": [
                "echo 'eval \"$(zoxide init bash)\"' >> ~/.bashrc",
                "echo 'eval \"$(zoxide init zsh)\"' >> ~/.zshrc",
            ]},
            "fzf": {"post_install": [
                "$(brew --prefix)/opt/fzf/install --key-bindings --completion --no-update-rc",
            ]},
            "neovim": {"post_install": [
                "mkdir -p ~/.config/nvim",
                "echo '-- Neovim configuration will be managed via stow' > ~/.config/nvim/init.lua",
            ]},
            "tmux": {"post_install": [
                "git clone https://github.com/tmux-plugins/tpm ~/.tmux/plugins/tpm || echo 'TPM already installed'",
            ]},
        },
        "metadata": {
            "name": "Essential Developer Setup",
            "description": "Complete modern developer setup with CLI tools, shell enhancements, "
                           "and essential apps with automated post-install configuration",
            "author": "Dotfiles Manager",
            "category": "developer",
            "tags": ["essential", "developer", "productivity", "shell", "cli"],
            "version": "1.0.0",
        },
    },
    "minimal": {
        "brews": ["git", "curl", "stow", "neovim"],
        "stow": ["git", "zsh"],
        "metadata": {
            "name": "Minimal Setup",
            "description": "Just enough to clone and stow your dotfiles",
            "author": "Dotfiles Manager",
            "category": "minimal",
            "tags": ["minimal"],
            "version": "1.0.0",
        },
    },
    "developer": {
        "extends": "essential",
        "add_only": True,
        "brews": ["node", "python", "go", "rust", "docker", "lazygit", "direnv"],
        "casks": ["docker", "iterm2"],
        "metadata": {
            "name": "Full Developer Setup",
            "description": "Essential setup plus language toolchains and containers",
            "author": "Dotfiles Manager",
            "category": "developer",
            "tags": ["developer", "languages", "containers"],
            "version": "1.0.0",
        },
    },
}


# ============================================================
# Loading
# ============================================================

def template_path(config: Config, name: str) -> Path:
    return config.templates_dir / f"{name}.json"


def list_template_names(config: Config) -> list[str]:
    """Return built-in and custom template names, sorted."""
    names = set(BUILTIN_TEMPLATES)
    if config.templates_dir.is_dir():
        names.update(path.stem for path in config.templates_dir.glob("*.json"))
    return sorted(names)


def load_template(config: Config, name: str) -> SharedConfig:
    """
    Load a template without resolving inheritance.

    Custom templates in the templates directory take precedence over
    built-ins with the same name.
    """
    path = template_path(config, name)
    if path.exists():
        try:
            return SharedConfig.from_dict(load_json(path))
        except json.JSONDecodeError as e:
            raise TemplateError(f"Error parsing template {path}: {e}") from e

    if name in BUILTIN_TEMPLATES:
        return SharedConfig.from_dict(BUILTIN_TEMPLATES[name])

    raise TemplateError(f"Template not found: {name}")


def resolve_template(config: Config, name: str, _seen: tuple[str, ...] = ()) -> SharedConfig:
    """
    Load a template and merge in everything it extends.

    With add_only, base and own package lists are merged. Otherwise each
    non-empty own list replaces the base list. Hooks and package configs
    from the base are kept unless overridden.

    Raises:
        TemplateError: If a template is missing or extends itself
    """
    if name in _seen:
        raise TemplateError(f"Template inheritance cycle: {' -> '.join(_seen + (name,))}")

    template = load_template(config, name)
    if not template.extends:
        return template

    base = resolve_template(config, template.extends, _seen + (name,))
    merged = base.config.copy()
    own = template.config

    for kind in PackageType:
        own_items = own.packages(kind)
        if template.add_only:
            merged.packages(kind)[:] = merge_unique(merged.packages(kind), own_items)
        elif own_items:
            merged.packages(kind)[:] = list(own_items)

    for hook_type, commands in own.hooks.items():
        if template.add_only:
            merged.hooks[hook_type] = merge_unique(merged.hooks.get(hook_type, []), commands)
        elif commands:
            merged.hooks[hook_type] = list(commands)
    merged.package_configs.update(own.package_configs)
    merged.groups.update(own.groups)

    return SharedConfig(config=merged, metadata=template.metadata, extends=template.extends,
                        add_only=template.add_only)


# ============================================================
# Validation
# ============================================================

def validate_template(data: Any, config: Config | None = None) -> list[str]:
    """
    Validate a template or shared config document.

    Returns:
        A list of problems; empty when valid
    """
    try:
        template = SharedConfig.from_dict(data)
    except ConfigError as e:
        return [str(e)]

    errors: list[str] = []
    if not template.metadata.name:
        errors.append("template name is required")
    if not template.metadata.description:
        errors.append("template description is required")
    if not template.metadata.author:
        errors.append("template author is required")

    for kind in PackageType:
        for package in template.config.packages(kind):
            if not package.strip():
                errors.append(f"empty {kind.value} package name found")
            elif any(ch.isspace() for ch in package):
                errors.append(f"invalid package name (contains spaces): {package}")

    if template.extends and config is not None:
        if template.extends not in list_template_names(config):
            errors.append(f"base template '{template.extends}' not found")

    return errors


# ============================================================
# Creation and Application
# ============================================================

def create_template(
    config: Config,
    name: str,
    metadata: ShareMetadata,
    source: DotfilesConfig | None = None,
    extends: str = "",
    add_only: bool = False,
) -> Path:
    """Write a custom template file and return its path."""
    path = template_path(config, name)
    if path.exists():
        raise TemplateError(f"Template '{name}' already exists at {path}")
    if extends and extends not in list_template_names(config):
        raise TemplateError(f"Base template '{extends}' not found")

    template = SharedConfig(
        config=source.copy() if source else DotfilesConfig(),
        metadata=metadata,
        extends=extends,
        add_only=add_only,
    )
    if not config.dryrun:
        write_json(path, template.to_dict())
    return path


def apply_config(target: DotfilesConfig, source: DotfilesConfig, merge: bool) -> DotfilesConfig:
    """
    Combine a config document with incoming packages.

    With merge, lists are merged uniquely and maps are updated. Otherwise
    the incoming package lists, hooks, and package configs replace the
    current ones; groups are kept.
    """
    result = target.copy()
    for kind in PackageType:
        incoming = source.packages(kind)
        if merge:
            result.packages(kind)[:] = merge_unique(result.packages(kind), incoming)
        else:
            result.packages(kind)[:] = list(incoming)

    if merge:
        for hook_type, commands in source.hooks.items():
            result.hooks[hook_type] = merge_unique(result.hooks.get(hook_type, []), commands)
        for package, settings in source.package_configs.items():
            result.package_configs.setdefault(package, {}).update(settings)
        for group, members in source.groups.items():
            result.groups[group] = merge_unique(result.groups.get(group, []), members)
    else:
        result.hooks = {name: list(cmds) for name, cmds in source.hooks.items()}
        result.package_configs = source.copy().package_configs
    return result
