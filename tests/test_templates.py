"""Tests for built-in and custom templates."""

import pytest

from dotfiles.config import write_json
from dotfiles.errors import TemplateError
from dotfiles.models import DotfilesConfig, ShareMetadata
from dotfiles.templates import (
    BUILTIN_TEMPLATES,
    apply_config,
    create_template,
    list_template_names,
    load_template,
    resolve_template,
    validate_template,
)


class TestBuiltinTemplates:
    def test_builtins_are_listed(self, config):
        assert list_template_names(config) == ["developer", "essential", "minimal"]

    @pytest.mark.parametrize("name", sorted(BUILTIN_TEMPLATES))
    def test_builtins_are_valid(self, config, name):
        assert validate_template(BUILTIN_TEMPLATES[name], config) == []

    def test_essential(self, config):
        template = load_template(config, "essential")

        assert "stow" in template.config.brews
        assert template.config.hooks["pre_install"] == ["brew update"]
        assert template.metadata.name == "Essential Developer Setup"

    def test_developer_extends_essential(self, config):
        essential = resolve_template(config, "essential")
        developer = resolve_template(config, "developer")

        assert developer.config.brews[:len(essential.config.brews)] == essential.config.brews
        assert "lazygit" in developer.config.brews
        assert developer.config.casks[-2:] == ["docker", "iterm2"]
        assert developer.config.stow == essential.config.stow
        assert developer.config.post_install_hooks("fzf") == essential.config.post_install_hooks("fzf")
        assert developer.metadata.name == "Full Developer Setup"

    def test_unknown_template(self, config):
        with pytest.raises(TemplateError, match="Template not found"):
            load_template(config, "gaming")


class TestCustomTemplates:
    def write(self, config, name, data):
        write_json(config.templates_dir / f"{name}.json", data)

    def test_custom_overrides_builtin(self, config):
        self.write(config, "minimal", {"brews": ["git"], "metadata": {"name": "Mine"}})

        assert load_template(config, "minimal").config.brews == ["git"]

    def test_extends_replaces_non_empty_lists(self, config):
        self.write(config, "work", {"extends": "minimal", "brews": ["awscli"]})

        template = resolve_template(config, "work")

        assert template.config.brews == ["awscli"]
        assert template.config.stow == ["git", "zsh"]

    def test_cycle_is_detected(self, config):
        self.write(config, "a", {"extends": "b"})
        self.write(config, "b", {"extends": "a"})

        with pytest.raises(TemplateError, match="cycle: a -> b -> a"):
            resolve_template(config, "a")

    def test_invalid_json(self, config):
        config.templates_dir.mkdir(parents=True)
        (config.templates_dir / "broken.json").write_text("{")

        with pytest.raises(TemplateError, match="Error parsing template"):
            load_template(config, "broken")

    def test_create_template(self, config):
        source = DotfilesConfig(brews=["git"], stow=["zsh"])
        metadata = ShareMetadata(name="Laptop", description="My laptop", author="me")

        path = create_template(config, "laptop", metadata, source, extends="minimal", add_only=True)

        assert path == config.templates_dir / "laptop.json"
        assert "laptop" in list_template_names(config)
        resolved = resolve_template(config, "laptop")
        assert resolved.config.brews == ["git", "curl", "stow", "neovim"]
        assert resolved.config.stow == ["git", "zsh"]

    def test_create_template_errors(self, config):
        metadata = ShareMetadata(name="x", description="x", author="x")
        create_template(config, "laptop", metadata)

        with pytest.raises(TemplateError, match="already exists"):
            create_template(config, "laptop", metadata)
        with pytest.raises(TemplateError, match="Base template 'nope' not found"):
            create_template(config, "desktop", metadata, extends="nope")

    def test_create_template_dry_run(self, config):
        config.dryrun = True
        create_template(config, "laptop", ShareMetadata(name="x"))
        assert not (config.templates_dir / "laptop.json").exists()


class TestValidateTemplate:
    def test_problems_are_reported(self, config):
        errors = validate_template({
            "brews": ["git", "bad name", ""],
            "extends": "missing",
            "metadata": {"name": "x"},
        }, config)

        assert errors == [
            "template description is required",
            "template author is required",
            "invalid package name (contains spaces): bad name",
            "empty brew package name found",
            "base template 'missing' not found",
        ]

    def test_shape_errors(self):
        assert validate_template({"brews": "git"})
        assert validate_template("not an object")


class TestApplyConfig:
    def test_merge(self):
        target = DotfilesConfig(brews=["git"], hooks={"pre_install": ["a"]}, groups={"cli": ["git"]})
        source = DotfilesConfig(brews=["jq", "git"], hooks={"pre_install": ["b"]}, groups={"cli": ["jq"]})

        result = apply_config(target, source, merge=True)

        assert result.brews == ["git", "jq"]
        assert result.hooks == {"pre_install": ["a", "b"]}
        assert result.groups == {"cli": ["git", "jq"]}
        assert target.brews == ["git"]

    def test_replace_keeps_groups(self):
        target = DotfilesConfig(brews=["git"], casks=["firefox"], groups={"cli": ["git"]},
                                hooks={"pre_install": ["a"]})
        source = DotfilesConfig(brews=["jq"], package_configs={"jq": {"post_install": ["x"]}})

        result = apply_config(target, source, merge=False)

        assert result.brews == ["jq"]
        assert result.casks == []
        assert result.hooks == {}
        assert result.groups == {"cli": ["git"]}
        assert result.package_configs == {"jq": {"post_install": ["x"]}}
