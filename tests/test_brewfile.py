"""Tests for Brewfile generation and parsing."""

from dotfiles.brewfile import generate_brewfile, parse_brewfile, parse_brewfile_line
from dotfiles.models import DotfilesConfig


class TestGenerateBrewfile:
    def test_sections_in_order(self):
        dotfiles_config = DotfilesConfig(taps=["homebrew/cask-fonts"], brews=["git", "jq"], casks=["firefox"])

        assert generate_brewfile(dotfiles_config) == (
            'tap "homebrew/cask-fonts"\n'
            '\n'
            'brew "git"\n'
            'brew "jq"\n'
            '\n'
            'cask "firefox"\n'
        )

    def test_empty_sections_are_skipped(self):
        dotfiles_config = DotfilesConfig(casks=["firefox"])
        assert generate_brewfile(dotfiles_config) == 'cask "firefox"\n'

    def test_empty_config(self):
        assert generate_brewfile(DotfilesConfig()) == ""

    def test_stow_packages_are_not_included(self):
        dotfiles_config = DotfilesConfig(brews=["git"], stow=["zsh"])
        assert "zsh" not in generate_brewfile(dotfiles_config)


class TestParseBrewfile:
    def test_parse(self):
        text = """
# Taps
tap "homebrew/cask-fonts"
tap 'user/tools'

brew "git"
brew "neovim", args: ["HEAD"]
brew "git"
cask "firefox"
mas "Xcode", id: 497799835
vscode "ms-python.python"
"""
        taps, brews, casks = parse_brewfile(text)

        assert taps == ["homebrew/cask-fonts", "user/tools"]
        assert brews == ["git", "neovim"]
        assert casks == ["firefox"]

    def test_unquoted_values(self):
        assert parse_brewfile_line("brew wget, link: false") == ("brew", "wget")
        assert parse_brewfile_line("cask  iterm2") == ("cask", "iterm2")

    def test_ignored_lines(self):
        assert parse_brewfile_line("") is None
        assert parse_brewfile_line("   # brew \"git\"") is None
        assert parse_brewfile_line('mas "Xcode", id: 497799835') is None
        assert parse_brewfile_line("brew") is None

    def test_generated_brewfile_parses_back(self):
        dotfiles_config = DotfilesConfig(taps=["a/b"], brews=["git"], casks=["firefox"])
        assert parse_brewfile(generate_brewfile(dotfiles_config)) == (["a/b"], ["git"], ["firefox"])
