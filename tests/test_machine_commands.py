"""Tests for commands that compare, upgrade, and set up the local machine."""

import json
import os
import stat
import subprocess
import sys
from pathlib import Path

import pytest

from dotfiles.cli import main


def run(*argv):
    try:
        main(list(argv))
    except SystemExit as e:
        return e.code or 0
    return 0


@pytest.fixture
def macos(monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")


@pytest.fixture
def answers(monkeypatch):
    """Queue answers for interactive prompts; EOF once exhausted."""
    queue = []

    def fake_input(prompt):
        if not queue:
            raise EOFError
        return queue.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return queue


class TestDiffScanStatus:
    def test_diff(self, env, commands, which, macos, capsys):
        env.write_config({"brews": ["git", "jq"]})
        commands.respond(['brew', 'list', '--formula'], stdout="git\nwget\n")

        assert run("diff") == 0

        out = capsys.readouterr().out
        assert "Missing (1)" in out
        assert "Extra (1)" in out
        assert "1 missing, 1 extra" in out

    def test_diff_in_sync(self, env, commands, which, macos, capsys):
        env.write_config({"brews": ["romkatv/powerlevel10k/powerlevel10k"]})
        commands.respond(['brew', 'list', '--formula'], stdout="powerlevel10k\n")

        run("diff", "-t", "brew", "-v")

        out = capsys.readouterr().out
        assert "Everything is in sync" in out
        assert "romkatv/powerlevel10k/powerlevel10k" in out

    def test_diff_stow_needs_no_manager(self, env, commands, which, capsys):
        which.clear()
        env.write_config({"stow": ["zsh"]})

        assert run("diff", "--type", "stow") == 0
        assert "Missing (1)" in capsys.readouterr().out

    def test_scan_auto_adds_sorted(self, env, commands, which, macos):
        env.write_config({"brews": ["zsh"]})
        commands.respond(['brew', 'list', '--formula'], stdout="zsh\nwget\nbat\n")
        commands.respond(['brew', 'list', '--cask'], stdout="firefox\n")

        run("scan", "--auto")

        data = env.read_config()
        assert data["brews"] == ["bat", "wget", "zsh"]
        assert data["casks"] == ["firefox"]

    def test_scan_select(self, env, commands, which, macos, answers):
        commands.respond(['brew', 'list', '--formula'], stdout="htop\nwget\n")
        answers.extend(["s", "y", "q"])

        run("scan", "--brews-only")

        assert env.read_config()["brews"] == ["htop"]

    def test_scan_none(self, env, commands, which, macos, answers):
        commands.respond(['brew', 'list', '--formula'], stdout="htop\n")
        answers.append("n")

        run("scan")

        assert not env.config.config_path.exists()

    def test_status(self, env, commands, which, macos, capsys):
        env.write_config({"brews": ["git", "jq"], "stow": ["zsh"]})
        commands.respond(['brew', 'list', '--formula'], stdout="git\n")
        package_dir = env.create_package("zsh", {".zshrc": "x"})
        env.create_home_link(".zshrc", str(package_dir / ".zshrc"))

        run("status")

        out = capsys.readouterr().out
        assert "✅ git" in out
        assert "❌ jq (not installed)" in out
        assert "✅ zsh" in out
        assert "2/3 packages ready" in out


class TestProfiles:
    def test_export_and_import(self, env):
        env.write_config({"brews": ["git"], "casks": ["firefox"]})

        run("export", "work", "--brews-only", "-d", "Work laptop")

        profile = json.loads((env.config.profiles_dir / "work.json").read_text())
        assert profile["name"] == "work"
        assert profile["description"] == "Work laptop"
        assert profile["config"]["brews"] == ["git"]
        assert profile["config"]["casks"] == []

        env.write_config({"brews": ["jq"], "casks": ["iterm2"]})
        run("import-profile", "work")
        assert env.read_config()["brews"] == ["jq", "git"]

        run("import-profile", "--replace", "work")
        data = env.read_config()
        assert data["brews"] == ["git"]
        assert data["casks"] == []

    def test_export_to_path(self, env, tmp_path):
        env.write_config({"brews": ["git"]})
        path = tmp_path / "exported.json"

        run("export", "home", "-o", str(path))
        env.write_config({})
        run("import-profile", str(path))

        assert env.read_config()["brews"] == ["git"]

    def test_profiles_listing(self, env, capsys):
        run("profiles")
        assert "No profiles found" in capsys.readouterr().out

        run("export", "desk")
        run("profiles")
        assert "desk" in capsys.readouterr().out

    def test_import_missing(self, env, capsys):
        assert run("import-profile", "nowhere") == 1
        assert "Profile not found" in capsys.readouterr().err

    def test_profile_without_config_section(self, env, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"name": "bad"}))

        assert run("import-profile", str(path)) == 1


class TestUpdateCleanup:
    def test_update(self, env, commands, which, macos):
        env.write_config({"brews": ["git"]})
        commands.respond(['brew', 'outdated', '--quiet'], stdout="git\n")

        assert run("update") == 0

        assert commands.calls == [['brew', 'update'], ['brew', 'outdated', '--quiet'], ['brew', 'upgrade']]
        snapshots = list(env.config.snapshots_dir.glob("*.json"))
        assert len(snapshots) == 1
        assert json.loads(snapshots[0].read_text())["description"] == "Auto-snapshot before update"

    def test_update_selected_packages(self, env, commands, which, macos):
        run("update", "--skip-brew-update", "--no-snapshot", "git")

        assert commands.calls == [['brew', 'outdated', '--quiet'], ['brew', 'upgrade', 'git']]
        assert not env.config.snapshots_dir.exists()

    def test_brew_only_updates_homebrew_itself(self, env, commands, which, macos, capsys):
        commands.respond(['brew', 'outdated', '--quiet'], stdout="git\n")

        assert run("update", "--brew-only", "--no-snapshot") == 0

        assert commands.calls == [['brew', 'update']]
        assert not commands.ran(['brew', 'upgrade'])
        assert "Homebrew update complete" in capsys.readouterr().out

    def test_upgrade_alias(self, env, commands, which, macos):
        commands.respond(['brew', 'outdated', '--quiet'], stdout="git\n")

        assert run("upgrade", "--no-snapshot") == 0

        assert commands.calls == [['brew', 'update'], ['brew', 'outdated', '--quiet'], ['brew', 'upgrade']]

    def test_nothing_outdated(self, env, commands, which, macos, capsys):
        run("update", "--skip-brew-update")

        assert commands.calls == [['brew', 'outdated', '--quiet']]
        assert "up to date" in capsys.readouterr().out

    def test_update_dry_run(self, env, commands, which, macos, capsys):
        env.write_config({"brews": ["git"]})
        commands.respond(['brew', 'outdated', '--quiet'], stdout="git\n")

        run("update", "--dry-run")

        assert commands.calls == [['brew', 'outdated', '--quiet']]
        assert not env.config.snapshots_dir.exists()
        assert "snapshot" not in capsys.readouterr().out

    def test_failed_index_refresh_only_warns(self, env, commands, which, macos):
        commands.respond(['brew', 'update'], returncode=1)

        assert run("update", "--no-snapshot") == 0
        assert commands.ran(['brew', 'outdated'])

    def test_cleanup(self, env, commands, which, macos):
        run("cleanup")
        run("cleanup", "--dry-run", "--cache-only")

        assert commands.calls == [['brew', 'cleanup', '-s', '--prune=all'], ['brew', 'cleanup', '-s', '-n']]


class TestBrowse:
    def test_edit_session(self, env, answers):
        env.write_config({"brews": ["git", "jq", "wget"]})
        answers.extend(["d 2", "d 9", "a htop", "t cask", "a firefox", "x", "q"])

        run("browse")

        data = env.read_config()
        assert data["brews"] == ["git", "wget", "htop"]
        assert data["casks"] == ["firefox"]

    def test_eof_quits_without_saving(self, env, answers):
        run("browse", "--type", "stow")
        assert not env.config.config_path.exists()


class TestGithub:
    def fake_keygen(self, calls):
        def fake_run(args, check=False, **kwargs):
            args = list(args)
            calls.append(args)
            if args[0] == 'ssh-keygen':
                key_path = Path(args[args.index('-f') + 1])
                key_path.write_text("PRIVATE KEY")
                key_path.with_name(key_path.name + ".pub").write_text("ssh-ed25519 AAAAC3 me@example.com\n")
            return subprocess.CompletedProcess(args, 0, "", "")
        return fake_run

    def test_setup(self, env, which, monkeypatch, capsys):
        calls = []
        monkeypatch.setattr(subprocess, "run", self.fake_keygen(calls))
        monkeypatch.setenv("SSH_AUTH_SOCK", "/tmp/agent.sock")

        assert run("github", "setup", "-e", "me@example.com") == 0

        key_path = env.config.private_dir / ".ssh" / "id_ed25519"
        assert calls == [
            ['ssh-keygen', '-t', 'ed25519', '-C', 'me@example.com', '-f', str(key_path), '-N', ''],
            ['ssh-add', str(key_path)],
        ]
        assert stat.S_IMODE(key_path.stat().st_mode) == 0o600

        link = env.config.stow_dir / "ssh" / ".ssh"
        assert os.readlink(link) == os.path.join("..", "..", "private", ".ssh")
        assert env.read_config()["stow"] == ["ssh"]
        assert "ssh-ed25519 AAAAC3 me@example.com" in capsys.readouterr().out

    def test_setup_keeps_existing_key(self, env, commands, which, answers):
        key_path = env.config.private_dir / ".ssh" / "id_ed25519"
        key_path.parent.mkdir(parents=True)
        key_path.write_text("OLD")
        answers.append("n")

        run("github", "setup", "-e", "me@example.com")

        assert key_path.read_text() == "OLD"
        assert commands.calls == []

    def test_setup_requires_email(self, env, answers):
        assert run("github", "setup") == 1

    def test_connection(self, env, commands):
        commands.respond(['ssh', '-T'], returncode=1,
                         stderr="Hi me! You've successfully authenticated, but GitHub does not provide shell access.")
        assert run("github", "test") == 0

        commands.respond(['ssh', '-T'], returncode=255, stderr="git@github.com: Permission denied (publickey).")
        assert run("github", "test") == 1


class TestOnboard:
    def test_full_setup(self, env, commands, which, macos):
        env.create_home_file(".zshrc", "export EDITOR=vim")
        env.create_home_file(".gitconfig", "[user]")

        assert run("onboard", "-y", "--skip-github") == 0

        assert (env.config.stow_dir / "zsh" / ".zshrc").read_text() == "export EDITOR=vim"
        assert (env.config.stow_dir / "git" / ".gitconfig").read_text() == "[user]"
        data = env.read_config()
        assert {"git", "jq", "stow"} <= set(data["brews"])
        assert "visual-studio-code" in data["casks"]
        assert data["stow"] == ["zsh", "git"]

        brewfile = env.config.dotfiles_dir / "Brewfile"
        assert 'brew "jq"' in brewfile.read_text()
        assert commands.ran(['brew', 'bundle', f'--file={brewfile}'])
        assert commands.ran(['stow', '-d', str(env.config.stow_dir), '-t', str(env.home), 'zsh'])
        assert commands.ran(['stow', '-d', str(env.config.stow_dir), '-t', str(env.home), 'git'])

    def test_cancel(self, env, commands, answers, capsys):
        answers.append("n")

        assert run("onboard") == 0

        assert "Setup cancelled" in capsys.readouterr().out
        assert not env.config.config_path.exists()
        assert commands.calls == []

    def test_declined_import_keeps_dotfiles(self, env, commands, which, answers):
        env.create_home_file(".zshrc")
        answers.extend(["y", "n"])

        run("onboard", "--skip-github", "--skip-packages")

        assert (env.home / ".zshrc").is_file()
        assert not (env.config.stow_dir / "zsh").exists()
        assert env.read_config()["stow"] == []

    def test_missing_email_skips_github(self, env, commands, which, answers, capsys):
        assert run("onboard", "--skip-packages") == 0

        assert not commands.ran(['ssh-keygen'])
        assert "Skipping GitHub setup" in capsys.readouterr().out
        assert env.config.config_path.exists()

    def test_github_failure_only_warns(self, env, commands, which, capsys):
        commands.respond(['ssh-keygen'], returncode=1)

        assert run("onboard", "-y", "--skip-packages", "-e", "me@example.com") == 0

        assert commands.ran(['ssh-keygen'])
        out = capsys.readouterr().out
        assert "GitHub setup had issues" in out
        assert "Onboarding complete" in out

    def test_failed_install_only_warns(self, env, commands, which, macos, capsys):
        commands.respond(['brew', 'bundle'], returncode=1)

        assert run("onboard", "-y", "--skip-github", "--template", "minimal") == 0

        assert env.read_config()["brews"] == ["git", "curl", "stow", "neovim"]
        assert "Package installation had issues" in capsys.readouterr().out

    def test_missing_tools_are_reported(self, env, commands, which, capsys):
        which.discard("stow")

        run("onboard", "-y", "--skip-github", "--skip-packages")

        assert "missing: GNU Stow" in capsys.readouterr().out

    def test_dry_run(self, env, commands, which, macos):
        env.create_home_file(".zshrc")

        assert run("--dry-run", "onboard", "-y", "--skip-github") == 0

        assert (env.home / ".zshrc").is_file()
        assert not env.config.config_path.exists()
        assert not (env.config.dotfiles_dir / "Brewfile").exists()
        assert commands.calls == []
