"""
Pytest configuration for dotfiles tests.

Every test runs against a temporary HOME with its own ~/.dotfiles tree.
External programs (brew, stow, git, ssh) are never executed: the
`commands` fixture replaces subprocess.run with a recorder that returns
scripted results, and the `which` fixture controls which executables
appear to be installed.
"""

import json
import os
import shutil
import subprocess
from pathlib import Path

import pytest

from dotfiles import output
from dotfiles.config import Config


class DotfilesTestEnv:
    """Temporary home directory with a dotfiles tree."""

    def __init__(self, tmp_path: Path):
        self.home = tmp_path / "home"
        self.home.mkdir()
        self.config = Config()
        self.config.stow_dir.mkdir(parents=True)

    def create_package(self, name, files):
        """
        Create a package in the stow directory.

        files: dict mapping relative paths to content (or None for directories)
        """
        package_dir = self.config.stow_dir / name
        package_dir.mkdir(parents=True, exist_ok=True)
        for path, content in files.items():
            full_path = package_dir / path
            if content is None:
                full_path.mkdir(parents=True, exist_ok=True)
            else:
                full_path.parent.mkdir(parents=True, exist_ok=True)
                full_path.write_text(content)
        return package_dir

    def create_home_file(self, path, content=""):
        full_path = self.home / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)
        return full_path

    def create_home_dir(self, path):
        full_path = self.home / path
        full_path.mkdir(parents=True, exist_ok=True)
        return full_path

    def create_home_link(self, path, dest):
        """Create a symlink in the home directory."""
        full_path = self.home / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(dest, full_path)
        return full_path

    def write_config(self, data):
        self.config.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config.config_path.write_text(json.dumps(data))

    def read_config(self):
        return json.loads(self.config.config_path.read_text())


class CommandRecorder:
    """
    Stand-in for subprocess.run.

    Responses are matched by argv prefix; the longest matching prefix wins.
    Unmatched commands succeed with empty output.
    """

    def __init__(self):
        self.calls = []
        self.responses = {}

    def respond(self, prefix, stdout="", returncode=0, stderr=""):
        self.responses[tuple(prefix)] = (returncode, stdout, stderr)

    def __call__(self, args, check=False, **kwargs):
        args = list(args)
        self.calls.append(args)

        returncode, stdout, stderr = 0, "", ""
        best = -1
        for prefix, response in self.responses.items():
            if tuple(args[:len(prefix)]) == prefix and len(prefix) > best:
                best = len(prefix)
                returncode, stdout, stderr = response

        if check and returncode != 0:
            raise subprocess.CalledProcessError(returncode, args, stdout, stderr)
        return subprocess.CompletedProcess(args, returncode, stdout, stderr)

    def ran(self, prefix):
        """Check if any recorded command starts with prefix."""
        return any(call[:len(prefix)] == list(prefix) for call in self.calls)


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text or (json.dumps(data) if data is not None else "")

    def json(self):
        if self._data is None:
            raise ValueError("No JSON body")
        return self._data


class FakeSession:
    """Minimal requests.Session replacement with queued responses."""

    def __init__(self):
        self.headers = {}
        self.requests = []
        self.queue = []

    def queue_response(self, status_code=200, data=None, text=""):
        self.queue.append(FakeResponse(status_code, data, text))

    def _next(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return self.queue.pop(0)

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Isolated HOME with an empty dotfiles tree."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("NO_COLOR", "1")
    for name in ("DOTFILES_DIR", "DOTFILES_CONFIG", "GITHUB_TOKEN", "SSH_AUTH_SOCK"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(output, "VERBOSE", False)
    return DotfilesTestEnv(tmp_path)


@pytest.fixture
def config(env):
    return env.config


@pytest.fixture
def commands(monkeypatch):
    """Record external commands instead of running them."""
    recorder = CommandRecorder()
    monkeypatch.setattr(subprocess, "run", recorder)
    return recorder


@pytest.fixture
def which(monkeypatch):
    """Set of executables that appear to be on PATH."""
    available = {"brew", "stow", "git"}
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}" if name in available else None)
    return available


@pytest.fixture
def session():
    return FakeSession()
