"""GitHub Gist client."""

# ============================================================
# Imports
# ============================================================

import json
import os
from typing import Any
from urllib.parse import urlparse

import requests

from .errors import GistError


# ============================================================
# Configuration
# ============================================================

API_URL = "https://api.github.com"
USER_AGENT = "dotfiles-manager"
CONFIG_FILENAME = "dotfiles-config.json"
TIMEOUT = 30


def parse_gist_id(value: str) -> str:
    """
    Extract a gist id from a URL or bare id.

    Accepts forms like 'https://gist.github.com/user/<id>#file-x',
    'https://gist.github.com/<id>.git', and '<id>'.
    """
    value = value.strip()
    path = urlparse(value).path if "://" in value else value
    gist_id = path.split('#', 1)[0].rstrip('/').rsplit('/', 1)[-1]
    if gist_id.endswith('.git'):
        gist_id = gist_id[:-4]
    if not gist_id:
        raise GistError(f"Could not find a gist id in '{value}'")
    return gist_id


def is_gist_reference(value: str) -> bool:
    return "gist.github.com" in value or "api.github.com/gists" in value


# ============================================================
# Client
# ============================================================

class GistClient:
    """Minimal GitHub Gist API client for sharing config documents."""

    def __init__(self, token: str | None = None, session: requests.Session | None = None):
        self.token = token if token is not None else os.environ.get("GITHUB_TOKEN")
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        })
        if self.token:
            self.session.headers["Authorization"] = f"token {self.token}"

    def _check(self, response: requests.Response, expected: tuple[int, ...]) -> dict[str, Any]:
        """Decode a JSON response, raising GistError on unexpected status."""
        if response.status_code not in expected:
            try:
                message = response.json().get("message", "")
            except ValueError:
                message = response.text
            raise GistError(f"GitHub API error {response.status_code}: {message}", response.status_code)
        return response.json()

    def create(self, description: str, content: str, public: bool = True,
               filename: str = CONFIG_FILENAME) -> tuple[str, str]:
        """
        Create a gist with a single file.

        Returns:
            (gist id, html url)
        """
        payload = {
            "description": description,
            "public": public,
            "files": {filename: {"content": content}},
        }
        try:
            response = self.session.post(f"{API_URL}/gists", json=payload, timeout=TIMEOUT)
        except requests.RequestException as e:
            raise GistError(f"Failed to reach GitHub: {e}") from e

        data = self._check(response, (201,))
        return data.get("id", ""), data.get("html_url", "")

    def get(self, gist_id: str) -> dict[str, Any]:
        try:
            response = self.session.get(f"{API_URL}/gists/{gist_id}", timeout=TIMEOUT)
        except requests.RequestException as e:
            raise GistError(f"Failed to reach GitHub: {e}") from e
        return self._check(response, (200,))

    def fetch_config(self, reference: str) -> dict[str, Any]:
        """
        Download a shared config document from a gist.

        Uses the first file named like 'dotfiles-config' or ending in
        '.json'. Truncated files are fetched from their raw URL.
        """
        gist = self.get(parse_gist_id(reference))
        files: dict[str, Any] = gist.get("files") or {}

        selected = None
        for filename, file_info in files.items():
            if "dotfiles-config" in filename or filename.endswith(".json"):
                selected = file_info
                break
        if selected is None:
            raise GistError("No dotfiles config file found in gist")

        content = selected.get("content", "")
        if selected.get("truncated") and selected.get("raw_url"):
            try:
                response = self.session.get(selected["raw_url"], timeout=TIMEOUT)
            except requests.RequestException as e:
                raise GistError(f"Failed to reach GitHub: {e}") from e
            if response.status_code != 200:
                raise GistError(f"Failed to download gist file: {response.status_code}", response.status_code)
            content = response.text

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise GistError(f"Gist file is not valid JSON: {e}") from e

    def search(self, terms: str = "", per_page: int = 30) -> tuple[int, list[dict[str, Any]]]:
        """
        Search GitHub for shared config files.

        GitHub code search requires authentication.

        Returns:
            (total match count, result items)
        """
        if not self.token:
            raise GistError("GITHUB_TOKEN is required to search GitHub")

        query = f"{terms} filename:{CONFIG_FILENAME}".strip()
        try:
            response = self.session.get(f"{API_URL}/search/code",
                                        params={"q": query, "per_page": per_page}, timeout=TIMEOUT)
        except requests.RequestException as e:
            raise GistError(f"Failed to reach GitHub: {e}") from e

        data = self._check(response, (200,))
        return data.get("total_count", 0), list(data.get("items") or [])
