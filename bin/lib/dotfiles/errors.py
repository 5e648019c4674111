"""Exception types raised by the dotfiles library."""


class DotfilesError(Exception):
    """Base class for all dotfiles errors."""


class ConfigError(DotfilesError):
    """The config document is missing, malformed, or used incorrectly."""


class PackageManagerError(DotfilesError):
    """No usable package manager, or an unsupported operation."""


class StowError(DotfilesError):
    """GNU Stow is missing, a package is missing, or conflicts remain."""


class GistError(DotfilesError):
    """The GitHub Gist API returned an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TemplateError(DotfilesError):
    """A template is unknown, invalid, or has an inheritance cycle."""


class SnapshotError(DotfilesError):
    """A snapshot could not be found or read."""
