"""
Exception types for vcsrepo.

Only NoDriverFoundError is fatal to a scan. The others are raised by drivers,
the version parser and the package loader, and are turned into per-item
skip outcomes by the scan service.
"""

from typing import Optional


class VcsRepoError(Exception):
    """Base class for all vcsrepo errors."""


class NoDriverFoundError(VcsRepoError, ValueError):
    """Raised when no registered driver can handle a repository location."""

    def __init__(self, url: str):
        super().__init__(f"No driver found to handle VCS repository {url}")
        self.url = url


class TransportError(VcsRepoError):
    """
    A driver could not reach (or find) something on the remote side.

    Branch scans treat this as "no composer file was found" and skip quietly.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MetadataParseError(VcsRepoError):
    """A revision's metadata file exists but is not valid JSON."""


class InvalidVersionError(VcsRepoError, ValueError):
    """A version or branch name could not be normalized."""


class InvalidPackageError(VcsRepoError, ValueError):
    """The package loader rejected a raw metadata mapping."""
