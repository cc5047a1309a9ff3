"""
Base classes for VCS drivers.

A driver gives the scan service read access to one repository:
the root revision, the tag and branch maps, and per-revision metadata,
dist and source locations. Drivers are created for a single scan and
closed when it ends.
"""

import json
import logging
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ..errors import MetadataParseError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_METADATA_FILE = "composer.json"
DEFAULT_TIMEOUT = 300


class VcsDriver(ABC):
    """
    Abstract base class for repository drivers.

    Subclasses implement enumeration and metadata access for one
    version-control system. Identifiers returned by get_tags() and
    get_branches() are opaque to callers and only passed back in.
    """

    def __init__(self, url: str, config: Optional[Dict[str, Any]] = None):
        """
        Initialize driver.

        Args:
            url: Repository URL or local path
            config: Loaded vcsrepo configuration (defaults used if None)
        """
        self.url = url
        self.config = config or {}
        self.metadata_file = self.config.get('scan', {}).get('metadata_file', DEFAULT_METADATA_FILE)
        self.timeout = self.config.get('drivers', {}).get('timeout_seconds', DEFAULT_TIMEOUT)
        self._initialized = False

    @classmethod
    @abstractmethod
    def supports(cls, url: str, deep: bool = False) -> bool:
        """
        Check whether this driver can handle a URL.

        Args:
            url: Repository URL or path
            deep: Allow expensive checks (network round trips)
        """

    def initialize(self) -> None:
        """Prepare the driver for use. Safe to call more than once."""
        if not self._initialized:
            self._setup()
            self._initialized = True

    def _setup(self) -> None:
        """Driver-specific setup, run once by initialize()."""

    def close(self) -> None:
        """Release any resources held by the driver."""

    @abstractmethod
    def get_root_identifier(self) -> str:
        """Identifier of the repository's main revision (default branch head)."""

    @abstractmethod
    def get_metadata(self, identifier: str) -> Optional[Dict[str, Any]]:
        """
        Read the metadata file at a revision.

        Returns:
            Parsed metadata, or None if the revision has no metadata file

        Raises:
            TransportError: If the remote could not be read
            MetadataParseError: If the file is not valid JSON
        """

    @abstractmethod
    def get_tags(self) -> Dict[str, str]:
        """Ordered mapping of tag name -> identifier."""

    @abstractmethod
    def get_branches(self) -> Dict[str, str]:
        """Ordered mapping of branch name -> identifier."""

    @abstractmethod
    def get_source(self, identifier: str) -> Dict[str, Any]:
        """Checkout location for a revision."""

    def get_dist(self, identifier: str) -> Optional[Dict[str, Any]]:
        """Archive location for a revision, or None if the VCS has none."""
        return None

    def get_url(self) -> str:
        return self.url

    def has_metadata_file(self, identifier: str) -> bool:
        """True if the revision has a readable, non-empty metadata file."""
        try:
            return bool(self.get_metadata(identifier))
        except (TransportError, MetadataParseError) as e:
            logger.debug(f"No metadata at {identifier}: {e}")
            return False

    def _parse_metadata(self, content: Optional[str], identifier: str) -> Optional[Dict[str, Any]]:
        """Parse metadata file contents read from a revision."""
        if not content or not content.strip():
            return None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise MetadataParseError(
                f"{self.metadata_file} at {identifier} is not valid JSON: {e}"
            ) from e
        if not isinstance(data, dict):
            raise MetadataParseError(f"{self.metadata_file} at {identifier} must contain an object")
        return data

    def __enter__(self) -> 'VcsDriver':
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.url!r})"


class CommandDriver(VcsDriver):
    """
    Base for drivers that shell out to a command-line client.

    Remote repositories are copied into a temporary directory during
    setup and removed by close().
    """

    def __init__(self, url: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(url, config)
        self.repo_dir: Optional[str] = None
        self._temp_dir: Optional[str] = None

    @classmethod
    def _probe(cls, cmd: str, timeout: int = 30) -> Tuple[Optional[str], int]:
        """Run a command outside any repository (used by probes)."""
        try:
            result = subprocess.run(
                cmd,
                shell=True,
                capture_output=True,
                text=True,
                timeout=timeout
            )
            return result.stdout.strip() if result.stdout else None, result.returncode
        except subprocess.TimeoutExpired:
            logger.debug(f"Command timed out: {cmd}")
            return None, -1
        except OSError as e:
            logger.debug(f"Command failed: {cmd} - {e}")
            return None, -1

    def _run(
        self,
        cmd: str,
        cwd: Optional[str] = None,
        check: bool = False
    ) -> Tuple[Optional[str], int]:
        """
        Run a command.

        Args:
            cmd: Command to run (arguments must already be quoted)
            cwd: Working directory (defaults to the repository directory)
            check: Raise TransportError on non-zero exit

        Returns:
            Tuple of (stdout, returncode)
        """
        try:
            result = subprocess.run(
                cmd,
                shell=True,
                cwd=cwd or self.repo_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(f"Command timed out: {cmd}")
            if check:
                raise TransportError(f"Command timed out after {self.timeout}s: {cmd}") from e
            return None, -1

        if check and result.returncode != 0:
            stderr = (result.stderr or '').strip()
            raise TransportError(f"Failed to execute {cmd}: {stderr}")

        if result.returncode != 0:
            logger.debug(f"Command exited {result.returncode}: {cmd}")

        output = result.stdout
        return output.strip() if output else None, result.returncode

    def _make_temp_dir(self, prefix: str) -> str:
        self._temp_dir = tempfile.mkdtemp(prefix=prefix)
        return self._temp_dir

    def close(self) -> None:
        if self._temp_dir:
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            self._temp_dir = None
        self._initialized = False
