"""
High-level Python API for vcsrepo.

Presents one version-control repository as a package repository: the
tags and branches are scanned on first access and the resulting
package versions can then be listed and looked up.

Example:
    import vcsrepo

    repo = vcsrepo.VcsRepository("https://github.com/acme/pkg")

    for package in repo.packages():
        print(package.name, package.version)

    repo.has_package("acme/pkg", "1.0.0")
    repo.find_package("acme/pkg", "dev-master")

    # Or from a repository config entry, with an explicit driver
    repo = vcsrepo.VcsRepository({"url": "/srv/repos/pkg", "type": "git"})

    # What was skipped and why
    for name, reason in repo.result.skipped:
        print(name, reason.value)
"""

from typing import Any, Dict, List, Optional, Union
import logging

from .domain import PackageRecord, RepositoryLocation, ScanResult
from .domain.location import AUTO_TYPE
from .services import DriverSelector, ProgressObserver, ScanObserver, ScanService
from .services.driver_selector import RegistrySpec
from .config import load_config
from .progress import get_progress

logger = logging.getLogger(__name__)


class VcsRepository:
    """
    A package repository backed by one version-control repository.

    The scan runs lazily, once, the first time packages are requested.
    A repository with no usable driver raises NoDriverFoundError at
    that point.
    """

    def __init__(
        self,
        location: Union[str, Dict[str, Any], RepositoryLocation],
        type: Optional[str] = None,
        drivers: Optional[RegistrySpec] = None,
        debug: bool = False,
        config: Optional[Dict[str, Any]] = None,
        observer: Optional[ScanObserver] = None
    ):
        """
        Initialize VcsRepository.

        Args:
            location: URL, {"url": ..., "type": ...} mapping or RepositoryLocation
            type: Driver name; overrides the location's type ("vcs" = detect)
            drivers: Driver registry to select from (default registry if None)
            debug: Write every tag and branch to stderr (when no observer is given)
            config: Full config dict (loaded from file if not provided)
            observer: Receives progress callbacks during the scan
        """
        if isinstance(location, RepositoryLocation):
            self._location = location
        elif isinstance(location, dict):
            self._location = RepositoryLocation.from_config(location)
        else:
            self._location = RepositoryLocation(location)

        if type:
            self._location = RepositoryLocation(self._location.url, type)

        if config is not None:
            self._config = config
        else:
            try:
                self._config = load_config()
            except Exception as e:
                logger.warning(f"Using default configuration: {e}")
                self._config = {}

        self.debug = debug
        if observer is None and debug:
            observer = ProgressObserver(get_progress(), debug=True)
        self._observer = observer
        self._scan_service = ScanService(
            selector=DriverSelector(drivers, config=self._config),
            config=self._config
        )
        self._result: Optional[ScanResult] = None

    @property
    def location(self) -> RepositoryLocation:
        return self._location

    @property
    def url(self) -> str:
        return self._location.url

    @property
    def config(self) -> Dict[str, Any]:
        """Access the configuration."""
        return self._config

    @property
    def scan_service(self) -> ScanService:
        """Access the underlying ScanService."""
        return self._scan_service

    @property
    def result(self) -> ScanResult:
        """The scan result, scanning the repository on first access."""
        if self._result is None:
            logger.debug(f"Scanning {self._location.url} ({self._location.type})")
            self._result = self._scan_service.scan(self._location, observer=self._observer)
        return self._result

    @property
    def is_scanned(self) -> bool:
        return self._result is not None

    def packages(self) -> List[PackageRecord]:
        """All package versions, tags first, then branches."""
        return list(self.result.packages)

    def find_package(self, name: str, version: str) -> Optional[PackageRecord]:
        """Find a package version; version may be as written or normalized."""
        return self.result.find_package(name, version)

    def has_package(self, name: str, version: str) -> bool:
        return self.find_package(name, version) is not None

    def count(self) -> int:
        return len(self.result)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self):
        return iter(self.result)

    def __repr__(self) -> str:
        type_part = "" if self._location.type == AUTO_TYPE else f", type={self._location.type!r}"
        return f"VcsRepository({self._location.url!r}{type_part})"
