"""
Driver selection for vcsrepo.

Picks the driver for a repository location from an ordered registry:

1. An entry whose name equals the location's declared type wins outright.
2. Otherwise the first entry whose shallow probe accepts the URL.
3. Otherwise the first entry whose deep probe (may hit the network) accepts it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, Union

from ..domain import RepositoryLocation
from ..errors import NoDriverFoundError
from ..infra import GitDriver, GitHubDriver, HgDriver, SvnDriver, VcsDriver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriverEntry:
    """A named driver type in the registry."""
    name: str
    driver_class: Type[VcsDriver]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'driver': f"{self.driver_class.__module__}.{self.driver_class.__name__}",
        }


# github comes before git so GitHub URLs use the API instead of a clone
DEFAULT_DRIVERS: Tuple[DriverEntry, ...] = (
    DriverEntry('github', GitHubDriver),
    DriverEntry('git', GitDriver),
    DriverEntry('hg', HgDriver),
    DriverEntry('svn', SvnDriver),
)

RegistrySpec = Union[
    Mapping[str, Type[VcsDriver]],
    Iterable[Union[DriverEntry, Tuple[str, Type[VcsDriver]]]],
]


def build_registry(
    drivers: Optional[RegistrySpec] = None,
    order: Optional[Sequence[str]] = None
) -> List[DriverEntry]:
    """
    Build an ordered driver registry.

    Args:
        drivers: Mapping of name -> driver class, or an ordered iterable of
            DriverEntry / (name, class) pairs. Defaults to DEFAULT_DRIVERS.
        order: Optional list of names; keeps only these entries, in this order

    Returns:
        List of DriverEntry in priority order
    """
    if drivers is None:
        entries = list(DEFAULT_DRIVERS)
    elif isinstance(drivers, Mapping):
        entries = [DriverEntry(name, cls) for name, cls in drivers.items()]
    else:
        entries = [
            item if isinstance(item, DriverEntry) else DriverEntry(*item)
            for item in drivers
        ]

    if order:
        by_name = {entry.name: entry for entry in entries}
        unknown = [name for name in order if name not in by_name]
        if unknown:
            logger.warning(f"Ignoring unknown drivers in configured order: {', '.join(unknown)}")
        entries = [by_name[name] for name in order if name in by_name]

    return entries


class DriverSelector:
    """
    Choose and initialize the driver for a repository location.

    Example:
        selector = DriverSelector()
        driver = selector.get_driver(RepositoryLocation("https://github.com/acme/pkg"))
    """

    def __init__(
        self,
        registry: Optional[RegistrySpec] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize DriverSelector.

        Args:
            registry: Driver registry (DEFAULT_DRIVERS if None)
            config: Configuration passed to every driver; its drivers.order
                setting reorders or restricts the default registry
        """
        self.config = config or {}
        # an injected registry is already in the caller's order
        order = self.config.get('drivers', {}).get('order') if registry is None else None
        self.registry = build_registry(registry, order)

    def select(self, location: RepositoryLocation) -> Optional[VcsDriver]:
        """
        Select, create and initialize a driver.

        Returns:
            Initialized driver, or None if no registry entry matches
        """
        for entry in self.registry:
            if entry.name == location.type:
                logger.debug(f"Using {entry.name} driver for {location.url} (declared type)")
                return self._create(entry, location)

        for entry in self.registry:
            if entry.driver_class.supports(location.url):
                logger.debug(f"Using {entry.name} driver for {location.url}")
                return self._create(entry, location)

        for entry in self.registry:
            if entry.driver_class.supports(location.url, deep=True):
                logger.debug(f"Using {entry.name} driver for {location.url} (deep probe)")
                return self._create(entry, location)

        return None

    def get_driver(self, location: RepositoryLocation) -> VcsDriver:
        """
        Like select(), but raise instead of returning None.

        Raises:
            NoDriverFoundError: If no driver can handle the location
        """
        driver = self.select(location)
        if driver is None:
            raise NoDriverFoundError(location.url)
        return driver

    def _create(self, entry: DriverEntry, location: RepositoryLocation) -> VcsDriver:
        driver = entry.driver_class(location.url, self.config)
        try:
            driver.initialize()
        except Exception:
            driver.close()
            raise
        return driver

    def names(self) -> List[str]:
        return [entry.name for entry in self.registry]
