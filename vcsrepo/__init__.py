"""
vcsrepo - Package versions from version-control repositories.

vcsrepo reads the composer.json of every tag and branch in a git, hg,
svn or GitHub repository and turns each into a normalized package
record. One bad tag or branch is skipped, never fatal.

Quick Start:
    import vcsrepo

    repo = vcsrepo.VcsRepository("https://github.com/acme/pkg")
    for package in repo.packages():
        print(package.name, package.version, package.version_normalized)

    # Explicit driver and a custom registry order
    repo = vcsrepo.VcsRepository("/srv/repos/pkg", type="git")

Domain Objects:
    RepositoryLocation - URL plus driver type ("vcs" = detect)
    PackageRecord - One package version with dist/source locations
    ScanResult - Outcomes of a scan, imported and skipped

Services:
    DriverSelector - Pick a driver for a location
    ScanService - Tag and branch pipelines

Version handling:
    VersionParser - Composer-style version normalization
"""

__version__ = "0.3.0"

# High-level API
from .api import VcsRepository

# Domain objects
from .domain import (
    RepositoryLocation,
    PackageRecord,
    ItemKind,
    ItemOutcome,
    OutcomeStatus,
    ScanResult,
    SkipReason,
)

# Services (for advanced use)
from .services import (
    DEFAULT_DRIVERS,
    DriverEntry,
    DriverSelector,
    ScanObserver,
    ScanService,
)

# Drivers
from .infra import VcsDriver, GitHubDriver, GitDriver, HgDriver, SvnDriver

# Errors
from .errors import (
    VcsRepoError,
    NoDriverFoundError,
    TransportError,
    MetadataParseError,
    InvalidVersionError,
    InvalidPackageError,
)

from .loader import PackageLoader
from .version_parser import VersionParser

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # High-level API
    "VcsRepository",
    # Domain objects
    "RepositoryLocation",
    "PackageRecord",
    "ItemKind",
    "ItemOutcome",
    "OutcomeStatus",
    "ScanResult",
    "SkipReason",
    # Services
    "DEFAULT_DRIVERS",
    "DriverEntry",
    "DriverSelector",
    "ScanObserver",
    "ScanService",
    # Drivers
    "VcsDriver",
    "GitHubDriver",
    "GitDriver",
    "HgDriver",
    "SvnDriver",
    # Errors
    "VcsRepoError",
    "NoDriverFoundError",
    "TransportError",
    "MetadataParseError",
    "InvalidVersionError",
    "InvalidPackageError",
    # Building blocks
    "PackageLoader",
    "VersionParser",
    # Configuration
    "load_config",
    "save_config",
]
