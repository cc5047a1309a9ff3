"""
Scan service for vcsrepo.

Turns the tags and branches of a version-control repository into
package records. This is the primary API for scanning; commands and the
high-level VcsRepository object both go through it.

Each tag and branch is processed independently: a problem with one
revision becomes a skipped outcome and the scan moves on. Only failing
to find a driver (or the driver failing to list tags/branches) aborts.
"""

import logging
from typing import Any, Dict, Iterator, Mapping, Optional

from ..domain import ItemKind, ItemOutcome, PackageRecord, RepositoryLocation, ScanResult, SkipReason
from ..errors import InvalidPackageError, InvalidVersionError, TransportError
from ..infra import VcsDriver
from ..loader import PackageLoader
from ..version_parser import (
    VersionParser,
    get_version_parser,
    is_dev_branch_version,
    strip_dev_flag,
    strip_normalized_dev_flag,
)
from .driver_selector import DriverSelector
from .observer import NullObserver, ScanObserver

logger = logging.getLogger(__name__)


class ScanService:
    """
    Service for scanning repositories into package records.

    Example:
        service = ScanService()
        result = service.scan(RepositoryLocation("https://github.com/acme/pkg"))
        for package in result:
            print(package.name, package.version)
    """

    def __init__(
        self,
        selector: Optional[DriverSelector] = None,
        version_parser: Optional[VersionParser] = None,
        loader: Optional[PackageLoader] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize ScanService.

        Args:
            selector: Driver selector (default registry if None)
            version_parser: Version normalizer (shared parser if None)
            loader: Package loader (built on version_parser if None)
            config: Configuration dict passed to the default selector
        """
        self.config = config or {}
        self.selector = selector or DriverSelector(config=self.config)
        self.version_parser = version_parser or get_version_parser()
        self.loader = loader or PackageLoader(self.version_parser)

    def scan(
        self,
        location: RepositoryLocation,
        observer: Optional[ScanObserver] = None
    ) -> ScanResult:
        """
        Scan a repository location.

        Raises:
            NoDriverFoundError: If no driver can handle the location
        """
        driver = self.selector.get_driver(location)
        try:
            return self.scan_driver(driver, observer)
        finally:
            driver.close()

    def scan_driver(
        self,
        driver: VcsDriver,
        observer: Optional[ScanObserver] = None
    ) -> ScanResult:
        """Scan using an already-initialized driver. The caller closes it."""
        observer = observer or NullObserver()
        package_name = self.resolve_package_name(driver, observer)
        outcomes = self.iter_outcomes(driver, package_name, observer)
        return ScanResult.fold(driver.get_url(), package_name, outcomes)

    def iter_outcomes(
        self,
        driver: VcsDriver,
        package_name: Optional[str],
        observer: ScanObserver
    ) -> Iterator[ItemOutcome]:
        """Yield one outcome per tag, then one per branch, in driver order."""
        for tag, identifier in driver.get_tags().items():
            observer.item_started(ItemKind.TAG, tag, package_name)
            outcome = self.process_tag(driver, tag, identifier, package_name)
            self._report(observer, outcome)
            yield outcome
        observer.section_finished(ItemKind.TAG)

        for branch, identifier in driver.get_branches().items():
            observer.item_started(ItemKind.BRANCH, branch, package_name)
            outcome = self.process_branch(driver, branch, identifier, package_name)
            self._report(observer, outcome)
            yield outcome
        observer.section_finished(ItemKind.BRANCH)

    def _report(self, observer: ScanObserver, outcome: ItemOutcome) -> None:
        if outcome.is_imported:
            logger.debug(f"Imported {outcome.kind.value} {outcome.name} as {outcome.record.version}")
            observer.item_imported(outcome)
        else:
            message = f"Skipped {outcome.kind.value} {outcome.name}: {outcome.message}"
            if outcome.kind == ItemKind.BRANCH and outcome.reason == SkipReason.METADATA_ERROR:
                # unexpected branch failures are reported whatever the observer
                logger.warning(message)
            else:
                logger.debug(message)
            observer.item_skipped(outcome)

    def resolve_package_name(
        self,
        driver: VcsDriver,
        observer: Optional[ScanObserver] = None
    ) -> Optional[str]:
        """
        Read the package name from the metadata at the root revision.

        Never raises: any failure leaves the name unset.
        """
        observer = observer or NullObserver()
        root = None
        try:
            root = driver.get_root_identifier()
            if driver.has_metadata_file(root):
                data = driver.get_metadata(root) or {}
                return data.get('name') or None
        except Exception as e:
            logger.debug(f"Could not read package name from root revision {root}: {e}")
            observer.root_skipped(root, str(e))
        return None

    def validate_tag(self, tag: str) -> Optional[str]:
        """Normalized version for a tag name, or None if it is not a version."""
        try:
            return self.version_parser.normalize(tag)
        except InvalidVersionError:
            return None

    def validate_branch(self, branch: str) -> Optional[str]:
        """Normalized version for a branch name, or None if it is invalid."""
        try:
            return self.version_parser.normalize_branch(branch)
        except InvalidVersionError:
            return None

    def process_tag(
        self,
        driver: VcsDriver,
        tag: str,
        identifier: str,
        package_name: Optional[str] = None
    ) -> ItemOutcome:
        """Run a single tag through validation, metadata checks and synthesis."""

        def skip(reason: SkipReason, message: str) -> ItemOutcome:
            return ItemOutcome.skipped(ItemKind.TAG, tag, identifier, reason, message)

        parsed_tag = self.validate_tag(tag)
        if parsed_tag is None:
            return skip(SkipReason.INVALID_NAME, "invalid tag name")

        try:
            data = driver.get_metadata(identifier)
        except Exception as e:
            return skip(SkipReason.METADATA_ERROR, str(e))
        if not data:
            return skip(SkipReason.NO_METADATA, "no composer file")

        data = dict(data)
        if data.get('version') is not None:
            # manually versioned package
            data['version'] = str(data['version'])
            try:
                data['version_normalized'] = self.version_parser.normalize(data['version'])
            except InvalidVersionError as e:
                return skip(SkipReason.INVALID_VERSION, str(e))
        else:
            data['version'] = tag
            data['version_normalized'] = parsed_tag

        # tags are releases, never dev versions
        data['version'] = strip_dev_flag(data['version'])
        data['version_normalized'] = strip_normalized_dev_flag(data['version_normalized'])

        if data['version_normalized'] != parsed_tag:
            return skip(
                SkipReason.VERSION_MISMATCH,
                f"tag ({parsed_tag}) does not match version "
                f"({data['version_normalized']}) in composer.json"
            )

        return self._import(driver, ItemKind.TAG, tag, identifier, data, package_name)

    def process_branch(
        self,
        driver: VcsDriver,
        branch: str,
        identifier: str,
        package_name: Optional[str] = None
    ) -> ItemOutcome:
        """Run a single branch through validation, metadata checks and synthesis."""

        def skip(reason: SkipReason, message: str) -> ItemOutcome:
            return ItemOutcome.skipped(ItemKind.BRANCH, branch, identifier, reason, message)

        parsed_branch = self.validate_branch(branch)
        if parsed_branch is None:
            return skip(SkipReason.INVALID_NAME, "invalid name")

        try:
            data = driver.get_metadata(identifier)
        except TransportError:
            return skip(SkipReason.TRANSPORT_ERROR, "no composer file was found")
        except Exception as e:
            return skip(SkipReason.METADATA_ERROR, str(e))
        if not data:
            return skip(SkipReason.NO_METADATA, "no composer file")

        # branches are always versioned from their name
        data = dict(data)
        data['version_normalized'] = parsed_branch
        if is_dev_branch_version(parsed_branch):
            data['version'] = 'dev-' + branch
        else:
            data['version'] = branch + '-dev'

        return self._import(driver, ItemKind.BRANCH, branch, identifier, data, package_name)

    def _import(
        self,
        driver: VcsDriver,
        kind: ItemKind,
        name: str,
        identifier: str,
        data: Mapping[str, Any],
        package_name: Optional[str]
    ) -> ItemOutcome:
        try:
            record = self.synthesize(driver, data, identifier, package_name)
        except InvalidPackageError as e:
            return ItemOutcome.skipped(kind, name, identifier, SkipReason.INVALID_PACKAGE, str(e))
        except TransportError as e:
            return ItemOutcome.skipped(kind, name, identifier, SkipReason.TRANSPORT_ERROR, str(e))
        return ItemOutcome.imported(kind, name, identifier, record)

    def synthesize(
        self,
        driver: VcsDriver,
        data: Mapping[str, Any],
        identifier: str,
        package_name: Optional[str] = None
    ) -> PackageRecord:
        """
        Complete raw metadata and load it as a PackageRecord.

        The root package name, when known, replaces the revision's own
        name so every record of a scan shares one name. Missing dist and
        source locations are filled in from the driver.
        """
        data = dict(data)
        data['name'] = package_name or data.get('name')
        if data.get('dist') is None:
            data['dist'] = driver.get_dist(identifier)
        if data.get('source') is None:
            data['source'] = driver.get_source(identifier)
        return self.loader.load(data)
