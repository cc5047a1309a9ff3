"""
Scan result domain objects for vcsrepo.

Every tag and branch processed during a scan produces exactly one
ItemOutcome: either an imported PackageRecord or a skip with a reason.
The outcomes are folded, in order, into an immutable ScanResult.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from .package import PackageRecord


class ItemKind(Enum):
    """What kind of revision an outcome refers to."""
    TAG = "tag"
    BRANCH = "branch"


class OutcomeStatus(Enum):
    """Status of a single tag or branch."""
    IMPORTED = "imported"
    SKIPPED = "skipped"


class SkipReason(Enum):
    """Why a tag or branch did not produce a package record."""
    INVALID_NAME = "invalid_name"
    NO_METADATA = "no_metadata"
    METADATA_ERROR = "metadata_error"
    TRANSPORT_ERROR = "transport_error"
    INVALID_VERSION = "invalid_version"
    VERSION_MISMATCH = "version_mismatch"
    INVALID_PACKAGE = "invalid_package"


@dataclass(frozen=True)
class ItemOutcome:
    """
    Result of running one tag or branch through the scan pipeline.

    Use the imported()/skipped() constructors rather than building
    instances directly.
    """
    kind: ItemKind
    name: str
    identifier: str
    status: OutcomeStatus
    record: Optional[PackageRecord] = None
    reason: Optional[SkipReason] = None
    message: Optional[str] = None

    @classmethod
    def imported(cls, kind: ItemKind, name: str, identifier: str,
                 record: PackageRecord) -> 'ItemOutcome':
        return cls(kind, name, identifier, OutcomeStatus.IMPORTED, record=record)

    @classmethod
    def skipped(cls, kind: ItemKind, name: str, identifier: str,
                reason: SkipReason, message: str) -> 'ItemOutcome':
        return cls(kind, name, identifier, OutcomeStatus.SKIPPED, reason=reason, message=message)

    @property
    def is_imported(self) -> bool:
        return self.status == OutcomeStatus.IMPORTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'type': self.kind.value,
            'name': self.name,
            'identifier': self.identifier,
            'status': self.status.value,
        }
        if self.record:
            result['version'] = self.record.version
            result['version_normalized'] = self.record.version_normalized
        if self.reason:
            result['reason'] = self.reason.value
        if self.message:
            result['message'] = self.message
        return result


@dataclass(frozen=True)
class ScanResult:
    """
    Immutable result of scanning one repository.

    Iterating a ScanResult yields the imported package records in the
    order they were produced (all tags, then all branches). Records with
    the same name and version are not deduplicated.
    """
    url: str
    package_name: Optional[str] = None
    outcomes: Tuple[ItemOutcome, ...] = ()

    @classmethod
    def fold(cls, url: str, package_name: Optional[str],
             outcomes: Iterable[ItemOutcome]) -> 'ScanResult':
        """Build a result from an ordered sequence of outcomes."""
        return cls(url=url, package_name=package_name, outcomes=tuple(outcomes))

    @property
    def packages(self) -> Tuple[PackageRecord, ...]:
        return tuple(o.record for o in self.outcomes if o.record is not None)

    @property
    def skipped(self) -> Tuple[Tuple[str, SkipReason], ...]:
        """(item name, reason) pairs for every skipped tag or branch."""
        return tuple(
            (o.name, o.reason) for o in self.outcomes
            if o.status == OutcomeStatus.SKIPPED
        )

    @property
    def imported_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_imported)

    @property
    def skipped_count(self) -> int:
        return len(self.outcomes) - self.imported_count

    def find_package(self, name: str, version: str) -> Optional[PackageRecord]:
        """
        Find a package by name and version.

        The version may be given as written ("dev-master") or
        normalized ("9999999-dev").
        """
        for record in self.packages:
            if record.name == name and version in (record.version, record.version_normalized):
                return record
        return None

    def __iter__(self) -> Iterator[PackageRecord]:
        return iter(self.packages)

    def __len__(self) -> int:
        return self.imported_count

    def to_dict(self) -> Dict[str, Any]:
        """Summary for JSON serialization."""
        return {
            'type': 'summary',
            'url': self.url,
            'package_name': self.package_name,
            'total': len(self.outcomes),
            'imported': self.imported_count,
            'skipped': self.skipped_count,
        }
