"""
Domain layer for vcsrepo.

Contains pure domain objects with no I/O or side effects:
- RepositoryLocation: Where a repository lives and how to access it
- PackageRecord: One installable package version synthesized from a revision
- ItemOutcome: What happened to a single tag or branch during a scan
- ScanResult: The immutable result of scanning one repository

These objects are immutable and provide serialization methods for
JSONL output.
"""

from .location import RepositoryLocation
from .package import PackageRecord
from .scan import ItemKind, ItemOutcome, OutcomeStatus, ScanResult, SkipReason

__all__ = [
    'RepositoryLocation',
    'PackageRecord',
    'ItemKind',
    'ItemOutcome',
    'OutcomeStatus',
    'ScanResult',
    'SkipReason',
]
