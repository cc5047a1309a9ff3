"""
Package record domain object for vcsrepo.

A PackageRecord is one installable version of a package, synthesized
from the metadata file at a single tag or branch.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class PackageRecord:
    """
    Immutable package version record.

    Attributes:
        name: Package name (e.g., "acme/pkg")
        version: Version as it should be displayed ("1.0.0", "dev-master", "2.1-dev")
        version_normalized: Canonical, comparable version ("1.0.0.0")
        dist: Archive location ({"type": "zip", "url": ..., "reference": ...}) or None
        source: Checkout location ({"type": "git", "url": ..., "reference": ...}) or None
        extra: Every other metadata field, carried through unchanged
    """
    name: str
    version: str
    version_normalized: str
    dist: Optional[Mapping[str, Any]] = None
    source: Optional[Mapping[str, Any]] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the metadata mapping so records stay immutable once added
        object.__setattr__(self, 'extra', MappingProxyType(dict(self.extra)))

    @property
    def is_dev(self) -> bool:
        """True for branch-tracking (unstable) versions."""
        return self.version.startswith('dev-') or self.version.endswith('-dev')

    @property
    def unique_name(self) -> str:
        return f"{self.name}-{self.version}"

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a carried-through metadata field."""
        return self.extra.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Extra metadata fields are flattened into the top level, the same
        shape as the metadata file the record came from.
        """
        result = dict(self.extra)
        result.update({
            'name': self.name,
            'version': self.version,
            'version_normalized': self.version_normalized,
        })
        if self.dist is not None:
            result['dist'] = dict(self.dist)
        if self.source is not None:
            result['source'] = dict(self.source)
        return result

    def to_jsonl(self) -> str:
        """Convert to single-line JSON for streaming output."""
        import json
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def __str__(self) -> str:
        return f"{self.name} {self.version}"
