"""
Package loader for vcsrepo.

Turns a raw metadata mapping (the contents of a revision's composer.json,
with name/version/dist/source filled in by the scan) into a PackageRecord.
"""

from typing import Any, Dict, Mapping, Optional

from .domain import PackageRecord
from .errors import InvalidPackageError, InvalidVersionError
from .version_parser import VersionParser, get_version_parser

RESERVED_KEYS = ('name', 'version', 'version_normalized', 'dist', 'source')


class PackageLoader:
    """
    Build PackageRecords from raw metadata.

    Example:
        loader = PackageLoader()
        record = loader.load({"name": "acme/pkg", "version": "1.0.0"})
        record.version_normalized   # "1.0.0.0"
    """

    def __init__(self, version_parser: Optional[VersionParser] = None):
        self.version_parser = version_parser or get_version_parser()

    def load(self, data: Mapping[str, Any]) -> PackageRecord:
        """
        Create a PackageRecord from raw metadata.

        Raises:
            InvalidPackageError: If name or version is missing, the version
                cannot be normalized, or dist/source is malformed
        """
        name = data.get('name')
        if not isinstance(name, str) or not name.strip():
            raise InvalidPackageError("Package has no name")

        version = data.get('version')
        if not isinstance(version, str) or not version.strip():
            raise InvalidPackageError(f"Package {name} has no version")

        version_normalized = data.get('version_normalized')
        if not version_normalized:
            try:
                version_normalized = self.version_parser.normalize(version)
            except InvalidVersionError as e:
                raise InvalidPackageError(f"Package {name}: {e}") from e

        extra = {k: v for k, v in data.items() if k not in RESERVED_KEYS}

        return PackageRecord(
            name=name.strip(),
            version=version,
            version_normalized=version_normalized,
            dist=self._location(name, 'dist', data.get('dist')),
            source=self._location(name, 'source', data.get('source')),
            extra=extra,
        )

    @staticmethod
    def _location(name: str, field: str, value: Any) -> Optional[Dict[str, Any]]:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise InvalidPackageError(f"Package {name}: {field} must be a mapping")
        for key in ('type', 'url'):
            if not value.get(key):
                raise InvalidPackageError(f"Package {name}: {field} is missing '{key}'")
        return dict(value)
