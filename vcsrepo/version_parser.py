"""
Version normalization for tags and branches.

Turns free-form version strings into a canonical, comparable form:

- Classical versions are padded to four components: "1.2" -> "1.2.0.0"
- Stability modifiers are kept: "1.0-beta2" -> "1.0.0.0-beta2"
- Dev versions keep a "-dev" suffix: "1.0-dev" -> "1.0.0.0-dev"
- Default branches map to a sentinel: "master" -> "9999999-dev"
- Branches map to wildcard dev versions: "2.1" -> "2.1.9999999.9999999-dev"
  or to named dev versions: "feature" -> "dev-feature"
"""

import re
from typing import Optional

from .errors import InvalidVersionError

DEFAULT_BRANCH_VERSION = '9999999-dev'
DEFAULT_BRANCHES = ('master', 'trunk', 'default')

_MODIFIER = r'[.-]?(?:(beta|RC|alpha|patch|pl|p)(?:[.-]?(\d+))?)?([.-]?dev)?'

_ALIAS_RE = re.compile(r'^([^,\s]+) +as +([^,\s]+)$')
_DEFAULT_RE = re.compile(r'^(?:dev-)?(?:master|trunk|default)$', re.IGNORECASE)
_CLASSICAL_RE = re.compile(r'^v?(\d{1,3})(\.\d+)?(\.\d+)?(\.\d+)?' + _MODIFIER + '$', re.IGNORECASE)
_DATE_RE = re.compile(r'^v?(\d{4}(?:[.:-]?\d{2}){1,6}(?:[.:-]?\d{1,3})?)' + _MODIFIER + '$', re.IGNORECASE)
_BRANCH_RE = re.compile(r'^v?(\d+)(\.(?:\d+|[x*]))?(\.(?:\d+|[x*]))?(\.(?:\d+|[x*]))?$', re.IGNORECASE)

_STABILITY_NAMES = {'pl': 'patch', 'p': 'patch', 'rc': 'RC'}

# Matches a trailing dev flag ("1.0-dev", "1.0.dev", "1.0dev")
DEV_SUFFIX_RE = re.compile(r'[.-]?dev$', re.IGNORECASE)
# Same, plus a leading "dev-" on normalized versions
NORMALIZED_DEV_RE = re.compile(r'(^dev-|[.-]?dev$)', re.IGNORECASE)


class VersionParser:
    """
    Parse and normalize version strings.

    Example:
        parser = VersionParser()
        parser.normalize("v1.2")            # "1.2.0.0"
        parser.normalize_branch("2.x")      # "2.9999999.9999999.9999999-dev"
    """

    def normalize(self, version: str) -> str:
        """
        Normalize a version string.

        Args:
            version: Version as written in a tag or metadata file

        Returns:
            Normalized version string

        Raises:
            InvalidVersionError: If the string is not a recognizable version
        """
        version = version.strip()

        # "1.0 as 2.0" means 1.0 is required, 2.0 is only an alias
        match = _ALIAS_RE.match(version)
        if match:
            version = match.group(1)

        if _DEFAULT_RE.match(version):
            return DEFAULT_BRANCH_VERSION

        if version[:4].lower() == 'dev-':
            return version.lower()

        match = _CLASSICAL_RE.match(version)
        if match:
            normalized = match.group(1) + ''.join(
                match.group(i) or '.0' for i in (2, 3, 4)
            )
            index = 5
        else:
            match = _DATE_RE.match(version)
            if not match:
                raise InvalidVersionError(f"Invalid version string {version}")
            normalized = re.sub(r'\D', '-', match.group(1))
            index = 2

        stability = match.group(index)
        if stability:
            stability = stability.lower()
            normalized += '-' + _STABILITY_NAMES.get(stability, stability)
            normalized += match.group(index + 1) or ''
        if match.group(index + 2):
            normalized += '-dev'

        return normalized

    def normalize_branch(self, name: str) -> str:
        """
        Normalize a branch name to a dev version.

        Numeric branches ("2.1", "3.x") become wildcard versions with a
        "-dev" suffix; anything else becomes "dev-<name>".

        Raises:
            InvalidVersionError: If the name is empty
        """
        name = name.strip()
        if not name:
            raise InvalidVersionError("Invalid branch name: empty string")

        if name in DEFAULT_BRANCHES:
            return self.normalize(name)

        match = _BRANCH_RE.match(name)
        if match:
            parts = [
                (match.group(i) or '.x').replace('*', 'x').replace('X', 'x')
                for i in range(1, 5)
            ]
            return ''.join(parts).replace('x', '9999999') + '-dev'

        return 'dev-' + name


def strip_dev_flag(version: str) -> str:
    """Remove a trailing dev flag from a raw version string."""
    return DEV_SUFFIX_RE.sub('', version)


def strip_normalized_dev_flag(version_normalized: str) -> str:
    """Remove a leading "dev-" or trailing dev flag from a normalized version."""
    return NORMALIZED_DEV_RE.sub('', version_normalized)


def is_dev_branch_version(version_normalized: str) -> bool:
    """True if a normalized branch version needs a "dev-" prefix rather than a "-dev" suffix."""
    return version_normalized.startswith('dev-') or version_normalized == DEFAULT_BRANCH_VERSION


_parser: Optional[VersionParser] = None


def get_version_parser() -> VersionParser:
    """Get the shared VersionParser instance."""
    global _parser
    if _parser is None:
        _parser = VersionParser()
    return _parser
