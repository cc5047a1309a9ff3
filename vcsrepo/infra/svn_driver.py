"""
Subversion driver for vcsrepo.

Works directly against the remote repository with the svn client,
assuming the standard trunk/branches/tags layout. Identifiers have the
form "/<path>/@<revision>", e.g. "/tags/1.0.0/@1234".
"""

import logging
import re
import shlex
from typing import Any, Dict, Optional, Tuple

from .driver import CommandDriver

logger = logging.getLogger(__name__)

_SVN_URL_RE = re.compile(r'(^svn://|^svn\+ssh://|^https?://svn\.|/svn/)', re.IGNORECASE)
# "   1234 jdoe          Mar 03 12:00 1.0.0/"
_LS_LINE_RE = re.compile(r'^\s*(\d+)\s.*?\s(\S+)/$')


class SvnDriver(CommandDriver):
    """Driver for Subversion repositories."""

    TRUNK = 'trunk'
    BRANCHES = 'branches'
    TAGS = 'tags'

    def __init__(self, url: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(url, config)
        self.base_url = url.rstrip('/')
        self._root_identifier: Optional[str] = None

    @classmethod
    def supports(cls, url: str, deep: bool = False) -> bool:
        if _SVN_URL_RE.search(url):
            return True

        if not deep:
            return False

        _, code = cls._probe(f"svn info --non-interactive {shlex.quote(url)}")
        return code == 0

    def _setup(self) -> None:
        # enumeration tolerates missing directories, so reachability is checked up front
        self._svn(f"info {shlex.quote(self.base_url)}", check=True)

    def _svn(self, args: str, check: bool = False) -> Tuple[Optional[str], int]:
        return self._run(f"svn {args} --non-interactive", cwd='.', check=check)

    def _ls(self, path: str) -> Dict[str, str]:
        """List directories under a path as name -> last changed revision."""
        output, code = self._svn(f"ls --verbose {shlex.quote(self.base_url + '/' + path)}")
        entries: Dict[str, str] = {}
        if code != 0:
            return entries
        for line in (output or '').splitlines():
            match = _LS_LINE_RE.match(line)
            if match and match.group(2) != '.':
                entries[match.group(2)] = match.group(1)
        return entries

    def get_root_identifier(self) -> str:
        if self._root_identifier is None:
            revision = self._ls('').get(self.TRUNK)
            if revision is None:
                self._root_identifier = '/'
            else:
                self._root_identifier = f"/{self.TRUNK}/@{revision}"
        return self._root_identifier

    @staticmethod
    def _split(identifier: str) -> Tuple[str, str]:
        if '@' not in identifier:
            return identifier, ''
        path, _, revision = identifier.rpartition('@')
        return path, revision

    def get_metadata(self, identifier: str) -> Optional[Dict[str, Any]]:
        path, revision = self._split(identifier)
        target = f"{self.base_url}{path}{self.metadata_file}"
        if revision:
            target += f"@{revision}"

        output, code = self._svn(f"cat {shlex.quote(target)}")
        if code != 0:
            return None

        data = self._parse_metadata(output, identifier)
        if data is not None and 'time' not in data and revision:
            date, code = self._svn(
                f"propget --revprop -r {shlex.quote(revision)} svn:date {shlex.quote(self.base_url)}"
            )
            if code == 0 and date:
                data['time'] = date.strip()
        return data

    def get_tags(self) -> Dict[str, str]:
        return {
            name: f"/{self.TAGS}/{name}/@{revision}"
            for name, revision in self._ls(self.TAGS).items()
        }

    def get_branches(self) -> Dict[str, str]:
        branches: Dict[str, str] = {}
        trunk = self._ls('').get(self.TRUNK)
        if trunk is not None:
            branches[self.TRUNK] = f"/{self.TRUNK}/@{trunk}"
        for name, revision in self._ls(self.BRANCHES).items():
            branches[name] = f"/{self.BRANCHES}/{name}/@{revision}"
        return branches

    def get_source(self, identifier: str) -> Dict[str, Any]:
        return {'type': 'svn', 'url': self.base_url, 'reference': identifier}
