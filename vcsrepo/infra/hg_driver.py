"""
Mercurial driver for vcsrepo.

Local repositories are read in place; remote URLs are cloned without a
working copy (hg clone -U) into a temporary directory.
"""

import logging
import os
import re
import shlex
from pathlib import Path
from typing import Any, Dict, Optional

from .driver import CommandDriver

logger = logging.getLogger(__name__)

_HG_URL_RE = re.compile(r'(^hg://|^(?:https?|ssh)://(?:[^@/]+@)?hg\.|\.hg/?$)', re.IGNORECASE)
# "1.0.0     42:6c0e1bd5a5e1" / "default   42:6c0e1bd5a5e1 (inactive)"
_REF_LINE_RE = re.compile(r'^(.+?)\s+\d+:([0-9a-f]+)(?:\s+\(\w+\))?$')


class HgDriver(CommandDriver):
    """Driver for Mercurial repositories."""

    @classmethod
    def supports(cls, url: str, deep: bool = False) -> bool:
        if _HG_URL_RE.search(url):
            return True

        path = Path(os.path.expanduser(url))
        if path.is_dir() and (path / '.hg').is_dir():
            return True

        if not deep:
            return False

        _, code = cls._probe(f"hg identify {shlex.quote(url)}")
        return code == 0

    def _setup(self) -> None:
        local = Path(os.path.expanduser(self.url))
        if local.is_dir():
            self.repo_dir = str(local.resolve())
            return

        temp_dir = self._make_temp_dir('vcsrepo-hg-')
        self.repo_dir = os.path.join(temp_dir, 'repo')
        logger.debug(f"Cloning {self.url} into {self.repo_dir}")
        self._run(
            f"hg clone -U {shlex.quote(self.url)} {shlex.quote(self.repo_dir)}",
            cwd=temp_dir,
            check=True
        )

    def get_root_identifier(self) -> str:
        return 'tip'

    def get_metadata(self, identifier: str) -> Optional[Dict[str, Any]]:
        output, code = self._run(
            f"hg cat -r {shlex.quote(identifier)} {shlex.quote(self.metadata_file)}"
        )
        if code != 0:
            return None

        data = self._parse_metadata(output, identifier)
        if data is not None and 'time' not in data:
            date, code = self._run(
                f"hg log --template '{{date|rfc3339date}}' -r {shlex.quote(identifier)}"
            )
            if code == 0 and date:
                data['time'] = date.strip()
        return data

    def get_tags(self) -> Dict[str, str]:
        output, _ = self._run("hg tags", check=True)
        tags = self._parse_refs(output)
        tags.pop('tip', None)
        return tags

    def get_branches(self) -> Dict[str, str]:
        output, _ = self._run("hg branches", check=True)
        branches = self._parse_refs(output)

        output, code = self._run("hg bookmarks")
        if code == 0:
            for name, changeset in self._parse_refs(output).items():
                branches.setdefault(name, changeset)
        return branches

    @staticmethod
    def _parse_refs(output: Optional[str]) -> Dict[str, str]:
        """Parse "name  rev:hash" lines from hg tags/branches/bookmarks."""
        refs: Dict[str, str] = {}
        for line in (output or '').splitlines():
            # bookmarks mark the active one with a leading "*"
            match = _REF_LINE_RE.match(line.strip().lstrip('* '))
            if match:
                refs[match.group(1).strip()] = match.group(2)
        return refs

    def get_source(self, identifier: str) -> Dict[str, Any]:
        return {'type': 'hg', 'url': self.url, 'reference': identifier}
