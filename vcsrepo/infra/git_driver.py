"""
Git driver for vcsrepo.

Reads tags, branches and metadata through the git command line.
Local repositories are read in place; remote URLs are mirrored into a
temporary directory for the duration of the scan.
"""

import logging
import os
import re
import shlex
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import TransportError
from .driver import CommandDriver

logger = logging.getLogger(__name__)

_GIT_URL_RE = re.compile(r'(^git://|^git@|\.git/?$|^https?://git\.|//git\.)', re.IGNORECASE)


class GitDriver(CommandDriver):
    """
    Driver for plain git repositories.

    Example:
        with GitDriver("https://example.org/acme/pkg.git") as driver:
            for tag, commit in driver.get_tags().items():
                print(tag, commit)
    """

    @classmethod
    def supports(cls, url: str, deep: bool = False) -> bool:
        if _GIT_URL_RE.search(url):
            return True

        path = Path(os.path.expanduser(url))
        if path.is_dir() and (path / '.git').exists():
            return True

        if not deep:
            return False

        _, code = cls._probe(f"git ls-remote --heads {shlex.quote(url)}")
        return code == 0

    def _setup(self) -> None:
        local = Path(os.path.expanduser(self.url))
        if local.is_dir():
            self.repo_dir = str(local.resolve())
            return

        self.repo_dir = self._make_temp_dir('vcsrepo-git-')
        logger.debug(f"Mirroring {self.url} into {self.repo_dir}")
        self._run(
            f"git clone --mirror {shlex.quote(self.url)} {shlex.quote(self.repo_dir)}",
            cwd=self._temp_dir,
            check=True
        )

    def get_root_identifier(self) -> str:
        output, code = self._run("git symbolic-ref --short HEAD")
        if code == 0 and output:
            return output.strip()
        return 'master'

    def get_metadata(self, identifier: str) -> Optional[Dict[str, Any]]:
        ref = shlex.quote(f"{identifier}:{self.metadata_file}")
        output, code = self._run(f"git show {ref}")
        if code != 0:
            return None

        data = self._parse_metadata(output, identifier)
        if data is not None and 'time' not in data:
            commit_time = self._commit_time(identifier)
            if commit_time:
                data['time'] = commit_time
        return data

    def _commit_time(self, identifier: str) -> Optional[str]:
        output, code = self._run(f"git log -1 --format=%at {shlex.quote(identifier)}")
        if code != 0 or not output:
            return None
        try:
            timestamp = int(output.strip())
        except ValueError:
            return None
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()

    def get_tags(self) -> Dict[str, str]:
        return self._parse_refs(self._show_ref("--tags --dereference"), 'refs/tags/')

    def get_branches(self) -> Dict[str, str]:
        return self._parse_refs(self._show_ref("--heads"), 'refs/heads/')

    def _show_ref(self, args: str) -> Optional[str]:
        output, code = self._run(f"git show-ref {args}")
        # show-ref exits 1 when no refs match
        if code not in (0, 1):
            raise TransportError(f"Failed to list refs of {self.url}")
        return output

    @staticmethod
    def _parse_refs(output: Optional[str], prefix: str) -> Dict[str, str]:
        """
        Parse show-ref output into name -> commit.

        Annotated tags are listed twice; the dereferenced "^{}" line
        points at the commit and wins over the tag object.
        """
        refs: Dict[str, str] = {}
        if not output:
            return refs

        for line in output.splitlines():
            parts = line.strip().split(None, 1)
            if len(parts) != 2 or not parts[1].startswith(prefix):
                continue
            commit, ref = parts
            name = ref[len(prefix):]
            if name.endswith('^{}'):
                refs[name[:-3]] = commit
            else:
                refs.setdefault(name, commit)
        return refs

    def get_source(self, identifier: str) -> Dict[str, Any]:
        return {'type': 'git', 'url': self.url, 'reference': identifier}
