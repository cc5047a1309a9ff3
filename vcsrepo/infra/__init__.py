"""
Infrastructure layer for vcsrepo.

Contains drivers for external version-control systems:
- GitHubDriver: GitHub REST API access
- GitDriver: git command execution
- HgDriver: Mercurial command execution
- SvnDriver: Subversion command execution

All drivers implement VcsDriver, so the scan service can be tested
against fake drivers.
"""

from .driver import VcsDriver, CommandDriver
from .github_driver import GitHubDriver
from .git_driver import GitDriver
from .hg_driver import HgDriver
from .svn_driver import SvnDriver

__all__ = [
    'VcsDriver',
    'CommandDriver',
    'GitHubDriver',
    'GitDriver',
    'HgDriver',
    'SvnDriver',
]
