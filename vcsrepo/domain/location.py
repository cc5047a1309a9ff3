"""
Repository location domain object for vcsrepo.
"""

from dataclasses import dataclass
from typing import Any, Dict

# Access-method tag meaning "detect the driver from the URL"
AUTO_TYPE = "vcs"


@dataclass(frozen=True)
class RepositoryLocation:
    """
    Address of a version-control repository plus its declared access method.

    Example:
        RepositoryLocation("https://github.com/acme/pkg", "github")
        RepositoryLocation("/srv/repos/pkg")   # type "vcs": detect by probing
    """
    url: str
    type: str = AUTO_TYPE

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'RepositoryLocation':
        """Create from a repository config mapping ({"url": ..., "type": ...})."""
        if not config.get('url'):
            raise ValueError("Repository config requires a 'url'")
        return cls(url=config['url'], type=config.get('type') or AUTO_TYPE)

    def to_dict(self) -> Dict[str, Any]:
        return {'url': self.url, 'type': self.type}
