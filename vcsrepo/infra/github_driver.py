"""
GitHub driver for vcsrepo.

Reads tags, branches and metadata through the GitHub REST API,
without cloning. Authenticates with a token when one is configured
(github.token in config, or VCSREPO_GITHUB_TOKEN / GITHUB_TOKEN).
"""

import base64
import logging
import os
import re
from typing import Any, Dict, List, Optional

import requests

from ..errors import TransportError
from .driver import VcsDriver

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100

_GITHUB_URL_RE = re.compile(
    r'^(?:https?://|git://|git@)github\.com[:/]([^/]+)/(.+?)(?:\.git)?/?$'
)


class GitHubDriver(VcsDriver):
    """
    Driver for repositories hosted on github.com.

    Example:
        with GitHubDriver("https://github.com/acme/pkg") as driver:
            print(driver.get_root_identifier())   # "main"
    """

    def __init__(self, url: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(url, config)
        match = _GITHUB_URL_RE.match(url)
        if not match:
            raise ValueError(f"Not a GitHub repository URL: {url}")
        self.owner = match.group(1)
        self.repository = match.group(2)

        github_config = self.config.get('github', {})
        self.api_url = (github_config.get('api_url') or DEFAULT_API_URL).rstrip('/')
        self.token = (
            github_config.get('token')
            or os.environ.get('VCSREPO_GITHUB_TOKEN')
            or os.environ.get('GITHUB_TOKEN')
        )
        self.headers = {
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'vcsrepo',
        }
        if self.token:
            self.headers['Authorization'] = f'token {self.token}'

        self.root_identifier: Optional[str] = None
        self._metadata_cache: Dict[str, Optional[Dict[str, Any]]] = {}

    @classmethod
    def supports(cls, url: str, deep: bool = False) -> bool:
        return bool(_GITHUB_URL_RE.match(url))

    @property
    def repo_path(self) -> str:
        return f"repos/{self.owner}/{self.repository}"

    def _api(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Call the GitHub API.

        Raises:
            TransportError: On connection failure or any non-200 response
        """
        url = f"{self.api_url}/{endpoint}"
        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GitHub API request failed: {e}") from e

        if response.status_code != 200:
            logger.debug(f"GitHub API error {response.status_code} for {endpoint}")
            raise TransportError(
                f"GitHub API returned {response.status_code} for {url}",
                status_code=response.status_code
            )
        return response.json()

    def _paginate(self, endpoint: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = self._api(endpoint, params={'per_page': PER_PAGE, 'page': page})
            if not batch:
                break
            items.extend(batch)
            if len(batch) < PER_PAGE:
                break
            page += 1
        return items

    def _setup(self) -> None:
        data = self._api(self.repo_path)
        self.root_identifier = data.get('default_branch') or 'master'

    def get_root_identifier(self) -> str:
        self.initialize()
        return self.root_identifier

    def get_metadata(self, identifier: str) -> Optional[Dict[str, Any]]:
        if identifier in self._metadata_cache:
            return self._metadata_cache[identifier]

        try:
            content = self._api(
                f"{self.repo_path}/contents/{self.metadata_file}",
                params={'ref': identifier}
            )
        except TransportError as e:
            if e.status_code != 404:
                raise
            data = None
        else:
            data = self._parse_metadata(self._decode(content), identifier)

        if data is not None and 'time' not in data:
            try:
                commit = self._api(f"{self.repo_path}/commits/{identifier}")
            except TransportError as e:
                # the metadata itself was read, only its date is missing
                logger.debug(f"No commit time for {identifier}: {e}")
            else:
                committed = commit.get('commit', {}).get('committer', {}).get('date')
                if committed:
                    data['time'] = committed

        self._metadata_cache[identifier] = data
        return data

    @staticmethod
    def _decode(content: Dict[str, Any]) -> Optional[str]:
        if content.get('encoding') != 'base64':
            return content.get('content')
        return base64.b64decode(content.get('content', '')).decode('utf-8')

    def get_tags(self) -> Dict[str, str]:
        return {
            tag['name']: tag['commit']['sha']
            for tag in self._paginate(f"{self.repo_path}/tags")
        }

    def get_branches(self) -> Dict[str, str]:
        return {
            branch['name']: branch['commit']['sha']
            for branch in self._paginate(f"{self.repo_path}/branches")
        }

    def get_dist(self, identifier: str) -> Optional[Dict[str, Any]]:
        return {
            'type': 'zip',
            'url': f"{self.api_url}/{self.repo_path}/zipball/{identifier}",
            'reference': identifier,
            'shasum': '',
        }

    def get_source(self, identifier: str) -> Dict[str, Any]:
        return {'type': 'git', 'url': self.get_url(), 'reference': identifier}

    def get_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repository}.git"
