"""
Shared fixtures for vcsrepo tests.
"""

import pytest

from vcsrepo.infra import VcsDriver


class FakeDriver(VcsDriver):
    """
    In-memory driver.

    metadata maps identifier -> dict, None (no metadata file) or an
    exception instance to raise when that revision is read.
    """

    def __init__(self, url='https://example.org/acme/pkg', config=None,
                 tags=None, branches=None, metadata=None, root='root'):
        super().__init__(url, config)
        self.tags = dict(tags or {})
        self.branches = dict(branches or {})
        self.metadata = dict(metadata or {})
        self.root = root
        self.closed = False
        self.metadata_reads = []

    @classmethod
    def supports(cls, url, deep=False):
        return url.startswith('fake://')

    def get_root_identifier(self):
        return self.root

    def get_metadata(self, identifier):
        self.metadata_reads.append(identifier)
        value = self.metadata.get(identifier)
        if isinstance(value, Exception):
            raise value
        return dict(value) if value is not None else None

    def get_tags(self):
        return dict(self.tags)

    def get_branches(self):
        return dict(self.branches)

    def get_source(self, identifier):
        return {'type': 'fake', 'url': self.url, 'reference': identifier}

    def close(self):
        self.closed = True


@pytest.fixture
def fake_driver():
    """Factory for FakeDriver instances."""
    def make(**kwargs):
        driver = FakeDriver(**kwargs)
        driver.initialize()
        return driver
    return make


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point configuration at an empty temp directory and clear VCSREPO_* env vars."""
    import os
    for key in list(os.environ):
        if key.startswith('VCSREPO_'):
            monkeypatch.delenv(key)
    monkeypatch.setenv('HOME', str(tmp_path))
    return tmp_path


@pytest.fixture
def fake_driver_class():
    return FakeDriver
