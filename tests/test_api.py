"""
Tests for the high-level VcsRepository API.
"""

import pytest

from vcsrepo import VcsRepository
from vcsrepo.domain import RepositoryLocation, SkipReason
from vcsrepo.errors import NoDriverFoundError
from vcsrepo.services import RecordingObserver

from conftest import FakeDriver

METADATA = {'name': 'acme/pkg', 'license': 'MIT'}


class AcmeDriver(FakeDriver):
    """FakeDriver preloaded with a small repository, created by the selector."""

    instances = []

    def __init__(self, url, config=None):
        super().__init__(
            url, config,
            tags={'1.0.0': 't1', 'junk': 't2'},
            branches={'master': 'b1'},
            metadata={'root': METADATA, 't1': METADATA, 't2': METADATA, 'b1': METADATA},
        )
        AcmeDriver.instances.append(self)


@pytest.fixture(autouse=True)
def reset_instances():
    AcmeDriver.instances = []
    yield


def make_repo(location='fake://acme/pkg', **kwargs):
    kwargs.setdefault('drivers', {'fake': AcmeDriver})
    kwargs.setdefault('config', {})
    return VcsRepository(location, **kwargs)


class TestVcsRepository:
    """Tests for VcsRepository."""

    def test_scan_is_lazy(self):
        repo = make_repo()
        assert not repo.is_scanned
        assert AcmeDriver.instances == []

        assert len(repo) == 2
        assert repo.is_scanned
        assert len(AcmeDriver.instances) == 1

    def test_scans_once(self):
        repo = make_repo()
        repo.packages()
        repo.count()
        list(repo)
        assert len(AcmeDriver.instances) == 1

    def test_driver_closed_after_scan(self):
        repo = make_repo()
        repo.packages()
        assert AcmeDriver.instances[0].closed

    def test_packages(self):
        packages = make_repo().packages()
        assert [(p.name, p.version, p.version_normalized) for p in packages] == [
            ('acme/pkg', '1.0.0', '1.0.0.0'),
            ('acme/pkg', 'dev-master', '9999999-dev'),
        ]
        assert packages[0].source == {'type': 'fake', 'url': 'fake://acme/pkg', 'reference': 't1'}

    def test_find_and_has_package(self):
        repo = make_repo()
        assert repo.find_package('acme/pkg', '1.0.0').source['reference'] == 't1'
        assert repo.find_package('acme/pkg', '9999999-dev').version == 'dev-master'
        assert repo.has_package('acme/pkg', 'dev-master')
        assert not repo.has_package('acme/pkg', '2.0.0')
        assert not repo.has_package('other/pkg', '1.0.0')

    def test_skipped(self):
        result = make_repo().result
        assert result.skipped == (('junk', SkipReason.INVALID_NAME),)
        assert result.package_name == 'acme/pkg'

    def test_dict_location(self):
        repo = make_repo({'url': 'fake://acme/pkg', 'type': 'fake'})
        assert repo.location == RepositoryLocation('fake://acme/pkg', 'fake')
        assert repo.url == 'fake://acme/pkg'

    def test_type_override(self):
        """Test a declared type picks the driver even when its URL check would fail."""
        repo = make_repo('https://example.org/acme/pkg', type='fake')
        assert repo.location.type == 'fake'
        assert repo.count() == 2

    def test_no_driver_found_on_first_access(self):
        repo = make_repo('https://example.org/acme/pkg', drivers=[])
        with pytest.raises(NoDriverFoundError):
            repo.packages()
        assert not repo.is_scanned

    def test_observer_receives_events(self):
        observer = RecordingObserver()
        make_repo(observer=observer).packages()
        names = [event[2] for event in observer.events if event[0] == 'started']
        assert names == ['1.0.0', 'junk', 'master']

    def test_config_is_passed_to_driver(self):
        config = {'scan': {'metadata_file': 'composer.json'}}
        make_repo(config=config).packages()
        assert AcmeDriver.instances[0].config == config

    def test_repr(self):
        assert repr(make_repo()) == "VcsRepository('fake://acme/pkg')"
        assert repr(make_repo(type='fake')) == "VcsRepository('fake://acme/pkg', type='fake')"

    def test_loads_config_when_not_given(self, isolated_config):
        """Test injected drivers still scan when the config comes from file defaults."""
        repo = VcsRepository('fake://acme/pkg', drivers={'fake': AcmeDriver})
        assert repo.config['drivers']['order'] == ['github', 'git', 'hg', 'svn']
        assert repo.scan_service.selector.names() == ['fake']
        assert repo.has_package('acme/pkg', '1.0.0')
