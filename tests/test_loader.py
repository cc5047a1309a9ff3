"""Tests for the package loader."""

import pytest

from vcsrepo.errors import InvalidPackageError
from vcsrepo.loader import PackageLoader


@pytest.fixture
def loader():
    return PackageLoader()


class TestPackageLoader:
    """Tests for PackageLoader.load."""

    def test_load_minimal(self, loader):
        """Test version_normalized is computed when missing."""
        record = loader.load({'name': 'acme/pkg', 'version': '1.0.0'})
        assert record.name == 'acme/pkg'
        assert record.version == '1.0.0'
        assert record.version_normalized == '1.0.0.0'
        assert record.dist is None
        assert record.source is None

    def test_keeps_given_normalized_version(self, loader):
        record = loader.load({
            'name': 'acme/pkg',
            'version': 'dev-master',
            'version_normalized': '9999999-dev',
        })
        assert record.version_normalized == '9999999-dev'

    def test_extra_fields_carried_through(self, loader):
        """Test fields other than the core ones end up in extra."""
        record = loader.load({
            'name': 'acme/pkg',
            'version': '1.0.0',
            'description': 'A package',
            'require': {'php': '>=8.1'},
            'time': '2024-01-01T00:00:00+00:00',
        })
        assert record.get('description') == 'A package'
        assert record.get('require') == {'php': '>=8.1'}
        assert record.get('time') == '2024-01-01T00:00:00+00:00'
        assert 'name' not in record.extra

    def test_dist_and_source(self, loader):
        record = loader.load({
            'name': 'acme/pkg',
            'version': '1.0.0',
            'dist': {'type': 'zip', 'url': 'https://example.org/pkg.zip', 'reference': 'abc'},
            'source': {'type': 'git', 'url': 'https://example.org/pkg.git', 'reference': 'abc'},
        })
        assert record.dist['type'] == 'zip'
        assert record.source['reference'] == 'abc'

    @pytest.mark.parametrize("data", [
        {'version': '1.0.0'},
        {'name': '', 'version': '1.0.0'},
        {'name': 42, 'version': '1.0.0'},
        {'name': 'acme/pkg'},
        {'name': 'acme/pkg', 'version': ''},
        {'name': 'acme/pkg', 'version': 'not a version'},
    ])
    def test_rejects_bad_name_or_version(self, loader, data):
        """Test missing or malformed name/version is rejected."""
        with pytest.raises(InvalidPackageError):
            loader.load(data)

    @pytest.mark.parametrize("field,value", [
        ('source', 'https://example.org/pkg.git'),
        ('source', {'type': 'git'}),
        ('dist', {'url': 'https://example.org/pkg.zip'}),
    ])
    def test_rejects_malformed_locations(self, loader, field, value):
        """Test dist/source must be mappings with type and url."""
        data = {'name': 'acme/pkg', 'version': '1.0.0', field: value}
        with pytest.raises(InvalidPackageError, match=field):
            loader.load(data)

    def test_invalid_package_error_is_value_error(self, loader):
        with pytest.raises(ValueError):
            loader.load({})
