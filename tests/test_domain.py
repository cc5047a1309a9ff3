"""Tests for the domain layer."""

import json

import pytest

from vcsrepo.domain import (
    ItemKind,
    ItemOutcome,
    OutcomeStatus,
    PackageRecord,
    RepositoryLocation,
    ScanResult,
    SkipReason,
)


def make_record(name="acme/pkg", version="1.0.0", normalized="1.0.0.0", **extra):
    return PackageRecord(
        name=name,
        version=version,
        version_normalized=normalized,
        source={'type': 'git', 'url': 'https://example.org/acme/pkg.git', 'reference': 'abc'},
        extra=extra,
    )


class TestRepositoryLocation:
    """Tests for RepositoryLocation domain object."""

    def test_default_type_is_detect(self):
        location = RepositoryLocation("https://example.org/pkg.git")
        assert location.type == "vcs"

    def test_from_config(self):
        """Test creating from a repository config mapping."""
        location = RepositoryLocation.from_config({'url': '/srv/pkg', 'type': 'git'})
        assert location == RepositoryLocation('/srv/pkg', 'git')

    def test_from_config_without_type(self):
        location = RepositoryLocation.from_config({'url': '/srv/pkg'})
        assert location.type == 'vcs'

    def test_from_config_requires_url(self):
        with pytest.raises(ValueError):
            RepositoryLocation.from_config({'type': 'git'})

    def test_to_dict(self):
        assert RepositoryLocation('/srv/pkg', 'hg').to_dict() == {'url': '/srv/pkg', 'type': 'hg'}


class TestPackageRecord:
    """Tests for PackageRecord domain object."""

    def test_is_dev(self):
        """Test dev detection for both dev version forms."""
        assert make_record(version="dev-master", normalized="9999999-dev").is_dev
        assert make_record(version="2.1-dev", normalized="2.1.9999999.9999999-dev").is_dev
        assert not make_record().is_dev

    def test_unique_name(self):
        assert make_record().unique_name == "acme/pkg-1.0.0"

    def test_extra_is_read_only(self):
        """Test carried-through metadata cannot be modified."""
        record = make_record(description="A package")
        with pytest.raises(TypeError):
            record.extra['description'] = "changed"

    def test_extra_is_copied(self):
        """Test changing the input mapping does not change the record."""
        extra = {'license': 'MIT'}
        record = PackageRecord('acme/pkg', '1.0.0', '1.0.0.0', extra=extra)
        extra['license'] = 'GPL'
        assert record.get('license') == 'MIT'

    def test_record_is_frozen(self):
        record = make_record()
        with pytest.raises(AttributeError):
            record.version = "2.0.0"

    def test_get_default(self):
        assert make_record().get('missing', 'fallback') == 'fallback'

    def test_to_dict_flattens_extra(self):
        """Test serialization puts extra fields at the top level."""
        record = make_record(description="A package", require={'php': '>=8.1'})
        d = record.to_dict()
        assert d['name'] == 'acme/pkg'
        assert d['version'] == '1.0.0'
        assert d['version_normalized'] == '1.0.0.0'
        assert d['description'] == 'A package'
        assert d['require'] == {'php': '>=8.1'}
        assert d['source']['type'] == 'git'
        assert 'dist' not in d

    def test_to_dict_core_fields_win_over_extra(self):
        record = PackageRecord('acme/pkg', '1.0.0', '1.0.0.0', extra={'version': 'bogus'})
        assert record.to_dict()['version'] == '1.0.0'

    def test_to_jsonl(self):
        line = make_record().to_jsonl()
        assert '\n' not in line
        assert json.loads(line)['name'] == 'acme/pkg'

    def test_str(self):
        assert str(make_record()) == "acme/pkg 1.0.0"


class TestItemOutcome:
    """Tests for ItemOutcome domain object."""

    def test_imported(self):
        record = make_record()
        outcome = ItemOutcome.imported(ItemKind.TAG, "1.0.0", "abc", record)
        assert outcome.is_imported
        assert outcome.status == OutcomeStatus.IMPORTED
        assert outcome.record is record
        assert outcome.reason is None

    def test_skipped(self):
        outcome = ItemOutcome.skipped(
            ItemKind.BRANCH, "feature", "def", SkipReason.NO_METADATA, "no composer file"
        )
        assert not outcome.is_imported
        assert outcome.record is None
        assert outcome.reason == SkipReason.NO_METADATA

    def test_to_dict_skipped(self):
        outcome = ItemOutcome.skipped(
            ItemKind.TAG, "junk", "abc", SkipReason.INVALID_NAME, "invalid tag name"
        )
        assert outcome.to_dict() == {
            'type': 'tag',
            'name': 'junk',
            'identifier': 'abc',
            'status': 'skipped',
            'reason': 'invalid_name',
            'message': 'invalid tag name',
        }

    def test_to_dict_imported(self):
        outcome = ItemOutcome.imported(ItemKind.TAG, "1.0.0", "abc", make_record())
        d = outcome.to_dict()
        assert d['status'] == 'imported'
        assert d['version_normalized'] == '1.0.0.0'
        assert 'reason' not in d


class TestScanResult:
    """Tests for ScanResult domain object."""

    @pytest.fixture
    def result(self):
        outcomes = [
            ItemOutcome.imported(ItemKind.TAG, "1.0.0", "a", make_record()),
            ItemOutcome.skipped(ItemKind.TAG, "junk", "b", SkipReason.INVALID_NAME, "invalid tag name"),
            ItemOutcome.imported(
                ItemKind.BRANCH, "master", "c",
                make_record(version="dev-master", normalized="9999999-dev")
            ),
            ItemOutcome.skipped(ItemKind.BRANCH, "docs", "d", SkipReason.NO_METADATA, "no composer file"),
        ]
        return ScanResult.fold("https://example.org/acme/pkg", "acme/pkg", outcomes)

    def test_packages_in_order(self, result):
        """Test packages keep processing order, tags before branches."""
        assert [p.version for p in result.packages] == ["1.0.0", "dev-master"]

    def test_skipped(self, result):
        assert result.skipped == (
            ("junk", SkipReason.INVALID_NAME),
            ("docs", SkipReason.NO_METADATA),
        )

    def test_counts(self, result):
        assert result.imported_count == 2
        assert result.skipped_count == 2
        assert len(result) == 2
        assert len(result.outcomes) == 4

    def test_iterates_packages(self, result):
        assert [str(p) for p in result] == ["acme/pkg 1.0.0", "acme/pkg dev-master"]

    def test_find_package_by_version(self, result):
        assert result.find_package("acme/pkg", "1.0.0").version_normalized == "1.0.0.0"

    def test_find_package_by_normalized_version(self, result):
        assert result.find_package("acme/pkg", "9999999-dev").version == "dev-master"

    def test_find_package_missing(self, result):
        assert result.find_package("acme/pkg", "3.0.0") is None
        assert result.find_package("other/pkg", "1.0.0") is None

    def test_outcomes_are_a_tuple(self, result):
        """Test the result cannot be appended to after folding."""
        assert isinstance(result.outcomes, tuple)
        with pytest.raises(AttributeError):
            result.outcomes = ()

    def test_duplicates_are_kept(self):
        """Test records with the same name and version are not deduplicated."""
        outcomes = [
            ItemOutcome.imported(ItemKind.TAG, "1.0.0", "a", make_record()),
            ItemOutcome.imported(ItemKind.TAG, "v1.0.0", "b", make_record()),
        ]
        assert len(ScanResult.fold("u", None, outcomes)) == 2

    def test_to_dict(self, result):
        assert result.to_dict() == {
            'type': 'summary',
            'url': 'https://example.org/acme/pkg',
            'package_name': 'acme/pkg',
            'total': 4,
            'imported': 2,
            'skipped': 2,
        }
