"""
Tests for the Mercurial driver. Commands are never run: _run and _probe are patched.
"""

import os
from unittest.mock import patch

import pytest

from vcsrepo.errors import TransportError
from vcsrepo.infra import HgDriver

HG_TAGS = """\
tip                               42:6c0e1bd5a5e1
2.0.0                             40:aaaaaaaaaaaa
1.0.0                             12:bbbbbbbbbbbb"""

HG_BRANCHES = """\
default                           42:6c0e1bd5a5e1
stable                            30:cccccccccccc (inactive)"""

HG_BOOKMARKS = """\
 * feature                        41:dddddddddddd
   stable                         29:eeeeeeeeeeee"""


@pytest.fixture
def driver(tmp_path):
    (tmp_path / '.hg').mkdir()
    driver = HgDriver(str(tmp_path))
    driver.initialize()
    return driver


def run_with(responses):
    def run(cmd, cwd=None, check=False):
        for prefix, result in responses.items():
            if cmd.startswith(prefix):
                return result
        if check:
            raise TransportError(f"Failed to execute {cmd}")
        return None, 255
    return run


class TestHgDriverSupports:
    """Tests for HgDriver.supports."""

    @pytest.mark.parametrize("url", [
        "hg://example.org/pkg",
        "https://hg.example.org/pkg",
        "ssh://user@hg.example.org/pkg",
    ])
    def test_shallow_urls(self, url):
        assert HgDriver.supports(url)

    def test_local_repository(self, tmp_path):
        (tmp_path / '.hg').mkdir()
        assert HgDriver.supports(str(tmp_path))

    def test_plain_url_not_supported_shallow(self):
        assert not HgDriver.supports("https://example.org/pkg")

    def test_deep_probe(self):
        with patch.object(HgDriver, '_probe', return_value=("6c0e1bd5a5e1 tip", 0)) as probe:
            assert HgDriver.supports("https://example.org/pkg", deep=True)
        assert probe.call_args[0][0] == "hg identify https://example.org/pkg"


class TestHgDriver:
    """Tests for HgDriver enumeration and metadata."""

    def test_remote_clone(self):
        driver = HgDriver("https://hg.example.org/pkg")
        with patch.object(driver, '_run', return_value=(None, 0)) as run:
            driver.initialize()
        assert run.call_args[0][0].startswith("hg clone -U https://hg.example.org/pkg ")
        assert driver.repo_dir.endswith(os.sep + 'repo')
        temp_dir = os.path.dirname(driver.repo_dir)
        driver.close()
        assert not os.path.exists(temp_dir)

    def test_root_is_tip(self, driver):
        assert driver.get_root_identifier() == 'tip'

    def test_tags_exclude_tip(self, driver):
        with patch.object(driver, '_run', side_effect=run_with({"hg tags": (HG_TAGS, 0)})):
            assert driver.get_tags() == {'2.0.0': 'aaaaaaaaaaaa', '1.0.0': 'bbbbbbbbbbbb'}

    def test_branches_include_bookmarks(self, driver):
        """Test bookmarks are added, but a branch of the same name wins."""
        responses = {
            "hg branches": (HG_BRANCHES, 0),
            "hg bookmarks": (HG_BOOKMARKS, 0),
        }
        with patch.object(driver, '_run', side_effect=run_with(responses)):
            branches = driver.get_branches()
        assert branches == {
            'default': '6c0e1bd5a5e1',
            'stable': 'cccccccccccc',
            'feature': 'dddddddddddd',
        }

    def test_tag_listing_failure(self, driver):
        with patch.object(driver, '_run', side_effect=run_with({})):
            with pytest.raises(TransportError):
                driver.get_tags()

    def test_metadata(self, driver):
        responses = {
            "hg cat -r 1.0.0 composer.json": ('{"name": "acme/pkg"}', 0),
            "hg log": ("2024-02-01T10:00:00+01:00", 0),
        }
        with patch.object(driver, '_run', side_effect=run_with(responses)):
            data = driver.get_metadata('1.0.0')
        assert data == {'name': 'acme/pkg', 'time': '2024-02-01T10:00:00+01:00'}

    def test_missing_metadata(self, driver):
        with patch.object(driver, '_run', side_effect=run_with({})):
            assert driver.get_metadata('1.0.0') is None

    def test_source(self, driver):
        assert driver.get_source('abc')['type'] == 'hg'
