"""Tests for the shared-reader shortcut functions."""

import importlib

import pytest

from iplocation.lookup import (
    close_all,
    get_city_for_ip,
    get_country_for_ip,
    get_reader,
    lookup,
)

from .conftest import DatabaseBuilder

# the package re-exports the lookup() function under the same name
lookup_module = importlib.import_module("iplocation.lookup")


@pytest.fixture(autouse=True)
def default_db(city_db, monkeypatch):
    """Point the default database at the test file."""
    monkeypatch.setattr(lookup_module, "DEFAULT_DATABASE", city_db)
    yield city_db
    close_all()


class TestGetReader:
    def test_reused(self):
        assert get_reader() is get_reader()

    def test_per_path(self, tmp_path, default_db):
        other = DatabaseBuilder(["country"], {"CN": 0}).write(tmp_path / "other.ipdb")
        assert get_reader(other) is not get_reader(default_db)

    def test_reopened_after_close(self):
        reader = get_reader()
        reader.close()
        assert get_reader() is not reader
        assert not get_reader().closed

    def test_close_all(self):
        reader = get_reader()
        close_all()
        assert reader.closed


class TestShortcuts:
    def test_lookup(self):
        assert lookup("1.2.3.4", "EN") == {
            "country_name": "China",
            "city_name": "Beijing",
        }

    def test_lookup_not_found(self):
        assert lookup("9.9.9.9") is None

    def test_lookup_raises_on_bad_input(self):
        with pytest.raises(ValueError):
            lookup("bogus")

    def test_city(self):
        assert get_city_for_ip("1.2.3.4") == "北京"
        assert get_city_for_ip("2001:db8::1", "EN") == "Tokyo"

    def test_country(self):
        assert get_country_for_ip("8.8.8.8", "EN") == "United States"

    def test_errors_swallowed(self):
        assert get_city_for_ip("bogus") is None
        assert get_city_for_ip("1.2.3.4", "XX") is None
        assert get_country_for_ip("9.9.9.9") is None

    def test_missing_database(self, tmp_path):
        assert get_city_for_ip("1.2.3.4", database=tmp_path / "none.ipdb") is None
