"""
Unit tests for the per-session city data store
"""

from unittest.mock import patch

import pytest

from city_state import CityDataStore
from data_loader import CityDataError

BOCHUM = {"label": "bochum", "viewRoot": {"lat": 51.48, "lng": 7.21}, "locations": []}
ESSEN = {"label": "essen", "viewRoot": {"lat": 51.45, "lng": 7.01}, "locations": []}


def summary(city_data, errors=None, total=None):
    errors = errors or {}
    return {
        "city_data": dict(city_data),
        "errors": dict(errors),
        "available_cities": list(city_data),
        "total_cities": total if total is not None else len(city_data) + len(errors),
        "successful_loads": len(city_data),
    }


@pytest.fixture
def store():
    return CityDataStore(initial_city="bochum")


def test_initial_state(store):
    assert store.current_city == "bochum"
    assert store.city_data is None
    assert store.all_city_data == {}
    assert store.loading is False
    assert store.error is None
    assert not store.has_data
    assert not store.has_error
    assert not store.has_loading_errors
    assert store.total_available_cities == 0
    assert store.total_loaded_cities == 0


@patch("city_state.load_all_city_data")
@patch("city_state.get_available_cities", return_value=["bochum", "essen"])
def test_initialize_loads_all_cities(_, mock_load_all, store):
    mock_load_all.return_value = summary({"bochum": BOCHUM}, {"essen": "404 Not Found"})

    store.initialize()

    mock_load_all.assert_called_once_with(["bochum", "essen"])
    assert store.available_cities == ["bochum", "essen"]
    assert store.city_data == BOCHUM
    assert store.all_city_data == {"bochum": BOCHUM}
    assert store.loading_errors == {"essen": "404 Not Found"}
    assert store.has_data
    assert store.has_loading_errors
    assert store.total_available_cities == 2
    assert store.total_loaded_cities == 1
    assert store.loading is False


@patch("city_state.load_all_city_data")
@patch("city_state.get_available_cities", return_value=["bochum"])
def test_initialize_without_current_city(_, mock_load_all):
    mock_load_all.return_value = summary({}, {"bochum": "broken"})
    store = CityDataStore(initial_city="bochum")

    store.initialize()

    assert store.city_data is None
    assert not store.is_city_available("bochum")


@patch("city_state.load_city_data", return_value=ESSEN)
def test_load_city_fetches_and_caches(mock_load, store):
    store.load_city("essen")

    mock_load.assert_called_once_with("essen")
    assert store.current_city == "essen"
    assert store.city_data == ESSEN
    assert store.all_city_data["essen"] == ESSEN
    assert store.loading is False
    assert store.error is None


@patch("city_state.load_city_data")
def test_load_city_uses_cache(mock_load, store):
    store.all_city_data = {"essen": ESSEN}

    store.load_city("essen")

    mock_load.assert_not_called()
    assert store.city_data == ESSEN
    assert store.current_city == "essen"


@patch("city_state.load_city_data")
def test_load_city_empty_name_is_noop(mock_load, store):
    store.load_city("")
    store.load_city(None)

    mock_load.assert_not_called()
    assert store.current_city == "bochum"


@patch("city_state.load_city_data")
def test_load_city_failure_keeps_previous_city(mock_load, store):
    store.city_data = BOCHUM
    store.all_city_data = {"bochum": BOCHUM}
    mock_load.side_effect = CityDataError("Failed to load data for essen: 404 Not Found")

    store.load_city("essen")

    assert store.error == "Failed to load data for essen: 404 Not Found"
    assert store.has_error
    assert store.current_city == "bochum"
    assert store.city_data == BOCHUM
    assert "essen" not in store.all_city_data
    assert store.loading is False


@patch("city_state.load_city_data", return_value=ESSEN)
def test_load_city_clears_previous_error(mock_load, store):
    store.error = "old problem"
    store.loading_errors = {"essen": "old problem"}

    store.load_city("essen")

    assert store.error is None
    assert store.loading_errors == {}


@patch("city_state.load_city_data")
def test_switch_city_same_city_is_noop(mock_load, store):
    store.switch_city("bochum")
    mock_load.assert_not_called()


@patch("city_state.load_city_data")
def test_switch_city_uses_cache(mock_load, store):
    store.all_city_data = {"bochum": BOCHUM, "essen": ESSEN}

    store.switch_city("essen")

    mock_load.assert_not_called()
    assert store.current_city == "essen"
    assert store.city_data == ESSEN


@patch("city_state.load_city_data", return_value=ESSEN)
def test_switch_city_loads_missing(mock_load, store):
    store.switch_city("essen")

    mock_load.assert_called_once_with("essen")
    assert store.current_city == "essen"


@patch("city_state.load_city_data")
def test_refresh_current_city_bypasses_cache(mock_load, store):
    updated = dict(BOCHUM, label="bochum", locations=[{"name": "neu"}])
    store.all_city_data = {"bochum": BOCHUM}
    store.city_data = BOCHUM
    mock_load.return_value = updated

    store.refresh_current_city()

    mock_load.assert_called_once_with("bochum")
    assert store.city_data == updated
    assert store.all_city_data["bochum"] == updated


@patch("city_state.load_all_city_data")
def test_refresh_all_data_replaces_cache(mock_load_all, store):
    store.available_cities = ["bochum", "essen"]
    store.all_city_data = {"bochum": BOCHUM, "dortmund": {}}
    store.city_data = BOCHUM
    fresh = dict(BOCHUM, locations=[{"name": "neu"}])
    mock_load_all.return_value = summary({"bochum": fresh, "essen": ESSEN})

    store.refresh_all_data()

    assert store.all_city_data == {"bochum": fresh, "essen": ESSEN}
    assert store.city_data == fresh
    assert store.loading_errors == {}
    assert store.loading is False


def test_is_city_available(store):
    store.available_cities = ["bochum", "essen"]
    store.loading_errors = {"essen": "404 Not Found"}

    assert store.is_city_available("bochum")
    assert not store.is_city_available("essen")
    assert not store.is_city_available("köln")


def test_loading_flag_set_while_loading_city(store):
    seen = []

    def fetch(city_name):
        seen.append(store.loading)
        return ESSEN

    with patch("city_state.load_city_data", side_effect=fetch):
        store.load_city("essen")

    assert seen == [True]
    assert store.loading is False


def test_loading_flag_reset_after_failed_load(store):
    seen = []

    def fetch(city_name):
        seen.append(store.loading)
        raise CityDataError("Failed to load data for essen: 404 Not Found")

    with patch("city_state.load_city_data", side_effect=fetch):
        store.load_city("essen")

    assert seen == [True]
    assert store.loading is False


def test_loading_flag_set_while_refreshing_all(store):
    seen = []

    def fetch_all(cities):
        seen.append(store.loading)
        return summary({"bochum": BOCHUM})

    with patch("city_state.load_all_city_data", side_effect=fetch_all):
        store.refresh_all_data()

    assert seen == [True]
    assert store.loading is False
