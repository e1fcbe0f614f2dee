import copy
import json

import pytest

import config

CITY_DATA = {
    "label": "testcity",
    "viewRoot": {"lat": 51.5, "lng": 7.2, "zoom": 12},
    "metadata": {
        "version": "1.0",
        "cityName": "Testcity",
        "cityNameLocalized": {"de": "Teststadt", "en": "Testcity"},
        "coordinates": {"lat": 51.5, "lng": 7.2},
    },
    "locations": [
        {
            "name": "Queeres Zentrum",
            "description": {"de": "Offener Treff", "en": "Open meetup"},
            "location": {"lat": 51.51, "lng": 7.21},
            "metadata": {
                "category": "Treffpunkt",
                "tags": ["treff", "cafe"],
                "contact": {"email": "info@example.org", "website": "https://example.org"},
                "accessibility": {"wheelchairAccessible": True, "quietSpace": "unknown"},
            },
        },
        {
            "name": "Beratung",
            "description": {"de": "Beratung für trans* Personen"},
            "location": {"lat": 51.49, "lng": 7.19},
        },
    ],
}


@pytest.fixture
def city_data():
    return copy.deepcopy(CITY_DATA)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Local data folder with a valid testcity.json, used instead of data/"""
    (tmp_path / "testcity.json").write_text(json.dumps(CITY_DATA), encoding="utf-8")
    monkeypatch.setattr(config, "DATA_DIR", str(tmp_path))
    monkeypatch.setattr(config, "DATA_BASE_URL", "")
    monkeypatch.setattr(config, "KNOWN_CITIES", ["testcity"])
    return tmp_path
