"""
Data loading utilities for the Trans.NRW map.

City files are JSON documents named <city>.json, served either from the
local data/ folder or from DATA_BASE_URL over HTTP.
"""

import json
import logging
import os
import re

import requests

import config

logger = logging.getLogger(__name__)

CITY_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

ACCESSIBILITY_FLAGS = ["wheelchairAccessible", "genderNeutralBathrooms", "quietSpace"]
CONTACT_FIELDS = ["phone", "email", "website"]


class CityDataError(Exception):
    """A city file could not be fetched, parsed or validated"""


class InvalidCityDataError(CityDataError):
    """A city file was fetched but does not match the expected structure"""

    def __init__(self, city_name, errors):
        self.city_name = city_name
        self.errors = list(errors)
        super().__init__(f"Invalid data structure for {city_name}: {', '.join(self.errors)}")


def _present(value):
    """Truthiness of a JSON value as the site has always treated it (empty objects/arrays count)"""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _has_lat_lng(obj):
    return isinstance(obj, dict) and _is_number(obj.get("lat")) and _is_number(obj.get("lng"))


def _check_localized(errors, localized, field):
    """Check the optional en/de strings of a *Localized metadata object"""
    if not (_present(localized) and isinstance(localized, dict)):
        return
    for lang in ("en", "de"):
        value = localized.get(lang)
        if _present(value) and not isinstance(value, str):
            errors.append(f"Metadata {field}.{lang} must be a string")


def _validate_metadata(errors, metadata):
    for field in ("version", "cityName", "region", "country"):
        value = metadata.get(field)
        if _present(value) and not isinstance(value, str):
            errors.append(f"Metadata {field} must be a string")
        # Localized variant comes right after its plain field
        if field != "version":
            _check_localized(errors, metadata.get(f"{field}Localized"), f"{field}Localized")

    coordinates = metadata.get("coordinates")
    if _present(coordinates) and isinstance(coordinates, (dict, list)) and not _has_lat_lng(coordinates):
        errors.append("Metadata coordinates must have valid lat/lng numbers")


def _validate_location(errors, index, location):
    prefix = f"Location at index {index}"

    if not isinstance(location, dict):
        errors.append(f"{prefix} must be an object")
        return

    name = location.get("name")
    if not _present(name) or not isinstance(name, str):
        errors.append(f'{prefix} must have a "name" string')

    description = location.get("description")
    if not _present(description) or not isinstance(description, dict):
        errors.append(f'{prefix} must have a "description" object')
    else:
        # At least one language with actual text
        has_language = any(
            isinstance(desc, str) and desc.strip() for desc in description.values()
        )
        if not has_language:
            errors.append(f"{prefix} must have at least one language description")

    coords = location.get("location")
    if not _present(coords) or not isinstance(coords, dict):
        errors.append(f'{prefix} must have a "location" object')
    elif not _has_lat_lng(coords):
        errors.append(f"{prefix} must have valid lat/lng coordinates")

    loc_metadata = location.get("metadata")
    if not (_present(loc_metadata) and isinstance(loc_metadata, dict)):
        return

    category = loc_metadata.get("category")
    if _present(category) and not isinstance(category, str):
        errors.append(f"{prefix} metadata category must be a string")

    tags = loc_metadata.get("tags")
    if _present(tags) and not isinstance(tags, list):
        errors.append(f"{prefix} metadata tags must be an array")

    contact = loc_metadata.get("contact")
    if _present(contact) and isinstance(contact, dict):
        for field in CONTACT_FIELDS:
            value = contact.get(field)
            if _present(value) and not isinstance(value, str):
                errors.append(f"{prefix} contact {field} must be a string")

    accessibility = loc_metadata.get("accessibility")
    if _present(accessibility) and isinstance(accessibility, dict):
        for flag in ACCESSIBILITY_FLAGS:
            if flag not in accessibility:
                continue
            value = accessibility[flag]
            if not isinstance(value, bool) and value != "unknown":
                errors.append(f"{prefix} accessibility {flag} must be a boolean or 'unknown'")


def validate_city_data(data):
    """
    Validate the structure of a city data document.

    Returns {"is_valid": bool, "errors": [str]} with every problem found,
    not just the first one.
    """
    errors = []

    if not isinstance(data, dict):
        errors.append("Data must be a valid JSON object")
        return {"is_valid": False, "errors": errors}

    # Required top-level fields
    locations = data.get("locations")
    if not isinstance(locations, list):
        errors.append('Data must contain a "locations" array')

    view_root = data.get("viewRoot")
    if not _present(view_root) or not isinstance(view_root, dict):
        errors.append('Data must contain a "viewRoot" object')

    label = data.get("label")
    if not _present(label) or not isinstance(label, str):
        errors.append('Data must contain a "label" string')

    # Metadata is optional but checked when given
    metadata = data.get("metadata")
    if _present(metadata) and isinstance(metadata, dict):
        _validate_metadata(errors, metadata)

    if isinstance(locations, list):
        for index, location in enumerate(locations):
            _validate_location(errors, index, location)

    if isinstance(view_root, dict):
        if not _has_lat_lng(view_root):
            errors.append("viewRoot must have valid lat/lng coordinates")
        if "zoom" in view_root and not _is_number(view_root["zoom"]):
            errors.append("viewRoot zoom must be a number")

    return {"is_valid": len(errors) == 0, "errors": errors}


def _fetch_remote(city_name, base_url):
    url = f"{base_url}/{city_name}.json"
    try:
        response = requests.get(url, timeout=config.REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        raise CityDataError(f"Failed to load data for {city_name}: {e}") from e

    if not response.ok:
        raise CityDataError(
            f"Failed to load data for {city_name}: {response.status_code} {response.reason}"
        )

    try:
        return response.json()
    except ValueError as e:
        raise CityDataError(f"Failed to parse data for {city_name}: {e}") from e


def _read_local(city_name, data_dir):
    path = os.path.join(data_dir, f"{city_name}.json")
    if not os.path.exists(path):
        raise CityDataError(f"Failed to load data for {city_name}: 404 Not Found")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise CityDataError(f"Failed to parse data for {city_name}: {e}") from e


def load_city_data(city_name):
    """
    Load and validate a single city data file.

    Raises CityDataError (or InvalidCityDataError) when the file is missing,
    unreadable or malformed.
    """
    try:
        if not isinstance(city_name, str) or not CITY_NAME_PATTERN.fullmatch(city_name):
            raise CityDataError(f"Invalid city name: {city_name!r}")

        if config.DATA_BASE_URL:
            data = _fetch_remote(city_name, config.DATA_BASE_URL)
        else:
            data = _read_local(city_name, config.DATA_DIR)

        validation = validate_city_data(data)
        if not validation["is_valid"]:
            raise InvalidCityDataError(city_name, validation["errors"])

        return data
    except CityDataError as e:
        logger.error("Error loading city data for %s: %s", city_name, e)
        raise


def get_available_cities():
    """List of cities with a data file (static for now)"""
    return list(config.KNOWN_CITIES)


def load_all_city_data(cities=None):
    """
    Load every known city.

    Failures are collected per city instead of raised, so one broken file
    does not hide the others.
    """
    known_cities = list(cities) if cities is not None else get_available_cities()

    city_data = {}
    errors = {}
    for city_name in known_cities:
        try:
            city_data[city_name] = load_city_data(city_name)
        except CityDataError as e:
            logger.warning("Failed to load data for %s: %s", city_name, e)
            errors[city_name] = str(e)

    return {
        "city_data": city_data,
        "errors": errors,
        "available_cities": list(city_data.keys()),
        "total_cities": len(known_cities),
        "successful_loads": len(city_data),
    }


def is_city_data_available(city_name):
    """True if the city file exists and is valid"""
    try:
        load_city_data(city_name)
        return True
    except CityDataError:
        return False
