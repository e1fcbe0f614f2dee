"""
Session state for city data.

One CityDataStore lives in st.session_state per browser session. It keeps
every city loaded so far, which one is shown, and what went wrong.
"""

import logging

from data_loader import (
    CityDataError,
    get_available_cities,
    load_all_city_data,
    load_city_data,
)

logger = logging.getLogger(__name__)


class CityDataStore:
    """Loads city data on demand and caches it by city name"""

    def __init__(self, initial_city="bochum"):
        self.current_city = initial_city
        self.city_data = None
        self.all_city_data = {}
        self.available_cities = []
        self.loading = False
        self.error = None
        self.loading_errors = {}

    def initialize(self):
        """Pick up the known cities and load all of them"""
        self.available_cities = get_available_cities()
        self.refresh_all_data()

    def load_city(self, city_name, force=False):
        """Show city_name, fetching it unless already cached. Failures land in self.error."""
        if not city_name:
            return

        self.loading = True
        self.error = None
        try:
            if not force and city_name in self.all_city_data:
                self.city_data = self.all_city_data[city_name]
                self.current_city = city_name
                return

            data = load_city_data(city_name)
            self.city_data = data
            self.current_city = city_name
            self.all_city_data[city_name] = data
            self.loading_errors.pop(city_name, None)
        except CityDataError as e:
            self.error = str(e)
        finally:
            self.loading = False

    def switch_city(self, city_name):
        if city_name == self.current_city:
            return

        if city_name in self.all_city_data:
            self.city_data = self.all_city_data[city_name]
            self.current_city = city_name
        else:
            self.load_city(city_name)

    def refresh_current_city(self):
        """Fetch the current city again, ignoring the cache"""
        self.load_city(self.current_city, force=True)

    def refresh_all_data(self):
        """Reload every known city and replace the cache"""
        self.loading = True
        self.error = None
        try:
            result = load_all_city_data(self.available_cities or None)
            self.all_city_data = result["city_data"]
            self.loading_errors = result["errors"]
            logger.info(
                "Loaded %d of %d cities", result["successful_loads"], result["total_cities"]
            )

            if self.current_city in self.all_city_data:
                self.city_data = self.all_city_data[self.current_city]
        finally:
            self.loading = False

    def is_city_available(self, city_name):
        return city_name in self.available_cities and city_name not in self.loading_errors

    @property
    def has_data(self):
        return self.city_data is not None

    @property
    def has_error(self):
        return bool(self.error)

    @property
    def has_loading_errors(self):
        return len(self.loading_errors) > 0

    @property
    def total_available_cities(self):
        return len(self.available_cities)

    @property
    def total_loaded_cities(self):
        return len(self.all_city_data)
