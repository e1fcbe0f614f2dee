"""
Settings for the Trans.NRW map.

Values come from Streamlit secrets when available, then from environment
variables, then from the defaults below.
"""

import os

import streamlit as st

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))


def get_setting(name, default=""):
    """Read a setting from st.secrets, the environment, or fall back to default"""
    # Secrets are optional - there is no secrets.toml outside deployments
    try:
        return st.secrets[name]
    except Exception:
        return os.environ.get(name, default)


# Where city files live: a base URL (https://.../data) or the local data folder
DATA_BASE_URL = str(get_setting("DATA_BASE_URL", "")).rstrip("/")
DATA_DIR = os.path.join(SCRIPT_DIR, "data")

# Cities with a data file - add more as they become available
KNOWN_CITIES = [c.strip() for c in str(get_setting("CITIES", "bochum")).split(",") if c.strip()]
DEFAULT_CITY = get_setting("DEFAULT_CITY", KNOWN_CITIES[0] if KNOWN_CITIES else "bochum")

REQUEST_TIMEOUT = float(get_setting("REQUEST_TIMEOUT", 30))
LOG_LEVEL = get_setting("LOG_LEVEL", "INFO")

# Map defaults (Bochum city centre)
DEFAULT_CENTER = (51.48165, 7.21648)
DEFAULT_ZOOM = 13

OSM_TILES = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = '&copy; <a href="http://osm.org/copyright">OpenStreetMap</a> contributors'

SITE_URL = "https://trans.nrw/"
CONTACT_EMAIL = "Admin@Trans.NRW"

# Static export target for generate_map.py
SITE_OUTPUT_DIR = os.path.join(SCRIPT_DIR, "site")
