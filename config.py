"""
config.py
---------
Settings shared by the WiFi spot finder modules.

Values come from the process environment (or a local ``.env`` file) so the
dataset path and the upstream services can be swapped without code changes.
Example .env:

    WIFI_DATA_PATH=datasets/NYC_WIFI_data.csv
    NOMINATIM_USER_AGENT=wifi-spot-finder/0.1 (you@example.com)
    OSRM_BASE_URL=https://router.project-osrm.org
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

HERE = Path(__file__).resolve().parent

# Dataset: local path or http(s) URL
WIFI_DATA_PATH = os.getenv("WIFI_DATA_PATH", str(HERE / "datasets" / "NYC_WIFI_data.csv"))

# OpenStreetMap Nominatim (forward geocoding)
NOMINATIM_SEARCH_URL = os.getenv("NOMINATIM_SEARCH_URL", "https://nominatim.openstreetmap.org/search")
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT")
FALLBACK_USER_AGENT = "wifi-spot-finder/0.1 (contact: example@example.com)"

# OSRM (walking routes)
OSRM_BASE_URL = os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org")

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

SPOTS_PER_PAGE = 10
MAX_ROUTE_SPOTS = 5
DEFAULT_RADIUS_MILES = 2.0
EARTH_RADIUS_MILES = 3959.0
METERS_PER_MILE = 1609.34

# Service area: New York City
NYC_BOUNDS = {
    "north": 40.9176,
    "south": 40.4957,
    "east": -73.6895,
    "west": -74.2557,
}
ZIP_LOCALITY_SUFFIX = ", New York City"
DEFAULT_MAP_CENTER = (40.7128, -74.0060)

# Map zoom levels: whole city, around a search point, on a single spot
CITY_ZOOM = 12
SEARCH_ZOOM = 15
FOCUS_ZOOM = 17
