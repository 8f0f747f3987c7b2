"""
geocoding.py
------------
Turn a free-text search (address, place name or ZIP code) into a point inside
the service area.

Lookup order
1. 5-digit ZIP with matching spots in the dataset -> centroid of those spots,
   no network call.
2. OpenStreetMap Nominatim search, bounded to the service area viewbox.
   A ZIP with no local match gets ", New York City" appended first.
3. The first candidate must fall inside NYC_BOUNDS.

resolve_location() never raises; it returns one of Resolved, NotFound or
OutOfBounds and the caller decides what to do with each.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import requests

from config import (
    FALLBACK_USER_AGENT,
    HTTP_TIMEOUT,
    NOMINATIM_SEARCH_URL,
    NOMINATIM_USER_AGENT,
    NYC_BOUNDS,
    ZIP_LOCALITY_SUFFIX,
)
from spot_search import is_zip_code
from wifi_data import Spot

__all__ = [
    "Resolved",
    "NotFound",
    "OutOfBounds",
    "GeocodeResult",
    "geocode_address",
    "zip_centroid",
    "in_service_area",
    "resolve_location",
]

logger = logging.getLogger(__name__)
_session = requests.Session()

if NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )

# OSM policy requires a User-Agent with a valid contact email
NOMINATIM_HEADERS = {"User-Agent": NOMINATIM_USER_AGENT or FALLBACK_USER_AGENT}

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class Resolved:
    point: LatLon


@dataclass(frozen=True)
class NotFound:
    reason: str = "Location not found"


@dataclass(frozen=True)
class OutOfBounds:
    point: LatLon


GeocodeResult = Union[Resolved, NotFound, OutOfBounds]


def _viewbox(bounds: Dict[str, float]) -> str:
    """Nominatim viewbox: west,south,east,north."""
    return f"{bounds['west']},{bounds['south']},{bounds['east']},{bounds['north']}"


def in_service_area(point: LatLon, bounds: Dict[str, float] = NYC_BOUNDS) -> bool:
    lat, lon = point
    return bounds["south"] <= lat <= bounds["north"] and bounds["west"] <= lon <= bounds["east"]


def zip_centroid(spots: Sequence[Spot], zipcode: str) -> Optional[LatLon]:
    """Mean latitude/longitude of the spots in a ZIP code, or None if there are none."""
    matching = [spot for spot in spots if spot.zipcode == zipcode]
    if not matching:
        return None
    lat = sum(spot.latitude for spot in matching) / len(matching)
    lon = sum(spot.longitude for spot in matching) / len(matching)
    return (lat, lon)


def geocode_address(
    address: str,
    *,
    bounds: Dict[str, float] = NYC_BOUNDS,
    timeout: float = HTTP_TIMEOUT,
) -> Optional[Dict[str, Any]]:
    """
    Send a search to the Nominatim API, restricted to the bounds viewbox.
    Returns {"display_name", "lat", "lon"} for the top result, or None if
    nothing was found. Network and HTTP errors propagate as requests exceptions.
    """
    params = {
        "q": address,
        "format": "json",
        "limit": 1,
        "bounded": 1,
        "viewbox": _viewbox(bounds),
    }
    response = _session.get(NOMINATIM_SEARCH_URL, params=params, headers=NOMINATIM_HEADERS, timeout=timeout)
    response.raise_for_status()

    data = response.json()
    if not data:
        return None

    result = data[0]
    return {
        "display_name": result.get("display_name"),
        "lat": float(result["lat"]),
        "lon": float(result["lon"]),
    }


def resolve_location(
    query: str,
    spots: Sequence[Spot] = (),
    *,
    bounds: Dict[str, float] = NYC_BOUNDS,
    timeout: float = HTTP_TIMEOUT,
) -> GeocodeResult:
    """Resolve a search query to a point in the service area (see module docstring)."""
    query = query.strip()
    if not query:
        return NotFound("Empty query")

    is_zip = is_zip_code(query)
    if is_zip:
        center = zip_centroid(spots, query)
        if center is not None:
            return Resolved(center)

    lookup = f"{query}{ZIP_LOCALITY_SUFFIX}" if is_zip else query
    try:
        found = geocode_address(lookup, bounds=bounds, timeout=timeout)
    except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
        logger.warning("Nominatim search error for %r: %s", lookup, exc)
        return NotFound(f"Geocoding failed: {exc}")

    if found is None:
        return NotFound()

    point = (found["lat"], found["lon"])
    if not in_service_area(point, bounds):
        logger.info("Geocoded %r to %s, outside the service area", lookup, point)
        return OutOfBounds(point)
    return Resolved(point)
