"""
spot_search.py
--------------
Search and filter the in-memory WiFi spot collection.

Three modes, all pure functions over the full collection (the input list is
never modified):

  * text / ZIP search     -> search_text(spots, "brooklyn") / search_text(spots, "10001")
  * proximity search      -> filter_by_distance(spots, (lat, lon), radius_miles=2)
  * structured filtering  -> apply_filters(spots, borough="Queens", spot_type="Free")
"""
from __future__ import annotations

import re
from dataclasses import replace
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from config import DEFAULT_RADIUS_MILES
from distance import haversine_miles_array
from wifi_data import Spot

__all__ = [
    "is_zip_code",
    "matches_text",
    "search_text",
    "filter_by_distance",
    "apply_filters",
    "parse_radius",
]

_ZIP_REGEX = re.compile(r"\d{5}")

SEARCH_FIELDS = ("name", "location", "provider", "borough", "zipcode")


def is_zip_code(query: str) -> bool:
    return _ZIP_REGEX.fullmatch(query.strip()) is not None


def matches_text(spot: Spot, term: str) -> bool:
    """Case-insensitive substring match against any of the searchable fields."""
    term = term.lower()
    return any(term in (getattr(spot, field) or "").lower() for field in SEARCH_FIELDS)


def search_text(spots: Sequence[Spot], query: str) -> List[Spot]:
    """
    A 5-digit query is an exact ZIP match; anything else is a substring
    search over name, location, provider, borough and zipcode.
    """
    term = query.strip()
    if is_zip_code(term):
        return [spot for spot in spots if spot.zipcode == term]
    return [spot for spot in spots if matches_text(spot, term)]


def filter_by_distance(
    spots: Sequence[Spot],
    center: Tuple[float, float],
    radius_miles: Optional[float] = None,
) -> List[Spot]:
    """
    Spots within radius_miles of center, nearest first, each carrying its
    distance in miles.
    """
    if radius_miles is None:
        radius_miles = DEFAULT_RADIUS_MILES
    if not spots:
        return []

    lat, lon = center
    distances = haversine_miles_array(
        lat,
        lon,
        np.fromiter((s.latitude for s in spots), dtype=float, count=len(spots)),
        np.fromiter((s.longitude for s in spots), dtype=float, count=len(spots)),
    )
    inside = np.flatnonzero(distances <= radius_miles)
    order = inside[np.argsort(distances[inside], kind="stable")]
    return [replace(spots[i], distance=float(distances[i])) for i in order]


def apply_filters(
    spots: Sequence[Spot],
    borough: str = "",
    spot_type: str = "",
    search_term: str = "",
) -> List[Spot]:
    """
    AND-combine borough, type and text filters over the full collection.
    Empty inputs are ignored. Borough and type compare case-insensitively
    and exactly; the text term is a substring match.
    """
    borough = (borough or "").strip().lower()
    spot_type = (spot_type or "").strip().lower()
    term = (search_term or "").strip().lower()

    result = list(spots)
    if borough:
        result = [s for s in result if s.borough.lower() == borough]
    if spot_type:
        result = [s for s in result if s.type.lower() == spot_type]
    if term:
        result = [s for s in result if matches_text(s, term)]
    return result


def parse_radius(value: Any) -> float:
    """Radius input in miles; blank, non-numeric or non-positive falls back to the default."""
    try:
        radius = float(value)
    except (TypeError, ValueError):
        return DEFAULT_RADIUS_MILES
    if not np.isfinite(radius) or radius <= 0:
        return DEFAULT_RADIUS_MILES
    return radius
