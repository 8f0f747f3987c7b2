"""
routing.py
----------
Walking routes between selected WiFi spots, via the OSRM HTTP API.

The client only talks to OSRM and normalizes the response: coordinate
formatting (OSRM wants lon,lat), URL construction, error handling and
turning the JSON into Route objects. It knows nothing about selection rules.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import requests

from config import HTTP_TIMEOUT, METERS_PER_MILE, OSRM_BASE_URL

__all__ = ["RoutingError", "RouteStep", "Route", "OSRMClient", "waypoint_label"]

logger = logging.getLogger(__name__)

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]


class RoutingError(Exception):
    """OSRM could not be reached or could not build a route."""


@dataclass(frozen=True)
class RouteStep:
    instruction: str
    distance_m: float
    duration_s: float


@dataclass(frozen=True)
class Route:
    distance_m: float
    duration_s: float
    steps: List[RouteStep] = field(default_factory=list)
    # (lat, lon) polyline, empty when geometry was not requested
    geometry: List[LatLon] = field(default_factory=list)

    @property
    def distance_miles(self) -> float:
        return self.distance_m / METERS_PER_MILE

    @property
    def duration_minutes(self) -> int:
        return round(self.duration_s / 60)

    def summary(self) -> str:
        return f"{self.distance_miles:.1f} mi, {self.duration_minutes} mins"


def waypoint_label(index: int) -> str:
    """Stop letters: 0 -> "A", 1 -> "B", ..."""
    return chr(ord("A") + index)


def _describe_step(step: dict) -> str:
    maneuver = step.get("maneuver") or {}
    kind = maneuver.get("type", "continue")
    modifier = maneuver.get("modifier")
    road = step.get("name") or ""

    if kind == "depart":
        text = "Head out"
    elif kind == "arrive":
        return "Arrive at destination"
    elif modifier:
        text = f"{kind.replace('_', ' ').capitalize()} {modifier}"
    else:
        text = kind.replace("_", " ").capitalize()
    return f"{text} on {road}" if road else text


class OSRMClient:
    """
    OSRM adapter.

    - Convert internal (lat, lon) -> OSRM "lon,lat;lon,lat"
    - Call /route/v1/{profile}/...
    - Return Route objects, best route first
    """

    def __init__(
        self,
        base_url: str = OSRM_BASE_URL,
        profile: str = "walking",
        timeout: float = HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("OSRM base URL not set. Please set OSRM_BASE_URL in the environment.")
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout = timeout
        self.session = session or requests.Session()

    def format_coordinates(self, coords: Sequence[LatLon]) -> str:
        """Convert list of (lat, lon) to OSRM format 'lon,lat;lon,lat;...'"""
        return ";".join(f"{lon},{lat}" for lat, lon in coords)

    def compute_routes(
        self,
        waypoints: Sequence[LatLon],
        *,
        alternatives: bool = True,
        geometry: bool = True,
    ) -> List[Route]:
        """
        Route through the waypoints in the given order.

        Raises ValueError for fewer than two waypoints and RoutingError when
        OSRM fails or answers with anything but code "Ok".
        """
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints are required to compute a route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{self.format_coordinates(waypoints)}"
        params = {
            "steps": "true",
            "alternatives": "true" if alternatives else "false",
            "overview": "full" if geometry else "false",
            "geometries": "geojson",
        }
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("OSRM request failed: %s", exc)
            raise RoutingError(f"OSRM request failed: {exc}") from exc

        if data.get("code") != "Ok":
            raise RoutingError(f"OSRM error: {data.get('message', data.get('code', 'Unknown error'))}")

        try:
            routes = [self._parse_route(route) for route in data.get("routes", [])]
        except (KeyError, TypeError, ValueError) as exc:
            raise RoutingError(f"Malformed OSRM response: {exc}") from exc
        if not routes:
            raise RoutingError("OSRM returned no routes")
        return routes

    @staticmethod
    def _parse_route(route: dict) -> Route:
        steps = [
            RouteStep(
                instruction=_describe_step(step),
                distance_m=float(step.get("distance", 0.0)),
                duration_s=float(step.get("duration", 0.0)),
            )
            for leg in route.get("legs", [])
            for step in leg.get("steps", [])
        ]
        geometry = route.get("geometry")
        coords = geometry.get("coordinates", []) if isinstance(geometry, dict) else []
        return Route(
            distance_m=float(route["distance"]),
            duration_s=float(route["duration"]),
            steps=steps,
            geometry=[(lat, lon) for lon, lat in coords],
        )
