"""
spot_finder.py
--------------
The application shell: owns the loaded spots plus the query and route state,
and wires user actions to the search, geocoding and routing modules.

Every action that waits on an outside service (geocoding, geolocation,
routing) takes a request token first. A response is applied only if its
token is still the latest for that kind of request, so a slow answer to an
old search can never overwrite a newer result set.

Failures never escape an action. They end up in `message` (results area),
`route_message`, or `alerts` (blocking notices the front end must show).
"""
from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from config import WIFI_DATA_PATH
from geocoding import GeocodeResult, Resolved, resolve_location
from pagination import QueryState
from route_selection import RouteSelection, ToggleOutcome
from routing import OSRMClient, Route, RoutingError
from spot_search import apply_filters, filter_by_distance, parse_radius, search_text
from wifi_data import DatasetLoadError, Spot, filter_options, load_spots

__all__ = ["GeolocationError", "RequestTracker", "WifiSpotFinder"]

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]

LOAD_ERROR_MESSAGE = "Error loading WiFi spots data"
NO_RESULTS_MESSAGE = "No spots found"
NO_GEOLOCATION_ALERT = "Geolocation is not supported"
GEOLOCATION_FAILED_ALERT = "Unable to retrieve your location"
ROUTE_FULL_ALERT = "Maximum {max_spots} spots allowed in a route"
ROUTE_FAILED_ALERT = "Error creating route. Please try again."
ROUTE_PROMPT = "Select WiFi spots to create a route (2-{max_spots} spots)"

# Request kinds; searches, near-me and filters all replace the same result set
RESULTS = "results"
ROUTE = "route"


class GeolocationError(Exception):
    """The current position could not be determined (denied or unavailable)."""


class RequestTracker:
    """Monotonic request tokens, one "latest" slot per request kind."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: Dict[str, int] = {}

    def issue(self, kind: str) -> int:
        token = next(self._counter)
        self._latest[kind] = token
        return token

    def is_current(self, kind: str, token: int) -> bool:
        return self._latest.get(kind) == token


class WifiSpotFinder:
    def __init__(
        self,
        data_source: Path | str = WIFI_DATA_PATH,
        *,
        loader: Callable[[Path | str], List[Spot]] = load_spots,
        geocoder: Callable[[str, Sequence[Spot]], GeocodeResult] = resolve_location,
        router: Optional[OSRMClient] = None,
        locate: Optional[Callable[[], LatLon]] = None,
    ):
        self.data_source = data_source
        self._loader = loader
        self._geocoder = geocoder
        self._router = router or OSRMClient()
        self._locate = locate
        self._requests = RequestTracker()

        self.spots: List[Spot] = []
        self.spots_by_id: Dict[int, Spot] = {}
        self.boroughs: List[str] = []
        self.types: List[str] = []

        self.query = QueryState()
        self.route = RouteSelection()
        self.routes: List[Route] = []

        self.message = ""
        self.route_message = ""
        self.alerts: List[str] = []

    # -------------------------
    # Loading
    # -------------------------

    def load(self) -> bool:
        try:
            spots = self._loader(self.data_source)
        except DatasetLoadError as exc:
            logger.error("Error loading spots: %s", exc)
            self.message = LOAD_ERROR_MESSAGE
            return False

        self.spots = list(spots)
        self.spots_by_id = {spot.id: spot for spot in self.spots}
        self.boroughs, self.types = filter_options(self.spots)
        self._show(self.spots)
        return True

    # -------------------------
    # Search
    # -------------------------

    def search(self, query: str) -> List[Spot]:
        """Geocode the query and show nearby spots; fall back to text/ZIP search."""
        term = query.strip()
        if not term:
            return self.visible

        self.query.search_term = term
        token = self._requests.issue(RESULTS)
        result = self._geocoder(term, self.spots)
        if not self._requests.is_current(RESULTS, token):
            logger.debug("Discarding stale search result for %r", term)
            return self.visible

        if isinstance(result, Resolved):
            self.query.center = result.point
            self._show(filter_by_distance(self.spots, result.point, self.query.radius_miles))
        else:
            logger.info("No usable location for %r (%s); using text search", term, result)
            self.query.center = None
            self._show(search_text(self.spots, term))
        return self.visible

    def find_near_me(self) -> List[Spot]:
        if self._locate is None:
            self._alert(NO_GEOLOCATION_ALERT)
            return self.visible

        token = self._requests.issue(RESULTS)
        try:
            point = self._locate()
        except GeolocationError as exc:
            logger.warning("Geolocation failed: %s", exc)
            self._alert(GEOLOCATION_FAILED_ALERT)
            return self.visible
        if not self._requests.is_current(RESULTS, token):
            logger.debug("Discarding stale geolocation result")
            return self.visible

        self.query.center = point
        self._show(filter_by_distance(self.spots, point, self.query.radius_miles))
        return self.visible

    def set_radius(self, value) -> float:
        self.query.radius_miles = parse_radius(value)
        return self.query.radius_miles

    def apply_filters(self, borough: str = "", spot_type: str = "", search_term: Optional[str] = None) -> List[Spot]:
        """Borough/type/text filters, always starting from the full dataset."""
        if search_term is not None:
            self.query.search_term = search_term.strip()
        self.query.borough = borough or ""
        self.query.spot_type = spot_type or ""
        self.query.center = None

        # a newer filter supersedes any search still waiting on the geocoder
        self._requests.issue(RESULTS)
        self._show(apply_filters(self.spots, self.query.borough, self.query.spot_type, self.query.search_term))
        return self.visible

    def load_more(self) -> List[Spot]:
        return self.query.load_more()

    @property
    def visible(self) -> List[Spot]:
        return self.query.visible

    @property
    def has_more(self) -> bool:
        return self.query.has_more

    @property
    def spot_count(self) -> int:
        return len(self.query.results)

    # -------------------------
    # Route planning
    # -------------------------

    def toggle_route_mode(self) -> bool:
        active = self.route.toggle_mode()
        self._requests.issue(ROUTE)
        self.routes = []
        self.route_message = ROUTE_PROMPT.format(max_spots=self.route.max_spots) if active else ""
        return active

    def toggle_route_spot(self, spot_id: int) -> ToggleOutcome:
        outcome = self.route.toggle(spot_id)
        if outcome is ToggleOutcome.REJECTED_FULL:
            self._alert(ROUTE_FULL_ALERT.format(max_spots=self.route.max_spots))
        elif outcome is not ToggleOutcome.INACTIVE:
            self._update_route()
        return outcome

    def is_selected(self, spot_id: int) -> bool:
        return spot_id in self.route

    @property
    def route_spots(self) -> List[Spot]:
        return [self.spots_by_id[i] for i in self.route.ids if i in self.spots_by_id]

    def _update_route(self) -> None:
        self.routes = []
        token = self._requests.issue(ROUTE)
        waypoints = self.route.waypoints(self.spots_by_id)
        if len(waypoints) < 2:
            self.route_message = ROUTE_PROMPT.format(max_spots=self.route.max_spots)
            return

        try:
            routes = self._router.compute_routes(waypoints)
        except RoutingError as exc:
            logger.error("Error creating route: %s", exc)
            self.route_message = ROUTE_PROMPT.format(max_spots=self.route.max_spots)
            self._alert(ROUTE_FAILED_ALERT)
            return
        if not self._requests.is_current(ROUTE, token):
            logger.debug("Discarding stale route")
            return

        self.routes = routes
        self.route_message = routes[0].summary()

    # -------------------------
    # Helpers
    # -------------------------

    def _show(self, results: Sequence[Spot]) -> None:
        self.query.set_results(results)
        self.message = NO_RESULTS_MESSAGE if not results else ""

    def _alert(self, text: str) -> None:
        logger.warning(text)
        self.alerts.append(text)

    def pop_alerts(self) -> List[str]:
        alerts, self.alerts = self.alerts, []
        return alerts
