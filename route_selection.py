"""
route_selection.py
------------------
Bookkeeping for route planning: which spots the user picked, in pick order.

At most MAX_ROUTE_SPOTS ids. Picking a selected spot again removes it;
picking one more than the cap is rejected without touching the selection.
Turning route mode off (or on) starts from an empty selection.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Mapping, Tuple

from config import MAX_ROUTE_SPOTS
from wifi_data import Spot

__all__ = ["ToggleOutcome", "RouteSelection"]


class ToggleOutcome(Enum):
    ADDED = "added"
    REMOVED = "removed"
    REJECTED_FULL = "rejected_full"
    INACTIVE = "inactive"


class RouteSelection:
    def __init__(self, max_spots: int = MAX_ROUTE_SPOTS):
        self.max_spots = max_spots
        self.active = False
        # dict keeps insertion order, which is the waypoint order
        self._ids: Dict[int, None] = {}

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, spot_id: object) -> bool:
        return spot_id in self._ids

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(self._ids)

    @property
    def ready(self) -> bool:
        """Enough stops for a route."""
        return len(self._ids) >= 2

    def enable(self) -> None:
        self._ids.clear()
        self.active = True

    def disable(self) -> None:
        self._ids.clear()
        self.active = False

    def toggle_mode(self) -> bool:
        if self.active:
            self.disable()
        else:
            self.enable()
        return self.active

    def toggle(self, spot_id: int) -> ToggleOutcome:
        if not self.active:
            return ToggleOutcome.INACTIVE
        if spot_id in self._ids:
            del self._ids[spot_id]
            return ToggleOutcome.REMOVED
        if len(self._ids) >= self.max_spots:
            return ToggleOutcome.REJECTED_FULL
        self._ids[spot_id] = None
        return ToggleOutcome.ADDED

    def waypoints(self, spots_by_id: Mapping[int, Spot]) -> List[Tuple[float, float]]:
        """(lat, lon) of the selected spots in selection order; unknown ids are skipped."""
        return [spots_by_id[i].point for i in self._ids if i in spots_by_id]
