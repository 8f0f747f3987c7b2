"""
pagination.py
-------------
Query state for the spot list and the "load more" pagination over it.

The visible list is always a prefix of the current result set: page P shows
the first P * page_size spots. Loading more never re-runs the search; any new
search or filter resets to page 1.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import DEFAULT_RADIUS_MILES, SPOTS_PER_PAGE
from wifi_data import Spot

__all__ = ["visible_slice", "has_more", "QueryState"]


def visible_slice(results: Sequence[Spot], page: int, page_size: int = SPOTS_PER_PAGE) -> List[Spot]:
    return list(results[: max(page, 1) * page_size])


def has_more(results: Sequence[Spot], page: int, page_size: int = SPOTS_PER_PAGE) -> bool:
    return len(results) > max(page, 1) * page_size


@dataclass
class QueryState:
    search_term: str = ""
    borough: str = ""
    spot_type: str = ""
    center: Optional[Tuple[float, float]] = None
    radius_miles: float = DEFAULT_RADIUS_MILES
    page: int = 1
    page_size: int = SPOTS_PER_PAGE
    results: List[Spot] = field(default_factory=list)

    def set_results(self, results: Sequence[Spot]) -> None:
        """Replace the result set after a new search/filter; back to page 1."""
        self.results = list(results)
        self.page = 1

    def load_more(self) -> List[Spot]:
        self.page += 1
        return self.visible

    @property
    def visible(self) -> List[Spot]:
        return visible_slice(self.results, self.page, self.page_size)

    @property
    def has_more(self) -> bool:
        return has_more(self.results, self.page, self.page_size)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data snapshot; results are referenced by spot id."""
        return {
            "search_term": self.search_term,
            "borough": self.borough,
            "spot_type": self.spot_type,
            "center": list(self.center) if self.center else None,
            "radius_miles": self.radius_miles,
            "page": self.page,
            "page_size": self.page_size,
            "result_ids": [spot.id for spot in self.results],
        }
