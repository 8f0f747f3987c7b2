import html
import os
import webbrowser
from typing import Iterable, List, Optional, Sequence, Tuple

import folium
from folium import plugins

from config import CITY_ZOOM, DEFAULT_MAP_CENTER, FOCUS_ZOOM, SEARCH_ZOOM
from routing import Route, waypoint_label
from wifi_data import Spot

GOOGLE_DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination={lat},{lon}"


def directions_url(spot: Spot) -> str:
    return GOOGLE_DIRECTIONS_URL.format(lat=spot.latitude, lon=spot.longitude)


def _popup_html(spot: Spot) -> str:
    return f"""
    <div style="width: 250px;">
        <h4>{html.escape(spot.name)}</h4>
        <p>{html.escape(spot.location)}</p>
        <p><b>Provider:</b> {html.escape(spot.provider)}<br>
        <b>Type:</b> {html.escape(spot.type)}</p>
    </div>
    """


def map_view(center: Optional[Sequence[float]] = None, focus: Optional[Spot] = None) -> Tuple[List[float], int]:
    """Initial (location, zoom): a focused spot wins over a search center, which wins over the city view."""
    if focus is not None:
        return [focus.latitude, focus.longitude], FOCUS_ZOOM
    if center is not None:
        return [float(center[0]), float(center[1])], SEARCH_ZOOM
    return list(DEFAULT_MAP_CENTER), CITY_ZOOM


def create_spots_map(
    spots: Iterable[Spot],
    center: Optional[Sequence[float]] = None,
    zoom_start: Optional[int] = None,
    route: Optional[Route] = None,
    stops: Sequence[Spot] = (),
    focus: Optional[Spot] = None,
) -> folium.Map:
    """
    Create a Folium map with the given spots as clustered markers.
    If a route is passed, draw it and mark the stops A, B, C...
    With `focus`, the map opens on that spot with its popup shown.
    """
    location, zoom = map_view(center, focus)
    m = folium.Map(location=location, zoom_start=zoom_start or zoom, tiles="OpenStreetMap")

    cluster = plugins.MarkerCluster(name="WiFi spots")
    cluster.add_to(m)
    for spot in spots:
        if focus is not None and spot.id == focus.id:
            continue
        folium.Marker(
            [spot.latitude, spot.longitude],
            popup=folium.Popup(_popup_html(spot), max_width=300),
            tooltip=spot.name,
            icon=folium.Icon(color="blue", icon="wifi", prefix="fa"),
        ).add_to(cluster)

    # kept out of the cluster so it stays visible at any zoom
    if focus is not None:
        folium.Marker(
            [focus.latitude, focus.longitude],
            popup=folium.Popup(_popup_html(focus), max_width=300, show=True),
            tooltip=focus.name,
            icon=folium.Icon(color="red", icon="wifi", prefix="fa"),
        ).add_to(m)

    if route is not None:
        if route.geometry:
            folium.PolyLine(
                locations=[list(p) for p in route.geometry],
                color="#2196f3",
                weight=6,
                opacity=0.8,
                popup=route.summary(),
            ).add_to(m)

        points: List[List[float]] = []
        for i, stop in enumerate(stops):
            label = waypoint_label(i)
            folium.Marker(
                [stop.latitude, stop.longitude],
                tooltip=f"Stop {label}",
                icon=folium.DivIcon(
                    html=f'<div class="route-marker">{label}</div>',
                    icon_size=(24, 24),
                ),
            ).add_to(m)
            points.append([stop.latitude, stop.longitude])
        if points and focus is None:
            m.fit_bounds(points, padding=(50, 50))

    return m


def save_and_open_map(map_obj: folium.Map, filename: str = "wifi_spots_map.html", open_browser: bool = True) -> str:
    """
    Save the map to an HTML file and optionally open it in the default browser.
    """
    map_obj.save(filename)
    path = os.path.realpath(filename)
    if open_browser:
        print(f"Map saved as {filename}, opening in your browser now...")
        webbrowser.open(f"file://{path}")
    return path


def spot_card(spot: Spot, route_mode: bool = False, selected: bool = False) -> str:
    """Plain-text card for one spot, as shown in the results list."""
    lines = [
        f"[{spot.id}] {spot.name or 'Unknown Location'}  <{spot.type or 'Unknown'}>",
        f"    📍 {spot.location or 'No address available'}",
        f"    🏙  {spot.borough or 'Unknown Borough'}",
        f"    📡 {spot.provider or 'Unknown Provider'}",
    ]
    if spot.distance is not None:
        lines.append(f"    🚶 {spot.distance:.2f} mi away")
    lines.append(f"    ↪ {directions_url(spot)}")
    if route_mode:
        lines.append("    ✅ In route" if selected else "    ➕ Add to route")
    return "\n".join(lines)


def route_directions(route: Route) -> str:
    """Turn-by-turn text for a route."""
    lines = [f"🚶 {route.summary()}"]
    for i, step in enumerate(route.steps, start=1):
        lines.append(f"  {i:>2}. {step.instruction} ({step.distance_m:.0f} m)")
    return "\n".join(lines)
