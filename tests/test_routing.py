from unittest.mock import MagicMock

import pytest
import requests

from routing import OSRMClient, Route, RoutingError, waypoint_label

OSRM_OK = {
    "code": "Ok",
    "routes": [
        {
            "distance": 1609.34,
            "duration": 1200.0,
            "geometry": {"type": "LineString", "coordinates": [[-73.9832, 40.7536], [-73.9967, 40.7448]]},
            "legs": [
                {
                    "steps": [
                        {"maneuver": {"type": "depart"}, "name": "W 42nd St", "distance": 300.0, "duration": 220.0},
                        {"maneuver": {"type": "turn", "modifier": "left"}, "name": "6th Ave", "distance": 1309.34, "duration": 980.0},
                        {"maneuver": {"type": "arrive"}, "name": "", "distance": 0.0, "duration": 0.0},
                    ]
                }
            ],
        },
        {"distance": 2000.0, "duration": 1500.0, "legs": []},
    ],
}


def _client(json_data=None, side_effect=None):
    session = MagicMock()
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value.json.return_value = json_data
    return OSRMClient(base_url="http://osrm.test/", session=session), session


def test_format_coordinates_swaps_to_lon_lat():
    client, _ = _client()
    assert client.format_coordinates([(40.7536, -73.9832), (40.7448, -73.9967)]) == "-73.9832,40.7536;-73.9967,40.7448"


def test_compute_routes_walking_in_selection_order():
    client, session = _client(OSRM_OK)

    routes = client.compute_routes([(40.7536, -73.9832), (40.7448, -73.9967)])

    url = session.get.call_args.args[0]
    assert url == "http://osrm.test/route/v1/walking/-73.9832,40.7536;-73.9967,40.7448"
    assert session.get.call_args.kwargs["params"]["steps"] == "true"
    assert len(routes) == 2

    best = routes[0]
    assert best.distance_miles == pytest.approx(1.0)
    assert best.duration_minutes == 20
    assert best.summary() == "1.0 mi, 20 mins"
    assert [s.instruction for s in best.steps] == ["Head out on W 42nd St", "Turn left on 6th Ave", "Arrive at destination"]
    assert best.geometry == [(40.7536, -73.9832), (40.7448, -73.9967)]
    assert routes[1].geometry == []


def test_needs_two_waypoints():
    client, session = _client(OSRM_OK)
    with pytest.raises(ValueError):
        client.compute_routes([(40.75, -73.99)])
    session.get.assert_not_called()


def test_error_code_raises():
    client, _ = _client({"code": "NoRoute", "message": "Impossible route between points"})
    with pytest.raises(RoutingError, match="Impossible route"):
        client.compute_routes([(40.75, -73.99), (40.76, -73.98)])


def test_transport_error_raises_routing_error():
    client, _ = _client(side_effect=requests.Timeout("slow"))
    with pytest.raises(RoutingError):
        client.compute_routes([(40.75, -73.99), (40.76, -73.98)])


def test_malformed_route_raises_routing_error():
    client, _ = _client({"code": "Ok", "routes": [{"legs": []}]})
    with pytest.raises(RoutingError):
        client.compute_routes([(40.75, -73.99), (40.76, -73.98)])


def test_missing_base_url():
    with pytest.raises(ValueError):
        OSRMClient(base_url="")


def test_waypoint_labels():
    assert [waypoint_label(i) for i in range(5)] == ["A", "B", "C", "D", "E"]


def test_route_rounding():
    route = Route(distance_m=4023.35, duration_s=89.0)
    assert route.summary() == "2.5 mi, 1 mins"
