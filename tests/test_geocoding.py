from unittest.mock import MagicMock, patch

import pytest
import requests

from geocoding import (
    NotFound,
    OutOfBounds,
    Resolved,
    geocode_address,
    in_service_area,
    resolve_location,
    zip_centroid,
)


def _mock_response(json_data):
    resp = MagicMock()
    resp.json.return_value = json_data
    resp.raise_for_status.return_value = None
    return resp


def test_zip_centroid(spots):
    lat, lon = zip_centroid(spots, "10001")
    assert lat == pytest.approx((40.7448 + 40.7540) / 2)
    assert lon == pytest.approx((-73.9967 + -74.0010) / 2)


def test_zip_centroid_no_match(spots):
    assert zip_centroid(spots, "99999") is None


@pytest.mark.parametrize(
    "point,inside",
    [((40.7128, -74.0060), True), ((40.4957, -74.2557), True), ((42.6526, -73.7562), False), ((40.75, -73.60), False)],
)
def test_in_service_area(point, inside):
    assert in_service_area(point) is inside


@patch("geocoding._session.get")
def test_zip_with_local_spots_uses_centroid(mock_get, spots):
    result = resolve_location("10001", spots)

    assert isinstance(result, Resolved)
    assert result.point == pytest.approx(((40.7448 + 40.7540) / 2, (-73.9967 + -74.0010) / 2))
    mock_get.assert_not_called()


@patch("geocoding._session.get")
def test_unknown_zip_gets_locality_suffix(mock_get, spots):
    mock_get.return_value = _mock_response([{"lat": "40.8800", "lon": "-73.8500", "display_name": "Wakefield"}])

    result = resolve_location("10466", spots)

    assert result == Resolved((40.88, -73.85))
    params = mock_get.call_args.kwargs["params"]
    assert params["q"] == "10466, New York City"
    assert params["bounded"] == 1
    assert params["viewbox"] == "-74.2557,40.4957,-73.6895,40.9176"
    assert "User-Agent" in mock_get.call_args.kwargs["headers"]


@patch("geocoding._session.get")
def test_free_text_is_sent_as_is(mock_get, spots):
    mock_get.return_value = _mock_response([{"lat": "40.7536", "lon": "-73.9832"}])

    result = resolve_location("  Bryant Park ", spots)

    assert result == Resolved((40.7536, -73.9832))
    assert mock_get.call_args.kwargs["params"]["q"] == "Bryant Park"


@patch("geocoding._session.get")
def test_no_candidates_is_not_found(mock_get, spots):
    mock_get.return_value = _mock_response([])
    assert isinstance(resolve_location("Atlantis", spots), NotFound)


@patch("geocoding._session.get")
def test_candidate_outside_city_is_out_of_bounds(mock_get, spots):
    mock_get.return_value = _mock_response([{"lat": "42.6526", "lon": "-73.7562"}])

    result = resolve_location("Albany", spots)

    assert isinstance(result, OutOfBounds)
    assert result.point == (42.6526, -73.7562)


@patch("geocoding._session.get", side_effect=requests.ConnectionError("offline"))
def test_network_error_is_not_found(mock_get, spots):
    assert isinstance(resolve_location("Bryant Park", spots), NotFound)


@patch("geocoding._session.get")
def test_http_error_is_not_found(mock_get, spots):
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.HTTPError("503")
    mock_get.return_value = resp
    assert isinstance(resolve_location("Bryant Park", spots), NotFound)


@patch("geocoding._session.get")
def test_empty_query_is_not_found(mock_get):
    assert isinstance(resolve_location("   "), NotFound)
    mock_get.assert_not_called()


@patch("geocoding._session.get")
def test_geocode_address_returns_floats(mock_get):
    mock_get.return_value = _mock_response([{"lat": "40.7", "lon": "-73.9", "display_name": "Somewhere, NYC"}])
    assert geocode_address("Somewhere") == {"display_name": "Somewhere, NYC", "lat": 40.7, "lon": -73.9}
