import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path for direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from wifi_data import Spot, parse_spots_csv  # noqa: E402

# Row 4 has no latitude and is dropped; row 6 uses a borough code
SAMPLE_CSV = """\
name,location,provider,type,latitude,longitude,boroname,zipcode
Bryant Park,42nd St & 6th Ave,NYC Parks,Free,40.7536,-73.9832,Manhattan,10018
Brooklyn Library,10 Grand Army Plaza,BPL,Free,40.6724,-73.9680,Brooklyn,11238
Chelsea Kiosk,W 23rd St,LinkNYC - Citybridge,Free,40.7448,-73.9967,Manhattan,10001
Queens Hall,Queens Blvd,Spot On Networks,Limited Free,40.7400,-73.8500,Queens,11375
Broken Row,Nowhere,ALTICEUSA,Free,,-73.9000,Bronx,10451
Hudson Yards,W 33rd St,LinkNYC - Citybridge,Free,40.7540,-74.0010,Manhattan,10001
Jamaica Stop,10001 Jamaica Ave,Spot On Networks,Limited Free,40.7020,-73.8100,4,11418
"""


def make_spot(spot_id, lat=40.75, lon=-73.99, **fields):
    defaults = dict(
        name=f"Spot {spot_id}",
        location="Somewhere",
        provider="LinkNYC - Citybridge",
        type="Free",
        borough="Manhattan",
        zipcode="10001",
    )
    defaults.update(fields)
    return Spot(id=spot_id, latitude=lat, longitude=lon, **defaults)


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def spots():
    return parse_spots_csv(SAMPLE_CSV)


@pytest.fixture
def sample_csv_path(tmp_path):
    path = tmp_path / "NYC_WIFI_data.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path
