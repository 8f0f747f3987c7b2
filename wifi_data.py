"""
wifi_data.py
------------
Load the public WiFi hotspot dataset and turn it into Spot records.

Data assumptions
- First row is a header. Column names are matched case-insensitively:
  name, location, provider, type, latitude, longitude,
  borough / boroname / borocode, zipcode / postcode.
- Fields are comma separated, one record per "\n"-terminated line, no quoting.
  A leading byte order mark is ignored.
- Rows whose latitude or longitude is missing or not a number are dropped.

Usage
-----
from wifi_data import load_spots, filter_options

spots = load_spots("datasets/NYC_WIFI_data.csv")
boroughs, types = filter_options(spots)
"""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import requests

from config import HTTP_TIMEOUT, WIFI_DATA_PATH

__all__ = [
    "Spot",
    "DatasetLoadError",
    "load_spots",
    "read_dataset_text",
    "parse_spots_csv",
    "normalize_borough",
    "filter_options",
]

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

BOROUGH_CODES: Dict[str, str] = {
    "1": "Manhattan",
    "2": "Bronx",
    "3": "Brooklyn",
    "4": "Queens",
    "5": "Staten Island",
}

# Column candidates, checked in order; first non-empty value wins
NAME_COLUMNS = ("name", "location")
BOROUGH_COLUMNS = ("borough", "boroname", "borocode")
ZIP_COLUMNS = ("zipcode", "postcode")


class DatasetLoadError(Exception):
    """The dataset could not be fetched or read."""


@dataclass(frozen=True)
class Spot:
    id: int
    name: str
    location: str
    provider: str
    type: str
    latitude: float
    longitude: float
    borough: str
    zipcode: str
    # Miles from the search center; only set by a proximity search
    distance: Optional[float] = None

    @property
    def point(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_dict(self) -> Dict:
        record = asdict(self)
        if self.distance is None:
            record.pop("distance")
        return record


# -------------------------
# Helpers
# -------------------------

def normalize_borough(value: Optional[str]) -> str:
    """Map a borough code ("1".."5") to its name; other values pass through."""
    value = (value or "").strip()
    if not value:
        return UNKNOWN
    return BOROUGH_CODES.get(value, value)


def _pick_column(headers: Sequence[str], candidates: Tuple[str, ...]) -> List[int]:
    """Return the positions of the candidate columns that exist, in candidate order."""
    positions = []
    for cand in candidates:
        if cand in headers:
            positions.append(headers.index(cand))
    return positions


def _first_non_empty(df: pd.DataFrame, positions: List[int]) -> pd.Series:
    """Row-wise first non-empty value across the given columns ("" if none)."""
    out = pd.Series("", index=df.index, dtype=object)
    for pos in positions:
        out = out.where(out != "", df[pos])
    return out


def _to_float(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series, errors="coerce")


# -------------------------
# Parser
# -------------------------

def parse_spots_csv(csv_text: str) -> List[Spot]:
    """
    Convert raw CSV text into Spot records.

    Each non-empty data row gets its 0-based position (after the header) as
    its id. Rows with missing or non-numeric coordinates are dropped after
    the records are built, so ids of surviving rows are unaffected.
    An empty input or a blank header line yields an empty list.
    """
    # Records end at "\n" only; a trailing "\r" is removed with the field padding
    lines = csv_text.lstrip("\ufeff").split("\n")
    if not lines or not lines[0].strip():
        return []

    headers = [h.strip().lower() for h in lines[0].split(",")]
    data_lines = [line for line in lines[1:] if line.strip()]
    if not data_lines:
        return []

    # Wide enough for the longest row; fields past the header are never read
    width = max(len(headers), max(line.count(",") + 1 for line in data_lines))
    df = pd.read_csv(
        io.StringIO("\n".join(data_lines)),
        header=None,
        names=list(range(width)),
        index_col=False,
        lineterminator="\n",
        dtype=str,
        keep_default_na=False,
        quoting=csv.QUOTE_NONE,
        skip_blank_lines=False,
    )
    df = df.fillna("").apply(lambda col: col.astype(str).str.strip())

    def column(*candidates: str) -> pd.Series:
        return _first_non_empty(df, _pick_column(headers, candidates))

    records = pd.DataFrame(
        {
            "name": column(*NAME_COLUMNS),
            "location": column("location"),
            "provider": column("provider"),
            "type": column("type"),
            "latitude": _to_float(column("latitude")),
            "longitude": _to_float(column("longitude")),
            "borough": column(*BOROUGH_COLUMNS).map(normalize_borough),
            "zipcode": column(*ZIP_COLUMNS),
        },
        index=df.index,
    )
    for col in ("name", "location", "provider", "type", "zipcode"):
        records[col] = records[col].replace("", UNKNOWN)

    # Zero counts as missing: (0, 0) is a placeholder, not a place in the city
    lat = records["latitude"].to_numpy(dtype=float)
    lon = records["longitude"].to_numpy(dtype=float)
    valid = np.isfinite(lat) & np.isfinite(lon) & (lat != 0) & (lon != 0)
    dropped = int((~valid).sum())
    if dropped:
        logger.debug("Dropped %d rows with invalid coordinates", dropped)
    records = records[valid]

    return [
        Spot(
            id=int(idx),
            name=row.name,
            location=row.location,
            provider=row.provider,
            type=row.type,
            latitude=float(row.latitude),
            longitude=float(row.longitude),
            borough=row.borough,
            zipcode=row.zipcode,
        )
        for idx, row in zip(records.index, records.itertuples(index=False))
    ]


# -------------------------
# Loader
# -------------------------

def read_dataset_text(source: Path | str = WIFI_DATA_PATH, *, timeout: float = HTTP_TIMEOUT) -> str:
    """Fetch the raw dataset text from a local path or an http(s) URL."""
    source = str(source)
    if source.startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DatasetLoadError(f"Could not fetch dataset from {source}: {exc}") from exc
        return response.text

    path = Path(source)
    if not path.is_file():
        raise DatasetLoadError(f"CSV not found at: {path}")
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DatasetLoadError(f"Could not read dataset at {path}: {exc}") from exc


def load_spots(source: Path | str = WIFI_DATA_PATH, *, timeout: float = HTTP_TIMEOUT) -> List[Spot]:
    """Load and parse the dataset. Raises DatasetLoadError on fetch/read failure."""
    spots = parse_spots_csv(read_dataset_text(source, timeout=timeout))
    logger.info("Loaded %d WiFi spots from %s", len(spots), source)
    return spots


def filter_options(spots: Sequence[Spot]) -> Tuple[List[str], List[str]]:
    """Deduplicated, sorted borough and type values for the filter dropdowns."""
    boroughs = sorted({spot.borough for spot in spots if spot.borough})
    types = sorted({spot.type for spot in spots if spot.type})
    return boroughs, types
