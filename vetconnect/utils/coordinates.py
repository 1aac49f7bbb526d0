"""Coordinate normalization.

Clinic coordinates reach us in several shapes depending on which client or
which historical version of a record produced them:

    [15.14, 120.58]
    {"lat": 15.14, "lng": 120.58}
    {"latitude": "15.14", "longitude": "120.58"}
    {"_latitude": 15.14, "_longitude": 120.58}     # serialized GeoPoint
    {"location": {"lat": 15.14, "lng": 120.58}}    # nested inside a record

Each shape has its own extractor. Extractors are tried in order and the first
one that yields two finite numbers wins. Some producers emit (lng, lat), so a
pair that only passes the range check once swapped is swapped.
"""
import logging
import math
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Tuple

from vetconnect.schemas.clinic import Coordinates
from vetconnect.utils.errors import InvalidCoordinatesError

logger = logging.getLogger(__name__)

Pair = Tuple[float, float]
Extractor = Callable[[Any], Optional[Pair]]

_MISSING = object()

NESTED_KEYS = ("coordinates", "location", "coords")


def _to_float(value: Any) -> Optional[float]:
    if value is None or value is _MISSING or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _lookup(source: Any, key: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key, _MISSING)
    # GeoPoint-like objects expose the values as attributes
    return getattr(source, key, _MISSING)


def _keyed(lat_key: str, lng_key: str) -> Extractor:
    def extract(source: Any) -> Optional[Pair]:
        if source is None or isinstance(source, (str, bytes, list, tuple)):
            return None
        lat = _to_float(_lookup(source, lat_key))
        lng = _to_float(_lookup(source, lng_key))
        if lat is None or lng is None:
            return None
        return lat, lng

    extract.__name__ = f"extract_{lat_key}_{lng_key}"
    return extract


def extract_pair(source: Any) -> Optional[Pair]:
    if not isinstance(source, (list, tuple)) or len(source) != 2:
        return None
    lat, lng = _to_float(source[0]), _to_float(source[1])
    if lat is None or lng is None:
        return None
    return lat, lng


extract_latitude_longitude = _keyed("latitude", "longitude")
extract_lat_lng = _keyed("lat", "lng")
extract_lat_lon = _keyed("lat", "lon")
extract_private_latitude_longitude = _keyed("_latitude", "_longitude")
extract_private_lat_lng = _keyed("_lat", "_lng")

FLAT_EXTRACTORS: Tuple[Extractor, ...] = (
    extract_pair,
    extract_latitude_longitude,
    extract_lat_lng,
    extract_lat_lon,
    extract_private_latitude_longitude,
    extract_private_lat_lng,
)


def first_success(extractors: Iterable[Extractor], source: Any) -> Optional[Pair]:
    """Return the result of the first extractor that produces a pair."""
    for extractor in extractors:
        pair = extractor(source)
        if pair is not None:
            return pair
    return None


def extract_nested(source: Any) -> Optional[Pair]:
    if source is None or isinstance(source, (str, bytes, list, tuple)):
        return None
    for key in NESTED_KEYS:
        inner = _lookup(source, key)
        if inner is _MISSING or inner is None:
            continue
        pair = first_success(FLAT_EXTRACTORS, inner)
        if pair is not None:
            return pair
    return None


EXTRACTORS: Tuple[Extractor, ...] = FLAT_EXTRACTORS + (extract_nested,)


def extract(raw: Any) -> Optional[Pair]:
    """Pull a raw (first, second) pair out of any known shape, unvalidated."""
    if isinstance(raw, Coordinates):
        return raw.latitude, raw.longitude
    return first_success(EXTRACTORS, raw)


def in_range(lat: float, lng: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lng <= 180


def normalize(raw: Any) -> Coordinates:
    """Return canonical coordinates for `raw` or raise InvalidCoordinatesError.

    When both the direct and the swapped reading are in range the direct
    reading is kept.
    """
    pair = extract(raw)
    if pair is None:
        raise InvalidCoordinatesError("Could not read latitude/longitude")

    lat, lng = pair
    if in_range(lat, lng):
        return Coordinates(latitude=lat, longitude=lng)
    if in_range(lng, lat):
        logger.info(f"Swapping transposed coordinates ({lat}, {lng})")
        return Coordinates(latitude=lng, longitude=lat)

    raise InvalidCoordinatesError(f"Coordinates out of range: ({lat}, {lng})")


def try_normalize(raw: Any) -> Optional[Coordinates]:
    """Like normalize() but logs and returns None on failure."""
    if raw is None:
        return None
    try:
        return normalize(raw)
    except InvalidCoordinatesError as e:
        logger.warning(f"Dropping coordinates {raw!r}: {e.detail}")
        return None


def fan_out(coords: Coordinates) -> dict:
    """Every coordinate encoding existing clinic readers look for."""
    lat, lng = coords.latitude, coords.longitude
    return {
        "latitude": lat,
        "longitude": lng,
        "location": {"lat": lat, "lng": lng},
        "coords": [lat, lng],
        "coordinates": {"latitude": lat, "longitude": lng},
    }


COORDINATE_FIELDS = ("latitude", "longitude", "location", "coords", "coordinates")


def format_coordinates(lat: float, lng: float) -> str:
    return f"{lat:.6f}, {lng:.6f}"
