"""Great-circle geometry for station lookups.

All distances are in statute miles on a spherical Earth of radius
``EARTH_RADIUS_MILES`` (3958.8 mi, the mean radius). Radius-based filters
throughout the service assume the same unit.
"""
import math
from typing import Callable, Iterable, List, TypeVar

from features.common.models.geo_types import BoundingBox, GeoPoint
from features.common.exceptions.provider_exceptions import DegenerateQueryError

EARTH_RADIUS_MILES = 3958.8
MILES_PER_DEGREE_LAT = EARTH_RADIUS_MILES * math.pi / 180  # ~69.09
# Absorbs float rounding for points lying exactly on the circle
EDGE_PADDING_DEGREES = 1e-9

T = TypeVar("T")

def distance_miles(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance between two points in miles."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h a hair past 1 for antipodal points
    h = min(1.0, h)
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

def bounding_box(center: GeoPoint, radius_miles: float) -> BoundingBox:
    """Smallest lat/lon rectangle containing every point within the radius.

    Latitude extends by a constant ``radius / MILES_PER_DEGREE_LAT``. The
    longitude extent is scaled by the cosine of the center latitude
    (``asin(sin(d) / cos(lat))``), so the box never under-covers the circle.

    Two cases widen the box to every longitude:

    * the circle reaches a pole, where ``cos(lat)`` goes to zero; latitude
      is clamped to [-90, 90]
    * the longitude span crosses the antimeridian

    Both only add false positives, which callers remove with
    :func:`distance_miles`.

    Raises:
        DegenerateQueryError: radius is negative, NaN or infinite
    """
    if radius_miles is None or not math.isfinite(radius_miles) or radius_miles < 0:
        raise DegenerateQueryError(f"Invalid search radius: {radius_miles}")

    padding = EDGE_PADDING_DEGREES if radius_miles > 0 else 0.0
    lat_delta = radius_miles / MILES_PER_DEGREE_LAT + padding
    min_lat = center.latitude - lat_delta
    max_lat = center.latitude + lat_delta

    if min_lat <= -90 or max_lat >= 90:
        return BoundingBox(
            min_lat=max(min_lat, -90.0),
            max_lat=min(max_lat, 90.0),
            min_lon=-180.0,
            max_lon=180.0
        )

    angular = radius_miles / EARTH_RADIUS_MILES
    ratio = math.sin(angular) / math.cos(math.radians(center.latitude))
    lon_delta = math.degrees(math.asin(min(1.0, ratio))) + padding
    min_lon = center.longitude - lon_delta
    max_lon = center.longitude + lon_delta

    if min_lon < -180 or max_lon > 180:
        min_lon, max_lon = -180.0, 180.0

    return BoundingBox(
        min_lat=min_lat,
        max_lat=max_lat,
        min_lon=min_lon,
        max_lon=max_lon
    )

def within_radius(center: GeoPoint, point: GeoPoint, radius_miles: float) -> bool:
    return distance_miles(center, point) <= radius_miles

def sort_by_distance(
    items: Iterable[T],
    origin: GeoPoint,
    key: Callable[[T], GeoPoint]
) -> List[T]:
    """Return items ordered nearest-first from origin."""
    return sorted(items, key=lambda item: distance_miles(origin, key(item)))
