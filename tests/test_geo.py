import math
import random

import pytest
from pydantic import ValidationError

from features.common.models.geo_types import BoundingBox, GeoPoint, WHOLE_WORLD
from features.common.exceptions.provider_exceptions import DegenerateQueryError
from features.common.utils.geo import (
    EARTH_RADIUS_MILES,
    bounding_box,
    distance_miles,
    sort_by_distance,
    within_radius
)

def destination(origin: GeoPoint, bearing_deg: float, distance: float) -> GeoPoint:
    """Point reached travelling `distance` miles from origin along a bearing."""
    delta = distance / EARTH_RADIUS_MILES
    theta = math.radians(bearing_deg)
    lat1 = math.radians(origin.latitude)
    lon1 = math.radians(origin.longitude)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(theta)
    )
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2)
    )
    lon = (math.degrees(lon2) + 540) % 360 - 180
    return GeoPoint(latitude=math.degrees(lat2), longitude=lon)

def test_distance_to_self_is_zero():
    rng = random.Random(7)
    for _ in range(200):
        point = GeoPoint(latitude=rng.uniform(-90, 90), longitude=rng.uniform(-180, 180))
        assert distance_miles(point, point) == 0

def test_distance_is_symmetric():
    rng = random.Random(11)
    for _ in range(200):
        a = GeoPoint(latitude=rng.uniform(-90, 90), longitude=rng.uniform(-180, 180))
        b = GeoPoint(latitude=rng.uniform(-90, 90), longitude=rng.uniform(-180, 180))
        assert distance_miles(a, b) == distance_miles(b, a)

def test_distance_new_york_to_los_angeles():
    new_york = GeoPoint(latitude=40.7128, longitude=-74.0060)
    los_angeles = GeoPoint(latitude=34.0522, longitude=-118.2437)
    assert distance_miles(new_york, los_angeles) == pytest.approx(2445, abs=5)

def test_distance_antipodal_points_is_half_circumference():
    a = GeoPoint(latitude=0, longitude=0)
    b = GeoPoint(latitude=0, longitude=180)
    assert distance_miles(a, b) == pytest.approx(math.pi * EARTH_RADIUS_MILES)

def test_distance_across_antimeridian_is_short():
    a = GeoPoint(latitude=0, longitude=179.9)
    b = GeoPoint(latitude=0, longitude=-179.9)
    assert distance_miles(a, b) < 14

@pytest.mark.parametrize("latitude", [0.0, 40.7, -33.9, 60.0, 75.0, 85.0, 89.5, -89.5])
@pytest.mark.parametrize("radius", [1.0, 25.0, 150.0, 500.0])
def test_bounding_box_has_no_false_negatives(latitude, radius):
    rng = random.Random(int(latitude * 100 + radius))
    center = GeoPoint(latitude=latitude, longitude=rng.uniform(-180, 180))
    box = bounding_box(center, radius)

    for _ in range(300):
        point = destination(center, rng.uniform(0, 360), rng.uniform(0, radius * 0.999))
        assert box.contains(point), f"{point} within {radius} mi of {center} but outside {box}"

@pytest.mark.parametrize("latitude", [0.0, 40.7, -33.9, 75.0, 89.0])
@pytest.mark.parametrize("radius", [0.5, 25.0, 150.0])
@pytest.mark.parametrize("bearing", [0, 90, 180, 270])
def test_bounding_box_contains_points_exactly_on_the_radius(latitude, radius, bearing):
    center = GeoPoint(latitude=latitude, longitude=-122.3)
    box = bounding_box(center, radius)
    edge = destination(center, bearing, radius)

    assert distance_miles(center, edge) == pytest.approx(radius)
    assert box.contains(edge)

@pytest.mark.parametrize("bearing", [0, 90, 180, 270])
def test_bounding_box_covers_cardinal_extremes(bearing):
    center = GeoPoint(latitude=47.6, longitude=-122.3)
    box = bounding_box(center, 100)
    assert box.contains(destination(center, bearing, 99.9))

def test_bounding_box_scales_longitude_with_latitude():
    equator = bounding_box(GeoPoint(latitude=0, longitude=0), 50)
    north = bounding_box(GeoPoint(latitude=60, longitude=0), 50)

    assert (north.max_lat - north.min_lat) == pytest.approx(equator.max_lat - equator.min_lat)
    assert (north.max_lon - north.min_lon) > 1.9 * (equator.max_lon - equator.min_lon)

def test_bounding_box_zero_radius_is_the_point():
    center = GeoPoint(latitude=40.70, longitude=-74.01)
    box = bounding_box(center, 0)
    assert (box.min_lat, box.max_lat) == (40.70, 40.70)
    assert (box.min_lon, box.max_lon) == (-74.01, -74.01)

def test_bounding_box_reaching_pole_spans_all_longitudes():
    box = bounding_box(GeoPoint(latitude=89.9, longitude=10), 50)
    assert box.max_lat == 90
    assert box.spans_all_longitudes
    assert math.isfinite(box.min_lat)

def test_bounding_box_at_pole_is_finite():
    box = bounding_box(GeoPoint(latitude=-90, longitude=0), 10)
    assert box.min_lat == -90
    assert box.spans_all_longitudes

def test_bounding_box_crossing_antimeridian_widens_to_all_longitudes():
    center = GeoPoint(latitude=-17.7, longitude=179.8)
    box = bounding_box(center, 60)
    assert box.spans_all_longitudes
    assert box.contains(GeoPoint(latitude=-17.7, longitude=-179.8))

def test_bounding_box_larger_than_earth_is_whole_world():
    box = bounding_box(GeoPoint(latitude=10, longitude=10), 20000)
    assert box == WHOLE_WORLD

@pytest.mark.parametrize("radius", [-1.0, float("nan"), float("inf")])
def test_bounding_box_rejects_degenerate_radius(radius):
    with pytest.raises(DegenerateQueryError):
        bounding_box(GeoPoint(latitude=0, longitude=0), radius)

def test_bounding_box_model_rejects_inverted_bounds():
    with pytest.raises(ValidationError):
        BoundingBox(min_lat=10, max_lat=0, min_lon=0, max_lon=1)
    with pytest.raises(ValidationError):
        BoundingBox(min_lat=0, max_lat=1, min_lon=170, max_lon=-170)

def test_geo_point_rejects_out_of_range():
    with pytest.raises(ValidationError):
        GeoPoint(latitude=91, longitude=0)
    with pytest.raises(ValidationError):
        GeoPoint(latitude=0, longitude=-180.5)
    with pytest.raises(ValidationError):
        GeoPoint(latitude=float("nan"), longitude=0)

def test_within_radius_and_sort_by_distance():
    origin = GeoPoint(latitude=40.70, longitude=-74.01)
    near = GeoPoint(latitude=40.75, longitude=-74.00)
    far = GeoPoint(latitude=41.50, longitude=-73.50)

    assert within_radius(origin, near, 5)
    assert not within_radius(origin, far, 5)
    assert sort_by_distance([far, near, origin], origin, key=lambda p: p) == [origin, near, far]
