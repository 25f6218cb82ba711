from __future__ import annotations

import math
from typing import Iterable, Tuple

from shapely.geometry import MultiPoint

from geoquery.models import BoundingBox, GeoPoint

EARTH_RADIUS_KM = 6371.0

# cos(lat) floor so the longitude span stays finite at the poles
MIN_COS_LAT = 1e-12

LatLngBounds = Tuple[Tuple[float, float], Tuple[float, float]]


def derive_bounding_box(center: GeoPoint, radius_km: float) -> BoundingBox:
    """Box conservatively covering the circle of ``radius_km`` around ``center``.

    Spherical-earth approximation. When the longitude offset reaches 180
    degrees the circle wraps the whole parallel and the box spans every
    longitude.
    """
    if not math.isfinite(radius_km) or radius_km <= 0:
        raise ValueError("radius_km must be a positive finite number")

    lat_offset = (radius_km / EARTH_RADIUS_KM) * (180.0 / math.pi)
    cos_lat = max(abs(math.cos(center.lat * math.pi / 180.0)), MIN_COS_LAT)
    lng_offset = lat_offset / cos_lat

    if lng_offset >= 180.0:
        min_lng, max_lng = -180.0, 180.0
    else:
        min_lng, max_lng = center.lng - lng_offset, center.lng + lng_offset

    return BoundingBox(
        min_lat=center.lat - lat_offset,
        max_lat=center.lat + lat_offset,
        min_lng=min_lng,
        max_lng=max_lng,
    )


def bounds_of(points: Iterable[GeoPoint]) -> LatLngBounds:
    """South-west / north-east corners enclosing ``points``."""
    geom = MultiPoint([(p.lng, p.lat) for p in points])
    if geom.is_empty:
        raise ValueError("bounds_of() needs at least one point")
    min_lng, min_lat, max_lng, max_lat = geom.bounds
    return (min_lat, min_lng), (max_lat, max_lng)


def circle_bounds(center: GeoPoint, radius_m: float) -> LatLngBounds:
    return derive_bounding_box(center, radius_m / 1000.0).corners()


__all__ = [
    "EARTH_RADIUS_KM",
    "LatLngBounds",
    "derive_bounding_box",
    "bounds_of",
    "circle_bounds",
]
