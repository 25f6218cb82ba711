from __future__ import annotations

import math
from typing import List

from geoquery.bbox import EARTH_RADIUS_KM
from geoquery.errors import ParseError
from geoquery.models import GeoPoint


# Half the earth's circumference; any larger circle covers the whole globe
MAX_RADIUS_KM = math.pi * EARTH_RADIUS_KM


def _clean(raw: str) -> str:
    return (raw or "").replace("\uFEFF", "").replace("\u200B", "").strip()


def _parse_number(token: str, what: str) -> float:
    try:
        value = float(token.strip())
    except (TypeError, ValueError):
        raise ParseError(f"{what} must be a number, got '{token.strip()}'.")
    if not math.isfinite(value):
        raise ParseError(f"{what} must be a finite number.")
    return value


def parse_point(raw: str) -> GeoPoint:
    """Parse ``"lat, lng"`` into a GeoPoint."""
    value = _clean(raw)
    if not value:
        raise ParseError("Please enter a location (Latitude, Longitude).")
    parts = value.split(",")
    if len(parts) != 2:
        raise ParseError("Location must be 'lat, lng', e.g. '26.4753, 73.1173'.")
    lat = _parse_number(parts[0], "Latitude")
    lng = _parse_number(parts[1], "Longitude")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise ParseError("Latitude/Longitude out of bounds.")
    return GeoPoint(lat=lat, lng=lng)


def parse_points(raw: str) -> List[GeoPoint]:
    """Parse ``"lat,lng; lat,lng; ..."`` into polygon vertices (at least three)."""
    value = _clean(raw)
    if not value:
        raise ParseError("Please enter area points.")
    points: List[GeoPoint] = []
    for segment in value.split(";"):
        try:
            points.append(parse_point(segment))
        except ParseError as exc:
            raise ParseError(f"Invalid coordinates in area points: {exc.message}") from exc
    if len(points) < 3:
        raise ParseError("Please enter at least 3 points to form a polygon.")
    return points


def parse_radius(raw: str) -> float:
    """Parse a radius in kilometres."""
    value = _clean(raw)
    if not value:
        raise ParseError("Please enter a radius in kilometres.")
    radius_km = _parse_number(value, "Radius")
    if radius_km <= 0:
        raise ParseError("Radius must be greater than zero.")
    if radius_km > MAX_RADIUS_KM:
        raise ParseError(f"Radius must be at most {MAX_RADIUS_KM:.0f} km.")
    return radius_km


__all__ = ["MAX_RADIUS_KM", "parse_point", "parse_points", "parse_radius"]
