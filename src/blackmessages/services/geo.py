"""Bounding-box derivation for proximity queries.

The message table has no spatial index, so a radius search is turned into an
axis-aligned latitude/longitude rectangle that can be expressed as four plain
range predicates. The rectangle is an over-approximation of the search disc:
points in its corners may lie farther than the requested radius.

Known limits, kept on purpose:

* No wrap-around at the +/-180 longitude seam or the +/-90 latitude seam.
  Bounds may fall outside the valid coordinate ranges and the rectangle then
  simply misses points on the other side of the seam.
* Near the poles ``cos(latitude)`` approaches zero and the longitude delta is
  undefined; the full longitude range is returned instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from blackmessages.core.errors import InvalidInputError

EARTH_RADIUS_KM = 6371.0
FULL_LONGITUDE_RANGE = (-180.0, 180.0)
_POLE_EPSILON = 1e-12


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in degrees."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Return True if the point lies inside the rectangle (inclusive)."""
        return (
            self.min_lat <= latitude <= self.max_lat
            and self.min_lon <= longitude <= self.max_lon
        )


def bounding_box(latitude: float, longitude: float, radius_km: float) -> BoundingBox:
    """Return a rectangle enclosing every point within ``radius_km`` of the center.

    Args:
        latitude: Center latitude in degrees.
        longitude: Center longitude in degrees.
        radius_km: Great-circle search radius in kilometres, must be positive.

    Raises:
        InvalidInputError: If any argument is non-finite or the radius is not positive.
    """
    if not all(math.isfinite(value) for value in (latitude, longitude, radius_km)):
        raise InvalidInputError("Coordinates and radius must be finite numbers")
    if radius_km <= 0:
        raise InvalidInputError("Radius must be positive")

    lat_rad = math.radians(latitude)
    lon_rad = math.radians(longitude)
    angular_radius = radius_km / EARTH_RADIUS_KM

    min_lat = math.degrees(lat_rad - angular_radius)
    max_lat = math.degrees(lat_rad + angular_radius)

    cos_lat = math.cos(lat_rad)
    if abs(cos_lat) < _POLE_EPSILON:
        min_lon, max_lon = FULL_LONGITUDE_RANGE
        return BoundingBox(min_lat, max_lat, min_lon, max_lon)

    ratio = math.sin(angular_radius) / abs(cos_lat)
    if angular_radius >= math.pi / 2 or ratio >= 1.0:
        # asin is undefined past 1: the disc reaches over the pole.
        min_lon, max_lon = FULL_LONGITUDE_RANGE
        return BoundingBox(min_lat, max_lat, min_lon, max_lon)

    delta_lon = math.asin(ratio)
    return BoundingBox(
        min_lat=min_lat,
        max_lat=max_lat,
        min_lon=math.degrees(lon_rad - delta_lon),
        max_lon=math.degrees(lon_rad + delta_lon),
    )
