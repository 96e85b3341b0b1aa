"""Points on the unit sphere and geodesic travel over the WGS84 ellipsoid.

Points are plain (x, y, z) unit vectors. Travel by distance and bearing
is solved on the ellipsoid (kilometres, compass degrees) and the result
is projected back onto the unit sphere for cap math.
"""

import math
from typing import Tuple

from geographiclib.geodesic import Geodesic

Point = Tuple[float, float, float]

EPSILON = 0.00001

_GEOD = Geodesic.WGS84


def normalize(v) -> Point:
    """Scale a vector to unit length."""
    x, y, z = v
    n = math.sqrt(x * x + y * y + z * z)
    if n == 0.0:
        raise ValueError("cannot normalize the zero vector")
    return (x / n, y / n, z / n)


def point_from_latlng(lat: float, lng: float) -> Point:
    """Unit vector for latitude/longitude in degrees."""
    phi = math.radians(lat)
    theta = math.radians(lng)
    cos_phi = math.cos(phi)
    return (math.cos(theta) * cos_phi, math.sin(theta) * cos_phi, math.sin(phi))


def latlng_from_point(p: Point) -> Tuple[float, float]:
    """(latitude, longitude) in degrees of a point."""
    x, y, z = p
    lat = math.degrees(math.atan2(z, math.sqrt(x * x + y * y)))
    lng = math.degrees(math.atan2(y, x))
    return lat, lng


def angular_distance(a: Point, b: Point) -> float:
    """Angle in radians between two unit vectors.

    atan2 of the cross and dot products stays accurate for both tiny and
    near-antipodal angles, where acos of the dot product does not.
    """
    cx = a[1] * b[2] - a[2] * b[1]
    cy = a[2] * b[0] - a[0] * b[2]
    cz = a[0] * b[1] - a[1] * b[0]
    dot = a[0] * b[0] + a[1] * b[1] + a[2] * b[2]
    return math.atan2(math.sqrt(cx * cx + cy * cy + cz * cz), dot)


NORTH_POLE = point_from_latlng(90.0, 0.0)
SOUTH_POLE = point_from_latlng(-90.0, 0.0)
EQUATOR_MERIDIAN = point_from_latlng(0.0, 0.0)
EQUATOR_NON_MERIDIAN = point_from_latlng(0.0, 180.0)


def translate(start: Point, distance: float, bearing: float) -> Point:
    """Travel distance km from start along bearing (degrees) on WGS84."""
    lat, lng = latlng_from_point(start)
    result = _GEOD.Direct(lat, lng, bearing, distance * 1000.0)
    return point_from_latlng(result["lat2"], result["lon2"])


def reverse_bearing(bearing: float) -> float:
    """Bearing pointing the opposite way, in [0, 360)."""
    return (bearing + 180.0) % 360.0


def float_equal(a: float, b: float) -> bool:
    """Relative equality within EPSILON."""
    if a == b:
        return True
    if a == 0.0:
        return abs(b) < EPSILON
    return abs(a - b) / abs(a) < EPSILON
