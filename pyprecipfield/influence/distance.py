"""
Great-circle distance on a spherical Earth.

The longitude term uses the shortest signed difference so that two points on
either side of the antimeridian are close, not half a circumference apart.

Author: B.G.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from ..projection.mercator import deg_to_rad_ti, lng_diff, lng_diff_ti


def haversine_distance(p1, p2):
    """
    Haversine distance in km between two geographic points.

    Args:
        p1: (lng, lat) in degrees, scalars or broadcastable arrays
        p2: (lng, lat) in degrees, scalars or broadcastable arrays

    Returns:
        float or numpy.ndarray: Distance in kilometres on a sphere of radius
        ``EARTH_RADIUS``.
    """
    lng1, lat1 = p1
    lng2, lat2 = p2
    lat1 = np.asarray(lat1, dtype=np.float64)
    lat2 = np.asarray(lat2, dtype=np.float64)

    d_lat = np.radians(lat2 - lat1)
    d_lng = np.radians(lng_diff(lng1, lng2))

    a = np.sin(d_lat / 2.0) ** 2 + np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(d_lng / 2.0) ** 2
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(np.maximum(1.0 - a, 0.0)))
    dist = cte.EARTH_RADIUS * c
    return float(dist) if np.ndim(dist) == 0 else dist


@ti.func
def haversine_distance_ti(
    lng1: cte.FLOAT_TYPE_TI,
    lat1: cte.FLOAT_TYPE_TI,
    lng2: cte.FLOAT_TYPE_TI,
    lat2: cte.FLOAT_TYPE_TI,
) -> cte.FLOAT_TYPE_TI:
    d_lat = deg_to_rad_ti(lat2 - lat1)
    d_lng = deg_to_rad_ti(lng_diff_ti(lng1, lng2))
    s_lat = ti.sin(d_lat / 2.0)
    s_lng = ti.sin(d_lng / 2.0)
    a = s_lat * s_lat + ti.cos(deg_to_rad_ti(lat1)) * ti.cos(deg_to_rad_ti(lat2)) * s_lng * s_lng
    c = 2.0 * ti.atan2(ti.sqrt(a), ti.sqrt(ti.max(1.0 - a, 0.0)))
    return cte.EARTH_RADIUS * c


__all__ = ["haversine_distance", "haversine_distance_ti"]
