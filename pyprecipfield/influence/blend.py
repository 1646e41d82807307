"""
Radial influence and weighted blending of sample points.

Every sample point with a positive value spreads an influence blob of radius
``influence_radius`` km. Inside the blob the falloff goes smoothly from 1 at
the point to 0 at the rim:

    nd      = (d / radius) ** steepness
    falloff = 0.5 + 0.5 * cos(nd * pi)

Each point contributes ``value * falloff`` with weight ``falloff ** 2``. The
blended value is the weighted average boosted by ``INTENSITY_BOOST``. It is
not clamped here; values above 1 are expected and clamped by the colour
lookup.

Author: B.G.
"""

import math

import numpy as np
import taichi as ti

from .. import constants as cte
from .distance import haversine_distance, haversine_distance_ti
from .points import as_point_array


def falloff(distance, influence_radius: float, falloff_steepness: float):
    """
    Smooth 1 -> 0 attenuation for a distance in km.

    Returns 0 for distances at or beyond ``influence_radius``.
    """
    d = np.asarray(distance, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        nd = (d / influence_radius) ** falloff_steepness
        f = np.where(d < influence_radius, 0.5 + 0.5 * np.cos(nd * math.pi), 0.0)
    return float(f) if f.ndim == 0 else f


def blend_intensity(lng, lat, points, influence_radius: float, falloff_steepness: float):
    """
    Blended raw intensity at geographic location(s).

    Args:
        lng: Longitude(s) in degrees of the query location(s)
        lat: Latitude(s) in degrees of the query location(s)
        points: Sample points (see :func:`as_point_array`)
        influence_radius: Blob radius in km (> 0)
        falloff_steepness: Exponent applied to the normalised distance (>= 1)

    Returns:
        float or numpy.ndarray: Raw value, 0 where no point reaches.
    """
    lng = np.asarray(lng, dtype=np.float64)
    lat = np.asarray(lat, dtype=np.float64)
    shape = np.broadcast(lng, lat).shape

    total_influence = np.zeros(shape, dtype=np.float64)
    total_weight = np.zeros(shape, dtype=np.float64)

    for q_lng, q_lat, value in as_point_array(points):
        # zero-value points are absent, not "zero rain"
        if not value > 0.0:
            continue
        d = haversine_distance((lng, lat), (q_lng, q_lat))
        f = falloff(d, influence_radius, falloff_steepness)
        weight = f * f
        total_influence += value * f * weight
        total_weight += weight

    with np.errstate(divide="ignore", invalid="ignore"):
        raw = np.where(
            total_weight > 0.0,
            total_influence / total_weight * cte.INTENSITY_BOOST,
            0.0,
        )
    return float(raw) if raw.ndim == 0 else raw


@ti.func
def falloff_ti(
    distance: cte.FLOAT_TYPE_TI,
    influence_radius: cte.FLOAT_TYPE_TI,
    falloff_steepness: cte.FLOAT_TYPE_TI,
) -> cte.FLOAT_TYPE_TI:
    f = 0.0
    if distance < influence_radius:
        nd = (distance / influence_radius) ** falloff_steepness
        f = 0.5 + 0.5 * ti.cos(nd * math.pi)
    return f


@ti.func
def blend_intensity_ti(
    lng: cte.FLOAT_TYPE_TI,
    lat: cte.FLOAT_TYPE_TI,
    points: ti.template(),
    n_points: ti.i32,
    influence_radius: cte.FLOAT_TYPE_TI,
    falloff_steepness: cte.FLOAT_TYPE_TI,
) -> cte.FLOAT_TYPE_TI:
    total_influence = 0.0
    total_weight = 0.0
    for k in range(n_points):
        value = points[k][2]
        if value > 0.0:
            d = haversine_distance_ti(lng, lat, points[k][0], points[k][1])
            if d < influence_radius:
                f = falloff_ti(d, influence_radius, falloff_steepness)
                w = f * f
                total_influence += value * f * w
                total_weight += w

    raw = 0.0
    if total_weight > 0.0:
        raw = total_influence / total_weight * cte.INTENSITY_BOOST
    return raw
