"""
Spherical Web Mercator math for PyPrecipField.

Converts between geographic degrees and normalised Mercator unit-square
coordinates ([0, 1] x [0, 1], y growing southward) and handles longitude
wrapping. Every function exists as a numpy version that accepts Python
scalars or broadcastable arrays, and as a ``@ti.func`` twin (``_ti`` suffix)
used inside the taichi kernels.

The projection is not clamped: latitudes at or beyond +-90 degrees produce
infinities or NaN and callers must keep away from the poles.

Author: B.G.
"""

import math

import numpy as np
import taichi as ti

from .. import constants as cte

vec2 = ti.types.vector(2, cte.FLOAT_TYPE_TI)


def lng_to_mercator_x(lng):
    """Longitude in degrees to Mercator unit x."""
    return (np.asarray(lng, dtype=np.float64) + 180.0) / 360.0


def lat_to_mercator_y(lat):
    """Latitude in degrees to Mercator unit y (0 at the north edge)."""
    lat_rad = np.asarray(lat, dtype=np.float64) * math.pi / 180.0
    with np.errstate(divide="ignore", invalid="ignore"):
        return (math.pi - np.log(np.tan(math.pi / 4.0 + lat_rad / 2.0))) / (2.0 * math.pi)


def mercator_x_to_lng(x):
    return np.asarray(x, dtype=np.float64) * 360.0 - 180.0


def mercator_y_to_lat(y):
    y = np.asarray(y, dtype=np.float64)
    lat_rad = 2.0 * (np.arctan(np.exp(math.pi * (1.0 - 2.0 * y))) - math.pi / 4.0)
    return lat_rad * 180.0 / math.pi


def geo_to_mercator_unit(lng, lat):
    """
    Project geographic coordinates onto the Mercator unit square.

    Args:
        lng: Longitude(s) in degrees
        lat: Latitude(s) in degrees, |lat| < 90

    Returns:
        tuple: (x, y) with x = (lng + 180) / 360 and
        y = (pi - ln(tan(pi/4 + lat_rad/2))) / (2 pi)
    """
    return lng_to_mercator_x(lng), lat_to_mercator_y(lat)


def mercator_unit_to_geo(x, y):
    """
    Inverse of :func:`geo_to_mercator_unit`.

    Args:
        x: Mercator unit x (values outside [0, 1] map outside [-180, 180])
        y: Mercator unit y

    Returns:
        tuple: (lng, lat) in degrees
    """
    return mercator_x_to_lng(x), mercator_y_to_lat(y)


def normalize_lng(lng):
    """Wrap longitude(s) into [-180, 180)."""
    return np.mod(np.asarray(lng, dtype=np.float64) + 180.0, 360.0) - 180.0


def lng_diff(lng1, lng2):
    """
    Signed shortest longitude difference ``lng2 - lng1`` in degrees, in (-180, 180].

    The naive difference is corrected once by +-360 so that points on both
    sides of the antimeridian come out close together.
    """
    diff = np.asarray(lng2, dtype=np.float64) - np.asarray(lng1, dtype=np.float64)
    diff = np.where(diff > 180.0, diff - 360.0, diff)
    diff = np.where(diff <= -180.0, diff + 360.0, diff)
    return diff


########################################################################
# Taichi twins
########################################################################


@ti.func
def deg_to_rad_ti(deg: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    return deg * math.pi / 180.0


@ti.func
def lat_to_mercator_y_ti(lat: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    lat_rad = deg_to_rad_ti(lat)
    return (math.pi - ti.log(ti.tan(math.pi / 4.0 + lat_rad / 2.0))) / (2.0 * math.pi)


@ti.func
def mercator_y_to_lat_ti(y: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    lat_rad = 2.0 * (ti.atan2(ti.exp(math.pi * (1.0 - 2.0 * y)), 1.0) - math.pi / 4.0)
    return lat_rad * 180.0 / math.pi


@ti.func
def geo_to_mercator_unit_ti(lng: cte.FLOAT_TYPE_TI, lat: cte.FLOAT_TYPE_TI) -> vec2:
    return vec2((lng + 180.0) / 360.0, lat_to_mercator_y_ti(lat))


@ti.func
def mercator_unit_to_geo_ti(x: cte.FLOAT_TYPE_TI, y: cte.FLOAT_TYPE_TI) -> vec2:
    return vec2(x * 360.0 - 180.0, mercator_y_to_lat_ti(y))


@ti.func
def normalize_lng_ti(lng: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    shifted = lng + 180.0
    return shifted - 360.0 * ti.floor(shifted / 360.0) - 180.0


@ti.func
def lng_diff_ti(lng1: cte.FLOAT_TYPE_TI, lng2: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    diff = lng2 - lng1
    if diff > 180.0:
        diff -= 360.0
    if diff <= -180.0:
        diff += 360.0
    return diff
