"""
Projection module for PyPrecipField.

Pure coordinate math between geographic degrees, the normalised Web Mercator
unit square and screen normalised device coordinates for a given camera.

Usage:
    import pyprecipfield as ppf

    x, y = ppf.projection.geo_to_mercator_unit(10.25, 59.75)
    cam = ppf.projection.CameraState((10.25, 59.75), 7.5, (800, 600))
    lng, lat, wrap = ppf.projection.screen_to_geo((0.5, -0.25), cam)

Author: B.G.
"""

from .mercator import (
    geo_to_mercator_unit,
    mercator_unit_to_geo,
    normalize_lng,
    lng_diff,
    lng_diff_ti,
    normalize_lng_ti,
    geo_to_mercator_unit_ti,
    mercator_unit_to_geo_ti,
)
from .camera import CameraState, pixel_ndc_grid, screen_to_geo, screen_to_geo_ti

__all__ = [
    "geo_to_mercator_unit", "mercator_unit_to_geo", "normalize_lng", "lng_diff",
    "geo_to_mercator_unit_ti", "mercator_unit_to_geo_ti", "normalize_lng_ti", "lng_diff_ti",
    "CameraState", "pixel_ndc_grid", "screen_to_geo", "screen_to_geo_ti",
]
