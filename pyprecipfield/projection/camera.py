"""
Camera state and screen-to-geographic conversion.

The camera is supplied by the host every frame. Screen positions are given
in normalised device coordinates ([-1, 1]^2, origin at the viewport centre,
+y up); the Mercator unit square has +y pointing south, hence the sign flip.

Author: B.G.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import taichi as ti

from .. import constants as cte
from .mercator import (
    geo_to_mercator_unit,
    mercator_unit_to_geo,
    mercator_unit_to_geo_ti,
)

vec3 = ti.types.vector(3, cte.FLOAT_TYPE_TI)


@dataclass(frozen=True)
class CameraState:
    """Host camera: centre (lng, lat) in degrees, zoom level, viewport (w, h) in pixels."""

    center: Tuple[float, float]
    zoom: float
    viewport_size: Tuple[float, float]

    def __post_init__(self):
        object.__setattr__(self, "center", (float(self.center[0]), float(self.center[1])))
        object.__setattr__(self, "zoom", float(self.zoom))
        object.__setattr__(
            self, "viewport_size", (float(self.viewport_size[0]), float(self.viewport_size[1]))
        )

    @classmethod
    def from_center(cls, lng: float, lat: float, zoom: float, width: float, height: float) -> "CameraState":
        return cls(center=(lng, lat), zoom=zoom, viewport_size=(width, height))

    @property
    def scale(self) -> float:
        """World size in pixels at the current zoom."""
        return cte.WORLD_SIZE * 2.0 ** self.zoom

    @property
    def center_mercator(self) -> Tuple[float, float]:
        x, y = geo_to_mercator_unit(self.center[0], self.center[1])
        return float(x), float(y)


def pixel_ndc_grid(width: int, height: int):
    """
    NDC coordinates of the pixel centres of a ``height x width`` raster.

    Row 0 is the top of the image, which is where NDC y = +1 lives.

    Returns:
        tuple: (ndc_x, ndc_y) float64 arrays of shape (height, width)
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be > 0")
    xs = (np.arange(width, dtype=np.float64) + 0.5) / width * 2.0 - 1.0
    ys = 1.0 - (np.arange(height, dtype=np.float64) + 0.5) / height * 2.0
    return np.meshgrid(xs, ys)


def screen_to_geo(ndc, camera: CameraState):
    """
    Recover the geographic point under a screen position.

    Args:
        ndc: (x, y) normalised device coordinates, scalars or arrays
        camera: Current camera state

    Returns:
        tuple: (lng, lat, world_wrap). ``world_wrap`` is the integer index of
        the horizontally repeated world copy the position falls in, 0 being
        the primary instance. The longitude is always taken inside that copy.
    """
    ndc_x = np.asarray(ndc[0], dtype=np.float64)
    ndc_y = np.asarray(ndc[1], dtype=np.float64)
    center_x, center_y = camera.center_mercator
    scale = camera.scale
    width, height = camera.viewport_size

    pixel_x = ndc_x * width * 0.5
    pixel_y = -ndc_y * height * 0.5

    merc_x = center_x + pixel_x / scale
    merc_y = center_y + pixel_y / scale

    wrap = np.floor(merc_x)
    lng, lat = mercator_unit_to_geo(merc_x - wrap, merc_y)
    return lng, lat, wrap.astype(np.int64)


@ti.func
def screen_to_geo_ti(
    ndc_x: cte.FLOAT_TYPE_TI,
    ndc_y: cte.FLOAT_TYPE_TI,
    center_x: cte.FLOAT_TYPE_TI,
    center_y: cte.FLOAT_TYPE_TI,
    scale: cte.FLOAT_TYPE_TI,
    width: cte.FLOAT_TYPE_TI,
    height: cte.FLOAT_TYPE_TI,
) -> vec3:
    """Same as :func:`screen_to_geo`, returns (lng, lat, world_wrap)."""
    merc_x = center_x + ndc_x * width * 0.5 / scale
    merc_y = center_y - ndc_y * height * 0.5 / scale
    wrap = ti.floor(merc_x)
    geo = mercator_unit_to_geo_ti(merc_x - wrap, merc_y)
    return vec3(geo[0], geo[1], wrap)
