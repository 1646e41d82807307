"""
Frame evaluator, numpy reference path.

Per pixel:
1. recover the geographic point and world-wrap index of the pixel
2. pixels outside the primary world instance are transparent
3. blend every active sample point into a raw intensity
4. raw intensity <= 0 is transparent
5. otherwise colour band of the intensity with the fixed alpha

Opacity is binary: a pixel is either fully transparent or ``FIXED_ALPHA``.

Author: B.G.
"""

import numpy as np

from .. import constants as cte
from ..colormap import DEFAULT_GRADIENT
from ..influence.blend import blend_intensity
from ..projection.camera import pixel_ndc_grid, screen_to_geo

TRANSPARENT = (0.0, 0.0, 0.0, 0.0)


def evaluate(ndc, camera, config, points, gradient=DEFAULT_GRADIENT):
    """
    Evaluate a single screen position.

    Args:
        ndc: (x, y) normalised device coordinates of the pixel
        camera: CameraState of the frame
        config: RenderConfig of the frame
        points: Sample points of the frame
        gradient: Colour table

    Returns:
        tuple: (r, g, b, a) floats in [0, 1]
    """
    lng, lat, wrap = screen_to_geo(ndc, camera)
    if wrap != 0:
        return TRANSPARENT

    raw = blend_intensity(lng, lat, points, config.influence_radius, config.falloff_steepness)
    if not raw > 0.0:
        return TRANSPARENT

    r, g, b = gradient.color_for(raw)
    return (r / 255.0, g / 255.0, b / 255.0, cte.FIXED_ALPHA)


def render_frame(state, camera, width=None, height=None) -> np.ndarray:
    """
    Render a whole frame on the CPU.

    Args:
        state: FrameState snapshot (points, config, gradient)
        camera: CameraState of the frame
        width: Raster width in pixels (default: camera viewport width)
        height: Raster height in pixels (default: camera viewport height)

    Returns:
        numpy.ndarray: float32 RGBA frame of shape (height, width, 4), row 0 on top
    """
    if width is None:
        width = int(round(camera.viewport_size[0]))
    if height is None:
        height = int(round(camera.viewport_size[1]))

    ndc_x, ndc_y = pixel_ndc_grid(width, height)
    lng, lat, wrap = screen_to_geo((ndc_x, ndc_y), camera)

    rgba = np.zeros((height, width, 4), dtype=np.float32)
    primary = wrap == 0
    if not primary.any() or state.n_points == 0:
        return rgba

    raw = blend_intensity(
        lng[primary],
        lat[primary],
        state.points,
        state.config.influence_radius,
        state.config.falloff_steepness,
    )
    visible = raw > 0.0

    colors = np.zeros((raw.shape[0], 4), dtype=np.float32)
    colors[visible, :3] = state.gradient.lookup(raw[visible]) / 255.0
    colors[visible, 3] = cte.FIXED_ALPHA
    rgba[primary] = colors
    return rgba


def to_uint8(rgba: np.ndarray) -> np.ndarray:
    """Convert a float RGBA frame in [0, 1] to uint8."""
    return np.clip(np.round(np.asarray(rgba) * 255.0), 0, 255).astype(np.uint8)
