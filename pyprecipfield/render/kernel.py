"""
Frame evaluator, taichi kernel.

One parallel iteration per pixel, the sample loop runs serially inside. The
point and gradient buffers keep the fixed capacities of the GPU program
(``MAX_POINTS`` and ``MAX_GRADIENT_STOPS``) and are uploaded padded; only the
first ``n_points`` / ``n_stops`` entries are read.

Buffers are placed through ``ti.FieldsBuilder`` so that they can be destroyed
when the renderer is released or the raster size changes.

Author: B.G.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from ..colormap.gradient import color_for_ti
from ..errors import ConfigurationError
from ..influence.blend import blend_intensity_ti
from ..projection.camera import screen_to_geo_ti


@ti.kernel
def precipitation_kernel(
    rgba: ti.template(),
    points: ti.template(),
    n_points: ti.i32,
    thresholds: ti.template(),
    colors: ti.template(),
    n_stops: ti.i32,
    center_x: cte.FLOAT_TYPE_TI,
    center_y: cte.FLOAT_TYPE_TI,
    scale: cte.FLOAT_TYPE_TI,
    viewport_w: cte.FLOAT_TYPE_TI,
    viewport_h: cte.FLOAT_TYPE_TI,
    influence_radius: cte.FLOAT_TYPE_TI,
    falloff_steepness: cte.FLOAT_TYPE_TI,
):
    """
    Fill ``rgba`` (shape (ny, nx), 4 channels) with the precipitation layer.

    Args:
        rgba: Output vector field, row 0 is the top of the image
        points: [lng, lat, value] vector field
        n_points: Number of active entries in ``points``
        thresholds: Gradient thresholds
        colors: Gradient colours in [0, 255]
        n_stops: Number of active gradient stops
        center_x, center_y: Camera centre in Mercator unit coordinates
        scale: World size in pixels at the camera zoom
        viewport_w, viewport_h: Camera viewport in pixels
        influence_radius: Blob radius in km
        falloff_steepness: Falloff exponent
    """
    ny, nx = rgba.shape

    for j, i in rgba:
        ndc_x = (ti.cast(i, cte.FLOAT_TYPE_TI) + 0.5) / ti.cast(nx, cte.FLOAT_TYPE_TI) * 2.0 - 1.0
        ndc_y = 1.0 - (ti.cast(j, cte.FLOAT_TYPE_TI) + 0.5) / ti.cast(ny, cte.FLOAT_TYPE_TI) * 2.0

        geo = screen_to_geo_ti(ndc_x, ndc_y, center_x, center_y, scale, viewport_w, viewport_h)

        out = ti.Vector([0.0, 0.0, 0.0, 0.0], dt=cte.FLOAT_TYPE_TI)
        # wrapped copies of the world stay transparent
        if geo[2] == 0.0:
            raw = blend_intensity_ti(
                geo[0], geo[1], points, n_points, influence_radius, falloff_steepness
            )
            if raw > 0.0:
                c = color_for_ti(raw, thresholds, colors, n_stops)
                out = ti.Vector(
                    [c[0] / 255.0, c[1] / 255.0, c[2] / 255.0, cte.FIXED_ALPHA],
                    dt=cte.FLOAT_TYPE_TI,
                )
        rgba[j, i] = out


class TaichiFrameRenderer:
    """
    Owns the taichi buffers of the precipitation kernel.

    ``ti.init`` must have been called by the application beforehand.
    """

    def __init__(self):
        fb = ti.FieldsBuilder()
        self.points = ti.Vector.field(3, dtype=cte.FLOAT_TYPE_TI)
        fb.dense(ti.i, cte.MAX_POINTS).place(self.points)
        self.thresholds = ti.field(dtype=cte.FLOAT_TYPE_TI)
        fb.dense(ti.i, cte.MAX_GRADIENT_STOPS).place(self.thresholds)
        self.colors = ti.Vector.field(3, dtype=cte.FLOAT_TYPE_TI)
        fb.dense(ti.i, cte.MAX_GRADIENT_STOPS).place(self.colors)
        self._static_tree = fb.finalize()

        self._rgba = None
        self._rgba_tree = None
        self._shape = None

    def _ensure_rgba(self, width: int, height: int):
        if self._shape == (height, width):
            return
        if self._rgba_tree is not None:
            self._rgba_tree.destroy()
        fb = ti.FieldsBuilder()
        self._rgba = ti.Vector.field(4, dtype=cte.FLOAT_TYPE_TI)
        fb.dense(ti.ij, (height, width)).place(self._rgba)
        self._rgba_tree = fb.finalize()
        self._shape = (height, width)

    def upload(self, state):
        """Copy points and gradient of a FrameState into the padded buffers."""
        n_stops = len(state.gradient)
        if n_stops > cte.MAX_GRADIENT_STOPS:
            raise ConfigurationError(
                f"Maximum {cte.MAX_GRADIENT_STOPS} gradient stops supported on the taichi backend"
            )
        pts = np.zeros((cte.MAX_POINTS, 3), dtype=cte.FLOAT_TYPE_NP)
        pts[: state.n_points] = state.points
        self.points.from_numpy(pts)

        thr = np.zeros(cte.MAX_GRADIENT_STOPS, dtype=cte.FLOAT_TYPE_NP)
        thr[:n_stops] = state.gradient.thresholds
        col = np.zeros((cte.MAX_GRADIENT_STOPS, 3), dtype=cte.FLOAT_TYPE_NP)
        col[:n_stops] = state.gradient.colors
        self.thresholds.from_numpy(thr)
        self.colors.from_numpy(col)

    def render(self, state, camera, width: int, height: int) -> np.ndarray:
        """Render one frame; returns float32 RGBA of shape (height, width, 4)."""
        self._ensure_rgba(width, height)
        self.upload(state)
        center_x, center_y = camera.center_mercator
        precipitation_kernel(
            self._rgba,
            self.points,
            state.n_points,
            self.thresholds,
            self.colors,
            len(state.gradient),
            center_x,
            center_y,
            camera.scale,
            camera.viewport_size[0],
            camera.viewport_size[1],
            state.config.influence_radius,
            state.config.falloff_steepness,
        )
        return self._rgba.to_numpy().astype(np.float32)

    def release(self):
        for tree in (self._rgba_tree, self._static_tree):
            if tree is not None:
                tree.destroy()
        self._rgba_tree = None
        self._static_tree = None
        self._rgba = None
        self._shape = None


def render_frame_taichi(state, camera, width=None, height=None) -> np.ndarray:
    """One-shot taichi counterpart of :func:`render_frame`."""
    if width is None:
        width = int(round(camera.viewport_size[0]))
    if height is None:
        height = int(round(camera.viewport_size[1]))
    renderer = TaichiFrameRenderer()
    try:
        return renderer.render(state, camera, width, height)
    finally:
        renderer.release()
