"""
Offscreen moderngl renderer for the precipitation layer.

Draws a full-screen quad through the GLSL program of :mod:`.shaders` into a
float RGBA framebuffer and reads it back. A standalone context is created
unless the caller passes one (e.g. the context of a host window).

Author: B.G.
"""

import logging

import moderngl
import numpy as np

from .. import constants as cte
from ..errors import ConfigurationError, InitializationError
from .shaders import VERTEX_SHADER, fragment_shader_source

logger = logging.getLogger(__name__)

# Two triangles covering clip space
_QUAD = np.array(
    [-1, -1, 1, -1, -1, 1, -1, 1, 1, -1, 1, 1],
    dtype=np.float32,
)


class GLPrecipitationRenderer:
    """
    GPU form of the frame evaluator.

    Args:
        ctx: Existing moderngl context, or None for a standalone one
        fragment_shader: Fragment shader source override

    Raises:
        InitializationError: Context creation or program compile/link failed.
            Nothing is left allocated in that case.
    """

    def __init__(self, ctx=None, fragment_shader=None):
        self._owns_ctx = ctx is None
        self._program = None
        self._vbo = None
        self._vao = None
        self._tex = None
        self._fbo = None
        self._shape = None

        try:
            self.ctx = ctx if ctx is not None else moderngl.create_standalone_context(require=330)
        except Exception as e:
            self.ctx = None
            raise InitializationError(f"Failed to create OpenGL context: {e}") from e

        try:
            self._program = self.ctx.program(
                vertex_shader=VERTEX_SHADER,
                fragment_shader=fragment_shader or fragment_shader_source(),
            )
        except moderngl.Error as e:
            self.release()
            raise InitializationError(
                f"Failed to build shader program for precipitation layer: {e}"
            ) from e

        self._vbo = self.ctx.buffer(_QUAD.tobytes())
        self._vao = self.ctx.vertex_array(self._program, [(self._vbo, "2f", "a_position")])
        logger.debug("GL program built (%s)", self.ctx.info.get("GL_RENDERER", "unknown"))

    # ------------------------------------------------------------------
    def _ensure_target(self, width: int, height: int) -> None:
        if self._shape == (height, width):
            return
        for obj in (self._fbo, self._tex):
            if obj is not None:
                obj.release()
        self._tex = self.ctx.texture((width, height), 4, dtype="f4")
        self._fbo = self.ctx.framebuffer(color_attachments=[self._tex])
        self._shape = (height, width)

    def _set(self, name: str, value) -> None:
        uniform = self._program.get(name, None)
        # unused uniforms are optimised out by the driver
        if uniform is None:
            return
        if isinstance(value, np.ndarray):
            uniform.write(value.astype("f4").tobytes())
        else:
            uniform.value = value

    def upload(self, state, camera) -> None:
        n_stops = len(state.gradient)
        if n_stops > cte.MAX_GRADIENT_STOPS:
            raise ConfigurationError(
                f"Maximum {cte.MAX_GRADIENT_STOPS} gradient stops supported on the GL backend"
            )
        pts = np.zeros((cte.MAX_POINTS, 3), dtype=np.float32)
        pts[: state.n_points] = state.points
        stops = np.zeros(cte.MAX_GRADIENT_STOPS, dtype=np.float32)
        stops[:n_stops] = state.gradient.thresholds
        colors = np.zeros((cte.MAX_GRADIENT_STOPS, 3), dtype=np.float32)
        colors[:n_stops] = state.gradient.colors

        self._set("u_center", tuple(camera.center))
        self._set("u_zoom", camera.zoom)
        self._set("u_viewportSize", tuple(camera.viewport_size))
        self._set("u_influenceRadius", state.config.influence_radius)
        self._set("u_falloffSteepness", state.config.falloff_steepness)
        self._set("u_points", pts)
        self._set("u_numPoints", state.n_points)
        self._set("u_gradientColors", colors)
        self._set("u_gradientStops", stops)
        self._set("u_numStops", n_stops)

    def render(self, state, camera, width: int, height: int) -> np.ndarray:
        """Render one frame; returns float32 RGBA (height, width, 4), row 0 on top."""
        if self._program is None:
            raise InitializationError("GL renderer has been released")
        self._ensure_target(width, height)
        self.upload(state, camera)

        self._fbo.use()
        self._fbo.clear(0.0, 0.0, 0.0, 0.0)
        self._vao.render(moderngl.TRIANGLES)

        data = self._fbo.read(components=4, dtype="f4")
        frame = np.frombuffer(data, dtype=np.float32).reshape(height, width, 4)
        # GL rows start at the bottom
        return np.flipud(frame).copy()

    def release(self) -> None:
        for obj in (self._vao, self._vbo, self._fbo, self._tex, self._program):
            if obj is not None:
                obj.release()
        self._vao = self._vbo = self._fbo = self._tex = self._program = None
        self._shape = None
        if self._owns_ctx and self.ctx is not None:
            self.ctx.release()
        self.ctx = None
