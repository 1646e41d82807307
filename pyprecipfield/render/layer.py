"""
Precipitation layer: owned render state with explicit replace-and-swap updates.

The layer holds exactly one committed ``FrameState``. Every update builds a
new snapshot, validates it and only then swaps the reference, so a failed
update leaves the previous state untouched and a frame in flight keeps
reading the snapshot it started with.

Author: B.G.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from ..colormap import DEFAULT_GRADIENT, Gradient
from ..errors import ConfigurationError, InitializationError
from ..influence.points import to_sample_points
from .backends import BACKENDS, RenderBackend, create_backend
from .state import DEFAULT_CONFIG, FrameState, RenderConfig

logger = logging.getLogger(__name__)


class PrecipitationLayer:
    """
    Continuous precipitation field rendered from sparse sample points.

    Args:
        layer_id: Identifier of the layer in the host map
        points: Initial sample points (at most ``MAX_POINTS``)
        config: RenderConfig or mapping of fields merged over the defaults
        gradient: Colour table (default: five blue bands)
        backend: "numpy", "taichi" or "gl"
        on_repaint: Called with the layer after every committed update

    Example:
        layer = PrecipitationLayer("precip", points, {"influence_radius": 30.0})
        cam = CameraState((10.25, 59.75), 7.5, (800, 600))
        rgba = layer.render(cam)
        layer.update_config(falloff_steepness=2.5)
    """

    def __init__(
        self,
        layer_id: str,
        points=(),
        config=None,
        gradient: Optional[Gradient] = None,
        backend: str = "numpy",
        on_repaint: Optional[Callable[["PrecipitationLayer"], None]] = None,
    ):
        self.id = layer_id
        self.backend_name = backend
        self.on_repaint = on_repaint

        if config is None:
            config = DEFAULT_CONFIG
        elif not isinstance(config, RenderConfig):
            config = DEFAULT_CONFIG.merged(**dict(config))

        self._state = FrameState(points=points, config=config, gradient=gradient or DEFAULT_GRADIENT)
        self._check_gradient(self._state.gradient)
        self._backend: Optional[RenderBackend] = None

    # ------------------------------------------------------------------
    # Committed state
    # ------------------------------------------------------------------
    def snapshot(self) -> FrameState:
        """The committed state; a frame must read it once and use it throughout."""
        return self._state

    @property
    def points(self) -> list:
        return to_sample_points(self._state.points)

    @property
    def points_array(self) -> np.ndarray:
        return self._state.points

    @property
    def config(self) -> RenderConfig:
        return self._state.config

    @property
    def gradient(self) -> Gradient:
        return self._state.gradient

    @property
    def is_active(self) -> bool:
        return self._backend is not None

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------
    def _commit(self, state: FrameState) -> None:
        self._state = state
        if self.on_repaint is not None:
            self.on_repaint(self)

    def update_points(self, points) -> None:
        """
        Replace the whole point set.

        Raises:
            ConfigurationError: More than ``MAX_POINTS`` points; the previous
                set stays active.
        """
        state = self._state.with_points(points)
        logger.debug("layer %s: %d points committed", self.id, state.n_points)
        self._commit(state)

    def update_config(self, changes=None, **kwargs) -> None:
        """
        Partially merge configuration fields.

        Raises:
            ConfigurationError: Unknown field or invalid value; the previous
                config stays active.
        """
        merged = dict(changes or {})
        merged.update(kwargs)
        state = self._state.with_config(**merged)
        logger.debug("layer %s: config %s", self.id, state.config)
        self._commit(state)

    def _check_gradient(self, gradient: Gradient) -> None:
        # unknown backend names are reported by activate()
        backend_cls = BACKENDS.get(self.backend_name)
        capacity = getattr(backend_cls, "max_gradient_stops", None)
        if capacity is not None and len(gradient) > capacity:
            raise ConfigurationError(
                f"Maximum {capacity} gradient stops supported on the {self.backend_name} backend, "
                f"got {len(gradient)}"
            )

    def update_gradient(self, gradient) -> None:
        """
        Replace the colour table.

        Raises:
            ConfigurationError: Malformed stops or more stops than the
                backend holds; the previous gradient stays active.
        """
        state = self._state.with_gradient(gradient)
        self._check_gradient(state.gradient)
        self._commit(state)

    # ------------------------------------------------------------------
    # Rendering lifecycle
    # ------------------------------------------------------------------
    def activate(self) -> None:
        """
        Build the render backend.

        Raises:
            InitializationError: Backend resources could not be built. The
                layer stays inactive.
        """
        if self._backend is not None:
            return
        backend = create_backend(self.backend_name)
        try:
            backend.setup()
        except InitializationError:
            backend.release()
            raise
        except Exception as e:
            backend.release()
            raise InitializationError(
                f"Failed to initialise '{self.backend_name}' backend for layer {self.id}: {e}"
            ) from e
        self._backend = backend
        logger.debug("layer %s: %s backend active", self.id, self.backend_name)

    def render(self, camera, width: Optional[int] = None, height: Optional[int] = None) -> np.ndarray:
        """
        Render a frame for ``camera``.

        Activates the backend on first use. The raster defaults to the camera
        viewport size.

        Returns:
            numpy.ndarray: float32 RGBA (height, width, 4), alpha in {0, FIXED_ALPHA}
        """
        if self._backend is None:
            self.activate()
        state = self._state
        if width is None:
            width = int(round(camera.viewport_size[0]))
        if height is None:
            height = int(round(camera.viewport_size[1]))
        return self._backend.draw(state, camera, width, height)

    def release(self) -> None:
        if self._backend is not None:
            self._backend.release()
            self._backend = None
            logger.debug("layer %s: backend released", self.id)
