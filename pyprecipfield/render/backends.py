"""
Render backends of the precipitation layer.

A backend is built once (``setup``), draws any number of frames from
immutable ``FrameState`` snapshots (``draw``) and is torn down with
``release``. ``setup`` failures surface as ``InitializationError``.
"""

from __future__ import annotations

from typing import Dict, Type

import numpy as np

from .. import constants as cte
from ..errors import InitializationError
from .evaluator import render_frame


class RenderBackend:
    """Backend interface.

    Implementors should provide:
    - setup(): allocate/compile once
    - draw(state, camera, width, height): per-frame render, float32 RGBA
    - release(): free what setup allocated
    """

    name = "abstract"
    # gradient stop capacity, None when unbounded
    max_gradient_stops = None

    def setup(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def draw(self, state, camera, width: int, height: int) -> np.ndarray:  # pragma: no cover - interface
        raise NotImplementedError

    def release(self) -> None:
        pass


class NumpyBackend(RenderBackend):
    """CPU reference renderer, vectorised over pixels."""

    name = "numpy"

    def setup(self) -> None:
        pass

    def draw(self, state, camera, width, height):
        return render_frame(state, camera, width, height)


class TaichiBackend(RenderBackend):
    """Parallel per-pixel taichi kernel. Requires ``ti.init`` beforehand."""

    name = "taichi"
    max_gradient_stops = cte.MAX_GRADIENT_STOPS

    def __init__(self) -> None:
        self._renderer = None

    def setup(self) -> None:
        from .kernel import TaichiFrameRenderer

        self._renderer = TaichiFrameRenderer()

    def draw(self, state, camera, width, height):
        return self._renderer.render(state, camera, width, height)

    def release(self) -> None:
        if self._renderer is not None:
            self._renderer.release()
            self._renderer = None


class GLBackend(RenderBackend):
    """GLSL fragment program rendered offscreen through moderngl."""

    name = "gl"
    max_gradient_stops = cte.MAX_GRADIENT_STOPS

    def __init__(self, ctx=None) -> None:
        self._ctx = ctx
        self._renderer = None

    def setup(self) -> None:
        try:
            from ..gl.renderer import GLPrecipitationRenderer
        except ImportError as e:
            raise InitializationError(
                "moderngl is required for the gl backend. Install with: pip install pyprecipfield[gl]"
            ) from e
        self._renderer = GLPrecipitationRenderer(ctx=self._ctx)

    def draw(self, state, camera, width, height):
        return self._renderer.render(state, camera, width, height)

    def release(self) -> None:
        if self._renderer is not None:
            self._renderer.release()
            self._renderer = None


BACKENDS: Dict[str, Type[RenderBackend]] = {
    NumpyBackend.name: NumpyBackend,
    TaichiBackend.name: TaichiBackend,
    GLBackend.name: GLBackend,
}


def create_backend(name: str) -> RenderBackend:
    try:
        cls = BACKENDS[name]
    except KeyError:
        raise InitializationError(
            f"unknown backend '{name}', expected one of {sorted(BACKENDS)}"
        ) from None
    return cls()
