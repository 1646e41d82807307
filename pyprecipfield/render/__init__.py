"""
Render module for PyPrecipField.

Frame evaluation of the precipitation layer:

- state: RenderConfig and immutable FrameState snapshots
- evaluator: numpy reference evaluator (``evaluate``, ``render_frame``)
- kernel: taichi kernel (``render_frame_taichi``, ``TaichiFrameRenderer``)
- backends: numpy / taichi / gl backends behind one interface
- layer: PrecipitationLayer, owned state with replace-and-swap updates

Usage:
    import taichi as ti
    import pyprecipfield as ppf

    ti.init(ti.gpu)
    layer = ppf.render.PrecipitationLayer("precip", points, backend="taichi")
    cam = ppf.projection.CameraState((10.25, 59.75), 7.5, (1024, 768))
    rgba = layer.render(cam)

Author: B.G.
"""

from .state import DEFAULT_CONFIG, FrameState, RenderConfig
from .evaluator import TRANSPARENT, evaluate, render_frame, to_uint8
from .kernel import TaichiFrameRenderer, precipitation_kernel, render_frame_taichi
from .backends import BACKENDS, GLBackend, NumpyBackend, RenderBackend, TaichiBackend, create_backend
from .layer import PrecipitationLayer

__all__ = [
    "DEFAULT_CONFIG", "FrameState", "RenderConfig",
    "TRANSPARENT", "evaluate", "render_frame", "to_uint8",
    "TaichiFrameRenderer", "precipitation_kernel", "render_frame_taichi",
    "BACKENDS", "GLBackend", "NumpyBackend", "RenderBackend", "TaichiBackend", "create_backend",
    "PrecipitationLayer",
]
