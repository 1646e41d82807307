"""
PyPrecipField: precipitation intensity fields over Web Mercator maps.

Renders a continuous, banded precipitation field from a sparse set of
geolocated samples using a radial blob model evaluated per pixel. The same
kernel runs as a numpy reference, as a taichi kernel and as a GLSL program.

Submodules:
- projection: Web Mercator and screen-to-geographic transforms
- influence: haversine distance, falloff and weighted blending
- colormap: discrete colour gradient
- render: frame evaluator, backends and PrecipitationLayer
- gl: GLSL program and moderngl offscreen renderer (optional)
- synthetic: demo point generator
- io: point files and PNG export

Usage:
    import pyprecipfield as ppf

    points = ppf.synthetic.clustered_points()
    layer = ppf.render.PrecipitationLayer("precip", points)
    cam = ppf.projection.CameraState((10.25, 59.75), 7.5, (800, 600))
    ppf.io.save_png(layer.render(cam), "precip.png")

Author: B.G.
"""

__version__ = "0.0.1"

from . import constants, errors
from . import projection, influence, colormap, render
from . import synthetic, io
from .errors import ConfigurationError, InitializationError
from .influence import SamplePoint
from .projection import CameraState
from .colormap import Gradient, GradientStop
from .render import PrecipitationLayer, RenderConfig

__all__ = [
    "constants", "errors",
    "projection", "influence", "colormap", "render",
    "synthetic", "io",
    "ConfigurationError", "InitializationError",
    "SamplePoint", "CameraState", "Gradient", "GradientStop",
    "PrecipitationLayer", "RenderConfig",
]
