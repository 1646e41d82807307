"""
Global constants for PyPrecipField.

Numeric values shared by the numpy reference path, the taichi kernel and the
GLSL program. Changing them changes the rendered output.

Author: B.G.
"""

import numpy as np
import taichi as ti

# Floating point types used by the kernels
FLOAT_TYPE_TI = ti.f32
FLOAT_TYPE_NP = np.float32

# Mean Earth radius in km (spherical model)
EARTH_RADIUS = 6371.0

# Base world size in pixels at zoom 0 (512 px tiles, MapLibre convention)
WORLD_SIZE = 512.0

# Hard cap on the number of sample points per render
MAX_POINTS = 250

# Capacity of the gradient arrays on the GPU paths
MAX_GRADIENT_STOPS = 16

# Compensates the desaturation of the weighted average at blob edges
INTENSITY_BOOST = 1.15

# Opacity of every visible pixel
FIXED_ALPHA = 0.8
