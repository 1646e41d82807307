"""
Influence module for PyPrecipField.

Distance and blending primitives of the radial blob model:

- haversine_distance: antimeridian-aware great-circle distance (km)
- falloff: cosine falloff of a single blob
- blend_intensity: weighted, boosted average over all active sample points
- SamplePoint / as_point_array: point type and packed (N, 3) layout

Author: B.G.
"""

from .points import SamplePoint, as_point_array, to_sample_points
from .distance import haversine_distance, haversine_distance_ti
from .blend import falloff, blend_intensity, falloff_ti, blend_intensity_ti

__all__ = [
    "SamplePoint", "as_point_array", "to_sample_points",
    "haversine_distance", "haversine_distance_ti",
    "falloff", "blend_intensity", "falloff_ti", "blend_intensity_ti",
]
