"""
Synthetic precipitation sample points for demos.

Produces a jittered grid over southern Norway whose values come from a set of
rain clusters (coastal systems, a frontal system moving inland, convective
cells, lighter rain in the eastern valleys and scattered showers). Seeded for
reproducible results.

Author: B.G.
"""

import math

import numpy as np

from .influence.points import SamplePoint

# lng, lat, radius (deg), intensity, density (chance of full-intensity rain)
RAIN_CLUSTERS = (
    # strong coastal systems (west coast)
    (5.8, 60.3, 1.2, 0.92, 0.85),
    (6.5, 59.8, 0.9, 0.88, 0.80),
    # frontal system moving inland
    (7.8, 60.5, 1.5, 0.75, 0.70),
    (8.5, 59.5, 1.3, 0.70, 0.65),
    # convective cells in the interior
    (10.2, 60.8, 0.6, 0.82, 0.75),
    (11.0, 59.3, 0.7, 0.78, 0.70),
    # rain shadow in the eastern valleys
    (11.8, 61.2, 0.8, 0.58, 0.55),
    (12.3, 60.0, 0.5, 0.52, 0.50),
    # secondary system in the south
    (8.0, 58.5, 1.0, 0.68, 0.60),
    (9.2, 58.8, 0.8, 0.72, 0.65),
    # scattered showers
    (10.8, 58.3, 0.4, 0.62, 0.50),
    (7.2, 61.3, 0.6, 0.65, 0.55),
)

# lng_min, lng_max, lat_min, lat_max
DEFAULT_BOUNDS = (7.5, 13.0, 58.5, 61.0)

# Map view framing the default bounds
DEFAULT_VIEW = {"center": (10.25, 59.75), "zoom": 7.5}


def clustered_points(grid_points: int = 200, seed: int = 42, bounds=DEFAULT_BOUNDS, clusters=RAIN_CLUSTERS):
    """
    Generate clustered precipitation sample points.

    Args:
        grid_points: Grid density. The step is ``extent / sqrt(grid_points)``
            and ``ceil(sqrt(grid_points))`` rows and columns are sampled, so
            200 gives 225 points.
        seed: Random seed for reproducible results (default: 42)
        bounds: (lng_min, lng_max, lat_min, lat_max) of the grid
        clusters: Sequence of (lng, lat, radius, intensity, density)

    Returns:
        list[SamplePoint]: Values in [0, 1], values below 0.08 set to 0.
    """
    if grid_points <= 0:
        raise ValueError("grid_points must be > 0")

    rng = np.random.default_rng(seed)
    lng_min, lng_max, lat_min, lat_max = bounds
    grid_size = math.sqrt(grid_points)
    n_side = math.ceil(grid_size)
    lng_step = (lng_max - lng_min) / grid_size
    lat_step = (lat_max - lat_min) / grid_size

    points = []
    for i in range(n_side):
        for j in range(n_side):
            lng = lng_min + i * lng_step + (rng.random() - 0.5) * lng_step * 0.5
            lat = lat_min + j * lat_step + (rng.random() - 0.5) * lat_step * 0.5

            max_value = 0.0
            for c_lng, c_lat, radius, intensity, density in clusters:
                distance = math.hypot(lng - c_lng, lat - c_lat)
                if distance >= radius:
                    continue
                cluster_falloff = math.cos(distance / radius * math.pi / 2.0)
                value = intensity * cluster_falloff * (0.7 + rng.random() * 0.6)
                # outside the dense core the rain is much lighter
                if rng.random() > density:
                    value *= rng.random() * 0.3
                max_value = max(max_value, value)

            value = min(max_value, 1.0)
            if value < 0.1 and rng.random() < 0.2:
                value = rng.random() * 0.25
            if value < 0.08:
                value = 0.0

            points.append(SamplePoint(round(lng, 4), round(lat, 4), round(value, 3)))

    return points
