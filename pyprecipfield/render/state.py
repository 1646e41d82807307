"""
Render configuration and immutable per-frame snapshots.

Author: B.G.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace

import numpy as np

from ..colormap import DEFAULT_GRADIENT, Gradient
from ..errors import ConfigurationError
from ..influence.points import as_point_array


@dataclass(frozen=True)
class RenderConfig:
    """
    Radial blob model parameters.

    Attributes:
        influence_radius: Radius of influence of each point in km (> 0)
        falloff_steepness: Exponent on the normalised distance, higher means
            sharper blob edges (>= 1)
        resolution: Informational raster size, the kernel never reads it
        min_value: Lower bound of raw input values (ingestion normalisation)
        max_value: Upper bound of raw input values (ingestion normalisation)
    """

    influence_radius: float = 25.0
    falloff_steepness: float = 1.8
    resolution: int = 512
    min_value: float = 0.0
    max_value: float = 1.0

    def __post_init__(self):
        try:
            for name in ("influence_radius", "falloff_steepness", "min_value", "max_value"):
                object.__setattr__(self, name, float(getattr(self, name)))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid render config value: {e}") from e
        if not (math.isfinite(self.influence_radius) and self.influence_radius > 0):
            raise ConfigurationError(f"influence_radius must be > 0, got {self.influence_radius}")
        if not (math.isfinite(self.falloff_steepness) and self.falloff_steepness >= 1):
            raise ConfigurationError(f"falloff_steepness must be >= 1, got {self.falloff_steepness}")
        if not isinstance(self.resolution, (int, np.integer)) or self.resolution <= 0:
            raise ConfigurationError(f"resolution must be a positive integer, got {self.resolution}")
        if not self.max_value > self.min_value:
            raise ConfigurationError("max_value must be greater than min_value")

    def merged(self, **changes) -> "RenderConfig":
        """Shallow partial merge: unspecified fields keep their value."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ConfigurationError(f"unknown config field(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)


DEFAULT_CONFIG = RenderConfig()


def _frozen_points(points) -> np.ndarray:
    # always a private copy, read-only views of caller buffers included
    arr = np.array(as_point_array(points), dtype=np.float64, copy=True)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True)
class FrameState:
    """Everything a frame reads: points (read-only (N, 3) array), config and gradient."""

    points: np.ndarray = field(default_factory=lambda: _frozen_points([]))
    config: RenderConfig = DEFAULT_CONFIG
    gradient: Gradient = DEFAULT_GRADIENT

    def __post_init__(self):
        object.__setattr__(self, "points", _frozen_points(self.points))

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    def with_points(self, points) -> "FrameState":
        return replace(self, points=points)

    def with_config(self, **changes) -> "FrameState":
        return replace(self, config=self.config.merged(**changes))

    def with_gradient(self, gradient: Gradient) -> "FrameState":
        if not isinstance(gradient, Gradient):
            gradient = Gradient(gradient)
        return replace(self, gradient=gradient)
