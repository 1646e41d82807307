"""
Discrete colour gradient for precipitation intensity.

A gradient is an ordered list of stops ``(threshold, (r, g, b))``. Lookup is
a step function: an intensity takes the colour of the last stop whose
threshold is <= the (clamped) intensity, so the reference five-stop table
yields five flat 20% bands instead of a smooth ramp.

Author: B.G.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np
import taichi as ti
from matplotlib import colors as mcolors

from .. import constants as cte
from ..errors import ConfigurationError


@dataclass(frozen=True)
class GradientStop:
    threshold: float
    color: Tuple[int, int, int]

    def __post_init__(self):
        threshold = float(self.threshold)
        if not 0.0 <= threshold <= 1.0:
            raise ConfigurationError(f"gradient threshold must be in [0, 1], got {threshold}")
        color = tuple(int(c) for c in self.color)
        if len(color) != 3 or any(c < 0 or c > 255 for c in color):
            raise ConfigurationError(f"gradient color must be an RGB triple in [0, 255], got {self.color!r}")
        object.__setattr__(self, "threshold", threshold)
        object.__setattr__(self, "color", color)


def _parse_color(text: str) -> Tuple[int, int, int]:
    """Accept ``r/g/b`` integers or any matplotlib colour spec (``#87cefa``, ``navy``)."""
    text = text.strip()
    if "/" in text:
        return tuple(int(c) for c in text.split("/"))
    try:
        rgb = mcolors.to_rgb(text)
    except ValueError as e:
        raise ConfigurationError(f"invalid color '{text}'") from e
    return tuple(int(round(c * 255)) for c in rgb)


class Gradient:
    """Ordered, non-decreasing sequence of :class:`GradientStop`."""

    def __init__(self, stops: Iterable):
        parsed = []
        for stop in stops:
            if not isinstance(stop, GradientStop):
                threshold, color = stop
                stop = GradientStop(threshold, color)
            parsed.append(stop)
        if not parsed:
            raise ConfigurationError("gradient needs at least one stop")
        for prev, nxt in zip(parsed, parsed[1:]):
            if nxt.threshold < prev.threshold:
                raise ConfigurationError("gradient thresholds must be non-decreasing")
        self._stops = tuple(parsed)
        self._thresholds = np.array([s.threshold for s in parsed], dtype=np.float64)
        self._colors = np.array([s.color for s in parsed], dtype=np.float64)
        self._thresholds.flags.writeable = False
        self._colors.flags.writeable = False

    @classmethod
    def from_spec(cls, spec: str) -> "Gradient":
        """
        Build a gradient from ``"threshold:color,threshold:color,..."``.

        Example:
            Gradient.from_spec("0.0:#87cefa,0.5:70/130/180,0.8:navy")
        """
        stops = []
        for item in spec.split(","):
            if not item.strip():
                continue
            try:
                threshold, color = item.split(":", 1)
                stops.append(GradientStop(float(threshold), _parse_color(color)))
            except ValueError as e:
                if isinstance(e, ConfigurationError):
                    raise
                raise ConfigurationError(f"invalid gradient stop '{item}'") from e
        return cls(stops)

    # ------------------------------------------------------------------
    @property
    def stops(self) -> Tuple[GradientStop, ...]:
        return self._stops

    @property
    def thresholds(self) -> np.ndarray:
        return self._thresholds

    @property
    def colors(self) -> np.ndarray:
        """(K, 3) float64 array of colours in [0, 255]."""
        return self._colors

    def __len__(self) -> int:
        return len(self._stops)

    def __iter__(self):
        return iter(self._stops)

    def __eq__(self, other) -> bool:
        return isinstance(other, Gradient) and self._stops == other._stops

    def __hash__(self):
        return hash(self._stops)

    def __repr__(self) -> str:
        return f"Gradient({list(self._stops)!r})"

    # ------------------------------------------------------------------
    def color_for(self, value: float) -> Tuple[int, int, int]:
        """Colour band of a single intensity, clamped to [0, 1] first."""
        value = min(max(float(value), 0.0), 1.0)
        color = self._stops[0].color
        for stop in self._stops:
            if stop.threshold <= value:
                color = stop.color
        return color

    def band_index(self, values) -> np.ndarray:
        """Index of the selected stop for every intensity in ``values``."""
        v = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
        idx = np.searchsorted(self._thresholds, v, side="right") - 1
        return np.maximum(idx, 0)

    def lookup(self, values) -> np.ndarray:
        """Vectorised :meth:`color_for`; returns (..., 3) float64 colours in [0, 255]."""
        return self._colors[self.band_index(values)]


# 5 distinct shades of blue, 20% wide bands
DEFAULT_GRADIENT = Gradient([
    GradientStop(0.0, (135, 206, 250)),  # light blue
    GradientStop(0.2, (100, 180, 230)),  # light-medium blue
    GradientStop(0.4, (70, 130, 180)),   # medium blue
    GradientStop(0.6, (30, 100, 200)),   # blue
    GradientStop(0.8, (0, 60, 150)),     # dark blue
])


vec3 = ti.types.vector(3, cte.FLOAT_TYPE_TI)


@ti.func
def color_for_ti(
    value: cte.FLOAT_TYPE_TI,
    thresholds: ti.template(),
    colors: ti.template(),
    n_stops: ti.i32,
) -> vec3:
    v = ti.min(ti.max(value, 0.0), 1.0)
    color = colors[0]
    for k in range(n_stops):
        if thresholds[k] <= v:
            color = colors[k]
    return color
