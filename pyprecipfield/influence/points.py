"""Sample point type and conversion to the packed (N, 3) array layout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

import numpy as np

from .. import constants as cte
from ..errors import ConfigurationError


@dataclass(frozen=True)
class SamplePoint:
    """One geolocated precipitation sample. ``value`` is expected in [0, 1]."""

    lng: float
    lat: float
    value: float

    def as_tuple(self):
        return (self.lng, self.lat, self.value)


def _coerce(item) -> tuple:
    if isinstance(item, SamplePoint):
        return item.as_tuple()
    if isinstance(item, Mapping):
        try:
            return (item["lng"], item["lat"], item["value"])
        except KeyError as e:
            raise ConfigurationError(f"sample point is missing key {e}") from e
    values = tuple(item)
    if len(values) != 3:
        raise ConfigurationError(f"sample point must be (lng, lat, value), got {values!r}")
    return values


def as_point_array(points: Iterable | np.ndarray) -> np.ndarray:
    """
    Pack sample points into a float64 array of shape (N, 3): [lng, lat, value].

    Accepts an (N, 3) array or an iterable of ``SamplePoint``, mappings with
    ``lng``/``lat``/``value`` keys, or 3-sequences.

    Raises:
        ConfigurationError: More than ``MAX_POINTS`` points or malformed input.
    """
    if isinstance(points, np.ndarray):
        arr = np.array(points, dtype=np.float64)
        if arr.size == 0:
            arr = arr.reshape(0, 3)
    else:
        rows = [_coerce(p) for p in points]
        try:
            arr = np.array(rows, dtype=np.float64).reshape(len(rows), 3)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"sample point values must be numeric: {e}") from e

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ConfigurationError(f"points array must have shape (N, 3), got {arr.shape}")
    if arr.shape[0] > cte.MAX_POINTS:
        raise ConfigurationError(
            f"Maximum {cte.MAX_POINTS} data points supported, got {arr.shape[0]}"
        )
    return arr


def to_sample_points(arr: np.ndarray) -> list:
    """Unpack an (N, 3) array into a list of ``SamplePoint``."""
    return [SamplePoint(float(r[0]), float(r[1]), float(r[2])) for r in as_point_array(arr)]
