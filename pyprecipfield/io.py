"""
Point set I/O and image export for PyPrecipField.

Point sets are stored either as ``.npy`` arrays of shape (N, 3) holding
[lng, lat, value] rows, or as ``.json`` lists of ``{"lng", "lat", "value"}``
objects (optionally wrapped in ``{"points": [...]}``).

Author: B.G.
"""

import json
import os

import numpy as np
from PIL import Image

from .errors import ConfigurationError
from .influence.points import as_point_array, to_sample_points
from .render.evaluator import to_uint8


def load_points(path):
    """
    Load a point set.

    Args:
        path: ``.npy`` or ``.json`` file

    Returns:
        list[SamplePoint]

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: Unsupported extension, malformed content or more
            than ``MAX_POINTS`` points
    """
    ext = os.path.splitext(str(path))[1].lower()
    if ext == ".npy":
        arr = np.load(path)
    elif ext == ".json":
        with open(path, encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"'{path}' is not valid JSON: {e}") from e
        if isinstance(data, dict):
            data = data.get("points", [])
        arr = as_point_array(data)
    else:
        raise ConfigurationError(f"unsupported point file '{path}', expected .npy or .json")
    return to_sample_points(arr)


def save_points(points, path):
    """Save a point set as ``.npy`` or ``.json`` depending on the extension."""
    arr = as_point_array(points)
    ext = os.path.splitext(str(path))[1].lower()
    if ext == ".npy":
        np.save(path, arr)
    elif ext == ".json":
        rows = [{"lng": float(r[0]), "lat": float(r[1]), "value": float(r[2])} for r in arr]
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(rows, fh, indent=1)
    else:
        raise ConfigurationError(f"unsupported point file '{path}', expected .npy or .json")


def normalize_values(values, min_value: float, max_value: float) -> np.ndarray:
    """Map raw values from [min_value, max_value] onto [0, 1], clipped."""
    if not max_value > min_value:
        raise ConfigurationError("max_value must be greater than min_value")
    v = np.asarray(values, dtype=np.float64)
    return np.clip((v - min_value) / (max_value - min_value), 0.0, 1.0)


def normalize_points(points, config) -> np.ndarray:
    """Copy of ``points`` with the value column normalised by the config bounds."""
    arr = as_point_array(points).copy()
    arr[:, 2] = normalize_values(arr[:, 2], config.min_value, config.max_value)
    return arr


def save_png(rgba, path) -> None:
    """Write a float RGBA frame in [0, 1] as an 8-bit RGBA PNG."""
    Image.fromarray(to_uint8(rgba)).save(path)
