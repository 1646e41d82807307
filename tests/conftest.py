"""
Pytest configuration and fixtures for PyPrecipField test suite.

This file contains shared fixtures, test configuration, and utilities
used across the test suite.
"""
import os
import sys

import numpy as np
import pytest


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add the package root to Python path for testing
    package_root = os.path.dirname(os.path.dirname(__file__))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)

    for marker, doc in (
        ("unit", "fast unit tests"),
        ("gpu", "tests needing taichi or OpenGL"),
        ("slow", "tests that take time"),
        ("importtest", "import tests"),
        ("integration", "end to end workflows"),
    ):
        config.addinivalue_line("markers", f"{marker}: {doc}")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers and ordering."""
    for item in items:
        # Mark GPU tests
        if "gpu" in item.keywords or "taichi" in item.name.lower():
            item.add_marker("slow")

        # Mark import tests for easy selection
        if "import" in item.name.lower() or "test_imports.py" in str(item.fspath):
            item.add_marker("importtest")


@pytest.fixture(scope="session")
def norway_points():
    """Reproducible clustered demo points plus one strong sample under the camera centre."""
    from pyprecipfield.influence import SamplePoint
    from pyprecipfield.synthetic import clustered_points

    return clustered_points(200, seed=7) + [SamplePoint(10.25, 59.75, 0.9)]


@pytest.fixture
def norway_camera():
    """Camera framing the demo points, small viewport for quick renders."""
    from pyprecipfield.projection import CameraState

    return CameraState(center=(10.25, 59.75), zoom=6.5, viewport_size=(96, 64))


@pytest.fixture
def skip_if_no_taichi():
    """Skip test if Taichi is not available or fails to initialize."""
    try:
        import taichi as ti
        ti.init(arch=ti.cpu, offline_cache=False)
        return True
    except Exception:
        pytest.skip("Taichi not available or initialization failed")


@pytest.fixture
def skip_if_no_gl():
    """Skip test if moderngl or a standalone OpenGL 3.3 context is not available."""
    try:
        import moderngl
        ctx = moderngl.create_standalone_context(require=330)
        ctx.release()
        return True
    except Exception:
        pytest.skip("OpenGL 3.3 standalone context not available")


class TestDataManager:
    """Helper class for managing test data."""

    @staticmethod
    def ring_of_points(center=(10.0, 60.0), radius_deg=0.2, n=8, value=0.7):
        """Points evenly spaced on a small circle around ``center``."""
        angles = np.linspace(0.0, 2.0 * np.pi, n, endpoint=False)
        lng = center[0] + radius_deg * np.cos(angles)
        lat = center[1] + radius_deg * np.sin(angles)
        return np.column_stack([lng, lat, np.full(n, value)])

    @staticmethod
    def random_points(n=50, seed=3):
        """Uniform random points over southern Norway."""
        rng = np.random.default_rng(seed)
        lng = rng.uniform(7.5, 13.0, n)
        lat = rng.uniform(58.5, 61.0, n)
        value = rng.uniform(0.0, 1.0, n)
        value[value < 0.2] = 0.0
        return np.column_stack([lng, lat, value])


@pytest.fixture
def test_data_manager():
    """Provide access to test data creation utilities."""
    return TestDataManager()
