"""Unit tests for the precipitation layer state handling and backend lifecycle."""

import numpy as np
import pytest

from pyprecipfield import constants as cte
from pyprecipfield.colormap import DEFAULT_GRADIENT, Gradient
from pyprecipfield.errors import ConfigurationError, InitializationError
from pyprecipfield.influence import SamplePoint
from pyprecipfield.projection import CameraState
from pyprecipfield.render import BACKENDS, FrameState, PrecipitationLayer, RenderBackend, RenderConfig


def _points(n, value=0.5):
    return [(7.5 + 0.02 * i, 59.0 + 0.01 * i, value) for i in range(n)]


def _stops(n):
    return [(i / n, (i, i, i)) for i in range(n)]


class BrokenBackend(RenderBackend):
    name = "broken"
    released = 0

    def setup(self):
        raise RuntimeError("no device")

    def release(self):
        BrokenBackend.released += 1


class TestPoints:

    @pytest.mark.unit
    def test_initial_points(self):
        layer = PrecipitationLayer("precip", [SamplePoint(10.0, 60.0, 0.4)])
        assert layer.points == [SamplePoint(10.0, 60.0, 0.4)]
        assert layer.points_array.shape == (1, 3)

    @pytest.mark.unit
    def test_max_points_accepted(self):
        layer = PrecipitationLayer("precip")
        layer.update_points(_points(cte.MAX_POINTS))
        assert layer.snapshot().n_points == 250

    @pytest.mark.unit
    def test_too_many_points_keeps_previous_set(self):
        layer = PrecipitationLayer("precip", _points(10))
        before = layer.snapshot()
        with pytest.raises(ConfigurationError, match="Maximum 250 data points supported"):
            layer.update_points(_points(251))
        assert layer.snapshot() is before
        assert len(layer.points) == 10

    @pytest.mark.unit
    def test_too_many_points_at_construction(self):
        with pytest.raises(ConfigurationError):
            PrecipitationLayer("precip", _points(300))

    @pytest.mark.unit
    def test_full_replacement(self):
        layer = PrecipitationLayer("precip", _points(10))
        layer.update_points([(1.0, 2.0, 0.3)])
        assert layer.points == [SamplePoint(1.0, 2.0, 0.3)]
        layer.update_points([])
        assert layer.snapshot().n_points == 0

    @pytest.mark.unit
    def test_snapshot_is_immutable(self):
        source = np.array(_points(3))
        layer = PrecipitationLayer("precip", source)
        snap = layer.snapshot()
        source[0, 2] = 99.0
        assert snap.points[0, 2] == 0.5
        with pytest.raises(ValueError):
            snap.points[0, 2] = 1.0
        layer.update_points(_points(5))
        assert snap.n_points == 3

    @pytest.mark.unit
    def test_read_only_array_is_still_validated(self):
        arr = np.zeros((300, 3))
        arr.flags.writeable = False
        with pytest.raises(ConfigurationError, match="Maximum 250 data points supported"):
            PrecipitationLayer("precip", arr)

        layer = PrecipitationLayer("precip", _points(4))
        with pytest.raises(ConfigurationError):
            layer.update_points(arr)
        assert layer.snapshot().n_points == 4

    @pytest.mark.unit
    def test_read_only_array_with_wrong_shape(self):
        arr = np.zeros((4, 2))
        arr.flags.writeable = False
        with pytest.raises(ConfigurationError):
            FrameState(points=arr)

    @pytest.mark.unit
    def test_read_only_view_does_not_alias_caller_buffer(self):
        base = np.array(_points(3))
        view = base.view()
        view.flags.writeable = False
        layer = PrecipitationLayer("precip", view)
        snap = layer.snapshot()
        base[0, 2] = 0.0
        assert snap.points[0, 2] == 0.5
        assert not np.shares_memory(snap.points, base)

    @pytest.mark.unit
    def test_points_shared_between_layers_are_copied(self):
        first = PrecipitationLayer("a", _points(3))
        second = PrecipitationLayer("b", first.points_array)
        assert second.points_array is not first.points_array
        np.testing.assert_array_equal(second.points_array, first.points_array)


class TestConfig:

    @pytest.mark.unit
    def test_defaults(self):
        config = PrecipitationLayer("precip").config
        assert config.influence_radius == 25.0
        assert config.falloff_steepness == 1.8
        assert config.resolution == 512
        assert (config.min_value, config.max_value) == (0.0, 1.0)

    @pytest.mark.unit
    def test_mapping_at_construction(self):
        layer = PrecipitationLayer("precip", config={"influence_radius": 40})
        assert layer.config.influence_radius == 40.0
        assert layer.config.falloff_steepness == 1.8

    @pytest.mark.unit
    def test_partial_merge(self):
        layer = PrecipitationLayer("precip")
        layer.update_config(influence_radius=30.0)
        layer.update_config({"falloff_steepness": 2.5})
        assert layer.config == RenderConfig(influence_radius=30.0, falloff_steepness=2.5)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "changes",
        [
            {"influence_radius": 0.0},
            {"influence_radius": -5.0},
            {"falloff_steepness": 0.5},
            {"resolution": 0},
            {"min_value": 2.0},
            {"influence_radius": "wide"},
            {"opacity": 0.5},
        ],
    )
    def test_invalid_update_keeps_previous_config(self, changes):
        layer = PrecipitationLayer("precip", config={"influence_radius": 30.0})
        with pytest.raises(ConfigurationError):
            layer.update_config(**changes)
        assert layer.config.influence_radius == 30.0

    @pytest.mark.unit
    def test_gradient_update(self):
        layer = PrecipitationLayer("precip")
        assert layer.gradient is DEFAULT_GRADIENT
        layer.update_gradient([(0.0, (0, 0, 0)), (0.5, (255, 255, 255))])
        assert isinstance(layer.gradient, Gradient)
        assert len(layer.gradient) == 2

    @pytest.mark.unit
    @pytest.mark.parametrize("backend", ["taichi", "gl"])
    def test_gradient_over_backend_capacity(self, backend):
        calls = []
        layer = PrecipitationLayer("precip", backend=backend, on_repaint=calls.append)
        with pytest.raises(ConfigurationError, match="gradient stops"):
            layer.update_gradient(_stops(cte.MAX_GRADIENT_STOPS + 1))
        assert layer.gradient is DEFAULT_GRADIENT
        assert calls == []
        assert not layer.is_active

        layer.update_gradient(_stops(cte.MAX_GRADIENT_STOPS))
        assert len(layer.gradient) == cte.MAX_GRADIENT_STOPS

    @pytest.mark.unit
    def test_gradient_over_capacity_at_construction(self):
        with pytest.raises(ConfigurationError):
            PrecipitationLayer("precip", gradient=Gradient(_stops(17)), backend="taichi")

    @pytest.mark.unit
    def test_numpy_backend_has_no_stop_limit(self):
        layer = PrecipitationLayer("precip", gradient=Gradient(_stops(40)))
        assert len(layer.gradient) == 40


class TestRepaint:

    @pytest.mark.unit
    def test_every_committed_update_requests_repaint(self):
        calls = []
        layer = PrecipitationLayer("precip", on_repaint=calls.append)
        layer.update_points(_points(3))
        layer.update_config(influence_radius=10.0)
        layer.update_gradient(DEFAULT_GRADIENT)
        assert calls == [layer, layer, layer]

    @pytest.mark.unit
    def test_failed_update_does_not_repaint(self):
        calls = []
        layer = PrecipitationLayer("precip", on_repaint=calls.append)
        with pytest.raises(ConfigurationError):
            layer.update_points(_points(251))
        with pytest.raises(ConfigurationError):
            layer.update_config(falloff_steepness=0.0)
        assert calls == []


class TestLifecycle:

    @pytest.mark.unit
    def test_numpy_render_activates(self):
        layer = PrecipitationLayer("precip", [(10.0, 60.0, 0.9)])
        assert not layer.is_active
        rgba = layer.render(CameraState((10.0, 60.0), 8.0, (40, 30)))
        assert layer.is_active
        assert rgba.shape == (30, 40, 4)
        assert rgba[15, 20, 3] == pytest.approx(cte.FIXED_ALPHA)
        layer.release()
        assert not layer.is_active

    @pytest.mark.unit
    def test_explicit_raster_size(self):
        layer = PrecipitationLayer("precip")
        rgba = layer.render(CameraState((0.0, 0.0), 2.0, (800, 600)), width=16, height=8)
        assert rgba.shape == (8, 16, 4)
        assert not rgba.any()

    @pytest.mark.unit
    def test_unknown_backend(self):
        layer = PrecipitationLayer("precip", backend="vulkan")
        with pytest.raises(InitializationError, match="unknown backend"):
            layer.activate()
        assert not layer.is_active

    @pytest.mark.unit
    def test_setup_failure_is_initialization_error(self, monkeypatch):
        monkeypatch.setitem(BACKENDS, "broken", BrokenBackend)
        BrokenBackend.released = 0
        layer = PrecipitationLayer("precip", _points(2), backend="broken")
        with pytest.raises(InitializationError, match="no device"):
            layer.render(CameraState((10.0, 60.0), 8.0, (10, 10)))
        assert not layer.is_active
        assert BrokenBackend.released == 1
        # state stays usable
        layer.update_config(influence_radius=12.0)
        assert layer.config.influence_radius == 12.0
