"""Tests for the taichi frame evaluator."""

import numpy as np
import pytest

from pyprecipfield import constants as cte
from pyprecipfield.colormap import Gradient
from pyprecipfield.errors import ConfigurationError
from pyprecipfield.projection import CameraState
from pyprecipfield.render import FrameState, RenderConfig, render_frame


def _agreement(a, b):
    return np.isclose(a, b, atol=1e-5).all(axis=-1).mean()


@pytest.mark.gpu
def test_taichi_matches_numpy(skip_if_no_taichi, norway_points, norway_camera):
    from pyprecipfield.render import render_frame_taichi

    state = FrameState(points=norway_points)
    expected = render_frame(state, norway_camera)
    result = render_frame_taichi(state, norway_camera)

    assert result.shape == expected.shape == (64, 96, 4)
    assert result.dtype == np.float32
    # float32 kernel, only pixels sitting on a band edge may differ
    assert _agreement(result, expected) > 0.98
    assert (result[..., 3] > 0).any()


@pytest.mark.gpu
def test_taichi_alpha_is_binary(skip_if_no_taichi, norway_points, norway_camera):
    from pyprecipfield.render import render_frame_taichi

    state = FrameState(points=norway_points, config=RenderConfig(influence_radius=40.0, falloff_steepness=3.0))
    alphas = set(np.unique(render_frame_taichi(state, norway_camera)[..., 3]).tolist())
    assert alphas <= {0.0, float(np.float32(cte.FIXED_ALPHA))}


@pytest.mark.gpu
def test_taichi_world_wrap(skip_if_no_taichi):
    from pyprecipfield.render import render_frame_taichi

    cam = CameraState((0.0, 0.0), 0.0, (2048, 512))
    points = [(lng, 0.0, 1.0) for lng in (-179.9, -90.0, 0.0, 90.0, 179.9)]
    state = FrameState(points=points, config=RenderConfig(influence_radius=3000.0))
    rgba = render_frame_taichi(state, cam, 256, 64)
    assert not rgba[:, :90, 3].any()
    assert not rgba[:, 166:, 3].any()
    assert rgba[:, 96:160, 3].any()


@pytest.mark.gpu
def test_renderer_reuse_and_release(skip_if_no_taichi, norway_points, norway_camera):
    from pyprecipfield.render import TaichiFrameRenderer

    renderer = TaichiFrameRenderer()
    state = FrameState(points=norway_points)
    assert renderer.render(state, norway_camera, 32, 16).shape == (16, 32, 4)
    assert renderer.render(state, norway_camera, 48, 24).shape == (24, 48, 4)

    # new point set, same buffers
    empty = renderer.render(state.with_points([]), norway_camera, 48, 24)
    assert not empty.any()

    renderer.release()
    assert renderer._rgba is None


@pytest.mark.gpu
def test_too_many_gradient_stops(skip_if_no_taichi, norway_camera):
    from pyprecipfield.render import TaichiFrameRenderer

    stops = [(i / 17.0, (i, i, i)) for i in range(17)]
    state = FrameState(points=[(10.25, 59.75, 0.5)], gradient=Gradient(stops))
    renderer = TaichiFrameRenderer()
    try:
        with pytest.raises(ConfigurationError):
            renderer.render(state, norway_camera, 8, 8)
    finally:
        renderer.release()


@pytest.mark.gpu
def test_taichi_layer_backend(skip_if_no_taichi, norway_points, norway_camera):
    from pyprecipfield.render import PrecipitationLayer

    layer = PrecipitationLayer("precip", norway_points, backend="taichi")
    try:
        rgba = layer.render(norway_camera)
        assert layer.is_active
        assert rgba.shape == (64, 96, 4)
    finally:
        layer.release()
    assert not layer.is_active
