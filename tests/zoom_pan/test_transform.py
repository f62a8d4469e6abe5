# tests/zoom_pan/test_transform.py

from __future__ import annotations

import numpy as np
import pytest

from nicezoom.zoom_pan.transform import (
    GestureConfig,
    ViewportTransform,
    clamp_scale,
    fit_scale,
    is_zoomed,
    round_scale,
    zoom_about,
)


def test_zoom_about_keeps_content_under_focal_point():
    """The content coordinate under F is the same before and after rescaling."""
    rng = np.random.default_rng(0)
    for _ in range(200):
        s, s_new = rng.uniform(0.5, 2.0, size=2)
        tx, ty, fx, fy = rng.uniform(-500.0, 500.0, size=4)
        before = ViewportTransform(scale=float(s), translate_x=float(tx), translate_y=float(ty))

        after = zoom_about(before, float(s_new), float(fx), float(fy))

        assert after.scale == pytest.approx(s_new)
        assert after.content_point(fx, fy) == pytest.approx(before.content_point(fx, fy), rel=1e-9, abs=1e-9)


def test_zoom_about_wheel_example():
    """Zoom 1.0 -> 1.1 at (100, 50) from the origin."""
    t = zoom_about(ViewportTransform(), 1.1, 100.0, 50.0)
    assert t.scale == 1.1
    assert t.translate_x == pytest.approx(-10.0)
    assert t.translate_y == pytest.approx(-5.0)


def test_zoom_about_same_scale_is_identity():
    t = ViewportTransform(scale=1.5, translate_x=12.0, translate_y=-7.0)
    assert zoom_about(t, 1.5, 123.0, 45.0) == t


def test_clamp_scale_bounds():
    assert clamp_scale(0.1, 0.5, 2.0) == 0.5
    assert clamp_scale(3.7, 0.5, 2.0) == 2.0
    assert clamp_scale(1.234, 0.5, 2.0) == 1.23


def test_round_scale_rounds_halves_up():
    assert round_scale(1.005 + 1e-9) == 1.01
    assert round_scale(0.125) == 0.13
    assert round_scale(1.15) == 1.15


def test_repeated_increments_do_not_drift():
    scale = 0.5
    seen = []
    for _ in range(15):
        scale = clamp_scale(scale + 0.1, 0.5, 2.0)
        seen.append(scale)
    assert seen[-1] == 2.0
    for s in seen:
        assert s == round(s, 2)
    assert seen == pytest.approx([round(0.6 + 0.1 * i, 2) for i in range(15)], abs=0)


def test_is_zoomed():
    assert not is_zoomed(1.0)
    assert not is_zoomed(1.0004)
    assert is_zoomed(1.01)
    assert is_zoomed(0.99)


def test_fit_scale():
    assert fit_scale(400, 300, 800, 300) == 0.5
    assert fit_scale(400, 300, 400, 600) == 0.5
    # never upscale
    assert fit_scale(400, 300, 100, 100) == 1.0
    # unknown geometry
    assert fit_scale(0, 300, 100, 100) is None
    assert fit_scale(400, 300, 100, 0) is None


def test_gesture_config_defaults():
    cfg = GestureConfig()
    assert cfg.min_scale == 0.5
    assert cfg.max_scale == 2.0
    assert cfg.scale_step == 0.1
    assert cfg.enable_drag is True
    assert cfg.pinch_sensitivity == 0.005
    assert cfg.on_user_zoom is None


def test_gesture_config_frozen():
    cfg = GestureConfig()
    with pytest.raises(Exception):  # FrozenInstanceError
        cfg.max_scale = 4.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_scale": 0.0},
        {"min_scale": 3.0, "max_scale": 2.0},
        {"scale_step": 0.0},
        {"pinch_sensitivity": -1.0},
    ],
)
def test_gesture_config_rejects_invalid(kwargs):
    with pytest.raises(ValueError):
        GestureConfig(**kwargs)


def test_transform_dict_roundtrip():
    t = ViewportTransform(scale=1.8, translate_x=120.0, translate_y=80.0)
    assert t.to_dict() == {"scale": 1.8, "translate_x": 120.0, "translate_y": 80.0}
    assert ViewportTransform.from_dict(t.to_dict()) == t
