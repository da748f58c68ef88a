import pytest

from eduanim.backgrounds import BACKDROPS, paint_backdrop, resolve_backdrop
from eduanim.camera import IDENTITY, resolve_camera
from eduanim.types import BackgroundStyle, CameraConfig


def test_missing_camera_is_identity_throughout():
    track = resolve_camera(None, 6)
    for elapsed in (0, 2.5, 6, 9):
        assert track.at(elapsed) == IDENTITY


def test_camera_moves_linearly_to_target():
    track = resolve_camera(CameraConfig(zoom=2.0, x=-10, y=20), 4)
    assert track.at(0) == IDENTITY
    mid = track.at(2)
    assert (mid.zoom, mid.x, mid.y) == pytest.approx((1.5, -5, 10))
    end = track.at(4)
    assert (end.zoom, end.x, end.y) == (2.0, -10, 20)
    assert track.at(40) == end


def test_camera_with_zero_duration_jumps_to_target():
    track = resolve_camera(CameraConfig(zoom=1.5, x=5, y=5), 0)
    assert track.at(0).zoom == 1.5


def test_zoom_below_neutral_is_floored():
    assert CameraConfig(zoom=0.2).zoom == 1.0


@pytest.mark.parametrize("style", list(BackgroundStyle))
def test_every_style_has_a_backdrop(style):
    backdrop = resolve_backdrop(style)
    assert backdrop.style == style
    assert backdrop.base_color.startswith("#")


def test_backdrop_tokens():
    assert resolve_backdrop("grid").pattern == "grid"
    assert resolve_backdrop("map").routes
    assert resolve_backdrop("space").pattern == "starfield"
    assert resolve_backdrop("paper").gradient_to is None
    assert resolve_backdrop("default").gradient_to is not None
    assert resolve_backdrop("volcano") == BACKDROPS[BackgroundStyle.DEFAULT]


@pytest.mark.parametrize("style", list(BackgroundStyle))
def test_painters_produce_stage_sized_images(style):
    img = paint_backdrop(resolve_backdrop(style), 64, 36)
    assert img.size == (64, 36)
    assert img.mode == "RGB"


def test_paper_is_flat_and_gradient_is_not():
    paper = paint_backdrop(resolve_backdrop("paper"), 16, 16)
    assert paper.getpixel((0, 0)) == paper.getpixel((15, 15)) == (0xFD, 0xFB, 0xF7)
    default = paint_backdrop(resolve_backdrop("default"), 16, 16)
    assert default.getpixel((0, 0)) != default.getpixel((15, 15))
