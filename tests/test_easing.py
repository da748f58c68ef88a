import pytest

from eduanim.animator import IDLE_LOOPS
from eduanim.easing import EASING_FUNCTIONS, ease, ease_out_back, keyframes


def test_idle_loop_curves_are_registered():
    assert {loop.easing for loop in IDLE_LOOPS.values()} <= set(EASING_FUNCTIONS)


def test_unknown_curve_is_linear():
    assert ease("bounce", 0.25) == 0.25


def test_back_out_overshoots_then_settles():
    assert ease_out_back(0) == 0
    assert ease_out_back(0.6) > 1
    assert ease_out_back(1) == 1


def test_keyframes_hit_every_value():
    values = (0.0, -10.0, 0.0)
    assert keyframes(values, 0.0, "circOut") == 0
    assert keyframes(values, 0.5, "circOut") == pytest.approx(-10)
    assert keyframes(values, 1.0, "circOut") == pytest.approx(0)
