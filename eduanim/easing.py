from __future__ import annotations

import math
from typing import Callable, Dict


BACK_OVERSHOOT = 1.70158


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def linear(t: float) -> float:
    return clamp(t, 0.0, 1.0)


def ease_out_quad(t: float) -> float:
    t = clamp(t, 0.0, 1.0)
    return t * (2 - t)


def ease_in_out_quad(t: float) -> float:
    t = clamp(t, 0.0, 1.0)
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


def ease_out_circ(t: float) -> float:
    t = clamp(t, 0.0, 1.0)
    return math.sqrt(1 - (t - 1) ** 2)


def ease_out_back(t: float) -> float:
    """Overshoots past 1 before settling; callers clamp channels like opacity."""
    if t <= 0.0:
        return 0.0
    if t >= 1.0:
        return 1.0
    c3 = BACK_OVERSHOOT + 1
    u = t - 1
    return 1 + c3 * u * u * u + BACK_OVERSHOOT * u * u


EASING_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "linear": linear,
    "easeInOut": ease_in_out_quad,
    "circOut": ease_out_circ,
}


def ease(name: str, t: float) -> float:
    return EASING_FUNCTIONS.get(name, linear)(t)


def keyframes(values, t: float, easing: str = "linear") -> float:
    """Sample evenly spaced keyframe values at t in [0,1], easing each segment."""
    if len(values) == 1:
        return values[0]
    t = clamp(t, 0.0, 1.0)
    segments = len(values) - 1
    index = min(int(t * segments), segments - 1)
    local = t * segments - index
    return lerp(values[index], values[index + 1], ease(easing, local))
