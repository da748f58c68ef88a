"""Element animator: element definition + scene time -> resolved visual state.

Every value here is a pure function of the element, the scene duration and the
clock position, so seeking or jumping scenes never depends on animation history.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Optional

from .easing import clamp, ease, ease_out_back, ease_out_quad, keyframes, lerp
from .types import AnimationType, ElementType, IdleOffset, OverlayState, VisualElement, VisualState


ENTRY_DURATION = 0.8
ENTRY_STAGGER = 0.15
APPEAR_DURATION = 0.5
HOLD_FRACTION = 0.2
LABEL_DELAY = 0.5
LABEL_FADE = 0.3
SUBTITLE_ENTRY = 0.4
BADGE_ENTRY = 0.3


class EntryPose(NamedTuple):
    dx: float
    dy: float
    opacity: float
    scale: float


ENTRY_POSES = {
    AnimationType.SLIDE_IN: EntryPose(dx=-20.0, dy=0.0, opacity=0.0, scale=0.8),
    AnimationType.SCALE_UP: EntryPose(dx=0.0, dy=0.0, opacity=0.0, scale=0.0),
    AnimationType.FADE_IN: EntryPose(dx=0.0, dy=0.0, opacity=0.0, scale=1.0),
    AnimationType.NONE: EntryPose(dx=0.0, dy=0.0, opacity=1.0, scale=1.0),
}
# Unset enterAnimation rises slightly into place.
DEFAULT_ENTRY_POSE = EntryPose(dx=0.0, dy=10.0, opacity=0.0, scale=0.8)


class IdleLoop(NamedTuple):
    channel: str  # "dy" or "scale"
    values: tuple
    period: float
    easing: str


IDLE_LOOPS = {
    ElementType.CHARACTER: IdleLoop("dy", (-3.0, 3.0, -3.0), 3.0, "easeInOut"),
    ElementType.MAP_MARKER: IdleLoop("dy", (0.0, -10.0, 0.0), 1.5, "circOut"),
    ElementType.ARROW: IdleLoop("scale", (1.0, 1.1, 1.0), 1.0, "easeInOut"),
}


def entry_pose(element: VisualElement) -> EntryPose:
    if element.enter_animation is None:
        return DEFAULT_ENTRY_POSE
    return ENTRY_POSES[element.enter_animation]


def elapsed_seconds(scene_duration: float, progress: float) -> float:
    return clamp(progress, 0.0, 100.0) / 100.0 * max(0.0, scene_duration)


def idle_offset(element: VisualElement, t: float) -> IdleOffset:
    """Looping ambient motion at wall-clock time t; moving elements stay still."""
    loop = IDLE_LOOPS.get(element.type)
    if loop is None or element.is_moving:
        return IdleOffset()
    phase = math.fmod(max(0.0, t), loop.period) / loop.period
    value = keyframes(loop.values, phase, loop.easing)
    if loop.channel == "scale":
        return IdleOffset(scale=value)
    return IdleOffset(dy=value)


def subtitle_overlay(elapsed: float) -> OverlayState:
    """Narrative caption rises 20px into place as each scene starts."""
    t = ease_out_quad(elapsed / SUBTITLE_ENTRY)
    return OverlayState(opacity=t, dy=lerp(20.0, 0.0, t), scale=lerp(0.95, 1.0, t))


def badge_overlay(elapsed: float) -> OverlayState:
    t = ease_out_quad(elapsed / BADGE_ENTRY)
    return OverlayState(opacity=t, dx=lerp(20.0, 0.0, t))


def _label_opacity(element: VisualElement, elapsed: float) -> float:
    if not element.has_label:
        return 0.0
    return clamp((elapsed - LABEL_DELAY) / LABEL_FADE, 0.0, 1.0)


def _resolve_static(element: VisualElement, elapsed: float, index: int):
    pose = entry_pose(element)
    delay = index * ENTRY_STAGGER
    t = ease_out_back((elapsed - delay) / ENTRY_DURATION)
    x = lerp(element.x + pose.dx, element.x, t)
    y = lerp(element.y + pose.dy, element.y, t)
    opacity = clamp(lerp(pose.opacity, 1.0, t), 0.0, 1.0)
    scale = max(0.0, lerp(pose.scale, 1.0, t))
    return x, y, opacity, scale


def _resolve_moving(element: VisualElement, scene_duration: float, elapsed: float):
    pose = entry_pose(element)
    appear = elapsed / APPEAR_DURATION
    opacity = clamp(lerp(pose.opacity, 1.0, ease_out_quad(appear)), 0.0, 1.0)
    scale = max(0.0, lerp(pose.scale, 1.0, ease_out_back(appear)))

    target_x = element.target_x if element.target_x is not None else element.x
    target_y = element.target_y if element.target_y is not None else element.y
    if scene_duration <= 0:
        return target_x, target_y, opacity, scale
    hold = HOLD_FRACTION * scene_duration
    if elapsed <= hold:
        return element.x, element.y, opacity, scale
    travel = ease("easeInOut", (elapsed - hold) / (scene_duration - hold))
    return lerp(element.x, target_x, travel), lerp(element.y, target_y, travel), opacity, scale


def resolve(
    element: VisualElement,
    scene_duration: float,
    progress: float,
    index: int,
    idle_time: Optional[float] = None,
) -> VisualState:
    """Resolve one element at ``progress`` percent of its scene.

    ``index`` is the element's position in the scene and drives entry stagger.
    ``idle_time`` is the wall clock used for ambient loops; it falls back to
    scene-elapsed seconds when the caller has no clock of its own.
    """
    elapsed = elapsed_seconds(scene_duration, progress)
    if element.is_moving:
        x, y, opacity, scale = _resolve_moving(element, scene_duration, elapsed)
    else:
        x, y, opacity, scale = _resolve_static(element, elapsed, index)
    return VisualState(
        id=element.id,
        type=element.type,
        label=element.label,
        color=element.color,
        icon=element.icon,
        x=x,
        y=y,
        opacity=opacity,
        scale=scale,
        idle_offset=idle_offset(element, elapsed if idle_time is None else idle_time),
        size=element.rendered_size,
        z_index=int(math.floor(element.y)),
        label_opacity=_label_opacity(element, elapsed),
    )
