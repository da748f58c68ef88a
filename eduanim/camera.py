from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .easing import lerp, linear
from .types import CameraConfig, CameraTransform


IDENTITY = CameraTransform(zoom=1.0, x=0.0, y=0.0)


@dataclass(frozen=True)
class CameraTrack:
    """Linear move from the identity transform to ``target`` over ``duration``."""

    target: CameraTransform
    duration: float

    def at(self, elapsed: float) -> CameraTransform:
        if self.duration <= 0:
            return self.target
        t = linear(elapsed / self.duration)
        return CameraTransform(
            zoom=lerp(IDENTITY.zoom, self.target.zoom, t),
            x=lerp(IDENTITY.x, self.target.x, t),
            y=lerp(IDENTITY.y, self.target.y, t),
        )


def resolve_camera(camera: Optional[CameraConfig], scene_duration: float) -> CameraTrack:
    # Every scene starts from identity; nothing carries over from the previous one.
    if camera is None:
        return CameraTrack(target=IDENTITY, duration=scene_duration)
    target = CameraTransform(zoom=camera.zoom or 1.0, x=camera.x, y=camera.y)
    return CameraTrack(target=target, duration=scene_duration)
