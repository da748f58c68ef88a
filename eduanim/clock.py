from __future__ import annotations

from typing import List, Sequence

from .easing import clamp


TICK_RATE = 24
TICK_INTERVAL_MS = 1000.0 / TICK_RATE

# Percent slack so that D seconds of fixed-size ticks land on the boundary
# despite float accumulation.
PROGRESS_EPSILON = 1e-6


class TimelineClock:
    """Scene index and progress (0-100) within the scene.

    Progress only moves on ``tick`` while playing. A tick advances at most one
    scene; a rolled-over scene starts again at 0 and the end of the last scene
    stops playback with progress clamped to 100.
    """

    def __init__(self, durations: Sequence[float]) -> None:
        if not durations:
            raise ValueError("TimelineClock needs at least one scene duration")
        self.durations: List[float] = [float(d) for d in durations]
        self.scene_index = 0
        self.progress = 0.0
        self.playing = False

    @property
    def scene_count(self) -> int:
        return len(self.durations)

    @property
    def duration(self) -> float:
        return self.durations[self.scene_index]

    @property
    def elapsed(self) -> float:
        """Seconds into the current scene."""
        return self.progress / 100.0 * max(0.0, self.duration)

    @property
    def is_last_scene(self) -> bool:
        return self.scene_index >= self.scene_count - 1

    def tick(self, delta_ms: float) -> None:
        if not self.playing:
            return
        duration = self.duration
        if duration <= 0:
            progress = 100.0
        else:
            progress = self.progress + (delta_ms / 1000.0) / duration * 100.0
        if progress >= 100.0 - PROGRESS_EPSILON:
            if not self.is_last_scene:
                self.scene_index += 1
                self.progress = 0.0
            else:
                self.playing = False
                self.progress = 100.0
            return
        self.progress = progress

    def seek(self, value: float) -> None:
        self.progress = clamp(float(value), 0.0, 100.0)

    def jump_to_scene(self, index: int) -> None:
        self.scene_index = int(clamp(index, 0, self.scene_count - 1))
        self.progress = 0.0

    def restart(self) -> None:
        self.scene_index = 0
        self.progress = 0.0
        self.playing = False

    def play(self) -> None:
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def toggle_play(self) -> None:
        self.playing = not self.playing
