from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from rich.console import Console

from .animator import badge_overlay, elapsed_seconds, resolve, subtitle_overlay
from .backgrounds import resolve_backdrop
from .camera import resolve_camera
from .clock import TICK_RATE, TimelineClock
from .easing import clamp
from .types import AnimationScript, Frame, Scene

console = Console()

FrameCallback = Callable[[Frame], None]


def build_frame(
    script: AnimationScript,
    scene_index: int,
    progress: float,
    idle_time: Optional[float] = None,
) -> Frame:
    """Fully resolved visual state of ``script`` at (scene_index, progress)."""
    scene_index = int(clamp(scene_index, 0, len(script.scenes) - 1))
    progress = clamp(progress, 0.0, 100.0)
    scene = script.scenes[scene_index]
    elapsed = elapsed_seconds(scene.duration, progress)
    camera = resolve_camera(scene.camera, scene.duration).at(elapsed)
    elements = [
        resolve(element, scene.duration, progress, index, idle_time=idle_time)
        for index, element in enumerate(scene.elements)
    ]
    return Frame(
        title=script.title,
        scene_id=scene.id,
        scene_index=scene_index,
        scene_count=len(script.scenes),
        progress=progress,
        elapsed=elapsed,
        narrative=scene.narrative,
        backdrop=resolve_backdrop(scene.background_style),
        camera=camera,
        elements=elements,
        subtitle=subtitle_overlay(elapsed),
        badge=badge_overlay(elapsed),
    )


class Ticker:
    """Single periodic tick source running on a daemon thread.

    ``callback`` returns False to end the loop. The thread marks itself stopped
    on every exit path so a controller can safely start a replacement.
    """

    def __init__(self, interval: float, callback: Callable[[], bool]) -> None:
        self.interval = interval
        self.callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="eduanim-ticker", daemon=True)

    @property
    def alive(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        self._stop.set()
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _run(self) -> None:
        try:
            while not self._stop.wait(self.interval):
                if not self.callback():
                    break
        finally:
            self._stop.set()


class PlaybackController:
    """Drives a TimelineClock over a script and emits resolved frames.

    Clock mutation and transport operations share one lock, so a tick always
    completes before the next operation observes the state.
    """

    def __init__(
        self,
        script: AnimationScript,
        on_frame: Optional[FrameCallback] = None,
        tick_rate: int = TICK_RATE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.script = script
        self.on_frame = on_frame
        self.tick_rate = tick_rate
        self.tick_interval_ms = 1000.0 / tick_rate
        self.timeline = TimelineClock([scene.duration for scene in script.scenes])
        self.tick_error: Optional[Exception] = None
        self._wall = clock
        self._mounted_at = clock()
        self._lock = threading.RLock()
        self._ticker: Optional[Ticker] = None

    # observables

    @property
    def scene_index(self) -> int:
        return self.timeline.scene_index

    @property
    def progress(self) -> float:
        return self.timeline.progress

    @property
    def playing(self) -> bool:
        return self.timeline.playing

    @property
    def current_scene(self) -> Scene:
        return self.script.scenes[self.timeline.scene_index]

    @property
    def idle_time(self) -> float:
        """Wall-clock seconds since mount; pausing does not reset ambient loops."""
        return self._wall() - self._mounted_at

    @property
    def ticking(self) -> bool:
        return self._ticker is not None and self._ticker.alive

    # transport

    def play(self) -> None:
        with self._lock:
            self.timeline.play()
            self.tick_error = None
            if self._ticker is None or not self._ticker.alive:
                self._ticker = Ticker(self.tick_interval_ms / 1000.0, self._on_tick)
                self._ticker.start()

    def pause(self) -> None:
        with self._lock:
            self.timeline.pause()
            ticker = self._detach_ticker()
        self._stop_ticker(ticker)

    def toggle(self) -> None:
        with self._lock:
            if not self.timeline.playing:
                self.play()
                return
            self.timeline.pause()
            ticker = self._detach_ticker()
        self._stop_ticker(ticker)

    def restart(self) -> None:
        with self._lock:
            self.timeline.restart()
            ticker = self._detach_ticker()
        self._stop_ticker(ticker)
        self._emit()

    def seek(self, value: float) -> None:
        with self._lock:
            self.timeline.seek(value)
        self._emit()

    def jump_to_scene(self, index: int) -> None:
        with self._lock:
            self.timeline.jump_to_scene(index)
        self._emit()

    def tick(self, delta_ms: Optional[float] = None) -> Frame:
        """Advance the clock by one tick (default: one tick interval) and emit the frame."""
        with self._lock:
            self.timeline.tick(self.tick_interval_ms if delta_ms is None else delta_ms)
            return self._emit()

    def frame(self) -> Frame:
        with self._lock:
            return build_frame(
                self.script,
                self.timeline.scene_index,
                self.timeline.progress,
                idle_time=self.idle_time,
            )

    def close(self) -> None:
        self.pause()

    def __enter__(self) -> "PlaybackController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # internals

    def _emit(self) -> Frame:
        with self._lock:
            frame = self.frame()
            if self.on_frame is not None:
                self.on_frame(frame)
            return frame

    def _on_tick(self) -> bool:
        try:
            self.tick()
        except Exception as exc:
            with self._lock:
                self.timeline.pause()
                self.tick_error = exc
            console.print(f"[red]Playback stopped:[/red] {exc}")
            return False
        return self.playing

    def _detach_ticker(self) -> Optional[Ticker]:
        # Callers hold the lock so the state change and the swap are one step.
        ticker, self._ticker = self._ticker, None
        return ticker

    @staticmethod
    def _stop_ticker(ticker: Optional[Ticker]) -> None:
        # Joined outside the lock: the tick thread may be waiting on it.
        if ticker is not None:
            ticker.stop()
