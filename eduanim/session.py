from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

from rich.console import Console

from .clock import TICK_RATE
from .errors import GenerationError
from .player import FrameCallback, PlaybackController
from .script import ScriptProvider, generate_script
from .types import AnimationScript, Frame

console = Console()


class Studio:
    """Transport surface for UI chrome: generation plus playback of the result.

    A failed generation clears the current script and leaves one message in
    ``error``; the studio stays usable and generation can be re-triggered.
    """

    def __init__(
        self,
        provider_factory: Callable[[], ScriptProvider],
        on_frame: Optional[FrameCallback] = None,
        tick_rate: int = TICK_RATE,
    ) -> None:
        self.provider_factory = provider_factory
        self.on_frame = on_frame
        self.tick_rate = tick_rate
        self.controller: Optional[PlaybackController] = None
        self.error: Optional[str] = None
        self.loading = False
        self._lock = threading.Lock()

    @property
    def script(self) -> Optional[AnimationScript]:
        return self.controller.script if self.controller is not None else None

    @property
    def scene_index(self) -> int:
        return self.controller.scene_index if self.controller is not None else 0

    @property
    def progress(self) -> float:
        return self.controller.progress if self.controller is not None else 0.0

    @property
    def playing(self) -> bool:
        return self.controller.playing if self.controller is not None else False

    def generate(self, topic: str) -> Optional[AnimationScript]:
        with self._lock:
            self._unload()
            self.error = None
            self.loading = True
        try:
            script = generate_script(self.provider_factory(), topic)
        except (GenerationError, RuntimeError) as exc:
            console.print(f"[red]Generation failed:[/red] {exc}")
            with self._lock:
                self.error = str(exc) or "Failed to generate animation. Please try again."
            return None
        finally:
            self.loading = False
        self.load(script)
        console.print(f"[bold green]Generated:[/bold green] {script.title} ({len(script.scenes)} scenes)")
        return script

    def load(self, script: AnimationScript) -> PlaybackController:
        with self._lock:
            self._unload()
            self.controller = PlaybackController(script, on_frame=self.on_frame, tick_rate=self.tick_rate)
            return self.controller

    def play(self) -> None:
        if self.controller is not None:
            self.controller.play()

    def pause(self) -> None:
        if self.controller is not None:
            self.controller.pause()

    def toggle(self) -> None:
        if self.controller is not None:
            self.controller.toggle()

    def restart(self) -> None:
        if self.controller is not None:
            self.controller.restart()

    def seek(self, percent: float) -> None:
        if self.controller is not None:
            self.controller.seek(percent)

    def jump_to_scene(self, index: int) -> None:
        if self.controller is not None:
            self.controller.jump_to_scene(index)

    def frame(self) -> Optional[Frame]:
        return self.controller.frame() if self.controller is not None else None

    def state(self) -> Dict[str, Any]:
        script = self.script
        return {
            "loading": self.loading,
            "error": self.error,
            "title": script.title if script is not None else None,
            "scene_count": len(script.scenes) if script is not None else 0,
            "scene_index": self.scene_index,
            "scene_id": self.controller.current_scene.id if self.controller is not None else None,
            "progress": self.progress,
            "playing": self.playing,
        }

    def close(self) -> None:
        with self._lock:
            self._unload()

    def _unload(self) -> None:
        if self.controller is not None:
            self.controller.close()
            self.controller = None
