from __future__ import annotations

import time
from typing import Optional

import typer
from dotenv import load_dotenv
from rich import print, print_json
from rich.live import Live
from rich.table import Table

from .clock import TICK_RATE
from .config import AppConfig, load_config
from .errors import EduAnimError
from .gemini_client import GeminiClient
from .player import PlaybackController, build_frame
from .renderer import render_script, write_video_from_frames
from .script import OfflineProvider, generate_script, load_script, save_script
from .types import Frame, RenderConfig


app = typer.Typer(add_completion=False, no_args_is_help=True)


def _chooser(cfg: Optional[AppConfig], prefer_config: bool):
    def choose(val, field: str):
        cfg_val = getattr(cfg, field) if cfg else None
        if prefer_config and cfg_val is not None:
            return cfg_val
        return val if val is not None else cfg_val

    return choose


def _load(script_path: str):
    try:
        return load_script(script_path)
    except (EduAnimError, FileNotFoundError) as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)


def _status_table(frame: Frame, playing: bool) -> Table:
    table = Table(title=frame.title, show_header=False, expand=True)
    table.add_row("Scene", f"{frame.scene_counter}  [dim]{frame.scene_id}[/dim]")
    table.add_row("Progress", f"{frame.progress:5.1f}%  {'playing' if playing else 'stopped'}")
    table.add_row("Camera", f"zoom {frame.camera.zoom:.2f}  pan ({frame.camera.x:.1f}%, {frame.camera.y:.1f}%)")
    for state in frame.elements:
        table.add_row(
            state.id,
            f"{state.type.value:<10} ({state.x:5.1f}, {state.y:5.1f})  opacity {state.opacity:.2f}  scale {state.scale:.2f}",
        )
    table.add_row("Narrative", frame.narrative)
    return table


@app.command()
def generate(
    topic: Optional[str] = typer.Option(None, help="Topic to turn into an animated explainer"),
    output: str = typer.Option("./script.json", help="Where to write the generated script JSON"),
    offline: Optional[bool] = typer.Option(None, help="Use the built-in demo script instead of calling Gemini"),
    api_key: Optional[str] = typer.Option(None, help="Google API key; otherwise uses GOOGLE_API_KEY env var"),
    model_name: Optional[str] = typer.Option(None, help="Gemini model name"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    prefer_config: bool = typer.Option(False, help="If true, config overrides CLI when set"),
):
    """Generate an animation script for a topic."""
    load_dotenv()
    cfg = load_config(config) if config else None
    choose = _chooser(cfg, prefer_config)

    topic = choose(topic, "topic")
    if not topic:
        raise typer.BadParameter("topic is required (via --topic or --config)")
    offline = bool(choose(offline, "offline"))

    try:
        if offline:
            provider = OfflineProvider()
        else:
            provider = GeminiClient(
                api_key=choose(api_key, "api_key"),
                model_name=choose(model_name, "model_name") or "gemini-2.5-flash",
                fallback_model_name=cfg.fallback_model_name if cfg else None,
            )
        script = generate_script(provider, topic)
    except (EduAnimError, RuntimeError) as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    save_script(script, output)
    print(f"[bold green]Wrote script:[/bold green] {script.title} ({len(script.scenes)} scenes, {script.total_duration():.1f}s) to {output}")


@app.command()
def render(
    script_path: str = typer.Argument(..., help="Script JSON produced by `generate`"),
    width: Optional[int] = typer.Option(None, help="Output width"),
    height: Optional[int] = typer.Option(None, help="Output height"),
    fps: Optional[int] = typer.Option(None, help="Frames per second"),
    output_dir: Optional[str] = typer.Option(None, help="Directory to write PNG frames"),
    output_video: Optional[str] = typer.Option(None, help="Optional mp4 path to write video using imageio-ffmpeg"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    prefer_config: bool = typer.Option(False, help="If true, config overrides CLI when set"),
):
    """Render a script to PNG frames and optionally an mp4."""
    cfg = load_config(config) if config else None
    choose = _chooser(cfg, prefer_config)
    script = _load(script_path)

    render_config = RenderConfig(
        width=int(choose(width, "width") or 1280),
        height=int(choose(height, "height") or 720),
        fps=int(choose(fps, "fps") or 24),
        output_dir=choose(output_dir, "output_dir") or "./frames",
        output_video=choose(output_video, "output_video"),
    )
    frame_paths = render_script(script, render_config)

    if render_config.output_video:
        try:
            write_video_from_frames(frame_paths, render_config.output_video, fps=render_config.fps)
            print(f"[bold green]Wrote video:[/bold green] {render_config.output_video}")
        except Exception as exc:
            print(f"[yellow]Video export failed; frames still written.[/yellow] {exc}")

    print(f"[bold green]Done.[/bold green] Wrote {len(frame_paths)} frames to {render_config.output_dir}")


@app.command()
def frame(
    script_path: str = typer.Argument(..., help="Script JSON"),
    scene: int = typer.Option(0, help="Scene index"),
    progress: float = typer.Option(0.0, help="Progress within the scene, 0-100"),
):
    """Print the resolved frame at a scene and progress as JSON."""
    script = _load(script_path)
    resolved = build_frame(script, scene, progress)
    print_json(resolved.model_dump_json())


@app.command()
def play(
    script_path: str = typer.Argument(..., help="Script JSON"),
    tick_rate: int = typer.Option(TICK_RATE, help="Clock updates per second"),
    scene: int = typer.Option(0, help="Scene to start from"),
):
    """Play a script in the terminal, showing resolved state live."""
    script = _load(script_path)
    with PlaybackController(script, tick_rate=tick_rate) as controller:
        controller.jump_to_scene(scene)
        controller.play()
        try:
            with Live(_status_table(controller.frame(), True), refresh_per_second=tick_rate) as live:
                while controller.playing:
                    time.sleep(1.0 / tick_rate)
                    live.update(_status_table(controller.frame(), controller.playing))
                live.update(_status_table(controller.frame(), False))
        except KeyboardInterrupt:
            print("[yellow]Stopped.[/yellow]")
    if controller.tick_error is not None:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(5000, help="Port"),
    offline: bool = typer.Option(False, help="Generate the demo script instead of calling Gemini"),
    api_key: Optional[str] = typer.Option(None, help="Google API key; otherwise uses GOOGLE_API_KEY env var"),
):
    """Run the JSON playback API."""
    load_dotenv()
    from .web import create_app

    web_app = create_app({"OFFLINE": offline, "API_KEY": api_key})
    web_app.run(host=host, port=port)


if __name__ == "__main__":
    app()
