from __future__ import annotations

import math
import os
from typing import Callable, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont
from tqdm import tqdm

from .backgrounds import paint_backdrop
from .player import build_frame
from .types import AnimationScript, ElementType, Frame, RenderConfig, VisualState


REFERENCE_WIDTH = 960.0
SHAPE_COLOR = "#3b82f6"
TEXT_COLOR = "#0f172a"
PALETTE = {
    ElementType.CHARACTER: "#64748b",
    ElementType.MAP_MARKER: "#dc2626",
    ElementType.ARROW: "#334155",
    ElementType.IMAGE: "#94a3b8",
}


def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("DejaVuSans-Bold.ttf", size)
    except OSError:
        return ImageFont.load_default(size=size)


def _text_box(text: str, font, pad_x: int, pad_y: int, fill: str, ink: str) -> Image.Image:
    measure = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    left, top, right, bottom = measure.textbbox((0, 0), text, font=font)
    w, h = right - left + 2 * pad_x, bottom - top + 2 * pad_y
    img = Image.new("RGBA", (max(1, w), max(1, h)), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rounded_rectangle((0, 0, w - 1, h - 1), radius=min(w, h) // 4, fill=fill, outline="#e2e8f0")
    draw.text((pad_x - left, pad_y - top), text, font=font, fill=ink)
    return img


def _element_sprite(state: VisualState, unit: float) -> Image.Image:
    if state.type == ElementType.TEXT:
        font = _font(max(8, int(20 * unit)))
        return _text_box(state.label, font, int(24 * unit), int(16 * unit), "#ffffff", state.color or TEXT_COLOR)

    side = max(2, int((state.size or 48) * unit))
    img = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    color = state.color or PALETTE.get(state.type, SHAPE_COLOR)
    if state.type == ElementType.SHAPE:
        draw.ellipse((1, 1, side - 2, side - 2), fill=color, outline=(255, 255, 255, 102), width=max(1, side // 24))
        if not state.icon:
            font = _font(max(8, side // 3))
            draw.text((side / 2, side / 2), state.label[:2], font=font, fill="#ffffff", anchor="mm")
    elif state.type == ElementType.CHARACTER:
        head = side * 0.32
        draw.ellipse((side / 2 - head / 2, side * 0.05, side / 2 + head / 2, side * 0.05 + head), fill=color)
        draw.rounded_rectangle((side * 0.25, side * 0.42, side * 0.75, side * 0.95), radius=side // 6, fill=color)
    elif state.type == ElementType.MAP_MARKER:
        r = side * 0.3
        cx, cy = side / 2, side * 0.35
        draw.polygon([(cx - r * 0.8, cy + r * 0.5), (cx + r * 0.8, cy + r * 0.5), (cx, side * 0.95)], fill=color)
        draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=color)
        draw.ellipse((cx - r / 3, cy - r / 3, cx + r / 3, cy + r / 3), fill="#ffffff")
    elif state.type == ElementType.ARROW:
        # points down
        draw.rectangle((side * 0.4, side * 0.05, side * 0.6, side * 0.55), fill=color)
        draw.polygon([(side * 0.15, side * 0.5), (side * 0.85, side * 0.5), (side * 0.5, side * 0.95)], fill=color)
    else:
        draw.rounded_rectangle((1, 1, side - 2, side - 2), radius=side // 8, fill=color)
    return img


def _composite_sprite(
    canvas: Image.Image,
    sprite: Image.Image,
    center: Tuple[float, float],
    scale: float,
    opacity: float,
) -> Image.Image:
    if scale <= 0 or opacity <= 0:
        return canvas
    target_w = max(1, int(sprite.width * scale))
    target_h = max(1, int(sprite.height * scale))
    sp = sprite.resize((target_w, target_h), Image.LANCZOS)
    if opacity < 1.0:
        alpha = sp.getchannel("A")
        alpha = Image.eval(alpha, lambda a: int(a * opacity))
        sp.putalpha(alpha)
    px = int(center[0] - sp.width / 2)
    py = int(center[1] - sp.height / 2)
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(sp, (px, py))
    canvas.alpha_composite(layer)
    return canvas


def paint_frame(frame: Frame, width: int, height: int) -> Image.Image:
    """Paint one resolved frame: backdrop, camera-transformed stage, then overlays."""
    canvas = paint_backdrop(frame.backdrop, width, height).convert("RGBA")
    unit = width / REFERENCE_WIDTH
    cam = frame.camera
    cx, cy = width / 2, height / 2

    def to_screen(x: float, y: float) -> Tuple[float, float]:
        px, py = x / 100.0 * width, y / 100.0 * height
        return (
            cx + (px - cx) * cam.zoom + cam.x / 100.0 * width,
            cy + (py - cy) * cam.zoom + cam.y / 100.0 * height,
        )

    # stable sort keeps declaration order for equal depth
    for state in sorted(frame.elements, key=lambda s: s.z_index):
        sprite = _element_sprite(state, unit)
        scale = state.scale * state.idle_offset.scale * cam.zoom
        sx, sy = to_screen(state.x, state.y)
        sy += state.idle_offset.dy / 100.0 * sprite.height * scale
        canvas = _composite_sprite(canvas, sprite, (sx, sy), scale, state.opacity)
        if state.type != ElementType.TEXT and state.label and state.label_opacity > 0:
            caption = _text_box(state.label, _font(max(8, int(14 * unit))), int(12 * unit), int(6 * unit), "#ffffff", "#1e293b")
            below = sy + sprite.height * scale / 2 + caption.height * cam.zoom / 2 + 12 * unit
            canvas = _composite_sprite(canvas, caption, (sx, below), cam.zoom, state.opacity * state.label_opacity)

    if frame.narrative:
        sub = frame.subtitle
        subtitle = _text_box(frame.narrative, _font(max(8, int(18 * unit))), int(24 * unit), int(14 * unit), "#000000", "#ffffff")
        center = (cx + sub.dx * unit, height - 32 * unit - subtitle.height / 2 + sub.dy * unit)
        canvas = _composite_sprite(canvas, subtitle, center, sub.scale, 0.7 * sub.opacity)

    badge = _text_box(frame.scene_counter, _font(max(6, int(12 * unit))), int(12 * unit), int(6 * unit), "#000000", "#ffffff")
    center = (width - 16 * unit - badge.width / 2 + frame.badge.dx * unit, 16 * unit + badge.height / 2 + frame.badge.dy * unit)
    canvas = _composite_sprite(canvas, badge, center, frame.badge.scale, 0.6 * frame.badge.opacity)
    return canvas


def render_script(
    script: AnimationScript,
    config: RenderConfig,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> List[str]:
    _ensure_dir(config.output_dir)
    total = sum(int(math.ceil(scene.duration * config.fps)) for scene in script.scenes)

    frame_paths: List[str] = []
    frame_index = 0
    for s_idx, scene in enumerate(script.scenes):
        num_frames = int(math.ceil(scene.duration * config.fps))
        scene_start = script.scene_start(s_idx)
        for f in tqdm(range(num_frames), desc=f"Scene {s_idx+1}/{len(script.scenes)}"):
            progress = (f / max(1, num_frames - 1)) * 100.0
            t = progress / 100.0 * scene.duration
            frame = build_frame(script, s_idx, progress, idle_time=scene_start + t)
            canvas = paint_frame(frame, config.width, config.height)

            frame_path = os.path.join(config.output_dir, f"frame_{frame_index:06d}.png")
            canvas.convert("RGB").save(frame_path)
            frame_paths.append(frame_path)
            frame_index += 1
            if on_progress is not None:
                on_progress(frame_index, total)

    return frame_paths


def write_video_from_frames(frame_paths: List[str], output_video: str, fps: int) -> None:
    try:
        import imageio.v3 as iio
        import imageio_ffmpeg  # noqa: F401
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("imageio and imageio-ffmpeg are required for video export") from exc
    imgs = [iio.imread(fp) for fp in frame_paths]
    iio.imwrite(output_video, imgs, fps=fps)
