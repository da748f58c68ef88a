from __future__ import annotations

from typing import List, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from .base import BackgroundPainter
from ..types import Backdrop


STAR_DENSITY = 1 / 900
STAR_SEED = 7
ROUTE_DASH = 4
ROUTE_COLOR = "#b0a896"


def _to_pixels(points, width: int, height: int) -> List[Tuple[float, float]]:
    return [(x / 100.0 * width, y / 100.0 * height) for x, y in points]


def _dashed_line(draw: ImageDraw.ImageDraw, points, fill, width: int, dash: int) -> None:
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        length = float(np.hypot(x1 - x0, y1 - y0))
        steps = max(1, int(length // dash))
        for i in range(0, steps, 2):
            a = i / steps
            b = min(1.0, (i + 1) / steps)
            draw.line(
                [(x0 + (x1 - x0) * a, y0 + (y1 - y0) * a), (x0 + (x1 - x0) * b, y0 + (y1 - y0) * b)],
                fill=fill,
                width=width,
            )


class GridBackgroundPainter(BackgroundPainter):
    def paint(self, backdrop: Backdrop, width: int, height: int) -> Image.Image:
        img = Image.new("RGB", (width, height), backdrop.base_color)
        draw = ImageDraw.Draw(img)
        spacing = backdrop.pattern_spacing or 40
        color = backdrop.pattern_color or "#cbd5e1"
        for x in range(0, width, spacing):
            draw.line([(x, 0), (x, height)], fill=color, width=1)
        for y in range(0, height, spacing):
            draw.line([(0, y), (width, y)], fill=color, width=1)
        return img


class MapBackgroundPainter(BackgroundPainter):
    """Parchment with translucent land masses and dashed routes."""

    def paint(self, backdrop: Backdrop, width: int, height: int) -> Image.Image:
        img = Image.new("RGBA", (width, height), backdrop.base_color)
        overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        land = ImageColor.getrgb(backdrop.pattern_color or "#d4cbb8")[:3] + (153,)
        for region in backdrop.regions:
            draw.polygon(_to_pixels(region, width, height), fill=land)
        route_width = max(1, width // 640)
        for route in backdrop.routes:
            _dashed_line(draw, _to_pixels(route, width, height), ROUTE_COLOR, route_width, ROUTE_DASH * route_width)
        img.alpha_composite(overlay)
        return img.convert("RGB")


class StarfieldBackgroundPainter(BackgroundPainter):
    """Dark sky with a fixed, seeded scatter of stars."""

    def paint(self, backdrop: Backdrop, width: int, height: int) -> Image.Image:
        pixels = np.empty((height, width, 3), dtype=np.uint8)
        pixels[:, :] = ImageColor.getrgb(backdrop.base_color)[:3]
        rng = np.random.default_rng(STAR_SEED)
        count = int(width * height * STAR_DENSITY)
        ys = rng.integers(0, height, size=count)
        xs = rng.integers(0, width, size=count)
        brightness = rng.uniform(0.3, 1.0, size=(count, 1))
        star = np.array(ImageColor.getrgb(backdrop.pattern_color or "#e2e8f0")[:3], dtype=np.float32)
        pixels[ys, xs] = (star * brightness).astype(np.uint8)
        return Image.fromarray(pixels, "RGB")
