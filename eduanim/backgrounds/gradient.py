from __future__ import annotations

import numpy as np
from PIL import Image, ImageColor

from .base import BackgroundPainter
from ..types import Backdrop


class GradientBackgroundPainter(BackgroundPainter):
    """Diagonal gradient from base_color to gradient_to; flat fill without one."""

    def paint(self, backdrop: Backdrop, width: int, height: int) -> Image.Image:
        start = np.array(ImageColor.getrgb(backdrop.base_color)[:3], dtype=np.float32)
        if backdrop.gradient_to is None:
            return Image.new("RGB", (width, height), tuple(int(c) for c in start))
        end = np.array(ImageColor.getrgb(backdrop.gradient_to)[:3], dtype=np.float32)
        # top-left to bottom-right
        xs = np.linspace(0.0, 1.0, width, dtype=np.float32)[None, :]
        ys = np.linspace(0.0, 1.0, height, dtype=np.float32)[:, None]
        t = ((xs + ys) / 2.0)[..., None]
        pixels = start + (end - start) * t
        return Image.fromarray(pixels.astype(np.uint8), "RGB")
