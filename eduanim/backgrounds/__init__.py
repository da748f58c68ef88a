from PIL import Image

from .base import BACKDROPS, BackgroundPainter, resolve_backdrop
from .gradient import GradientBackgroundPainter
from .pattern import GridBackgroundPainter, MapBackgroundPainter, StarfieldBackgroundPainter
from ..types import Backdrop

PAINTERS = {
    None: GradientBackgroundPainter,
    "grid": GridBackgroundPainter,
    "parchment": MapBackgroundPainter,
    "starfield": StarfieldBackgroundPainter,
}


def paint_backdrop(backdrop: Backdrop, width: int, height: int) -> Image.Image:
    painter_cls = PAINTERS.get(backdrop.pattern)
    if painter_cls is None:
        raise ValueError(f"Unknown backdrop pattern: {backdrop.pattern}")
    return painter_cls().paint(backdrop, width, height)
