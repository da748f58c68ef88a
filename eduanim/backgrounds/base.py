from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Union

from PIL import Image

from ..types import Backdrop, BackgroundStyle


BACKDROPS: Dict[BackgroundStyle, Backdrop] = {
    BackgroundStyle.DEFAULT: Backdrop(
        style=BackgroundStyle.DEFAULT,
        base_color="#f1f5f9",
        gradient_to="#e2e8f0",
    ),
    BackgroundStyle.MAP: Backdrop(
        style=BackgroundStyle.MAP,
        base_color="#e6dfcf",
        pattern="parchment",
        pattern_color="#d4cbb8",
        regions=[
            [(0, 50), (20, 38), (35, 42), (50, 50), (65, 47), (80, 42), (100, 40), (100, 100), (0, 100)],
            [(60, 10), (75, 3), (88, 6), (100, 20), (100, 0), (60, 0)],
        ],
        routes=[
            [(20, 20), (40, 30), (30, 60)],
            [(70, 40), (90, 30), (95, 60)],
        ],
    ),
    BackgroundStyle.GRID: Backdrop(
        style=BackgroundStyle.GRID,
        base_color="#ffffff",
        pattern="grid",
        pattern_color="#cbd5e1",
        pattern_spacing=40,
    ),
    BackgroundStyle.SPACE: Backdrop(
        style=BackgroundStyle.SPACE,
        base_color="#0f172a",
        pattern="starfield",
        pattern_color="#e2e8f0",
    ),
    BackgroundStyle.PAPER: Backdrop(
        style=BackgroundStyle.PAPER,
        base_color="#fdfbf7",
    ),
}


def resolve_backdrop(style: Union[BackgroundStyle, str]) -> Backdrop:
    """Static backdrop descriptor for a background token; unknown tokens fall back to default."""
    try:
        key = BackgroundStyle(style)
    except ValueError:
        key = BackgroundStyle.DEFAULT
    return BACKDROPS[key]


class BackgroundPainter(ABC):
    @abstractmethod
    def paint(self, backdrop: Backdrop, width: int, height: int) -> Image.Image:  # pragma: no cover - interface
        raise NotImplementedError
