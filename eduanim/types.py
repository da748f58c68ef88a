from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_ELEMENT_SIZE = 48.0
SIZE_UNIT = 5.0


def _clamp_percent(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return max(0.0, min(100.0, value))


class ElementType(str, Enum):
    CHARACTER = "character"
    SHAPE = "shape"
    TEXT = "text"
    MAP_MARKER = "map-marker"
    ARROW = "arrow"
    IMAGE = "image"


class AnimationType(str, Enum):
    FADE_IN = "fade-in"
    SLIDE_IN = "slide-in"
    SCALE_UP = "scale-up"
    NONE = "none"


class BackgroundStyle(str, Enum):
    DEFAULT = "default"
    MAP = "map"
    GRID = "grid"
    SPACE = "space"
    PAPER = "paper"


class ScriptModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CameraConfig(ScriptModel):
    zoom: float = Field(1.0, description="Zoom factor, 1.0 is neutral")
    x: float = Field(0.0, description="Pan X percentage (negative left)")
    y: float = Field(0.0, description="Pan Y percentage (negative up)")

    @field_validator("zoom")
    @classmethod
    def _neutral_floor(cls, value: float) -> float:
        return max(1.0, value)


class VisualElement(ScriptModel):
    id: str
    type: ElementType
    label: str
    color: Optional[str] = None
    x: float = Field(..., description="Stage X position in percent [0,100]")
    y: float = Field(..., description="Stage Y position in percent [0,100]")
    size: Optional[float] = Field(None, description="Relative size unit")
    target_x: Optional[float] = Field(None, alias="targetX")
    target_y: Optional[float] = Field(None, alias="targetY")
    icon: Optional[str] = None
    enter_animation: Optional[AnimationType] = Field(None, alias="enterAnimation")

    @field_validator("x", "y", "target_x", "target_y")
    @classmethod
    def _clamp(cls, value: Optional[float]) -> Optional[float]:
        return _clamp_percent(value)

    @field_validator("size")
    @classmethod
    def _positive_size(cls, value: Optional[float]) -> Optional[float]:
        if value is None or value <= 0:
            return None
        return value

    @property
    def is_moving(self) -> bool:
        return self.target_x is not None or self.target_y is not None

    @property
    def has_label(self) -> bool:
        return self.type != ElementType.TEXT and bool(self.label)

    @property
    def rendered_size(self) -> Optional[float]:
        """Box size in pixel units; text is sized to its content."""
        if self.type == ElementType.TEXT:
            return None
        if self.size is not None:
            return self.size * SIZE_UNIT
        return DEFAULT_ELEMENT_SIZE


class Scene(ScriptModel):
    id: str
    duration: float = Field(..., gt=0, description="Seconds")
    narrative: str
    background_style: BackgroundStyle = Field(..., alias="backgroundStyle")
    camera: Optional[CameraConfig] = None
    elements: Tuple[VisualElement, ...]

    @model_validator(mode="after")
    def _unique_element_ids(self) -> "Scene":
        ids = [el.id for el in self.elements]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate element id in scene '{self.id}'")
        return self


class AnimationScript(ScriptModel):
    title: str
    visual_style: str = Field(..., alias="visualStyle")
    scenes: Tuple[Scene, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _unique_scene_ids(self) -> "AnimationScript":
        ids = [scene.id for scene in self.scenes]
        if len(ids) != len(set(ids)):
            raise ValueError("scene ids must be unique")
        return self

    def total_duration(self) -> float:
        return sum(scene.duration for scene in self.scenes)

    def scene_start(self, index: int) -> float:
        return sum(scene.duration for scene in self.scenes[:index])

    def to_json(self, indent: Optional[int] = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


# Resolved state handed to the rendering collaborator


class OverlayState(BaseModel):
    """Entry pose of a screen overlay; offsets are pixels at the reference width."""

    opacity: float = 1.0
    dx: float = 0.0
    dy: float = 0.0
    scale: float = 1.0


class IdleOffset(BaseModel):
    dy: float = Field(0.0, description="Vertical offset, percent of the element box")
    scale: float = 1.0


class VisualState(BaseModel):
    id: str
    type: ElementType
    label: str
    color: Optional[str] = None
    icon: Optional[str] = None
    x: float
    y: float
    opacity: float
    scale: float
    idle_offset: IdleOffset = Field(default_factory=IdleOffset)
    size: Optional[float] = None
    z_index: int = 0
    label_opacity: float = 0.0


class CameraTransform(BaseModel):
    zoom: float = 1.0
    x: float = 0.0
    y: float = 0.0


class Backdrop(BaseModel):
    style: BackgroundStyle
    base_color: str
    gradient_to: Optional[str] = None
    pattern: Optional[str] = None
    pattern_color: Optional[str] = None
    pattern_spacing: Optional[int] = None
    regions: List[List[Tuple[float, float]]] = Field(default_factory=list)
    routes: List[List[Tuple[float, float]]] = Field(default_factory=list)


class Frame(BaseModel):
    title: str
    scene_id: str
    scene_index: int
    scene_count: int
    progress: float
    elapsed: float
    narrative: str
    backdrop: Backdrop
    camera: CameraTransform
    elements: List[VisualState]
    subtitle: OverlayState = Field(default_factory=OverlayState)
    badge: OverlayState = Field(default_factory=OverlayState)

    @property
    def scene_counter(self) -> str:
        return f"SCENE {self.scene_index + 1} / {self.scene_count}"


class RenderConfig(BaseModel):
    width: int = 1280
    height: int = 720
    fps: int = 24
    output_dir: str = "./frames"
    output_video: Optional[str] = None
