from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from .errors import GenerationError, MalformedScriptError
from .types import AnimationScript


SYSTEM_INSTRUCTION = (
    "You design short animated educational videos. Break the topic into 4-8 scenes, "
    "each with a one or two sentence voiceover narrative and a handful of visual elements. "
    "Positions use a 0-100 percent stage with (0,0) at the top-left; keep elements at least "
    "15% apart unless they belong together and avoid crowding the centre. "
    "Historical or geographical topics use the 'map' background and 'map-marker' elements; "
    "maths and science use 'grid' or 'paper' with 'shape' and 'text' elements. "
    "Camera zoom defaults to 1.0; use 1.5-2.0 to focus and pan x/y to follow the action. "
    "Give characters a fitting emoji icon. Return strictly valid JSON that follows the schema."
)

_NUMBER = {"type": "NUMBER"}
_STRING = {"type": "STRING"}

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": _STRING,
        "visualStyle": {"type": "STRING", "description": "Overall visual style and tone."},
        "scenes": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": _STRING,
                    "duration": _NUMBER,
                    "narrative": _STRING,
                    "backgroundStyle": {"type": "STRING", "enum": ["default", "map", "grid", "space", "paper"]},
                    "camera": {
                        "type": "OBJECT",
                        "properties": {"zoom": _NUMBER, "x": _NUMBER, "y": _NUMBER},
                        "nullable": True,
                    },
                    "elements": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "id": _STRING,
                                "type": {
                                    "type": "STRING",
                                    "enum": ["character", "shape", "text", "map-marker", "arrow", "image"],
                                },
                                "label": _STRING,
                                "color": {"type": "STRING", "nullable": True},
                                "x": _NUMBER,
                                "y": _NUMBER,
                                "size": {"type": "NUMBER", "nullable": True},
                                "targetX": {"type": "NUMBER", "nullable": True},
                                "targetY": {"type": "NUMBER", "nullable": True},
                                "icon": {"type": "STRING", "nullable": True},
                                "enterAnimation": {
                                    "type": "STRING",
                                    "enum": ["fade-in", "slide-in", "scale-up", "none"],
                                    "nullable": True,
                                },
                            },
                            "required": ["id", "type", "label", "x", "y"],
                        },
                    },
                },
                "required": ["id", "duration", "narrative", "backgroundStyle", "elements"],
            },
        },
    },
    "required": ["title", "scenes", "visualStyle"],
}


class ScriptProvider(Protocol):
    def generate_json(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        ...


def build_prompt(topic: str) -> str:
    return (
        f'Generate an animated educational video for: "{topic}".\n'
        "Ensure it has a clear educational progression.\n"
        "If the topic is abstract (maths, physics), visualize it.\n"
        "If it is historical, use maps and markers."
    )


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    where = ".".join(str(part) for part in first.get("loc", ())) or "script"
    return f"{where}: {first.get('msg', 'invalid value')}"


def parse_script(data: Any) -> AnimationScript:
    """Validate provider output; the whole document is rejected on any error."""
    if not isinstance(data, dict) or not data:
        raise MalformedScriptError("The generated script is empty or not a JSON object.")
    try:
        return AnimationScript.model_validate(data)
    except ValidationError as exc:
        raise MalformedScriptError(f"The generated script is malformed ({_describe(exc)}).") from exc


def generate_script(provider: ScriptProvider, topic: str) -> AnimationScript:
    topic = (topic or "").strip()
    if not topic:
        raise GenerationError("Please describe a topic to animate.")
    try:
        data = provider.generate_json(
            build_prompt(topic),
            system_instruction=SYSTEM_INSTRUCTION,
            response_schema=RESPONSE_SCHEMA,
        )
    except Exception as exc:
        raise GenerationError(f"Failed to generate animation: {exc}") from exc
    return parse_script(data)


def load_script(path: str) -> AnimationScript:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Script not found: {path}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise MalformedScriptError(f"{path} is not valid JSON: {exc}") from exc
    return parse_script(data)


def save_script(script: AnimationScript, path: str) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(script.to_json(), encoding="utf-8")


DEMO_SCRIPT: Dict[str, Any] = {
    "title": "Offline Demo",
    "visualStyle": "Clean flat illustration with soft shadows",
    "scenes": [
        {
            "id": "the-journey",
            "duration": 5,
            "narrative": "A traveller sets out across the map toward a distant city.",
            "backgroundStyle": "map",
            "camera": {"zoom": 1.4, "x": -5, "y": 0},
            "elements": [
                {"id": "start", "type": "map-marker", "label": "Home", "x": 20, "y": 60},
                {"id": "goal", "type": "map-marker", "label": "City", "x": 80, "y": 30},
                {
                    "id": "traveller",
                    "type": "character",
                    "label": "Traveller",
                    "icon": "\U0001F9ED",
                    "x": 20,
                    "y": 55,
                    "targetX": 78,
                    "targetY": 35,
                    "enterAnimation": "scale-up",
                },
            ],
        },
        {
            "id": "the-idea",
            "duration": 4,
            "narrative": "Each step of the route becomes a simple idea on the board.",
            "backgroundStyle": "grid",
            "elements": [
                {"id": "title", "type": "text", "label": "Step by step", "x": 50, "y": 20, "enterAnimation": "fade-in"},
                {"id": "a", "type": "shape", "label": "A", "color": "#3b82f6", "x": 25, "y": 55, "size": 14},
                {"id": "arrow", "type": "arrow", "label": "then", "x": 50, "y": 55, "enterAnimation": "slide-in"},
                {"id": "b", "type": "shape", "label": "B", "color": "#f97316", "x": 75, "y": 55, "size": 14},
            ],
        },
    ],
}


class OfflineProvider:
    """Stands in for Gemini when running without an API key."""

    def generate_json(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return json.loads(json.dumps(DEMO_SCRIPT))
