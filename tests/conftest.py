import pytest

from eduanim.script import DEMO_SCRIPT, parse_script
from eduanim.types import AnimationScript


def make_script(durations=(5, 3), elements=None, camera=None) -> AnimationScript:
    scenes = []
    for idx, duration in enumerate(durations):
        scene = {
            "id": f"scene-{idx}",
            "duration": duration,
            "narrative": f"Narrative {idx}",
            "backgroundStyle": "default",
            "elements": elements if elements is not None else [
                {"id": "hero", "type": "character", "label": "Hero", "x": 30, "y": 40},
            ],
        }
        if camera is not None:
            scene["camera"] = camera
        scenes.append(scene)
    return AnimationScript.model_validate({"title": "Test", "visualStyle": "flat", "scenes": scenes})


@pytest.fixture
def script():
    return make_script()


@pytest.fixture
def demo_script():
    return parse_script(DEMO_SCRIPT)
