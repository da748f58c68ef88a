import os

from eduanim.player import build_frame
from eduanim.renderer import paint_frame, render_script
from eduanim.types import RenderConfig


def test_paint_frame_size(demo_script):
    frame = build_frame(demo_script, 0, 50)
    img = paint_frame(frame, 160, 90)
    assert img.size == (160, 90)


def test_hidden_elements_leave_backdrop_untouched(demo_script):
    # paper backdrop is flat, so any drawn element would change a pixel
    data = demo_script.model_dump(by_alias=True)
    data["scenes"][1]["backgroundStyle"] = "paper"
    data["scenes"][1]["narrative"] = ""
    for el in data["scenes"][1]["elements"]:
        el["enterAnimation"] = "scale-up"
    script = type(demo_script).model_validate(data)
    img = paint_frame(build_frame(script, 1, 0), 96, 54).convert("RGB")
    assert set(img.getdata()) == {(0xFD, 0xFB, 0xF7)}


def test_render_script_writes_every_frame(demo_script, tmp_path):
    progress = []
    config = RenderConfig(width=64, height=36, fps=2, output_dir=str(tmp_path / "frames"))
    paths = render_script(demo_script, config, on_progress=lambda done, total: progress.append((done, total)))
    # ceil(5 * 2) + ceil(4 * 2)
    assert len(paths) == 18
    assert all(os.path.exists(p) for p in paths)
    assert os.path.basename(paths[-1]) == "frame_000017.png"
    assert progress[-1] == (18, 18)


def test_overlays_fade_in_after_scene_start(demo_script):
    data = demo_script.model_dump(by_alias=True)
    data["scenes"][1]["backgroundStyle"] = "paper"
    for el in data["scenes"][1]["elements"]:
        el["enterAnimation"] = "scale-up"
    script = type(demo_script).model_validate(data)
    paper = {(0xFD, 0xFB, 0xF7)}
    at_start = paint_frame(build_frame(script, 1, 0), 96, 54).convert("RGB")
    assert set(at_start.getdata()) == paper
    # the title box starts below the top strip, which then only holds the
    # scene badge
    later = paint_frame(build_frame(script, 1, 50), 192, 108).convert("RGB")
    assert set(later.crop((120, 0, 192, 10)).getdata()) != paper
