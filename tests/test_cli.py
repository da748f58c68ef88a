import json
import os

from typer.testing import CliRunner

from eduanim.cli import app
from eduanim.script import load_script

runner = CliRunner()


def generated(tmp_path):
    path = tmp_path / "script.json"
    result = runner.invoke(app, ["generate", "--topic", "Trade routes", "--offline", "--output", str(path)])
    assert result.exit_code == 0, result.output
    return path


def test_generate_offline_writes_script(tmp_path):
    path = generated(tmp_path)
    script = load_script(str(path))
    assert script.title == "Offline Demo"
    assert json.loads(path.read_text(encoding="utf-8"))["scenes"][0]["backgroundStyle"] == "map"


def test_generate_reads_topic_from_config(tmp_path):
    cfg = tmp_path / "eduanim.yaml"
    cfg.write_text("topic: Rivers\noffline: true\n", encoding="utf-8")
    out = tmp_path / "from-config.json"
    result = runner.invoke(app, ["generate", "--config", str(cfg), "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()


def test_frame_prints_resolved_state(tmp_path):
    path = generated(tmp_path)
    result = runner.invoke(app, ["frame", str(path), "--scene", "1", "--progress", "100"])
    assert result.exit_code == 0, result.output
    frame = json.loads(result.output)
    assert frame["scene_id"] == "the-idea"
    assert frame["progress"] == 100
    assert [state["id"] for state in frame["elements"]] == ["title", "a", "arrow", "b"]


def test_frame_with_missing_script_fails():
    result = runner.invoke(app, ["frame", "nope.json"])
    assert result.exit_code == 1
    assert "Script not found" in result.output


def test_render_tiny_frames(tmp_path):
    path = generated(tmp_path)
    out_dir = tmp_path / "frames"
    result = runner.invoke(
        app,
        ["render", str(path), "--width", "32", "--height", "18", "--fps", "1", "--output-dir", str(out_dir)],
    )
    assert result.exit_code == 0, result.output
    # ceil(5 * 1) + ceil(4 * 1)
    assert sorted(os.listdir(out_dir)) == [f"frame_{i:06d}.png" for i in range(9)]
