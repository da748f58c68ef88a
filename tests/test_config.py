from eduanim.config import AppConfig, load_config


def test_load_config(tmp_path):
    path = tmp_path / "eduanim.yaml"
    path.write_text("topic: Plate tectonics\nfps: 30\noffline: true\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.topic == "Plate tectonics"
    assert cfg.fps == 30
    assert cfg.offline is True
    assert cfg.width is None


def test_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == AppConfig()
