import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from graphwalk.config import Settings, get_settings, load_config


def test_defaults_without_config(tmp_path):
    settings = get_settings(tmp_path / "missing.json", environ={})
    assert settings == Settings()
    assert settings.bfs_visit_delay == 0.5
    assert settings.bfs_fanout_delay == 0.3
    assert settings.dfs_visit_delay == 0.6


def test_config_file_overrides_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"port": 9000, "canvas_width": 1024, "dfs_visit_delay": 0.1}), encoding="utf-8")
    settings = get_settings(path, environ={})
    assert settings.port == 9000
    assert settings.canvas_width == 1024
    assert settings.dfs_visit_delay == 0.1


def test_environment_wins_over_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"port": 9000}), encoding="utf-8")
    settings = get_settings(path, environ={"GRAPHWALK_PORT": "9100", "GRAPHWALK_TITLE": "Campus"})
    assert settings.port == 9100
    assert settings.title == "Campus"


def test_invalid_values_keep_default(tmp_path):
    settings = get_settings(tmp_path / "none.json", environ={"GRAPHWALK_BFS_VISIT_DELAY": "slow"})
    assert settings.bfs_visit_delay == 0.5


def test_malformed_config_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == {}

    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert load_config(path) == {}
