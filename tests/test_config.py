"""Tests for configuration management."""

import tempfile
from pathlib import Path

from texture_ripper.config import ConfigManager, ViewerConfig


def test_viewer_config_defaults():
    """Test ViewerConfig default values."""
    config = ViewerConfig()

    assert config.window_size == (800, 600)
    assert config.title == "texture-ripper"
    assert config.zoom_in_factor == 0.8
    assert config.zoom_out_factor == 1.25
    assert config.pan_button == 1
    assert config.image_filters == ["png", "jpg", "jpeg"]


def test_viewer_config_has_no_view_state():
    """Camera position and zoom are never persisted."""
    data = ViewerConfig().to_dict()

    assert "translation" not in data
    assert "scale" not in data


def test_viewer_config_serialization():
    """Test config serialization to/from dict."""
    config = ViewerConfig(fps=30.0, zoom_in_factor=0.5, pan_button=3)

    data = config.to_dict()
    assert data["fps"] == 30.0
    assert data["zoom_in_factor"] == 0.5

    config2 = ViewerConfig.from_dict(data)
    assert config2.fps == 30.0
    assert config2.pan_button == 3

    # Unknown keys are ignored
    data["unknown_key"] = "value"
    config3 = ViewerConfig.from_dict(data)
    assert not hasattr(config3, "unknown_key")


def test_viewer_config_update():
    """Test updating config from dict."""
    config = ViewerConfig()

    config.update_from_dict({"fps": 120.0, "title": "other", "unknown_key": "ignored"})

    assert config.fps == 120.0
    assert config.title == "other"
    assert config.window_width == 800  # Unchanged
    assert not hasattr(config, "unknown_key")


def test_config_manager_save_load():
    """Test saving and loading configurations."""
    with tempfile.TemporaryDirectory() as tmpdir:
        manager = ConfigManager(Path(tmpdir))

        path = manager.save_config(ViewerConfig(fps=30.0, max_scale=50.0), name="test_config")
        assert path.exists()
        assert path.name == "test_config.json"

        loaded = manager.load_config(name="test_config")
        assert loaded.fps == 30.0
        assert loaded.max_scale == 50.0

        # Non-existent config falls back to defaults
        default = manager.load_config(name="nonexistent")
        assert default.fps == 60.0


def test_config_manager_default_config():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager = ConfigManager(Path(tmpdir))

        path = manager.save_config(ViewerConfig(window_width=1280))
        assert path.name == "default.json"

        assert manager.load_config().window_width == 1280


def test_config_manager_list_and_delete():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager = ConfigManager(Path(tmpdir))
        assert manager.list_configs() == []

        manager.save_config(ViewerConfig(), name="config1")
        manager.save_config(ViewerConfig(), name="config2")
        manager.save_config(ViewerConfig())

        assert manager.list_configs() == ["config1", "config2", "default"]

        assert manager.delete_config("config1")
        assert not manager.delete_config("config1")
        assert manager.list_configs() == ["config2", "default"]


def test_config_manager_sanitizes_names():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager = ConfigManager(Path(tmpdir))

        path = manager.save_config(ViewerConfig(), name="../my config!")

        assert path.parent == Path(tmpdir)
        assert path.name == "myconfig.json"


def test_config_manager_export_import():
    with tempfile.TemporaryDirectory() as tmpdir:
        manager = ConfigManager(Path(tmpdir) / "configs")
        export_path = Path(tmpdir) / "exported.json"

        manager.export_config(ViewerConfig(pan_button=2), export_path)
        assert manager.import_config(export_path).pan_button == 2


def test_config_manager_resolve_and_store():
    """Names go to the config dir, .json paths are exported/imported directly."""
    with tempfile.TemporaryDirectory() as tmpdir:
        manager = ConfigManager(Path(tmpdir) / "configs")
        json_path = Path(tmpdir) / "mine.json"

        assert manager.store(ViewerConfig(fps=24.0), str(json_path)) == json_path
        assert manager.resolve(str(json_path)).fps == 24.0

        saved = manager.store(ViewerConfig(fps=48.0), "named")
        assert saved.parent == Path(tmpdir) / "configs"
        assert manager.resolve("named").fps == 48.0
