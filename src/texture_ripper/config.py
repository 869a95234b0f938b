"""Configuration management for texture-ripper viewer settings."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .viewport import DEFAULT_MAX_SCALE, DEFAULT_MIN_SCALE
from .zoom import ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR


@dataclass
class ViewerConfig:
    """Configuration for viewer settings.

    Only settings live here; the camera position and zoom are never saved.
    """

    # Window settings
    window_width: int = 800
    window_height: int = 600
    title: str = "texture-ripper"
    fps: float = 60.0

    # Zoom settings
    zoom_in_factor: float = ZOOM_IN_FACTOR
    zoom_out_factor: float = ZOOM_OUT_FACTOR
    min_scale: float = DEFAULT_MIN_SCALE
    max_scale: float = DEFAULT_MAX_SCALE

    # Pointer button that pans and picks (1=left, 2=right, 3=middle)
    pan_button: int = 1

    # File picker filter
    image_filters: list[str] = field(default_factory=lambda: ["png", "jpg", "jpeg"])

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ViewerConfig:
        """Create config from dictionary."""
        # Filter out any unknown keys
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered_data)

    def update_from_dict(self, data: Dict[str, Any]) -> None:
        """Update config values from dictionary."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @property
    def window_size(self) -> tuple[int, int]:
        return (self.window_width, self.window_height)


def _safe_name(name: str) -> str:
    return "".join(c for c in name if c.isalnum() or c in "-_")


class ConfigManager:
    """Manage loading and saving viewer configurations."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_dir: Directory for config files. Defaults to ~/.texture-ripper/
        """
        if config_dir is None:
            config_dir = Path.home() / ".texture-ripper"
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_config_path = self.config_dir / "default.json"

    def _path_for(self, name: Optional[str], path: Optional[Path]) -> Path:
        if path is not None:
            return Path(path)
        if name is None:
            return self.default_config_path
        return self.config_dir / f"{_safe_name(name)}.json"

    def save_config(
        self,
        config: ViewerConfig,
        name: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> Path:
        """Save configuration to file.

        Args:
            config: Configuration to save.
            name: Name for the config (without extension).
                  If None, saves as "default".
            path: Full path to save to. Overrides name if provided.

        Returns:
            Path where config was saved.
        """
        path = self._path_for(name, path)
        with open(path, "w") as f:
            json.dump(config.to_dict(), f, indent=2)
        return path

    def load_config(
        self,
        name: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> ViewerConfig:
        """Load configuration from file.

        Args:
            name: Name of the config to load (without extension).
                  If None, loads "default" if it exists.
            path: Full path to load from. Overrides name if provided.

        Returns:
            Loaded configuration, or default config if file doesn't exist.
        """
        path = self._path_for(name, path)
        if path.exists():
            with open(path, "r") as f:
                return ViewerConfig.from_dict(json.load(f))
        return ViewerConfig()

    def list_configs(self) -> list[str]:
        """List available saved configurations (names without extensions)."""
        return sorted(path.stem for path in self.config_dir.glob("*.json"))

    def delete_config(self, name: str) -> bool:
        """Delete a saved configuration.

        Returns:
            True if deleted, False if didn't exist.
        """
        path = self._path_for(name, None)
        if path.exists():
            path.unlink()
            return True
        return False

    def export_config(self, config: ViewerConfig, path: Path) -> None:
        """Export configuration to a specific path."""
        with open(Path(path), "w") as f:
            json.dump(config.to_dict(), f, indent=2)

    def import_config(self, path: Path) -> ViewerConfig:
        """Import configuration from a specific path."""
        with open(Path(path), "r") as f:
            return ViewerConfig.from_dict(json.load(f))

    def resolve(self, name_or_path: str) -> ViewerConfig:
        """Load a config given either a saved name or a path to a .json file."""
        if name_or_path.endswith(".json"):
            return self.import_config(Path(name_or_path))
        return self.load_config(name=name_or_path)

    def store(self, config: ViewerConfig, name_or_path: str) -> Path:
        """Save a config under a name, or export it if given a .json path."""
        if name_or_path.endswith(".json"):
            path = Path(name_or_path)
            self.export_config(config, path)
            return path
        return self.save_config(config, name=name_or_path)
