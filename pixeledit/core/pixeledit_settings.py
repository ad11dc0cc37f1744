"""
Settings manager for the pixel art editor
Handles saving and loading user preferences
"""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from .pixeledit_constants import (
    CELL_DISPLAY_SIZE,
    DEFAULT_CIRCLE_RADIUS,
    DEFAULT_DRAWING_COLOR,
    DEFAULT_ELLIPSE_RADIUS_X,
    DEFAULT_ELLIPSE_RADIUS_Y,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_PALETTE,
    MAX_IMAGE_DIMENSION,
    MAX_RECENT_FILES,
    REQUEST_TIMEOUT_MS,
)
from .pixeledit_utils import Color, debug_log, validate_color


class SettingsManager:
    """Manages application settings with persistence"""

    def __init__(
        self,
        app_name: str = "pixeledit",
        settings_dir: Optional[Union[str, Path]] = None,
    ):
        self.app_name = app_name
        self.settings_file = self._get_settings_path(settings_dir)
        self.settings = self._load_settings()

    def _get_settings_path(self, settings_dir: Optional[Union[str, Path]]) -> Path:
        """Get the appropriate settings directory for the platform"""
        if settings_dir is not None:
            directory = Path(settings_dir)
        elif os.name == "nt":  # Windows
            base = Path(os.environ.get("APPDATA", os.path.expanduser("~")))
            directory = base / self.app_name
        else:  # Linux/Mac
            base = Path(os.path.expanduser("~"))
            directory = base / f".{self.app_name}"

        directory.mkdir(parents=True, exist_ok=True)
        return directory / "settings.json"

    def _load_settings(self) -> dict[str, Any]:
        """Load settings from file, layered over the defaults"""
        settings = self._get_default_settings()
        if self.settings_file.exists():
            try:
                with open(self.settings_file) as f:
                    stored = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                # If file is corrupted, start fresh
                debug_log("SETTINGS", f"Ignoring unreadable settings: {e}", "WARNING")
                return settings
            if isinstance(stored, dict):
                settings.update(stored)
        return settings

    def _get_default_settings(self) -> dict[str, Any]:
        """Get default settings"""
        return {
            "new_image_width": DEFAULT_IMAGE_WIDTH,
            "new_image_height": DEFAULT_IMAGE_HEIGHT,
            "max_image_dimension": MAX_IMAGE_DIMENSION,
            "request_timeout_ms": REQUEST_TIMEOUT_MS,
            "cell_display_size": CELL_DISPLAY_SIZE,
            "default_color": list(DEFAULT_DRAWING_COLOR),
            "palette": [list(c) for c in DEFAULT_PALETTE],
            "circle_radius": DEFAULT_CIRCLE_RADIUS,
            "ellipse_radius_x": DEFAULT_ELLIPSE_RADIUS_X,
            "ellipse_radius_y": DEFAULT_ELLIPSE_RADIUS_Y,
            "log_level": "INFO",
            "recent_files": [],
            "preferences": {
                "max_recent_files": MAX_RECENT_FILES,
            },
        }

    def save_settings(self) -> None:
        """Save current settings to file"""
        try:
            with open(self.settings_file, "w") as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            debug_log("SETTINGS", f"Could not save settings: {e}", "WARNING")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value"""
        keys = key.split(".")
        value = self.settings
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a setting value"""
        keys = key.split(".")
        target = self.settings
        for k in keys[:-1]:
            if k not in target:
                target[k] = {}
            target = target[k]
        target[keys[-1]] = value
        self.save_settings()

    def add_recent_file(self, file_path: str) -> None:
        """Add a document to the recent files list"""
        file_path = str(file_path)
        recent_list = self.settings.setdefault("recent_files", [])

        if file_path in recent_list:
            recent_list.remove(file_path)

        recent_list.insert(0, file_path)

        max_recent = self.get("preferences.max_recent_files", MAX_RECENT_FILES)
        self.settings["recent_files"] = recent_list[:max_recent]

        self.save_settings()

    def get_recent_files(self) -> list[str]:
        """Get recently opened documents, newest first"""
        return list(self.settings.get("recent_files", []))

    def get_new_image_size(self) -> tuple[int, int]:
        """Get the size used for untitled documents"""
        return (
            int(self.get("new_image_width", DEFAULT_IMAGE_WIDTH)),
            int(self.get("new_image_height", DEFAULT_IMAGE_HEIGHT)),
        )

    def get_palette(self) -> list[Color]:
        """Get the surface palette as RGBA tuples"""
        return [validate_color(c) for c in self.get("palette", DEFAULT_PALETTE)]

    def get_default_color(self) -> Color:
        """Get the initial drawing color"""
        return validate_color(self.get("default_color", DEFAULT_DRAWING_COLOR))

    def reset_settings(self) -> None:
        """Reset all settings to defaults"""
        self.settings = self._get_default_settings()
        self.save_settings()


# Singleton instance
_settings_instance = None


def get_settings() -> SettingsManager:
    """Get the singleton settings instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = SettingsManager()
    return _settings_instance
