"""
Editor settings persisted as JSON in the user's config directory.
"""
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Tuple

from quillmark.core.annotations.models import (
    clamp_color,
    clamp_font_size,
    clamp_signature_size,
)

from .resource_loader import get_config_dir

log = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
MAX_RENDER_SCALE = 8.0


@dataclass
class EditorSettings:
    """User-tunable defaults for the editor."""

    render_scale: float = 1.0
    font_size: int = 16
    text_color: Tuple[int, int, int] = (0, 0, 0)
    signature_width: float = 150
    signature_height: float = 60
    signature_x: float = 50
    signature_y: float = 50
    last_directory: str = ""

    def __post_init__(self):
        self.font_size = clamp_font_size(self.font_size)
        self.text_color = clamp_color(self.text_color)
        self.signature_width, self.signature_height = clamp_signature_size(
            self.signature_width, self.signature_height
        )
        if not 0 < self.render_scale <= MAX_RENDER_SCALE:
            self.render_scale = 1.0

    @classmethod
    def from_dict(cls, data: dict) -> "EditorSettings":
        """Build settings from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> dict:
        data = asdict(self)
        data["text_color"] = list(self.text_color)
        return data


def default_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILE


def load_settings(path: Optional[Path] = None) -> EditorSettings:
    """
    Load settings, falling back to defaults.

    Args:
        path: Optional custom path for the settings file

    Returns:
        Settings read from disk, or defaults if the file is missing or corrupt
    """
    path = path or default_settings_path()
    if not path.exists():
        return EditorSettings()

    try:
        with open(path, 'r') as f:
            return EditorSettings.from_dict(json.load(f))
    except (OSError, ValueError, TypeError) as e:
        log.warning("Ignoring unreadable settings file %s: %s", path, e)
        return EditorSettings()


def save_settings(settings: EditorSettings, path: Optional[Path] = None) -> bool:
    """
    Save settings to JSON.

    Returns:
        True if save was successful
    """
    path = path or default_settings_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(settings.to_dict(), f, indent=2)
        return True
    except OSError as e:
        log.error("Failed to save settings to %s: %s", path, e)
        return False
