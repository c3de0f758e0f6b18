"""
Settings management for tfprof viewer
"""

import json
import os
import sys
from dataclasses import dataclass, asdict
from typing import Optional

CONFIG_DIR = os.path.expanduser("~/.config/tfprof-viewer")
CONFIG_FILE = os.path.join(CONFIG_DIR, "settings.json")


@dataclass
class Settings:
    """Viewer settings"""

    # Timeline plot geometry (pixels)
    width: int = 1200
    max_line_height: int = 20
    left_margin: int = 100
    right_margin: int = 100
    top_margin: int = 26
    bottom_margin: int = 30

    # Smallest legible axis label font size
    min_label_font: float = 2.0

    # Segments shorter than this are not drawn (0 draws everything)
    min_segment_duration: float = 0.0

    # Viewport updates closer than this to the current one are dropped
    viewport_epsilon: float = sys.float_info.epsilon

    # Bar chart geometry (pixels)
    bar_width: int = 1200
    bar_height: int = 350
    bar_left_margin: int = 100
    bar_right_margin: int = 100
    bar_top_margin: int = 20
    bar_bottom_margin: int = 100

    def save(self, path: Optional[str] = None):
        """Save settings to config file"""
        path = path or CONFIG_FILE
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Settings":
        """Load settings from config file, or return defaults"""
        path = path or CONFIG_FILE
        if not os.path.exists(path):
            return cls()

        try:
            with open(path, "r") as f:
                data = json.load(f)

            # Filter to only known fields (ignore obsolete settings)
            valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
            filtered_data = {k: v for k, v in data.items() if k in valid_fields}

            return cls(**filtered_data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            from .logger import warning

            warning("Ignoring unreadable settings file %s: %s", path, e)
            return cls()


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def save_settings():
    """Save the global settings"""
    if _settings is not None:
        _settings.save()
