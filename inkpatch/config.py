"""
Editor settings with an optional JSON override file.
"""
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from .utils.resource_loader import get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


@dataclass
class EditorSettings:
    """Tunable constants of the decode -> edit -> export pipeline."""

    # Rasterization
    render_scale: float = 1.2

    # Canvas sizing
    default_canvas_width: int = 900
    min_canvas_width: int = 320
    max_canvas_width: int = 1100
    canvas_chrome: int = 24  # Host padding around the canvas
    page_aspect_ratio: float = 1.4142  # Used until a raster is known
    min_canvas_height: int = 480

    # Export
    substitute_font: str = "helv"
    text_line_height: float = 1.2
    mask_padding_ratio: float = 0.12

    def canvas_width_for(self, host_width: Optional[float]) -> int:
        """Clamp a host width (minus chrome) to the supported canvas range."""
        parent = host_width or self.default_canvas_width
        return int(max(self.min_canvas_width, min(self.max_canvas_width, parent - self.canvas_chrome)))

    def initial_canvas_height(self, canvas_width: int) -> int:
        return max(self.min_canvas_height, round(canvas_width * self.page_aspect_ratio))

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "EditorSettings":
        """
        Load settings, falling back to defaults.

        Args:
            path: JSON file to read; defaults to settings.json in the config dir

        Returns:
            Settings with any known keys from the file applied
        """
        if path is None:
            path = get_config_dir(create=False) / SETTINGS_FILENAME

        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read settings from %s: %s", path, e)
            return cls()

        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected an object", path)
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.debug("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
        return cls(**{k: v for k, v in data.items() if k in known})

    def save(self, path: Optional[Path] = None) -> Path:
        if path is None:
            path = get_config_dir() / SETTINGS_FILENAME
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(self), f, indent=2)
        return path
