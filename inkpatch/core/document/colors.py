"""
CSS colour strings -> normalized RGBA for the PDF writer.
"""
import math
import re
from typing import NamedTuple, Optional


class RGBA(NamedTuple):
    r: float
    g: float
    b: float
    alpha: float = 1.0

    @property
    def rgb(self):
        return (self.r, self.g, self.b)


_HEX_RE = re.compile(r"[0-9a-fA-F]{6}")
_FUNC_RE = re.compile(r"rgba?\(([^)]+)\)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _leading_float(text: str) -> float:
    """Parse the numeric prefix of a string, NaN if there is none."""
    match = _NUMBER_RE.match(text.strip())
    return float(match.group()) if match else math.nan


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """
    Parse ``#rgb``, ``#rrggbb``, ``rgb()`` or ``rgba()``.

    Args:
        value: Colour string as set on a canvas object

    Returns:
        Channels in 0-1, or None if the string is empty or unparseable
    """
    if not value:
        return None

    trimmed = value.strip()
    if trimmed.startswith("#"):
        hex_part = trimmed[1:]
        if len(hex_part) == 3:
            hex_part = "".join(ch * 2 for ch in hex_part)
        if not _HEX_RE.fullmatch(hex_part):
            return None
        numeric = int(hex_part, 16)
        r = (numeric >> 16) & 255
        g = (numeric >> 8) & 255
        b = numeric & 255
        return RGBA(r / 255, g / 255, b / 255, 1.0)

    match = _FUNC_RE.search(trimmed)
    if not match:
        return None

    parts = [part.strip() for part in match.group(1).split(",")]
    if len(parts) < 3:
        return None

    r, g, b = (_leading_float(part) for part in parts[:3])
    alpha = _leading_float(parts[3]) if len(parts) >= 4 else 1.0
    if math.isnan(r) or math.isnan(g) or math.isnan(b):
        return None

    return RGBA(
        _clamp(r / 255),
        _clamp(g / 255),
        _clamp(b / 255),
        1.0 if math.isnan(alpha) else _clamp(alpha),
    )
