"""
CSS color strings → RGB. Palettes carry '#rrggbb' or 'hsl(Hdeg S% L%)' strings.
"""
import re
from functools import lru_cache

from PIL import ImageColor

_HSL_SPACE_RE = re.compile(
    r"hsl\(\s*(-?\d+(?:\.\d+)?)(?:deg)?\s+(\d+(?:\.\d+)?)%\s+(\d+(?:\.\d+)?)%\s*\)",
    re.IGNORECASE,
)


@lru_cache(maxsize=256)
def parse_color(value: str) -> tuple[int, int, int]:
    """
    Parse a CSS color to (r, g, b) 0–255. Accepts anything Pillow does, plus the
    space-separated hsl() form with a 'deg' hue unit.
    """
    m = _HSL_SPACE_RE.fullmatch(value.strip())
    if m:
        hue = float(m.group(1)) % 360
        value = f"hsl({hue}, {m.group(2)}%, {m.group(3)}%)"
    rgb = ImageColor.getrgb(value)
    return rgb[0], rgb[1], rgb[2]


def to_unit_rgb(value: str) -> tuple[float, float, float]:
    """Parse a CSS color to (r, g, b) floats in [0, 1]."""
    r, g, b = parse_color(value)
    return r / 255.0, g / 255.0, b / 255.0
