"""
Graphics: drawing surface with blend modes, CSS color parsing.
"""
from .canvas import BLEND_MODES, Canvas
from .colors import parse_color, to_unit_rgb

__all__ = ["BLEND_MODES", "Canvas", "parse_color", "to_unit_rgb"]
