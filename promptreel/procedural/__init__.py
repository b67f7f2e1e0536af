# Procedural engine: keyword tables, hash jitter, simplex noise and a layered frame renderer

from .noise import SimplexNoise3D, make_noise_field
from .parser import extract_features, generate_palette
from .renderer import render_frame
from .schema import StyleDescriptor, StylePatch

__all__ = [
    "SimplexNoise3D",
    "make_noise_field",
    "extract_features",
    "generate_palette",
    "render_frame",
    "StyleDescriptor",
    "StylePatch",
]
