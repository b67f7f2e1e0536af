"""
Procedural frame renderer: descriptor + noise + time → one frame on a canvas. No external model.
Draw order: background gradient, wave bands (screen), particle field (lighter), grain (overlay
or difference). Everything except the grain speck positions is a pure function of the inputs.
"""
from __future__ import annotations

import math
from typing import Callable, Protocol

import numpy as np

from ..graphics.canvas import Canvas
from ..random_utils import cosmetic_random
from .schema import StyleDescriptor

GRADIENT_STOPS = (0.0, 0.4, 0.75, 1.0)

WAVE_LAYERS = 5
WAVE_STEP_PX = 6
WAVE_BASELINE = 0.65
WAVE_ALPHA = 0x66 / 255

PARTICLE_ALPHA = 0xAA / 255
SPARKLE_EVERY = 16
SPARKLE_ALPHA = 0x66 / 255
SPARKLE_LINE_WIDTH = 1.5

GRAIN_SPECKS = 60
GRAIN_SPECK_PX = 2
GRAIN_COLOR = (8 / 255, 11 / 255, 26 / 255)

# Vertical anchor of the particle orbit, as a fraction of height
_PARTICLE_ANCHOR_Y = {"wave": 0.55, "nebula": 0.5}
_PARTICLE_ANCHOR_Y_DEFAULT = 0.6

NoiseField = Callable[..., "np.ndarray | float"]


class RandomSource(Protocol):
    def random(self) -> float: ...


def scene_time(elapsed_ms: float, speed: float) -> float:
    """Seconds of animation time after speed scaling."""
    return elapsed_ms * 0.001 * speed


def _draw_background(surface: Canvas, palette: tuple[str, ...]) -> None:
    surface.fill_vertical_gradient(palette, GRADIENT_STOPS)


def wave_points(
    noise: NoiseField,
    layer: int,
    time: float,
    width: int,
    height: int,
    wave_height: float,
    warp_factor: float,
) -> list[tuple[float, float]]:
    """Closed outline of one wave band: the crest from x=0..width, then down to the bottom edge."""
    amplitude = wave_height * 50 * (1 - layer / WAVE_LAYERS) + layer * 6
    xs = np.arange(0, width + 1, WAVE_STEP_PX, dtype=np.float64)
    nx = xs / width
    crest = (
        height * WAVE_BASELINE
        + noise(nx * 1.6 + layer * 0.2, time * 0.8 + layer * 0.5, layer * 0.3) * amplitude
        + np.sin(nx * math.pi * 2 + time * warp_factor) * amplitude * 0.4
    )
    points = list(zip(xs.tolist(), np.asarray(crest).tolist()))
    points.append((float(width), float(height)))
    points.append((0.0, float(height)))
    return points


def _draw_waves(surface: Canvas, noise: NoiseField, features: StyleDescriptor, time: float) -> None:
    palette = features.palette
    for layer in range(WAVE_LAYERS):
        points = wave_points(
            noise, layer, time, surface.width, surface.height,
            features.wave_height, features.warp_factor,
        )
        surface.fill_polygon(points, palette[layer % len(palette)], WAVE_ALPHA, blend="screen")


def particle_layout(
    noise: NoiseField,
    features: StyleDescriptor,
    time: float,
    width: int,
    height: int,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """(x, y, size) arrays for every particle at this time. Vectorized over particle index."""
    count = features.particle_count
    style = features.motion_style
    i = np.arange(count, dtype=np.float64)
    seed_offset = i * 13.37

    revolutions = 6 if style == "burst" else 2
    spin = 1.4 if style == "particle" else 0.5
    angle = noise(i * 0.05, time * 0.3, seed_offset) * math.pi * revolutions + time * spin
    radius = (noise(i * 0.3, time * 0.6 + seed_offset, seed_offset * 0.2) + 1) / 2 * (width * 0.5)

    center_x = width / 2
    center_y = height * _PARTICLE_ANCHOR_Y.get(style, _PARTICLE_ANCHOR_Y_DEFAULT)
    x = center_x + np.cos(angle) * radius
    y = center_y + np.sin(angle) * radius * 0.6
    size = (noise(seed_offset, time * 0.8, i * 0.08) + 1.4) / 2.4 * (6 if style == "burst" else 3)
    return np.atleast_1d(x), np.atleast_1d(y), np.atleast_1d(size)


def _draw_particles(surface: Canvas, noise: NoiseField, features: StyleDescriptor, time: float) -> None:
    if features.particle_count <= 0:
        return
    palette = features.palette
    xs, ys, sizes = particle_layout(noise, features, time, surface.width, surface.height)
    for i, (x, y, size) in enumerate(zip(xs.tolist(), ys.tolist(), sizes.tolist())):
        color = palette[i % len(palette)]
        surface.fill_circle(x, y, size, color, PARTICLE_ALPHA, blend="lighter")
        if features.sparkle and i % SPARKLE_EVERY == 0:
            arm = size * 2
            surface.stroke_line((x - arm, y), (x + arm, y), color, SPARKLE_ALPHA, SPARKLE_LINE_WIDTH, blend="lighter")
            surface.stroke_line((x, y - arm), (x, y + arm), color, SPARKLE_ALPHA, SPARKLE_LINE_WIDTH, blend="lighter")


def _draw_grain(surface: Canvas, features: StyleDescriptor, grain_random: RandomSource) -> None:
    blend = "difference" if features.mood == "intense" else "overlay"
    global_alpha = 0.09 + features.grain * 0.06
    for _ in range(GRAIN_SPECKS):
        x = grain_random.random() * surface.width
        y = grain_random.random() * surface.height
        speck_alpha = 0.3 + grain_random.random() * 0.3
        surface.fill_rect(
            x, y, GRAIN_SPECK_PX, GRAIN_SPECK_PX,
            GRAIN_COLOR, global_alpha * speck_alpha, blend=blend,
        )


def render_frame(
    surface: Canvas,
    noise: NoiseField,
    features: StyleDescriptor,
    elapsed_ms: float,
    progress: float,
    *,
    grain_random: RandomSource | None = None,
) -> None:
    """
    Draw exactly one frame onto surface, replacing whatever was there.
    progress is accepted for the driver contract but does not change pixels.
    grain_random is the only non-deterministic input (film-grain flicker); inject a seeded
    source to get pixel-identical frames for identical arguments.
    """
    del progress
    if grain_random is None:
        grain_random = cosmetic_random()
    time = scene_time(elapsed_ms, features.speed)

    surface.clear()
    _draw_background(surface, features.palette)
    _draw_waves(surface, noise, features, time)
    _draw_particles(surface, noise, features, time)
    _draw_grain(surface, features, grain_random)
