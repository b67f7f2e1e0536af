"""
Drawing surface for the renderer: an opaque RGB float buffer with 2D-context style primitives
and composite modes (normal, screen, lighter, overlay, difference).
Shapes are rasterized to coverage masks with Pillow, then blended with numpy.
"""
from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np
from PIL import Image, ImageDraw

from .colors import to_unit_rgb

Color = str | tuple[float, float, float]

# Supersampling factor for thin strokes so sub-pixel widths still get partial coverage
_LINE_SUPERSAMPLE = 4


def _blend_normal(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return np.broadcast_to(src, dst.shape)


def _blend_screen(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return 1.0 - (1.0 - dst) * (1.0 - src)


def _blend_overlay(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return np.where(dst <= 0.5, 2.0 * dst * src, 1.0 - 2.0 * (1.0 - dst) * (1.0 - src))


def _blend_difference(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    return np.abs(dst - src)


BLEND_MODES: dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    "normal": _blend_normal,
    "screen": _blend_screen,
    "overlay": _blend_overlay,
    "difference": _blend_difference,
}


def _rgb(color: Color) -> np.ndarray:
    if isinstance(color, str):
        color = to_unit_rgb(color)
    return np.asarray(color, dtype=np.float32)


class Canvas:
    """
    Fixed-size drawing surface. pixels is (height, width, 3) float32 in [0, 1].
    The backdrop is always opaque, so compositing reduces to per-channel blends.
    """

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.float32)

    def clear(self) -> None:
        self.pixels.fill(0.0)

    def to_rgb(self) -> np.ndarray:
        """Current contents as an (H, W, 3) uint8 frame for encoders."""
        return (np.clip(self.pixels, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)

    # --- compositing ---

    def composite(
        self,
        box: tuple[int, int, int, int],
        coverage: np.ndarray,
        color: Color,
        alpha: float = 1.0,
        blend: str = "normal",
    ) -> None:
        """Blend color into the box (x0, y0, x1, y1) weighted by coverage (H, W) in [0, 1]."""
        x0, y0, x1, y1 = box
        if x1 <= x0 or y1 <= y0:
            return
        region = self.pixels[y0:y1, x0:x1]
        src = _rgb(color)
        a = (coverage.astype(np.float32) * np.float32(alpha))[..., None]
        if blend == "lighter":
            region += src * a
            np.minimum(region, 1.0, out=region)
            return
        mode = BLEND_MODES.get(blend)
        if mode is None:
            raise ValueError(f"Unknown blend mode: {blend}")
        region[...] = region * (1.0 - a) + mode(region, src) * a

    def _clip_box(self, x0: float, y0: float, x1: float, y1: float) -> tuple[int, int, int, int]:
        return (
            max(0, int(math.floor(x0))),
            max(0, int(math.floor(y0))),
            min(self.width, int(math.ceil(x1))),
            min(self.height, int(math.ceil(y1))),
        )

    def _mask(
        self,
        box: tuple[int, int, int, int],
        draw: Callable[[ImageDraw.ImageDraw, Callable[[float, float], tuple[float, float]]], None],
        scale: int = 1,
    ) -> np.ndarray:
        """Rasterize a shape into a coverage mask for box, optionally supersampled."""
        x0, y0, x1, y1 = box
        w, h = (x1 - x0) * scale, (y1 - y0) * scale
        img = Image.new("L", (w, h), 0)

        def to_local(x: float, y: float) -> tuple[float, float]:
            return (x - x0) * scale, (y - y0) * scale

        draw(ImageDraw.Draw(img), to_local)
        mask = np.asarray(img, dtype=np.float32) / 255.0
        if scale > 1:
            mask = mask.reshape(y1 - y0, scale, x1 - x0, scale).mean(axis=(1, 3))
        return mask

    # --- primitives ---

    def fill_vertical_gradient(
        self,
        colors: Sequence[Color],
        stops: Sequence[float],
        alpha: float = 1.0,
        blend: str = "normal",
    ) -> None:
        """Linear gradient from top (0) to bottom (1) through colors at stops, full surface."""
        rgb = np.stack([_rgb(c) for c in colors])
        t = (np.arange(self.height, dtype=np.float32) + 0.5) / self.height
        column = np.stack([np.interp(t, stops, rgb[:, ch]) for ch in range(3)], axis=-1)
        layer = np.broadcast_to(column[:, None, :], self.pixels.shape).astype(np.float32)
        if blend == "normal" and alpha >= 1.0:
            self.pixels[...] = layer
            return
        a = np.float32(alpha)
        mode = BLEND_MODES[blend]
        self.pixels[...] = self.pixels * (1.0 - a) + mode(self.pixels, layer) * a

    def fill_polygon(
        self,
        points: Sequence[tuple[float, float]],
        color: Color,
        alpha: float = 1.0,
        blend: str = "normal",
    ) -> None:
        if len(points) < 3:
            return
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        box = self._clip_box(min(xs), min(ys), max(xs) + 1, max(ys) + 1)
        if box[2] <= box[0] or box[3] <= box[1]:
            return
        mask = self._mask(
            box,
            lambda d, local: d.polygon([local(x, y) for x, y in points], fill=255),
        )
        self.composite(box, mask, color, alpha, blend)

    def fill_circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        color: Color,
        alpha: float = 1.0,
        blend: str = "normal",
    ) -> None:
        """Filled disc with a one-pixel anti-aliased rim."""
        if radius <= 0:
            return
        box = self._clip_box(cx - radius - 1, cy - radius - 1, cx + radius + 1, cy + radius + 1)
        x0, y0, x1, y1 = box
        if x1 <= x0 or y1 <= y0:
            return
        yy, xx = np.ogrid[y0:y1, x0:x1]
        dist = np.sqrt((xx + 0.5 - cx) ** 2 + (yy + 0.5 - cy) ** 2)
        coverage = np.clip(radius - dist + 0.5, 0.0, 1.0)
        self.composite(box, coverage, color, alpha, blend)

    def stroke_line(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        color: Color,
        alpha: float = 1.0,
        width: float = 1.0,
        blend: str = "normal",
    ) -> None:
        pad = width / 2 + 1
        box = self._clip_box(
            min(start[0], end[0]) - pad,
            min(start[1], end[1]) - pad,
            max(start[0], end[0]) + pad,
            max(start[1], end[1]) + pad,
        )
        if box[2] <= box[0] or box[3] <= box[1]:
            return
        s = _LINE_SUPERSAMPLE
        mask = self._mask(
            box,
            lambda d, local: d.line([local(*start), local(*end)], fill=255, width=max(1, round(width * s))),
            scale=s,
        )
        self.composite(box, mask, color, alpha, blend)

    def fill_rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        color: Color,
        alpha: float = 1.0,
        blend: str = "normal",
    ) -> None:
        """Pixel-snapped rectangle."""
        x0, y0 = int(math.floor(x)), int(math.floor(y))
        box = self._clip_box(x0, y0, x0 + w, y0 + h)
        bw, bh = box[2] - box[0], box[3] - box[1]
        if bw <= 0 or bh <= 0:
            return
        self.composite(box, np.ones((bh, bw), dtype=np.float32), color, alpha, blend)
