"""
Deterministic hashing and seeded random streams for style extraction and the noise field.
All arithmetic is fixed-width 32-bit unsigned; overflow wraps, nothing raises.
"""
import random
from typing import Callable

MASK32 = 0xFFFFFFFF

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

MULBERRY_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply (low 32 bits of the product)."""
    return ((a & MASK32) * (b & MASK32)) & MASK32


def _utf16_units(text: str):
    """Yield UTF-16 code units so astral characters hash as surrogate pairs."""
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            yield 0xD800 + (cp >> 10)
            yield 0xDC00 + (cp & 0x3FF)
        else:
            yield cp


def hash_prompt(text: str) -> int:
    """
    FNV-1a 32-bit hash of text. Stable across platforms and runs.
    Does not case-fold; callers lowercase first when they want case-insensitivity.
    """
    h = FNV_OFFSET_BASIS
    for unit in _utf16_units(text):
        h ^= unit
        h = _imul(h, FNV_PRIME)
    return h & MASK32


def mulberry32(seed: int) -> Callable[[], float]:
    """
    Seeded generator of floats in [0, 1). The Nth call after a given seed always returns
    the same value; each generator owns its own 32-bit state.
    """
    state = seed & MASK32

    def _next() -> float:
        nonlocal state
        state = (state + MULBERRY_INCREMENT) & MASK32
        t = _imul(state ^ (state >> 15), 1 | state)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & MASK32) ^ t
        return ((t ^ (t >> 14)) & MASK32) / 4294967296

    return _next


def cosmetic_random() -> random.Random:
    """Unseeded random source for purely cosmetic per-frame flicker (film grain)."""
    return random.Random()
