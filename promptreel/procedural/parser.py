"""
Prompt → style descriptor using only our keyword tables and the prompt hash. No model.
Two stages: discrete keyword styling, then continuous hash-derived jitter, so prompts that
share a keyword look related while every exact prompt still renders differently.
"""
from __future__ import annotations

import math
from typing import Any

from ..random_utils import hash_prompt, mulberry32
from .data import DEFAULT_TOKEN, KEYWORD_PALETTES, KEYWORD_STYLES, PALETTE_SEED_MIX
from .schema import PARTICLE_COUNT_MAX, PARTICLE_COUNT_MIN, StyleDescriptor

_DEFAULT_FIELDS: dict[str, Any] = {
    "motion_style": "wave",
    "particle_count": 150,
    "wave_height": 0.7,
    "warp_factor": 1.0,
    "sparkle": False,
    "grain": 0.35,
    "speed": 1.0,
    "mood": "dreamy",
}


def hsl_string(hue: int, saturation: int, lightness: int) -> str:
    """CSS color level 4 hsl() string, e.g. 'hsl(210deg 60% 45%)'."""
    return f"hsl({hue}deg {saturation}% {lightness}%)"


def generate_palette(seed: int) -> tuple[str, str, str, str]:
    """Four procedural colors from a seed: hue 0–359, saturation 40–84, lightness 35–69."""
    random = mulberry32(seed)
    colors: list[str] = []
    for _ in range(4):
        hue = math.floor(random() * 360)
        saturation = 40 + math.floor(random() * 45)
        lightness = 35 + math.floor(random() * 35)
        colors.append(hsl_string(hue, saturation, lightness))
    return (colors[0], colors[1], colors[2], colors[3])


def match_keywords(normalized: str) -> list[str]:
    """Keywords appearing anywhere in the normalized prompt, in table order (not prompt order)."""
    return [kw for kw in KEYWORD_PALETTES if kw in normalized]


def extract_features(prompt: str) -> StyleDescriptor:
    """
    Turn a prompt into a StyleDescriptor. Deterministic: the same prompt always yields an
    identical descriptor. Never raises; an empty prompt hashes the default token.

    Palette comes from the FIRST matching keyword only, while style patches from ALL matching
    keywords apply in table order (later ones overwrite the fields they set).
    """
    normalized = (prompt or "").lower()
    h = hash_prompt(normalized or DEFAULT_TOKEN)
    keywords = match_keywords(normalized)

    if keywords:
        palette = KEYWORD_PALETTES[keywords[0]]
    else:
        palette = generate_palette(h ^ PALETTE_SEED_MIX)

    fields = dict(_DEFAULT_FIELDS)
    for kw in keywords:
        patch = KEYWORD_STYLES.get(kw)
        if patch is None:
            continue
        fields = patch.apply(fields)

    jitter = math.floor(((h & 0xFF) / 255) * 60 - 30)
    fields["particle_count"] = max(
        PARTICLE_COUNT_MIN,
        min(PARTICLE_COUNT_MAX, int(fields["particle_count"]) + jitter),
    )
    fields["speed"] = float(fields["speed"]) * (0.8 + ((h >> 8) & 0xFF) / 255)

    return StyleDescriptor(palette=tuple(palette), keywords=tuple(keywords), **fields)
