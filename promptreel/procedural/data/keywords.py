"""
Our data: keyword → palette and keyword → style patch. Used by the parser.
Table order matters: the first matching keyword picks the palette, every match patches style.
"""
from ..schema import StylePatch

# Four CSS colors each: gradient stops top→bottom, then reused for waves/particles by index
KEYWORD_PALETTES: dict[str, tuple[str, str, str, str]] = {
    "ocean": ("#0ea5e9", "#22d3ee", "#2563eb", "#0f172a"),
    "aurora": ("#7c3aed", "#22d3ee", "#22c55e", "#0f172a"),
    "fire": ("#f97316", "#ef4444", "#facc15", "#7f1d1d"),
    "neon": ("#f472b6", "#22d3ee", "#a855f7", "#1f2937"),
    "forest": ("#15803d", "#4ade80", "#0f766e", "#0b1120"),
    "desert": ("#f59e0b", "#fcd34d", "#f97316", "#1f2937"),
    "cosmic": ("#38bdf8", "#6366f1", "#a855f7", "#020617"),
    "cyber": ("#22d3ee", "#06b6d4", "#facc15", "#082f49"),
    "dream": ("#f9a8d4", "#c084fc", "#60a5fa", "#1f1b3a"),
    "storm": ("#38bdf8", "#1d4ed8", "#0f172a", "#1e293b"),
    "zen": ("#10b981", "#34d399", "#22d3ee", "#0f172a"),
}

# desert only recolors; it has no style patch
KEYWORD_STYLES: dict[str, StylePatch] = {
    "ocean": StylePatch(motion_style="wave", mood="calm", wave_height=0.9),
    "aurora": StylePatch(motion_style="nebula", mood="dreamy", warp_factor=1.1),
    "fire": StylePatch(motion_style="burst", mood="intense", sparkle=True, speed=1.4),
    "neon": StylePatch(motion_style="particle", mood="dynamic", sparkle=True),
    "forest": StylePatch(motion_style="wave", mood="calm", particle_count=120),
    "cosmic": StylePatch(motion_style="nebula", mood="dreamy", warp_factor=1.4),
    "cyber": StylePatch(motion_style="particle", mood="dynamic", speed=1.3),
    "dream": StylePatch(motion_style="nebula", mood="dreamy", sparkle=True, grain=0.45),
    "storm": StylePatch(motion_style="burst", mood="intense", particle_count=180),
    "zen": StylePatch(motion_style="wave", mood="calm", speed=0.7),
}

# Substituted when the normalized prompt is empty, so every input hashes to something
DEFAULT_TOKEN = "default"

# XOR'd into the prompt hash to seed procedural palettes (golden-ratio constant)
PALETTE_SEED_MIX = 0x9E3779B1
