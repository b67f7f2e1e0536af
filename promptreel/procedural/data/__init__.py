from .keywords import DEFAULT_TOKEN, KEYWORD_PALETTES, KEYWORD_STYLES, PALETTE_SEED_MIX

__all__ = ["DEFAULT_TOKEN", "KEYWORD_PALETTES", "KEYWORD_STYLES", "PALETTE_SEED_MIX"]
