"""
Prompt → StyleDescriptor: determinism, keyword precedence, jitter clamps.
"""
import dataclasses
import math
import re
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from promptreel.procedural.data import KEYWORD_PALETTES, KEYWORD_STYLES
from promptreel.procedural.parser import extract_features, generate_palette, match_keywords
from promptreel.procedural.schema import StyleDescriptor, StylePatch
from promptreel.random_utils import hash_prompt

SAMPLE_PROMPTS = [
    "",
    "   ",
    "a",
    "An aurora lights up a futuristic city skyline reflected on water",
    "a calm ocean and a neon city",
    "fire storm over the desert",
    "zen garden at dawn",
    "cyber dream cosmic forest",
    "completely unrelated words about accounting",
    "OCEAN",
    "x" * 2000,
    "星空の下で",
]

_HSL_RE = re.compile(r"hsl\((\d+)deg (\d+)% (\d+)%\)")


class TestExtractFeatures(unittest.TestCase):

    def test_deterministic(self):
        for p in SAMPLE_PROMPTS:
            self.assertEqual(extract_features(p), extract_features(p))

    def test_palette_always_four(self):
        for p in SAMPLE_PROMPTS:
            self.assertEqual(len(extract_features(p).palette), 4)

    def test_clamps_hold(self):
        for i in range(300):
            f = extract_features(f"prompt number {i} storm forest")
            self.assertGreaterEqual(f.particle_count, 80)
            self.assertLessEqual(f.particle_count, 260)
            self.assertGreater(f.speed, 0)

    def test_empty_prompt_uses_default_token(self):
        self.assertEqual(extract_features(""), extract_features("default"))

    def test_case_insensitive(self):
        self.assertEqual(extract_features("Ocean Waves"), extract_features("ocean waves"))

    def test_keyword_precedence(self):
        """First keyword in table order picks palette; every match patches style in table order."""
        f = extract_features("a calm ocean and a neon city")
        self.assertEqual(f.keywords, ("ocean", "neon"))
        self.assertEqual(f.palette, KEYWORD_PALETTES["ocean"])
        self.assertEqual(f.motion_style, "particle")  # neon overwrote ocean's wave
        self.assertEqual(f.mood, "dynamic")
        self.assertTrue(f.sparkle)
        self.assertEqual(f.wave_height, 0.9)  # set by ocean, untouched by neon

    def test_table_order_not_prompt_order(self):
        f = extract_features("neon lights over the ocean")
        self.assertEqual(f.keywords, ("ocean", "neon"))
        self.assertEqual(f.palette, KEYWORD_PALETTES["ocean"])
        self.assertEqual(f.motion_style, "particle")

    def test_aurora_scenario(self):
        prompt = "An aurora lights up a futuristic city skyline reflected on water"
        f = extract_features(prompt)
        self.assertEqual(f.keywords, ("aurora",))
        self.assertEqual(f.palette, ("#7c3aed", "#22d3ee", "#22c55e", "#0f172a"))
        self.assertEqual(f.motion_style, "nebula")
        self.assertEqual(f.mood, "dreamy")
        self.assertEqual(f.warp_factor, 1.1)
        self.assertEqual(f.wave_height, 0.7)
        self.assertFalse(f.sparkle)

        h = hash_prompt(prompt.lower())
        expected_count = max(80, min(260, 150 + math.floor(((h & 0xFF) / 255) * 60 - 30)))
        self.assertEqual(f.particle_count, expected_count)
        self.assertAlmostEqual(f.speed, 1.0 * (0.8 + ((h >> 8) & 0xFF) / 255))

    def test_jitter_range(self):
        """particle_count stays within ±30 of the keyword/default base before clamping."""
        for p in ("zen", "zen pond", "zen rocks", "zen moss and sand"):
            f = extract_features(p)
            self.assertGreaterEqual(f.particle_count, 120)
            self.assertLessEqual(f.particle_count, 180)
            self.assertGreaterEqual(f.speed, 0.7 * 0.8)
            self.assertLessEqual(f.speed, 0.7 * 1.8)

    def test_substring_matching(self):
        f = extract_features("a dreamy haze")
        self.assertIn("dream", f.keywords)
        self.assertEqual(f.palette, KEYWORD_PALETTES["dream"])
        self.assertEqual(f.grain, 0.45)

    def test_palette_only_keyword(self):
        f = extract_features("desert dunes")
        self.assertEqual(f.palette, KEYWORD_PALETTES["desert"])
        self.assertNotIn("desert", KEYWORD_STYLES)
        self.assertEqual(f.motion_style, "wave")
        self.assertEqual(f.mood, "dreamy")

    def test_fire_beats_desert_for_palette(self):
        f = extract_features("desert fire")
        self.assertEqual(f.keywords, ("fire", "desert"))
        self.assertEqual(f.palette, KEYWORD_PALETTES["fire"])
        self.assertEqual(f.mood, "intense")

    def test_procedural_palette_without_keywords(self):
        prompt = "completely unrelated words about accounting"
        f = extract_features(prompt)
        self.assertEqual(f.keywords, ())
        self.assertEqual(f.palette, generate_palette(hash_prompt(prompt) ^ 0x9E3779B1))
        for color in f.palette:
            m = _HSL_RE.fullmatch(color)
            self.assertIsNotNone(m, color)
            hue, sat, light = (int(g) for g in m.groups())
            self.assertTrue(0 <= hue < 360)
            self.assertTrue(40 <= sat < 85)
            self.assertTrue(35 <= light < 70)

    def test_related_prompts_differ(self):
        a = extract_features("ocean at noon")
        b = extract_features("ocean at midnight")
        self.assertEqual(a.palette, b.palette)
        self.assertNotEqual((a.particle_count, a.speed), (b.particle_count, b.speed))

    def test_descriptor_is_immutable(self):
        f = extract_features("storm")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            f.speed = 3.0

    def test_to_dict(self):
        d = extract_features("fire").to_dict()
        self.assertEqual(d["palette"], list(KEYWORD_PALETTES["fire"]))
        self.assertEqual(d["keywords"], ["fire"])
        self.assertEqual(d["motion_style"], "burst")


class TestKeywordTables(unittest.TestCase):

    def test_eleven_palettes_of_four(self):
        self.assertEqual(len(KEYWORD_PALETTES), 11)
        for colors in KEYWORD_PALETTES.values():
            self.assertEqual(len(colors), 4)

    def test_styles_are_subset_of_palettes(self):
        self.assertTrue(set(KEYWORD_STYLES) <= set(KEYWORD_PALETTES))

    def test_match_keywords_in_table_order(self):
        self.assertEqual(match_keywords("zen ocean"), ["ocean", "zen"])
        self.assertEqual(match_keywords("nothing here"), [])


class TestStylePatch(unittest.TestCase):

    def test_only_set_fields_change(self):
        base = {"motion_style": "wave", "mood": "dreamy", "speed": 1.0, "sparkle": False}
        out = StylePatch(mood="calm", sparkle=True).apply(base)
        self.assertEqual(out, {"motion_style": "wave", "mood": "calm", "speed": 1.0, "sparkle": True})
        self.assertEqual(base["mood"], "dreamy")

    def test_false_and_zero_are_values(self):
        out = StylePatch(sparkle=False, particle_count=0).apply({"sparkle": True, "particle_count": 150})
        self.assertEqual(out, {"sparkle": False, "particle_count": 0})

    def test_descriptor_defaults(self):
        d = StyleDescriptor(palette=("#000000",) * 4)
        self.assertEqual(d.motion_style, "wave")
        self.assertEqual(d.particle_count, 150)
