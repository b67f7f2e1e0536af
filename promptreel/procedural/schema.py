"""
Schema for the style derived from a prompt, and the per-keyword patches that shape it.
"""
from dataclasses import asdict, dataclass
from typing import Any

MOTION_STYLES = ("wave", "particle", "burst", "nebula")
MOODS = ("calm", "dynamic", "dreamy", "intense")

PARTICLE_COUNT_MIN = 80
PARTICLE_COUNT_MAX = 260


@dataclass(frozen=True)
class StyleDescriptor:
    """
    Immutable visual parameters for one generation run. Every frame of one video
    reads the same descriptor.
    """
    palette: tuple[str, str, str, str]  # CSS colors; used positionally
    motion_style: str = "wave"          # wave | particle | burst | nebula
    particle_count: int = 150           # clamped to [80, 260] by the extractor
    wave_height: float = 0.7
    warp_factor: float = 1.0
    sparkle: bool = False
    grain: float = 0.35                 # 0–1, scales grain overlay opacity
    speed: float = 1.0                  # > 0, scales time for all motion
    mood: str = "dreamy"                # calm | dynamic | dreamy | intense
    keywords: tuple[str, ...] = ()      # matched keywords in table order (informational)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging and CLI output."""
        d = asdict(self)
        d["palette"] = list(self.palette)
        d["keywords"] = list(self.keywords)
        return d


@dataclass(frozen=True)
class StylePatch:
    """Optional-field override contributed by one keyword. None leaves a field untouched."""
    motion_style: str | None = None
    mood: str | None = None
    particle_count: int | None = None
    wave_height: float | None = None
    warp_factor: float | None = None
    sparkle: bool | None = None
    grain: float | None = None
    speed: float | None = None

    def apply(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of fields with this patch's set values written over it."""
        out = dict(fields)
        if self.motion_style is not None:
            out["motion_style"] = self.motion_style
        if self.mood is not None:
            out["mood"] = self.mood
        if self.particle_count is not None:
            out["particle_count"] = self.particle_count
        if self.wave_height is not None:
            out["wave_height"] = self.wave_height
        if self.warp_factor is not None:
            out["warp_factor"] = self.warp_factor
        if self.sparkle is not None:
            out["sparkle"] = self.sparkle
        if self.grain is not None:
            out["grain"] = self.grain
        if self.speed is not None:
            out["speed"] = self.speed
        return out
