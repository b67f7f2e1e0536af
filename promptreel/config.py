"""
Load and expose app config (YAML). Used by the driver and pipeline to get frame geometry,
output dir, codec preferences, etc.
"""
from pathlib import Path
from typing import Any

import yaml


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config from YAML. Path is optional; defaults to config/default.yaml."""
    if config_path is None:
        config_path = _project_root() / "config" / "default.yaml"
    path = Path(config_path)
    if not path.exists():
        return _defaults()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    merged = _defaults()
    for section, values in data.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section] = {**merged[section], **values}
        else:
            merged[section] = values
    return merged


# Frame geometry is part of the reproducible contract: a prompt only maps to the same
# pixel trace at the same width/height/fps/duration.
_QUALITY_PRESETS: dict[str, tuple[int, int, int]] = {
    "draft": (448, 252, 15),
    "standard": (896, 504, 30),
    "high": (1792, 1008, 30),
}


def _defaults() -> dict[str, Any]:
    return {
        "output": {
            "dir": "output",
            "filename_prefix": "reel",
            "width": 896,
            "height": 504,
            "fps": 30,
            "duration_ms": 5200,
            "quality": None,
        },
        "encoding": {
            # Ordered preference; first codec the ffmpeg build supports wins
            "codecs": [
                {"codec": "libvpx-vp9", "ext": ".webm"},
                {"codec": "libvpx", "ext": ".webm"},
                {"codec": "libx264", "ext": ".mp4"},
            ],
            "quality": 8,
        },
        "logging": {"level": "INFO"},
    }


def resolve_output_config(config: dict[str, Any]) -> dict[str, Any]:
    """Resolve output config: quality preset overrides width/height/fps if set."""
    out = dict(config.get("output") or {})
    quality = out.get("quality")
    if quality and quality in _QUALITY_PRESETS:
        w, h, fps = _QUALITY_PRESETS[quality]
        out["width"] = w
        out["height"] = h
        out["fps"] = fps
    return out


def frame_geometry(config: dict[str, Any] | None = None) -> tuple[int, int, int, float]:
    """Return (width, height, fps, duration_ms) with the contract defaults for missing keys."""
    defaults = _defaults()["output"]
    out = resolve_output_config(config or {})
    width = int(out.get("width") or defaults["width"])
    height = int(out.get("height") or defaults["height"])
    fps = int(out.get("fps") or defaults["fps"])
    duration_ms = float(out.get("duration_ms") or defaults["duration_ms"])
    return width, height, fps, duration_ms


def get_output_dir(config: dict[str, Any]) -> Path:
    """Resolve output directory (relative to project root if needed)."""
    out = config.get("output", {})
    d = out.get("dir", "output")
    p = Path(d)
    if not p.is_absolute():
        p = _project_root() / p
    return p
