"""
Encoding collaborator: takes drawn frames one at a time and produces a single video file.
Codec negotiation (best available from an ordered preference list) lives here, not in the renderer.
"""
import logging
import subprocess
from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any

import numpy as np

from .config import get_output_dir, load_config
from .errors import EnvironmentUnsupportedError

logger = logging.getLogger(__name__)


class FrameEncoder(ABC):
    """
    Receives frames from the driver. open() happens before the first frame is drawn so an
    unusable environment fails the run early; finalize() may be called after any number
    of frames (including a partial run on cancellation).
    """

    @abstractmethod
    def open(self, width: int, height: int, fps: float) -> None:
        ...

    @abstractmethod
    def append(self, frame: "np.ndarray") -> None:
        """Append one (H, W, 3) uint8 frame."""
        ...

    @abstractmethod
    def finalize(self) -> Path | None:
        """Flush and close. Returns the written file, or None if nothing was written."""
        ...

    @abstractmethod
    def abort(self) -> None:
        """Close without keeping output (run failed)."""
        ...


@lru_cache(maxsize=4)
def available_encoders(ffmpeg_exe: str) -> frozenset[str]:
    """Names of video encoders compiled into the given ffmpeg binary."""
    try:
        r = subprocess.run(
            [ffmpeg_exe, "-hide_banner", "-encoders"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise EnvironmentUnsupportedError(f"Could not query ffmpeg encoders: {e}") from e
    if r.returncode != 0:
        return frozenset()
    names = set()
    in_table = False
    for line in (r.stdout or "").splitlines():
        # The legend above the " ------" rule uses the same flag column
        if line.strip().startswith("---"):
            in_table = True
            continue
        parts = line.split()
        # Encoder rows look like " V....D libx264   libx264 H.264 ..."
        if in_table and len(parts) >= 2 and parts[0].startswith("V") and len(parts[0]) == 6:
            names.add(parts[1])
    return frozenset(names)


def find_ffmpeg() -> str:
    """Path to the ffmpeg binary bundled with (or located by) imageio-ffmpeg."""
    try:
        import imageio_ffmpeg
    except ImportError:
        raise EnvironmentUnsupportedError(
            "Video encoding needs 'imageio-ffmpeg'. Install with: pip install imageio imageio-ffmpeg"
        ) from None
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as e:
        raise EnvironmentUnsupportedError(f"No ffmpeg binary available: {e}") from e


def negotiate_codec(
    preferences: list[dict[str, str]],
    supported: frozenset[str],
) -> tuple[str, str]:
    """First (codec, extension) from preferences that the encoder set supports."""
    for entry in preferences:
        codec = entry.get("codec")
        if codec and codec in supported:
            return codec, entry.get("ext") or ".mp4"
    wanted = ", ".join(e.get("codec", "?") for e in preferences)
    raise EnvironmentUnsupportedError(f"Unable to initialize video encoder (none of: {wanted}).")


def _next_filename(config: dict[str, Any], ext: str) -> str:
    """prefix + timestamp to avoid overwrites."""
    prefix = config.get("output", {}).get("filename_prefix", "reel")
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}{ext}"


class ImageioEncoder(FrameEncoder):
    """Writes frames through imageio's ffmpeg plugin using the best supported codec."""

    def __init__(self, output_path: Path | None = None, *, config: dict[str, Any] | None = None):
        self._config = config if config is not None else load_config()
        self._requested_path = Path(output_path) if output_path is not None else None
        self._writer = None
        self._frames = 0
        self.codec: str | None = None
        self.output_path: Path | None = None

    def _resolve_path(self, ext: str) -> Path:
        if self._requested_path is None:
            out_dir = get_output_dir(self._config)
            return out_dir / _next_filename(self._config, ext)
        path = self._requested_path
        if path.suffix == "":
            path = path.with_suffix(ext)
        return path

    def open(self, width: int, height: int, fps: float) -> None:
        try:
            import imageio
        except ImportError:
            raise EnvironmentUnsupportedError(
                "Video encoding needs 'imageio'. Install with: pip install imageio imageio-ffmpeg"
            ) from None

        enc_cfg = self._config.get("encoding", {})
        preferences = enc_cfg.get("codecs") or []
        codec, ext = negotiate_codec(preferences, available_encoders(find_ffmpeg()))

        path = self._resolve_path(ext)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._writer = imageio.get_writer(
            str(path),
            format="FFMPEG",
            fps=fps,
            codec=codec,
            quality=enc_cfg.get("quality", 8),
            macro_block_size=8,
        )
        self.codec = codec
        self.output_path = path
        self._frames = 0
        logger.info("Encoding %dx%d @ %s fps with %s → %s", width, height, fps, codec, path)

    def append(self, frame: "np.ndarray") -> None:
        if self._writer is None:
            raise RuntimeError("ImageioEncoder.append called before open()")
        self._writer.append_data(frame)
        self._frames += 1

    def finalize(self) -> Path | None:
        if self._writer is None:
            return None
        writer, self._writer = self._writer, None
        writer.close()
        if self._frames == 0:
            if self.output_path is not None:
                self.output_path.unlink(missing_ok=True)
            return None
        logger.info("Wrote %d frames to %s", self._frames, self.output_path)
        return self.output_path

    def abort(self) -> None:
        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        try:
            writer.close()
        finally:
            if self.output_path is not None:
                self.output_path.unlink(missing_ok=True)
