"""
Animation driver: samples the renderer at a fixed logical frame rate for a fixed duration and
hands each frame to the encoder. One RunHandle per generation; a Studio keeps at most one
active run and tears the previous one down before starting the next.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from .config import frame_geometry, load_config
from .encoding import FrameEncoder, ImageioEncoder
from .errors import EmptyPromptError, GenerationError
from .graphics.canvas import Canvas
from .procedural.noise import SimplexNoise3D, make_noise_field
from .procedural.parser import extract_features
from .procedural.renderer import RandomSource, render_frame
from .procedural.schema import StyleDescriptor

logger = logging.getLogger(__name__)

STAGES = (
    "Parsing cinematic intent",
    "Designing volumetric scene",
    "Animating neural keyframes",
    "Applying cinematic grade",
    "Rendering final sequence",
)
READY = "Ready"

PENDING = "pending"
RUNNING = "running"
DONE = "done"
CANCELLED = "cancelled"
FAILED = "failed"

UNEXPECTED_ERROR = "Unexpected error during generation."


def stage_for_progress(progress: float) -> str:
    """Human-readable stage for a progress fraction. Informational only; never affects pixels."""
    if progress < 0.25:
        return STAGES[1]
    if progress < 0.55:
        return STAGES[2]
    if progress < 0.85:
        return STAGES[3]
    return STAGES[4]


@dataclass
class RenderState:
    """Logical clock of one run. Owned by the RunHandle; the renderer only sees copies."""
    frame_index: int = 0
    elapsed_ms: float = 0.0
    progress: float = 0.0


class RunHandle:
    """
    One generation run: descriptor, noise field, surface, encoder and its clock.
    step() draws one logical frame; run() steps to completion; stop() cancels and keeps
    whatever frames were already encoded.
    """

    def __init__(
        self,
        prompt: str,
        features: StyleDescriptor,
        noise: SimplexNoise3D,
        surface: Canvas,
        encoder: FrameEncoder,
        *,
        fps: int,
        duration_ms: float,
        on_stage: Callable[[str], None] | None = None,
        on_frame: Callable[[RenderState], None] | None = None,
        grain_random: RandomSource | None = None,
    ):
        self.prompt = prompt
        self.features = features
        self.noise = noise
        self.surface = surface
        self.encoder = encoder
        self.fps = fps
        self.duration_ms = duration_ms
        self.state = RenderState()
        self.status = PENDING
        self.stage = STAGES[0]
        self.error: str | None = None
        self.output_path: Path | None = None
        self.frames_drawn = 0
        self._on_stage = on_stage
        self._on_frame = on_frame
        self._grain_random = grain_random

    @property
    def active(self) -> bool:
        return self.status in (PENDING, RUNNING)

    @property
    def total_frames(self) -> int:
        """Frames a full run draws: one per tick from 0 ms up to and including the duration."""
        ticks = self.duration_ms * self.fps / 1000.0
        return math.ceil(ticks) + 1

    def _set_stage(self, label: str) -> None:
        if label == self.stage:
            return
        self.stage = label
        if self._on_stage is not None:
            self._on_stage(label)

    def open(self) -> None:
        """Prepare the encoder. Setup failures raise GenerationError before any frame is drawn."""
        try:
            self.encoder.open(self.surface.width, self.surface.height, self.fps)
        except GenerationError as e:
            self.status = FAILED
            self.error = str(e)
            raise
        except Exception as e:
            logger.error("Opening encoder failed for prompt %r: %s", self.prompt, e, exc_info=True)
            self.status = FAILED
            self.error = str(e) or UNEXPECTED_ERROR
            raise GenerationError(self.error, prompt=self.prompt) from e
        self._set_stage(STAGES[1])

    def step(self) -> bool:
        """Draw and encode the next frame. Returns True while more frames are pending."""
        if not self.active:
            return False
        self.status = RUNNING
        try:
            elapsed = self.state.frame_index * 1000.0 / self.fps
            progress = min(1.0, elapsed / self.duration_ms)
            self.state.elapsed_ms = elapsed
            self.state.progress = progress
            self._set_stage(stage_for_progress(progress))
            # on_stage may have cancelled the run; nothing more is drawn once it has
            if self.status != RUNNING:
                return False

            render_frame(
                self.surface, self.noise, self.features, elapsed, progress,
                grain_random=self._grain_random,
            )
            self.encoder.append(self.surface.to_rgb())
            self.frames_drawn += 1
            if self._on_frame is not None:
                self._on_frame(RenderState(self.state.frame_index, elapsed, progress))
        except Exception as e:
            logger.error(
                "Generation failed at frame %d for prompt %r: %s",
                self.state.frame_index, self.prompt, e,
                exc_info=True,
            )
            self._fail(str(e) or UNEXPECTED_ERROR)
            return False

        # An observer may have cancelled the run from on_frame
        if self.status != RUNNING:
            return False
        if progress >= 1.0:
            self._finish(DONE)
            return False
        self.state.frame_index += 1
        return True

    def run(self) -> "RunHandle":
        """Step until the fixed duration elapses, the run is stopped, or it fails."""
        while self.step():
            pass
        return self

    def stop(self) -> Path | None:
        """Cancel: no further frames; the encoder finalizes with what it has. Idempotent."""
        if not self.active:
            return self.output_path
        logger.info("Cancelling run for %r after %d frames", self.prompt, self.frames_drawn)
        self._finish(CANCELLED)
        return self.output_path

    def _finish(self, status: str) -> None:
        try:
            self.output_path = self.encoder.finalize()
        except Exception as e:
            logger.error("Finalizing encoder failed for %r: %s", self.prompt, e, exc_info=True)
            self.status = FAILED
            self.error = str(e) or UNEXPECTED_ERROR
            return
        self.status = status
        if status == DONE:
            self._set_stage(READY)

    def _fail(self, message: str) -> None:
        self.status = FAILED
        self.error = message
        try:
            self.encoder.abort()
        except Exception as e:
            logger.warning("Encoder abort failed for %r: %s", self.prompt, e)

    def summary(self) -> dict[str, Any]:
        """Serialize for logging and CLI output."""
        return {
            "prompt": self.prompt,
            "status": self.status,
            "frames": self.frames_drawn,
            "output_path": str(self.output_path) if self.output_path else None,
            "error": self.error,
            "features": self.features.to_dict(),
        }


class Studio:
    """
    Owns the drawing surface and at most one active run. Starting a new generation stops the
    previous run before the new one draws anything, so frames never interleave on the surface.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        encoder_factory: Callable[[Path | None], FrameEncoder] | None = None,
        grain_random: RandomSource | None = None,
    ):
        self.config = config if config is not None else load_config()
        self.width, self.height, self.fps, self.duration_ms = frame_geometry(self.config)
        self.surface = Canvas(self.width, self.height)
        self._encoder_factory = encoder_factory or (lambda path: ImageioEncoder(path, config=self.config))
        self._grain_random = grain_random
        self.active: RunHandle | None = None

    def stop(self) -> Path | None:
        """Stop the active run, if any."""
        handle, self.active = self.active, None
        if handle is None:
            return None
        return handle.stop()

    def start(
        self,
        prompt: str,
        *,
        output_path: Path | None = None,
        on_stage: Callable[[str], None] | None = None,
        on_frame: Callable[[RenderState], None] | None = None,
    ) -> RunHandle:
        """Prepare a run for prompt. Raises EmptyPromptError, or GenerationError if the encoder cannot open."""
        prompt = (prompt or "").strip()
        if not prompt:
            raise EmptyPromptError("Prompt is empty; describe the scene you want.")

        self.stop()
        if on_stage is not None:
            on_stage(STAGES[0])

        features = extract_features(prompt)
        logger.info(
            "Prompt %r → %s/%s, %d particles, keywords=%s",
            prompt, features.motion_style, features.mood,
            features.particle_count, list(features.keywords),
        )
        handle = RunHandle(
            prompt,
            features,
            make_noise_field(prompt),
            self.surface,
            self._encoder_factory(output_path),
            fps=self.fps,
            duration_ms=self.duration_ms,
            on_stage=on_stage,
            on_frame=on_frame,
            grain_random=self._grain_random,
        )
        handle.open()
        self.active = handle
        return handle

    def generate(self, prompt: str, **kwargs: Any) -> RunHandle:
        """start() then run() to completion."""
        return self.start(prompt, **kwargs).run()
