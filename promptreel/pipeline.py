"""
Pipeline: one prompt → one video file. Wraps a Studio run and turns a failed run into an error.
"""
import logging
from pathlib import Path
from typing import Any, Callable

from .config import load_config
from .driver import FAILED, Studio
from .encoding import FrameEncoder
from .errors import GenerationError

logger = logging.getLogger(__name__)


def generate_video(
    prompt: str,
    *,
    output_path: Path | None = None,
    config: dict[str, Any] | None = None,
    encoder: FrameEncoder | None = None,
    on_stage: Callable[[str], None] | None = None,
) -> Path | None:
    """
    Render the full fixed-length sequence for prompt and return the encoded file.
    Raises EmptyPromptError or GenerationError (encoder setup included) before drawing, and
    GenerationError if the run fails part way.
    """
    if config is None:
        config = load_config()
    factory = (lambda _path: encoder) if encoder is not None else None
    studio = Studio(config, encoder_factory=factory)

    handle = studio.generate(prompt, output_path=output_path, on_stage=on_stage)
    logger.info("Run finished: %s", handle.summary())
    if handle.status == FAILED:
        raise GenerationError(handle.error or "Generation failed.", prompt=prompt)
    return handle.output_path
