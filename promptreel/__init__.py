"""
promptreel: prompt → deterministic procedural animation → video file.
"""
from .driver import STAGES, RenderState, RunHandle, Studio, stage_for_progress
from .errors import EmptyPromptError, EnvironmentUnsupportedError, GenerationError
from .pipeline import generate_video
from .procedural import StyleDescriptor, extract_features, make_noise_field, render_frame
from .random_utils import hash_prompt, mulberry32

__all__ = [
    "STAGES",
    "RenderState",
    "RunHandle",
    "Studio",
    "stage_for_progress",
    "EmptyPromptError",
    "EnvironmentUnsupportedError",
    "GenerationError",
    "generate_video",
    "StyleDescriptor",
    "extract_features",
    "make_noise_field",
    "render_frame",
    "hash_prompt",
    "mulberry32",
]
