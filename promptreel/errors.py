"""
Errors surfaced to whoever triggers a generation (CLI, pipeline callers).
Core components (hash, style extraction, noise, renderer) never raise for well-typed input.
"""


class GenerationError(Exception):
    """A generation run could not start or did not finish. str(e) is user-facing."""
    def __init__(self, message: str, prompt: str | None = None):
        super().__init__(message)
        self.prompt = prompt


class EnvironmentUnsupportedError(GenerationError):
    """Drawing surface or encoder is unavailable in this runtime. Raised before any frame is drawn."""


class EmptyPromptError(GenerationError):
    """Prompt is empty or whitespace-only; nothing to generate."""
