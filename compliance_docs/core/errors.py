"""Error taxonomy of the document assembly pipeline."""
from __future__ import annotations


class GenerationError(Exception):
    """Base class for failures reported to the user when generating a document."""

    retryable = False


class ValidationIncomplete(GenerationError):
    """Raised when generation is requested before every wizard step is complete."""

    def __init__(self, missing: list[str] | None = None) -> None:
        self.missing = list(missing or [])
        detail = f": {', '.join(self.missing)}" if self.missing else ""
        super().__init__(f"Data belum lengkap{detail}")


class GenerationInProgress(GenerationError):
    """Raised when a generation for the same session is still running."""

    def __init__(self) -> None:
        super().__init__("Dokumen sedang di-generate, tunggu hingga selesai")


class TemplateNotFound(GenerationError):
    """Raised when the template store has no blob for the resolved identifier."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(
            f"Gagal mengambil template {template_id} dari server. Pastikan file template sudah ada."
        )


class RenderFailure(GenerationError):
    """Raised when writing fields/images or serialising the document fails."""


class RenderTimeout(RenderFailure):
    """Raised when template loading or serialisation exceeds its time budget."""

    retryable = True


class SideEffectFailure(Exception):
    """Raised inside the post-generation workflow update; logged, never surfaced."""


class PhotoDecodeError(ValueError):
    """Raised when uploaded bytes cannot be decoded as an image."""


__all__ = [
    "GenerationError",
    "GenerationInProgress",
    "PhotoDecodeError",
    "RenderFailure",
    "RenderTimeout",
    "SideEffectFailure",
    "TemplateNotFound",
    "ValidationIncomplete",
]
