"""
Translator exceptions.

Kept in their own module so that backends, the scheduler and the pipeline can
share them without importing each other.
"""
from typing import Optional


class TranslatorError(Exception):
    """Base error with an optional machine-readable code and details."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(TranslatorError):
    """Raised when a backend cannot be built from the given options."""


class BackendUnavailableError(TranslatorError):
    """The backend kept failing (not ready, network, timeout) until the retry policy gave up."""


class ItemTranslationError(TranslatorError):
    """
    A single item could not be translated.

    Backends catch this themselves and fall back to the original text, so it
    never reaches the scheduler.
    """

    def __init__(self, kind: str, detail: str):
        super().__init__(f"{kind}: {detail}", code=kind)
        self.kind = kind
        self.detail = detail


class TranslationRunError(TranslatorError):
    """A chunk failed hard; the whole run is aborted and no output is produced."""

    def __init__(self, message: str, chunk_index: int, total_chunks: int):
        super().__init__(message, code="run_failed",
                         details={"chunk_index": chunk_index, "total_chunks": total_chunks})
        self.chunk_index = chunk_index
        self.total_chunks = total_chunks
