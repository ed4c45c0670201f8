"""Data model shared by the translation pipeline."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Kinds of per-item failures that degrade to identity translation.
FAILURE_TRANSPORT = "transport"
FAILURE_STATUS = "status"
FAILURE_UNPARSABLE = "unparsable"
FAILURE_EMPTY = "empty"

# Hard failure code for a model that never finished loading.
MODEL_NOT_READY = "not_ready"


@dataclass
class TranslationOptions:
    """Per-run options supplied by the host (CLI, HTTP endpoint or UI)."""
    source_lang: str = "en"
    target_lang: str = "sr"
    preserve_html: bool = True
    translate_comments: bool = False
    chunk_processing: bool = True
    chunk_size: int = 10
    service: str = "huggingface"
    api_key: str = ""
    api_endpoint: str = ""

    @property
    def effective_chunk_size(self) -> Optional[int]:
        """Chunk size to use, or None when everything goes into one chunk."""
        if not self.chunk_processing or self.chunk_size <= 0:
            return None
        return self.chunk_size


@dataclass(frozen=True)
class TranslationRequest:
    items: Tuple[str, ...]
    source_lang: str
    target_lang: str
    model_hint: Optional[str] = None


@dataclass(frozen=True)
class ItemFailure:
    index: int
    kind: str
    detail: str


@dataclass(frozen=True)
class TranslationResult:
    """
    Backend answer for one request.

    ``items`` corresponds positionally to the request items; failed items hold
    their original text and are listed in ``failures``.
    """
    items: Tuple[str, ...]
    model_used: str
    failures: Tuple[ItemFailure, ...] = ()


@dataclass(frozen=True)
class ProgressState:
    completed_fraction: float
    current_chunk: int
    total_chunks: int


@dataclass(frozen=True)
class TranslationSummary:
    item_count: int
    translated_count: int
    processing_time_seconds: float
    source_lang: str
    target_lang: str

    def describe(self) -> str:
        return f"Successfully translated {self.translated_count} out of {self.item_count} items."


@dataclass
class TranslationOutcome:
    """Result of a successful run: the new document plus its statistics."""
    document: str
    summary: TranslationSummary
    warnings: List[str] = field(default_factory=list)
