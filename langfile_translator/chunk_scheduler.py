import logging
import math
from typing import Callable, List, Optional, Sequence

from langfile_translator.exceptions import TranslationRunError
from langfile_translator.models import ProgressState

logger = logging.getLogger(__name__)

# progress_callback(percent_complete, current_chunk, total_chunks)
ProgressCallback = Callable[[float, int, int], None]


def split_into_chunks(items: Sequence[str], chunk_size: Optional[int]) -> List[List[str]]:
    """
    Partition items into contiguous chunks.

    Args:
        items (Sequence[str]): The ordered items.
        chunk_size (Optional[int]): Items per chunk; None or 0 puts everything in one chunk.

    Returns:
        List[List[str]]: ``ceil(len(items) / chunk_size)`` chunks, in order.
    """
    if not items:
        return []
    if not chunk_size or chunk_size <= 0:
        return [list(items)]
    return [list(items[i:i + chunk_size]) for i in range(0, len(items), chunk_size)]


class ProgressTracker:
    """Produces monotonically non-decreasing progress states for one run."""

    def __init__(self, total_chunks: int, callback: Optional[ProgressCallback] = None):
        self.total_chunks = total_chunks
        self.callback = callback
        self.state = ProgressState(0.0, 0, total_chunks)

    def chunk_done(self, chunk_index: int) -> ProgressState:
        if self.total_chunks:
            fraction = min(100.0, chunk_index / self.total_chunks * 100)
        else:
            fraction = 100.0
        fraction = max(fraction, self.state.completed_fraction)
        self.state = ProgressState(fraction, max(chunk_index, self.state.current_chunk), self.total_chunks)
        if self.callback is not None:
            self.callback(self.state.completed_fraction, self.state.current_chunk, self.state.total_chunks)
        return self.state


async def run_chunks(
        items: Sequence[str],
        backend,
        source_lang: str,
        target_lang: str,
        chunk_size: Optional[int],
        progress_callback: Optional[ProgressCallback] = None
) -> List[str]:
    """
    Translate items chunk by chunk, strictly in order.

    Each chunk's backend call finishes before the next one starts, and the
    progress callback runs after every chunk.

    Args:
        items (Sequence[str]): Texts to translate, in document order.
        backend: A TranslationBackend.
        source_lang (str): Source language code.
        target_lang (str): Target language code.
        chunk_size (Optional[int]): Items per chunk, None for a single chunk.
        progress_callback (Optional[ProgressCallback]): Receives (percent, chunk, total).

    Returns:
        List[str]: The translations, positionally matching ``items``.

    Raises:
        TranslationRunError: If any chunk fails hard. Translations of earlier
        chunks are discarded.
    """
    chunks = split_into_chunks(items, chunk_size)
    total_chunks = len(chunks)
    tracker = ProgressTracker(total_chunks, progress_callback)
    if not chunks:
        tracker.chunk_done(0)
        return []

    translated: List[str] = []
    for chunk_index, chunk in enumerate(chunks, start=1):
        logger.info(f"Translating chunk {chunk_index}/{total_chunks} ({len(chunk)} items)...")
        try:
            result = await backend.translate(chunk, source_lang, target_lang)
        except Exception as exc:
            logger.error(f"Chunk {chunk_index}/{total_chunks} failed: {exc}")
            raise TranslationRunError(
                f"Translation aborted at chunk {chunk_index} of {total_chunks}: {exc}",
                chunk_index, total_chunks
            ) from exc

        if len(result.items) != len(chunk):
            raise TranslationRunError(
                f"Backend returned {len(result.items)} translations for {len(chunk)} items "
                f"in chunk {chunk_index} of {total_chunks}.",
                chunk_index, total_chunks
            )
        if result.failures:
            logger.warning(f"{len(result.failures)} item(s) in chunk {chunk_index} kept their original text.")

        translated.extend(result.items)
        tracker.chunk_done(chunk_index)

    return translated
