"""
Translation pipeline.

raw document -> entries -> protected values -> chunks -> backend
-> restored values -> reconstructed document -> summary
"""
import logging
import time
from typing import Dict, Optional

from aiolimiter import AsyncLimiter

from langfile_translator.app_config import AppConfig
from langfile_translator.backends import (
    HuggingFaceBackend,
    OpenAIBackend,
    PhraseTableBackend,
    TranslationBackend
)
from langfile_translator.chunk_scheduler import ProgressCallback, run_chunks
from langfile_translator.entry_parser import extract_entries
from langfile_translator.exceptions import ConfigurationError
from langfile_translator.languages import normalize_source_language
from langfile_translator.models import TranslationOptions, TranslationOutcome
from langfile_translator.outcome import summarize
from langfile_translator.reconstructor import reconstruct_document
from langfile_translator.span_protection import protect_markup, restore_markup
from langfile_translator.validator import run_post_translation_validation

logger = logging.getLogger(__name__)

SERVICES = ("huggingface", "openai", "phrase_table")


def build_backend(options: TranslationOptions, config: AppConfig) -> TranslationBackend:
    """
    Create the backend for the service chosen in the options.

    The API key and endpoint from the options win over the configured ones.

    Raises:
        ConfigurationError: For unknown services or missing credentials.
    """
    service = (options.service or "huggingface").strip().lower()
    rate_limiter = AsyncLimiter(max_rate=config.max_requests_per_minute, time_period=60)

    if service == "huggingface":
        return HuggingFaceBackend(
            api_token=options.api_key or config.huggingface_api_token,
            mapping=config.model_mapping,
            endpoint=options.api_endpoint or config.huggingface_endpoint,
            timeout=config.request_timeout,
            retry_policy=config.retry_policy,
            rate_limiter=rate_limiter,
        )
    if service == "openai":
        return OpenAIBackend(
            api_key=options.api_key or config.openai_api_key,
            base_url=options.api_endpoint or None,
            model_name=config.openai_model,
            retry_policy=config.retry_policy,
            rate_limiter=rate_limiter,
        )
    if service == "phrase_table":
        return PhraseTableBackend()
    raise ConfigurationError(
        f"Unknown translation service '{options.service}'. Choose one of: {', '.join(SERVICES)}.",
        code="unknown_service"
    )


async def translate_document(
        document: str,
        options: TranslationOptions,
        backend: TranslationBackend,
        progress_callback: Optional[ProgressCallback] = None
) -> TranslationOutcome:
    """
    Translate every value of a language file.

    Args:
        document (str): The language file content. It is never modified.
        options (TranslationOptions): Per-run options.
        backend (TranslationBackend): The backend to translate with.
        progress_callback (Optional[ProgressCallback]): Called after every chunk.

    Returns:
        TranslationOutcome: The translated document, its summary and any warnings.

    Raises:
        TranslationRunError: If a chunk failed hard; nothing is returned in that case.
    """
    started = time.perf_counter()
    source_lang = normalize_source_language(options.source_lang)
    target_lang = options.target_lang

    entries = extract_entries(document)
    logger.info(f"Found {len(entries)} translatable entries ({source_lang} -> {target_lang}).")

    protected = [protect_markup(entry.value, options.preserve_html) for entry in entries]
    translated = await run_chunks(
        [value.text for value in protected],
        backend,
        source_lang,
        target_lang,
        options.effective_chunk_size,
        progress_callback
    )
    final_values = [restore_markup(text, value) for text, value in zip(translated, protected)]

    new_document = reconstruct_document(
        document,
        entries,
        final_values,
        translate_comments_enabled=options.translate_comments,
        target_lang=target_lang
    )

    warnings = run_post_translation_validation(entries, final_values, new_document, options.preserve_html)
    for warning in warnings:
        logger.warning(warning)

    summary = summarize(document, new_document, time.perf_counter() - started, source_lang, target_lang)
    logger.info(summary.describe())
    return TranslationOutcome(document=new_document, summary=summary, warnings=warnings)


async def translate_text(text: str, options: TranslationOptions, backend: TranslationBackend) -> Dict[str, str]:
    """
    Translate a single string, keeping its markup.

    Returns:
        Dict[str, str]: ``original``, ``translated``, ``source_lang``,
        ``target_lang`` and ``model_used``.
    """
    source_lang = normalize_source_language(options.source_lang)
    protected = protect_markup(text, options.preserve_html)
    result = await backend.translate([protected.text], source_lang, options.target_lang)
    translated = restore_markup(result.items[0], protected)
    if not translated.strip():
        translated = text
    logger.debug(f"Final translation: {translated}")
    return {
        "original": text,
        "translated": translated,
        "source_lang": source_lang,
        "target_lang": options.target_lang,
        "model_used": result.model_used,
    }
