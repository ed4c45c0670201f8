"""
Translation backends.

A backend turns a batch of strings into translated strings for a language
pair. It chooses the model from its ``ModelMapping``, retries calls that report
"not ready" or fail in transit according to its ``RetryPolicy``, re-asks a
fallback model when the primary one echoes its input or never finishes
loading, and degrades to the original text when a single item cannot be
translated.
"""
import logging
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence

import httpx
from aiolimiter import AsyncLimiter
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    OpenAIError,
    RateLimitError
)
from openai.types.chat import (
    ChatCompletionSystemMessageParam,
    ChatCompletionUserMessageParam
)

from langfile_translator.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    ItemTranslationError
)
from langfile_translator.languages import (
    base_language,
    language_code_to_name,
    normalize_source_language,
    normalize_target_language
)
from langfile_translator.models import (
    FAILURE_EMPTY,
    FAILURE_STATUS,
    FAILURE_TRANSPORT,
    FAILURE_UNPARSABLE,
    MODEL_NOT_READY,
    ItemFailure,
    TranslationRequest,
    TranslationResult
)
from langfile_translator.phrase_tables import message_phrases_for
from langfile_translator.retry import RetryPolicy
from langfile_translator.span_protection import SENTINEL_PATTERN

logger = logging.getLogger(__name__)

HF_INFERENCE_ENDPOINT = "https://api-inference.huggingface.co/models"

DEFAULT_MODEL_PAIRS = {
    # Serbian (Latin script) is the primary target
    'en-sr-Latn': 'perkan/serbian-opus-mt-tc-base-en-sh',
    'sr-Latn-en': 'Helsinki-NLP/opus-mt-sh-en',

    'en-fr': 'Helsinki-NLP/opus-mt-en-fr',
    'fr-en': 'Helsinki-NLP/opus-mt-fr-en',
    'en-de': 'Helsinki-NLP/opus-mt-en-de',
    'de-en': 'Helsinki-NLP/opus-mt-de-en',
    'en-es': 'Helsinki-NLP/opus-mt-en-es',
    'es-en': 'Helsinki-NLP/opus-mt-es-en',
    'en-it': 'Helsinki-NLP/opus-mt-en-it',
    'it-en': 'Helsinki-NLP/opus-mt-it-en',
    'en-pt': 'Helsinki-NLP/opus-mt-en-pt',
    'pt-en': 'Helsinki-NLP/opus-mt-pt-en',

    # Any language to English
    'any-en': 'Helsinki-NLP/opus-mt-mul-en',
    # English to any language
    'en-any': 't5-base',
}

DEFAULT_FALLBACK_MODEL = 't5-base'


def _code_variants(code: str) -> List[str]:
    base = base_language(code)
    return [code] if base == code else [code, base]


@dataclass(frozen=True)
class ModelMapping:
    """
    Read-only language pair to model table.

    Selection order: exact ``source-target`` pair, then ``source-any``, then
    ``any-target``, then ``default_model``. ``fallback_model`` is asked again
    when the selected model returns an item unchanged or is still loading
    after every retry.
    """
    pairs: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_MODEL_PAIRS))
    fallback_model: Optional[str] = DEFAULT_FALLBACK_MODEL
    default_model: str = DEFAULT_FALLBACK_MODEL

    def __post_init__(self):
        object.__setattr__(self, 'pairs', MappingProxyType(dict(self.pairs)))

    def select(self, source_lang: str, target_lang: str) -> str:
        sources = _code_variants(normalize_source_language(source_lang))
        targets = _code_variants(normalize_target_language(target_lang))
        candidates = [f"{s}-{t}" for s in sources for t in targets]
        candidates += [f"{s}-any" for s in sources]
        candidates += [f"any-{t}" for t in targets]
        for candidate in candidates:
            if candidate in self.pairs:
                return self.pairs[candidate]
        return self.default_model


class TranslationBackend:
    """
    Base class for backends.

    Subclasses implement ``_query`` for a single text and may override
    ``_session`` to hold a connection open for the duration of a batch.
    ``_query`` returns the translation, raises ``ItemTranslationError`` for a
    soft failure of that item, or ``BackendUnavailableError`` when the service
    cannot be reached at all.
    """
    name = "backend"

    def __init__(
            self,
            mapping: Optional[ModelMapping] = None,
            retry_policy: Optional[RetryPolicy] = None,
            rate_limiter: Optional[AsyncLimiter] = None
    ):
        self.mapping = mapping or ModelMapping()
        self.retry_policy = retry_policy or RetryPolicy()
        self.rate_limiter = rate_limiter

    def select_model(self, source_lang: str, target_lang: str) -> str:
        return self.mapping.select(source_lang, target_lang)

    async def translate(
            self,
            items: Sequence[str],
            source_lang: str,
            target_lang: str,
            model_hint: Optional[str] = None
    ) -> TranslationResult:
        """
        Translate a batch of strings, one after another.

        Args:
            items (Sequence[str]): Texts to translate.
            source_lang (str): Source language code.
            target_lang (str): Target language code.
            model_hint (Optional[str]): Model to use instead of the mapped one.

        Returns:
            TranslationResult: Translations in the same order as ``items``.

        Raises:
            BackendUnavailableError: If the service stayed unreachable, or neither
                the selected nor the fallback model became ready.
        """
        request = TranslationRequest(tuple(items), source_lang, target_lang, model_hint)
        model = model_hint or self.select_model(source_lang, target_lang)
        logger.debug(f"Translating {len(request.items)} item(s) {source_lang}->{target_lang} with '{model}'")

        translated: List[str] = []
        failures: List[ItemFailure] = []
        async with self._session():
            for index, text in enumerate(request.items):
                try:
                    translated.append(await self._translate_item(text, model, request))
                except ItemTranslationError as exc:
                    logger.warning(f"Item {index} could not be translated ({exc}); keeping the original text.")
                    failures.append(ItemFailure(index, exc.kind, exc.detail))
                    translated.append(text)
        return TranslationResult(tuple(translated), model, tuple(failures))

    def _has_fallback(self, model: str) -> bool:
        fallback = self.mapping.fallback_model
        return bool(fallback) and model != fallback

    async def _translate_item(self, text: str, model: str, request: TranslationRequest) -> str:
        if not text.strip():
            return text
        try:
            translated = await self._limited_query(text, model, request)
        except ItemTranslationError as exc:
            if not self._has_fallback(model):
                raise
            logger.warning(f"Model '{model}' failed ({exc}); trying fallback model.")
            translated = text
        except BackendUnavailableError as exc:
            # Transport failures stay fatal; a model that never loaded is skipped.
            if exc.code != MODEL_NOT_READY or not self._has_fallback(model):
                raise
            logger.warning(f"Model '{model}' never became ready; trying fallback model.")
            translated = text

        if translated == text and self._has_fallback(model):
            fallback = self.mapping.fallback_model
            logger.info(f"Model '{model}' returned the text unchanged, asking fallback model '{fallback}'.")
            translated = await self._limited_query(text, fallback, request)
        return translated

    async def _limited_query(self, text: str, model: str, request: TranslationRequest) -> str:
        if self.rate_limiter is None:
            return await self._query(text, model, request)
        async with self.rate_limiter:
            return await self._query(text, model, request)

    @asynccontextmanager
    async def _session(self):
        yield

    async def _query(self, text: str, model: str, request: TranslationRequest) -> str:
        raise NotImplementedError


def normalize_inference_payload(payload) -> Optional[str]:
    """
    Pull the translated string out of the shapes the inference API answers with.

    Handles ``[{"translation_text": ...}]``, ``{"translation_text": ...}``,
    ``[{"generated_text": ...}]``, ``["..."]`` and a bare JSON string.
    """
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        for field_name in ('translation_text', 'generated_text'):
            if isinstance(payload.get(field_name), str):
                return payload[field_name]
        return None
    if isinstance(payload, list) and payload:
        first = payload[0]
        if isinstance(first, (dict, list)):
            return normalize_inference_payload(first)
        if len(payload) == 1 and isinstance(first, str):
            return first
    return None


def _is_loading(response: httpx.Response) -> bool:
    if response.status_code not in (200, 503):
        return False
    try:
        payload = response.json()
    except ValueError:
        body = response.text.strip()
        return body[:1] in ('{', '[') and 'loading' in body.lower()
    if isinstance(payload, dict):
        error = payload.get('error')
        return isinstance(error, str) and 'loading' in error.lower()
    return False


def parse_inference_response(response: httpx.Response) -> str:
    """
    Turn an inference API response into a translated string.

    Raises:
        ItemTranslationError: For non-200 statuses, unparsable bodies and empty results.
    """
    if response.status_code != 200:
        raise ItemTranslationError(FAILURE_STATUS, f"HTTP {response.status_code}: {response.text[:200]}")
    try:
        payload = response.json()
    except ValueError:
        # Some models answer with plain text
        body = response.text.strip()
        if body and body[0] not in '{[':
            return body
        raise ItemTranslationError(FAILURE_UNPARSABLE, f"Could not decode response: {response.text[:200]}")

    translated = normalize_inference_payload(payload)
    if translated is None or not translated.strip():
        raise ItemTranslationError(FAILURE_EMPTY, f"Empty or unrecognized result: {str(payload)[:200]}")
    return translated


class HuggingFaceBackend(TranslationBackend):
    """Backend calling the Hugging Face Inference API, one model per language pair."""
    name = "huggingface"

    def __init__(
            self,
            api_token: str,
            mapping: Optional[ModelMapping] = None,
            endpoint: str = HF_INFERENCE_ENDPOINT,
            timeout: float = 30.0,
            retry_policy: Optional[RetryPolicy] = None,
            rate_limiter: Optional[AsyncLimiter] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(mapping, retry_policy, rate_limiter)
        if not api_token:
            raise ConfigurationError("A Hugging Face API token is required (set HF_API_TOKEN).",
                                     code="missing_api_key")
        self.api_token = api_token
        self.endpoint = (endpoint or HF_INFERENCE_ENDPOINT).rstrip('/')
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def model_url(self, model: str) -> str:
        return f"{self.endpoint}/{model}"

    @asynccontextmanager
    async def _session(self):
        headers = {"Authorization": f"Bearer {self.api_token}"}
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), headers=headers,
                                     transport=self._transport) as client:
            self._client = client
            try:
                yield
            finally:
                self._client = None

    async def _query(self, text: str, model: str, request: TranslationRequest) -> str:
        retry = self.retry_policy.start()
        while True:
            try:
                response = await self._client.post(self.model_url(model), json={"inputs": text})
            except httpx.TransportError as exc:
                if await retry.wait(f"Transport error calling '{model}': {exc.__class__.__name__}"):
                    continue
                raise BackendUnavailableError(
                    f"Model '{model}' could not be reached after {retry.attempt} attempt(s): {exc}",
                    code=FAILURE_TRANSPORT
                ) from exc

            if _is_loading(response):
                if await retry.wait(f"Model '{model}' is loading"):
                    continue
                raise BackendUnavailableError(
                    f"Model '{model}' was still loading after {retry.attempt} attempt(s).",
                    code=MODEL_NOT_READY
                )

            logger.debug(f"Response from '{model}': {response.status_code} {response.text[:200]}")
            return parse_inference_response(response)


def clean_translated_text(translated_text: str, original_text: str) -> str:
    """
    Remove wrapping quotes or square brackets that the original text did not have.

    Args:
        translated_text (str): The translated text.
        original_text (str): The original text.

    Returns:
        str: The cleaned translated text.
    """
    if translated_text.startswith('"') and translated_text.endswith('"') and not (
            original_text.startswith('"') and original_text.endswith('"')):
        translated_text = translated_text[1:-1]
    if translated_text.startswith('[') and translated_text.endswith(']') and not (
            original_text.startswith('[') and original_text.endswith(']')):
        translated_text = translated_text[1:-1]
    return translated_text


class OpenAIBackend(TranslationBackend):
    """Backend using OpenAI chat completions, one request per item."""
    name = "openai"

    def __init__(
            self,
            client: Optional[AsyncOpenAI] = None,
            api_key: Optional[str] = None,
            base_url: Optional[str] = None,
            model_name: str = "gpt-4o-mini",
            mapping: Optional[ModelMapping] = None,
            retry_policy: Optional[RetryPolicy] = None,
            rate_limiter: Optional[AsyncLimiter] = None,
            timeout: float = 60.0
    ):
        if mapping is None:
            mapping = ModelMapping(pairs={}, fallback_model=None, default_model=model_name)
        super().__init__(mapping, retry_policy, rate_limiter)
        if client is None:
            if not api_key:
                raise ConfigurationError("An OpenAI API key is required (set OPENAI_API_KEY).",
                                         code="missing_api_key")
            client = AsyncOpenAI(api_key=api_key, base_url=base_url or None)
        self.client = client
        self.timeout = timeout

    @staticmethod
    def build_system_prompt(source_lang: str, target_lang: str) -> str:
        source_name = language_code_to_name(source_lang) or source_lang
        target_name = language_code_to_name(target_lang) or target_lang
        return f"""
You are an expert translator specializing in software localization. Translate the text from {source_name} to {target_name}.

**Instructions**:
- **Do not translate or modify placeholder tokens**: Any text enclosed within double underscores `__` (e.g., `__TAG_0__`) must remain exactly as is.
- **Keep parameters untouched**: Words starting with a colon (e.g., `:name`, `:seconds`) are replaced at runtime.
- **Do not add** any additional characters or punctuation (e.g., no square brackets, quotation marks, etc.).
- **Provide only** the translated text.
"""

    async def _query(self, text: str, model: str, request: TranslationRequest) -> str:
        retry = self.retry_policy.start()
        system_prompt = self.build_system_prompt(request.source_lang, request.target_lang)
        while True:
            try:
                response = await self.client.chat.completions.create(
                    model=model,
                    messages=[
                        ChatCompletionSystemMessageParam(role="system", content=system_prompt),
                        ChatCompletionUserMessageParam(role="user", content=text)
                    ],
                    temperature=0.3,
                    timeout=self.timeout,
                )
            except (RateLimitError, APITimeoutError, APIConnectionError) as api_exc:
                if await retry.wait(f"API error occurred: {api_exc.__class__.__name__}"):
                    continue
                raise BackendUnavailableError(
                    f"OpenAI model '{model}' unavailable after {retry.attempt} attempt(s): {api_exc}",
                    code=FAILURE_TRANSPORT
                ) from api_exc
            except APIStatusError as api_exc:
                raise ItemTranslationError(FAILURE_STATUS, f"HTTP {api_exc.status_code}: {api_exc}") from api_exc
            except OpenAIError as api_exc:
                raise ItemTranslationError(FAILURE_UNPARSABLE, str(api_exc)) from api_exc

            content = response.choices[0].message.content if response.choices else None
            if not content or not content.strip():
                raise ItemTranslationError(FAILURE_EMPTY, f"Model '{model}' returned no content")
            return clean_translated_text(content.strip(), text)


class PhraseTableBackend(TranslationBackend):
    """
    Offline stand-in backend backed by a static phrase table.

    Whole texts are looked up first; otherwise each segment between markup
    sentinels is looked up on its own. Unknown text comes back unchanged.
    """
    name = "phrase_table"

    def __init__(self, phrases: Optional[Mapping[str, Mapping[str, str]]] = None):
        super().__init__(ModelMapping(pairs={}, fallback_model=None, default_model="phrase-table"))
        self.phrases = phrases

    def select_model(self, source_lang: str, target_lang: str) -> str:
        return f"phrase-table:{base_language(normalize_target_language(target_lang))}"

    async def _query(self, text: str, model: str, request: TranslationRequest) -> str:
        table = message_phrases_for(request.target_lang, self.phrases)
        if text in table:
            return table[text]

        parts = re.split(f"({SENTINEL_PATTERN.pattern})", text)
        translated_parts = []
        for part in parts:
            stripped = part.strip()
            if stripped and stripped in table and not SENTINEL_PATTERN.fullmatch(part):
                leading = part[:len(part) - len(part.lstrip())]
                trailing = part[len(part.rstrip()):]
                part = f"{leading}{table[stripped]}{trailing}"
            translated_parts.append(part)
        return ''.join(translated_parts)
