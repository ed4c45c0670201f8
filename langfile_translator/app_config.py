"""Application configuration for the language file translator."""
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import jsonschema
import yaml
from dotenv import load_dotenv

from langfile_translator.backends import DEFAULT_FALLBACK_MODEL, DEFAULT_MODEL_PAIRS, HF_INFERENCE_ENDPOINT, ModelMapping
from langfile_translator.languages import SUPPORTED_LANGUAGES
from langfile_translator.logging_config import setup_logger
from langfile_translator.models import TranslationOptions
from langfile_translator.retry import RetryPolicy

MODEL_MAPPING_SCHEMA = {
    "type": "object",
    "properties": {
        "pairs": {
            "type": "object",
            "patternProperties": {"^.+-.+$": {"type": "string", "minLength": 1}},
            "additionalProperties": False
        },
        "fallback_model": {"type": ["string", "null"]},
        "default_model": {"type": "string", "minLength": 1},
        "replace_defaults": {"type": "boolean"}
    },
    "additionalProperties": False
}


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    project_root: str = ""

    # Hugging Face
    huggingface_api_token: Optional[str] = None
    huggingface_endpoint: str = HF_INFERENCE_ENDPOINT
    request_timeout: float = 30.0

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Backend behaviour
    model_mapping: ModelMapping = field(default_factory=ModelMapping)
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    max_requests_per_minute: int = 60

    # Per-run defaults, overridable by the host
    default_options: TranslationOptions = field(default_factory=TranslationOptions)

    # Language configuration
    language_codes: Dict[str, str] = field(default_factory=lambda: dict(SUPPORTED_LANGUAGES))

    # HTTP endpoint
    server_host: str = "127.0.0.1"
    server_port: int = 8000


def _compute_project_root() -> str:
    """Directory holding the ``langfile_translator`` package, ``config.yaml`` and ``.env``."""
    package_dir = os.path.dirname(os.path.realpath(__file__))
    return os.path.abspath(os.path.join(package_dir, os.pardir))


def _load_dotenv_files(project_root: str) -> None:
    """
    Load provider credentials from the first ``.env`` found.

    The checkout root is tried before ``docker/.env``. Variables already set in
    the environment are never overridden.
    """
    for candidate in (os.path.join(project_root, '.env'), os.path.join(project_root, 'docker', '.env')):
        if os.path.exists(candidate):
            load_dotenv(candidate)
            return


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """
    Read ``config.yaml``, or the file named by ``TRANSLATOR_CONFIG_FILE``.

    Logging is not configured yet at this point, so problems are printed to
    stderr and an empty mapping is returned; the translator then runs on its
    built-in defaults.
    """
    config_file = os.path.abspath(
        os.environ.get('TRANSLATOR_CONFIG_FILE', os.path.join(project_root, 'config.yaml'))
    )

    if not os.path.exists(config_file):
        print(f"Warning: translator config '{config_file}' not found, running with built-in defaults.",
              file=sys.stderr)
        return {}

    try:
        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in translator config '{config_file}': {e}", file=sys.stderr)
        return {}
    except OSError as e:
        print(f"Error: Could not read translator config '{config_file}': {e}", file=sys.stderr)
        return {}

    if loaded_config is None:
        return {}
    if not isinstance(loaded_config, dict):
        print(f"Error: Translator config '{config_file}' must be a mapping of settings, ignoring it.",
              file=sys.stderr)
        return {}
    return loaded_config


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Configure the package logger from the ``logging`` section."""
    log_config = config.get('logging', {}) or {}
    log_level_str = log_config.get('log_level', 'INFO').upper()
    log_file_path = log_config.get('log_file_path', 'logs/translation_log.log')
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def _build_model_mapping(section: Optional[Dict[str, Any]], logger: logging.Logger) -> ModelMapping:
    """
    Build the model mapping from the ``model_mapping`` section.

    Configured pairs extend the built-in table unless ``replace_defaults`` is set.
    An invalid section is reported and the built-in table is used.
    """
    if not section:
        return ModelMapping()
    try:
        jsonschema.validate(instance=section, schema=MODEL_MAPPING_SCHEMA)
    except jsonschema.ValidationError as e:
        logger.error("Invalid 'model_mapping' configuration: %s. Using the built-in table.", e.message)
        return ModelMapping()

    pairs = {} if section.get('replace_defaults') else dict(DEFAULT_MODEL_PAIRS)
    pairs.update(section.get('pairs', {}))
    return ModelMapping(
        pairs=pairs,
        fallback_model=section.get('fallback_model', DEFAULT_FALLBACK_MODEL),
        default_model=section.get('default_model', pairs.get('en-any', DEFAULT_FALLBACK_MODEL)),
    )


def _build_retry_policy(section: Optional[Dict[str, Any]]) -> RetryPolicy:
    section = section or {}
    defaults = RetryPolicy()
    return RetryPolicy(
        max_attempts=int(section.get('max_attempts', defaults.max_attempts)),
        base_delay=float(section.get('base_delay', defaults.base_delay)),
        exponential=bool(section.get('exponential', defaults.exponential)),
        max_delay=float(section.get('max_delay', defaults.max_delay)),
        max_elapsed_seconds=section.get('max_elapsed_seconds', defaults.max_elapsed_seconds),
    )


def _build_default_options(section: Optional[Dict[str, Any]]) -> TranslationOptions:
    section = section or {}
    defaults = TranslationOptions()
    chunk_size = int(os.environ.get('TRANSLATOR_CHUNK_SIZE', section.get('chunk_size', defaults.chunk_size)))
    return TranslationOptions(
        source_lang=section.get('source_lang', defaults.source_lang),
        target_lang=section.get('target_lang', defaults.target_lang),
        preserve_html=section.get('preserve_html', defaults.preserve_html),
        translate_comments=section.get('translate_comments', defaults.translate_comments),
        chunk_processing=section.get('chunk_processing', defaults.chunk_processing),
        chunk_size=chunk_size,
        service=section.get('service', defaults.service),
        api_endpoint=section.get('api_endpoint', defaults.api_endpoint),
    )


def _build_language_codes(locales_list) -> Dict[str, str]:
    """Build the code to name mapping from ``supported_locales``."""
    language_codes: Dict[str, str] = {}
    for locale in locales_list or []:
        code = locale.get('code')
        name = locale.get('name')
        if code and name:
            language_codes[code] = name
    return language_codes or dict(SUPPORTED_LANGUAGES)


def load_app_config() -> AppConfig:
    """
    Load application configuration from YAML file and environment variables.

    Secrets are only read from the environment (or a .env file):
    ``HF_API_TOKEN`` (or ``HUGGINGFACE_API_KEY``) and ``OPENAI_API_KEY``.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()
    _load_dotenv_files(project_root)
    config = _load_yaml_config(project_root)
    logger = _setup_logger_from_config(config)

    hf_config = config.get('huggingface', {}) or {}
    openai_config = config.get('openai', {}) or {}
    server_config = config.get('server', {}) or {}

    huggingface_api_token = os.environ.get('HF_API_TOKEN') or os.environ.get('HUGGINGFACE_API_KEY')
    if not huggingface_api_token:
        logger.info("No Hugging Face API token in the environment; pass one per run or set HF_API_TOKEN.")

    return AppConfig(
        project_root=project_root,
        huggingface_api_token=huggingface_api_token,
        huggingface_endpoint=hf_config.get('endpoint', HF_INFERENCE_ENDPOINT),
        request_timeout=float(hf_config.get('timeout', 30.0)),
        openai_api_key=os.environ.get('OPENAI_API_KEY'),
        openai_model=os.environ.get('OPENAI_MODEL_NAME', openai_config.get('model_name', 'gpt-4o-mini')),
        model_mapping=_build_model_mapping(config.get('model_mapping'), logger),
        retry_policy=_build_retry_policy(config.get('retry')),
        max_requests_per_minute=int(config.get('max_requests_per_minute', 60)),
        default_options=_build_default_options(config.get('defaults')),
        language_codes=_build_language_codes(config.get('supported_locales')),
        server_host=server_config.get('host', '127.0.0.1'),
        server_port=int(server_config.get('port', 8000)),
    )
