"""HTTP endpoint for translating single texts and whole language files."""
import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Optional

import jsonschema
from flask import Flask, Response, jsonify, request

from langfile_translator.app_config import AppConfig
from langfile_translator.backends import TranslationBackend
from langfile_translator.exceptions import ConfigurationError, TranslatorError
from langfile_translator.models import TranslationOptions
from langfile_translator.pipeline import build_backend, translate_document, translate_text

logger = logging.getLogger(__name__)

TRANSLATE_REQUEST_SCHEMA = {
    "type": "object",
    "properties": {
        "text": {"type": "string", "minLength": 1},
        "source": {"type": "string"},
        "target": {"type": "string"},
        "preserve_html": {"type": "boolean"},
        "translate_comments": {"type": "boolean"},
        "service": {"type": "string"},
    },
    "required": ["text"]
}

DOCUMENT_REQUEST_SCHEMA = {
    "type": "object",
    "properties": {
        "content": {"type": "string"},
        "options": {
            "type": "object",
            "properties": {
                "source_lang": {"type": "string"},
                "target_lang": {"type": "string"},
                "preserve_html": {"type": "boolean"},
                "translate_comments": {"type": "boolean"},
                "chunk_processing": {"type": "boolean"},
                "chunk_size": {"type": "integer", "minimum": 1},
                "service": {"type": "string"},
                "api_key": {"type": "string"},
                "api_endpoint": {"type": "string"},
            },
            "additionalProperties": False
        }
    },
    "required": ["content"]
}

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST, GET, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type, Authorization',
}

BackendFactory = Callable[[TranslationOptions], TranslationBackend]


def _is_valid(payload: Any, schema: Dict[str, Any]) -> bool:
    try:
        jsonschema.validate(instance=payload, schema=schema)
    except jsonschema.ValidationError as e:
        logger.info("Rejected request: %s", e.message)
        return False
    return True


def _options_with(defaults: TranslationOptions, **overrides) -> TranslationOptions:
    return replace(defaults, **{key: value for key, value in overrides.items() if value is not None})


def create_app(config: Optional[AppConfig] = None, backend_factory: Optional[BackendFactory] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        config: Application configuration; defaults are used when omitted.
        backend_factory: Builds the backend for a request's options. Defaults
            to building it from ``config``.
    """
    config = config or AppConfig()
    if backend_factory is None:
        def backend_factory(options: TranslationOptions) -> TranslationBackend:
            return build_backend(options, config)

    app = Flask(__name__)
    app.json.ensure_ascii = False

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        response.headers.update(CORS_HEADERS)
        return response

    @app.route('/translate', methods=['POST', 'OPTIONS'])
    def translate():
        if request.method == 'OPTIONS':
            return Response(status=200)

        payload = request.get_json(silent=True)
        logger.debug("Request: %s", payload)
        if not isinstance(payload, dict) or not payload.get('text') or not _is_valid(payload, TRANSLATE_REQUEST_SCHEMA):
            logger.error("Error: Invalid input data")
            return jsonify({'error': 'Invalid input data'}), 400

        options = _options_with(
            config.default_options,
            source_lang=payload.get('source', 'en'),
            target_lang=payload.get('target', 'sr-Latn'),
            preserve_html=payload.get('preserve_html', True),
            translate_comments=payload.get('translate_comments', False),
            service=payload.get('service'),
        )
        try:
            backend = backend_factory(options)
            result = asyncio.run(translate_text(payload['text'], options, backend))
        except ConfigurationError as e:
            logger.error("Backend configuration error: %s", e)
            return jsonify({'error': str(e)}), 500
        except TranslatorError as e:
            logger.error("Translation failed: %s", e)
            return jsonify({'error': str(e)}), 502
        return jsonify(result)

    @app.route('/translate/document', methods=['POST', 'OPTIONS'])
    def translate_file():
        if request.method == 'OPTIONS':
            return Response(status=200)

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or not _is_valid(payload, DOCUMENT_REQUEST_SCHEMA):
            return jsonify({'error': 'Invalid input data'}), 400

        options = _options_with(config.default_options, **payload.get('options', {}))
        try:
            backend = backend_factory(options)
            outcome = asyncio.run(translate_document(payload['content'], options, backend))
        except ConfigurationError as e:
            logger.error("Backend configuration error: %s", e)
            return jsonify({'error': str(e)}), 500
        except TranslatorError as e:
            logger.error("Translation failed: %s", e)
            return jsonify({'error': str(e)}), 502

        summary = outcome.summary
        return jsonify({
            'translated_content': outcome.document,
            'summary': {
                'item_count': summary.item_count,
                'translated_count': summary.translated_count,
                'processing_time': summary.processing_time_seconds,
                'source_lang': summary.source_lang,
                'target_lang': summary.target_lang,
            },
            'warnings': outcome.warnings,
        })

    return app
