import logging
import os
from typing import Callable, Dict, Optional, Union

import pytest

from langfile_translator.backends import ModelMapping, TranslationBackend
from langfile_translator.logging_config import PACKAGE_LOGGER_NAME

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'fixtures')


class StubBackend(TranslationBackend):
    """
    Backend answering from a dict or a function, recording every call.

    A function may raise ``ItemTranslationError`` or any other exception to
    simulate soft and hard failures.
    """
    name = "stub"

    def __init__(self, answers: Union[Dict[str, str], Callable[[str], str], None] = None,
                 mapping: Optional[ModelMapping] = None):
        super().__init__(mapping or ModelMapping(pairs={}, fallback_model=None, default_model="stub-model"))
        self.answers = answers or {}
        self.calls = []
        self.batches = []

    async def translate(self, items, source_lang, target_lang, model_hint=None):
        self.batches.append(list(items))
        return await super().translate(items, source_lang, target_lang, model_hint)

    async def _query(self, text, model, request):
        self.calls.append((text, model))
        if callable(self.answers):
            return self.answers(text)
        return self.answers.get(text, text)


@pytest.fixture
def stub_backend_factory():
    return StubBackend


@pytest.fixture
def sample_document():
    """The auth.php language file used throughout the tests."""
    with open(os.path.join(FIXTURES_DIR, 'auth.php'), 'r', encoding='utf-8') as f:
        return f.read()


@pytest.fixture
def sample_document_path():
    return os.path.join(FIXTURES_DIR, 'auth.php')


@pytest.fixture(autouse=True)
def restore_package_logger():
    """load_app_config() reconfigures the package logger; undo that after each test."""
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
