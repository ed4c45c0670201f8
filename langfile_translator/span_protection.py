import logging
import re
import uuid
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)

# Markup tags such as <b>, </span> or <i class="fa fa-trash">.
MARKUP_PATTERN = re.compile(r'<[^<>]+>')

# Matches any sentinel produced by protect_markup, salted or not.
SENTINEL_PATTERN = re.compile(r'__TAG_\d+(?:_[0-9a-f]+)?__')


@dataclass(frozen=True)
class ProtectedValue:
    """
    A value with its markup replaced by sentinels.

    ``restore_map`` is ordered by first appearance and is applied in that order.
    """
    text: str
    restore_map: Tuple[Tuple[str, str], ...] = ()


def _sentinel_factory(text: str):
    # Only salt when the value already contains something sentinel-like.
    salt = f"_{uuid.uuid4().hex[:8]}" if '__TAG_' in text else ""
    return lambda index: f"__TAG_{index}{salt}__"


def protect_markup(value: str, preserve_markup: bool = True) -> ProtectedValue:
    """
    Replace markup tags in a value with positional sentinel tokens.

    Args:
        value (str): The value to protect.
        preserve_markup (bool): When False the value is returned unchanged.

    Returns:
        ProtectedValue: The rewritten text and the ordered restore map.
    """
    if not preserve_markup or '<' not in value:
        return ProtectedValue(value)

    make_sentinel = _sentinel_factory(value)
    restore_map = []

    def replace_tag(match):
        sentinel = make_sentinel(len(restore_map))
        restore_map.append((sentinel, match.group(0)))
        return sentinel

    text = MARKUP_PATTERN.sub(replace_tag, value)
    return ProtectedValue(text, tuple(restore_map))


def restore_markup(translated: str, protected: ProtectedValue) -> str:
    """
    Put the original tags back into a translated value.

    Each sentinel is replaced once, in the order the sentinels were introduced.
    A sentinel the backend lost is skipped, so its tag is missing from the result.
    """
    for sentinel, tag in protected.restore_map:
        if sentinel in translated:
            translated = translated.replace(sentinel, tag, 1)
        else:
            logger.warning("Protected tag %r was lost during translation and has been dropped.", tag)
    return translated
