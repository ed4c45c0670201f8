import re
from collections import Counter
from typing import List, Sequence

from langfile_translator.entry_parser import Entry
from langfile_translator.span_protection import MARKUP_PATTERN, SENTINEL_PATTERN


def check_markup_parity(source_value: str, translated_value: str) -> bool:
    """
    Checks if the markup tags of a translated value match those of its source.
    Tags may be reordered, but each must occur as often as in the source.

    Args:
        source_value: The original value.
        translated_value: The translated value.

    Returns:
        True if both values contain the same multiset of tags, False otherwise.
    """
    return Counter(MARKUP_PATTERN.findall(source_value)) == Counter(MARKUP_PATTERN.findall(translated_value))


def check_encoding_and_mojibake(content: str) -> List[str]:
    """
    Checks translated content for common mojibake patterns.

    Args:
        content: The document text to check.

    Returns:
        A list of error messages. An empty list means the content looks clean.
    """
    errors = []

    # 'Ã' followed by a character in 0x80-0xFF is UTF-8 decoded as latin-1 or cp1252.
    mojibake_pattern = re.compile(r'Ã[\x80-\xff]')
    if mojibake_pattern.search(content):
        errors.append("Potential mojibake detected. Found patterns like 'Ã¼', 'Ã¤', etc.")

    if '\uFFFD' in content:
        errors.append("Content contains the Unicode replacement character (�), "
                      "indicating an encoding/decoding error.")
    return errors


def run_post_translation_validation(
        entries: Sequence[Entry],
        translations: Sequence[str],
        final_content: str,
        preserve_markup: bool
) -> List[str]:
    """
    Collects warnings about a finished translation. Nothing here fails the run.

    Args:
        entries: The extracted entries.
        translations: The final value for each entry.
        final_content: The reconstructed document.
        preserve_markup: Whether markup protection was enabled.

    Returns:
        A list of human-readable warnings.
    """
    warnings = []
    for entry, translated in zip(entries, translations):
        if SENTINEL_PATTERN.search(translated):
            warnings.append(f"Unrestored markup placeholder left in key '{entry.key}'.")
        elif preserve_markup and not check_markup_parity(entry.value, translated):
            warnings.append(f"Markup mismatch for key '{entry.key}'.")
    warnings.extend(check_encoding_and_mojibake(final_content))
    return warnings
