import logging
from typing import List, Optional, Sequence, Tuple

from langfile_translator.entry_parser import COMMENT, Entry, find_duplicate_keys, quote_literal, tokenize
from langfile_translator.phrase_tables import comment_phrases_for

logger = logging.getLogger(__name__)


def translate_comments(text: str, target_lang: Optional[str]) -> str:
    """
    Replace known comment boilerplate with its translation.

    This is a literal find/replace over a fixed phrase list, not a translation
    of arbitrary comments. Unknown languages leave the text unchanged.
    """
    for phrase, translation in comment_phrases_for(target_lang or ""):
        text = text.replace(phrase, translation)
    return text


def reconstruct_document(
        document: str,
        entries: Sequence[Entry],
        translations: Sequence[str],
        translate_comments_enabled: bool = False,
        target_lang: Optional[str] = None
) -> str:
    """
    Rebuild a document with translated values in place of the original ones.

    Each value is replaced at the span it was extracted from and re-quoted in
    its original quote style. Values whose translation equals the original keep
    their original bytes, so an identity translation reproduces the document
    exactly. Keys, whitespace and all other structure are left untouched.

    Args:
        document (str): The original document.
        entries (Sequence[Entry]): Entries extracted from ``document``.
        translations (Sequence[str]): Final value for each entry, same order.
        translate_comments_enabled (bool): Also translate known comment boilerplate.
        target_lang (Optional[str]): Target language, used for comment phrases.

    Returns:
        str: The new document.
    """
    if len(entries) != len(translations):
        raise ValueError(f"Got {len(translations)} translations for {len(entries)} entries.")

    duplicates = find_duplicate_keys(list(entries))
    if duplicates:
        logger.warning(
            "Duplicate keys found (%s); each occurrence keeps its own translation.",
            ", ".join(sorted(duplicates))
        )

    replacements: List[Tuple[int, int, str]] = []
    for entry, translated in zip(entries, translations):
        if translated == entry.value:
            continue
        start, end = entry.value_span
        replacements.append((start, end, quote_literal(translated, entry.value_quote)))

    if translate_comments_enabled:
        for token in tokenize(document):
            if token.kind != COMMENT:
                continue
            translated_comment = translate_comments(token.text, target_lang)
            if translated_comment != token.text:
                replacements.append((token.start, token.end, translated_comment))

    replacements.sort(key=lambda item: item[0])
    pieces = []
    cursor = 0
    for start, end, text in replacements:
        pieces.append(document[cursor:start])
        pieces.append(text)
        cursor = end
    pieces.append(document[cursor:])
    return ''.join(pieces)
