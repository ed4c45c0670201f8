"""
Outcome accounting.

Counts entries with its own pattern instead of the extractor, so the
statistics stay an independent check of what the pipeline produced. The
pattern follows the same detection rule: commented-out pairs are skipped,
values may span lines and a value continued with ``.`` is not an entry.
"""
import re
from typing import List

from langfile_translator.models import TranslationSummary

# Comments and stray literals are matched too so that finditer consumes them;
# only matches with a value group are entries.
PAIR_PATTERN = re.compile(
    r"""
      (?P<comment>/\*.*?\*/|//[^\n]*|\#[^\n]*)
    | (?:'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
      \s*=>\s*
      (?:'(?P<single>(?:[^'\\]|\\.)*)'|"(?P<double>(?:[^"\\]|\\.)*)")
      (?!\s*\.(?!\.\.))
    | '(?:[^'\\]|\\.)*'
    | "(?:[^"\\]|\\.)*"
    """,
    re.VERBOSE | re.DOTALL,
)


def extract_values(document: str) -> List[str]:
    """Raw values of every ``key => value`` string pair, in document order."""
    values = []
    for match in PAIR_PATTERN.finditer(document):
        if match.group('single') is not None:
            values.append(match.group('single'))
        elif match.group('double') is not None:
            values.append(match.group('double'))
    return values


def count_entries(document: str) -> int:
    return len(extract_values(document))


def count_changed(original: str, translated: str) -> int:
    """
    Number of values that differ between two documents, compared by position.

    A translation identical to its source counts as not translated.
    """
    return sum(
        1 for before, after in zip(extract_values(original), extract_values(translated))
        if before != after
    )


def summarize(
        original: str,
        translated: str,
        processing_time_seconds: float,
        source_lang: str,
        target_lang: str
) -> TranslationSummary:
    return TranslationSummary(
        item_count=count_entries(original),
        translated_count=count_changed(original, translated),
        processing_time_seconds=round(processing_time_seconds, 2),
        source_lang=source_lang,
        target_lang=target_lang,
    )
