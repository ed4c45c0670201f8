import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

# One pass over the document yields comments, string literals and arrows.
# Comments come first so that an apostrophe inside a comment never opens a literal.
TOKEN_PATTERN = re.compile(
    r"""
      (?P<comment>/\*.*?\*/|//[^\n]*|\#[^\n]*)
    | (?P<single>'(?:[^'\\]|\\.)*')
    | (?P<double>"(?:[^"\\]|\\.)*")
    | (?P<arrow>=>)
    """,
    re.VERBOSE | re.DOTALL,
)

COMMENT = "comment"
SINGLE = "single"
DOUBLE = "double"
ARROW = "arrow"


class QuoteStyle(Enum):
    SINGLE = "'"
    DOUBLE = '"'

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Token:
    kind: str
    start: int
    end: int
    text: str

    @property
    def is_literal(self) -> bool:
        return self.kind in (SINGLE, DOUBLE)


@dataclass(frozen=True)
class Entry:
    """
    A ``key => value`` pair where both sides are string literals.

    Spans are ``(start, end)`` offsets of the whole literal, quotes included.
    """
    key: str
    value: str
    key_quote: QuoteStyle
    value_quote: QuoteStyle
    key_span: Tuple[int, int]
    value_span: Tuple[int, int]

    @property
    def quote_combination(self) -> str:
        return f"{self.key_quote.label}/{self.value_quote.label}"


def tokenize(document: str) -> List[Token]:
    """
    Split a document into typed spans.

    Args:
        document (str): The language file content.

    Returns:
        List[Token]: Comments, string literals and ``=>`` arrows in document order.
        Everything between two tokens is structure that is never touched.
    """
    return [
        Token(match.lastgroup, match.start(), match.end(), match.group(0))
        for match in TOKEN_PATTERN.finditer(document)
    ]


def unescape_literal(raw: str, quote: QuoteStyle) -> str:
    """
    Return the content of a literal (without its quotes) with escaped quote characters resolved.

    Only the literal's own quote character is unescaped; every other backslash
    sequence is kept as written so that it survives translation unchanged.
    """
    q = quote.value
    return re.sub(r'\\(.)', lambda m: q if m.group(1) == q else m.group(0), raw, flags=re.DOTALL)


def quote_literal(value: str, quote: QuoteStyle) -> str:
    """
    Inverse of :func:`unescape_literal`; returns the literal with its quotes.

    A bare ``$`` is escaped in double-quoted literals so that translated text
    is never interpolated.
    """
    q = quote.value
    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == '\\':
            if i + 1 < len(value):
                out.append(value[i:i + 2])
                i += 2
                continue
            # A lone trailing backslash would escape the closing quote.
            out.append('\\\\')
        elif ch == q:
            out.append('\\' + q)
        elif ch == '$' and quote is QuoteStyle.DOUBLE:
            # PHP would interpolate a bare $ inside double quotes.
            out.append('\\$')
        else:
            out.append(ch)
        i += 1
    return q + ''.join(out) + q


def _literal_content(token: Token) -> Tuple[str, QuoteStyle]:
    quote = QuoteStyle.SINGLE if token.kind == SINGLE else QuoteStyle.DOUBLE
    return unescape_literal(token.text[1:-1], quote), quote


def _only_whitespace_between(document: str, left: Token, right: Token) -> bool:
    return not document[left.end:right.start].strip()


def _starts_concatenation(document: str, token: Token) -> bool:
    rest = document[token.end:].lstrip()
    return rest.startswith('.') and not rest.startswith('...')


def extract_entries(document: str) -> List[Entry]:
    """
    Extract every ``'key' => 'value'`` pair from a language file.

    Keys and values may each be single- or double-quoted. Values that are
    nested arrays are not entries themselves; their string leaves are.
    Malformed literals are skipped, so this never raises.

    Args:
        document (str): The language file content.

    Returns:
        List[Entry]: Entries in the order they appear. Duplicate keys are kept
        as separate entries, each tied to its own span.
    """
    tokens = tokenize(document)
    entries: List[Entry] = []
    i = 0
    while i + 2 < len(tokens):
        key_token, arrow, value_token = tokens[i], tokens[i + 1], tokens[i + 2]
        if (key_token.is_literal and arrow.kind == ARROW and value_token.is_literal
                and _only_whitespace_between(document, key_token, arrow)
                and _only_whitespace_between(document, arrow, value_token)
                and not _starts_concatenation(document, value_token)):
            key, key_quote = _literal_content(key_token)
            value, value_quote = _literal_content(value_token)
            entries.append(Entry(
                key=key,
                value=value,
                key_quote=key_quote,
                value_quote=value_quote,
                key_span=(key_token.start, key_token.end),
                value_span=(value_token.start, value_token.end),
            ))
            i += 3
        else:
            i += 1
    return entries


def find_duplicate_keys(entries: List[Entry]) -> Dict[str, int]:
    """Return keys that occur more than once, mapped to their number of occurrences."""
    counts = Counter(entry.key for entry in entries)
    return {key: count for key, count in counts.items() if count > 1}
