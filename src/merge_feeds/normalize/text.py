"""Text normalization for comparing independently formatted titles."""

import re
from typing import Optional

from merge_feeds.normalize.columns import parse_column_title

HTML_ENTITIES = {
    "&#38;": "&", "&amp;": "&",
    "&#39;": "'", "&apos;": "'",
    "&#34;": '"', "&quot;": '"',
    "&#60;": "<", "&lt;": "<",
    "&#62;": ">", "&gt;": ">",
    "&#160;": " ", "&nbsp;": " ",
    "&#8217;": "’", "&rsquo;": "’",
    "&#8216;": "‘", "&lsquo;": "‘",
    "&#8220;": "“", "&ldquo;": "“",
    "&#8221;": "”", "&rdquo;": "”",
    "&#8211;": "–", "&ndash;": "–",
    "&#8212;": "—", "&mdash;": "—",
}

# Applied in order, case-insensitively
TITLE_NORMALIZATIONS = [
    ("tiburon town council", "tiburon city council"),
    ("town council", "city council"),
    ("&", " and "),
    ("w/", "with "),
    ("st.", "street"),
    ("rd.", "road"),
    ("ave.", "avenue"),
    ("’", "'"),
    ("‘", "'"),
    ("“", '"'),
    ("”", '"'),
    ("–", "-"),
    ("—", "-"),
]

LEADING_ARTICLES = {"the", "a", "an"}
PREPOSITIONS = {"to", "in", "at", "on", "by", "with", "for", "of", "and", "or"}

_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in HTML_ENTITIES))
_UNRESOLVED_ENTITY = re.compile(r"&#?\w+;")
_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[^\w\s]|_")
_BOILERPLATE = re.compile(r"\b(?:sf|san francisco|bay area|award winning|awardwinning)\b")


def _term_pattern(term: str) -> re.Pattern:
    # Word boundaries only where the term itself starts/ends with a word character
    start = r"\b" if term[0].isalnum() else ""
    end = r"\b" if term[-1].isalnum() else ""
    return re.compile(start + re.escape(term) + end, re.IGNORECASE)


_NORMALIZATION_PATTERNS = [(_term_pattern(src), dst) for src, dst in TITLE_NORMALIZATIONS]


def decode_html_entities(text: Optional[str]) -> Optional[str]:
    """Decode the known HTML entities; drop any entity that is not in the table."""
    if not text:
        return text
    decoded = _ENTITY_PATTERN.sub(lambda m: HTML_ENTITIES[m.group(0)], text)
    return _UNRESOLVED_ENTITY.sub(" ", decoded)


def apply_term_table(text: str) -> str:
    for pattern, replacement in _NORMALIZATION_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def strip_stop_words(text: str) -> str:
    """Drop boilerplate phrases, leading articles and inner prepositions."""
    words = _BOILERPLATE.sub(" ", text).split()

    while words and words[0] in LEADING_ARTICLES:
        words.pop(0)

    last = len(words) - 1
    return " ".join(
        word for i, word in enumerate(words)
        if i == 0 or i == last or word not in PREPOSITIONS
    )


def _normalize_once(
    text: str,
    strip_column_names: bool,
    normalize_terms: bool,
    drop_stop_words: bool,
) -> str:
    working = decode_html_entities(text)

    if strip_column_names:
        working = parse_column_title(working).core_title

    if normalize_terms:
        working = apply_term_table(working)

    normalized = _PUNCTUATION.sub(" ", working.lower())
    normalized = _WHITESPACE.sub(" ", normalized).strip()

    if drop_stop_words:
        normalized = strip_stop_words(normalized)

    return normalized


def normalize_text(
    text: Optional[str],
    strip_column_names: bool = True,
    apply_normalizations: bool = True,
    remove_stop_words: bool = True,
) -> str:
    """Reduce a title to its canonical comparison string.

    Steps are repeated until the output is stable, so the function is
    idempotent: normalize_text(normalize_text(s)) == normalize_text(s).
    """
    if not text:
        return ""

    result = _normalize_once(text, strip_column_names, apply_normalizations, remove_stop_words)
    while True:
        again = _normalize_once(result, strip_column_names, apply_normalizations, remove_stop_words)
        if again == result:
            return result
        result = again
