"""Byline author extraction.

Bylines in the e-edition body come in several shapes, e.g.::

    By Jane Doe
    By JANE DOEjdoe@thearknewspaper.com
    By Jane Doejdoe@thearknewspaper.com
    By Jane Doe ——— The council met on Tuesday...

Each shape is a named rule; rules are tried in order and the first one that
yields a plausible name wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

MIN_NAME_WORDS = 2
MAX_NAME_WORDS = 4
MIN_NAME_LENGTH = 4
MAX_NAME_LENGTH = 30

_BY = r"(?i:by)\s+"
_NAME_END = r"(?=\s*[a-z0-9._-]*@|\s*—{2,}|\s*$)"


@dataclass(frozen=True)
class BylineRule:
    name: str
    pattern: re.Pattern
    # Turns a match into a candidate name; defaults to the first group
    extract: Optional[Callable[[re.Match], Optional[str]]] = None

    def candidate(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match:
            return None
        if self.extract is not None:
            return self.extract(match)
        return match.group(1)


def _split_glued_email(match: re.Match) -> Optional[str]:
    """Split "Doejdoe" (last name glued to the mailbox) back into "Doe"."""
    first, glued = match.group(1), match.group(2)
    for i in range(2, len(glued)):
        last, mailbox = glued[:i], glued[i:].lower()
        if mailbox.startswith(first.lower()) or mailbox.endswith(last.lower()):
            return f"{first} {last}"
    return None


BYLINE_RULES = [
    BylineRule(
        "capitalized_name",
        re.compile(r"\b" + _BY + r"([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+)(?=[\s,.;:!?)]|$)"),
    ),
    BylineRule(
        "all_caps_name",
        re.compile(r"\b" + _BY + r"([A-Z]{2,}(?:[ \t]+[A-Z]{2,})+)"),
    ),
    BylineRule(
        "name_glued_to_email",
        re.compile(r"\b" + _BY + r"([A-Z][a-z]+)\s+([A-Z][a-z]+[a-z0-9._-]*)@"),
        extract=_split_glued_email,
    ),
    BylineRule(
        "name_before_email_or_rule",
        re.compile(r"^\s*" + _BY + r"([A-Z][A-Za-z\s]{3,30}?)" + _NAME_END),
    ),
    BylineRule(
        "name_after_text",
        re.compile(r"(?:^|[^A-Za-z])" + _BY + r"([A-Z][A-Za-z\s]{3,25}?)" + _NAME_END),
    ),
]


def clean_author_name(raw: Optional[str]) -> Optional[str]:
    """Validate and title-case a captured name; None when it doesn't look like one."""
    if not raw:
        return None

    name = re.sub(r"[^A-Za-z\s]", "", raw)
    name = re.sub(r"\s+", " ", name).strip()
    words = name.split(" ") if name else []

    if not MIN_NAME_WORDS <= len(words) <= MAX_NAME_WORDS:
        return None
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        return None

    return " ".join(word[0].upper() + word[1:].lower() for word in words)


def extract_byline(text: Optional[str]) -> Optional[str]:
    """Return the author named in a "By ..." byline, or None."""
    if not text:
        return None

    for rule in BYLINE_RULES:
        author = clean_author_name(rule.candidate(text))
        if author:
            logger.debug("Extracted author %r using rule %s", author, rule.name)
            return author

    return None
