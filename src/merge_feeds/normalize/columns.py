"""Column-title parsing and column-fragment detection."""

import logging
import re
from typing import Optional

from merge_feeds.match.similarity import edit_distance_similarity
from merge_feeds.models import ColumnFragment, ParsedTitle

logger = logging.getLogger(__name__)

# Recurring column names that appear as title prefixes
COLUMN_NAMES = [
    "New Business",
    "Sports Shout",
    "Everyday Encounter",
    "Everyday Encounters",
    "Notes from an Appraiser",
    "Garden Plot",
    "Travel Bug",
    "Wildflower Watch",
]

# Short forms of column names as they appear in the e-edition, with their canonical name
COLUMN_FRAGMENTS = [
    ("Encounters", "Everyday Encounters"),
    ("Encounter", "Everyday Encounters"),
    ("Sports Shout", "Sports Shout"),
    ("Notes from an Appraiser", "Notes from an Appraiser"),
    ("Garden Plot", "Garden Plot"),
    ("Travel Bug", "Travel Bug"),
    ("Wildflower Watch", "Wildflower Watch"),
    ("New Business", "New Business"),
]

# Topical labels only recognised when followed by a colon
COMMON_PREFIXES = [
    "July 4 holiday",
    "Fourth of July",
    "Independence Day",
    "Holiday",
    "Breaking",
    "Update",
    "News",
    "Local",
]

# Jump pages ("Encounters, from page 3") always carry a comma before "from"
JUMP_PAGE_MARKER = ", from"

FRAGMENT_CONFIDENCE_THRESHOLD = 0.8
PARTIAL_FRAGMENT_MIN_SIMILARITY = 0.7

GENERIC_PREFIX_MAX_COLON_INDEX = 30
GENERIC_PREFIX_MAX_LENGTH = 25
GENERIC_CORE_MIN_LENGTH = 10

TRAILING_PUNCTUATION = re.compile(r"[,;:]+$")


def is_jump_page(title: Optional[str]) -> bool:
    """Whether the title is an article continuation rather than a headline."""
    return bool(title) and JUMP_PAGE_MARKER in title.lower()


def detect_column_fragment(title: Optional[str]) -> Optional[ColumnFragment]:
    """Recognise a title that is (a short form of) a known column name."""
    if not title:
        return None

    normalized = TRAILING_PUNCTUATION.sub("", title.lower()).strip()
    if not normalized:
        return None

    if JUMP_PAGE_MARKER in normalized:
        logger.debug("Skipping jump page fragment: %r", title)
        return None

    for fragment, full_name in COLUMN_FRAGMENTS:
        if normalized == fragment.lower():
            return ColumnFragment(fragment=fragment, full_name=full_name, confidence=1.0)

    for fragment, full_name in COLUMN_FRAGMENTS:
        frag_lower = fragment.lower()
        if frag_lower in normalized or normalized in frag_lower:
            similarity = edit_distance_similarity(normalized, frag_lower)
            if similarity > PARTIAL_FRAGMENT_MIN_SIMILARITY:
                return ColumnFragment(fragment=fragment, full_name=full_name, confidence=similarity)

    return None


def parse_column_title(title: Optional[str]) -> ParsedTitle:
    """Split a title into its column label (if any) and core headline."""
    if not title or not title.strip():
        return ParsedTitle(full_title=title or "", core_title=title or "")

    clean_title = title.strip()
    lowered = clean_title.lower()

    fragment = detect_column_fragment(clean_title)
    if fragment and fragment.confidence > FRAGMENT_CONFIDENCE_THRESHOLD:
        starts_with_column = lowered.startswith(fragment.full_name.lower())
        return ParsedTitle(
            full_title=clean_title,
            core_title=clean_title,
            column_name=fragment.full_name if starts_with_column else None,
            is_fragment=True,
            fragment_confidence=fragment.confidence,
            fragment_column=None if starts_with_column else fragment.full_name,
        )

    for column_name in COLUMN_NAMES:
        for separator in (":", " "):
            prefix = column_name.lower() + separator
            if lowered.startswith(prefix):
                core = clean_title[len(prefix):].strip()
                if core:
                    return ParsedTitle(full_title=clean_title, core_title=core, column_name=column_name)

    for label in COMMON_PREFIXES:
        prefix = label.lower() + ":"
        if lowered.startswith(prefix):
            core = clean_title[len(prefix):].strip()
            if core:
                return ParsedTitle(full_title=clean_title, core_title=core, column_name=label)

    # Generic "Subject: headline" labels
    colon_index = clean_title.find(":")
    if 0 < colon_index < GENERIC_PREFIX_MAX_COLON_INDEX:
        prefix = clean_title[:colon_index].strip()
        core = clean_title[colon_index + 1:].strip()
        if prefix and len(prefix) <= GENERIC_PREFIX_MAX_LENGTH and len(core) > GENERIC_CORE_MIN_LENGTH:
            return ParsedTitle(full_title=clean_title, core_title=core, column_name=prefix)

    return ParsedTitle(full_title=clean_title, core_title=clean_title)
