"""Metadata extraction from raw feed items."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import parse as parse_date

from merge_feeds.extract.bylines import extract_byline
from merge_feeds.feeds.document import FeedItem
from merge_feeds.models import ItemMetadata
from merge_feeds.normalize.columns import parse_column_title
from merge_feeds.normalize.text import decode_html_entities

logger = logging.getLogger(__name__)

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}

# Shapes tried when the whole string does not parse
ALTERNATE_DATE_PATTERNS = [
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(r"\d{2}/\d{2}/\d{4}"),
    re.compile(r"\d{1,2}\s+[A-Za-z]+\s+\d{4}"),
]

_CDATA_WRAPPED = re.compile(r"^\s*<!\[CDATA\[(.*?)\]\]>\s*$", re.DOTALL)
_CDATA_EMBEDDED = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_EXTRA_SPACES = re.compile(r"\s{2,}")
_TRAILING_PUNCTUATION = re.compile(r"[,;:]+$")


def clean_title(raw: Optional[str]) -> str:
    """Unwrap literal CDATA, decode entities and trim trailing punctuation."""
    if not raw:
        return ""

    title = raw
    match = _CDATA_WRAPPED.match(title) or _CDATA_EMBEDDED.search(title)
    if match:
        title = match.group(1)

    title = decode_html_entities(title)
    title = _EXTRA_SPACES.sub(" ", title).strip()
    title = _TRAILING_PUNCTUATION.sub("", title).strip()
    return title


def extract_title(item: FeedItem) -> Optional[str]:
    title = clean_title(item.get("title"))
    if title:
        logger.debug("Extracted title: %r%s", title, " (CDATA)" if item.is_cdata("title") else "")
    return title or None


def extract_author(item: FeedItem) -> tuple[Optional[str], Optional[str]]:
    """Return (creator tag author, byline-extracted author)."""
    creator = item.get("creator")
    extracted = extract_byline(item.get("full"))
    return creator or None, extracted


def _to_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def extract_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a publication date; never raises, returns None when unparseable."""
    if not value:
        return None

    try:
        return _to_aware(parse_date(value, tzinfos=TZINFOS))
    except (ValueError, OverflowError):
        pass

    for pattern in ALTERNATE_DATE_PATTERNS:
        match = pattern.search(value)
        if not match:
            continue
        try:
            return _to_aware(parse_date(match.group(0)))
        except (ValueError, OverflowError):
            continue

    logger.warning("Failed to parse date: %r", value)
    return None


def extract_metadata(item: FeedItem) -> ItemMetadata:
    """Build the normalized metadata view of a feed item. Missing fields stay None."""
    title = extract_title(item)
    author, extracted_author = extract_author(item)

    return ItemMetadata(
        title=title,
        parsed_title=parse_column_title(title) if title else None,
        link=item.get("link"),
        author=author,
        extracted_author=extracted_author,
        pub_date=extract_date(item.get("pubDate")),
        description=item.get("description"),
        guid=item.get("guid"),
    )
