"""Rewrite e-edition article links into their short canonical form."""

import logging
import re

logger = logging.getLogger(__name__)

# e.g. ...rss.php?date=20240612&...&page=3theark03...&id=art_12345.xml
SECONDARY_LINK_PATTERN = re.compile(r"date=(\d+).*?page=\d+theark(\d+).*?id=art_(\d+)\.xml")

CANONICAL_LINK_TEMPLATE = (
    "https://thearknewspaper-ca.newsmemory.com"
    "?selDate={date}&goTo={page}&artid={artid}&editionStart=The%20Ark"
)


def reformat_link(url: str) -> str:
    """Short canonical URL for a secondary link; unrecognised links pass through."""
    match = SECONDARY_LINK_PATTERN.search(url or "")
    if not match:
        logger.warning("Could not reformat URL: %s", url)
        return url

    date, page, artid = match.groups()
    return CANONICAL_LINK_TEMPLATE.format(date=date, page=page.zfill(2), artid=artid)
