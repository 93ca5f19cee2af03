"""Shared feed builders for merge_feeds tests."""

from typing import Callable
from xml.sax.saxutils import escape

import pytest

PRIMARY_SELF_LINK = "https://www.thearknewspaper.com/blog-feed.xml"

FIELD_TAGS = {
    "link": "link",
    "creator": "dc:creator",
    "pubDate": "pubDate",
    "guid": "guid",
    "description": "description",
    "full": "full",
}


def build_feed(items: list[dict], self_link: str = PRIMARY_SELF_LINK) -> bytes:
    """Build RSS 2.0 bytes; items are dicts of field -> text (title goes in CDATA)."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:atom="http://www.w3.org/2005/Atom">',
        "<channel>",
        "<title>The Ark</title>",
        f'<atom:link href="{escape(self_link)}" rel="self" type="application/rss+xml"/>',
    ]
    for item in items:
        parts.append("<item>")
        if item.get("title") is not None:
            parts.append(f"<title><![CDATA[{item['title']}]]></title>")
        for field, tag in FIELD_TAGS.items():
            if item.get(field) is not None:
                parts.append(f"<{tag}>{escape(item[field])}</{tag}>")
        parts.append("</item>")
    parts.extend(["</channel>", "</rss>"])
    return "\n".join(parts).encode("utf-8")


def nm_link(article_id: int, page: int = 3, date: str = "20240612") -> str:
    return (
        "https://thearknewspaper-ca.newsmemory.com/rss.php"
        f"?date={date}&edition=The%20Ark&page={page}theark{page}&id=art_{article_id}.xml"
    )


@pytest.fixture
def make_feed() -> Callable[..., bytes]:
    return build_feed


@pytest.fixture
def make_nm_link() -> Callable[..., str]:
    return nm_link
