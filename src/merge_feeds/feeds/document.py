"""RSS document access backed by lxml.

Items are exposed read-only; the only mutation is replacing one named child
field on a copy of an item, so the rest of each item is serialized untouched.
"""

from __future__ import annotations

import copy
import logging
from typing import Iterable, Optional

from lxml import etree

from merge_feeds.errors import MalformedFeedError

logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        strip_cdata=False,
        resolve_entities=False,
        no_network=True,
        remove_blank_text=False,
    )


def _local_name(element) -> Optional[str]:
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


class FeedItem:
    """Read-only view of one ``<item>`` element."""

    def __init__(self, element: etree._Element):
        self._element = element

    @property
    def element(self) -> etree._Element:
        return self._element

    def _child(self, field: str):
        for child in self._element:
            if _local_name(child) == field:
                return child
        return None

    def get(self, field: str) -> Optional[str]:
        """Stripped text of the first child named ``field`` (any namespace)."""
        child = self._child(field)
        if child is None:
            return None
        text = "".join(child.itertext()).strip()
        return text or None

    def is_cdata(self, field: str) -> bool:
        """Whether the named child's content was written as a CDATA section."""
        child = self._child(field)
        if child is None:
            return False
        return b"<![CDATA[" in etree.tostring(child)

    def with_field(self, field: str, value: str) -> FeedItem:
        """Copy of this item with one child's text replaced (inserted first when missing)."""
        element = copy.deepcopy(self._element)
        clone = FeedItem(element)
        child = clone._child(field)
        if child is None:
            child = etree.Element(field)
            element.insert(0, child)
        else:
            for grandchild in list(child):
                child.remove(grandchild)
        child.text = value
        return clone


class FeedDocument:
    """A parsed RSS document with a single ``<channel>``."""

    def __init__(self, root: etree._Element):
        self._root = root
        channel = root if _local_name(root) == "channel" else root.find(".//channel")
        if channel is None:
            raise MalformedFeedError("Invalid RSS structure: missing channel element")
        self._channel = channel

    @classmethod
    def parse(cls, content: bytes, source: str = "<feed>") -> FeedDocument:
        """Parse raw feed bytes; syntax errors and missing channels raise MalformedFeedError."""
        try:
            root = etree.fromstring(content, _make_parser())
        except etree.XMLSyntaxError as e:
            raise MalformedFeedError(f"Failed to parse {source}: {e}") from e
        if root is None:
            raise MalformedFeedError(f"Failed to parse {source}: empty document")
        return cls(root)

    def items(self) -> list[FeedItem]:
        return [FeedItem(element) for element in self._channel.iter("item")]

    def with_items(self, items: Iterable[FeedItem], self_link: Optional[str] = None) -> FeedDocument:
        """Copy of this document whose items are replaced by ``items``, in order."""
        root = copy.deepcopy(self._root)
        result = FeedDocument(root)

        for element in list(result._channel.iter("item")):
            element.getparent().remove(element)

        for item in items:
            result._channel.append(copy.deepcopy(item.element))

        if self_link:
            result.set_self_link(self_link)

        return result

    def set_self_link(self, href: str) -> int:
        """Point every ``atom:link rel="self"`` in the channel at ``href``."""
        updated = 0
        for link in self._channel.iter(f"{{{ATOM_NS}}}link"):
            if link.get("rel") == "self":
                link.set("href", href)
                updated += 1
        if updated:
            logger.info("Fixed %d self-reference link(s) -> %s", updated, href)
        return updated

    def to_bytes(self) -> bytes:
        return etree.tostring(
            self._root.getroottree(),
            xml_declaration=True,
            encoding="UTF-8",
        )
