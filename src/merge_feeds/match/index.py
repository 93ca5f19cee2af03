"""Lookup index over secondary-feed items."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Optional

from merge_feeds.extract.metadata import extract_metadata
from merge_feeds.feeds.document import FeedItem
from merge_feeds.models import IndexEntry
from merge_feeds.normalize.columns import detect_column_fragment
from merge_feeds.normalize.text import normalize_text

logger = logging.getLogger(__name__)


def qualifies(link: Optional[str], secondary_marker: str, primary_marker: Optional[str] = None) -> bool:
    """Whether a secondary item's link points at the secondary publication."""
    if not link or secondary_marker not in link:
        return False
    return not (primary_marker and primary_marker in link)


class SecondaryIndex:
    """Secondary items keyed by normalized title, author, column and fragment.

    Every mapping holds lists in insertion order. The index is read-only once
    built.
    """

    def __init__(self) -> None:
        self.entries: list[IndexEntry] = []
        self.by_full: dict[str, list[IndexEntry]] = defaultdict(list)
        self.by_core: dict[str, list[IndexEntry]] = defaultdict(list)
        self.by_author: dict[str, list[IndexEntry]] = defaultdict(list)
        self.by_column: dict[str, list[IndexEntry]] = defaultdict(list)
        self.by_fragment: dict[str, list[IndexEntry]] = defaultdict(list)
        self.excluded_count = 0

    @classmethod
    def build(
        cls,
        items: Iterable[FeedItem],
        secondary_marker: str,
        primary_marker: Optional[str] = None,
    ) -> SecondaryIndex:
        index = cls()
        items = list(items)
        logger.info("Building indexes for %d secondary items", len(items))

        for item in items:
            metadata = extract_metadata(item)

            if not metadata.title:
                logger.warning("Skipping secondary item with no title")
                index.excluded_count += 1
                continue

            if not qualifies(metadata.link, secondary_marker, primary_marker):
                logger.warning("Excluding secondary item %r: link %r is not a %s link",
                               metadata.title, metadata.link, secondary_marker)
                index.excluded_count += 1
                continue

            parsed = metadata.parsed_title
            column = parsed.column.lower() if parsed.column else None
            fragment = detect_column_fragment(metadata.title)

            entry = IndexEntry(
                metadata=metadata,
                normalized_full=normalize_text(metadata.title, strip_column_names=False),
                normalized_core=normalize_text(parsed.core_title, strip_column_names=False),
                author=(metadata.effective_author or "").lower(),
                column=column,
                position=len(index.entries),
                fragment_confidence=fragment.confidence if fragment else 0.0,
            )
            index._add(entry, fragment.full_name.lower() if fragment else None)

            logger.debug(
                "Indexed %r (core=%r, author=%r, column=%r, fragment=%s)",
                metadata.title, entry.normalized_core, entry.author, entry.column,
                f"{fragment.full_name} ({fragment.confidence:.2f})" if fragment else None,
            )

        logger.info(
            "Built indexes: %d items, %d titles, %d core titles, %d authors, %d columns, %d fragments (%d excluded)",
            len(index.entries), len(index.by_full), len(index.by_core), len(index.by_author),
            len(index.by_column), len(index.by_fragment), index.excluded_count,
        )
        return index

    def _add(self, entry: IndexEntry, fragment_key: Optional[str]) -> None:
        self.entries.append(entry)
        if entry.normalized_full:
            self.by_full[entry.normalized_full].append(entry)
        if entry.normalized_core and entry.normalized_core != entry.normalized_full:
            self.by_core[entry.normalized_core].append(entry)
        if entry.author:
            self.by_author[entry.author].append(entry)
        if entry.column:
            self.by_column[entry.column].append(entry)
        if fragment_key:
            self.by_fragment[fragment_key].append(entry)

    def __len__(self) -> int:
        return len(self.entries)

    def lookup_full(self, key: str) -> list[IndexEntry]:
        return list(self.by_full.get(key, [])) if key else []

    def lookup_core(self, key: str) -> list[IndexEntry]:
        """Entries whose normalized core title equals ``key``, in insertion order.

        Items without a column have core == full and live only in ``by_full``.
        """
        if not key:
            return []
        matches = list(self.by_core.get(key, []))
        matches.extend(e for e in self.by_full.get(key, []) if e.normalized_core == e.normalized_full)
        return sorted(matches, key=lambda e: e.position)

    def lookup_fragment(self, column: str) -> list[IndexEntry]:
        return list(self.by_fragment.get(column, [])) if column else []

    def candidates_for(self, author: Optional[str], column: Optional[str]) -> list[IndexEntry]:
        """Entries sharing the author or column; all entries when neither narrows."""
        selected: dict[int, IndexEntry] = {}
        if author:
            for entry in self.by_author.get(author.lower(), []):
                selected[entry.position] = entry
        if column:
            for entry in self.by_column.get(column.lower(), []):
                selected[entry.position] = entry
        if not selected:
            return list(self.entries)
        return [selected[position] for position in sorted(selected)]
