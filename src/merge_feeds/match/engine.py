"""Matching primary items to secondary items.

The engine runs a cascade of strategies and returns the first hit:

1. exact_full       normalized full titles are equal
2. exact_core       normalized core titles (column label removed) are equal
3. fragment_column  the primary's column has a secondary "fragment" item
4. prefix_removed   a secondary full title equals the primary core
5. reverse_prefix   a secondary core title equals the primary full title
6. fuzzy            best weighted score strictly above the fuzzy threshold
"""

import logging
import math
from typing import Optional

from merge_feeds.config import MergeConfig
from merge_feeds.match.index import SecondaryIndex
from merge_feeds.match.similarity import detect_fragment, edit_distance_similarity, title_similarity
from merge_feeds.models import (
    EXACT_CORE,
    EXACT_FULL,
    FRAGMENT_COLUMN,
    FUZZY,
    PREFIX_REMOVED,
    REVERSE_PREFIX,
    IndexEntry,
    ItemMetadata,
    MatchResult,
    MatchScore,
)
from merge_feeds.normalize.columns import detect_column_fragment
from merge_feeds.normalize.text import normalize_text

logger = logging.getLogger(__name__)

DATE_DECAY_DAYS = 7.0
AUTHOR_CONTAINMENT_SCORE = 0.8


def _author_score(primary: ItemMetadata, secondary: ItemMetadata) -> float:
    primary_author = (primary.effective_author or "").lower()
    secondary_author = (secondary.effective_author or "").lower()

    if not primary_author or not secondary_author:
        return 0.0
    if primary_author == secondary_author:
        return 1.0
    if primary_author in secondary_author or secondary_author in primary_author:
        return AUTHOR_CONTAINMENT_SCORE
    return edit_distance_similarity(primary_author, secondary_author)


def _date_score(primary: ItemMetadata, secondary: ItemMetadata) -> float:
    if not primary.pub_date or not secondary.pub_date:
        return 0.0
    diff_days = abs((primary.pub_date - secondary.pub_date).total_seconds()) / 86400
    return math.exp(-diff_days / DATE_DECAY_DAYS)


def calculate_match_score(primary: ItemMetadata, secondary: ItemMetadata, config: MergeConfig) -> MatchScore:
    """Weighted similarity of two items, plus a bonus when fragment detection fires."""
    thresholds = config.thresholds
    weights = config.weights
    score = MatchScore()

    if primary.parsed_title and secondary.parsed_title:
        primary_core = primary.parsed_title.core_title
        secondary_core = secondary.parsed_title.core_title

        fragment_score = max(
            detect_fragment(secondary.title, primary.title),
            detect_fragment(secondary_core, primary_core),
            detect_fragment(primary_core, secondary.title),
        )

        if fragment_score > thresholds.fragment_match:
            score.title_similarity = fragment_score
            score.fragment_bonus = thresholds.column_match_bonus
        else:
            score.title_similarity = title_similarity(
                normalize_text(primary_core, strip_column_names=False),
                normalize_text(secondary_core, strip_column_names=False),
            )

        primary_column = primary.parsed_title.column
        secondary_column = secondary.parsed_title.column
        if primary_column and secondary_column:
            col1, col2 = primary_column.lower(), secondary_column.lower()
            if col1 == col2:
                score.column_match = 1.0
            else:
                fragment = detect_column_fragment(secondary.title)
                if fragment and fragment.full_name.lower() == col1:
                    score.column_match = fragment.confidence
                    score.fragment_bonus += thresholds.column_match_bonus
                else:
                    score.column_match = edit_distance_similarity(col1, col2)

    score.author_match = _author_score(primary, secondary)
    score.date_proximity = _date_score(primary, secondary)

    score.total = (
        score.title_similarity * weights.title_similarity
        + score.author_match * weights.author_match
        + score.column_match * weights.column_match
        + score.date_proximity * weights.date_proximity
        + score.fragment_bonus
    )
    return score


class MatchEngine:
    """Finds the secondary item backing a primary item."""

    def __init__(self, config: MergeConfig):
        self.config = config

    def _result(self, primary: ItemMetadata, entry: IndexEntry, strategy: str) -> MatchResult:
        score = calculate_match_score(primary, entry.metadata, self.config)
        logger.info("Found %s match: %r -> %r", strategy, primary.title, entry.metadata.title)
        return MatchResult(entry=entry, score=score, strategy=strategy)

    def find_best_match(self, primary: ItemMetadata, index: SecondaryIndex) -> Optional[MatchResult]:
        if not primary.title:
            return None

        core_title = primary.parsed_title.core_title if primary.parsed_title else primary.title
        normalized_full = normalize_text(primary.title, strip_column_names=False)
        normalized_core = normalize_text(core_title, strip_column_names=False)
        logger.debug("Finding match for %r (full=%r, core=%r)", primary.title, normalized_full, normalized_core)

        matches = index.lookup_full(normalized_full)
        if matches:
            return self._result(primary, matches[0], EXACT_FULL)

        matches = index.lookup_core(normalized_core)
        if matches:
            return self._result(primary, matches[0], EXACT_CORE)

        column = primary.parsed_title.column if primary.parsed_title else None
        if column:
            for entry in index.lookup_fragment(column.lower()):
                if entry.fragment_confidence > self.config.thresholds.fragment_match:
                    return self._result(primary, entry, FRAGMENT_COLUMN)

        for secondary_full, entries in index.by_full.items():
            if secondary_full == normalized_core:
                return self._result(primary, entries[0], PREFIX_REMOVED)

        for entry in index.entries:
            if entry.normalized_core and entry.normalized_core == normalized_full:
                return self._result(primary, entry, REVERSE_PREFIX)

        return self._fuzzy_match(primary, index, column)

    def _fuzzy_match(
        self,
        primary: ItemMetadata,
        index: SecondaryIndex,
        column: Optional[str],
    ) -> Optional[MatchResult]:
        if self.config.thresholds.narrow_fuzzy_candidates:
            candidates = index.candidates_for(primary.effective_author, column)
        else:
            candidates = index.entries
        logger.debug("Performing fuzzy matching across %d items", len(candidates))

        best_entry = None
        best_score = None
        for entry in candidates:
            score = calculate_match_score(primary, entry.metadata, self.config)
            logger.debug(
                "  candidate %r -> total=%.3f (title=%.3f, author=%.3f, column=%.3f, date=%.3f, bonus=%.2f)",
                entry.metadata.title, score.total, score.title_similarity, score.author_match,
                score.column_match, score.date_proximity, score.fragment_bonus,
            )
            if score.total > self.config.thresholds.fuzzy_match and (
                best_score is None or score.total > best_score.total
            ):
                best_entry, best_score = entry, score

        if best_entry is None:
            logger.info("No suitable match found for %r", primary.title)
            return None

        logger.info("Found fuzzy match with score %.3f: %r -> %r",
                    best_score.total, primary.title, best_entry.metadata.title)
        return MatchResult(entry=best_entry, score=best_score, strategy=FUZZY)
