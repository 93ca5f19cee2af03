"""Merge the primary and secondary feeds.

Primary items keep their title, description, author and date; their link is
replaced with the link of the matching secondary item. Items without a match
are dropped, and each secondary item backs at most one output item.

Assignment is greedy: primary items are processed in feed order and the first
one to match a secondary item claims it, even if a later primary item would
have matched it better.
"""

import logging
import time
from datetime import datetime, timezone

from common.local_io import save_bytes_local, save_json_local
from merge_feeds.config import MergeConfig
from merge_feeds.extract.metadata import extract_metadata
from merge_feeds.feeds.document import FeedDocument, FeedItem
from merge_feeds.feeds.fetch import fetch_feeds
from merge_feeds.links import reformat_link
from merge_feeds.match.engine import MatchEngine
from merge_feeds.match.index import SecondaryIndex
from merge_feeds.models import (
    EXACT_CORE,
    EXACT_FULL,
    FRAGMENT_COLUMN,
    STATE_DONE,
    STATE_FAILED,
    STATE_INDEX_BUILT,
    STATE_PROCESSING,
    ErrorRecord,
    MatchRecord,
    MatchResult,
    MergeReport,
    UnmatchedRecord,
)
from merge_feeds.normalize.text import normalize_text

logger = logging.getLogger(__name__)


class MergeOrchestrator:
    """Drives one merge run: init -> index_built -> processing -> done (or failed)."""

    def __init__(self, config: MergeConfig):
        self.config = config
        self.engine = MatchEngine(config)
        self.report = MergeReport(started_at=datetime.now(timezone.utc), config=config.to_dict())

    @property
    def state(self) -> str:
        return self.report.state

    def _transition(self, state: str) -> None:
        logger.debug("Merge state %s -> %s", self.report.state, state)
        self.report.state = state

    def build_index(self, secondary_doc: FeedDocument) -> SecondaryIndex:
        feeds = self.config.feeds
        items = secondary_doc.items()
        self.report.stats.secondary_items = len(items)

        index = SecondaryIndex.build(items, feeds.secondary_domain_marker, feeds.primary_domain_marker)
        self.report.stats.indexed_items = len(index)
        self.report.stats.excluded_secondary_items = index.excluded_count

        self._transition(STATE_INDEX_BUILT)
        return index

    def _record_match(self, title: str, result: MatchResult, link: str) -> None:
        stats = self.report.stats
        if result.strategy in (EXACT_FULL, EXACT_CORE):
            stats.exact_matches += 1
        elif result.strategy == FRAGMENT_COLUMN:
            stats.fragment_matches += 1
        else:
            stats.fuzzy_matches += 1

        counts = self.report.strategy_counts
        counts[result.strategy] = counts.get(result.strategy, 0) + 1

        self.report.matches.append(
            MatchRecord(
                primary_title=title,
                secondary_title=result.entry.metadata.title,
                strategy=result.strategy,
                score=result.score,
                link=link,
            )
        )

    def process(self, primary_items: list[FeedItem], index: SecondaryIndex) -> list[FeedItem]:
        """Match primary items in order and return the rewritten output items."""
        self._transition(STATE_PROCESSING)
        stats = self.report.stats
        stats.primary_items = len(primary_items)

        accepted_cores: set[str] = set()
        consumed_secondary: set[str] = set()
        output: list[FeedItem] = []

        for i, item in enumerate(primary_items, start=1):
            metadata = extract_metadata(item)

            if not metadata.title:
                logger.warning("Skipping item %d: no title found", i)
                stats.skipped_items += 1
                continue

            logger.info("Processing %d/%d: %r", i, len(primary_items), metadata.title)

            core_title = metadata.parsed_title.core_title
            normalized_core = normalize_text(core_title, strip_column_names=False)
            if normalized_core in accepted_cores:
                logger.info("Skipping duplicate core title: %r", metadata.title)
                stats.duplicates_skipped += 1
                continue

            result = self.engine.find_best_match(metadata, index)
            if result is None:
                stats.no_matches += 1
                self.report.unmatched.append(
                    UnmatchedRecord(
                        title=metadata.title,
                        author=metadata.effective_author,
                        pub_date=metadata.pub_date,
                    )
                )
                continue

            secondary_id = result.entry.metadata.identity
            if secondary_id in consumed_secondary:
                logger.info("Skipping - secondary item already matched: %r", result.entry.metadata.title)
                stats.duplicates_skipped += 1
                continue

            link = reformat_link(result.entry.metadata.link)
            output.append(item.with_field("link", link))
            accepted_cores.add(normalized_core)
            consumed_secondary.add(secondary_id)
            self._record_match(metadata.title, result, link)

        self.report.final_item_count = len(output)
        return output

    def merge(self, primary_doc: FeedDocument, secondary_doc: FeedDocument) -> FeedDocument:
        """Merge two parsed feeds into a new document based on the primary."""
        index = self.build_index(secondary_doc)
        output_items = self.process(primary_doc.items(), index)
        merged = primary_doc.with_items(output_items, self_link=self.config.feeds.self_link)
        self._transition(STATE_DONE)
        return merged

    def run(self) -> bytes:
        """Fetch, merge and write the merged feed and report.

        On any failure the report is still written, then the error propagates.
        The merged feed is only written after a successful merge.
        """
        start = time.monotonic()
        feeds = self.config.feeds
        logger.info("Starting RSS feed merge")

        try:
            primary_xml, secondary_xml = fetch_feeds(feeds.primary_url, feeds.secondary_url, self.config.network)
            primary_doc = FeedDocument.parse(primary_xml, feeds.primary_url)
            secondary_doc = FeedDocument.parse(secondary_xml, feeds.secondary_url)

            merged = self.merge(primary_doc, secondary_doc)
            content = merged.to_bytes()
            save_bytes_local(content, self.config.output.output_file)
        except Exception as e:
            self._transition(STATE_FAILED)
            self.report.errors.append(
                ErrorRecord(type=type(e).__name__, message=str(e), timestamp=datetime.now(timezone.utc))
            )
            logger.error("Merge failed: %s", e)
            self._finish(start)
            raise

        self._finish(start)
        self.log_summary()
        return content

    def _finish(self, start: float) -> None:
        self.report.finished_at = datetime.now(timezone.utc)
        self.report.duration_ms = int((time.monotonic() - start) * 1000)
        if self.config.output.generate_report:
            save_json_local(self.report, self.config.output.report_file)

    def log_summary(self) -> None:
        stats = self.report.stats
        logger.info("Merge complete in %.2fs", (self.report.duration_ms or 0) / 1000)
        logger.info("Final feed: %d items", stats.total_matched)
        logger.info("Exact matches: %d", stats.exact_matches)
        logger.info("Fragment matches: %d", stats.fragment_matches)
        logger.info("Fuzzy matches: %d", stats.fuzzy_matches)
        logger.info("No matches: %d", stats.no_matches)
        logger.info("Duplicates skipped: %d", stats.duplicates_skipped)


def merge_feeds(config: MergeConfig) -> MergeReport:
    """Run one merge with ``config`` and return its report."""
    orchestrator = MergeOrchestrator(config)
    orchestrator.run()
    return orchestrator.report
