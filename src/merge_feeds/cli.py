"""CLI for merging the primary and secondary RSS feeds."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from merge_feeds.config import load_config
from merge_feeds.errors import FetchError, MalformedFeedError
from merge_feeds.helpers import apply_overrides, parse_merge_feeds_args
from merge_feeds.merge_feeds import MergeOrchestrator

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_merge_feeds_args(argv)

    load_dotenv()
    setup_logging(args.verbose)

    config = apply_overrides(load_config(args.config), args)
    logger.info("Primary feed: %s", config.feeds.primary_url)
    logger.info("Secondary feed: %s", config.feeds.secondary_url)

    orchestrator = MergeOrchestrator(config)
    try:
        orchestrator.run()
    except (FetchError, MalformedFeedError) as e:
        logger.error("RSS merge failed: %s", e)
        sys.exit(1)

    logger.info("Merged feed written to %s", config.output.output_file)


if __name__ == "__main__":
    main()
