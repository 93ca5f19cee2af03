"""Helper functions for the merge_feeds CLI."""

from __future__ import annotations

import argparse

from merge_feeds.config import MergeConfig


def parse_merge_feeds_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for merge_feeds.'''

    parser = argparse.ArgumentParser(description="Merge the Ark website feed with e-edition links.")
    parser.add_argument(
        "--config",
        default=None,
        help="Config name under configs/ or a path to a YAML file (default: $CONFIG_ENV or prod).",
    )

    # Output options
    parser.add_argument("--output", default=None, help="Override the merged feed output path")
    parser.add_argument("--report", default=None, help="Override the merge report path")
    parser.add_argument("--no-report", action="store_true", help="Do not write a merge report")

    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def apply_overrides(config: MergeConfig, args: argparse.Namespace) -> MergeConfig:
    '''Apply command line output overrides on top of the loaded config.'''

    if args.output:
        config.output.output_file = args.output
    if args.report:
        config.output.report_file = args.report
    if args.no_report:
        config.output.generate_report = False
    return config
