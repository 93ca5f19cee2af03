"""Feed fetching with retry and backoff."""

import asyncio
import logging
import time

import requests

from merge_feeds.config import NetworkConfig
from merge_feeds.errors import FetchError

logger = logging.getLogger(__name__)


def fetch_feed(url: str, network: NetworkConfig) -> bytes:
    """Fetch a feed, retrying with a linearly increasing delay.

    Raises:
        FetchError: if every attempt fails
    """
    last_error = ""
    for attempt in range(1, network.max_retries + 1):
        try:
            logger.info("Fetching %s (attempt %d/%d)", url, attempt, network.max_retries)
            response = requests.get(
                url,
                timeout=network.request_timeout,
                headers={"User-Agent": network.user_agent},
            )
            response.raise_for_status()
            return response.content
        except requests.RequestException as e:
            last_error = str(e)
            logger.warning("Attempt %d failed for %s: %s", attempt, url, e)

        if attempt < network.max_retries:
            time.sleep(network.retry_delay * attempt)

    raise FetchError(url, network.max_retries, last_error)


async def _fetch_both(primary_url: str, secondary_url: str, network: NetworkConfig) -> tuple[bytes, bytes]:
    primary, secondary = await asyncio.gather(
        asyncio.to_thread(fetch_feed, primary_url, network),
        asyncio.to_thread(fetch_feed, secondary_url, network),
    )
    return primary, secondary


def fetch_feeds(primary_url: str, secondary_url: str, network: NetworkConfig) -> tuple[bytes, bytes]:
    """Fetch the primary and secondary feeds concurrently."""
    return asyncio.run(_fetch_both(primary_url, secondary_url, network))
