"""Fatal, feed-level errors for merge_feeds."""


class FetchError(Exception):
    """A feed could not be fetched after exhausting all retries."""

    def __init__(self, url: str, attempts: int, reason: str):
        super().__init__(f"Failed to fetch {url} after {attempts} attempts: {reason}")
        self.url = url
        self.attempts = attempts
        self.reason = reason


class MalformedFeedError(Exception):
    """A fetched document is not a usable RSS feed."""
