"""Tests for merge_feeds.feeds.fetch module."""

from unittest.mock import Mock, call, patch

import pytest
import requests

from merge_feeds.config import NetworkConfig
from merge_feeds.errors import FetchError
from merge_feeds.feeds.fetch import fetch_feed, fetch_feeds

URL = "https://www.thearknewspaper.com/blog-feed.xml"


def _response(content: bytes = b"<rss/>") -> Mock:
    response = Mock()
    response.content = content
    response.raise_for_status.return_value = None
    return response


class TestFetchFeed:
    @patch("merge_feeds.feeds.fetch.time.sleep")
    @patch("merge_feeds.feeds.fetch.requests.get")
    def test_returns_content(self, mock_get, mock_sleep) -> None:
        mock_get.return_value = _response(b"<rss>ok</rss>")
        network = NetworkConfig(request_timeout=5.0, user_agent="test-agent")

        assert fetch_feed(URL, network) == b"<rss>ok</rss>"
        mock_get.assert_called_once_with(URL, timeout=5.0, headers={"User-Agent": "test-agent"})
        mock_sleep.assert_not_called()

    @patch("merge_feeds.feeds.fetch.time.sleep")
    @patch("merge_feeds.feeds.fetch.requests.get")
    def test_retries_then_succeeds(self, mock_get, mock_sleep) -> None:
        mock_get.side_effect = [requests.ConnectionError("boom"), _response()]

        assert fetch_feed(URL, NetworkConfig(retry_delay=2.0)) == b"<rss/>"
        assert mock_get.call_count == 2
        mock_sleep.assert_called_once_with(2.0)

    @patch("merge_feeds.feeds.fetch.time.sleep")
    @patch("merge_feeds.feeds.fetch.requests.get")
    def test_raises_after_all_attempts(self, mock_get, mock_sleep) -> None:
        mock_get.side_effect = requests.ConnectionError("boom")

        with pytest.raises(FetchError) as exc_info:
            fetch_feed(URL, NetworkConfig(max_retries=3, retry_delay=1.0))

        assert exc_info.value.url == URL
        assert exc_info.value.attempts == 3
        assert "boom" in str(exc_info.value)
        assert mock_get.call_count == 3
        assert mock_sleep.call_args_list == [call(1.0), call(2.0)]

    @patch("merge_feeds.feeds.fetch.time.sleep")
    @patch("merge_feeds.feeds.fetch.requests.get")
    def test_http_error_counts_as_failure(self, mock_get, mock_sleep) -> None:
        response = _response()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_get.return_value = response

        with pytest.raises(FetchError):
            fetch_feed(URL, NetworkConfig(max_retries=2, retry_delay=0.0))
        assert mock_get.call_count == 2


class TestFetchFeeds:
    @patch("merge_feeds.feeds.fetch.fetch_feed")
    def test_returns_primary_then_secondary(self, mock_fetch_feed) -> None:
        mock_fetch_feed.side_effect = lambda url, network: url.encode()

        primary, secondary = fetch_feeds("https://a.example/rss", "https://b.example/rss", NetworkConfig())

        assert primary == b"https://a.example/rss"
        assert secondary == b"https://b.example/rss"

    @patch("merge_feeds.feeds.fetch.fetch_feed")
    def test_propagates_fetch_error(self, mock_fetch_feed) -> None:
        mock_fetch_feed.side_effect = FetchError("https://b.example/rss", 3, "timeout")

        with pytest.raises(FetchError):
            fetch_feeds("https://a.example/rss", "https://b.example/rss", NetworkConfig())
