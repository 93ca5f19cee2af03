"""Tests for merge_feeds.links module."""

from merge_feeds.links import reformat_link


class TestReformatLink:
    def test_single_digit_page_is_padded(self) -> None:
        url = (
            "https://thearknewspaper-ca.newsmemory.com/rss.php"
            "?date=20240612&edition=The%20Ark&page=3theark3&id=art_12345.xml"
        )
        assert reformat_link(url) == (
            "https://thearknewspaper-ca.newsmemory.com"
            "?selDate=20240612&goTo=03&artid=12345&editionStart=The%20Ark"
        )

    def test_two_digit_page(self) -> None:
        url = "https://thearknewspaper-ca.newsmemory.com/rss.php?date=20240612&page=12theark12&id=art_7.xml"
        assert "goTo=12&artid=7" in reformat_link(url)

    def test_unrecognised_link_passes_through(self) -> None:
        url = "https://thearknewspaper-ca.newsmemory.com/other"
        assert reformat_link(url) == url
