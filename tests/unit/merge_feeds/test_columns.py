"""Tests for merge_feeds.normalize.columns module."""

import pytest

from merge_feeds.normalize.columns import detect_column_fragment, is_jump_page, parse_column_title


class TestIsJumpPage:
    def test_jump_page_detected(self) -> None:
        assert is_jump_page("Encounters, from page 3")

    def test_from_without_comma_is_not_jump_page(self) -> None:
        assert not is_jump_page("Notes from an Appraiser")
        assert not is_jump_page(None)


class TestDetectColumnFragment:
    def test_exact_fragment(self) -> None:
        fragment = detect_column_fragment("Encounters")
        assert fragment is not None
        assert fragment.full_name == "Everyday Encounters"
        assert fragment.confidence == 1.0

    def test_trailing_punctuation_ignored(self) -> None:
        fragment = detect_column_fragment("Encounter:")
        assert fragment is not None
        assert fragment.full_name == "Everyday Encounters"
        assert fragment.confidence == 1.0

    def test_partial_fragment_scored_by_similarity(self) -> None:
        fragment = detect_column_fragment("Encounterz")
        assert fragment is not None
        assert fragment.full_name == "Everyday Encounters"
        assert fragment.confidence == pytest.approx(0.9)

    def test_jump_page_is_not_fragment(self) -> None:
        assert detect_column_fragment("Encounters, from page 3") is None

    def test_headline_is_not_fragment(self) -> None:
        assert detect_column_fragment("Garden Plot: Tomatoes ripen early") is None
        assert detect_column_fragment("") is None


class TestParseColumnTitle:
    def test_known_column_with_colon(self) -> None:
        parsed = parse_column_title("Garden Plot: Roses in Bloom")
        assert parsed.column_name == "Garden Plot"
        assert parsed.core_title == "Roses in Bloom"
        assert parsed.full_title == "Garden Plot: Roses in Bloom"
        assert not parsed.is_fragment

    def test_known_column_with_space(self) -> None:
        parsed = parse_column_title("Sports Shout Redwood wins title")
        assert parsed.column_name == "Sports Shout"
        assert parsed.core_title == "Redwood wins title"

    def test_common_prefix_requires_colon(self) -> None:
        parsed = parse_column_title("Breaking: Fire on Ridge Road")
        assert parsed.column_name == "Breaking"
        assert parsed.core_title == "Fire on Ridge Road"

    def test_generic_prefix(self) -> None:
        parsed = parse_column_title("Tiburon Library: New hours start Monday")
        assert parsed.column_name == "Tiburon Library"
        assert parsed.core_title == "New hours start Monday"

    def test_generic_prefix_needs_long_core(self) -> None:
        parsed = parse_column_title("Opinion: Yes")
        assert parsed.column_name is None
        assert parsed.core_title == "Opinion: Yes"

    def test_fragment_title_keeps_itself_as_core(self) -> None:
        parsed = parse_column_title("Encounters")
        assert parsed.is_fragment
        assert parsed.fragment_confidence == 1.0
        assert parsed.core_title == "Encounters"
        assert parsed.column_name is None
        assert parsed.fragment_column == "Everyday Encounters"
        assert parsed.column == "Everyday Encounters"

    def test_jump_page_has_no_column(self) -> None:
        parsed = parse_column_title("Encounters, from page 3")
        assert parsed.column is None
        assert not parsed.is_fragment
        assert parsed.core_title == "Encounters, from page 3"

    def test_plain_title(self) -> None:
        parsed = parse_column_title("City council votes on budget")
        assert parsed.column is None
        assert parsed.core_title == parsed.full_title

    def test_empty_title(self) -> None:
        parsed = parse_column_title("")
        assert parsed.full_title == ""
        assert parsed.core_title == ""

    @pytest.mark.parametrize(
        "title",
        ["Garden Plot: Roses in Bloom", "Breaking: Fire on Ridge Road", "Encounters", "Plain headline here"],
    )
    def test_core_is_contained_in_full(self, title: str) -> None:
        parsed = parse_column_title(title)
        assert parsed.core_title in parsed.full_title
