"""Tests for merge_feeds.normalize.text module."""

import pytest

from merge_feeds.normalize.text import (
    apply_term_table,
    decode_html_entities,
    normalize_text,
    strip_stop_words,
)

SAMPLE_TITLES = [
    "Garden Plot: Roses in Bloom",
    "The Town Council meets in Tiburon",
    "Rock &amp; Roll Night at the Park",
    "SF Bay Area award-winning chef opens on Main St.",
    "Encounters, from page 3",
    "Notes from an Appraiser: A & B &#8217;s old clock",
    "The A Team",
    "to the end of the road",
    "&eacute;t&eacute; in Belvedere",
    "",
]


class TestDecodeHtmlEntities:
    def test_decodes_known_entities(self) -> None:
        assert decode_html_entities("Rock &amp; Roll") == "Rock & Roll"
        assert decode_html_entities("It&#8217;s here") == "It’s here"
        assert decode_html_entities("&quot;Quoted&quot;") == '"Quoted"'

    def test_drops_unknown_entities(self) -> None:
        result = decode_html_entities("Caf&eacute; opens")
        assert "&eacute;" not in result
        assert result.startswith("Caf")

    def test_empty_passthrough(self) -> None:
        assert decode_html_entities("") == ""
        assert decode_html_entities(None) is None


class TestApplyTermTable:
    def test_town_council_becomes_city_council(self) -> None:
        assert apply_term_table("Town Council meets") == "city council meets"

    def test_street_abbreviation_only_on_word_boundary(self) -> None:
        assert apply_term_table("Main St. closure") == "Main street closure"
        assert apply_term_table("First step.") == "First step."

    def test_ampersand_expands(self) -> None:
        assert " and " in apply_term_table("Rock & Roll")


class TestStripStopWords:
    def test_strips_leading_articles(self) -> None:
        assert strip_stop_words("the a team wins") == "team wins"

    def test_strips_inner_prepositions(self) -> None:
        assert strip_stop_words("roses in bloom") == "roses bloom"

    def test_keeps_first_and_last_token(self) -> None:
        assert strip_stop_words("to be or not") == "to be not"
        assert strip_stop_words("walk to") == "walk to"

    def test_strips_boilerplate(self) -> None:
        assert strip_stop_words("sf bay area award winning chef opens") == "chef opens"


class TestNormalizeText:
    def test_empty_is_empty(self) -> None:
        assert normalize_text("") == ""
        assert normalize_text(None) == ""

    def test_strips_column_by_default(self) -> None:
        assert normalize_text("Garden Plot: Roses in Bloom") == "roses bloom"

    def test_keeps_column_when_asked(self) -> None:
        assert normalize_text("Garden Plot: Roses in Bloom", strip_column_names=False) == "garden plot roses bloom"

    def test_full_pipeline(self) -> None:
        assert normalize_text("The Town Council meets in Tiburon") == "city council meets tiburon"

    def test_ampersand_and_and_compare_equal(self) -> None:
        assert normalize_text("Rock &amp; Roll Night") == normalize_text("Rock and Roll Night")

    def test_punctuation_removed(self) -> None:
        assert normalize_text("Fire! On Ridge-Road?", strip_column_names=False) == "fire ridge road"

    def test_steps_can_be_disabled(self) -> None:
        assert normalize_text(
            "The Town Council",
            strip_column_names=False,
            apply_normalizations=False,
            remove_stop_words=False,
        ) == "the town council"

    @pytest.mark.parametrize("title", SAMPLE_TITLES)
    def test_idempotent(self, title: str) -> None:
        once = normalize_text(title)
        assert normalize_text(once) == once

    @pytest.mark.parametrize("title", SAMPLE_TITLES)
    def test_idempotent_without_column_stripping(self, title: str) -> None:
        once = normalize_text(title, strip_column_names=False)
        assert normalize_text(once, strip_column_names=False) == once
