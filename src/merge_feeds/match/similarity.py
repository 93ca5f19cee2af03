"""String similarity measures used to compare feed titles and authors."""

from rapidfuzz.distance import Levenshtein

SIGNIFICANT_TOKEN_MIN_LENGTH = 3
SHORT_TEXT_MAX_LENGTH = 15
TOKEN_NEAR_MATCH_THRESHOLD = 0.8
SUBSTRING_FRAGMENT_SCORE = 0.9
SUBSTRING_MATCH_SCORE = 0.95
SUBSTRING_MIN_LENGTH = 10


def significant_tokens(text: str) -> list[str]:
    """Lowercased whitespace tokens longer than two characters."""
    return [word for word in text.lower().split() if len(word) >= SIGNIFICANT_TOKEN_MIN_LENGTH]


def edit_distance_similarity(a: str, b: str) -> float:
    """One minus the Levenshtein distance divided by the longer length."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - Levenshtein.distance(a, b) / max(len(a), len(b))


def token_overlap_similarity(a: str, b: str) -> float:
    """Jaccard index over the significant tokens of both strings."""
    tokens_a = set(significant_tokens(a or ""))
    tokens_b = set(significant_tokens(b or ""))

    if not tokens_a and not tokens_b:
        return 1.0
    if not tokens_a or not tokens_b:
        return 0.0

    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def detect_fragment(short_text: str, long_text: str) -> float:
    """Score how well ``short_text`` reads as a fragment of ``long_text``.

    Short texts (under 15 normalized characters) score the fraction of their
    significant tokens that find a near match among the long text's tokens.
    Longer texts score 0.9 on containment in either direction.

    Both arguments are raw titles, since the jump-page marker does not survive
    normalization. A jump-page continuation on either side scores 0.
    """
    # Imported here to avoid a circular import through column parsing
    from merge_feeds.normalize.columns import is_jump_page
    from merge_feeds.normalize.text import normalize_text

    if not short_text or not long_text:
        return 0.0

    if is_jump_page(short_text) or is_jump_page(long_text):
        return 0.0

    short_norm = normalize_text(short_text, strip_column_names=False)
    long_norm = normalize_text(long_text, strip_column_names=False)

    if len(short_norm) < SHORT_TEXT_MAX_LENGTH:
        short_words = significant_tokens(short_norm)
        long_words = significant_tokens(long_norm)
        if not short_words:
            return 0.0

        matched = [
            word for word in short_words
            if any(
                long_word in word
                or word in long_word
                or edit_distance_similarity(word, long_word) > TOKEN_NEAR_MATCH_THRESHOLD
                for long_word in long_words
            )
        ]
        return len(matched) / len(short_words)

    if short_norm and long_norm and (short_norm in long_norm or long_norm in short_norm):
        return SUBSTRING_FRAGMENT_SCORE

    return 0.0


def title_similarity(a: str, b: str) -> float:
    """Similarity of two normalized titles: exact, substring, or the best lexical measure."""
    if a == b:
        return 1.0

    if (b in a and len(b) > SUBSTRING_MIN_LENGTH) or (a in b and len(a) > SUBSTRING_MIN_LENGTH):
        return SUBSTRING_MATCH_SCORE

    return max(edit_distance_similarity(a, b), token_overlap_similarity(a, b))
