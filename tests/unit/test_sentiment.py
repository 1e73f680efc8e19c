"""Unit tests for lexicon-based sentiment analysis"""

from meraki_intelligence.domain.sentiment import analyze_sentiment


def test_sentiment_ordering():
    """Test boosted positive > plain positive > 0 > negated positive"""
    boosted = analyze_sentiment("sangat bagus sekali").score
    plain = analyze_sentiment("bagus").score
    negated = analyze_sentiment("tidak bagus").score

    assert boosted > plain > 0 > negated


def test_plain_positive_and_negative():
    assert analyze_sentiment("bagus").score == 0.9
    assert analyze_sentiment("buruk").score == -0.9


def test_negated_positive_is_full_negative():
    """Test 'tidak bagus' scores -1 and is reported as a negative phrase"""
    result = analyze_sentiment("tidak bagus")

    assert result.score == -1.0
    assert result.label == "negative"
    assert result.negative_words == ["tidak bagus"]


def test_negated_negative_is_weak_positive():
    result = analyze_sentiment("tidak buruk")

    assert result.score == 0.8
    assert result.label == "positive"
    assert result.positive_words == ["tidak buruk"]


def test_diminisher_halves_weight():
    assert analyze_sentiment("agak bagus").score == 0.45


def test_score_is_clamped():
    """Test stacked boosters never push the score past 1"""
    assert analyze_sentiment("sangat sangat bagus banget").score == 1.0


def test_mixed_text_averages_contributions():
    """Test contributions are averaged over sentiment-bearing tokens"""
    result = analyze_sentiment("acara sukses tapi konsumsi terlambat")

    assert result.score == 0.0
    assert result.label == "neutral"
    assert result.positive_words == ["sukses"]
    assert result.negative_words == ["terlambat"]


def test_no_sentiment_tokens_is_neutral():
    result = analyze_sentiment("rapat hari senin")

    assert result.score == 0.0
    assert result.label == "neutral"


def test_trailing_booster_is_part_of_phrase():
    """Test a booster after the word shows up in the reported phrase"""
    result = analyze_sentiment("sangat bagus sekali")

    assert result.score == 1.0
    assert result.positive_words == ["sangat bagus sekali"]


def test_trailing_booster_is_not_reused_by_next_word():
    """Test a booster already applied to the previous word does not boost the next one"""
    result = analyze_sentiment("bagus sekali buruk")

    assert result.positive_words == ["bagus sekali"]
    assert result.negative_words == ["buruk"]
    assert result.score > 0
