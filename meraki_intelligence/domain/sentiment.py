"""Lexicon-based bilingual sentiment analysis with negation and intensity modifiers"""

from dataclasses import dataclass, field
from typing import List

from meraki_intelligence.domain.text import tokenize

POSITIVE_WORDS = frozenset([
    "bagus", "baik", "senang", "sukses", "hebat", "sempurna",
    "positif", "setuju", "mendukung", "berhasil", "memuaskan", "optimal",
    "efektif", "produktif", "berkembang", "meningkat", "tercapai", "lancar",
    "good", "great", "excellent", "happy", "success", "amazing", "wonderful",
    "positive", "agree", "support", "achieved", "satisfied", "effective",
    "untung", "profit", "naik", "stabil", "aman",
])

NEGATIVE_WORDS = frozenset([
    "buruk", "jelek", "gagal", "masalah", "kesulitan", "terlambat", "kurang",
    "negatif", "menolak", "sulit", "lambat", "tertunda",
    "menurun", "turun", "kendala", "hambatan", "risiko", "ancaman",
    "bad", "poor", "fail", "problem", "difficult", "late", "insufficient",
    "negative", "disagree", "reject", "slow", "delayed", "decline", "risk",
    "rugi", "hilang", "bahaya", "curiga", "aneh",
])

NEGATION_WORDS = frozenset([
    "tidak", "bukan", "kurang", "jangan", "tak", "belum",
    "not", "no", "dont", "doesnt", "never", "hardly",
])

BOOSTER_WORDS = frozenset([
    "sangat", "sekali", "banget", "benar", "sungguh", "terlalu", "paling",
    "very", "really", "extremely", "absolutely", "highly",
])

DIMINISHER_WORDS = frozenset([
    "agak", "sedikit", "kurang", "lumayan", "cukup", "hampir",
    "bit", "slightly", "somewhat", "barely", "fairly",
])

# Indonesian intensifiers that follow the word they modify ("bagus sekali")
POSTPOSITIVE_BOOSTERS = frozenset(["sekali", "banget"])

BASE_WEIGHT = 0.9
NEGATED_POSITIVE = -1.0  # "tidak bagus" hits harder than a plain negative
NEGATED_NEGATIVE = 0.8  # "tidak buruk" is weaker than a plain positive
BOOSTER_FACTOR = 1.5
DIMINISHER_FACTOR = 0.5
LOOKBACK = 3
LABEL_THRESHOLD = 0.15


@dataclass
class SentimentResult:
    score: float  # -1 (negative) .. 1 (positive)
    label: str  # "positive" | "neutral" | "negative"
    positive_words: List[str] = field(default_factory=list)
    negative_words: List[str] = field(default_factory=list)


def analyze_sentiment(text: str) -> SentimentResult:
    """
    Score text against the polarity lexicons.

    Rules:
    - Up to 3 preceding tokens are scanned for negation, boosters (x1.5) and
      diminishers (x0.5); a post-positive booster right after the word also counts
      and is not reused by the lookback of a later word
    - Negated positive contributes -1, negated negative contributes +0.8
    - Score = total contribution / sentiment-bearing tokens, clamped to [-1, 1]
    - Label: > 0.15 positive, < -0.15 negative, otherwise neutral
    """
    tokens = tokenize(text)
    positive_words: List[str] = []
    negative_words: List[str] = []

    total = 0.0
    sentiment_tokens = 0
    # Indices of post-positive boosters already applied to the preceding word
    consumed = set()

    for i, token in enumerate(tokens):
        is_positive = token in POSITIVE_WORDS
        is_negative = token in NEGATIVE_WORDS
        if not (is_positive or is_negative):
            continue

        negation_word = ""
        modifier_word = ""
        modifier = 1.0
        for j in range(max(0, i - LOOKBACK), i):
            prev = tokens[j]
            if prev in NEGATION_WORDS:
                negation_word = prev
            if prev in BOOSTER_WORDS and j not in consumed:
                modifier *= BOOSTER_FACTOR
                modifier_word = prev
            if prev in DIMINISHER_WORDS:
                modifier *= DIMINISHER_FACTOR
                modifier_word = prev

        trailing_word = ""
        if i + 1 < len(tokens) and tokens[i + 1] in POSTPOSITIVE_BOOSTERS:
            modifier *= BOOSTER_FACTOR
            trailing_word = tokens[i + 1]
            consumed.add(i + 1)

        sentiment_tokens += 1
        weight = BASE_WEIGHT * modifier

        if negation_word:
            phrase = " ".join(w for w in (negation_word, modifier_word, token, trailing_word) if w)
            if is_positive:
                negative_words.append(phrase)
                total += NEGATED_POSITIVE
            else:
                positive_words.append(phrase)
                total += NEGATED_NEGATIVE
        else:
            phrase = " ".join(w for w in (modifier_word, token, trailing_word) if w)
            if is_positive:
                positive_words.append(phrase)
                total += weight
            else:
                negative_words.append(phrase)
                total -= weight

    score = max(-1.0, min(1.0, total / sentiment_tokens)) if sentiment_tokens else 0.0

    label = "neutral"
    if score > LABEL_THRESHOLD:
        label = "positive"
    elif score < -LABEL_THRESHOLD:
        label = "negative"

    return SentimentResult(
        score=round(score, 2),
        label=label,
        positive_words=positive_words,
        negative_words=negative_words,
    )
