"""Text primitives - tokenization, stopwords and lightweight keyword analysis"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List

_PUNCTUATION = re.compile(r"[^\w\s]")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

# Indonesian + English function words
STOPWORDS = frozenset([
    "dan", "atau", "yang", "di", "ke", "dari", "untuk", "pada", "dengan",
    "ini", "itu", "adalah", "akan", "juga", "sudah", "telah", "dapat",
    "bisa", "ada", "tidak", "saya", "kami", "kita", "mereka", "dia",
    "nya", "oleh", "dalam", "sebagai", "karena", "jika", "maka", "agar",
    "saat", "ketika", "setelah", "sebelum", "antara", "hingga", "sampai",
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "dare",
    "ought", "used", "to", "of", "in", "for", "on", "with", "at", "by",
    "from", "as", "into", "through", "during", "before", "after", "above",
    "below", "between", "under", "again", "further", "then", "once",
])

TOPIC_TEMPLATES = {
    "Finance": ["uang", "dana", "biaya", "kas", "anggaran", "subsidi", "donasi", "iuran", "juta", "rupiah", "bayar"],
    "Programs": ["proyek", "kegiatan", "acara", "lomba", "seminar", "baksos", "pelatihan", "program", "agenda"],
    "Administration": ["surat", "dokumen", "proposal", "laporan", "izin", "sk", "tanda tangan", "arsip"],
    "Membership": ["anggota", "rekrutmen", "pengurus", "panitia", "tim", "personil", "ketua", "divisi"],
}


@dataclass
class TopicResult:
    topic: str
    keywords: List[str]
    score: float


def tokenize(text: str | None) -> List[str]:
    """Lowercase, strip punctuation, split on whitespace and drop tokens of 2 chars or fewer"""
    if not text:
        return []
    cleaned = _PUNCTUATION.sub(" ", text.lower())
    return [word for word in cleaned.split() if len(word) > 2]


def remove_stopwords(tokens: Iterable[str]) -> List[str]:
    return [token for token in tokens if token not in STOPWORDS]


def content_tokens(text: str | None) -> List[str]:
    """Tokens with stopwords removed, the form every model is trained on"""
    return remove_stopwords(tokenize(text))


def extract_keywords(text: str, num_keywords: int = 10) -> List[str]:
    """Most frequent content tokens, ties kept in first-seen order"""
    counts = Counter(content_tokens(text))
    return [word for word, _ in counts.most_common(num_keywords)]


def extract_key_sentences(text: str, num_sentences: int = 3) -> List[str]:
    """
    Pick the most representative sentences of a text.

    Each sentence (longer than 20 characters) is scored by the average corpus
    frequency of its content tokens. The first sentence gets a 1.2x boost and
    the last a 1.1x boost. Winners are returned in their original order.
    """
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text or "")]
    sentences = [s for s in sentences if len(s) > 20]

    if len(sentences) <= num_sentences:
        return sentences

    word_freq = Counter(content_tokens(text))

    scored = []
    for index, sentence in enumerate(sentences):
        tokens = content_tokens(sentence)
        score = sum(word_freq[t] for t in tokens) / len(tokens) if tokens else 0.0
        if index == 0:
            score *= 1.2
        if index == len(sentences) - 1:
            score *= 1.1
        scored.append((score, index))

    top = sorted(scored, key=lambda item: (-item[0], item[1]))[:num_sentences]
    return [sentences[index] for _, index in sorted(top, key=lambda item: item[1])]


def extract_topics(text: str) -> List[TopicResult]:
    """Keyword-density topic scoring against fixed templates (a cheap stand-in for LDA)"""
    tokens = content_tokens(text)
    if not tokens:
        return []

    token_set = set(tokens)
    results = []
    for topic, keywords in TOPIC_TEMPLATES.items():
        matches = [k for k in keywords if k in token_set or any(k in t for t in tokens)]
        if not matches:
            continue

        freq = sum(1 for t in tokens if any(m in t for m in matches))
        score = len(matches) / len(keywords) + freq / len(tokens)
        results.append(TopicResult(topic=topic, keywords=matches, score=score))

    return sorted(results, key=lambda r: r.score, reverse=True)
