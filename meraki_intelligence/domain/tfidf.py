"""TF-IDF vectorization and cosine similarity for document search"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Sequence, Tuple

from meraki_intelligence.domain.text import content_tokens


@dataclass(frozen=True)
class TfidfDocument:
    id: str
    tokens: Tuple[str, ...]
    tf: Mapping[str, float]


@dataclass(frozen=True)
class TfidfModel:
    documents: Tuple[TfidfDocument, ...]
    idf: Mapping[str, float]
    vocabulary: FrozenSet[str]


def calculate_tf(tokens: Sequence[str]) -> Dict[str, float]:
    """Raw count divided by document length"""
    if not tokens:
        return {}
    total = len(tokens)
    return {term: count / total for term, count in Counter(tokens).items()}


def calculate_idf(documents: Sequence[TfidfDocument]) -> Dict[str, float]:
    """
    Laplace-smoothed IDF: ln((N + 1) / (df + 1)) + 1.

    Always positive and finite, even for a term present in every document.
    """
    n = len(documents)
    doc_freq: Counter = Counter()
    for doc in documents:
        doc_freq.update(set(doc.tokens))
    return {term: math.log((n + 1) / (df + 1)) + 1 for term, df in doc_freq.items()}


def build_tfidf_model(documents: Sequence[Mapping[str, str]]) -> TfidfModel:
    """Build a model from {"id", "content"} documents"""
    processed = []
    for doc in documents:
        tokens = tuple(content_tokens(doc["content"]))
        processed.append(TfidfDocument(id=doc["id"], tokens=tokens, tf=calculate_tf(tokens)))

    vocabulary = frozenset(token for doc in processed for token in doc.tokens)
    return TfidfModel(documents=tuple(processed), idf=calculate_idf(processed), vocabulary=vocabulary)


def get_tfidf_vector(tokens: Sequence[str], idf: Mapping[str, float]) -> Dict[str, float]:
    """Weight a token list; terms unknown to the model get zero weight"""
    return {term: tf * idf.get(term, 0.0) for term, tf in calculate_tf(tokens).items()}


def cosine_similarity(vec1: Mapping[str, float], vec2: Mapping[str, float]) -> float:
    dot = sum(value * vec2[term] for term, value in vec1.items() if term in vec2)
    norm1 = math.sqrt(sum(v * v for v in vec1.values()))
    norm2 = math.sqrt(sum(v * v for v in vec2.values()))
    if norm1 == 0 or norm2 == 0:
        return 0.0
    return dot / (norm1 * norm2)


def rank_documents(model: TfidfModel, query: str, top_k: int = 5) -> List[Tuple[str, float]]:
    """Return (document id, similarity) for documents matching the query, best first"""
    query_vector = get_tfidf_vector(content_tokens(query), model.idf)
    scored = []
    for doc in model.documents:
        score = cosine_similarity(query_vector, get_tfidf_vector(doc.tokens, model.idf))
        if score > 0:
            scored.append((doc.id, score))
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored[:top_k]
