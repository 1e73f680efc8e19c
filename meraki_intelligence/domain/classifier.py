"""Multinomial Naive Bayes text classifier with Laplace smoothing"""

import math
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple

from meraki_intelligence.domain.exceptions import InsufficientDataError
from meraki_intelligence.domain.text import content_tokens

MAX_CONFIDENCE = 0.99


@dataclass(frozen=True)
class NaiveBayesModel:
    """
    Trained classifier. Never mutated: retraining returns a new model.

    `unseen_probabilities` holds the smoothed floor 1 / (words_in_class + |V|)
    used for tokens the model never saw.
    """

    classes: Tuple[str, ...]
    class_probabilities: Mapping[str, float]
    word_probabilities: Mapping[str, Mapping[str, float]]
    unseen_probabilities: Mapping[str, float]
    vocabulary: FrozenSet[str]


@dataclass
class ClassificationResult:
    category: str
    confidence: float
    scores: Dict[str, float]  # log-probability per class


def train(examples: Iterable[Mapping[str, str]]) -> NaiveBayesModel:
    """
    Train on {"content", "category"} examples.

    Raises:
        InsufficientDataError: When no examples are supplied
    """
    examples = list(examples)
    if not examples:
        raise InsufficientDataError("Cannot train a classifier without examples")

    class_counts: Counter = Counter()
    word_counts: Dict[str, Counter] = {}
    vocabulary = set()

    for example in examples:
        category = example["category"]
        class_counts[category] += 1
        tokens = content_tokens(example["content"])
        word_counts.setdefault(category, Counter()).update(tokens)
        vocabulary.update(tokens)

    classes = tuple(class_counts)
    total_docs = len(examples)
    vocab_size = len(vocabulary)

    class_probabilities = {}
    word_probabilities = {}
    unseen_probabilities = {}
    for cls in classes:
        class_probabilities[cls] = class_counts[cls] / total_docs
        counts = word_counts[cls]
        denominator = sum(counts.values()) + vocab_size
        # Add-one smoothing keeps every vocabulary word above zero
        word_probabilities[cls] = MappingProxyType(
            {word: (counts[word] + 1) / denominator for word in vocabulary}
        )
        unseen_probabilities[cls] = 1 / denominator if denominator else 1.0

    return NaiveBayesModel(
        classes=classes,
        class_probabilities=MappingProxyType(class_probabilities),
        word_probabilities=MappingProxyType(word_probabilities),
        unseen_probabilities=MappingProxyType(unseen_probabilities),
        vocabulary=frozenset(vocabulary),
    )


def classify(text: str, model: NaiveBayesModel) -> ClassificationResult:
    """
    Pick the class with the highest log-posterior.

    Confidence is the softmax weight of the winning class, capped at 0.99.
    """
    tokens = content_tokens(text)
    scores: Dict[str, float] = {}

    for cls in model.classes:
        log_prob = math.log(model.class_probabilities[cls])
        word_probs = model.word_probabilities[cls]
        floor = model.unseen_probabilities[cls]
        for token in tokens:
            log_prob += math.log(word_probs.get(token, floor))
        scores[cls] = log_prob

    # First class wins ties
    best_class = max(model.classes, key=lambda cls: scores[cls])
    best_score = scores[best_class]

    sum_exp = sum(math.exp(score - best_score) for score in scores.values())
    confidence = min(1 / sum_exp, MAX_CONFIDENCE)

    return ClassificationResult(category=best_class, confidence=confidence, scores=scores)
