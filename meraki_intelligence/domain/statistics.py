"""Statistics primitives shared by the anomaly, pattern and forecasting modules"""

import math
from typing import NamedTuple, Sequence, Tuple


class Stats(NamedTuple):
    mean: float
    std: float


def calculate_stats(values: Sequence[float]) -> Stats:
    """Mean and population standard deviation (0, 0 for an empty series)"""
    if not values:
        return Stats(0.0, 0.0)

    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return Stats(mean, math.sqrt(variance))


def linear_regression(values: Sequence[float]) -> Tuple[float, float]:
    """
    Ordinary least squares of value vs. index.

    Returns (slope, intercept). A degenerate series (fewer than 2 points)
    has slope 0 and intercept equal to its only value, if any.
    """
    n = len(values)
    if n < 2:
        return 0.0, (values[0] if values else 0.0)

    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i, y in enumerate(values):
        sum_x += i
        sum_y += y
        sum_xy += i * y
        sum_x2 += i * i

    denominator = n * sum_x2 - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator if denominator else 0.0
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def coefficient_of_variation(values: Sequence[float]) -> float:
    """std / |mean|, with a zero mean treated as 1"""
    stats = calculate_stats(values)
    return stats.std / (abs(stats.mean) or 1)
