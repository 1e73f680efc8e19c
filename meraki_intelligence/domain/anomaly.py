"""Outlier detection over time-series data points (Z-score and IQR)"""

from typing import List, NamedTuple, Sequence

from meraki_intelligence.domain.models import DataPoint
from meraki_intelligence.domain.statistics import Stats, calculate_stats

IQR_MIN_POINTS = 4
IQR_FENCE = 1.5


class Bounds(NamedTuple):
    lower: float
    upper: float


class ZScoreResult(NamedTuple):
    anomalies: List[DataPoint]
    stats: Stats


class IqrResult(NamedTuple):
    anomalies: List[DataPoint]
    bounds: Bounds


def detect_anomalies(data: Sequence[DataPoint], threshold: float = 2.5) -> ZScoreResult:
    """
    Flag points whose |value - mean| / std exceeds `threshold`.

    The fraud pipeline uses 3.0: the method is sensitive to the very outliers
    it is looking for, since they inflate the std of the population.
    """
    stats = calculate_stats([d.value for d in data])
    std = stats.std or 1
    anomalies = [d for d in data if abs(d.value - stats.mean) / std > threshold]
    return ZScoreResult(anomalies, stats)


def detect_anomalies_iqr(data: Sequence[DataPoint]) -> IqrResult:
    """
    Flag points outside [Q1 - 1.5 IQR, Q3 + 1.5 IQR].

    Quartiles are taken by index into the sorted values (floor(n * 0.25),
    floor(n * 0.75)). Requires at least 4 points; fewer returns no anomalies.
    """
    values = sorted(d.value for d in data)
    n = len(values)
    if n < IQR_MIN_POINTS:
        return IqrResult([], Bounds(0.0, 0.0))

    q1 = values[int(n * 0.25)]
    q3 = values[int(n * 0.75)]
    iqr = q3 - q1
    bounds = Bounds(q1 - IQR_FENCE * iqr, q3 + IQR_FENCE * iqr)

    anomalies = [d for d in data if d.value < bounds.lower or d.value > bounds.upper]
    return IqrResult(anomalies, bounds)
