"""Trend, volatility and (coarse) seasonality detection"""

from typing import NamedTuple, Sequence

from meraki_intelligence.domain.models import DataPoint
from meraki_intelligence.domain.statistics import calculate_stats, coefficient_of_variation, linear_regression

TREND_THRESHOLD = 0.05
HIGH_VOLATILITY = 0.5
MEDIUM_VOLATILITY = 0.2
SEASONALITY_MIN_POINTS = 7
SEASONALITY_MIN_CV = 0.15


class PatternResult(NamedTuple):
    trend: str  # "increasing" | "decreasing" | "stable"
    volatility: str  # "low" | "medium" | "high"
    seasonality: bool


def classify_volatility(cv: float) -> str:
    if cv > HIGH_VOLATILITY:
        return "high"
    if cv > MEDIUM_VOLATILITY:
        return "medium"
    return "low"


def detect_patterns(data: Sequence[DataPoint]) -> PatternResult:
    """
    Describe a series by its trend and volatility.

    - Trend: OLS slope scaled to the series, (slope * n) / |mean|, compared with +/-0.05
    - Volatility: coefficient of variation, > 0.5 high, > 0.2 medium
    - Seasonality: heuristic only (>= 7 points and CV > 0.15), no decomposition
    """
    if len(data) < 3:
        return PatternResult("stable", "low", False)

    values = [d.value for d in data]
    slope, _ = linear_regression(values)
    mean = calculate_stats(values).mean
    normalized_slope = (slope * len(values)) / (abs(mean) or 1)

    trend = "stable"
    if normalized_slope > TREND_THRESHOLD:
        trend = "increasing"
    elif normalized_slope < -TREND_THRESHOLD:
        trend = "decreasing"

    cv = coefficient_of_variation(values)
    seasonality = len(values) >= SEASONALITY_MIN_POINTS and cv > SEASONALITY_MIN_CV

    return PatternResult(trend, classify_volatility(cv), seasonality)
