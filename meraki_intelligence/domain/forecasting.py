"""Short-horizon forecasters over a DataPoint series"""

from typing import List, Sequence

from meraki_intelligence.domain.models import DataPoint
from meraki_intelligence.domain.statistics import linear_regression

HOLT_WEIGHT = 0.7
MOVING_AVERAGE_WEIGHT = 0.3


def to_data_points(values: Sequence[float]) -> List[DataPoint]:
    """Wrap a bare series; only order matters to the forecasters"""
    return [DataPoint(value=v) for v in values]


def predict_moving_average(
    data: Sequence[DataPoint],
    window_size: int = 5,
    periods_ahead: int = 3,
) -> List[float]:
    """
    Extrapolate a least-squares line fitted to the trailing window.

    Uses the last min(n, window_size) points. With fewer than 2 points the
    last value (or 0) is repeated.
    """
    if len(data) < 2:
        last = data[-1].value if data else 0.0
        return [last] * periods_ahead

    values = [d.value for d in data]
    recent = values[-min(len(values), window_size):]
    slope, intercept = linear_regression(recent)

    n = len(recent)
    return [round(slope * (n + i) + intercept, 2) for i in range(periods_ahead)]


def predict_exponential_smoothing(
    data: Sequence[DataPoint],
    alpha: float = 0.3,
    periods_ahead: int = 3,
) -> List[float]:
    """Single exponential smoothing; the forecast is flat at the final level"""
    if not data:
        return [0.0] * periods_ahead

    smoothed = data[0].value
    for point in data:
        smoothed = alpha * point.value + (1 - alpha) * smoothed

    return [round(smoothed, 2)] * periods_ahead


def predict_double_exponential_smoothing(
    data: Sequence[DataPoint],
    alpha: float = 0.5,
    beta: float = 0.3,
    periods_ahead: int = 3,
) -> List[float]:
    """
    Holt's linear trend method.

    Level and trend start at (x0, x1 - x0) and are updated for every later
    point. Forecast at horizon h is level + h * trend, the only forecaster
    here that extrapolates a slope. Falls back to single smoothing below 2 points.
    """
    if len(data) < 2:
        return predict_exponential_smoothing(data, alpha, periods_ahead)

    values = [d.value for d in data]
    level = values[0]
    trend = values[1] - values[0]

    for value in values[1:]:
        prev_level = level
        level = alpha * value + (1 - alpha) * (prev_level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend

    return [round(level + h * trend, 2) for h in range(1, periods_ahead + 1)]


def predict_blended(
    data: Sequence[DataPoint],
    periods_ahead: int = 3,
    alpha: float = 0.5,
    beta: float = 0.3,
    window_size: int = 3,
) -> List[float]:
    """
    Fixed 70/30 blend of Holt's trend and the windowed moving average.

    Holt carries the direction, the moving average damps short-term noise.
    The weights are fixed, not learned.
    """
    moving_average = predict_moving_average(data, window_size, periods_ahead)
    holt = predict_double_exponential_smoothing(data, alpha, beta, periods_ahead)
    return [
        float(round(ma * MOVING_AVERAGE_WEIGHT + h * HOLT_WEIGHT))
        for ma, h in zip(moving_average, holt)
    ]
