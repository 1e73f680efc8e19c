"""Financial trend prediction over monthly treasury totals"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Sequence

from meraki_intelligence.domain.forecasting import predict_blended
from meraki_intelligence.domain.models import DataPoint, FinancialPrediction, Transaction
from meraki_intelligence.domain.patterns import PatternResult, detect_patterns
from meraki_intelligence.domain.statistics import calculate_stats, coefficient_of_variation
from meraki_intelligence.utils.date_utils import following_months, month_key
from meraki_intelligence.utils.formatting import format_rupiah

MIN_MONTHS = 3
MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.95
CHANGE_THRESHOLD_PERCENT = 2.0
RUNWAY_MONTHS = 3

METRIC_LABELS = {"in": "income", "out": "expenses", "balance": "balance"}

INSUFFICIENT_DATA_MESSAGE = "Not enough data to forecast. At least 3 months of records are required."

# Deterministic action plans keyed on (trend, metric)
ACTION_PLANS: Dict[tuple, List[str]] = {
    ("decreasing", "balance"): [
        "Audit this week's operational spending.",
        "Postpone non-essential asset purchases.",
        "Step up collection of member dues.",
    ],
    ("increasing", "balance"): [
        "Allocate the surplus to a reserve fund.",
        "Consider expanding programs.",
        "Invest in productivity tools.",
    ],
    ("decreasing", "in"): [
        "Contact members with outstanding dues.",
        "Plan a fundraising activity for next month.",
        "Review which income sources have dried up.",
    ],
    ("increasing", "out"): [
        "Review the categories driving the increase.",
        "Set a monthly spending cap per division.",
        "Require treasurer approval for large purchases.",
    ],
}
DEFAULT_ACTION_PLAN = ["Keep up routine monitoring.", "Review monthly budget efficiency."]


def aggregate_monthly(transactions: Sequence[Transaction], metric: str) -> List[DataPoint]:
    """
    Sum transactions into YYYY-MM buckets, oldest first.

    `metric` is "in" or "out" to filter by direction, or "balance" for net
    flow (income positive, expenses negative).
    """
    totals: Dict[str, float] = defaultdict(float)
    for t in transactions:
        if metric == "balance":
            totals[month_key(t.date)] += t.amount if t.type == "in" else -t.amount
        elif t.type == metric:
            totals[month_key(t.date)] += t.amount

    return [
        DataPoint(value=totals[key], timestamp=datetime.strptime(key, "%Y-%m"), id=key)
        for key in sorted(totals)
    ]


def generate_financial_actions(trend: str, metric: str) -> List[str]:
    return list(ACTION_PLANS.get((trend, metric), DEFAULT_ACTION_PLAN))


def generate_financial_insights(
    data: Sequence[DataPoint],
    pattern: PatternResult,
    predictions: Sequence[float],
    metric: str,
) -> List[str]:
    """Factual statements about projected change, volatility and the historical mean"""
    if len(data) < 2:
        return ["Not enough data for trend analysis."]

    values = [d.value for d in data]
    last_value = values[-1]
    avg_prediction = sum(predictions) / len(predictions) if predictions else last_value
    label = METRIC_LABELS[metric]

    change = (avg_prediction - last_value) / abs(last_value) * 100 if last_value else 0.0

    insights = []
    if change > CHANGE_THRESHOLD_PERCENT:
        insights.append(f"Projected {label} UP by {change:.1f}% on average over the next {len(predictions)} periods.")
    elif change < -CHANGE_THRESHOLD_PERCENT:
        insights.append(f"Projected {label} DOWN by {abs(change):.1f}% on average over the next {len(predictions)} periods.")
    else:
        insights.append(f"{label.capitalize()} trend is STABLE (change under 2%).")

    if pattern.volatility == "high":
        cv = coefficient_of_variation(values) * 100
        insights.append(f"High volatility: monthly values vary by {cv:.0f}% of the mean. Expect uncertainty.")

    mean = calculate_stats(values).mean
    insights.append(f"Historical average ({len(values)} months): {format_rupiah(mean)}")
    return insights


def predict_financial_trends(
    transactions: Sequence[Transaction],
    metric: str = "balance",
    periods_ahead: int = 3,
    alpha: float = 0.5,
    beta: float = 0.3,
) -> FinancialPrediction:
    """
    Forecast monthly totals with the 70/30 Holt + moving-average blend.

    Requirements:
    - At least 3 months of data, otherwise an empty zero-confidence result
    - Confidence = clamp(1 - coefficient of variation, 0.3, 0.95)
    - Action plan from the deterministic rule table (narrative enrichment,
      if any, happens in the service layer)
    """
    if metric not in METRIC_LABELS:
        raise ValueError(f"Unknown metric {metric!r}")

    data = aggregate_monthly(transactions, metric)
    if len(data) < MIN_MONTHS:
        return FinancialPrediction(
            predictions=[],
            periods=[],
            trend="stable",
            volatility="low",
            confidence=0.0,
            insights=[INSUFFICIENT_DATA_MESSAGE],
        )

    predictions = predict_blended(data, periods_ahead, alpha=alpha, beta=beta)
    pattern = detect_patterns(data)

    cv = coefficient_of_variation([d.value for d in data])
    confidence = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, 1 - cv))

    return FinancialPrediction(
        predictions=predictions,
        periods=following_months(data[-1].id, periods_ahead),
        trend=pattern.trend,
        volatility=pattern.volatility,
        confidence=confidence,
        insights=generate_financial_insights(data, pattern, predictions, metric),
        action_plan=generate_financial_actions(pattern.trend, metric),
    )


def _recent_verified_outflows(transactions: Sequence[Transaction], now: datetime) -> List[Transaction]:
    window_start = now - timedelta(days=RUNWAY_MONTHS * 30)
    return [t for t in transactions if t.type == "out" and t.is_verified and t.date >= window_start]


def calculate_runway(balance: float, transactions: Sequence[Transaction], now: datetime | None = None) -> float | None:
    """
    Months the current balance lasts at the recent verified burn rate.

    Uses verified outflows over the trailing 3 months. Returns None when the
    balance is not positive or there is nothing to burn.
    """
    now = now or datetime.now()
    monthly_expense = sum(t.amount for t in _recent_verified_outflows(transactions, now)) / RUNWAY_MONTHS
    if balance <= 0 or monthly_expense <= 0:
        return None
    return round(balance / monthly_expense, 1)


def allocate_budget(transactions: Sequence[Transaction], now: datetime | None = None) -> Dict[str, float]:
    """Per-category average monthly verified spend over the trailing 3 months"""
    now = now or datetime.now()
    totals: Dict[str, float] = defaultdict(float)
    for t in _recent_verified_outflows(transactions, now):
        totals[t.category] += t.amount
    return {category: round(total / RUNWAY_MONTHS) for category, total in sorted(totals.items())}
