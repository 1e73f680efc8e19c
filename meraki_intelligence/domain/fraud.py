"""Fraud screening - weighted statistical and behavioral signals per transaction"""

from collections import defaultdict
from typing import Dict, List, Sequence

from meraki_intelligence.domain.anomaly import detect_anomalies_iqr
from meraki_intelligence.domain.models import DataPoint, FraudIndicator, Transaction
from meraki_intelligence.domain.statistics import calculate_stats
from meraki_intelligence.utils.formatting import format_rupiah

MIN_TRANSACTIONS = 3
MAX_SCORE = 100

# Signal weights
IQR_OUTLIER_WEIGHT = 35
DYNAMIC_THRESHOLD_WEIGHT = 30
STATIC_THRESHOLD_WEIGHT = 15
USER_DEVIATION_WEIGHT = 25
RAPID_FIRE_WEIGHT = 20
ROUND_NUMBER_WEIGHT = 10

RAPID_FIRE_WINDOW_SECONDS = 3600
RAPID_FIRE_MIN_OTHERS = 2
USER_HISTORY_MIN = 3
ROUND_NUMBER_MIN = 500_000
ROUND_NUMBER_UNIT = 100_000


def detect_fraudulent_transactions(
    transactions: Sequence[Transaction],
    amount_threshold: float = 1_000_000,
    zscore_threshold: float = 3.0,
    enable_pattern_detection: bool = True,
) -> List[FraudIndicator]:
    """
    Score every transaction against the fraud signal table.

    Signals (additive, capped at 100):
    - +35: IQR outlier across the whole batch
    - +30: amount above max(static threshold, mean + 3 * std)
    - +15: amount above the static threshold only (and > 2x the mean)
    - +25: Z-score vs. the member's own transactions > zscore_threshold
    - +20: 2+ other transactions by the same member within one hour
    - +10: large round amount (>= 500,000 and a multiple of 100,000)

    Fewer than 3 transactions returns an empty list. Only transactions with at
    least one signal are returned, highest score first.
    """
    if len(transactions) < MIN_TRANSACTIONS:
        return []

    global_stats = calculate_stats([t.amount for t in transactions])
    # Tightens on stable data, widens under volatility
    dynamic_threshold = global_stats.mean + 3 * global_stats.std
    effective_threshold = max(amount_threshold, dynamic_threshold)

    by_user: Dict[str, List[Transaction]] = defaultdict(list)
    for t in transactions:
        by_user[t.user_id].append(t)

    data_points = [
        DataPoint(value=t.amount, timestamp=t.date, id=t.id, metadata={"user_id": t.user_id, "type": t.type})
        for t in transactions
    ]
    # IQR is not skewed by the anomaly itself, unlike a global Z-score
    outlier_ids = {point.id for point in detect_anomalies_iqr(data_points).anomalies}

    indicators_out: List[FraudIndicator] = []
    for transaction in transactions:
        indicators: List[str] = []
        score = 0

        if transaction.id in outlier_ids:
            indicators.append("Statistical outlier (IQR method)")
            score += IQR_OUTLIER_WEIGHT

        if transaction.amount > effective_threshold:
            ratio = transaction.amount / (global_stats.mean or 1)
            indicators.append(
                f"Amount {format_rupiah(transaction.amount)} is {ratio:.1f}x the global average"
            )
            score += DYNAMIC_THRESHOLD_WEIGHT
        elif transaction.amount > amount_threshold and transaction.amount > global_stats.mean * 2:
            indicators.append(f"Amount exceeds the manual limit ({format_rupiah(amount_threshold)})")
            score += STATIC_THRESHOLD_WEIGHT

        if enable_pattern_detection:
            user_transactions = by_user[transaction.user_id]

            if len(user_transactions) >= USER_HISTORY_MIN:
                user_stats = calculate_stats([t.amount for t in user_transactions])
                if user_stats.std > 0:
                    user_z = abs(transaction.amount - user_stats.mean) / user_stats.std
                    if user_z > zscore_threshold:
                        indicators.append(f"Significant deviation from member's usual amounts (Z-score: {user_z:.1f})")
                        score += USER_DEVIATION_WEIGHT

            nearby = [
                t for t in user_transactions
                if t.id != transaction.id
                and abs((t.date - transaction.date).total_seconds()) < RAPID_FIRE_WINDOW_SECONDS
            ]
            if len(nearby) >= RAPID_FIRE_MIN_OTHERS:
                indicators.append(f"Rapid-fire pattern: {len(nearby) + 1} transactions within 1 hour")
                score += RAPID_FIRE_WEIGHT

        if transaction.amount >= ROUND_NUMBER_MIN and transaction.amount % ROUND_NUMBER_UNIT == 0:
            indicators.append("Large round amount (possible manual entry)")
            score += ROUND_NUMBER_WEIGHT

        if indicators:
            capped = min(score, MAX_SCORE)
            indicators_out.append(
                FraudIndicator(
                    transaction_id=transaction.id,
                    risk_score=capped,
                    indicators=indicators,
                    explanation=generate_fraud_explanation(indicators, capped),
                )
            )

    indicators_out.sort(key=lambda f: f.risk_score, reverse=True)
    return indicators_out


def severity_label(risk_score: int) -> str:
    if risk_score >= 75:
        return "CRITICAL"
    if risk_score >= 50:
        return "HIGH"
    return "MODERATE"


def generate_fraud_explanation(indicators: Sequence[str], risk_score: int) -> str:
    """Severity header followed by the triggered signals verbatim"""
    lines = [f"[{severity_label(risk_score)} RISK] Score: {risk_score}/100", "Findings:"]
    lines.extend(f"- {indicator}" for indicator in indicators)
    return "\n".join(lines)
