"""Prometheus metrics for report volume, fraud severity and collaborator health"""

from typing import Sequence

from prometheus_client import Counter, Histogram

from meraki_intelligence.domain.fraud import severity_label

# Report metrics
report_counter = Counter(
    "meraki_risk_report_total",
    "Total risk reports generated",
    ["trend"],  # improving | stable | worsening
)

fraud_indicator_counter = Counter(
    "meraki_fraud_indicator_total",
    "Fraud indicators raised by severity bucket",
    ["severity"],  # critical | high | moderate
)

report_duration_histogram = Histogram(
    "meraki_risk_report_duration_seconds",
    "Risk report generation time",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# Narrative collaborator metrics
narrative_latency_histogram = Histogram(
    "meraki_narrative_latency_seconds",
    "Narrative service response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

narrative_fallback_counter = Counter(
    "meraki_narrative_fallback_total",
    "Narrative requests answered by the deterministic fallback",
    ["capability"],  # action_plan | financial_advice | budget
)


def severity_bucket(risk_score: int) -> str:
    """Metric label for a fraud score, same bands as the explanation header"""
    return severity_label(risk_score).lower()


def record_report(trend: str, fraud_scores: Sequence[int]) -> None:
    """Record report outcome and the severity distribution of its fraud indicators"""
    report_counter.labels(trend=trend).inc()
    for score in fraud_scores:
        fraud_indicator_counter.labels(severity=severity_bucket(score)).inc()
