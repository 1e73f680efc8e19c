"""Risk report generation - runs every analysis over one batch of records"""

import time
from datetime import datetime
from typing import List, Sequence

from meraki_intelligence.config import settings
from meraki_intelligence.domain.alerts import generate_risk_alerts
from meraki_intelligence.domain.compliance import monitor_attendance_compliance
from meraki_intelligence.domain.fraud import detect_fraudulent_transactions
from meraki_intelligence.domain.habits import analyze_organizational_habits
from meraki_intelligence.domain.models import (
    AttendanceRecord,
    ComplianceAnalysis,
    FraudAnalysis,
    RiskReport,
    RiskScore,
    Transaction,
)
from meraki_intelligence.domain.scoring import calculate_risk_score
from meraki_intelligence.infrastructure.clients.narrative import NarrativeProvider, OfflineNarrativeProvider
from meraki_intelligence.infrastructure.observability.logging import log_report
from meraki_intelligence.infrastructure.observability.metrics import record_report, report_duration_histogram
from meraki_intelligence.services.advisor import forecast_financial_trends

HIGH_RISK_FRAUD_SCORE = 70
RECOMMENDATION_MIN_SCORE = 50


def build_recommendations(risk_score: RiskScore) -> List[str]:
    recommendations = []
    if risk_score.financial >= RECOMMENDATION_MIN_SCORE:
        recommendations.append("Implement tighter financial controls")
    if risk_score.compliance >= RECOMMENDATION_MIN_SCORE:
        recommendations.append("Review and strengthen the attendance policy")
    if risk_score.operational >= RECOMMENDATION_MIN_SCORE:
        recommendations.append("Clear the verification backlog and delegate routine administration")
    if risk_score.trend == "worsening":
        recommendations.append("Form a dedicated risk management team")
    return recommendations


async def generate_risk_report(
    transactions: Sequence[Transaction],
    attendance_records: Sequence[AttendanceRecord],
    total_members: int = 1,
    provider: NarrativeProvider | None = None,
    now: datetime | None = None,
) -> RiskReport:
    """
    Main entry point: analyze one batch of records and build the report.

    Flow:
    1. Fraud screening over transactions
    2. Attendance compliance over the trailing window
    3. Net-balance forecast (narrative enrichment optional)
    4. Habit and persona insights
    5. Risk score, alerts and recommendations

    Nothing is persisted; the caller owns the returned report.
    """
    start_time = time.time()
    now = now or datetime.now()
    provider = provider or OfflineNarrativeProvider()

    with report_duration_histogram.time():
        fraud_indicators = detect_fraudulent_transactions(
            transactions,
            amount_threshold=settings.fraud_amount_threshold,
            zscore_threshold=settings.fraud_zscore_threshold,
        )
        compliance_statuses = monitor_attendance_compliance(
            attendance_records,
            min_attendance_rate=settings.compliance_min_rate,
            warning_threshold=settings.compliance_warning_rate,
            period_days=settings.compliance_period_days,
            today=now.date(),
        )
        forecast = await forecast_financial_trends(transactions, "balance", provider=provider)
        habits = analyze_organizational_habits(
            transactions,
            attendance_records,
            today=now.date(),
            max_iterations=settings.persona_kmeans_max_iterations,
            seed=settings.kmeans_seed,
        )

        pending_count = sum(1 for t in transactions if not t.is_verified)
        risk_score = calculate_risk_score(
            fraud_indicators,
            compliance_statuses,
            forecast,
            total_members=total_members,
            pending_verification_count=pending_count,
        )
        alerts = generate_risk_alerts(fraud_indicators, compliance_statuses, risk_score, now=now)

    report = RiskReport(
        generated_at=now,
        risk_score=risk_score,
        alerts=alerts,
        fraud_analysis=FraudAnalysis(
            total_transactions=len(transactions),
            suspicious_count=len(fraud_indicators),
            high_risk_count=sum(1 for f in fraud_indicators if f.risk_score >= HIGH_RISK_FRAUD_SCORE),
            indicators=fraud_indicators,
        ),
        compliance_analysis=ComplianceAnalysis(
            total_members=len(compliance_statuses),
            compliant_count=sum(1 for s in compliance_statuses if s.status == "compliant"),
            warning_count=sum(1 for s in compliance_statuses if s.status == "warning"),
            non_compliant_count=sum(1 for s in compliance_statuses if s.status == "non_compliant"),
            statuses=compliance_statuses,
        ),
        financial_forecast=forecast,
        habits=habits,
        recommendations=build_recommendations(risk_score),
    )

    duration_ms = (time.time() - start_time) * 1000
    record_report(risk_score.trend, [f.risk_score for f in fraud_indicators])
    log_report(risk_score.overall, risk_score.trend, len(alerts), len(fraud_indicators), duration_ms)

    return report
