"""Risk scoring engine - aggregates fraud, compliance and forecast results"""

from typing import Sequence

from meraki_intelligence.domain.models import (
    ComplianceStatus,
    FinancialPrediction,
    FraudIndicator,
    RiskDetails,
    RiskScore,
)


def calculate_financial_risk(fraud_indicators: Sequence[FraudIndicator], forecast: FinancialPrediction) -> int:
    """
    Financial risk from 0 to 100.

    - 60% of the single highest fraud score, plus 5 per fraud indicator
    - +30 when the forecast trend is decreasing
    - +15 when the forecast series is highly volatile
    """
    max_fraud = max((f.risk_score for f in fraud_indicators), default=0)

    financial = 0.6 * max(max_fraud, 0) + 5 * len(fraud_indicators)
    if forecast.trend == "decreasing":
        financial += 30
    if forecast.volatility == "high":
        financial += 15

    return min(100, round(financial))


def calculate_compliance_risk(non_compliant: int, warning: int, total_members: int) -> int:
    """100 per non-compliant member and 50 per warning, averaged over the membership"""
    return min(100, round((non_compliant * 100 + warning * 50) / max(total_members, 1)))


def calculate_operational_risk(pending_count: int, compliance: int, financial: int) -> int:
    """
    Operational risk from 0 to 100.

    - 5 points per pending verification, capped at 50
    - +25 when compliance risk is above 40 (operations are likely struggling)
    - +25 when financial risk is above 60
    """
    operational = min(50, pending_count * 5)
    if compliance > 40:
        operational += 25
    if financial > 60:
        operational += 25
    return min(100, operational)


def determine_trend(overall: int, forecast_trend: str, non_compliant: int, compliance: int) -> str:
    """Low overall risk is always stable; otherwise the forecast and compliance decide"""
    if overall < 20:
        return "stable"
    if forecast_trend == "increasing" and non_compliant == 0:
        return "improving"
    if forecast_trend == "decreasing" or compliance > 40:
        return "worsening"
    return "stable"


def calculate_risk_score(
    fraud_indicators: Sequence[FraudIndicator],
    compliance_statuses: Sequence[ComplianceStatus],
    forecast: FinancialPrediction,
    total_members: int = 1,
    pending_verification_count: int = 0,
) -> RiskScore:
    """
    Combine sub-scores into the organizational risk score.

    Overall = 45% financial + 30% compliance + 25% operational. Detail strings
    are built from the same counts as the numbers, so they cannot disagree.
    """
    financial = calculate_financial_risk(fraud_indicators, forecast)

    non_compliant = sum(1 for s in compliance_statuses if s.status == "non_compliant")
    warning = sum(1 for s in compliance_statuses if s.status == "warning")
    members = max(total_members, 1)
    compliance = calculate_compliance_risk(non_compliant, warning, members)

    operational = calculate_operational_risk(pending_verification_count, compliance, financial)

    overall = min(100, round(financial * 0.45 + compliance * 0.30 + operational * 0.25))
    trend = determine_trend(overall, forecast.trend, non_compliant, compliance)

    max_fraud = max((f.risk_score for f in fraud_indicators), default=0)
    financial_parts = [
        f"{len(fraud_indicators)} anomalies detected (max risk: {max_fraud})"
        if fraud_indicators
        else "0 anomalies detected"
    ]
    if forecast.trend == "decreasing":
        financial_parts.append("forecast trend decreasing")
    if forecast.volatility == "high":
        financial_parts.append("high volatility")

    details = RiskDetails(
        financial=", ".join(financial_parts) if financial else "Financial data stable (0 anomalies)",
        compliance=(
            f"{non_compliant} members ({round(non_compliant / members * 100)}%) non-compliant, "
            f"{warning} on warning"
            if non_compliant or warning
            else "Compliance rate 100%"
        ),
        operational=(
            f"{pending_verification_count} verification tasks pending"
            if pending_verification_count
            else "All operational tasks completed"
        ),
        overall=f"Organizational risk score: {overall}/100" if overall else "Organization condition: optimal",
    )

    return RiskScore(
        overall=overall,
        financial=financial,
        compliance=compliance,
        operational=operational,
        trend=trend,
        details=details,
    )
