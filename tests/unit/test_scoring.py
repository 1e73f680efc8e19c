"""Unit tests for risk scoring logic"""

import pytest
from meraki_intelligence.domain.models import ComplianceStatus, FinancialPrediction, FraudIndicator
from meraki_intelligence.domain.scoring import (
    calculate_compliance_risk,
    calculate_financial_risk,
    calculate_operational_risk,
    calculate_risk_score,
    determine_trend,
)


def _forecast(trend: str = "stable", volatility: str = "low") -> FinancialPrediction:
    return FinancialPrediction(
        predictions=[100.0, 100.0, 100.0],
        periods=["2026-07", "2026-08", "2026-09"],
        trend=trend,
        volatility=volatility,
        confidence=0.9,
        insights=[],
    )


def _fraud(score: int, tx_id: str = "t1") -> FraudIndicator:
    return FraudIndicator(transaction_id=tx_id, risk_score=score, indicators=["signal"], explanation="")


def _member(user_id: str, status: str) -> ComplianceStatus:
    return ComplianceStatus(user_id=user_id, attendance_rate=0.5, missed_days=0, status=status, issues=[])


def test_clean_organization_scores_zero():
    """Test no findings gives an optimal, stable score with matching details"""
    score = calculate_risk_score([], [], _forecast(), total_members=10)

    assert (score.overall, score.financial, score.compliance, score.operational) == (0, 0, 0, 0)
    assert score.trend == "stable"
    assert score.details.financial == "Financial data stable (0 anomalies)"
    assert score.details.compliance == "Compliance rate 100%"
    assert score.details.operational == "All operational tasks completed"
    assert score.details.overall == "Organization condition: optimal"


def test_combined_risk_score():
    """Test sub-scores and the 45/30/25 weighting"""
    score = calculate_risk_score(
        [_fraud(80)],
        [_member("a", "non_compliant"), _member("b", "warning"), _member("c", "compliant"), _member("d", "compliant")],
        _forecast(trend="decreasing"),
        total_members=4,
        pending_verification_count=3,
    )

    assert score.financial == 83  # 0.6 * 80 + 5 * 1 + 30
    assert score.compliance == 38  # (100 + 50) / 4
    assert score.operational == 40  # 3 * 5 + 25 for financial > 60
    assert score.overall == 59
    assert score.trend == "worsening"
    assert score.details.financial == "1 anomalies detected (max risk: 80), forecast trend decreasing"
    assert score.details.compliance == "1 members (25%) non-compliant, 1 on warning"
    assert score.details.operational == "3 verification tasks pending"
    assert score.details.overall == "Organizational risk score: 59/100"


def test_financial_risk_volatility_and_cap():
    assert calculate_financial_risk([], _forecast(volatility="high")) == 15
    assert calculate_financial_risk([_fraud(100, f"t{i}") for i in range(5)], _forecast("decreasing", "high")) == 100


def test_financial_risk_monotonic_in_fraud_score():
    scores = [calculate_financial_risk([_fraud(s)], _forecast()) for s in range(0, 101, 10)]

    assert scores == sorted(scores)


def test_compliance_risk_monotonic_in_non_compliant_count():
    scores = [calculate_compliance_risk(n, 0, 5) for n in range(6)]

    assert scores == sorted(scores)
    assert scores[-1] == 100


def test_operational_risk_monotonic_in_pending_count():
    scores = [calculate_operational_risk(p, 0, 0) for p in range(0, 21)]

    assert scores == sorted(scores)
    assert scores[-1] == 50


def test_risk_score_monotonic_in_each_input():
    """Test raising one input never lowers the matching sub-score"""
    base = dict(compliance_statuses=[], forecast=_forecast(), total_members=5, pending_verification_count=0)

    financial = [calculate_risk_score([_fraud(s)], **base).financial for s in (10, 40, 70, 100)]
    compliance = [
        calculate_risk_score([], **{**base, "compliance_statuses": [_member(str(i), "non_compliant") for i in range(n)]}).compliance
        for n in range(6)
    ]
    operational = [
        calculate_risk_score([], **{**base, "pending_verification_count": p}).operational for p in (0, 2, 5, 12)
    ]

    assert financial == sorted(financial)
    assert compliance == sorted(compliance)
    assert operational == sorted(operational)


@pytest.mark.parametrize(
    "overall,forecast_trend,non_compliant,compliance,expected",
    [
        (10, "decreasing", 3, 80, "stable"),
        (50, "increasing", 0, 0, "improving"),
        (50, "increasing", 1, 0, "stable"),
        (50, "stable", 0, 50, "worsening"),
        (50, "decreasing", 0, 0, "worsening"),
    ],
)
def test_determine_trend(overall, forecast_trend, non_compliant, compliance, expected):
    assert determine_trend(overall, forecast_trend, non_compliant, compliance) == expected
