"""Unit tests for alert generation"""

from datetime import datetime

from meraki_intelligence.domain.alerts import generate_risk_alerts
from meraki_intelligence.domain.models import ComplianceStatus, FraudIndicator, RiskDetails, RiskScore

NOW = datetime(2026, 6, 15, 9, 0)


def _risk(financial: int = 0, operational: int = 0) -> RiskScore:
    return RiskScore(
        overall=50,
        financial=financial,
        compliance=0,
        operational=operational,
        trend="stable",
        details=RiskDetails(financial="2 anomalies detected", compliance="", operational="", overall=""),
    )


def _fraud(tx_id: str, score: int) -> FraudIndicator:
    return FraudIndicator(transaction_id=tx_id, risk_score=score, indicators=["Signal A", "Signal B"], explanation="")


def _member(user_id: str, status: str) -> ComplianceStatus:
    return ComplianceStatus(user_id=user_id, attendance_rate=0.4, missed_days=3, status=status, issues=[])


def test_all_alert_kinds_in_order():
    members = [_member(f"m{i}", "non_compliant") for i in range(4)] + [_member("ok", "compliant")]

    alerts = generate_risk_alerts(
        [_fraud("t1", 85), _fraud("t2", 40)], members, _risk(financial=75, operational=60), now=NOW
    )

    assert [a.type for a in alerts] == ["financial", "financial", "compliance", "operational"]
    fraud, financial, compliance, operational = alerts

    assert fraud.id.startswith("fraud-") and len(fraud.id) == len("fraud-") + 9
    assert fraud.severity == "critical"
    assert fraud.related_ids == ["t1"]
    assert fraud.description == "Signal A, Signal B"

    assert financial.id == "high-financial-risk"
    assert financial.severity == "high"
    assert "2 anomalies detected" in financial.description

    assert compliance.id == "compliance-issue"
    assert compliance.severity == "high"
    assert compliance.related_ids == ["m0", "m1", "m2", "m3"]

    assert operational.id == "ops-risk"
    assert all(a.created_at == NOW and not a.is_resolved for a in alerts)


def test_few_non_compliant_members_is_medium():
    alerts = generate_risk_alerts([], [_member("a", "non_compliant"), _member("b", "warning")], _risk(), now=NOW)

    assert len(alerts) == 1
    assert alerts[0].severity == "medium"
    assert alerts[0].related_ids == ["a"]


def test_below_thresholds_no_alerts():
    alerts = generate_risk_alerts([_fraud("t1", 69)], [_member("a", "warning")], _risk(69, 59), now=NOW)

    assert alerts == []


def test_fraud_alert_ids_are_unique():
    alerts = generate_risk_alerts([_fraud(f"t{i}", 90) for i in range(5)], [], _risk(), now=NOW)

    assert len({a.id for a in alerts}) == 5
