"""Alert generation from fraud, compliance and risk-score results"""

import uuid
from datetime import datetime
from typing import List, Sequence

from meraki_intelligence.domain.models import ComplianceStatus, FraudIndicator, RiskAlert, RiskScore

FRAUD_ALERT_MIN_SCORE = 70
FINANCIAL_ALERT_MIN_SCORE = 70
OPERATIONAL_ALERT_MIN_SCORE = 60
COMPLIANCE_ESCALATION_COUNT = 3

FRAUD_RECOMMENDATIONS = [
    "Verify the transaction receipt",
    "Contact the member involved",
    "Temporarily freeze the entry if needed",
]
FINANCIAL_RECOMMENDATIONS = ["Audit this month's cash flow", "Review operational spending"]
COMPLIANCE_RECOMMENDATIONS = ["Send a warning notification", "Follow up personally"]
OPERATIONAL_RECOMMENDATIONS = ["Complete pending verifications", "Delegate routine tasks"]


def generate_risk_alerts(
    fraud_indicators: Sequence[FraudIndicator],
    compliance_statuses: Sequence[ComplianceStatus],
    risk_score: RiskScore,
    now: datetime | None = None,
) -> List[RiskAlert]:
    """
    Build alerts in a fixed order.

    - One critical alert per fraud indicator scoring 70+
    - One high alert when financial risk is 70+
    - One compliance alert when any member is non_compliant (high above 3 members)
    - One operational alert when operational risk is 60+
    """
    now = now or datetime.now()
    alerts: List[RiskAlert] = []

    for indicator in fraud_indicators:
        if indicator.risk_score >= FRAUD_ALERT_MIN_SCORE:
            alerts.append(
                RiskAlert(
                    id=f"fraud-{uuid.uuid4().hex[:9]}",
                    type="financial",
                    severity="critical",
                    title="Suspicious Transaction Detected",
                    description=", ".join(indicator.indicators),
                    related_ids=[indicator.transaction_id],
                    recommendations=list(FRAUD_RECOMMENDATIONS),
                    created_at=now,
                )
            )

    if risk_score.financial >= FINANCIAL_ALERT_MIN_SCORE:
        alerts.append(
            RiskAlert(
                id="high-financial-risk",
                type="financial",
                severity="high",
                title="High Financial Risk",
                description=f"Financial indicators show a negative trend or significant anomalies: {risk_score.details.financial}.",
                related_ids=[],
                recommendations=list(FINANCIAL_RECOMMENDATIONS),
                created_at=now,
            )
        )

    non_compliant = [s for s in compliance_statuses if s.status == "non_compliant"]
    if non_compliant:
        alerts.append(
            RiskAlert(
                id="compliance-issue",
                type="compliance",
                severity="high" if len(non_compliant) > COMPLIANCE_ESCALATION_COUNT else "medium",
                title="Member Compliance Violation",
                description=f"{len(non_compliant)} members fell below the attendance standard.",
                related_ids=[s.user_id for s in non_compliant],
                recommendations=list(COMPLIANCE_RECOMMENDATIONS),
                created_at=now,
            )
        )

    if risk_score.operational >= OPERATIONAL_ALERT_MIN_SCORE:
        alerts.append(
            RiskAlert(
                id="ops-risk",
                type="operational",
                severity="medium",
                title="Operational Bottleneck",
                description="Administrative or verification tasks are piling up.",
                related_ids=[],
                recommendations=list(OPERATIONAL_RECOMMENDATIONS),
                created_at=now,
            )
        )

    return alerts
