"""Domain models - pure Python dataclasses representing records and analysis results"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Tuple

from meraki_intelligence.domain.exceptions import InvalidRecordError


class AttendanceStatus(str, Enum):
    """Attendance outcome for a single member on a single day"""

    PRESENT = "present"
    EXCUSED_LEAVE = "excused_leave"
    EXCUSED_SICK = "excused_sick"
    UNEXCUSED_ABSENCE = "unexcused_absence"

    @classmethod
    def parse(cls, value: "str | AttendanceStatus") -> "AttendanceStatus":
        """Accept canonical values or the Indonesian labels used by the dashboard"""
        if isinstance(value, cls):
            return value
        aliases = {
            "hadir": cls.PRESENT,
            "izin": cls.EXCUSED_LEAVE,
            "sakit": cls.EXCUSED_SICK,
            "alpha": cls.UNEXCUSED_ABSENCE,
        }
        key = str(value).strip().lower()
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError as e:
            raise InvalidRecordError(f"Unknown attendance status: {value!r}") from e

    @property
    def is_excused(self) -> bool:
        return self in (AttendanceStatus.EXCUSED_LEAVE, AttendanceStatus.EXCUSED_SICK)


@dataclass(frozen=True)
class Transaction:
    """Treasury transaction snapshot supplied by the records provider"""

    id: str
    user_id: str
    amount: float
    type: str  # "in" or "out"
    category: str
    date: datetime
    user_name: str | None = None
    notes: str | None = None
    status: str | None = None  # "verified" once a treasurer has checked it

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise InvalidRecordError(f"Transaction {self.id} has negative amount {self.amount}")
        if self.type not in ("in", "out"):
            raise InvalidRecordError(f"Transaction {self.id} has unknown direction {self.type!r}")
        # Plain dates are treated as midnight
        if not isinstance(self.date, datetime):
            object.__setattr__(self, "date", datetime(self.date.year, self.date.month, self.date.day))

    @property
    def is_verified(self) -> bool:
        return self.status == "verified"


@dataclass(frozen=True)
class AttendanceRecord:
    """Single attendance entry for a member"""

    id: str
    user_id: str
    date: date
    status: AttendanceStatus
    user_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", AttendanceStatus.parse(self.status))
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())


@dataclass(frozen=True)
class DataPoint:
    """Generic time-series unit fed to anomaly, pattern and forecasting code"""

    value: float
    timestamp: datetime | None = None
    id: str | None = None
    metadata: Dict[str, Any] | None = None


@dataclass(frozen=True)
class ClusterPoint:
    """Feature vector for one member, optionally tagged with its cluster index"""

    id: str
    features: Tuple[float, ...]
    cluster: int | None = None


@dataclass
class FraudIndicator:
    """Composite fraud signal for one transaction"""

    transaction_id: str
    risk_score: int  # 0-100, sum of triggered signal weights
    indicators: List[str]
    explanation: str


@dataclass
class ComplianceStatus:
    """Attendance compliance verdict for one member"""

    user_id: str
    attendance_rate: float
    missed_days: int
    status: str  # "compliant" | "warning" | "non_compliant"
    issues: List[str]
    user_name: str | None = None


@dataclass
class FinancialPrediction:
    """Forecast of monthly financial totals"""

    predictions: List[float]
    periods: List[str]
    trend: str  # "increasing" | "decreasing" | "stable"
    volatility: str  # "low" | "medium" | "high"
    confidence: float
    insights: List[str]
    action_plan: List[str] | None = None


@dataclass
class RiskDetails:
    """Human-readable explanation per risk dimension"""

    financial: str
    compliance: str
    operational: str
    overall: str


@dataclass
class RiskScore:
    """Aggregate organizational risk, every dimension 0-100 (higher = riskier)"""

    overall: int
    financial: int
    compliance: int
    operational: int
    trend: str  # "improving" | "stable" | "worsening"
    details: RiskDetails


@dataclass
class RiskAlert:
    """Actionable alert derived from a risk report"""

    id: str
    type: str  # "financial" | "compliance" | "operational"
    severity: str  # "low" | "medium" | "high" | "critical"
    title: str
    description: str
    related_ids: List[str]
    recommendations: List[str]
    created_at: datetime
    is_resolved: bool = False


@dataclass
class HabitInsight:
    """Behavioral pattern discovered in organizational records"""

    category: str  # "meeting" | "spending" | "activity"
    title: str
    description: str
    metrics: str
    confidence: float
    recommendation: str
    action_plan: List[str] | None = None


@dataclass
class FraudAnalysis:
    total_transactions: int
    suspicious_count: int
    high_risk_count: int
    indicators: List[FraudIndicator]


@dataclass
class ComplianceAnalysis:
    total_members: int
    compliant_count: int
    warning_count: int
    non_compliant_count: int
    statuses: List[ComplianceStatus]


@dataclass
class RiskReport:
    """Complete output of one report-generation call"""

    generated_at: datetime
    risk_score: RiskScore
    alerts: List[RiskAlert]
    fraud_analysis: FraudAnalysis
    compliance_analysis: ComplianceAnalysis
    financial_forecast: FinancialPrediction
    habits: List[HabitInsight]
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SimulationModifiers:
    """What-if adjustments applied on top of the status-quo projection"""

    income_change_percent: float = 0.0  # 10 means +10%
    expense_change_percent: float = 0.0  # -10 means cut costs by 10%
    one_time_income: float = 0.0  # grant or large donation
    one_time_cost: float = 0.0  # equipment purchase


@dataclass
class SimulationResult:
    """Outcome of a what-if scenario"""

    baseline: List[float]
    projected: List[float]
    delta: float
    final_balance: float
    insights: List[str]
