"""Organizational habit and member persona insights"""

import logging
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Callable, Dict, List, Sequence, Tuple

from meraki_intelligence.domain.clustering import k_means_clustering
from meraki_intelligence.domain.models import (
    AttendanceRecord,
    AttendanceStatus,
    ClusterPoint,
    HabitInsight,
    Transaction,
)
from meraki_intelligence.utils.date_utils import DAY_NAMES, week_of_month

logger = logging.getLogger(__name__)

MEETING_PEAK_MIN_SHARE = 0.3
INACTIVE_AFTER_DAYS = 30
CHURN_RISK_RATE = 0.2
RETENTION_RATE = 0.1
RETENTION_MIN_MEMBERS = 5
PERSONA_MIN_RECORDS = 5
PERSONA_MIN_POINTS = 3
PERSONA_CLUSTERS = 3

CORE_PILLAR = "Core Pillar"
STEADY_DONOR = "Steady Donor"
FIELD_ACTIVIST = "Field Activist"
MODERATE_PARTICIPANT = "Moderate Participant"
PASSIVE_MEMBER = "Passive Member"

# Evaluated top to bottom on (avg attendance, avg contribution); first match wins
PERSONA_RULES: List[Tuple[Callable[[float, float], bool], str]] = [
    (lambda att, tx: att > 0.6 and tx > 0.4, CORE_PILLAR),
    (lambda att, tx: tx > 0.6, STEADY_DONOR),
    (lambda att, tx: att > 0.6, FIELD_ACTIVIST),
    (lambda att, tx: att > 0.3 or tx > 0.2, MODERATE_PARTICIPANT),
]


def label_persona(avg_attendance: float, avg_contribution: float) -> str:
    """Map cluster centroid statistics to a member archetype"""
    for matches, label in PERSONA_RULES:
        if matches(avg_attendance, avg_contribution):
            return label
    return PASSIVE_MEMBER


def detect_meeting_patterns(attendance_records: Sequence[AttendanceRecord]) -> HabitInsight | None:
    """Weekday with the most records, reported only if it holds over 30% of them"""
    if not attendance_records:
        return None

    day_counts = Counter(r.date.weekday() for r in attendance_records)
    peak_day, peak_count = max(sorted(day_counts.items()), key=lambda item: item[1])
    share = peak_count / len(attendance_records)
    if share <= MEETING_PEAK_MIN_SHARE:
        return None

    day_name = DAY_NAMES[peak_day]
    return HabitInsight(
        category="meeting",
        title="Meeting Pattern",
        description=f"Meetings happen most often on {day_name}.",
        metrics=f"Peak: {day_name}",
        confidence=round(share, 2),
        recommendation=f"Schedule the next important meeting on {day_name} for maximum attendance.",
    )


def _peak_week(transactions: Sequence[Transaction]) -> int:
    totals: Dict[int, float] = defaultdict(float)
    for t in transactions:
        totals[week_of_month(t.date)] += t.amount
    return max(sorted(totals.items()), key=lambda item: item[1])[0]


def detect_financial_patterns(transactions: Sequence[Transaction]) -> HabitInsight | None:
    """Week of the month with the largest outflow, falling back to inflow"""
    expenses = [t for t in transactions if t.type == "out"]
    if expenses:
        week = _peak_week(expenses)
        return HabitInsight(
            category="spending",
            title="Spending Pattern",
            description=f"The largest expenses usually fall in week {week} of the month.",
            metrics=f"Peak Expense: Week {week}",
            confidence=0.8,
            recommendation="Prepare cash liquidity ahead of that week.",
        )

    income = [t for t in transactions if t.type == "in"]
    if income:
        week = _peak_week(income)
        return HabitInsight(
            category="spending",
            title="Income Pattern",
            description=f"Cash income is most active in week {week} of the month.",
            metrics=f"Peak Income: Week {week}",
            confidence=0.8,
            recommendation="Allocate funds promptly after income arrives.",
        )

    return None


def detect_member_churn(attendance_records: Sequence[AttendanceRecord], today: date) -> HabitInsight | None:
    """
    Share of members with no qualifying activity in the last 30 days.

    Qualifying activity is any record that is not an unexcused absence. Over
    20% inactive is a risk; under 10% with more than 5 members is a strength.
    """
    members = {r.user_id for r in attendance_records}
    if len(members) < 2:
        return None

    last_active: Dict[str, date] = {}
    for r in attendance_records:
        if r.status == AttendanceStatus.UNEXCUSED_ABSENCE:
            continue
        if r.user_id not in last_active or r.date > last_active[r.user_id]:
            last_active[r.user_id] = r.date

    cutoff = today - timedelta(days=INACTIVE_AFTER_DAYS)
    inactive = sum(1 for m in members if m not in last_active or last_active[m] < cutoff)
    churn_rate = inactive / len(members)

    if churn_rate > CHURN_RISK_RATE:
        return HabitInsight(
            category="activity",
            title="Member Activity Risk",
            description=f"{inactive} of {len(members)} members were inactive in the last 30 days.",
            metrics=f"Inactive: {churn_rate * 100:.0f}%",
            confidence=0.85,
            recommendation="Run a re-engagement program or a member satisfaction survey.",
        )
    if churn_rate < RETENTION_RATE and len(members) > RETENTION_MIN_MEMBERS:
        active = (1 - churn_rate) * 100
        return HabitInsight(
            category="activity",
            title="Strong Member Retention",
            description=f"Most members ({active:.0f}%) actively participate.",
            metrics=f"Active: {active:.0f}%",
            confidence=0.9,
            recommendation="Keep the momentum by recognizing active members.",
        )
    return None


def build_member_points(
    attendance_records: Sequence[AttendanceRecord],
    transactions: Sequence[Transaction],
) -> List[ClusterPoint]:
    """One point per member: (present share of records, contribution / top contribution)"""
    present: Counter = Counter()
    total: Counter = Counter()
    for r in attendance_records:
        total[r.user_id] += 1
        if r.status == AttendanceStatus.PRESENT:
            present[r.user_id] += 1

    volume: Dict[str, float] = defaultdict(float)
    for t in transactions:
        volume[t.user_id] += t.amount
    max_volume = max(max(volume.values(), default=0.0), 1.0)

    members = list(dict.fromkeys([r.user_id for r in attendance_records] + [t.user_id for t in transactions]))
    return [
        ClusterPoint(
            id=member,
            features=(
                present[member] / total[member] if total[member] else 0.0,
                volume.get(member, 0.0) / max_volume,
            ),
        )
        for member in members
    ]


def segment_members(
    attendance_records: Sequence[AttendanceRecord],
    transactions: Sequence[Transaction],
    max_iterations: int = 20,
    seed: int | None = None,
) -> HabitInsight | None:
    """K-means (k=3) over member features, each cluster named by the persona rule table"""
    if len(attendance_records) < PERSONA_MIN_RECORDS:
        return None

    points = build_member_points(attendance_records, transactions)
    if len(points) < PERSONA_MIN_POINTS:
        return None

    clustered = k_means_clustering(points, PERSONA_CLUSTERS, max_iterations, seed=seed)

    groups: Dict[int, List[ClusterPoint]] = defaultdict(list)
    for point in clustered:
        groups[point.cluster or 0].append(point)

    label_counts: Dict[str, int] = defaultdict(int)
    for cluster in sorted(groups):
        group = groups[cluster]
        avg_attendance = sum(p.features[0] for p in group) / len(group)
        avg_contribution = sum(p.features[1] for p in group) / len(group)
        label_counts[label_persona(avg_attendance, avg_contribution)] += len(group)

    breakdown = ", ".join(f"{label} ({count})" for label, count in label_counts.items())
    return HabitInsight(
        category="activity",
        title="Personas & Segmentation",
        description=f"{len(points)} members grouped into personas: {breakdown}.",
        metrics=f"{label_counts.get(CORE_PILLAR, 0)} Key Players",
        confidence=0.95,
        recommendation=(
            f"Keep '{STEADY_DONOR}' members engaged with transparent reports, "
            f"and involve '{FIELD_ACTIVIST}' members in technical committees."
        ),
        action_plan=[
            f"{CORE_PILLAR}: give strategic access and responsibility.",
            f"{STEADY_DONOR}: send exclusive donation impact reports.",
            f"{FIELD_ACTIVIST}: give a mandate or coordinator role.",
            f"{PASSIVE_MEMBER}: run a re-engagement campaign.",
        ],
    )


def analyze_organizational_habits(
    transactions: Sequence[Transaction],
    attendance_records: Sequence[AttendanceRecord],
    today: date | None = None,
    max_iterations: int = 20,
    seed: int | None = None,
) -> List[HabitInsight]:
    """Run every habit detector; a failing detector is logged and skipped"""
    today = today or date.today()
    detectors: List[Tuple[str, Callable[[], HabitInsight | None]]] = [
        ("meeting patterns", lambda: detect_meeting_patterns(attendance_records)),
        ("financial patterns", lambda: detect_financial_patterns(transactions)),
        ("member churn", lambda: detect_member_churn(attendance_records, today)),
        ("member segmentation", lambda: segment_members(attendance_records, transactions, max_iterations, seed)),
    ]

    insights: List[HabitInsight] = []
    for name, detector in detectors:
        try:
            insight = detector()
        except Exception:
            logger.exception("Habit detector failed", extra={"detector": name})
            continue
        if insight:
            insights.append(insight)
    return insights
