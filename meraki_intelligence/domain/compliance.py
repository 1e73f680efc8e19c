"""Attendance compliance monitoring per member"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Sequence

from meraki_intelligence.domain.models import AttendanceRecord, AttendanceStatus, ComplianceStatus

EXCUSED_WEIGHT = 0.5
CONSECUTIVE_ABSENCE_LIMIT = 3
EXCESSIVE_EXCUSED_SHARE = 0.3

STATUS_ORDER = {"non_compliant": 0, "warning": 1, "compliant": 2}


def monitor_attendance_compliance(
    attendance_records: Sequence[AttendanceRecord],
    min_attendance_rate: float = 0.75,
    warning_threshold: float = 0.85,
    period_days: int = 30,
    today: date | None = None,
) -> List[ComplianceStatus]:
    """
    Evaluate each member's attendance over the trailing window.

    Requirements:
    - Rate = (present + 0.5 * excused) / records in window
    - Below 75% is non_compliant, below 85% is warning
    - 3+ consecutive unexcused absences escalate a compliant member to warning
    - Excused absences above 30% of records are flagged as an issue

    Members with no record in the window are not reported. Output is ordered
    non_compliant, warning, compliant.
    """
    today = today or date.today()
    period_start = today - timedelta(days=period_days)

    by_user: Dict[str, List[AttendanceRecord]] = defaultdict(list)
    for record in attendance_records:
        if record.date >= period_start:
            by_user[record.user_id].append(record)

    statuses: List[ComplianceStatus] = []
    for user_id, records in by_user.items():
        total = len(records)
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        excused = sum(1 for r in records if r.status.is_excused)
        absent = sum(1 for r in records if r.status == AttendanceStatus.UNEXCUSED_ABSENCE)

        rate = (present + excused * EXCUSED_WEIGHT) / max(total, 1)

        issues: List[str] = []
        status = "compliant"
        if rate < min_attendance_rate:
            status = "non_compliant"
            issues.append(
                f"Attendance rate ({rate * 100:.1f}%) is below the minimum standard ({min_attendance_rate * 100:.0f}%)"
            )
        elif rate < warning_threshold:
            status = "warning"
            issues.append(f"Attendance rate ({rate * 100:.1f}%) is approaching the minimum")

        streak = count_consecutive_absences(records)
        if streak >= CONSECUTIVE_ABSENCE_LIMIT:
            if status != "non_compliant":
                status = "warning"
            issues.append(f"Consecutive unexcused absences: {streak} days")

        if excused > total * EXCESSIVE_EXCUSED_SHARE:
            issues.append(f"Excessive excused absences: {excused} of {total} days")

        statuses.append(
            ComplianceStatus(
                user_id=user_id,
                user_name=records[0].user_name,
                attendance_rate=rate,
                missed_days=absent,
                status=status,
                issues=issues,
            )
        )

    statuses.sort(key=lambda s: STATUS_ORDER[s.status])
    return statuses


def count_consecutive_absences(records: Sequence[AttendanceRecord]) -> int:
    """Longest run of unexcused absences in date order"""
    longest = 0
    current = 0
    for record in sorted(records, key=lambda r: r.date):
        if record.status == AttendanceStatus.UNEXCUSED_ABSENCE:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest
