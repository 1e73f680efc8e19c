"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta
from meraki_intelligence.domain.models import AttendanceRecord, Transaction


@pytest.fixture
def now() -> datetime:
    """Fixed reference time (a Monday) so window-based analyses are reproducible"""
    return datetime(2026, 6, 15, 9, 0)


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Six months of member dues and routine spending, January to June 2026"""
    transactions = []

    for month in range(1, 7):
        # Monthly dues from four members on separate days
        for i, user_id in enumerate(["u1", "u2", "u3", "u4"]):
            transactions.append(
                Transaction(
                    id=f"dues_{month}_{user_id}",
                    user_id=user_id,
                    amount=250_000,
                    type="in",
                    category="iuran",
                    date=datetime(2026, month, 3 + i * 3, 10, 0),
                    status="verified",
                )
            )

        # Routine spending recorded by the treasurer, June still unverified
        status = None if month == 6 else "verified"
        transactions.append(
            Transaction(
                id=f"consumption_{month}",
                user_id="u1",
                amount=300_000,
                type="out",
                category="konsumsi",
                date=datetime(2026, month, 8, 15, 0),
                status=status,
            )
        )
        transactions.append(
            Transaction(
                id=f"rent_{month}",
                user_id="u1",
                amount=400_000,
                type="out",
                category="sewa",
                date=datetime(2026, month, 11, 15, 0),
                status=status,
            )
        )

    return transactions


@pytest.fixture
def sample_attendance(now: datetime) -> list[AttendanceRecord]:
    """Five weekly Monday meetings: three reliable members, one slipping, one absent"""
    meeting_days = [now.date() - timedelta(days=7 * week) for week in range(5)]
    statuses = {
        "u1": ["hadir"] * 5,
        "u2": ["hadir"] * 5,
        "u3": ["hadir"] * 5,
        "u4": ["hadir", "hadir", "hadir", "izin", "alpha"],
        "u5": ["alpha"] * 5,
    }

    records = []
    for user_id, user_statuses in statuses.items():
        for day, status in zip(meeting_days, user_statuses):
            records.append(
                AttendanceRecord(
                    id=f"att_{user_id}_{day.isoformat()}",
                    user_id=user_id,
                    user_name=f"Member {user_id}",
                    date=day,
                    status=status,
                )
            )
    return records


@pytest.fixture
def today(now: datetime) -> date:
    return now.date()
