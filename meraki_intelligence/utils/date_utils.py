"""Date manipulation utilities"""

import math
from datetime import date
from typing import List

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def month_key(value: date) -> str:
    """Bucket a date into its YYYY-MM month label"""
    return f"{value.year:04d}-{value.month:02d}"


def add_months(key: str, months: int) -> str:
    """Shift a YYYY-MM label by a number of months"""
    year, month = (int(part) for part in key.split("-"))
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def following_months(key: str, count: int) -> List[str]:
    """Labels for the `count` months after `key`"""
    return [add_months(key, i) for i in range(1, count + 1)]


def week_of_month(value: date) -> int:
    """Week index within the month, 1-5 (days 1-7 are week 1)"""
    return math.ceil(value.day / 7)
