# app/utils/slot_time.py
"""Helpers for "HH:MM" slot strings and weekday numbering"""
import re
from datetime import date, datetime, time, tzinfo

SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def is_valid_slot(value: str) -> bool:
    return bool(value) and SLOT_PATTERN.match(value) is not None


def parse_slot_time(value: str) -> time:
    """Parse "HH:MM" into a time; raises ValueError on anything else"""
    match = SLOT_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid time slot '{value}', expected HH:MM")
    return time(int(match.group(1)), int(match.group(2)))


def slot_start(day: date, slot: str, tz: tzinfo) -> datetime:
    """Absolute start instant of a slot on a day in shop-local time"""
    return datetime.combine(day, parse_slot_time(slot), tzinfo=tz)


def sunday_based_weekday(day: date) -> int:
    """0=Sunday, 1=Monday, ..., 6=Saturday (opening hours, free days)"""
    return (day.weekday() + 1) % 7


def monday_based_weekday(day: date) -> int:
    """1=Monday, ..., 7=Sunday (recurring series)"""
    return day.isoweekday()
