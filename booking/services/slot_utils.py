"""
slot_utils.py
-------------
Helpers to normalise calendar dates and slot times, compute the booking
look-ahead window, and turn a chosen (date, "HH:MM") into an aware datetime.
"""

import re
from datetime import date, datetime, time, timedelta

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date

SLOT_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):(00|15|30|45)$")
QUARTER_HOURS = ("00", "15", "30", "45")


def parse_day(value):
    """
    Accept a date, a datetime, or a string and return a date.
    Strings may carry a time part ("2025-03-10T14:00", "2025-03-10 14:00");
    we trim to the date. Returns None when the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if "T" in raw:
        raw = raw.split("T", 1)[0].strip()
    elif " " in raw:
        raw = raw.split(" ", 1)[0].strip()
    try:
        return parse_date(raw)
    except ValueError:
        return None


def day_key(day):
    """Canonical yyyy-mm-dd representation used for slot matching."""
    return day.strftime("%Y-%m-%d")


def is_quarter_hour(value) -> bool:
    return bool(SLOT_TIME_PATTERN.match(value or ""))


def format_slot_time(hour, minute) -> str:
    """Build "HH:MM" from hour/minute parts; minute must be a quarter hour."""
    text = f"{int(hour):02d}:{int(minute):02d}"
    if not is_quarter_hour(text):
        raise ValueError(f"{text} is not a quarter-hour time.")
    return text


def booking_window(today=None, days=None):
    """
    Return (first, last) selectable dates, both inclusive:
    today .. today + BOOKING_WINDOW_DAYS.
    """
    if today is None:
        today = timezone.localdate()
    if days is None:
        days = settings.BOOKING_WINDOW_DAYS
    return today, today + timedelta(days=days)


def in_booking_window(day, today=None) -> bool:
    first, last = booking_window(today)
    return first <= day <= last


def combine_slot(day, slot_time):
    """
    Convert a date and "HH:MM" into an aware datetime in the current timezone.
    """
    h, m = slot_time.split(":")
    naive = datetime.combine(day, time(int(h), int(m)))
    return timezone.make_aware(naive, timezone.get_current_timezone())
