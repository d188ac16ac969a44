"""
aggregation.py
--------------
Dashboard figures derived from a set of bookings. Everything is recomputed
from the rows passed in on every call; there is no caching, which is fine
at a small studio's volume.

Only active bookings (is_deleted=False) are counted; trashed rows passed in
are ignored.
"""

import logging
from collections import OrderedDict
from decimal import Decimal

from django.utils import timezone

from booking.models import BookingStatus
from booking.services.pricing import calculate_total

logger = logging.getLogger(__name__)


def _active(bookings):
    return [b for b in bookings if not b.is_deleted]


def dashboard_counts(bookings):
    """
    {"total_bookings", "pending_bookings", "confirmed_bookings", "cancelled_bookings"}
    over the active bookings. The three status counts always add up to the total.
    """
    active = _active(bookings)
    counts = {s: 0 for s in BookingStatus.values}
    for b in active:
        counts[b.status] = counts.get(b.status, 0) + 1
    return {
        "total_bookings": len(active),
        "pending_bookings": counts[BookingStatus.PENDING],
        "confirmed_bookings": counts[BookingStatus.CONFIRMED],
        "cancelled_bookings": counts[BookingStatus.CANCELLED],
    }


def _appointment_day(booking):
    value = booking.appointment_at
    if value is None:
        return None
    try:
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    except (AttributeError, ValueError, OverflowError):
        return None


def daily_series(bookings):
    """
    Per appointment date: number of bookings and summed recorded price.
    [{"date": "YYYY-MM-DD", "bookings": N, "total_revenue": "123.00"}, ...]
    ascending by date. Bookings without a usable date are skipped and logged.
    """
    buckets = {}
    for b in _active(bookings):
        day = _appointment_day(b)
        if day is None:
            logger.warning("Booking %s has a missing or invalid date; left out of the report", b.pk)
            continue
        bucket = buckets.setdefault(day, {"count": 0, "revenue": Decimal("0")})
        bucket["count"] += 1
        bucket["revenue"] += b.total_price or Decimal("0")

    return [
        {
            "date": day.strftime("%Y-%m-%d"),
            "bookings": buckets[day]["count"],
            "total_revenue": str(buckets[day]["revenue"]),
        }
        for day in sorted(buckets)
    ]


def customer_directory(bookings):
    """
    Active bookings grouped by customer email, in order of first appearance.
    Name and phone come from the customer's first booking.
    """
    customers = OrderedDict()
    for b in _active(bookings):
        entry = customers.get(b.user_email)
        if entry is None:
            entry = customers[b.user_email] = {
                "email": b.user_email,
                "name": b.customer_name,
                "phone": b.customer_phone,
                "bookings": [],
            }
        entry["bookings"].append({
            "id": b.pk,
            "date": b.appointment_at.isoformat() if b.appointment_at else None,
            "services": [f"{s.get('name')} ({s.get('complexity')})" for s in b.services or []],
            "price": str(calculate_total(b.services)),
            "status": b.status,
        })
    return list(customers.values())
