"""
availability_engine.py
----------------------
Resolves which dates and times are offered to a customer from the
administrator-defined TimeSlot rows.

Rules:
- A time is offered for a date when at least one slot with that exact date
  has is_available=True.
- Calendar highlighting only covers the booking window
  (today .. today + BOOKING_WINDOW_DAYS); dates outside it are never
  selectable whatever the slot data says.
- Selecting a time reserves nothing. Slots stay available until an
  administrator flips them, unless claim_slot() is used (see BOOKING_CLAIM_SLOTS).
"""

import logging

from ..models import TimeSlot
from .slot_utils import booking_window, day_key, in_booking_window, parse_day

logger = logging.getLogger(__name__)


class AvailabilityEngine:
    def __init__(self, slots=None):
        # Any TimeSlot queryset; defaults to every slot in the store.
        self._slots = slots

    @property
    def slots(self):
        if self._slots is not None:
            return self._slots.all()
        return TimeSlot.objects.all()

    def available_times(self, day) -> list:
        """
        Sorted, de-duplicated "HH:MM" strings offered on the given date.
        Unparseable dates yield an empty list.
        """
        d = parse_day(day)
        if d is None:
            return []
        times = self.slots.filter(date=d, is_available=True).values_list("time", flat=True)
        return sorted(set(times))

    def available_dates(self, today=None) -> list:
        """
        Distinct yyyy-mm-dd dates inside the booking window that have at
        least one available slot, ascending.
        """
        first, last = booking_window(today)
        dates = (
            self.slots.filter(is_available=True, date__gte=first, date__lte=last)
            .values_list("date", flat=True)
        )
        return [day_key(d) for d in sorted(set(dates))]

    def is_bookable(self, day, slot_time, today=None) -> bool:
        d = parse_day(day)
        if d is None or not in_booking_window(d, today):
            return False
        return slot_time in self.available_times(d)

    def claim_slot(self, day, slot_time) -> bool:
        """
        Single-writer claim: flip ONE matching available slot to unavailable
        with a conditional UPDATE. Returns False when nothing was left to claim
        (another booking got there first).
        """
        d = parse_day(day)
        if d is None:
            return False
        candidates = self.slots.filter(date=d, time=slot_time, is_available=True).values_list("pk", flat=True)
        for pk in candidates:
            claimed = TimeSlot.objects.filter(pk=pk, is_available=True).update(is_available=False)
            if claimed:
                logger.info("Claimed slot %s %s (id=%s)", day_key(d), slot_time, pk)
                return True
        return False
