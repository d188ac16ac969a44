"""
booking_manager.py
------------------
Coordinates the booking lifecycle.

States:
    status      pending | confirmed | cancelled
    trash flag  active (is_deleted=False) | trashed (is_deleted=True)
    purged      row removed; terminal

Transitions:
    create                      -> (pending, active)
    update_status               (any, active)  -> (new status, active)
    move_to_trash  [confirm]    (any, active)  -> (same, trashed)
    restore                     (any, trashed) -> (same, active)
    delete_permanently [confirm](any, trashed) -> purged

Notes:
- Creation copies the full price table of every selected service onto the
  booking (snapshot pricing) and stores the resulting total.
- Slot availability is not touched unless BOOKING_CLAIM_SLOTS is on.
- Any failure leaves the stored row as it was; update_status also rolls the
  in-memory instance back to the stored values.
"""

import logging

from django.conf import settings
from django.db import DatabaseError, transaction

from accounts.identity import is_verified
from ..models import Booking, BookingStatus, Complexity, Service
from .availability_engine import AvailabilityEngine
from .pricing import calculate_total
from .slot_utils import day_key, in_booking_window, is_quarter_hour, parse_day, combine_slot

logger = logging.getLogger(__name__)


class BookingError(ValueError):
    """A booking rule blocked the operation."""


class InvalidTransition(BookingError):
    """The booking is not in a state the requested transition starts from."""


class ConfirmationRequired(BookingError):
    """Destructive operation issued without explicit confirmation."""


class VerificationRequired(BookingError):
    """The customer identity must be verified before booking."""


class BookingManager:
    def __init__(self, availability=None):
        self.availability = availability or AvailabilityEngine()

    # -------------------- listings --------------------
    def active_bookings(self):
        return Booking.objects.filter(is_deleted=False)

    def trashed_bookings(self):
        return Booking.objects.filter(is_deleted=True)

    def bookings_for_user(self, user):
        return self.active_bookings().filter(user=user)

    # -------------------- create --------------------
    def build_snapshot(self, selections):
        """
        Resolve [{name, complexity}] against the catalog and copy each
        service's full price table. Raises BookingError on an empty selection,
        an unknown service, a bad complexity, or a service picked twice.
        """
        if not selections:
            raise BookingError("Please select at least one service.")

        snapshot = []
        seen = set()
        for item in selections:
            name = (item.get("name") or "").strip()
            complexity = item.get("complexity") or Complexity.SIMPLE
            if complexity not in Complexity.values:
                raise BookingError(f"Unknown complexity '{complexity}' for {name or 'service'}.")
            if name in seen:
                raise BookingError(f"{name} was selected more than once.")
            service = Service.objects.filter(name=name).first()
            if service is None:
                raise BookingError(f"Service '{name}' is not available.")
            seen.add(name)
            snapshot.append(service.snapshot(complexity))
        return snapshot

    @transaction.atomic
    def create_booking(self, user, services, date, time, personal_details, today=None):
        """
        Create a booking in (pending, active).

        Args:
            user: authenticated User (verified email or federated identity)
            services: list of {"name", "complexity"}
            date: "YYYY-MM-DD" or date
            time: "HH:MM" offered for that date
            personal_details: {"name", "phone", "email"(optional)}

        Raises:
            VerificationRequired: identity not verified
            BookingError: any other rule
        """
        if user is None or not user.is_authenticated:
            raise VerificationRequired("Please sign in before booking.")
        if not is_verified(user):
            raise VerificationRequired("Please verify your email before booking.")

        snapshot = self.build_snapshot(services)

        day = parse_day(date)
        if day is None or not time:
            raise BookingError("Please choose a date and time for your appointment.")
        if not is_quarter_hour(time):
            raise BookingError("Invalid time. Use HH:MM on a quarter hour.")
        if not in_booking_window(day, today):
            raise BookingError("That date cannot be booked. Choose a date within the next "
                               f"{settings.BOOKING_WINDOW_DAYS} days.")
        if not self.availability.is_bookable(day, time, today):
            raise BookingError(f"{time} on {day_key(day)} is not available.")

        details = personal_details or {}
        name = (details.get("name") or "").strip()
        phone = (details.get("phone") or "").strip()
        email = (details.get("email") or "").strip()
        if not name or not phone:
            raise BookingError("Name and phone are required.")
        if not user.email and not email:
            raise BookingError("Email is required.")

        if settings.BOOKING_CLAIM_SLOTS and not self.availability.claim_slot(day, time):
            raise BookingError(f"{time} on {day_key(day)} was just taken. Please pick another time.")

        booking = Booking.objects.create(
            user=user,
            user_email=user.email or email,
            services=snapshot,
            appointment_at=combine_slot(day, time),
            customer_name=name,
            customer_phone=phone,
            customer_email=email,
            total_price=calculate_total(snapshot),
            status=BookingStatus.PENDING,
            is_deleted=False,
        )
        logger.info("Booking %s created for %s on %s %s", booking.pk, booking.user_email, day_key(day), time)
        return booking

    # -------------------- status --------------------
    def update_status(self, booking, new_status):
        """
        (any, active) -> (new_status, active). Same status is a no-op.

        The change is applied to the instance first, then persisted; if the
        save fails the instance is reloaded from the store and the error
        re-raised.
        """
        if new_status not in BookingStatus.values:
            raise BookingError(f"Invalid status '{new_status}'.")
        if booking.is_deleted:
            logger.warning("Status change refused for trashed booking %s", booking.pk)
            raise InvalidTransition("Restore the booking from the trash before changing its status.")
        if booking.status == new_status:
            return booking

        previous = booking.status
        booking.status = new_status
        try:
            with transaction.atomic():
                booking.save(update_fields=["status"])
        except DatabaseError:
            logger.exception("Status update failed for booking %s", booking.pk)
            booking.refresh_from_db()
            raise
        logger.info("Booking %s status %s -> %s", booking.pk, previous, new_status)
        return booking

    # -------------------- trash --------------------
    @transaction.atomic
    def move_to_trash(self, booking, confirmed=False):
        if not confirmed:
            raise ConfirmationRequired("Please confirm moving this booking to trash.")
        if booking.is_deleted:
            logger.warning("Booking %s is already in the trash", booking.pk)
            raise InvalidTransition("Booking is already in the trash.")
        booking.is_deleted = True
        booking.save(update_fields=["is_deleted"])
        logger.info("Booking %s moved to trash", booking.pk)
        return booking

    @transaction.atomic
    def restore(self, booking):
        if not booking.is_deleted:
            logger.warning("Restore refused for active booking %s", booking.pk)
            raise InvalidTransition("Only bookings in the trash can be restored.")
        booking.is_deleted = False
        booking.save(update_fields=["is_deleted"])
        logger.info("Booking %s restored", booking.pk)
        return booking

    @transaction.atomic
    def delete_permanently(self, booking, confirmed=False):
        """Remove a trashed booking for good. Irreversible."""
        if not confirmed:
            raise ConfirmationRequired(
                "Please confirm permanent deletion. This action cannot be undone."
            )
        if not booking.is_deleted:
            logger.warning("Permanent delete refused for active booking %s", booking.pk)
            raise InvalidTransition("Move the booking to trash before deleting it permanently.")
        pk = booking.pk
        booking.delete()
        logger.info("Booking %s permanently deleted", pk)
        return pk
