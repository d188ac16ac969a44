from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings

from accounts.models import AccountProfile
from booking.models import Booking, BookingStatus, TimeSlot
from booking.services.booking_manager import (
    BookingError,
    BookingManager,
    ConfirmationRequired,
    InvalidTransition,
    VerificationRequired,
)
from booking.services.pricing import PricingService
from .utils import days_ahead, make_service, make_slot, make_user


class BookingManagerTestBase(TestCase):
    def setUp(self):
        self.manager = BookingManager()
        self.customer = make_user("amira@example.com")
        self.hand = make_service("Hand Henna", "30", "50", "70")
        self.foot = make_service("Foot Henna", "40", "60", "80")
        self.day = days_ahead(5)
        self.slot = make_slot(self.day, "14:00")

    def book(self, user=None, services=None, time="14:00", details=None, date=None):
        return self.manager.create_booking(
            user or self.customer,
            services or [{"name": "Hand Henna", "complexity": "Medium"}],
            (date or self.day).isoformat(),
            time,
            details or {"name": "Amira", "phone": "555-0101"},
        )


class CreateBookingTests(BookingManagerTestBase):
    def test_new_booking_is_pending_and_active(self):
        booking = self.book()

        self.assertEqual(booking.status, BookingStatus.PENDING)
        self.assertFalse(booking.is_deleted)
        self.assertEqual(booking.user_email, "amira@example.com")
        self.assertEqual(booking.total_price, Decimal("50.00"))
        self.assertEqual(booking.appointment_at.date(), self.day)
        self.assertEqual(booking.services, [{
            "name": "Hand Henna",
            "complexity": "Medium",
            "prices": {"Simple": "30.00", "Medium": "50.00", "Hard": "70.00"},
        }])

    def test_total_sums_every_selected_service(self):
        booking = self.book(services=[
            {"name": "Hand Henna", "complexity": "Simple"},
            {"name": "Foot Henna", "complexity": "Hard"},
        ])
        self.assertEqual(booking.total_price, Decimal("110.00"))

    def test_catalog_edit_does_not_touch_existing_booking(self):
        booking = self.book()
        PricingService.update_service_prices(self.hand, {"Medium": "65.00"})

        booking.refresh_from_db()
        self.assertEqual(booking.services[0]["prices"]["Medium"], "50.00")
        self.assertEqual(booking.total_price, Decimal("50.00"))

    def test_slot_stays_available_after_booking(self):
        self.book()
        self.slot.refresh_from_db()
        self.assertTrue(self.slot.is_available)

    def test_unverified_customer_is_rejected(self):
        unverified = make_user("new@example.com", verified=False)
        with self.assertRaises(VerificationRequired):
            self.book(user=unverified)
        self.assertFalse(Booking.objects.exists())

    def test_google_account_counts_as_verified(self):
        google_user = make_user("g@example.com", verified=False, provider=AccountProfile.PROVIDER_GOOGLE)
        booking = self.book(user=google_user)
        self.assertEqual(booking.user, google_user)

    def test_empty_selection_rejected(self):
        with self.assertRaisesMessage(BookingError, "at least one service"):
            self.manager.create_booking(self.customer, [], self.day.isoformat(), "14:00",
                                        {"name": "Amira", "phone": "555"})

    def test_unknown_service_and_complexity_rejected(self):
        with self.assertRaises(BookingError):
            self.book(services=[{"name": "Body Art", "complexity": "Simple"}])
        with self.assertRaises(BookingError):
            self.book(services=[{"name": "Hand Henna", "complexity": "Extreme"}])

    def test_time_must_be_offered(self):
        with self.assertRaisesMessage(BookingError, "not available"):
            self.book(time="15:00")

        self.slot.is_available = False
        self.slot.save()
        with self.assertRaisesMessage(BookingError, "not available"):
            self.book()

    def test_date_outside_window_rejected(self):
        far = days_ahead(45)
        make_slot(far, "14:00")
        with self.assertRaisesMessage(BookingError, "cannot be booked"):
            self.book(date=far)

    def test_name_and_phone_required(self):
        with self.assertRaisesMessage(BookingError, "Name and phone are required."):
            self.book(details={"name": "Amira", "phone": "  "})

    def test_email_required_when_account_has_none(self):
        user = make_user("placeholder@example.com")
        user.email = ""
        user.save()
        with self.assertRaisesMessage(BookingError, "Email is required."):
            self.book(user=user)

        booking = self.book(user=user, details={"name": "A", "phone": "1", "email": "a@example.com"})
        self.assertEqual(booking.user_email, "a@example.com")

    @override_settings(BOOKING_CLAIM_SLOTS=True)
    def test_claiming_slots_prevents_double_booking(self):
        self.book()
        self.assertFalse(TimeSlot.objects.get(pk=self.slot.pk).is_available)
        with self.assertRaises(BookingError):
            self.book()
        self.assertEqual(Booking.objects.count(), 1)


class LifecycleTests(BookingManagerTestBase):
    def setUp(self):
        super().setUp()
        self.booking = self.book()

    def test_status_changes_while_active(self):
        self.manager.update_status(self.booking, BookingStatus.CONFIRMED)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, "confirmed")

        self.manager.update_status(self.booking, BookingStatus.CANCELLED)
        self.manager.update_status(self.booking, BookingStatus.PENDING)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, "pending")

    def test_invalid_status_rejected(self):
        with self.assertRaises(BookingError):
            self.manager.update_status(self.booking, "done")

    def test_trash_and_restore_keep_status(self):
        self.manager.update_status(self.booking, BookingStatus.CONFIRMED)

        self.manager.move_to_trash(self.booking, confirmed=True)
        self.booking.refresh_from_db()
        self.assertTrue(self.booking.is_deleted)
        self.assertEqual(self.booking.status, "confirmed")
        self.assertNotIn(self.booking, self.manager.active_bookings())
        self.assertIn(self.booking, self.manager.trashed_bookings())

        self.manager.restore(self.booking)
        self.booking.refresh_from_db()
        self.assertFalse(self.booking.is_deleted)
        self.assertEqual(self.booking.status, "confirmed")

    def test_trash_requires_confirmation(self):
        with self.assertRaises(ConfirmationRequired):
            self.manager.move_to_trash(self.booking)
        self.booking.refresh_from_db()
        self.assertFalse(self.booking.is_deleted)

    def test_status_change_rejected_in_trash(self):
        self.manager.move_to_trash(self.booking, confirmed=True)
        with self.assertRaises(InvalidTransition):
            self.manager.update_status(self.booking, BookingStatus.CONFIRMED)

    def test_restore_requires_trashed_booking(self):
        with self.assertRaises(InvalidTransition):
            self.manager.restore(self.booking)

    def test_purge_only_from_trash_with_confirmation(self):
        with self.assertRaises(InvalidTransition):
            self.manager.delete_permanently(self.booking, confirmed=True)

        self.manager.move_to_trash(self.booking, confirmed=True)
        with self.assertRaises(ConfirmationRequired):
            self.manager.delete_permanently(self.booking)

        pk = self.manager.delete_permanently(self.booking, confirmed=True)
        self.assertFalse(Booking.objects.filter(pk=pk).exists())

    def test_failed_status_save_leaves_booking_unchanged(self):
        with mock.patch.object(Booking, "save", side_effect=DatabaseError("store offline")):
            with self.assertRaises(DatabaseError):
                self.manager.update_status(self.booking, BookingStatus.CONFIRMED)

        self.assertEqual(self.booking.status, "pending")
        self.assertEqual(Booking.objects.get(pk=self.booking.pk).status, "pending")
