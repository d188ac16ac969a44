from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from rest_framework.test import APIClient

from booking.models import Booking, PriceHistory, Service, TimeSlot
from booking.services.booking_manager import BookingManager
from .utils import days_ahead, make_admin, make_service, make_slot, make_user


class ServiceApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.customer = make_user("customer@example.com")
        self.service = make_service("Hand Henna", "25.00", "40.00", "60.00")

    def test_anyone_can_list_services(self):
        resp = self.client.get("/api/services/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data[0]["name"], "Hand Henna")
        self.assertEqual(resp.data[0]["prices"], {"Simple": "25.00", "Medium": "40.00", "Hard": "60.00"})

    def test_customer_cannot_create_service(self):
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post("/api/services/", {
            "name": "Foot Henna",
            "prices": {"Simple": "40", "Medium": "60", "Hard": "80"},
        }, format="json")
        self.assertEqual(resp.status_code, 403)

    def test_admin_creates_service_with_all_tiers(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post("/api/services/", {"name": "Foot Henna", "prices": {"Simple": "40"}}, format="json")
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post("/api/services/", {
            "name": "Foot Henna",
            "prices": {"Simple": "40", "Medium": "60", "Hard": "80"},
        }, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(Service.objects.get(name="Foot Henna").price_hard, Decimal("80.00"))

    def test_price_update_creates_history_entry(self):
        """Updating a tier price logs a PriceHistory row."""
        self.client.force_authenticate(user=self.admin)
        resp = self.client.patch(
            f"/api/services/{self.service.id}/",
            {"prices": {"Medium": "50.00"}},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)

        self.service.refresh_from_db()
        self.assertEqual(self.service.price_medium, Decimal("50.00"))

        history = PriceHistory.objects.filter(service=self.service)
        self.assertEqual(history.count(), 1)
        entry = history.first()
        self.assertEqual(entry.complexity, "Medium")
        self.assertEqual(entry.old_price, Decimal("40.00"))
        self.assertEqual(entry.new_price, Decimal("50.00"))
        self.assertEqual(entry.changed_by, self.admin.email)

        resp = self.client.get(f"/api/services/{self.service.id}/price-history/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)

    def test_invalid_price_rejected(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.patch(
            f"/api/services/{self.service.id}/",
            {"prices": {"Hard": "-5"}},
            format="json",
        )
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(PriceHistory.objects.exists())


class TimeSlotApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=make_admin())
        self.day = days_ahead(4)

    def test_new_slot_is_available(self):
        resp = self.client.post("/api/time-slots/", {"date": self.day.isoformat(), "time": "10:15"}, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(resp.data["is_available"])

    def test_off_quarter_time_rejected(self):
        resp = self.client.post("/api/time-slots/", {"date": self.day.isoformat(), "time": "10:10"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(TimeSlot.objects.exists())

    def test_toggle_flips_availability(self):
        slot = make_slot(self.day, "10:00")
        resp = self.client.post(f"/api/time-slots/{slot.id}/toggle/")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.data["is_available"])

        resp = self.client.get("/api/bookings/availability/", {"date": self.day.isoformat()})
        self.assertEqual(resp.data["times"], [])

    def test_customers_cannot_manage_slots(self):
        client = APIClient()
        client.force_authenticate(user=make_user("c@example.com"))
        resp = client.post("/api/time-slots/", {"date": self.day.isoformat(), "time": "10:15"}, format="json")
        self.assertEqual(resp.status_code, 403)


class BookingApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.customer = make_user("amira@example.com")
        self.other = make_user("layla@example.com")
        make_service("Hand Henna", "30", "50", "70")
        self.day = days_ahead(3)
        make_slot(self.day, "14:00")
        make_slot(self.day, "10:30")

    def payload(self, **overrides):
        data = {
            "services": [{"name": "Hand Henna", "complexity": "Medium"}],
            "date": self.day.isoformat(),
            "time": "14:00",
            "personal_details": {"name": "Amira", "phone": "555-0101"},
        }
        data.update(overrides)
        return data

    def create_booking(self, user):
        return BookingManager().create_booking(
            user,
            [{"name": "Hand Henna", "complexity": "Simple"}],
            self.day.isoformat(),
            "10:30",
            {"name": user.email, "phone": "555"},
        )

    def test_public_availability(self):
        resp = self.client.get("/api/bookings/availability/", {"date": f"{self.day.isoformat()}T09:00"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, {"date": self.day.isoformat(), "times": ["10:30", "14:00"]})

        resp = self.client.get("/api/bookings/available-dates/")
        self.assertEqual(resp.data["dates"], [self.day.isoformat()])

    def test_availability_requires_valid_date(self):
        self.assertEqual(self.client.get("/api/bookings/availability/").status_code, 400)
        self.assertEqual(self.client.get("/api/bookings/availability/", {"date": "soon"}).status_code, 400)

    def test_verified_customer_books(self):
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post("/api/bookings/", self.payload(), format="json")

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["status"], "pending")
        self.assertFalse(resp.data["is_deleted"])
        self.assertEqual(resp.data["total_price"], "50.00")
        self.assertEqual(resp.data["personal_details"], {"name": "Amira", "phone": "555-0101"})

    def test_client_prices_are_ignored(self):
        self.client.force_authenticate(user=self.customer)
        payload = self.payload(services=[{"name": "Hand Henna", "complexity": "Hard", "prices": {"Hard": "1"}}])
        resp = self.client.post("/api/bookings/", payload, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["total_price"], "70.00")

    def test_unverified_customer_gets_remediation(self):
        self.client.force_authenticate(user=make_user("new@example.com", verified=False))
        resp = self.client.post("/api/bookings/", self.payload(), format="json")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data["remediation"], "verify-email")
        self.assertFalse(Booking.objects.exists())

    def test_anonymous_cannot_book(self):
        resp = self.client.post("/api/bookings/", self.payload(), format="json")
        self.assertEqual(resp.status_code, 403)

    def test_unavailable_time_is_a_bad_request(self):
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post("/api/bookings/", self.payload(time="15:00"), format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("not available", resp.data["detail"])

    def test_customers_only_see_their_own_bookings(self):
        mine = self.create_booking(self.customer)
        self.create_booking(self.other)

        self.client.force_authenticate(user=self.customer)
        resp = self.client.get("/api/bookings/")
        self.assertEqual([b["id"] for b in resp.data], [mine.id])

    def test_admin_sees_all_and_filters_by_email(self):
        self.create_booking(self.customer)
        self.create_booking(self.other)

        self.client.force_authenticate(user=self.admin)
        self.assertEqual(len(self.client.get("/api/bookings/").data), 2)
        resp = self.client.get("/api/bookings/", {"email": "LAYLA"})
        self.assertEqual([b["user_email"] for b in resp.data], ["layla@example.com"])

    def test_admin_status_trash_restore_purge(self):
        booking = self.create_booking(self.customer)
        self.client.force_authenticate(user=self.admin)

        resp = self.client.post(f"/api/bookings/{booking.id}/status/", {"status": "confirmed"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["status"], "confirmed")

        resp = self.client.post(f"/api/bookings/{booking.id}/trash/", {}, format="json")
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post(f"/api/bookings/{booking.id}/trash/", {"confirm": True}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data["is_deleted"])
        self.assertEqual(resp.data["status"], "confirmed")
        self.assertEqual(self.client.get("/api/bookings/").data, [])
        self.assertEqual(len(self.client.get("/api/bookings/trash/").data), 1)

        resp = self.client.post(f"/api/bookings/{booking.id}/status/", {"status": "cancelled"}, format="json")
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post(f"/api/bookings/{booking.id}/restore/")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.data["is_deleted"])

        self.client.post(f"/api/bookings/{booking.id}/trash/", {"confirm": True}, format="json")
        resp = self.client.post(f"/api/bookings/{booking.id}/purge/", {"confirm": True}, format="json")
        self.assertEqual(resp.status_code, 204)
        self.assertFalse(Booking.objects.filter(pk=booking.id).exists())

    def test_customer_cannot_change_status(self):
        booking = self.create_booking(self.customer)
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post(f"/api/bookings/{booking.id}/status/", {"status": "confirmed"}, format="json")
        self.assertEqual(resp.status_code, 403)

    def test_store_failure_is_reported_as_unavailable(self):
        booking = self.create_booking(self.customer)
        self.client.force_authenticate(user=self.admin)

        with mock.patch.object(Booking, "save", side_effect=DatabaseError("database is locked")):
            resp = self.client.post(f"/api/bookings/{booking.id}/status/", {"status": "confirmed"}, format="json")

        self.assertEqual(resp.status_code, 503)
        self.assertIn("temporarily unavailable", resp.data["detail"])
        booking.refresh_from_db()
        self.assertEqual(booking.status, "pending")
