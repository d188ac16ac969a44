from datetime import datetime
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import AccountProfile
from booking.models import Booking
from .aggregation import customer_directory, daily_series, dashboard_counts


def at(year, month, day, hour=12):
    return timezone.make_aware(datetime(year, month, day, hour), timezone.get_current_timezone())


def snapshot(name="Hand Henna", complexity="Simple"):
    return [{"name": name, "complexity": complexity,
             "prices": {"Simple": "30.00", "Medium": "50.00", "Hard": "70.00"}}]


class AggregationTests(TestCase):
    def setUp(self):
        self.rows = [
            Booking.objects.create(user_email="a@example.com", customer_name="A", customer_phone="1",
                                   services=snapshot(), appointment_at=at(2025, 3, 10),
                                   total_price=Decimal("30.00"), status="pending"),
            Booking.objects.create(user_email="b@example.com", customer_name="B", customer_phone="2",
                                   services=snapshot(complexity="Hard"), appointment_at=at(2025, 3, 10, 15),
                                   total_price=Decimal("70.00"), status="confirmed"),
            Booking.objects.create(user_email="a@example.com", customer_name="A", customer_phone="1",
                                   services=snapshot(complexity="Medium"), appointment_at=at(2025, 3, 8),
                                   total_price=Decimal("50.00"), status="cancelled"),
            Booking.objects.create(user_email="c@example.com", customer_name="C", customer_phone="3",
                                   services=snapshot(), appointment_at=at(2025, 3, 9),
                                   total_price=Decimal("30.00"), status="confirmed", is_deleted=True),
        ]

    def test_counts_partition_active_bookings(self):
        counts = dashboard_counts(self.rows)
        self.assertEqual(counts, {
            "total_bookings": 3,
            "pending_bookings": 1,
            "confirmed_bookings": 1,
            "cancelled_bookings": 1,
        })
        self.assertEqual(
            counts["total_bookings"],
            counts["pending_bookings"] + counts["confirmed_bookings"] + counts["cancelled_bookings"],
        )

    def test_series_groups_by_day_ascending(self):
        self.assertEqual(daily_series(self.rows), [
            {"date": "2025-03-08", "bookings": 1, "total_revenue": "50.00"},
            {"date": "2025-03-10", "bookings": 2, "total_revenue": "100.00"},
        ])

    def test_series_skips_missing_dates(self):
        undated = Booking.objects.create(user_email="d@example.com", customer_name="D", customer_phone="4",
                                         services=snapshot(), appointment_at=None,
                                         total_price=Decimal("30.00"))
        with self.assertLogs("reports.aggregation", level="WARNING"):
            series = daily_series(self.rows + [undated])
        self.assertEqual(sum(day["bookings"] for day in series), 3)

    def test_customer_directory_groups_by_email(self):
        customers = customer_directory(self.rows)
        self.assertEqual([c["email"] for c in customers], ["a@example.com", "b@example.com"])
        history = customers[0]["bookings"]
        self.assertEqual([b["status"] for b in history], ["pending", "cancelled"])
        self.assertEqual(history[1]["services"], ["Hand Henna (Medium)"])
        self.assertEqual(history[1]["price"], "50.00")


class ReportsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(username="owner", email=settings.BOOTSTRAP_ADMIN_EMAIL, password="x")
        AccountProfile.objects.create(user=self.owner, email_verified=True)
        Booking.objects.create(user_email="a@example.com", customer_name="A", customer_phone="1",
                               services=snapshot(), appointment_at=at(2025, 3, 10),
                               total_price=Decimal("30.00"))

    def test_reports_are_admin_only(self):
        customer = User.objects.create_user(username="c", email="c@example.com", password="x")
        self.client.force_authenticate(user=customer)
        self.assertEqual(self.client.get("/api/reports/dashboard").status_code, 403)

    def test_dashboard_and_series(self):
        self.client.force_authenticate(user=self.owner)
        resp = self.client.get("/api/reports/dashboard")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["total_bookings"], 1)
        self.assertEqual(resp.data["pending_bookings"], 1)

        resp = self.client.get("/api/reports/series")
        self.assertEqual(resp.data["series"][0]["date"], "2025-03-10")

        resp = self.client.get("/api/reports/customers")
        self.assertEqual(resp.data["customers"][0]["email"], "a@example.com")
