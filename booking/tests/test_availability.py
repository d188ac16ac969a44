from datetime import date, timedelta

from django.test import SimpleTestCase, TestCase, override_settings

from booking.models import TimeSlot
from booking.services.availability_engine import AvailabilityEngine
from booking.services.slot_utils import booking_window, combine_slot, format_slot_time, parse_day
from .utils import days_ahead, make_slot


class SlotUtilsTests(SimpleTestCase):
    def test_parse_day_accepts_strings_with_time_part(self):
        self.assertEqual(parse_day("2025-03-10"), date(2025, 3, 10))
        self.assertEqual(parse_day("2025-03-10T14:00"), date(2025, 3, 10))
        self.assertEqual(parse_day("2025-03-10 14:00"), date(2025, 3, 10))

    def test_parse_day_rejects_garbage(self):
        self.assertIsNone(parse_day("next tuesday"))
        self.assertIsNone(parse_day("2025-02-30"))
        self.assertIsNone(parse_day(None))

    def test_format_slot_time(self):
        self.assertEqual(format_slot_time(9, 15), "09:15")
        with self.assertRaises(ValueError):
            format_slot_time(9, 10)

    @override_settings(BOOKING_WINDOW_DAYS=30)
    def test_booking_window_is_inclusive_thirty_days(self):
        first, last = booking_window(today=date(2025, 3, 1))
        self.assertEqual(first, date(2025, 3, 1))
        self.assertEqual(last, date(2025, 3, 31))

    def test_combine_slot_is_aware(self):
        moment = combine_slot(date(2025, 3, 10), "14:30")
        self.assertIsNotNone(moment.tzinfo)
        self.assertEqual((moment.hour, moment.minute), (14, 30))


class AvailabilityEngineTests(TestCase):
    def setUp(self):
        self.engine = AvailabilityEngine()

    def test_toggle_removes_and_restores_time(self):
        slot = make_slot(date(2025, 3, 10), "14:00")
        self.assertEqual(self.engine.available_times("2025-03-10"), ["14:00"])

        slot.is_available = False
        slot.save()
        self.assertEqual(self.engine.available_times("2025-03-10"), [])

        slot.is_available = True
        slot.save()
        self.assertEqual(self.engine.available_times("2025-03-10"), ["14:00"])

    def test_times_are_sorted_and_unique(self):
        day = date(2025, 3, 10)
        make_slot(day, "16:00")
        make_slot(day, "09:30")
        make_slot(day, "16:00")
        make_slot(day, "12:00", available=False)
        make_slot(day + timedelta(days=1), "10:00")

        self.assertEqual(self.engine.available_times(day), ["09:30", "16:00"])

    def test_unparseable_date_yields_nothing(self):
        make_slot(date(2025, 3, 10), "14:00")
        self.assertEqual(self.engine.available_times("not-a-date"), [])

    @override_settings(BOOKING_WINDOW_DAYS=30)
    def test_available_dates_stay_inside_window(self):
        today = date(2025, 3, 1)
        make_slot(date(2025, 2, 28), "10:00")
        make_slot(date(2025, 3, 1), "10:00")
        make_slot(date(2025, 3, 5), "10:00")
        make_slot(date(2025, 3, 5), "11:00")
        make_slot(date(2025, 3, 6), "10:00", available=False)
        make_slot(date(2025, 3, 31), "10:00")
        make_slot(date(2025, 4, 1), "10:00")

        self.assertEqual(
            self.engine.available_dates(today=today),
            ["2025-03-01", "2025-03-05", "2025-03-31"],
        )

    def test_is_bookable_checks_window_and_time(self):
        inside = days_ahead(3)
        make_slot(inside, "14:00")
        far = days_ahead(60)
        make_slot(far, "14:00")

        self.assertTrue(self.engine.is_bookable(inside, "14:00"))
        self.assertFalse(self.engine.is_bookable(inside, "15:00"))
        self.assertFalse(self.engine.is_bookable(far, "14:00"))

    def test_claim_slot_only_succeeds_once(self):
        day = days_ahead(2)
        make_slot(day, "11:00")

        self.assertTrue(self.engine.claim_slot(day, "11:00"))
        self.assertFalse(self.engine.claim_slot(day, "11:00"))
        self.assertFalse(TimeSlot.objects.get().is_available)
