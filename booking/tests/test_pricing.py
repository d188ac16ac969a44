from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from booking.models import PriceHistory
from booking.services.pricing import PricingService, calculate_total, line_price
from .utils import make_service


class CalculateTotalTests(SimpleTestCase):
    def setUp(self):
        self.hand_henna = {
            "name": "Hand Henna",
            "complexity": "Medium",
            "prices": {"Simple": "30.00", "Medium": "50.00", "Hard": "70.00"},
        }

    def test_single_service_at_medium(self):
        self.assertEqual(calculate_total([self.hand_henna]), Decimal("50.00"))

    def test_sum_over_services_uses_each_complexity(self):
        foot = {
            "name": "Foot Henna",
            "complexity": "Hard",
            "prices": {"Simple": 40, "Medium": 60, "Hard": 80},
        }
        self.assertEqual(calculate_total([self.hand_henna, foot]), Decimal("130.00"))

    def test_unknown_complexity_counts_as_zero(self):
        broken = dict(self.hand_henna, complexity="Extreme")
        with self.assertLogs("booking.services.pricing", level="WARNING"):
            self.assertEqual(line_price(broken), Decimal("0"))

    def test_missing_price_table_counts_as_zero(self):
        with self.assertLogs("booking.services.pricing", level="WARNING"):
            self.assertEqual(calculate_total([{"name": "Full Arm", "complexity": "Simple"}]), Decimal("0"))

    def test_empty_selection(self):
        self.assertEqual(calculate_total([]), Decimal("0"))
        self.assertEqual(calculate_total(None), Decimal("0"))


class ValidatePriceTests(SimpleTestCase):
    def test_validate_valid_price(self):
        self.assertEqual(PricingService.validate_price("25.00"), Decimal("25.00"))
        self.assertEqual(PricingService.validate_price(50), Decimal("50.00"))
        self.assertEqual(PricingService.validate_price(Decimal("100.99")), Decimal("100.99"))

    def test_validate_price_rejects_zero_and_negative(self):
        for bad in (0, -10, "-0.01"):
            with self.assertRaises(ValidationError) as ctx:
                PricingService.validate_price(bad)
            self.assertIn("greater than zero", str(ctx.exception))

    def test_validate_price_rejects_non_numeric(self):
        for bad in ("abc", "$50.00", None, "NaN"):
            with self.assertRaises(ValidationError):
                PricingService.validate_price(bad)

    def test_format_price(self):
        self.assertEqual(PricingService.format_price("25"), "$25.00")
        self.assertEqual(PricingService.format_price(Decimal("99.9")), "$99.90")
        self.assertEqual(PricingService.format_price("invalid"), "$0.00")
        self.assertEqual(PricingService.format_price(12, currency_symbol="£"), "£12.00")


class UpdateServicePricesTests(TestCase):
    def setUp(self):
        self.service = make_service()

    def test_changed_tiers_are_logged(self):
        changes = PricingService.update_service_prices(
            self.service, {"Medium": "55.00", "Hard": "70.00"}, changed_by="owner@studio.test"
        )
        self.service.refresh_from_db()

        self.assertEqual(self.service.price_medium, Decimal("55.00"))
        self.assertEqual(len(changes), 1)
        self.assertEqual(changes[0]["complexity"], "Medium")
        self.assertEqual(changes[0]["old_price"], "50.00")
        self.assertEqual(changes[0]["new_price"], "55.00")

        history = PriceHistory.objects.get()
        self.assertEqual(history.complexity, "Medium")
        self.assertEqual(history.old_price, Decimal("50.00"))
        self.assertEqual(history.new_price, Decimal("55.00"))
        self.assertEqual(history.changed_by, "owner@studio.test")

    def test_no_history_when_prices_unchanged(self):
        self.assertEqual(PricingService.update_service_prices(self.service, {"Simple": "30"}), [])
        self.assertEqual(PriceHistory.objects.count(), 0)

    def test_invalid_price_rejected_without_saving(self):
        with self.assertRaises(ValidationError):
            PricingService.update_service_prices(self.service, {"Simple": "0"})
        self.service.refresh_from_db()
        self.assertEqual(self.service.price_simple, Decimal("30.00"))

    def test_snapshot_total_survives_catalog_edit(self):
        snapshot = [self.service.snapshot("Medium")]
        before = calculate_total(snapshot)

        PricingService.update_service_prices(self.service, {"Medium": "95.00"})

        self.assertEqual(calculate_total(snapshot), before)
        self.assertEqual(before, Decimal("50.00"))
