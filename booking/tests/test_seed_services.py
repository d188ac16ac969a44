from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from booking.models import Service


class SeedServicesCommandTests(TestCase):
    def test_seed_is_idempotent_and_restores_prices(self):
        out = StringIO()
        call_command("seed_services", stdout=out)
        self.assertIn("Created=4", out.getvalue())

        hand = Service.objects.get(name="Hand Henna")
        self.assertEqual(hand.prices, {
            "Simple": Decimal("30.00"), "Medium": Decimal("50.00"), "Hard": Decimal("70.00"),
        })

        hand.price_medium = Decimal("55.00")
        hand.save()
        out = StringIO()
        call_command("seed_services", stdout=out)
        self.assertIn("Created=0, Updated=1", out.getvalue())
        self.assertEqual(Service.objects.count(), 4)
        hand.refresh_from_db()
        self.assertEqual(hand.price_medium, Decimal("50.00"))
