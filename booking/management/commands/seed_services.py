"""
seed_services.py
----------------
Seeds (creates or updates) the henna service catalog with the studio's
standard price table. You can run this any time; it will upsert by unique name.

Usage:
    python manage.py seed_services
"""

from decimal import Decimal
from django.core.management.base import BaseCommand
from booking.models import Service


CATALOG = [
    {"name": "Hand Henna", "prices": {"Simple": Decimal("30.00"), "Medium": Decimal("50.00"), "Hard": Decimal("70.00")}},
    {"name": "Hand Nails", "prices": {"Simple": Decimal("20.00"), "Medium": Decimal("35.00"), "Hard": Decimal("50.00")}},
    {"name": "Full Arm",   "prices": {"Simple": Decimal("60.00"), "Medium": Decimal("90.00"), "Hard": Decimal("120.00")}},
    {"name": "Foot Henna", "prices": {"Simple": Decimal("40.00"), "Medium": Decimal("60.00"), "Hard": Decimal("80.00")}},
]


class Command(BaseCommand):
    help = "Seed or update the henna service catalog."

    def handle(self, *args, **options):
        created = 0
        updated = 0

        for item in CATALOG:
            svc = Service.objects.filter(name=item["name"]).first()
            if svc is None:
                svc = Service(name=item["name"])
                for tier, amount in item["prices"].items():
                    svc.set_price(tier, amount)
                svc.save()
                created += 1
                continue

            changed = False
            for tier, amount in item["prices"].items():
                if svc.prices[tier] != amount:
                    svc.set_price(tier, amount)
                    changed = True
            if changed:
                svc.save()
                updated += 1

        self.stdout.write(self.style.SUCCESS(f"Seed complete. Created={created}, Updated={updated}"))
