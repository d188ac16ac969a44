# booking/models.py
#
# Purpose:
# - Core domain models for the henna studio booking flow.
#
# Design highlights:
# - Service: one row per offering with a price per complexity tier
#   (Simple / Medium / Hard). Names are unique because bookings refer to
#   services by name.
# - PriceHistory: one row per changed tier price, for auditing.
# - TimeSlot: an administrator-defined (date, "HH:MM") slot with an
#   availability flag. Duplicates are allowed; nothing links a slot to the
#   bookings made for it.
# - Booking:
#   • services is a JSON snapshot [{name, complexity, prices}] copied from the
#     catalog at booking time, so later catalog edits never change it
#   • status is lowercase "pending" / "confirmed" / "cancelled"
#   • is_deleted is the trash flag and is independent of status
#
# Notes for developers:
# - Never recompute a booking's price from the live Service rows; use
#   booking.services.pricing.calculate_total(booking.services).
#

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models


class Complexity(models.TextChoices):
    SIMPLE = "Simple", "Simple"
    MEDIUM = "Medium", "Medium"
    HARD = "Hard", "Hard"


class BookingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"


# Quarter-hour "HH:MM" (00/15/30/45 minutes)
SLOT_TIME_RE = r"^([01]\d|2[0-3]):(00|15|30|45)$"


# -------------------------
# Service catalog item
# -------------------------
class Service(models.Model):
    """
    A henna offering with one price per complexity tier.

    Rules:
    - name is unique
    - every tier price must be > 0
    """
    PRICE_FIELDS = {
        Complexity.SIMPLE.value: "price_simple",
        Complexity.MEDIUM.value: "price_medium",
        Complexity.HARD.value: "price_hard",
    }

    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True)
    price_simple = models.DecimalField(
        max_digits=8, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    price_medium = models.DecimalField(
        max_digits=8, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    price_hard = models.DecimalField(
        max_digits=8, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def prices(self):
        """Ordered price table: {"Simple": Decimal, "Medium": Decimal, "Hard": Decimal}."""
        return {tier: getattr(self, field) for tier, field in self.PRICE_FIELDS.items()}

    def set_price(self, complexity, amount):
        setattr(self, self.PRICE_FIELDS[complexity], amount)

    def snapshot(self, complexity):
        """
        Copy of this service as recorded on a booking: name, chosen complexity
        and the full price table (as strings so it survives JSON storage).
        """
        return {
            "name": self.name,
            "complexity": complexity,
            "prices": {tier: str(amount) for tier, amount in self.prices.items()},
        }


# -------------------------
# Service price change log
# -------------------------
class PriceHistory(models.Model):
    """
    Record of a single tier price change, for auditing/reporting.
    """
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="price_changes")
    complexity = models.CharField(max_length=10, choices=Complexity.choices)
    old_price = models.DecimalField(max_digits=8, decimal_places=2)
    new_price = models.DecimalField(max_digits=8, decimal_places=2)
    changed_by = models.CharField(max_length=254, blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-changed_at", "-id"]

    def __str__(self):
        return f"{self.service.name} [{self.complexity}] {self.old_price} → {self.new_price}"


# -------------------------
# Offerable appointment slot
# -------------------------
class TimeSlot(models.Model):
    date = models.DateField()
    time = models.CharField(
        max_length=5,
        validators=[RegexValidator(SLOT_TIME_RE, "Time must be HH:MM on a quarter hour (00, 15, 30, 45).")],
    )
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ["date", "time", "id"]

    def __str__(self):
        state = "available" if self.is_available else "unavailable"
        return f"{self.date:%Y-%m-%d} at {self.time} ({state})"


# -------------------------
# Booking record
# -------------------------
class Booking(models.Model):
    """
    A customer's appointment request.

    - services: price snapshot list, see Service.snapshot()
    - total_price: sum of the snapshot prices, recorded at creation
    - appointment_at may be null for records imported without a usable date;
      reports skip those rows.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    user_email = models.EmailField()
    services = models.JSONField(default=list)
    appointment_at = models.DateTimeField(null=True, blank=True)
    customer_name = models.CharField(max_length=200)
    customer_phone = models.CharField(max_length=20)
    customer_email = models.EmailField(blank=True)
    total_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(
        max_length=10,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
        help_text="Booking lifecycle status",
    )
    is_deleted = models.BooleanField(default=False, help_text="Moved to trash")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        names = ", ".join(s.get("name", "?") for s in self.services or [])
        return f"{self.customer_name} → {names} on {self.appointment_at}"
