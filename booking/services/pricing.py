# booking/services/pricing.py
#
# Purpose:
# - Price a booking from its recorded service snapshot
# - Validate and apply catalog price changes, logging each change
# - Format prices consistently for display
#
# A booking's total is ALWAYS derived from the price table captured on the
# booking (Service.snapshot), never from the live catalog.

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from ..models import Complexity, PriceHistory

logger = logging.getLogger(__name__)

MAX_PRICE = Decimal("999999.99")


def _to_decimal(value):
    try:
        return Decimal(str(value))
    except (ValueError, TypeError, InvalidOperation):
        return None


def line_price(selection):
    """
    Price of one selected service: selection["prices"][selection["complexity"]].
    A missing complexity or price entry contributes 0.
    """
    prices = selection.get("prices") or {}
    complexity = selection.get("complexity")
    amount = _to_decimal(prices.get(complexity)) if complexity in prices else None
    if amount is None:
        logger.warning(
            "No price for %r at complexity %r; counting it as 0",
            selection.get("name"), complexity,
        )
        return Decimal("0")
    return amount


def calculate_total(selections):
    """Sum of line prices over a booking's service snapshot list."""
    return sum((line_price(s) for s in selections or []), Decimal("0"))


class PricingService:
    """
    Catalog price operations used by the admin service endpoints.
    """

    @staticmethod
    def validate_price(price):
        """
        Validate that a price is a number greater than zero.

        Args:
            price: Price value to validate (can be string, int, float, or Decimal)

        Returns:
            Decimal: Valid price as Decimal object

        Raises:
            ValidationError: If price is invalid
        """
        try:
            price_decimal = Decimal(str(price))
        except (ValueError, TypeError, InvalidOperation) as e:
            raise ValidationError(
                f"Invalid price format. Price must be a positive number. Received: {price}"
            ) from e

        if not price_decimal.is_finite() or price_decimal <= 0:
            raise ValidationError(f"Price must be greater than zero. Received: {price_decimal}")

        if price_decimal > MAX_PRICE:
            raise ValidationError(
                f"Price exceeds maximum allowed value of {MAX_PRICE}. Received: {price_decimal}"
            )

        return price_decimal.quantize(Decimal("0.01"))

    @staticmethod
    def update_service_prices(service, new_prices, changed_by=""):
        """
        Apply a (possibly partial) tier -> price map to a service and record a
        PriceHistory row for every tier whose price actually changed.

        Existing bookings keep their own snapshot, so they are unaffected.

        Returns:
            list[dict]: one change entry per changed tier
        """
        changes = []
        for tier in Complexity.values:
            if tier not in new_prices:
                continue
            old_price = service.prices[tier]
            validated = PricingService.validate_price(new_prices[tier])
            if old_price is not None and validated == old_price:
                continue
            service.set_price(tier, validated)
            changes.append({
                "complexity": tier,
                "old_price": old_price,
                "new_price": validated,
            })

        if not changes:
            return []

        service.save()
        for change in changes:
            PriceHistory.objects.create(
                service=service,
                complexity=change["complexity"],
                old_price=change["old_price"],
                new_price=change["new_price"],
                changed_by=changed_by,
            )
        logger.info(
            "Prices updated for %s by %s: %s",
            service.name, changed_by or "system",
            ", ".join(f"{c['complexity']} {c['old_price']}->{c['new_price']}" for c in changes),
        )
        now = timezone.now().isoformat()
        return [
            {
                "service_id": service.id,
                "service_name": service.name,
                "complexity": c["complexity"],
                "old_price": str(c["old_price"]),
                "new_price": str(c["new_price"]),
                "changed_by": changed_by or "system",
                "timestamp": now,
            }
            for c in changes
        ]

    @staticmethod
    def format_price(price, currency_symbol=None):
        """
        Format with currency symbol and two decimals (e.g. "$25.00").
        Unparseable input formats as zero.
        """
        if currency_symbol is None:
            currency_symbol = settings.BOOKING_CURRENCY_SYMBOL
        price_decimal = _to_decimal(price)
        if price_decimal is None or not price_decimal.is_finite():
            return f"{currency_symbol}0.00"
        return f"{currency_symbol}{price_decimal:.2f}"
