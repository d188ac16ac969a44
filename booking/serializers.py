from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import Booking, BookingStatus, Complexity, PriceHistory, Service, TimeSlot
from .services.pricing import PricingService, calculate_total
from .services.slot_utils import is_quarter_hour


class PriceTableField(serializers.Field):
    """
    {"Simple": "30.00", "Medium": "50.00", "Hard": "70.00"} <-> Service prices.
    Accepts a partial map; ServiceSerializer decides whether all tiers are needed.
    """

    def to_representation(self, value):
        return {tier: str(amount) for tier, amount in value.items()}

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            raise serializers.ValidationError("Expected a mapping of complexity tier to price.")
        unknown = sorted(set(data) - set(Complexity.values))
        if unknown:
            raise serializers.ValidationError(f"Unknown complexity tier(s): {', '.join(unknown)}.")
        prices = {}
        errors = {}
        for tier, amount in data.items():
            try:
                prices[tier] = PricingService.validate_price(amount)
            except DjangoValidationError as e:
                errors[tier] = e.messages
        if errors:
            raise serializers.ValidationError(errors)
        return prices


class ServiceSerializer(serializers.ModelSerializer):
    prices = PriceTableField()

    class Meta:
        model = Service
        fields = ["id", "name", "description", "prices"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate(self, attrs):
        prices = attrs.get("prices")
        if self.instance is None:
            missing = [tier for tier in Complexity.values if tier not in (prices or {})]
            if missing:
                raise serializers.ValidationError({"prices": f"Missing price for: {', '.join(missing)}."})
        return attrs

    def create(self, validated_data):
        prices = validated_data.pop("prices")
        service = Service(**validated_data)
        for tier, amount in prices.items():
            service.set_price(tier, amount)
        service.save()
        return service

    def update(self, instance, validated_data):
        # Prices go through PricingService in the view so changes are logged.
        validated_data.pop("prices", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class PriceHistorySerializer(serializers.ModelSerializer):
    service_name = serializers.CharField(source="service.name", read_only=True)

    class Meta:
        model = PriceHistory
        fields = ["id", "service", "service_name", "complexity", "old_price", "new_price", "changed_by", "changed_at"]


class TimeSlotSerializer(serializers.ModelSerializer):
    date = serializers.DateField(format="%Y-%m-%d")

    class Meta:
        model = TimeSlot
        fields = ["id", "date", "time", "is_available"]

    def validate_time(self, value):
        value = (value or "").strip()
        if not is_quarter_hour(value):
            raise serializers.ValidationError("Time must be HH:MM on a quarter hour (00, 15, 30, 45).")
        return value


# -------------------- Booking --------------------
class ServiceSelectionSerializer(serializers.Serializer):
    name = serializers.CharField()
    complexity = serializers.ChoiceField(choices=Complexity.choices, default=Complexity.SIMPLE)


class PersonalDetailsSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, required=False, default="")
    phone = serializers.CharField(allow_blank=True, required=False, default="")
    email = serializers.EmailField(allow_blank=True, required=False, default="")


class BookingCreateSerializer(serializers.Serializer):
    """
    Checkout payload. Prices are never accepted from the client; the server
    copies them from the catalog.
    """
    services = ServiceSelectionSerializer(many=True, allow_empty=False)
    date = serializers.CharField()
    time = serializers.CharField()
    personal_details = PersonalDetailsSerializer()


class BookingSerializer(serializers.ModelSerializer):
    date = serializers.DateTimeField(source="appointment_at", read_only=True)
    personal_details = serializers.SerializerMethodField()
    estimated_price = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "user",
            "user_email",
            "services",
            "date",
            "personal_details",
            "total_price",
            "estimated_price",
            "status",
            "is_deleted",
            "created_at",
        ]
        read_only_fields = fields

    def get_personal_details(self, obj):
        details = {"name": obj.customer_name, "phone": obj.customer_phone}
        if obj.customer_email:
            details["email"] = obj.customer_email
        return details

    def get_estimated_price(self, obj):
        return str(calculate_total(obj.services))


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BookingStatus.choices)


class ConfirmSerializer(serializers.Serializer):
    confirm = serializers.BooleanField(default=False)
