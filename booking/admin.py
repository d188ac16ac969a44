from django.contrib import admin
from .models import Booking, PriceHistory, Service, TimeSlot


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price_simple", "price_medium", "price_hard")
    search_fields = ("name",)


@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "time", "is_available")
    list_filter = ("is_available", "date")
    list_editable = ("is_available",)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "customer_name", "user_email", "appointment_at", "total_price", "status", "is_deleted")
    list_filter = ("status", "is_deleted")
    search_fields = ("customer_name", "user_email", "customer_phone")
    readonly_fields = ("services", "total_price", "created_at")


@admin.register(PriceHistory)
class PriceHistoryAdmin(admin.ModelAdmin):
    list_display = ("service", "complexity", "old_price", "new_price", "changed_by", "changed_at")
    list_filter = ("service", "complexity")
    search_fields = ("service__name",)
