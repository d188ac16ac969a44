# booking/urls.py
#
# Purpose:
# - Expose the booking REST API via the DRF router:
#     /api/services/     catalog (public read, admin write)
#     /api/time-slots/   slot administration (admin)
#     /api/bookings/     checkout, admin workflow, availability
#
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import BookingViewSet, ServiceViewSet, TimeSlotViewSet

# --------------------------
# DRF Router registrations
# --------------------------
router = DefaultRouter()
router.register(r"services", ServiceViewSet, basename="service")
router.register(r"time-slots", TimeSlotViewSet, basename="time-slot")
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
]
