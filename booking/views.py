# booking/views.py
#
# Purpose:
# - Service catalog, time slots, bookings and availability APIs.
# - Permissions:
#   * Service and time-slot writes are admin-only (allow-list, re-checked per request).
#   * Booking creation requires a signed-in, verified customer.
#   * Status changes, trash, restore and permanent delete are admin-only.
#   * Customers only ever see their own active bookings.
#
# Notes:
# - Rule violations from BookingManager are ValueError subclasses and come
#   back as 400 {"detail": reason}; an unverified identity gets 403 with a
#   "remediation" hint so the front end can send the user to verify.
# - Destructive actions need {"confirm": true} in the body.
#
import logging

from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from configmgr.permissions import IsAdminOrReadOnly, IsAllowListedAdmin, request_is_admin
from .models import Booking, PriceHistory, Service, TimeSlot
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    ConfirmSerializer,
    PriceHistorySerializer,
    ServiceSerializer,
    TimeSlotSerializer,
)
from .services.availability_engine import AvailabilityEngine
from .services.booking_manager import BookingManager, VerificationRequired
from .services.pricing import PricingService
from .services.slot_utils import day_key, parse_day

logger = logging.getLogger(__name__)


# -------------------- Services --------------------
class ServiceViewSet(viewsets.ModelViewSet):
    """
    Service catalog:
    - Anyone can list services.
    - Only admins can create/update/delete services.
    - Price updates are logged into PriceHistory in perform_update.
    """
    queryset = Service.objects.all().order_by("name")
    serializer_class = ServiceSerializer
    permission_classes = [IsAdminOrReadOnly]

    def perform_update(self, serializer):
        prices = serializer.validated_data.get("prices")
        instance = serializer.save()
        if prices:
            PricingService.update_service_prices(instance, prices, changed_by=self.request.user.email)

    @action(detail=True, methods=["get"], url_path="price-history", permission_classes=[IsAllowListedAdmin])
    def price_history(self, request, pk=None):
        service = self.get_object()
        rows = PriceHistory.objects.filter(service=service)
        return Response(PriceHistorySerializer(rows, many=True).data)


# -------------------- Time slots --------------------
class TimeSlotViewSet(viewsets.ModelViewSet):
    """
    Admin management of offerable slots.
    - POST   /api/time-slots/               {date, time}  (available by default)
    - POST   /api/time-slots/{id}/toggle/   flip availability
    - DELETE /api/time-slots/{id}/
    """
    queryset = TimeSlot.objects.all().order_by("date", "time", "id")
    serializer_class = TimeSlotSerializer
    permission_classes = [IsAllowListedAdmin]

    @action(detail=True, methods=["post"])
    def toggle(self, request, pk=None):
        slot = self.get_object()
        slot.is_available = not slot.is_available
        slot.save(update_fields=["is_available"])
        logger.info("Time slot %s toggled to %s", slot.pk, "available" if slot.is_available else "unavailable")
        return Response(self.get_serializer(slot).data)


# -------------------- Bookings --------------------
class BookingViewSet(mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """
    Endpoints:
    - POST /api/bookings/                      create (verified customer)
    - GET  /api/bookings/                      admin: all active; customer: own active
    - GET  /api/bookings/trash/                admin: trashed bookings
    - POST /api/bookings/{id}/status/          admin: {"status": ...}
    - POST /api/bookings/{id}/trash/           admin: {"confirm": true}
    - POST /api/bookings/{id}/restore/         admin
    - POST /api/bookings/{id}/purge/           admin: {"confirm": true}, trashed only
    - GET  /api/bookings/availability/?date=   public: available times
    - GET  /api/bookings/available-dates/      public: dates with slots in window
    """
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]
    manager = BookingManager()

    def get_queryset(self):
        if request_is_admin(self.request):
            qs = self.manager.active_bookings()
            email = (self.request.query_params.get("email") or "").strip()
            if email:
                qs = qs.filter(user_email__icontains=email)
            return qs.order_by("-created_at", "-id")
        return self.manager.bookings_for_user(self.request.user).order_by("-created_at", "-id")

    def create(self, request, *args, **kwargs):
        """
        Checkout. Requires: services [{name, complexity}], date, time,
        personal_details {name, phone, email?}.
        """
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            booking = self.manager.create_booking(
                user=request.user,
                services=data["services"],
                date=data["date"],
                time=data["time"],
                personal_details=data["personal_details"],
            )
        except VerificationRequired as e:
            return Response(
                {"detail": str(e), "remediation": "verify-email"},
                status=status.HTTP_403_FORBIDDEN,
            )
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        out = BookingSerializer(booking)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def _admin_booking(self, pk):
        return get_object_or_404(Booking, pk=pk)

    @action(detail=False, methods=["get"], permission_classes=[IsAllowListedAdmin])
    def trash(self, request):
        qs = self.manager.trashed_bookings().order_by("-created_at", "-id")
        return Response(BookingSerializer(qs, many=True).data)

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[IsAllowListedAdmin])
    def set_status(self, request, pk=None):
        booking = self._admin_booking(pk)
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            self.manager.update_status(booking, serializer.validated_data["status"])
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"], url_path="trash", permission_classes=[IsAllowListedAdmin])
    def move_to_trash(self, request, pk=None):
        booking = self._admin_booking(pk)
        confirm = ConfirmSerializer(data=request.data)
        confirm.is_valid(raise_exception=True)
        try:
            self.manager.move_to_trash(booking, confirmed=confirm.validated_data["confirm"])
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"], permission_classes=[IsAllowListedAdmin])
    def restore(self, request, pk=None):
        booking = self._admin_booking(pk)
        try:
            self.manager.restore(booking)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"], permission_classes=[IsAllowListedAdmin])
    def purge(self, request, pk=None):
        booking = self._admin_booking(pk)
        confirm = ConfirmSerializer(data=request.data)
        confirm.is_valid(raise_exception=True)
        try:
            self.manager.delete_permanently(booking, confirmed=confirm.validated_data["confirm"])
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="availability", permission_classes=[])
    def availability(self, request):
        """
        GET /api/bookings/availability/?date=YYYY-MM-DD
        Also accepts inputs that include time; we trim to the date part.
        """
        date_raw = (request.query_params.get("date") or "").strip()
        if not date_raw:
            return Response({"detail": "Missing 'date'."}, status=status.HTTP_400_BAD_REQUEST)

        day = parse_day(date_raw)
        if day is None:
            return Response(
                {"detail": "Invalid date format. Use YYYY-MM-DD."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        times = AvailabilityEngine().available_times(day)
        return Response({"date": day_key(day), "times": times})

    @action(detail=False, methods=["get"], url_path="available-dates", permission_classes=[])
    def available_dates(self, request):
        return Response({"dates": AvailabilityEngine().available_dates()})
