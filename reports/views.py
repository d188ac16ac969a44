# reports/views.py

from rest_framework.response import Response
from rest_framework.views import APIView

from booking.services.booking_manager import BookingManager
from configmgr.permissions import IsAllowListedAdmin
from .aggregation import customer_directory, daily_series, dashboard_counts


class DashboardView(APIView):
    """
    GET /api/reports/dashboard
    Counts over active bookings: total / pending / confirmed / cancelled.
    """
    permission_classes = [IsAllowListedAdmin]

    def get(self, request):
        bookings = list(BookingManager().active_bookings())
        return Response(dashboard_counts(bookings))


class BookingSeriesView(APIView):
    """
    GET /api/reports/series
    [{ "date": "YYYY-MM-DD", "bookings": N, "total_revenue": "..." }, ...]
    """
    permission_classes = [IsAllowListedAdmin]

    def get(self, request):
        bookings = list(BookingManager().active_bookings())
        return Response({"series": daily_series(bookings)})


class CustomersView(APIView):
    """
    GET /api/reports/customers
    Customers with their active booking history.
    """
    permission_classes = [IsAllowListedAdmin]

    def get(self, request):
        bookings = list(BookingManager().active_bookings().order_by("created_at", "id"))
        return Response({"customers": customer_directory(bookings)})
