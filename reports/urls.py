# reports/urls.py

from django.urls import path
from .views import BookingSeriesView, CustomersView, DashboardView

urlpatterns = [
    path("dashboard", DashboardView.as_view()),
    path("series", BookingSeriesView.as_view()),
    path("customers", CustomersView.as_view()),
]
