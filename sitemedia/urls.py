from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import SiteMediaViewSet

router = DefaultRouter()
router.register(r"media", SiteMediaViewSet, basename="site-media")

urlpatterns = [path("", include(router.urls))]
