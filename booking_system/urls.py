# booking_system/urls.py
#
# Purpose:
# - Project URL router.
# - Every JSON API lives under /api/ so the web front end owns the rest of the
#   URL space.
#
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static


urlpatterns = [
    # Django admin
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    path("api/", include("booking.urls")),
    path("api/auth/", include("accounts.urls")),
    path("api/", include("configmgr.urls")),
    path("api/reports/", include("reports.urls")),
    path("api/contact/", include("notifications.urls")),
    path("api/", include("sitemedia.urls")),
]

# Static and uploaded media in DEBUG (dev only). In production, serve via web server / CDN.
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
